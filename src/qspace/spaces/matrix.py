# Copyright (C) 2025 Gil Benezer
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published
# by the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""
Dense Matrix

A square, row-major array of `dimension**2` scalar-field elements tied to
one VectorSpace (index = row * dimension + column).

Operations
----------
- + - unary- between same-space matrices (element-wise)
- * and / by a scalar (broadcast)
- Matrix * Vector (O(n^2) weighted sum)
- Matrix * Matrix: brute force O(n^3) by default, or the recursive
  divide-and-conquer variant via multiply_divide_and_conquer()
- transpose(), adjoint() (Hermitian: transpose + conjugate)
- approx_equal() with absolute element-wise tolerance

`@` is accepted as an alias of `*` for operator-operator and
operator-vector products.

Divide and Conquer
------------------
Operands are viewed as square blocks of a shared arena addressed by
(row offset, column offset, size), so recursion never re-slices the data.
Each level splits into four quadrants and accumulates the eight quadrant
products into the output block. A block of odd size is wrapped into a fresh
zero-padded arena one larger, multiplied there, and the padding stripped
when accumulating back. No Strassen-style trick is used: the cost stays
in the O(n^3) family and the variant exists for illustration.

Examples
--------
>>> space = make_space(2, "s")
>>> A = Matrix(space, [1.0, 2.0, 3.0, 4.0])
>>> v = Vector(space, [5.0, 6.0])
>>> (A * v).elements
[17.0, 39.0]
>>> A.multiply_divide_and_conquer(A) == A * A
True
"""

import operator
from typing import TYPE_CHECKING, Any, Iterable, List, NamedTuple, Optional, Tuple

import numpy as np

from qspace.algebra import functions
from qspace.algebra.fields import field_for_dtype
from qspace.algebra.scalars import power
from qspace.errors import DimensionMismatchError
from qspace.spaces.vector import Vector, _is_algebra_object
from qspace.spaces.vector_space import VectorSpace, check_same_space, make_space
from qspace.utils.elementwise import (
    at_index,
    elementwise_binary_operation,
    elementwise_unary_operation,
    scalar_binary_operation,
)

if TYPE_CHECKING:
    from qspace.spaces.coordinate_sparse import CoordinateSparseMatrix
    from qspace.spaces.diagonal_sparse import DiagonalSparseMatrix

DEFAULT_TOLERANCE = 1.0e-6


class Matrix:
    """
    Dense square operator on a vector space.

    Parameters
    ----------
    space : VectorSpace
        Space the operator acts on
    elements : iterable, optional
        Exactly `space.dimension**2` elements in row-major order.
        Zero-filled when omitted.

    Raises
    ------
    DimensionMismatchError
        If the number of elements is not dimension squared
    """

    __slots__ = ("_space", "_elements")

    # numpy scalars and arrays defer to the reflected operators below
    __array_ufunc__ = None

    def __init__(self, space: VectorSpace, elements: Optional[Iterable[Any]] = None):
        size = space.dimension * space.dimension
        if elements is None:
            values = [space.field.zero] * size
        else:
            values = list(elements)
            if len(values) != size:
                raise DimensionMismatchError(
                    f"Matrix has {len(values)} elements but space {space.label!r} "
                    f"requires {space.dimension}^2 = {size}"
                )
        self._space = space
        self._elements = values

    @property
    def space(self) -> VectorSpace:
        return self._space

    @property
    def dimension(self) -> int:
        return self._space.dimension

    @property
    def elements(self) -> List[Any]:
        """Copy of the row-major element list."""
        return list(self._elements)

    # ========================================================================
    # Conversions
    # ========================================================================

    @classmethod
    def from_array(cls, array: Any, space: Optional[VectorSpace] = None, label: str = "matrix") -> "Matrix":
        """
        Build a Matrix from a square 2-D numpy array.

        A new space is created (field inferred from dtype) when none is given.
        """
        array = np.asarray(array)
        if array.ndim != 2 or array.shape[0] != array.shape[1]:
            raise DimensionMismatchError(f"Expected a square 2-D array, got shape {array.shape}")
        if space is None:
            space = make_space(array.shape[0], label, field=field_for_dtype(array.dtype))
        return cls(space, array.ravel().tolist())

    @classmethod
    def from_sparse(cls, matrix: "CoordinateSparseMatrix") -> "Matrix":
        return matrix.to_dense()

    @classmethod
    def from_diagonal_sparse(cls, matrix: "DiagonalSparseMatrix") -> "Matrix":
        return matrix.to_dense()

    def to_array(self, dtype: Any = None) -> np.ndarray:
        """Elements as an (n, n) numpy array (numeric fields only)."""
        n = self.dimension
        if self._space.field.is_complex:
            flat = np.array([complex(e) for e in self._elements], dtype=dtype or complex)
        else:
            flat = np.array(self._elements, dtype=dtype)
        return flat.reshape(n, n)

    def to_dense(self) -> "Matrix":
        return self.copy()

    def copy(self) -> "Matrix":
        return Matrix(self._space, self._elements)

    # ========================================================================
    # Indexing
    # ========================================================================

    def _flat_index(self, index: Tuple[int, int]) -> int:
        row, column = index
        n = self.dimension
        if not (0 <= row < n and 0 <= column < n):
            raise IndexError(f"Index ({row}, {column}) out of range for {n}x{n} matrix")
        return at_index(row, column, n)

    def __getitem__(self, index: Tuple[int, int]) -> Any:
        return self._elements[self._flat_index(index)]

    def __setitem__(self, index: Tuple[int, int], value: Any) -> None:
        self._elements[self._flat_index(index)] = value

    # ========================================================================
    # Element-wise Arithmetic
    # ========================================================================

    def __add__(self, other: Any) -> "Matrix":
        if not isinstance(other, Matrix):
            return NotImplemented
        check_same_space(self, other)
        return Matrix(
            self._space, elementwise_binary_operation(self._elements, other._elements, operator.add)
        )

    def __sub__(self, other: Any) -> "Matrix":
        if not isinstance(other, Matrix):
            return NotImplemented
        check_same_space(self, other)
        return Matrix(
            self._space, elementwise_binary_operation(self._elements, other._elements, operator.sub)
        )

    def __neg__(self) -> "Matrix":
        return Matrix(self._space, elementwise_unary_operation(self._elements, operator.neg))

    def __truediv__(self, scalar: Any) -> "Matrix":
        if _is_algebra_object(scalar):
            return NotImplemented
        return Matrix(
            self._space, scalar_binary_operation(self._elements, scalar, operator.truediv)
        )

    # ========================================================================
    # Products
    # ========================================================================

    def __mul__(self, other: Any) -> Any:
        if isinstance(other, Matrix):
            return self.multiply_brute_force(other)
        if isinstance(other, Vector):
            return self._apply(other)
        if _is_algebra_object(other):
            return NotImplemented
        return Matrix(self._space, scalar_binary_operation(self._elements, other, operator.mul))

    def __rmul__(self, scalar: Any) -> "Matrix":
        if _is_algebra_object(scalar):
            return NotImplemented
        return Matrix(self._space, [scalar * element for element in self._elements])

    def __matmul__(self, other: Any) -> Any:
        if isinstance(other, (Matrix, Vector)):
            return self * other
        return NotImplemented

    def _apply(self, vector: Vector) -> Vector:
        check_same_space(self, vector)
        n = self.dimension
        zero = self._space.field.zero
        rhs = vector.elements
        output = []
        for i in range(n):
            total = zero
            row_offset = i * n
            for j in range(n):
                total = total + self._elements[row_offset + j] * rhs[j]
            output.append(total)
        return Vector(self._space, output)

    def multiply_brute_force(self, other: "Matrix") -> "Matrix":
        """
        Triple-loop product, O(n^3).

        Raises
        ------
        SpaceMismatchError
            If the matrices live in different spaces
        """
        check_same_space(self, other)
        n = self.dimension
        zero = self._space.field.zero
        lhs, rhs = self._elements, other._elements
        output = [zero] * (n * n)
        for i in range(n):
            for j in range(n):
                total = zero
                for k in range(n):
                    total = total + lhs[i * n + k] * rhs[k * n + j]
                output[i * n + j] = total
        return Matrix(self._space, output)

    def multiply_divide_and_conquer(self, other: "Matrix") -> "Matrix":
        """
        Recursive quadrant product.

        Same result as multiply_brute_force (up to floating-point summation
        order); odd block sizes are zero-padded to even at each level.

        Raises
        ------
        SpaceMismatchError
            If the matrices live in different spaces
        """
        check_same_space(self, other)
        n = self.dimension
        zero = self._space.field.zero
        output = _Block([zero] * (n * n), n, 0, 0)
        _multiply_blocks(
            _Block(self._elements, n, 0, 0),
            _Block(other._elements, n, 0, 0),
            output,
            n,
            zero,
        )
        return Matrix(self._space, output.arena)

    def power(self, n: int) -> "Matrix":
        """Matrix power by repeated squaring (n >= 0)."""
        return power(self, n, self._space.identity_operator)

    def commutator(self, other: "Matrix") -> "Matrix":
        """[A, B] = AB - BA."""
        return self * other - other * self

    def expectation_value(self, psi: Vector) -> Any:
        """<psi| A |psi> (not normalized by <psi|psi>)."""
        check_same_space(self, psi)
        return (self * psi).inner_product(psi)

    # ========================================================================
    # Transpose and Adjoint
    # ========================================================================

    def transpose(self) -> "Matrix":
        n = self.dimension
        return Matrix(
            self._space, [self._elements[j * n + i] for i in range(n) for j in range(n)]
        )

    def adjoint(self) -> "Matrix":
        """Hermitian adjoint: conjugate transpose."""
        n = self.dimension
        return Matrix(
            self._space,
            [functions.conjugate(self._elements[j * n + i]) for i in range(n) for j in range(n)],
        )

    hermitian_adjoint = adjoint

    # ========================================================================
    # Comparison and Display
    # ========================================================================

    def approx_equal(self, other: "Matrix", tolerance: float = DEFAULT_TOLERANCE) -> bool:
        """
        Same space and every |a_ij - b_ij| < tolerance.

        Examples
        --------
        >>> A.approx_equal(A + space.identity_operator * 1e-9)
        True
        """
        if self._space != other._space:
            return False
        return all(
            functions.magnitude(mine - theirs) < tolerance
            for mine, theirs in zip(self._elements, other._elements)
        )

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self._space == other._space and self._elements == other._elements

    __hash__ = None

    def __repr__(self) -> str:
        return f"Matrix(space={self._space.label!r}, elements={self._elements!r})"

    def __str__(self) -> str:
        n = self.dimension
        lines = [f"Operator in space {self._space.label} with identity {self._space.identity.value}"]
        for i in range(n):
            lines.append(" , ".join(str(value) for value in self._elements[i * n : (i + 1) * n]))
        return "\n".join(lines)


# ============================================================================
# Divide-and-Conquer Kernel
# ============================================================================


class _Block(NamedTuple):
    """Square sub-block of a row-major arena."""

    arena: List[Any]
    stride: int
    row: int
    col: int

    def at(self, i: int, j: int) -> Any:
        return self.arena[(self.row + i) * self.stride + self.col + j]

    def quadrant(self, qi: int, qj: int, half: int) -> "_Block":
        return _Block(self.arena, self.stride, self.row + qi * half, self.col + qj * half)


def _pad(block: _Block, size: int, zero: Any) -> _Block:
    padded = size + 1
    arena = [zero] * (padded * padded)
    for i in range(size):
        for j in range(size):
            arena[i * padded + j] = block.at(i, j)
    return _Block(arena, padded, 0, 0)


def _accumulate_unpadded(source: _Block, target: _Block, size: int) -> None:
    for i in range(size):
        for j in range(size):
            index = (target.row + i) * target.stride + target.col + j
            target.arena[index] = target.arena[index] + source.at(i, j)


def _multiply_blocks(a: _Block, b: _Block, out: _Block, size: int, zero: Any) -> None:
    """out += a * b for size x size blocks."""
    if size == 1:
        index = out.row * out.stride + out.col
        out.arena[index] = out.arena[index] + a.at(0, 0) * b.at(0, 0)
        return

    if size % 2 == 1:
        padded_out = _Block([zero] * ((size + 1) * (size + 1)), size + 1, 0, 0)
        _multiply_blocks(_pad(a, size, zero), _pad(b, size, zero), padded_out, size + 1, zero)
        _accumulate_unpadded(padded_out, out, size)
        return

    half = size // 2
    for i in (0, 1):
        for j in (0, 1):
            for k in (0, 1):
                _multiply_blocks(
                    a.quadrant(i, k, half), b.quadrant(k, j, half), out.quadrant(i, j, half), half, zero
                )
