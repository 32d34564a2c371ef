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
Diagonal-Sparse Matrix

Stores a square operator as a mapping from diagonal index to MatrixDiagonal.
A diagonal of index d = column - row holds the non-zero entries
(row, row + d); valid indices lie in (-dimension, dimension) and a diagonal
of index d spans rows [max(0, -d), dimension - 1 - max(0, d)].

Diagonal Algebra
----------------
- A_i + B_i and A_i - B_i merge per row; entries missing on the left become
  the right entry (negated for subtraction).
- A_i * B_j is a diagonal of index i + j: row r of the left diagonal
  meets row r + i of the right diagonal, since
  A[r, r + i] * B[r + i, r + i + j] contributes to C[r, r + i + j].
- A_d1 (x) B_d2 over dimensions n1, n2 is a diagonal of index d1 * n2 + d2
  of the n1 * n2 space, with entry A[r1] * B[r2] on row r1 * n2 + r2.

Examples
--------
>>> space = make_space(3, "s")
>>> shift = DiagonalSparseMatrix(space, {1: MatrixDiagonal(3, 1, {0: 1.0, 1: 1.0})})
>>> shift.to_dense().elements
[0.0, 1.0, 0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0]
>>> sorted((shift * shift).indices)
[2]
"""

import operator
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Tuple

import numpy as np
import scipy.sparse as sps

from qspace.algebra import functions
from qspace.errors import DimensionMismatchError
from qspace.spaces.matrix import DEFAULT_TOLERANCE, Matrix
from qspace.spaces.vector import Vector, _is_algebra_object
from qspace.spaces.vector_space import VectorSpace, check_same_space
from qspace.types.core import RowLimits


def row_limits(dimension: int, index: int) -> RowLimits:
    """
    Inclusive row range (first, last) spanned by diagonal `index`.

    Examples
    --------
    >>> row_limits(4, -1)
    (1, 3)
    >>> row_limits(4, 2)
    (0, 1)
    """
    if index <= 0:
        return (-index, dimension - 1)
    return (0, dimension - index - 1)


def _check_index(dimension: int, index: int) -> None:
    if not -dimension < index < dimension:
        raise ValueError(
            f"Diagonal index {index} outside valid range ({-dimension}, {dimension})"
        )


class MatrixDiagonal:
    """
    Non-zero entries of one diagonal of a square matrix, keyed by row.

    Parameters
    ----------
    dimension : int
        Dimension of the matrix the diagonal belongs to
    index : int
        Diagonal index, column - row
    elements : mapping of int to scalar, optional
        Row -> value; every row must lie in row_limits(dimension, index)

    Raises
    ------
    ValueError
        If the index is outside (-dimension, dimension)
    IndexError
        If an element row is outside the diagonal
    """

    __slots__ = ("dimension", "index", "first_row", "last_row", "_elements")

    # numpy scalars and arrays defer to the reflected operators below
    __array_ufunc__ = None

    def __init__(self, dimension: int, index: int, elements: Optional[Mapping[int, Any]] = None):
        _check_index(dimension, index)
        self.dimension = dimension
        self.index = index
        self.first_row, self.last_row = row_limits(dimension, index)
        self._elements: Dict[int, Any] = {}
        for row, value in (elements or {}).items():
            self[row] = value

    @property
    def elements(self) -> Dict[int, Any]:
        """Copy of the row -> value mapping."""
        return dict(self._elements)

    def get(self, row: int, default: Any = None) -> Any:
        return self._elements.get(row, default)

    def __getitem__(self, row: int) -> Any:
        return self._elements[row]

    def __setitem__(self, row: int, value: Any) -> None:
        if not self.first_row <= row <= self.last_row:
            raise IndexError(
                f"Row {row} outside diagonal {self.index} "
                f"(rows {self.first_row}..{self.last_row})"
            )
        self._elements[row] = value

    def __contains__(self, row: int) -> bool:
        return row in self._elements

    def __len__(self) -> int:
        return len(self._elements)

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self._elements))

    def items(self) -> List[Tuple[int, Any]]:
        return sorted(self._elements.items())

    def copy(self) -> "MatrixDiagonal":
        return self._with_elements(self._elements)

    def _with_elements(self, elements: Mapping[int, Any]) -> "MatrixDiagonal":
        output = MatrixDiagonal.__new__(MatrixDiagonal)
        output.dimension = self.dimension
        output.index = self.index
        output.first_row = self.first_row
        output.last_row = self.last_row
        output._elements = dict(elements)
        return output

    # ========================================================================
    # Arithmetic
    # ========================================================================

    def _check_compatible(self, other: "MatrixDiagonal") -> None:
        if self.dimension != other.dimension or self.index != other.index:
            raise ValueError(
                f"Cannot combine diagonal {self.index} (dimension {self.dimension}) "
                f"with diagonal {other.index} (dimension {other.dimension})"
            )

    def _merge(
        self,
        other: "MatrixDiagonal",
        operation: Callable[[Any, Any], Any],
        right_only: Callable[[Any], Any],
    ) -> "MatrixDiagonal":
        self._check_compatible(other)
        output = dict(self._elements)
        for row, value in other._elements.items():
            if row in output:
                output[row] = operation(output[row], value)
            else:
                output[row] = right_only(value)
        return self._with_elements(output)

    def __add__(self, other: "MatrixDiagonal") -> "MatrixDiagonal":
        return self._merge(other, operator.add, lambda value: value)

    def __sub__(self, other: "MatrixDiagonal") -> "MatrixDiagonal":
        return self._merge(other, operator.sub, operator.neg)

    def accumulate(self, other: "MatrixDiagonal") -> None:
        """In-place self += other."""
        self._check_compatible(other)
        for row, value in other._elements.items():
            if row in self._elements:
                self._elements[row] = self._elements[row] + value
            else:
                self._elements[row] = value

    def __neg__(self) -> "MatrixDiagonal":
        return self._with_elements({row: -value for row, value in self._elements.items()})

    def __mul__(self, other: Any) -> "MatrixDiagonal":
        if isinstance(other, MatrixDiagonal):
            return self._multiply_diagonal(other)
        return self._with_elements({row: value * other for row, value in self._elements.items()})

    def __rmul__(self, scalar: Any) -> "MatrixDiagonal":
        return self._with_elements({row: scalar * value for row, value in self._elements.items()})

    def __truediv__(self, scalar: Any) -> "MatrixDiagonal":
        return self._with_elements({row: value / scalar for row, value in self._elements.items()})

    def _multiply_diagonal(self, other: "MatrixDiagonal") -> "MatrixDiagonal":
        """
        Product diagonal of index self.index + other.index.

        Raises
        ------
        ValueError
            If the target index is outside the matrix
        """
        if self.dimension != other.dimension:
            raise ValueError(
                f"Cannot multiply diagonals of dimensions {self.dimension} and {other.dimension}"
            )
        output = MatrixDiagonal(self.dimension, self.index + other.index)
        for row, value in self._elements.items():
            partner = other._elements.get(row + self.index)
            if partner is not None:
                output[row] = value * partner
        return output

    # ========================================================================
    # Tensor Products
    # ========================================================================

    def tensor_product(self, other: "MatrixDiagonal") -> "MatrixDiagonal":
        """
        Diagonal of self (x) other in the product space.

        Examples
        --------
        >>> a = MatrixDiagonal(2, 1, {0: 2.0})
        >>> b = MatrixDiagonal(3, -1, {1: 5.0, 2: 7.0})
        >>> c = a.tensor_product(b)
        >>> c.index, c.elements
        (2, {1: 10.0, 2: 14.0})
        """
        dimension = self.dimension * other.dimension
        output = MatrixDiagonal(dimension, self.index * other.dimension + other.index)
        for left_row, left_value in self._elements.items():
            for right_row, right_value in other._elements.items():
                output[left_row * other.dimension + right_row] = left_value * right_value
        return output

    def tensor_product_with_identity_from_left(self, identity_dimension: int) -> "MatrixDiagonal":
        """
        Diagonal of I (x) self, where I is the identity of `identity_dimension`.

        The result repeats self along the block diagonal, so its index is
        unchanged and only rows whose column falls in the same block are set.
        """
        block = self.dimension
        output = MatrixDiagonal(block * identity_dimension, self.index)
        for row in range(output.first_row, output.last_row + 1):
            if row // block != (row + self.index) // block:
                continue
            value = self._elements.get(row % block)
            if value is not None:
                output[row] = value
        return output

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, MatrixDiagonal):
            return NotImplemented
        return (
            self.dimension == other.dimension
            and self.index == other.index
            and self._elements == other._elements
        )

    __hash__ = None

    def __repr__(self) -> str:
        return f"MatrixDiagonal(dimension={self.dimension}, index={self.index}, elements={self.elements!r})"


class DiagonalSparseMatrix:
    """
    Square operator stored by diagonals.

    Parameters
    ----------
    space : VectorSpace
        Space the operator acts on
    diagonals : mapping of int to MatrixDiagonal, optional
        Diagonal index -> diagonal; copied on construction

    Raises
    ------
    DimensionMismatchError
        If a diagonal's dimension differs from the space's
    ValueError
        If a key does not match its diagonal's index
    """

    __slots__ = ("_space", "_diagonals")

    # numpy scalars and arrays defer to the reflected operators below
    __array_ufunc__ = None

    def __init__(self, space: VectorSpace, diagonals: Optional[Mapping[int, MatrixDiagonal]] = None):
        copied: Dict[int, MatrixDiagonal] = {}
        for index, diagonal in (diagonals or {}).items():
            if diagonal.dimension != space.dimension:
                raise DimensionMismatchError(
                    f"Diagonal of dimension {diagonal.dimension} in space "
                    f"{space.label!r} of dimension {space.dimension}"
                )
            if diagonal.index != index:
                raise ValueError(f"Diagonal with index {diagonal.index} stored under key {index}")
            copied[index] = diagonal.copy()
        self._space = space
        self._diagonals = copied

    @classmethod
    def _owning(cls, space: VectorSpace, diagonals: Dict[int, MatrixDiagonal]) -> "DiagonalSparseMatrix":
        output = cls.__new__(cls)
        output._space = space
        output._diagonals = diagonals
        return output

    @property
    def space(self) -> VectorSpace:
        return self._space

    @property
    def dimension(self) -> int:
        return self._space.dimension

    @property
    def indices(self) -> List[int]:
        """Sorted indices of stored diagonals."""
        return sorted(self._diagonals)

    def diagonal(self, index: int) -> Optional[MatrixDiagonal]:
        """Copy of diagonal `index`, or None when not stored."""
        diagonal = self._diagonals.get(index)
        return diagonal.copy() if diagonal is not None else None

    @property
    def nnz(self) -> int:
        return sum(len(diagonal) for diagonal in self._diagonals.values())

    # ========================================================================
    # Conversions
    # ========================================================================

    @classmethod
    def from_dense(cls, matrix: Matrix) -> "DiagonalSparseMatrix":
        """Record the non-zero entries of every diagonal that has any."""
        n = matrix.dimension
        field = matrix.space.field
        diagonals = {}
        for index in range(1 - n, n):
            first, last = row_limits(n, index)
            entries = {}
            for row in range(first, last + 1):
                value = matrix[row, row + index]
                if not field.is_zero(value):
                    entries[row] = value
            if entries:
                diagonals[index] = MatrixDiagonal(n, index, entries)
        return cls._owning(matrix.space, diagonals)

    def to_dense(self) -> Matrix:
        output = Matrix(self._space)
        for index, diagonal in self._diagonals.items():
            for row, value in diagonal.items():
                output[row, row + index] = value
        return output

    def to_scipy(self) -> sps.dia_matrix:
        """Equivalent `scipy.sparse.dia_matrix` (numeric fields only)."""
        n = self.dimension
        dtype = complex if self._space.field.is_complex else float
        rows, cols, data = [], [], []
        for index, diagonal in self._diagonals.items():
            for row, value in diagonal.items():
                rows.append(row)
                cols.append(row + index)
                data.append(value)
        coo = sps.coo_matrix(
            (np.array(data, dtype=dtype), (np.array(rows, dtype=int), np.array(cols, dtype=int))),
            shape=(n, n),
        )
        return coo.todia()

    @classmethod
    def from_scipy(cls, matrix: Any, space: VectorSpace) -> "DiagonalSparseMatrix":
        """
        Build from any scipy sparse matrix or array.

        Raises
        ------
        DimensionMismatchError
            If the shape does not match the space dimension
        """
        n = space.dimension
        coo = sps.coo_matrix(matrix)
        if coo.shape != (n, n):
            raise DimensionMismatchError(
                f"Sparse matrix shape {coo.shape} does not match space dimension {n}"
            )
        coo.sum_duplicates()
        coo.eliminate_zeros()
        output = cls(space)
        for value, row, col in zip(coo.data.tolist(), coo.row, coo.col):
            output[int(row), int(col)] = value
        return output

    def copy(self) -> "DiagonalSparseMatrix":
        return DiagonalSparseMatrix(self._space, self._diagonals)

    # ========================================================================
    # Indexing
    # ========================================================================

    def _check_position(self, row: int, col: int) -> None:
        n = self.dimension
        if not (0 <= row < n and 0 <= col < n):
            raise IndexError(f"Index ({row}, {col}) out of range for {n}x{n} matrix")

    def __getitem__(self, index: Tuple[int, int]) -> Any:
        row, col = index
        self._check_position(row, col)
        diagonal = self._diagonals.get(col - row)
        if diagonal is None:
            return self._space.field.zero
        return diagonal.get(row, self._space.field.zero)

    def __setitem__(self, index: Tuple[int, int], value: Any) -> None:
        row, col = index
        self._check_position(row, col)
        diagonal = self._diagonals.get(col - row)
        if diagonal is None:
            diagonal = MatrixDiagonal(self.dimension, col - row)
            self._diagonals[col - row] = diagonal
        diagonal[row] = value

    # ========================================================================
    # Arithmetic
    # ========================================================================

    def _combine(
        self,
        other: "DiagonalSparseMatrix",
        operation: Callable[[MatrixDiagonal, MatrixDiagonal], MatrixDiagonal],
        right_only: Callable[[MatrixDiagonal], MatrixDiagonal],
    ) -> "DiagonalSparseMatrix":
        check_same_space(self, other)
        output = {index: diagonal.copy() for index, diagonal in self._diagonals.items()}
        for index, diagonal in other._diagonals.items():
            if index in output:
                output[index] = operation(output[index], diagonal)
            else:
                output[index] = right_only(diagonal)
        return self._owning(self._space, output)

    def __add__(self, other: Any) -> "DiagonalSparseMatrix":
        if not isinstance(other, DiagonalSparseMatrix):
            return NotImplemented
        return self._combine(other, operator.add, MatrixDiagonal.copy)

    def __sub__(self, other: Any) -> "DiagonalSparseMatrix":
        if not isinstance(other, DiagonalSparseMatrix):
            return NotImplemented
        return self._combine(other, operator.sub, operator.neg)

    def __neg__(self) -> "DiagonalSparseMatrix":
        return self._map(operator.neg)

    def _map(self, function: Callable[[MatrixDiagonal], MatrixDiagonal]) -> "DiagonalSparseMatrix":
        return self._owning(
            self._space, {index: function(diagonal) for index, diagonal in self._diagonals.items()}
        )

    def __mul__(self, other: Any) -> Any:
        if isinstance(other, DiagonalSparseMatrix):
            return self._multiply_diagonal_sparse(other)
        if isinstance(other, Vector):
            return self._apply(other)
        if _is_algebra_object(other):
            return NotImplemented
        return self._map(lambda diagonal: diagonal * other)

    def __rmul__(self, scalar: Any) -> "DiagonalSparseMatrix":
        if _is_algebra_object(scalar):
            return NotImplemented
        return self._map(lambda diagonal: scalar * diagonal)

    def __truediv__(self, scalar: Any) -> "DiagonalSparseMatrix":
        if _is_algebra_object(scalar):
            return NotImplemented
        return self._map(lambda diagonal: diagonal / scalar)

    def __matmul__(self, other: Any) -> Any:
        if isinstance(other, (DiagonalSparseMatrix, Vector)):
            return self * other
        return NotImplemented

    def _apply(self, vector: Vector) -> Vector:
        check_same_space(self, vector)
        n = self.dimension
        output = Vector(self._space)
        for index, diagonal in self._diagonals.items():
            for row, value in diagonal.items():
                column = row + index
                if 0 <= column < n:
                    output[row] = output[row] + value * vector[column]
        return output

    def _multiply_diagonal_sparse(self, other: "DiagonalSparseMatrix") -> "DiagonalSparseMatrix":
        check_same_space(self, other)
        n = self.dimension
        output: Dict[int, MatrixDiagonal] = {}
        for left_index, left in self._diagonals.items():
            for right_index, right in other._diagonals.items():
                target = left_index + right_index
                if not -n < target < n:
                    continue
                product = left * right
                if not len(product):
                    continue
                if target in output:
                    output[target].accumulate(product)
                else:
                    output[target] = product
        return self._owning(self._space, output)

    # ========================================================================
    # Transpose and Adjoint
    # ========================================================================

    def transpose(self) -> "DiagonalSparseMatrix":
        return self._reflect(lambda value: value)

    def adjoint(self) -> "DiagonalSparseMatrix":
        return self._reflect(functions.conjugate)

    def _reflect(self, function: Callable[[Any], Any]) -> "DiagonalSparseMatrix":
        n = self.dimension
        output = {}
        for index, diagonal in self._diagonals.items():
            output[-index] = MatrixDiagonal(
                n, -index, {row + index: function(value) for row, value in diagonal.items()}
            )
        return self._owning(self._space, output)

    # ========================================================================
    # Comparison and Display
    # ========================================================================

    def approx_equal(
        self, other: "DiagonalSparseMatrix", tolerance: float = DEFAULT_TOLERANCE
    ) -> bool:
        """Same space and every stored difference below tolerance."""
        if self._space != other._space:
            return False
        difference = self - other
        return all(
            functions.magnitude(value) < tolerance
            for diagonal in difference._diagonals.values()
            for _, value in diagonal.items()
        )

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, DiagonalSparseMatrix):
            return NotImplemented
        return self._space == other._space and self._diagonals == other._diagonals

    __hash__ = None

    def __repr__(self) -> str:
        return f"DiagonalSparseMatrix(space={self._space.label!r}, indices={self.indices})"
