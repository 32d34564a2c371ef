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
Coordinate-Sparse Matrix

Stores only the non-zero entries of a square operator as (value, row, col)
triples kept in row-major order with no duplicate positions.

Algorithms
----------
Addition / subtraction
    Three-way merge of the two sorted triple lists, O(nnz_a + nnz_b).
    Triples present on one side only are emitted as-is (negated for the
    right operand of a subtraction); triples at matching positions are
    combined. A combination that cancels to zero is stored, not dropped.

Sparse x sparse
    The right operand is transposed so its rows are the original columns.
    For every output (i, j) a two-pointer scan intersects row i of the left
    operand with row j of the transposed right operand. An entry is emitted
    only when at least one column matched. Cost depends on the overlap of
    the sparsity patterns, not on n^3.

Sparse x vector
    output[row] += value * rhs[col] for every stored triple.

Examples
--------
>>> space = make_space(3, "s")
>>> dense = Matrix(space, [1.0, 0.0, 0.0, 0.0, 0.0, 2.0, 0.0, 3.0, 0.0])
>>> sparse = CoordinateSparseMatrix.from_dense(dense)
>>> sparse.nnz
3
>>> sparse.to_dense() == dense
True
"""

import operator
from bisect import bisect_left
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Tuple

import numpy as np
import scipy.sparse as sps

from qspace.algebra import functions
from qspace.errors import DimensionMismatchError
from qspace.spaces.matrix import DEFAULT_TOLERANCE, Matrix
from qspace.spaces.vector import Vector, _is_algebra_object
from qspace.spaces.vector_space import VectorSpace, check_same_space


@dataclass(frozen=True)
class CoordinateStorage:
    """
    One stored entry of a coordinate-sparse matrix.

    Equality compares value, row and column. Ordering compares (row, col)
    only, since the scalar field need not be ordered.
    """

    value: Any
    row: int
    col: int

    __array_ufunc__ = None

    @property
    def position(self) -> Tuple[int, int]:
        return (self.row, self.col)

    def __lt__(self, other: "CoordinateStorage") -> bool:
        return self.position < other.position

    def __gt__(self, other: "CoordinateStorage") -> bool:
        return self.position > other.position

    def __mul__(self, scalar: Any) -> "CoordinateStorage":
        return CoordinateStorage(self.value * scalar, self.row, self.col)

    def __rmul__(self, scalar: Any) -> "CoordinateStorage":
        return CoordinateStorage(scalar * self.value, self.row, self.col)

    def __truediv__(self, scalar: Any) -> "CoordinateStorage":
        return CoordinateStorage(self.value / scalar, self.row, self.col)

    def __neg__(self) -> "CoordinateStorage":
        return CoordinateStorage(-self.value, self.row, self.col)

    def __str__(self) -> str:
        return f"[{self.row},{self.col}] = {self.value}"


class CoordinateSparseMatrix:
    """
    Square operator stored as sorted non-zero triples.

    Parameters
    ----------
    space : VectorSpace
        Space the operator acts on
    values : iterable of CoordinateStorage, optional
        Stored entries in any order; sorted on construction

    Raises
    ------
    IndexError
        If an entry lies outside the matrix
    ValueError
        If two entries share a position
    """

    __slots__ = ("_space", "_values")

    # numpy scalars and arrays defer to the reflected operators below
    __array_ufunc__ = None

    def __init__(self, space: VectorSpace, values: Iterable[CoordinateStorage] = ()):
        entries = sorted(values, key=lambda entry: entry.position)
        n = space.dimension
        for entry in entries:
            if not (0 <= entry.row < n and 0 <= entry.col < n):
                raise IndexError(
                    f"Entry at ({entry.row}, {entry.col}) out of range for {n}x{n} matrix"
                )
        for first, second in zip(entries, entries[1:]):
            if first.position == second.position:
                raise ValueError(f"Duplicate entry at position {first.position}")
        self._space = space
        self._values = entries

    @classmethod
    def _from_sorted(cls, space: VectorSpace, values: List[CoordinateStorage]) -> "CoordinateSparseMatrix":
        output = cls.__new__(cls)
        output._space = space
        output._values = values
        return output

    @property
    def space(self) -> VectorSpace:
        return self._space

    @property
    def dimension(self) -> int:
        return self._space.dimension

    @property
    def values(self) -> Tuple[CoordinateStorage, ...]:
        """Stored triples in row-major order."""
        return tuple(self._values)

    @property
    def nnz(self) -> int:
        """Number of stored entries."""
        return len(self._values)

    # ========================================================================
    # Conversions
    # ========================================================================

    @classmethod
    def from_dense(cls, matrix: Matrix) -> "CoordinateSparseMatrix":
        """Scan row-major and keep entries that are not exactly zero."""
        n = matrix.dimension
        field = matrix.space.field
        values = []
        for i in range(n):
            for j in range(n):
                value = matrix[i, j]
                if not field.is_zero(value):
                    values.append(CoordinateStorage(value, i, j))
        return cls._from_sorted(matrix.space, values)

    def to_dense(self) -> Matrix:
        output = Matrix(self._space)
        for entry in self._values:
            output[entry.row, entry.col] = entry.value
        return output

    def to_scipy(self) -> sps.coo_matrix:
        """Equivalent `scipy.sparse.coo_matrix` (numeric fields only)."""
        n = self.dimension
        dtype = complex if self._space.field.is_complex else float
        data = np.array([entry.value for entry in self._values], dtype=dtype)
        rows = np.array([entry.row for entry in self._values], dtype=int)
        cols = np.array([entry.col for entry in self._values], dtype=int)
        return sps.coo_matrix((data, (rows, cols)), shape=(n, n))

    @classmethod
    def from_scipy(cls, matrix: Any, space: VectorSpace) -> "CoordinateSparseMatrix":
        """
        Build from any scipy sparse matrix or array.

        Duplicate entries are summed and explicit zeros dropped.

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
        values = [
            CoordinateStorage(value, int(row), int(col))
            for value, row, col in zip(coo.data.tolist(), coo.row, coo.col)
        ]
        return cls(space, values)

    def copy(self) -> "CoordinateSparseMatrix":
        return self._from_sorted(self._space, list(self._values))

    # ========================================================================
    # Indexing
    # ========================================================================

    def __getitem__(self, index: Tuple[int, int]) -> Any:
        row, col = index
        n = self.dimension
        if not (0 <= row < n and 0 <= col < n):
            raise IndexError(f"Index ({row}, {col}) out of range for {n}x{n} matrix")
        location = bisect_left(self._values, CoordinateStorage(None, row, col))
        if location < len(self._values) and self._values[location].position == (row, col):
            return self._values[location].value
        return self._space.field.zero

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self):
        return iter(tuple(self._values))

    # ========================================================================
    # Merge Arithmetic
    # ========================================================================

    def _merge(
        self,
        other: "CoordinateSparseMatrix",
        operation: Callable[[Any, Any], Any],
        right_only: Callable[[CoordinateStorage], CoordinateStorage],
    ) -> "CoordinateSparseMatrix":
        check_same_space(self, other)
        lhs, rhs = self._values, other._values
        output = []
        i = j = 0
        while i < len(lhs) and j < len(rhs):
            left, right = lhs[i], rhs[j]
            if right < left:
                output.append(right_only(right))
                j += 1
            elif left < right:
                output.append(left)
                i += 1
            else:
                output.append(CoordinateStorage(operation(left.value, right.value), left.row, left.col))
                i += 1
                j += 1
        output.extend(lhs[i:])
        output.extend(right_only(entry) for entry in rhs[j:])
        return self._from_sorted(self._space, output)

    def __add__(self, other: Any) -> "CoordinateSparseMatrix":
        if not isinstance(other, CoordinateSparseMatrix):
            return NotImplemented
        return self._merge(other, operator.add, lambda entry: entry)

    def __sub__(self, other: Any) -> "CoordinateSparseMatrix":
        if not isinstance(other, CoordinateSparseMatrix):
            return NotImplemented
        return self._merge(other, operator.sub, operator.neg)

    def __neg__(self) -> "CoordinateSparseMatrix":
        return self._from_sorted(self._space, [-entry for entry in self._values])

    # ========================================================================
    # Products
    # ========================================================================

    def __mul__(self, other: Any) -> Any:
        if isinstance(other, CoordinateSparseMatrix):
            return self._multiply_sparse(other)
        if isinstance(other, Vector):
            return self._apply(other)
        if _is_algebra_object(other):
            return NotImplemented
        return self._from_sorted(self._space, [entry * other for entry in self._values])

    def __rmul__(self, scalar: Any) -> "CoordinateSparseMatrix":
        if _is_algebra_object(scalar):
            return NotImplemented
        return self._from_sorted(self._space, [scalar * entry for entry in self._values])

    def __truediv__(self, scalar: Any) -> "CoordinateSparseMatrix":
        if _is_algebra_object(scalar):
            return NotImplemented
        return self._from_sorted(self._space, [entry / scalar for entry in self._values])

    def __matmul__(self, other: Any) -> Any:
        if isinstance(other, (CoordinateSparseMatrix, Vector)):
            return self * other
        return NotImplemented

    def _apply(self, vector: Vector) -> Vector:
        check_same_space(self, vector)
        output = Vector(self._space)
        for entry in self._values:
            output[entry.row] = output[entry.row] + entry.value * vector[entry.col]
        return output

    def _multiply_sparse(self, other: "CoordinateSparseMatrix") -> "CoordinateSparseMatrix":
        check_same_space(self, other)
        lhs_rows = _group_by_row(self._values)
        rhs_columns = _group_by_row(other.transpose()._values)
        zero = self._space.field.zero

        output = []
        for i in sorted(lhs_rows):
            row = lhs_rows[i]
            for j in sorted(rhs_columns):
                column = rhs_columns[j]
                total = zero
                matched = False
                a = b = 0
                while a < len(row) and b < len(column):
                    if row[a].col == column[b].col:
                        total = total + row[a].value * column[b].value
                        matched = True
                        a += 1
                        b += 1
                    elif row[a].col < column[b].col:
                        a += 1
                    else:
                        b += 1
                if matched:
                    output.append(CoordinateStorage(total, i, j))
        return self._from_sorted(self._space, output)

    # ========================================================================
    # Transpose and Adjoint
    # ========================================================================

    def transpose(self) -> "CoordinateSparseMatrix":
        return CoordinateSparseMatrix(
            self._space,
            [CoordinateStorage(entry.value, entry.col, entry.row) for entry in self._values],
        )

    def adjoint(self) -> "CoordinateSparseMatrix":
        return CoordinateSparseMatrix(
            self._space,
            [
                CoordinateStorage(functions.conjugate(entry.value), entry.col, entry.row)
                for entry in self._values
            ],
        )

    # ========================================================================
    # Comparison and Display
    # ========================================================================

    def approx_equal(
        self, other: "CoordinateSparseMatrix", tolerance: float = DEFAULT_TOLERANCE
    ) -> bool:
        """Same space and every stored difference below tolerance."""
        if self._space != other._space:
            return False
        return all(
            functions.magnitude(entry.value) < tolerance for entry in (self - other)._values
        )

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, CoordinateSparseMatrix):
            return NotImplemented
        return self._space == other._space and self._values == other._values

    __hash__ = None

    def __repr__(self) -> str:
        return f"CoordinateSparseMatrix(space={self._space.label!r}, nnz={self.nnz})"

    def __str__(self) -> str:
        lines = [f"Sparse operator in space {self._space.label} with identity {self._space.identity.value}"]
        lines.extend(str(entry) for entry in self._values)
        return "\n".join(lines)


def _group_by_row(values: List[CoordinateStorage]) -> Dict[int, List[CoordinateStorage]]:
    rows: Dict[int, List[CoordinateStorage]] = {}
    for entry in values:
        rows.setdefault(entry.row, []).append(entry)
    return rows
