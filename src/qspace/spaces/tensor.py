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
Tensor (Kronecker) Product Engine

Composes two operands drawn from the two factor spaces of a composite
space into one operand of the composite space.

Canonical Order
---------------
Operands are sorted by the identity of their spaces before composition,
matching the order in which make_tensor_product_space stores its factors.
tensor_product(space, A, B) therefore equals tensor_product(space, B, A):
the factor created first always forms the outer (block) index.

Layout
------
For operands of dimension n1 and n2 the composite element at
(r1 * n2 + r2, c1 * n2 + c2) is A[r1, c1] * B[r2, c2]. Vectors use the same
rule as single-column matrices.

Examples
--------
>>> s1, s2 = make_space(2, "a"), make_space(2, "b")
>>> joint = make_tensor_product_space(s1, s2, label="ab")
>>> A = Matrix(s1, [1.0, 2.0, 3.0, 4.0])
>>> B = Matrix(s2, [0.0, 5.0, 6.0, 7.0])
>>> tensor_product(joint, A, B).to_array()
array([[ 0.,  5.,  0., 10.],
       [ 6.,  7., 12., 14.],
       [ 0., 15.,  0., 20.],
       [18., 21., 24., 28.]])
"""

from typing import Any, Dict, List, Sequence, Tuple

from qspace.errors import TensorProductError
from qspace.spaces.coordinate_sparse import CoordinateSparseMatrix, CoordinateStorage
from qspace.spaces.diagonal_sparse import DiagonalSparseMatrix, MatrixDiagonal
from qspace.spaces.matrix import Matrix
from qspace.spaces.vector import Vector
from qspace.spaces.vector_space import VectorSpace

_SUPPORTED = (Matrix, Vector, CoordinateSparseMatrix, DiagonalSparseMatrix)


def kronecker_product(
    a: Sequence[Any],
    rows_a: int,
    cols_a: int,
    b: Sequence[Any],
    rows_b: int,
    cols_b: int,
) -> List[Any]:
    """
    Kronecker product of two flat row-major arrays.

    Parameters
    ----------
    a, b : sequence
        Row-major elements of shape (rows_a, cols_a) and (rows_b, cols_b)

    Returns
    -------
    list
        Row-major elements of shape (rows_a * rows_b, cols_a * cols_b)

    Raises
    ------
    ValueError
        If a sequence length does not match its declared shape

    Examples
    --------
    >>> kronecker_product([1, 2], 2, 1, [3, 4], 2, 1)
    [3, 4, 6, 8]
    """
    if len(a) != rows_a * cols_a or len(b) != rows_b * cols_b:
        raise ValueError(
            f"Kronecker operands of length {len(a)} and {len(b)} do not match shapes "
            f"({rows_a}, {cols_a}) and ({rows_b}, {cols_b})"
        )
    cols_c = cols_a * cols_b
    output: List[Any] = [None] * (rows_a * rows_b * cols_c)
    for p in range(rows_a):
        for q in range(cols_a):
            scale = a[p * cols_a + q]
            for v in range(rows_b):
                row_offset = (p * rows_b + v) * cols_c + q * cols_b
                for w in range(cols_b):
                    output[row_offset + w] = scale * b[v * cols_b + w]
    return output


def _ordered_operands(space: VectorSpace, lhs: Any, rhs: Any) -> Tuple[Any, Any]:
    if len(space.factors) != 2:
        raise TensorProductError(
            f"Tensor products are only supported for composite spaces of exactly two factors; "
            f"{space.label!r} has {len(space.factors)}"
        )
    if type(lhs) is not type(rhs):
        raise TensorProductError(
            f"Cannot take tensor product of {type(lhs).__name__} and {type(rhs).__name__}"
        )
    if not isinstance(lhs, _SUPPORTED):
        raise TensorProductError(f"Tensor product not supported for {type(lhs).__name__}")

    first, second = sorted((lhs, rhs), key=lambda operand: operand.space.identity)
    for operand, factor in zip((first, second), space.factors):
        if operand.space != factor:
            raise TensorProductError(
                f"Operand in space {operand.space.label!r} is not a factor of {space.label!r}"
            )
    return first, second


def tensor_product(space: VectorSpace, lhs: Any, rhs: Any) -> Any:
    """
    Tensor product of two operands in the composite `space`.

    Parameters
    ----------
    space : VectorSpace
        Composite space built from exactly the operands' two spaces
    lhs, rhs : Matrix, Vector, CoordinateSparseMatrix or DiagonalSparseMatrix
        Operands of the same type, one from each factor space, in any order

    Returns
    -------
    Same type as the operands, living in `space`

    Raises
    ------
    TensorProductError
        If the space does not have two factors, the operands differ in type,
        or the operands are not drawn from the space's factors
    """
    first, second = _ordered_operands(space, lhs, rhs)
    n1, n2 = first.space.dimension, second.space.dimension

    if isinstance(first, Vector):
        return Vector(space, kronecker_product(first.elements, n1, 1, second.elements, n2, 1))
    if isinstance(first, Matrix):
        return Matrix(space, kronecker_product(first.elements, n1, n1, second.elements, n2, n2))
    if isinstance(first, CoordinateSparseMatrix):
        return _coordinate_tensor_product(space, first, second)
    return _diagonal_tensor_product(space, first, second)


def _coordinate_tensor_product(
    space: VectorSpace, first: CoordinateSparseMatrix, second: CoordinateSparseMatrix
) -> CoordinateSparseMatrix:
    n2 = second.dimension
    values = [
        CoordinateStorage(
            left.value * right.value, left.row * n2 + right.row, left.col * n2 + right.col
        )
        for left in first.values
        for right in second.values
    ]
    return CoordinateSparseMatrix(space, values)


def _diagonal_tensor_product(
    space: VectorSpace, first: DiagonalSparseMatrix, second: DiagonalSparseMatrix
) -> DiagonalSparseMatrix:
    diagonals: Dict[int, MatrixDiagonal] = {}
    for left_index in first.indices:
        left = first.diagonal(left_index)
        for right_index in second.indices:
            product = left.tensor_product(second.diagonal(right_index))
            # distinct (d1, d2) pairs can share d1 * n2 + d2 but never a row
            if product.index in diagonals:
                diagonals[product.index].accumulate(product)
            else:
                diagonals[product.index] = product
    return DiagonalSparseMatrix(space, diagonals)
