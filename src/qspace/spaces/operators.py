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
Operator Representations

An operator on a vector space may be stored densely, as coordinate triples
or by diagonals. OperatorRepresentation names the choice so it can be
selected once and carried explicitly by consumers (see
qspace.systems.schrodinger) instead of keeping one optional cache per
representation.

Examples
--------
>>> op = space.identity_operator
>>> representation_of(op)
<OperatorRepresentation.DENSE: 'dense'>
>>> diag = convert_operator(op, OperatorRepresentation.DIAGONAL_SPARSE)
>>> diag.indices
[0]
"""

from enum import Enum
from typing import Any, Union

from qspace.spaces.coordinate_sparse import CoordinateSparseMatrix
from qspace.spaces.diagonal_sparse import DiagonalSparseMatrix
from qspace.spaces.matrix import Matrix

Operator = Union[Matrix, CoordinateSparseMatrix, DiagonalSparseMatrix]


class OperatorRepresentation(Enum):
    """
    Storage used for an operator.

    Attributes
    ----------
    DENSE : str
        Row-major Matrix. Best for small or dense operators.
    SPARSE : str
        CoordinateSparseMatrix. Best for scattered non-zeros.
    DIAGONAL_SPARSE : str
        DiagonalSparseMatrix. Best for banded operators such as ladder
        operators and their tensor products.
    """

    DENSE = "dense"
    SPARSE = "sparse"
    DIAGONAL_SPARSE = "diagonal_sparse"


_TYPES = {
    OperatorRepresentation.DENSE: Matrix,
    OperatorRepresentation.SPARSE: CoordinateSparseMatrix,
    OperatorRepresentation.DIAGONAL_SPARSE: DiagonalSparseMatrix,
}


def representation_of(operator: Any) -> OperatorRepresentation:
    """
    Representation of an operator instance.

    Raises
    ------
    TypeError
        If `operator` is not one of the three operator types
    """
    for representation, operator_type in _TYPES.items():
        if isinstance(operator, operator_type):
            return representation
    raise TypeError(f"{type(operator).__name__} is not an operator representation")


def convert_operator(operator: Operator, representation: Union[OperatorRepresentation, str]) -> Operator:
    """
    Convert an operator to another representation via its dense form.

    Conversions are information preserving: only exact zeros are dropped
    when converting to a sparse representation. Converting to the current
    representation returns a copy.

    Parameters
    ----------
    operator : Matrix, CoordinateSparseMatrix or DiagonalSparseMatrix
    representation : OperatorRepresentation or str
        Target representation ('dense', 'sparse' or 'diagonal_sparse')

    Raises
    ------
    ValueError
        If `representation` is an unknown string
    """
    representation = OperatorRepresentation(representation)
    if representation_of(operator) is representation:
        return operator.copy()

    dense = operator.to_dense()
    if representation is OperatorRepresentation.DENSE:
        return dense
    if representation is OperatorRepresentation.SPARSE:
        return CoordinateSparseMatrix.from_dense(dense)
    return DiagonalSparseMatrix.from_dense(dense)
