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
Vector Spaces, Vectors and Operators
====================================

Spaces with identity, dense vectors and matrices, the two sparse operator
representations and the tensor product engine.

>>> from qspace.spaces import make_space, Vector, Matrix
"""

from .coordinate_sparse import CoordinateSparseMatrix, CoordinateStorage
from .diagonal_sparse import DiagonalSparseMatrix, MatrixDiagonal, row_limits
from .matrix import Matrix
from .operators import OperatorRepresentation, convert_operator, representation_of
from .tensor import kronecker_product, tensor_product
from .vector import Vector, vector_sum
from .vector_space import (
    SpaceIdentity,
    SpaceRegistry,
    VectorSpace,
    check_same_space,
    default_registry,
    make_space,
    make_tensor_product_space,
)

__all__ = [
    "SpaceIdentity",
    "SpaceRegistry",
    "VectorSpace",
    "default_registry",
    "make_space",
    "make_tensor_product_space",
    "check_same_space",
    "Vector",
    "vector_sum",
    "Matrix",
    "CoordinateStorage",
    "CoordinateSparseMatrix",
    "MatrixDiagonal",
    "DiagonalSparseMatrix",
    "row_limits",
    "kronecker_product",
    "tensor_product",
    "OperatorRepresentation",
    "representation_of",
    "convert_operator",
]
