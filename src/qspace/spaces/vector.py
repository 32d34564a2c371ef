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
Vector

A fixed-length sequence of scalar-field elements tied to one VectorSpace.

Vectors are value types: arithmetic always returns a new Vector and copy()
gives an independent value. Element writes (v[i] = x) only affect that
vector. Binary arithmetic is only defined between vectors of the same space.

Examples
--------
>>> space = make_space(2, "plane")
>>> u = Vector(space, [1.0, 2.0])
>>> v = Vector(space, [3.0, 4.0])
>>> (u + v).elements
[4.0, 6.0]
>>> (2 * u).elements
[2.0, 4.0]
>>> u.inner_product(v)
11.0
"""

import operator
from typing import TYPE_CHECKING, Any, Iterable, Iterator, List, Optional

import numpy as np

from qspace.algebra import functions
from qspace.algebra.fields import field_for_dtype
from qspace.errors import DegenerateNormError, DimensionMismatchError
from qspace.spaces.vector_space import VectorSpace, check_same_space, make_space
from qspace.utils.elementwise import (
    elementwise_binary_operation,
    elementwise_unary_operation,
    repeatedly,
    scalar_binary_operation,
)

if TYPE_CHECKING:
    from qspace.spaces.matrix import Matrix


def _is_algebra_object(value: Any) -> bool:
    return hasattr(value, "space") and isinstance(getattr(value, "space"), VectorSpace)


class Vector:
    """
    Element of a vector space.

    Parameters
    ----------
    space : VectorSpace
        Space the vector lives in
    elements : iterable, optional
        Exactly `space.dimension` elements. Zero-filled when omitted.

    Raises
    ------
    DimensionMismatchError
        If the number of elements differs from the space dimension
    """

    __slots__ = ("_space", "_elements")

    # numpy scalars and arrays defer to the reflected operators below
    __array_ufunc__ = None

    def __init__(self, space: VectorSpace, elements: Optional[Iterable[Any]] = None):
        if elements is None:
            values = [space.field.zero] * space.dimension
        else:
            values = list(elements)
            if len(values) != space.dimension:
                raise DimensionMismatchError(
                    f"Vector has {len(values)} elements but space "
                    f"{space.label!r} has dimension {space.dimension}"
                )
        self._space = space
        self._elements = values

    @property
    def space(self) -> VectorSpace:
        return self._space

    @property
    def elements(self) -> List[Any]:
        """Copy of the element list."""
        return list(self._elements)

    @classmethod
    def from_array(cls, array: Any, space: Optional[VectorSpace] = None, label: str = "vector") -> "Vector":
        """
        Build a Vector from a 1-D numpy array.

        A new space is created (field inferred from dtype) when none is given.
        """
        array = np.asarray(array)
        if array.ndim != 1:
            raise DimensionMismatchError(f"Expected a 1-D array, got shape {array.shape}")
        if space is None:
            space = make_space(array.shape[0], label, field=field_for_dtype(array.dtype))
        return cls(space, array.tolist())

    def to_array(self, dtype: Any = None) -> np.ndarray:
        """Elements as a numpy array (numeric fields only)."""
        if self._space.field.is_complex:
            return np.array([complex(e) for e in self._elements], dtype=dtype or complex)
        return np.array(self._elements, dtype=dtype)

    def copy(self) -> "Vector":
        return Vector(self._space, self._elements)

    # ========================================================================
    # Indexing
    # ========================================================================

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._elements):
            raise IndexError(
                f"Index {index} out of range for vector of dimension {len(self._elements)}"
            )

    def __getitem__(self, index: int) -> Any:
        self._check_index(index)
        return self._elements[index]

    def __setitem__(self, index: int, value: Any) -> None:
        self._check_index(index)
        self._elements[index] = value

    def __len__(self) -> int:
        return len(self._elements)

    def __iter__(self) -> Iterator[Any]:
        return iter(list(self._elements))

    # ========================================================================
    # Arithmetic
    # ========================================================================

    def __add__(self, other: Any) -> "Vector":
        if not isinstance(other, Vector):
            return NotImplemented
        check_same_space(self, other)
        return Vector(
            self._space,
            elementwise_binary_operation(self._elements, other._elements, operator.add),
        )

    def __sub__(self, other: Any) -> "Vector":
        if not isinstance(other, Vector):
            return NotImplemented
        check_same_space(self, other)
        return Vector(
            self._space,
            elementwise_binary_operation(self._elements, other._elements, operator.sub),
        )

    def __neg__(self) -> "Vector":
        return Vector(self._space, elementwise_unary_operation(self._elements, operator.neg))

    def __mul__(self, scalar: Any) -> "Vector":
        if _is_algebra_object(scalar):
            return NotImplemented
        return Vector(self._space, scalar_binary_operation(self._elements, scalar, operator.mul))

    def __rmul__(self, scalar: Any) -> "Vector":
        if _is_algebra_object(scalar):
            return NotImplemented
        return Vector(self._space, [scalar * element for element in self._elements])

    def __truediv__(self, scalar: Any) -> "Vector":
        if _is_algebra_object(scalar):
            return NotImplemented
        return Vector(
            self._space, scalar_binary_operation(self._elements, scalar, operator.truediv)
        )

    # ========================================================================
    # Products and Norms
    # ========================================================================

    def inner_product(self, dual: "Vector") -> Any:
        """
        Sum of self[i] * conj(dual[i]).

        Conjugation is a no-op for real fields, so the same definition
        serves real and complex spaces.

        Raises
        ------
        SpaceMismatchError
            If the vectors live in different spaces
        """
        check_same_space(self, dual)
        total = self._space.field.zero
        for mine, theirs in zip(self._elements, dual._elements):
            total = total + mine * functions.conjugate(theirs)
        return total

    def outer_product(self, other: "Vector") -> "Matrix":
        """Matrix with entries self[i] * conj(other[j])."""
        from qspace.spaces.matrix import Matrix

        check_same_space(self, other)
        conjugated = [functions.conjugate(value) for value in other._elements]
        return Matrix(
            self._space, [mine * theirs for mine in self._elements for theirs in conjugated]
        )

    def norm(self) -> Any:
        """
        Euclidean norm sqrt(<v, v>).

        Requires sqrt on the underlying real field.
        """
        squared = self.inner_product(self)
        return functions.sqrt(getattr(squared, "real", squared))

    def normalized(self) -> "Vector":
        """
        Unit vector in the direction of self.

        Raises
        ------
        DegenerateNormError
            If the norm is zero
        """
        length = self.norm()
        if length == 0:
            raise DegenerateNormError(f"Cannot normalize zero vector in space {self._space.label!r}")
        return self / length

    # ========================================================================
    # Comparison and Display
    # ========================================================================

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Vector):
            return NotImplemented
        return self._space == other._space and self._elements == other._elements

    __hash__ = None

    def __repr__(self) -> str:
        return f"Vector(space={self._space.label!r}, elements={self._elements!r})"

    def __str__(self) -> str:
        lines = [f"Vector in space {self._space.label} with identity {self._space.identity.value}"]
        lines.extend(str(value) for value in self._elements)
        return "\n".join(lines)


def vector_sum(*vectors: Vector) -> Vector:
    """
    Sum of two or more same-space vectors.

    Examples
    --------
    >>> vector_sum(u, v, u) == u + v + u
    True
    """
    return repeatedly(operator.add, vectors)
