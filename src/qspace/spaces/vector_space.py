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
Vector Spaces and Space Identity

Every vector and operator lives in exactly one VectorSpace. Spaces exist to
stop structurally valid but meaningless arithmetic: two 2x2 matrices from
different spaces must not be added even though their shapes agree.

Identity Model
--------------
- Each space receives a SpaceIdentity from a SpaceRegistry at construction.
- Two spaces are equal iff their identities are equal; dimension and label
  play no part.
- A composite (tensor product) space stores its factor spaces sorted by
  identity. This ordering is the canonical order used to match operands
  against factors in tensor products.
- Spaces are immutable after construction and may be shared freely.

Registry
--------
Identities are minted from a monotonically increasing counter guarded by a
lock, so spaces may be created from several threads. A process-wide
default registry is used unless one is injected explicitly.

Examples
--------
>>> qubit = make_space(2, "qubit", field=COMPLEX)
>>> oscillator = make_space(10, "oscillator", field=COMPLEX)
>>> joint = make_tensor_product_space(qubit, oscillator, label="joint")
>>> joint.dimension
20
>>> joint.factors == tuple(sorted([qubit, oscillator], key=lambda s: s.identity))
True
"""

import itertools
import threading
from dataclasses import dataclass
from functools import reduce
from typing import TYPE_CHECKING, Any, Optional, Tuple

from qspace.algebra.fields import REAL, ScalarField
from qspace.errors import SpaceMismatchError, TensorProductError

if TYPE_CHECKING:
    from qspace.spaces.matrix import Matrix
    from qspace.spaces.vector import Vector


@dataclass(frozen=True, order=True)
class SpaceIdentity:
    """
    Opaque, ordered handle distinguishing one vector space from another.

    Only the owning registry creates identities; user code should compare
    and sort them but never build them from raw integers.
    """

    value: int

    def __repr__(self) -> str:
        return f"SpaceIdentity({self.value})"


class SpaceRegistry:
    """
    Issues unique SpaceIdentity values.

    Parameters
    ----------
    start : int
        First identity value to issue

    Examples
    --------
    >>> registry = SpaceRegistry()
    >>> a = registry.issue()
    >>> b = registry.issue()
    >>> a < b
    True
    """

    def __init__(self, start: int = 0):
        self._counter = itertools.count(start)
        self._lock = threading.Lock()

    def issue(self) -> SpaceIdentity:
        with self._lock:
            return SpaceIdentity(next(self._counter))


_DEFAULT_REGISTRY = SpaceRegistry()


def default_registry() -> SpaceRegistry:
    """Process-wide registry used when none is supplied."""
    return _DEFAULT_REGISTRY


class VectorSpace:
    """
    Finite-dimensional vector space over a scalar field.

    Prefer make_space() and make_tensor_product_space() over calling the
    constructor directly.

    Parameters
    ----------
    dimension : int
        Dimension (> 0)
    label : str
        Human-readable description
    field : ScalarField
        Scalar field elements are drawn from
    identity : SpaceIdentity
        Unique identity issued by a registry
    factors : tuple of VectorSpace, optional
        Component spaces, sorted by identity. Empty for a simple space,
        in which case the space is its own single factor.

    Attributes
    ----------
    dimension : int
    label : str
    field : ScalarField
    identity : SpaceIdentity
    factors : Tuple[VectorSpace, ...]
    """

    __slots__ = ("_dimension", "_label", "_field", "_identity", "_factors")

    def __init__(
        self,
        dimension: int,
        label: str,
        field: ScalarField,
        identity: SpaceIdentity,
        factors: Tuple["VectorSpace", ...] = (),
    ):
        if not isinstance(dimension, int) or dimension <= 0:
            raise ValueError(f"Space dimension must be a positive integer, got {dimension!r}")

        self._dimension = dimension
        self._label = label
        self._field = field
        self._identity = identity
        self._factors = tuple(factors) if factors else (self,)

    @property
    def dimension(self) -> int:
        return self._dimension

    @property
    def label(self) -> str:
        return self._label

    @property
    def field(self) -> ScalarField:
        return self._field

    @property
    def identity(self) -> SpaceIdentity:
        return self._identity

    @property
    def factors(self) -> Tuple["VectorSpace", ...]:
        return self._factors

    @property
    def is_composite(self) -> bool:
        return len(self._factors) > 1

    def __setattr__(self, name: str, value: Any) -> None:
        if hasattr(self, "_factors"):
            raise AttributeError("VectorSpace is immutable after construction")
        object.__setattr__(self, name, value)

    # ========================================================================
    # Identity Semantics
    # ========================================================================

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, VectorSpace):
            return NotImplemented
        return self._identity == other._identity

    def __hash__(self) -> int:
        return hash(self._identity)

    def __repr__(self) -> str:
        return (
            f"VectorSpace(dimension={self._dimension}, label={self._label!r}, "
            f"field={self._field.name}, identity={self._identity.value})"
        )

    def __str__(self) -> str:
        return self._label

    # ========================================================================
    # Convenience Constructors
    # ========================================================================

    def zero_vector(self) -> "Vector":
        from qspace.spaces.vector import Vector

        return Vector(self)

    def zero_matrix(self) -> "Matrix":
        from qspace.spaces.matrix import Matrix

        return Matrix(self)

    @property
    def identity_operator(self) -> "Matrix":
        """
        Dense identity matrix: one on the diagonal, zero elsewhere.

        Examples
        --------
        >>> make_space(2, "s").identity_operator.elements
        [1.0, 0.0, 0.0, 1.0]
        """
        from qspace.spaces.matrix import Matrix

        output = Matrix(self)
        for i in range(self._dimension):
            output[i, i] = self._field.one
        return output

    def tensor_product(self, lhs: Any, rhs: Any) -> Any:
        """
        Tensor product of two operands drawn from this space's factors.

        See qspace.spaces.tensor.tensor_product.
        """
        from qspace.spaces.tensor import tensor_product

        return tensor_product(self, lhs, rhs)


# ============================================================================
# Construction
# ============================================================================


def make_space(
    dimension: int,
    label: str,
    field: ScalarField = REAL,
    registry: Optional[SpaceRegistry] = None,
) -> VectorSpace:
    """
    Create a fresh vector space with a new identity.

    Parameters
    ----------
    dimension : int
        Dimension (> 0)
    label : str
        Description used in error messages and repr
    field : ScalarField
        Scalar field (default REAL)
    registry : SpaceRegistry, optional
        Identity source (default: process-wide registry)

    Returns
    -------
    VectorSpace
        Simple space whose only factor is itself

    Raises
    ------
    ValueError
        If dimension is not a positive integer

    Examples
    --------
    >>> s1 = make_space(2, "a")
    >>> s2 = make_space(2, "a")
    >>> s1 == s2
    False
    """
    registry = registry if registry is not None else _DEFAULT_REGISTRY
    return VectorSpace(dimension, label, field, registry.issue())


def make_tensor_product_space(
    *spaces: VectorSpace,
    label: str,
    registry: Optional[SpaceRegistry] = None,
) -> VectorSpace:
    """
    Create the tensor product of two or more distinct spaces.

    Parameters
    ----------
    *spaces : VectorSpace
        Factor spaces (at least two, no duplicates, common field)
    label : str
        Description; " (tensor product space)" is appended
    registry : SpaceRegistry, optional
        Identity source (default: process-wide registry)

    Returns
    -------
    VectorSpace
        Composite space with dimension = product of factor dimensions and
        factors sorted by identity

    Raises
    ------
    TensorProductError
        Fewer than two spaces, a space included twice, or mismatched fields

    Examples
    --------
    >>> a, b = make_space(2, "a"), make_space(3, "b")
    >>> make_tensor_product_space(b, a, label="ab").factors == (a, b)
    True
    """
    if len(spaces) < 2:
        raise TensorProductError("Cannot make a tensor product of fewer than two spaces")

    sorted_spaces = tuple(sorted(spaces, key=lambda space: space.identity))
    for first, second in zip(sorted_spaces, sorted_spaces[1:]):
        if first == second:
            raise TensorProductError(
                f"The same space ({first.label!r}) is included more than once in tensor product"
            )

    field = sorted_spaces[0].field
    for space in sorted_spaces[1:]:
        if space.field != field:
            raise TensorProductError(
                f"Cannot combine spaces over different fields: {field.name} and {space.field.name}"
            )

    dimension = reduce(lambda acc, space: acc * space.dimension, sorted_spaces, 1)
    registry = registry if registry is not None else _DEFAULT_REGISTRY
    return VectorSpace(
        dimension,
        f"{label} (tensor product space)",
        field,
        registry.issue(),
        factors=sorted_spaces,
    )


def check_same_space(lhs: Any, rhs: Any) -> None:
    """
    Fail fast unless both operands live in the same space.

    Raises
    ------
    SpaceMismatchError
        If the spaces' identities differ
    """
    if lhs.space != rhs.space:
        raise SpaceMismatchError(
            "Incompatible spaces:\n"
            f"    - {lhs.space.label} (identity {lhs.space.identity.value})\n"
            f"    - {rhs.space.label} (identity {rhs.space.identity.value})"
        )
