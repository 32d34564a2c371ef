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
Algebraic Capability Protocols

Defines minimal, composable capability contracts so that generic algorithms
can require exactly the operations they use rather than a monolithic numeric
interface.

Protocol Hierarchy
------------------
```
Addable  Subtractable  Negatable  Multipliable  Dividable
   \\          |           |           |           /
    +----------+-----------+-----------+----------+
                          |
                        Scalar  (+ integer/float construction via ScalarField)
                          |
                    ComplexNumber  (+ real, imag, conjugate)
```

Container-level contracts:
- LivesInVectorSpace: anything carrying a `.space`
- ClosedUnderScalarMultiplication: `x * s`, `s * x`, `x / s`
- OperatorLike: square operators acting on vectors

Integer and real constructibility, and the additive/multiplicative
identities, are carried by `qspace.algebra.fields.ScalarField` because
Python's numeric tower does not expose them uniformly on the element type.

Usage
-----
>>> from qspace.types.protocols import Multipliable
>>>
>>> def square(x: Multipliable) -> Multipliable:
...     return x * x

Notes
-----
All protocols are @runtime_checkable, but isinstance() checks only verify
the presence of the dunder methods. Prefer static checking.
"""

from typing import TYPE_CHECKING, Any, Protocol, TypeVar, runtime_checkable

if TYPE_CHECKING:
    from qspace.spaces.vector import Vector
    from qspace.spaces.vector_space import VectorSpace

T = TypeVar("T")

# ============================================================================
# Basic Capabilities
# ============================================================================


@runtime_checkable
class Addable(Protocol):
    """Closed under binary `+`."""

    def __add__(self, other: Any) -> Any: ...


@runtime_checkable
class Subtractable(Protocol):
    """Closed under binary `-`."""

    def __sub__(self, other: Any) -> Any: ...


@runtime_checkable
class Negatable(Protocol):
    """
    Has an additive inverse.

    Positive integers are subtractable but not negatable, hence the split.
    """

    def __neg__(self) -> Any: ...


@runtime_checkable
class Multipliable(Protocol):
    """Closed under binary `*`."""

    def __mul__(self, other: Any) -> Any: ...


@runtime_checkable
class Dividable(Protocol):
    """Closed under binary `/`."""

    def __truediv__(self, other: Any) -> Any: ...


@runtime_checkable
class HasIntegerConstructor(Protocol):
    """Element type constructible from a Python int (e.g. `T(3)`)."""

    def __init__(self, value: int) -> None: ...


@runtime_checkable
class HasAdditiveIdentity(Protocol):
    """Provides a zero element."""

    @property
    def zero(self) -> Any: ...


@runtime_checkable
class HasMultiplicativeIdentity(Protocol):
    """Provides a unit element."""

    @property
    def one(self) -> Any: ...


@runtime_checkable
class HasAbs(Protocol):
    """Supports `abs(x)` returning a value of the underlying real field."""

    def __abs__(self) -> Any: ...


@runtime_checkable
class HasConjugate(Protocol):
    """Supports complex conjugation."""

    def conjugate(self) -> Any: ...


# ============================================================================
# Compound Capabilities
# ============================================================================


@runtime_checkable
class Scalar(Addable, Subtractable, Negatable, Multipliable, Dividable, Protocol):
    """
    Element of a scalar field.

    Composes every arithmetic capability. Construction from integers and
    reals is provided by the owning ScalarField descriptor.
    """


@runtime_checkable
class ComplexNumber(Scalar, HasConjugate, Protocol):
    """
    Complex number over some underlying scalar field.

    Arithmetic is derived from the `real` and `imag` parts.
    """

    @property
    def real(self) -> Any: ...

    @property
    def imag(self) -> Any: ...


@runtime_checkable
class ClosedUnderScalarMultiplication(Protocol):
    """Vectors and operators: `x * s`, `s * x` and `x / s`."""

    def __mul__(self, other: Any) -> Any: ...

    def __rmul__(self, other: Any) -> Any: ...

    def __truediv__(self, other: Any) -> Any: ...


@runtime_checkable
class LivesInVectorSpace(Protocol):
    """Anything tied to exactly one vector space."""

    @property
    def space(self) -> "VectorSpace": ...


@runtime_checkable
class OperatorLike(LivesInVectorSpace, ClosedUnderScalarMultiplication, Protocol):
    """
    Square operator on a vector space.

    Satisfied by the dense Matrix and both sparse representations.
    """

    def __add__(self, other: Any) -> Any: ...

    def __sub__(self, other: Any) -> Any: ...

    def __neg__(self) -> Any: ...

    def to_dense(self) -> Any: ...
