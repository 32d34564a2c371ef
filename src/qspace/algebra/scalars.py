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
Generic Scalar Utilities

Algorithms that need nothing beyond the Multipliable capability plus an
explicitly supplied identity element.
"""

from typing import Any, TypeVar

from qspace.types.protocols import Multipliable

M = TypeVar("M", bound=Multipliable)


def power(x: M, n: int, identity: M) -> M:
    """
    Raise x to a non-negative integer power by repeated squaring.

    Works for any Multipliable type: scalars, Complex, dense or sparse
    operators. The identity is returned for n == 0, so the caller supplies
    the unit of the type (e.g. `space.identity_operator` for matrices).

    Parameters
    ----------
    x : Multipliable
        Base
    n : int
        Exponent, n >= 0
    identity : Multipliable
        Multiplicative identity of x's type

    Returns
    -------
    Multipliable
        x ** n using O(log n) multiplications

    Raises
    ------
    ValueError
        If n is negative

    Examples
    --------
    >>> power(3, 4, 1)
    81
    >>> power(space.identity_operator * 2.0, 3, space.identity_operator)[0, 0]
    8.0

    Notes
    -----
    https://en.wikipedia.org/wiki/Exponentiation_by_squaring#Basic_method
    """
    if n < 0:
        raise ValueError(f"Exponent must be non-negative, got {n}")

    result = identity
    base = x
    while n > 0:
        if n % 2 == 1:
            result = result * base
        n //= 2
        if n > 0:
            base = base * base
    return result


def additive_identity(field: Any) -> Any:
    """Zero of a ScalarField."""
    return field.zero


def multiplicative_identity(field: Any) -> Any:
    """One of a ScalarField."""
    return field.one
