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
Scalar Field Descriptors

A ScalarField describes the element type a vector space is defined over:
its additive and multiplicative identities, how to build elements from
Python ints and floats, and whether elements are complex.

Python's numeric types do not share a uniform "construct from int" or
"zero of my type" interface (compare float, Fraction, sympy.Integer and
qspace's Complex), so spaces carry a field descriptor instead of relying
on the element type itself.

Built-in Fields
---------------
- REAL       float
- COMPLEX    builtin complex
- RATIONAL   fractions.Fraction (exact)
- SYMBOLIC   sympy expressions (exact/symbolic)
- complex_over(field)   qspace Complex with parts in `field`

Examples
--------
>>> REAL.zero, REAL.one
(0.0, 1.0)
>>> RATIONAL.from_float(0.5)
Fraction(1, 2)
>>> complex_over(RATIONAL).one
Complex(real=Fraction(1, 1), imag=Fraction(0, 1))
"""

import numbers
from dataclasses import dataclass
from fractions import Fraction
from functools import lru_cache
from typing import Any, Callable

import numpy as np
import sympy as sp

from qspace.algebra import functions
from qspace.algebra.complex_number import Complex


@dataclass(frozen=True, eq=False)
class ScalarField:
    """
    Descriptor of a scalar field element type.

    Attributes
    ----------
    name : str
        Unique field name; two descriptors are equal iff names match
    zero : scalar
        Additive identity
    one : scalar
        Multiplicative identity
    from_int : Callable[[int], scalar]
        Integer constructor
    from_float : Callable[[float], scalar]
        Real (double) constructor
    is_complex : bool
        Whether elements carry an imaginary part

    Examples
    --------
    >>> COMPLEX.from_int(3)
    (3+0j)
    >>> REAL.is_zero(0.0)
    True
    """

    name: str
    zero: Any
    one: Any
    from_int: Callable[[int], Any]
    from_float: Callable[[float], Any]
    is_complex: bool = False

    def is_zero(self, value: Any) -> bool:
        """Exact comparison against the additive identity."""
        return value == self.zero

    def conjugate(self, value: Any) -> Any:
        """Complex conjugate; identity for real fields."""
        if not self.is_complex:
            return value
        return functions.conjugate(value)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, ScalarField):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)

    def __repr__(self) -> str:
        return f"ScalarField({self.name!r})"


REAL = ScalarField("real", 0.0, 1.0, float, float)
COMPLEX = ScalarField("complex", 0j, 1 + 0j, complex, complex, is_complex=True)
RATIONAL = ScalarField("rational", Fraction(0), Fraction(1), Fraction, Fraction)
SYMBOLIC = ScalarField("symbolic", sp.Integer(0), sp.Integer(1), sp.Integer, sp.Float)


@lru_cache(maxsize=None)
def complex_over(field: ScalarField) -> ScalarField:
    """
    Field of qspace Complex numbers whose parts lie in `field`.

    Parameters
    ----------
    field : ScalarField
        Underlying (real) field

    Returns
    -------
    ScalarField
        Complex field named "complex[<field.name>]"

    Examples
    --------
    >>> complex_over(REAL).from_float(2.5)
    Complex(real=2.5, imag=0.0)
    """
    if field.is_complex:
        raise ValueError(f"Cannot build a complex field over complex field {field.name!r}")

    return ScalarField(
        f"complex[{field.name}]",
        Complex(field.zero, field.zero),
        Complex(field.one, field.zero),
        lambda n: Complex(field.from_int(n), field.zero),
        lambda x: Complex(field.from_float(x), field.zero),
        is_complex=True,
    )


def field_of(value: Any) -> ScalarField:
    """
    Infer the scalar field of a sample element.

    Parameters
    ----------
    value : scalar
        Sample element

    Returns
    -------
    ScalarField

    Raises
    ------
    TypeError
        If the element type is not recognised

    Examples
    --------
    >>> field_of(1.5) is REAL
    True
    >>> field_of(Complex(Fraction(1), Fraction(2))).name
    'complex[rational]'
    """
    if isinstance(value, Complex):
        return complex_over(field_of(value.real))
    if isinstance(value, sp.Basic):
        return SYMBOLIC
    if isinstance(value, Fraction):
        return RATIONAL
    if isinstance(value, numbers.Real):
        return REAL
    if isinstance(value, numbers.Complex):
        return COMPLEX
    raise TypeError(f"Cannot infer a scalar field for {type(value).__name__}")


def field_for_dtype(dtype: Any) -> ScalarField:
    """
    Scalar field matching a numpy dtype.

    Complex dtypes map to COMPLEX, everything numeric else to REAL.
    """
    if np.issubdtype(np.dtype(dtype), np.complexfloating):
        return COMPLEX
    return REAL
