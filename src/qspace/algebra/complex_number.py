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
Complex Numbers over an Arbitrary Scalar Field

Complex(real, imag) works over any underlying scalar field whose elements
support + - * / and unary minus: floats, Fractions, sympy expressions, etc.
All arithmetic is derived from the real and imaginary parts.

Capability-gated extensions
---------------------------
- modulus   requires sqrt on the underlying field
- argument  requires atan2 on the underlying field
- exp       requires exp, sin and cos on the underlying field

Mixed arithmetic
----------------
A plain scalar of the underlying field (or a builtin complex) can appear on
either side of + - * /, so `3 + 2 * i` builds Complex(3, 2) when `i` is a
Complex.

Examples
--------
>>> i = Complex(0.0, 1.0)
>>> i * i
Complex(real=-1.0, imag=0.0)
>>> (3.0 + 4.0 * i).modulus
5.0
>>> from fractions import Fraction
>>> Complex(Fraction(1, 2), Fraction(1, 3)).conjugate()
Complex(real=Fraction(1, 2), imag=Fraction(-1, 3))
"""

import numbers
from typing import Any, Iterable, List

import sympy as sp

from qspace.algebra import functions
from qspace.algebra.scalars import power


def _is_plain_scalar(value: Any) -> bool:
    return isinstance(value, (numbers.Real, sp.Basic))


class Complex:
    """
    Complex number with parts drawn from an underlying scalar field.

    Instances are immutable value types.

    Parameters
    ----------
    real : scalar
        Real part
    imag : scalar, optional
        Imaginary part. Defaults to the zero of the real part's field.

    Examples
    --------
    >>> z = Complex(3.0, 2.0)
    >>> z.conjugate()
    Complex(real=3.0, imag=-2.0)
    >>> z / 2.0
    Complex(real=1.5, imag=1.0)
    """

    __slots__ = ("_real", "_imag")

    # numpy scalars and arrays defer to the reflected operators below
    __array_ufunc__ = None

    def __init__(self, real: Any, imag: Any = None):
        if imag is None:
            imag = real * 0
        self._real = real
        self._imag = imag

    @property
    def real(self) -> Any:
        return self._real

    @property
    def imag(self) -> Any:
        return self._imag

    # ========================================================================
    # Construction
    # ========================================================================

    @classmethod
    def from_polar(cls, modulus: Any, argument: Any) -> "Complex":
        """Build modulus * (cos(argument) + i sin(argument))."""
        return cls(modulus * functions.cos(argument), modulus * functions.sin(argument))

    @classmethod
    def exp(cls, z: Any) -> "Complex":
        """
        Complex exponential.

        Accepts a Complex or a plain scalar of the underlying field.
        """
        if not isinstance(z, Complex):
            return cls(functions.exp(z))
        real_exp = functions.exp(z.real)
        return cls(real_exp * functions.cos(z.imag), real_exp * functions.sin(z.imag))

    @classmethod
    def sqrt(cls, z: "Complex") -> "Complex":
        """Principal square root."""
        return cls.from_polar(functions.sqrt(z.modulus), z.argument / 2)

    # ========================================================================
    # Derived Quantities
    # ========================================================================

    def conjugate(self) -> "Complex":
        return Complex(self._real, -self._imag)

    @property
    def norm(self) -> Any:
        """Squared modulus |z|^2 (no sqrt required)."""
        return self._real * self._real + self._imag * self._imag

    @property
    def modulus(self) -> Any:
        return functions.sqrt(self.norm)

    @property
    def argument(self) -> Any:
        return functions.atan2(self._imag, self._real)

    def __abs__(self) -> Any:
        return self.modulus

    # ========================================================================
    # Arithmetic
    # ========================================================================

    @staticmethod
    def _lift(other: Any) -> Any:
        if isinstance(other, Complex):
            return other
        if isinstance(other, numbers.Complex):
            return Complex(other.real, other.imag)
        return None

    def __add__(self, other: Any) -> "Complex":
        if _is_plain_scalar(other):
            return Complex(self._real + other, self._imag)
        rhs = self._lift(other)
        if rhs is None:
            return NotImplemented
        return Complex(self._real + rhs.real, self._imag + rhs.imag)

    def __radd__(self, other: Any) -> "Complex":
        if _is_plain_scalar(other):
            return Complex(other + self._real, self._imag)
        lhs = self._lift(other)
        if lhs is None:
            return NotImplemented
        return lhs + self

    def __sub__(self, other: Any) -> "Complex":
        if _is_plain_scalar(other):
            return Complex(self._real - other, self._imag)
        rhs = self._lift(other)
        if rhs is None:
            return NotImplemented
        return Complex(self._real - rhs.real, self._imag - rhs.imag)

    def __rsub__(self, other: Any) -> "Complex":
        if _is_plain_scalar(other):
            return Complex(other - self._real, -self._imag)
        lhs = self._lift(other)
        if lhs is None:
            return NotImplemented
        return lhs - self

    def __neg__(self) -> "Complex":
        return Complex(-self._real, -self._imag)

    def __pos__(self) -> "Complex":
        return self

    def __mul__(self, other: Any) -> "Complex":
        if _is_plain_scalar(other):
            return Complex(self._real * other, self._imag * other)
        rhs = self._lift(other)
        if rhs is None:
            return NotImplemented
        return Complex(
            self._real * rhs.real - self._imag * rhs.imag,
            self._real * rhs.imag + self._imag * rhs.real,
        )

    def __rmul__(self, other: Any) -> "Complex":
        if _is_plain_scalar(other):
            return Complex(other * self._real, other * self._imag)
        lhs = self._lift(other)
        if lhs is None:
            return NotImplemented
        return lhs * self

    def __truediv__(self, other: Any) -> "Complex":
        if _is_plain_scalar(other):
            return Complex(self._real / other, self._imag / other)
        rhs = self._lift(other)
        if rhs is None:
            return NotImplemented
        denominator = rhs.real * rhs.real + rhs.imag * rhs.imag
        return Complex(
            (self._real * rhs.real + self._imag * rhs.imag) / denominator,
            (self._imag * rhs.real - self._real * rhs.imag) / denominator,
        )

    def __rtruediv__(self, other: Any) -> "Complex":
        if _is_plain_scalar(other):
            return Complex(other, other * 0) / self
        lhs = self._lift(other)
        if lhs is None:
            return NotImplemented
        return lhs / self

    def __pow__(self, n: int) -> "Complex":
        if not isinstance(n, numbers.Integral):
            return NotImplemented
        one = Complex(self._real * 0 + 1, self._imag * 0)
        if n < 0:
            return one / power(self, -n, one)
        return power(self, n, one)

    # ========================================================================
    # Comparison and Conversion
    # ========================================================================

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, Complex):
            return self._real == other.real and self._imag == other.imag
        if isinstance(other, numbers.Complex) and not _is_plain_scalar(other):
            return self._real == other.real and self._imag == other.imag
        if _is_plain_scalar(other):
            return self._imag == 0 and self._real == other
        return NotImplemented

    def __hash__(self) -> int:
        if self._imag == 0:
            return hash(self._real)
        return hash((self._real, self._imag))

    def __complex__(self) -> complex:
        return complex(float(self._real), float(self._imag))

    def __repr__(self) -> str:
        return f"Complex(real={self._real!r}, imag={self._imag!r})"

    def __str__(self) -> str:
        return f"{self._real} + {self._imag} i"


def make_complex_array(values: Iterable[Any]) -> List[Complex]:
    """
    Lift real values to Complex values with zero imaginary part.

    Examples
    --------
    >>> make_complex_array([1.0, 2.0])
    [Complex(real=1.0, imag=0.0), Complex(real=2.0, imag=0.0)]
    """
    return [Complex(value) for value in values]
