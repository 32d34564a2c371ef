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
Capability-Gated Standard Functions

Square roots, exponentials and trigonometric functions are not part of the
Scalar contract: an element type either provides them or it does not. The
functions here dispatch on what the value supports:

- sympy expressions      -> sympy functions (exact/symbolic)
- real numbers           -> math
- builtin/numpy complex  -> cmath
- anything else          -> a same-named method on the value's type
                            (e.g. Complex.sqrt, Complex.exp)

A value offering none of these raises TypeError naming the missing
capability, so generic code fails at the call that needs the capability.

Examples
--------
>>> sqrt(4.0)
2.0
>>> sqrt(Complex(-4.0, 0.0))
Complex(real=0.0, imag=2.0)  # approximately
"""

import cmath
import math
import numbers
from typing import Any, Callable

import sympy as sp


def _dispatch(
    name: str,
    x: Any,
    real_fn: Callable[[Any], Any],
    complex_fn: Callable[[Any], Any],
    symbolic_fn: Callable[[Any], Any],
) -> Any:
    if isinstance(x, sp.Basic):
        return symbolic_fn(x)
    if isinstance(x, numbers.Real):
        return real_fn(x)
    if isinstance(x, numbers.Complex):
        return complex_fn(x)

    method = getattr(type(x), name, None)
    if method is None:
        raise TypeError(f"{type(x).__name__} does not provide {name}()")
    return method(x)


def sqrt(x: Any) -> Any:
    """Square root (Has_Sqrt capability)."""
    return _dispatch("sqrt", x, math.sqrt, cmath.sqrt, sp.sqrt)


def exp(x: Any) -> Any:
    """Exponential (Has_Exp capability)."""
    return _dispatch("exp", x, math.exp, cmath.exp, sp.exp)


def sin(x: Any) -> Any:
    """Sine (Has_Sin capability)."""
    return _dispatch("sin", x, math.sin, cmath.sin, sp.sin)


def cos(x: Any) -> Any:
    """Cosine (Has_Cos capability)."""
    return _dispatch("cos", x, math.cos, cmath.cos, sp.cos)


def atan2(y: Any, x: Any) -> Any:
    """
    Two-argument arctangent of y/x (Has_Atan capability).

    Only defined for real-valued arguments.
    """
    if isinstance(y, sp.Basic) or isinstance(x, sp.Basic):
        return sp.atan2(y, x)
    if isinstance(y, numbers.Real) and isinstance(x, numbers.Real):
        return math.atan2(y, x)
    raise TypeError(
        f"atan2() requires real arguments, got {type(y).__name__}, {type(x).__name__}"
    )


def magnitude(x: Any) -> Any:
    """
    Absolute value in the underlying real field (Has_Abs capability).

    Complex values return their modulus.
    """
    if isinstance(x, sp.Basic):
        return sp.Abs(x)
    try:
        return abs(x)
    except TypeError:
        raise TypeError(f"{type(x).__name__} does not provide abs()") from None


def conjugate(x: Any) -> Any:
    """
    Complex conjugate.

    Real element types (float, int, Fraction) conjugate to themselves; any
    value without a conjugate() method is treated as real.
    """
    method = getattr(x, "conjugate", None)
    if method is None:
        return x
    return method()
