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
Core Type Definitions

Fundamental type aliases shared across the algebraic core:
- Scalar-field elements
- Flat, row-major element sequences
- Matrix indices
- Derivative-function signatures for the integration engine

These aliases carry semantic meaning only; they are not enforced at runtime.

Usage
-----
>>> from qspace.types.core import ScalarLike, ElementSequence
>>>
>>> def trace(elements: ElementSequence, dimension: int) -> ScalarLike:
...     return sum(elements[i * dimension + i] for i in range(dimension))
"""

from typing import Any, Callable, List, Sequence, Tuple, TypeVar, Union

import numpy as np

# ============================================================================
# Scalar Types
# ============================================================================

ScalarLike = Any
"""
Element of a scalar field.

Any value implementing the arithmetic capabilities required by the
operation at hand (see qspace.types.protocols). Typical choices:

- float / int (real field)
- complex (builtin complex field)
- fractions.Fraction (exact rationals)
- sympy expressions (symbolic field)
- qspace.algebra.complex_number.Complex over any of the above
"""

RealLike = Union[float, int, np.floating, np.integer]
"""
Real number used for time, step sizes and tolerances.
"""

S = TypeVar("S")
"""Generic scalar-field element."""

Y = TypeVar("Y")
"""Generic integrand (ODE state) type."""

# ============================================================================
# Storage and Indexing
# ============================================================================

ElementSequence = Sequence[ScalarLike]
"""
Flat element storage.

Vectors hold `dimension` elements; matrices hold `dimension**2`
elements in row-major order (index = row * dimension + column).
"""

ElementList = List[ScalarLike]
"""Mutable flat element storage."""

MatrixIndex = Tuple[int, int]
"""(row, column) index into a square matrix."""

RowLimits = Tuple[int, int]
"""Inclusive (lower, upper) row range of a matrix diagonal."""

# ============================================================================
# Integration Engine Signatures
# ============================================================================

DerivativeFunction = Callable[[RealLike, Y], Y]
"""
Right-hand side of dy/dt = f(t, y).

Takes the independent variable and the current state, returns a value of
the same integrand type as the state.

Examples
--------
>>> decay: DerivativeFunction = lambda t, y: -y
"""
