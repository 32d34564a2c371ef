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
Scalar Algebra
==============

Scalar fields, the generic Complex type and capability-gated functions.

>>> from qspace.algebra import Complex, REAL, complex_over, power
"""

from .complex_number import Complex, make_complex_array
from .fields import (
    COMPLEX,
    RATIONAL,
    REAL,
    SYMBOLIC,
    ScalarField,
    complex_over,
    field_for_dtype,
    field_of,
)
from .functions import atan2, conjugate, cos, exp, magnitude, sin, sqrt
from .scalars import additive_identity, multiplicative_identity, power

__all__ = [
    "Complex",
    "make_complex_array",
    "ScalarField",
    "REAL",
    "COMPLEX",
    "RATIONAL",
    "SYMBOLIC",
    "complex_over",
    "field_of",
    "field_for_dtype",
    "power",
    "additive_identity",
    "multiplicative_identity",
    "sqrt",
    "exp",
    "sin",
    "cos",
    "atan2",
    "magnitude",
    "conjugate",
]
