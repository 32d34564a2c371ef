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
Error Taxonomy

Two classes of failure exist in the algebraic core:

1. Contract violations (fail fast)
   Combining operands from different spaces, constructing a vector or
   matrix with the wrong number of elements, malformed tensor products or
   normalizing a zero vector. These raise immediately at the call site.

2. Numerical-quality diagnostics (non-fatal)
   Step size underflow, step size below the requested minimum, or too
   many steps in the adaptive integrator. These are issued as warnings
   and recorded on the IntegrationResult, and the best available state
   is still returned.

Out-of-range indices raise the builtin IndexError.

Examples
--------
>>> from qspace.errors import SpaceMismatchError
>>> try:
...     u + w  # vectors from different spaces
... except SpaceMismatchError as e:
...     print(e)
"""


class QSpaceError(Exception):
    """Base class for all contract violations raised by qspace."""


class SpaceMismatchError(QSpaceError, ValueError):
    """Operands do not live in the same vector space."""


class DimensionMismatchError(QSpaceError, ValueError):
    """Element count does not match the dimension of the space."""


class TensorProductError(QSpaceError, ValueError):
    """Malformed tensor product space or operands not drawn from its factors."""


class DegenerateNormError(QSpaceError, ZeroDivisionError):
    """Attempted to normalize a vector whose norm is zero."""


# ============================================================================
# Integration Diagnostics
# ============================================================================


class IntegrationWarning(RuntimeWarning):
    """Base category for non-fatal adaptive integration diagnostics."""


class StepSizeUnderflowWarning(IntegrationWarning):
    """The trial step no longer changes the independent variable."""


class StepSizeTooSmallWarning(IntegrationWarning):
    """The suggested next step fell below the requested minimum step."""


class TooManyStepsWarning(IntegrationWarning):
    """The driving loop hit its iteration cap before reaching the end time."""
