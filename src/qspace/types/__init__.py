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
Type System
===========

Central import point for the type definitions used across qspace.

Module Organization
-------------------
- core: scalar, storage and derivative-function aliases
- protocols: algebraic capability protocols
- trajectories: integration result TypedDicts
"""

from .core import (
    DerivativeFunction,
    ElementList,
    ElementSequence,
    MatrixIndex,
    RealLike,
    RowLimits,
    ScalarLike,
)
from .protocols import (
    Addable,
    ClosedUnderScalarMultiplication,
    ComplexNumber,
    Dividable,
    HasAbs,
    HasAdditiveIdentity,
    HasConjugate,
    HasIntegerConstructor,
    HasMultiplicativeIdentity,
    LivesInVectorSpace,
    Multipliable,
    Negatable,
    OperatorLike,
    Scalar,
    Subtractable,
)
from .trajectories import IntegrationResult, StateTrajectory, TimePoints, TimeSpan

__all__ = [
    # core
    "DerivativeFunction",
    "ElementList",
    "ElementSequence",
    "MatrixIndex",
    "RealLike",
    "RowLimits",
    "ScalarLike",
    # protocols
    "Addable",
    "ClosedUnderScalarMultiplication",
    "ComplexNumber",
    "Dividable",
    "HasAbs",
    "HasAdditiveIdentity",
    "HasConjugate",
    "HasIntegerConstructor",
    "HasMultiplicativeIdentity",
    "LivesInVectorSpace",
    "Multipliable",
    "Negatable",
    "OperatorLike",
    "Scalar",
    "Subtractable",
    # trajectories
    "IntegrationResult",
    "StateTrajectory",
    "TimePoints",
    "TimeSpan",
]
