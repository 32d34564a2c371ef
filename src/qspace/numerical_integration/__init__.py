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
Numerical Integration
=====================

Generic ODE integrators for any integrand type with an IntegrandAdapter.

Fixed step:  ExplicitEulerIntegrator, RK4Integrator
Adaptive:    CashKarpIntegrator, integrate()

>>> from qspace.numerical_integration import integrate
>>> y = np.array([1.0])
>>> integrate(0.0, 1.0, 0.1, 1e-8, 1e-8, y, lambda t, y: -y)["success"]
True
"""

from .adaptive_integrator import MAX_STEPS, TINY, CashKarpIntegrator, integrate
from .cash_karp import StepOutcome, cash_karp_step, quality_controlled_step
from .fixed_step_integrators import (
    ExplicitEulerIntegrator,
    RK4Integrator,
    create_fixed_step_integrator,
    euler_step,
    runge_kutta_step,
)
from .integrands import (
    ArrayIntegrand,
    ElementsIntegrand,
    IntegrandAdapter,
    ScalarIntegrand,
    SequenceIntegrand,
    resolve_integrand,
)
from .integrator_base import IntegratorBase, StepMode

__all__ = [
    "IntegratorBase",
    "StepMode",
    "IntegrandAdapter",
    "ArrayIntegrand",
    "SequenceIntegrand",
    "ScalarIntegrand",
    "ElementsIntegrand",
    "resolve_integrand",
    "euler_step",
    "runge_kutta_step",
    "ExplicitEulerIntegrator",
    "RK4Integrator",
    "create_fixed_step_integrator",
    "cash_karp_step",
    "quality_controlled_step",
    "StepOutcome",
    "CashKarpIntegrator",
    "integrate",
    "MAX_STEPS",
    "TINY",
]
