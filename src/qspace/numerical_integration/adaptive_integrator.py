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
Adaptive Cash-Karp Integration

Driving loop that advances an integrand from t_start to t_end with
quality-controlled Cash-Karp steps, adapting the step size to meet a
requested accuracy.

Algorithm
---------
Each iteration:
1. Evaluate dydx = f(t, y).
2. Build the error scale |y_i| + |h * dydx_i| + TINY.
3. Clamp h so the step does not overshoot t_end.
4. Take a quality-controlled step (see qspace.numerical_integration.cash_karp).
5. Stop when t_end is reached; otherwise continue with the suggested step.

Diagnostics
-----------
Step-size underflow, a suggested step at or below `min_step` and hitting
the iteration cap are numerical-quality problems, not contract
violations. Each issues a warning (subclasses of
qspace.errors.IntegrationWarning), stops the loop and is reported through
``success=False`` and ``message`` on the result. The state reached so far
is still returned, and still written back in place.

Backward integration (t_end < t_start) is supported.

Examples
--------
>>> y = np.array([1.0])
>>> result = integrate(0.0, 1.0, 0.1, 1e-8, 1e-8, y, lambda t, y: -y)
>>> y  # updated in place
array([0.36787944])
>>> result["success"]
True
"""

import math
import time
import warnings
from typing import Any, Optional

import numpy as np

from qspace.errors import StepSizeTooSmallWarning, StepSizeUnderflowWarning, TooManyStepsWarning
from qspace.numerical_integration.cash_karp import SAFETY, quality_controlled_step
from qspace.numerical_integration.integrands import IntegrandAdapter, resolve_integrand
from qspace.numerical_integration.integrator_base import IntegratorBase, StepMode
from qspace.types.core import DerivativeFunction, RealLike
from qspace.types.trajectories import IntegrationResult, TimeSpan

MAX_STEPS = 10000
TINY = 1.0e-30


def _as_python_scalar(value: Any) -> Any:
    """numpy scalars become Python scalars so they never broadcast over integrands."""
    if isinstance(value, np.generic):
        return value.item()
    return value


def integrate(
    t_start: RealLike,
    t_end: RealLike,
    initial_step: RealLike,
    min_step: RealLike,
    target_accuracy: float,
    state: Any,
    derivative: DerivativeFunction,
    adapter: Optional[IntegrandAdapter] = None,
    max_steps: int = MAX_STEPS,
    safety: float = SAFETY,
    tiny: float = TINY,
    in_place: bool = True,
) -> IntegrationResult:
    """
    Integrate dy/dt = derivative(t, y) from t_start to t_end.

    Parameters
    ----------
    t_start, t_end : float
        Integration interval; t_end < t_start integrates backwards
    initial_step : float
        First trial step; its sign is taken from the direction of integration
    min_step : float
        A suggested step with magnitude at or below this stops the loop
    target_accuracy : float
        Relative accuracy per step (eps)
    state : integrand
        Initial state. Mutable integrands (numpy arrays, lists, Vector,
        Matrix) are overwritten with the final state when `in_place` is True.
    derivative : Callable[[t, y], y]
        Right-hand side
    adapter : IntegrandAdapter, optional
        Integrand arithmetic; resolved from `state` when omitted
    max_steps : int
        Iteration cap (default 10000)
    safety : float
        Step-size damping factor (default 0.9)
    tiny : float
        Added to the error scale to avoid division by zero (default 1e-30)
    in_place : bool
        Write the final state back into `state` (default True)

    Returns
    -------
    IntegrationResult
        t, x (accepted times and states), success, message, nfev, nsteps,
        nrejected, integration_time, solver, h_next

    Raises
    ------
    ValueError
        If initial_step is zero or target_accuracy is not positive

    Warns
    -----
    StepSizeUnderflowWarning
        The step shrank until t + h == t
    StepSizeTooSmallWarning
        The suggested next step is not larger than min_step
    TooManyStepsWarning
        max_steps iterations did not reach t_end
    """
    if initial_step == 0:
        raise ValueError("initial_step must be non-zero")
    if target_accuracy <= 0:
        raise ValueError(f"target_accuracy must be positive, got {target_accuracy}")

    t_start, t_end = _as_python_scalar(t_start), _as_python_scalar(t_end)
    initial_step, min_step = _as_python_scalar(initial_step), _as_python_scalar(min_step)
    adapter = adapter if adapter is not None else resolve_integrand(state)
    start_time = time.time()

    nfev = 0

    def counted(t: RealLike, y: Any) -> Any:
        nonlocal nfev
        nfev += 1
        return derivative(t, y)

    t = t_start
    y = state
    h = math.copysign(abs(initial_step), t_end - t_start)
    t_points = [t]
    trajectory = [adapter.copy(state)]
    nsteps = 0
    nrejected = 0
    success = False
    message = ""

    if t_end == t_start:
        success = True
        message = "Empty interval, nothing to integrate"
    else:
        for _ in range(max_steps):
            dydx = counted(t, y)
            y_scale = adapter.magnitudes(y) + adapter.magnitudes(dydx) * abs(h) + tiny

            if (t + h - t_end) * (t + h - t_start) > 0.0:
                h = t_end - t

            outcome = quality_controlled_step(
                t, y, dydx, h, target_accuracy, y_scale, counted, adapter, safety
            )
            nrejected += outcome.n_rejected

            if outcome.underflow:
                message = f"Step size underflow at t={t!r}"
                warnings.warn(message, StepSizeUnderflowWarning, stacklevel=2)
                break

            t, y = outcome.t, outcome.y
            nsteps += 1

            if (t - t_end) * (t_end - t_start) >= 0.0:
                t = t_end
                t_points.append(t)
                trajectory.append(y)
                success = True
                message = "Integration successful"
                break

            t_points.append(t)
            trajectory.append(y)

            if abs(outcome.h_next) <= abs(min_step):
                message = (
                    f"Step size too small at t={t!r}: suggested {outcome.h_next!r}, "
                    f"minimum {min_step!r}"
                )
                warnings.warn(message, StepSizeTooSmallWarning, stacklevel=2)
                break
            h = outcome.h_next
        else:
            message = f"Too many steps ({max_steps}) before reaching t={t_end!r}; stopped at t={t!r}"
            warnings.warn(message, TooManyStepsWarning, stacklevel=2)

    if in_place:
        adapter.assign(state, y)

    result: IntegrationResult = {
        "t": t_points,
        "x": trajectory,
        "success": success,
        "message": message,
        "nfev": nfev,
        "nsteps": nsteps,
        "nrejected": nrejected,
        "integration_time": time.time() - start_time,
        "solver": "Cash-Karp RK45",
        "h_next": h,
    }
    return result


class CashKarpIntegrator(IntegratorBase):
    """
    Adaptive fifth-order Cash-Karp integrator.

    Wraps integrate() in the IntegratorBase interface. Unlike the
    functional form it never mutates the initial state.

    Parameters
    ----------
    derivative : Callable[[t, y], y]
        Right-hand side
    dt : float, optional
        Initial step guess (default 0.01)
    accuracy : float
        Target relative accuracy per step (default 1e-6)
    adapter : IntegrandAdapter, optional
        Integrand arithmetic
    **options
        min_step (default 0.0), max_steps (default 10000),
        safety (default 0.9), tiny (default 1e-30)

    Examples
    --------
    >>> integrator = CashKarpIntegrator(lambda t, y: -y, dt=0.1, accuracy=1e-8)
    >>> result = integrator.integrate(np.array([1.0]), (0.0, 1.0))
    >>> result["success"]
    True
    """

    def __init__(
        self,
        derivative: DerivativeFunction,
        dt: Optional[RealLike] = None,
        accuracy: float = 1e-6,
        adapter: Optional[IntegrandAdapter] = None,
        **options,
    ):
        super().__init__(derivative, dt, StepMode.ADAPTIVE, adapter, **options)
        self.accuracy = accuracy
        self.safety = options.get("safety", SAFETY)
        self.tiny = options.get("tiny", TINY)

    def step(self, t: RealLike, y: Any, dt: Optional[RealLike] = None) -> Any:
        """
        Advance y from t to t + dt with adaptive sub-steps.

        Returns the final state; y itself is not modified.
        """
        dt = dt if dt is not None else self.dt
        result = self.integrate(y, (t, t + dt))
        return result["x"][-1]

    def integrate(self, y0: Any, t_span: TimeSpan) -> IntegrationResult:
        t0, tf = t_span
        result = integrate(
            t0,
            tf,
            self.dt,
            self.min_step,
            self.accuracy,
            y0,
            self._evaluate_derivative,
            adapter=self._adapter_for(y0),
            max_steps=self.max_steps,
            safety=self.safety,
            tiny=self.tiny,
            in_place=False,
        )
        self._stats["total_steps"] += result["nsteps"]
        self._stats["total_time"] += result["integration_time"]
        result["solver"] = self.name
        return result

    @property
    def name(self) -> str:
        return "Cash-Karp RK45 (Adaptive)"
