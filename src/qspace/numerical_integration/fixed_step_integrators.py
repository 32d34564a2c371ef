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
Fixed-Step Integrators

Implements classic fixed time-step integration methods:
- Explicit Euler (1st order)
- Classical Runge-Kutta (4th order)

The single-step kernels euler_step and runge_kutta_step are plain
functions over an IntegrandAdapter, so they work for any integrand type.
Both accept a precomputed derivative `dydx` at (t, y), which the adaptive
driver uses to avoid a redundant evaluation.
"""

import time
from typing import Any, Optional

import numpy as np

from qspace.numerical_integration.integrands import IntegrandAdapter, resolve_integrand
from qspace.numerical_integration.integrator_base import IntegratorBase, StepMode
from qspace.types.core import DerivativeFunction, RealLike
from qspace.types.trajectories import IntegrationResult, TimeSpan


def euler_step(
    t: RealLike,
    h: RealLike,
    y: Any,
    derivative: DerivativeFunction,
    adapter: Optional[IntegrandAdapter] = None,
    dydx: Any = None,
) -> Any:
    """
    One explicit Euler step: y + h * f(t, y).

    Examples
    --------
    >>> euler_step(0.0, 0.1, 1.0, lambda t, y: -y)
    0.9
    """
    adapter = adapter if adapter is not None else resolve_integrand(y)
    if dydx is None:
        dydx = derivative(t, y)
    return adapter.add(y, adapter.scale(h, dydx))


def runge_kutta_step(
    t: RealLike,
    h: RealLike,
    y: Any,
    derivative: DerivativeFunction,
    adapter: Optional[IntegrandAdapter] = None,
    dydx: Any = None,
) -> Any:
    """
    One classical fourth-order Runge-Kutta step.

    Algorithm (four derivative evaluations, three when dydx is supplied):
        k1 = f(t, y)
        k2 = f(t + h/2, y + h/2 k1)
        k3 = f(t + h/2, y + h/2 k2)
        k4 = f(t + h, y + h k3)
        y_next = y + h/6 (k1 + 2 k2 + 2 k3 + k4)
    """
    adapter = adapter if adapter is not None else resolve_integrand(y)
    if dydx is None:
        dydx = derivative(t, y)

    hh = h / 2
    h6 = h / 6
    t_half = t + hh

    k2 = derivative(t_half, adapter.combine(y, (hh, dydx)))
    k3 = derivative(t_half, adapter.combine(y, (hh, k2)))
    k4 = derivative(t + h, adapter.combine(y, (h, k3)))

    middle = adapter.add(k2, k3)
    total = adapter.add(adapter.add(dydx, k4), adapter.add(middle, middle))
    return adapter.combine(y, (h6, total))


class _FixedStepIntegrator(IntegratorBase):
    """Shared uniform-grid integrate() for fixed-step methods."""

    _kernel = None

    def __init__(
        self,
        derivative: DerivativeFunction,
        dt: RealLike,
        adapter: Optional[IntegrandAdapter] = None,
        **options,
    ):
        super().__init__(derivative, dt, StepMode.FIXED, adapter, **options)

    def step(self, t: RealLike, y: Any, dt: Optional[RealLike] = None) -> Any:
        dt = dt if dt is not None else self.dt
        y_next = type(self)._kernel(t, dt, y, self._evaluate_derivative, self._adapter_for(y))
        self._stats["total_steps"] += 1
        return y_next

    def integrate(self, y0: Any, t_span: TimeSpan) -> IntegrationResult:
        """
        Integrate on the uniform grid t_start + k * dt, ending exactly at t_end.

        The grid is spread evenly over the interval, so the effective step is
        at most dt.
        """
        start_time = time.time()
        fev_before = self._stats["total_fev"]

        t0, tf = t_span
        num_steps = max(1, int(np.ceil(abs(tf - t0) / abs(self.dt))))
        t_points = np.linspace(t0, tf, num_steps + 1).tolist()

        trajectory = [y0]
        y = y0
        for i in range(num_steps):
            y = self.step(t_points[i], y, dt=t_points[i + 1] - t_points[i])
            trajectory.append(y)

        elapsed = time.time() - start_time
        self._stats["total_time"] += elapsed

        result: IntegrationResult = {
            "t": t_points,
            "x": trajectory,
            "success": True,
            "message": f"{self.name} integration completed",
            "nfev": self._stats["total_fev"] - fev_before,
            "nsteps": num_steps,
            "integration_time": elapsed,
            "solver": self.name,
        }
        return result


class ExplicitEulerIntegrator(_FixedStepIntegrator):
    """
    Explicit Euler integrator (Forward Euler).

    First-order method: y_{k+1} = y_k + dt * f(t_k, y_k)

    Characteristics:
    - Order: 1 (error ∝ dt)
    - Stability: Conditionally stable (small dt required)
    - Function evaluations: 1 per step

    Examples
    --------
    >>> integrator = ExplicitEulerIntegrator(lambda t, y: -y, dt=0.001)
    >>> result = integrator.integrate(np.array([1.0]), (0.0, 1.0))
    >>> result["nsteps"]
    1000
    """

    _kernel = staticmethod(euler_step)

    @property
    def name(self) -> str:
        return "Explicit Euler"


class RK4Integrator(_FixedStepIntegrator):
    """
    Classical fourth-order Runge-Kutta integrator.

    Characteristics:
    - Order: 4 (error ∝ dt⁴)
    - Function evaluations: 4 per step

    Examples
    --------
    >>> integrator = RK4Integrator(lambda t, y: -y, dt=0.1)
    >>> y1 = integrator.step(0.0, 1.0)
    """

    _kernel = staticmethod(runge_kutta_step)

    @property
    def name(self) -> str:
        return "RK4"


def create_fixed_step_integrator(
    method: str,
    derivative: DerivativeFunction,
    dt: float,
    adapter: Optional[IntegrandAdapter] = None,
) -> IntegratorBase:
    """
    Quick factory for fixed-step integrators.

    Parameters
    ----------
    method : str
        'euler' or 'rk4'
    derivative : Callable[[t, y], y]
        Right-hand side
    dt : float
        Time step
    adapter : IntegrandAdapter, optional
        Integrand arithmetic

    Raises
    ------
    ValueError
        If the method is unknown

    Examples
    --------
    >>> integrator = create_fixed_step_integrator('rk4', lambda t, y: -y, dt=0.01)
    """
    method_map = {
        "euler": ExplicitEulerIntegrator,
        "rk4": RK4Integrator,
    }

    if method not in method_map:
        raise ValueError(f"Unknown method '{method}'. Choose from: {list(method_map.keys())}")

    return method_map[method](derivative, dt, adapter)


__all__ = [
    "euler_step",
    "runge_kutta_step",
    "ExplicitEulerIntegrator",
    "RK4Integrator",
    "create_fixed_step_integrator",
]
