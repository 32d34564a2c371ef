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
Integrator Base - Abstract Interface for Numerical Integration

Provides a unified interface for integrating dy/dt = f(t, y) where the
integrand y is any type supported by an IntegrandAdapter (numpy arrays,
sequences, scalars, qspace vectors and matrices, or user types).

This module defines the abstract base class all integrators implement,
along with the StepMode enum for specifying integration behavior.

Design Note
-----------
Results are IntegrationResult TypedDicts from qspace.types.trajectories.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, Optional

from qspace.numerical_integration.integrands import IntegrandAdapter, resolve_integrand
from qspace.types.core import DerivativeFunction, RealLike
from qspace.types.trajectories import IntegrationResult, TimeSpan


class StepMode(Enum):
    """
    Integration step mode.

    Attributes
    ----------
    FIXED : str
        Fixed time step - integrator uses constant dt
    ADAPTIVE : str
        Adaptive time step - integrator adjusts dt from error estimates
    """

    FIXED = "fixed"
    ADAPTIVE = "adaptive"


class IntegratorBase(ABC):
    """
    Abstract base class for numerical integrators.

    All integrators must implement:
    - step(): Single integration step
    - integrate(): Integration over an interval
    - name: Integrator name for display

    Parameters
    ----------
    derivative : Callable[[t, y], y]
        Right-hand side f(t, y)
    dt : float, optional
        FIXED mode: required constant step.
        ADAPTIVE mode: initial step guess (default 0.01).
    step_mode : StepMode
        FIXED or ADAPTIVE stepping
    adapter : IntegrandAdapter, optional
        Integrand arithmetic used for every call. When omitted, an adapter
        is resolved from each call's state, so one integrator can serve
        different integrand types.
    **options : dict
        Integrator-specific options:
        - max_steps : int
            Iteration cap (adaptive only, default: 10000)
        - min_step : float
            Step size below which a diagnostic is issued (adaptive only)

    Raises
    ------
    ValueError
        If FIXED mode is specified without dt, or dt is zero

    Examples
    --------
    >>> integrator = RK4Integrator(lambda t, y: -y, dt=0.01)
    >>> result = integrator.integrate(np.array([1.0]), t_span=(0.0, 1.0))
    >>> result["x"][-1]
    array([0.36787944])
    """

    def __init__(
        self,
        derivative: DerivativeFunction,
        dt: Optional[RealLike] = None,
        step_mode: StepMode = StepMode.FIXED,
        adapter: Optional[IntegrandAdapter] = None,
        **options,
    ):
        self.derivative = derivative
        self.dt = dt
        self.step_mode = step_mode
        self.adapter = adapter
        self.options = options

        if step_mode == StepMode.FIXED and dt is None:
            raise ValueError(
                "Time step dt is required for FIXED step mode. Specify dt in constructor."
            )
        if step_mode == StepMode.ADAPTIVE and dt is None:
            self.dt = 0.01
        if self.dt == 0:
            raise ValueError("Time step dt must be non-zero")

        self.max_steps = options.get("max_steps", 10000)
        self.min_step = options.get("min_step", 0.0)

        self._stats = {
            "total_steps": 0,
            "total_fev": 0,
            "total_time": 0.0,
        }

    @abstractmethod
    def step(self, t: RealLike, y: Any, dt: Optional[RealLike] = None) -> Any:
        """
        Take one integration step: y(t) -> y(t + dt).

        Parameters
        ----------
        t : float
            Current time
        y : integrand
            Current state (not modified)
        dt : float, optional
            Step size (uses self.dt if None)

        Returns
        -------
        integrand
            State at t + dt
        """
        pass

    @abstractmethod
    def integrate(self, y0: Any, t_span: TimeSpan) -> IntegrationResult:
        """
        Integrate over a time interval.

        Parameters
        ----------
        y0 : integrand
            Initial state
        t_span : Tuple[float, float]
            Integration interval (t_start, t_end)

        Returns
        -------
        IntegrationResult
            TypedDict with t, x, success, message, nfev, nsteps,
            integration_time and solver
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable integrator name."""
        pass

    # ========================================================================
    # Common Utilities (Shared by All Integrators)
    # ========================================================================

    def _adapter_for(self, y: Any) -> IntegrandAdapter:
        """Configured adapter, or one resolved from this call's integrand."""
        if self.adapter is not None:
            return self.adapter
        return resolve_integrand(y)

    def _evaluate_derivative(self, t: RealLike, y: Any) -> Any:
        """Evaluate f(t, y), counting function evaluations."""
        self._stats["total_fev"] += 1
        return self.derivative(t, y)

    def get_stats(self) -> Dict[str, Any]:
        """
        Get integration statistics.

        Returns
        -------
        dict
            Statistics with keys:
            - 'total_steps': Total accepted steps
            - 'total_fev': Total derivative evaluations
            - 'total_time': Total integration time
            - 'avg_fev_per_step': Average evaluations per step

        Examples
        --------
        >>> integrator.get_stats()['total_steps']
        100
        """
        avg_fev = self._stats["total_fev"] / max(1, self._stats["total_steps"])
        return {
            **self._stats,
            "avg_fev_per_step": avg_fev,
        }

    def reset_stats(self):
        """Reset integration statistics to zero."""
        self._stats["total_steps"] = 0
        self._stats["total_fev"] = 0
        self._stats["total_time"] = 0.0

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(dt={self.dt}, mode={self.step_mode.value})"

    def __str__(self) -> str:
        return f"{self.name} (dt={self.dt:.4g})"
