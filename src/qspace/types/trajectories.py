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
Integration Result Types

Defines the result structure returned by every integrator in
qspace.numerical_integration.

Design Note
-----------
Result types are TypedDict: plain dictionaries with documented keys, so
results are easy to inspect, serialize and extend with optional fields.

Usage
-----
>>> from qspace.types.trajectories import IntegrationResult
>>>
>>> result: IntegrationResult = integrator.integrate(y0, t_span=(0.0, 1.0))
>>> if not result["success"]:
...     print(result["message"])
>>> y_final = result["x"][-1]
"""

from typing import Any, List, Tuple

from typing_extensions import TypedDict

TimeSpan = Tuple[float, float]
"""
Integration interval (t_start, t_end).

Backward integration (t_end < t_start) is allowed by the adaptive driver.
"""

TimePoints = List[float]
"""Accepted time points, including the initial time."""

StateTrajectory = List[Any]
"""States at each accepted time point, same length as TimePoints."""


class IntegrationResult(TypedDict, total=False):
    """
    Result from an ODE integration.

    Attributes
    ----------
    t : TimePoints
        Accepted time points (T,). Always starts at t_start.
    x : StateTrajectory
        Integrand value at each time point (T,). x[-1] is the final state.
    success : bool
        True when the end time was reached without diagnostics
    message : str
        Human-readable status message
    nfev : int
        Number of derivative evaluations
    nsteps : int
        Number of accepted steps
    integration_time : float
        Wall-clock computation time in seconds
    solver : str
        Name of the integrator used

    Optional Fields
    ---------------
    nrejected : int
        Trial steps rejected for excess local error (adaptive only)
    h_next : float
        Suggested size of the next step (adaptive only)

    Examples
    --------
    >>> result = integrate(0.0, 1.0, 0.1, 1e-8, 1e-6, y, lambda t, y: -y)
    >>> result["success"]
    True
    >>> result["nsteps"] > 0
    True
    """

    t: TimePoints
    x: StateTrajectory
    success: bool
    message: str
    nfev: int
    nsteps: int
    integration_time: float
    solver: str
    nrejected: int
    h_next: float
