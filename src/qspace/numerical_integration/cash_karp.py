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
Cash-Karp Embedded Runge-Kutta Step

Fifth-order Runge-Kutta step with an embedded fourth-order solution whose
difference serves as the local truncation error estimate, plus the
quality-controlled step that retries with a smaller step until the error
meets the requested accuracy.

Step Control Constants
----------------------
SAFETY  0.9      damping applied to every step-size prediction
PGROW   -0.2     exponent used to grow the step after a success
PSHRNK  -0.25    exponent used to shrink the step after a failure
ERRCON  1.89e-4  (5 / SAFETY) ** (1 / PGROW): below this error the step
                 grows by the maximum factor of 5
A rejected step shrinks by at most a factor of 10.

References
----------
Cash, J.R. and Karp, A.H. 1990, ACM Transactions on Mathematical
Software, vol. 16, pp. 201-222.
"""

from typing import Any, NamedTuple, Optional, Tuple

import numpy as np

from qspace.numerical_integration.integrands import IntegrandAdapter, resolve_integrand
from qspace.types.core import DerivativeFunction, RealLike

SAFETY = 0.9
PGROW = -0.2
PSHRNK = -0.25
ERRCON = 1.89e-4
MAX_GROWTH = 5.0
MAX_SHRINK = 10.0

# Butcher tableau
A2, A3, A4, A5, A6 = 0.2, 0.3, 0.6, 1.0, 0.875
B21 = 0.2
B31, B32 = 3.0 / 40.0, 9.0 / 40.0
B41, B42, B43 = 0.3, -0.9, 1.2
B51, B52, B53, B54 = -11.0 / 54.0, 2.5, -70.0 / 27.0, 35.0 / 27.0
B61, B62, B63, B64, B65 = (
    1631.0 / 55296.0,
    175.0 / 512.0,
    575.0 / 13824.0,
    44275.0 / 110592.0,
    253.0 / 4096.0,
)

# Fifth-order weights (c2 = c5 = 0)
C1, C3, C4, C6 = 37.0 / 378.0, 250.0 / 621.0, 125.0 / 594.0, 512.0 / 1771.0

# Fifth minus embedded fourth-order weights
DC1 = C1 - 2825.0 / 27648.0
DC3 = C3 - 18575.0 / 48384.0
DC4 = C4 - 13525.0 / 55296.0
DC5 = -277.0 / 14336.0
DC6 = C6 - 0.25


def cash_karp_step(
    t: RealLike,
    h: RealLike,
    y: Any,
    dydx: Any,
    derivative: DerivativeFunction,
    adapter: Optional[IntegrandAdapter] = None,
) -> Tuple[Any, Any]:
    """
    Advance y by h with the Cash-Karp embedded pair.

    Parameters
    ----------
    t : float
        Current time
    h : float
        Step size (may be negative)
    y : integrand
        State at t
    dydx : integrand
        f(t, y), already evaluated
    derivative : Callable[[t, y], y]
        Right-hand side (called five times)
    adapter : IntegrandAdapter, optional
        Integrand arithmetic

    Returns
    -------
    y_out : integrand
        Fifth-order estimate of y(t + h)
    y_err : integrand
        Fifth minus fourth-order estimate
    """
    adapter = adapter if adapter is not None else resolve_integrand(y)

    k2 = derivative(t + A2 * h, adapter.combine(y, (B21 * h, dydx)))
    k3 = derivative(t + A3 * h, adapter.combine(y, (B31 * h, dydx), (B32 * h, k2)))
    k4 = derivative(
        t + A4 * h, adapter.combine(y, (B41 * h, dydx), (B42 * h, k2), (B43 * h, k3))
    )
    k5 = derivative(
        t + A5 * h,
        adapter.combine(y, (B51 * h, dydx), (B52 * h, k2), (B53 * h, k3), (B54 * h, k4)),
    )
    k6 = derivative(
        t + A6 * h,
        adapter.combine(
            y, (B61 * h, dydx), (B62 * h, k2), (B63 * h, k3), (B64 * h, k4), (B65 * h, k5)
        ),
    )

    y_out = adapter.combine(y, (C1 * h, dydx), (C3 * h, k3), (C4 * h, k4), (C6 * h, k6))

    y_err = adapter.scale(DC1 * h, dydx)
    for coefficient, k in ((DC3, k3), (DC4, k4), (DC5, k5), (DC6, k6)):
        y_err = adapter.add(y_err, adapter.scale(coefficient * h, k))
    return y_out, y_err


class StepOutcome(NamedTuple):
    """
    Result of a quality-controlled step.

    Attributes
    ----------
    t : float
        Time after the step (unchanged on underflow)
    y : integrand
        Accepted state (the input state on underflow)
    h_did : float
        Step actually taken (0.0 on underflow)
    h_next : float
        Suggested next step
    n_rejected : int
        Trial steps rejected before acceptance
    underflow : bool
        True when the step shrank until t + h == t
    """

    t: float
    y: Any
    h_did: float
    h_next: float
    n_rejected: int
    underflow: bool


def quality_controlled_step(
    t: RealLike,
    y: Any,
    dydx: Any,
    h_try: RealLike,
    accuracy: float,
    y_scale: np.ndarray,
    derivative: DerivativeFunction,
    adapter: Optional[IntegrandAdapter] = None,
    safety: float = SAFETY,
) -> StepOutcome:
    """
    Take one Cash-Karp step, shrinking and retrying until accurate.

    The error is max_i |err_i| / y_scale_i relative to `accuracy`. A
    failed trial shrinks the step by safety * errmax ** PSHRNK (at most
    10x); an accepted step proposes safety * h * errmax ** PGROW for the
    next one, capped at 5x growth.

    Examples
    --------
    >>> outcome = quality_controlled_step(0.0, y, f(0.0, y), 0.1, 1e-6, scale, f)
    >>> outcome.t, outcome.h_next
    """
    adapter = adapter if adapter is not None else resolve_integrand(y)
    h = h_try
    n_rejected = 0

    while True:
        y_out, y_err = cash_karp_step(t, h, y, dydx, derivative, adapter)
        errmax = float(np.max(adapter.magnitudes(y_err) / y_scale, initial=0.0)) / accuracy

        if errmax <= 1.0:
            break

        n_rejected += 1
        h_shrunk = safety * h * errmax**PSHRNK
        if h >= 0.0:
            h = max(h_shrunk, h / MAX_SHRINK)
        else:
            h = min(h_shrunk, h / MAX_SHRINK)

        if t + h == t:
            return StepOutcome(t, y, 0.0, h, n_rejected, True)

    if errmax > ERRCON:
        h_next = safety * h * errmax**PGROW
    else:
        h_next = MAX_GROWTH * h
    return StepOutcome(t + h, y_out, h, h_next, n_rejected, False)
