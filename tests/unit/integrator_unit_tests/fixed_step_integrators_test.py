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
Unit tests for fixed-step integrators

Tests cover:
1. Single-step Euler and RK4 kernels
2. Explicit Euler integrator
3. RK4 integrator
4. Accuracy verification against analytical solutions
5. Convergence order verification
6. Uniform grid construction and backward integration
7. Non-array integrands
8. Factory function
"""

import numpy as np
import pytest

from qspace.numerical_integration.fixed_step_integrators import (
    ExplicitEulerIntegrator,
    RK4Integrator,
    create_fixed_step_integrator,
    euler_step,
    runge_kutta_step,
)
from qspace.numerical_integration.integrands import SequenceIntegrand
from qspace.numerical_integration.integrator_base import StepMode
from qspace.spaces.matrix import Matrix
from qspace.spaces.vector import Vector
from qspace.spaces.vector_space import make_space

# ============================================================================
# Derivatives with Analytical Solutions
# ============================================================================


class ExponentialDecay:
    """dy/dt = -a*y with analytical solution"""

    def __init__(self, a=1.0):
        self.a = a

    def __call__(self, t, y):
        return -self.a * y

    def analytical_solution(self, y0, t):
        """y(t) = y0 * exp(-a*t)"""
        return y0 * np.exp(-self.a * t)


def harmonic_oscillator(t, y):
    """[x, v]' = [v, -x]"""
    return np.array([y[1], -y[0]])


# ============================================================================
# Test Class 1: Step Kernels
# ============================================================================


class TestStepKernels:
    """Test single-step functions"""

    def test_euler_step(self):
        # 1 + 0.1 * (-2 * 1) = 0.8
        assert euler_step(0.0, 0.1, 1.0, ExponentialDecay(a=2.0)) == pytest.approx(0.8)

    def test_euler_step_uses_supplied_derivative(self):
        def fail(t, y):
            raise AssertionError("derivative should not be evaluated")

        assert euler_step(0.0, 0.5, 1.0, fail, dydx=-2.0) == 0.0

    def test_runge_kutta_step_matches_taylor_series(self):
        h = 0.1
        expected = 1 - h + h**2 / 2 - h**3 / 6 + h**4 / 24
        assert runge_kutta_step(0.0, h, 1.0, ExponentialDecay()) == pytest.approx(expected, abs=1e-14)

    def test_runge_kutta_step_exact_for_cubic_quadrature(self):
        """Time-only derivatives integrate exactly up to degree 3 (Simpson's rule)"""
        y = runge_kutta_step(0.0, 2.0, 0.0, lambda t, y: 4 * t**3)
        assert y == pytest.approx(16.0)

    def test_runge_kutta_step_evaluations(self):
        calls = []

        def derivative(t, y):
            calls.append(t)
            return -y

        runge_kutta_step(0.0, 0.2, 1.0, derivative)
        assert calls == pytest.approx([0.0, 0.1, 0.1, 0.2])

        calls.clear()
        runge_kutta_step(0.0, 0.2, 1.0, derivative, dydx=-1.0)
        assert len(calls) == 3


# ============================================================================
# Test Class 2: Explicit Euler Integrator
# ============================================================================


class TestExplicitEuler:
    """Test Explicit Euler integrator"""

    def test_initialization(self):
        integrator = ExplicitEulerIntegrator(ExponentialDecay(), dt=0.01)

        assert integrator.dt == 0.01
        assert integrator.step_mode == StepMode.FIXED
        assert "Euler" in integrator.name

    def test_single_step_decay(self):
        integrator = ExplicitEulerIntegrator(ExponentialDecay(a=2.0), dt=0.1)
        y = np.array([1.0])

        y_next = integrator.step(0.0, y)

        assert np.allclose(y_next, np.array([0.8]))
        assert y[0] == 1.0

    def test_matches_closed_form(self):
        """Euler on decay gives (1 - dt)^n exactly"""
        integrator = ExplicitEulerIntegrator(ExponentialDecay(), dt=0.125)
        result = integrator.integrate(np.array([1.0]), (0.0, 1.0))
        assert result["x"][-1][0] == pytest.approx(0.875**8)

    def test_accuracy_exponential_decay(self):
        system = ExponentialDecay(a=1.0)
        integrator = ExplicitEulerIntegrator(system, dt=0.01)

        result = integrator.integrate(np.array([1.0]), t_span=(0.0, 1.0))

        error = abs(result["x"][-1][0] - system.analytical_solution(1.0, 1.0))
        assert error < 0.01

    def test_integration_result_fields(self):
        integrator = ExplicitEulerIntegrator(ExponentialDecay(), dt=0.01)

        result = integrator.integrate(np.array([1.0]), t_span=(0.0, 0.5))

        assert isinstance(result, dict)
        for key in ("t", "x", "success", "nfev", "nsteps", "message", "solver", "integration_time"):
            assert key in result
        assert result["success"] is True
        assert result["solver"] == "Explicit Euler"
        assert result["nsteps"] == 50
        assert result["nfev"] == 50
        assert len(result["t"]) == len(result["x"]) == 51


# ============================================================================
# Test Class 3: RK4 Integrator
# ============================================================================


class TestRK4:
    """Test classical Runge-Kutta integrator"""

    def test_initialization(self):
        integrator = RK4Integrator(ExponentialDecay(), dt=0.1)
        assert integrator.name == "RK4"
        assert integrator.step_mode == StepMode.FIXED

    def test_high_accuracy(self):
        system = ExponentialDecay()
        integrator = RK4Integrator(system, dt=0.01)

        result = integrator.integrate(np.array([1.0]), (0.0, 1.0))

        assert abs(result["x"][-1][0] - system.analytical_solution(1.0, 1.0)) < 1e-9

    def test_four_function_evaluations_per_step(self):
        integrator = RK4Integrator(ExponentialDecay(), dt=0.1)
        result = integrator.integrate(np.array([1.0]), (0.0, 1.0))
        assert result["nfev"] == result["nsteps"] * 4

    def test_convergence_order_4(self):
        """error(dt/2) / error(dt) should approach 1/16"""
        system = ExponentialDecay(a=1.0)
        exact = system.analytical_solution(1.0, 1.0)

        errors = []
        for dt in [0.1, 0.05, 0.025]:
            result = RK4Integrator(system, dt=dt).integrate(np.array([1.0]), (0.0, 1.0))
            errors.append(abs(result["x"][-1][0] - exact))

        assert 10.0 < errors[0] / errors[1] < 20.0
        assert 10.0 < errors[1] / errors[2] < 20.0

    def test_harmonic_oscillator_energy(self):
        integrator = RK4Integrator(harmonic_oscillator, dt=0.01)
        result = integrator.integrate(np.array([1.0, 0.0]), (0.0, 2 * np.pi))
        np.testing.assert_allclose(result["x"][-1], [1.0, 0.0], atol=1e-8)

    def test_more_accurate_than_euler(self):
        system = ExponentialDecay()
        exact = system.analytical_solution(1.0, 1.0)
        euler = ExplicitEulerIntegrator(system, dt=0.1).integrate(np.array([1.0]), (0.0, 1.0))
        rk4 = RK4Integrator(system, dt=0.1).integrate(np.array([1.0]), (0.0, 1.0))
        assert abs(rk4["x"][-1][0] - exact) < abs(euler["x"][-1][0] - exact)


# ============================================================================
# Test Class 4: Time Grid
# ============================================================================


class TestTimeGrid:
    """Test grid construction"""

    def test_grid_ends_exactly_at_t_end(self):
        result = RK4Integrator(ExponentialDecay(), dt=0.3).integrate(np.array([1.0]), (0.0, 1.0))
        assert result["nsteps"] == 4
        assert result["t"] == pytest.approx([0.0, 0.25, 0.5, 0.75, 1.0])
        assert result["t"][-1] == 1.0

    def test_backward_integration(self):
        system = ExponentialDecay()
        y1 = np.array([system.analytical_solution(1.0, 1.0)])
        result = RK4Integrator(system, dt=0.01).integrate(y1, (1.0, 0.0))
        assert result["t"][0] == 1.0
        assert result["t"][-1] == 0.0
        assert result["x"][-1][0] == pytest.approx(1.0, abs=1e-8)

    def test_negative_dt_accepted(self):
        result = ExplicitEulerIntegrator(ExponentialDecay(), dt=-0.1).integrate(
            np.array([1.0]), (0.0, 1.0)
        )
        assert result["nsteps"] == 10
        assert result["t"][-1] == 1.0

    def test_stats_accumulate(self):
        integrator = RK4Integrator(ExponentialDecay(), dt=0.1)
        integrator.integrate(np.array([1.0]), (0.0, 1.0))
        integrator.integrate(np.array([1.0]), (0.0, 1.0))

        stats = integrator.get_stats()
        assert stats["total_steps"] == 20
        assert stats["total_fev"] == 80
        assert stats["avg_fev_per_step"] == 4.0


# ============================================================================
# Test Class 5: Other Integrands
# ============================================================================


class TestOtherIntegrands:
    """Test integrands other than numpy arrays"""

    def test_python_float(self):
        result = RK4Integrator(lambda t, y: -y, dt=0.01).integrate(1.0, (0.0, 1.0))
        assert result["x"][-1] == pytest.approx(np.exp(-1.0), abs=1e-9)

    def test_complex_scalar(self):
        """y' = -i y rotates the phase"""
        result = RK4Integrator(lambda t, y: -1j * y, dt=0.01).integrate(1 + 0j, (0.0, np.pi))
        assert result["x"][-1] == pytest.approx(-1.0, abs=1e-8)

    def test_list_with_explicit_adapter(self):
        integrator = RK4Integrator(
            lambda t, y: [y[1], -y[0]], dt=0.01, adapter=SequenceIntegrand()
        )
        result = integrator.integrate([0.0, 1.0], (0.0, np.pi / 2))
        assert result["x"][-1] == pytest.approx([1.0, 0.0], abs=1e-8)

    def test_vector(self):
        space = make_space(2, "oscillator")
        generator = Matrix(space, [0.0, 1.0, -1.0, 0.0])
        result = RK4Integrator(lambda t, psi: generator * psi, dt=0.01).integrate(
            Vector(space, [1.0, 0.0]), (0.0, np.pi)
        )
        final = result["x"][-1]
        assert isinstance(final, Vector)
        assert final.elements == pytest.approx([-1.0, 0.0], abs=1e-8)

    def test_alternating_integrand_types(self):
        """One integrator serves arrays, lists and scalars in turn"""

        def rotation(t, y):
            if isinstance(y, list):
                return [y[1], -y[0]]
            return np.array([y[1], -y[0]])

        integrator = RK4Integrator(rotation, dt=0.01)
        from_array = integrator.integrate(np.array([0.0, 1.0]), (0.0, np.pi / 2))
        from_list = integrator.integrate([0.0, 1.0], (0.0, np.pi / 2))
        np.testing.assert_allclose(from_array["x"][-1], [1.0, 0.0], atol=1e-8)
        assert isinstance(from_list["x"][-1], list)
        assert from_list["x"][-1] == pytest.approx([1.0, 0.0], abs=1e-8)
        assert integrator.adapter is None


# ============================================================================
# Test Class 6: Factory Function
# ============================================================================


class TestFactory:
    """Test create_fixed_step_integrator"""

    @pytest.mark.parametrize(
        "method, expected", [("euler", ExplicitEulerIntegrator), ("rk4", RK4Integrator)]
    )
    def test_create(self, method, expected):
        integrator = create_fixed_step_integrator(method, ExponentialDecay(), dt=0.1)
        assert isinstance(integrator, expected)
        assert integrator.dt == 0.1

    def test_unknown_method(self):
        with pytest.raises(ValueError, match="Unknown method"):
            create_fixed_step_integrator("midpoint", ExponentialDecay(), dt=0.1)
