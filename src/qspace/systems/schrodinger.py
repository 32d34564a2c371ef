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
Time-Independent Schrödinger System

Evolves a state vector under a time-independent Hamiltonian H by
integrating the Schrödinger equation (hbar = 1)

    d|psi>/dt = -i H |psi>

with the adaptive Cash-Karp driver. The operator -iH is precomputed in one
of the three operator representations; the representation is selected
explicitly and can be switched at any time.

Examples
--------
>>> qubit = make_space(2, "qubit", field=COMPLEX)
>>> sigma_x = Matrix(qubit, [0, 1, 1, 0])
>>> psi = Vector(qubit, [1, 0])
>>> system = TimeIndependentSchrodingerSystem(psi, sigma_x)
>>> result = system.evolve(math.pi / 2)
>>> round(abs(system.psi[1]), 4)  # fully flipped
1.0
"""

from typing import Any, Union

from qspace.algebra.complex_number import Complex
from qspace.algebra.fields import ScalarField
from qspace.numerical_integration.adaptive_integrator import integrate
from qspace.numerical_integration.integrands import ElementsIntegrand
from qspace.spaces.matrix import Matrix
from qspace.spaces.operators import Operator, OperatorRepresentation, convert_operator
from qspace.spaces.vector import Vector
from qspace.spaces.vector_space import check_same_space
from qspace.types.trajectories import IntegrationResult

MIN_STEP = 1.0e-8
ACCURACY = 1.0e-5


def minus_i(field: ScalarField) -> Any:
    """
    The scalar -i in a complex field.

    Raises
    ------
    ValueError
        If the field is not complex
    """
    if not field.is_complex:
        raise ValueError(f"Schrödinger evolution requires a complex field, got {field.name!r}")
    one = field.one
    if isinstance(one, Complex):
        return Complex(one.imag, -one.real)
    return -1j * one


class TimeIndependentSchrodingerSystem:
    """
    State vector evolving under a fixed Hamiltonian.

    Parameters
    ----------
    initial_state : Vector
        Initial state; copied, the caller's vector is never modified
    hamiltonian : Matrix, CoordinateSparseMatrix or DiagonalSparseMatrix
        Hamiltonian on the state's space (complex field)
    representation : OperatorRepresentation or str
        Storage used for -iH (default DENSE)
    min_step : float
        Smallest step the integrator may suggest (default 1e-8)
    accuracy : float
        Target accuracy per step (default 1e-5)

    Attributes
    ----------
    psi : Vector
        Current state
    time : float
        Current time
    representation : OperatorRepresentation
    last_result : IntegrationResult or None
        Result of the most recent evolve()

    Raises
    ------
    SpaceMismatchError
        If state and Hamiltonian live in different spaces
    ValueError
        If the space is not over a complex field
    """

    def __init__(
        self,
        initial_state: Vector,
        hamiltonian: Operator,
        representation: Union[OperatorRepresentation, str] = OperatorRepresentation.DENSE,
        min_step: float = MIN_STEP,
        accuracy: float = ACCURACY,
    ):
        check_same_space(initial_state, hamiltonian)
        self.psi = initial_state.copy()
        self.time = 0.0
        self.min_step = min_step
        self.accuracy = accuracy
        self.last_result = None

        self._minus_i_h: Matrix = minus_i(initial_state.space.field) * hamiltonian.to_dense()
        self.representation = OperatorRepresentation.DENSE
        self._operator: Operator = self._minus_i_h
        self.use_representation(representation)

    @property
    def minus_i_hamiltonian(self) -> Operator:
        """-iH in the current representation."""
        return self._operator

    def use_representation(self, representation: Union[OperatorRepresentation, str]) -> None:
        """Switch the representation used for -iH."""
        self.representation = OperatorRepresentation(representation)
        self._operator = convert_operator(self._minus_i_h, self.representation)

    def schrodinger_equation(self, time: float, psi: Vector) -> Vector:
        """Right-hand side -iH psi (time-independent)."""
        return self._operator * psi

    def evolve(self, dt: float) -> IntegrationResult:
        """
        Advance psi from the current time to time + dt.

        Numerical diagnostics are issued as warnings and reported on the
        returned result; the time always advances to where integration
        stopped.
        """
        result = integrate(
            self.time,
            self.time + dt,
            dt,
            self.min_step,
            self.accuracy,
            self.psi,
            self.schrodinger_equation,
            adapter=ElementsIntegrand(),
        )
        self.time = result["t"][-1]
        self.last_result = result
        return result

    def __repr__(self) -> str:
        return (
            f"TimeIndependentSchrodingerSystem(space={self.psi.space.label!r}, "
            f"time={self.time}, representation={self.representation.value})"
        )
