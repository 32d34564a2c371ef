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
qspace: Generic Algebraic Core
==============================

Vector spaces with identity, dense and sparse operators, tensor products
and adaptive ODE integration, all generic over the scalar field.

Spaces and Operators
--------------------
>>> from qspace import make_space, make_tensor_product_space, Vector, Matrix, COMPLEX
>>>
>>> qubit = make_space(2, "qubit", field=COMPLEX)
>>> mode = make_space(5, "mode", field=COMPLEX)
>>> joint = make_tensor_product_space(qubit, mode, label="qubit-mode")
>>> op = joint.tensor_product(qubit.identity_operator, mode.identity_operator)

Integration
-----------
>>> from qspace import integrate
>>> y = np.array([1.0])
>>> result = integrate(0.0, 1.0, 0.1, 1e-8, 1e-8, y, lambda t, y: -y)

Authors
-------
Gil Benezer

License
-------
GNU Affero General Public License v3.0
"""

from .algebra import COMPLEX, RATIONAL, REAL, SYMBOLIC, Complex, ScalarField, complex_over
from .errors import (
    DegenerateNormError,
    DimensionMismatchError,
    IntegrationWarning,
    QSpaceError,
    SpaceMismatchError,
    StepSizeTooSmallWarning,
    StepSizeUnderflowWarning,
    TensorProductError,
    TooManyStepsWarning,
)
from .numerical_integration import (
    CashKarpIntegrator,
    ExplicitEulerIntegrator,
    RK4Integrator,
    create_fixed_step_integrator,
    integrate,
)
from .spaces import (
    CoordinateSparseMatrix,
    DiagonalSparseMatrix,
    Matrix,
    OperatorRepresentation,
    Vector,
    VectorSpace,
    convert_operator,
    make_space,
    make_tensor_product_space,
    tensor_product,
)
from .systems import TimeIndependentSchrodingerSystem

__version__ = "0.1.0"

__all__ = [
    "Complex",
    "ScalarField",
    "REAL",
    "COMPLEX",
    "RATIONAL",
    "SYMBOLIC",
    "complex_over",
    "QSpaceError",
    "SpaceMismatchError",
    "DimensionMismatchError",
    "TensorProductError",
    "DegenerateNormError",
    "IntegrationWarning",
    "StepSizeUnderflowWarning",
    "StepSizeTooSmallWarning",
    "TooManyStepsWarning",
    "VectorSpace",
    "make_space",
    "make_tensor_product_space",
    "Vector",
    "Matrix",
    "CoordinateSparseMatrix",
    "DiagonalSparseMatrix",
    "OperatorRepresentation",
    "convert_operator",
    "tensor_product",
    "CashKarpIntegrator",
    "ExplicitEulerIntegrator",
    "RK4Integrator",
    "create_fixed_step_integrator",
    "integrate",
    "TimeIndependentSchrodingerSystem",
]
