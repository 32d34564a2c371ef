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
Integrand Adapters

The integrators never assume a concrete state type. Everything they need
from an integrand is collected in an IntegrandAdapter:

- add(lhs, rhs)          integrand + integrand
- scale(factor, y)       real step-size coefficient * integrand
- magnitudes(y)          element-wise |y_i| as a float array (error control)
- assign(target, source) overwrite a mutable integrand in place
- copy(y)                independent snapshot of an integrand

Adapters are provided for numpy arrays, Python lists/tuples, plain scalars
and the qspace Vector and Matrix types. Other types plug in by subclassing
IntegrandAdapter and passing the instance to an integrator.

Examples
--------
>>> adapter = resolve_integrand(np.array([1.0, 2.0]))
>>> adapter.add(np.array([1.0, 2.0]), adapter.scale(0.5, np.array([2.0, 2.0])))
array([2., 3.])
"""

import numbers
from abc import ABC, abstractmethod
from collections.abc import MutableSequence, Sequence
from typing import Any

import numpy as np
import sympy as sp

from qspace.algebra import functions
from qspace.spaces.matrix import Matrix
from qspace.spaces.vector import Vector


class IntegrandAdapter(ABC):
    """Arithmetic an integrator needs from its state type."""

    name = "integrand"

    @abstractmethod
    def add(self, lhs: Any, rhs: Any) -> Any:
        pass

    @abstractmethod
    def scale(self, factor: Any, integrand: Any) -> Any:
        pass

    @abstractmethod
    def magnitudes(self, integrand: Any) -> np.ndarray:
        """Element-wise absolute values as a 1-D float array."""
        pass

    def copy(self, integrand: Any) -> Any:
        """Independent snapshot; immutable integrands are returned as-is."""
        return integrand

    def assign(self, target: Any, source: Any) -> bool:
        """
        Overwrite `target` with `source` in place.

        Returns
        -------
        bool
            False when the integrand type is immutable and nothing was written
        """
        return False

    def combine(self, y: Any, *terms: Any) -> Any:
        """
        y + sum(coefficient * k for coefficient, k in terms).

        Examples
        --------
        >>> adapter.combine(y, (h * b31, dydx), (h * b32, k2))
        """
        output = y
        for coefficient, integrand in terms:
            output = self.add(output, self.scale(coefficient, integrand))
        return output

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class ArrayIntegrand(IntegrandAdapter):
    """numpy arrays of any shape and numeric dtype."""

    name = "numpy"

    def add(self, lhs: np.ndarray, rhs: np.ndarray) -> np.ndarray:
        return lhs + rhs

    def scale(self, factor: Any, integrand: np.ndarray) -> np.ndarray:
        return factor * integrand

    def magnitudes(self, integrand: np.ndarray) -> np.ndarray:
        return np.abs(np.asarray(integrand)).astype(float).ravel()

    def copy(self, integrand: np.ndarray) -> np.ndarray:
        return integrand.copy()

    def assign(self, target: np.ndarray, source: np.ndarray) -> bool:
        source = np.asarray(source)
        if not np.can_cast(source.dtype, target.dtype, casting="same_kind"):
            raise TypeError(
                f"Cannot write {source.dtype} state back into {target.dtype} array "
                f"without truncation; integrate a float or complex array instead"
            )
        target[...] = source
        return True


class SequenceIntegrand(IntegrandAdapter):
    """
    Python lists or tuples of scalar-field elements.

    Lists are updated in place by assign(); tuples are not.
    """

    name = "sequence"

    def add(self, lhs: Sequence, rhs: Sequence) -> Sequence:
        if len(lhs) != len(rhs):
            raise ValueError(f"Integrand length mismatch: {len(lhs)} != {len(rhs)}")
        return type(lhs)(a + b for a, b in zip(lhs, rhs))

    def scale(self, factor: Any, integrand: Sequence) -> Sequence:
        return type(integrand)(factor * element for element in integrand)

    def magnitudes(self, integrand: Sequence) -> np.ndarray:
        return np.array([float(functions.magnitude(element)) for element in integrand], dtype=float)

    def copy(self, integrand: Sequence) -> Sequence:
        return type(integrand)(integrand)

    def assign(self, target: Sequence, source: Sequence) -> bool:
        if not isinstance(target, MutableSequence):
            return False
        target[:] = list(source)
        return True


class ScalarIntegrand(IntegrandAdapter):
    """A single scalar (float, complex, Fraction, sympy number, Complex)."""

    name = "scalar"

    def add(self, lhs: Any, rhs: Any) -> Any:
        return lhs + rhs

    def scale(self, factor: Any, integrand: Any) -> Any:
        return factor * integrand

    def magnitudes(self, integrand: Any) -> np.ndarray:
        return np.array([float(functions.magnitude(integrand))], dtype=float)


class ElementsIntegrand(IntegrandAdapter):
    """qspace Vector or dense Matrix; assign() writes element by element."""

    name = "elements"

    def add(self, lhs: Any, rhs: Any) -> Any:
        return lhs + rhs

    def scale(self, factor: Any, integrand: Any) -> Any:
        return factor * integrand

    def magnitudes(self, integrand: Any) -> np.ndarray:
        return np.array(
            [float(functions.magnitude(element)) for element in integrand.elements], dtype=float
        )

    def copy(self, integrand: Any) -> Any:
        return integrand.copy()

    def assign(self, target: Any, source: Any) -> bool:
        if isinstance(target, Vector):
            for i, value in enumerate(source.elements):
                target[i] = value
            return True
        n = target.dimension
        for i, value in enumerate(source.elements):
            target[i // n, i % n] = value
        return True


def resolve_integrand(y: Any) -> IntegrandAdapter:
    """
    Adapter for the type of `y`.

    Raises
    ------
    TypeError
        If no built-in adapter supports the type; pass a custom
        IntegrandAdapter to the integrator instead

    Examples
    --------
    >>> resolve_integrand([1.0, 2.0]).name
    'sequence'
    >>> resolve_integrand(space.zero_vector()).name
    'elements'
    """
    if isinstance(y, np.ndarray):
        return ArrayIntegrand()
    if isinstance(y, (Vector, Matrix)):
        return ElementsIntegrand()
    if isinstance(y, (numbers.Number, sp.Basic)) or hasattr(y, "conjugate"):
        return ScalarIntegrand()
    if isinstance(y, (list, tuple)):
        return SequenceIntegrand()
    raise TypeError(
        f"No integrand adapter for {type(y).__name__}; supply an IntegrandAdapter explicitly"
    )
