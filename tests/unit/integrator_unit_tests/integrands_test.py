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
Unit tests for integrand adapters

Tests cover:
1. Adapter resolution by integrand type
2. Arithmetic and magnitudes for each adapter
3. In-place assignment and snapshots
4. Linear combinations
"""

from fractions import Fraction

import numpy as np
import pytest
import sympy as sp

from qspace.algebra.complex_number import Complex
from qspace.algebra.fields import COMPLEX
from qspace.numerical_integration.integrands import (
    ArrayIntegrand,
    ElementsIntegrand,
    IntegrandAdapter,
    ScalarIntegrand,
    SequenceIntegrand,
    resolve_integrand,
)
from qspace.spaces.matrix import Matrix
from qspace.spaces.vector import Vector
from qspace.spaces.vector_space import make_space

# ============================================================================
# Test Class 1: Resolution
# ============================================================================


class TestResolveIntegrand:
    """Test adapter selection"""

    @pytest.mark.parametrize(
        "value, expected",
        [
            (np.zeros(3), ArrayIntegrand),
            (np.zeros((2, 2), dtype=complex), ArrayIntegrand),
            ([1.0, 2.0], SequenceIntegrand),
            ((1.0, 2.0), SequenceIntegrand),
            (1.0, ScalarIntegrand),
            (1j, ScalarIntegrand),
            (Fraction(1, 2), ScalarIntegrand),
            (np.float64(1.0), ScalarIntegrand),
            (sp.Rational(1, 3), ScalarIntegrand),
            (Complex(1.0, 2.0), ScalarIntegrand),
        ],
    )
    def test_builtin_types(self, value, expected):
        assert isinstance(resolve_integrand(value), expected)

    def test_space_elements(self):
        space = make_space(2, "s")
        assert isinstance(resolve_integrand(space.zero_vector()), ElementsIntegrand)
        assert isinstance(resolve_integrand(space.zero_matrix()), ElementsIntegrand)

    def test_unsupported_type(self):
        with pytest.raises(TypeError, match="No integrand adapter"):
            resolve_integrand({"y": 1.0})

    def test_names(self):
        assert ArrayIntegrand.name == "numpy"
        assert SequenceIntegrand.name == "sequence"
        assert ScalarIntegrand.name == "scalar"
        assert ElementsIntegrand.name == "elements"

    def test_abstract_adapter(self):
        with pytest.raises(TypeError):
            IntegrandAdapter()


# ============================================================================
# Test Class 2: Arithmetic
# ============================================================================


class TestAdapterArithmetic:
    """Test add, scale, magnitudes and combine"""

    def test_array(self):
        adapter = ArrayIntegrand()
        y = np.array([[1.0, -2.0], [3.0, -4.0]])
        np.testing.assert_array_equal(adapter.add(y, y), 2 * y)
        np.testing.assert_array_equal(adapter.scale(0.5, y), y / 2)
        np.testing.assert_array_equal(adapter.magnitudes(y), [1.0, 2.0, 3.0, 4.0])

    def test_complex_array_magnitudes(self):
        magnitudes = ArrayIntegrand().magnitudes(np.array([3 + 4j, -1j]))
        assert magnitudes.dtype == float
        np.testing.assert_allclose(magnitudes, [5.0, 1.0])

    def test_sequence_preserves_type(self):
        adapter = SequenceIntegrand()
        assert adapter.add([1, 2], [3, 4]) == [4, 6]
        assert adapter.add((1, 2), (3, 4)) == (4, 6)
        assert adapter.scale(2, (1, 2)) == (2, 4)

    def test_sequence_length_mismatch(self):
        with pytest.raises(ValueError, match="length mismatch"):
            SequenceIntegrand().add([1.0], [1.0, 2.0])

    def test_sequence_magnitudes(self):
        magnitudes = SequenceIntegrand().magnitudes([-2.0, 3 + 4j, Fraction(1, 4)])
        np.testing.assert_allclose(magnitudes, [2.0, 5.0, 0.25])

    def test_scalar(self):
        adapter = ScalarIntegrand()
        assert adapter.add(1.0, 2.0) == 3.0
        assert adapter.scale(2.0, 1j) == 2j
        np.testing.assert_allclose(adapter.magnitudes(-3.0), [3.0])

    def test_elements(self):
        adapter = ElementsIntegrand()
        space = make_space(2, "c", field=COMPLEX)
        psi = Vector(space, [3 + 4j, 1.0])
        assert adapter.add(psi, psi) == Vector(space, [6 + 8j, 2.0])
        assert adapter.scale(0.5, psi) == Vector(space, [1.5 + 2j, 0.5])
        np.testing.assert_allclose(adapter.magnitudes(psi), [5.0, 1.0])

    def test_combine(self):
        adapter = ArrayIntegrand()
        y = np.array([1.0, 1.0])
        k1 = np.array([1.0, 0.0])
        k2 = np.array([0.0, 1.0])
        np.testing.assert_array_equal(adapter.combine(y, (2.0, k1), (3.0, k2)), [3.0, 4.0])
        np.testing.assert_array_equal(adapter.combine(y), y)


# ============================================================================
# Test Class 3: Assignment and Copies
# ============================================================================


class TestAssignAndCopy:
    """Test in-place writes and snapshots"""

    def test_array_assign(self):
        target = np.zeros(2)
        assert ArrayIntegrand().assign(target, np.array([1.0, 2.0])) is True
        np.testing.assert_array_equal(target, [1.0, 2.0])

    def test_array_assign_refuses_truncation(self):
        target = np.array([1, 2])
        with pytest.raises(TypeError, match="truncation"):
            ArrayIntegrand().assign(target, np.array([0.5, 1.5]))
        np.testing.assert_array_equal(target, [1, 2])

    def test_array_assign_refuses_dropping_imaginary_part(self):
        target = np.zeros(1)
        with pytest.raises(TypeError):
            ArrayIntegrand().assign(target, np.array([1.0 + 1.0j]))

    def test_array_assign_allows_same_kind(self):
        target = np.zeros(1, dtype=np.float32)
        ArrayIntegrand().assign(target, np.array([0.25]))
        assert target[0] == 0.25

    def test_array_copy_is_independent(self):
        y = np.array([1.0])
        snapshot = ArrayIntegrand().copy(y)
        y[0] = 5.0
        assert snapshot[0] == 1.0

    def test_list_assign(self):
        target = [0.0, 0.0]
        assert SequenceIntegrand().assign(target, (1.0, 2.0)) is True
        assert target == [1.0, 2.0]

    def test_tuple_not_assignable(self):
        target = (0.0, 0.0)
        assert SequenceIntegrand().assign(target, (1.0, 2.0)) is False
        assert target == (0.0, 0.0)

    def test_scalar_not_assignable(self):
        assert ScalarIntegrand().assign(1.0, 2.0) is False
        assert ScalarIntegrand().copy(1.0) == 1.0

    def test_vector_assign(self):
        space = make_space(2, "s")
        target = space.zero_vector()
        assert ElementsIntegrand().assign(target, Vector(space, [1.0, 2.0])) is True
        assert target.elements == [1.0, 2.0]

    def test_matrix_assign(self):
        space = make_space(2, "s")
        target = space.zero_matrix()
        ElementsIntegrand().assign(target, Matrix(space, [1.0, 2.0, 3.0, 4.0]))
        assert target[1, 0] == 3.0
        assert target.elements == [1.0, 2.0, 3.0, 4.0]

    def test_elements_copy_is_independent(self):
        space = make_space(2, "s")
        psi = Vector(space, [1.0, 2.0])
        snapshot = ElementsIntegrand().copy(psi)
        psi[0] = 9.0
        assert snapshot[0] == 1.0
