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
Unit tests for the generic Complex type

Tests cover:
1. Arithmetic with Complex and plain scalars on either side
2. Conjugate, norm, modulus and argument
3. Exponential, polar form and square root
4. Exact rational and symbolic parts
5. Equality and hashing
"""

import cmath
import math
from fractions import Fraction

import pytest
import sympy as sp

from qspace.algebra.complex_number import Complex, make_complex_array


# ============================================================================
# Test Class 1: Arithmetic
# ============================================================================


class TestComplexArithmetic:
    """Test field operations"""

    def test_addition_and_subtraction(self):
        a = Complex(1.0, 2.0)
        b = Complex(3.0, -1.0)
        assert a + b == Complex(4.0, 1.0)
        assert a - b == Complex(-2.0, 3.0)
        assert -a == Complex(-1.0, -2.0)

    def test_multiplication(self):
        """(1 + 2i)(3 - i) = 5 + 5i"""
        assert Complex(1.0, 2.0) * Complex(3.0, -1.0) == Complex(5.0, 5.0)

    def test_division_inverts_multiplication(self):
        a = Complex(Fraction(1), Fraction(2))
        b = Complex(Fraction(3), Fraction(-1))
        assert (a * b) / b == a

    def test_plain_scalars_on_either_side(self):
        z = Complex(1.0, 2.0)
        assert z * 2.0 == Complex(2.0, 4.0)
        assert 2.0 * z == Complex(2.0, 4.0)
        assert z + 1.0 == Complex(2.0, 2.0)
        assert 1.0 - z == Complex(0.0, -2.0)
        assert z / 2.0 == Complex(0.5, 1.0)

    def test_builtin_complex_is_lifted(self):
        z = Complex(1.0, 1.0)
        assert z * 1j == Complex(-1.0, 1.0)
        assert 1j + z == Complex(1.0, 2.0)

    def test_reciprocal_of_scalar(self):
        """1 / i = -i"""
        assert 1.0 / Complex(0.0, 1.0) == Complex(0.0, -1.0)

    def test_integer_power(self):
        i = Complex(0, 1)
        assert i ** 2 == Complex(-1, 0)
        assert i ** 4 == Complex(1, 0)
        assert i ** 0 == Complex(1, 0)

    def test_unsupported_operand_raises_type_error(self):
        with pytest.raises(TypeError):
            Complex(1.0, 0.0) + "text"


# ============================================================================
# Test Class 2: Derived Quantities
# ============================================================================


class TestComplexDerivedQuantities:
    """Test conjugate, modulus, argument"""

    def test_conjugate(self):
        assert Complex(3.0, 2.0).conjugate() == Complex(3.0, -2.0)

    def test_norm_does_not_need_sqrt(self):
        z = Complex(Fraction(3), Fraction(4))
        assert z.norm == Fraction(25)

    def test_modulus_and_abs(self):
        z = Complex(3.0, 4.0)
        assert z.modulus == pytest.approx(5.0)
        assert abs(z) == pytest.approx(5.0)

    def test_argument(self):
        assert Complex(0.0, 1.0).argument == pytest.approx(math.pi / 2)
        assert Complex(-1.0, 0.0).argument == pytest.approx(math.pi)

    def test_modulus_of_rational_parts(self):
        """Rational parts fall back to math.sqrt through numbers.Real"""
        z = Complex(Fraction(3), Fraction(4))
        assert z.modulus == pytest.approx(5.0)


# ============================================================================
# Test Class 3: Transcendental Functions
# ============================================================================


class TestComplexFunctions:
    """Test exp, polar construction and sqrt"""

    def test_exp_matches_cmath(self):
        z = Complex(0.5, 1.2)
        expected = cmath.exp(0.5 + 1.2j)
        result = Complex.exp(z)
        assert result.real == pytest.approx(expected.real)
        assert result.imag == pytest.approx(expected.imag)

    def test_euler_identity(self):
        result = Complex.exp(Complex(0.0, math.pi))
        assert result.real == pytest.approx(-1.0)
        assert result.imag == pytest.approx(0.0, abs=1e-12)

    def test_from_polar_round_trip(self):
        z = Complex(1.5, -2.5)
        w = Complex.from_polar(z.modulus, z.argument)
        assert w.real == pytest.approx(z.real)
        assert w.imag == pytest.approx(z.imag)

    def test_sqrt(self):
        root = Complex.sqrt(Complex(-4.0, 0.0))
        assert root.real == pytest.approx(0.0, abs=1e-12)
        assert root.imag == pytest.approx(2.0)

    def test_complex_conversion(self):
        assert complex(Complex(1.0, -2.0)) == 1 - 2j


# ============================================================================
# Test Class 4: Symbolic Parts
# ============================================================================


class TestSymbolicComplex:
    """Complex over sympy expressions"""

    def test_symbolic_multiplication(self):
        a, b = sp.symbols("a b", real=True)
        z = Complex(a, b)
        product = z * z.conjugate()
        assert sp.simplify(product.real - (a**2 + b**2)) == 0
        assert sp.simplify(product.imag) == 0

    def test_symbolic_exp(self):
        theta = sp.Symbol("theta", real=True)
        result = Complex.exp(Complex(sp.Integer(0), theta))
        assert result.real == sp.cos(theta)
        assert result.imag == sp.sin(theta)


# ============================================================================
# Test Class 5: Equality and Hashing
# ============================================================================


class TestComplexEquality:
    """Test equality semantics"""

    def test_equal_to_real_scalar_when_imag_zero(self):
        assert Complex(2.0, 0.0) == 2.0
        assert Complex(2.0, 1.0) != 2.0

    def test_equal_to_builtin_complex(self):
        assert Complex(1.0, 2.0) == 1 + 2j

    def test_hash_consistent_with_real(self):
        assert hash(Complex(2.0, 0.0)) == hash(2.0)
        assert len({Complex(1.0, 1.0), Complex(1.0, 1.0)}) == 1

    def test_make_complex_array(self):
        values = make_complex_array([1.0, 2.0])
        assert values == [Complex(1.0, 0.0), Complex(2.0, 0.0)]
