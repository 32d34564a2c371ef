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
Unit tests for MatrixDiagonal and DiagonalSparseMatrix

Tests cover:
1. Row limits and diagonal validation
2. MatrixDiagonal merge, product and tensor operations
3. Dense round trips and indexing
4. Diagonal-sparse products against the dense reference
5. Transpose, adjoint and scipy interoperability
"""

import numpy as np
import pytest
import scipy.sparse as sps

from qspace.algebra.fields import COMPLEX
from qspace.errors import DimensionMismatchError, SpaceMismatchError
from qspace.spaces.diagonal_sparse import DiagonalSparseMatrix, MatrixDiagonal, row_limits
from qspace.spaces.matrix import Matrix
from qspace.spaces.vector import Vector
from qspace.spaces.vector_space import make_space


def banded(space, rng, indices):
    """Dense matrix whose non-zero entries lie on the given diagonals."""
    n = space.dimension
    array = np.zeros((n, n))
    for index in indices:
        first, last = row_limits(n, index)
        for row in range(first, last + 1):
            array[row, row + index] = rng.integers(1, 10)
    return Matrix(space, array.ravel().tolist())


# ============================================================================
# Test Class 1: Row Limits
# ============================================================================


class TestRowLimits:
    """Test diagonal row ranges"""

    @pytest.mark.parametrize(
        "index, expected",
        [(0, (0, 3)), (1, (0, 2)), (3, (0, 0)), (-1, (1, 3)), (-3, (3, 3))],
    )
    def test_row_limits(self, index, expected):
        assert row_limits(4, index) == expected

    @pytest.mark.parametrize("index", [4, -4, 10])
    def test_invalid_index_rejected(self, index):
        with pytest.raises(ValueError, match="outside valid range"):
            MatrixDiagonal(4, index)

    def test_row_outside_diagonal_rejected(self):
        diagonal = MatrixDiagonal(4, 2)
        with pytest.raises(IndexError):
            diagonal[2] = 1.0


# ============================================================================
# Test Class 2: MatrixDiagonal
# ============================================================================


class TestMatrixDiagonal:
    """Test per-diagonal operations"""

    def test_iteration_is_sorted(self):
        diagonal = MatrixDiagonal(4, 0, {3: 1.0, 0: 2.0, 1: 3.0})
        assert list(diagonal) == [0, 1, 3]
        assert diagonal.items() == [(0, 2.0), (1, 3.0), (3, 1.0)]

    def test_add_and_subtract(self):
        a = MatrixDiagonal(3, 0, {0: 1.0, 1: 2.0})
        b = MatrixDiagonal(3, 0, {1: 5.0, 2: 4.0})
        assert (a + b).elements == {0: 1.0, 1: 7.0, 2: 4.0}
        assert (a - b).elements == {0: 1.0, 1: -3.0, 2: -4.0}

    def test_incompatible_diagonals_rejected(self):
        with pytest.raises(ValueError, match="Cannot combine"):
            MatrixDiagonal(3, 0) + MatrixDiagonal(3, 1)

    def test_accumulate_in_place(self):
        a = MatrixDiagonal(3, 1, {0: 1.0})
        a.accumulate(MatrixDiagonal(3, 1, {0: 2.0, 1: 3.0}))
        assert a.elements == {0: 3.0, 1: 3.0}

    def test_product_offsets_rows(self):
        # A[0,1] * B[1,1] lands on C[0,1]
        a = MatrixDiagonal(3, 1, {0: 2.0, 1: 3.0})
        b = MatrixDiagonal(3, 0, {1: 5.0})
        product = a * b
        assert product.index == 1
        assert product.elements == {0: 10.0}

    def test_product_outside_matrix_rejected(self):
        with pytest.raises(ValueError):
            MatrixDiagonal(3, 2, {0: 1.0}) * MatrixDiagonal(3, 1, {0: 1.0})

    def test_scalar_operations(self):
        diagonal = MatrixDiagonal(2, 0, {0: 2.0, 1: 4.0})
        assert (diagonal * 0.5).elements == {0: 1.0, 1: 2.0}
        assert (0.5 * diagonal).elements == {0: 1.0, 1: 2.0}
        assert (diagonal / 2.0).elements == {0: 1.0, 1: 2.0}
        assert (-diagonal).elements == {0: -2.0, 1: -4.0}

    def test_tensor_product(self):
        a = MatrixDiagonal(2, 1, {0: 2.0})
        b = MatrixDiagonal(3, -1, {1: 5.0, 2: 7.0})
        c = a.tensor_product(b)
        assert c.dimension == 6
        assert c.index == 2
        assert c.elements == {1: 10.0, 2: 14.0}

    def test_identity_from_left_matches_kron(self):
        diagonal = MatrixDiagonal(2, 1, {0: 5.0})
        lifted = diagonal.tensor_product_with_identity_from_left(3)
        assert lifted.dimension == 6
        assert lifted.index == 1
        assert lifted.elements == {0: 5.0, 2: 5.0, 4: 5.0}

        dense = np.zeros((2, 2))
        dense[0, 1] = 5.0
        expected = np.kron(np.eye(3), dense)
        for row, value in lifted.items():
            assert expected[row, row + 1] == value

    def test_copy_is_independent(self):
        diagonal = MatrixDiagonal(2, 0, {0: 1.0})
        duplicate = diagonal.copy()
        duplicate[1] = 2.0
        assert 1 not in diagonal
        assert duplicate != diagonal


# ============================================================================
# Test Class 3: Construction and Conversion
# ============================================================================


class TestDiagonalSparseConstruction:
    """Test construction, round trips and indexing"""

    @pytest.mark.parametrize("seed", range(4))
    def test_dense_round_trip(self, seed):
        rng = np.random.default_rng(seed)
        space = make_space(5, "s")
        values = rng.standard_normal(25)
        values[rng.random(25) < 0.5] = 0.0
        dense = Matrix(space, values.tolist())
        assert DiagonalSparseMatrix.from_dense(dense).to_dense() == dense

    def test_from_dense_skips_empty_diagonals(self):
        space = make_space(3, "s")
        dense = Matrix(space, [1.0, 0.0, 0.0, 0.0, 2.0, 0.0, 4.0, 0.0, 3.0])
        sparse = DiagonalSparseMatrix.from_dense(dense)
        assert sparse.indices == [-2, 0]
        assert sparse.nnz == 4

    def test_mismatched_diagonal_rejected(self):
        space = make_space(3, "s")
        with pytest.raises(DimensionMismatchError):
            DiagonalSparseMatrix(space, {0: MatrixDiagonal(4, 0)})
        with pytest.raises(ValueError, match="stored under key"):
            DiagonalSparseMatrix(space, {1: MatrixDiagonal(3, 0)})

    def test_construction_copies_diagonals(self):
        space = make_space(2, "s")
        diagonal = MatrixDiagonal(2, 0, {0: 1.0})
        sparse = DiagonalSparseMatrix(space, {0: diagonal})
        diagonal[1] = 9.0
        assert sparse[1, 1] == 0.0

    def test_indexing(self):
        space = make_space(3, "s")
        sparse = DiagonalSparseMatrix(space)
        sparse[2, 0] = 7.0
        assert sparse[2, 0] == 7.0
        assert sparse[0, 2] == 0.0
        assert sparse.indices == [-2]
        with pytest.raises(IndexError):
            sparse[3, 0]


# ============================================================================
# Test Class 4: Arithmetic and Products
# ============================================================================


class TestDiagonalSparseArithmetic:
    """Test arithmetic against the dense reference"""

    def test_designed_product_diagonals(self):
        """Diagonals {-1, 0} times {-1, 1} fill exactly {-2, -1, 0, 1}"""
        space = make_space(4, "s")
        a = DiagonalSparseMatrix(
            space,
            {
                0: MatrixDiagonal(4, 0, {0: 1.0, 1: 2.0, 2: 3.0, 3: 4.0}),
                -1: MatrixDiagonal(4, -1, {1: 1.0, 2: 1.0, 3: 1.0}),
            },
        )
        b = DiagonalSparseMatrix(
            space,
            {
                1: MatrixDiagonal(4, 1, {0: 1.0, 1: 1.0, 2: 1.0}),
                -1: MatrixDiagonal(4, -1, {1: 2.0, 2: 2.0, 3: 2.0}),
            },
        )
        product = a * b

        assert product.indices == [-2, -1, 0, 1]
        assert product.diagonal(-2).elements == {2: 2.0, 3: 2.0}
        assert product.diagonal(-1).elements == {1: 4.0, 2: 6.0, 3: 8.0}
        assert product.diagonal(0).elements == {1: 1.0, 2: 1.0, 3: 1.0}
        assert product.diagonal(1).elements == {0: 1.0, 1: 2.0, 2: 3.0}
        for index in (-3, 2, 3):
            assert product.diagonal(index) is None
        assert product.to_dense() == a.to_dense() * b.to_dense()

    def test_contributions_accumulate(self):
        """Pairs (0, 1) and (1, 0) both target diagonal 1"""
        space = make_space(3, "s")
        rng = np.random.default_rng(8)
        a = banded(space, rng, [0, 1])
        b = banded(space, rng, [0, 1])
        product = DiagonalSparseMatrix.from_dense(a) * DiagonalSparseMatrix.from_dense(b)
        assert product.to_dense() == a * b

    @pytest.mark.parametrize("seed", range(4))
    def test_random_product_matches_dense(self, seed):
        rng = np.random.default_rng(seed)
        space = make_space(6, "s")
        a = banded(space, rng, rng.choice(np.arange(-5, 6), 3, replace=False).tolist())
        b = banded(space, rng, rng.choice(np.arange(-5, 6), 3, replace=False).tolist())
        product = DiagonalSparseMatrix.from_dense(a) @ DiagonalSparseMatrix.from_dense(b)
        assert product.to_dense() == a * b

    def test_add_subtract_negate(self):
        space = make_space(4, "s")
        rng = np.random.default_rng(9)
        a = banded(space, rng, [-1, 0])
        b = banded(space, rng, [0, 2])
        sa, sb = DiagonalSparseMatrix.from_dense(a), DiagonalSparseMatrix.from_dense(b)
        assert (sa + sb).to_dense() == a + b
        assert (sa - sb).to_dense() == a - b
        assert (-sa).to_dense() == -a
        assert (2.0 * sa).to_dense() == 2.0 * a
        assert (sa / 2.0).to_dense() == a / 2.0

    def test_numpy_scalar_keeps_diagonal_sparse(self):
        space = make_space(4, "s")
        dense = banded(space, np.random.default_rng(11), [-1, 1])
        scaled = np.float64(2.0) * DiagonalSparseMatrix.from_dense(dense)
        assert isinstance(scaled, DiagonalSparseMatrix)
        assert scaled.space == space
        assert scaled.to_dense() == 2.0 * dense

    def test_matrix_vector(self):
        space = make_space(4, "s")
        dense = banded(space, np.random.default_rng(10), [-2, 0, 3])
        v = Vector(space, [1.0, 2.0, 3.0, 4.0])
        assert DiagonalSparseMatrix.from_dense(dense) * v == dense * v

    def test_different_spaces_rejected(self):
        a = DiagonalSparseMatrix(make_space(2, "a"))
        b = DiagonalSparseMatrix(make_space(2, "b"))
        with pytest.raises(SpaceMismatchError):
            a * b
        with pytest.raises(SpaceMismatchError):
            a - b


# ============================================================================
# Test Class 5: Transpose, Adjoint, scipy
# ============================================================================


class TestDiagonalSparseInterop:
    """Test transpose, adjoint and scipy conversion"""

    def test_transpose(self):
        space = make_space(4, "s")
        dense = banded(space, np.random.default_rng(11), [-3, 1, 2])
        sparse = DiagonalSparseMatrix.from_dense(dense)
        assert sparse.transpose().to_dense() == dense.transpose()
        assert sparse.transpose().indices == [-2, -1, 3]

    def test_adjoint(self):
        space = make_space(2, "c", field=COMPLEX)
        dense = Matrix(space, [1j, 2 + 1j, 0j, 3.0])
        sparse = DiagonalSparseMatrix.from_dense(dense)
        assert sparse.adjoint().to_dense() == dense.adjoint()

    def test_approx_equal(self):
        space = make_space(2, "s")
        a = DiagonalSparseMatrix(space, {0: MatrixDiagonal(2, 0, {0: 1.0})})
        b = DiagonalSparseMatrix(space, {0: MatrixDiagonal(2, 0, {0: 1.0 + 1e-9})})
        assert a.approx_equal(b)
        assert not a.approx_equal(DiagonalSparseMatrix(space))
        assert not a.approx_equal(DiagonalSparseMatrix(make_space(2, "other")))

    def test_to_scipy(self):
        space = make_space(4, "s")
        dense = banded(space, np.random.default_rng(12), [-1, 2])
        dia = DiagonalSparseMatrix.from_dense(dense).to_scipy()
        assert isinstance(dia, sps.dia_matrix)
        np.testing.assert_array_equal(dia.toarray(), dense.to_array())

    def test_from_scipy(self):
        space = make_space(3, "s")
        dia = sps.diags([[1.0, 2.0], [3.0, 4.0, 5.0]], [1, 0])
        sparse = DiagonalSparseMatrix.from_scipy(dia, space)
        assert sparse.indices == [0, 1]
        np.testing.assert_array_equal(sparse.to_dense().to_array(), dia.toarray())
