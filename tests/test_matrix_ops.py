# tests/test_matrix_ops.py
"""
Tests for the vectorization matrices and the safe inverse.

Covers vec/vech/ivech, the elimination, commutation and duplication matrices
and their defining identities, the SPD test and both branches of
safe_inverse, including error reporting for invalid inputs.
"""

import logging

import numpy as np
import pandas as pd
import pytest
from numpy.testing import assert_allclose, assert_array_equal
from hypothesis import given, settings, strategies as st
from hypothesis.extra import numpy as hnp
from scipy import linalg

from symvec.utils.matrix_ops import (
    vec, vech, ivech, elimination_matrix, commutation_matrix,
    duplication_matrix, is_sympd, safe_inverse
)
from symvec.core.config import set_config
from symvec.core.exceptions import (
    DimensionError, ParameterError, SingularMatrixError, NonFiniteError, DataError
)


def symmetric_matrices(max_n: int = 5):
    """Hypothesis strategy producing symmetric matrices with bounded entries."""
    return st.integers(min_value=1, max_value=max_n).flatmap(
        lambda n: hnp.arrays(
            np.float64, (n, n),
            elements=st.floats(min_value=-1e3, max_value=1e3, allow_nan=False)
        ).map(lambda A: np.tril(A) + np.tril(A, -1).T)
    )


def _block_elimination(n: int) -> np.ndarray:
    """Elimination matrix built column by column from identity blocks."""
    n_vech = n * (n + 1) // 2
    remaining = np.eye(n_vech)
    blocks = []
    for j in range(n):
        blocks.append(np.zeros((n_vech, j)))  # above-diagonal entries of column j
        blocks.append(remaining[:, :n - j])
        remaining = remaining[:, n - j:]
    return np.hstack(blocks)


class TestVectorization:
    """Tests for vec, vech and ivech."""

    def test_vec(self):
        A = np.array([[1, 2, 3], [4, 5, 6]])
        assert_array_equal(vec(A), np.array([1, 4, 2, 5, 3, 6]))

    def test_vec_rejects_vector(self):
        with pytest.raises(DimensionError):
            vec(np.array([1.0, 2.0]))

    def test_vech(self):
        A = np.array([[1, 2], [2, 4]])
        assert_array_equal(vech(A), np.array([1, 2, 4]))

        B = np.array([[1, 2, 3], [2, 4, 5], [3, 5, 6]])
        assert_array_equal(vech(B), np.array([1, 2, 3, 4, 5, 6]))

    def test_vech_takes_lower_triangle(self):
        A = np.array([[1, 9], [2, 3]])
        assert_array_equal(vech(A), np.array([1, 2, 3]))

    def test_vech_non_square(self):
        with pytest.raises(DimensionError):
            vech(np.array([[1, 2, 3], [4, 5, 6]]))

    def test_vech_accepts_dataframe(self):
        df = pd.DataFrame([[1.0, 2.0], [2.0, 5.0]], columns=["a", "b"])
        assert_array_equal(vech(df), np.array([1.0, 2.0, 5.0]))

    def test_ivech(self):
        v = np.array([1, 2, 3, 4, 5, 6])
        expected = np.array([[1, 2, 3], [2, 4, 5], [3, 5, 6]])
        assert_array_equal(ivech(v), expected)

    def test_ivech_invalid_length(self):
        with pytest.raises(DimensionError):
            ivech(np.array([1, 2, 3, 4]))

    @given(symmetric_matrices())
    @settings(max_examples=50, deadline=None)
    def test_ivech_inverts_vech(self, A):
        assert_array_equal(ivech(vech(A)), A)


class TestEliminationMatrix:
    """Tests for the elimination matrix."""

    def test_order_one(self):
        assert_array_equal(elimination_matrix(1), np.array([[1.0]]))

    def test_order_two(self):
        expected = np.array([
            [1, 0, 0, 0],
            [0, 1, 0, 0],
            [0, 0, 0, 1]
        ])
        assert_array_equal(elimination_matrix(2), expected)

    @pytest.mark.parametrize("n", [1, 2, 3, 4, 5])
    def test_shape_and_selection(self, n):
        L = elimination_matrix(n)
        assert L.shape == (n * (n + 1) // 2, n * n)
        assert set(np.unique(L)) <= {0.0, 1.0}
        assert_array_equal(L.sum(axis=1), np.ones(L.shape[0]))

    @pytest.mark.parametrize("n", [1, 2, 3, 4, 5])
    def test_extracts_vech(self, n, random_symmetric):
        A = random_symmetric(n)
        assert_allclose(elimination_matrix(n) @ vec(A), vech(A))

    @pytest.mark.parametrize("n", [1, 2, 3, 4, 5, 6])
    def test_matches_block_construction(self, n):
        assert_array_equal(elimination_matrix(n), _block_elimination(n))

    @pytest.mark.parametrize("n", [0, -1, 2.5, "3", True])
    def test_invalid_order(self, n):
        with pytest.raises(ParameterError):
            elimination_matrix(n)

    def test_numpy_integer_order(self):
        assert elimination_matrix(np.int64(3)).shape == (6, 9)


class TestCommutationMatrix:
    """Tests for the commutation matrix."""

    def test_order_one(self):
        assert_array_equal(commutation_matrix(1), np.array([[1.0]]))

    def test_order_two(self):
        expected = np.array([
            [1, 0, 0, 0],
            [0, 0, 1, 0],
            [0, 1, 0, 0],
            [0, 0, 0, 1]
        ])
        assert_array_equal(commutation_matrix(2), expected)

    @pytest.mark.parametrize("n", [1, 2, 3, 4, 5])
    def test_permutation_and_involution(self, n):
        K = commutation_matrix(n)
        assert K.shape == (n * n, n * n)
        assert_array_equal(K.sum(axis=0), np.ones(n * n))
        assert_array_equal(K.sum(axis=1), np.ones(n * n))
        assert_array_equal(K, K.T)
        assert_array_equal(K @ K, np.eye(n * n))

    @pytest.mark.parametrize("n", [1, 2, 3, 4, 5])
    def test_transposes_vec(self, n, rng):
        A = rng.standard_normal((n, n))
        assert_allclose(commutation_matrix(n) @ vec(A), vec(A.T))

    def test_index_formula(self):
        # One-based (i + n(j-1), j + n(i-1)) entries are the only non-zeros
        n = 3
        K = commutation_matrix(n)
        expected = np.zeros((n * n, n * n))
        for i in range(1, n + 1):
            for j in range(1, n + 1):
                expected[i + n * (j - 1) - 1, j + n * (i - 1) - 1] = 1
        assert_array_equal(K, expected)

    @pytest.mark.parametrize("n, m", [(2, 3), (3, 2), (1, 4), (4, 1)])
    def test_rectangular(self, n, m, rng):
        A = rng.standard_normal((n, m))
        K = commutation_matrix(n, m)
        assert K.shape == (n * m, n * m)
        assert_allclose(K @ vec(A), vec(A.T))
        assert_array_equal(commutation_matrix(m, n) @ K, np.eye(n * m))

    def test_invalid_order(self):
        with pytest.raises(ParameterError):
            commutation_matrix(0)
        with pytest.raises(ParameterError):
            commutation_matrix(2, -1)


class TestDuplicationMatrix:
    """Tests for the duplication matrix."""

    def test_order_one(self):
        assert_allclose(duplication_matrix(1), np.array([[1.0]]))

    def test_order_two(self):
        expected = np.array([
            [1, 0, 0],
            [0, 1, 0],
            [0, 1, 0],
            [0, 0, 1]
        ])
        assert_allclose(duplication_matrix(2), expected)

    @pytest.mark.parametrize("n", [1, 2, 3, 4, 5])
    def test_rebuilds_vec(self, n, random_symmetric):
        A = random_symmetric(n)
        D = duplication_matrix(n)
        L = elimination_matrix(n)
        assert D.shape == (n * n, n * (n + 1) // 2)
        assert_allclose(D @ vech(A), vec(A))
        assert_allclose(D @ L @ vec(A), vec(A))

    @pytest.mark.parametrize("n", [2, 3, 4])
    def test_left_inverse_of_elimination(self, n):
        assert_allclose(elimination_matrix(n) @ duplication_matrix(n),
                        np.eye(n * (n + 1) // 2), atol=1e-12)

    @given(symmetric_matrices(max_n=4))
    @settings(max_examples=50, deadline=None)
    def test_duplication_identity(self, A):
        n = A.shape[0]
        assert_allclose(duplication_matrix(n) @ vech(A), vec(A), rtol=1e-12, atol=1e-9)

    def test_singular_inner_product(self):
        # L (I + K) L' for n = 2 is diag(2, 1, 2) with reciprocal condition 0.5
        set_config("numerical", "singular_rcond", 0.9)
        with pytest.raises(SingularMatrixError) as excinfo:
            duplication_matrix(2)
        assert excinfo.value.error_type == "singular_matrix"
        assert excinfo.value.rcond == pytest.approx(0.5)

    def test_invalid_order(self):
        with pytest.raises(ParameterError):
            duplication_matrix(0)


class TestIsSympd:
    """Tests for the symmetric positive definite check."""

    def test_spd(self, random_spd):
        assert is_sympd(np.eye(3))
        assert is_sympd(random_spd(4))

    def test_indefinite(self):
        assert not is_sympd(np.array([[1.0, 2.0], [2.0, 1.0]]))

    def test_semidefinite(self):
        assert not is_sympd(np.array([[1.0, 1.0], [1.0, 1.0]]))

    def test_asymmetric(self):
        assert not is_sympd(np.array([[2.0, 1.0], [0.0, 2.0]]))

    def test_rounding_asymmetry_within_tolerance(self, random_spd):
        A = random_spd(3)
        A[0, 1] += 1e-15
        assert is_sympd(A)

    def test_explicit_tolerance(self):
        A = np.array([[2.0, 1.0], [1.001, 2.0]])
        assert not is_sympd(A)
        assert is_sympd(A, tol=1e-2)

    def test_configured_tolerance(self):
        A = np.array([[2.0, 1.0], [1.001, 2.0]])
        set_config("numerical", "sympd_tolerance", 1e-2)
        assert is_sympd(A)

    def test_not_square_or_not_finite(self):
        assert not is_sympd(np.ones((2, 3)))
        assert not is_sympd(np.array([[1.0, np.nan], [np.nan, 1.0]]))
        assert not is_sympd(np.zeros((0, 0)))

    def test_small_scale_asymmetry(self):
        # Asymmetry is judged relative to the entries, not to an absolute floor
        assert not is_sympd(np.array([[1e-14, 0.0], [2e-14, 1e-14]]))
        assert not is_sympd(np.array([[1e-4, 0.0], [2e-14, 1e-4]]))

    @pytest.mark.parametrize("scale", [1e-12, 1e-4, 1e8])
    def test_scale_invariant(self, scale, random_spd):
        assert is_sympd(scale * random_spd(4))
        assert not is_sympd(scale * np.array([[2.0, 1.0], [1.001, 2.0]]))

    def test_zero_matrix(self):
        assert not is_sympd(np.zeros((3, 3)))


class TestSafeInverse:
    """Tests for safe_inverse."""

    def test_identity(self):
        assert_allclose(safe_inverse(np.eye(4)), np.eye(4))

    def test_spd_matches_inverse_and_pinv(self, random_spd):
        A = random_spd(5)
        result = safe_inverse(A)
        assert_allclose(result, np.linalg.inv(A), rtol=1e-10, atol=1e-12)
        assert_allclose(result, linalg.pinv(A), rtol=1e-8, atol=1e-10)
        assert_array_equal(result, result.T)

    def test_singular_returns_pseudo_inverse(self, singular_matrix):
        result = safe_inverse(singular_matrix)
        assert_allclose(singular_matrix @ result @ singular_matrix, singular_matrix, atol=1e-10)
        assert_allclose(result @ singular_matrix @ result, result, atol=1e-10)
        assert_allclose(result, linalg.pinv(singular_matrix), atol=1e-10)

    def test_zero_matrix(self):
        assert_array_equal(safe_inverse(np.zeros((3, 3))), np.zeros((3, 3)))

    def test_nonsymmetric_invertible(self):
        A = np.array([[1.0, 2.0], [3.0, 4.0]])
        assert_allclose(safe_inverse(A), np.linalg.inv(A), atol=1e-12)

    def test_indefinite_symmetric(self):
        A = np.array([[1.0, 2.0], [2.0, 1.0]])
        assert_allclose(safe_inverse(A), np.linalg.inv(A), atol=1e-12)

    def test_tiny_asymmetric_matrix(self):
        M = np.array([[1e-14, 0.0], [2e-14, 1e-14]])
        result = safe_inverse(M)
        assert_allclose(result @ M, np.eye(2), atol=1e-8)

    def test_small_scale_asymmetric_matches_inverse(self):
        M = np.array([[1e-4, 0.0], [2e-14, 1e-4]])
        result = safe_inverse(M)
        assert_allclose(result, linalg.inv(M), rtol=1e-10, atol=1e-8)
        assert abs(result[0, 1]) < 1e-8

    def test_small_scale_spd_uses_cholesky(self, random_spd, caplog):
        caplog.set_level(logging.DEBUG, logger="symvec.utils.matrix_ops")
        A = 1e-4 * random_spd(3)
        expected = np.linalg.inv(A)
        assert_allclose(safe_inverse(A), expected, rtol=1e-8, atol=1e-10 * np.abs(expected).max())
        assert "Cholesky" in caplog.text

    def test_branch_logging(self, random_spd, singular_matrix, caplog):
        caplog.set_level(logging.DEBUG, logger="symvec.utils.matrix_ops")
        safe_inverse(random_spd(3))
        assert "Cholesky" in caplog.text
        caplog.clear()
        safe_inverse(singular_matrix)
        assert "pseudo-inverse" in caplog.text

    def test_input_not_modified(self, random_spd):
        A = random_spd(3)
        original = A.copy()
        safe_inverse(A)
        assert_array_equal(A, original)

    def test_empty(self):
        assert safe_inverse(np.zeros((0, 0))).shape == (0, 0)

    def test_non_square(self):
        with pytest.raises(DimensionError):
            safe_inverse(np.ones((2, 3)))

    @pytest.mark.parametrize("bad", [np.nan, np.inf, -np.inf])
    def test_non_finite(self, bad):
        A = np.eye(2)
        A[1, 0] = bad
        with pytest.raises(NonFiniteError) as excinfo:
            safe_inverse(A)
        assert isinstance(excinfo.value, DataError)
        assert excinfo.value.index == (1, 0)
