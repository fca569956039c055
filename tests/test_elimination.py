# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import logging
import math

import numpy as np
import pytest

from matrixkit.arithmetic import times, times_scalar, transpose
from matrixkit.elimination import (
    back_substitute,
    det,
    forward_substitute,
    inverse,
    lu_factor,
    solve,
    trace,
)
from matrixkit.errors import DimensionMismatch, NotSquare, SingularMatrix
from matrixkit.matrix import Matrix, from_row_list, make_identity
from matrixkit.qr import random_nonsingular_qr
from matrixkit.utils import random_nonsingular_upper

TEST_ITERATIONS = 50
logger = logging.getLogger(__name__)


def test_back_substitute_after_lu_basic_n_by_n():
    n = 200
    rng = np.random.default_rng(7)
    A = rng.standard_normal((n, n))
    x0 = rng.standard_normal(n)
    b = A @ x0

    lu = lu_factor(A)
    assert not lu.singular
    c = forward_substitute(lu.lu, b[lu.perm], unit=True)
    x = back_substitute(np.triu(lu.lu), c)
    assert np.allclose(x, x0, rtol=1e-8, atol=1e-8)


def test_lu_factor_reconstructs():
    rng = np.random.default_rng(3)
    A = rng.standard_normal((8, 8))
    lu = lu_factor(A)
    L = np.tril(lu.lu, -1) + np.eye(8)
    U = np.triu(lu.lu)
    assert not lu.singular
    np.testing.assert_allclose(L @ U, A[lu.perm], atol=1e-12)
    # partial pivoting keeps every multiplier at most 1 in magnitude
    assert np.all(np.abs(np.tril(lu.lu, -1)) <= 1.0 + 1e-15)


def test_solve_random_nonsingular_upper_triangular():
    n = TEST_ITERATIONS

    for i in range(10):
        A = random_nonsingular_upper(n, seed=i)
        logger.debug(f"\nRunning Test\nRandom Nonsingular Upper:\n{A}\n")

        x_true = np.random.default_rng(i).random(n)
        b = A @ x_true

        x = solve(Matrix.from_array(A), Matrix.from_array(b[:, None])).to_array()[:, 0]

        # Compare the residual (r = b - Ax), this judges numerical
        # correctness in a way that is independent of conditioning.
        res = np.linalg.norm(A @ x - b, ord=np.inf)
        scale = np.linalg.norm(A, ord=np.inf) * np.linalg.norm(x, ord=np.inf)
        assert res <= 1e-12 * scale


def test_solve_random_nonsingular_qr():
    n = TEST_ITERATIONS

    for i in range(10):
        A = random_nonsingular_qr(n, seed=i)
        x_true = np.random.default_rng(100 + i).random(n)
        b = A @ x_true

        x_np = np.linalg.solve(A, b)
        x = solve(Matrix.from_array(A), Matrix.from_array(b[:, None])).to_array()[:, 0]
        logger.debug(f"\n==== Results ====\nOurs:\n{x}\nNumpy:\n{x_np}")
        np.testing.assert_allclose(x, x_np, rtol=5e-8, atol=1e-10, verbose=True)


def test_solve_small_system():
    X = solve(from_row_list([[1, 3], [7, -4]]), from_row_list([[10], [20]]))
    assert X.dimensions == [2, 1]
    np.testing.assert_allclose(X.to_array(), [[4.0], [2.0]], atol=1e-9)


def test_solve_multiple_right_hand_sides():
    rng = np.random.default_rng(11)
    A = rng.standard_normal((5, 5))
    C = rng.standard_normal((5, 3))
    X = solve(Matrix.from_array(A), Matrix.from_array(C))
    np.testing.assert_allclose(X.to_array(), np.linalg.solve(A, C), rtol=1e-9, atol=1e-10)


def test_solve_matches_inverse_times_c():
    for seed in range(5):
        A = Matrix.from_array(random_nonsingular_qr(6, seed=seed))
        C = Matrix.from_array(np.random.default_rng(seed).normal(size=(6, 2)))
        np.testing.assert_allclose(
            solve(A, C).to_array(), times(inverse(A), C).to_array(), atol=1e-9
        )


def test_inverse_times_a_is_identity():
    for seed in range(10):
        A = Matrix.from_array(random_nonsingular_qr(8, seed=seed))
        np.testing.assert_allclose(
            times(A, inverse(A)).to_array(), np.eye(8), atol=1e-9
        )


def test_singular_systems():
    S = from_row_list([[1, 2], [2, 4]])
    with pytest.raises(SingularMatrix):
        solve(S, from_row_list([[1], [2]]))
    with pytest.raises(SingularMatrix):
        inverse(S)
    with pytest.raises(ArithmeticError):
        inverse(Matrix(3, 3))


def test_least_squares_tall():
    rng = np.random.default_rng(5)
    A = rng.standard_normal((12, 4))
    C = rng.standard_normal((12, 2))
    X = solve(Matrix.from_array(A), Matrix.from_array(C))
    x_np, *_ = np.linalg.lstsq(A, C, rcond=None)
    assert X.dimensions == [4, 2]
    np.testing.assert_allclose(X.to_array(), x_np, rtol=1e-9, atol=1e-10)


def test_least_squares_wide_minimum_norm():
    rng = np.random.default_rng(6)
    A = rng.standard_normal((3, 7))
    C = rng.standard_normal((3, 1))
    X = solve(Matrix.from_array(A), Matrix.from_array(C))
    x_np, *_ = np.linalg.lstsq(A, C, rcond=None)
    np.testing.assert_allclose(X.to_array(), x_np, rtol=1e-9, atol=1e-10)
    np.testing.assert_allclose(A @ X.to_array(), C, atol=1e-10)


def test_least_squares_rank_deficient():
    A = from_row_list([[1, 2], [2, 4], [3, 6]])
    with pytest.raises(SingularMatrix):
        solve(A, from_row_list([[1], [2], [3]]))


def test_solve_row_mismatch():
    with pytest.raises(DimensionMismatch):
        solve(make_identity(3), Matrix(2, 1))
    with pytest.raises(DimensionMismatch):
        solve(Matrix(4, 2, 1.0), Matrix(3, 1))


def test_non_square_operations():
    R = Matrix(2, 3, 1.0)
    for op in (inverse, det, trace):
        with pytest.raises(NotSquare):
            op(R)


def test_determinants():
    rng = np.random.default_rng(2)
    for n in (1, 2, 5, 30):
        a = rng.standard_normal((n, n))
        A = Matrix.from_array(a)
        assert math.isclose(det(A), np.linalg.det(a), rel_tol=1e-9, abs_tol=1e-12)
        assert math.isclose(det(A), det(transpose(A)), rel_tol=1e-9, abs_tol=1e-12)


def test_determinant_sign_of_permutation():
    P = from_row_list([[0, 1, 0], [0, 0, 1], [1, 0, 0]])
    assert det(P) == 1.0
    assert det(from_row_list([[0, 1], [1, 0]])) == -1.0


def test_singular_determinant_is_zero():
    assert det(from_row_list([[1, 2], [2, 4]])) == 0.0
    assert det(from_row_list([[1, 2, 3], [4, 5, 6], [7, 8, 9]])) == 0.0
    assert det(Matrix(3, 3)) == 0.0


def test_trace():
    assert trace(from_row_list([[1, 2], [3, 4]])) == 5.0
    assert trace(make_identity(6)) == 6.0



def test_lu_sign_is_permutation_parity():
    rng = np.random.default_rng(4)
    for n in (2, 3, 6, 11):
        lu = lu_factor(rng.standard_normal((n, n)))
        P = np.eye(n)[lu.perm]
        assert lu.sign == round(np.linalg.det(P))
    assert lu_factor(np.eye(3)).sign == 1.0


def test_tiny_scale_matrix_is_not_singular():
    A = times_scalar(make_identity(2), 1e-13)
    np.testing.assert_allclose(times(A, inverse(A)).to_array(), np.eye(2), atol=1e-12)
    assert math.isclose(det(A), 1e-26, rel_tol=1e-12)

    rng = np.random.default_rng(8)
    a = rng.standard_normal((4, 4))
    small = Matrix.from_array(a * 1e-20)
    assert math.isclose(det(small), np.linalg.det(a) * 1e-80, rel_tol=1e-9)
    np.testing.assert_allclose(
        times(small, inverse(small)).to_array(), np.eye(4), atol=1e-9
    )


def test_huge_scale_singular_matrix_is_singular():
    S = times_scalar(from_row_list([[1, 2, 3], [4, 5, 6], [7, 8, 9]]), 1e20)
    assert det(S) == 0.0
    with pytest.raises(SingularMatrix):
        inverse(S)
