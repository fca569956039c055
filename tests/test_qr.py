# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import logging

import numpy as np
import pytest

from matrixkit.errors import SingularMatrix
from matrixkit.qr import (
    householder_qr,
    least_squares_householder_qr,
    random_nonsingular_qr,
)

TEST_ITERATIONS = 50
logger = logging.getLogger(__name__)


def test_least_squares_householder_qr():
    rng = np.random.default_rng(1)

    for i in range(TEST_ITERATIONS):
        A = rng.standard_normal((20, 6))
        b = rng.standard_normal(20)

        x_np, *_ = np.linalg.lstsq(A, b, rcond=None)
        x_householder = least_squares_householder_qr(A, b)

        res_np = np.linalg.norm(A @ x_np - b)
        res_householder = np.linalg.norm(A @ x_householder - b)
        assert x_householder.shape == (6,)
        assert res_householder <= res_np * (1 + 1e-8)


def test_orthogonality_householder_qr():
    V = np.random.default_rng(2).standard_normal((100, 10))
    Q, R = householder_qr(V)
    identity = Q.T @ Q
    assert np.allclose(identity, np.eye(10), atol=1e-10)
    assert np.allclose(Q @ R, V, atol=1e-10)
    assert np.allclose(R, np.triu(R))


def test_householder_qr_rejects_wide():
    with pytest.raises(ValueError):
        householder_qr(np.ones((2, 3)))


def test_underdetermined_minimum_norm():
    A = np.array([[1.0, 1.0]])
    x = least_squares_householder_qr(A, np.array([2.0]))
    np.testing.assert_allclose(x, [1.0, 1.0], atol=1e-12)


def test_rank_deficient_raises():
    A = np.array([[1.0, 1.0], [1.0, 1.0], [0.0, 0.0]])
    with pytest.raises(SingularMatrix):
        least_squares_householder_qr(A, np.ones(3))


def test_random_nonsingular_qr_is_well_conditioned():
    A = random_nonsingular_qr(TEST_ITERATIONS, seed=0)
    assert np.linalg.matrix_rank(A) == TEST_ITERATIONS
    assert np.linalg.cond(A) <= 20.0 + 1e-6


def test_tiny_scale_least_squares():
    rng = np.random.default_rng(12)
    A = rng.standard_normal((9, 3)) * 1e-14
    b = rng.standard_normal(9) * 1e-14
    x_np, *_ = np.linalg.lstsq(A, b, rcond=None)
    x = least_squares_householder_qr(A, b)
    np.testing.assert_allclose(x, x_np, rtol=1e-9, atol=1e-10)
