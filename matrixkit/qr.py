# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import logging
from typing import Tuple

import numpy as np

from .errors import SingularMatrix
from .utils import scale_tol

logger = logging.getLogger(__name__)


def householder_qr(A: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Compute the QR decomposition of an m-by-n matrix A using
    Householder transformations. (m ≥ n)

    A = QR
    H = I - tau * w * transpose(w)
    tau = 2 / transpose(w) * w

    Parameters
    ----------
    A : (m, n) ndarray, m >= n

    Returns
    -------
    Q : (m, n) ndarray | orthonormal columns
    R : (n, n) ndarray | upper-triangular
    """
    A = A.astype(float, copy=True)
    m, n = A.shape
    if m < n:
        raise ValueError(f"householder_qr needs m >= n, got {m}x{n}")
    Q = np.eye(m)
    R = A.copy()

    for j in range(n):
        # ---- build the reflector for column j --------------------------------
        x = R[j:, j]
        norm_x = np.linalg.norm(x)
        if norm_x == 0.0:  # already zero
            continue
        # w = x + sign(x0) ‖x‖ e₁
        w = x.copy()
        w[0] += np.copysign(norm_x, x[0])
        w /= np.linalg.norm(w)  # ‖w‖ = 1
        w = w.reshape(-1, 1)  # column
        tau = 2  # because w is unit-norm

        # ---- apply H = I – τ w wᵀ  to R (from the left) ----------------------
        R[j:, :] -= tau * w @ (w.T @ R[j:, :])
        # ---- accumulate Q = Q Hᵀ (Hᵀ = H)  -----------------------------------
        Q[:, j:] -= Q[:, j:] @ w @ (tau * w).T

    # economic Q (m × n)
    Q = Q[:, :n]

    # force exact upper-triangular shape / zero tiny noise
    R[np.tril_indices(n, -1)] = 0.0
    # keep only the square part
    R = R[:n, :n]
    return Q, R


def _check_full_rank(R: np.ndarray, A: np.ndarray) -> None:
    tol = scale_tol(A)
    small = np.flatnonzero(np.abs(np.diag(R)) <= tol)
    if small.size:
        raise SingularMatrix(
            f"matrix is rank deficient (column {int(small[0])} is dependent); "
            "least-squares solution is not unique"
        )


def least_squares_householder_qr(A: np.ndarray, b: np.ndarray) -> np.ndarray:
    """
    Solve min ‖Ax – b‖₂ using (economic) Householder QR.

    Tall systems (m > n) get the least-squares solution of A = QR,
    x = R⁻¹ Qᵀ b. Wide systems (m < n) are underdetermined; they get the
    minimum-norm solution through Aᵀ = QR, x = Q R⁻ᵀ b.

    Parameters
    ----------
    A : (m, n) ndarray
        Full-rank coefficient matrix.
    b : (m,) or (m, k) ndarray

    Returns
    -------
    x : (n,) or (n, k) ndarray

    Raises
    ------
    SingularMatrix : if A does not have full rank min(m, n).
    """
    from .elimination import back_substitute, forward_substitute

    A = np.asarray(A, dtype=float)
    b = np.asarray(b, dtype=float)
    m, n = A.shape

    if m >= n:
        logger.debug("least squares: overdetermined %dx%d via QR of A", m, n)
        Q, R = householder_qr(A)
        _check_full_rank(R, A)
        return back_substitute(R, Q.T @ b)

    logger.debug("least squares: underdetermined %dx%d via QR of A.T", m, n)
    Q, R = householder_qr(A.T)
    _check_full_rank(R, A)
    y = forward_substitute(R.T, b)
    return Q @ y


def random_nonsingular_qr(n, seed=None) -> np.ndarray:
    """
    QR trick (random orthogonal × random non-zero scale)

    QR Decomposition:
        A matrix A can be decomposed into the product of an
        orthogonal matrix Q and an upper triangular matrix
        R (A = QR)

    Returns
    -------
    Matrix with float64 dtype
    """
    rng = np.random.default_rng(seed)
    A = rng.standard_normal((n, n))
    Q, _R = householder_qr(A)  # Q is orthogonal, det ≠ 0
    scales = rng.uniform(0.5, 10.0, size=n)  # strictly non-zero
    return np.asarray(Q * scales)  # broadcast scales into columns
