# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import logging
from typing import List, Optional, Tuple

import numpy as np

from .errors import NumericalFailure
from .matrix import Matrix, as_array
from .utils import MACHINE_EPS, MAX_SVD_SWEEPS

logger = logging.getLogger(__name__)


def svd(A: np.ndarray, max_sweeps: Optional[int] = None):
    """
    Economy-size Singular Value Decomposition by one-sided Jacobi
    (Hestenes) rotations.

    For an m-by-n real matrix (m ≥ n) this routine returns three objects:
        U : m-by-n matrix, orthonormal columns for the non-zero singular
            values and zero columns for the rest
        s : length-n vector of singular values, sorted in descending order
        Vt: n-by-n matrix whose rows are orthonormal  (V.T)

    Algorithm outline
    -----------------
    1.  Start from W = A and V = I.
    2.  For every column pair (p, q), apply the plane rotation that makes
        W[:, p] and W[:, q] orthogonal, and apply the same rotation to V.
    3.  Repeat full sweeps until no pair needs rotating. W = U Σ then has
        orthogonal columns, and A = W Vᵀ.
    4.  Singular values are the column norms of W; U is W with each
        non-zero column normalised.

    Unlike the normal-equations route through AᵀA, this never squares the
    condition number, so small singular values keep their relative
    accuracy.
    """
    A = np.asarray(A, dtype=float)
    m, n = A.shape

    # Handle the wide-matrix case by transposing and swapping the roles
    # of left and right singular vectors.
    if m < n:
        Vt, s, Ut = svd(A.T, max_sweeps)
        return Ut.T, s, Vt.T

    if max_sweeps is None:
        max_sweeps = MAX_SVD_SWEEPS

    W = A.copy()
    V = np.eye(n)
    tol = MACHINE_EPS * n

    for sweep in range(max_sweeps):
        rotated = False
        for p in range(n - 1):
            for q in range(p + 1, n):
                alpha = float(W[:, p] @ W[:, p])
                beta = float(W[:, q] @ W[:, q])
                gamma = float(W[:, p] @ W[:, q])
                if abs(gamma) <= tol * np.sqrt(alpha * beta):
                    continue
                rotated = True

                zeta = (beta - alpha) / (2.0 * gamma)
                t = np.copysign(1.0, zeta) / (abs(zeta) + np.sqrt(1.0 + zeta * zeta))
                c = 1.0 / np.sqrt(1.0 + t * t)
                s = c * t

                wp = W[:, p].copy()
                W[:, p] = c * wp - s * W[:, q]
                W[:, q] = s * wp + c * W[:, q]
                vp = V[:, p].copy()
                V[:, p] = c * vp - s * V[:, q]
                V[:, q] = s * vp + c * V[:, q]
        if not rotated:
            logger.debug("svd: %dx%d converged after %d sweeps", m, n, sweep + 1)
            break
    else:
        raise NumericalFailure(
            f"Jacobi SVD did not converge in {max_sweeps} sweeps", iterations=max_sweeps
        )

    s = np.linalg.norm(W, axis=0)
    idx = np.argsort(s, kind="stable")[::-1]
    s = s[idx]
    W = W[:, idx]
    V = V[:, idx]

    U = np.zeros_like(W)
    nonzero = s > 0.0
    U[:, nonzero] = W[:, nonzero] / s[nonzero]

    return U, s, V.T


def singular_values(A: np.ndarray) -> np.ndarray:
    return svd(A)[1]


def rank_tol(s: np.ndarray, shape: Tuple[int, int]) -> float:
    """Numerical-rank cut-off: max(m, n) · σ_max · ε."""
    if s.size == 0:
        return 0.0
    return max(shape) * float(s[0]) * MACHINE_EPS


def rank(A: Matrix) -> int:
    """
    Effective rank: the number of singular values strictly above
    ``rank_tol``. A zero matrix has rank 0.
    """
    a = as_array(A, "A")
    s = singular_values(a)
    return int(np.count_nonzero(s > rank_tol(s, a.shape)))


def singular_value_list(A: Matrix) -> List[float]:
    return singular_values(as_array(A, "A")).tolist()
