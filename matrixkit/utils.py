# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import numpy as np

# Pivot tolerance relative to the infinity norm, used by elimination
# and the QR rank check.
EPS: float = 1e-12

# Unit roundoff for float64, used by the numerical rank cut-off.
MACHINE_EPS: float = float(np.finfo(float).eps)

# Deflation threshold for the eigen iterations.
EIGEN_EPS: float = 2.0**-52

# QR/QL iterations allowed per eigenvalue before giving up. Exceptional
# shifts are applied at iterations 10 and 30, so this must stay above 30.
MAX_EIGEN_ITERATIONS: int = 100

# Full Jacobi sweeps allowed for the SVD.
MAX_SVD_SWEEPS: int = 75


def scale_tol(A: np.ndarray) -> float:
    """Return a pivot tolerance proportional to the matrix magnitude."""
    return EPS * float(np.linalg.norm(A, ord=np.inf))


def is_symmetric(A: np.ndarray) -> bool:
    """Exact symmetry check, A[i, j] == A[j, i] for every cell."""
    m, n = A.shape
    return m == n and bool(np.array_equal(A, A.T))


def random_nonsingular_upper(n, low=-100, high=100, seed=None) -> np.ndarray:
    """
    Build a matrix U that is upper-triangular with random entries
    everywhere and put only non-zero values on its diagonal

    Returns
    -------
    Matrix with float64 dtype
    """
    rng = np.random.default_rng(seed)
    U = rng.uniform(low, high, size=(n, n))
    # enforce upper-triangular
    U = np.triu(U)
    # replace any accidental zeros on the diagonal
    diag = rng.uniform(low if low != 0 else 1, high, size=n)
    U[np.diag_indices(n)] = diag
    return np.asarray(U)
