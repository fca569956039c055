# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import logging
from typing import List, NamedTuple

import numpy as np

from .errors import DimensionMismatch, NotSquare, SingularMatrix
from .matrix import Matrix, as_array, make_identity
from .qr import least_squares_householder_qr
from .utils import scale_tol

logger = logging.getLogger(__name__)


class LUDecomposition(NamedTuple):
    """
    Packed result of ``lu_factor``.

    ``lu`` holds the unit lower factor below the diagonal and the upper
    factor on and above it, so that ``A[perm] == L @ U``. ``sign`` is the
    parity of ``perm``, +1.0 or -1.0.
    """

    lu: np.ndarray
    perm: List[int]
    sign: float
    singular: bool


def back_substitute(U: np.ndarray, c: np.ndarray) -> np.ndarray:
    """
    Parameters
    ----------
    U : (n, n) ndarray
        Upper-triangular matrix.
    c : (n,) or (n, k) ndarray
        RHS after identical row operations.
    Returns
    -------
    x : (n,) or (n, k) ndarray, same ndim as c
        Solution(s) of Ux = c.
    Raises
    ------
    SingularMatrix : if a diagonal entry is numerically zero.
    """
    U = np.asarray(U, dtype=float)
    c = np.asarray(c, dtype=float)
    flat = c.ndim == 1
    if flat:
        c = c[:, None]
    n, k = c.shape
    x = np.zeros((n, k), dtype=float)
    tol = scale_tol(U)

    for i in reversed(range(n)):
        pivot = U[i, i]
        if abs(pivot) <= tol:
            raise SingularMatrix(f"zero pivot at row {i}: matrix is singular")
        s = c[i] - U[i, i + 1 :] @ x[i + 1 :]
        x[i] = s / pivot

    return x.ravel() if flat else x


def forward_substitute(L: np.ndarray, c: np.ndarray, unit: bool = False) -> np.ndarray:
    """Solve Lx = c for lower-triangular L (unit diagonal if ``unit``)."""
    L = np.asarray(L, dtype=float)
    c = np.asarray(c, dtype=float)
    flat = c.ndim == 1
    if flat:
        c = c[:, None]
    n, k = c.shape
    x = np.zeros((n, k), dtype=float)
    tol = scale_tol(L)

    for i in range(n):
        s = c[i] - L[i, :i] @ x[:i]
        if unit:
            x[i] = s
            continue
        if abs(L[i, i]) <= tol:
            raise SingularMatrix(f"zero pivot at row {i}: matrix is singular")
        x[i] = s / L[i, i]

    return x.ravel() if flat else x


def lu_factor(A: np.ndarray) -> LUDecomposition:
    """
    Doolittle LU with partial pivoting, A[perm] = L U.

    A column whose best pivot is within ``scale_tol(A)`` of zero marks the
    factorisation singular; elimination carries on past it so the
    determinant can still be read off as 0.
    """
    LU = np.array(A, dtype=float, copy=True)
    m, n = LU.shape
    if m != n:
        raise NotSquare(f"LU factorisation needs a square matrix, got {m}x{n}")

    tol = scale_tol(LU)
    perm = list(range(n))
    sign = 1.0
    singular = False

    for k in range(n):
        p = k + int(np.abs(LU[k:, k]).argmax())
        if abs(LU[p, k]) <= tol:
            singular = True
            continue
        if p != k:
            LU[[k, p]] = LU[[p, k]]
            perm[k], perm[p] = perm[p], perm[k]
            sign = -sign
        LU[k + 1 :, k] /= LU[k, k]
        LU[k + 1 :, k + 1 :] -= np.outer(LU[k + 1 :, k], LU[k, k + 1 :])

    return LUDecomposition(LU, perm, sign, singular)


def lu_solve(lu: LUDecomposition, C: np.ndarray) -> np.ndarray:
    if lu.singular:
        raise SingularMatrix("matrix is singular to working precision")
    y = forward_substitute(lu.lu, np.asarray(C, dtype=float)[lu.perm], unit=True)
    return back_substitute(np.triu(lu.lu), y)


# ---------------------------------------------------------------------
# Matrix-level operations
# ---------------------------------------------------------------------


def _require_square(A: np.ndarray, what: str) -> int:
    m, n = A.shape
    if m != n:
        raise NotSquare(f"{what} requires a square matrix, got {m}x{n}")
    return n


def solve(A: Matrix, C: Matrix) -> Matrix:
    """
    Solve A X = C for X.

    Square A is solved exactly by pivoted elimination. A non-square A gives
    the least-squares solution of ‖A X − C‖², the minimum-norm one when A is
    wide.
    """
    a = as_array(A, "A")
    c = as_array(C, "C")
    m, n = a.shape
    if c.shape[0] != m:
        raise DimensionMismatch(
            f"C has {c.shape[0]} rows but A has {m}; they must match"
        )
    if m == n:
        x = lu_solve(lu_factor(a), c)
    else:
        x = least_squares_householder_qr(a, c)
    return Matrix._wrap(np.ascontiguousarray(x))


def inverse(A: Matrix) -> Matrix:
    n = _require_square(as_array(A, "A"), "inverse")
    return solve(A, make_identity(n))


def det(A: Matrix) -> float:
    """
    Determinant of n-by-n matrix A from its LU factors: the product of the
    diagonal of U, signed by the parity of the row permutation.

    Singular matrices give 0.0 rather than an error.
    """
    a = as_array(A, "A")
    _require_square(a, "det")
    lu = lu_factor(a)
    if lu.singular:
        logger.debug("det: singular within tolerance, returning 0.0")
        return 0.0
    return lu.sign * float(np.prod(np.diag(lu.lu)))


def trace(A: Matrix) -> float:
    a = as_array(A, "A")
    _require_square(a, "trace")
    return float(np.trace(a))
