# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Eigendecomposition of real square matrices.

Two algorithms sit behind one entry point, picked by an exact symmetry
check:

- symmetric: Householder reduction to tridiagonal form, then implicit QL
  iteration. Eigenvalues are real and returned in ascending order, the
  eigenvectors are orthonormal.
- general: orthogonal reduction to upper Hessenberg form, then
  Francis double-shift QR iteration down to real Schur form, then back
  substitution for the eigenvectors. Eigenvalues come out in Schur
  position order. A complex pair a ± bi occupies two adjacent slots with
  the positive imaginary part first; the matching eigenvector columns hold
  the real and imaginary parts of the eigenvector for a + bi, so the
  vector for a - bi is its conjugate.

Both iterations deflate one eigenvalue (or one 2x2 block) at a time and
give up with ``NumericalFailure`` after ``max_iter`` steps on the same
eigenvalue.
"""

import logging
import math
from typing import List, NamedTuple, Optional, Tuple

import numpy as np

from .errors import NotSquare, NumericalFailure
from .matrix import Matrix, as_array
from .utils import EIGEN_EPS, MAX_EIGEN_ITERATIONS, is_symmetric

logger = logging.getLogger(__name__)


class EigenDecomposition(NamedTuple):
    real: List[float]
    imag: List[float]
    vectors: Matrix


# ---------------------------------------------------------------------
# Symmetric path
# ---------------------------------------------------------------------


def tridiagonalize(A: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Householder reduction of a symmetric matrix to tridiagonal form.

    Returns
    -------
    d : (n,) diagonal
    e : (n,) sub-diagonal in e[1:], e[0] == 0
    V : (n, n) accumulated orthogonal transformation
    """
    V = np.array(A, dtype=float, copy=True)
    n = V.shape[0]
    d = V[n - 1].copy()
    e = np.zeros(n)

    for i in range(n - 1, 0, -1):
        scale = float(np.sum(np.abs(d[:i])))
        h = 0.0
        if scale == 0.0:
            e[i] = d[i - 1]
            d[:i] = V[i - 1, :i]
            V[i, :i] = 0.0
            V[:i, i] = 0.0
        else:
            # Generate the Householder vector.
            d[:i] /= scale
            h = float(d[:i] @ d[:i])
            f = d[i - 1]
            g = math.sqrt(h)
            if f > 0:
                g = -g
            e[i] = scale * g
            h -= f * g
            d[i - 1] = f - g
            e[:i] = 0.0

            # Apply the similarity transformation to the remaining columns.
            for j in range(i):
                f = d[j]
                V[j, i] = f
                g = e[j] + V[j, j] * f
                for k in range(j + 1, i):
                    g += V[k, j] * d[k]
                    e[k] += V[k, j] * f
                e[j] = g

            e[:i] /= h
            f = float(e[:i] @ d[:i])
            hh = f / (h + h)
            e[:i] -= hh * d[:i]
            for j in range(i):
                f = d[j]
                g = e[j]
                V[j:i, j] -= f * e[j:i] + g * d[j:i]
                d[j] = V[i - 1, j]
                V[i, j] = 0.0
        d[i] = h

    # Accumulate transformations.
    for i in range(n - 1):
        V[n - 1, i] = V[i, i]
        V[i, i] = 1.0
        h = d[i + 1]
        if h != 0.0:
            d[: i + 1] = V[: i + 1, i + 1] / h
            for j in range(i + 1):
                g = float(V[: i + 1, i + 1] @ V[: i + 1, j])
                V[: i + 1, j] -= g * d[: i + 1]
        V[: i + 1, i + 1] = 0.0
    d[:] = V[n - 1]
    V[n - 1] = 0.0
    V[n - 1, n - 1] = 1.0
    e[0] = 0.0
    return d, e, V


def tridiagonal_ql(
    d: np.ndarray,
    e: np.ndarray,
    V: np.ndarray,
    max_iter: int = MAX_EIGEN_ITERATIONS,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Implicit QL iteration on the tridiagonal (d, e) from ``tridiagonalize``.

    ``V`` is updated in place. Returns eigenvalues in ascending order and
    the matching eigenvector columns.
    """
    n = d.shape[0]
    d = d.copy()
    e = e.copy()
    e[:-1] = e[1:]
    e[n - 1] = 0.0

    f = 0.0
    tst1 = 0.0
    for l in range(n):
        # Find a small sub-diagonal element.
        tst1 = max(tst1, abs(d[l]) + abs(e[l]))
        m = l
        while m < n - 1 and abs(e[m]) > EIGEN_EPS * tst1:
            m += 1

        # If m == l, d[l] is already an eigenvalue; otherwise iterate.
        if m > l:
            iters = 0
            while True:
                if iters >= max_iter:
                    raise NumericalFailure(
                        f"QL iteration did not converge for eigenvalue {l} "
                        f"after {iters} iterations",
                        iterations=iters,
                    )
                iters += 1

                # Compute the implicit shift.
                g = d[l]
                p = (d[l + 1] - g) / (2.0 * e[l])
                r = math.hypot(p, 1.0)
                if p < 0:
                    r = -r
                d[l] = e[l] / (p + r)
                d[l + 1] = e[l] * (p + r)
                dl1 = d[l + 1]
                h = g - d[l]
                d[l + 2 :] -= h
                f += h

                # Implicit QL transformation.
                p = d[m]
                c = c2 = c3 = 1.0
                el1 = e[l + 1]
                s = s2 = 0.0
                for i in range(m - 1, l - 1, -1):
                    c3 = c2
                    c2 = c
                    s2 = s
                    g = c * e[i]
                    h = c * p
                    r = math.hypot(p, e[i])
                    e[i + 1] = s * r
                    s = e[i] / r
                    c = p / r
                    p = c * d[i] - s * g
                    d[i + 1] = h + s * (c * g + s * d[i])

                    # Accumulate the rotation.
                    col = V[:, i + 1].copy()
                    V[:, i + 1] = s * V[:, i] + c * col
                    V[:, i] = c * V[:, i] - s * col

                p = -s * s2 * c3 * el1 * e[l] / dl1
                e[l] = s * p
                d[l] = c * p

                if abs(e[l]) <= EIGEN_EPS * tst1:
                    break
        d[l] += f
        e[l] = 0.0

    order = np.argsort(d, kind="stable")
    return d[order], V[:, order]


# ---------------------------------------------------------------------
# General path
# ---------------------------------------------------------------------


def hessenberg(A: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Orthogonal reduction to upper Hessenberg form, A = V H Vᵀ.

    Returns
    -------
    H : (n, n) upper Hessenberg matrix
    V : (n, n) accumulated orthogonal transformation
    """
    H = np.array(A, dtype=float, copy=True)
    n = H.shape[0]
    high = n - 1
    ort = np.zeros(n)

    for m in range(1, high):
        scale = float(np.sum(np.abs(H[m : high + 1, m - 1])))
        if scale == 0.0:
            continue

        # Compute the Householder transformation.
        ort[m : high + 1] = H[m : high + 1, m - 1] / scale
        h = float(ort[m : high + 1] @ ort[m : high + 1])
        g = math.sqrt(h)
        if ort[m] > 0:
            g = -g
        h -= ort[m] * g
        ort[m] -= g

        # Apply it from the left and from the right:
        # H = (I - u uᵀ / h) H (I - u uᵀ / h)
        u = ort[m : high + 1]
        f = (u @ H[m : high + 1, m:]) / h
        H[m : high + 1, m:] -= np.outer(u, f)
        f = (H[: high + 1, m : high + 1] @ u) / h
        H[: high + 1, m : high + 1] -= np.outer(f, u)

        ort[m] *= scale
        H[m, m - 1] = scale * g

    # Accumulate transformations.
    V = np.eye(n)
    for m in range(high - 1, 0, -1):
        if H[m, m - 1] != 0.0:
            ort[m + 1 : high + 1] = H[m + 1 : high + 1, m - 1]
            u = ort[m : high + 1]
            for j in range(m, high + 1):
                g = float(u @ V[m : high + 1, j])
                # Double division avoids possible underflow.
                g = (g / ort[m]) / H[m, m - 1]
                V[m : high + 1, j] += g * u

    # Clear the Householder vectors stored below the sub-diagonal.
    H[np.tril_indices(n, -2)] = 0.0
    return H, V


def _cdiv(xr: float, xi: float, yr: float, yi: float) -> Tuple[float, float]:
    q = complex(xr, xi) / complex(yr, yi)
    return q.real, q.imag


def schur_eigen(
    H: np.ndarray,
    V: np.ndarray,
    max_iter: int = MAX_EIGEN_ITERATIONS,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Francis double-shift QR from Hessenberg form to real Schur form,
    followed by eigenvector back substitution.

    ``H`` and ``V`` are the output of ``hessenberg`` and are overwritten.

    Returns
    -------
    d : (n,) real parts of the eigenvalues
    e : (n,) imaginary parts of the eigenvalues
    V : (n, n) eigenvectors, columns matching d/e
    """
    nn = H.shape[0]
    n = nn - 1
    low = 0
    high = nn - 1
    eps = EIGEN_EPS
    exshift = 0.0
    p = q = r = s = z = 0.0
    d = np.zeros(nn)
    e = np.zeros(nn)

    # Matrix norm used for the deflation tests.
    norm = 0.0
    for i in range(nn):
        norm += float(np.sum(np.abs(H[i, max(i - 1, 0) :])))

    iters = 0
    while n >= low:
        # Look for a single small sub-diagonal element.
        l = n
        while l > low:
            s = abs(H[l - 1, l - 1]) + abs(H[l, l])
            if s == 0.0:
                s = norm
            if abs(H[l, l - 1]) < eps * s:
                break
            l -= 1

        if l == n:
            # One root found.
            H[n, n] += exshift
            d[n] = H[n, n]
            e[n] = 0.0
            n -= 1
            iters = 0

        elif l == n - 1:
            # Two roots found.
            w = H[n, n - 1] * H[n - 1, n]
            p = (H[n - 1, n - 1] - H[n, n]) / 2.0
            q = p * p + w
            z = math.sqrt(abs(q))
            H[n, n] += exshift
            H[n - 1, n - 1] += exshift
            x = H[n, n]

            if q >= 0:
                # Real pair.
                z = p + z if p >= 0 else p - z
                d[n - 1] = x + z
                d[n] = d[n - 1]
                if z != 0.0:
                    d[n] = x - w / z
                e[n - 1] = 0.0
                e[n] = 0.0
                x = H[n, n - 1]
                s = abs(x) + abs(z)
                p = x / s
                q = z / s
                r = math.sqrt(p * p + q * q)
                p /= r
                q /= r

                # Row, column and accumulated rotation.
                row = H[n - 1, n - 1 :].copy()
                H[n - 1, n - 1 :] = q * row + p * H[n, n - 1 :]
                H[n, n - 1 :] = q * H[n, n - 1 :] - p * row
                col = H[: n + 1, n - 1].copy()
                H[: n + 1, n - 1] = q * col + p * H[: n + 1, n]
                H[: n + 1, n] = q * H[: n + 1, n] - p * col
                col = V[low : high + 1, n - 1].copy()
                V[low : high + 1, n - 1] = q * col + p * V[low : high + 1, n]
                V[low : high + 1, n] = q * V[low : high + 1, n] - p * col
            else:
                # Complex pair.
                d[n - 1] = x + p
                d[n] = x + p
                e[n - 1] = z
                e[n] = -z
            n -= 2
            iters = 0

        else:
            # No convergence yet.
            if iters >= max_iter:
                raise NumericalFailure(
                    f"QR iteration did not converge for eigenvalue {n} "
                    f"after {iters} iterations",
                    iterations=iters,
                )

            # Form the shift.
            x = H[n, n]
            y = 0.0
            w = 0.0
            if l < n:
                y = H[n - 1, n - 1]
                w = H[n, n - 1] * H[n - 1, n]

            # Wilkinson's ad hoc shift.
            if iters == 10:
                exshift += x
                for i in range(low, n + 1):
                    H[i, i] -= x
                s = abs(H[n, n - 1]) + abs(H[n - 1, n - 2])
                x = y = 0.75 * s
                w = -0.4375 * s * s

            # Second ad hoc shift.
            if iters == 30:
                s = (y - x) / 2.0
                s = s * s + w
                if s > 0:
                    s = math.sqrt(s)
                    if y < x:
                        s = -s
                    s = x - w / ((y - x) / 2.0 + s)
                    for i in range(low, n + 1):
                        H[i, i] -= s
                    exshift += s
                    x = y = w = 0.964

            iters += 1

            # Look for two consecutive small sub-diagonal elements.
            m = n - 2
            while m >= l:
                z = H[m, m]
                r = x - z
                s = y - z
                p = (r * s - w) / H[m + 1, m] + H[m, m + 1]
                q = H[m + 1, m + 1] - z - r - s
                r = H[m + 2, m + 1]
                s = abs(p) + abs(q) + abs(r)
                p /= s
                q /= s
                r /= s
                if m == l:
                    break
                if abs(H[m, m - 1]) * (abs(q) + abs(r)) < eps * (
                    abs(p) * (abs(H[m - 1, m - 1]) + abs(z) + abs(H[m + 1, m + 1]))
                ):
                    break
                m -= 1

            for i in range(m + 2, n + 1):
                H[i, i - 2] = 0.0
                if i > m + 2:
                    H[i, i - 3] = 0.0

            # Double QR step on rows l:n and columns m:n.
            for k in range(m, n):
                notlast = k != n - 1
                if k != m:
                    p = H[k, k - 1]
                    q = H[k + 1, k - 1]
                    r = H[k + 2, k - 1] if notlast else 0.0
                    x = abs(p) + abs(q) + abs(r)
                    if x == 0.0:
                        continue
                    p /= x
                    q /= x
                    r /= x

                s = math.sqrt(p * p + q * q + r * r)
                if p < 0:
                    s = -s
                if s == 0.0:
                    continue

                if k != m:
                    H[k, k - 1] = -s * x
                elif l != m:
                    H[k, k - 1] = -H[k, k - 1]
                p += s
                x = p / s
                y = q / s
                z = r / s
                q /= p
                r /= p

                # Row modification.
                pr = H[k, k:] + q * H[k + 1, k:]
                if notlast:
                    pr += r * H[k + 2, k:]
                    H[k + 2, k:] -= pr * z
                H[k, k:] -= pr * x
                H[k + 1, k:] -= pr * y

                # Column modification.
                top = min(n, k + 3) + 1
                pc = x * H[:top, k] + y * H[:top, k + 1]
                if notlast:
                    pc += z * H[:top, k + 2]
                    H[:top, k + 2] -= pc * r
                H[:top, k] -= pc
                H[:top, k + 1] -= pc * q

                # Accumulate transformations.
                pv = x * V[low : high + 1, k] + y * V[low : high + 1, k + 1]
                if notlast:
                    pv += z * V[low : high + 1, k + 2]
                    V[low : high + 1, k + 2] -= pv * r
                V[low : high + 1, k] -= pv
                V[low : high + 1, k + 1] -= pv * q

    # Back substitute to find vectors of the upper triangular form.
    if norm == 0.0:
        return d, e, V

    for n in range(nn - 1, -1, -1):
        p = d[n]
        q = e[n]

        if q == 0:
            # Real vector.
            l = n
            H[n, n] = 1.0
            for i in range(n - 1, -1, -1):
                w = H[i, i] - p
                r = float(H[i, l : n + 1] @ H[l : n + 1, n])
                if e[i] < 0.0:
                    z = w
                    s = r
                    continue
                l = i
                if e[i] == 0.0:
                    H[i, n] = -r / w if w != 0.0 else -r / (eps * norm)
                else:
                    # Solve the 2x2 real system.
                    x = H[i, i + 1]
                    y = H[i + 1, i]
                    q = (d[i] - p) * (d[i] - p) + e[i] * e[i]
                    t = (x * s - z * r) / q
                    H[i, n] = t
                    if abs(x) > abs(z):
                        H[i + 1, n] = (-r - w * t) / x
                    else:
                        H[i + 1, n] = (-s - y * t) / z

                # Overflow control.
                t = abs(H[i, n])
                if (eps * t) * t > 1:
                    H[i : n + 1, n] /= t

        elif q < 0:
            # Complex vector; the last component is chosen imaginary so
            # the 2x2 block is triangular.
            l = n - 1
            if abs(H[n, n - 1]) > abs(H[n - 1, n]):
                H[n - 1, n - 1] = q / H[n, n - 1]
                H[n - 1, n] = -(H[n, n] - p) / H[n, n - 1]
            else:
                H[n - 1, n - 1], H[n - 1, n] = _cdiv(
                    0.0, -H[n - 1, n], H[n - 1, n - 1] - p, q
                )
            H[n, n - 1] = 0.0
            H[n, n] = 1.0

            for i in range(n - 2, -1, -1):
                ra = float(H[i, l : n + 1] @ H[l : n + 1, n - 1])
                sa = float(H[i, l : n + 1] @ H[l : n + 1, n])
                w = H[i, i] - p

                if e[i] < 0.0:
                    z = w
                    r = ra
                    s = sa
                    continue
                l = i
                if e[i] == 0.0:
                    H[i, n - 1], H[i, n] = _cdiv(-ra, -sa, w, q)
                else:
                    # Solve the complex 2x2 system.
                    x = H[i, i + 1]
                    y = H[i + 1, i]
                    vr = (d[i] - p) * (d[i] - p) + e[i] * e[i] - q * q
                    vi = (d[i] - p) * 2.0 * q
                    if vr == 0.0 and vi == 0.0:
                        vr = eps * norm * (abs(w) + abs(q) + abs(x) + abs(y) + abs(z))
                    H[i, n - 1], H[i, n] = _cdiv(
                        x * r - z * ra + q * sa, x * s - z * sa - q * ra, vr, vi
                    )
                    if abs(x) > abs(z) + abs(q):
                        H[i + 1, n - 1] = (-ra - w * H[i, n - 1] + q * H[i, n]) / x
                        H[i + 1, n] = (-sa - w * H[i, n] - q * H[i, n - 1]) / x
                    else:
                        H[i + 1, n - 1], H[i + 1, n] = _cdiv(
                            -r - y * H[i, n - 1], -s - y * H[i, n], z, q
                        )

                # Overflow control.
                t = max(abs(H[i, n - 1]), abs(H[i, n]))
                if (eps * t) * t > 1:
                    H[i : n + 1, n - 1] /= t
                    H[i : n + 1, n] /= t

    # Back transformation to get eigenvectors of the original matrix.
    for j in range(nn - 1, low - 1, -1):
        top = min(j, high) + 1
        V[low : high + 1, j] = V[low : high + 1, low:top] @ H[low:top, j]

    return d, e, V


# ---------------------------------------------------------------------
# Matrix-level operations
# ---------------------------------------------------------------------


def eig_array(
    A: np.ndarray, max_iter: Optional[int] = None
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Eigenvalues (real, imaginary parts) and eigenvectors of a square array.
    """
    A = np.asarray(A, dtype=float)
    m, n = A.shape
    if m != n:
        raise NotSquare(f"eigendecomposition requires a square matrix, got {m}x{n}")
    if max_iter is None:
        max_iter = MAX_EIGEN_ITERATIONS

    if is_symmetric(A):
        logger.debug("eig: %dx%d symmetric, tridiagonal QL path", n, n)
        d, e, V = tridiagonalize(A)
        d, V = tridiagonal_ql(d, e, V, max_iter=max_iter)
        return d, np.zeros(n), V

    logger.debug("eig: %dx%d general, Hessenberg QR path", n, n)
    H, V = hessenberg(A)
    return schur_eigen(H, V, max_iter=max_iter)


def eig(A: Matrix, max_iter: Optional[int] = None) -> EigenDecomposition:
    d, e, V = eig_array(as_array(A, "A"), max_iter=max_iter)
    return EigenDecomposition(d.tolist(), e.tolist(), Matrix._wrap(np.ascontiguousarray(V)))


def real_eigenvalues(A: Matrix) -> List[float]:
    return eig(A).real


def imaginary_eigenvalues(A: Matrix) -> List[float]:
    return eig(A).imag


def eigenvectors(A: Matrix) -> Matrix:
    return eig(A).vectors
