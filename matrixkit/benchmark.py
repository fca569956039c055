#!/usr/bin/python3
# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Timing and accuracy of the engines against numpy.linalg.

    python -m matrixkit.benchmark

Needs the ``bench`` extra (pandas).
"""

import time

import numpy as np
import pandas as pd

from .eigen import eig_array
from .elimination import lu_factor, lu_solve
from .qr import least_squares_householder_qr
from .svd import singular_values

REPEATS = 5  # best of 5 runs
SIZES = [(50, 50), (100, 100), (200, 50)]


def wall(f, *args, **kwargs):
    t0 = time.perf_counter()
    f(*args, **kwargs)
    return time.perf_counter() - t0


def run_benchmark(sizes=SIZES, repeats=REPEATS, seed=0) -> pd.DataFrame:
    """
    One row per (kernel, size): our time, time relative to numpy and an
    error measure. Solvers report their residual over numpy's residual,
    eigenvalue and singular value kernels the largest absolute deviation
    from numpy's values.
    """
    rng = np.random.default_rng(seed)
    records = []
    for m, n in sizes:
        A = rng.standard_normal((m, n))
        b = rng.standard_normal(m)
        size = f"{m}x{n}"

        if m == n:
            t_np = min(wall(np.linalg.solve, A, b) for _ in range(repeats))
            t_lu = min(wall(lambda: lu_solve(lu_factor(A), b)) for _ in range(repeats))
            r_lu = np.linalg.norm(A @ lu_solve(lu_factor(A), b) - b, np.inf)
            r_np = np.linalg.norm(A @ np.linalg.solve(A, b) - b, np.inf)
            records.append(("LU-solve", size, t_lu, t_lu / t_np, r_lu / r_np))

            t_np = min(wall(np.linalg.eigvals, A) for _ in range(repeats))
            t_eig = min(wall(eig_array, A) for _ in range(repeats))
            d, e, _V = eig_array(A)
            ours = np.sort_complex(d + 1j * e)
            ref = np.sort_complex(np.linalg.eigvals(A))
            records.append(
                ("Hessenberg-QR eig", size, t_eig, t_eig / t_np,
                 float(np.max(np.abs(ours - ref))))
            )
        else:
            t_np = min(wall(np.linalg.lstsq, A, b, rcond=None) for _ in range(repeats))
            t_hh = min(
                wall(least_squares_householder_qr, A, b) for _ in range(repeats)
            )
            x_ref, *_ = np.linalg.lstsq(A, b, rcond=None)
            r_ref = np.linalg.norm(A @ x_ref - b, np.inf)
            r_hh = np.linalg.norm(A @ least_squares_householder_qr(A, b) - b, np.inf)
            records.append(("HH-QR lstsq", size, t_hh, t_hh / t_np, r_hh / r_ref))

        t_np = min(wall(np.linalg.svd, A, compute_uv=False) for _ in range(repeats))
        t_sv = min(wall(singular_values, A) for _ in range(repeats))
        s = singular_values(A)
        s_np = np.linalg.svd(A, compute_uv=False)
        records.append(
            ("Jacobi SVD", size, t_sv, t_sv / t_np, float(np.max(np.abs(s - s_np))))
        )
    return pd.DataFrame(
        records,
        columns=["kernel", "size", "sec", "sec/NumPy", "error"],
    )


def main():
    df = run_benchmark()
    print(df.to_string(index=False))
    df.to_csv("bench_results.csv", index=False)


if __name__ == "__main__":
    main()
