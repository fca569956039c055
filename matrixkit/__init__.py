# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
matrixkit
=========

A mutable dense real matrix type and the linear algebra behind it.

Public API
~~~~~~~~~~
- Construction
    - `Matrix`, `make_constant`, `make_identity`,
      `from_row_list`, `from_column_list`, `is_matrix`
- Arithmetic
    - `plus`, `minus`, `times`, `times_element_wise`,
      `plus_scalar`, `times_scalar`, `transpose`
- Linear systems
    - `solve`, `inverse`, `det`, `trace`
- Eigen / rank
    - `eig`, `real_eigenvalues`, `imaginary_eigenvalues`,
      `eigenvectors`, `rank`
- Regression
    - `regress`, `forecast_linear_growth`,
      `forecast_compound_growth`, `forecast_continuous_growth`

Matrices are shared by reference; ``copy()`` is the only deep clone.
Every failure is a subclass of `MatrixError` (see ``matrixkit.errors``).

Example
-------
>>> import matrixkit as mk
>>> A = mk.from_row_list([[1, 2, 3], [4, 5, 6]])
>>> A.dimensions, A.get(1, 2)
([2, 3], 6.0)
>>> mk.times(A, mk.make_identity(3)) == A
True
"""

from importlib.metadata import version as _pkg_version

from .arithmetic import (
    minus,
    plus,
    plus_scalar,
    times,
    times_element_wise,
    times_scalar,
    transpose,
)
from .eigen import (
    EigenDecomposition,
    eig,
    eigenvectors,
    imaginary_eigenvalues,
    real_eigenvalues,
)
from .elimination import det, inverse, solve, trace
from .errors import (
    DimensionMismatch,
    IndexOutOfRange,
    InsufficientData,
    InvalidDimension,
    InvalidRange,
    MatrixError,
    NoMatrixOperand,
    NonPositiveValue,
    NotSquare,
    NumericalFailure,
    RaggedInput,
    SingularMatrix,
)

# ---------------------------------------------------------------------
# Re-export the high-level functions users are expected to call.
# Each of these names is implemented in one of the internal sub-modules.
# ---------------------------------------------------------------------
from .matrix import (
    Matrix,
    from_column_list,
    from_row_list,
    is_matrix,
    make_constant,
    make_identity,
)
from .regression import (
    GrowthForecast,
    RegressionResult,
    forecast_compound_growth,
    forecast_continuous_growth,
    forecast_linear_growth,
    regress,
)
from .svd import rank, singular_value_list

__all__ = [
    "Matrix",
    "make_constant",
    "make_identity",
    "from_row_list",
    "from_column_list",
    "is_matrix",
    "plus",
    "minus",
    "times",
    "times_element_wise",
    "plus_scalar",
    "times_scalar",
    "transpose",
    "solve",
    "inverse",
    "det",
    "trace",
    "eig",
    "EigenDecomposition",
    "real_eigenvalues",
    "imaginary_eigenvalues",
    "eigenvectors",
    "rank",
    "singular_value_list",
    "regress",
    "RegressionResult",
    "GrowthForecast",
    "forecast_linear_growth",
    "forecast_compound_growth",
    "forecast_continuous_growth",
    "MatrixError",
    "InvalidDimension",
    "RaggedInput",
    "IndexOutOfRange",
    "DimensionMismatch",
    "InvalidRange",
    "NoMatrixOperand",
    "NotSquare",
    "SingularMatrix",
    "NumericalFailure",
    "InsufficientData",
    "NonPositiveValue",
]

# ---------------------------------------------------------------------
# Version string (helps “pip show matrixkit”, Sphinx, etc.)
# ---------------------------------------------------------------------
try:  # installed via pip / build backend
    __version__ = _pkg_version(__name__)
except Exception:  # running from a checkout
    __version__ = "0.0.0.dev0"

# ---------------------------------------------------------------------
# Optional: lightweight default logging config so users see debug
# records only if they deliberately enable them.
# ---------------------------------------------------------------------
import logging as _logging

_logging.getLogger(__name__).addHandler(_logging.NullHandler())
