# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Exception hierarchy for matrixkit.

Every failure raised by the engine is a ``MatrixError``. Each kind also
inherits from the closest builtin so plain ``except ValueError`` style
handlers keep working.
"""

from typing import Optional


class MatrixError(Exception):
    """Base class for all matrixkit errors."""


class InvalidDimension(MatrixError, ValueError):
    """Non-positive row or column count requested at construction."""


class RaggedInput(MatrixError, ValueError):
    """Row/column list construction from sequences of unequal length."""


class IndexOutOfRange(MatrixError, IndexError):
    """Row or column index outside ``[0, extent)``."""


class DimensionMismatch(MatrixError, ValueError):
    """Operand shapes are incompatible for the requested operation."""


class InvalidRange(MatrixError, ValueError):
    """Submatrix bounds are invalid or describe an empty block."""


class NoMatrixOperand(MatrixError, TypeError):
    """Variadic arithmetic was given scalars only."""


class NotSquare(MatrixError, ValueError):
    """A square-only operation was given a non-square matrix."""


class SingularMatrix(MatrixError, ArithmeticError):
    """No usable pivot within tolerance during elimination."""


class NumericalFailure(MatrixError, ArithmeticError):
    """
    An iterative routine did not converge.

    Attributes
    ----------
    iterations : int | None
        Number of iterations performed before giving up.
    """

    def __init__(self, message: str, iterations: Optional[int] = None):
        super().__init__(message)
        self.iterations = iterations


class InsufficientData(MatrixError, ValueError):
    """Regression given no more observations than parameters."""


class NonPositiveValue(MatrixError, ValueError):
    """
    A log-transform forecast met a value <= 0.

    Attributes
    ----------
    index : int
        Position of the first offending element.
    value : float
        The offending element.
    """

    def __init__(self, message: str, index: int, value: float):
        super().__init__(message)
        self.index = index
        self.value = value
