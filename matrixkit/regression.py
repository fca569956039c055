# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Ordinary least squares and growth forecasts.

``regress`` takes an m-by-(k+1) data matrix whose column 0 is the
dependent variable and columns 1..k the independent ones. The forecasts
regress a series against its index t = 0..n-1 and extrapolate to t = n;
the compound and continuous variants fit ln(series), so every value must
be positive.
"""

import logging
import math
import numbers
from typing import List, NamedTuple, Sequence, Union

import numpy as np

from .elimination import solve
from .errors import DimensionMismatch, InsufficientData, NonPositiveValue
from .matrix import Matrix, as_array

logger = logging.getLogger(__name__)

Series = Union[Sequence[float], Matrix]


class RegressionResult(NamedTuple):
    coefficients: List[float]
    r_squared: float
    total_sum_of_squares: float
    residual_sum_of_squares: float

    @property
    def intercept(self) -> float:
        return self.coefficients[0]

    def to_list(self) -> list:
        """``[coefficients, [R², TSS, RSS]]``"""
        return [
            list(self.coefficients),
            [self.r_squared, self.total_sum_of_squares, self.residual_sum_of_squares],
        ]


class GrowthForecast(NamedTuple):
    forecast: float
    constant: float
    rate: float
    r_squared: float

    def to_list(self) -> List[float]:
        return list(self)


def regress(D: Matrix) -> RegressionResult:
    """
    OLS fit of column 0 of ``D`` on columns 1..k plus an intercept.

    Returns the k+1 coefficients (intercept first), R², the total sum of
    squares and the residual sum of squares. A constant dependent variable
    has TSS = 0 and is reported with R² = 1.
    """
    data = as_array(D, "D")
    m, cols = data.shape
    k = cols - 1
    if m <= k:
        raise InsufficientData(
            f"regression on {k} independent variables needs more than {k} "
            f"observations, got {m}"
        )

    y = data[:, 0].copy()
    X = np.empty((m, k + 1))
    X[:, 0] = 1.0
    X[:, 1:] = data[:, 1:]

    beta = as_array(solve(Matrix._wrap(X), Matrix._wrap(y[:, None])))[:, 0]

    fitted = X @ beta
    # y - mean(y) is not exactly zero for a constant y whose mean rounds
    tss = 0.0 if np.ptp(y) == 0.0 else float(np.sum((y - y.mean()) ** 2))
    rss = float(np.sum((y - fitted) ** 2))
    r2 = 1.0 if tss == 0.0 else 1.0 - rss / tss
    logger.debug("regress: m=%d k=%d R2=%.6g", m, k, r2)

    return RegressionResult(beta.tolist(), r2, tss, rss)


def _series_values(series: Series) -> np.ndarray:
    if isinstance(series, Matrix):
        data = as_array(series, "series")
        if min(data.shape) != 1:
            raise DimensionMismatch(
                f"series matrix must be a single row or column, got "
                f"{data.shape[0]}x{data.shape[1]}"
            )
        values = data.ravel().copy()
    else:
        values = np.empty(len(series))
        for i, v in enumerate(series):
            if not isinstance(v, numbers.Real):
                raise TypeError(
                    f"series item {i} must be a real number, got {type(v).__name__}"
                )
            values[i] = float(v)
    if values.size < 2:
        raise InsufficientData(
            f"a growth forecast needs at least 2 observations, got {values.size}"
        )
    return values


def _check_positive(values: np.ndarray) -> None:
    bad = np.flatnonzero(values <= 0.0)
    if bad.size:
        i = int(bad[0])
        raise NonPositiveValue(
            f"series item {i} is {values[i]!r}; log-growth forecasts need "
            "positive values",
            index=i,
            value=float(values[i]),
        )


def _fit_trend(values: np.ndarray) -> RegressionResult:
    n = values.size
    D = np.column_stack((values, np.arange(n, dtype=float)))
    return regress(Matrix._wrap(D))


def forecast_linear_growth(series: Series) -> GrowthForecast:
    """``[forecast, constant, slope, R²]`` for y = constant + slope·t."""
    values = _series_values(series)
    n = values.size
    fit = _fit_trend(values)
    constant, slope = fit.coefficients
    return GrowthForecast(constant + slope * n, constant, slope, fit.r_squared)


def forecast_compound_growth(series: Series) -> GrowthForecast:
    """
    ``[forecast, constant, growth proportion, R²]`` for
    y = constant · proportion^t, fitted on ln(y).
    """
    values = _series_values(series)
    _check_positive(values)
    n = values.size
    fit = _fit_trend(np.log(values))
    constant = math.exp(fit.coefficients[0])
    proportion = math.exp(fit.coefficients[1])
    return GrowthForecast(
        constant * proportion**n, constant, proportion, fit.r_squared
    )


def forecast_continuous_growth(series: Series) -> GrowthForecast:
    """
    ``[forecast, constant, growth rate, R²]`` for
    y = constant · e^(rate·t), fitted on ln(y).
    """
    values = _series_values(series)
    _check_positive(values)
    n = values.size
    fit = _fit_trend(np.log(values))
    constant = math.exp(fit.coefficients[0])
    rate = fit.coefficients[1]
    return GrowthForecast(
        constant * math.exp(rate * n), constant, rate, fit.r_squared
    )
