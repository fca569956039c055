# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
The mutable dense ``Matrix`` container.

A ``Matrix`` owns one row-major float64 ``numpy.ndarray``. Handles are
shared by reference: assigning a matrix to another name, or passing it to
a function, never copies it, so a ``set`` through one handle is visible
through every other. ``copy()`` is the only operation that breaks that
aliasing. Dimensions are fixed for the lifetime of an instance.
"""

import numbers
import operator
from typing import Callable, List, Sequence, Tuple

import numpy as np

from .errors import (
    DimensionMismatch,
    IndexOutOfRange,
    InvalidDimension,
    InvalidRange,
    RaggedInput,
)


def _as_real(value, where: str) -> float:
    if not isinstance(value, numbers.Real):
        raise TypeError(f"{where}: expected a real number, got {type(value).__name__}")
    return float(value)


def _as_index(value, where: str) -> int:
    try:
        return operator.index(value)
    except TypeError:
        raise TypeError(
            f"{where}: index must be an integer, got {type(value).__name__}"
        ) from None


def _check_extent(n, what: str) -> int:
    n = _as_index(n, what)
    if n <= 0:
        raise InvalidDimension(f"{what} must be positive, got {n}")
    return n


def _rows_to_array(rows: Sequence[Sequence[float]], kind: str) -> np.ndarray:
    """Validate a list of equal-length numeric sequences and pack it."""
    if len(rows) == 0:
        raise InvalidDimension(f"cannot build a matrix from an empty {kind} list")
    width = len(rows[0])
    if width == 0:
        raise InvalidDimension(f"cannot build a matrix from empty {kind}s")
    for k, r in enumerate(rows):
        if len(r) != width:
            raise RaggedInput(
                f"{kind} {k} has length {len(r)}, expected {width} like {kind} 0"
            )
    out = np.empty((len(rows), width), dtype=float)
    for i, r in enumerate(rows):
        for j, v in enumerate(r):
            out[i, j] = _as_real(v, f"{kind} {i}, item {j}")
    return out


class Matrix:
    """
    Dense real matrix with mutable cells and fixed dimensions.

    ``Matrix(rows, cols, value)`` is equivalent to ``make_constant``.
    """

    __slots__ = ("_data",)

    def __init__(self, rows: int, cols: int, value: float = 0.0):
        rows = _check_extent(rows, "rows")
        cols = _check_extent(cols, "cols")
        self._data = np.full((rows, cols), _as_real(value, "value"), dtype=float)

    @classmethod
    def _wrap(cls, data: np.ndarray) -> "Matrix":
        """Adopt ``data`` as backing storage without copying."""
        m = cls.__new__(cls)
        m._data = data
        return m

    @classmethod
    def from_array(cls, array) -> "Matrix":
        """Build a matrix from any 2-D array-like (always copies)."""
        data = np.array(array, dtype=float, order="C", copy=True)
        if data.ndim != 2:
            raise InvalidDimension(f"expected a 2-D array, got {data.ndim}-D")
        if data.shape[0] == 0 or data.shape[1] == 0:
            raise InvalidDimension(f"array shape {data.shape} has an empty axis")
        return cls._wrap(data)

    # ------------------------------------------------------------------
    # Shape
    # ------------------------------------------------------------------
    @property
    def rows(self) -> int:
        return self._data.shape[0]

    @property
    def cols(self) -> int:
        return self._data.shape[1]

    @property
    def shape(self) -> Tuple[int, int]:
        return self._data.shape

    @property
    def dimensions(self) -> List[int]:
        return [self.rows, self.cols]

    def is_square(self) -> bool:
        return self.rows == self.cols

    # ------------------------------------------------------------------
    # Index checks
    # ------------------------------------------------------------------
    def _row_index(self, i) -> int:
        i = _as_index(i, "row")
        if not 0 <= i < self.rows:
            raise IndexOutOfRange(f"row index {i} out of range [0, {self.rows})")
        return i

    def _col_index(self, j) -> int:
        j = _as_index(j, "column")
        if not 0 <= j < self.cols:
            raise IndexOutOfRange(f"column index {j} out of range [0, {self.cols})")
        return j

    # ------------------------------------------------------------------
    # Cell / row / column access
    # ------------------------------------------------------------------
    def get(self, i: int, j: int) -> float:
        return float(self._data[self._row_index(i), self._col_index(j)])

    def set(self, i: int, j: int, value: float) -> None:
        i, j = self._row_index(i), self._col_index(j)
        self._data[i, j] = _as_real(value, "set")

    def set_and_report(self, i: int, j: int, value: float) -> "Matrix":
        """Return a copy with cell (i, j) replaced; ``self`` is unchanged."""
        out = self.copy()
        out.set(i, j, value)
        return out

    def get_row(self, i: int) -> List[float]:
        return self._data[self._row_index(i)].tolist()

    def get_column(self, j: int) -> List[float]:
        return self._data[:, self._col_index(j)].tolist()

    def set_row(self, i: int, values: Sequence[float]) -> None:
        i = self._row_index(i)
        if len(values) != self.cols:
            raise DimensionMismatch(
                f"row has {self.cols} columns, got {len(values)} values"
            )
        self._data[i] = [_as_real(v, "set_row") for v in values]

    def set_column(self, j: int, values: Sequence[float]) -> None:
        j = self._col_index(j)
        if len(values) != self.rows:
            raise DimensionMismatch(
                f"column has {self.rows} rows, got {len(values)} values"
            )
        self._data[:, j] = [_as_real(v, "set_column") for v in values]

    def swap_rows(self, a: int, b: int) -> None:
        a, b = self._row_index(a), self._row_index(b)
        if a != b:
            self._data[[a, b]] = self._data[[b, a]]

    def swap_columns(self, a: int, b: int) -> None:
        a, b = self._col_index(a), self._col_index(b)
        if a != b:
            self._data[:, [a, b]] = self._data[:, [b, a]]

    # ------------------------------------------------------------------
    # Derived matrices
    # ------------------------------------------------------------------
    def submatrix(self, r1: int, c1: int, r2: int, c2: int) -> "Matrix":
        """Rows ``[r1, r2)`` and columns ``[c1, c2)`` as a new matrix."""
        r1, c1, r2, c2 = (_as_index(x, "submatrix") for x in (r1, c1, r2, c2))
        if not (0 <= r1 < r2 <= self.rows and 0 <= c1 < c2 <= self.cols):
            raise InvalidRange(
                f"submatrix rows [{r1}, {r2}) cols [{c1}, {c2}) invalid "
                f"for a {self.rows}x{self.cols} matrix"
            )
        return Matrix._wrap(self._data[r1:r2, c1:c2].copy())

    def copy(self) -> "Matrix":
        return Matrix._wrap(self._data.copy())

    def map(self, fn: Callable[..., float], *others: "Matrix") -> "Matrix":
        """
        Apply ``fn`` cell by cell.

        ``fn`` receives this matrix's cell first, then the matching cell of
        each matrix in ``others``; all of them must share this shape.
        """
        for k, other in enumerate(others):
            if not isinstance(other, Matrix):
                raise TypeError(f"map operand {k + 1} is not a Matrix")
            if other.shape != self.shape:
                raise DimensionMismatch(
                    f"map operand {k + 1} is {other.rows}x{other.cols}, "
                    f"expected {self.rows}x{self.cols}"
                )
        sources = [self._data] + [o._data for o in others]
        out = np.empty_like(self._data)
        for i in range(self.rows):
            for j in range(self.cols):
                out[i, j] = _as_real(fn(*(float(s[i, j]) for s in sources)), "map")
        return Matrix._wrap(out)

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------
    def to_row_list(self) -> List[List[float]]:
        return self._data.tolist()

    def to_column_list(self) -> List[List[float]]:
        return self._data.T.tolist()

    def to_array(self) -> np.ndarray:
        return self._data.copy()

    # ------------------------------------------------------------------
    # Python protocol
    # ------------------------------------------------------------------
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.shape == other.shape and bool(np.array_equal(self._data, other._data))

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.to_row_list()!r})"

    def __add__(self, other):
        from .arithmetic import plus

        return plus(self, other)

    __radd__ = __add__

    def __sub__(self, other):
        from .arithmetic import minus

        return minus(self, other)

    def __rsub__(self, other):
        from .arithmetic import minus

        return minus(other, self)

    def __mul__(self, other):
        from .arithmetic import times_element_wise

        return times_element_wise(self, other)

    __rmul__ = __mul__

    def __matmul__(self, other):
        from .arithmetic import times

        if not isinstance(other, Matrix):
            return NotImplemented
        return times(self, other)

    def __neg__(self):
        from .arithmetic import times_scalar

        return times_scalar(self, -1.0)


def is_matrix(obj) -> bool:
    return isinstance(obj, Matrix)


def make_constant(rows: int, cols: int, value: float) -> Matrix:
    return Matrix(rows, cols, value)


def make_identity(n: int) -> Matrix:
    n = _check_extent(n, "n")
    return Matrix._wrap(np.eye(n, dtype=float))


def from_row_list(rows: Sequence[Sequence[float]]) -> Matrix:
    """
    Build a matrix from a list of rows.

    >>> from_row_list([[1, 2, 3], [4, 5, 6]]).dimensions
    [2, 3]
    """
    return Matrix._wrap(_rows_to_array(rows, "row"))


def from_column_list(cols: Sequence[Sequence[float]]) -> Matrix:
    return Matrix._wrap(np.ascontiguousarray(_rows_to_array(cols, "column").T))


def as_array(m, name: str = "operand") -> np.ndarray:
    """Backing array of ``m`` (no copy), rejecting non-matrices."""
    if not isinstance(m, Matrix):
        raise TypeError(f"{name} must be a Matrix, got {type(m).__name__}")
    return m._data
