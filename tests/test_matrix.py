# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import numpy as np
import pytest

from matrixkit.errors import (
    DimensionMismatch,
    IndexOutOfRange,
    InvalidDimension,
    InvalidRange,
    MatrixError,
    RaggedInput,
)
from matrixkit.matrix import (
    Matrix,
    from_column_list,
    from_row_list,
    is_matrix,
    make_constant,
    make_identity,
)


def test_from_row_list_dimensions_and_get():
    M = from_row_list([[1, 2, 3], [4, 5, 6]])
    assert M.dimensions == [2, 3]
    assert M.get(1, 2) == 6
    assert M.to_row_list() == [[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]]


def test_from_column_list_is_transposed_input():
    M = from_column_list([[1, 2, 3], [4, 5, 6]])
    assert M.dimensions == [3, 2]
    assert M.to_row_list() == [[1.0, 4.0], [2.0, 5.0], [3.0, 6.0]]
    assert M.to_column_list() == [[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]]


@pytest.mark.parametrize("factory", [from_row_list, from_column_list])
def test_ragged_input(factory):
    with pytest.raises(RaggedInput):
        factory([[1, 2], [3]])


@pytest.mark.parametrize("rows", [[], [[]], [[], []]])
def test_empty_input(rows):
    with pytest.raises(InvalidDimension):
        from_row_list(rows)


def test_non_numeric_cell():
    with pytest.raises(TypeError):
        from_row_list([[1, "a"]])


def test_make_constant():
    M = make_constant(2, 3, 7.5)
    assert M.dimensions == [2, 3]
    assert all(v == 7.5 for row in M.to_row_list() for v in row)


@pytest.mark.parametrize("rows,cols", [(0, 3), (3, 0), (-1, 2)])
def test_make_constant_invalid(rows, cols):
    with pytest.raises(InvalidDimension):
        make_constant(rows, cols, 1.0)


def test_make_identity():
    np.testing.assert_array_equal(make_identity(3).to_array(), np.eye(3))
    with pytest.raises(InvalidDimension):
        make_identity(0)


def test_get_set_bounds():
    M = make_constant(2, 2, 0)
    M.set(1, 0, 4)
    assert M.get(1, 0) == 4.0
    for i, j in [(2, 0), (0, 2), (-1, 0), (0, -1)]:
        with pytest.raises(IndexOutOfRange):
            M.get(i, j)
        with pytest.raises(IndexOutOfRange):
            M.set(i, j, 1.0)


def test_index_errors_are_builtin_compatible():
    M = make_identity(2)
    with pytest.raises(IndexError):
        M.get(5, 0)
    with pytest.raises(MatrixError):
        M.get(5, 0)


def test_rows_and_columns():
    M = from_row_list([[1, 2, 3], [4, 5, 6]])
    assert M.get_row(1) == [4.0, 5.0, 6.0]
    assert M.get_column(2) == [3.0, 6.0]

    M.set_row(0, [7, 8, 9])
    M.set_column(1, [0, 0])
    assert M.to_row_list() == [[7.0, 0.0, 9.0], [4.0, 0.0, 6.0]]


def test_row_column_replacement_errors():
    M = from_row_list([[1, 2, 3], [4, 5, 6]])
    with pytest.raises(DimensionMismatch):
        M.set_row(0, [1, 2])
    with pytest.raises(DimensionMismatch):
        M.set_column(0, [1, 2, 3])
    with pytest.raises(IndexOutOfRange):
        M.set_row(2, [1, 2, 3])
    with pytest.raises(IndexOutOfRange):
        M.get_column(3)


def test_swaps():
    M = from_row_list([[1, 2], [3, 4], [5, 6]])
    M.swap_rows(0, 2)
    assert M.to_row_list() == [[5.0, 6.0], [3.0, 4.0], [1.0, 2.0]]
    M.swap_columns(0, 1)
    assert M.to_row_list() == [[6.0, 5.0], [4.0, 3.0], [2.0, 1.0]]

    before = M.copy()
    M.swap_rows(1, 1)
    M.swap_columns(0, 0)
    assert M == before

    with pytest.raises(IndexOutOfRange):
        M.swap_rows(0, 3)
    with pytest.raises(IndexOutOfRange):
        M.swap_columns(2, 0)


def test_submatrix():
    M = from_row_list([[1, 2, 3], [4, 5, 6], [7, 8, 9]])
    assert M.submatrix(0, 1, 2, 3) == from_row_list([[2, 3], [5, 6]])
    assert M.submatrix(0, 0, 3, 3) == M


@pytest.mark.parametrize(
    "bounds",
    [(1, 0, 1, 2), (0, 2, 2, 2), (2, 0, 1, 2), (0, 0, 4, 2), (-1, 0, 2, 2), (0, 0, 2, 4)],
)
def test_submatrix_invalid(bounds):
    M = make_constant(3, 3, 1)
    with pytest.raises(InvalidRange):
        M.submatrix(*bounds)


def test_submatrix_is_independent():
    M = make_constant(3, 3, 1)
    S = M.submatrix(0, 0, 2, 2)
    S.set(0, 0, 9)
    assert M.get(0, 0) == 1.0


def test_aliasing_and_copy():
    A = from_row_list([[1, 2], [3, 4]])
    B = A  # same matrix, two handles
    B.set(0, 0, 10)
    assert A.get(0, 0) == 10.0

    C = A.copy()
    assert C == A
    C.set(1, 1, -1)
    assert A.get(1, 1) == 4.0
    A.set(0, 1, 99)
    assert C.get(0, 1) == 2.0


def test_factories_do_not_alias_input():
    rows = [[1.0, 2.0]]
    M = from_row_list(rows)
    rows[0][0] = 5.0
    assert M.get(0, 0) == 1.0

    arr = np.ones((2, 2))
    M = Matrix.from_array(arr)
    arr[0, 0] = 3.0
    assert M.get(0, 0) == 1.0
    M.to_array()[1, 1] = 8.0
    assert M.get(1, 1) == 1.0


def test_from_array_rejects_non_2d():
    with pytest.raises(InvalidDimension):
        Matrix.from_array([1.0, 2.0])
    with pytest.raises(InvalidDimension):
        Matrix.from_array(np.zeros((0, 3)))


def test_set_and_report():
    A = make_identity(2)
    B = A.set_and_report(0, 1, 5)
    assert B.get(0, 1) == 5.0
    assert A.get(0, 1) == 0.0


def test_map_single_and_multiple():
    A = from_row_list([[1, 2], [3, 4]])
    B = from_row_list([[10, 20], [30, 40]])
    assert A.map(lambda x: x * x) == from_row_list([[1, 4], [9, 16]])
    assert A.map(lambda x, y: y - x, B) == from_row_list([[9, 18], [27, 36]])
    assert A.map(lambda x, y, z: x + y + z, B, B) == from_row_list(
        [[21, 42], [63, 84]]
    )


def test_map_dimension_mismatch():
    A = make_constant(2, 2, 1)
    with pytest.raises(DimensionMismatch):
        A.map(lambda x, y: x + y, make_constant(2, 3, 1))


def test_equality_and_is_matrix():
    assert make_identity(2) == from_row_list([[1, 0], [0, 1]])
    assert make_identity(2) != make_identity(3)
    assert make_identity(2) != [[1, 0], [0, 1]]
    assert is_matrix(make_identity(1))
    assert not is_matrix([[1.0]])


def test_repr_round_trips_through_row_list():
    M = from_row_list([[1, 2]])
    assert repr(M) == "Matrix([[1.0, 2.0]])"
