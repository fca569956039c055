# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Scalar and matrix arithmetic.

The variadic operations take two or more operands, each either a
``Matrix`` or a real scalar, and fold them left to right:
``minus(a, b, c) == minus(minus(a, b), c)``. For the elementwise family a
scalar stands for a matrix of the first matrix operand's shape with every
cell equal to that scalar. Every result is a new matrix.
"""

import numbers
from functools import reduce
from typing import Callable, List, Union

import numpy as np

from .errors import DimensionMismatch, NoMatrixOperand
from .matrix import Matrix, _as_real, as_array

Operand = Union[Matrix, float]


def _check_operands(name: str, operands) -> List[Union[np.ndarray, float]]:
    """Tag each operand as an array or a float; reject anything else."""
    if len(operands) < 2:
        raise TypeError(f"{name} needs at least 2 operands, got {len(operands)}")
    tagged: List[Union[np.ndarray, float]] = []
    for k, op in enumerate(operands):
        if isinstance(op, Matrix):
            tagged.append(as_array(op))
        elif isinstance(op, numbers.Real):
            tagged.append(float(op))
        else:
            raise TypeError(
                f"{name} operand {k} must be a Matrix or a number, "
                f"got {type(op).__name__}"
            )
    if not any(isinstance(t, np.ndarray) for t in tagged):
        raise NoMatrixOperand(f"{name} needs at least one Matrix operand")
    return tagged


def _elementwise(name: str, fn: Callable, operands) -> Matrix:
    tagged = _check_operands(name, operands)
    shape = next(t for t in tagged if isinstance(t, np.ndarray)).shape

    arrays = []
    for k, t in enumerate(tagged):
        if isinstance(t, np.ndarray):
            if t.shape != shape:
                raise DimensionMismatch(
                    f"{name} operand {k} is {t.shape[0]}x{t.shape[1]}, "
                    f"expected {shape[0]}x{shape[1]}"
                )
            arrays.append(t)
        else:
            arrays.append(np.full(shape, t))

    return Matrix._wrap(reduce(fn, arrays[1:], arrays[0].copy()))


def plus(*operands: Operand) -> Matrix:
    return _elementwise("plus", np.add, operands)


def minus(*operands: Operand) -> Matrix:
    return _elementwise("minus", np.subtract, operands)


def times_element_wise(*operands: Operand) -> Matrix:
    return _elementwise("times_element_wise", np.multiply, operands)


def plus_scalar(m: Matrix, c: float) -> Matrix:
    return Matrix._wrap(as_array(m, "m") + _as_real(c, "plus_scalar"))


def times_scalar(m: Matrix, c: float) -> Matrix:
    return Matrix._wrap(as_array(m, "m") * _as_real(c, "times_scalar"))


def times(*operands: Operand) -> Matrix:
    """
    Standard matrix product folded left to right.

    Scalar operands scale every cell of the running product. Adjacent
    matrices must agree on the inner dimension.
    """
    tagged = _check_operands("times", operands)

    def _mul(left, right):
        if isinstance(left, float) or isinstance(right, float):
            return left * right
        if left.shape[1] != right.shape[0]:
            raise DimensionMismatch(
                f"cannot multiply {left.shape[0]}x{left.shape[1]} by "
                f"{right.shape[0]}x{right.shape[1]}: inner dimensions differ"
            )
        return left @ right

    first = tagged[0].copy() if isinstance(tagged[0], np.ndarray) else tagged[0]
    return Matrix._wrap(np.ascontiguousarray(reduce(_mul, tagged[1:], first)))


def transpose(m: Matrix) -> Matrix:
    return Matrix._wrap(np.ascontiguousarray(as_array(m, "m").T))
