# MIT License
#
# Copyright (c) 2022 Quandela
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.
#
# As a special exception, the copyright holders of exqalibur library give you
# permission to combine exqalibur with code included in the standard release of
# Perceval under the MIT license (or modified versions of such code). You may
# copy and distribute such a combined system following the terms of the MIT
# license for both exqalibur and Perceval. This exception for the usage of
# exqalibur is limited to the python bindings used by Perceval.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

"""
Scaled products between a compressed-column sparse matrix and dense arrays, accumulated in place in a result buffer.

All kernels follow the BLAS convention ``result := alpha * op + beta * result``. ``result`` is always scaled by
``beta`` first, even when ``beta`` is zero, so non-finite values already in the buffer propagate following IEEE rules.
Only the stored entries of the sparse operand are scanned and its row indices do not need to be sorted.
"""
from numbers import Number

import numpy as np
from scipy.sparse import issparse, csc_array

from .errors import DimensionMismatch


def _as_csc(matrix):
    if not issparse(matrix):
        raise TypeError(f"Expected a scipy sparse matrix, got {type(matrix)}")
    if matrix.format != "csc":
        matrix = csc_array(matrix)
    return matrix


def _entry_columns(matrix) -> np.ndarray:
    """Column index of every stored entry, in storage order"""
    return np.repeat(np.arange(matrix.shape[1]), np.diff(matrix.indptr))


def _check_result(result, shape: tuple):
    if not isinstance(result, np.ndarray):
        raise TypeError(f"result must be a numpy array, got {type(result)}")
    if not np.iscomplexobj(result):
        raise TypeError(f"result must hold complex values, got dtype {result.dtype}")
    if result.shape != shape:
        raise DimensionMismatch(f"result has shape {result.shape}, expected {shape}")


def _check_scalars(alpha, beta):
    if not isinstance(alpha, Number) or not isinstance(beta, Number):
        raise TypeError("alpha and beta must be scalars")


def _sparse_dense_gemm(alpha, m, b: np.ndarray, beta, result: np.ndarray):
    if b.ndim != 2 or m.shape[1] != b.shape[0]:
        raise DimensionMismatch(f"Cannot multiply sparse {m.shape} by dense {b.shape}")
    _check_result(result, (m.shape[0], b.shape[1]))
    result *= beta
    columns = _entry_columns(m)
    np.add.at(result, m.indices, (alpha * m.data)[:, np.newaxis] * b[columns, :])


def _dense_sparse_gemm(alpha, b: np.ndarray, m, beta, result: np.ndarray):
    if b.ndim != 2 or b.shape[1] != m.shape[0]:
        raise DimensionMismatch(f"Cannot multiply dense {b.shape} by sparse {m.shape}")
    _check_result(result, (b.shape[0], m.shape[1]))
    result *= beta
    columns = _entry_columns(m)
    np.add.at(result, (slice(None), columns), b[:, m.indices] * (alpha * m.data)[np.newaxis, :])


def gemm(alpha, a, b, beta, result: np.ndarray) -> None:
    """Sparse/dense matrix-matrix product, accumulated in ``result``.

    * ``gemm(alpha, M, B, beta, result)`` computes ``result := alpha * M @ B + beta * result``
    * ``gemm(alpha, B, M, beta, result)`` computes ``result := alpha * B @ M + beta * result``

    where ``M`` is sparse (converted to compressed-column layout if needed) and ``B`` is a dense 2d array.

    :param alpha: scale of the product
    :param a: left operand
    :param b: right operand
    :param beta: scale applied to the previous content of ``result``
    :param result: complex dense buffer, updated in place
    :raises DimensionMismatch: if the shapes are incompatible. ``result`` is left untouched in that case.
    :raises TypeError: if none or both of the operands are sparse
    """
    _check_scalars(alpha, beta)
    if issparse(a) and not issparse(b):
        _sparse_dense_gemm(alpha, _as_csc(a), np.asarray(b), beta, result)
    elif issparse(b) and not issparse(a):
        _dense_sparse_gemm(alpha, np.asarray(a), _as_csc(b), beta, result)
    else:
        raise TypeError("gemm expects exactly one sparse operand")


def gemv(alpha, a, b, beta, result: np.ndarray) -> None:
    """Sparse matrix-vector product, accumulated in ``result``.

    * ``gemv(alpha, M, v, beta, result)`` computes ``result := alpha * M @ v + beta * result``
    * ``gemv(alpha, v, M, beta, result)`` computes ``result := alpha * v^T @ M + beta * result`` (``v`` is a row)

    :raises DimensionMismatch: if the shapes are incompatible. ``result`` is left untouched in that case.
    :raises TypeError: if none or both of the operands are sparse
    """
    _check_scalars(alpha, beta)
    if issparse(a) and not issparse(b):
        m, v = _as_csc(a), np.asarray(b)
        if v.ndim != 1 or m.shape[1] != v.shape[0]:
            raise DimensionMismatch(f"Cannot multiply sparse {m.shape} by vector {v.shape}")
        _check_result(result, (m.shape[0],))
        result *= beta
        np.add.at(result, m.indices, alpha * m.data * v[_entry_columns(m)])
    elif issparse(b) and not issparse(a):
        v, m = np.asarray(a), _as_csc(b)
        if v.ndim != 1 or v.shape[0] != m.shape[0]:
            raise DimensionMismatch(f"Cannot multiply vector {v.shape} by sparse {m.shape}")
        _check_result(result, (m.shape[1],))
        result *= beta
        np.add.at(result, _entry_columns(m), alpha * m.data * v[m.indices])
    else:
        raise TypeError("gemv expects exactly one sparse operand")
