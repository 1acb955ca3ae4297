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

import numpy as np
import pytest
from scipy.sparse import csc_array, csr_array

from clusterexp.utils import gemm, gemv, DimensionMismatch


def _random_sparse(rng, shape, density=0.3):
    dense = rng.normal(size=shape) + 1j * rng.normal(size=shape)
    dense[rng.random(shape) > density] = 0
    return csc_array(dense), dense


def _random_dense(rng, shape):
    return rng.normal(size=shape) + 1j * rng.normal(size=shape)


@pytest.mark.parametrize("alpha, beta", [(1, 0), (2 - 1j, 0), (1, 1), (0.5j, -3)])
def test_gemm_sparse_dense(alpha, beta):
    rng = np.random.default_rng(1)
    m, m_dense = _random_sparse(rng, (5, 7))
    b = _random_dense(rng, (7, 4))
    result = _random_dense(rng, (5, 4))
    expected = alpha * m_dense @ b + beta * result

    gemm(alpha, m, b, beta, result)
    assert np.allclose(result, expected)


@pytest.mark.parametrize("alpha, beta", [(1, 0), (2 - 1j, 0), (1, 1), (0.5j, -3)])
def test_gemm_dense_sparse(alpha, beta):
    rng = np.random.default_rng(2)
    m, m_dense = _random_sparse(rng, (7, 3))
    b = _random_dense(rng, (6, 7))
    result = _random_dense(rng, (6, 3))
    expected = alpha * b @ m_dense + beta * result

    gemm(alpha, b, m, beta, result)
    assert np.allclose(result, expected)


def test_gemv():
    rng = np.random.default_rng(3)
    m, m_dense = _random_sparse(rng, (6, 4))

    v = _random_dense(rng, 4)
    result = _random_dense(rng, 6)
    expected = 3 * m_dense @ v + 0.5 * result
    gemv(3, m, v, 0.5, result)
    assert np.allclose(result, expected)

    v = _random_dense(rng, 6)
    result = _random_dense(rng, 4)
    expected = 1j * v @ m_dense + result
    gemv(1j, v, m, 1, result)
    assert np.allclose(result, expected)


def test_zero_beta_discards_finite_content():
    rng = np.random.default_rng(4)
    m, m_dense = _random_sparse(rng, (4, 4))
    b = _random_dense(rng, (4, 2))
    result = np.full((4, 2), 1e300 + 1e300j)
    gemm(1, m, b, 0, result)
    assert np.allclose(result, m_dense @ b)


def test_zero_beta_propagates_non_finite_content():
    rng = np.random.default_rng(5)
    m, _ = _random_sparse(rng, (3, 3))
    b = _random_dense(rng, (3, 3))
    result = np.full((3, 3), np.inf, dtype=complex)
    with np.errstate(invalid="ignore"):
        gemm(1, m, b, 0, result)
    assert np.isnan(result).all()


def test_empty_sparse_operand_only_scales():
    result = np.ones((2, 3), dtype=complex)
    gemm(1, csc_array((2, 4), dtype=complex), np.ones((4, 3)), 2, result)
    assert np.array_equal(result, 2 * np.ones((2, 3)))


def test_unsorted_row_indices():
    data = np.array([1 + 1j, 2, 3j, 4])
    indices = np.array([2, 0, 1, 0])
    indptr = np.array([0, 2, 4])
    m = csc_array((data, indices, indptr), shape=(3, 2))
    b = np.array([[1, 2j], [3, -1]], dtype=complex)
    result = np.zeros((3, 2), dtype=complex)

    gemm(1, m, b, 0, result)
    assert np.allclose(result, m.toarray() @ b)


def test_other_sparse_formats_are_accepted():
    rng = np.random.default_rng(6)
    m, m_dense = _random_sparse(rng, (4, 5))
    b = _random_dense(rng, (5, 2))
    result = np.zeros((4, 2), dtype=complex)
    gemm(1, csr_array(m), b, 0, result)
    assert np.allclose(result, m_dense @ b)


def test_shape_mismatch_leaves_result_untouched():
    rng = np.random.default_rng(7)
    m, _ = _random_sparse(rng, (4, 5))
    result = _random_dense(rng, (4, 2))
    before = result.copy()

    with pytest.raises(DimensionMismatch):
        gemm(1, m, _random_dense(rng, (4, 2)), 0, result)
    with pytest.raises(DimensionMismatch):
        gemm(1, m, _random_dense(rng, (5, 2)), 0, np.zeros((4, 3), dtype=complex))
    with pytest.raises(DimensionMismatch):
        gemm(1, _random_dense(rng, (4, 3)), m, 0, result)
    with pytest.raises(DimensionMismatch):
        gemv(1, m, _random_dense(rng, 4), 0, result[:, 0])
    assert np.array_equal(result, before)


def test_invalid_operands():
    rng = np.random.default_rng(8)
    m, _ = _random_sparse(rng, (3, 3))
    dense = _random_dense(rng, (3, 3))
    result = np.zeros((3, 3), dtype=complex)
    with pytest.raises(TypeError):
        gemm(1, dense, dense, 0, result)
    with pytest.raises(TypeError):
        gemm(1, m, m, 0, result)
    with pytest.raises(TypeError):
        gemm(1, m, dense, 0, np.zeros((3, 3)))
    with pytest.raises(TypeError):
        gemv(1, dense[0], dense[0], 0, np.zeros(3, dtype=complex))
