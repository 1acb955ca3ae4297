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

from fractions import Fraction
import math

import numpy as np
import pytest

from clusterexp import GenericBasis, FockBasis, SpinBasis, NLevelBasis, CompositeBasis, DenseOperator, \
    SparseOperator, Ket, tensor, ptrace, permute_subsystems, dense, sparse, dm, projector, identityoperator, \
    number, destroy, create, fockstate, coherentstate, spinup, spindown, nlevelstate, basisstate, normalize, \
    tracedistance, qfunc, DimensionMismatch

from _test_utils import random_density_operator, assert_operator_close


def test_bases():
    assert FockBasis(2) == FockBasis(0, 2)
    assert FockBasis(2) != FockBasis(3)
    assert FockBasis(2) != NLevelBasis(3)
    assert len(FockBasis(1, 4)) == 4
    assert SpinBasis(0.5) == SpinBasis(Fraction(1, 2))
    assert len(SpinBasis(Fraction(3, 2))) == 4
    assert len({NLevelBasis(3), NLevelBasis(3), GenericBasis(3)}) == 2

    b = tensor(FockBasis(2), SpinBasis(0.5))
    assert isinstance(b, CompositeBasis)
    assert b.shape == [3, 2]
    assert len(b) == 6
    assert tensor(b, NLevelBasis(4)).bases == (FockBasis(2), SpinBasis(0.5), NLevelBasis(4))
    assert b * NLevelBasis(4) == CompositeBasis([FockBasis(2), SpinBasis(0.5), NLevelBasis(4)])
    assert tensor(NLevelBasis(4)) == NLevelBasis(4)

    with pytest.raises(DimensionMismatch):
        FockBasis(-1, 2)
    with pytest.raises(DimensionMismatch):
        FockBasis(3, 3)
    with pytest.raises(DimensionMismatch):
        SpinBasis(0)


def test_states():
    b = FockBasis(3)
    assert np.array_equal(fockstate(b, 2).data, [0, 0, 1, 0])
    assert np.array_equal(fockstate(FockBasis(1, 3), 1).data, [1, 0, 0])
    with pytest.raises(DimensionMismatch):
        fockstate(b, 4)

    s = SpinBasis(1)
    assert np.array_equal(spinup(s).data, [1, 0, 0])
    assert np.array_equal(spindown(s).data, [0, 0, 1])
    assert np.array_equal(nlevelstate(NLevelBasis(3), 1).data, [0, 1, 0])

    psi = basisstate(b, 0) + 1j * basisstate(b, 3)
    assert psi.norm() == pytest.approx(math.sqrt(2))
    normalized = normalize(psi)
    assert normalized.norm() == pytest.approx(1)
    assert psi.norm() == pytest.approx(math.sqrt(2))
    with pytest.raises(ValueError):
        Ket(b).normalize()

    alpha = coherentstate(FockBasis(20), 0.5)
    assert alpha.norm() == pytest.approx(1, abs=1e-10)

    product = tensor(spinup(SpinBasis(0.5)), fockstate(FockBasis(2), 1))
    assert product.basis == tensor(SpinBasis(0.5), FockBasis(2))
    assert np.array_equal(product.data, [0, 1, 0, 0, 0, 0])


def test_fock_operators():
    b = FockBasis(4)
    a = destroy(b)
    assert isinstance(a, SparseOperator)
    assert np.allclose((a @ fockstate(b, 3)).data, math.sqrt(3) * fockstate(b, 2).data)
    assert create(b).isapprox(a.dagger())
    assert dense(create(b) @ a).isapprox(number(b))
    assert np.allclose(number(FockBasis(1, 3)).data.diagonal(), [1, 2, 3])


def test_coherentstate_large_cutoff():
    b = FockBasis(200)
    psi = coherentstate(b, 10)
    assert np.all(np.isfinite(psi.data))
    assert psi.norm() == pytest.approx(1, abs=1e-10)
    assert np.vdot(psi.data, (number(b) @ psi).data).real == pytest.approx(100, rel=1e-8)

    shifted = coherentstate(FockBasis(2, 200), 10)
    assert shifted.data[0] == pytest.approx(math.exp(-50) * 100 / math.sqrt(2), rel=1e-10)


def test_qfunc():
    b = FockBasis(20)
    vacuum = dm(fockstate(b, 0))
    assert qfunc(vacuum, 0) == pytest.approx(1 / math.pi)

    x_values = np.linspace(-1, 1, 5)
    y_values = np.linspace(-0.5, 0.5, 3)
    grid = qfunc(vacuum, x_values, y_values)
    assert grid.shape == (5, 3)
    expected = np.exp(-(x_values[:, None] ** 2 + y_values[None, :] ** 2)) / math.pi
    assert np.allclose(grid, expected)

    alpha = 1 + 1j
    assert qfunc(dm(coherentstate(b, alpha)), alpha) == pytest.approx(1 / math.pi, rel=1e-8)
    assert qfunc(dm(coherentstate(b, alpha)), 0) == pytest.approx(math.exp(-2) / math.pi, rel=1e-8)

    with pytest.raises(DimensionMismatch):
        qfunc(dm(spinup(SpinBasis(0.5))), 0)


def test_products_of_sparse_and_dense():
    b = FockBasis(5)
    a, a_dag = destroy(b), create(b)
    reference = dense(a).data @ dense(a_dag).data

    for left, right in [(a, dense(a_dag)), (dense(a), a_dag), (a, a_dag), (dense(a), dense(a_dag))]:
        product = left @ right
        assert np.allclose(dense(product).data, reference)
    assert isinstance(a @ a_dag, SparseOperator)
    assert isinstance(a @ dense(a_dag), DenseOperator)

    psi = coherentstate(b, 0.3)
    assert np.allclose((a @ psi).data, (dense(a) @ psi).data)


def test_arithmetic():
    b = NLevelBasis(3)
    x = DenseOperator(b, b, np.arange(9).reshape(3, 3))
    y = identityoperator(b)

    z = x + y
    assert isinstance(z, DenseOperator)
    assert np.array_equal(z.data, np.arange(9).reshape(3, 3) + np.eye(3))
    z.data[0, 0] = 100
    assert x.data[0, 0] == 0

    assert np.array_equal((x - x).data, np.zeros((3, 3)))
    assert np.array_equal((-x).data, -x.data)
    assert np.array_equal((2 * x / 4).data, x.data / 2)
    assert isinstance(y + y, SparseOperator)
    assert x.trace() == 12
    assert (x @ y).isapprox(x)
    assert sparse(x).isapprox(x)

    with pytest.raises(DimensionMismatch):
        x + identityoperator(NLevelBasis(4))
    with pytest.raises(DimensionMismatch):
        DenseOperator(b, b, np.zeros((2, 3)))


def test_dm_and_projector():
    b = SpinBasis(0.5)
    rho = dm(normalize(spinup(b) + spindown(b)))
    assert rho.trace() == pytest.approx(1)
    assert np.allclose(rho.data, 0.5 * np.ones((2, 2)))
    p = projector(spinup(b), spindown(b))
    assert np.array_equal(p.data, [[0, 1], [0, 0]])


def test_ptrace_product_state():
    rng = np.random.default_rng(10)
    rho1 = random_density_operator(FockBasis(2), rng)
    rho2 = random_density_operator(SpinBasis(0.5), rng)
    rho3 = random_density_operator(NLevelBasis(4), rng)
    rho = tensor(rho1, rho2, rho3)

    assert_operator_close(ptrace(rho, [1, 2]), rho1)
    assert_operator_close(ptrace(rho, [0, 2]), rho2)
    assert_operator_close(ptrace(rho, [0, 1]), rho3)
    assert_operator_close(ptrace(rho, 1), tensor(rho1, rho3))
    assert_operator_close(ptrace(rho, [2, 0, 2]), rho2)
    assert_operator_close(ptrace(rho, []), rho)
    assert_operator_close(ptrace(sparse(rho), [0, 1]), rho3)


def test_ptrace_errors():
    rho = tensor(dm(spinup(SpinBasis(0.5))), dm(fockstate(FockBasis(2), 1)))
    with pytest.raises(DimensionMismatch):
        ptrace(rho, [0, 1])
    with pytest.raises(DimensionMismatch):
        ptrace(rho, [2])
    rectangular = DenseOperator(rho.basis_l, tensor(SpinBasis(0.5), NLevelBasis(2)))
    with pytest.raises(DimensionMismatch):
        ptrace(rectangular, [1])
    assert ptrace(rectangular, [0]).shape == (3, 2)


def test_permute_subsystems():
    rng = np.random.default_rng(11)
    rho1 = random_density_operator(NLevelBasis(3), rng)
    rho2 = random_density_operator(NLevelBasis(2), rng)
    rho3 = random_density_operator(NLevelBasis(4), rng)
    ordered = tensor(rho1, rho2, rho3)

    swapped = tensor(rho2, rho1, rho3)
    # Same dimensions but different layout, a mere relabelling of the bases would not match
    assert np.abs(swapped.data.reshape(-1)[:36] - ordered.data.reshape(-1)[:36]).sum() > 1e-3
    assert_operator_close(permute_subsystems(swapped, [1, 0, 2]), ordered)

    rotated = tensor(rho3, rho1, rho2)
    assert_operator_close(permute_subsystems(rotated, [1, 2, 0]), ordered)
    assert_operator_close(permute_subsystems(ordered, [2, 0, 1]), rotated)

    assert isinstance(permute_subsystems(sparse(rotated), [1, 2, 0]), SparseOperator)
    with pytest.raises(DimensionMismatch):
        permute_subsystems(ordered, [0, 0, 1])


def test_tracedistance():
    b = SpinBasis(0.5)
    up, down = dm(spinup(b)), dm(spindown(b))
    assert tracedistance(up, up) == pytest.approx(0)
    assert tracedistance(up, down) == pytest.approx(1)
    assert tracedistance(up, 0.5 * (up + down)) == pytest.approx(0.5)
