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
from scipy.sparse import diags_array

from .bases import FockBasis
from .operators import Operator, SparseOperator
from .states import coherentstate
from ..utils.errors import DimensionMismatch
from ..utils.utils import global_params


def number(basis: FockBasis) -> SparseOperator:
    """Number operator of a Fock space"""
    diagonal = np.arange(basis.n_min, basis.n_max + 1, dtype=global_params["dtype"])
    return SparseOperator(basis, basis, diags_array(diagonal, format="csc"))


def destroy(basis: FockBasis) -> SparseOperator:
    r"""Annihilation operator, :math:`a|n\rangle = \sqrt{n}|n-1\rangle` within the truncated space"""
    off_diagonal = np.sqrt(np.arange(basis.n_min + 1, basis.n_max + 1)).astype(global_params["dtype"])
    return SparseOperator(basis, basis, diags_array(off_diagonal, offsets=1, shape=(len(basis), len(basis)),
                                                    format="csc"))


def create(basis: FockBasis) -> SparseOperator:
    """Creation operator, adjoint of the annihilation operator"""
    return destroy(basis).dagger()


def _qfunc_point(rho: Operator, alpha: complex) -> float:
    psi = coherentstate(rho.basis_l, alpha)
    return float(np.real(np.vdot(psi.data, (rho @ psi).data)) / np.pi)


def qfunc(rho: Operator, x, y_values=None):
    r"""
    Husimi Q representation :math:`\frac{1}{\pi}\langle\alpha|\rho|\alpha\rangle` of an operator on a Fock space.

    * ``qfunc(rho, alpha)`` evaluates it at a single complex point
    * ``qfunc(rho, x_values, y_values)`` evaluates it on the grid ``alpha = x + iy``, the result having shape
      ``(len(x_values), len(y_values))``

    :raises DimensionMismatch: if rho is not a square operator on a FockBasis
    """
    if rho.basis_l != rho.basis_r or not isinstance(rho.basis_l, FockBasis):
        raise DimensionMismatch("The Q function needs an operator on a single FockBasis")
    if y_values is None:
        return _qfunc_point(rho, x)
    return np.array([[_qfunc_point(rho, complex(re, im)) for im in y_values] for re in x])
