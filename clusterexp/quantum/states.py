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

from __future__ import annotations

import math
from numbers import Number

import numpy as np

from .bases import Basis, FockBasis, SpinBasis, NLevelBasis, tensor as basis_tensor
from ..utils.errors import DimensionMismatch
from ..utils.utils import global_params


class Ket:
    """
    State vector in a given basis.

    :param basis: basis of the state
    :param data: amplitudes, defaults to the null vector
    """

    def __init__(self, basis: Basis, data=None):
        self.basis = basis
        if data is None:
            data = np.zeros(len(basis), dtype=global_params["dtype"])
        else:
            data = np.array(data, dtype=global_params["dtype"]).reshape(-1)
        if data.shape[0] != len(basis):
            raise DimensionMismatch(f"Ket of size {data.shape[0]} does not fit a basis of size {len(basis)}")
        self.data = data

    def _check_basis(self, other: Ket):
        if not isinstance(other, Ket):
            raise TypeError(f"Expected a Ket, got {type(other)}")
        if self.basis != other.basis:
            raise DimensionMismatch(f"Kets have different bases: {self.basis} and {other.basis}")

    def __add__(self, other: Ket) -> Ket:
        self._check_basis(other)
        return Ket(self.basis, self.data + other.data)

    def __sub__(self, other: Ket) -> Ket:
        self._check_basis(other)
        return Ket(self.basis, self.data - other.data)

    def __neg__(self) -> Ket:
        return Ket(self.basis, -self.data)

    def __mul__(self, other):
        if isinstance(other, Number):
            return Ket(self.basis, other * self.data)
        return NotImplemented

    __rmul__ = __mul__

    def __truediv__(self, other):
        if isinstance(other, Number):
            return Ket(self.basis, self.data / other)
        return NotImplemented

    def norm(self) -> float:
        return float(np.linalg.norm(self.data))

    def normalize(self) -> Ket:
        """Normalize the state in place and return it"""
        norm = self.norm()
        if norm == 0:
            raise ValueError("Cannot normalize a null vector")
        self.data = self.data / norm
        return self

    def __repr__(self):
        return f"Ket({self.basis!r}, {self.data!r})"


def normalize(ket: Ket) -> Ket:
    """Normalized copy of a state"""
    return Ket(ket.basis, ket.data).normalize()


def tensor_kets(*kets: Ket) -> Ket:
    data = kets[0].data
    for ket in kets[1:]:
        data = np.kron(data, ket.data)
    return Ket(basis_tensor(*[k.basis for k in kets]), data)


def basisstate(basis: Basis, index: int) -> Ket:
    """State with a single unit amplitude at position index of the basis"""
    if not 0 <= index < len(basis):
        raise DimensionMismatch(f"State index {index} out of basis of size {len(basis)}")
    ket = Ket(basis)
    ket.data[index] = 1
    return ket


def fockstate(basis: FockBasis, n: int) -> Ket:
    """Fock state with exactly n particles"""
    if not basis.n_min <= n <= basis.n_max:
        raise DimensionMismatch(f"{n} particles are out of {basis}")
    return basisstate(basis, n - basis.n_min)


def coherentstate(basis: FockBasis, alpha: complex) -> Ket:
    r"""
    Coherent state :math:`|\alpha\rangle` truncated to the basis, amplitudes
    :math:`e^{-|\alpha|^2/2}\alpha^n/\sqrt{n!}`. The result is not renormalized after truncation.

    Amplitudes are built by the recurrence :math:`c_n = c_{n-1} \alpha / \sqrt{n}` so that large cutoffs never
    evaluate :math:`n!`.
    """
    alpha = complex(alpha)
    amplitudes = np.empty(basis.n_max + 1, dtype=global_params["dtype"])
    amplitudes[0] = math.exp(-abs(alpha) ** 2 / 2)
    for n in range(1, basis.n_max + 1):
        amplitudes[n] = amplitudes[n - 1] * alpha / math.sqrt(n)
    return Ket(basis, amplitudes[basis.n_min:])


def spinup(basis: SpinBasis) -> Ket:
    return basisstate(basis, 0)


def spindown(basis: SpinBasis) -> Ket:
    return basisstate(basis, len(basis) - 1)


def nlevelstate(basis: NLevelBasis, n: int) -> Ket:
    """State of the n-th level (0-based)"""
    return basisstate(basis, n)
