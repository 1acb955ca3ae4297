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

from abc import ABC, abstractmethod
from functools import reduce
from numbers import Number
from typing import Iterable, Optional, Sequence, Union

import numpy as np
from scipy.linalg import eigvalsh
from scipy.sparse import csc_array, issparse, eye, kron
from scipy.sparse.linalg import norm as sparse_norm

from .bases import Basis, subsystems, tensor as basis_tensor
from .states import Ket, tensor_kets
from ..utils.errors import DimensionMismatch
from ..utils.sparsematrix import gemm, gemv
from ..utils.utils import global_params


class Operator(ABC):
    """
    Linear map from the space of ``basis_r`` to the space of ``basis_l``.

    Arithmetic (``+``, ``-``, scalar ``*`` and ``/``) needs operands defined on identical bases and always builds a
    new operator. ``@`` is the operator product. Tensor products and partial traces are the module functions
    :func:`tensor` and :func:`ptrace`.
    """

    def __init__(self, basis_l: Basis, basis_r: Basis):
        self.basis_l = basis_l
        self.basis_r = basis_r

    @property
    def shape(self) -> tuple:
        return len(self.basis_l), len(self.basis_r)

    def _check_shape(self):
        if self.data.shape != self.shape:
            raise DimensionMismatch(f"Data of shape {self.data.shape} does not fit bases of shape {self.shape}")

    def _check_bases(self, other: Operator):
        if not isinstance(other, Operator):
            raise TypeError(f"Expected an Operator, got {type(other)}")
        if self.basis_l != other.basis_l or self.basis_r != other.basis_r:
            raise DimensionMismatch("Operators are not defined on the same bases")

    @abstractmethod
    def to_dense(self) -> DenseOperator:
        pass

    @abstractmethod
    def to_sparse(self) -> SparseOperator:
        pass

    @abstractmethod
    def copy(self) -> Operator:
        pass

    def __add__(self, other: Operator) -> Operator:
        self._check_bases(other)
        if isinstance(self, SparseOperator) and isinstance(other, SparseOperator):
            return SparseOperator(self.basis_l, self.basis_r, self.data + other.data)
        return DenseOperator(self.basis_l, self.basis_r, _to_array(self.data) + _to_array(other.data))

    def __sub__(self, other: Operator) -> Operator:
        return self + (-other)

    def __neg__(self) -> Operator:
        return -1 * self

    def __mul__(self, other):
        if isinstance(other, Number):
            return type(self)(self.basis_l, self.basis_r, other * self.data)
        return NotImplemented

    __rmul__ = __mul__

    def __truediv__(self, other):
        if isinstance(other, Number):
            return type(self)(self.basis_l, self.basis_r, self.data / other)
        return NotImplemented

    def __matmul__(self, other):
        if isinstance(other, Ket):
            return self._apply(other)
        if not isinstance(other, Operator):
            return NotImplemented
        if self.basis_r != other.basis_l:
            raise DimensionMismatch("Right basis of the left operand differs from left basis of the right operand")
        left_sparse, right_sparse = isinstance(self, SparseOperator), isinstance(other, SparseOperator)
        if left_sparse and right_sparse:
            return SparseOperator(self.basis_l, other.basis_r, self.data @ other.data)
        if left_sparse or right_sparse:
            result = np.zeros((len(self.basis_l), len(other.basis_r)), dtype=global_params["dtype"])
            gemm(1, self.data, other.data, 0, result)
            return DenseOperator(self.basis_l, other.basis_r, result)
        return DenseOperator(self.basis_l, other.basis_r, self.data @ other.data)

    def _apply(self, ket: Ket) -> Ket:
        if self.basis_r != ket.basis:
            raise DimensionMismatch("Operator right basis differs from the state basis")
        if isinstance(self, SparseOperator):
            result = np.zeros(len(self.basis_l), dtype=global_params["dtype"])
            gemv(1, self.data, ket.data, 0, result)
            return Ket(self.basis_l, result)
        return Ket(self.basis_l, self.data @ ket.data)

    def dagger(self) -> Operator:
        return type(self)(self.basis_r, self.basis_l, self.data.conj().T)

    def trace(self) -> complex:
        if self.basis_l != self.basis_r:
            raise DimensionMismatch("Trace is only defined for operators with identical left and right bases")
        return complex(self.data.diagonal().sum())

    def norm(self) -> float:
        """Frobenius norm"""
        if issparse(self.data):
            return float(sparse_norm(self.data))
        return float(np.linalg.norm(self.data))

    def isapprox(self, other: Operator, atol: Optional[float] = None) -> bool:
        """Element-wise comparison within an absolute tolerance, ``global_params['atol']`` by default"""
        if atol is None:
            atol = global_params["atol"]
        if not isinstance(other, Operator) or self.basis_l != other.basis_l or self.basis_r != other.basis_r:
            return False
        return np.allclose(_to_array(self.data), _to_array(other.data), rtol=0, atol=atol)

    def __repr__(self):
        return f"{type(self).__name__}({self.basis_l!r}, {self.basis_r!r})"


class DenseOperator(Operator):
    """
    Operator stored as a dense 2d array. The data is copied on construction.

    :param basis_l: left basis
    :param basis_r: right basis, defaults to basis_l
    :param data: matrix of the operator, defaults to zeros
    """

    def __init__(self, basis_l: Basis, basis_r: Basis = None, data=None):
        super().__init__(basis_l, basis_l if basis_r is None else basis_r)
        if data is None:
            self.data = np.zeros(self.shape, dtype=global_params["dtype"])
        else:
            self.data = np.array(_to_array(data), dtype=global_params["dtype"])
        self._check_shape()

    def to_dense(self) -> DenseOperator:
        return self

    def to_sparse(self) -> SparseOperator:
        return SparseOperator(self.basis_l, self.basis_r, self.data)

    def copy(self) -> DenseOperator:
        return DenseOperator(self.basis_l, self.basis_r, self.data)


class SparseOperator(Operator):
    """
    Operator stored as a compressed-column sparse array. The data is copied on construction.

    :param basis_l: left basis
    :param basis_r: right basis, defaults to basis_l
    :param data: matrix of the operator, dense or sparse, defaults to an empty matrix
    """

    def __init__(self, basis_l: Basis, basis_r: Basis = None, data=None):
        super().__init__(basis_l, basis_l if basis_r is None else basis_r)
        if data is None:
            self.data = csc_array(self.shape, dtype=global_params["dtype"])
        else:
            self.data = csc_array(data, dtype=global_params["dtype"], copy=True)
        self._check_shape()

    def to_dense(self) -> DenseOperator:
        return DenseOperator(self.basis_l, self.basis_r, self.data.toarray())

    def to_sparse(self) -> SparseOperator:
        return self

    def copy(self) -> SparseOperator:
        return SparseOperator(self.basis_l, self.basis_r, self.data)


def _to_array(data) -> np.ndarray:
    if issparse(data):
        return data.toarray()
    return np.asarray(data)


def dense(op: Operator) -> DenseOperator:
    return op.to_dense()


def sparse(op: Operator) -> SparseOperator:
    return op.to_sparse()


def dagger(op: Operator) -> Operator:
    return op.dagger()


def identityoperator(basis_l: Basis, basis_r: Basis = None) -> SparseOperator:
    basis_r = basis_l if basis_r is None else basis_r
    return SparseOperator(basis_l, basis_r, eye(len(basis_l), len(basis_r), dtype=global_params["dtype"], format="csc"))


def dm(ket: Ket) -> DenseOperator:
    """Density operator of a pure state"""
    return projector(ket)


def projector(ket_l: Ket, ket_r: Ket = None) -> DenseOperator:
    r""":math:`|\psi_l\rangle\langle\psi_r|`, with :math:`\psi_r = \psi_l` by default"""
    ket_r = ket_l if ket_r is None else ket_r
    return DenseOperator(ket_l.basis, ket_r.basis, np.outer(ket_l.data, ket_r.data.conj()))


def tensor(*items):
    """
    Tensor product of bases, states or operators, the factors being taken in the argument order.

    The product of operators is sparse if every factor is sparse, dense otherwise.
    """
    if len(items) == 1 and isinstance(items[0], (list, tuple)):
        items = tuple(items[0])
    if not items:
        raise ValueError("tensor needs at least one factor")
    if all(isinstance(i, Basis) for i in items):
        return basis_tensor(*items)
    if all(isinstance(i, Ket) for i in items):
        return tensor_kets(*items)
    if not all(isinstance(i, Operator) for i in items):
        raise TypeError("tensor factors must all be bases, all be kets, or all be operators")

    basis_l = basis_tensor(*[op.basis_l for op in items])
    basis_r = basis_tensor(*[op.basis_r for op in items])
    if all(isinstance(op, SparseOperator) for op in items):
        data = reduce(lambda a, b: kron(a, b, format="csc"), [op.data for op in items])
        return SparseOperator(basis_l, basis_r, data)
    data = reduce(np.kron, [_to_array(op.data) for op in items])
    return DenseOperator(basis_l, basis_r, data)


def _check_composite(op: Operator) -> tuple:
    bases_l, bases_r = subsystems(op.basis_l), subsystems(op.basis_r)
    if len(bases_l) != len(bases_r):
        raise DimensionMismatch(f"Left and right bases have {len(bases_l)} and {len(bases_r)} subsystems")
    return bases_l, bases_r


def ptrace(op: Operator, indices: Union[int, Iterable[int]]) -> DenseOperator:
    """
    Partial trace over the given subsystems.

    :param op: operator on composite bases
    :param indices: 0-based positions of the subsystems to trace out
    :return: operator on the remaining subsystems, which keep their relative order
    """
    if isinstance(indices, int):
        indices = [indices]
    bases_l, bases_r = _check_composite(op)
    n = len(bases_l)
    traced = sorted(set(indices))
    if any(not 0 <= i < n for i in traced):
        raise DimensionMismatch(f"Subsystem indices {traced} out of a {n}-subsystem operator")
    if len(traced) == n:
        raise DimensionMismatch("Cannot trace out every subsystem of an operator")
    for i in traced:
        if bases_l[i] != bases_r[i]:
            raise DimensionMismatch(f"Subsystem {i} has different left and right bases and cannot be traced out")
    if not traced:
        return op.to_dense().copy()

    keep = [i for i in range(n) if i not in traced]
    shape = [len(b) for b in bases_l] + [len(b) for b in bases_r]
    tensor_data = _to_array(op.data).reshape(shape)
    # a traced subsystem shares its label between the left and right axes
    labels = list(range(n)) + [i if i in traced else n + i for i in range(n)]
    result = np.einsum(tensor_data, labels, keep + [n + i for i in keep])

    basis_l = basis_tensor(*[bases_l[i] for i in keep])
    basis_r = basis_tensor(*[bases_r[i] for i in keep])
    return DenseOperator(basis_l, basis_r, result.reshape(len(basis_l), len(basis_r)))


def permute_subsystems(op: Operator, order: Sequence[int]) -> Operator:
    """
    Reorder the tensor factors of an operator: factor k of the result is factor ``order[k]`` of ``op``.

    The matrix elements are moved along with their subsystem axes, this is not a relabelling of the bases.
    """
    bases_l, bases_r = _check_composite(op)
    n = len(bases_l)
    order = list(order)
    if sorted(order) != list(range(n)):
        raise DimensionMismatch(f"{order} is not a permutation of {n} subsystems")

    shape = [len(b) for b in bases_l] + [len(b) for b in bases_r]
    tensor_data = _to_array(op.data).reshape(shape).transpose(order + [n + i for i in order])
    basis_l = basis_tensor(*[bases_l[i] for i in order])
    basis_r = basis_tensor(*[bases_r[i] for i in order])
    result = DenseOperator(basis_l, basis_r, tensor_data.reshape(len(basis_l), len(basis_r)))
    if isinstance(op, SparseOperator):
        return result.to_sparse()
    return result


def tracedistance(rho: Operator, sigma: Operator) -> float:
    r"""Trace distance :math:`\frac{1}{2}\mathrm{Tr}|\rho - \sigma|` between two hermitian operators"""
    rho._check_bases(sigma)
    if rho.basis_l != rho.basis_r:
        raise DimensionMismatch("Trace distance needs square operators")
    difference = _to_array(rho.data) - _to_array(sigma.data)
    return float(0.5 * np.sum(np.abs(eigvalsh(difference))))
