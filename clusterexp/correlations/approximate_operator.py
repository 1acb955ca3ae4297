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

import sys
from types import MappingProxyType
from typing import Iterable, Mapping, Sequence

from tabulate import tabulate

from .masks import CorrelationMask, complement, correlation_masks, mask_to_indices
from ..quantum.bases import Basis, CompositeBasis, tensor as basis_tensor
from ..quantum.operators import Operator, DenseOperator, ptrace, tensor, permute_subsystems
from ..utils.errors import DimensionMismatch
from ..utils.logging import get_logger, channel
from ..utils.utils import global_params


def _subsystem_bases(basis: Basis, name: str) -> tuple:
    if not isinstance(basis, CompositeBasis):
        raise DimensionMismatch(f"{name} must be a composite basis, got {basis!r}")
    return basis.bases


def _as_mask(mask, n: int) -> CorrelationMask:
    if not isinstance(mask, CorrelationMask):
        mask = CorrelationMask(mask)
    if len(mask) != n:
        raise DimensionMismatch(f"Mask {mask} has length {len(mask)}, the system has {n} subsystems")
    return mask


def _as_correlation_mask(mask, n: int) -> CorrelationMask:
    mask = _as_mask(mask, n)
    if mask.order < 2:
        raise DimensionMismatch(f"Mask {mask} has order {mask.order}, a correlation needs at least 2 subsystems")
    return mask


def _tensor_in_ascending_order(groups: Sequence[tuple]) -> Operator:
    """
    Tensor product of operators acting on disjoint groups of subsystems, reordered so that the subsystems appear in
    ascending index order.

    :param groups: (subsystem indices, operator) pairs, each operator acting on its indices in ascending order
    """
    layout = [i for indices, _ in groups for i in indices]
    op = tensor(*[group_op for _, group_op in groups])
    order = sorted(range(len(layout)), key=layout.__getitem__)
    if order == list(range(len(layout))):
        return op
    return permute_subsystems(op, order)


class ApproximateOperator:
    r"""
    Operator on N subsystems described by its reduced single-subsystem operators and a set of correlation operators.

    A correlation operator is indexed by the mask of the subsystems it involves (at least 2) and is defined on the
    tensor product of their bases, in ascending subsystem order. The full operator is recovered as

    .. math::
        \rho = \bigotimes_i \rho^{(i)} + \sum_s \sigma^{s} \otimes \bigotimes_{i \notin s} \rho^{(i)}

    Instances are built once and not modified afterwards: the given operators are copied, ``operators`` is a tuple
    and ``correlations`` a read-only mapping. Use :meth:`from_support` or :meth:`from_operator` rather than the
    constructor, which only validates and stores already computed parts.

    :param basis_l: composite left basis of the N subsystems
    :param basis_r: composite right basis of the N subsystems
    :param operators: reduced operator of each subsystem
    :param correlations: correlation operator of each mask
    :raises DimensionMismatch: if the bases, operators and masks are not consistent with each other
    """

    def __init__(self, basis_l: CompositeBasis, basis_r: CompositeBasis, operators: Sequence[Operator],
                 correlations: Mapping[CorrelationMask, Operator]):
        bases_l = _subsystem_bases(basis_l, "basis_l")
        bases_r = _subsystem_bases(basis_r, "basis_r")
        n = len(bases_l)
        if len(bases_r) != n:
            raise DimensionMismatch(f"basis_l has {n} subsystems but basis_r has {len(bases_r)}")
        if len(operators) != n:
            raise DimensionMismatch(f"{len(operators)} reduced operators given for {n} subsystems")

        for i, op in enumerate(operators):
            if not isinstance(op, Operator):
                raise TypeError(f"Reduced operator {i} is a {type(op)}, not an Operator")
            if op.basis_l != bases_l[i] or op.basis_r != bases_r[i]:
                raise DimensionMismatch(f"Reduced operator {i} is not defined on the bases of subsystem {i}")

        checked = {}
        for mask, op in correlations.items():
            mask = _as_correlation_mask(mask, n)
            if not isinstance(op, Operator):
                raise TypeError(f"Correlation {mask} is a {type(op)}, not an Operator")
            if op.basis_l != basis_tensor(*[bases_l[i] for i in mask.indices]) \
                    or op.basis_r != basis_tensor(*[bases_r[i] for i in mask.indices]):
                raise DimensionMismatch(f"Correlation {mask} is not defined on the bases of its subsystems")
            checked[mask] = op.copy()

        self.basis_l = basis_l
        self.basis_r = basis_r
        self._operators = tuple(op.copy() for op in operators)
        self._correlations = MappingProxyType(checked)

    @classmethod
    def from_support(cls, basis_l: CompositeBasis, support: Iterable[CorrelationMask],
                     basis_r: CompositeBasis = None) -> ApproximateOperator:
        """
        Zero-valued approximate operator holding a correlation operator for each mask of the support.

        :param basis_l: composite left basis
        :param support: masks (of order 2 or more) of the correlations to keep
        :param basis_r: composite right basis, defaults to basis_l
        """
        basis_r = basis_l if basis_r is None else basis_r
        bases_l = _subsystem_bases(basis_l, "basis_l")
        bases_r = _subsystem_bases(basis_r, "basis_r")
        n = len(bases_l)
        if len(bases_r) != n:
            raise DimensionMismatch(f"basis_l has {n} subsystems but basis_r has {len(bases_r)}")

        operators = [DenseOperator(bases_l[i], bases_r[i]) for i in range(n)]
        correlations = {}
        for mask in support:
            mask = _as_correlation_mask(mask, n)
            correlations[mask] = tensor(*[operators[i] for i in mask.indices])
        return cls(basis_l, basis_r, operators, correlations)

    @classmethod
    def from_operator(cls, rho: Operator, support: Iterable[CorrelationMask]) -> ApproximateOperator:
        """
        Extract the reduced operators and the correlations of the support from a full operator.

        Correlations are computed order by order. For a mask s, the correlation is the marginal of rho on s minus the
        product of the reduced operators of s, minus every already extracted correlation on a strict subset of s
        completed by the reduced operators of the remaining subsystems of s.

        :param rho: operator on a composite basis, usually a density operator
        :param support: masks (of order 2 or more) of the correlations to extract
        :raises DimensionMismatch: if rho is not on composite bases or a mask does not fit its subsystems
        """
        bases_l = _subsystem_bases(rho.basis_l, "rho.basis_l")
        n = len(bases_l)
        if len(_subsystem_bases(rho.basis_r, "rho.basis_r")) != n:
            raise DimensionMismatch("rho has a different number of subsystems on its left and right bases")
        support = {_as_correlation_mask(mask, n) for mask in support}

        if rho.basis_l == rho.basis_r:
            trace = rho.trace()
            if abs(trace - 1) > global_params["trace_tolerance"]:
                get_logger().warn(f"Extracting correlations from an operator of trace {trace:.6g}", channel.user)
        get_logger().debug(f"Extract {len(support)} correlations from an operator on {n} subsystems",
                           channel.general)

        bases_r = rho.basis_r.bases
        operators = [DenseOperator(bases_l[i], bases_r[i], ptrace(rho, complement(n, [i])).data) for i in range(n)]
        correlations = {}
        for order in range(2, n + 1):
            # every correlation of this order only reads correlations of lower orders
            stage = {}
            for s_k in sorted(correlation_masks(support, order), key=mask_to_indices):
                sigma = ptrace(rho, mask_to_indices(s_k.complement()))
                sigma -= tensor(*[operators[i] for i in s_k.indices])
                for s_n, sigma_n in correlations.items():
                    if s_n < s_k:
                        rest = s_k - s_n
                        sigma -= _tensor_in_ascending_order(
                            [(s_n.indices, sigma_n)] + [((i,), operators[i]) for i in rest.indices])
                stage[s_k] = sigma
            correlations.update(stage)

        cls._log_resources(sys._getframe().f_code.co_name, n, support)
        return cls(rho.basis_l, rho.basis_r, operators, correlations)

    @staticmethod
    def _log_resources(method: str, n: int, support: set):
        get_logger().log_resources({
            'layer': 'ApproximateOperator',
            'method': method,
            'N': n,
            'support': sorted(str(mask) for mask in support)
        })

    @property
    def N(self) -> int:
        """Number of subsystems"""
        return len(self._operators)

    @property
    def operators(self) -> tuple:
        return self._operators

    @property
    def correlations(self) -> Mapping[CorrelationMask, Operator]:
        return self._correlations

    @property
    def support(self) -> frozenset:
        """Masks of the stored correlations"""
        return frozenset(self._correlations)

    def reduced(self, i: int) -> Operator:
        """Reduced operator of subsystem i (0-based)"""
        return self._operators[i]

    def correlation(self, mask) -> Operator:
        return self._correlations[_as_correlation_mask(mask, self.N)]

    def __getitem__(self, mask) -> Operator:
        """Reduced operator for an order-1 mask, correlation operator otherwise"""
        mask = _as_mask(mask, self.N)
        if mask.order == 1:
            return self._operators[mask.indices[0]]
        return self._correlations[mask]

    def __contains__(self, mask) -> bool:
        """Whether a correlation is stored for mask, given as a CorrelationMask or a sequence of booleans"""
        try:
            mask = _as_mask(mask, self.N)
        except (DimensionMismatch, TypeError):
            return False
        return mask in self._correlations

    def __len__(self) -> int:
        return len(self._correlations)

    def product_operator(self) -> Operator:
        """Tensor product of the reduced operators, the uncorrelated part of the full operator"""
        return DenseOperator(self.basis_l, self.basis_r, tensor(*self._operators).data)

    def embed_correlation(self, mask) -> Operator:
        """Correlation of mask completed by the reduced operators of every other subsystem, on the full bases"""
        mask = _as_correlation_mask(mask, self.N)
        groups = [(mask.indices, self._correlations[mask])]
        groups += [((i,), self._operators[i]) for i in mask.complement().indices]
        return DenseOperator(self.basis_l, self.basis_r, _tensor_in_ascending_order(groups).data)

    def full(self) -> DenseOperator:
        """Operator on the full bases, exact when every correlation of every order has been kept"""
        result = self.product_operator()
        for mask in sorted(self._correlations, key=mask_to_indices):
            result += self.embed_correlation(mask)
        return result

    to_dense = full

    def __str__(self):
        rows = [[str(CorrelationMask.from_indices(self.N, [i])), 1, f"{op.shape[0]}x{op.shape[1]}",
                 f"{op.norm():.6g}"] for i, op in enumerate(self._operators)]
        for mask in sorted(self._correlations, key=lambda m: (m.order, mask_to_indices(m))):
            op = self._correlations[mask]
            rows.append([str(mask), mask.order, f"{op.shape[0]}x{op.shape[1]}", f"{op.norm():.6g}"])
        return tabulate(rows, headers=["mask", "order", "shape", "norm"], disable_numparse=True)

    def __repr__(self):
        return f"ApproximateOperator(N={self.N}, correlations={len(self)})"


def extract_correlations(rho: Operator, support: Iterable[CorrelationMask]) -> ApproximateOperator:
    return ApproximateOperator.from_operator(rho, support)
