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
Correlation masks select the subsystems taking part in a correlation.

A mask over N subsystems is stored as an N-bit integer, bit i being set when subsystem i (0-based) participates, so
masks hash and compare by value. Masks of order 1 denote the reduced operator of a single subsystem; correlations are
only defined for masks of order 2 or more.
"""
from __future__ import annotations

from itertools import combinations
from numbers import Integral
from typing import Iterable, Iterator, Union

from ..utils.errors import DimensionMismatch, InvalidMaskError


class CorrelationMask:
    """
    Fixed-length boolean selector over N subsystems.

    :param flags: one boolean per subsystem
    """
    __slots__ = ("_n", "_bits")

    def __init__(self, flags: Iterable[bool] = ()):
        bits = 0
        n = 0
        for i, flag in enumerate(flags):
            if flag:
                bits |= 1 << i
            n = i + 1
        self._n = n
        self._bits = bits

    @classmethod
    def _from_bits(cls, n: int, bits: int) -> CorrelationMask:
        mask = cls.__new__(cls)
        mask._n = n
        mask._bits = bits
        return mask

    @classmethod
    def from_indices(cls, n: int, indices: Iterable[int]) -> CorrelationMask:
        """Mask over n subsystems, set at each of the given 0-based positions (unsorted, duplicates allowed)"""
        bits = 0
        for i in indices:
            if not 0 <= i < n:
                raise InvalidMaskError(f"Subsystem index {i} out of range for {n} subsystems")
            bits |= 1 << i
        return cls._from_bits(n, bits)

    @property
    def n(self) -> int:
        """Number of subsystems of the system the mask applies to"""
        return self._n

    @property
    def bits(self) -> int:
        return self._bits

    @property
    def order(self) -> int:
        """Number of participating subsystems"""
        return bin(self._bits).count("1")

    @property
    def indices(self) -> tuple:
        """Participating subsystem positions, ascending"""
        return tuple(i for i in range(self._n) if self._bits >> i & 1)

    def _check_length(self, other: CorrelationMask):
        if not isinstance(other, CorrelationMask):
            raise TypeError(f"Expected a CorrelationMask, got {type(other)}")
        if self._n != other._n:
            raise DimensionMismatch(f"Masks have different lengths: {self._n} and {other._n}")

    def complement(self) -> CorrelationMask:
        return CorrelationMask._from_bits(self._n, ~self._bits & ((1 << self._n) - 1))

    def setdiff(self, other: CorrelationMask) -> CorrelationMask:
        """Subsystems selected by this mask and not by other"""
        self._check_length(other)
        return CorrelationMask._from_bits(self._n, self._bits & ~other._bits)

    def issubset(self, other: CorrelationMask) -> bool:
        self._check_length(other)
        return self._bits & ~other._bits == 0

    def __invert__(self) -> CorrelationMask:
        return self.complement()

    def __sub__(self, other: CorrelationMask) -> CorrelationMask:
        return self.setdiff(other)

    def __le__(self, other: CorrelationMask) -> bool:
        return self.issubset(other)

    def __lt__(self, other: CorrelationMask) -> bool:
        return self.issubset(other) and self._bits != other._bits

    def __len__(self) -> int:
        return self._n

    def __iter__(self) -> Iterator[bool]:
        return (bool(self._bits >> i & 1) for i in range(self._n))

    def __getitem__(self, i: int) -> bool:
        if i < 0:
            i += self._n
        if not 0 <= i < self._n:
            raise IndexError(f"Subsystem index {i} out of range for {self._n} subsystems")
        return bool(self._bits >> i & 1)

    def __eq__(self, other) -> bool:
        if not isinstance(other, CorrelationMask):
            return NotImplemented
        return self._n == other._n and self._bits == other._bits

    def __hash__(self) -> int:
        return hash((self._n, self._bits))

    def __repr__(self):
        return f"CorrelationMask({tuple(self)})"

    def __str__(self):
        return "".join("1" if flag else "0" for flag in self)


def indices_to_mask(n: int, indices: Iterable[int]) -> CorrelationMask:
    return CorrelationMask.from_indices(n, indices)


def mask_to_indices(mask: CorrelationMask) -> list:
    return list(mask.indices)


def complement(n_or_mask: Union[int, CorrelationMask], indices: Iterable[int] = None):
    """
    Complement of a subset of subsystems, in the same form as the input:

    * ``complement(n, indices)`` gives the ascending list of positions in ``range(n)`` absent from ``indices``
    * ``complement(mask)`` gives the negated mask
    """
    if isinstance(n_or_mask, CorrelationMask):
        if indices is not None:
            raise TypeError("complement(mask) takes no indices")
        return n_or_mask.complement()
    indices = set(indices)
    for i in indices:
        if not 0 <= i < n_or_mask:
            raise InvalidMaskError(f"Subsystem index {i} out of range for {n_or_mask} subsystems")
    return [i for i in range(n_or_mask) if i not in indices]


def correlation_indices(n: int, order: int) -> set:
    """All the order-sized subsets of range(n), as ascending tuples"""
    if order < 1 or order > n:
        return set()
    return set(combinations(range(n), order))


def correlation_masks(n_or_masks: Union[int, Iterable[CorrelationMask]], order: int) -> set:
    """
    Correlation masks of a given order:

    * ``correlation_masks(n, order)`` enumerates every mask of that order over n subsystems
    * ``correlation_masks(masks, order)`` keeps the masks of that order from an existing collection
    """
    if isinstance(n_or_masks, Integral):
        n_or_masks = int(n_or_masks)
        return {CorrelationMask.from_indices(n_or_masks, indices) for indices in correlation_indices(n_or_masks, order)}
    return {mask for mask in n_or_masks if mask.order == order}


def all_correlation_masks(n: int, min_order: int = 2) -> set:
    """Every mask over n subsystems with an order between min_order and n"""
    masks = set()
    for order in range(max(min_order, 1), n + 1):
        masks |= correlation_masks(n, order)
    return masks


def setdiff(x: CorrelationMask, y: CorrelationMask) -> CorrelationMask:
    return x.setdiff(y)


def is_subset(x: CorrelationMask, y: CorrelationMask) -> bool:
    return x.issubset(y)
