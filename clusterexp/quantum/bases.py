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
from fractions import Fraction
from functools import reduce
from operator import mul

from ..utils.errors import DimensionMismatch


class Basis(ABC):
    """
    Abstract basis of a Hilbert space.

    Two bases are equal when they describe the same space: same class and same parameters, compared structurally.
    """

    @property
    @abstractmethod
    def shape(self) -> list[int]:
        """Dimensions of the tensor factors of the basis"""

    @abstractmethod
    def _key(self) -> tuple:
        pass

    def __len__(self) -> int:
        return reduce(mul, self.shape, 1)

    def __eq__(self, other) -> bool:
        return type(self) is type(other) and self._key() == other._key()

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._key()))

    def __mul__(self, other: Basis) -> CompositeBasis:
        return tensor(self, other)


class GenericBasis(Basis):
    """Basis without any particular structure, only defined by its dimension"""

    def __init__(self, n: int):
        if n < 1:
            raise DimensionMismatch(f"A basis needs a strictly positive dimension, got {n}")
        self._n = n

    @property
    def shape(self) -> list[int]:
        return [self._n]

    def _key(self) -> tuple:
        return (self._n,)

    def __repr__(self):
        return f"GenericBasis({self._n})"


class FockBasis(Basis):
    """
    Basis of a truncated Fock space, spanning the particle numbers from n_min to n_max (both included).

    :param n_min: minimal particle number (or n_max if n_max is not given, then n_min is 0)
    :param n_max: maximal particle number
    """

    def __init__(self, n_min: int, n_max: int = None):
        if n_max is None:
            n_min, n_max = 0, n_min
        if n_min < 0 or n_max <= n_min:
            raise DimensionMismatch(f"Invalid Fock basis boundaries [{n_min}, {n_max}]")
        self.n_min = n_min
        self.n_max = n_max

    @property
    def shape(self) -> list[int]:
        return [self.n_max - self.n_min + 1]

    def _key(self) -> tuple:
        return self.n_min, self.n_max

    def __repr__(self):
        return f"FockBasis({self.n_min}, {self.n_max})"


class SpinBasis(Basis):
    """
    Basis of a spin, with 2*spin + 1 states ordered from the highest to the lowest magnetic number.

    :param spin: positive integer or half integer
    """

    def __init__(self, spin):
        spin = Fraction(spin).limit_denominator(2)
        if spin <= 0 or (2 * spin).denominator != 1:
            raise DimensionMismatch(f"Spin must be a positive integer or half integer, got {spin}")
        self.spin = spin

    @property
    def shape(self) -> list[int]:
        return [int(2 * self.spin + 1)]

    def _key(self) -> tuple:
        return (self.spin,)

    def __repr__(self):
        return f"SpinBasis({self.spin})"


class NLevelBasis(Basis):
    """Basis of a system with n discrete levels"""

    def __init__(self, n: int):
        if n < 1:
            raise DimensionMismatch(f"An N-level basis needs at least one level, got {n}")
        self.n = n

    @property
    def shape(self) -> list[int]:
        return [self.n]

    def _key(self) -> tuple:
        return (self.n,)

    def __repr__(self):
        return f"NLevelBasis({self.n})"


class CompositeBasis(Basis):
    """
    Tensor product of subsystem bases, in the given order. Nested composite bases are flattened so that
    ``bases`` always lists the elementary subsystems.
    """

    def __init__(self, *bases: Basis):
        if len(bases) == 1 and isinstance(bases[0], (list, tuple)):
            bases = tuple(bases[0])
        flat = []
        for b in bases:
            if isinstance(b, CompositeBasis):
                flat.extend(b.bases)
            elif isinstance(b, Basis):
                flat.append(b)
            else:
                raise TypeError(f"Expected a Basis, got {type(b)}")
        if not flat:
            raise DimensionMismatch("A composite basis needs at least one subsystem")
        self.bases = tuple(flat)

    @property
    def shape(self) -> list[int]:
        return [len(b) for b in self.bases]

    def _key(self) -> tuple:
        return self.bases

    def __getitem__(self, item):
        return self.bases[item]

    def __repr__(self):
        return "CompositeBasis(" + ", ".join(repr(b) for b in self.bases) + ")"


def tensor(*bases: Basis) -> Basis:
    """Tensor product of bases. A single non-composite basis is returned unchanged."""
    if len(bases) == 1 and not isinstance(bases[0], CompositeBasis):
        return bases[0]
    return CompositeBasis(*bases)


def subsystems(basis: Basis) -> tuple:
    """Subsystem bases of a basis, a non-composite basis being its own single subsystem"""
    if isinstance(basis, CompositeBasis):
        return basis.bases
    return (basis,)
