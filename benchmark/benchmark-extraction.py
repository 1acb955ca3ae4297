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

import time
import numpy as np

import clusterexp as ce

N = 6
basis = ce.tensor(*[ce.SpinBasis(0.5)] * N)

rng = np.random.default_rng(0)
a = rng.normal(size=(len(basis), len(basis))) + 1j * rng.normal(size=(len(basis), len(basis)))
rho = ce.DenseOperator(basis, basis, a @ a.conj().T)
rho = rho / rho.trace()

for max_order in range(2, N + 1):
    support = set()
    for order in range(2, max_order + 1):
        support |= ce.correlation_masks(N, order)

    top0 = time.time_ns()
    approx = ce.ApproximateOperator.from_operator(rho, support)
    top1 = time.time_ns()
    full = approx.full()
    top2 = time.time_ns()

    print("order", max_order, "masks", len(support),
          "extract (ms)", (top1-top0) / 1e6, "full (ms)", (top2-top1) / 1e6,
          "trace distance", ce.tracedistance(rho, full))
