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
from scipy.sparse import random_array

import clusterexp as ce

n = 400
rng = np.random.default_rng(0)

m = random_array((n, n), density=0.01, format="csc", random_state=rng)
m = (1 + 1j) * m
b = rng.normal(size=(n, 64)) + 1j * rng.normal(size=(n, 64))
result = np.zeros((n, 64), dtype=complex)

dt_kernel = 0
dt_raw = 0

for _ in range(200):
    top0 = time.time_ns()
    ce.gemm(1, m, b, 0, result)
    top1 = time.time_ns()
    dt_kernel += top1-top0

    top0 = time.time_ns()
    R = m @ b
    top1 = time.time_ns()
    dt_raw += top1-top0

assert np.allclose(result, R)

if dt_kernel/dt_raw > 10:
    print("TOO_SLOW", "gemm", dt_kernel, "raw", dt_raw, "factor", dt_kernel/dt_raw)
else:
    print("OK", "gemm", dt_kernel, "raw", dt_raw, "factor", dt_kernel/dt_raw)
