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
clusterexp approximates the density operator of a composite quantum system by keeping correlations up to a bounded
order instead of the full, exponentially sized operator.

An :class:`ApproximateOperator` stores one reduced operator per subsystem plus correlation operators indexed by
:class:`CorrelationMask`. It is either allocated from a support set of masks or extracted from a full density operator
through an order by order cluster expansion, and can be reassembled into the full operator.

The package also provides:
    - a minimal operator layer (bases, states, dense and sparse operators, tensor products and partial traces);
    - scaled sparse x dense matrix kernels (``gemm``, ``gemv``) accumulating in place.
"""

from .utils.metadata import CMetadata

__version__ = CMetadata.version()

from .quantum import *
from .correlations import *
from .utils import DimensionMismatch, InvalidMaskError, global_params, PersistentData, NumericConfig, \
    get_logger, use_python_logger, use_clusterexp_logger, apply_config, LoggerConfig, gemm, gemv
