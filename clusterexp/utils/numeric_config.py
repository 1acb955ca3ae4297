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

from numbers import Real

from .logging import get_logger, channel
from .persistent_data import PersistentData
from .utils import global_params

NUMERIC_KEY = "numeric"
ATOL_KEY = "atol"
TRACE_TOLERANCE_KEY = "trace_tolerance"

_DEFAULTS = {ATOL_KEY: 1e-10, TRACE_TOLERANCE_KEY: 1e-6}


class NumericConfig:
    """Handle the numerical tolerances shared by the package, stored in ``global_params``:

        - atol: absolute tolerance used when comparing operators
        - trace_tolerance: allowed deviation from a unit trace before a density operator is reported as unnormalized

    Tolerances saved in the persistent data replace the built-in defaults when the package is imported.

    :param persistent_data: The persistent data access to use. In a standard environment, always use the default.
    """

    def __init__(self, persistent_data: PersistentData = None):
        self._persistent_data = persistent_data or PersistentData()

    @staticmethod
    def _check(name: str, value):
        if not isinstance(value, Real) or isinstance(value, bool):
            raise TypeError(f"{name} expected a numerical value, got {type(value)}")
        if value < 0:
            raise ValueError(f"{name} value out of bound: {value} < 0")
        return float(value)

    @staticmethod
    def set_atol(atol: float) -> None:
        global_params[ATOL_KEY] = NumericConfig._check(ATOL_KEY, atol)

    @staticmethod
    def get_atol() -> float:
        return global_params[ATOL_KEY]

    @staticmethod
    def set_trace_tolerance(tolerance: float) -> None:
        global_params[TRACE_TOLERANCE_KEY] = NumericConfig._check(TRACE_TOLERANCE_KEY, tolerance)

    @staticmethod
    def get_trace_tolerance() -> float:
        return global_params[TRACE_TOLERANCE_KEY]

    @staticmethod
    def reset() -> None:
        """Restore the default tolerances (the persistent configuration is left untouched)"""
        global_params.update(_DEFAULTS)

    def load(self) -> None:
        """Apply the tolerances found in the persistent configuration, if any"""
        _load_default_tolerances(self._persistent_data)

    def save(self) -> None:
        """Save the current tolerances in the persistent data"""
        self._persistent_data.save_config({NUMERIC_KEY: {ATOL_KEY: self.get_atol(),
                                                         TRACE_TOLERANCE_KEY: self.get_trace_tolerance()}})


def _load_default_tolerances(persistent_data: PersistentData = None):
    # Saved tolerances replace the built-in defaults, invalid ones are reported and ignored
    config = (persistent_data or PersistentData()).load_config().get(NUMERIC_KEY, {})
    for key in (ATOL_KEY, TRACE_TOLERANCE_KEY):
        if key in config:
            try:
                global_params[key] = NumericConfig._check(key, config[key])
            except (TypeError, ValueError) as e:
                get_logger().error(f"Invalid {key} in persistent configuration: {e}", channel.user)


_load_default_tolerances()
