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

import warnings

from exqalibur import logging as exqalibur_logging
from ..persistent_data import PersistentData

_LOGGING = "logging"
_CHANNELS = "channels"
_ENABLE_FILE = "enable_file"
_USE_PYTHON_LOGGER = "use_python_logger"
_DEFAULT_LEVELS = {
    exqalibur_logging.channel.general.name: exqalibur_logging.level.off.name,
    exqalibur_logging.channel.resources.name: exqalibur_logging.level.off.name,
    exqalibur_logging.channel.user.name: exqalibur_logging.level.warn.name,
}


class LoggerConfig(dict):
    """This class represent the logger configuration as a dictionary and can be used to save it into persistent data.
    On class initialization, the configuration will be loaded from the ``logging`` section of the persistent
    configuration file.

    :param persistent_data: where the configuration is loaded from and saved to, defaults to the user data directory
    """
    def __init__(self, persistent_data: PersistentData = None):
        super().__init__()
        self._persistent_data = persistent_data or PersistentData()
        self.reset()
        self._load_from_persistent_data()

    def reset(self):
        """Reset the logger configuration to its default value, which is:
            - exqalibur logger
            - Disable file
            - Channel user at level warning
            - Channels general & resources off
        """
        self[_USE_PYTHON_LOGGER] = False
        self[_ENABLE_FILE] = False
        self[_CHANNELS] = {name: {"level": level} for name, level in _DEFAULT_LEVELS.items()}

    def _load_from_persistent_data(self):
        config = self._persistent_data.load_config().get(_LOGGING, {})
        if not isinstance(config, dict):
            warnings.warn(UserWarning("Incorrect logger config, try to reset and save it"))
            return
        for name, channel in config.get(_CHANNELS, {}).items():
            if name in _DEFAULT_LEVELS and isinstance(channel, dict) and "level" in channel:
                self[_CHANNELS][name] = {"level": channel["level"]}
        for key in (_ENABLE_FILE, _USE_PYTHON_LOGGER):
            if key in config:
                self[key] = bool(config[key])

    def set_level(self, level: exqalibur_logging.level, channel: exqalibur_logging.channel):
        """Set the level of a channel in the configuration

        Warning: this will not change the current logger level but only the level of the channel in the current
        LoggerConfig instance
        """
        self[_CHANNELS][channel.name]["level"] = level.name

    def use_python_logger(self):
        """Set the config to use the Python logger, effective through clusterexp.utils.apply_config"""
        self[_USE_PYTHON_LOGGER] = True

    def python_logger_is_enabled(self) -> bool:
        return self[_USE_PYTHON_LOGGER]

    def enable_file(self):
        """Save the log into a file, from the next exqalibur logger creation"""
        self[_ENABLE_FILE] = True

    def save(self):
        """Save the current logger configuration in the persistent data, other configuration sections are kept"""
        self._persistent_data.save_config({_LOGGING: dict(self)})
