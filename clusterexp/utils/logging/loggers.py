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

import json
import logging as py_log
import traceback
import warnings

from abc import ABC, abstractmethod
from os import path

from exqalibur import logging as xq_log

from ..persistent_data import PersistentData
from .config import LoggerConfig, _CHANNELS, _ENABLE_FILE

DEFAULT_CHANNEL = xq_log.channel.user


class ALogger(ABC):
    """Channel based logger interface shared by the exqalibur and the Python backends"""

    @abstractmethod
    def apply_config(self, config: LoggerConfig):
        pass

    @abstractmethod
    def set_level(self, level: xq_log.level, channel: xq_log.channel = DEFAULT_CHANNEL):
        pass

    @abstractmethod
    def debug(self, msg: str, channel: xq_log.channel = DEFAULT_CHANNEL):
        pass

    @abstractmethod
    def info(self, msg: str, channel: xq_log.channel = DEFAULT_CHANNEL):
        pass

    @abstractmethod
    def warn(self, msg: str, channel: xq_log.channel = DEFAULT_CHANNEL):
        pass

    @abstractmethod
    def error(self, msg: str, channel: xq_log.channel = DEFAULT_CHANNEL):
        pass

    @abstractmethod
    def critical(self, msg: str, channel: xq_log.channel = DEFAULT_CHANNEL, exc_info=None):
        pass

    def log_resources(self, my_dict: dict):
        """Log a resources record (e.g. the size and support of a correlation extraction) as a JSON string, at info
        level on the resources channel, so it can be easily deserialized

        :param my_dict: resources dictionary to log
        """
        self.info(json.dumps(my_dict), xq_log.channel.resources)


def _format_exception(exc_info) -> str:
    return '\n' + ''.join(traceback.format_exception(exc_info[0], exc_info[1], exc_info[2]))


class ExqaliburLogger(ALogger):
    """Logger writing through exqalibur's native logger, to the console and optionally to
    ``<persistent data>/logs/clusterexp.log``"""

    def __init__(self, persistent_data: PersistentData = None):
        self._persistent_data = persistent_data or PersistentData()
        config = LoggerConfig(self._persistent_data)
        self._configure_channels(config)
        xq_log.enable_console()
        if config[_ENABLE_FILE]:
            self._enable_file()

    @staticmethod
    def _configure_channels(config: LoggerConfig):
        for channel_name, channel_config in config[_CHANNELS].items():
            level_name = channel_config["level"]
            if channel_name not in xq_log.channel.__members__ or level_name not in xq_log.level.__members__:
                warnings.warn(UserWarning(f"Ignoring unknown logging setting {channel_name}: {level_name}"))
                continue
            xq_log.set_level(xq_log.level.__members__[level_name], xq_log.channel.__members__[channel_name])

    def apply_config(self, config: LoggerConfig):
        if config.python_logger_is_enabled():
            warnings.warn(UserWarning(
                "Cannot change type of logger from logger.apply_config, use clusterexp.utils.apply_config instead"))
        self._configure_channels(config)

    def get_log_file_path(self) -> str:
        return path.join(self._persistent_data.directory, "logs", "clusterexp.log")

    def _enable_file(self):
        if self._persistent_data.is_writable():
            xq_log.initialize(log_filepath=self.get_log_file_path())
        else:
            xq_log.initialize()
        print(f"starting to write logs in {self.get_log_file_path()}")
        xq_log.enable_file()

    def set_level(self, level: xq_log.level, channel: xq_log.channel = DEFAULT_CHANNEL):
        self.info(f"Set log level to '{level.name}' for channel '{channel.name}'", xq_log.channel.general)
        xq_log.set_level(level, channel)

    def debug(self, msg: str, channel: xq_log.channel = DEFAULT_CHANNEL):
        xq_log.debug(str(msg), channel)

    def info(self, msg: str, channel: xq_log.channel = DEFAULT_CHANNEL):
        xq_log.info(str(msg), channel)

    def warn(self, msg: str, channel: xq_log.channel = DEFAULT_CHANNEL):
        xq_log.warn(str(msg), channel)

    def error(self, msg: str, channel: xq_log.channel = DEFAULT_CHANNEL):
        xq_log.error(str(msg), channel)

    def critical(self, msg: str, channel: xq_log.channel = DEFAULT_CHANNEL, exc_info=None):
        msg = str(msg)
        if exc_info:
            msg += _format_exception(exc_info)
            traceback.print_exception(exc_info[0], exc_info[1], exc_info[2])
        xq_log.critical(msg, channel)


class PythonLogger(ALogger):
    """Logger writing through the standard ``clusterexp`` Python logger. Each record carries its channel name and is
    dropped when below the level of that channel."""
    _level_ratio = 10  # Ratio between Python levels and exqalibur levels

    def __init__(self, persistent_data: PersistentData = None):
        self._logger = py_log.getLogger("clusterexp")
        if not self._logger.handlers:
            handler = py_log.StreamHandler()
            handler.setFormatter(py_log.Formatter("%(asctime)s [%(levelname)s] - %(message)s"))
            self._logger.addHandler(handler)
        self._levels = {}
        self._configure_levels(LoggerConfig(persistent_data))
        self._logger.addFilter(self._message_has_to_be_logged)

    @staticmethod
    def _get_levelno(level_name: str) -> int:
        return xq_log.level.__members__.get(level_name, xq_log.level.off).value * PythonLogger._level_ratio

    def _configure_levels(self, config: LoggerConfig):
        self._levels = {name: self._get_levelno(channel["level"]) for name, channel in config[_CHANNELS].items()}
        self._logger.setLevel(min(self._levels.values()))

    def apply_config(self, config: LoggerConfig):
        if not config.python_logger_is_enabled():
            warnings.warn(UserWarning(
                "Cannot change type of logger from logger.apply_config, use clusterexp.utils.apply_config instead"))
        self._configure_levels(config)

    def _message_has_to_be_logged(self, record) -> bool:
        if "channel" in record.__dict__:
            return record.levelno >= self._levels[record.channel]
        return True

    def set_level(self, level: xq_log.level, channel: xq_log.channel = DEFAULT_CHANNEL):
        self._levels[channel.name] = self._get_levelno(level.name)
        self._logger.setLevel(min(self._levels.values()))

    def _log(self, levelno: int, msg: str, channel: xq_log.channel, exc_info=None):
        self._logger.log(levelno, msg, exc_info=exc_info, extra={"channel": channel.name})

    def debug(self, msg: str, channel: xq_log.channel = DEFAULT_CHANNEL):
        self._log(py_log.DEBUG, msg, channel)

    def info(self, msg: str, channel: xq_log.channel = DEFAULT_CHANNEL):
        self._log(py_log.INFO, msg, channel)

    def warn(self, msg: str, channel: xq_log.channel = DEFAULT_CHANNEL):
        self._log(py_log.WARNING, msg, channel)

    def error(self, msg: str, channel: xq_log.channel = DEFAULT_CHANNEL):
        self._log(py_log.ERROR, msg, channel)

    def critical(self, msg: str, channel: xq_log.channel = DEFAULT_CHANNEL, exc_info=None):
        self._log(py_log.CRITICAL, msg, channel, exc_info)
