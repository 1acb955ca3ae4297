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
import os
import warnings
from typing import Optional
from platformdirs import PlatformDirs

from .metadata import CMetadata

_CONFIG_FILE_NAME = "config.json"


class PersistentData:
    """PersistentData handle clusterexp persistent data
    On init, it creates a directory (if it doesn't exist) for storing clusterexp persistent data
    Directory depends of the os:
    * Linux: '/home/my_user/.local/share/clusterexp'
    * Windows: 'C:\\Users\\my_user\\AppData\\Local\\clusterexp\\clusterexp'
    * Darwin: '/Users/my_user/Library/Application Support/clusterexp'

    If the directory cannot be created or read/write in, a warning will inform the user

    :param directory: overrides the platform directory (used to isolate tests from user data)
    """

    def __init__(self, directory: Optional[str] = None) -> None:
        if directory is None:
            directory = PlatformDirs(CMetadata.package_name(), CMetadata.author()).user_data_dir
        self._directory = directory
        try:
            self._create_directory()
        except OSError as exc:
            warnings.warn(exc)
            return
        if not self.is_writable() or not self.is_readable():
            warnings.warn(UserWarning(f"Cannot read or write in {self._directory}"))

    def is_writable(self) -> bool:
        return os.access(self._directory, os.W_OK)

    def is_readable(self) -> bool:
        return os.access(self._directory, os.R_OK)

    def _create_directory(self) -> None:
        if not os.path.exists(self._directory):
            os.makedirs(self._directory)

    def get_full_path(self, element_name: str) -> str:
        """Get the full path of an element supposedly in persistent data directory

        :param element_name: name of the element (with extension)
        :return: full path of the file
        """
        return os.path.join(self._directory, element_name)

    def has_file(self, filename: str) -> bool:
        return os.path.exists(self.get_full_path(filename))

    def write_file(self, filename: str, data: str):
        """Write text into a file in persistent data directory

        :param filename: name of the file to write in (with extension)
        :param data: text to write
        """
        with open(self.get_full_path(filename), "wt", encoding="UTF-8") as file:
            file.write(data)

    def read_file(self, filename: str) -> str:
        """Read text from a file in persistent data directory

        :param filename: name of the file to read (with extension)
        :raises FileNotFoundError: Raise an exception if file is not found
        :return: the text, without trailing whitespace
        """
        file_path = self.get_full_path(filename)
        if not os.path.exists(file_path):
            raise FileNotFoundError(file_path)
        with open(file_path, "rt", encoding="UTF-8") as file:
            data = file.read()
        return data.removesuffix('\n').rstrip()

    def load_config(self) -> dict:
        """Load the JSON configuration file of the persistent data directory

        :return: the configuration as a dictionary, empty if there is no readable configuration
        """
        if not self.has_file(_CONFIG_FILE_NAME):
            return {}
        try:
            return json.loads(self.read_file(_CONFIG_FILE_NAME))
        except (OSError, json.JSONDecodeError) as exc:
            warnings.warn(UserWarning(f"Cannot read configuration file: {exc}"))
            return {}

    def save_config(self, config: dict):
        """Merge a configuration dictionary into the JSON configuration file

        :param config: top-level sections to write, other sections are kept
        """
        if not self.is_writable():
            warnings.warn(UserWarning(f"Cannot save configuration in {self._directory}"))
            return
        full_config = self.load_config()
        full_config.update(config)
        self.write_file(_CONFIG_FILE_NAME, json.dumps(full_config, indent=2))

    @property
    def directory(self) -> str:
        return self._directory
