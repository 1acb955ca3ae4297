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

import pytest

from clusterexp.utils import PersistentData


def test_persistent_data_files(tmp_path):
    persistent_data = PersistentData(directory=str(tmp_path / "data"))
    assert persistent_data.directory == str(tmp_path / "data")
    assert persistent_data.is_readable()
    assert persistent_data.is_writable()

    assert not persistent_data.has_file("notes.txt")
    persistent_data.write_file("notes.txt", "some notes  \n")
    assert persistent_data.has_file("notes.txt")
    assert persistent_data.read_file("notes.txt") == "some notes"
    with pytest.raises(FileNotFoundError):
        persistent_data.read_file("missing.txt")


def test_persistent_data_config(tmp_path):
    persistent_data = PersistentData(directory=str(tmp_path))
    assert persistent_data.load_config() == {}

    persistent_data.save_config({"logging": {"enable_file": False}})
    persistent_data.save_config({"numeric": {"atol": 1e-12}})
    assert persistent_data.load_config() == {"logging": {"enable_file": False}, "numeric": {"atol": 1e-12}}

    persistent_data.save_config({"numeric": {"trace_tolerance": 1e-3}})
    with open(persistent_data.get_full_path("config.json")) as f:
        assert json.load(f)["numeric"] == {"trace_tolerance": 1e-3}


def test_persistent_data_broken_config(tmp_path):
    persistent_data = PersistentData(directory=str(tmp_path))
    persistent_data.write_file("config.json", "{not json")
    with pytest.warns(UserWarning):
        assert persistent_data.load_config() == {}
