# Copyright 2010 New Relic, Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#      http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import configparser
import copy
import logging

import pytest

import apdex.config
import apdex.core.config
import apdex.core.log_file

_default_ini = """
[apdex]
apdex_t = 1.0
samples.scale = 1.0

[apdex:production]
apdex_t = 0.5
samples.ignore_invalid = false

[apdex:reporting]
output.format = rating
hit_rate = 0.5
"""


@pytest.fixture(scope="function")
def global_settings(monkeypatch):
    """Restores the global settings, configuration file state and logging
    after each test, as loading a configuration file changes all three.

    """

    settings = apdex.core.config.global_settings()
    original = copy.deepcopy(settings.__dict__)

    logger = logging.getLogger("apdex")
    handlers = list(logger.handlers)
    level = logger.level

    monkeypatch.setattr(apdex.config, "_configuration_done", False)
    monkeypatch.setattr(apdex.config, "_config_file", None)
    monkeypatch.setattr(apdex.config, "_environment", None)
    monkeypatch.setattr(apdex.config, "_ignore_errors", True)
    monkeypatch.setattr(apdex.config, "_config_object", configparser.RawConfigParser())
    monkeypatch.setattr(apdex.config, "_cache_object", [])
    monkeypatch.setattr(apdex.core.log_file, "_initialized", False)

    # Output assertions expect plain text unless a test asks for color.
    for name in ("NO_COLOR", "FORCE_COLOR", "TTY_COMPATIBLE", "TTY_INTERACTIVE"):
        monkeypatch.delenv(name, raising=False)

    yield settings

    settings.__dict__.clear()
    settings.__dict__.update(original)

    for handler in logger.handlers:
        if handler not in handlers:
            handler.close()

    logger.handlers[:] = handlers
    logger.setLevel(level)


@pytest.fixture
def ini_file(tmp_path):
    def _ini_file(contents=_default_ini):
        path = tmp_path / "apdex.ini"
        path.write_text(contents)
        return str(path)

    return _ini_file


@pytest.fixture
def samples_file(tmp_path):
    def _samples_file(samples, name="times.txt"):
        path = tmp_path / name
        path.write_text("".join("%s\n" % sample for sample in samples))
        return str(path)

    return _samples_file
