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

"""This module sets up use of the Python logging module. As we don't want to
rely exclusively on the user having configured the logging module
themselves to capture any logged output we attach our own log file when
enabled from configuration. We also provide ability to fallback to using
stdout or stderr.

"""

import logging
import sys
import threading

import apdex.core.config

_lock = threading.Lock()

_apdex_logger = logging.getLogger("apdex")
_apdex_logger.addHandler(logging.NullHandler())

_LOG_FORMAT = "%(asctime)s (%(process)d/%(threadName)s) %(name)s %(levelname)s - %(message)s"

_initialized = False


def _add_handler(handler, level):
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))

    _apdex_logger.addHandler(handler)
    _apdex_logger.setLevel(level)

    return handler


def initialize(settings=None):
    global _initialized

    if _initialized:
        return

    with _lock:
        if _initialized:
            return

        if settings is None:
            settings = apdex.core.config.global_settings()

        log_file = settings.log_file
        log_level = settings.log_level

        if log_file == "stdout":
            _add_handler(logging.StreamHandler(sys.stdout), log_level)
            _apdex_logger.debug("Initializing stdout logging.")

        elif log_file == "stderr":
            _add_handler(logging.StreamHandler(sys.stderr), log_level)
            _apdex_logger.debug("Initializing stderr logging.")

        elif log_file:
            try:
                _add_handler(logging.FileHandler(log_file), log_level)

                _apdex_logger.debug("Initializing file logging.")
                _apdex_logger.debug('Log file "%s".', log_file)

            except (IOError, OSError):
                _add_handler(logging.StreamHandler(sys.stderr), log_level)

                _apdex_logger.exception('Unable to create log file "%s".', log_file)
                _apdex_logger.debug("Initializing stderr logging.")

        _initialized = True
