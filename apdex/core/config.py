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

"""This module provides a structure to hang the configuration settings. We
use an empty class structure and manually populate it. The global defaults
come from this module and environment variables, and will be overlaid with
any settings from the local configuration file. A snapshot of the global
settings, with any per run overrides applied, is then what is used when
scoring a set of samples.

"""

import copy
import logging
import os

# The Settings objects and the global default settings. We create a
# distinct type for each sub category of settings so that an error when
# accessing a non existent setting is more descriptive and identifies the
# category of settings.


class Settings(object):
    def __repr__(self):
        return repr(self.__dict__)


class SamplesSettings(Settings):
    pass


class OutputSettings(Settings):
    pass


_settings = Settings()
_settings.samples = SamplesSettings()
_settings.output = OutputSettings()

_LOG_LEVEL = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}

DEFAULT_APDEX_T = 4.0


def _environ_as_float(name, default=None):
    value = os.environ.get(name, None)

    if value is None:
        return default

    try:
        return float(value)
    except ValueError:
        # Logging has not been set up when this module is first imported
        # so this will only be seen if the application configured it.

        logging.getLogger(__name__).warning(
            "Ignoring environment variable %s with non numeric value %r.", name, value
        )
        return default


def _environ_as_log_level(name, default=logging.INFO):
    value = os.environ.get(name, "").upper()
    return _LOG_LEVEL.get(value, default)


_settings.config_file = None
_settings.environment = None

_settings.log_file = os.environ.get("APDEX_LOG", None)
_settings.log_level = _environ_as_log_level("APDEX_LOG_LEVEL")

_settings.apdex_t = _environ_as_float("APDEX_T", DEFAULT_APDEX_T)
_settings.hit_rate = _environ_as_float("APDEX_HIT_RATE")

_settings.samples.field = 0
_settings.samples.scale = 1.0
_settings.samples.error_token = "error"
_settings.samples.ignore_invalid = True

_settings.output.format = "uniform"
_settings.output.color = "auto"


def global_settings():
    """This returns the default global settings. Generally only used
    directly in test scripts and test harnesses or when applying global
    settings from the configuration file. Making changes to the settings
    object returned by this function will not have any effect on snapshots
    which have already been created.

    >>> settings = global_settings()
    >>> settings.samples.ignore_invalid = False
    >>> settings.samples.ignore_invalid
    False

    """

    return _settings


def flatten_settings(settings):
    """This returns dictionary of settings flattened into a single
    key namespace rather than nested hierarchy.

    """

    def _flatten(settings, name, obj):
        for key, value in obj.__dict__.items():
            if isinstance(value, Settings):
                if name:
                    _flatten(settings, "%s.%s" % (name, key), value)
                else:
                    _flatten(settings, key, value)
            else:
                if name:
                    settings["%s.%s" % (name, key)] = value
                else:
                    settings[key] = value

        return settings

    return _flatten({}, None, settings)


def apply_config_setting(settings_object, name, value):
    """Apply a setting to the settings object where name is a dotted path.
    If there is no pre existing settings object for a sub category then
    one will be created and added automatically.

    >>> settings = global_settings()
    >>> apply_config_setting(settings, 'samples.scale', 0.001)

    """

    target = settings_object
    fields = name.split(".", 1)

    while len(fields) > 1:
        if not hasattr(target, fields[0]):
            setattr(target, fields[0], Settings())
        target = getattr(target, fields[0])
        fields = fields[1].split(".", 1)

    setattr(target, fields[0], value)


def fetch_config_setting(settings_object, name):
    """Fetch a setting from the settings object where name is a dotted path.

    >>> settings = global_settings()
    >>> fetch_config_setting(settings, 'samples.error_token')
    'error'

    """

    target = settings_object
    fields = name.split(".", 1)

    target = getattr(target, fields[0])

    while len(fields) > 1:
        fields = fields[1].split(".", 1)
        target = getattr(target, fields[0])

    return target


def update_dynamic_settings(settings_object):
    """Updates any dynamically calculated settings values. This would
    generally be applied on a copy of the global default settings and
    not directly.

    """

    settings_object.apdex_f = 4 * settings_object.apdex_t


def create_settings_snapshot(overrides=None):
    """Create a snapshot of the global default settings and overlay it
    with any overrides, such as those supplied on the command line. The
    global settings themselves are left untouched.

    >>> snapshot = create_settings_snapshot({'apdex_t': 0.5})
    >>> snapshot.apdex_f
    2.0

    """

    settings_snapshot = copy.deepcopy(_settings)

    for name, value in (overrides or {}).items():
        if value is not None:
            apply_config_setting(settings_snapshot, name, value)

    update_dynamic_settings(settings_snapshot)

    return settings_snapshot
