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
import logging

import apdex.core.config
import apdex.core.log_file
from apdex.core.accumulator import validate_threshold
from apdex.core.exceptions import ApdexError, ConfigurationError, InvalidHitRate

__all__ = ["initialize"]

_logger = logging.getLogger(__name__)

# Names of configuration file and deployment environment. This
# will be overridden by the _load_configuration() function when
# configuration is loaded.

_config_file = None
_environment = None
_ignore_errors = True

# This is the actual internal settings object. Options which
# are read from the configuration file will be applied to this.

_settings = apdex.core.config.global_settings()

# Use the raw config parser as we want to avoid interpolation
# within values. The error token for example may legitimately
# contain a '%' character.

_config_object = configparser.RawConfigParser()

# Cache of the parsed global settings found in the configuration
# file. We cache these so can dump them out to the log file once
# all the settings have been read.

_cache_object = []

# Define some mapping functions to convert raw values read from
# configuration file into the internal types expected by the
# internal configuration settings object.

_LOG_LEVEL = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}

_OUTPUT_FORMATS = ("uniform", "rating", "json")

_OUTPUT_COLORS = ("auto", "always", "never")


def _map_log_level(s):
    return _LOG_LEVEL[s.upper()]


def _map_apdex_t(s):
    return validate_threshold(float(s))


def _map_hit_rate(s):
    if s.strip().lower() in ("", "none", "off"):
        return None

    value = float(s)

    if not 0.0 <= value < 1.0:
        raise InvalidHitRate(value)

    return value


def _map_field(s):
    value = int(s)

    if value < 0:
        raise ValueError("Sample field index must not be negative.")

    return value


def _map_scale(s):
    value = float(s)

    if not value > 0.0:
        raise ValueError("Sample scale must be positive.")

    return value


def _map_output_format(s):
    value = s.strip().lower()

    if value not in _OUTPUT_FORMATS:
        raise ValueError("Unknown output format %r." % s)

    return value


def _map_output_color(s):
    value = s.strip().lower()

    if value not in _OUTPUT_COLORS:
        raise ValueError("Unknown output color mode %r." % s)

    return value


# Processing of a single setting from configuration file.


def _raise_configuration_error(section, option=None):
    _logger.error("CONFIGURATION ERROR")
    _logger.error("Section = %s", section)

    if option is None:
        options = _config_object.options(section)

        _logger.error("Options = %s", options)
        _logger.exception("Exception Details")

        if not _ignore_errors:
            raise ConfigurationError(
                'Invalid configuration for section "%s". Check log file for further details.' % section
            )

    else:
        _logger.error("Option = %s", option)
        _logger.exception("Exception Details")

        if not _ignore_errors:
            raise ConfigurationError(
                'Invalid configuration for option "%s" in section "%s". '
                "Check log file for further details." % (option, section)
            )


def _process_setting(section, option, getter, mapper):
    try:
        # The type of a value is dictated by the getter
        # function supplied.

        value = getattr(_config_object, getter)(section, option)

        # The getter parsed the value okay but want to
        # pass this through a mapping function to change
        # it to internal value suitable for internal
        # settings object. This is usually one where the
        # value was a string.

        if mapper:
            value = mapper(value)

        # Now need to apply the option from the
        # configuration file to the internal settings
        # object. Walk the object path and assign it.

        apdex.core.config.apply_config_setting(_settings, option, value)

        # Cache the configuration so can be dumped out to
        # log file when whole main configuration has been
        # processed. This ensures that the log file and log
        # level entries have been set.

        _cache_object.append((option, value))

    except (configparser.NoOptionError, configparser.NoSectionError):
        pass

    except (ValueError, KeyError, ApdexError):
        _raise_configuration_error(section, option)


# Processing of all the settings for specified section except
# for log file and log level which are applied separately to
# ensure they are set as soon as possible.


def _process_configuration(section):
    _process_setting(section, "apdex_t", "get", _map_apdex_t)
    _process_setting(section, "hit_rate", "get", _map_hit_rate)
    _process_setting(section, "samples.field", "get", _map_field)
    _process_setting(section, "samples.scale", "get", _map_scale)
    _process_setting(section, "samples.error_token", "get", None)
    _process_setting(section, "samples.ignore_invalid", "getboolean", None)
    _process_setting(section, "output.format", "get", _map_output_format)
    _process_setting(section, "output.color", "get", _map_output_color)


# Loading of configuration from specified file and for specified
# deployment environment. Can also indicate whether configuration
# errors should raise an exception or not.

_configuration_done = False


def _load_configuration(config_file=None, environment=None, ignore_errors=True, log_file=None, log_level=None):
    global _configuration_done

    global _config_file
    global _environment
    global _ignore_errors

    # Check whether initialisation has been done previously. If
    # it has then raise a configuration error if it was against
    # a different configuration. Otherwise just return.

    if _configuration_done:
        if _config_file != config_file or _environment != environment:
            raise ConfigurationError(
                "Configuration has already been done against differing "
                "configuration file or environment. Prior configuration "
                'file used was "%s" and environment "%s".' % (_config_file, _environment)
            )
        else:
            return

    _configuration_done = True

    # Update global variables tracking what configuration file and
    # environment was used, plus whether errors are to be ignored.

    _config_file = config_file
    _environment = environment
    _ignore_errors = ignore_errors

    # If no configuration file then nothing more to be done
    # except for log file override.

    if not config_file:
        if log_file is not None:
            _settings.log_file = log_file
        if log_level is not None:
            _settings.log_level = log_level

        apdex.core.log_file.initialize(_settings)

        _logger.debug("No configuration file.")

        return

    # Now read in the configuration file. Cache the config file
    # name in internal settings object as indication of succeeding.

    if not _config_object.read([config_file]):
        raise ConfigurationError("Unable to open configuration file %s." % config_file)

    _settings.config_file = config_file

    # Must process log file entries first so that errors with
    # the remainder will get logged if log file is defined.

    _process_setting("apdex", "log_file", "get", None)
    _process_setting("apdex", "log_level", "get", _map_log_level)

    if environment:
        _process_setting("apdex:%s" % environment, "log_file", "get", None)
        _process_setting("apdex:%s" % environment, "log_level", "get", _map_log_level)

    # Explicit arguments override what the configuration file says.

    if log_file is not None:
        _settings.log_file = log_file
    if log_level is not None:
        _settings.log_level = log_level

    apdex.core.log_file.initialize(_settings)

    _logger.debug("Configuration file was %s.", config_file)

    # Now process the remainder of the global configuration
    # settings.

    _process_configuration("apdex")

    # And any overrides specified with a section corresponding
    # to a specific deployment environment.

    if environment:
        if not _config_object.has_section("apdex:%s" % environment):
            _logger.warning('No configuration section for environment "%s".', environment)

        _settings.environment = environment
        _process_configuration("apdex:%s" % environment)

    # Log details of the configuration options which were
    # read and the values they have as would be applied
    # against the internal settings object.

    for option, value in _cache_object:
        _logger.debug("config %s = %r", option, value)


def initialize(config_file=None, environment=None, ignore_errors=None, log_file=None, log_level=None):
    """Loads the configuration file, if any, into the global settings and
    sets up logging. Errors in the configuration file are logged and then
    ignored unless ignore_errors is False.

    """

    if ignore_errors is None:
        ignore_errors = True

    _load_configuration(config_file, environment, ignore_errors, log_file, log_level)
