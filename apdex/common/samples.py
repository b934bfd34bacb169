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

"""This module reads response time samples from text, one sample per line.
Blank lines and lines starting with '#' are skipped. A line consisting of
the configured error token records a failed request, which is yielded as
None. Otherwise the configured whitespace separated field of the line is
parsed as a duration and multiplied by the configured scale, which allows
for example millisecond values to be scored against a threshold in
seconds.

"""

import logging
import sys
from pathlib import Path

from apdex.core.accumulator import validate_sample
from apdex.core.exceptions import InvalidSample

_logger = logging.getLogger(__name__)

_SKIP = object()


def parse_sample(text, settings):
    """Parses a single line. Returns a float, None for a failed request, or
    raises InvalidSample if the line could not be understood. Lines which
    carry no sample at all return the module level skip marker.

    """

    line = text.strip()

    if not line or line.startswith("#"):
        return _SKIP

    error_token = settings.samples.error_token

    if error_token and line.lower() == error_token.lower():
        return None

    fields = line.split()
    index = settings.samples.field

    if index >= len(fields):
        raise InvalidSample(line, "Line has no field %d." % index)

    value = fields[index]

    if error_token and value.lower() == error_token.lower():
        return None

    try:
        duration = float(value)
    except ValueError:
        raise InvalidSample(value, "Value could not be parsed.")

    return validate_sample(duration * settings.samples.scale)


def iter_samples(lines, settings, source="<input>"):
    """Yields the samples found in an iterable of lines. Invalid lines are
    logged and skipped when settings.samples.ignore_invalid is set,
    otherwise InvalidSample propagates to the caller.

    """

    for lineno, text in enumerate(lines, 1):
        try:
            sample = parse_sample(text, settings)

        except InvalidSample as exc:
            if not settings.samples.ignore_invalid:
                raise

            _logger.warning("Skipping invalid sample at %s:%d. %s", source, lineno, exc)
            continue

        if sample is _SKIP:
            continue

        yield sample


def read_samples(path, settings):
    """Reads all samples from the file at path, or from stdin where the
    path is '-'. Bytes which are not valid UTF-8 are replaced, so the line
    holding them is treated like any other line that fails to parse.

    """

    if str(path) == "-":
        reconfigure = getattr(sys.stdin, "reconfigure", None)
        if reconfigure is not None:
            reconfigure(errors="replace")

        return list(iter_samples(sys.stdin, settings, "<stdin>"))

    path = Path(path)

    with path.open(encoding="utf-8", errors="replace") as f:
        samples = list(iter_samples(f, settings, str(path)))

    _logger.debug("Read %d samples from %s.", len(samples), path)

    return samples
