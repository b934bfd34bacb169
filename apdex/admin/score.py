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

import argparse
import functools
import json
import logging
import sys

from rich.console import Console
from rich.text import Text

from apdex.admin import command, usage

_logger = logging.getLogger(__name__)


def _parser():
    parser = argparse.ArgumentParser(prog="apdex-admin score", add_help=False)
    parser.add_argument("-t", "--threshold", type=float, default=None)
    parser.add_argument("-c", "--config", default=None)
    parser.add_argument("-e", "--environment", default=None)
    parser.add_argument("--hit-rate", dest="hit_rate", type=float, default=None)
    parser.add_argument("-f", "--format", dest="output_format", choices=("uniform", "rating", "json"), default=None)
    parser.add_argument("--color", choices=("auto", "always", "never"), default=None)
    parser.add_argument("--per-file", dest="per_file", action="store_true")
    parser.add_argument("--strict", action="store_true")
    parser.add_argument("files", nargs="*")
    return parser


def score_samples(samples, settings):
    """Creates an accumulator for the samples using the threshold and
    assumed cache hit rate from settings.

    """

    from apdex.core.accumulator import ApdexAccumulator

    if settings.hit_rate is not None:
        return ApdexAccumulator.with_hit_rate(settings.apdex_t, settings.hit_rate, samples)

    return ApdexAccumulator.from_samples(settings.apdex_t, samples)


def make_console(settings):
    """Creates the console the score is printed to. In 'auto' mode color is
    used only when writing to a terminal and NO_COLOR is not set.

    """

    mode = settings.output.color

    if mode == "always":
        return Console(highlight=False, soft_wrap=True, force_terminal=True)
    if mode == "never":
        return Console(highlight=False, soft_wrap=True, no_color=True)

    return Console(highlight=False, soft_wrap=True)


def render(accumulator, settings):
    from apdex.core.rating import rating_color

    if settings.output.format == "rating":
        text = accumulator.rating()
    else:
        text = str(accumulator)

    return Text(text, style=rating_color(accumulator.score(), accumulator.small_group()) or "")


@command(
    "score",
    "[-t threshold] [-c config_file [-e environment]] [--hit-rate rate] "
    "[-f uniform|rating|json] [--color auto|always|never] [--per-file] "
    "[--strict] file ...",
    """Reads response time samples from each <file>, one per line, and prints
the Apdex score for all of them combined. Use '-' to read from stdin.""",
)
def score(args):
    from apdex.config import initialize
    from apdex.common.samples import read_samples
    from apdex.core.config import create_settings_snapshot
    from apdex.core.exceptions import ApdexError

    try:
        options = _parser().parse_args(args)
    except SystemExit:
        usage("score")
        sys.exit(1)

    if not options.files:
        usage("score")
        sys.exit(1)

    try:
        initialize(options.config, options.environment, ignore_errors=False)
    except ApdexError as exc:
        print("ERROR: %s" % exc, file=sys.stderr)
        sys.exit(1)

    overrides = {
        "apdex_t": options.threshold,
        "hit_rate": options.hit_rate,
        "output.format": options.output_format,
        "output.color": options.color,
    }

    if options.strict:
        overrides["samples.ignore_invalid"] = False

    settings = create_settings_snapshot(overrides)

    results = []

    try:
        for path in options.files:
            samples = read_samples(path, settings)
            results.append((path, score_samples(samples, settings)))

    except (ApdexError, OSError, ValueError) as exc:
        _logger.exception("Unable to score samples.")
        print("ERROR: %s" % exc, file=sys.stderr)
        sys.exit(1)

    total = functools.reduce(lambda a, b: a.merge(b), [accumulator for _, accumulator in results])

    if settings.output.format == "json":
        data = {"total": total.summary()}
        if options.per_file:
            data["files"] = {path: accumulator.summary() for path, accumulator in results}
        print(json.dumps(data, sort_keys=True))
        return

    console = make_console(settings)

    if options.per_file:
        for path, accumulator in results:
            console.print(Text.assemble("%s: " % path, render(accumulator, settings)))

    console.print(render(total, settings))
