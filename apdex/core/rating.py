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

"""This module implements the Apdex "uniform output" and rating words used
when reporting a score. A score is always shown with the threshold it was
calculated against, and results from small groups of samples are flagged
with a trailing asterisk as they are not statistically significant.

"""

# Lower bounds of each rating band, best first.

RATINGS = (
    (0.94, "Excellent"),
    (0.85, "Good"),
    (0.70, "Fair"),
    (0.50, "Poor"),
    (0.0, "Unacceptable"),
)

NO_SAMPLE_RATING = "NoSample"
NO_SAMPLE_SCORE = "NS"

COLORS = (
    (0.94, "cyan"),
    (0.85, "green"),
    (0.70, "magenta"),
    (0.0, "red"),
)


def rating_word(score):
    """Returns the rating word for a score, or NoSample where the score is
    None because nothing was recorded.

    >>> rating_word(0.75)
    'Fair'

    """

    if score is None:
        return NO_SAMPLE_RATING

    for lower_bound, word in RATINGS:
        if score >= lower_bound:
            return word

    return RATINGS[-1][1]


def rating_color(score, small_group=False):
    """Returns the name of the terminal color for a score. Small groups
    and missing scores are left uncolored.

    """

    if score is None or small_group:
        return None

    for lower_bound, color in COLORS:
        if score >= lower_bound:
            return color

    return COLORS[-1][1]


def format_threshold(threshold, small_group=False):
    indicator = "*" if small_group else ""

    if threshold < 10.0:
        return " [%.1f]%s" % (threshold, indicator)

    return " [%.0f]%s" % (threshold, indicator)


def format_score(score):
    if score is None:
        return NO_SAMPLE_SCORE
    return "%.2f" % score


def uniform_output(accumulator):
    """Formats an accumulator as Apdex uniform output, for example
    '0.75 [4.0]' or 'NS [10]'.

    """

    return format_score(accumulator.score()) + format_threshold(accumulator.threshold, accumulator.small_group())


def rating_output(accumulator):
    return rating_word(accumulator.score()) + format_threshold(accumulator.threshold, accumulator.small_group())
