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

"""This module implements the accumulator which calculates an Apdex score.
Response time samples are characterized into one of three groups relative
to the threshold T. Samples at or below T are satisfied, samples above T
but at or below 4T are tolerated, and anything slower is frustrated. The
score is then the satisfied count plus half the tolerated count, divided by
the total number of samples.

An accumulator is not thread safe. Where samples are produced from multiple
threads, each thread should own its own accumulator and the results then be
combined using merge() once recording has finished.

"""

import logging
import math
import numbers

from apdex.core.exceptions import InvalidHitRate, InvalidSample, InvalidThreshold, ThresholdMismatch
from apdex.core.rating import rating_output, rating_word, uniform_output

_logger = logging.getLogger(__name__)

# Upper bound of the tolerating zone as a multiple of the threshold.

TOLERATING_FACTOR = 4

# Groups with fewer samples than this are flagged when reported.

SMALL_GROUP_SIZE = 100


def validate_threshold(threshold):
    if isinstance(threshold, bool) or not isinstance(threshold, numbers.Real):
        raise InvalidThreshold(threshold)

    try:
        value = float(threshold)
    except OverflowError:
        raise InvalidThreshold(threshold)

    if not math.isfinite(value) or value <= 0.0:
        raise InvalidThreshold(threshold)

    return value


def validate_sample(sample):
    if isinstance(sample, bool) or not isinstance(sample, numbers.Real):
        raise InvalidSample(sample)

    try:
        value = float(sample)
    except OverflowError:
        # Finite, but beyond the range of a float. Any such positive value
        # is slower than every representable tolerating threshold.
        if sample < 0:
            raise InvalidSample(sample, "Value is negative.")
        return math.inf

    if math.isnan(value):
        raise InvalidSample(sample, "Value is not a number.")
    if math.isinf(value):
        raise InvalidSample(sample, "Value is infinite.")
    if value < 0.0:
        raise InvalidSample(sample, "Value is negative.")

    return value


class ApdexAccumulator(object):
    """Bucket for accumulating the satisfied, tolerated and frustrated
    counts for a fixed threshold.

    >>> accumulator = ApdexAccumulator(1.0)
    >>> accumulator.record_many([0.5, 2.0, 10.0])
    >>> accumulator.score()
    0.5

    """

    def __init__(self, threshold):
        self._threshold = validate_threshold(threshold)
        self._satisfied = 0
        self._tolerated = 0
        self._frustrated = 0

    @classmethod
    def from_samples(cls, threshold, samples):
        """Creates an accumulator with the samples already recorded. A
        sample of None is counted as a failed request.

        """

        accumulator = cls(threshold)
        accumulator.record_many(samples)
        return accumulator

    @classmethod
    def with_hit_rate(cls, threshold, assumed_hit_rate, samples):
        """Creates an accumulator where the samples are the response times
        of cache misses. The satisfied count is then topped up with the
        number of cache hits which would have been seen at the assumed hit
        rate, as cache hits are taken to always satisfy.

        """

        if isinstance(assumed_hit_rate, bool) or not isinstance(assumed_hit_rate, numbers.Real):
            raise InvalidHitRate(assumed_hit_rate)

        if not 0.0 <= assumed_hit_rate < 1.0:
            raise InvalidHitRate(assumed_hit_rate)

        accumulator = cls.from_samples(threshold, samples)

        misses = accumulator.total
        hits = math.ceil(misses / (1.0 - assumed_hit_rate) - misses)

        _logger.debug("Adding %d simulated cache hits to %d misses at hit rate %r.", hits, misses, assumed_hit_rate)

        accumulator._satisfied += hits

        return accumulator

    @property
    def threshold(self):
        return self._threshold

    @property
    def tolerating_threshold(self):
        return self._threshold * TOLERATING_FACTOR

    @property
    def satisfied(self):
        return self._satisfied

    @property
    def tolerated(self):
        return self._tolerated

    @property
    def frustrated(self):
        return self._frustrated

    @property
    def total(self):
        return self._satisfied + self._tolerated + self._frustrated

    def _classify(self, value):
        # Index into the counters, 0 satisfied, 1 tolerated, 2 frustrated.

        if value <= self._threshold:
            return 0
        elif value <= self.tolerating_threshold:
            return 1
        return 2

    def _increment(self, counts):
        self._satisfied += counts[0]
        self._tolerated += counts[1]
        self._frustrated += counts[2]

    def record(self, sample):
        """Characterizes a single response time sample. Raises InvalidSample
        without changing any counts if the sample is negative, NaN or
        infinite.

        """

        counts = [0, 0, 0]
        counts[self._classify(validate_sample(sample))] += 1
        self._increment(counts)

    def record_error(self):
        """Records a failed request. Errors detected by the sample source,
        such as a 404 reply, always count as frustrated.

        """

        self._frustrated += 1

    def record_many(self, samples):
        """Records a batch of samples. A sample of None is counted as a
        failed request. The batch is applied as a whole, so if any sample is
        invalid InvalidSample is raised and none of the batch is counted.

        """

        counts = [0, 0, 0]

        for sample in samples:
            if sample is None:
                counts[2] += 1
            else:
                counts[self._classify(validate_sample(sample))] += 1

        self._increment(counts)

    def has_data(self):
        return self.total > 0

    def no_samples(self):
        return self.total == 0

    def small_group(self):
        total = self.total
        return 0 < total < SMALL_GROUP_SIZE

    def score(self):
        """Returns the Apdex score in the range [0.0, 1.0], or None when no
        samples have been recorded. The score is undefined for an empty
        group so neither 0.0 nor 1.0 is returned in that case.

        """

        total = self.total

        if total == 0:
            return None

        return (self._satisfied + self._tolerated / 2.0) / total

    def merge(self, other):
        """Returns a new accumulator holding the combined counts of this
        accumulator and the other. Neither operand is modified. The two
        must have been created with the same threshold.

        """

        if not isinstance(other, ApdexAccumulator):
            raise TypeError("Cannot merge %r into an Apdex accumulator." % (other,))

        if other._threshold != self._threshold:
            raise ThresholdMismatch(self._threshold, other._threshold)

        merged = self.clone()
        merged._increment([other._satisfied, other._tolerated, other._frustrated])

        return merged

    def reset(self):
        self._satisfied = 0
        self._tolerated = 0
        self._frustrated = 0

    def clone(self):
        accumulator = type(self)(self._threshold)
        accumulator._satisfied = self._satisfied
        accumulator._tolerated = self._tolerated
        accumulator._frustrated = self._frustrated
        return accumulator

    def rating(self):
        return rating_output(self)

    def summary(self):
        """Returns the counts and score as a dictionary, for reporting."""

        score = self.score()

        return {
            "threshold": self._threshold,
            "satisfied": self._satisfied,
            "tolerated": self._tolerated,
            "frustrated": self._frustrated,
            "total": self.total,
            "score": score,
            "rating": rating_word(score),
            "small_group": self.small_group(),
        }

    def __eq__(self, other):
        if not isinstance(other, ApdexAccumulator):
            return NotImplemented

        return (self._threshold, self._satisfied, self._tolerated, self._frustrated) == (
            other._threshold,
            other._satisfied,
            other._tolerated,
            other._frustrated,
        )

    __hash__ = None

    def __str__(self):
        return uniform_output(self)

    def __repr__(self):
        return "<%s threshold=%r satisfied=%d tolerated=%d frustrated=%d>" % (
            type(self).__name__,
            self._threshold,
            self._satisfied,
            self._tolerated,
            self._frustrated,
        )
