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

"""Exceptions raised by the Apdex accumulator and configuration layer. All
derive from ApdexError so callers can catch the whole family at once. The
ones describing bad input values also derive from ValueError.

"""


class ApdexError(Exception):
    pass


class ConfigurationError(ApdexError):
    pass


class InvalidThreshold(ApdexError, ValueError):
    def __init__(self, threshold):
        super(InvalidThreshold, self).__init__(
            "Apdex threshold must be a positive finite number, got %r." % (threshold,)
        )
        self.threshold = threshold


class InvalidSample(ApdexError, ValueError):
    def __init__(self, sample, reason=None):
        message = "Response time sample must be a non-negative finite number, got %r." % (sample,)
        if reason:
            message = "%s %s" % (message, reason)
        super(InvalidSample, self).__init__(message)
        self.sample = sample


class InvalidHitRate(ApdexError, ValueError):
    def __init__(self, hit_rate):
        super(InvalidHitRate, self).__init__("Assumed cache hit rate must be within [0, 1), got %r." % (hit_rate,))
        self.hit_rate = hit_rate


class ThresholdMismatch(ApdexError, ValueError):
    def __init__(self, threshold, other_threshold):
        super(ThresholdMismatch, self).__init__(
            "Cannot merge Apdex accumulators with different thresholds (%r and %r)." % (threshold, other_threshold)
        )
        self.threshold = threshold
        self.other_threshold = other_threshold
