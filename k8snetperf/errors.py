# Copyright 2024 k8snetperf Authors. All rights reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#   http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""A common location for all k8snetperf-defined exceptions."""


class Error(Exception):
  pass


class Stats(object):
  """Errors raised while computing statistics over a series."""

  class EmptySeriesError(Error):
    """Error raised when a statistic is requested over an empty series."""
    pass

  class InvalidPercentileError(Error):
    """Error raised when a percentile is outside of (0, 100]."""
    pass


class Comparison(object):
  """Errors raised by comparative metrics."""

  class DivisionByZeroError(Error):
    """Error raised when both operands of a percent difference sum to zero."""
    pass

  class MissingScenarioError(Error):
    """Error raised when no result matches a requested scenario.

    Distinct from a scenario that matched but measured zero.
    """
    pass


class Result(object):
  """Errors raised while building or storing benchmark results."""

  class InvalidSeriesError(Error):
    """Error raised when a series holds a negative or non-finite value."""
    pass

  class UnknownProfileError(Error):
    """Error raised when a profile tag is not a known netperf profile."""
    pass

  class SealedResultsError(Error):
    """Error raised when appending to results that were sealed for reporting."""
    pass

  class InvalidConfigError(Error):
    """Error raised when a scenario config holds an out of range setting."""
    pass

  class InvalidPodCPUError(Error):
    """Error raised when a pod CPU utilization is not a finite number >= 0."""
    pass


class Report(object):
  """Errors raised while configuring report rendering."""

  class InvalidSettingError(Error):
    """Error raised when a report writer setting is out of range."""
    pass
