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
"""Summary statistics over benchmark series.

Benchmark runs are noisy and bimodal outliers are common, so results are
summarized with the median rather than the mean. Percentiles use linear
interpolation between order statistics (numpy's default 'linear' method):
for n sorted values x[0..n-1], percentile p sits at rank (n - 1) * p / 100.
Percentile 100 is therefore the maximum, and percentiles approach the minimum
as p approaches 0.
"""

from typing import Dict, Sequence

import numpy as np
from k8snetperf import errors

PERCENTILES_LIST = 50, 90, 99


def _AsArray(series: Sequence[float]) -> np.ndarray:
  # 'if not series' will fail if series is an np.Array.
  if not len(series):
    raise errors.Stats.EmptySeriesError(
        "Can't compute statistics of an empty series.")
  return np.asarray(series, dtype=float)


def CheckPercentile(percentile: float) -> float:
  """Returns percentile as a float, checking that it is in (0, 100]."""
  try:
    percentile = float(percentile)
  except (TypeError, ValueError):
    raise errors.Stats.InvalidPercentileError(
        'Invalid percentile %r' % (percentile,))
  if not 0.0 < percentile <= 100.0:
    raise errors.Stats.InvalidPercentileError(
        'Invalid percentile %s, must be in (0, 100]' % percentile)
  return percentile


def Median(series: Sequence[float]) -> float:
  """Returns the median of series.

  Raises:
    errors.Stats.EmptySeriesError: if series is empty.
  """
  return float(np.median(_AsArray(series)))


def Percentile(series: Sequence[float], percentile: float) -> float:
  """Computes a single percentile of series.

  Args:
    series: A sequence of numbers.
    percentile: The percentile to compute, in (0, 100].

  Returns:
    The linearly interpolated value at the percentile.

  Raises:
    errors.Stats.EmptySeriesError: if series is empty.
    errors.Stats.InvalidPercentileError: if percentile is outside (0, 100].
  """
  percentile = CheckPercentile(percentile)
  arr = _AsArray(series)
  return float(np.percentile(arr, percentile))


def Summarize(series: Sequence[float],
              percentiles: Sequence[float] = PERCENTILES_LIST
             ) -> Dict[str, float]:
  """Computes min, max, median and percentiles of series.

  Args:
    series: A sequence of numbers.
    percentiles: Percentiles to include, each in (0, 100].

  Returns:
    A dict with 'min', 'max', 'median' and one 'p<percentile>' key per
    requested percentile.
  """
  percentiles = [CheckPercentile(p) for p in percentiles]
  arr = _AsArray(series)
  summary = {
      'min': float(arr.min()),
      'max': float(arr.max()),
      'median': float(np.median(arr)),
  }
  for p in percentiles:
    summary['p%s' % ('%g' % p)] = float(np.percentile(arr, p))
  return summary
