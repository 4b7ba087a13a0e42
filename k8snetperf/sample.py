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
"""Flat metric samples handed to downstream exporters."""

import collections
import logging
import math
import time
from typing import Any, Dict, List, Sequence

from k8snetperf import errors
from k8snetperf import result as result_lib
from k8snetperf import stats

LATENCY_UNIT = 'usec'

_SAMPLE_FIELDS = 'metric', 'value', 'unit', 'metadata', 'timestamp'


class Sample(collections.namedtuple('Sample', _SAMPLE_FIELDS)):
  """A single exported value.

  Attributes:
    metric: string. Name of the metric, e.g. 'TCP_STREAM_Throughput_median'.
    value: float. Value of 'metric'. Must be finite.
    unit: string. Units for 'value'.
    metadata: dict. Scenario description attached to the value.
    timestamp: float. Unix timestamp.
  """

  def __new__(cls, metric, value, unit, metadata=None, timestamp=None):
    value = float(value)
    if not math.isfinite(value):
      raise ValueError('Sample %s has non-finite value %s' % (metric, value))
    if timestamp is None:
      timestamp = time.time()
    return super(Sample, cls).__new__(
        cls, metric, value, unit, metadata=metadata or {}, timestamp=timestamp)

  def asdict(self) -> Dict[str, Any]:  # pylint:disable=invalid-name
    return self._asdict()


def _SeriesSamples(name, series, unit, metadata, timestamp, percentiles):
  try:
    summary = stats.Summarize(series, percentiles)
  except errors.Stats.EmptySeriesError:
    logging.warning('No %s values recorded for %s, skipping export.', name,
                    metadata['profile'])
    return []
  return [Sample('%s_%s_%s' % (metadata['profile'], name, stat), value, unit,
                 dict(metadata), timestamp)
          for stat, value in summary.items()]


def ResultSamples(
    result: result_lib.Result,
    percentiles: Sequence[float] = stats.PERCENTILES_LIST) -> List[Sample]:
  """Flattens a Result into throughput and latency summary samples.

  Args:
    result: The Result to export.
    percentiles: Percentiles to export in addition to min, max and median.

  Returns:
    A list of Sample objects. A series with no recorded values contributes no
    samples.
  """
  metadata = result.GetMetadata()
  timestamp = result.end_time.timestamp() if result.end_time else None
  samples = _SeriesSamples('Throughput', result.throughput_summary,
                           result.metric, metadata, timestamp, percentiles)
  samples.extend(
      _SeriesSamples('Latency', result.latency_summary, LATENCY_UNIT, metadata,
                     timestamp, percentiles))
  return samples
