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
"""Metrics comparing two placements of the same scenario.

The headline comparison is the TCP_STREAM throughput overhead of the pod network
relative to host networking, expressed as a symmetric percent difference.
"""

import logging
from typing import List, Optional

from absl import flags
from k8snetperf import errors
from k8snetperf import profiles
from k8snetperf import result as result_lib
from k8snetperf import sample
from k8snetperf import stats

# Selection policies for scenarios with more than one matching result.
FIRST = 'first'
MEDIAN = 'median'
SELECTION_POLICIES = [FIRST, MEDIAN]

_OVERHEAD_SELECTION = flags.DEFINE_enum(
    'netperf_overhead_selection', FIRST, SELECTION_POLICIES,
    'How to pick the value for each side of an overhead comparison when a '
    'scenario was run more than once. "first" uses the median throughput of '
    'the first matching result and ignores reruns. "median" uses the median '
    'of the per-result medians of all matching results.')

FLAGS = flags.FLAGS


def PercentDifference(a: float, b: float) -> float:
  """Returns the %diff of a relative to the mean of a and b.

  Raises:
    errors.Comparison.DivisionByZeroError: if a + b is zero.
  """
  if a + b == 0:
    raise errors.Comparison.DivisionByZeroError(
        'Percent difference of %s and %s is undefined.' % (a, b))
  return (a - b) / ((a + b) / 2) * 100


def _TcpStreamMatches(results, host_network: bool) -> List[result_lib.Result]:
  return [r for r in results
          if not r.service and r.host_network == host_network and
          r.profile is profiles.Profile.TCP_STREAM]


def _SelectThroughput(matches, selection: str, side: str) -> float:
  if not matches:
    raise errors.Comparison.MissingScenarioError(
        'No non-service TCP_STREAM result with %s networking.' % side)
  if selection == FIRST:
    return stats.Median(matches[0].throughput_summary)
  if selection == MEDIAN:
    return stats.Median([stats.Median(r.throughput_summary) for r in matches])
  raise ValueError('Unknown selection policy %r, expected one of %s' %
                   (selection, SELECTION_POLICIES))


def TcpStreamOverhead(results: result_lib.ScenarioResults,
                      selection: Optional[str] = None) -> float:
  """Computes the %diff of host network vs pod network TCP_STREAM throughput.

  Only results not routed through a service are considered.

  Args:
    results: ScenarioResults to compare.
    selection: FIRST or MEDIAN. Defaults to --netperf_overhead_selection.

  Returns:
    PercentDifference(host network throughput, pod network throughput).

  Raises:
    errors.Comparison.MissingScenarioError: if either side has no result.
    errors.Stats.EmptySeriesError: if a selected result has no throughput.
    errors.Comparison.DivisionByZeroError: if both sides measured zero.
  """
  selection = selection or _OVERHEAD_SELECTION.value
  host_perf = _SelectThroughput(_TcpStreamMatches(results, True), selection,
                                'host')
  pod_perf = _SelectThroughput(_TcpStreamMatches(results, False), selection,
                               'pod')
  diff = PercentDifference(host_perf, pod_perf)
  logging.info('TCP_STREAM host network %f vs pod network %f: %.2f%%',
               host_perf, pod_perf, diff)
  return diff


def TcpStreamOverheadSample(results: result_lib.ScenarioResults,
                            selection: Optional[str] = None) -> sample.Sample:
  """Returns TcpStreamOverhead as a Sample for downstream export."""
  selection = selection or _OVERHEAD_SELECTION.value
  metadata = {
      'selection': selection,
      'host_network_matches': len(_TcpStreamMatches(results, True)),
      'pod_network_matches': len(_TcpStreamMatches(results, False)),
  }
  return sample.Sample('TCP_STREAM_Host_Network_Overhead',
                       TcpStreamOverhead(results, selection), '%', metadata)
