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
"""Renders benchmark results as fixed-width text tables.

Example output (truncated):

  ------------------------------ Stream Results ------------------------------
  Scenario           | Host Network    | Service         | Message Size    ...
  ----------------------------------------------------------------------------
  TCP_STREAM         | False           | False           | 16384           ...
  UDP_STREAM         | True            | False           | 1024            ...
  ----------------------------------------------------------------------------

Each table is only written when the results hold data for it. A row whose
statistic cannot be computed shows a placeholder instead of a value and is
recorded in ReportWriter.failures.
"""

import collections
import io
import logging
import sys
from typing import List, Optional, Sequence, Tuple

from absl import flags
from k8snetperf import classifier
from k8snetperf import errors
from k8snetperf import log_util
from k8snetperf import profiles
from k8snetperf import result as result_lib
from k8snetperf import sample
from k8snetperf import stats

_POD_NAME_WIDTH = flags.DEFINE_integer(
    'netperf_report_pod_name_width', 20,
    'Pod names longer than this are truncated in the pod CPU report.',
    lower_bound=1)
_PLACEHOLDER = flags.DEFINE_string(
    'netperf_report_placeholder', 'n/a',
    'Shown in place of a value that could not be computed.')
_LATENCY_PERCENTILE = flags.DEFINE_float(
    'netperf_report_latency_percentile', 50.0,
    'Percentile of the latency samples shown in the latency reports. '
    'The default, 50, is the median.')

flags.register_validator(
    _LATENCY_PERCENTILE.name,
    lambda value: 0.0 < value <= 100.0,
    message='--netperf_report_latency_percentile must be in (0, 100].')

FLAGS = flags.FLAGS

POD_CPU = 'Pod CPU Utilization'
NODE_CPU = 'Node CPU Utilization'
STREAM = 'Stream Results'
STREAM_LATENCY = 'Stream Latency Results'
RR_LATENCY = 'RR Latency Results'
RR = 'RR Results'

_WIDE = 18
_NARROW = 15
_POD = 25

_SCENARIO_COLUMNS = (('Host Network', _NARROW), ('Service', _NARROW),
                     ('Message Size', _NARROW), ('Same node', _NARROW))
_NODE_CPU_HEADERS = ('Idle CPU', 'User CPU', 'System CPU', 'Steal CPU',
                     'IOWait CPU', 'Nice CPU', 'SoftIRQ CPU', 'IRQ CPU')

RowFailure = collections.namedtuple('RowFailure', ['report', 'result', 'error'])


class _Table(object):
  """Accumulates rows and renders them under a title banner."""

  def __init__(self, title: str, columns: Sequence[Tuple[str, int]]):
    self.title = title
    self._widths = [width for _, width in columns]
    self._header = self._FormatLine([header for header, _ in columns])
    self._lines = []

  def _FormatLine(self, cells) -> str:
    return ' | '.join(
        _FormatCell(cell).ljust(width)
        for cell, width in zip(cells, self._widths))

  @property
  def rule(self) -> str:
    return '-' * len(self._header)

  def AddRow(self, cells) -> None:
    self._lines.append(self._FormatLine(cells))

  def AddRule(self) -> None:
    if self._lines and self._lines[-1] != self.rule:
      self._lines.append(self.rule)

  def Render(self) -> str:
    dashes = '-' * max((len(self.rule) - len(self.title) - 2) // 2, 1)
    lines = ['%s %s %s' % (dashes, self.title, dashes), self._header, self.rule]
    lines.extend(self._lines)
    if not lines[-1] == self.rule:
      lines.append(self.rule)
    return '\n'.join(lines) + '\n'


def _FormatCell(cell) -> str:
  if isinstance(cell, float):
    return '%f' % cell
  return str(cell)


class ReportWriter(object):
  """Writes report tables to an output stream, defaulting to stdout.

  Attributes:
    stream: File-like object. Output stream to write tables to.
    pod_name_width: Pod names are truncated to this many characters.
    placeholder: Text shown for values that could not be computed.
    latency_percentile: Percentile of the latency series to report.
    failures: RowFailure for every row rendered with the placeholder.

  Raises:
    errors.Report.InvalidSettingError: if pod_name_width is not a positive
      integer.
    errors.Stats.InvalidPercentileError: if latency_percentile is outside
      (0, 100].
  """

  def __init__(self, stream=None, pod_name_width: Optional[int] = None,
               placeholder: Optional[str] = None,
               latency_percentile: Optional[float] = None):
    self.stream = stream or sys.stdout
    self.pod_name_width = (pod_name_width if pod_name_width is not None
                           else _POD_NAME_WIDTH.value)
    if (isinstance(self.pod_name_width, bool) or
        not isinstance(self.pod_name_width, int) or self.pod_name_width < 1):
      raise errors.Report.InvalidSettingError(
          'Pod name width must be a positive integer, got %r' %
          (self.pod_name_width,))
    self.placeholder = (placeholder if placeholder is not None
                        else _PLACEHOLDER.value)
    # Checked here so a bad percentile never leaves a partial report behind.
    self.latency_percentile = stats.CheckPercentile(
        latency_percentile if latency_percentile is not None
        else _LATENCY_PERCENTILE.value)
    self.failures: List[RowFailure] = []

  def __repr__(self):
    return '<{0} stream={1}>'.format(type(self).__name__, self.stream)

  def _Write(self, table: _Table) -> None:
    value = table.Render()
    logging.debug('Writing %s to %s:\n%s', table.title, self.stream, value)
    self.stream.write(value)

  def _Statistic(self, report, r, fn, *args) -> Optional[float]:
    try:
      return fn(*args)
    except errors.Stats.EmptySeriesError as e:
      logging.warning('%s scenario (host network=%s, service=%s, message '
                      'size=%d, same node=%s) has no value: %s',
                      r.profile.value, r.host_network, r.service,
                      r.message_size, r.same_node, e)
      self.failures.append(RowFailure(report, r, e))
      return None

  def _Value(self, value: Optional[float], unit: str) -> str:
    if value is None:
      return self.placeholder
    return '%f (%s)' % (value, unit)

  def _ScenarioCells(self, r: result_lib.Result) -> list:
    return [r.host_network, r.service, r.message_size, r.same_node]

  def ShowPodCPU(self, results: result_lib.ScenarioResults) -> None:
    """Writes per-pod CPU utilization, client pods before server pods."""
    if not classifier.HasPodCPU(results):
      logging.debug('No pod CPU data, skipping %s.', POD_CPU)
      return
    table = _Table(POD_CPU, [('Role', _WIDE), ('Scenario', _NARROW)] +
                   list(_SCENARIO_COLUMNS) +
                   [('Pod', _POD), ('Utilization', _NARROW)])
    for r in results:
      for role, pods in (('Client', r.client_pod_cpu),
                         ('Server', r.server_pod_cpu)):
        for pod in pods:
          table.AddRow([role, r.profile.value] + self._ScenarioCells(r) +
                       [pod.name[:self.pod_name_width], float(pod.value)])
      table.AddRule()
    self._Write(table)

  def ShowNodeCPU(self, results: result_lib.ScenarioResults) -> None:
    """Writes the CPU breakdown of the client and server node of each run."""
    if not len(results):
      logging.debug('No results, skipping %s.', NODE_CPU)
      return
    table = _Table(NODE_CPU, [('Role', _WIDE), ('Scenario', _NARROW)] +
                   list(_SCENARIO_COLUMNS) +
                   [(header, _NARROW) for header in _NODE_CPU_HEADERS])
    for r in results:
      for role, cpu in (('Client', r.client_metrics),
                        ('Server', r.server_metrics)):
        table.AddRow([role, r.profile.value] + self._ScenarioCells(r) +
                     [float(v) for v in cpu.Values()])
    self._Write(table)

  def _FamilyTable(self, results, family: profiles.Family, title: str,
                   value_header: str, value_fn) -> None:
    if not classifier.HasFamily(results, family):
      logging.debug('No %s results, skipping %s.', family.value, title)
      return
    table = _Table(title, [('Scenario', _WIDE)] + list(_SCENARIO_COLUMNS) +
                   [('Duration', _NARROW), ('Samples', _NARROW),
                    (value_header, _NARROW)])
    with log_util.GetLabelContext().Label(title):
      for r in classifier.SelectFamily(results, family):
        table.AddRow([r.profile.value] + self._ScenarioCells(r) +
                     [r.duration, r.samples, value_fn(title, r)])
    self._Write(table)

  def _MedianThroughput(self, report, r) -> str:
    return self._Value(
        self._Statistic(report, r, stats.Median, r.throughput_summary),
        r.metric)

  def _Latency(self, report, r) -> str:
    return self._Value(
        self._Statistic(report, r, stats.Percentile, r.latency_summary,
                        self.latency_percentile), sample.LATENCY_UNIT)

  def ShowStreamResult(self, results: result_lib.ScenarioResults) -> None:
    self._FamilyTable(results, profiles.Family.STREAM, STREAM, 'Median value',
                      self._MedianThroughput)

  def ShowLatencyResult(self, results: result_lib.ScenarioResults) -> None:
    """Writes the STREAM and RR latency tables, each only if it has data."""
    header = '%s%%tile value' % ('%g' % self.latency_percentile)
    self._FamilyTable(results, profiles.Family.STREAM, STREAM_LATENCY, header,
                      self._Latency)
    self._FamilyTable(results, profiles.Family.RR, RR_LATENCY, header,
                      self._Latency)

  def ShowRRResult(self, results: result_lib.ScenarioResults) -> None:
    self._FamilyTable(results, profiles.Family.RR, RR, 'Median value',
                      self._MedianThroughput)

  def ShowAll(self, results: result_lib.ScenarioResults,
              include_cpu: bool = True) -> None:
    """Writes every report that has data, in the usual order."""
    self.ShowStreamResult(results)
    self.ShowRRResult(results)
    self.ShowLatencyResult(results)
    if include_cpu:
      self.ShowNodeCPU(results)
      self.ShowPodCPU(results)
    if self.failures:
      logging.warning('%d report rows had no value.', len(self.failures))


def RenderToString(results: result_lib.ScenarioResults, **kwargs) -> str:
  """Returns the output of ReportWriter.ShowAll as a string."""
  stream = io.StringIO()
  ReportWriter(stream, **kwargs).ShowAll(results)
  return stream.getvalue()
