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
"""Tests for k8snetperf.report."""

import io
import re
import unittest

from absl import flags
from absl.testing import absltest
from absl.testing import flagsaver
import mock
from k8snetperf import errors
from k8snetperf import metrics
from k8snetperf import report
from k8snetperf import result
from tests import netperf_test_util

FLAGS = flags.FLAGS
FLAGS.mark_as_parsed()


def _Rows(output, title):
  """Returns the data rows of the table titled title."""
  lines = output.splitlines()
  start = next(i for i, line in enumerate(lines)
               if re.match(r'^-+ %s -+$' % re.escape(title), line))
  rows = []
  # Skip the banner, header and rule.
  for line in lines[start + 3:]:
    if re.match(r'^-+ .+ -+$', line):
      break
    if not set(line) <= {'-'}:
      rows.append([cell.strip() for cell in line.split('|')])
  return rows


class ReportWriterTestCase(absltest.TestCase):

  def setUp(self):
    super().setUp()
    self.stream = io.StringIO()
    self.writer = report.ReportWriter(self.stream)

  def testDefaultsToStdout(self):
    with mock.patch('sys.stdout') as mock_stdout:
      instance = report.ReportWriter()
      self.assertEqual(mock_stdout, instance.stream)

  def testNothingWrittenForNoResults(self):
    self.writer.ShowAll(result.ScenarioResults())
    self.assertEqual(self.stream.getvalue(), '')

  def testStreamResult(self):
    results = result.ScenarioResults([
        netperf_test_util.MakeResult(
            profile='TCP_STREAM', message_size=16384, duration=10, samples=3,
            metric='Mb/s', throughput_summary=[100, 110, 90]),
        netperf_test_util.MakeResult(profile='TCP_RR',
                                     throughput_summary=[1.0]),
    ])
    self.writer.ShowStreamResult(results)
    rows = _Rows(self.stream.getvalue(), report.STREAM)
    self.assertEqual(rows, [[
        'TCP_STREAM', 'False', 'False', '16384', 'False', '10', '3',
        '100.000000 (Mb/s)'
    ]])

  def testNoRRTablesWithoutRRResults(self):
    results = result.ScenarioResults([
        netperf_test_util.MakeResult(profile='UDP_STREAM',
                                     throughput_summary=[5.0],
                                     latency_summary=[2.0]),
    ])
    self.writer.ShowAll(results)
    output = self.stream.getvalue()
    self.assertNotIn(report.RR, output)
    self.assertNotIn(report.RR_LATENCY, output)
    self.assertIn(report.STREAM, output)
    self.assertIn(report.STREAM_LATENCY, output)

  def testNoStreamTablesWithoutStreamResults(self):
    results = result.ScenarioResults([
        netperf_test_util.MakeResult(profile='TCP_CRR', metric='OP/s',
                                     throughput_summary=[5.0],
                                     latency_summary=[2.0]),
    ])
    self.writer.ShowAll(results)
    output = self.stream.getvalue()
    self.assertNotIn(report.STREAM, output)
    self.assertNotIn(report.STREAM_LATENCY, output)
    self.assertEqual(_Rows(output, report.RR)[0][-1], '5.000000 (OP/s)')
    self.assertEqual(_Rows(output, report.RR_LATENCY)[0][-1],
                     '2.000000 (usec)')

  def testEmptySeriesRendersPlaceholder(self):
    empty = netperf_test_util.MakeResult(profile='TCP_STREAM',
                                         throughput_summary=[])
    results = result.ScenarioResults([
        empty,
        netperf_test_util.MakeResult(profile='UDP_STREAM',
                                     throughput_summary=[7.0]),
    ])
    with self.assertLogs(level='WARNING'):
      self.writer.ShowStreamResult(results)
    rows = _Rows(self.stream.getvalue(), report.STREAM)
    self.assertEqual([row[-1] for row in rows], ['n/a', '7.000000 (Mb/s)'])
    self.assertLen(self.writer.failures, 1)
    failure = self.writer.failures[0]
    self.assertEqual(failure.report, report.STREAM)
    self.assertIs(failure.result, empty)
    self.assertIsInstance(failure.error, errors.Stats.EmptySeriesError)

  @flagsaver.flagsaver(netperf_report_placeholder='-')
  def testPlaceholderFromFlag(self):
    writer = report.ReportWriter(self.stream)
    results = result.ScenarioResults(
        [netperf_test_util.MakeResult(profile='TCP_RR')])
    writer.ShowRRResult(results)
    self.assertEqual(_Rows(self.stream.getvalue(), report.RR)[0][-1], '-')

  def testLatencyUsesMedianByDefault(self):
    results = result.ScenarioResults([
        netperf_test_util.MakeResult(profile='TCP_RR',
                                     latency_summary=[10, 300, 20]),
    ])
    self.writer.ShowLatencyResult(results)
    output = self.stream.getvalue()
    self.assertIn('50%tile value', output)
    self.assertEqual(_Rows(output, report.RR_LATENCY)[0][-1],
                     '20.000000 (usec)')

  def testLatencyPercentile(self):
    writer = report.ReportWriter(self.stream, latency_percentile=100)
    results = result.ScenarioResults([
        netperf_test_util.MakeResult(profile='TCP_RR',
                                     latency_summary=[10, 300, 20]),
    ])
    writer.ShowLatencyResult(results)
    output = self.stream.getvalue()
    self.assertIn('100%tile value', output)
    self.assertEqual(_Rows(output, report.RR_LATENCY)[0][-1],
                     '300.000000 (usec)')

  def testInvalidLatencyPercentileFailsBeforeWriting(self):
    results = result.ScenarioResults([
        netperf_test_util.MakeResult(profile='TCP_STREAM',
                                     throughput_summary=[1.0],
                                     latency_summary=[1.0],
                                     client_pod_cpu={'c': 1.0}),
    ])
    for percentile in (150, 0, -5, 'p99'):
      with self.assertRaises(errors.Stats.InvalidPercentileError):
        report.ReportWriter(self.stream,
                            latency_percentile=percentile).ShowAll(results)
    self.assertEqual(self.stream.getvalue(), '')

  def testExplicitLatencyPercentileOverridesFlag(self):
    with flagsaver.flagsaver(netperf_report_latency_percentile=99.0):
      writer = report.ReportWriter(self.stream, latency_percentile=90)
    self.assertEqual(writer.latency_percentile, 90.0)

  def testInvalidPodNameWidth(self):
    for width in (0, -1, 2.5, True):
      with self.assertRaises(errors.Report.InvalidSettingError):
        report.ReportWriter(self.stream, pod_name_width=width)

  @flagsaver.flagsaver(netperf_report_pod_name_width=6)
  def testPodNameWidthFromFlag(self):
    self.assertEqual(report.ReportWriter(self.stream).pod_name_width, 6)

  def testPodCPU(self):
    results = result.ScenarioResults([
        netperf_test_util.MakeResult(
            profile='TCP_STREAM',
            client_pod_cpu=[('client-0123456789abcdefghij', 12.5),
                            ('client-b', 1.0)],
            server_pod_cpu=[('server-a', 30.0)]),
        netperf_test_util.MakeResult(profile='TCP_RR',
                                     server_pod_cpu=[('server-b', 2.0)]),
    ])
    self.writer.ShowPodCPU(results)
    rows = _Rows(self.stream.getvalue(), report.POD_CPU)
    self.assertEqual([(row[0], row[1], row[6]) for row in rows], [
        ('Client', 'TCP_STREAM', 'client-0123456789abc'),
        ('Client', 'TCP_STREAM', 'client-b'),
        ('Server', 'TCP_STREAM', 'server-a'),
        ('Server', 'TCP_RR', 'server-b'),
    ])
    self.assertEqual(rows[0][7], '12.500000')

  def testPodCPUNameWidth(self):
    writer = report.ReportWriter(self.stream, pod_name_width=4)
    results = result.ScenarioResults([
        netperf_test_util.MakeResult(client_pod_cpu={'client-a': 1.0}),
    ])
    writer.ShowPodCPU(results)
    self.assertEqual(_Rows(self.stream.getvalue(), report.POD_CPU)[0][6],
                     'clie')

  def testPodCPUSkippedWithoutPods(self):
    self.writer.ShowPodCPU(
        result.ScenarioResults([netperf_test_util.MakeResult()]))
    self.assertEqual(self.stream.getvalue(), '')

  def testNodeCPU(self):
    results = result.ScenarioResults([
        netperf_test_util.MakeResult(
            client_metrics=metrics.NodeCPU(idle=90, user=5, iowait=1, irq=0.5),
            server_metrics=metrics.NodeCPU(idle=80, system=10, iowait=2,
                                           nice=3, softirq=4, irq=1)),
    ])
    self.writer.ShowNodeCPU(results)
    rows = _Rows(self.stream.getvalue(), report.NODE_CPU)
    self.assertEqual([row[0] for row in rows], ['Client', 'Server'])
    self.assertEqual([float(v) for v in rows[0][6:]],
                     [90, 5, 0, 0, 1, 0, 0, 0.5])
    self.assertEqual([float(v) for v in rows[1][6:]],
                     [80, 0, 10, 0, 2, 3, 4, 1])

  def testShowAllOrder(self):
    results = result.ScenarioResults([
        netperf_test_util.MakeResult(profile='TCP_STREAM',
                                     throughput_summary=[1.0],
                                     latency_summary=[1.0]),
        netperf_test_util.MakeResult(profile='TCP_RR',
                                     throughput_summary=[1.0],
                                     latency_summary=[1.0],
                                     client_pod_cpu={'c': 1.0}),
    ])
    output = report.RenderToString(results)
    titles = re.findall(r'^-+ (.+?) -+$', output, re.MULTILINE)
    self.assertEqual(titles, [
        report.STREAM, report.RR, report.STREAM_LATENCY, report.RR_LATENCY,
        report.NODE_CPU, report.POD_CPU
    ])

  def testWithoutCPU(self):
    results = result.ScenarioResults([
        netperf_test_util.MakeResult(throughput_summary=[1.0],
                                     client_pod_cpu={'c': 1.0}),
    ])
    self.writer.ShowAll(results, include_cpu=False)
    output = self.stream.getvalue()
    self.assertNotIn(report.NODE_CPU, output)
    self.assertNotIn(report.POD_CPU, output)


if __name__ == '__main__':
  unittest.main()
