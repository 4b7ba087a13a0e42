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
"""Benchmark results and the per-run store that collects them.

A scenario is a profile, message size and placement (same node, host network,
service, virtual machine). The orchestration layer appends one Result to a
ScenarioResults for every completed netperf execution; reruns of a scenario are
kept as separate Results.
"""

import dataclasses
import datetime
import logging
import math
import threading
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

from k8snetperf import errors
from k8snetperf import metrics
from k8snetperf import profiles


@dataclasses.dataclass(frozen=True)
class Config:
  """What to run for a scenario.

  Attributes:
    profile: The netperf profile.
    message_size: Message size in bytes.
    duration: Length of each netperf run in seconds.
    samples: Number of times the run is repeated.
    vm: Whether the client and server run inside virtual machines.
    vm_host: Externally reachable host of the client VM, when vm is set.
  """
  profile: profiles.Profile
  message_size: int
  duration: int
  samples: int
  vm: bool = False
  vm_host: str = ''

  def __post_init__(self):
    object.__setattr__(self, 'profile',
                       profiles.Profile.FromString(self.profile))
    for name in ('message_size', 'duration', 'samples'):
      value = getattr(self, name)
      if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise errors.Result.InvalidConfigError(
            '%s must be a positive integer, got %r' % (name, value))

  def AsVirtualMachine(self, host: str) -> 'Config':
    return dataclasses.replace(self, vm=True, vm_host=host)


def UpdateConfigsForVM(configs: Iterable[Config], host: str) -> List[Config]:
  """Returns configs rewritten to run between virtual machines on host."""
  return [config.AsVirtualMachine(host) for config in configs]


def _CheckSeries(name: str, series: Iterable[float]) -> Tuple[float, ...]:
  values = tuple(float(v) for v in series)
  for v in values:
    if not math.isfinite(v) or v < 0:
      raise errors.Result.InvalidSeriesError(
          '%s must hold finite, non-negative values, got %r' % (name, v))
  return values


def _AsPodValues(value) -> metrics.PodValues:
  if isinstance(value, metrics.PodValues):
    return value
  if isinstance(value, dict):
    return metrics.PodValues.FromDict(value)
  return metrics.PodValues(value)


@dataclasses.dataclass(frozen=True)
class Result:
  """One completed measurement of a scenario.

  Attributes:
    config: The scenario Config that was run.
    metric: Unit label of the throughput series, e.g. 'Mb/s' or 'OP/s'.
    same_node: Whether client and server were placed on the same node.
    host_network: Whether the workloads bypassed the pod network.
    service: Whether traffic was routed through a cluster service.
    client_node_info: Node the client ran on.
    server_node_info: Node the server ran on.
    start_time: When the run started.
    end_time: When the run finished.
    throughput_summary: One throughput value per repetition.
    latency_summary: One latency value (usec) per repetition.
    client_metrics: CPU breakdown of the client node.
    server_metrics: CPU breakdown of the server node.
    client_pod_cpu: CPU utilization of client side pods.
    server_pod_cpu: CPU utilization of server side pods.
  """
  config: Config
  metric: str = ''
  same_node: bool = False
  host_network: bool = False
  service: bool = False
  client_node_info: metrics.NodeInfo = metrics.NodeInfo()
  server_node_info: metrics.NodeInfo = metrics.NodeInfo()
  start_time: Optional[datetime.datetime] = None
  end_time: Optional[datetime.datetime] = None
  throughput_summary: Tuple[float, ...] = ()
  latency_summary: Tuple[float, ...] = ()
  client_metrics: metrics.NodeCPU = metrics.NodeCPU()
  server_metrics: metrics.NodeCPU = metrics.NodeCPU()
  client_pod_cpu: metrics.PodValues = metrics.PodValues()
  server_pod_cpu: metrics.PodValues = metrics.PodValues()

  def __post_init__(self):
    # Frozen, so normalize through object.__setattr__.
    object.__setattr__(self, 'throughput_summary',
                       _CheckSeries('throughput_summary',
                                    self.throughput_summary))
    object.__setattr__(self, 'latency_summary',
                       _CheckSeries('latency_summary', self.latency_summary))
    object.__setattr__(self, 'client_pod_cpu',
                       _AsPodValues(self.client_pod_cpu))
    object.__setattr__(self, 'server_pod_cpu',
                       _AsPodValues(self.server_pod_cpu))
    if len(self.throughput_summary) < self.config.samples:
      logging.debug('%s recorded %d of %d requested samples.',
                    self.profile.value, len(self.throughput_summary),
                    self.config.samples)

  @property
  def profile(self) -> profiles.Profile:
    return self.config.profile

  @property
  def message_size(self) -> int:
    return self.config.message_size

  @property
  def duration(self) -> int:
    return self.config.duration

  @property
  def samples(self) -> int:
    return self.config.samples

  @property
  def vm(self) -> bool:
    return self.config.vm

  def GetMetadata(self) -> Dict[str, Any]:
    """Returns a flat description of the scenario for exported samples."""
    metadata = {
        'profile': self.profile.value,
        'message_size': self.message_size,
        'duration': self.duration,
        'samples': self.samples,
        'same_node': self.same_node,
        'host_network': self.host_network,
        'service': self.service,
        'vm': self.vm,
        'client_node': self.client_node_info.name,
        'server_node': self.server_node_info.name,
    }
    if self.start_time:
      metadata['start_time'] = self.start_time.isoformat()
    if self.end_time:
      metadata['end_time'] = self.end_time.isoformat()
    return metadata


class ScenarioResults(object):
  """Results of one benchmarking session, in completion order.

  Appends are serialized by a lock so scenarios may complete on worker threads.
  Once reporting begins the store can be sealed, after which it is read-only.
  """

  def __init__(self, results: Iterable[Result] = ()):
    self._lock = threading.Lock()
    self._results = []
    self._sealed = False
    self.Extend(results)

  def Append(self, result: Result) -> None:
    if not isinstance(result, Result):
      raise TypeError('Expected a Result, got %s' % type(result).__name__)
    with self._lock:
      if self._sealed:
        raise errors.Result.SealedResultsError(
            'Cannot append %s result, results are sealed.' %
            result.profile.value)
      self._results.append(result)
    logging.debug('Recorded %s result (%d total).', result.profile.value,
                  len(self._results))

  def Extend(self, results: Iterable[Result]) -> None:
    for result in results:
      self.Append(result)

  def Seal(self) -> None:
    with self._lock:
      self._sealed = True

  @property
  def sealed(self) -> bool:
    return self._sealed

  @property
  def results(self) -> Tuple[Result, ...]:
    with self._lock:
      return tuple(self._results)

  def __iter__(self) -> Iterator[Result]:
    return iter(self.results)

  def __len__(self):
    return len(self._results)

  def __repr__(self):
    return '<{0} results={1} sealed={2}>'.format(
        type(self).__name__, len(self), self._sealed)
