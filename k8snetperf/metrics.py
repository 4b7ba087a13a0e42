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
"""Cluster telemetry attached to each benchmark result.

The values are collected by a cluster introspection collaborator (node
metadata, node CPU from mpstat-like breakdowns, pod CPU from the metrics
backend) and are carried through here without interpretation.

Node CPU fields, all percentages of total CPU time:
idle: the CPUs were idle with no outstanding disk I/O.
user: executing at the user level.
system: executing at the kernel level, excluding interrupt servicing.
steal: involuntary wait while the hypervisor serviced another vCPU.
iowait: idle with an outstanding disk I/O request.
nice: executing at the user level with nice priority.
softirq: servicing software interrupts.
irq: servicing hardware interrupts.
"""

import dataclasses
import math
from typing import Dict, Iterator, Tuple

from k8snetperf import errors


@dataclasses.dataclass(frozen=True)
class NodeInfo:
  """Identity of the node a client or server workload ran on."""
  name: str = ''
  ip: str = ''
  hostname: str = ''
  kernel: str = ''
  architecture: str = ''
  os_image: str = ''
  labels: Tuple[Tuple[str, str], ...] = ()


@dataclasses.dataclass(frozen=True)
class NodeCPU:
  """CPU time breakdown of one node over a benchmark run."""
  idle: float = 0.0
  user: float = 0.0
  system: float = 0.0
  steal: float = 0.0
  iowait: float = 0.0
  nice: float = 0.0
  softirq: float = 0.0
  irq: float = 0.0

  # Report column order.
  FIELDS = ('idle', 'user', 'system', 'steal', 'iowait', 'nice', 'softirq',
            'irq')

  def Values(self) -> Tuple[float, ...]:
    return tuple(getattr(self, f) for f in self.FIELDS)

  def AsDict(self) -> Dict[str, float]:
    return dict(zip(self.FIELDS, self.Values()))


@dataclasses.dataclass(frozen=True)
class PodCPU:
  """CPU utilization of one pod.

  Raises:
    errors.Result.InvalidPodCPUError: if value is not a finite number >= 0.
  """
  name: str
  value: float

  def __post_init__(self):
    try:
      value = float(self.value)
    except (TypeError, ValueError):
      raise errors.Result.InvalidPodCPUError(
          'Pod %s has non-numeric CPU utilization %r' % (self.name, self.value))
    if not math.isfinite(value) or value < 0:
      raise errors.Result.InvalidPodCPUError(
          'Pod %s CPU utilization must be finite and non-negative, got %r' %
          (self.name, value))
    object.__setattr__(self, 'value', value)


class PodValues(object):
  """Ordered, immutable per-pod CPU utilization for one side of a run."""

  def __init__(self, results=()):
    self._results = tuple(
        r if isinstance(r, PodCPU) else PodCPU(*r) for r in results)

  @classmethod
  def FromDict(cls, utilization):
    """Builds PodValues from a {pod name: utilization} mapping."""
    return cls(PodCPU(name, value)
               for name, value in utilization.items())

  @property
  def results(self) -> Tuple[PodCPU, ...]:
    return self._results

  def __iter__(self) -> Iterator[PodCPU]:
    return iter(self._results)

  def __len__(self):
    return len(self._results)

  def __eq__(self, other):
    if not isinstance(other, PodValues):
      return NotImplemented
    return self._results == other._results

  def __hash__(self):
    return hash(self._results)

  def __repr__(self):
    return '<{0} {1}>'.format(type(self).__name__, list(self._results))
