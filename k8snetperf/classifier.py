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
"""Predicates deciding which report tables have data to show."""

from typing import List

from k8snetperf import profiles
from k8snetperf import result


def HasFamily(results: result.ScenarioResults, family) -> bool:
  """Returns True if any result's profile belongs to family.

  Args:
    results: ScenarioResults to inspect.
    family: profiles.Family, or its name ('STREAM', 'RR').
  """
  family = profiles.FamilyFromString(family)
  return any(r.profile.InFamily(family) for r in results)


def SelectFamily(results: result.ScenarioResults,
                 family) -> List[result.Result]:
  family = profiles.FamilyFromString(family)
  return [r for r in results if r.profile.InFamily(family)]


def HasHostNetwork(results: result.ScenarioResults) -> bool:
  return any(r.host_network for r in results)


def HasPodCPU(results: result.ScenarioResults) -> bool:
  return any(len(r.client_pod_cpu) or len(r.server_pod_cpu) for r in results)
