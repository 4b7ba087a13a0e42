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
"""Netperf profiles and the report families they belong to.

docs:
http://www.netperf.org/svn/netperf2/tags/netperf-2.4.5/doc/netperf.html
"""

import enum

from k8snetperf import errors


class Family(enum.Enum):
  """Coarse grouping of profiles used to select report tables.

  Potential values:
  STREAM: bulk transfer tests, reported as throughput.
  RR: request/response tests, reported as transaction rate.
  """
  STREAM = 'STREAM'
  RR = 'RR'


class Profile(enum.Enum):
  """Netperf test types that can be run between two workloads."""
  TCP_STREAM = 'TCP_STREAM'
  UDP_STREAM = 'UDP_STREAM'
  TCP_MAERTS = 'TCP_MAERTS'
  TCP_RR = 'TCP_RR'
  UDP_RR = 'UDP_RR'
  TCP_CRR = 'TCP_CRR'

  @classmethod
  def FromString(cls, tag):
    """Parses a profile tag such as 'tcp_stream'.

    Raises:
      errors.Result.UnknownProfileError: if tag is not a known profile.
    """
    if isinstance(tag, cls):
      return tag
    try:
      return cls(str(tag).strip().upper())
    except ValueError:
      raise errors.Result.UnknownProfileError(
          'Unknown netperf profile %r. Known profiles: %s' %
          (tag, ', '.join(p.value for p in cls)))

  @property
  def family(self):
    return _FAMILIES[self]

  def InFamily(self, family):
    return self.family is family


_FAMILIES = {
    Profile.TCP_STREAM: Family.STREAM,
    Profile.UDP_STREAM: Family.STREAM,
    # MAERTS is TCP_STREAM with the data flowing from server to client.
    Profile.TCP_MAERTS: Family.STREAM,
    Profile.TCP_RR: Family.RR,
    Profile.UDP_RR: Family.RR,
    Profile.TCP_CRR: Family.RR,
}


def FamilyFromString(name):
  """Returns the Family named name, accepting Family instances as is."""
  if isinstance(name, Family):
    return name
  try:
    return Family(str(name).strip().upper())
  except ValueError:
    raise ValueError('Unknown profile family %r. Known families: %s' %
                     (name, ', '.join(f.value for f in Family)))
