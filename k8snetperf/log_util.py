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
"""Logging setup and per-thread log labels."""

import contextlib
import logging
from logging import handlers
import sys
import threading

from absl import flags
import colorlog

DEBUG = 'debug'
INFO = 'info'
WARNING = 'warning'
ERROR = 'error'
LOG_LEVELS = {
    DEBUG: logging.DEBUG,
    INFO: logging.INFO,
    WARNING: logging.WARNING,
    ERROR: logging.ERROR,
}

ROTATE_WHEN = 'D'
ROTATE_INTERVAL = 1
ROTATE_BACKUP_COUNT = 5

flags.DEFINE_enum('log_level', INFO, list(LOG_LEVELS.keys()),
                  'The log level to run at.')
flags.DEFINE_enum(
    'file_log_level', DEBUG, list(LOG_LEVELS.keys()),
    'Anything logged at this level or higher will be written to the log file.')

FLAGS = flags.FLAGS


class LabelContext(object):
  """Stack of labels prepended to log messages emitted by one thread."""

  def __init__(self, parent=None):
    """Creates a LabelContext, copying the labels of parent if given."""
    self._labels = list(parent._labels) if parent else []

  @property
  def label(self):
    """Non-empty labels joined by spaces, with a trailing space if any."""
    text = ' '.join(l for l in self._labels if l)
    return text + ' ' if text else ''

  @contextlib.contextmanager
  def Label(self, label):
    """Appends label for the duration of the with block."""
    self._labels.append(label)
    try:
      yield
    finally:
      self._labels.pop()


class _ThreadData(threading.local):

  def __init__(self):
    self.label_context = LabelContext()


_thread_data = _ThreadData()


def SetLabelContext(label_context):
  _thread_data.label_context = label_context


def GetLabelContext():
  return _thread_data.label_context


class LabelFilter(logging.Filter):
  """Sets the netperf_label attribute of records to the thread's label."""

  def filter(self, record):
    record.netperf_label = GetLabelContext().label
    return True


def ConfigureBasicLogging():
  """Initializes basic python logging before a log file is available."""
  logging.basicConfig(format='%(levelname)-8s %(message)s', level=logging.INFO)


def ConfigureLogging(stderr_log_level, log_path, run_uri,
                     file_log_level=logging.DEBUG):
  """Configures logging to stderr and a rotating log file.

  Note that this replaces any existing handlers of the root logger.

  Args:
    stderr_log_level: Messages at this level and above are emitted to stderr.
    log_path: Path to the log file.
    run_uri: Identifier of the benchmarking session, added to every line.
    file_log_level: Messages at this level and above are written to the log
      file.
  """
  prefix = '%(asctime)s {0} %(threadName)s %(netperf_label)s'.format(run_uri)
  stderr_format = prefix + '%(levelname)-8s %(message)s'
  stderr_color_format = ('%(log_color)s' + prefix +
                         '%(levelname)-8s%(reset)s %(message)s')
  file_format = prefix + '%(filename)s:%(lineno)d %(levelname)-8s %(message)s'

  logger = logging.getLogger()
  logger.handlers = []
  logger.setLevel(logging.DEBUG)
  SetLabelContext(LabelContext())

  handler = logging.StreamHandler()
  handler.addFilter(LabelFilter())
  handler.setLevel(stderr_log_level)
  if sys.stderr.isatty():
    handler.setFormatter(
        colorlog.ColoredFormatter(stderr_color_format, reset=True))
  else:
    handler.setFormatter(logging.Formatter(stderr_format))
  logger.addHandler(handler)

  logging.info('Verbose logging to: %s', log_path)
  handler = handlers.TimedRotatingFileHandler(
      filename=log_path, when=ROTATE_WHEN, interval=ROTATE_INTERVAL,
      backupCount=ROTATE_BACKUP_COUNT)
  handler.addFilter(LabelFilter())
  handler.setLevel(file_log_level)
  handler.setFormatter(logging.Formatter(file_format))
  logger.addHandler(handler)


def ConfigureLoggingFromFlags(log_path, run_uri):
  """Calls ConfigureLogging with --log_level and --file_log_level."""
  ConfigureLogging(LOG_LEVELS[FLAGS.log_level], log_path, run_uri,
                   file_log_level=LOG_LEVELS[FLAGS.file_log_level])
