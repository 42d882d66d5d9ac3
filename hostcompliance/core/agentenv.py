# Copyright 2026 The host-compliance Authors.
#
# This file is part of host-compliance.
#
# host-compliance is free software: you can redistribute it and/or modify
# it under the terms of the GNU Lesser General Public License version 3 as
# published by the Free Software Foundation.
#
# host-compliance is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Lesser General Public License for more details.
#
# You should have received a copy of the GNU Lesser General Public License
# along with host-compliance.  If not, see <http://www.gnu.org/licenses/>.

"""Run environment for the compliance agent: logging and invocation mode."""

import datetime

CRITICAL = "CRITICAL"
ERROR = "ERROR"
WARNING = "WARNING"
INFO = "INFO"
DEBUG = "DEBUG"

LEVELS = (DEBUG, INFO, WARNING, ERROR, CRITICAL)

DEFAULT_LOG_PATH = '/var/log/host-compliance.log'

__SINK__ = {'path': DEFAULT_LOG_PATH, 'stream': None, 'level': INFO}


def log_to(path=None, stream=None, level=None):
    """Select where log lines are written for the rest of the run.

    :param path: file the log lines are appended to.
    :param stream: file-like object to write to instead (interactive mode).
    :param level: lowest level that is written, one of LEVELS.
    """
    __SINK__['path'] = path
    __SINK__['stream'] = stream
    if level is not None:
        if level not in LEVELS:
            raise ValueError("Unknown log level '%s'" % level)
        __SINK__['level'] = level


def _write(line):
    stream = __SINK__['stream']
    if stream is not None:
        stream.write(line + '\n')
        stream.flush()
        return

    path = __SINK__['path']
    if path is None:
        return

    try:
        with open(path, 'a') as out:
            out.write(line + '\n')
    except (IOError, OSError):
        # An unwritable log must never stop a run.
        pass


def log(message, level=None):
    "Write a message to the compliance log"
    level = level or INFO
    threshold = __SINK__['level']
    if level in LEVELS and LEVELS.index(level) < LEVELS.index(threshold):
        return
    _write('%s %s' % (level, message))


def log_run_header(now=None):
    "Write the per-run header line"
    now = now or datetime.datetime.now()
    _write('==== host-compliance run %s ====' %
           now.replace(microsecond=0).isoformat())


def log_run_footer():
    "Separate runs with a blank line"
    _write('')
