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

"""Tools for working with the host system"""

import os
import shutil
import subprocess
import tempfile
import time

from collections import namedtuple

from hostcompliance.core.agentenv import (
    log,
    DEBUG,
    ERROR,
    WARNING,
)

NOTICE_BEGIN = '# BEGIN %s'
NOTICE_END = '# END %s'

CronJob = namedtuple('CronJob', ['schedule', 'user', 'command'])


def rewrite_file(path, content, perms=None):
    """Atomically replace the contents of a file.

    The content goes to a temporary file in the same directory which is then
    renamed over path, so readers see either the old or the new file. An
    existing file keeps its ownership, and its mode unless perms is given.
    A new file gets perms, or 0o644.
    """
    st = os.stat(path) if os.path.exists(path) else None
    if perms is None:
        perms = st.st_mode & 0o7777 if st else 0o644
    dirname = os.path.dirname(os.path.abspath(path))
    fd, tmp = tempfile.mkstemp(dir=dirname, prefix='.host-compliance-')
    try:
        with os.fdopen(fd, 'w') as target:
            os.fchmod(target.fileno(), perms)
            if st:
                os.fchown(target.fileno(), st.st_uid, st.st_gid)
            target.write(content)
        os.rename(tmp, path)
    except Exception:
        if os.path.exists(tmp):
            os.unlink(tmp)
        raise
    log("Wrote file {} {:o}".format(path, perms), level=DEBUG)


def file_age(path, now=None):
    """Seconds since path was last modified, or None if it does not exist"""
    if not os.path.exists(path):
        return None
    now = now if now is not None else time.time()
    return now - os.path.getmtime(path)


def touch(path):
    """Create path if needed and set its modification time to now"""
    parent = os.path.dirname(path)
    if parent and not os.path.isdir(parent):
        os.makedirs(parent, 0o755)
    with open(path, 'a'):
        os.utime(path, None)


def executable(name):
    """Return the full path to an executable, or None if it is not found"""
    if os.path.isabs(name):
        if os.path.isfile(name) and os.access(name, os.X_OK):
            return name
        return None
    return shutil.which(name)


def cron_jobs(path):
    '''Jobs listed in a system crontab file (cron.d format)

    Blank lines, comments and environment assignments are skipped.
    Returns [] if the file does not exist.
    '''
    jobs = []
    if not os.path.exists(path):
        return jobs

    with open(path, 'r') as crontab:
        for line in crontab:
            line = line.strip()
            if not line or line.startswith('#'):
                continue
            fields = line.split()
            if '=' in fields[0] or (len(fields) > 1 and
                                     fields[1].startswith('=')):
                continue
            if fields[0].startswith('@'):
                schedule, rest = fields[:1], fields[1:]
            else:
                schedule, rest = fields[:5], fields[5:]
                if len(schedule) < 5:
                    continue
            if len(rest) < 2:
                continue
            jobs.append(CronJob(' '.join(schedule), rest[0],
                                ' '.join(rest[1:])))
    return jobs


def broadcast(message):
    """Send a message to every interactive session.

    :returns: True if the message was sent.
    """
    try:
        p = subprocess.Popen(['wall'], stdin=subprocess.PIPE,
                             universal_newlines=True)
        p.communicate(message)
    except OSError as e:
        log('Error calling wall: %s' % e, level=ERROR)
        return False

    if p.returncode != 0:
        log('wall exited with code %s' % p.returncode, level=WARNING)
        return False
    return True


def shutdown(delay_minutes, message):
    """Schedule a delayed system halt.

    :returns: True if the shutdown was scheduled.
    """
    cmd = ['shutdown', '-h', '+%d' % delay_minutes, message]
    log("Scheduling shutdown: {}".format(' '.join(cmd[:3])), level=WARNING)
    try:
        subprocess.check_call(cmd)
    except (OSError, subprocess.CalledProcessError) as e:
        log('Error calling shutdown: %s' % e, level=ERROR)
        return False
    return True


def _strip_notice(lines, tag):
    begin, end = NOTICE_BEGIN % tag, NOTICE_END % tag
    kept = []
    inside = False
    for line in lines:
        marker = line.rstrip('\n')
        if marker == begin:
            inside = True
            continue
        if marker == end:
            inside = False
            continue
        if not inside:
            kept.append(line)
    return kept


def remove_notice(path, tag):
    '''Remove a tagged block from a login notice file

    :returns: True if a block was found and removed.
    '''
    if not os.path.exists(path):
        return False

    with open(path, 'r') as notice:
        lines = notice.readlines()
    kept = _strip_notice(lines, tag)
    if kept == lines:
        return False

    with open(path, 'w') as notice:
        notice.writelines(kept)
    log("Removed '{}' notice from {}".format(tag, path), level=DEBUG)
    return True


def append_notice(path, tag, text):
    '''Append a tagged block to a login notice file

    Any earlier block with the same tag is replaced, so the file holds at
    most one copy of the notice.
    '''
    lines = []
    if os.path.exists(path):
        with open(path, 'r') as notice:
            lines = _strip_notice(notice.readlines(), tag)
    if lines and not lines[-1].endswith('\n'):
        lines[-1] += '\n'

    lines.append(NOTICE_BEGIN % tag + '\n')
    lines.append(text.rstrip('\n') + '\n')
    lines.append(NOTICE_END % tag + '\n')
    with open(path, 'w') as notice:
        notice.writelines(lines)
    log("Installed '{}' notice in {}".format(tag, path), level=DEBUG)
