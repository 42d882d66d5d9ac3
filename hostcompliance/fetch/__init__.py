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

"""Package manager helpers (apt)."""

import os
import re
import subprocess

from collections import namedtuple

from hostcompliance.core import host
from hostcompliance.core.agentenv import (
    log,
    DEBUG,
)

PendingUpgrades = namedtuple('PendingUpgrades', ['total', 'security'])

# Inst libssl3 [3.0.2-0ubuntu1.10] (3.0.2-0ubuntu1.12 Ubuntu:22.04/...)
_INST_RE = re.compile(
    r'^Inst (?P<pkg>\S+)(?: \[[^\]]*\])? \((?P<origin>.*)\)')


def _apt_env():
    # Provide DEBIAN_FRONTEND=noninteractive if not present in the
    # environment and force untranslated output for parsing.
    env = os.environ.copy()
    env.setdefault('DEBIAN_FRONTEND', 'noninteractive')
    env['LANG'] = 'C'
    return env


def apt_update(fatal=False, stamp=None):
    """Update local apt cache.

    :param stamp: file touched after a successful update, so the time of
                  the last refresh is known whatever apt hooks are present
    :returns: True if apt-get exited successfully
    """
    cmd = ['apt-get', 'update']
    log("Refreshing package lists", level=DEBUG)
    if fatal:
        subprocess.check_call(cmd, env=_apt_env())
    elif subprocess.call(cmd, env=_apt_env()) != 0:
        return False

    if stamp:
        host.touch(stamp)
    return True


def parse_simulated_upgrade(output):
    """Count upgradable packages in `apt-get --simulate` output.

    :param output: text printed by apt-get --simulate dist-upgrade
    :returns: PendingUpgrades
    """
    total = 0
    security = 0
    for line in output.splitlines():
        m = _INST_RE.match(line)
        if not m:
            continue
        total += 1
        if '-security' in m.group('origin'):
            security += 1
    return PendingUpgrades(total, security)


def pending_upgrades():
    """Packages waiting to be upgraded.

    Raises CalledProcessError if apt-get fails.
    """
    cmd = ['apt-get', '--simulate', '--quiet', 'dist-upgrade']
    output = subprocess.check_output(cmd, env=_apt_env(),
                                     universal_newlines=True)
    pending = parse_simulated_upgrade(output)
    log("{} package upgrades pending ({} security)".format(*pending),
        level=DEBUG)
    return pending
