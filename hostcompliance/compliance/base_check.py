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

import subprocess

from collections import namedtuple

from hostcompliance.core.agentenv import (
    log,
    DEBUG,
    ERROR,
    WARNING,
)
from hostcompliance.compliance import (
    PASS,
    FAIL,
    RECOVERED,
    OK,
    ALREADY_ATTEMPTED,
)

# probe: callable returning True when the condition holds.
# action: RecoveryAction fixing the condition, or None if it is terminal.
Condition = namedtuple('Condition', ['description', 'probe', 'action'])


class BaseCheck(object):  # NO-QA
    """Base class for compliance checks.

    A check probes its domain's conditions in order and stops at the first
    one that does not hold. Recoverable conditions (those with an action)
    come first and terminal conditions last. A violated recoverable
    condition triggers its action once; the check then reports RECOVERED so
    the runner probes the domain again. A violated terminal condition is a
    FAIL.
    """
    name = None

    def __init__(self, conditions=None):
        if conditions is not None:
            self._conditions = list(conditions)
        else:
            self._conditions = list(self.get_conditions())
        self._validate_order()

    def get_conditions(self):
        """Returns the ordered list of Condition for this domain."""
        raise NotImplementedError

    @property
    def conditions(self):
        return list(self._conditions)

    def actions(self):
        return [c.action for c in self._conditions if c.action is not None]

    def _validate_order(self):
        terminal = None
        for cond in self._conditions:
            if cond.action is None:
                terminal = cond
            elif terminal is not None:
                raise ValueError("Recoverable condition '%s' follows "
                                 "terminal condition '%s'" %
                                 (cond.description, terminal.description))

    def check(self, guard):
        """Probes the domain once.

        :param guard: the RecoveryGuard of the current invocation.
        :returns: PASS, FAIL or RECOVERED
        """
        for cond in self._conditions:
            try:
                holds = cond.probe()
            except (OSError, subprocess.CalledProcessError, ValueError) as e:
                log("%s: unable to verify '%s': %s" %
                    (self.name, cond.description, e), level=ERROR)
                return FAIL

            if holds:
                log("%s: %s - ok" % (self.name, cond.description),
                    level=DEBUG)
                continue

            log("%s: %s - not compliant" % (self.name, cond.description),
                level=WARNING)
            if cond.action is None:
                return FAIL

            result = cond.action.apply(guard)
            if result == OK:
                return RECOVERED
            if result == ALREADY_ATTEMPTED:
                log("%s: recovery for '%s' already tried" %
                    (self.name, cond.description), level=WARNING)
            return FAIL

        return PASS
