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

from collections import namedtuple

# CheckResult
PASS = "PASS"
FAIL = "FAIL"
RECOVERED = "RECOVERED"

# Verdict reported by a domain runner; PASS and FAIL are shared with
# CheckResult.
UNKNOWN = "UNKNOWN"

# ActionResult
OK = "OK"
ALREADY_ATTEMPTED = "ALREADY_ATTEMPTED"
FAILED = "FAILED"

DAY = 24 * 60 * 60

ComplianceDomain = namedtuple('ComplianceDomain', ['name', 'check', 'actions'])


class RecoveryGuard(object):
    """Records which recovery actions have fired during one invocation.

    A single guard is created per run and handed to every recovery action.
    An action may claim its name once; later claims are refused, which is
    what bounds the check/recover cycle of every domain.
    """
    def __init__(self):
        self._attempted = []

    def attempted(self, name):
        return name in self._attempted

    def claim(self, name):
        """Claims the right to run the named action.

        :param name: the recovery action name
        :returns: True the first time a name is claimed, False afterwards.
        """
        if name in self._attempted:
            return False
        self._attempted.append(name)
        return True

    @property
    def history(self):
        """Names of the actions claimed so far, in order."""
        return list(self._attempted)
