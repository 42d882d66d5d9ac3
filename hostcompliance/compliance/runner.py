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

from traceback import format_exc

from hostcompliance.core.agentenv import (
    log,
    DEBUG,
    ERROR,
    INFO,
)
from hostcompliance.compliance import (
    PASS,
    FAIL,
    RECOVERED,
    UNKNOWN,
)


def max_checks_for(check):
    """Upper bound on check() calls for a domain.

    Every recoverable condition can produce at most one RECOVERED per run
    since its action is guarded, so one pass per condition plus the final
    verdict is enough.
    """
    return len(check.conditions) + 1


def run(domain, guard, max_checks=None):
    """Drives a domain's check to a final verdict.

    :param domain: the ComplianceDomain to run
    :param guard: the RecoveryGuard of the current invocation
    :param max_checks: optional explicit bound on check() calls
    :returns: PASS, FAIL or UNKNOWN
    """
    check = domain.check
    if max_checks is None:
        max_checks = max_checks_for(check)

    for attempt in range(1, max_checks + 1):
        log("Checking '%s' (pass %d)" % (domain.name, attempt), level=DEBUG)
        try:
            result = check.check(guard)
        except Exception as e:
            log("Check '%s' raised %s: %s" %
                (domain.name, e.__class__.__name__, e), level=ERROR)
            log(format_exc(), level=DEBUG)
            return UNKNOWN

        if result == PASS:
            return PASS
        if result == FAIL:
            return FAIL
        if result != RECOVERED:
            log("Check '%s' returned unexpected result '%s'" %
                (domain.name, result), level=ERROR)
            return UNKNOWN

        log("Recovery applied for '%s', checking again" % domain.name,
            level=INFO)

    log("Check '%s' still recovering after %d passes" %
        (domain.name, max_checks), level=ERROR)
    return UNKNOWN
