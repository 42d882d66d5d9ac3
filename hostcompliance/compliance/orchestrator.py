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

from collections import OrderedDict

from hostcompliance.core import agentenv
from hostcompliance.core.agentenv import (
    log,
    DEBUG,
    ERROR,
    INFO,
)
from hostcompliance.compliance import (
    PASS,
    RecoveryGuard,
    runner,
)


class RunReport(object):
    """Verdicts of one run, in domain order."""

    def __init__(self):
        self.verdicts = OrderedDict()

    def add(self, name, verdict):
        self.verdicts[name] = verdict

    @property
    def compliant(self):
        return all(v == PASS for v in self.verdicts.values())

    @property
    def exit_code(self):
        return 0 if self.compliant else 1


def run_compliance(domains, escalation=None, guard=None):
    """Runs every domain once and escalates on failure.

    :param domains: list of ComplianceDomain, in run order
    :param escalation: EscalationController, or None to skip escalation
                       (interactive mode)
    :param guard: RecoveryGuard for this invocation, a new one by default
    :returns: RunReport
    """
    guard = guard if guard is not None else RecoveryGuard()
    report = RunReport()

    agentenv.log_run_header()
    for domain in domains:
        verdict = runner.run(domain, guard)
        report.add(domain.name, verdict)
        log('%s: %s' % (domain.name, verdict),
            level=INFO if verdict == PASS else ERROR)

    if report.compliant:
        log('Host is compliant', level=INFO)
    else:
        log('Host is not compliant', level=ERROR)

    if guard.history:
        log('Recoveries attempted: %s' % ', '.join(guard.history),
            level=DEBUG)

    if escalation is not None:
        escalation.update(report.compliant)
    agentenv.log_run_footer()
    return report
