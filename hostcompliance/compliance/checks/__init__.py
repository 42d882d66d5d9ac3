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

from hostcompliance.core.agentenv import (
    log,
    DEBUG,
)
from hostcompliance.compliance import ComplianceDomain
from hostcompliance.compliance.checks import (
    authentication,
    firewall,
    malware,
    software,
)

# domains are always run in this order
CHECKS = OrderedDict([('firewall', firewall.FirewallCheck),
                      ('software', software.SoftwareCheck),
                      ('malware', malware.MalwareCheck),
                      ('authentication', authentication.AuthenticationCheck)])


def get_domains():
    """Builds the compliance domains for this run.

    :returns: list of ComplianceDomain in run order
    """
    domains = []
    for name, check_class in CHECKS.items():
        check = check_class()
        log("Loaded '%s' check with %d conditions" %
            (name, len(check.conditions)), level=DEBUG)
        domains.append(ComplianceDomain(name, check, check.actions()))
    return domains
