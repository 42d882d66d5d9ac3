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

from netaddr import IPNetwork, AddrFormatError

from hostcompliance.core.agentenv import (
    log,
    INFO,
    WARNING,
)
from hostcompliance.network import iptables
from hostcompliance.compliance import utils
from hostcompliance.compliance.base_check import (
    BaseCheck,
    Condition,
)
from hostcompliance.compliance.recovery import (
    CommandAction,
    TemplatedFileAction,
)


class FirewallContext(object):

    def __call__(self):
        settings = utils.get_settings('compliance')['firewall']

        networks = []
        for network in settings['trusted_networks'] or []:
            try:
                networks.append(str(IPNetwork(network).cidr))
            except (AddrFormatError, ValueError):
                log("Ignoring invalid trusted network '%s'" % network,
                    level=WARNING)

        return {'input_policy': settings['input_policy'] or 'DROP',
                'ssh_port': settings['ssh_port'],
                'trusted_networks': networks}


class FirewallCheck(BaseCheck):
    """Verifies that a persistent firewall ruleset exists and is loaded.

    Conditions, in order:
      1. the rules file holds at least min_rules rules (recoverable: write
         the default ruleset),
      2. the kernel holds at least min_rules rules (recoverable: load the
         rules file),
      3. the filter INPUT chain has the required policy (terminal).
    """
    name = 'firewall'

    def get_conditions(self):
        settings = utils.get_settings('compliance')
        self.settings = settings['firewall']
        unless = utils.remediation_disabled(settings)
        rules_path = self.settings['rules_path']
        min_rules = self.settings['min_rules']

        conditions = [
            Condition('rules file %s holds at least %d rules' %
                      (rules_path, min_rules),
                      self.rules_file_present,
                      TemplatedFileAction('firewall-rules-file', rules_path,
                                          FirewallContext(),
                                          template='iptables-rules',
                                          mode=0o640, unless=unless)),
            Condition('at least %d firewall rules loaded' % min_rules,
                      self.rules_loaded,
                      CommandAction('firewall-load-rules', iptables.restore,
                                    rules_path, unless=unless)),
        ]

        if self.settings['input_policy']:
            conditions.append(
                Condition('INPUT chain policy is %s' %
                          self.settings['input_policy'],
                          self.input_policy_set, None))
        return conditions

    def rules_file_present(self):
        ruleset = iptables.file_ruleset(self.settings['rules_path'])
        if ruleset is None:
            log("Firewall rules file %s does not exist" %
                self.settings['rules_path'], level=INFO)
            return False
        return len(ruleset) >= self.settings['min_rules']

    def rules_loaded(self):
        return len(iptables.current_ruleset()) >= self.settings['min_rules']

    def input_policy_set(self):
        policy = iptables.current_ruleset().policy('INPUT')
        if policy != self.settings['input_policy']:
            log("INPUT chain policy is %s" % policy, level=INFO)
            return False
        return True
