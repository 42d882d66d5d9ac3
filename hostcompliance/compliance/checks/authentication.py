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

from hostcompliance.core.agentenv import (
    log,
    INFO,
    WARNING,
)
from hostcompliance.compliance import (
    pam,
    shadow,
    utils,
)
from hostcompliance.compliance.base_check import (
    BaseCheck,
    Condition,
)
from hostcompliance.compliance.recovery import TemplatedFileAction


class PasswordPAMContext(object):

    def __call__(self):
        settings = utils.get_settings('compliance')
        return {'minlen': settings['authentication']['pwquality_minlen']}


class AuthenticationCheck(BaseCheck):
    """Verifies authentication configuration and the credential stores.

    Conditions, in order:
      1. the PAM password stack carries the required directives
         (recoverable: write the baseline file),
      2. no account has an empty password (recoverable: lock them),
      3. every set password uses an allowed hash scheme (terminal),
      4. passwd and shadow list the same users (terminal). The stores are
         the source of truth for identities and are never reconciled
         automatically.
    """
    name = 'authentication'

    def get_conditions(self):
        settings = utils.get_settings('compliance')
        self.settings = settings['authentication']
        unless = utils.remediation_disabled(settings)
        return [
            Condition('PAM directives present in %s' %
                      self.settings['pam_path'],
                      self.pam_compliant,
                      TemplatedFileAction('authentication-pam-baseline',
                                          self.settings['pam_path'],
                                          PasswordPAMContext(),
                                          template='common-password',
                                          mode=0o644, unless=unless)),
            Condition('no accounts with an empty password',
                      self.no_empty_passwords,
                      shadow.LockEmptyPasswordsAction(
                          self.settings['shadow_path'], unless=unless)),
            Condition('passwords use allowed hash schemes',
                      self.hashes_allowed, None),
            Condition('passwd and shadow list the same users',
                      self.stores_consistent, None),
        ]

    def pam_compliant(self):
        directives = pam.read(self.settings['pam_path'])
        if directives is None:
            log("PAM file %s does not exist" % self.settings['pam_path'],
                level=INFO)
            return False

        missing = pam.missing(directives,
                              self.settings['required_directives'])
        for facility, module, expected, found in missing:
            log("PAM %s %s present %d time(s), expected %d" %
                (facility, module, found, expected), level=INFO)
        return not missing

    def no_empty_passwords(self):
        users = shadow.empty_password_users(self.settings['shadow_path'])
        if users:
            log("Accounts without password: %s" % ', '.join(users),
                level=INFO)
        return not users

    def hashes_allowed(self):
        users = shadow.weak_hash_users(
            [str(s) for s in self.settings['allowed_hash_schemes']],
            self.settings['shadow_path'])
        if users:
            log("Accounts with a weak password hash: %s" % ', '.join(users),
                level=INFO)
        return not users

    def stores_consistent(self):
        only_passwd, only_shadow = shadow.inconsistent_users(
            self.settings['passwd_path'], self.settings['shadow_path'])
        if only_passwd:
            log("Users missing from %s: %s" %
                (self.settings['shadow_path'], ', '.join(only_passwd)),
                level=WARNING)
        if only_shadow:
            log("Users missing from %s: %s" %
                (self.settings['passwd_path'], ', '.join(only_shadow)),
                level=WARNING)
        return not (only_passwd or only_shadow)
