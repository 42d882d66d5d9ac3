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

import os

from hostcompliance import fetch
from hostcompliance.core import host
from hostcompliance.core.agentenv import (
    log,
    INFO,
)
from hostcompliance.compliance import (
    DAY,
    utils,
)
from hostcompliance.compliance.base_check import (
    BaseCheck,
    Condition,
)
from hostcompliance.compliance.recovery import (
    CommandAction,
    TemplatedFileAction,
)


class SoftwareCheck(BaseCheck):
    """Verifies that installed software is kept current.

    Conditions, in order:
      1. an automatic update job is scheduled (recoverable: install the
         cron job),
      2. package lists were refreshed recently (recoverable: apt-get update),
      3. pending security updates are within limit (terminal),
      4. pending updates are within limit (terminal).
    """
    name = 'software'

    def __init__(self, *args, **kwargs):
        self._pending = None
        super(SoftwareCheck, self).__init__(*args, **kwargs)

    def get_conditions(self):
        settings = utils.get_settings('compliance')
        self.settings = settings['software']
        unless = utils.remediation_disabled(settings)
        cron_context = {'schedule': self.settings['schedule'],
                        'lists_stamp': self.settings['lists_stamp'],
                        'stamp_dir':
                        os.path.dirname(self.settings['lists_stamp'])}
        return [
            Condition('automatic updates scheduled in %s' %
                      self.settings['cron_path'],
                      self.updates_scheduled,
                      TemplatedFileAction('software-update-schedule',
                                          self.settings['cron_path'],
                                          cron_context,
                                          template='updates-cron',
                                          mode=0o644, unless=unless)),
            Condition('package lists refreshed within %d days' %
                      self.settings['max_list_age_days'],
                      self.lists_fresh,
                      CommandAction('software-refresh-lists',
                                    self.refresh_lists, unless=unless)),
            Condition('at most %d pending security updates' %
                      self.settings['max_security_updates'],
                      self.security_updates_within_limit, None),
            Condition('at most %d pending updates' %
                      self.settings['max_pending_updates'],
                      self.updates_within_limit, None),
        ]

    def check(self, guard):
        # The pending upgrade count is shared by the last two conditions of
        # a single pass only.
        self._pending = None
        return super(SoftwareCheck, self).check(guard)

    def pending(self):
        if self._pending is None:
            self._pending = fetch.pending_upgrades()
        return self._pending

    def updates_scheduled(self):
        jobs = host.cron_jobs(self.settings['cron_path'])
        return any('apt-get' in job.command for job in jobs)

    def refresh_lists(self):
        return fetch.apt_update(stamp=self.settings['lists_stamp'])

    def lists_age(self):
        """Seconds since the package lists were last refreshed, or None.

        The refresh stamp is written by this agent and by the update cron
        job. The lists directory covers refreshes made by anything else.
        """
        paths = (self.settings['lists_stamp'], self.settings['lists_dir'])
        ages = [host.file_age(path) for path in paths]
        ages = [age for age in ages if age is not None]
        return min(ages) if ages else None

    def lists_fresh(self):
        age = self.lists_age()
        if age is None:
            log("No record of a package list refresh in %s or %s" %
                (self.settings['lists_stamp'], self.settings['lists_dir']),
                level=INFO)
            return False
        return age <= self.settings['max_list_age_days'] * DAY

    def security_updates_within_limit(self):
        security = self.pending().security
        if security > self.settings['max_security_updates']:
            log("%d security updates pending" % security, level=INFO)
            return False
        return True

    def updates_within_limit(self):
        total = self.pending().total
        if total > self.settings['max_pending_updates']:
            log("%d updates pending" % total, level=INFO)
            return False
        return True
