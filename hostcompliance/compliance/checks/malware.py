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

from hostcompliance.core import host
from hostcompliance.core.agentenv import (
    log,
    INFO,
)
from hostcompliance.compliance import utils
from hostcompliance.compliance.base_check import (
    BaseCheck,
    Condition,
)
from hostcompliance.compliance.recovery import TemplatedFileAction


class MalwareScanContext(object):

    def __call__(self):
        settings = utils.get_settings('compliance')['malware']
        scanner = host.executable(settings['scanner']) or settings['scanner']
        return {'schedule': settings['schedule'],
                'scanner': scanner,
                'scan_paths': settings['scan_paths'],
                'scan_log': settings['scan_log']}


class MalwareCheck(BaseCheck):
    """Verifies that anti-malware scans are scheduled.

    Conditions, in order:
      1. a scan job running the scanner is scheduled (recoverable: install
         the cron job),
      2. the scanner is installed (terminal).
    """
    name = 'malware'

    def get_conditions(self):
        settings = utils.get_settings('compliance')
        self.settings = settings['malware']
        unless = utils.remediation_disabled(settings)
        return [
            Condition('malware scan scheduled in %s' %
                      self.settings['cron_path'],
                      self.scan_scheduled,
                      TemplatedFileAction('malware-scan-schedule',
                                          self.settings['cron_path'],
                                          MalwareScanContext(),
                                          template='malware-scan-cron',
                                          mode=0o644, unless=unless)),
            Condition('scanner %s installed' % self.settings['scanner'],
                      self.scanner_installed, None),
        ]

    def scan_scheduled(self):
        scanner = os.path.basename(self.settings['scanner'])
        for job in host.cron_jobs(self.settings['cron_path']):
            command = job.command.split()
            if command and os.path.basename(command[0]) == scanner:
                return True
        return False

    def scanner_installed(self):
        if host.executable(self.settings['scanner']) is None:
            log("Scanner %s not found" % self.settings['scanner'],
                level=INFO)
            return False
        return True
