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

''' General helper functions for tests '''
import copy
import os
import shutil
import tempfile

from unittest import TestCase

from hostcompliance.core import agentenv
from hostcompliance.compliance import utils
from hostcompliance.compliance.base_check import BaseCheck


def make_settings(root, **overrides):
    '''Default settings with every path moved under root.

    Keyword arguments update the named section, eg:

        make_settings(tmp, firewall={'min_rules': 3})
    '''
    settings = copy.deepcopy(utils._get_defaults('compliance'))
    settings['log']['path'] = os.path.join(root, 'compliance.log')
    settings['escalation'].update({
        'marker_path': os.path.join(root, 'state', 'critical-time'),
        'notice_path': os.path.join(root, 'motd')})
    settings['firewall']['rules_path'] = os.path.join(root, 'iptables',
                                                      'rules.v4')
    settings['software'].update({
        'cron_path': os.path.join(root, 'cron.d', 'updates'),
        'lists_stamp': os.path.join(root, 'apt-lists-refreshed'),
        'lists_dir': os.path.join(root, 'apt', 'lists')})
    settings['malware'].update({
        'cron_path': os.path.join(root, 'cron.d', 'malware-scan'),
        'scan_log': os.path.join(root, 'malware.log')})
    settings['authentication'].update({
        'pam_path': os.path.join(root, 'pam.d', 'common-password'),
        'passwd_path': os.path.join(root, 'passwd'),
        'shadow_path': os.path.join(root, 'shadow')})
    for section, values in overrides.items():
        settings[section].update(values)
    return settings


def write(path, content):
    parent = os.path.dirname(path)
    if parent and not os.path.isdir(parent):
        os.makedirs(parent)
    with open(path, 'w') as f:
        f.write(content)


class TempDirTestCase(TestCase):
    '''Test case with a scratch directory and a quiet log.'''

    def setUp(self):
        super(TempDirTestCase, self).setUp()
        self.tmp = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, self.tmp)
        self.addCleanup(agentenv.log_to, path=None, level=agentenv.INFO)

    def path(self, *parts):
        return os.path.join(self.tmp, *parts)


class CountingCheck(BaseCheck):
    '''BaseCheck over explicit conditions that counts check() calls.'''
    name = 'counting'

    def __init__(self, conditions):
        self.calls = 0
        super(CountingCheck, self).__init__(conditions=conditions)

    def check(self, guard):
        self.calls += 1
        return super(CountingCheck, self).check(guard)
