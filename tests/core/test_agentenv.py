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

import datetime
import io
import os

from tests.helpers import TempDirTestCase

from hostcompliance.core import agentenv


class LogTestCase(TempDirTestCase):

    def test_log_to_stream(self):
        out = io.StringIO()
        agentenv.log_to(stream=out)
        agentenv.log('firewall: PASS', level=agentenv.WARNING)
        self.assertEqual('WARNING firewall: PASS\n', out.getvalue())

    def test_default_level_is_info(self):
        out = io.StringIO()
        agentenv.log_to(stream=out)
        agentenv.log('hello')
        self.assertEqual('INFO hello\n', out.getvalue())

    def test_below_threshold_dropped(self):
        out = io.StringIO()
        agentenv.log_to(stream=out, level=agentenv.WARNING)
        agentenv.log('noise', level=agentenv.DEBUG)
        agentenv.log('more noise', level=agentenv.INFO)
        agentenv.log('problem', level=agentenv.ERROR)
        self.assertEqual('ERROR problem\n', out.getvalue())

    def test_log_to_file_appends(self):
        path = self.path('compliance.log')
        with open(path, 'w') as f:
            f.write('INFO earlier run\n')
        agentenv.log_to(path=path)
        agentenv.log('first')
        agentenv.log('second', level=agentenv.ERROR)
        with open(path) as f:
            self.assertEqual(['INFO earlier run\n', 'INFO first\n',
                              'ERROR second\n'], f.readlines())

    def test_unwritable_log_ignored(self):
        agentenv.log_to(path=self.path('missing', 'dir', 'compliance.log'))
        agentenv.log('lost')
        self.assertFalse(os.path.exists(self.path('missing')))

    def test_invalid_level(self):
        self.assertRaises(ValueError, agentenv.log_to, path=None,
                          level='LOUD')

    def test_run_header_and_footer(self):
        out = io.StringIO()
        agentenv.log_to(stream=out)
        agentenv.log_run_header(datetime.datetime(2026, 10, 19, 12, 30, 5,
                                                  1234))
        agentenv.log('firewall: PASS')
        agentenv.log_run_footer()
        self.assertEqual('==== host-compliance run 2026-10-19T12:30:05 ====\n'
                         'INFO firewall: PASS\n'
                         '\n', out.getvalue())
