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
import subprocess

from unittest import TestCase

from mock import patch

from tests.helpers import TempDirTestCase

from hostcompliance import fetch

SIMULATED_UPGRADE = """Reading package lists...
Building dependency tree...
Reading state information...
Calculating upgrade...
The following packages will be upgraded:
  libssl3 openssl tzdata
3 upgraded, 1 newly installed, 0 to remove and 0 not upgraded.
Inst libssl3 [3.0.2-0ubuntu1.10] (3.0.2-0ubuntu1.12 Ubuntu:22.04/jammy-updates, Ubuntu:22.04/jammy-security [amd64])
Inst openssl [3.0.2-0ubuntu1.10] (3.0.2-0ubuntu1.12 Ubuntu:22.04/jammy-security [amd64])
Inst tzdata [2024a-0ubuntu0.22.04] (2024b-0ubuntu0.22.04 Ubuntu:22.04/jammy-updates [all])
Inst linux-image-5.15.0-101 (5.15.0-101.111 Ubuntu:22.04/jammy-updates [amd64])
Conf libssl3 (3.0.2-0ubuntu1.12 Ubuntu:22.04/jammy-security [amd64])
Conf openssl (3.0.2-0ubuntu1.12 Ubuntu:22.04/jammy-security [amd64])
"""


class FetchTestCase(TestCase):

    def test_parse_simulated_upgrade(self):
        pending = fetch.parse_simulated_upgrade(SIMULATED_UPGRADE)
        self.assertEqual(fetch.PendingUpgrades(4, 2), pending)

    def test_parse_nothing_pending(self):
        self.assertEqual((0, 0), fetch.parse_simulated_upgrade(
            "0 upgraded, 0 newly installed, 0 to remove.\n"))

    @patch('subprocess.check_output')
    def test_pending_upgrades(self, check_output):
        check_output.return_value = SIMULATED_UPGRADE
        self.assertEqual((4, 2), fetch.pending_upgrades())
        args, kwargs = check_output.call_args
        self.assertEqual(['apt-get', '--simulate', '--quiet', 'dist-upgrade'],
                         args[0])
        self.assertEqual('C', kwargs['env']['LANG'])

    @patch('subprocess.check_output')
    def test_pending_upgrades_failure(self, check_output):
        check_output.side_effect = subprocess.CalledProcessError(100, 'apt')
        self.assertRaises(subprocess.CalledProcessError,
                          fetch.pending_upgrades)

    @patch('subprocess.call')
    def test_apt_update(self, call):
        call.return_value = 0
        self.assertTrue(fetch.apt_update())
        args, kwargs = call.call_args
        self.assertEqual(['apt-get', 'update'], args[0])
        self.assertEqual('noninteractive', kwargs['env']['DEBIAN_FRONTEND'])

    @patch('subprocess.call')
    def test_apt_update_failure(self, call):
        call.return_value = 100
        self.assertFalse(fetch.apt_update())

    @patch('subprocess.check_call')
    def test_apt_update_fatal(self, check_call):
        self.assertTrue(fetch.apt_update(fatal=True))
        self.assertEqual(['apt-get', 'update'], check_call.call_args[0][0])


class AptUpdateStampTestCase(TempDirTestCase):

    @patch('subprocess.call')
    def test_stamp_touched_on_success(self, call):
        call.return_value = 0
        stamp = self.path('state', 'apt-lists-refreshed')
        self.assertTrue(fetch.apt_update(stamp=stamp))
        self.assertTrue(os.path.exists(stamp))

    @patch('subprocess.call')
    def test_stamp_untouched_on_failure(self, call):
        call.return_value = 100
        stamp = self.path('apt-lists-refreshed')
        self.assertFalse(fetch.apt_update(stamp=stamp))
        self.assertFalse(os.path.exists(stamp))
