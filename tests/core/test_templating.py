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
import stat

from mock import patch

from tests.helpers import TempDirTestCase, write

from hostcompliance.core import host, templating


class TemplatingTestCase(TempDirTestCase):

    def setUp(self):
        super(TemplatingTestCase, self).setUp()
        self.templates = self.path('templates')
        write(os.path.join(self.templates, 'rules'),
              'policy={{ policy }}\n')
        write(os.path.join(self.templates, 'empty'), '')

    def test_render(self):
        self.assertEqual('policy=DROP\n',
                         templating.render(self.templates, 'rules',
                                           {'policy': 'DROP'}))

    def test_render_and_write(self):
        path = self.path('out')
        self.assertTrue(templating.render_and_write(
            self.templates, path, {'policy': 'DROP'}, template_file='rules',
            perms=0o640))
        with open(path) as f:
            self.assertEqual('policy=DROP\n', f.read())
        self.assertEqual(0o640, stat.S_IMODE(os.stat(path).st_mode))

    def test_template_defaults_to_basename(self):
        path = self.path('rules')
        templating.render_and_write(self.templates, path, {'policy': 'X'})
        with open(path) as f:
            self.assertEqual('policy=X\n', f.read())

    def test_empty_render_skipped(self):
        path = self.path('out')
        written = templating.render_and_write(self.templates, path, {},
                                              template_file='empty')
        self.assertFalse(written)
        self.assertFalse(os.path.exists(path))

    def test_rewrite_replaces_existing_file(self):
        path = self.path('common-password')
        write(path, 'password required pam_unix.so\n')
        os.chmod(path, 0o600)
        templating.render_and_write(self.templates, path, {'policy': 'Y'},
                                    template_file='rules')
        with open(path) as f:
            self.assertEqual('policy=Y\n', f.read())
        self.assertEqual(0o600, stat.S_IMODE(os.stat(path).st_mode))
        self.assertEqual(['common-password', 'templates'],
                         sorted(os.listdir(self.tmp)))

    def test_failed_write_keeps_original(self):
        path = self.path('common-password')
        write(path, 'password required pam_unix.so\n')
        with patch.object(host.os, 'rename', side_effect=OSError('full')):
            self.assertRaises(OSError, templating.render_and_write,
                              self.templates, path, {'policy': 'Y'},
                              template_file='rules')
        with open(path) as f:
            self.assertEqual('password required pam_unix.so\n', f.read())
        self.assertEqual(['common-password', 'templates'],
                         sorted(os.listdir(self.tmp)))
