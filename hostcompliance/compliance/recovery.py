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

from traceback import format_exc

from jinja2 import TemplateError

from hostcompliance.core.agentenv import (
    log,
    DEBUG,
    ERROR,
    INFO,
    WARNING,
)
from hostcompliance.core import templating
from hostcompliance.compliance import (
    OK,
    ALREADY_ATTEMPTED,
    FAILED,
)

TEMPLATES_DIR = os.path.join(os.path.dirname(__file__), 'templates')


class RecoveryAction(object):  # NO-QA
    """Base class for recovery actions.

    A recovery action performs one mutation against the single external
    resource it owns. It runs at most once per RecoveryGuard: the first call
    to apply() claims the guard and mutates, every later call returns
    ALREADY_ATTEMPTED without touching the system. Actions never verify
    their own result; the check that invoked them does so on its next pass.
    """
    def __init__(self, name, *args, **kwargs):
        self.name = name
        self.unless = kwargs.get('unless', None)
        super(RecoveryAction, self).__init__()

    def apply(self, guard):
        """Runs the action unless it already ran under this guard.

        :param guard: the RecoveryGuard of the current invocation.
        :returns: OK, ALREADY_ATTEMPTED or FAILED
        """
        if guard.attempted(self.name):
            log("Recovery '%s' already tried in this run" % self.name,
                level=WARNING)
            return ALREADY_ATTEMPTED

        if not self._take_action():
            log("Recovery '%s' skipped, automatic remediation is disabled" %
                self.name, level=INFO)
            return FAILED

        guard.claim(self.name)
        log("Applying recovery '%s'" % self.name, level=INFO)
        try:
            applied = self.comply()
        except (OSError, subprocess.CalledProcessError, TemplateError) as e:
            log("Recovery '%s' failed: %s" % (self.name, e), level=ERROR)
            log(format_exc(), level=DEBUG)
            return FAILED

        if applied is False:
            log("Recovery '%s' failed" % self.name, level=ERROR)
            return FAILED

        return OK

    def comply(self):
        """Performs the mutation.

        :returns: False if the mutation reported failure, anything else
                  counts as success. OSError and CalledProcessError are
                  treated as failure by apply().
        """
        raise NotImplementedError

    def _take_action(self):
        """False when remediation is switched off for this action.

        unless is read when the action is applied, not when it is built, so
        a callable sees the settings of the current run.
        """
        unless = self.unless
        if callable(unless):
            unless = unless()
        return not unless

    def __repr__(self):
        return '<%s %s>' % (self.__class__.__name__, self.name)


class TemplatedFileAction(RecoveryAction):
    """Renders a template into the one file the action owns.

    :param name: the action name, unique within a run
    :param path: the file written by the action
    :param context: dict, or callable returning the template context
    :param template: template name, defaults to basename of path
    :param mode: permissions of the written file
    """
    def __init__(self, name, path, context, template=None,
                 template_dir=TEMPLATES_DIR, mode=0o644, **kwargs):
        super(TemplatedFileAction, self).__init__(name, **kwargs)
        self.path = path
        self.context = context
        self.template = template
        self.template_dir = template_dir
        self.mode = mode

    def comply(self):
        context = self.context
        if hasattr(context, '__call__'):
            context = context()

        parent = os.path.dirname(self.path)
        if parent and not os.path.isdir(parent):
            log("Creating directory %s" % parent, level=DEBUG)
            os.makedirs(parent, 0o755)

        return templating.render_and_write(self.template_dir, self.path,
                                           context,
                                           template_file=self.template,
                                           perms=self.mode)


class CommandAction(RecoveryAction):
    """Runs a command that mutates the one resource the action owns.

    :param name: the action name, unique within a run
    :param func: callable performing the command, returning False on failure
    """
    def __init__(self, name, func, *args, **kwargs):
        super(CommandAction, self).__init__(name, **kwargs)
        self.func = func
        self.args = args

    def comply(self):
        return self.func(*self.args)
