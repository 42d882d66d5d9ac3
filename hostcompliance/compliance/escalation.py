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

"""Grace period and shutdown escalation for non-compliant hosts.

The controller keeps a single marker file holding the shutdown deadline as
seconds since the epoch. The deadline is anchored at the first failing run
and is only removed once a run is fully compliant again.
"""

import datetime
import os
import time

from jinja2 import TemplateError

from hostcompliance.core import host
from hostcompliance.core import templating
from hostcompliance.core.agentenv import (
    log,
    ERROR,
    INFO,
    WARNING,
)
from hostcompliance.compliance import DAY
from hostcompliance.compliance.recovery import TEMPLATES_DIR

COMPLIANT = "COMPLIANT"
ESCALATING = "ESCALATING"
NOTICE_TAG = 'host-compliance'


class EscalationController(object):

    def __init__(self, marker_path, grace_period=7 * DAY,
                 shutdown_delay=15, notice_path='/etc/motd',
                 server_mode=False, clock=time.time):
        self.marker_path = marker_path
        self.grace_period = grace_period
        self.shutdown_delay = shutdown_delay
        self.notice_path = notice_path
        self.server_mode = server_mode
        self.clock = clock

    @classmethod
    def from_settings(cls, settings):
        esc = settings['escalation']
        return cls(esc['marker_path'],
                   grace_period=esc['grace_period_days'] * DAY,
                   shutdown_delay=esc['shutdown_delay_minutes'],
                   notice_path=esc['notice_path'],
                   server_mode=esc['server_mode'])

    @property
    def state(self):
        if os.path.exists(self.marker_path):
            return ESCALATING
        return COMPLIANT

    def deadline(self):
        """The recorded shutdown deadline, or None if there is none.

        A marker that cannot be parsed is reported and treated as absent.
        """
        if not os.path.exists(self.marker_path):
            return None
        try:
            with open(self.marker_path) as marker:
                return int(marker.read().strip())
        except (IOError, OSError, ValueError) as e:
            log("Ignoring unreadable escalation marker %s: %s" %
                (self.marker_path, e), level=WARNING)
            return None

    def _record_deadline(self, deadline):
        parent = os.path.dirname(self.marker_path)
        if parent and not os.path.isdir(parent):
            os.makedirs(parent, 0o755)
        with open(self.marker_path, 'w') as marker:
            marker.write('%d\n' % deadline)

    def update(self, compliant):
        """Advances the escalation state machine after a run.

        :param compliant: overall result of the run
        :returns: the resulting state, COMPLIANT or ESCALATING
        """
        if compliant:
            self._clear()
            return COMPLIANT

        now = self.clock()
        deadline = self.deadline()
        if deadline is None:
            deadline = int(now + self.grace_period)
            try:
                self._record_deadline(deadline)
            except (IOError, OSError) as e:
                log("Unable to record escalation deadline in %s: %s" %
                    (self.marker_path, e), level=ERROR)
            log("Host not compliant, shutdown deadline set to %s" %
                _fmt(deadline), level=WARNING)
        else:
            log("Host still not compliant, shutdown deadline is %s" %
                _fmt(deadline), level=WARNING)

        if self.server_mode:
            log("Server mode: no warning or shutdown issued", level=INFO)
            return ESCALATING

        self._warn(deadline, now)
        if now >= deadline:
            log("Compliance deadline %s has passed" % _fmt(deadline),
                level=ERROR)
            host.shutdown(self.shutdown_delay,
                          self._message('shutdown-message', deadline, now))
        return ESCALATING

    def _clear(self):
        if os.path.exists(self.marker_path):
            log("Host compliant again, clearing escalation deadline",
                level=INFO)
            try:
                os.unlink(self.marker_path)
            except OSError as e:
                log("Unable to remove escalation marker %s: %s" %
                    (self.marker_path, e), level=ERROR)
        try:
            host.remove_notice(self.notice_path, NOTICE_TAG)
        except (IOError, OSError) as e:
            log("Unable to remove login notice from %s: %s" %
                (self.notice_path, e), level=ERROR)

    def _warn(self, deadline, now):
        try:
            host.append_notice(self.notice_path, NOTICE_TAG,
                               self._message('login-notice', deadline, now))
        except (IOError, OSError) as e:
            log("Unable to install login notice in %s: %s" %
                (self.notice_path, e), level=ERROR)
        host.broadcast(self._message('broadcast-message', deadline, now))

    def _message(self, template, deadline, now):
        ctxt = {'deadline': _fmt(deadline),
                'remaining_days': max(0, int((deadline - now) // DAY)),
                'overdue': now >= deadline,
                'shutdown_delay': self.shutdown_delay}
        try:
            return templating.render(TEMPLATES_DIR, template, ctxt)
        except TemplateError as e:
            log("Unable to render %s: %s" % (template, e), level=ERROR)
            return ("This host is not compliant with the security baseline "
                    "and will be shut down after %s." % ctxt['deadline'])


def _fmt(timestamp):
    return datetime.datetime.fromtimestamp(timestamp).strftime(
        '%Y-%m-%d %H:%M:%S')
