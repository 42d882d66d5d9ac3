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

import argparse
import sys

import yaml

from hostcompliance.core import agentenv
from hostcompliance.core.agentenv import (
    log,
    ERROR,
)
from hostcompliance.compliance import (
    checks,
    orchestrator,
    utils,
)
from hostcompliance.compliance.escalation import EscalationController


class UsageError(Exception):
    pass


class ArgumentParser(argparse.ArgumentParser):
    "Parser that reports bad arguments to the caller instead of exiting"

    def error(self, message):
        raise UsageError(message)


def build_parser():
    parser = ArgumentParser(
        prog='host-compliance', add_help=False, allow_abbrev=False,
        description='Audit this host against the security baseline. '
                    'Normal runs write to the compliance log and may '
                    'escalate to a shutdown; interactive runs only report.')
    parser.add_argument('-i', '--interactive', action='store_true',
                        help='Report to standard output, never escalate')
    return parser


def parse_args(argv):
    """Returns the parsed arguments, or None if argv is not a valid
    invocation.

    Only the bare command and the interactive flag spelled in full are
    accepted; abbreviations and grouped short flags are rejected.
    """
    if list(argv) not in ([], ['-i'], ['--interactive']):
        return None
    try:
        return build_parser().parse_args(argv)
    except UsageError:
        return None


def _configure_logging(interactive, settings=None):
    level = settings['log']['level'] if settings else None
    if interactive:
        agentenv.log_to(stream=sys.stdout, level=level)
    else:
        path = settings['log']['path'] if settings else \
            agentenv.DEFAULT_LOG_PATH
        agentenv.log_to(path=path, level=level)


def main(argv=None):
    """Runs the compliance agent.

    :returns: process exit code, 0 when the host is compliant
    """
    argv = sys.argv[1:] if argv is None else argv
    arguments = parse_args(argv)
    if arguments is None:
        build_parser().print_usage(sys.stdout)
        return 0

    interactive = arguments.interactive
    _configure_logging(interactive)
    try:
        settings = utils.get_settings('compliance')
        _configure_logging(interactive, settings)
        domains = checks.get_domains()
    except (IOError, OSError, ValueError, yaml.YAMLError) as e:
        log("Unable to load compliance configuration: %s" % e, level=ERROR)
        return 1

    escalation = None
    if not interactive:
        escalation = EscalationController.from_settings(settings)

    report = orchestrator.run_compliance(domains, escalation)
    return report.exit_code
