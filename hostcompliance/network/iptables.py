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

"""
This module contains helpers to inspect and load iptables rulesets.

Rulesets are read in iptables-save format:

  >>> from hostcompliance.network import iptables
  >>> ruleset = iptables.parse(open('/etc/iptables/rules.v4').read())
  >>> len(ruleset.rules), ruleset.policy('INPUT')
  (4, 'DROP')
"""
import os
import shlex
import subprocess

from collections import namedtuple

from netaddr import IPNetwork, AddrFormatError

from hostcompliance.core.agentenv import (
    log,
    DEBUG,
)

ANYWHERE = IPNetwork('0.0.0.0/0')

Rule = namedtuple('Rule', ['table', 'chain', 'target', 'protocol',
                           'source', 'destination', 'dport'])


class IptablesError(ValueError):
    pass


class Ruleset(object):
    """Rules and built-in chain policies parsed from iptables-save output."""

    def __init__(self):
        self.rules = []
        self.policies = {}

    def __len__(self):
        return len(self.rules)

    def policy(self, chain, table='filter'):
        return self.policies.get((table, chain))

    def chain(self, chain, table='filter'):
        return [r for r in self.rules
                if r.table == table and r.chain == chain]


def _network(value):
    try:
        return IPNetwork(value)
    except (AddrFormatError, ValueError):
        raise IptablesError("Invalid address '%s'" % value)


def parse_rule(table, spec):
    """Parse one '-A CHAIN ...' line into a Rule."""
    args = shlex.split(spec)
    if len(args) < 2 or args[0] != '-A':
        raise IptablesError("Not an append rule: '%s'" % spec)

    fields = {'chain': args[1], 'target': None, 'protocol': None,
              'source': ANYWHERE, 'destination': ANYWHERE, 'dport': None}
    options = {'-j': 'target', '--jump': 'target',
               '-p': 'protocol', '--protocol': 'protocol',
               '-s': 'source', '--source': 'source',
               '-d': 'destination', '--destination': 'destination',
               '--dport': 'dport', '--destination-port': 'dport'}

    i = 2
    while i < len(args):
        opt = args[i]
        if opt == '!' and i + 1 < len(args):
            # negation does not change which fields a rule sets
            i += 1
            opt = args[i]
        key = options.get(opt)
        if key and i + 1 < len(args):
            value = args[i + 1]
            if key in ('source', 'destination'):
                value = _network(value)
            fields[key] = value
            i += 2
        else:
            i += 1
    return Rule(table=table, **fields)


def parse(text):
    """Parse iptables-save formatted text.

    :param text: iptables-save output or a rules file
    :returns: Ruleset
    :raises IptablesError: on a malformed rule or address
    """
    ruleset = Ruleset()
    table = None
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith('#') or line == 'COMMIT':
            continue
        if line.startswith('*'):
            table = line[1:]
        elif line.startswith(':'):
            parts = line[1:].split()
            if len(parts) >= 2:
                ruleset.policies[(table, parts[0])] = parts[1]
        elif line.startswith('-A'):
            if table is None:
                raise IptablesError("Rule outside of a table: '%s'" % line)
            ruleset.rules.append(parse_rule(table, line))
    return ruleset


def current_ruleset():
    """Ruleset loaded in the kernel.

    Raises CalledProcessError or OSError if iptables-save fails.
    """
    output = subprocess.check_output(['iptables-save'],
                                     universal_newlines=True,
                                     env={'LANG': 'C',
                                          'PATH': os.environ['PATH']})
    ruleset = parse(output)
    log("Live ruleset has %d rules" % len(ruleset), level=DEBUG)
    return ruleset


def file_ruleset(path):
    """Ruleset stored in a rules file, or None if the file does not exist."""
    if not os.path.exists(path):
        return None
    with open(path, 'r') as rules:
        return parse(rules.read())


def restore(path):
    """Load a rules file into the kernel with iptables-restore.

    :returns: True if iptables-restore succeeded
    """
    log("Loading firewall rules from %s" % path, level=DEBUG)
    with open(path, 'r') as rules:
        return subprocess.call(['iptables-restore'], stdin=rules) == 0
