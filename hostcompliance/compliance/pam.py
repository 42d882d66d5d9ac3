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

"""Structured reading of PAM configuration files.

Files are parsed into Directive tuples so that compliance is judged on the
presence of required (facility, module) pairs rather than on exact text.
"""

import os

from collections import namedtuple

FACILITIES = ('auth', 'account', 'password', 'session')

Directive = namedtuple('Directive', ['facility', 'control', 'module', 'args'])


def _split_control(rest):
    """Splits the control field from the rest of a directive line.

    Controls are either a keyword (required, requisite, ...) or a bracketed
    list of value=action pairs that may contain spaces.
    """
    rest = rest.lstrip()
    if rest.startswith('['):
        end = rest.find(']')
        if end < 0:
            raise ValueError("Unterminated control field: '%s'" % rest)
        return rest[:end + 1], rest[end + 1:].split()
    fields = rest.split()
    if not fields:
        raise ValueError("Missing control field")
    return fields[0], fields[1:]


def parse(text):
    """Parses PAM configuration text.

    :param text: contents of a pam.d style file
    :returns: list of Directive. '@include' lines are returned with the
              facility 'include' and the included file as module.
    :raises ValueError: on a malformed line
    """
    directives = []
    pending = ''
    for line in text.splitlines():
        line = line.split('#', 1)[0].rstrip()
        if line.endswith('\\'):
            pending += line[:-1] + ' '
            continue
        line, pending = (pending + line).strip(), ''
        if not line:
            continue

        if line.startswith('@include'):
            fields = line.split()
            if len(fields) != 2:
                raise ValueError("Malformed include: '%s'" % line)
            directives.append(Directive('include', None, fields[1], []))
            continue

        fields = line.split(None, 1)
        facility = fields[0].lstrip('-').lower()
        if facility not in FACILITIES or len(fields) < 2:
            raise ValueError("Malformed PAM directive: '%s'" % line)
        control, rest = _split_control(fields[1])
        if not rest:
            raise ValueError("Missing module in directive: '%s'" % line)
        directives.append(Directive(facility, control, rest[0], rest[1:]))
    return directives


def read(path):
    """Directives in a PAM file, or None if the file does not exist."""
    if not os.path.exists(path):
        return None
    with open(path) as f:
        return parse(f.read())


def count(directives, facility, module):
    """Number of directives using module for facility.

    Modules given as a path match on their basename.
    """
    return len([d for d in directives
                if d.facility == facility and
                os.path.basename(d.module) == module])


def missing(directives, required):
    """Required directives that are absent or present too few times.

    :param directives: parsed directives
    :param required: list of dicts with facility, module and count keys
    :returns: list of (facility, module, expected, found) tuples
    """
    result = []
    for req in required:
        expected = req.get('count', 1)
        found = count(directives, req['facility'], req['module'])
        if found < expected:
            result.append((req['facility'], req['module'], expected, found))
    return result
