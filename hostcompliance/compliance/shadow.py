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

"""Inspection and rewriting of the local credential stores.

/etc/passwd and /etc/shadow are the two authoritative user databases. Only
the password field of /etc/shadow is ever rewritten, and only to lock
accounts that have no password at all.
"""

from hostcompliance.core import host
from hostcompliance.core.agentenv import (
    log,
    WARNING,
)
from hostcompliance.compliance.recovery import RecoveryAction

LOCKED = '!'


def _records(path):
    with open(path) as f:
        for line in f:
            line = line.rstrip('\n')
            if not line or line.startswith('#'):
                continue
            yield line.split(':')


def passwd_users(path='/etc/passwd'):
    return [r[0] for r in _records(path)]


def shadow_passwords(path='/etc/shadow'):
    """Returns (user, password field) pairs from a shadow file."""
    result = []
    for record in _records(path):
        if len(record) < 2:
            raise ValueError("Malformed shadow entry for '%s'" % record[0])
        result.append((record[0], record[1]))
    return result


def hash_scheme(password):
    """The crypt(5) scheme id of a password field.

    :returns: None for a locked or disabled account, '' for an empty
              password, 'des' for traditional DES hashes, else the id found
              between the first two '$' (e.g. '6' or 'y').
    """
    if password == '':
        return ''
    if password[0] in '!*':
        return None
    if password.startswith('$'):
        parts = password.split('$')
        return parts[1] if len(parts) > 2 else 'unknown'
    return 'des'


def empty_password_users(path='/etc/shadow'):
    return [user for user, password in shadow_passwords(path)
            if password == '']


def weak_hash_users(allowed, path='/etc/shadow'):
    """Users whose password is set with a scheme outside allowed."""
    weak = []
    for user, password in shadow_passwords(path):
        scheme = hash_scheme(password)
        if scheme and scheme not in allowed:
            weak.append(user)
    return weak


def inconsistent_users(passwd_path='/etc/passwd', shadow_path='/etc/shadow'):
    """Users listed in only one of the two stores.

    :returns: (only in passwd, only in shadow), each sorted
    """
    in_passwd = set(passwd_users(passwd_path))
    in_shadow = set(user for user, _ in shadow_passwords(shadow_path))
    return sorted(in_passwd - in_shadow), sorted(in_shadow - in_passwd)


def lock_empty_passwords(path='/etc/shadow'):
    """Sets the password field of every passwordless account to locked.

    :returns: list of the users that were locked
    """
    locked = []
    lines = []
    with open(path) as f:
        for line in f:
            fields = line.rstrip('\n').split(':')
            if len(fields) > 1 and fields[1] == '' and \
                    not fields[0].startswith('#'):
                fields[1] = LOCKED
                locked.append(fields[0])
            lines.append(':'.join(fields) + '\n')

    if locked:
        host.rewrite_file(path, ''.join(lines))
        log("Locked accounts without password: %s" % ', '.join(locked),
            level=WARNING)
    return locked


class LockEmptyPasswordsAction(RecoveryAction):
    """Locks accounts that have an empty password field in shadow."""

    def __init__(self, path='/etc/shadow', **kwargs):
        super(LockEmptyPasswordsAction, self).__init__('lock-empty-passwords',
                                                       **kwargs)
        self.path = path

    def comply(self):
        return bool(lock_empty_passwords(self.path))
