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
import yaml

from hostcompliance.core.agentenv import (
    log,
    DEBUG,
    INFO,
)

DEFAULT_OVERRIDES = '/etc/host-compliance/overrides.yaml'

# Schema marker for a setting that may also be overridden with null.
NULLABLE = 'nullable'

__SETTINGS__ = {}


def _load_yaml(path):
    with open(path) as f:
        return yaml.safe_load(f)


def _defaults_file(section, suffix=''):
    return os.path.join(os.path.dirname(__file__), 'defaults',
                        '%s.yaml%s' % (section, suffix))


def _get_defaults(section):
    """Shipped settings for section, from defaults/<section>.yaml."""
    return _load_yaml(_defaults_file(section))


def _get_schema(section):
    """Overridable keys of section, from defaults/<section>.yaml.schema.

    The schema mirrors the defaults file. A leaf is either empty, meaning
    the override must have the type of the shipped default, or 'nullable',
    meaning null is accepted as well.
    """
    return _load_yaml(_defaults_file(section, '.schema'))


def overrides_path():
    return os.environ.get('HOST_COMPLIANCE_CONFIG', DEFAULT_OVERRIDES)


def _get_user_provided_overrides(section):
    """Overrides for section from the user's overrides file.

    :returns: the section's overrides, {} if there are none
    :raises ValueError: if the file is not a mapping
    """
    path = overrides_path()
    if not os.path.exists(path):
        log("No config overrides file '%s' found" % path, level=DEBUG)
        return {}

    log("Reading config overrides from '%s'" % path, level=DEBUG)
    overrides = _load_yaml(path) or {}
    if not isinstance(overrides, dict):
        raise ValueError("Overrides file '%s' is not a mapping" % path)
    return overrides.get(section) or {}


def _check_type(key, value, default, nullable):
    if value is None:
        if nullable or default is None:
            return
        raise ValueError("Override '%s' may not be null" % key)
    if default is None:
        return
    # bool is an int subclass; YAML true must not stand in for a number.
    if isinstance(value, bool) != isinstance(default, bool) or \
            not isinstance(value, type(default)):
        raise ValueError("Override '%s' must be of type %s, not %s" %
                         (key, type(default).__name__, type(value).__name__))


def _apply_overrides(settings, overrides, schema, prefix=''):
    """Overlays user overrides onto section defaults, in place.

    Keys missing from the schema are logged and ignored. Every accepted
    value must match the type of the default it replaces.

    :param settings: section defaults
    :param overrides: user provided overrides for the section
    :param schema: section schema
    :returns: settings
    :raises ValueError: on a wrongly typed override or schema entry
    """
    if not isinstance(overrides, dict):
        raise ValueError("Overrides for '%s' must be a mapping, not %s" %
                         (prefix or 'section', type(overrides).__name__))

    for key, value in overrides.items():
        name = prefix + str(key)
        if key not in schema:
            log("Unknown override key '%s' - ignoring" % name, level=INFO)
            continue

        entry = schema[key]
        if isinstance(entry, dict):
            _apply_overrides(settings[key], value, entry, name + '.')
        elif entry is None or entry == NULLABLE:
            _check_type(name, value, settings.get(key), entry == NULLABLE)
            settings[key] = value
        else:
            raise ValueError("Unexpected schema entry for '%s': %r" %
                             (name, entry))
    return settings


def get_settings(section):
    """Settings for section, defaults merged with user overrides.

    The result is computed once per process.
    """
    if section not in __SETTINGS__:
        settings = _get_defaults(section)
        _apply_overrides(settings, _get_user_provided_overrides(section),
                         _get_schema(section))
        __SETTINGS__[section] = settings
    return __SETTINGS__[section]


def reset_settings():
    """Drop cached settings so the next get_settings() reloads them."""
    __SETTINGS__.clear()


def remediation_disabled(settings):
    """'unless' callback for recovery actions honouring remediation.enabled.
    """
    return lambda: not settings['remediation']['enabled']
