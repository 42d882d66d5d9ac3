# Copyright 2026 The host-compliance Authors.
#
# Licensed under the GNU Lesser General Public License version 3.

import os

from setuptools import setup, find_packages


version_file = os.path.abspath(os.path.join(os.path.dirname(__file__),
                                            'VERSION'))
with open(version_file) as v:
    VERSION = v.read().strip()


SETUP = {
    'name': "host-compliance",
    'version': VERSION,
    'author': "The host-compliance Authors",
    'install_requires': [
        'netaddr',
        'PyYAML',
        'Jinja2',
    ],
    'extras_require': {
        'test': [
            'mock',
            'pytest',
        ],
    },
    'packages': find_packages(exclude=('tests', 'tests.*')),
    'package_data': {
        'hostcompliance.compliance': [
            'defaults/*.yaml',
            'defaults/*.yaml.schema',
            'templates/*',
        ],
    },
    'scripts': [
        "bin/host-compliance",
    ],
    'python_requires': '>=3.6',
    'license': "LGPLv3",
    'long_description': open('README.rst').read(),
    'description': 'Host security baseline audit with one-shot remediation '
                   'and shutdown escalation',
}

if __name__ == '__main__':
    setup(**SETUP)
