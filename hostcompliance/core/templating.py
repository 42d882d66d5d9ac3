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

from jinja2 import FileSystemLoader, Environment

from hostcompliance.core import host
from hostcompliance.core.agentenv import (
    log,
    DEBUG,
    WARNING,
)


# NOTE: function separated from main rendering code to facilitate easier
#       mocking in unit tests.
def write(path, data, perms=None):
    """Replaces path with data without exposing a partly written file."""
    host.rewrite_file(path, data, perms=perms)


def render(template_dir, template_file, context):
    """Renders a template to a string.

    :param template_dir: the directory to load the template from
    :param template_file: name of the template inside template_dir
    :param context: the parameters to pass to the rendering engine
    :returns: the rendered text
    """
    env = Environment(loader=FileSystemLoader(template_dir),
                      keep_trailing_newline=True)
    template = env.get_template(template_file)
    log('Rendering from template: %s' % template.name, level=DEBUG)
    return template.render(context)


def render_and_write(template_dir, path, context, template_file=None,
                     perms=None):
    """Renders the specified template into the file.

    :param template_dir: the directory to load the template from
    :param path: the path to write the templated contents to
    :param context: the parameters to pass to the rendering engine
    :param template_file: template name, defaults to the basename of path
    :param perms: optional mode applied to the written file
    :returns: True if the file was written
    """
    template_file = template_file or os.path.basename(path)
    rendered_content = render(template_dir, template_file, context)
    if not rendered_content:
        log("Render returned None - skipping '%s'" % path,
            level=WARNING)
        return False

    write(path, rendered_content, perms=perms)
    log('Wrote template %s' % path, level=DEBUG)
    return True
