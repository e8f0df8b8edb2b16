"""Database models for role-based access control.

Roles hold permissions, users hold roles, and permissions can be organized in
groups. Table names are configurable through the ``RBAC_AUTH_*_TABLE`` settings,
see ``rbac_auth.conf``.
"""

from rbac_auth.models.core import *
from rbac_auth.models.groups import *
from rbac_auth.models.permissions import *
from rbac_auth.models.roles import *
from rbac_auth.models.users import *
