"""Public API for rbac_auth.

String-keyed helpers over the RBAC models, used by the REST API, the
authentication backend and the management commands.
"""

from rbac_auth.api.permissions import *
from rbac_auth.api.roles import *
from rbac_auth.api.users import *
