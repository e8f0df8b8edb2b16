"""Permission model.

A permission is identified by its slug (e.g. ``auth.users.create``) and is granted
to users through the roles it is attached to.
"""

from django.db import models

from rbac_auth.conf import get_table_name
from rbac_auth.models.core import RoleRelationshipsMixin, SluggedModel

__all__ = [
    "Permission",
]


class Permission(RoleRelationshipsMixin, SluggedModel):
    """Model representing a permission.

    .. no_pii:

    Unlike roles, the slug of a permission is not re-derived when its name changes:
    the slug is the identifier checked by ``Role.can`` and ``User.may``.
    """

    SLUG_FOLLOWS_NAME = False

    group = models.ForeignKey(
        "rbac_auth.PermissionsGroup",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="permissions",
    )

    # Optional label of the model the permission applies to (e.g. "auth.User").
    model = models.CharField(max_length=255, blank=True, default="")

    class Meta:
        db_table = get_table_name("permissions")
        ordering = ["id"]
