"""Permissions group model, used to organize permissions by feature."""

import logging

from rbac_auth.conf import get_table_name
from rbac_auth.models.core import SluggedModel
from rbac_auth.models.permissions import Permission
from rbac_auth.utils import get_key

__all__ = [
    "PermissionsGroup",
]

logger = logging.getLogger(__name__)


class PermissionsGroup(SluggedModel):
    """Model representing a group of permissions.

    .. no_pii:
    """

    class Meta:
        db_table = get_table_name("permissions_groups")
        ordering = ["id"]

    def create_permission(self, attributes: dict, reload: bool = True) -> Permission:
        """Create a permission inside this group.

        Args:
            attributes: Field values for the new permission (name, slug, description, model).
            reload: Whether to reload the ``permissions`` relation afterwards.

        Returns:
            Permission: The created permission.

        Raises:
            IntegrityError: If a permission with the same slug already exists.
        """
        permission = self.permissions.create(**attributes)

        if reload:
            self.reload_relation("permissions")

        return permission

    def attach_permission(self, permission: Permission, reload: bool = True) -> None:
        """Move a permission into this group. Does nothing if it already belongs here."""
        if self.has_permission(permission):
            return

        self.permissions.add(permission)

        if reload:
            self.reload_relation("permissions")

    def attach_permissions(self, permissions, reload: bool = True) -> None:
        """Move several permissions into this group."""
        for permission in permissions:
            self.attach_permission(permission, reload=False)

        if reload:
            self.reload_relation("permissions")

    def detach_permission(self, permission_or_id, reload: bool = True) -> None:
        """Remove a permission from this group, leaving it without a group.

        Does nothing if the permission does not belong to this group.
        """
        if not self.has_permission(permission_or_id):
            return

        Permission.objects.filter(pk=get_key(permission_or_id)).update(group=None)
        if isinstance(permission_or_id, Permission):
            permission_or_id.group = None

        if reload:
            self.reload_relation("permissions")

    def detach_all_permissions(self, reload: bool = True) -> int:
        """Remove every permission from this group.

        Returns:
            int: The number of detached permissions.
        """
        result = self.permissions.update(group=None)
        logger.info("Detached %d permissions from group %s", result, self.slug)

        if reload:
            self.reload_relation("permissions")

        return result

    def has_permission(self, permission_or_id) -> bool:
        """Check if the group contains the given permission (instance or primary key)."""
        return self.relation_contains("permissions", permission_or_id)
