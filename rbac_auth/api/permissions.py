"""Public API for permissions management.

A permission is identified by its slug and granted to users through the active
roles they hold.
"""

import logging

from django.contrib.auth import get_user_model

from rbac_auth.models import Permission, PermissionsGroup, Role
from rbac_auth.utils import slugify

__all__ = [
    "create_permission",
    "get_permission",
    "grant_permission_to_role",
    "revoke_permission_from_role",
    "is_user_allowed",
]

logger = logging.getLogger(__name__)

User = get_user_model()


def create_permission(
    name: str,
    slug: str | None = None,
    description: str = "",
    model: str = "",
    group_slug: str | None = None,
) -> Permission:
    """Create a permission, optionally inside a permissions group.

    Raises:
        PermissionsGroup.DoesNotExist: If the group does not exist.
        IntegrityError: If the slug is already taken.
    """
    attributes = {"name": name, "slug": slug or "", "description": description, "model": model}
    if group_slug:
        group = PermissionsGroup.objects.get(slug=slugify(group_slug))
        return group.create_permission(attributes, reload=False)
    return Permission.objects.create(**attributes)


def get_permission(slug: str) -> Permission:
    """Get a permission by slug.

    Raises:
        Permission.DoesNotExist: If the permission does not exist.
    """
    return Permission.objects.get(slug=slugify(slug))


def grant_permission_to_role(permission_slug: str, role_slug: str) -> bool:
    """Attach a permission to a role.

    Returns:
        bool: True if the permission was attached, False if the role already had it.
    """
    role = Role.objects.get_by_slug(role_slug)
    permission = get_permission(permission_slug)
    if role.has_permission(permission):
        return False

    role.attach_permission(permission, reload=False)
    return True


def revoke_permission_from_role(permission_slug: str, role_slug: str) -> bool:
    """Detach a permission from a role.

    Returns:
        bool: True if the permission was detached, False if the role did not have it.
    """
    role = Role.objects.get_by_slug(role_slug)
    permission = get_permission(permission_slug)
    return role.detach_permission(permission, reload=False) > 0


def is_user_allowed(username: str, permission_slug: str) -> bool:
    """Check if a user is granted a permission through one of its active roles.

    Works with any user model whose ``roles`` accessor is the reverse side of
    ``Role.users``. Inactive users are never allowed, active superusers always are.

    Args:
        username: The username of the user.
        permission_slug: The permission to check (e.g. ``auth.users.create``).

    Returns:
        bool: True if the user is granted the permission.

    Raises:
        User.DoesNotExist: If the user does not exist.
    """
    user = User.objects.get(username=username)
    if not user.is_active:
        return False
    if user.is_superuser:
        return True
    return Role.objects.active().filter(users=user, permissions__slug=slugify(permission_slug)).exists()
