"""Public API for roles management.

A role is a named group of permissions. Instead of granting permissions to each
user, permissions are attached to a role and users attached to the role inherit them
while the role is active.
"""

import logging

from django.contrib.auth import get_user_model
from django.db import transaction

from rbac_auth.models import Permission, Role
from rbac_auth.utils import slugify

__all__ = [
    "RoleLockedError",
    "create_role",
    "get_role",
    "get_all_roles",
    "delete_role",
    "assign_role_to_user",
    "batch_assign_role_to_users",
    "unassign_role_from_user",
    "batch_unassign_role_from_users",
    "get_users_for_role",
    "get_permissions_for_role",
]

logger = logging.getLogger(__name__)

User = get_user_model()


class RoleLockedError(ValueError):
    """Raised when trying to change or delete a locked role."""

    def __init__(self, role: Role):
        super().__init__(f"Role '{role.slug}' is locked")
        self.role = role


def create_role(
    name: str,
    description: str = "",
    slug: str | None = None,
    permissions: list[str] | None = None,
    is_locked: bool = False,
) -> Role:
    """Create a role and attach the given permissions to it.

    Args:
        name: The display name of the role. The slug is derived from it when not given.
        description: Optional description.
        slug: Optional explicit slug.
        permissions: Optional list of permission slugs to attach.
        is_locked: Whether the role should be locked.

    Returns:
        Role: The created role.

    Raises:
        Permission.DoesNotExist: If one of the permission slugs is unknown.
    """
    with transaction.atomic():
        role = Role.objects.create(name=name, slug=slug or "", description=description, is_locked=is_locked)
        for permission_slug in permissions or []:
            role.attach_permission(Permission.objects.get(slug=slugify(permission_slug)), reload=False)

    logger.info("Created role %s", role.slug)
    return role


def get_role(slug: str) -> Role:
    """Get a role by slug.

    Raises:
        Role.DoesNotExist: If the role does not exist.
    """
    return Role.objects.get_by_slug(slug)


def get_all_roles(active_only: bool = False) -> list[Role]:
    """Get all the roles, with their permissions prefetched.

    Args:
        active_only: Whether to return only active roles.
    """
    roles = Role.objects.active() if active_only else Role.objects.all()
    return list(roles.prefetch_related("permissions"))


def delete_role(slug: str) -> None:
    """Delete a role and its user and permission assignments.

    Raises:
        Role.DoesNotExist: If the role does not exist.
        RoleLockedError: If the role is locked.
    """
    role = get_role(slug)
    if role.is_locked_role():
        raise RoleLockedError(role)

    role.delete()
    logger.info("Deleted role %s", slug)


def assign_role_to_user(username: str, role_slug: str) -> bool:
    """Attach a role to a user.

    Args:
        username: The username of the user.
        role_slug: The slug of the role.

    Returns:
        bool: True if the role was assigned, False if the user already had it.

    Raises:
        User.DoesNotExist: If the user does not exist.
        Role.DoesNotExist: If the role does not exist.
    """
    user = User.objects.get(username=username)
    role = get_role(role_slug)
    if role.has_user(user):
        return False

    role.attach_user(user, reload=False)
    return True


def batch_assign_role_to_users(usernames: list[str], role_slug: str) -> None:
    """Attach a role to several users. Unknown users are skipped."""
    for username in usernames:
        try:
            assign_role_to_user(username, role_slug)
        except User.DoesNotExist:
            logger.warning("Cannot assign role %s to unknown user %s", role_slug, username)


def unassign_role_from_user(username: str, role_slug: str) -> bool:
    """Detach a role from a user.

    Returns:
        bool: True if the role was removed, False if the user did not have it.

    Raises:
        User.DoesNotExist: If the user does not exist.
        Role.DoesNotExist: If the role does not exist.
    """
    user = User.objects.get(username=username)
    role = get_role(role_slug)
    return role.detach_user(user, reload=False) > 0


def batch_unassign_role_from_users(usernames: list[str], role_slug: str) -> None:
    """Detach a role from several users. Unknown users are skipped."""
    for username in usernames:
        try:
            unassign_role_from_user(username, role_slug)
        except User.DoesNotExist:
            logger.warning("Cannot unassign role %s from unknown user %s", role_slug, username)


def get_users_for_role(role_slug: str) -> list:
    """Get the users attached to a role, ordered by username.

    Raises:
        Role.DoesNotExist: If the role does not exist.
    """
    return list(get_role(role_slug).users.order_by("username"))


def get_permissions_for_role(role_slug: str) -> list[Permission]:
    """Get the permissions attached to a role.

    Raises:
        Role.DoesNotExist: If the role does not exist.
    """
    return list(get_role(role_slug).permissions.all())
