"""Public API for user role assignments."""

import logging

from django.contrib.auth import get_user_model

from rbac_auth.models import Permission, Role

__all__ = [
    "get_user_roles",
    "get_user_permissions",
    "unassign_all_roles_from_user",
]

logger = logging.getLogger(__name__)

User = get_user_model()


def get_user_roles(username: str, active_only: bool = False) -> list[Role]:
    """Get the roles attached to a user.

    Raises:
        User.DoesNotExist: If the user does not exist.
    """
    user = User.objects.get(username=username)
    roles = Role.objects.filter(users=user)
    if active_only:
        roles = roles.active()
    return list(roles)


def get_user_permissions(username: str) -> list[Permission]:
    """Get the distinct permissions granted to a user by its active roles.

    Raises:
        User.DoesNotExist: If the user does not exist.
    """
    user = User.objects.get(username=username)
    return list(Permission.objects.filter(roles__users=user, roles__is_active=True).distinct())


def unassign_all_roles_from_user(username: str) -> int:
    """Detach every role from a user.

    Returns:
        int: The number of detached roles.

    Raises:
        User.DoesNotExist: If the user does not exist.
    """
    user = User.objects.get(username=username)
    roles = list(Role.objects.filter(users=user))
    for role in roles:
        role.detach_user(user, reload=False)
    logger.info("Unassigned %d roles from user %s", len(roles), username)
    return len(roles)
