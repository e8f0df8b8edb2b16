"""
Signal handlers for the RBAC models.

These handlers keep an audit trail in the logs whenever users or permissions are
attached to or detached from a role, whichever side of the relation triggered it.
"""

import logging

from django.db.models.signals import m2m_changed
from django.dispatch import receiver

from rbac_auth.models import PermissionRole, RoleUser

logger = logging.getLogger(__name__)

LOGGED_ACTIONS = {
    "post_add": "attached",
    "post_remove": "detached",
    "post_clear": "cleared",
}


def _log_pivot_change(relation, instance, action, reverse, pk_set):
    """Log a change of the role pivot ``relation`` reported by ``m2m_changed``."""
    verb = LOGGED_ACTIONS.get(action)
    if verb is None:
        return

    side = "target" if reverse else "role"
    logger.info(
        "Role %s %s on %s %s: %s",
        relation,
        verb,
        side,
        instance.pk,
        sorted(pk_set) if pk_set else "all",
    )


@receiver(m2m_changed, sender=RoleUser)
def log_role_users_change(sender, instance, action, reverse, model, pk_set, **kwargs):  # pylint: disable=unused-argument
    """
    Log users being attached to or detached from a role.

    ``reverse`` is True when the change was made from the user side
    (``user.roles.add(role)``), in which case ``instance`` is the user.
    """
    _log_pivot_change("users", instance, action, reverse, pk_set)


@receiver(m2m_changed, sender=PermissionRole)
def log_role_permissions_change(
    sender, instance, action, reverse, model, pk_set, **kwargs
):  # pylint: disable=unused-argument
    """
    Log permissions being attached to or detached from a role.

    ``reverse`` is True when the change was made from the permission side.
    """
    _log_pivot_change("permissions", instance, action, reverse, pk_set)
