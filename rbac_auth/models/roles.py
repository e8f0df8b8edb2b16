"""Role model and its pivot tables.

A role is a named set of permissions. Users are attached to roles and inherit the
permissions of every active role they hold.
"""

import logging

from django.conf import settings
from django.db import models

from rbac_auth.conf import get_table_name
from rbac_auth.models.core import SluggedModel, TimestampedModel
from rbac_auth.utils import get_key, slugify

__all__ = [
    "Role",
    "RoleUser",
    "PermissionRole",
]

logger = logging.getLogger(__name__)


class RoleQuerySet(models.QuerySet):
    """QuerySet helpers for roles."""

    def active(self):
        return self.filter(is_active=True)

    def locked(self):
        return self.filter(is_locked=True)

    def get_by_slug(self, slug: str) -> "Role":
        """Get a role by its slug, normalizing the given value first.

        Raises:
            Role.DoesNotExist: If no role has the normalized slug.
        """
        return self.get(slug=slugify(slug))


class Role(SluggedModel):
    """Model representing a role.

    .. no_pii:
    """

    is_active = models.BooleanField(default=True)
    is_locked = models.BooleanField(default=False)

    users = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        through="rbac_auth.RoleUser",
        related_name="roles",
        blank=True,
    )
    permissions = models.ManyToManyField(
        "rbac_auth.Permission",
        through="rbac_auth.PermissionRole",
        related_name="roles",
        blank=True,
    )

    objects = RoleQuerySet.as_manager()

    class Meta:
        db_table = get_table_name("roles")
        ordering = ["id"]

    # Users

    def attach_user(self, user, reload: bool = True) -> None:
        """Attach a user to the role. Does nothing if the user is already attached.

        Args:
            user: A user instance or its primary key.
            reload: Whether to reload the ``users`` relation afterwards.
        """
        if self.has_user(user):
            return

        self.users.add(user)

        if reload:
            self.reload_relation("users")

    def has_user(self, user_or_id) -> bool:
        """Check if the role has the given user (instance or primary key)."""
        return self.relation_contains("users", user_or_id)

    def detach_user(self, user_or_id, reload: bool = True) -> int:
        """Detach a user from the role.

        Returns:
            int: The number of detached users (0 or 1).
        """
        result = self.users.filter(pk=get_key(user_or_id)).count()
        self.users.remove(get_key(user_or_id))

        if reload:
            self.reload_relation("users")

        return result

    def detach_all_users(self, reload: bool = True) -> int:
        """Detach every user from the role.

        Returns:
            int: The number of detached users.
        """
        result = self.users.count()
        self.users.clear()

        if reload:
            self.reload_relation("users")

        return result

    # Permissions

    def attach_permission(self, permission, reload: bool = True) -> None:
        """Attach a permission to the role. Does nothing if it is already attached.

        Args:
            permission: A Permission instance or its primary key.
            reload: Whether to reload the ``permissions`` relation afterwards.
        """
        if self.has_permission(permission):
            return

        self.permissions.add(permission)

        if reload:
            self.reload_relation("permissions")

    def detach_permission(self, permission_or_id, reload: bool = True) -> int:
        """Detach a permission from the role.

        Returns:
            int: The number of detached permissions (0 or 1).
        """
        result = self.permissions.filter(pk=get_key(permission_or_id)).count()
        self.permissions.remove(get_key(permission_or_id))

        if reload:
            self.reload_relation("permissions")

        return result

    def detach_all_permissions(self, reload: bool = True) -> int:
        """Detach every permission from the role.

        Returns:
            int: The number of detached permissions.
        """
        result = self.permissions.count()
        self.permissions.clear()

        if reload:
            self.reload_relation("permissions")

        return result

    def has_permission(self, permission_or_id) -> bool:
        """Check if the role has the given permission (instance or primary key)."""
        return self.relation_contains("permissions", permission_or_id)

    # Checks

    def can(self, slug: str) -> bool:
        """Check if the role is associated with the permission identified by ``slug``.

        The given slug is normalized before comparing it against the permission slugs.
        """
        slug = slugify(slug)
        return sum(1 for permission in self.permissions.all() if permission.slug == slug) == 1

    def can_any(self, slugs, failed_permissions: list | None = None) -> bool:
        """Check if the role is associated with any of the given permissions.

        Args:
            slugs: An iterable of permission slugs.
            failed_permissions: Optional list that receives the slugs that failed.

        Returns:
            bool: True if at least one permission is granted.
        """
        slugs = list(slugs)
        failed = [slug for slug in slugs if not self.can(slug)]
        if failed_permissions is not None:
            failed_permissions.extend(failed)
        return len(slugs) != len(failed)

    def can_all(self, slugs, failed_permissions: list | None = None) -> bool:
        """Check if the role is associated with all the given permissions.

        Args:
            slugs: An iterable of permission slugs.
            failed_permissions: Optional list that receives the slugs that failed.

        Returns:
            bool: True if ``failed_permissions`` is empty afterwards, so entries already
            in the given list also make the check fail.
        """
        if failed_permissions is None:
            failed_permissions = []
        self.can_any(slugs, failed_permissions)
        return not failed_permissions

    # Flags

    def is_active_role(self) -> bool:
        return self.is_active

    def is_locked_role(self) -> bool:
        return self.is_locked

    def activate(self, save: bool = True) -> None:
        self._set_active(True, save)

    def deactivate(self, save: bool = True) -> None:
        self._set_active(False, save)

    def _set_active(self, value: bool, save: bool) -> None:
        self.is_active = value
        if save:
            self.save(update_fields=["is_active", "updated_at"])
            logger.info("Role %s is now %s", self.slug, "active" if value else "inactive")


class RoleUser(TimestampedModel):
    """Pivot between roles and users.

    .. no_pii:
    """

    role = models.ForeignKey(Role, on_delete=models.CASCADE)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE)

    class Meta:
        db_table = get_table_name("role_user")
        constraints = [
            models.UniqueConstraint(fields=["role", "user"], name="unique_role_user"),
        ]


class PermissionRole(TimestampedModel):
    """Pivot between roles and permissions.

    .. no_pii:
    """

    role = models.ForeignKey(Role, on_delete=models.CASCADE)
    permission = models.ForeignKey("rbac_auth.Permission", on_delete=models.CASCADE)

    class Meta:
        db_table = get_table_name("permission_role")
        constraints = [
            models.UniqueConstraint(fields=["role", "permission"], name="unique_permission_role"),
        ]
