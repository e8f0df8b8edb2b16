"""User model and the role/permission behaviour that user models share.

``RoleHolderMixin`` can be mixed into any user model whose ``roles`` accessor is the
reverse side of ``Role.users``. The concrete ``User`` model is swappable: it is only
installed when ``AUTH_USER_MODEL = "rbac_auth.User"``.
"""

import logging

from django.contrib.auth.models import AbstractUser
from django.contrib.auth.models import UserManager as BaseUserManager
from django.db import models, transaction
from django.utils import timezone
from django.utils.crypto import get_random_string

from rbac_auth.conf import get_confirmation_code_length, get_table_name, is_user_confirmation_enabled
from rbac_auth.models.core import RoleRelationshipsMixin
from rbac_auth.utils import get_key, slugify

__all__ = [
    "RoleHolderMixin",
    "User",
]

logger = logging.getLogger(__name__)


class RoleHolderMixin(RoleRelationshipsMixin):
    """Role and permission checks for user models."""

    @property
    def is_admin(self) -> bool:
        return self.is_superuser

    def active_roles(self):
        """Return the queryset of active roles attached to the user."""
        return self.roles.filter(is_active=True)

    def sync_roles(self, roles, reload: bool = True) -> dict[str, list]:
        """Make the given roles the only roles attached to the user.

        Args:
            roles: An iterable of Role instances or primary keys.
            reload: Whether to reload the ``roles`` relation afterwards.

        Returns:
            dict: The primary keys that were ``attached`` and ``detached``.
        """
        wanted = {get_key(role) for role in roles}
        current = set(self.roles.values_list("pk", flat=True))

        with transaction.atomic():
            self.roles.remove(*(current - wanted))
            self.roles.add(*(wanted - current))

        if reload:
            self.reload_relation("roles")

        return {"attached": sorted(wanted - current), "detached": sorted(current - wanted)}

    def has_any_role(self, slugs, failed_roles: list | None = None) -> bool:
        """Check if the user has any of the given roles (by slug).

        Args:
            slugs: An iterable of role slugs.
            failed_roles: Optional list that receives the slugs the user does not have.
        """
        slugs = list(slugs)
        failed = [slug for slug in slugs if not self.has_role_slug(slug)]
        if failed_roles is not None:
            failed_roles.extend(failed)
        return len(slugs) != len(failed)

    def has_all_roles(self, slugs, failed_roles: list | None = None) -> bool:
        """Check if the user has all the given roles (by slug).

        Failing slugs are appended to ``failed_roles`` and the check passes only when that
        list is empty afterwards.
        """
        if failed_roles is None:
            failed_roles = []
        self.has_any_role(slugs, failed_roles)
        return not failed_roles

    def may(self, slug: str) -> bool:
        """Check if any active role of the user grants the permission ``slug``."""
        return self.active_roles().filter(permissions__slug=slugify(slug)).exists()

    def may_any(self, slugs, failed_permissions: list | None = None) -> bool:
        """Check if the user is granted any of the given permissions.

        Args:
            slugs: An iterable of permission slugs.
            failed_permissions: Optional list that receives the slugs that are not granted.
        """
        slugs = list(slugs)
        failed = [slug for slug in slugs if not self.may(slug)]
        if failed_permissions is not None:
            failed_permissions.extend(failed)
        return len(slugs) != len(failed)

    def may_all(self, slugs, failed_permissions: list | None = None) -> bool:
        """Check if the user is granted all the given permissions.

        Failing slugs are appended to ``failed_permissions`` and the check passes only when
        that list is empty afterwards.
        """
        if failed_permissions is None:
            failed_permissions = []
        self.may_any(slugs, failed_permissions)
        return not failed_permissions

    def activate(self, save: bool = True) -> None:
        self._set_active(True, save)

    def deactivate(self, save: bool = True) -> None:
        self._set_active(False, save)

    def _set_active(self, value: bool, save: bool) -> None:
        self.is_active = value
        if save:
            self.save(update_fields=["is_active"])


class UserManager(BaseUserManager):
    """Manager for the rbac_auth User model."""

    def find_unconfirmed(self, code: str) -> "User":
        """Get the unconfirmed user holding the given confirmation code.

        Raises:
            User.DoesNotExist: If no unconfirmed user has that code.
        """
        return self.get(is_confirmed=False, confirmation_code=code)


class User(RoleHolderMixin, AbstractUser):
    """User model with roles and an optional email confirmation step.

    .. pii: Stores username, names and email address inherited from AbstractUser.
    .. pii_types: username, name, email_address
    .. pii_retirement: local_api
    """

    is_confirmed = models.BooleanField(default=False)
    confirmation_code = models.CharField(max_length=255, blank=True, null=True, unique=True)
    confirmed_at = models.DateTimeField(blank=True, null=True)

    objects = UserManager()

    class Meta(AbstractUser.Meta):
        swappable = "AUTH_USER_MODEL"
        db_table = get_table_name("users")

    def save(self, *args, **kwargs):
        """Generate a confirmation code for new users when confirmation is enabled."""
        if self._state.adding and not self.is_confirmed and not self.confirmation_code:
            if is_user_confirmation_enabled():
                self.confirmation_code = get_random_string(get_confirmation_code_length())
        super().save(*args, **kwargs)

    def confirm(self, save: bool = True) -> None:
        """Mark the user as confirmed and discard the confirmation code."""
        self.is_confirmed = True
        self.confirmation_code = None
        self.confirmed_at = timezone.now()
        if save:
            self.save(update_fields=["is_confirmed", "confirmation_code", "confirmed_at"])
            logger.info("User %s confirmed", self.pk)
