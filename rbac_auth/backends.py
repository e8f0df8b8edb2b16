"""
Authentication backend exposing role permissions through Django's ``has_perm``.

Add ``"rbac_auth.backends.RolePermissionBackend"`` to ``AUTHENTICATION_BACKENDS``
so ``user.has_perm("auth.users.create")`` checks the permissions granted by the
user's active roles.
"""

from django.contrib.auth.backends import BaseBackend

from rbac_auth.models import Permission
from rbac_auth.utils import slugify


class RolePermissionBackend(BaseBackend):
    """Grant permissions from the active roles a user holds.

    This backend never authenticates users; it only answers permission checks.
    Inactive users are denied and active superusers are granted everything, the same
    way ``django.contrib.auth.backends.ModelBackend`` behaves.
    """

    cache_attr = "_rbac_auth_perm_cache"

    def get_all_permissions(self, user_obj, obj=None) -> set[str]:
        """Return the slugs of every permission granted to the user by its active roles."""
        if not user_obj.is_active or user_obj.is_anonymous or obj is not None:
            return set()
        if not hasattr(user_obj, self.cache_attr):
            slugs = Permission.objects.filter(
                roles__users=user_obj,
                roles__is_active=True,
            ).values_list("slug", flat=True)
            setattr(user_obj, self.cache_attr, set(slugs))
        return getattr(user_obj, self.cache_attr)

    def has_perm(self, user_obj, perm, obj=None) -> bool:
        """Check whether the user is granted the permission slug ``perm``."""
        if not user_obj.is_active or user_obj.is_anonymous:
            return False
        if user_obj.is_superuser:
            return True
        return slugify(perm) in self.get_all_permissions(user_obj, obj=obj)
