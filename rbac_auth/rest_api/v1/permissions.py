"""Permissions for the RBAC Auth REST API."""

from rest_framework.permissions import BasePermission

from rbac_auth import api


class MethodPermissionMixin:
    """Mixin that validates permissions defined via the @rbac_permissions decorator.

    This mixin reads the required_permissions attribute set by the @rbac_permissions
    decorator and validates each permission using ``is_user_allowed``. All permissions
    must be satisfied for the check to pass.
    """

    def get_required_permissions(self, request, view) -> list[str]:
        """Extract required permissions from the view method.

        Args:
            request: The Django REST framework request object.
            view: The view being accessed.

        Returns:
            list[str]: List of permission slugs, or empty list if not defined.
        """
        method = request.method.lower()
        handler = getattr(view, method, None)
        if handler and hasattr(handler, "required_permissions"):
            return handler.required_permissions
        return []

    def validate_permissions(self, request, permissions: list[str]) -> bool:
        """Validate that the user is granted all the required permissions.

        Args:
            request: The Django REST framework request object.
            permissions: List of permission slugs to check.

        Returns:
            bool: True if user has all required permissions, False otherwise.
        """
        return all(api.is_user_allowed(request.user.username, permission) for permission in permissions)


class RolePermission(MethodPermissionMixin, BasePermission):
    """Permission class that checks the slugs declared on the view method.

    Superusers are always allowed. Methods without a @rbac_permissions declaration
    only require an authenticated user.
    """

    def has_permission(self, request, view) -> bool:
        """Check if the user is granted the permissions required by the view method."""
        if not request.user or not request.user.is_authenticated:
            return False
        if request.user.is_superuser:
            return True

        permissions = self.get_required_permissions(request, view)
        if permissions:
            return self.validate_permissions(request, permissions)

        return True
