"""Decorators for the RBAC Auth REST API."""

from functools import wraps

from edx_rest_framework_extensions.auth.jwt.authentication import JwtAuthentication
from edx_rest_framework_extensions.auth.session.authentication import SessionAuthenticationAllowInactiveUser
from rest_framework.permissions import IsAuthenticated


def view_auth_classes(is_authenticated=True):
    """
    Class decorator setting the authentication (and optionally permission) classes of an API view.

    Requests are authenticated with a JWT or the Django session. When
    ``is_authenticated`` is set, ``IsAuthenticated`` is checked before any permission
    class the view already declares.

    Examples:
        >>> @view_auth_classes()
        ... class RoleListView(APIView):
        ...     permission_classes = [RolePermission]
    """

    def _decorator(view_class):
        view_class.authentication_classes = [
            JwtAuthentication,
            SessionAuthenticationAllowInactiveUser,
        ]
        if is_authenticated:
            view_class.permission_classes = [IsAuthenticated, *getattr(view_class, "permission_classes", [])]
        return view_class

    return _decorator


def rbac_permissions(permissions: list[str]):
    """Declare the permission slugs a view method requires.

    ``RolePermission`` reads them from the ``required_permissions`` attribute and
    requires every one of them.

    Examples:
        >>> class RoleListView(APIView):
        ...     @rbac_permissions(["auth.roles.list"])
        ...     def get(self, request):
        ...         ...
    """

    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            return func(*args, **kwargs)

        wrapper.required_permissions = permissions
        return wrapper

    return decorator
