"""
Settings accessors for rbac_auth.

Every setting is a flat Django setting with a default, so a project only has to
declare the values it wants to change.
"""

from django.conf import settings

DEFAULT_TABLES = {
    "users": "users",
    "roles": "roles",
    "role_user": "role_has_users",
    "permissions": "permissions",
    "permission_role": "role_has_permissions",
    "permissions_groups": "permissions_group",
}

DEFAULT_SLUG_SEPARATOR = "."
DEFAULT_CONFIRMATION_CODE_LENGTH = 30


def get_table_name(key: str) -> str:
    """Return the configured table name for ``key``.

    Args:
        key: One of the keys of ``DEFAULT_TABLES`` (e.g. ``"roles"``).

    Returns:
        str: The value of ``RBAC_AUTH_<KEY>_TABLE`` or the default table name.

    Raises:
        ValueError: If the key is unknown.
    """
    if key not in DEFAULT_TABLES:
        raise ValueError(f"Unknown table key '{key}'. Must be one of {list(DEFAULT_TABLES)}")
    return getattr(settings, f"RBAC_AUTH_{key.upper()}_TABLE", DEFAULT_TABLES[key])


def get_slug_separator() -> str:
    """Return the separator used when normalizing slugs."""
    return getattr(settings, "RBAC_AUTH_SLUG_SEPARATOR", DEFAULT_SLUG_SEPARATOR)


def is_user_confirmation_enabled() -> bool:
    return getattr(settings, "RBAC_AUTH_USER_CONFIRMATION_ENABLED", False)


def get_confirmation_code_length() -> int:
    return getattr(settings, "RBAC_AUTH_USER_CONFIRMATION_CODE_LENGTH", DEFAULT_CONFIRMATION_CODE_LENGTH)
