"""Values exchanged by the RBAC Auth REST API."""

from enum import Enum


class BaseEnum(str, Enum):
    """String enum serialized as its value."""

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]


class SortOrder(BaseEnum):
    """Username sort order for role user listings."""

    ASC = "asc"
    DESC = "desc"


class RoleOperationStatus(BaseEnum):
    """Outcome of a successful change to the users of a role."""

    ROLE_ADDED = "role_added"
    ROLE_REMOVED = "role_removed"


class RoleOperationError(BaseEnum):
    """Reason a user could not be attached to or detached from a role."""

    USER_NOT_FOUND = "user_not_found"
    USER_ALREADY_HAS_ROLE = "user_already_has_role"
    USER_DOES_NOT_HAVE_ROLE = "user_does_not_have_role"
    ROLE_ASSIGNMENT_ERROR = "role_assignment_error"
    ROLE_REMOVAL_ERROR = "role_removal_error"
