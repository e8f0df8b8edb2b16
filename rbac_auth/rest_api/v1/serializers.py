"""Serializers for the RBAC Auth REST API."""

from rest_framework import serializers

from rbac_auth.rest_api.data import SortOrder
from rbac_auth.rest_api.v1.fields import CommaSeparatedListField


class PermissionValidationSerializer(serializers.Serializer):  # pylint: disable=abstract-method
    """Serializer for permission validation request."""

    permission = serializers.CharField(max_length=255)


class PermissionValidationResponseSerializer(PermissionValidationSerializer):  # pylint: disable=abstract-method
    """Serializer for permission validation response."""

    allowed = serializers.BooleanField()


class AddUsersToRoleSerializer(serializers.Serializer):  # pylint: disable=abstract-method
    """Serializer for adding users to a role."""

    users = serializers.ListField(child=serializers.CharField(max_length=255), allow_empty=False)

    def validate_users(self, value) -> list[str]:
        """Eliminate duplicates preserving order"""
        return list(dict.fromkeys(value))


class RemoveUsersFromRoleSerializer(serializers.Serializer):  # pylint: disable=abstract-method
    """Serializer for removing users from a role."""

    users = CommaSeparatedListField(allow_blank=False)


class ListUsersInRoleSerializer(serializers.Serializer):  # pylint: disable=abstract-method
    """Serializer for the query parameters used to list the users of a role."""

    search = serializers.CharField(required=False, default=None, allow_blank=True)
    order = serializers.ChoiceField(required=False, choices=SortOrder.values(), default=SortOrder.ASC)


class ListRolesSerializer(serializers.Serializer):  # pylint: disable=abstract-method
    """Serializer for the query parameters used to list roles."""

    active_only = serializers.BooleanField(required=False, default=False)


class RoleUserSerializer(serializers.Serializer):  # pylint: disable=abstract-method
    """Serializer for a user attached to a role."""

    username = serializers.CharField(max_length=255)
    full_name = serializers.SerializerMethodField()
    email = serializers.EmailField()

    def get_full_name(self, obj) -> str:
        """Get the full name of the user."""
        return obj.get_full_name() if hasattr(obj, "get_full_name") else ""


class RoleResponseSerializer(serializers.Serializer):  # pylint: disable=abstract-method
    """Serializer for a role with its permission slugs and number of users."""

    name = serializers.CharField(max_length=255)
    slug = serializers.CharField(max_length=255)
    description = serializers.CharField(allow_blank=True)
    is_active = serializers.BooleanField()
    is_locked = serializers.BooleanField()
    permissions = serializers.SerializerMethodField()
    user_count = serializers.SerializerMethodField()

    def get_permissions(self, obj) -> list[str]:
        """Get the slugs of the permissions attached to the role."""
        return [permission.slug for permission in obj.permissions.all()]

    def get_user_count(self, obj) -> int:
        """Get the number of users attached to the role."""
        return obj.users.count()
