"""Fields serializer for the RBAC Auth REST API."""

from rest_framework import serializers


class CommaSeparatedListField(serializers.CharField):
    """Serializer for a comma-separated list of strings."""

    def to_internal_value(self, data):
        """Convert string separated by commas to list of unique items preserving order"""
        return list(dict.fromkeys(item.strip() for item in data.split(",") if item.strip()))

    def to_representation(self, value):
        """Convert list to string separated by commas"""
        return ",".join(value)
