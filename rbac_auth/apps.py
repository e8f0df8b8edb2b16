"""
rbac_auth Django application initialization.
"""

from django.apps import AppConfig


class RbacAuthConfig(AppConfig):
    """
    Configuration for the rbac_auth Django application.
    """

    name = "rbac_auth"
    verbose_name = "RBAC Auth"
    default_auto_field = "django.db.models.BigAutoField"

    def ready(self):
        """Connect the signal handlers."""
        from rbac_auth import handlers  # pylint: disable=import-outside-toplevel,unused-import
