"""Behavioral tests for the role pivot audit logging handlers."""

from django.contrib.auth import get_user_model
from django.test import TestCase

from rbac_auth.models import Permission, Role

User = get_user_model()


class TestRolePivotLogging(TestCase):
    """Confirm the m2m_changed handlers log every pivot change."""

    def setUp(self):
        self.role = Role.objects.create(name="Moderator")
        self.user = User.objects.create_user(username="john")
        self.permission = Permission.objects.create(name="List users", slug="auth.users.list")

    def test_attaching_user_is_logged(self):
        """Attaching a user to a role logs the attached user id.

        Expected Result:
        - One info line mentions the attached users and the user primary key.
        """
        with self.assertLogs("rbac_auth.handlers", level="INFO") as logs:
            self.role.attach_user(self.user)

        self.assertEqual(len(logs.output), 1)
        self.assertIn("users attached", logs.output[0])
        self.assertIn(str([self.user.pk]), logs.output[0])

    def test_detaching_from_user_side_is_logged(self):
        """Detaching a role from the user side logs a reverse change."""
        self.role.attach_user(self.user)

        with self.assertLogs("rbac_auth.handlers", level="INFO") as logs:
            self.user.detach_role(self.role)

        self.assertIn("users detached on target", logs.output[0])

    def test_clearing_permissions_is_logged(self):
        """Detaching every permission of a role logs a clear."""
        self.role.attach_permission(self.permission)

        with self.assertLogs("rbac_auth.handlers", level="INFO") as logs:
            self.role.detach_all_permissions()

        self.assertIn("permissions cleared on role", logs.output[0])
