"""
Tests for the `load_roles` Django management command.
"""

import io
import os
from tempfile import NamedTemporaryFile
from unittest.mock import patch

from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase

from rbac_auth.models import Permission, Role

User = get_user_model()


class LoadRolesCommandTests(TestCase):
    """
    Tests for the `load_roles` Django management command.

    This test class verifies:
    - Loading the default policy file shipped with the app
    - Idempotency of consecutive loads
    - User assignments from grouping lines
    - Clearing unlocked roles before loading
    - File existence checks
    """

    def setUp(self):
        super().setUp()
        self.stdout = io.StringIO()
        self.stderr = io.StringIO()

    def write_policy(self, content: str) -> str:
        """Write a temporary policy file and return its path."""
        policy_file = NamedTemporaryFile("w", suffix=".policy", delete=False)
        with policy_file:
            policy_file.write(content)
        self.addCleanup(os.remove, policy_file.name)
        return policy_file.name

    def call(self, *args):
        call_command("load_roles", *args, stdout=self.stdout, stderr=self.stderr)

    def test_load_default_policy(self):
        """Test the default policy file creates the default roles.

        Expected Result:
        - Two roles and six permissions are created.
        - The admin role holds every permission, the moderator a subset.
        """
        self.call()

        self.assertEqual(Role.objects.count(), 2)
        self.assertEqual(Permission.objects.count(), 6)
        self.assertEqual(Role.objects.get(slug="admin").permissions.count(), 6)
        self.assertEqual(
            sorted(Role.objects.get(slug="moderator").permissions.values_list("slug", flat=True)),
            ["auth.roles.list", "auth.users.list", "auth.users.update"],
        )
        self.assertIn("Loaded 2 roles, 6 permissions and 0 user assignments", self.stdout.getvalue())

    def test_load_is_idempotent(self):
        """Test loading the same policy twice creates nothing the second time."""
        self.call()
        self.call()

        self.assertEqual(Role.objects.count(), 2)
        self.assertEqual(Permission.objects.count(), 6)
        self.assertIn("Loaded 0 roles, 0 permissions and 0 user assignments", self.stdout.getvalue())

    def test_load_assignments(self):
        """Test grouping lines attach existing users and skip unknown ones.

        Expected Result:
        - alice is attached to the editor role.
        - bob does not exist and is reported on stderr.
        """
        User.objects.create_user(username="alice")
        policy_path = self.write_policy(
            "p, Editor, blog.posts.publish\n"
            "p, Editor, blog.posts.update\n"
            "g, alice, editor\n"
            "g, bob, editor\n"
        )

        self.call("--policy-file-path", policy_path)

        editor = Role.objects.get(slug="editor")
        self.assertEqual(editor.name, "Editor")
        self.assertEqual([user.username for user in editor.users.all()], ["alice"])
        self.assertIn("Loaded 1 roles, 2 permissions and 1 user assignments", self.stdout.getvalue())
        self.assertIn("Skipping assignment of bob to editor", self.stderr.getvalue())

    @patch("rbac_auth.management.commands.load_roles.click.confirm", return_value=True)
    def test_clear_existing_keeps_locked_roles(self, mock_confirm):
        """Test clearing existing roles deletes only the unlocked ones."""
        Role.objects.create(name="Legacy")
        Role.objects.create(name="Owner", is_locked=True)

        self.call("--clear-existing")

        mock_confirm.assert_called_once()
        self.assertFalse(Role.objects.filter(slug="legacy").exists())
        self.assertTrue(Role.objects.filter(slug="owner").exists())
        self.assertTrue(Role.objects.filter(slug="admin").exists())

    @patch("rbac_auth.management.commands.load_roles.click.confirm", return_value=False)
    def test_clear_existing_declined(self, mock_confirm):
        """Test declining the confirmation keeps every role."""
        Role.objects.create(name="Legacy")

        self.call("--clear-existing")

        mock_confirm.assert_called_once()
        self.assertTrue(Role.objects.filter(slug="legacy").exists())

    def test_missing_policy_file(self):
        """Test a missing policy file raises CommandError and loads nothing."""
        with self.assertRaises(CommandError) as context:
            self.call("--policy-file-path", "/nonexistent/roles.policy")

        self.assertIn("File not found: /nonexistent/roles.policy", str(context.exception))
        self.assertFalse(Role.objects.exists())

    def test_missing_model_file(self):
        """Test a missing model file raises CommandError."""
        with self.assertRaises(CommandError):
            self.call("--model-file-path", "/nonexistent/model.conf")
