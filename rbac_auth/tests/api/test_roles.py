"""Test cases for the roles API functions."""

from ddt import data, ddt, unpack
from django.contrib.auth import get_user_model
from django.test import TestCase

from rbac_auth.api.roles import (
    RoleLockedError,
    assign_role_to_user,
    batch_assign_role_to_users,
    batch_unassign_role_from_users,
    create_role,
    delete_role,
    get_all_roles,
    get_permissions_for_role,
    get_role,
    get_users_for_role,
    unassign_role_from_user,
)
from rbac_auth.models import Permission, Role

User = get_user_model()


class RolesTestData(TestCase):
    """Roles, permissions and users shared by the role API tests."""

    @classmethod
    def setUpTestData(cls):
        cls.list_users = Permission.objects.create(name="List users", slug="auth.users.list")
        cls.update_users = Permission.objects.create(name="Update users", slug="auth.users.update")
        cls.moderator = create_role("Moderator", permissions=["auth.users.list", "auth.users.update"])
        cls.admin = create_role("Admin", is_locked=True)
        cls.guest = create_role("Guest")
        cls.guest.deactivate()
        for username in ("carol", "alice", "bob"):
            User.objects.create_user(username=username, email=f"{username}@example.com")


@ddt
class TestRoleRetrieval(RolesTestData):
    """Test cases for creating and fetching roles."""

    def test_create_role_attaches_permissions(self):
        """Test the permissions of a new role are attached in one step."""
        self.assertEqual(
            [permission.slug for permission in get_permissions_for_role("moderator")],
            ["auth.users.list", "auth.users.update"],
        )

    def test_create_role_with_unknown_permission(self):
        """Test creating a role with an unknown permission creates nothing.

        Expected Result:
            - Permission.DoesNotExist is raised.
            - The role is not created.
        """
        with self.assertRaises(Permission.DoesNotExist):
            create_role("Editor", permissions=["auth.users.list", "blog.posts.publish"])

        self.assertFalse(Role.objects.filter(slug="editor").exists())

    def test_create_role_with_explicit_slug(self):
        """Test an explicit slug is kept, normalized."""
        role = create_role("Content Editor", slug="Blog Editor")

        self.assertEqual(role.slug, "blog.editor")

    @data(
        ("moderator", "Moderator"),
        ("Moderator", "Moderator"),
        ("ADMIN", "Admin"),
    )
    @unpack
    def test_get_role(self, slug, expected_name):
        """Test roles are fetched by normalized slug."""
        self.assertEqual(get_role(slug).name, expected_name)

    def test_get_unknown_role(self):
        """Test fetching an unknown role raises DoesNotExist."""
        with self.assertRaises(Role.DoesNotExist):
            get_role("owner")

    @data(
        (False, ["moderator", "admin", "guest"]),
        (True, ["moderator", "admin"]),
    )
    @unpack
    def test_get_all_roles(self, active_only, expected_slugs):
        """Test listing roles, optionally active ones only."""
        self.assertEqual([role.slug for role in get_all_roles(active_only=active_only)], expected_slugs)


class TestRoleDeletion(RolesTestData):
    """Test cases for deleting roles."""

    def test_delete_role(self):
        """Test deleting an unlocked role removes its assignments."""
        assign_role_to_user("alice", "moderator")

        delete_role("moderator")

        self.assertFalse(Role.objects.filter(slug="moderator").exists())
        self.assertFalse(User.objects.get(username="alice").roles.exists())
        self.assertTrue(Permission.objects.filter(slug="auth.users.list").exists())

    def test_delete_locked_role(self):
        """Test locked roles cannot be deleted.

        Expected Result:
            - RoleLockedError is raised and carries the role.
            - The role still exists.
        """
        with self.assertRaises(RoleLockedError) as context:
            delete_role("admin")

        self.assertEqual(context.exception.role, self.admin)
        self.assertTrue(Role.objects.filter(slug="admin").exists())


class TestRoleAssignments(RolesTestData):
    """Test cases for assigning roles to users."""

    def test_assign_role_to_user(self):
        """Test assigning a role twice only attaches it once."""
        self.assertTrue(assign_role_to_user("alice", "moderator"))
        self.assertFalse(assign_role_to_user("alice", "moderator"))

        self.assertEqual([user.username for user in get_users_for_role("moderator")], ["alice"])

    def test_assign_role_to_unknown_user(self):
        """Test assigning a role to an unknown user raises DoesNotExist."""
        with self.assertRaises(User.DoesNotExist):
            assign_role_to_user("dave", "moderator")

    def test_unassign_role_from_user(self):
        """Test unassigning a role reports whether the user had it."""
        assign_role_to_user("alice", "moderator")

        self.assertTrue(unassign_role_from_user("alice", "moderator"))
        self.assertFalse(unassign_role_from_user("alice", "moderator"))
        self.assertEqual(get_users_for_role("moderator"), [])

    def test_batch_assignments(self):
        """Test assigning and unassigning roles for several users.

        Expected Result:
            - Users are listed by username.
            - Unknown users are skipped when unassigning.
        """
        batch_assign_role_to_users(["carol", "alice", "bob"], "moderator")

        self.assertEqual(
            [user.username for user in get_users_for_role("moderator")],
            ["alice", "bob", "carol"],
        )

        with self.assertLogs("rbac_auth.api.roles", level="WARNING"):
            batch_unassign_role_from_users(["alice", "dave", "carol"], "moderator")

        self.assertEqual([user.username for user in get_users_for_role("moderator")], ["bob"])

    def test_batch_assign_skips_unknown_users(self):
        """Test unknown users do not stop a batch assignment.

        Expected Result:
            - Known users after the unknown one are still assigned.
            - The unknown user is reported in a warning.
        """
        with self.assertLogs("rbac_auth.api.roles", level="WARNING") as logs:
            batch_assign_role_to_users(["alice", "dave", "carol"], "moderator")

        self.assertEqual(
            [user.username for user in get_users_for_role("moderator")],
            ["alice", "carol"],
        )
        self.assertIn("dave", logs.output[0])
