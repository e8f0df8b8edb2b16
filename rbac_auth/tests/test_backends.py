"""Unit tests for the role permission authentication backend."""

from django.contrib.auth import get_user_model
from django.test import TestCase

from rbac_auth.backends import RolePermissionBackend
from rbac_auth.models import Permission, Role

User = get_user_model()


class TestRolePermissionBackend(TestCase):
    """Test cases for RolePermissionBackend through ``user.has_perm``."""

    def setUp(self):
        self.role = Role.objects.create(name="Moderator")
        self.role.attach_permission(Permission.objects.create(name="List users", slug="auth.users.list"))
        self.role.attach_permission(Permission.objects.create(name="Update users", slug="auth.users.update"))
        User.objects.create_user(username="john").attach_role(self.role)

    def get_user(self, username="john"):
        """Fetch a fresh user so the permission cache is empty."""
        return User.objects.get(username=username)

    def test_has_perm(self):
        """Test the permissions of the active roles are granted."""
        user = self.get_user()

        self.assertTrue(user.has_perm("auth.users.list"))
        self.assertTrue(user.has_perm("Auth Users Update"))
        self.assertFalse(user.has_perm("auth.users.delete"))

    def test_get_all_permissions(self):
        """Test listing the permission slugs of a user."""
        self.assertEqual(self.get_user().get_all_permissions(), {"auth.users.list", "auth.users.update"})

    def test_inactive_role(self):
        """Test inactive roles grant nothing."""
        self.role.deactivate()

        self.assertFalse(self.get_user().has_perm("auth.users.list"))

    def test_inactive_user(self):
        """Test inactive users are denied."""
        User.objects.filter(username="john").update(is_active=False)

        self.assertFalse(self.get_user().has_perm("auth.users.list"))
        self.assertEqual(RolePermissionBackend().get_all_permissions(self.get_user()), set())

    def test_superuser(self):
        """Test active superusers are granted everything."""
        admin = User.objects.create_superuser(username="admin", email="admin@example.com", password="secret")

        self.assertTrue(RolePermissionBackend().has_perm(admin, "anything.at.all"))

    def test_permissions_are_cached_per_instance(self):
        """Test the permissions are only queried once per user instance."""
        backend = RolePermissionBackend()
        user = self.get_user()

        backend.get_all_permissions(user)
        with self.assertNumQueries(0):
            self.assertTrue(backend.has_perm(user, "auth.users.list"))
