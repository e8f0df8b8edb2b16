"""Test cases for the rbac_auth helpers and settings accessors."""

from ddt import data, ddt, unpack
from django.test import TestCase, override_settings

from rbac_auth.conf import get_slug_separator, get_table_name
from rbac_auth.models import Role
from rbac_auth.utils import get_key, slugify


@ddt
class TestSlugify(TestCase):
    """Test cases for slug normalization."""

    @data(
        ("Create users", "create.users"),
        ("auth.users.create", "auth.users.create"),
        ("Super-Admin", "super.admin"),
        ("  Héllo   Wörld ", "hello.world"),
        ("Straße Æther", "strasse.aether"),
        ("Øresund Łódź", "oresund.lodz"),
        ("library_admin", "libraryadmin"),
        ("a..b", "a.b"),
        (".leading.", "leading"),
        ("Role #1!", "role.1"),
        ("", ""),
    )
    @unpack
    def test_slugify_with_default_separator(self, value: str, expected: str):
        """Test slugify with the default ``.`` separator.

        Expected Result:
            - The value is lower-cased, transliterated and joined with dots.
        """
        self.assertEqual(slugify(value), expected)

    @data(
        ("Super Admin", "-", "super-admin"),
        ("snake_case name", "-", "snake-case-name"),
        ("Super-Admin", "_", "super_admin"),
    )
    @unpack
    def test_slugify_with_custom_separator(self, value: str, separator: str, expected: str):
        """Test slugify with an explicit separator.

        Expected Result:
            - The opposite separator is turned into the given one.
        """
        self.assertEqual(slugify(value, separator), expected)

    @override_settings(RBAC_AUTH_SLUG_SEPARATOR="-")
    def test_slugify_reads_separator_setting(self):
        """Test the separator defaults to the ``RBAC_AUTH_SLUG_SEPARATOR`` setting."""
        self.assertEqual(get_slug_separator(), "-")
        self.assertEqual(slugify("Create users"), "create-users")

    def test_get_key_with_instance_and_raw_id(self):
        """Test get_key returns the primary key of instances and raw ids unchanged."""
        role = Role.objects.create(name="Member")

        self.assertEqual(get_key(role), role.pk)
        self.assertEqual(get_key(42), 42)


class TestTableNames(TestCase):
    """Test cases for the configurable table names."""

    def test_default_table_names(self):
        """Test the default table names.

        Expected Result:
            - The models use the default table names.
        """
        self.assertEqual(get_table_name("roles"), "roles")
        self.assertEqual(get_table_name("role_user"), "role_has_users")
        self.assertEqual(get_table_name("permission_role"), "role_has_permissions")
        self.assertEqual(get_table_name("permissions_groups"), "permissions_group")
        self.assertEqual(Role._meta.db_table, "roles")

    @override_settings(RBAC_AUTH_ROLES_TABLE="auth_roles")
    def test_table_name_from_settings(self):
        """Test a table name can be overridden in the settings."""
        self.assertEqual(get_table_name("roles"), "auth_roles")

    def test_unknown_table_key(self):
        """Test an unknown table key raises a ValueError."""
        with self.assertRaises(ValueError):
            get_table_name("unknown")
