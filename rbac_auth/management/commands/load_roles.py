"""Django management command to load roles and permissions from a Casbin policy file.

The command supports:
- Specifying the path to the Casbin policy file. Default is 'rbac_auth/config/roles.policy'.
- Specifying the Casbin model configuration file. Default is 'rbac_auth/config/model.conf'.
- Optionally clearing existing roles in the database before loading new ones.
"""

import logging
import os

import casbin
import click
from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from rbac_auth import ROOT_DIRECTORY
from rbac_auth.models import Permission, Role
from rbac_auth.utils import slugify

logger = logging.getLogger(__name__)

User = get_user_model()


class Command(BaseCommand):
    """Django management command to load roles and permissions into the database.

    Policy lines (``p, <role>, <permission>``) create the roles and permissions and
    attach them to each other. Grouping lines (``g, <username>, <role>``) attach
    existing users to roles; unknown users are reported and skipped.

    Example Usage:
        python manage.py load_roles --policy-file-path /path/to/roles.policy
        python manage.py load_roles --policy-file-path /path/to/roles.policy --model-file-path /path/to/model.conf
        python manage.py load_roles
    """

    help = "Load roles and permissions from a Casbin policy file into the database."

    def add_arguments(self, parser) -> None:
        """Add command-line arguments to the argument parser.

        Args:
            parser: The Django argument parser instance to configure.
        """
        parser.add_argument(
            "--policy-file-path",
            type=str,
            default=None,
            help="Path to the Casbin policy file (CSV format with role permissions and user roles)",
        )
        parser.add_argument(
            "--model-file-path",
            type=str,
            default=None,
            help="Path to the Casbin model configuration file",
        )
        parser.add_argument(
            "--clear-existing",
            action="store_true",
            help="Flag to clear existing roles before loading new ones",
        )

    def handle(self, *args, **options):
        """Execute the role loading command.

        Args:
            *args: Positional command arguments (unused).
            **options: Command options including 'policy_file_path', 'model_file_path', and 'clear_existing'.

        Raises:
            CommandError: If the policy or model file is not found.
        """
        policy_file_path, model_file_path = (
            options["policy_file_path"],
            options["model_file_path"],
        )
        if policy_file_path is None:
            policy_file_path = os.path.join(ROOT_DIRECTORY, "config", "roles.policy")
        if model_file_path is None:
            model_file_path = os.path.join(ROOT_DIRECTORY, "config", "model.conf")

        for path in (policy_file_path, model_file_path):
            if not os.path.isfile(path):
                raise CommandError(f"File not found: {path}")

        if options.get("clear_existing"):
            if click.confirm(
                click.style(
                    "Do you want to delete existing unlocked roles? "
                    "(This will also delete the assignments related to those roles)",
                    fg="yellow",
                    bold=True,
                ),
                default=False,
            ):
                self._delete_existing_roles()

        source_enforcer = casbin.Enforcer(model_file_path, policy_file_path)
        with transaction.atomic():
            roles, permissions = self.load_policies(source_enforcer.get_policy())
            assignments = self.load_assignments(source_enforcer.get_grouping_policy())

        self.stdout.write(
            self.style.SUCCESS(
                f"Loaded {roles} roles, {permissions} permissions and {assignments} user assignments"
            )
        )

    def load_policies(self, policies: list[list[str]]) -> tuple[int, int]:
        """Create the roles and permissions of the ``p`` lines and attach them.

        Args:
            policies: The policy lines as ``[role, permission]`` lists.

        Returns:
            tuple[int, int]: The number of created roles and permissions.
        """
        created_roles, created_permissions = 0, 0
        for role_key, permission_key, *_ in policies:
            role, role_created = Role.objects.get_or_create(
                slug=slugify(role_key),
                defaults={"name": role_key},
            )
            permission, permission_created = Permission.objects.get_or_create(
                slug=slugify(permission_key),
                defaults={"name": permission_key},
            )
            role.attach_permission(permission, reload=False)
            created_roles += role_created
            created_permissions += permission_created
        return created_roles, created_permissions

    def load_assignments(self, grouping_policies: list[list[str]]) -> int:
        """Attach users to the roles of the ``g`` lines.

        Args:
            grouping_policies: The grouping lines as ``[username, role]`` lists.

        Returns:
            int: The number of processed assignments.
        """
        assigned = 0
        for username, role_key, *_ in grouping_policies:
            try:
                user = User.objects.get(username=username)
                role = Role.objects.get_by_slug(role_key)
            except (User.DoesNotExist, Role.DoesNotExist) as exc:
                logger.warning("Skipping assignment of %s to %s: %s", username, role_key, exc)
                self.stderr.write(f"Skipping assignment of {username} to {role_key}: {exc}")
                continue
            role.attach_user(user, reload=False)
            assigned += 1
        return assigned

    def _delete_existing_roles(self):
        """Delete the existing unlocked roles."""
        for role in Role.objects.filter(is_locked=False):
            slug = role.slug
            role.delete()
            click.echo(f"Deleted role: {slug}")
