"""Abstract base models and mixins shared by the RBAC models."""

from typing import ClassVar

from django.db import models
from django.db.models import prefetch_related_objects

from rbac_auth.utils import get_key, slugify

__all__ = [
    "RelationsMixin",
    "RoleRelationshipsMixin",
    "TimestampedModel",
    "SluggedModel",
]


class RelationsMixin:
    """Helpers to query and reload relations on a model instance."""

    def reload_relation(self, name: str) -> None:
        """Prefetch the relation ``name`` again so the cached rows are fresh.

        Args:
            name: The relation accessor name (e.g. ``"users"``).
        """
        cache = getattr(self, "_prefetched_objects_cache", {})
        cache.pop(name, None)
        prefetch_related_objects([self], name)

    def relation_contains(self, name: str, obj_or_id) -> bool:
        """Check whether the relation ``name`` contains the given instance or primary key."""
        return getattr(self, name).filter(pk=get_key(obj_or_id)).exists()


class RoleRelationshipsMixin(RelationsMixin):
    """Role helpers for models exposing a ``roles`` many-to-many relation.

    Used by permissions and users, whose ``roles`` accessor is the reverse side of
    ``Role.permissions`` and ``Role.users``.
    """

    def has_role(self, role_or_id) -> bool:
        """Check if the given role (instance or primary key) is attached."""
        return self.relation_contains("roles", role_or_id)

    def has_role_slug(self, slug: str) -> bool:
        """Check if a role with the given slug is attached. The slug is normalized first."""
        return self.roles.filter(slug=slugify(slug)).count() == 1

    def attach_role(self, role, reload: bool = True) -> None:
        """Attach a role. Does nothing if the role is already attached."""
        if self.has_role(role):
            return

        self.roles.add(role)

        if reload:
            self.reload_relation("roles")

    def detach_role(self, role_or_id, reload: bool = True) -> int:
        """Detach a role.

        Returns:
            int: The number of detached roles (0 or 1).
        """
        result = self.roles.filter(pk=get_key(role_or_id)).count()
        self.roles.remove(get_key(role_or_id))

        if reload:
            self.reload_relation("roles")

        return result

    def detach_all_roles(self, reload: bool = True) -> int:
        """Detach every role.

        Returns:
            int: The number of detached roles.
        """
        result = self.roles.count()
        self.roles.clear()

        if reload:
            self.reload_relation("roles")

        return result


class TimestampedModel(RelationsMixin, models.Model):
    """Abstract model that keeps track of creation and update times."""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class SluggedModel(TimestampedModel):
    """Abstract model with a ``name`` and a normalized, unique ``slug``.

    When ``SLUG_FOLLOWS_NAME`` is set, changing the name re-derives the slug unless
    the slug was also changed. In every case the stored slug is normalized with
    ``rbac_auth.utils.slugify``, and a blank slug is derived from the name.
    """

    SLUG_FOLLOWS_NAME: ClassVar[bool] = True

    name = models.CharField(max_length=255)
    slug = models.CharField(max_length=255, unique=True)
    description = models.TextField(blank=True, default="")

    class Meta:
        abstract = True

    def __str__(self):
        return self.slug

    @classmethod
    def from_db(cls, db, field_names, values):
        """Remember the loaded values so ``save`` can tell what changed."""
        instance = super().from_db(db, field_names, values)
        instance._loaded_values = dict(zip(field_names, values))
        return instance

    def save(self, *args, **kwargs):
        """Normalize the slug before saving."""
        loaded = getattr(self, "_loaded_values", {})
        name_changed = self.name != loaded.get("name")
        slug_changed = self.slug != loaded.get("slug")
        if not self.slug or (self.SLUG_FOLLOWS_NAME and name_changed and not slug_changed):
            self.slug = self.name
        self.slug = slugify(self.slug)
        super().save(*args, **kwargs)
        self._loaded_values = {**loaded, "name": self.name, "slug": self.slug}
