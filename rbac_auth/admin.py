"""Admin configuration for rbac_auth."""

from django.contrib import admin

from rbac_auth.models import Permission, PermissionRole, PermissionsGroup, Role, RoleUser


class PermissionRoleInline(admin.TabularInline):
    """Inline admin for the permissions attached to a role."""

    model = PermissionRole
    extra = 0
    autocomplete_fields = ("permission",)
    readonly_fields = ("created_at",)


class RoleUserInline(admin.TabularInline):
    """Inline admin for the users attached to a role."""

    model = RoleUser
    extra = 0
    raw_id_fields = ("user",)
    readonly_fields = ("created_at",)


class PermissionInline(admin.TabularInline):
    """Inline admin for the permissions of a group."""

    model = Permission
    extra = 0
    fields = ("name", "slug", "model", "description")


@admin.register(Role)
class RoleAdmin(admin.ModelAdmin):
    """Admin for roles with their permissions and users."""

    list_display = ("id", "name", "slug", "is_active", "is_locked", "updated_at")
    list_filter = ("is_active", "is_locked")
    search_fields = ("name", "slug", "description")
    readonly_fields = ("created_at", "updated_at")
    inlines = [PermissionRoleInline, RoleUserInline]

    def has_delete_permission(self, request, obj=None):
        """Locked roles cannot be deleted from the admin."""
        if obj is not None and obj.is_locked_role():
            return False
        return super().has_delete_permission(request, obj)


@admin.register(Permission)
class PermissionAdmin(admin.ModelAdmin):
    """Admin for permissions."""

    list_display = ("id", "name", "slug", "group", "model")
    list_filter = ("group",)
    search_fields = ("name", "slug", "description")
    readonly_fields = ("created_at", "updated_at")


@admin.register(PermissionsGroup)
class PermissionsGroupAdmin(admin.ModelAdmin):
    """Admin for permissions groups with their permissions."""

    list_display = ("id", "name", "slug")
    search_fields = ("name", "slug")
    readonly_fields = ("created_at", "updated_at")
    inlines = [PermissionInline]
