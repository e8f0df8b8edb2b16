"""RBAC Auth API URLs."""

from django.urls import include, path

from rbac_auth.rest_api import urls

app_name = "rbac_auth"

urlpatterns = [
    path("api/rbac/", include((urls, "rbac_auth"))),
]
