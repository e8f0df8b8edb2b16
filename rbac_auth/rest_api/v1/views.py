"""
REST API views for the RBAC Auth system.

This module provides Django REST Framework views to check permissions, list roles
and manage the users attached to a role.
"""

import logging

import edx_api_doc_tools as apidocs
from django.contrib.auth import get_user_model
from django.http import HttpRequest
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from rbac_auth import api
from rbac_auth.models import Role
from rbac_auth.rest_api.data import RoleOperationError, RoleOperationStatus, SortOrder
from rbac_auth.rest_api.decorators import rbac_permissions, view_auth_classes
from rbac_auth.rest_api.utils import filter_users, get_user_by_username_or_email
from rbac_auth.rest_api.v1.paginators import RbacAPIViewPagination
from rbac_auth.rest_api.v1.permissions import RolePermission
from rbac_auth.rest_api.v1.serializers import (
    AddUsersToRoleSerializer,
    ListRolesSerializer,
    ListUsersInRoleSerializer,
    PermissionValidationResponseSerializer,
    PermissionValidationSerializer,
    RemoveUsersFromRoleSerializer,
    RoleResponseSerializer,
    RoleUserSerializer,
)

logger = logging.getLogger(__name__)

User = get_user_model()

LIST_ROLES_PERMISSION = "auth.roles.list"
MANAGE_ROLES_PERMISSION = "auth.roles.manage"


@view_auth_classes()
class PermissionValidationMeView(APIView):
    """
    API view for validating the permissions of the authenticated user.

    **Endpoints**

    - POST: Validate one or more permissions for the authenticated user

    **Request Format**

    Expects a list of objects, each containing:

    - permission: The permission slug to validate (e.g., 'auth.users.create')

    **Response Format**

    Returns a list of validation results, each containing:

    - permission: The requested permission
    - allowed: Boolean indicating if the user is granted the permission

    **Example Request**

    POST /api/rbac/v1/permissions/validate/me

    .. code-block:: json

        [
            {"permission": "auth.users.create"},
            {"permission": "auth.users.delete"}
        ]

    **Example Response**

    .. code-block:: json

        [
            {"permission": "auth.users.create", "allowed": true},
            {"permission": "auth.users.delete", "allowed": false}
        ]
    """

    @apidocs.schema(
        body=PermissionValidationSerializer(help_text="The permissions to validate", many=True),
        responses={
            status.HTTP_200_OK: PermissionValidationResponseSerializer,
            status.HTTP_400_BAD_REQUEST: "The request data is invalid",
            status.HTTP_401_UNAUTHORIZED: "The user is not authenticated",
        },
    )
    def post(self, request: HttpRequest) -> Response:
        """Validate one or more permissions for the authenticated user."""
        serializer = PermissionValidationSerializer(data=request.data, many=True)
        serializer.is_valid(raise_exception=True)

        username = request.user.username
        response_data = []
        for perm in serializer.validated_data:
            try:
                permission = perm["permission"]
                response_data.append(
                    {
                        "permission": permission,
                        "allowed": api.is_user_allowed(username, permission),
                    }
                )
            except Exception as e:  # pylint: disable=broad-exception-caught
                logger.error(f"Error validating permission for user {username}: {e}")
                return Response(
                    data={"message": "An error occurred while validating permissions"},
                    status=status.HTTP_500_INTERNAL_SERVER_ERROR,
                )

        serializer = PermissionValidationResponseSerializer(response_data, many=True)
        return Response(serializer.data, status=status.HTTP_200_OK)


@view_auth_classes()
class RoleListView(APIView):
    """API view for retrieving roles with their permissions.

    **Endpoints**

    - GET: Retrieve all roles, their permission slugs and their number of users

    **Query Parameters**

    - active_only (Optional): Only return active roles
    - page (Optional): Page number for pagination
    - page_size (Optional): Number of items per page

    **Authentication and Permissions**

    - Requires authenticated user.
    - Requires ``auth.roles.list`` permission.

    **Example Response**

    .. code-block:: json

        {
            "count": 1,
            "next": null,
            "previous": null,
            "results": [
                {
                    "name": "Moderator",
                    "slug": "moderator",
                    "description": "",
                    "is_active": true,
                    "is_locked": false,
                    "permissions": ["auth.users.list", "auth.users.update"],
                    "user_count": 5
                }
            ]
        }
    """

    pagination_class = RbacAPIViewPagination
    permission_classes = [RolePermission]

    @apidocs.schema(
        parameters=[
            apidocs.query_parameter("active_only", bool, description="Only return active roles"),
            apidocs.query_parameter("page", int, description="Page number for pagination"),
            apidocs.query_parameter("page_size", int, description="Number of items per page"),
        ],
        responses={
            status.HTTP_200_OK: RoleResponseSerializer(many=True),
            status.HTTP_400_BAD_REQUEST: "The request parameters are invalid",
            status.HTTP_401_UNAUTHORIZED: "The user is not authenticated",
            status.HTTP_403_FORBIDDEN: "The user does not have the required permissions",
        },
    )
    @rbac_permissions([LIST_ROLES_PERMISSION])
    def get(self, request: HttpRequest) -> Response:
        """Retrieve all roles and their permissions."""
        serializer = ListRolesSerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)

        roles = api.get_all_roles(active_only=serializer.validated_data["active_only"])

        paginator = self.pagination_class()
        paginated_roles = paginator.paginate_queryset(roles, request)
        serialized_data = RoleResponseSerializer(paginated_roles, many=True)
        return paginator.get_paginated_response(serialized_data.data)


@view_auth_classes()
class RoleUserAPIView(APIView):
    """
    API view for managing the users attached to a role.

    **Endpoints**

    - GET: Retrieve the users attached to the role
    - PUT: Attach multiple users to the role
    - DELETE: Detach multiple users from the role

    **Query Parameters (GET)**

    - search (Optional): Search term to filter users by username, email or name
    - order (Optional): Sort order by username ('asc' or 'desc')
    - page (Optional): Page number for pagination
    - page_size (Optional): Number of items per page

    **Request Format (PUT)**

    - users: List of user identifiers (username or email)

    **Request Format (DELETE)**

    Query parameters:

    - users: Comma-separated list of user identifiers (username or email)

    **Response Format (PUT)**

    Returns HTTP 207 Multi-Status with:

    .. code-block:: json

        {
            "completed": [{"user_identifier": "john_doe", "status": "role_added"}],
            "errors": [{"user_identifier": "jane_doe", "error": "user_already_has_role"}]
        }

    **Authentication and Permissions**

    - Requires authenticated user.
    - Requires ``auth.roles.manage`` for GET, PUT and DELETE.
    - Locked roles cannot be changed: PUT and DELETE answer 403.

    **Example Request**

    PUT /api/rbac/v1/roles/moderator/users/

    .. code-block:: json

        {"users": ["user1@example.com", "username2"]}

    DELETE /api/rbac/v1/roles/moderator/users/?users=user1@example.com,username2
    """

    pagination_class = RbacAPIViewPagination
    permission_classes = [RolePermission]

    def _get_role(self, role_slug: str) -> Role | None:
        try:
            return api.get_role(role_slug)
        except Role.DoesNotExist:
            return None

    def _locked_response(self, role: Role) -> Response:
        return Response(
            data={"message": f"Role '{role.slug}' is locked"},
            status=status.HTTP_403_FORBIDDEN,
        )

    def _not_found_response(self, role_slug: str) -> Response:
        return Response(
            data={"message": f"Role '{role_slug}' does not exist"},
            status=status.HTTP_404_NOT_FOUND,
        )

    @apidocs.schema(
        parameters=[
            apidocs.query_parameter("search", str, description="The search query to filter users by"),
            apidocs.query_parameter("order", str, description="The order to sort usernames by"),
            apidocs.query_parameter("page", int, description="Page number for pagination"),
            apidocs.query_parameter("page_size", int, description="Number of items per page"),
        ],
        responses={
            status.HTTP_200_OK: "The users were retrieved successfully",
            status.HTTP_400_BAD_REQUEST: "The request parameters are invalid",
            status.HTTP_401_UNAUTHORIZED: "The user is not authenticated",
            status.HTTP_403_FORBIDDEN: "The user does not have the required permissions",
            status.HTTP_404_NOT_FOUND: "The role does not exist",
        },
    )
    @rbac_permissions([MANAGE_ROLES_PERMISSION])
    def get(self, request: HttpRequest, role_slug: str) -> Response:
        """Retrieve the users attached to a role."""
        serializer = ListUsersInRoleSerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        query_params = serializer.validated_data

        role = self._get_role(role_slug)
        if role is None:
            return self._not_found_response(role_slug)

        ordering = "-username" if query_params["order"] == SortOrder.DESC else "username"
        users = filter_users(role.users.all(), query_params["search"]).order_by(ordering)

        paginator = self.pagination_class()
        paginated_users = paginator.paginate_queryset(users, request)
        serialized_data = RoleUserSerializer(paginated_users, many=True)
        return paginator.get_paginated_response(serialized_data.data)

    @apidocs.schema(
        body=AddUsersToRoleSerializer,
        responses={
            status.HTTP_207_MULTI_STATUS: "The users were added to the role",
            status.HTTP_400_BAD_REQUEST: "The request data is invalid",
            status.HTTP_401_UNAUTHORIZED: "The user is not authenticated",
            status.HTTP_403_FORBIDDEN: "The user does not have the required permissions or the role is locked",
            status.HTTP_404_NOT_FOUND: "The role does not exist",
        },
    )
    @rbac_permissions([MANAGE_ROLES_PERMISSION])
    def put(self, request: HttpRequest, role_slug: str) -> Response:
        """Attach multiple users to a role."""
        serializer = AddUsersToRoleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        role = self._get_role(role_slug)
        if role is None:
            return self._not_found_response(role_slug)
        if role.is_locked_role():
            return self._locked_response(role)

        completed, errors = [], []
        for user_identifier in serializer.validated_data["users"]:
            response_dict = {"user_identifier": user_identifier}
            try:
                user = get_user_by_username_or_email(user_identifier)
                if role.has_user(user):
                    response_dict["error"] = RoleOperationError.USER_ALREADY_HAS_ROLE
                    errors.append(response_dict)
                else:
                    role.attach_user(user, reload=False)
                    response_dict["status"] = RoleOperationStatus.ROLE_ADDED
                    completed.append(response_dict)
            except User.DoesNotExist:
                response_dict["error"] = RoleOperationError.USER_NOT_FOUND
                errors.append(response_dict)
            except Exception as e:  # pylint: disable=broad-exception-caught
                logger.error(f"Error assigning role to user {user_identifier}: {e}")
                response_dict["error"] = RoleOperationError.ROLE_ASSIGNMENT_ERROR
                errors.append(response_dict)

        response_data = {"completed": completed, "errors": errors}
        return Response(response_data, status=status.HTTP_207_MULTI_STATUS)

    @apidocs.schema(
        parameters=[
            apidocs.query_parameter(
                "users", str, description="List of user identifiers (username or email) separated by a comma"
            ),
        ],
        responses={
            status.HTTP_207_MULTI_STATUS: "The users were removed from the role",
            status.HTTP_400_BAD_REQUEST: "The request parameters are invalid",
            status.HTTP_401_UNAUTHORIZED: "The user is not authenticated",
            status.HTTP_403_FORBIDDEN: "The user does not have the required permissions or the role is locked",
            status.HTTP_404_NOT_FOUND: "The role does not exist",
        },
    )
    @rbac_permissions([MANAGE_ROLES_PERMISSION])
    def delete(self, request: HttpRequest, role_slug: str) -> Response:
        """Detach multiple users from a role."""
        serializer = RemoveUsersFromRoleSerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)

        role = self._get_role(role_slug)
        if role is None:
            return self._not_found_response(role_slug)
        if role.is_locked_role():
            return self._locked_response(role)

        completed, errors = [], []
        for user_identifier in serializer.validated_data["users"]:
            response_dict = {"user_identifier": user_identifier}
            try:
                user = get_user_by_username_or_email(user_identifier)
                if role.detach_user(user, reload=False):
                    response_dict["status"] = RoleOperationStatus.ROLE_REMOVED
                    completed.append(response_dict)
                else:
                    response_dict["error"] = RoleOperationError.USER_DOES_NOT_HAVE_ROLE
                    errors.append(response_dict)
            except User.DoesNotExist:
                response_dict["error"] = RoleOperationError.USER_NOT_FOUND
                errors.append(response_dict)
            except Exception as e:  # pylint: disable=broad-exception-caught
                logger.error(f"Error removing role from user {user_identifier}: {e}")
                response_dict["error"] = RoleOperationError.ROLE_REMOVAL_ERROR
                errors.append(response_dict)

        response_data = {"completed": completed, "errors": errors}
        return Response(response_data, status=status.HTTP_207_MULTI_STATUS)
