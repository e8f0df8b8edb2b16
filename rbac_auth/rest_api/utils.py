"""Utility functions for the RBAC Auth REST API."""

from django.contrib.auth import get_user_model
from django.db.models import Q

User = get_user_model()


def get_user_by_username_or_email(username_or_email: str) -> User:
    """
    Retrieve a user by their username or email address.

    Args:
        username_or_email (str): The username or email address to search for.

    Returns:
        User: The matching User object.

    Raises:
        User.DoesNotExist: If no user matches the provided username or email.
        User.MultipleObjectsReturned: If the identifier matches several users.
    """
    return User.objects.get(Q(email=username_or_email) | Q(username=username_or_email))


def filter_users(users, search: str | None):
    """
    Filter a user queryset by a case-insensitive search over username, names and email.

    Args:
        users: The queryset of users to filter.
        search (str | None): Optional search term.

    Returns:
        The filtered queryset, or ``users`` unchanged when there is no search term.
    """
    if not search:
        return users

    return users.filter(
        Q(username__icontains=search)
        | Q(email__icontains=search)
        | Q(first_name__icontains=search)
        | Q(last_name__icontains=search)
    )
