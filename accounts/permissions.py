"""
Admin API Permissions
"""
from rest_framework import permissions

from .authentication import AdminIdentity


class IsAdmin(permissions.BasePermission):
    """
    Permission for requests carrying a verified admin bearer token.
    """

    def has_permission(self, request, view):
        """Check the request was authenticated as the admin identity."""
        return isinstance(request.user, AdminIdentity) and request.user.is_authenticated
