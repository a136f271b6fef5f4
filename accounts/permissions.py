"""
Administrator authorization for the registration ledger
"""
from rest_framework import permissions

from .models import UserRole


def has_admin_role(user_id):
    """Return True when the user exists, is active and holds the admin role"""
    if user_id is None:
        return False
    try:
        return UserRole.objects.filter(user_id=user_id, user__is_active=True, role="admin").exists()
    except (ValueError, TypeError):
        return False


class IsAdminRole(permissions.BasePermission):
    """Permission class for GameArena administrators"""

    def has_permission(self, request, view):
        return request.user.is_authenticated and has_admin_role(request.user.id)
