# apps/accounts/permissions.py
from rest_framework import permissions

class IsAdminRole(permissions.BasePermission):
    """
    Grants access to users holding the 'admin' role (or Django superusers).
    """
    def has_permission(self, request, view):
        user = request.user
        if not (user and user.is_authenticated and user.is_active):
            return False
        if user.is_superuser:
            return True
        return user.roles.filter(role="admin").exists()
