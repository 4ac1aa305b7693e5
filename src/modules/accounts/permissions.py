"""DRF permission classes based on ``User.role``."""

from __future__ import annotations

from rest_framework.permissions import BasePermission


class IsAdminRole(BasePermission):
    message = "Administrator role required."

    def has_permission(self, request, view) -> bool:
        user = request.user
        return bool(user and user.is_authenticated and getattr(user, "is_admin", False))
