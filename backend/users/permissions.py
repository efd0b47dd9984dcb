from rest_framework import permissions
from .models import User
import logging

logger = logging.getLogger(__name__)


def _has_role(user, roles):
    return bool(
        user
        and user.is_authenticated
        and user.is_active
        and getattr(user, "role", None) in roles
    )


class IsStaffMember(permissions.BasePermission):
    """Any authenticated, active staff account regardless of role."""

    def has_permission(self, request, view):
        return _has_role(request.user, User.Role.values)


class IsManagerOrHigher(permissions.BasePermission):
    def has_permission(self, request, view):
        return _has_role(request.user, [User.Role.ADMIN, User.Role.MANAGER])


class IsAdminRole(permissions.BasePermission):
    def has_permission(self, request, view):
        allowed = _has_role(request.user, [User.Role.ADMIN])
        if not allowed and request.user and request.user.is_authenticated:
            logger.warning(
                f"Admin-only access denied for {request.user.username} ({request.user.role}) on {request.path}"
            )
        return allowed
