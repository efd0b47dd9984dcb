"""
Role-Based Access Control (RBAC) Tests

The three staff roles map onto three permission classes. These tests pin
down which role passes which check, and how the checks are wired to the
HTTP surface.
"""
import pytest
from django.contrib.auth.models import AnonymousUser
from rest_framework import status

from users.models import User
from users.permissions import IsAdminRole, IsManagerOrHigher, IsStaffMember


def _request_for(user):
    return type("obj", (object,), {"user": user, "path": "/test/"})


@pytest.mark.django_db
class TestPermissionClasses:
    @pytest.mark.parametrize(
        "role,staff,manager,admin",
        [
            (User.Role.ADMIN, True, True, True),
            (User.Role.MANAGER, True, True, False),
            (User.Role.STAFF, True, False, False),
        ],
    )
    def test_role_matrix(self, role, staff, manager, admin):
        user = User.objects.create_user(username=f"user-{role}", password="pw123456", role=role)
        request = _request_for(user)

        assert IsStaffMember().has_permission(request, None) is staff
        assert IsManagerOrHigher().has_permission(request, None) is manager
        assert IsAdminRole().has_permission(request, None) is admin

    def test_anonymous_fails_every_check(self):
        request = _request_for(AnonymousUser())

        assert IsStaffMember().has_permission(request, None) is False
        assert IsManagerOrHigher().has_permission(request, None) is False
        assert IsAdminRole().has_permission(request, None) is False

    def test_inactive_admin_fails_every_check(self, admin_user):
        admin_user.is_active = False
        request = _request_for(admin_user)

        assert IsStaffMember().has_permission(request, None) is False
        assert IsAdminRole().has_permission(request, None) is False


@pytest.mark.django_db
class TestUserModel:
    def test_role_helpers(self, admin_user, manager_user, staff_user):
        assert admin_user.is_admin and admin_user.is_manager_or_higher
        assert not manager_user.is_admin and manager_user.is_manager_or_higher
        assert not staff_user.is_admin and not staff_user.is_manager_or_higher

    def test_only_admins_reach_django_admin(self, admin_user, staff_user):
        assert admin_user.is_staff is True
        assert staff_user.is_staff is False

    def test_password_is_hashed(self, staff_user):
        assert staff_user.password != "waiter123"
        assert staff_user.check_password("waiter123")

    def test_new_accounts_default_to_staff_role(self):
        user = User.objects.create_user(username="newbie", password="pw123456")
        assert user.role == User.Role.STAFF
        assert user.permissions == []


@pytest.mark.django_db
class TestRoleGatedEndpoints:
    """Forbidden for the wrong role (403), unauthorized without a token (401)."""

    def test_staff_cannot_manage_menu(self, staff_client):
        response = staff_client.post(
            "/api/menu/", {"name": "Soup", "price": "4.00", "category": "appetizers"}, format="json"
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_manager_can_manage_menu(self, manager_client):
        response = manager_client.post(
            "/api/menu/", {"name": "Soup", "price": "4.00", "category": "appetizers"}, format="json"
        )
        assert response.status_code == status.HTTP_201_CREATED

    def test_staff_cannot_view_analytics(self, staff_client):
        response = staff_client.get("/api/admin/analytics/")
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_anonymous_cannot_list_orders(self, api_client):
        response = api_client.get("/api/orders/")
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
