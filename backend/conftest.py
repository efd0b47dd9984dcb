"""
Root conftest.py for all backend tests.

This file makes fixtures available to all test files across all apps.
"""
from decimal import Decimal

import pytest
from django.apps import apps
from django.core.cache import cache


# ============================================================================
# AUTO-USE FIXTURES (Run automatically for every test)
# ============================================================================

@pytest.fixture(autouse=True)
def clear_cache_after_test():
    """
    Clear cache around each test.

    The rate limiter keeps its counters in the cache, so a test that logs in
    a few times must not eat into the next test's budget.
    """
    cache.clear()
    yield
    cache.clear()


# ============================================================================
# NOTIFIER FIXTURES
# ============================================================================

class RecordingNotifier:
    """
    Stands in for the NotificationService and records what would be sent.

    Events published inside a transaction are recorded on commit, like the
    real service, so tests that roll back see nothing.
    """

    def __init__(self):
        self.events = []

    def _record(self, target, event, data):
        from django.db import transaction

        transaction.on_commit(lambda: self.events.append((target, event, data)))

    def new_order(self, data):
        self._record("admin", "new-order", data)

    def service_called(self, table_number, data):
        self._record("admin", "service-called", data)

    def order_status_updated(self, table_number, data):
        self._record(f"table-{table_number}", "order-status-updated", data)

    def order_cancelled(self, table_number, data):
        self._record(f"table-{table_number}", "order-cancelled", data)

    def names(self):
        return [event for _, event, _ in self.events]


@pytest.fixture
def notifier(monkeypatch):
    """
    Swap the process-wide notifier for a RecordingNotifier in every service
    that holds one.

    Usage:
        def test_new_order_notifies(notifier, django_capture_on_commit_callbacks):
            with django_capture_on_commit_callbacks(execute=True):
                ...
            assert notifier.names() == ["new-order"]
    """
    recorder = RecordingNotifier()
    monkeypatch.setattr(apps.get_app_config("tables").table_service, "notifier", recorder)
    monkeypatch.setattr(apps.get_app_config("orders").intake_service, "notifier", recorder)
    monkeypatch.setattr(apps.get_app_config("orders").lifecycle_service, "notifier", recorder)
    return recorder


@pytest.fixture
def intake_service():
    return apps.get_app_config("orders").intake_service


@pytest.fixture
def lifecycle_service():
    return apps.get_app_config("orders").lifecycle_service


@pytest.fixture
def table_service():
    return apps.get_app_config("tables").table_service


# ============================================================================
# USER FIXTURES
# ============================================================================

@pytest.fixture
def admin_user(db):
    from users.models import User

    return User.objects.create_user(
        username="admin",
        password="admin123",
        role=User.Role.ADMIN,
        permissions=list(User.Permission.values),
    )


@pytest.fixture
def manager_user(db):
    from users.models import User

    return User.objects.create_user(username="manager", password="manager123", role=User.Role.MANAGER)


@pytest.fixture
def staff_user(db):
    from users.models import User

    return User.objects.create_user(username="waiter", password="waiter123", role=User.Role.STAFF)


# ============================================================================
# API CLIENT FIXTURES
# ============================================================================

@pytest.fixture
def api_client():
    """
    Provide DRF API client for API tests.

    Usage:
        def test_my_api(api_client):
            response = api_client.get('/api/menu/')
            assert response.status_code == 200
    """
    from rest_framework.test import APIClient
    return APIClient()


def _bearer_client(user):
    from rest_framework.test import APIClient
    from users.services import UserService

    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {UserService.generate_access_token(user)}")
    return client


@pytest.fixture
def admin_client(admin_user):
    """API client carrying an admin bearer token."""
    return _bearer_client(admin_user)


@pytest.fixture
def manager_client(manager_user):
    return _bearer_client(manager_user)


@pytest.fixture
def staff_client(staff_user):
    return _bearer_client(staff_user)


# ============================================================================
# RESTAURANT FIXTURES
# ============================================================================

@pytest.fixture
def burger(db):
    from menu.models import MenuItem

    return MenuItem.objects.create(
        name="Burger",
        description="Beef patty with cheddar",
        price=Decimal("10.00"),
        category=MenuItem.Category.MAIN_COURSES,
        preparation_time=20,
    )


@pytest.fixture
def soda(db):
    from menu.models import MenuItem

    return MenuItem.objects.create(
        name="Soda",
        price=Decimal("2.50"),
        category=MenuItem.Category.BEVERAGES,
        preparation_time=2,
    )


@pytest.fixture
def sold_out_item(db):
    from menu.models import MenuItem

    return MenuItem.objects.create(
        name="Lobster",
        price=Decimal("45.00"),
        category=MenuItem.Category.SPECIALS,
        available=False,
    )


@pytest.fixture
def table(db):
    from tables.models import Table

    return Table.objects.create(number=5, capacity=4, location="Main Dining")


@pytest.fixture
def other_table(db):
    from tables.models import Table

    return Table.objects.create(number=12, capacity=2, location="Terrace")


@pytest.fixture
def placed_order(table, burger, intake_service, notifier):
    """A pending order for table 5: 2 x Burger (10.00) + nothing else."""
    return intake_service.create_order(
        table_number=table.number,
        lines=[{"menu_item": burger.pk, "quantity": 2}],
    )
