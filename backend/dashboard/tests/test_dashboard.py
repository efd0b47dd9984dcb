"""
Dashboard & Analytics Tests

Read-only rollups for staff. Cancelled orders never count towards revenue.
"""
from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone
from rest_framework import status

from dashboard.services import DashboardService
from orders.models import Order
from tables.models import ServiceCall, Table
from tableside.exceptions import BusinessRuleViolation

DASHBOARD_URL = "/api/admin/dashboard/"
ANALYTICS_URL = "/api/admin/analytics/"
SERVICE_CALLS_URL = "/api/admin/service-calls/"


@pytest.fixture
def restaurant(intake_service, lifecycle_service, notifier, table, other_table, burger, soda):
    """
    Table 5: 2 x Burger + 2 x Soda, completed (27.50)
    Table 12: 1 x Burger, cancelled (11.00)
    Table 5 again: 1 x Soda, pending (2.75)
    """
    completed = intake_service.create_order(
        table.number,
        [{"menu_item": burger.pk, "quantity": 2}, {"menu_item": soda.pk, "quantity": 2}],
    )
    lifecycle_service.set_status(completed, Order.OrderStatus.COMPLETED)

    cancelled = intake_service.create_order(other_table.number, [{"menu_item": burger.pk, "quantity": 1}])
    lifecycle_service.cancel_order(cancelled)

    pending = intake_service.create_order(table.number, [{"menu_item": soda.pk, "quantity": 1}])
    return {"completed": completed, "cancelled": cancelled, "pending": pending}


@pytest.mark.django_db
class TestDashboardService:
    def test_today_figures_exclude_cancelled(self, restaurant):
        stats = DashboardService.dashboard()

        assert stats["today_orders"] == 2
        assert stats["today_revenue"] == Decimal("30.25")
        assert stats["active_orders"] == 1

    def test_table_stats(self, restaurant):
        Table.objects.create(number=30, capacity=2, status=Table.Status.CLEANING)

        assert DashboardService.table_stats() == {"available": 1, "occupied": 1, "total": 3}

    def test_top_items_by_quantity(self, restaurant, burger, soda):
        """
        Soda sold 3 (2 completed + 1 pending); burger sold 2 (the cancelled
        burger does not count).
        """
        top = DashboardService.top_menu_items()

        assert [row["menu_item"]["name"] for row in top] == ["Soda", "Burger"]
        assert top[0]["total_ordered"] == 3
        assert top[0]["total_revenue"] == Decimal("7.50")
        assert top[1]["total_ordered"] == 2
        assert top[1]["total_revenue"] == Decimal("20.00")

    def test_recent_orders_newest_first_and_capped(self, restaurant):
        recent = DashboardService.dashboard()["recent_orders"]

        assert recent[0].pk == restaurant["pending"].pk
        assert len(recent) == 3

    def test_pending_service_calls_newest_first(self, table, other_table):
        now = timezone.now()
        older = ServiceCall.objects.create(table=table, message="Water", created_at=now - timedelta(minutes=5))
        newer = ServiceCall.objects.create(table=other_table, message="Bill", created_at=now)
        ServiceCall.objects.create(table=table, message="Done", resolved=True)

        calls = DashboardService.pending_service_calls()

        assert [c["id"] for c in calls] == [newer.pk, older.pk]
        assert calls[0]["table_number"] == 12
        assert calls[0]["table_location"] == "Terrace"

    def test_empty_restaurant(self, db):
        stats = DashboardService.dashboard()

        assert stats["today_orders"] == 0
        assert stats["today_revenue"] == Decimal("0.00")
        assert stats["top_menu_items"] == []
        assert stats["table_stats"] == {"available": 0, "occupied": 0, "total": 0}


@pytest.mark.django_db
class TestAnalytics:
    def test_revenue_per_day(self, restaurant):
        data = DashboardService.analytics("7d")

        assert len(data["revenue_data"]) == 1
        day = data["revenue_data"][0]
        assert day["date"] == timezone.now().date()
        assert day["revenue"] == Decimal("30.25")
        assert day["orders"] == 2

    def test_category_breakdown_excludes_cancelled(self, restaurant):
        categories = {row["category"]: row for row in DashboardService.analytics("30d")["category_data"]}

        assert categories["main-courses"]["quantity"] == 2
        assert categories["main-courses"]["revenue"] == Decimal("20.00")
        assert categories["beverages"]["quantity"] == 3

    def test_peak_hours_count_every_order(self, restaurant):
        peak_hours = DashboardService.analytics("90d")["peak_hours"]

        assert sum(row["orders"] for row in peak_hours) == 3

    def test_old_orders_fall_outside_period(self, restaurant):
        Order.objects.update(created_at=timezone.now() - timedelta(days=10))

        assert DashboardService.analytics("7d")["revenue_data"] == []
        assert len(DashboardService.analytics("30d")["revenue_data"]) == 1

    def test_unknown_period_rejected(self, db):
        with pytest.raises(BusinessRuleViolation):
            DashboardService.analytics("1y")


@pytest.mark.django_db
class TestDashboardApi:
    def test_staff_sees_dashboard(self, staff_client, restaurant):
        response = staff_client.get(DASHBOARD_URL)

        assert response.status_code == status.HTTP_200_OK
        assert response.data["today_orders"] == 2
        assert response.data["recent_orders"][0]["order_number"] == restaurant["pending"].order_number
        assert set(response.data["table_stats"]) == {"available", "occupied", "total"}

    def test_dashboard_requires_login(self, api_client):
        assert api_client.get(DASHBOARD_URL).status_code == status.HTTP_401_UNAUTHORIZED

    def test_manager_sees_analytics(self, manager_client, restaurant):
        response = manager_client.get(ANALYTICS_URL, {"period": "30d"})

        assert response.status_code == status.HTTP_200_OK
        assert response.data["period"] == "30d"
        assert {"revenue_data", "category_data", "peak_hours"} <= set(response.data)

    def test_analytics_unknown_period(self, manager_client):
        response = manager_client.get(ANALYTICS_URL, {"period": "forever"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "Unknown period" in response.data["error"]

    def test_service_calls_endpoint(self, staff_client, table, table_service, notifier):
        table_service.request_service(table.number, "Need help")

        response = staff_client.get(SERVICE_CALLS_URL)

        assert response.status_code == status.HTTP_200_OK
        assert response.data[0]["message"] == "Need help"
        assert response.data[0]["table_number"] == 5
