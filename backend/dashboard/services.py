"""
Read-only rollups for the staff dashboard and the analytics screen.

Nothing here writes. Every figure that involves money leaves cancelled
orders out; peak hours count every order placed.
"""
import logging
from datetime import timedelta
from decimal import Decimal
from typing import Any, Dict, List

from django.db.models import Count, DecimalField, ExpressionWrapper, F, Q, Sum
from django.db.models.functions import ExtractHour, TruncDate
from django.utils import timezone

from orders.models import Order, OrderItem
from tables.models import ServiceCall, Table
from tableside.exceptions import BusinessRuleViolation

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")

LINE_REVENUE = ExpressionWrapper(
    F("price") * F("quantity"), output_field=DecimalField(max_digits=12, decimal_places=2)
)


class DashboardService:
    RECENT_ORDERS_LIMIT = 10
    TOP_ITEMS_LIMIT = 5
    ANALYTICS_PERIODS = {"7d": 7, "30d": 30, "90d": 90}

    @staticmethod
    def dashboard() -> Dict[str, Any]:
        """Today's figures, live counts and the latest activity."""
        today = timezone.localdate()
        todays_orders = Order.objects.filter(created_at__date=today).exclude(
            status=Order.OrderStatus.CANCELLED
        )
        today_stats = todays_orders.aggregate(count=Count("id"), revenue=Sum("total"))

        recent_orders = list(
            Order.objects.prefetch_related("items__menu_item").order_by("-created_at")[
                : DashboardService.RECENT_ORDERS_LIMIT
            ]
        )

        return {
            "today_orders": today_stats["count"],
            "today_revenue": today_stats["revenue"] or ZERO,
            "active_orders": Order.objects.filter(status__in=Order.ACTIVE_STATUSES).count(),
            "table_stats": DashboardService.table_stats(),
            "recent_orders": recent_orders,
            "top_menu_items": DashboardService.top_menu_items(),
            "pending_service_calls": DashboardService.pending_service_calls(),
        }

    @staticmethod
    def table_stats() -> Dict[str, int]:
        counts = Table.objects.aggregate(
            total=Count("id"),
            available=Count("id", filter=Q(status=Table.Status.AVAILABLE)),
            occupied=Count("id", filter=Q(status=Table.Status.OCCUPIED)),
        )
        return {
            "available": counts["available"],
            "occupied": counts["occupied"],
            "total": counts["total"],
        }

    @staticmethod
    def top_menu_items(limit: int = None) -> List[Dict[str, Any]]:
        limit = limit or DashboardService.TOP_ITEMS_LIMIT
        rows = (
            OrderItem.objects.exclude(order__status=Order.OrderStatus.CANCELLED)
            .values("menu_item_id", "menu_item__name", "menu_item__category", "menu_item__price")
            .annotate(total_ordered=Sum("quantity"), total_revenue=Sum(LINE_REVENUE))
            .order_by("-total_ordered", "menu_item__name")[:limit]
        )
        return [
            {
                "menu_item": {
                    "id": row["menu_item_id"],
                    "name": row["menu_item__name"],
                    "category": row["menu_item__category"],
                    "price": row["menu_item__price"],
                },
                "total_ordered": row["total_ordered"],
                "total_revenue": row["total_revenue"] or ZERO,
            }
            for row in rows
        ]

    @staticmethod
    def pending_service_calls() -> List[Dict[str, Any]]:
        """Unresolved service calls across all tables, newest first."""
        calls = (
            ServiceCall.objects.filter(resolved=False)
            .select_related("table")
            .order_by("-created_at", "-id")
        )
        return [
            {
                "id": call.pk,
                "table_number": call.table.number,
                "table_location": call.table.location,
                "message": call.message,
                "timestamp": call.created_at,
                "resolved": call.resolved,
            }
            for call in calls
        ]

    @staticmethod
    def analytics(period: str = "7d") -> Dict[str, Any]:
        """
        Revenue per day, revenue and quantity per menu category, and order
        counts per hour of day over the trailing period.

        Raises BusinessRuleViolation for a period other than 7d, 30d or 90d.
        """
        days = DashboardService.ANALYTICS_PERIODS.get(period)
        if days is None:
            raise BusinessRuleViolation(
                f"Unknown period '{period}'. Use one of: {', '.join(DashboardService.ANALYTICS_PERIODS)}"
            )

        start = timezone.now() - timedelta(days=days)
        orders = Order.objects.filter(created_at__gte=start)
        billable = orders.exclude(status=Order.OrderStatus.CANCELLED)

        revenue_data = (
            billable.annotate(date=TruncDate("created_at"))
            .values("date")
            .annotate(revenue=Sum("total"), orders=Count("id"))
            .order_by("date")
        )

        category_data = (
            OrderItem.objects.filter(order__in=billable)
            .values(category=F("menu_item__category"))
            .annotate(revenue=Sum(LINE_REVENUE), quantity=Sum("quantity"))
            .order_by("-revenue", "category")
        )

        peak_hours = (
            orders.annotate(hour=ExtractHour("created_at"))
            .values("hour")
            .annotate(orders=Count("id"))
            .order_by("hour")
        )

        logger.debug(f"Analytics computed for {period} since {start.isoformat()}")
        return {
            "period": period,
            "start_date": start,
            "revenue_data": list(revenue_data),
            "category_data": list(category_data),
            "peak_hours": list(peak_hours),
        }
