import django_filters
from tableside.base import BaseFilterSet
from .models import Order


class OrderFilter(BaseFilterSet):
    """
    Staff order list filters.

    `date` matches orders created on that calendar day in the restaurant's
    time zone.
    """

    status = django_filters.ChoiceFilter(choices=Order.OrderStatus.choices)
    table_number = django_filters.NumberFilter()
    date = django_filters.DateFilter(field_name="created_at", lookup_expr="date")

    class Meta:
        model = Order
        fields = ["status", "table_number", "date", "payment_status"]
