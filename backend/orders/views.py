import logging

from django.apps import apps
from rest_framework import permissions, status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response

from tableside.base import ReadOnlyBaseViewSet
from tableside.pagination import StandardPagination
from users.permissions import IsManagerOrHigher, IsStaffMember
from .filters import OrderFilter
from .models import Order
from .serializers import (
    OrderCreateSerializer,
    OrderSerializer,
    UpdateOrderStatusSerializer,
)

logger = logging.getLogger(__name__)


class OrderPagination(StandardPagination):
    results_key = "orders"
    count_key = "total_orders"


class OrderViewSet(ReadOnlyBaseViewSet):
    """
    Customers place and follow orders without an account; staff list them
    and drive their status. DELETE cancels, it never removes the record.
    """

    queryset = Order.objects.all()
    serializer_class = OrderSerializer
    pagination_class = OrderPagination
    filterset_class = OrderFilter
    search_fields = ["order_number"]
    ordering_fields = ["created_at", "total", "table_number"]
    ordering = ["-created_at"]

    def get_permissions(self):
        if self.action in ["create", "retrieve", "by_table"]:
            return [permissions.AllowAny()]
        if self.action == "destroy":
            return [IsManagerOrHigher()]
        return [IsStaffMember()]

    @property
    def intake_service(self):
        return apps.get_app_config("orders").intake_service

    @property
    def lifecycle_service(self):
        return apps.get_app_config("orders").lifecycle_service

    def create(self, request: Request, *args, **kwargs) -> Response:
        serializer = OrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        order = self.intake_service.create_order(
            table_number=data["table_number"],
            lines=data["items"],
            customer_notes=data["customer_notes"],
            payment_method=data["payment_method"],
        )
        order = self.lifecycle_service.get_order(order.pk)
        return Response(self.get_serializer(order).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=["get"], url_path=r"table/(?P<table_number>\d+)")
    def by_table(self, request: Request, table_number=None) -> Response:
        orders = self.get_queryset().filter(table_number=table_number).order_by("-created_at")
        return Response(self.get_serializer(orders, many=True).data)

    @action(detail=True, methods=["patch"], url_path="status")
    def update_status(self, request: Request, pk=None) -> Response:
        serializer = UpdateOrderStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        order = self.lifecycle_service.set_status(self.get_object(), serializer.validated_data["status"])
        order = self.lifecycle_service.get_order(order.pk)
        return Response(self.get_serializer(order).data)

    def destroy(self, request: Request, *args, **kwargs) -> Response:
        order = self.lifecycle_service.cancel_order(self.get_object())
        logger.info(f"Order {order.order_number} cancelled by {request.user.username}")
        return Response(
            {"message": "Order cancelled successfully", "order": self.get_serializer(order).data}
        )
