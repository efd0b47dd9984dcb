import logging

from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from orders.serializers import OrderSerializer
from users.permissions import IsManagerOrHigher, IsStaffMember
from .services import DashboardService

logger = logging.getLogger(__name__)


class DashboardViewSet(viewsets.ViewSet):
    """
    Staff overview endpoints. Analytics is limited to managers and admins.
    """

    def get_permissions(self):
        if self.action == "analytics":
            return [IsManagerOrHigher()]
        return [IsStaffMember()]

    @action(detail=False, methods=["get"])
    def dashboard(self, request):
        stats = DashboardService.dashboard()
        stats["recent_orders"] = OrderSerializer(stats["recent_orders"], many=True).data
        return Response(stats)

    @action(detail=False, methods=["get"])
    def analytics(self, request):
        period = request.query_params.get("period", "7d")
        return Response(DashboardService.analytics(period))

    @action(detail=False, methods=["get"], url_path="service-calls")
    def service_calls(self, request):
        return Response(DashboardService.pending_service_calls())
