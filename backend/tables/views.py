import logging

from django.apps import apps
from django.http import HttpResponse
from rest_framework import permissions, status
from rest_framework.decorators import action
from rest_framework.generics import get_object_or_404
from rest_framework.response import Response

from tableside.base import BaseViewSet
from users.permissions import IsManagerOrHigher, IsStaffMember
from .models import Table
from .qr import qr_sheet_pdf
from .serializers import (
    PublicTableSerializer,
    ServiceCallSerializer,
    ServiceRequestSerializer,
    TableSerializer,
    TableStatusSerializer,
)

logger = logging.getLogger(__name__)


class TableViewSet(BaseViewSet):
    """
    Customers and staff address a table by its number: the public view, QR
    code, status and service call routes. Managers edit and delete a table
    by its id, since editing can change the number itself.
    """

    # Actions whose URL segment is the table id rather than its number
    ID_LOOKUP_ACTIONS = ["update", "partial_update", "destroy"]

    queryset = Table.objects.all()
    serializer_class = TableSerializer
    lookup_field = "number"
    lookup_value_regex = r"\d+"
    pagination_class = None
    filterset_fields = ["status", "location"]
    ordering_fields = ["number", "capacity"]
    ordering = ["number"]

    def get_permissions(self):
        if self.action in ["retrieve", "service"]:
            return [permissions.AllowAny()]
        if self.action in ["list", "set_status", "resolve_service"]:
            return [IsStaffMember()]
        return [IsManagerOrHigher()]

    def get_serializer_class(self):
        if self.action == "retrieve":
            return PublicTableSerializer
        return TableSerializer

    def get_object(self):
        if self.action not in self.ID_LOOKUP_ACTIONS:
            return super().get_object()

        queryset = self.filter_queryset(self.get_queryset())
        table = get_object_or_404(queryset, pk=self.kwargs[self.lookup_field])
        self.check_object_permissions(self.request, table)
        return table

    @property
    def table_service(self):
        return apps.get_app_config("tables").table_service

    def perform_create(self, serializer):
        table = serializer.save()
        logger.info(f"Table {table.number} created (capacity {table.capacity})")

    @action(detail=True, methods=["get"])
    def qr(self, request, number=None):
        table = self.get_object()
        return Response(self.table_service.qr_code(table))

    @action(detail=False, methods=["get"], url_path="qr-sheet")
    def qr_sheet(self, request):
        tables = Table.objects.order_by("number")
        response = HttpResponse(qr_sheet_pdf(tables), content_type="application/pdf")
        response["Content-Disposition"] = 'attachment; filename="table-qr-codes.pdf"'
        return response

    @action(detail=True, methods=["patch"], url_path="status")
    def set_status(self, request, number=None):
        serializer = TableStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        table = self.table_service.set_status(number, serializer.validated_data["status"])
        return Response(TableSerializer(table, context=self.get_serializer_context()).data)

    @action(detail=True, methods=["post"])
    def service(self, request, number=None):
        serializer = ServiceRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        call = self.table_service.request_service(
            number, serializer.validated_data.get("message")
        )
        return Response(
            {"message": "Service request sent", "service_call": ServiceCallSerializer(call).data},
            status=status.HTTP_201_CREATED,
        )

    @action(detail=True, methods=["patch"], url_path=r"service/(?P<call_id>\d+)/resolve")
    def resolve_service(self, request, number=None, call_id=None):
        call = self.table_service.resolve_service_call(number, call_id)
        return Response(ServiceCallSerializer(call).data)
