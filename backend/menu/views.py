import logging

from rest_framework import permissions
from rest_framework.decorators import action
from rest_framework.response import Response

from tableside.base import BaseViewSet
from users.permissions import IsManagerOrHigher
from .filters import MenuItemFilter
from .models import MenuItem
from .serializers import MenuItemSerializer
from .services import MenuService

logger = logging.getLogger(__name__)


class MenuItemViewSet(BaseViewSet):
    """
    Public menu browsing plus manager/admin catalog management.

    The plain list only shows available items; /all/ shows every item.
    """

    queryset = MenuItem.objects.all()
    serializer_class = MenuItemSerializer
    filterset_class = MenuItemFilter
    pagination_class = None
    search_fields = ["name", "description"]
    ordering_fields = ["name", "price", "category", "created_at"]
    ordering = ["category", "name"]

    PUBLIC_ACTIONS = ["list", "retrieve", "categories"]

    def get_permissions(self):
        if self.action in self.PUBLIC_ACTIONS:
            return [permissions.AllowAny()]
        return [IsManagerOrHigher()]

    def get_queryset(self):
        queryset = super().get_queryset()
        if self.action == "list":
            queryset = queryset.filter(available=True)
        return queryset

    @action(detail=False, methods=["get"], url_path="all")
    def all_items(self, request):
        queryset = self.filter_queryset(self.get_queryset())
        serializer = self.get_serializer(queryset, many=True)
        return Response(serializer.data)

    @action(detail=False, methods=["get"], url_path="categories/list")
    def categories(self, request):
        return Response(MenuService.available_categories())

    @action(detail=True, methods=["patch"])
    def toggle(self, request, pk=None):
        item = MenuService.toggle_availability(self.get_object())
        return Response(self.get_serializer(item).data)

    def perform_destroy(self, instance):
        logger.info(f"Deleting menu item '{instance.name}' ({instance.pk})")
        instance.delete()
