from django.apps import apps
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from orders.serializers import OrderSerializer
from .serializers import CartSerializer, CheckoutSerializer


class CartServiceMixin:
    @property
    def cart_service(self):
        return apps.get_app_config("cart").cart_service


class CartQuoteView(CartServiceMixin, APIView):
    """Price a cart against the current menu."""

    permission_classes = [permissions.AllowAny]

    def post(self, request, *args, **kwargs):
        serializer = CartSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return Response(self.cart_service.quote(serializer.to_cart()))


class CartCheckoutView(CartServiceMixin, APIView):
    permission_classes = [permissions.AllowAny]

    def post(self, request, *args, **kwargs):
        serializer = CheckoutSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = self.cart_service.checkout(
            serializer.to_cart(), payment_method=serializer.validated_data["payment_method"]
        )
        order = apps.get_app_config("orders").lifecycle_service.get_order(order.pk)
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)
