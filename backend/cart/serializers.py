from rest_framework import serializers
from orders.models import Order
from .cart import Cart


class CartLineSerializer(serializers.Serializer):
    menu_item = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1)
    unit_price = serializers.DecimalField(max_digits=10, decimal_places=2, required=False)
    name = serializers.CharField(required=False, allow_blank=True)
    special_instructions = serializers.CharField(required=False, allow_blank=True, default="")


class CartSerializer(serializers.Serializer):
    """A client-held cart as submitted for a quote or checkout."""

    table_number = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    customer_notes = serializers.CharField(required=False, allow_blank=True, default="")
    items = CartLineSerializer(many=True)

    def to_cart(self) -> Cart:
        return Cart.from_dict(self.validated_data)


class CheckoutSerializer(CartSerializer):
    table_number = serializers.IntegerField(min_value=1)
    items = CartLineSerializer(many=True, allow_empty=False)
    payment_method = serializers.ChoiceField(
        choices=Order.PaymentMethod.choices, default=Order.PaymentMethod.CASH
    )
