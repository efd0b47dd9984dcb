from rest_framework import serializers
from tableside.base import TimestampedSerializer
from menu.serializers import MenuItemReferenceSerializer
from .models import Order, OrderItem


class OrderItemSerializer(serializers.ModelSerializer):
    menu_item = MenuItemReferenceSerializer(read_only=True)
    total_price = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = OrderItem
        fields = ["id", "menu_item", "quantity", "price", "special_instructions", "total_price"]
        read_only_fields = fields


class OrderSerializer(TimestampedSerializer):
    items = OrderItemSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "table_number",
            "items",
            "subtotal",
            "tax",
            "total",
            "status",
            "payment_status",
            "payment_method",
            "customer_notes",
            "estimated_ready_time",
            "completed_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
        prefetch_related_fields = ["items__menu_item"]


class OrderLineInputSerializer(serializers.Serializer):
    menu_item = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1)
    special_instructions = serializers.CharField(required=False, allow_blank=True, default="")


class OrderCreateSerializer(serializers.Serializer):
    table_number = serializers.IntegerField(min_value=1)
    items = OrderLineInputSerializer(many=True, allow_empty=False)
    customer_notes = serializers.CharField(required=False, allow_blank=True, default="")
    payment_method = serializers.ChoiceField(
        choices=Order.PaymentMethod.choices, default=Order.PaymentMethod.CASH
    )


class UpdateOrderStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Order.OrderStatus.choices)
