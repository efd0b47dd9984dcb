from rest_framework import serializers
from tableside.base import TimestampedSerializer
from orders.serializers import OrderSerializer
from .models import ServiceCall, Table, table_url


class ServiceCallSerializer(serializers.ModelSerializer):
    timestamp = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = ServiceCall
        fields = ["id", "message", "timestamp", "resolved", "resolved_at"]
        read_only_fields = fields


class TableSerializer(TimestampedSerializer):
    current_order = OrderSerializer(read_only=True)
    service_calls = ServiceCallSerializer(many=True, read_only=True)

    class Meta:
        model = Table
        fields = [
            "id",
            "number",
            "qr_code",
            "capacity",
            "status",
            "current_order",
            "location",
            "service_calls",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "qr_code", "status", "current_order"]
        select_related_fields = ["current_order"]
        prefetch_related_fields = ["service_calls", "current_order__items__menu_item"]

    def update(self, instance, validated_data):
        number = validated_data.get("number", instance.number)
        if number != instance.number:
            instance.qr_code = table_url(number)
        return super().update(instance, validated_data)


class PublicTableSerializer(serializers.ModelSerializer):
    """What a customer at the table is allowed to see."""

    current_order = OrderSerializer(read_only=True)

    class Meta:
        model = Table
        fields = ["number", "capacity", "status", "current_order"]
        read_only_fields = fields


class TableStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Table.Status.choices)


class ServiceRequestSerializer(serializers.Serializer):
    message = serializers.CharField(required=False, allow_blank=True, max_length=500)
