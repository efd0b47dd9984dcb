from rest_framework import serializers
from tableside.base import TimestampedSerializer
from .models import MenuItem


class MenuItemSerializer(TimestampedSerializer):
    ingredients = serializers.ListField(child=serializers.CharField(), required=False)
    allergens = serializers.ListField(child=serializers.CharField(), required=False)

    class Meta:
        model = MenuItem
        fields = [
            "id",
            "name",
            "description",
            "price",
            "category",
            "image",
            "available",
            "preparation_time",
            "ingredients",
            "allergens",
            "spicy_level",
            "created_at",
            "updated_at",
        ]


class MenuItemReferenceSerializer(serializers.ModelSerializer):
    """Minimal menu item shape nested inside order line items."""

    class Meta:
        model = MenuItem
        fields = ["id", "name", "category", "price", "image"]
        read_only_fields = fields
