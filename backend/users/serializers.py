from rest_framework import serializers
from tableside.base import BaseModelSerializer
from .models import User


class UserSerializer(BaseModelSerializer):
    """Staff account as returned by login, /me and the staff directory."""

    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "role",
            "permissions",
            "is_active",
            "last_login",
            "date_joined",
        ]
        read_only_fields = ["id", "last_login", "date_joined"]


class StaffWriteSerializer(BaseModelSerializer):
    """Create and update staff accounts. The password is hashed, never echoed."""

    password = serializers.CharField(write_only=True, required=False, min_length=6)
    permissions = serializers.ListField(
        child=serializers.ChoiceField(choices=User.Permission.choices),
        required=False,
    )

    class Meta:
        model = User
        fields = ["id", "username", "password", "role", "permissions", "is_active"]
        read_only_fields = ["id"]

    def validate(self, attrs):
        attrs = super().validate(attrs)
        if self.instance is None and not attrs.get("password"):
            raise serializers.ValidationError({"password": "This field is required."})
        return attrs

    def create(self, validated_data):
        password = validated_data.pop("password")
        return User.objects.create_user(password=password, **validated_data)

    def update(self, instance, validated_data):
        password = validated_data.pop("password", None)
        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        if password:
            instance.set_password(password)
        instance.save()
        return instance

    def to_representation(self, instance):
        return UserSerializer(instance, context=self.context).data


class LoginSerializer(serializers.Serializer):
    username = serializers.CharField()
    password = serializers.CharField(write_only=True)


class SetupSerializer(serializers.Serializer):
    username = serializers.CharField(max_length=150)
    password = serializers.CharField(write_only=True, min_length=6)
