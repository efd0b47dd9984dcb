import logging

from django.utils.decorators import method_decorator
from django_ratelimit.decorators import ratelimit
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from tableside.base import BaseViewSet
from .models import User
from .permissions import IsAdminRole, IsStaffMember
from .serializers import (
    LoginSerializer,
    SetupSerializer,
    StaffWriteSerializer,
    UserSerializer,
)
from .services import UserService

logger = logging.getLogger(__name__)


def _auth_payload(user):
    return {
        "success": True,
        "token": UserService.generate_access_token(user),
        "user": UserSerializer(user).data,
    }


@method_decorator(
    ratelimit(key="ip", rate="5/m", method="POST", block=True), name="post"
)
class LoginView(APIView):
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def post(self, request, *args, **kwargs):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = UserService.authenticate_staff(request, **serializer.validated_data)

        if not user:
            return Response(
                {"error": "Invalid credentials"}, status=status.HTTP_401_UNAUTHORIZED
            )

        return Response(_auth_payload(user), status=status.HTTP_200_OK)


class CurrentUserView(APIView):
    permission_classes = [IsStaffMember]

    def get(self, request):
        return Response({"user": UserSerializer(request.user).data})


@method_decorator(
    ratelimit(key="ip", rate="5/m", method="POST", block=True), name="post"
)
class SetupView(APIView):
    """Create the first admin account. Closed once any staff account exists."""

    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def post(self, request, *args, **kwargs):
        serializer = SetupSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = UserService.bootstrap_admin(**serializer.validated_data)
        return Response(_auth_payload(user), status=status.HTTP_201_CREATED)


class StaffViewSet(BaseViewSet):
    """Staff directory. Admin only."""

    queryset = User.objects.all()
    permission_classes = [IsAdminRole]
    pagination_class = None
    search_fields = ["username"]
    ordering_fields = ["username", "date_joined", "last_login"]
    ordering = ["username"]
    filterset_fields = ["role", "is_active"]

    def get_serializer_class(self):
        if self.action in ["create", "update", "partial_update"]:
            return StaffWriteSerializer
        return UserSerializer

    def perform_create(self, serializer):
        user = serializer.save()
        logger.info(f"Staff account '{user.username}' ({user.role}) created by {self.request.user.username}")

    def perform_destroy(self, instance):
        UserService.delete_staff(instance, acting_user=self.request.user)
