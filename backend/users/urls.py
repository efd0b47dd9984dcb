from django.urls import re_path
from .views import CurrentUserView, LoginView, SetupView

app_name = "users"

urlpatterns = [
    re_path(r"^auth/login/?$", LoginView.as_view(), name="login"),
    re_path(r"^auth/me/?$", CurrentUserView.as_view(), name="me"),
    re_path(r"^auth/setup/?$", SetupView.as_view(), name="setup"),
]
