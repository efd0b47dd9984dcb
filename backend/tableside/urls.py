from django.contrib import admin
from django.urls import path, include

# Each app registers its own prefix (auth/, menu/, tables/ ...) so that the
# collection roots match with or without a trailing slash.
urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/", include("users.urls")),
    path("api/", include("dashboard.urls")),
    path("api/", include("menu.urls")),
    path("api/", include("tables.urls")),
    path("api/", include("orders.urls")),
    path("api/", include("cart.urls")),
]
