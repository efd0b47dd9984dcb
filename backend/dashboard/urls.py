from tableside.routers import OptionalSlashRouter
from users.views import StaffViewSet
from .views import DashboardViewSet

app_name = "dashboard"

router = OptionalSlashRouter()
router.register(r"admin/staff", StaffViewSet, basename="staff")
router.register(r"admin", DashboardViewSet, basename="dashboard")

urlpatterns = router.urls
