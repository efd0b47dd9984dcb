from tableside.routers import OptionalSlashRouter
from .views import TableViewSet

app_name = "tables"

router = OptionalSlashRouter()
router.register(r"tables", TableViewSet, basename="table")

urlpatterns = router.urls
