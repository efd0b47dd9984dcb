from tableside.routers import OptionalSlashRouter
from .views import OrderViewSet

app_name = "orders"

router = OptionalSlashRouter()
router.register(r"orders", OrderViewSet, basename="order")

urlpatterns = router.urls
