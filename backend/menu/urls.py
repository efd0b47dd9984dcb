from tableside.routers import OptionalSlashRouter
from .views import MenuItemViewSet

app_name = "menu"

router = OptionalSlashRouter()
router.register(r"menu", MenuItemViewSet, basename="menu-item")

urlpatterns = router.urls
