from django.apps import AppConfig, apps


class CartConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "cart"
    verbose_name = "Cart"

    def ready(self):
        from .services import CartService

        self.cart_service = CartService(
            intake_service=apps.get_app_config("orders").intake_service
        )
