from django.apps import AppConfig, apps


class OrdersConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "orders"
    verbose_name = "Orders"

    def ready(self):
        from .services import OrderIntakeService, OrderLifecycleService

        notifier = apps.get_app_config("notifications").notifier
        table_service = apps.get_app_config("tables").table_service

        self.intake_service = OrderIntakeService(notifier=notifier, table_service=table_service)
        self.lifecycle_service = OrderLifecycleService(notifier=notifier, table_service=table_service)
