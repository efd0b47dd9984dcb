from django.apps import AppConfig, apps


class TablesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "tables"
    verbose_name = "Tables"

    def ready(self):
        from .services import TableService

        notifier = apps.get_app_config("notifications").notifier
        self.table_service = TableService(notifier=notifier)
