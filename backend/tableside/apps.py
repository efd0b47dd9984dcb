from django.apps import AppConfig


class TablesideConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "tableside"
    verbose_name = "Tableside"
