import atexit

from django.apps import AppConfig


class NotificationsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "notifications"
    verbose_name = "Notifications"

    def ready(self):
        from .services import NotificationService

        # Process-wide notifier, handed to the publishing services by their apps
        self.notifier = NotificationService()
        self.notifier.start()
        atexit.register(self.notifier.stop)
