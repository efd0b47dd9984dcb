from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


def table_url(number) -> str:
    """The URL a table's QR code points customers to."""
    return f"{settings.CLIENT_URL.rstrip('/')}/table/{number}"


class Table(models.Model):
    class Status(models.TextChoices):
        AVAILABLE = "available", _("Available")
        OCCUPIED = "occupied", _("Occupied")
        RESERVED = "reserved", _("Reserved")
        CLEANING = "cleaning", _("Cleaning")

    number = models.PositiveIntegerField(unique=True, validators=[MinValueValidator(1)])
    qr_code = models.CharField(max_length=500, unique=True, blank=True)
    capacity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    status = models.CharField(
        max_length=20, choices=Status.choices, default=Status.AVAILABLE
    )
    current_order = models.ForeignKey(
        "orders.Order",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        help_text=_("The order currently open at this table."),
    )
    location = models.CharField(max_length=100, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["number"]

    def __str__(self):
        return f"Table {self.number}"

    def save(self, *args, **kwargs):
        if not self.qr_code:
            self.qr_code = table_url(self.number)
        super().save(*args, **kwargs)


class ServiceCall(models.Model):
    """A customer's request for staff attention raised from a table."""

    DEFAULT_MESSAGE = "Service requested"

    table = models.ForeignKey(
        Table, on_delete=models.CASCADE, related_name="service_calls"
    )
    message = models.CharField(max_length=500, default=DEFAULT_MESSAGE)
    created_at = models.DateTimeField(default=timezone.now)
    resolved = models.BooleanField(default=False)
    resolved_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["resolved", "created_at"], name="tables_call_resolved_idx"),
        ]

    def __str__(self):
        return f"Table {self.table.number}: {self.message}"
