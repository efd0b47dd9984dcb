import logging

from django.db import transaction

from .models import MenuItem

logger = logging.getLogger(__name__)


class MenuService:
    """Catalog queries and availability changes."""

    @staticmethod
    def available_categories() -> list[str]:
        """Distinct categories that currently have at least one available item."""
        return list(
            MenuItem.objects.filter(available=True)
            .order_by("category")
            .values_list("category", flat=True)
            .distinct()
        )

    @staticmethod
    @transaction.atomic
    def toggle_availability(item: MenuItem) -> MenuItem:
        item = MenuItem.objects.select_for_update().get(pk=item.pk)
        item.available = not item.available
        item.save(update_fields=["available", "updated_at"])
        logger.info(f"Menu item '{item.name}' is now {'available' if item.available else 'unavailable'}")
        return item
