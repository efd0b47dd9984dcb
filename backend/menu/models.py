from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _


def default_preparation_minutes():
    return settings.DEFAULT_PREPARATION_MINUTES


class MenuItem(models.Model):
    class Category(models.TextChoices):
        APPETIZERS = "appetizers", _("Appetizers")
        MAIN_COURSES = "main-courses", _("Main Courses")
        DESSERTS = "desserts", _("Desserts")
        BEVERAGES = "beverages", _("Beverages")
        SPECIALS = "specials", _("Specials")

    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    price = models.DecimalField(
        max_digits=10, decimal_places=2, validators=[MinValueValidator(0)]
    )
    category = models.CharField(max_length=20, choices=Category.choices)
    image = models.CharField(max_length=500, blank=True)
    available = models.BooleanField(default=True)
    preparation_time = models.PositiveIntegerField(
        default=default_preparation_minutes,
        help_text=_("Minutes from order to ready."),
    )
    ingredients = models.JSONField(default=list, blank=True)
    allergens = models.JSONField(default=list, blank=True)
    spicy_level = models.PositiveSmallIntegerField(
        default=0, validators=[MinValueValidator(0), MaxValueValidator(5)]
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["category", "name"]
        indexes = [
            models.Index(fields=["available", "category"], name="menu_available_category_idx"),
        ]

    def __str__(self):
        return f"{self.name} ({self.get_category_display()})"
