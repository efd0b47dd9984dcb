import django.core.validators
import menu.models
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="MenuItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("description", models.TextField(blank=True)),
                ("price", models.DecimalField(decimal_places=2, max_digits=10, validators=[django.core.validators.MinValueValidator(0)])),
                ("category", models.CharField(choices=[("appetizers", "Appetizers"), ("main-courses", "Main Courses"), ("desserts", "Desserts"), ("beverages", "Beverages"), ("specials", "Specials")], max_length=20)),
                ("image", models.CharField(blank=True, max_length=500)),
                ("available", models.BooleanField(default=True)),
                ("preparation_time", models.PositiveIntegerField(default=menu.models.default_preparation_minutes, help_text="Minutes from order to ready.")),
                ("ingredients", models.JSONField(blank=True, default=list)),
                ("allergens", models.JSONField(blank=True, default=list)),
                ("spicy_level", models.PositiveSmallIntegerField(default=0, validators=[django.core.validators.MinValueValidator(0), django.core.validators.MaxValueValidator(5)])),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["category", "name"],
                "indexes": [models.Index(fields=["available", "category"], name="menu_available_category_idx")],
            },
        ),
    ]
