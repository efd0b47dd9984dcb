import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("orders", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Table",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("number", models.PositiveIntegerField(unique=True, validators=[django.core.validators.MinValueValidator(1)])),
                ("qr_code", models.CharField(blank=True, max_length=500, unique=True)),
                ("capacity", models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ("status", models.CharField(choices=[("available", "Available"), ("occupied", "Occupied"), ("reserved", "Reserved"), ("cleaning", "Cleaning")], default="available", max_length=20)),
                ("location", models.CharField(blank=True, max_length=100)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("current_order", models.ForeignKey(blank=True, help_text="The order currently open at this table.", null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to="orders.order")),
            ],
            options={
                "ordering": ["number"],
            },
        ),
        migrations.CreateModel(
            name="ServiceCall",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("message", models.CharField(default="Service requested", max_length=500)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("resolved", models.BooleanField(default=False)),
                ("resolved_at", models.DateTimeField(blank=True, null=True)),
                ("table", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="service_calls", to="tables.table")),
            ],
            options={
                "ordering": ["created_at"],
                "indexes": [models.Index(fields=["resolved", "created_at"], name="tables_call_resolved_idx")],
            },
        ),
    ]
