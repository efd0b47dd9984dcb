"""
Load a sample restaurant: menu, twenty tables and a default admin account.
"""
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from menu.models import MenuItem
from orders.models import Order
from tables.models import ServiceCall, Table
from users.models import User

C = MenuItem.Category

MENU_ITEMS = [
    # Appetizers
    ("Spring Rolls", "Fresh vegetables wrapped in rice paper, served with peanut sauce",
     "8.99", C.APPETIZERS, 10, ["rice paper", "lettuce", "cucumber", "carrots", "mint"], 0),
    ("Chicken Wings", "Crispy buffalo wings with celery and ranch dressing",
     "12.99", C.APPETIZERS, 15, ["chicken wings", "buffalo sauce", "celery", "ranch"], 2),
    ("Mozzarella Sticks", "Golden fried mozzarella with marinara sauce",
     "9.99", C.APPETIZERS, 12, ["mozzarella", "breadcrumbs", "marinara sauce"], 0),
    # Main courses
    ("Grilled Salmon", "Atlantic salmon with lemon herb butter, served with vegetables",
     "24.99", C.MAIN_COURSES, 20, ["salmon", "lemon", "herbs", "mixed vegetables"], 0),
    ("Beef Steak", "Premium ribeye steak cooked to perfection with garlic mashed potatoes",
     "28.99", C.MAIN_COURSES, 25, ["ribeye steak", "potatoes", "garlic", "butter"], 0),
    ("Chicken Curry", "Aromatic Thai red curry with jasmine rice",
     "18.99", C.MAIN_COURSES, 18, ["chicken", "red curry paste", "coconut milk", "jasmine rice"], 3),
    ("Vegetarian Pasta", "Fresh pasta with seasonal vegetables in tomato basil sauce",
     "16.99", C.MAIN_COURSES, 15, ["pasta", "tomatoes", "basil", "seasonal vegetables"], 0),
    # Desserts
    ("Chocolate Cake", "Rich chocolate cake with vanilla ice cream",
     "7.99", C.DESSERTS, 5, ["chocolate cake", "vanilla ice cream", "chocolate sauce"], 0),
    ("Tiramisu", "Classic Italian dessert with coffee and mascarpone",
     "8.99", C.DESSERTS, 5, ["ladyfingers", "espresso", "mascarpone", "cocoa"], 0),
    # Beverages
    ("Fresh Orange Juice", "Freshly squeezed orange juice",
     "4.99", C.BEVERAGES, 3, ["fresh oranges"], 0),
    ("Iced Coffee", "Cold brew coffee with milk and sugar",
     "3.99", C.BEVERAGES, 5, ["coffee beans", "milk", "ice"], 0),
    ("Mango Smoothie", "Tropical mango smoothie with yogurt",
     "5.99", C.BEVERAGES, 5, ["mango", "yogurt", "honey", "ice"], 0),
    # Specials
    ("Chef's Special Platter", "Today's special combination of our finest dishes",
     "32.99", C.SPECIALS, 30, ["chef selection"], 1),
]

TABLE_COUNT = 20
MAIN_DINING_TABLES = 10

DEFAULT_ADMIN_USERNAME = "admin"
DEFAULT_ADMIN_PASSWORD = "admin123"


class Command(BaseCommand):
    help = "Seed the database with a sample menu, tables and a default admin account"

    def add_arguments(self, parser):
        parser.add_argument(
            "--reset",
            action="store_true",
            help="Delete existing orders, menu items, tables and staff before seeding",
        )

    def handle(self, *args, **options):
        with transaction.atomic():
            if options["reset"]:
                self.stdout.write("Removing existing restaurant data...")
                Table.objects.update(current_order=None)
                Order.objects.all().delete()
                ServiceCall.objects.all().delete()
                Table.objects.all().delete()
                MenuItem.objects.all().delete()
                User.objects.all().delete()

            menu_created = 0
            for name, description, price, category, prep, ingredients, spicy in MENU_ITEMS:
                _, created = MenuItem.objects.get_or_create(
                    name=name,
                    defaults={
                        "description": description,
                        "price": Decimal(price),
                        "category": category,
                        "preparation_time": prep,
                        "ingredients": ingredients,
                        "spicy_level": spicy,
                    },
                )
                menu_created += created
            self.stdout.write(f"Created {menu_created} menu items")

            tables_created = 0
            for number in range(1, TABLE_COUNT + 1):
                _, created = Table.objects.get_or_create(
                    number=number,
                    defaults={
                        "capacity": 2 + (number * 5) % 7,
                        "location": "Main Dining" if number <= MAIN_DINING_TABLES else "Terrace",
                    },
                )
                tables_created += created
            self.stdout.write(f"Created {tables_created} tables")

            if not User.objects.filter(username=DEFAULT_ADMIN_USERNAME).exists():
                User.objects.create_user(
                    username=DEFAULT_ADMIN_USERNAME,
                    password=DEFAULT_ADMIN_PASSWORD,
                    role=User.Role.ADMIN,
                    permissions=list(User.Permission.values),
                )
                self.stdout.write(
                    f"Created default admin user (username: {DEFAULT_ADMIN_USERNAME}, "
                    f"password: {DEFAULT_ADMIN_PASSWORD})"
                )

        self.stdout.write(self.style.SUCCESS("Restaurant data seeded successfully"))
