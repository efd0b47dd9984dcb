import django_filters
from tableside.base import BaseFilterSet
from .models import MenuItem


class MenuItemFilter(BaseFilterSet):
    category = django_filters.ChoiceFilter(choices=MenuItem.Category.choices)
    available = django_filters.BooleanFilter()

    class Meta:
        model = MenuItem
        fields = ["category", "available"]
