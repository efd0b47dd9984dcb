"""
Orders services package.

- OrderIntakeService: validate, price and create orders; occupy the table
- OrderLifecycleService: status changes, cancellation and table release
"""

from .intake_service import OrderIntakeService, OrderLine
from .lifecycle_service import OrderLifecycleService

__all__ = [
    'OrderIntakeService',
    'OrderLine',
    'OrderLifecycleService',
]
