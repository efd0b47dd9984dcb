import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Iterable

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from menu.models import MenuItem
from orders.calculators import OrderCalculator
from orders.models import Order, OrderItem, generate_order_number
from tableside.exceptions import BusinessRuleViolation, MenuItemUnavailable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrderLine:
    """One requested line of a new order, before pricing."""

    menu_item_id: int
    quantity: int
    special_instructions: str = ""

    @classmethod
    def coerce(cls, value) -> "OrderLine":
        if isinstance(value, cls):
            return value
        return cls(
            menu_item_id=value["menu_item"],
            quantity=value["quantity"],
            special_instructions=value.get("special_instructions") or "",
        )


class OrderIntakeService:
    """
    Turns a table number and a list of requested lines into a priced order.

    The order rows and the table's occupancy change are written in a single
    transaction with the table row locked, so a failure at any step leaves
    neither an order nor a mutated table behind. Staff are told about the
    new order only after the transaction commits.
    """

    def __init__(self, notifier, table_service, calculator: OrderCalculator = None):
        self.notifier = notifier
        self.table_service = table_service
        self.calculator = calculator or OrderCalculator()

    def create_order(
        self,
        table_number: int,
        lines: Iterable,
        customer_notes: str = "",
        payment_method: str = Order.PaymentMethod.CASH,
    ) -> Order:
        lines = [OrderLine.coerce(line) for line in lines]

        with transaction.atomic():
            table = self.table_service.lock_table(table_number)

            if self.table_service.has_open_order(table):
                raise BusinessRuleViolation(f"Table {table.number} already has an open order")

            self._validate_lines(lines)
            menu_items = self._load_menu_items(lines)

            totals = self.calculator.calculate_totals(
                (menu_items[line.menu_item_id].price, line.quantity) for line in lines
            )

            order = Order.objects.create(
                order_number=self._unique_order_number(),
                table_number=table.number,
                subtotal=totals.subtotal,
                tax=totals.tax,
                total=totals.total,
                customer_notes=customer_notes or "",
                payment_method=payment_method,
                estimated_ready_time=self._estimate_ready_time(lines, menu_items),
            )
            OrderItem.objects.bulk_create(
                [
                    OrderItem(
                        order=order,
                        menu_item=menu_items[line.menu_item_id],
                        quantity=line.quantity,
                        price=menu_items[line.menu_item_id].price,
                        special_instructions=line.special_instructions,
                    )
                    for line in lines
                ]
            )

            self.table_service.occupy(table, order)

            # Imported here to keep the services importable without the API layer
            from orders.serializers import OrderSerializer

            self.notifier.new_order(
                {
                    "order": OrderSerializer(order).data,
                    "message": f"New order received from Table {table.number}",
                }
            )

        logger.info(
            f"Order {order.order_number} created for table {table.number}: "
            f"{len(lines)} lines, total {order.total}"
        )
        return order

    @staticmethod
    def _validate_lines(lines):
        if not lines:
            raise BusinessRuleViolation("An order must contain at least one item")

        for line in lines:
            if line.quantity < 1:
                raise BusinessRuleViolation(
                    f"Quantity for menu item {line.menu_item_id} must be at least 1"
                )

    @staticmethod
    def _load_menu_items(lines) -> dict:
        menu_items = MenuItem.objects.in_bulk({line.menu_item_id for line in lines})

        for line in lines:
            item = menu_items.get(line.menu_item_id)
            if item is None:
                raise MenuItemUnavailable(line.menu_item_id)
            if not item.available:
                raise MenuItemUnavailable(line.menu_item_id, name=item.name)

        return menu_items

    @staticmethod
    def _estimate_ready_time(lines, menu_items):
        """
        Now plus the mean preparation time of the ordered menu items.

        The mean is taken per line, not weighted by quantity.
        """
        default = settings.DEFAULT_PREPARATION_MINUTES
        prep_times = [
            menu_items[line.menu_item_id].preparation_time or default for line in lines
        ]
        average = sum(prep_times) / len(prep_times)
        return timezone.now() + timedelta(minutes=average)

    @staticmethod
    def _unique_order_number() -> str:
        attempts = settings.ORDER_NUMBER_MAX_ATTEMPTS
        for _ in range(attempts):
            candidate = generate_order_number()
            if not Order.objects.filter(order_number=candidate).exists():
                return candidate
            logger.warning(f"Order number collision on {candidate}, regenerating")

        raise RuntimeError(f"Could not generate a unique order number after {attempts} attempts")
