"""
Server-side cart operations.

The cart itself is held by the client. The server re-prices a submitted
cart against the live catalog and turns it into an order at checkout.
"""

import logging

from menu.models import MenuItem
from orders.models import Order
from tableside.exceptions import BusinessRuleViolation
from .cart import Cart

logger = logging.getLogger(__name__)


class CartService:
    """Quote and checkout for client-held carts."""

    def __init__(self, intake_service):
        self.intake_service = intake_service

    @staticmethod
    def reprice(cart: Cart) -> tuple[Cart, list]:
        """
        Rebuild the cart with current catalog names and prices.

        Returns the repriced cart and the ids of lines that are no longer
        orderable.
        """
        menu_items = MenuItem.objects.in_bulk(list(cart.lines.keys()))
        repriced = Cart(table_number=cart.table_number, customer_notes=cart.customer_notes)
        unavailable = []

        for menu_item_id, line in cart.lines.items():
            item = menu_items.get(menu_item_id)
            if item is None or not item.available:
                unavailable.append(menu_item_id)
                continue
            repriced.add_item(
                menu_item_id=item.pk,
                unit_price=item.price,
                quantity=line.quantity,
                name=item.name,
                special_instructions=line.special_instructions,
            )

        return repriced, unavailable

    def quote(self, cart: Cart) -> dict:
        repriced, unavailable = self.reprice(cart)
        totals = repriced.totals()
        if unavailable:
            logger.info(f"Cart quote dropped unavailable menu items {unavailable}")
        return {
            "items": [line.to_dict() for line in repriced.lines.values()],
            "unavailable": unavailable,
            "item_count": repriced.item_count,
            **totals.as_dict(),
        }

    def checkout(self, cart: Cart, payment_method: str = Order.PaymentMethod.CASH) -> Order:
        if cart.table_number is None:
            raise BusinessRuleViolation("A table number is required to check out")
        if cart.is_empty:
            raise BusinessRuleViolation("Cart is empty")

        order = self.intake_service.create_order(
            table_number=cart.table_number,
            lines=cart.to_order_request(),
            customer_notes=cart.customer_notes,
            payment_method=payment_method,
        )
        logger.info(f"Cart checked out as order {order.order_number} ({cart.item_count} items)")
        return order
