"""
The customer's cart as a plain aggregate.

The cart lives on the client until checkout, so nothing here touches the
database. `to_dict` / `from_dict` round-trip it through whatever storage the
client uses; `to_order_request` produces the lines order intake expects.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Optional

from orders.calculators import OrderCalculator, Totals


@dataclass
class CartLine:
    menu_item_id: int
    unit_price: Decimal
    quantity: int = 1
    name: str = ""
    special_instructions: str = ""

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity

    def to_dict(self) -> dict:
        return {
            "menu_item": self.menu_item_id,
            "name": self.name,
            "unit_price": str(self.unit_price),
            "quantity": self.quantity,
            "special_instructions": self.special_instructions,
        }


@dataclass
class Cart:
    table_number: Optional[int] = None
    customer_notes: str = ""
    lines: Dict[int, CartLine] = field(default_factory=dict)

    def add_item(
        self,
        menu_item_id: int,
        unit_price,
        quantity: int = 1,
        name: str = "",
        special_instructions: str = "",
    ) -> CartLine:
        """Add an item, merging into the existing line for the same menu item."""
        if quantity < 1:
            raise ValueError("Quantity must be at least 1")

        line = self.lines.get(menu_item_id)
        if line is None:
            line = CartLine(
                menu_item_id=menu_item_id,
                unit_price=Decimal(str(unit_price)),
                quantity=quantity,
                name=name,
                special_instructions=special_instructions,
            )
            self.lines[menu_item_id] = line
        else:
            line.quantity += quantity
            if special_instructions:
                line.special_instructions = special_instructions
        return line

    def remove_item(self, menu_item_id: int) -> None:
        self.lines.pop(menu_item_id, None)

    def update_quantity(self, menu_item_id: int, quantity: int) -> None:
        """Set a line's quantity; zero removes the line."""
        if quantity < 0:
            raise ValueError("Quantity cannot be negative")
        if quantity == 0:
            self.remove_item(menu_item_id)
            return
        if menu_item_id not in self.lines:
            raise KeyError(menu_item_id)
        self.lines[menu_item_id].quantity = quantity

    def update_special_instructions(self, menu_item_id: int, instructions: str) -> None:
        if menu_item_id not in self.lines:
            raise KeyError(menu_item_id)
        self.lines[menu_item_id].special_instructions = instructions or ""

    def clear(self) -> None:
        self.lines.clear()
        self.customer_notes = ""

    def quantity_of(self, menu_item_id: int) -> int:
        line = self.lines.get(menu_item_id)
        return line.quantity if line else 0

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines.values())

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def totals(self, calculator: OrderCalculator = None) -> Totals:
        calculator = calculator or OrderCalculator()
        return calculator.calculate_totals(
            (line.unit_price, line.quantity) for line in self.lines.values()
        )

    @property
    def subtotal(self) -> Decimal:
        return self.totals().subtotal

    @property
    def tax(self) -> Decimal:
        return self.totals().tax

    @property
    def total(self) -> Decimal:
        return self.totals().total

    def to_order_request(self) -> List[dict]:
        return [
            {
                "menu_item": line.menu_item_id,
                "quantity": line.quantity,
                "special_instructions": line.special_instructions,
            }
            for line in self.lines.values()
        ]

    def to_dict(self) -> dict:
        return {
            "table_number": self.table_number,
            "customer_notes": self.customer_notes,
            "items": [line.to_dict() for line in self.lines.values()],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Cart":
        cart = cls(
            table_number=data.get("table_number"),
            customer_notes=data.get("customer_notes") or "",
        )
        for item in data.get("items", []):
            cart.add_item(
                menu_item_id=int(item["menu_item"]),
                unit_price=item.get("unit_price", "0"),
                quantity=int(item.get("quantity", 1)),
                name=item.get("name", ""),
                special_instructions=item.get("special_instructions") or "",
            )
        return cart
