"""
Order and cart pricing.

Both the server-side cart quote and order intake price lines through
OrderCalculator so a quoted total always equals the total of the order it
turns into.

Rounding: line totals are exact (prices carry two decimals). Tax is the
subtotal times TAX_RATE, rounded half-up to cents. Total is subtotal plus
tax, so subtotal + tax == total holds exactly.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Tuple

from django.conf import settings

CENT = Decimal("0.01")


def quantize(amount) -> Decimal:
    return Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class Totals:
    subtotal: Decimal
    tax: Decimal
    total: Decimal

    def as_dict(self) -> dict:
        return {"subtotal": self.subtotal, "tax": self.tax, "total": self.total}


class OrderCalculator:
    """Compute subtotal, tax and total for (unit price, quantity) pairs."""

    def __init__(self, tax_rate: Decimal = None):
        self.tax_rate = Decimal(tax_rate if tax_rate is not None else settings.TAX_RATE)

    def calculate_subtotal(self, lines: Iterable[Tuple[Decimal, int]]) -> Decimal:
        subtotal = sum(
            (Decimal(price) * quantity for price, quantity in lines), Decimal("0")
        )
        return quantize(subtotal)

    def calculate_tax(self, subtotal: Decimal) -> Decimal:
        return quantize(subtotal * self.tax_rate)

    def calculate_totals(self, lines: Iterable[Tuple[Decimal, int]]) -> Totals:
        subtotal = self.calculate_subtotal(lines)
        tax = self.calculate_tax(subtotal)
        return Totals(subtotal=subtotal, tax=tax, total=subtotal + tax)
