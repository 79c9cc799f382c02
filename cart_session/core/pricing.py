"""Pricing — pure recomputation of a cart's monetary fields from its line items.

Invariants:
    - raw_subtotal = sum(item.total_price)
    - tax = round2(raw_subtotal * tax_rate)  (taxed BEFORE the subtotal is rounded)
    - subtotal = round2(raw_subtotal)
    - total = round2(subtotal + tax)
    - updated_at is refreshed here and only here
    - Empty cart yields 0 / 0 / 0 and still refreshes updated_at

Design Decisions:
    - Strategy behind a Protocol so the engine never hardcodes the tax rule
    - Returns a new Cart (dataclasses.replace) instead of mutating the input
    - Each stage rounded independently; the order is observable at the cent level
"""

from dataclasses import replace
from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable, Protocol

from cart_session.core.cart import Cart
from cart_session.core.domain_types import round2, to_money


DEFAULT_TAX_RATE: Decimal = Decimal("0.09")


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class PricingStrategy(Protocol):
    """Contract for cart price recomputation."""
    def calculate_pricing(self, cart: Cart) -> Cart: ...


class StandardPricingStrategy:
    """Sum of line items plus a flat tax rate (9% by default)."""

    def __init__(
        self,
        tax_rate: Decimal | float = DEFAULT_TAX_RATE,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self.tax_rate = to_money(tax_rate)
        self._clock = clock

    def calculate_pricing(self, cart: Cart) -> Cart:
        raw_subtotal = sum(
            (to_money(item.total_price) for item in cart.items), Decimal("0"),
        )
        tax = round2(raw_subtotal * self.tax_rate)
        subtotal = round2(raw_subtotal)
        total = round2(subtotal + tax)

        return replace(
            cart,
            subtotal=subtotal,
            tax=tax,
            total=total,
            updated_at=self._clock(),
        )
