"""Cart Aggregate — pure dataclasses for products, line items and carts.

Invariants:
    - CartItem.unit_price is a snapshot taken at add time, never re-read from the catalog
    - CartItem.total_price == round2(unit_price * quantity), recomputed on every quantity change
    - Cart.items never holds two items with the same product_id
    - Cart.expires_at is fixed at creation (absolute expiration)

Design Decisions:
    - Plain dataclasses, no IO (ADR: functional core)
    - Product is frozen: once referenced by a line item it cannot change
    - Cart is mutable but only ever mutated on a private copy handed out by the store
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any

from cart_session.core.domain_types import (
    CartId, ItemId, ProductCategory, ZERO, round2,
)


@dataclass(frozen=True)
class Product:
    """Catalog reference carried inside a line item."""
    product_id: str
    name: str
    price: Decimal
    category: ProductCategory | str
    description: str | None = None


@dataclass
class CartItem:
    """One line item per product in a cart."""
    item_id: ItemId
    product: Product
    quantity: int
    unit_price: Decimal
    total_price: Decimal
    added_at: datetime

    def set_quantity(self, quantity: int) -> None:
        """Set quantity and re-derive total_price from the price snapshot."""
        self.quantity = quantity
        self.total_price = round2(self.unit_price * quantity)


@dataclass
class Cart:
    """Cart aggregate root."""
    cart_id: CartId
    created_at: datetime
    updated_at: datetime
    expires_at: datetime
    items: list[CartItem] = field(default_factory=list)
    subtotal: Decimal = ZERO
    tax: Decimal = ZERO
    total: Decimal = ZERO
    metadata: dict[str, Any] | None = None

    def find_by_product(self, product_id: str) -> CartItem | None:
        return next(
            (i for i in self.items if i.product.product_id == product_id), None,
        )

    def find_item(self, item_id: str) -> CartItem | None:
        return next((i for i in self.items if i.item_id == item_id), None)
