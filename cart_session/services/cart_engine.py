"""Cart Engine — cart lifecycle and item mutations over a CartStore.

Invariants:
    - All input validation runs before the first store read
    - Each call reads a fresh copy, mutates only that copy, recomputes pricing,
      then writes back; no Cart instance is shared across calls
    - Merge checks the combined quantity BEFORE touching the existing item:
      a rejected merge leaves the stored cart exactly as it was
    - unit_price is captured once at add time, rounded to cents; later adds
      of the same product keep the original snapshot
    - Store errors (CartExpiredError, ResourceNotFoundError) propagate unchanged

Design Decisions:
    - Store and pricing injected (Protocols): the engine owns rules, not storage
    - No compare-and-swap: concurrent writers to the same cart are last-write-wins
      (ADR: per-cart serialization would be a store-level strengthening)
    - TTL belongs to the store alone; expires_at is stamped from store.ttl so
      the advertised expiry is the one eviction honours
    - Clock and id factory injected for deterministic tests
"""

import logging
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Callable

from cart_session.core.cart import Cart, CartItem, Product
from cart_session.core.domain_types import (
    CartId, ItemId, ProductCategory, round2,
)
from cart_session.core.enforce_cart_rules import (
    DEFAULT_MAX_QUANTITY,
    DEFAULT_MIN_QUANTITY,
    check_merge_quantity,
    validate_cart_id,
    validate_product,
    validate_quantity,
)
from cart_session.core.errors import ErrorContext, ResourceNotFoundError, ValidationError
from cart_session.core.pricing import PricingStrategy
from cart_session.core.repository_protocols import CartStore

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _uuid4() -> str:
    return str(uuid.uuid4())


class CartEngine:
    """Enforces cart business rules and orchestrates store + pricing."""

    def __init__(
        self,
        store: CartStore,
        pricing: PricingStrategy,
        min_quantity: int = DEFAULT_MIN_QUANTITY,
        max_quantity: int = DEFAULT_MAX_QUANTITY,
        clock: Callable[[], datetime] = _utc_now,
        id_factory: Callable[[], str] = _uuid4,
    ):
        self.store = store
        self.pricing = pricing
        self.min_quantity = min_quantity
        self.max_quantity = max_quantity
        self._clock = clock
        self._new_id = id_factory

    # ─── Cart lifecycle ─────────────────────────────────────────

    def create_cart(self, metadata: dict[str, Any] | None = None) -> Cart:
        now = self._clock()
        cart = Cart(
            cart_id=CartId(self._new_id()),
            created_at=now,
            updated_at=now,
            expires_at=now + self.store.ttl,
            metadata=dict(metadata) if metadata is not None else None,
        )
        stored = self.store.put(cart)
        logger.info("Cart created", extra={"cart_id": stored.cart_id})
        return stored

    def get_cart(self, cart_id: str) -> Cart:
        validate_cart_id(cart_id)
        return self._read(cart_id)

    def clear_cart(self, cart_id: str) -> Cart:
        """Empty the cart but keep its identity and expiration clock."""
        validate_cart_id(cart_id)
        cart = self._read(cart_id)
        cart.items = []
        return self._reprice_and_save(cart)

    def delete_cart(self, cart_id: str) -> None:
        validate_cart_id(cart_id)
        self.store.delete(cart_id)
        logger.info("Cart deleted", extra={"cart_id": cart_id})

    # ─── Item mutations ─────────────────────────────────────────

    def add_item(self, cart_id: str, product: Product, quantity: int) -> Cart:
        """Add a product, merging into the existing line item if present."""
        validate_cart_id(cart_id)
        validate_quantity(quantity, self.min_quantity, self.max_quantity)
        validate_product(product)

        cart = self._read(cart_id)
        existing = cart.find_by_product(product.product_id)

        if existing is not None:
            try:
                merged = check_merge_quantity(
                    product.name, existing.quantity, quantity,
                    self.max_quantity, cart_id=cart_id,
                )
            except ValidationError:
                logger.warning(
                    "Rejected merge beyond max quantity",
                    extra={"cart_id": cart_id, "item_id": existing.item_id},
                )
                raise
            existing.set_quantity(merged)
        else:
            snapshot = _normalize_product(product)
            cart.items.append(CartItem(
                item_id=ItemId(self._new_id()),
                product=snapshot,
                quantity=quantity,
                unit_price=snapshot.price,
                total_price=round2(snapshot.price * quantity),
                added_at=self._clock(),
            ))

        return self._reprice_and_save(cart)

    def remove_item(self, cart_id: str, item_id: str) -> Cart:
        validate_cart_id(cart_id)
        cart = self._read(cart_id)
        item = self._require_item(cart, item_id)
        cart.items.remove(item)
        return self._reprice_and_save(cart)

    def update_item_quantity(self, cart_id: str, item_id: str, quantity: int) -> Cart:
        validate_cart_id(cart_id)
        validate_quantity(quantity, self.min_quantity, self.max_quantity)
        cart = self._read(cart_id)
        item = self._require_item(cart, item_id)
        item.set_quantity(quantity)
        return self._reprice_and_save(cart)

    # ─── Helpers ────────────────────────────────────────────────

    def _read(self, cart_id: str) -> Cart:
        cart = self.store.get(cart_id)
        if cart is None:
            raise ResourceNotFoundError("Cart", cart_id, ErrorContext(cart_id=cart_id))
        return cart

    def _require_item(self, cart: Cart, item_id: str) -> CartItem:
        item = cart.find_item(item_id)
        if item is None:
            raise ResourceNotFoundError(
                "Item", item_id, ErrorContext(cart_id=cart.cart_id, item_id=item_id),
            )
        return item

    def _reprice_and_save(self, cart: Cart) -> Cart:
        return self.store.update(self.pricing.calculate_pricing(cart))


def _normalize_product(product: Product) -> Product:
    """Freeze a validated product into canonical types for the price snapshot."""
    return replace(
        product,
        price=round2(product.price),
        category=ProductCategory(product.category),
    )
