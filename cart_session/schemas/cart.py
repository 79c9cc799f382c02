"""Cart Schemas — Pydantic models for the cart API boundary.

Invariants:
    - Request models check shape only: required fields, primitive types, enum values
    - Quantity bounds and product price rules are NOT checked here (engine owns them,
      and bounds are configurable at runtime)
    - Wire keys are camelCase; Python attributes are snake_case
    - Money leaves the API as JSON numbers (float), never strings

Design Decisions:
    - alias_generator=to_camel + populate_by_name: one model serves both spellings
    - from_domain() classmethods keep the Decimal→float mapping in one place
"""

from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from cart_session.core.cart import Cart, CartItem, Product
from cart_session.core.domain_types import ProductCategory, SalesChannel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ─── Requests ────────────────────────────────────────────────────

class ProductIn(CamelModel):
    """Catalog product as sent by the client."""
    product_id: str
    name: str
    description: str | None = None
    price: float
    category: ProductCategory

    def to_domain(self) -> Product:
        return Product(
            product_id=self.product_id,
            name=self.name,
            description=self.description,
            price=Decimal(str(self.price)),
            category=self.category,
        )


class CartMetadataIn(CamelModel):
    """Optional session metadata. Known keys typed, unknown keys passed through."""
    model_config = ConfigDict(extra="allow")
    customer_id: str | None = None
    channel: SalesChannel | None = None
    source: str | None = None

    def to_domain(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class CartCreate(CamelModel):
    metadata: CartMetadataIn | None = None


class AddItemRequest(CamelModel):
    product: ProductIn
    quantity: int


class UpdateQuantityRequest(CamelModel):
    quantity: int


# ─── Responses ───────────────────────────────────────────────────

class ProductOut(CamelModel):
    product_id: str
    name: str
    description: str | None = None
    price: float
    category: str

    @classmethod
    def from_domain(cls, product: Product) -> "ProductOut":
        return cls(
            product_id=product.product_id,
            name=product.name,
            description=product.description,
            price=float(product.price),
            category=ProductCategory(product.category).value,
        )


class CartItemOut(CamelModel):
    item_id: str
    product: ProductOut
    quantity: int
    unit_price: float
    total_price: float
    added_at: datetime

    @classmethod
    def from_domain(cls, item: CartItem) -> "CartItemOut":
        return cls(
            item_id=item.item_id,
            product=ProductOut.from_domain(item.product),
            quantity=item.quantity,
            unit_price=float(item.unit_price),
            total_price=float(item.total_price),
            added_at=item.added_at,
        )


class CartOut(CamelModel):
    cart_id: str
    items: list[CartItemOut] = Field(default_factory=list)
    subtotal: float
    tax: float
    total: float
    created_at: datetime
    updated_at: datetime
    expires_at: datetime
    metadata: dict[str, Any] | None = None

    @classmethod
    def from_domain(cls, cart: Cart) -> "CartOut":
        return cls(
            cart_id=cart.cart_id,
            items=[CartItemOut.from_domain(i) for i in cart.items],
            subtotal=float(cart.subtotal),
            tax=float(cart.tax),
            total=float(cart.total),
            created_at=cart.created_at,
            updated_at=cart.updated_at,
            expires_at=cart.expires_at,
            metadata=cart.metadata,
        )


class CartEnvelope(BaseModel):
    """Success envelope: {data, timestamp}."""
    data: CartOut
    timestamp: datetime
