"""Cart Routes — thin HTTP adapter over CartEngine.

Invariants:
    - Routes never contain business logic (engine validates ids, bounds, merges)
    - Path ids arrive as plain strings; malformed ids surface as 400 from the engine
    - Success envelope is {data, timestamp}; DELETE cart returns 204 with no body

Design Decisions:
    - async handlers calling a sync engine: every engine call is in-memory and
      bounded, so there is nothing to offload to a thread pool
    - Engine injected with Depends(get_cart_engine) for test overrides
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Response, status

from cart_session.api.dependencies import get_cart_engine
from cart_session.core.cart import Cart
from cart_session.schemas.cart import (
    AddItemRequest, CartCreate, CartEnvelope, CartOut, UpdateQuantityRequest,
)
from cart_session.services.cart_engine import CartEngine

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/v1/cart", tags=["cart"])


def _envelope(cart: Cart) -> CartEnvelope:
    return CartEnvelope(
        data=CartOut.from_domain(cart), timestamp=datetime.now(timezone.utc),
    )


@router.post(
    "", response_model=CartEnvelope, status_code=status.HTTP_201_CREATED,
)
async def create_cart(
    body: CartCreate | None = None,
    engine: CartEngine = Depends(get_cart_engine),
):
    """Create a new cart session."""
    metadata = body.metadata.to_domain() if body and body.metadata else None
    return _envelope(engine.create_cart(metadata))


@router.get("/{cart_id}", response_model=CartEnvelope)
async def get_cart(cart_id: str, engine: CartEngine = Depends(get_cart_engine)):
    """Retrieve a cart by id."""
    return _envelope(engine.get_cart(cart_id))


@router.post("/{cart_id}/items", response_model=CartEnvelope)
async def add_item(
    cart_id: str,
    body: AddItemRequest,
    engine: CartEngine = Depends(get_cart_engine),
):
    """Add an item, or merge its quantity into the existing line for the product."""
    return _envelope(
        engine.add_item(cart_id, body.product.to_domain(), body.quantity),
    )


@router.patch("/{cart_id}/items/{item_id}", response_model=CartEnvelope)
async def update_item_quantity(
    cart_id: str,
    item_id: str,
    body: UpdateQuantityRequest,
    engine: CartEngine = Depends(get_cart_engine),
):
    """Set the quantity of a line item."""
    return _envelope(engine.update_item_quantity(cart_id, item_id, body.quantity))


@router.delete("/{cart_id}/items/{item_id}", response_model=CartEnvelope)
async def remove_item(
    cart_id: str,
    item_id: str,
    engine: CartEngine = Depends(get_cart_engine),
):
    """Remove a line item."""
    return _envelope(engine.remove_item(cart_id, item_id))


@router.delete("/{cart_id}/items", response_model=CartEnvelope)
async def clear_cart(cart_id: str, engine: CartEngine = Depends(get_cart_engine)):
    """Empty the cart, keeping the session and its expiry."""
    return _envelope(engine.clear_cart(cart_id))


@router.delete("/{cart_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_cart(cart_id: str, engine: CartEngine = Depends(get_cart_engine)):
    """Delete a cart session. Idempotent."""
    engine.delete_cart(cart_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
