"""Cart Rule Enforcement — pure business-rule validation for cart operations.

Invariants:
    - Every check is PURE: raises ValidationError or returns None, never mutates
    - Runs before any store read, so a rejected request leaves no trace
    - check_merge_quantity runs BEFORE the existing item is touched
    - Quantity bounds are parameters (configured at engine construction)

Design Decisions:
    - Raise instead of returning error dicts: callers are Python, not an LLM tool loop
    - bool rejected explicitly wherever int/float are accepted (bool subclasses int)
    - fullmatch, not match: "$" alone would let a trailing newline through
"""

import re
from decimal import Decimal
from typing import Any

from cart_session.core.domain_types import ProductCategory, to_money
from cart_session.core.errors import ErrorContext, ValidationError


UUID_V4_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)
VALID_CATEGORIES: frozenset[str] = frozenset(c.value for c in ProductCategory)

DEFAULT_MIN_QUANTITY: int = 1
DEFAULT_MAX_QUANTITY: int = 99


def validate_cart_id(cart_id: Any) -> None:
    if not isinstance(cart_id, str) or not UUID_V4_PATTERN.fullmatch(cart_id):
        raise ValidationError("Invalid cart ID format. Expected UUID v4.")


def validate_quantity(
    quantity: Any,
    min_quantity: int = DEFAULT_MIN_QUANTITY,
    max_quantity: int = DEFAULT_MAX_QUANTITY,
) -> None:
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise ValidationError("Quantity must be an integer.")
    if quantity < min_quantity or quantity > max_quantity:
        raise ValidationError(
            f"Quantity must be between {min_quantity} and {max_quantity}.",
        )


def validate_product(product: Any) -> None:
    """Product fields: non-empty id/name, price >= 0, known category."""
    product_id = getattr(product, "product_id", None)
    if not product_id or not isinstance(product_id, str):
        raise ValidationError("Product ID is required.")

    name = getattr(product, "name", None)
    if not name or not isinstance(name, str):
        raise ValidationError("Product name is required.")

    price = getattr(product, "price", None)
    if (
        isinstance(price, bool)
        or not isinstance(price, (int, float, Decimal))
        or not to_money(price).is_finite()
        or price < 0
    ):
        raise ValidationError("Product price must be a positive number.")

    category = getattr(product, "category", None)
    category_value = (
        category.value if isinstance(category, ProductCategory) else category
    )
    if category_value not in VALID_CATEGORIES:
        raise ValidationError(f"Invalid product category: {category_value}")


def check_merge_quantity(
    product_name: str,
    existing_quantity: int,
    added_quantity: int,
    max_quantity: int = DEFAULT_MAX_QUANTITY,
    cart_id: str | None = None,
) -> int:
    """Return the merged quantity, or raise if it would exceed max_quantity."""
    candidate = existing_quantity + added_quantity
    if candidate > max_quantity:
        raise ValidationError(
            f"Total quantity for product '{product_name}' would exceed "
            f"maximum of {max_quantity}",
            ErrorContext(
                cart_id=cart_id,
                debug_info={
                    "existing_quantity": existing_quantity,
                    "requested_quantity": added_quantity,
                },
            ),
        )
    return candidate
