"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - CartId and ItemId are UUIDv4 strings generated by the engine, never by callers
    - Money is always Decimal, quantized to cents with ROUND_HALF_UP
    - All valid states encoded as Enums, no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

CartId = NewType("CartId", str)
ItemId = NewType("ItemId", str)


# ─── Money ───────────────────────────────────────────────────────

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value: Decimal | float | int | str) -> Decimal:
    """Coerce a number to Decimal without binary float artifacts."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round2(value: Decimal | float | int) -> Decimal:
    """Round half-up to 2 decimal places."""
    return to_money(value).quantize(CENT, rounding=ROUND_HALF_UP)


# ─── Enums ───────────────────────────────────────────────────────

class ProductCategory(str, Enum):
    """Catalog categories accepted in a cart."""
    PLAN = "plan"
    DEVICE = "device"
    ADDON = "addon"
    ACCESSORY = "accessory"


class SalesChannel(str, Enum):
    """Channel a cart session was opened from (metadata only)."""
    WEB = "web"
    MOBILE = "mobile"
    STORE = "store"
