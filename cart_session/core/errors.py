"""Error Hierarchy — typed, categorized exceptions for all cart session failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Validation errors are raised before any state mutation
    - CartExpiredError (410) is distinct from ResourceNotFoundError (404):
      "existed, now gone" vs "never existed"
    - to_response() produces the REST envelope; no internal details leaked

Design Decisions:
    - Single hierarchy with CartSessionError base: FastAPI global handler catches all (ADR: uniform error shape)
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    EXPIRED = "expired"
    CONFLICT = "conflict"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    cart_id: str | None = None
    item_id: str | None = None
    debug_info: dict[str, Any] | None = None


class CartSessionError(Exception):
    """Base exception for all cart session errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "statusCode": self.http_status,
                "category": self.category.value,
            },
            "timestamp": self.context.timestamp.isoformat(),
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class ValidationError(CartSessionError):
    """Caller input violates a business rule."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )


class ResourceNotFoundError(CartSessionError):
    """Requested cart or item does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} with identifier '{resource_id}' not found.",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class CartExpiredError(CartSessionError):
    """Cart existed but its TTL elapsed. The entry is already evicted."""
    def __init__(self, cart_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.cart_id = cart_id
        super().__init__(
            f"Cart session '{cart_id}' has expired. Please create a new cart.",
            "CART_EXPIRED", ErrorCategory.EXPIRED,
            ErrorSeverity.INFO, ctx, 410,
        )
        self.cart_id = cart_id


class ConflictError(CartSessionError):
    """Reserved for idempotency clashes; no current operation raises it."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONFLICT_ERROR", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )
