"""Health Probe — liveness endpoint for load balancers and monitoring.

Invariants:
    - GET /health always returns 200 if the process is up
    - Reports the live cart count from the shared store (no side effects)
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status

from cart_session.api.dependencies import get_cart_engine
from cart_session.services.cart_engine import CartEngine

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/health", tags=["health"])


@router.get("", status_code=status.HTTP_200_OK)
async def health_check(engine: CartEngine = Depends(get_cart_engine)):
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "active_carts": engine.store.count(),
    }
