"""Composition Root — builds and holds the process-wide CartEngine.

Invariants:
    - Exactly one shared engine (and therefore one session store) per process
    - The store itself knows nothing about being shared; this module owns that
    - reset_cart_engine() stops the sweep thread before dropping the instance,
      so tests and shutdown never leak a running sweeper

Design Decisions:
    - Lazy construction guarded by a lock: routes may be hit before lifespan
      runs (e.g. ASGITransport in tests)
    - Exposed as a FastAPI dependency so tests swap it via dependency_overrides
"""

import logging
import threading
from datetime import timedelta

from cart_session.config import Settings, get_settings
from cart_session.core.pricing import StandardPricingStrategy
from cart_session.infrastructure.session_store import InMemorySessionStore
from cart_session.services.cart_engine import CartEngine

logger = logging.getLogger(__name__)

_engine: CartEngine | None = None
_engine_lock = threading.Lock()


def build_cart_engine(settings: Settings, auto_sweep: bool = True) -> CartEngine:
    """Wire store + pricing + engine from settings."""
    store = InMemorySessionStore(
        ttl=timedelta(minutes=settings.cart_ttl_minutes),
        sweep_interval_seconds=settings.sweep_interval_seconds,
        auto_sweep=auto_sweep,
    )
    return CartEngine(
        store=store,
        pricing=StandardPricingStrategy(tax_rate=settings.tax_rate),
        min_quantity=settings.min_quantity,
        max_quantity=settings.max_quantity,
    )


def get_cart_engine() -> CartEngine:
    """Return the shared engine, building it on first use."""
    global _engine
    with _engine_lock:
        if _engine is None:
            _engine = build_cart_engine(get_settings())
            logger.info("Cart engine initialized")
        return _engine


def reset_cart_engine() -> None:
    """Stop the shared store's sweep and forget the instance."""
    global _engine
    with _engine_lock:
        engine, _engine = _engine, None
    if engine is not None and isinstance(engine.store, InMemorySessionStore):
        engine.store.stop()
        engine.store.clear()
        logger.info("Cart engine reset")
