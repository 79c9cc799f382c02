"""In-Memory Session Store — TTL-expiring keyed storage for cart aggregates.

Invariants:
    - Expiration is ABSOLUTE: anchored on the cart's own created_at, never extended
      by reads or writes; re-putting an unchanged cart does not reset the clock
    - Expiry check and eviction happen in the same critical section, so a cart
      observed as live is never one the sweep has already freed
    - An expired entry is evicted BEFORE CartExpiredError is raised: the next
      access for the same id deterministically sees "not found"
    - Every cart crossing the boundary is a deep copy (no shared mutable state)
    - After stop() returns, the sweep thread cannot fire again

Design Decisions:
    - Single coarse threading.Lock: live session count stays small, and one lock
      keeps the ordering argument trivial (ADR: session cache, not a KV store)
    - Sweep as an owned daemon thread waiting on an Event: stop() wakes it
      immediately instead of waiting out the interval
    - Clock injected so tests can move time without sleeping
"""

import copy
import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable

from cart_session.core.cart import Cart
from cart_session.core.errors import CartExpiredError, ResourceNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_SWEEP_INTERVAL_SECONDS: float = 60.0


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class _Entry:
    cart: Cart
    anchor: datetime


class InMemorySessionStore:
    """Process-local cart storage with lazy and periodic expiration."""

    def __init__(
        self,
        ttl: timedelta,
        sweep_interval_seconds: float = DEFAULT_SWEEP_INTERVAL_SECONDS,
        auto_sweep: bool = True,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self.ttl = ttl
        self.sweep_interval_seconds = sweep_interval_seconds
        self._clock = clock
        self._entries: dict[str, _Entry] = {}
        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._sweeper: threading.Thread | None = None
        if auto_sweep:
            self.start()

    # ─── Keyed operations ───────────────────────────────────────

    def put(self, cart: Cart) -> Cart:
        stored = copy.deepcopy(cart)
        with self._lock:
            self._entries[cart.cart_id] = _Entry(cart=stored, anchor=cart.created_at)
        return copy.deepcopy(stored)

    def get(self, cart_id: str) -> Cart | None:
        with self._lock:
            entry = self._entries.get(cart_id)
            if entry is None:
                return None
            self._evict_if_expired(cart_id, entry)
            return copy.deepcopy(entry.cart)

    def update(self, cart: Cart) -> Cart:
        stored = copy.deepcopy(cart)
        with self._lock:
            entry = self._entries.get(cart.cart_id)
            if entry is None:
                raise ResourceNotFoundError("Cart", cart.cart_id)
            self._evict_if_expired(cart.cart_id, entry)
            entry.cart = stored
        return copy.deepcopy(stored)

    def delete(self, cart_id: str) -> None:
        with self._lock:
            self._entries.pop(cart_id, None)

    def count(self) -> int:
        with self._lock:
            return len(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    # ─── Expiration ─────────────────────────────────────────────

    def is_expired_at(self, anchor: datetime, now: datetime) -> bool:
        return now > anchor + self.ttl

    def _evict_if_expired(self, cart_id: str, entry: _Entry) -> None:
        """Caller must hold the lock."""
        if self.is_expired_at(entry.anchor, self._clock()):
            del self._entries[cart_id]
            logger.debug("Evicted expired cart on access", extra={"cart_id": cart_id})
            raise CartExpiredError(cart_id)

    def sweep_expired(self) -> int:
        """Evict every expired entry, accessed or not. Returns the eviction count."""
        with self._lock:
            now = self._clock()
            expired = [
                cart_id for cart_id, entry in self._entries.items()
                if self.is_expired_at(entry.anchor, now)
            ]
            for cart_id in expired:
                del self._entries[cart_id]
        if expired:
            logger.info(
                f"Cleaned up {len(expired)} expired cart(s)",
                extra={"evicted": len(expired)},
            )
        return len(expired)

    # ─── Background sweep lifecycle ─────────────────────────────

    @property
    def sweeping(self) -> bool:
        return self._sweeper is not None and self._sweeper.is_alive()

    def start(self) -> None:
        """Start the periodic sweep. No-op if already running."""
        if self.sweeping:
            return
        self._stop_event = threading.Event()
        self._sweeper = threading.Thread(
            target=self._run_sweeper,
            args=(self._stop_event,),
            name="cart-session-sweeper",
            daemon=True,
        )
        self._sweeper.start()

    def stop(self) -> None:
        """Stop the periodic sweep and wait for the thread to exit. Idempotent."""
        self._stop_event.set()
        sweeper, self._sweeper = self._sweeper, None
        if sweeper is not None and sweeper is not threading.current_thread():
            sweeper.join()

    def _run_sweeper(self, stop_event: threading.Event) -> None:
        while not stop_event.wait(self.sweep_interval_seconds):
            try:
                self.sweep_expired()
            except Exception:
                logger.error("Cart sweep failed", exc_info=True)

    def __enter__(self) -> "InMemorySessionStore":
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop()
