"""Session Store — TTL expiration, copy semantics, sweep lifecycle.

Invariants:
    - Expired access evicts first, so Expired is reported exactly once, then None
    - Expiration anchored on cart.created_at, never extended by access or re-put
    - Returned carts are copies: mutating them never touches stored state
    - stop() joins the sweep thread; no sweep after it returns
"""

import threading
from datetime import timedelta
from decimal import Decimal

import pytest

from cart_session.core.cart import Cart
from cart_session.core.errors import CartExpiredError, ResourceNotFoundError
from cart_session.infrastructure.session_store import InMemorySessionStore


def _cart(clock, cart_id="cart-001") -> Cart:
    now = clock()
    return Cart(
        cart_id=cart_id, created_at=now, updated_at=now,
        expires_at=now + timedelta(minutes=5),
    )


# ─── put / get ───────────────────────────────────────────────────

def test_put_then_get_returns_equal_copy(store, clock):
    cart = _cart(clock)
    store.put(cart)
    got = store.get("cart-001")
    assert got == cart
    assert got is not cart
    assert store.count() == 1


def test_get_unknown_returns_none(store):
    assert store.get("never-stored") is None


def test_returned_copy_does_not_alias_store(store, clock):
    store.put(_cart(clock))
    got = store.get("cart-001")
    got.subtotal = Decimal("100.00")
    got.items.append("junk")
    assert store.get("cart-001").subtotal == 0
    assert store.get("cart-001").items == []


def test_put_copies_input(store, clock):
    cart = _cart(clock)
    store.put(cart)
    cart.total = Decimal("5.00")
    assert store.get("cart-001").total == 0


# ─── expiration ──────────────────────────────────────────────────

def test_live_just_before_ttl(store, clock):
    store.put(_cart(clock))
    clock.advance(minutes=4, seconds=59)
    assert store.get("cart-001") is not None


def test_still_live_exactly_at_ttl(store, clock):
    store.put(_cart(clock))
    clock.advance(minutes=5)
    assert store.get("cart-001") is not None


def test_expired_once_then_not_found(store, clock):
    store.put(_cart(clock))
    clock.advance(minutes=5, microseconds=1)

    with pytest.raises(CartExpiredError):
        store.get("cart-001")
    assert store.count() == 0
    assert store.get("cart-001") is None


def test_update_on_expired_evicts(store, clock):
    cart = _cart(clock)
    store.put(cart)
    clock.advance(minutes=6)

    with pytest.raises(CartExpiredError):
        store.update(cart)
    assert store.count() == 0
    with pytest.raises(ResourceNotFoundError):
        store.update(cart)


def test_reads_do_not_extend_expiration(store, clock):
    store.put(_cart(clock))
    for _ in range(4):
        clock.advance(minutes=1)
        store.get("cart-001")
    clock.advance(minutes=2)
    with pytest.raises(CartExpiredError):
        store.get("cart-001")


def test_reput_does_not_reset_clock(store, clock):
    cart = _cart(clock)
    store.put(cart)
    clock.advance(minutes=4)
    store.put(cart)
    clock.advance(minutes=2)
    with pytest.raises(CartExpiredError):
        store.get("cart-001")


def test_update_keeps_original_anchor(store, clock):
    cart = _cart(clock)
    store.put(cart)
    clock.advance(minutes=4)
    store.update(cart)
    clock.advance(minutes=2)
    with pytest.raises(CartExpiredError):
        store.get("cart-001")


# ─── update / delete / clear ─────────────────────────────────────

def test_update_overwrites_and_returns_copy(store, clock):
    cart = _cart(clock)
    store.put(cart)
    cart.subtotal = Decimal("100.00")
    result = store.update(cart)
    assert result.subtotal == Decimal("100.00")
    assert store.get("cart-001").subtotal == Decimal("100.00")


def test_update_unknown_raises_not_found(store, clock):
    with pytest.raises(ResourceNotFoundError):
        store.update(_cart(clock, "missing"))


def test_delete_is_idempotent(store, clock):
    store.put(_cart(clock))
    store.delete("cart-001")
    store.delete("cart-001")
    store.delete("never-existed")
    assert store.count() == 0


def test_clear_removes_everything(store, clock):
    store.put(_cart(clock, "a"))
    store.put(_cart(clock, "b"))
    store.clear()
    assert store.count() == 0


def test_count_includes_unreaped_expired(store, clock):
    store.put(_cart(clock))
    clock.advance(minutes=10)
    assert store.count() == 1


# ─── sweep ───────────────────────────────────────────────────────

def test_sweep_evicts_only_expired(store, clock):
    store.put(_cart(clock, "old"))
    clock.advance(minutes=3)
    store.put(_cart(clock, "young"))
    clock.advance(minutes=3)

    assert store.sweep_expired() == 1
    assert store.count() == 1
    assert store.get("young") is not None
    assert store.get("old") is None


def test_sweep_with_nothing_expired(store, clock):
    store.put(_cart(clock))
    assert store.sweep_expired() == 0


def test_background_sweep_runs_and_stops(clock):
    swept = threading.Event()

    class _Store(InMemorySessionStore):
        def sweep_expired(self) -> int:
            count = super().sweep_expired()
            if count:
                swept.set()
            return count

    s = _Store(ttl=timedelta(minutes=5), sweep_interval_seconds=0.01, clock=clock)
    try:
        s.put(_cart(clock))
        clock.advance(minutes=6)
        assert swept.wait(timeout=2)
        assert s.sweeping
    finally:
        s.stop()
    assert not s.sweeping
    assert s.count() == 0


def test_stop_is_idempotent_and_context_manager(clock):
    with InMemorySessionStore(
        ttl=timedelta(minutes=5), sweep_interval_seconds=30, clock=clock,
    ) as s:
        assert s.sweeping
    assert not s.sweeping
    s.stop()


def test_auto_sweep_disabled_has_no_thread(store):
    assert not store.sweeping


def test_concurrent_access_is_consistent(store, clock):
    for i in range(50):
        store.put(_cart(clock, f"c-{i}"))

    def worker(n: int):
        for i in range(50):
            store.get(f"c-{i}")
            if i % 5 == n:
                store.delete(f"c-{i}")

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(5)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert store.count() == 0
