"""Root conftest — shared fixtures for cart session tests.

Invariants:
    - Time is driven by FakeClock; no test sleeps to wait for expiry
    - Stores built here never start the sweep thread (auto_sweep=False)
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from cart_session.core.cart import Product
from cart_session.core.domain_types import ProductCategory
from cart_session.core.pricing import StandardPricingStrategy
from cart_session.infrastructure.session_store import InMemorySessionStore
from cart_session.services.cart_engine import CartEngine


TTL_MINUTES = 5


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    s = InMemorySessionStore(
        ttl=timedelta(minutes=TTL_MINUTES), auto_sweep=False, clock=clock,
    )
    yield s
    s.stop()


@pytest.fixture
def engine(store, clock):
    return CartEngine(
        store=store,
        pricing=StandardPricingStrategy(clock=clock),
        clock=clock,
    )


@pytest.fixture
def plan():
    return Product(
        product_id="prod-001", name="5G Unlimited Plan",
        price=Decimal("75.00"), category=ProductCategory.PLAN,
    )


@pytest.fixture
def phone():
    return Product(
        product_id="prod-002", name="iPhone 15",
        price=Decimal("999.99"), category=ProductCategory.DEVICE,
    )
