"""API test fixtures — FastAPI test client over the shared engine fixture.

Invariants:
    - get_cart_engine overridden with the clock-controlled engine from root conftest
    - dependency_overrides cleared after every test
"""

import pytest
from httpx import ASGITransport, AsyncClient

from cart_session.api.dependencies import get_cart_engine
from cart_session.main import app


@pytest.fixture
async def client(engine):
    """FastAPI test client with the engine dependency overridden."""
    app.dependency_overrides[get_cart_engine] = lambda: engine

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def plan_payload():
    return {
        "product": {
            "productId": "5g-unlimited",
            "name": "5G Unlimited Plan",
            "price": 75.0,
            "category": "plan",
        },
        "quantity": 1,
    }


@pytest.fixture
async def cart_id(client):
    res = await client.post("/v1/cart", json={})
    return res.json()["data"]["cartId"]
