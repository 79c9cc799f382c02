"""Domain Types — verifies money helpers and enum values."""

from decimal import Decimal

from cart_session.core.domain_types import (
    ProductCategory, SalesChannel, round2, to_money,
)


def test_round2_is_half_up():
    assert round2(Decimal("8.9991")) == Decimal("9.00")
    assert round2(Decimal("0.005")) == Decimal("0.01")
    assert round2(Decimal("2.675")) == Decimal("2.68")


def test_to_money_avoids_binary_float_artifacts():
    assert to_money(0.1) == Decimal("0.1")
    assert to_money(33.33) * 3 == Decimal("99.99")


def test_product_category_has_four_values():
    assert {c.value for c in ProductCategory} == {
        "plan", "device", "addon", "accessory",
    }


def test_sales_channel_values():
    assert {c.value for c in SalesChannel} == {"web", "mobile", "store"}
