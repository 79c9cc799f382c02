"""Structured logging — JSON formatter surfaces cart fields."""

import json
import logging

from cart_session.infrastructure.observability import JSONFormatter, setup_logging


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "cart_session.test", logging.INFO, __file__, 1, "Cart created", None, None,
    )
    record.__dict__.update(extra)
    return record


def test_json_formatter_basic_fields():
    out = json.loads(JSONFormatter().format(_record()))
    assert out["level"] == "INFO"
    assert out["logger"] == "cart_session.test"
    assert out["message"] == "Cart created"
    assert "timestamp" in out


def test_json_formatter_includes_cart_extras():
    out = json.loads(JSONFormatter().format(_record(cart_id="abc", evicted=3)))
    assert out["cart_id"] == "abc"
    assert out["evicted"] == 3
    assert "item_id" not in out


def test_setup_logging_does_not_stack_handlers():
    first = setup_logging("DEBUG", "text")
    second = setup_logging("INFO", "json")
    try:
        assert first not in logging.root.handlers
        assert second in logging.root.handlers
        assert isinstance(second.formatter, JSONFormatter)
        assert logging.root.level == logging.INFO
    finally:
        logging.root.removeHandler(second)
