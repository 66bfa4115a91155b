"""Tests for logging helpers"""
from experience.logging import format_context, get_logger, sanitize_id_for_logging


def test_get_logger_is_cached():
    assert get_logger("experience.test") is get_logger("experience.test")


def test_sanitize_id():
    assert sanitize_id_for_logging(None) == "N/A"
    assert sanitize_id_for_logging("123456789012") == "123456789012"
    assert sanitize_id_for_logging("1234567890123456") == "123456789012"
    assert sanitize_id_for_logging("a\r\nb") == "a\\r\\nb"


def test_format_context_skips_none():
    assert format_context(cartId="1", currency=None, quantity=3) == "cartId=1 quantity=3"


def test_format_context_clips_free_text():
    line = format_context(sku="x" * 60, name="tab\there")

    assert line == f"sku={'x' * 50}... name=tab\\there"
