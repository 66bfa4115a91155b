"""
Logging setup for the cart experience service.

Every cart log line is a short message followed by ``key=value`` context,
e.g. ``Item added successfully cartId=123456789012 sku=PHONE_X``.

Usage:
    from experience.logging import get_logger, format_context
    logger = get_logger(__name__)

    logger.info(f"Cart created successfully {format_context(cartId=cart_id)}")
"""

import logging
import os
import sys
from functools import cache
from typing import Any

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FORMAT_PRODUCTION = "%(levelname)s - %(name)s - %(message)s"

# Cart and item identifiers are 12 digits
MAX_ID_LENGTH = 12
# SKUs and product names are caller-supplied free text
MAX_VALUE_LENGTH = 50


def _configure_root_logger() -> None:
    root = logging.getLogger()
    if root.handlers:
        return

    level_name = os.environ.get("LOG_LEVEL", "INFO").upper()
    root.setLevel(getattr(logging, level_name, logging.INFO))

    is_production = os.environ.get("ENVIRONMENT", "").lower() == "production"
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT_PRODUCTION if is_production else LOG_FORMAT))
    root.addHandler(handler)

    # CartService already logs every request
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


_configure_root_logger()


@cache
def get_logger(name: str) -> logging.Logger:
    """Logger for ``name`` (typically ``__name__``)."""
    return logging.getLogger(name)


def _clean(value: Any, max_length: int, marker: str = "...") -> str:
    # Keep one log record per line (CWE-117)
    text = (
        str(value)
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
        .replace("\x00", "")
    )
    return text if len(text) <= max_length else text[:max_length] + marker


def sanitize_id_for_logging(id_value: str | None) -> str:
    """
    Cart or item ID safe for a log line.

    Path parameters arrive unchecked, so anything past 12 characters is cut
    and control characters are escaped. Returns "N/A" for a missing ID.
    """
    if not id_value:
        return "N/A"
    return _clean(id_value, MAX_ID_LENGTH, marker="")


def format_context(**context: Any) -> str:
    """
    Render cart context as ``key=value`` pairs.

    None values are skipped; strings such as SKUs and names are escaped
    and clipped.
    """
    parts = []
    for key, value in context.items():
        if value is None:
            continue
        if isinstance(value, str):
            value = _clean(value, MAX_VALUE_LENGTH)
        parts.append(f"{key}={value}")
    return " ".join(parts)


__all__ = [
    "get_logger",
    "sanitize_id_for_logging",
    "format_context",
]
