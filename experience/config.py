"""Service configuration loaded from environment variables."""
import os
from dataclasses import dataclass
from datetime import timedelta
from decimal import Decimal, InvalidOperation
from functools import lru_cache

from .errors import ConfigurationError


# Defaults mirror the commerce back end this service stands in for
DEFAULT_TTL_MINUTES = 15
DEFAULT_CLEANUP_INTERVAL_MINUTES = 40
DEFAULT_MAX_ITEMS_IN_CART = 100
DEFAULT_TAX_RATE = Decimal("0.10")
DEFAULT_CURRENCY = "USD"
DEFAULT_PORT = 3001


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the cart store and HTTP layer."""
    ttl: timedelta = timedelta(minutes=DEFAULT_TTL_MINUTES)
    cleanup_interval: timedelta = timedelta(minutes=DEFAULT_CLEANUP_INTERVAL_MINUTES)
    max_items_in_cart: int = DEFAULT_MAX_ITEMS_IN_CART
    tax_rate: Decimal = DEFAULT_TAX_RATE
    default_currency: str = DEFAULT_CURRENCY
    port: int = DEFAULT_PORT


def _positive_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}", variable=name)
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {value}", variable=name)
    return value


def _rate(name: str, default: Decimal) -> Decimal:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = Decimal(raw)
    except InvalidOperation:
        raise ConfigurationError(f"{name} must be a decimal number, got {raw!r}", variable=name)
    if value < 0 or value > 1:
        raise ConfigurationError(f"{name} must be between 0 and 1, got {value}", variable=name)
    return value


def load_settings() -> Settings:
    """
    Build settings from the environment.

    Raises:
        ConfigurationError: if a variable is set but malformed
    """
    currency = os.environ.get("CART_DEFAULT_CURRENCY", DEFAULT_CURRENCY).strip().upper()
    if not currency:
        raise ConfigurationError("CART_DEFAULT_CURRENCY must not be empty", variable="CART_DEFAULT_CURRENCY")

    return Settings(
        ttl=timedelta(minutes=_positive_int("CART_TTL_MINUTES", DEFAULT_TTL_MINUTES)),
        cleanup_interval=timedelta(
            minutes=_positive_int("CART_CLEANUP_INTERVAL_MINUTES", DEFAULT_CLEANUP_INTERVAL_MINUTES)
        ),
        max_items_in_cart=_positive_int("CART_MAX_ITEMS", DEFAULT_MAX_ITEMS_IN_CART),
        tax_rate=_rate("CART_TAX_RATE", DEFAULT_TAX_RATE),
        default_currency=currency,
        port=_positive_int("PORT", DEFAULT_PORT),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get settings (cached after first load)."""
    return load_settings()
