"""
Money Utilities - Safe Decimal operations for monetary values.

Avoids float precision issues by using Decimal throughout. Floats only
appear at the JSON boundary.
"""
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Union

Number = Union[str, int, float, Decimal]

# Default precision for money operations (2 decimal places)
MONEY_PRECISION = Decimal("0.01")

# Symbols used when formatting amounts for log lines
CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
}


def to_decimal(value: Union[Number, None]) -> Decimal:
    """
    Convert any value to Decimal safely.

    Args:
        value: Value to convert (str, int, float, Decimal, or None)

    Returns:
        Decimal representation of the value, or Decimal("0") if None/invalid
    """
    if value is None:
        return Decimal("0")

    if isinstance(value, Decimal):
        return value

    try:
        # Convert via string to avoid float precision issues
        if isinstance(value, float):
            return Decimal(str(value))
        return Decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        return Decimal("0")


def round_money(value: Number) -> Decimal:
    """
    Round monetary value to 2 decimal places, half-up.

    Args:
        value: Value to round

    Returns:
        Rounded Decimal value
    """
    return to_decimal(value).quantize(MONEY_PRECISION, rounding=ROUND_HALF_UP)


def format_money(value: Number, currency: str = "USD") -> str:
    """
    Format monetary value with currency symbol.

    Args:
        value: Value to format
        currency: ISO currency code

    Returns:
        Formatted string, e.g. "$16.50" or "16.50 CHF"
    """
    formatted = f"{round_money(value):,.2f}"
    symbol = CURRENCY_SYMBOLS.get(currency)
    if symbol:
        return f"{symbol}{formatted}"
    return f"{formatted} {currency}"


def to_float(value: Number) -> float:
    """
    Convert Decimal to float for JSON serialization.

    Use only at API boundaries, not for internal calculations.
    """
    return float(to_decimal(value))


def add(a: Number, b: Number) -> Decimal:
    """Safe addition of monetary values."""
    return to_decimal(a) + to_decimal(b)


def multiply(value: Number, factor: Number) -> Decimal:
    """Safe multiplication of monetary value by a factor."""
    return to_decimal(value) * to_decimal(factor)


def total(values) -> Decimal:
    """Sum an iterable of monetary values, starting from Decimal zero."""
    result = Decimal("0")
    for value in values:
        result += to_decimal(value)
    return result
