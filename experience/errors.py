"""
Cart Errors

Typed failures raised by the cart core, plus centralized error messages
to avoid string duplication across the store and the HTTP layer.
"""

from typing import Any

# Cart errors
ERROR_CART_NOT_FOUND = "Cart not found"
ERROR_ITEM_NOT_FOUND = "Item not found"
ERROR_CONTEXT_EXPIRED = "Cart context expired"
ERROR_CART_FULL = "Cart cannot contain more than {max_items} unique items"
ERROR_ID_EXHAUSTED = "Failed to generate unique ID after maximum attempts"
ERROR_AMOUNT_OUT_OF_RANGE = "Cart amounts exceed the supported range"

# Request errors
ERROR_VALIDATION_FAILED = "Validation failed"
ERROR_INTERNAL = "An unexpected error occurred"


class CartError(Exception):
    """Base exception for all cart errors."""

    code = "CART_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict:
        """Machine-readable representation."""
        data: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            data["details"] = self.details
        return data


class ValidationError(CartError):
    """Raised when input or a cart capacity rule is violated."""

    code = "VALIDATION_ERROR"


class NotFoundError(CartError):
    """Raised when a cart or a line item does not exist."""

    code = "NOT_FOUND"


class ContextExpiredError(CartError):
    """Raised when a cart context is accessed after its TTL."""

    code = "CONTEXT_EXPIRED"


class ResourceExhaustedError(CartError):
    """Raised when identifier generation runs out of attempts."""

    code = "RESOURCE_EXHAUSTED"


class ConfigurationError(CartError):
    """Raised when settings from the environment are invalid."""

    code = "CONFIGURATION_ERROR"

    def __init__(self, message: str, variable: str | None = None):
        details = {"variable": variable} if variable else {}
        super().__init__(message, details)


__all__ = [
    "ERROR_CART_NOT_FOUND",
    "ERROR_ITEM_NOT_FOUND",
    "ERROR_CONTEXT_EXPIRED",
    "ERROR_CART_FULL",
    "ERROR_ID_EXHAUSTED",
    "ERROR_VALIDATION_FAILED",
    "ERROR_INTERNAL",
    "CartError",
    "ValidationError",
    "NotFoundError",
    "ContextExpiredError",
    "ResourceExhaustedError",
    "ConfigurationError",
]
