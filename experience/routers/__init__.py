"""HTTP routers for the cart experience API."""
from .cart import router as cart_router
from .errors import register_error_handlers

__all__ = ["cart_router", "register_error_handlers"]
