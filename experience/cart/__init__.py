"""Cart package: models, context store, reaper, and service facade."""
from .models import Money, LineItem, CartContext, CreatedContext, Cart, build_cart
from .store import CartContextStore, generate_numeric_id
from .reaper import ContextReaper
from .service import CartService

__all__ = [
    "Money",
    "LineItem",
    "CartContext",
    "CreatedContext",
    "Cart",
    "build_cart",
    "CartContextStore",
    "generate_numeric_id",
    "ContextReaper",
    "CartService",
]
