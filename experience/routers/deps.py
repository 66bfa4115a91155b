"""
Shared Dependencies for Routers

The cart service lives on ``app.state``; routes receive it through
``Depends(get_cart_service)`` so tests can build isolated apps.
"""
from fastapi import Request

from experience.cart import CartService, CartContextStore


def get_cart_service(request: Request) -> CartService:
    """Cart service bound to the running application."""
    return request.app.state.cart_service


def get_cart_store(request: Request) -> CartContextStore:
    """Context store bound to the running application."""
    return request.app.state.cart_service.store
