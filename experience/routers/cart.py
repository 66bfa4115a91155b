"""
Cart Router

Thin transport over ``CartService``. Typed cart failures are translated
to HTTP responses by the handlers in ``experience.routers.errors``.
"""
from typing import Optional
from fastapi import APIRouter, Depends

from experience.cart import CartService
from .deps import get_cart_service
from .models import CreateCartRequest, AddItemRequest, UpdateQuantityRequest

router = APIRouter(prefix="/cart", tags=["cart"])


@router.post("/create", status_code=201)
async def create_cart(
    request: Optional[CreateCartRequest] = None,
    service: CartService = Depends(get_cart_service),
):
    """Create a new cart context."""
    currency = request.currency if request else None
    result = service.create_cart(currency)
    return result.to_dict()


@router.get("/{cart_id}")
async def get_cart(cart_id: str, service: CartService = Depends(get_cart_service)):
    """Get cart with computed totals."""
    return service.get_cart(cart_id).to_dict()


@router.post("/{cart_id}/items")
async def add_item(
    cart_id: str,
    request: AddItemRequest,
    service: CartService = Depends(get_cart_service),
):
    """Add item to cart (merges an existing SKU)."""
    cart = service.add_item(
        cart_id,
        sku=request.sku,
        name=request.name,
        price=request.price,
        quantity=request.quantity,
    )
    return cart.to_dict()


@router.put("/{cart_id}/items/{item_id}")
async def update_quantity(
    cart_id: str,
    item_id: str,
    request: UpdateQuantityRequest,
    service: CartService = Depends(get_cart_service),
):
    """Update item quantity."""
    return service.update_quantity(cart_id, item_id, request.quantity).to_dict()


@router.delete("/{cart_id}/items/{item_id}")
async def remove_item(
    cart_id: str,
    item_id: str,
    service: CartService = Depends(get_cart_service),
):
    """Remove item from cart."""
    return service.remove_item(cart_id, item_id).to_dict()
