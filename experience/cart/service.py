"""Cart service: logged facade over the context store."""
from typing import Optional

from experience.config import DEFAULT_CURRENCY
from experience.logging import get_logger, format_context, sanitize_id_for_logging
from experience.services.money import format_money
from .models import Cart, CreatedContext
from .store import CartContextStore

logger = get_logger(__name__)


class CartService:
    """
    Entry point used by the HTTP layer.

    Emits a log line around each store call and applies the default
    currency. Store failures propagate unchanged.
    """

    def __init__(self, store: CartContextStore, default_currency: str = DEFAULT_CURRENCY):
        self.store = store
        self.default_currency = default_currency

    def create_cart(self, currency: Optional[str] = None) -> CreatedContext:
        logger.info(f"Creating new cart {format_context(currency=currency)}")
        result = self.store.create_context(currency or self.default_currency)
        logger.info(
            "Cart created successfully "
            + format_context(cartId=result.cart_id, expiresAt=result.expires_at.isoformat())
        )
        return result

    def get_cart(self, cart_id: str) -> Cart:
        safe_id = sanitize_id_for_logging(cart_id)
        logger.info(f"Retrieving cart {format_context(cartId=safe_id)}")
        cart = self.store.get_cart(cart_id)
        logger.info(
            "Cart retrieved successfully "
            + format_context(
                cartId=safe_id,
                itemCount=len(cart.items),
                total=format_money(cart.total.amount, cart.currency),
            )
        )
        return cart

    def add_item(self, cart_id: str, sku: str, name: str, price, quantity: int) -> Cart:
        safe_id = sanitize_id_for_logging(cart_id)
        logger.info(
            "Adding item to cart "
            + format_context(cartId=safe_id, sku=sku, quantity=quantity, price=price)
        )
        cart = self.store.add_item(cart_id, sku, name, price, quantity)
        logger.info(
            "Item added successfully "
            + format_context(
                cartId=safe_id,
                sku=sku,
                totalItems=len(cart.items),
                cartTotal=format_money(cart.total.amount, cart.currency),
            )
        )
        return cart

    def update_quantity(self, cart_id: str, item_id: str, quantity: int) -> Cart:
        safe_id = sanitize_id_for_logging(cart_id)
        safe_item = sanitize_id_for_logging(item_id)
        logger.info(
            "Updating item quantity "
            + format_context(cartId=safe_id, itemId=safe_item, newQuantity=quantity)
        )
        cart = self.store.update_quantity(cart_id, item_id, quantity)
        logger.info(
            "Item quantity updated successfully "
            + format_context(
                cartId=safe_id,
                itemId=safe_item,
                quantity=quantity,
                cartTotal=format_money(cart.total.amount, cart.currency),
            )
        )
        return cart

    def remove_item(self, cart_id: str, item_id: str) -> Cart:
        safe_id = sanitize_id_for_logging(cart_id)
        safe_item = sanitize_id_for_logging(item_id)
        logger.info(f"Removing item from cart {format_context(cartId=safe_id, itemId=safe_item)}")
        cart = self.store.remove_item(cart_id, item_id)
        logger.info(
            "Item removed successfully "
            + format_context(
                cartId=safe_id,
                itemId=safe_item,
                remainingItems=len(cart.items),
                cartTotal=format_money(cart.total.amount, cart.currency),
            )
        )
        return cart
