"""In-memory cart context store with TTL-based expiry."""
import secrets
import threading
from dataclasses import replace
from datetime import datetime, timedelta
from decimal import Decimal, InvalidOperation
from typing import Callable, Dict, List, Optional

from experience.clock import Clock, SystemClock
from experience.config import (
    DEFAULT_CURRENCY,
    DEFAULT_MAX_ITEMS_IN_CART,
    DEFAULT_TAX_RATE,
    DEFAULT_TTL_MINUTES,
)
from experience.errors import (
    ERROR_AMOUNT_OUT_OF_RANGE,
    ERROR_CART_FULL,
    ERROR_CART_NOT_FOUND,
    ERROR_CONTEXT_EXPIRED,
    ERROR_ID_EXHAUSTED,
    ERROR_ITEM_NOT_FOUND,
    ContextExpiredError,
    NotFoundError,
    ResourceExhaustedError,
    ValidationError,
)
from .models import Cart, CartContext, CreatedContext, LineItem, build_cart

ID_DIGITS = 12
MAX_ID_ATTEMPTS = 10


def generate_numeric_id() -> str:
    """12-digit zero-padded random numeric string."""
    return str(secrets.randbelow(10 ** ID_DIGITS)).zfill(ID_DIGITS)


class CartContextStore:
    """
    Sole owner of all cart contexts.

    Features:
    - 12-digit random cart and item identifiers with bounded retries
    - Fixed TTL from creation; never extended by mutations
    - Lazy eviction on access plus an explicit sweep for abandoned carts
    - SKU merge and a cap on distinct SKUs per cart

    Every public method takes the store lock, so views never observe a
    half-applied mutation and sweeps never race a foreground operation.
    The store does not log; callers decide what to do with failures.
    """

    def __init__(
        self,
        clock: Optional[Clock] = None,
        ttl: timedelta = timedelta(minutes=DEFAULT_TTL_MINUTES),
        max_items: int = DEFAULT_MAX_ITEMS_IN_CART,
        tax_rate: Decimal = DEFAULT_TAX_RATE,
        id_factory: Optional[Callable[[], str]] = None,
        max_id_attempts: int = MAX_ID_ATTEMPTS,
    ):
        self._clock = clock or SystemClock()
        self._ttl = ttl
        self._max_items = max_items
        self._tax_rate = tax_rate
        self._id_factory = id_factory or generate_numeric_id
        self._max_id_attempts = max_id_attempts
        self._contexts: Dict[str, CartContext] = {}
        self._lock = threading.RLock()

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def __len__(self) -> int:
        with self._lock:
            return len(self._contexts)

    def __contains__(self, cart_id: str) -> bool:
        with self._lock:
            return cart_id in self._contexts

    # ==================== OPERATIONS ====================

    def create_context(self, currency: Optional[str] = None) -> CreatedContext:
        """
        Create an empty cart context.

        Args:
            currency: ISO currency code, "USD" when omitted

        Returns:
            Identifier and expiry of the new context

        Raises:
            ResourceExhaustedError: every generated identifier collided
        """
        with self._lock:
            cart_id = self._generate_id(self._contexts)
            expires_at = self._clock.now() + self._ttl
            self._contexts[cart_id] = CartContext(
                cart_id=cart_id,
                currency=currency or DEFAULT_CURRENCY,
                expires_at=expires_at,
            )
            return CreatedContext(cart_id=cart_id, expires_at=expires_at)

    def get_cart(self, cart_id: str) -> Cart:
        """Current view of a cart."""
        with self._lock:
            context = self._get_valid_context(cart_id)
            return build_cart(context, self._tax_rate)

    def add_item(self, cart_id: str, sku: str, name: str, price, quantity: int) -> Cart:
        """
        Add units of a SKU to the cart.

        An existing SKU is merged: quantities are summed and the line
        subtotal is recomputed with the price given here.

        Raises:
            ValidationError: new SKU while the cart is at capacity, or
                amounts that cannot be represented
        """
        with self._lock:
            context = self._get_valid_context(cart_id)
            items = list(context.items)

            existing = context.find_by_sku(sku)
            if existing is not None:
                items[items.index(existing)] = existing.merged(quantity, price)
            else:
                if len(items) >= self._max_items:
                    raise ValidationError(
                        ERROR_CART_FULL.format(max_items=self._max_items),
                        {"cartId": cart_id, "currentItemCount": len(items)},
                    )
                item_id = self._generate_id(context.item_ids)
                items.append(LineItem.create(item_id, sku, name, price, quantity, context.currency))

            return self._commit(context, items)

    def update_quantity(self, cart_id: str, item_id: str, quantity: int) -> Cart:
        """Overwrite the quantity of a line, priced at its stored unit price."""
        with self._lock:
            context = self._get_valid_context(cart_id)
            index = context.index_of(item_id)
            if index == -1:
                raise NotFoundError(ERROR_ITEM_NOT_FOUND, {"itemId": item_id})

            items = list(context.items)
            items[index] = items[index].with_quantity(quantity)
            return self._commit(context, items)

    def remove_item(self, cart_id: str, item_id: str) -> Cart:
        """Remove a line, keeping the order of the others."""
        with self._lock:
            context = self._get_valid_context(cart_id)
            index = context.index_of(item_id)
            if index == -1:
                raise NotFoundError(ERROR_ITEM_NOT_FOUND, {"itemId": item_id})

            del context.items[index]
            return build_cart(context, self._tax_rate)

    def sweep_expired(self, now: Optional[datetime] = None) -> int:
        """
        Evict every context expired as of ``now``.

        Returns:
            Number of contexts evicted
        """
        with self._lock:
            now = now or self._clock.now()
            expired = [
                cart_id
                for cart_id, context in self._contexts.items()
                if context.is_expired(now)
            ]
            for cart_id in expired:
                del self._contexts[cart_id]
            return len(expired)

    # ==================== HELPERS ====================

    def _get_valid_context(self, cart_id: str) -> CartContext:
        # Caller holds the lock
        context = self._contexts.get(cart_id)
        if context is None:
            raise NotFoundError(ERROR_CART_NOT_FOUND, {"cartId": cart_id})

        if context.is_expired(self._clock.now()):
            del self._contexts[cart_id]
            raise ContextExpiredError(
                ERROR_CONTEXT_EXPIRED,
                {"cartId": cart_id, "expiredAt": context.expires_at.isoformat()},
            )

        return context

    def _commit(self, context: CartContext, items: List[LineItem]) -> Cart:
        # Caller holds the lock; context is untouched unless the view builds
        try:
            cart = build_cart(replace(context, items=items), self._tax_rate)
        except InvalidOperation as e:
            raise ValidationError(
                ERROR_AMOUNT_OUT_OF_RANGE, {"cartId": context.cart_id}
            ) from e
        if not cart.total.amount.is_finite():
            raise ValidationError(ERROR_AMOUNT_OUT_OF_RANGE, {"cartId": context.cart_id})

        context.items = items
        return cart

    def _generate_id(self, taken) -> str:
        for _ in range(self._max_id_attempts):
            candidate = self._id_factory()
            if candidate not in taken:
                return candidate
        raise ResourceExhaustedError(
            ERROR_ID_EXHAUSTED, {"attempts": self._max_id_attempts}
        )
