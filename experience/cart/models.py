"""Cart models with Decimal-based pricing."""
from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal
from typing import Optional, List

from experience.config import DEFAULT_TAX_RATE
from experience.services.money import to_decimal, round_money, multiply, add, total, to_float


@dataclass(frozen=True)
class Money:
    """Amount in a single currency."""
    amount: Decimal
    currency: str

    def __post_init__(self):
        # Frozen dataclass: normalize through object.__setattr__
        object.__setattr__(self, "amount", to_decimal(self.amount))

    def rounded(self) -> "Money":
        """Copy with the amount rounded to 2 decimal places."""
        return Money(round_money(self.amount), self.currency)

    def to_dict(self) -> dict:
        return {"amount": to_float(round_money(self.amount)), "currency": self.currency}


@dataclass
class LineItem:
    """Single line in the cart; one per SKU."""
    item_id: str
    sku: str
    name: str
    price: Money
    quantity: int
    subtotal: Money

    @classmethod
    def create(cls, item_id: str, sku: str, name: str, price, quantity: int, currency: str) -> "LineItem":
        """New line with ``subtotal = price * quantity``."""
        unit_price = to_decimal(price)
        return cls(
            item_id=item_id,
            sku=sku,
            name=name,
            price=Money(unit_price, currency),
            quantity=quantity,
            subtotal=Money(multiply(unit_price, quantity), currency),
        )

    def merged(self, quantity: int, price) -> "LineItem":
        """
        Line after folding another add of the same SKU into this one.

        The subtotal is recomputed from the price of *this* add, while the
        stored unit price keeps its original value. ``self`` is unchanged.
        """
        merged_quantity = self.quantity + quantity
        return replace(
            self,
            quantity=merged_quantity,
            subtotal=Money(multiply(price, merged_quantity), self.subtotal.currency),
        )

    def with_quantity(self, quantity: int) -> "LineItem":
        """Line with a new quantity, subtotal recomputed from the stored price."""
        return replace(
            self,
            quantity=quantity,
            subtotal=Money(multiply(self.price.amount, quantity), self.subtotal.currency),
        )

    def snapshot(self) -> "LineItem":
        """Detached copy with amounts rounded for output."""
        return replace(self, price=self.price.rounded(), subtotal=self.subtotal.rounded())

    def to_dict(self) -> dict:
        return {
            "itemId": self.item_id,
            "sku": self.sku,
            "name": self.name,
            "price": self.price.to_dict(),
            "quantity": self.quantity,
            "subtotal": self.subtotal.to_dict(),
        }


@dataclass
class CartContext:
    """Mutable server-side record backing a cart. Owned by the store."""
    cart_id: str
    currency: str
    expires_at: datetime
    items: List[LineItem] = field(default_factory=list)

    def is_expired(self, now: datetime) -> bool:
        """Strictly after ``expires_at`` counts as expired."""
        return now > self.expires_at

    def find_by_sku(self, sku: str) -> Optional[LineItem]:
        return next((item for item in self.items if item.sku == sku), None)

    def index_of(self, item_id: str) -> int:
        """Position of the item with ``item_id``, or -1."""
        for index, item in enumerate(self.items):
            if item.item_id == item_id:
                return index
        return -1

    @property
    def item_ids(self) -> set:
        return {item.item_id for item in self.items}


@dataclass(frozen=True)
class CreatedContext:
    """Result of creating a cart context."""
    cart_id: str
    expires_at: datetime

    def to_dict(self) -> dict:
        return {"cartId": self.cart_id, "expiresAt": self.expires_at.isoformat()}


@dataclass(frozen=True)
class Cart:
    """Read-only view of a cart with computed totals."""
    cart_id: str
    currency: str
    items: tuple
    subtotal: Money
    tax: Money
    total: Money
    expires_at: datetime

    @property
    def total_items(self) -> int:
        """Total number of units in cart."""
        return sum(item.quantity for item in self.items)

    def to_dict(self) -> dict:
        """Convert to the JSON wire shape."""
        return {
            "cartId": self.cart_id,
            "currency": self.currency,
            "items": [item.to_dict() for item in self.items],
            "subtotal": self.subtotal.to_dict(),
            "tax": self.tax.to_dict(),
            "total": self.total.to_dict(),
            "expiresAt": self.expires_at.isoformat(),
        }


def build_cart(context: CartContext, tax_rate: Decimal = DEFAULT_TAX_RATE) -> Cart:
    """
    Derive the displayable cart from a context.

    Calculation:
    1. subtotal = sum of line subtotals
    2. tax = round(subtotal * tax_rate, 2)
    3. total = round(subtotal + tax, 2)

    Pure: the context is not modified and the returned items are copies.
    """
    currency = context.currency
    subtotal_amount = total(item.subtotal.amount for item in context.items)
    tax_amount = round_money(multiply(subtotal_amount, tax_rate))
    total_amount = round_money(add(subtotal_amount, tax_amount))

    return Cart(
        cart_id=context.cart_id,
        currency=currency,
        items=tuple(item.snapshot() for item in context.items),
        subtotal=Money(round_money(subtotal_amount), currency),
        tax=Money(tax_amount, currency),
        total=Money(total_amount, currency),
        expires_at=context.expires_at,
    )
