"""
Tests for cart models and total computation
"""

from datetime import datetime, timezone
from decimal import Decimal

from experience.cart import Money, LineItem, CartContext, CreatedContext, build_cart


EXPIRES = datetime(2025, 1, 1, 12, 15, tzinfo=timezone.utc)


def _context(*items, currency="USD"):
    return CartContext(cart_id="123456789012", currency=currency, expires_at=EXPIRES, items=list(items))


def _item(item_id, sku, price, quantity, currency="USD"):
    return LineItem.create(item_id, sku, sku.title(), price, quantity, currency)


class TestLineItem:
    """Tests for LineItem."""

    def test_create_computes_subtotal(self):
        item = _item("1", "sku-a", 2.5, 4)

        assert item.price == Money(Decimal("2.5"), "USD")
        assert item.subtotal.amount == Decimal("10.0")

    def test_merged_uses_latest_price_but_keeps_stored_price(self):
        item = _item("1", "x", 10, 2)

        merged = item.merged(3, Decimal("12"))

        assert merged.quantity == 5
        assert merged.subtotal.amount == Decimal("60")
        assert merged.price.amount == Decimal("10")
        assert item.quantity == 2

    def test_with_quantity_uses_stored_price(self):
        item = _item("1", "x", 10, 2).merged(3, 12)

        updated = item.with_quantity(2)

        assert updated.subtotal.amount == Decimal("20")
        assert item.quantity == 5

    def test_snapshot_is_detached_and_rounded(self):
        item = _item("1", "x", Decimal("0.333"), 3)

        copy = item.snapshot()
        copy.quantity = 99

        assert item.quantity == 3
        assert copy.price.amount == Decimal("0.33")
        assert copy.subtotal.amount == Decimal("1.00")

    def test_to_dict(self):
        data = _item("42", "x", 999.99, 1).to_dict()

        assert data == {
            "itemId": "42",
            "sku": "x",
            "name": "X",
            "price": {"amount": 999.99, "currency": "USD"},
            "quantity": 1,
            "subtotal": {"amount": 999.99, "currency": "USD"},
        }


class TestBuildCart:
    """Tests for derived totals."""

    def test_empty_cart(self):
        cart = build_cart(_context())

        assert cart.items == ()
        assert cart.subtotal.amount == Decimal("0")
        assert cart.tax.amount == Decimal("0")
        assert cart.total.amount == Decimal("0")
        assert cart.total_items == 0

    def test_totals_with_flat_tax(self):
        cart = build_cart(_context(_item("1", "a", 10, 1), _item("2", "b", 5, 1)))

        assert cart.subtotal == Money(Decimal("15.00"), "USD")
        assert cart.tax == Money(Decimal("1.50"), "USD")
        assert cart.total == Money(Decimal("16.50"), "USD")

    def test_tax_rounds_half_up(self):
        cart = build_cart(_context(_item("1", "a", Decimal("0.25"), 1)))

        # 0.025 -> 0.03 (banker's rounding would give 0.02)
        assert cart.tax.amount == Decimal("0.03")
        assert cart.total.amount == Decimal("0.28")

    def test_rounding_of_large_amounts(self):
        cart = build_cart(_context(_item("1", "phone", 999.99, 1)))

        assert cart.tax.amount == Decimal("100.00")
        assert cart.total.amount == Decimal("1099.99")

    def test_money_carries_cart_currency(self):
        cart = build_cart(_context(_item("1", "a", 10, 1, currency="EUR"), currency="EUR"))

        assert {cart.subtotal.currency, cart.tax.currency, cart.total.currency} == {"EUR"}

    def test_custom_tax_rate(self):
        cart = build_cart(_context(_item("1", "a", 100, 1)), tax_rate=Decimal("0.2"))

        assert cart.tax.amount == Decimal("20.00")
        assert cart.total.amount == Decimal("120.00")

    def test_build_is_pure(self):
        context = _context(_item("1", "a", Decimal("0.333"), 3))

        build_cart(context)

        assert context.items[0].subtotal.amount == Decimal("0.999")

    def test_to_dict(self):
        cart = build_cart(_context(_item("1", "a", 10, 2)))

        data = cart.to_dict()

        assert data["cartId"] == "123456789012"
        assert data["currency"] == "USD"
        assert data["subtotal"] == {"amount": 20.0, "currency": "USD"}
        assert data["tax"] == {"amount": 2.0, "currency": "USD"}
        assert data["total"] == {"amount": 22.0, "currency": "USD"}
        assert data["expiresAt"] == EXPIRES.isoformat()
        assert len(data["items"]) == 1


def test_created_context_to_dict():
    created = CreatedContext(cart_id="000000000001", expires_at=EXPIRES)

    assert created.to_dict() == {"cartId": "000000000001", "expiresAt": "2025-01-01T12:15:00+00:00"}


def test_context_expiry_is_strict():
    context = _context()

    assert not context.is_expired(EXPIRES)
    assert context.is_expired(EXPIRES.replace(second=1))
