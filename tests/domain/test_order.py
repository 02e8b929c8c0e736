"""Unit tests for the Order aggregate and its status lifecycle."""

import pytest

from storefront.domain.exceptions import BusinessRuleViolation, ValidationError
from storefront.domain.model.order import (
    ContactInfo,
    Order,
    OrderItem,
    OrderStatus,
    ShippingAddress,
)
from storefront.domain.model.value_objects import (
    OrderId,
    PaymentMethod,
    PostalCode,
    Price,
    ProductId,
    Quantity,
    UserId,
)


def _make_item(product_id: int = 1, price: int = 1000, qty: int = 1) -> OrderItem:
    """Helper to build a valid line item."""
    return OrderItem(
        product_id=ProductId(product_id),
        product_name_at_purchase=f"Product {product_id}",
        price_at_purchase=Price(price),
        quantity=Quantity(qty),
    )


def _address() -> ShippingAddress:
    return ShippingAddress(
        postal_code=PostalCode("150-0001"),
        prefecture="Tokyo",
        city="Shibuya",
        address_line1="1-2-3 Jingumae",
    )


def _make_order(*items: OrderItem) -> Order:
    return Order.create(
        user_id=UserId(1),
        items=list(items or [_make_item()]),
        shipping_address=_address(),
        payment_method=PaymentMethod.CASH_ON_DELIVERY,
    )


class TestOrderCreation:

    def test_happy_path(self):
        order = _make_order(_make_item(price=500, qty=2))
        assert order.status == OrderStatus.PENDING
        assert order.total_amount == Price(1000)
        assert order.id.is_new  # assigned by repository

    def test_total_is_sum_of_line_items(self):
        order = _make_order(_make_item(1, 1500, 3), _make_item(2, 2500, 5))
        assert order.total_amount == Price(17000)
        assert order.total_amount == order.recalculate_total()
        assert order.total_quantity == 8

    def test_notes_too_long_rejected(self):
        with pytest.raises(ValidationError, match="Notes must be 1000"):
            Order.create(
                UserId(1), [_make_item()], _address(), PaymentMethod.BANK_TRANSFER,
                notes="x" * 1001,
            )

    def test_belongs_to(self):
        order = _make_order()
        assert order.belongs_to(UserId(1))
        assert not order.belongs_to(UserId(2))

    def test_with_id(self):
        assert _make_order().with_id(OrderId(9)).id == OrderId(9)


class TestShippingAddress:

    def test_blank_city_rejected(self):
        with pytest.raises(ValidationError, match="City is required"):
            ShippingAddress(PostalCode("150-0001"), "Tokyo", " ", "1-2-3")

    def test_str(self):
        assert str(_address()) == "150-0001 Tokyo Shibuya 1-2-3 Jingumae"

    def test_contact_phone_too_long_rejected(self):
        with pytest.raises(ValidationError, match="20 characters"):
            ContactInfo(phone="0" * 21)


class TestStatusTransitions:

    def test_pending_to_confirmed(self):
        order = _make_order().with_status(OrderStatus.CONFIRMED)
        assert order.status == OrderStatus.CONFIRMED

    def test_full_lifecycle(self):
        order = _make_order()
        for status in (OrderStatus.CONFIRMED, OrderStatus.SHIPPED, OrderStatus.DELIVERED):
            order = order.with_status(status)
        assert order.status.is_completed

    def test_cancel_pending(self):
        assert _make_order().cancel().status == OrderStatus.CANCELLED

    def test_cannot_cancel_shipped(self):
        order = _make_order().with_status(OrderStatus.CONFIRMED).with_status(OrderStatus.SHIPPED)
        with pytest.raises(BusinessRuleViolation, match="Cannot transition from shipped"):
            order.cancel()

    def test_cancelled_is_terminal(self):
        order = _make_order().cancel()
        with pytest.raises(BusinessRuleViolation, match="Valid transitions: none"):
            order.with_status(OrderStatus.CONFIRMED)

    def test_status_change_keeps_items(self):
        order = _make_order(_make_item(price=700, qty=2))
        confirmed = order.with_status(OrderStatus.CONFIRMED)
        assert confirmed.items == order.items
        assert confirmed.total_amount == Price(1400)
