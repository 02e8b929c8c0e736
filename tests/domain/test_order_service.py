"""Unit tests for the OrderDomainService."""

import pytest

from storefront.domain.exceptions import (
    BusinessRuleViolation,
    EntityNotFoundError,
    ValidationError,
)
from storefront.domain.model.order import Order, ShippingAddress
from storefront.domain.model.value_objects import (
    PaymentMethod,
    PostalCode,
    Price,
    UserId,
)
from storefront.domain.service.order_service import OrderDomainService
from tests.factories import make_cart, make_product


@pytest.fixture
def service() -> OrderDomainService:
    return OrderDomainService()


def _order_from(service, cart, products) -> Order:
    return Order.create(
        user_id=cart.user_id,
        items=service.build_order_items(cart, products),
        shipping_address=ShippingAddress(PostalCode("530-0001"), "Osaka", "Kita", "1-1"),
        payment_method=PaymentMethod.CREDIT_CARD,
    )


class TestValidateCheckout:

    def test_valid_cart_passes(self, service):
        service.validate_checkout(make_cart(lines={1: 2}), [make_product(stock=2)])

    def test_empty_cart_rejected(self, service):
        with pytest.raises(BusinessRuleViolation, match="Cart is empty"):
            service.validate_checkout(make_cart(), [])

    def test_missing_cart_rejected(self, service):
        with pytest.raises(BusinessRuleViolation, match="Cart is empty"):
            service.validate_checkout(None, [])

    def test_vanished_product_rejected(self, service):
        with pytest.raises(EntityNotFoundError, match="Product not found"):
            service.validate_checkout(make_cart(lines={1: 1}), [])

    def test_inactive_product_rejected(self, service):
        with pytest.raises(BusinessRuleViolation, match="not available: Widget"):
            service.validate_checkout(make_cart(lines={1: 1}), [make_product(is_active=False)])

    def test_insufficient_stock_rejected(self, service):
        with pytest.raises(BusinessRuleViolation, match=r"requested 5, available 3"):
            service.validate_checkout(make_cart(lines={1: 5}), [make_product(stock=3)])


class TestBuildOrderItems:

    def test_snapshots_current_name_and_price(self, service):
        cart = make_cart(lines={1: 2, 2: 1})
        products = [make_product(1, "Kettle", price=3000), make_product(2, "Mug", price=800)]
        items = service.build_order_items(cart, products)
        assert [(i.product_name_at_purchase, i.price_at_purchase) for i in items] == [
            ("Kettle", Price(3000)),
            ("Mug", Price(800)),
        ]

    def test_order_total_is_sum_of_snapshots(self, service):
        cart = make_cart(lines={1: 2, 2: 1})
        products = [make_product(1, price=3000), make_product(2, price=800)]
        order = _order_from(service, cart, products)
        assert order.total_amount == Price(6800)


class TestValidateOrder:

    def test_valid_order_passes(self, service):
        service.validate_order(_order_from(service, make_cart(lines={1: 1}), [make_product()]))

    def test_below_minimum_rejected(self, service):
        order = _order_from(service, make_cart(lines={1: 1}), [make_product(price=99)])
        with pytest.raises(BusinessRuleViolation, match="Minimum order amount"):
            service.validate_order(order)

    def test_above_maximum_rejected(self, service):
        order = _order_from(service, make_cart(lines={1: 2}), [make_product(price=600_000)])
        with pytest.raises(BusinessRuleViolation, match="Maximum order amount"):
            service.validate_order(order)

    def test_empty_order_rejected(self, service):
        order = Order.create(
            UserId(1), [], ShippingAddress(PostalCode("530-0001"), "Osaka", "Kita", "1-1"),
            PaymentMethod.CASH_ON_DELIVERY,
        )
        with pytest.raises(ValidationError, match="at least one item"):
            service.validate_order(order)
