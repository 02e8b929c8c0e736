"""Domain service: Order creation rules.

Covers the cross-aggregate part of checkout: the cart must still be
buyable against the *current* catalog, and the order built from it must
be a faithful snapshot of that catalog at this instant.
"""

from __future__ import annotations

from storefront.domain.exceptions import (
    BusinessRuleViolation,
    EntityNotFoundError,
    ValidationError,
)
from storefront.domain.model.cart import Cart
from storefront.domain.model.order import Order, OrderItem
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Price

CART_IS_EMPTY = "Cart is empty"

MIN_ORDER_AMOUNT = Price(100)
MAX_ORDER_AMOUNT = Price(1_000_000)


class OrderDomainService:

    def validate_checkout(self, cart: Cart | None, products: list[Product]) -> None:
        """Re-check every line against freshly loaded products.

        Fails on the first problem; nothing is mutated either way.
        """
        if cart is None or cart.is_empty:
            raise BusinessRuleViolation(CART_IS_EMPTY)

        by_id = {p.id.value: p for p in products}
        for item in cart.items:
            product = by_id.get(item.product_id.value)
            if product is None:
                raise EntityNotFoundError(f"Product not found: {item.product_id}")
            if not product.is_available_for_sale():
                raise BusinessRuleViolation(f"Product is not available: {product.name}")
            if not product.has_enough_stock(item.quantity):
                raise BusinessRuleViolation(
                    f"Insufficient stock for product: {product.name} "
                    f"(requested {item.quantity.value}, available {product.stock.value})"
                )

    def build_order_items(self, cart: Cart, products: list[Product]) -> list[OrderItem]:
        """Snapshot the current name and price of each line's product."""
        by_id = {p.id.value: p for p in products}
        items: list[OrderItem] = []
        for line in cart.items:
            product = by_id[line.product_id.value]
            items.append(
                OrderItem(
                    product_id=product.id,
                    product_name_at_purchase=product.name,
                    price_at_purchase=product.price,  # <-- price snapshot
                    quantity=line.quantity,
                )
            )
        return items

    def validate_order(self, order: Order) -> None:
        if not order.items:
            raise ValidationError("Order must contain at least one item")
        if order.total_amount.value <= 0:
            raise ValidationError("Order total must be greater than zero")
        if order.total_amount != order.recalculate_total():
            raise ValidationError("Order total does not match its line items")
        if order.total_amount < MIN_ORDER_AMOUNT:
            raise BusinessRuleViolation(f"Minimum order amount is {MIN_ORDER_AMOUNT}")
        if order.total_amount > MAX_ORDER_AMOUNT:
            raise BusinessRuleViolation(f"Maximum order amount is {MAX_ORDER_AMOUNT}")
