"""Domain service: Cart rules.

Everything here is a pure function of (cart, product, quantity): each
operation either returns a new Cart or raises.  Stock is always checked
against the quantity the line would end up with, never just the
increment, so repeated small additions can't push a line past stock.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.exceptions import BusinessRuleViolation
from storefront.domain.model.cart import PRODUCT_NOT_IN_CART, Cart, CartItem
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import ProductId, Quantity

MAX_CART_LINES = 20

INSUFFICIENT_STOCK = "Insufficient stock"
PRODUCT_NOT_AVAILABLE = "Product is not available"


@dataclass(frozen=True)
class UnavailableLine:
    item: CartItem
    reason: str


class CartDomainService:

    def add_product_to_cart(
        self, cart: Cart, product: Product, quantity: Quantity
    ) -> Cart:
        if not product.is_available_for_sale():
            raise BusinessRuleViolation(PRODUCT_NOT_AVAILABLE)

        existing = cart.find_item(product.id)
        if existing is None and cart.line_count >= MAX_CART_LINES:
            raise BusinessRuleViolation(
                f"Cart item limit exceeded (maximum {MAX_CART_LINES} different products)"
            )

        new_total = quantity.value + (existing.quantity.value if existing else 0)
        if not product.has_enough_stock(new_total):
            raise BusinessRuleViolation(INSUFFICIENT_STOCK)

        return cart.add_item(product.id, quantity)

    def update_cart_item(
        self, cart: Cart, product: Product, quantity: Quantity
    ) -> Cart:
        """Set the line for ``product`` to an absolute ``quantity``."""
        if not cart.has_product(product.id):
            raise BusinessRuleViolation(PRODUCT_NOT_IN_CART)
        if not product.is_available_for_sale():
            raise BusinessRuleViolation(PRODUCT_NOT_AVAILABLE)
        if not product.has_enough_stock(quantity):
            raise BusinessRuleViolation(INSUFFICIENT_STOCK)
        return cart.update_item(product.id, quantity)

    def remove_product_from_cart(self, cart: Cart, product_id: ProductId) -> Cart:
        return cart.remove_item(product_id)

    def find_unavailable_items(
        self, cart: Cart, products: list[Product]
    ) -> list[UnavailableLine]:
        """Lines that could not be checked out with the given catalog state."""
        by_id = {p.id.value: p for p in products}
        problems: list[UnavailableLine] = []
        for item in cart.items:
            product = by_id.get(item.product_id.value)
            if product is None:
                problems.append(UnavailableLine(item, "Product not found"))
            elif not product.is_available_for_sale():
                problems.append(UnavailableLine(item, PRODUCT_NOT_AVAILABLE))
            elif not product.has_enough_stock(item.quantity):
                problems.append(UnavailableLine(item, INSUFFICIENT_STOCK))
        return problems
