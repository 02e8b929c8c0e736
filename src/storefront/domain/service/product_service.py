"""Domain service: Product rules.

Catalog rules that don't belong to a single Product instance: what a
sellable product looks like, when stock may be changed and how discounts
are computed.
"""

from __future__ import annotations

import math
import re
from decimal import Decimal, InvalidOperation

from storefront.domain.exceptions import BusinessRuleViolation, ValidationError
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Price, Quantity, Stock

MAX_NAME_LENGTH = 200
MAX_DESCRIPTION_LENGTH = 1000
_PROHIBITED_CHARS = re.compile(r"[<>\"'&]")


class ProductDomainService:

    def validate_product_creation(self, product: Product) -> None:
        """Reject products that may not enter the catalog."""
        if not product.name or not product.name.strip():
            raise ValidationError("Product name is required")
        if len(product.name) > MAX_NAME_LENGTH:
            raise ValidationError(
                f"Product name must be {MAX_NAME_LENGTH} characters or less"
            )
        if _PROHIBITED_CHARS.search(product.name):
            raise ValidationError("Product name contains prohibited characters")
        if product.description and len(product.description) > MAX_DESCRIPTION_LENGTH:
            raise ValidationError(
                f"Product description must be {MAX_DESCRIPTION_LENGTH} characters or less"
            )
        if product.price.value <= 0:
            raise ValidationError("Product price must be greater than zero")
        if product.stock.value < 0:
            raise ValidationError("Stock must be zero or greater")

    def validate_stock_update(self, product: Product, new_stock: int) -> Stock:
        """Check a stock change and return the validated Stock value."""
        stock = Stock(new_stock)
        if not product.is_active:
            raise BusinessRuleViolation(
                f"Cannot change stock of inactive product '{product.name}'"
            )
        return stock

    def calculate_discounted_price(
        self, price: Price, factor: float | int | str | Decimal
    ) -> Price:
        """``floor(price * (1 - factor))`` for a factor in ``[0, 1]``."""
        try:
            rate = Decimal(str(factor))
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid discount factor: {factor!r}") from exc
        if not rate.is_finite() or rate < 0 or rate > 1:
            raise ValidationError("Discount factor must be between 0 and 1")
        return Price(math.floor(Decimal(price.value) * (Decimal(1) - rate)))

    def is_product_available(self, product: Product) -> bool:
        return product.is_active and product.stock.value > 0

    def can_sell(self, product: Product, quantity: Quantity) -> bool:
        return self.is_product_available(product) and product.has_enough_stock(quantity)
