"""Cart aggregate: one mutable-by-replacement shopping cart per user.

The cart is identified by its owner.  Items are held in an immutable tuple
and every change goes through the methods below, each of which returns a
new Cart, so nothing outside the aggregate can break the
"one line per product" invariant.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone

from storefront.domain.exceptions import BusinessRuleViolation, ValidationError
from storefront.domain.model.value_objects import ProductId, Quantity, UserId

PRODUCT_NOT_IN_CART = "Product not found in cart"


@dataclass(frozen=True)
class CartItem:
    product_id: ProductId
    quantity: Quantity
    added_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def with_quantity(self, quantity: Quantity) -> CartItem:
        return replace(self, quantity=quantity)

    def is_for(self, product_id: ProductId) -> bool:
        return self.product_id == product_id


@dataclass(frozen=True)
class Cart:
    """Aggregate root for a user's cart.

    Invariants:
    - no two items share a ``product_id``
    - ``total_items`` is the sum of item quantities

    ``version`` is the optimistic-concurrency token: repositories only
    accept a save whose version matches what they currently hold.
    """

    user_id: UserId
    items: tuple[CartItem, ...] = ()
    version: int = 0

    def __post_init__(self) -> None:
        seen: set[int | None] = set()
        for item in self.items:
            key = item.product_id.value
            if key in seen:
                raise ValidationError(
                    f"Duplicate cart line for product {item.product_id}"
                )
            seen.add(key)

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def create(user_id: UserId) -> Cart:
        return Cart(user_id=user_id)

    # --- Queries --------------------------------------------------------------

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def total_items(self) -> int:
        return sum(item.quantity.value for item in self.items)

    @property
    def line_count(self) -> int:
        return len(self.items)

    @property
    def product_ids(self) -> list[ProductId]:
        return [item.product_id for item in self.items]

    def find_item(self, product_id: ProductId) -> CartItem | None:
        for item in self.items:
            if item.is_for(product_id):
                return item
        return None

    def has_product(self, product_id: ProductId) -> bool:
        return self.find_item(product_id) is not None

    # --- Mutations (return new instances) -------------------------------------

    def add_item(self, product_id: ProductId, quantity: Quantity) -> Cart:
        """Append a line, or merge into the existing line for the product."""
        existing = self.find_item(product_id)
        if existing is None:
            return replace(self, items=self.items + (CartItem(product_id, quantity),))
        merged = existing.with_quantity(existing.quantity + quantity)
        return replace(self, items=self._replace_line(merged))

    def update_item(self, product_id: ProductId, quantity: Quantity) -> Cart:
        existing = self.find_item(product_id)
        if existing is None:
            raise BusinessRuleViolation(PRODUCT_NOT_IN_CART)
        return replace(self, items=self._replace_line(existing.with_quantity(quantity)))

    def remove_item(self, product_id: ProductId) -> Cart:
        if not self.has_product(product_id):
            raise BusinessRuleViolation(PRODUCT_NOT_IN_CART)
        return replace(
            self,
            items=tuple(item for item in self.items if not item.is_for(product_id)),
        )

    def clear(self) -> Cart:
        return replace(self, items=())

    def with_version(self, version: int) -> Cart:
        return replace(self, version=version)

    # --- Internal helpers -----------------------------------------------------

    def _replace_line(self, line: CartItem) -> tuple[CartItem, ...]:
        return tuple(
            line if item.is_for(line.product_id) else item for item in self.items
        )
