"""Product aggregate.

Products live independently of carts and orders. They have their own
lifecycle: prices change, stock moves, products are activated and retired.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone

from storefront.domain.exceptions import BusinessRuleViolation
from storefront.domain.model.value_objects import (
    Price,
    ProductCategory,
    ProductId,
    Quantity,
    Stock,
)


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Product:
    """A product in the catalog.

    Frozen: every change produces a new Product so a caller holding an
    older copy never observes a half-applied mutation.  Creation rules
    (non-empty name, positive price) are checked by the
    ProductDomainService, which lets repositories reconstitute stored
    products without re-validating them.
    """

    id: ProductId
    name: str
    price: Price
    stock: Stock
    category: ProductCategory
    is_active: bool = True
    description: str | None = None
    image_url: str | None = None
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)

    # --- Queries --------------------------------------------------------------

    def is_available_for_sale(self) -> bool:
        return self.is_active and self.stock.value > 0

    def is_out_of_stock(self) -> bool:
        return self.stock.value == 0

    def has_enough_stock(self, quantity: Quantity | int) -> bool:
        units = quantity.value if isinstance(quantity, Quantity) else quantity
        return self.stock.has_at_least(units)

    # --- Mutations (return new instances) -------------------------------------

    def with_id(self, product_id: ProductId) -> Product:
        return replace(self, id=product_id)

    def with_stock(self, new_stock: Stock) -> Product:
        return replace(self, stock=new_stock, updated_at=_now())

    def decrease_stock(self, quantity: Quantity) -> Product:
        if not self.has_enough_stock(quantity):
            raise BusinessRuleViolation("Insufficient stock")
        return self.with_stock(self.stock.decrease(quantity.value))

    def increase_stock(self, quantity: Quantity | int) -> Product:
        units = quantity.value if isinstance(quantity, Quantity) else quantity
        return self.with_stock(self.stock.increase(units))

    def update_price(self, new_price: Price) -> Product:
        """Change the product price.

        This does NOT affect any existing orders because orders
        capture a price snapshot at creation time.
        """
        if new_price.value <= 0:
            raise BusinessRuleViolation("Product price must be greater than zero")
        return replace(self, price=new_price, updated_at=_now())

    def update_info(
        self,
        name: str | None = None,
        description: str | None = None,
        category: ProductCategory | None = None,
        image_url: str | None = None,
    ) -> Product:
        return replace(
            self,
            name=name.strip() if name else self.name,
            description=description if description is not None else self.description,
            category=category or self.category,
            image_url=image_url if image_url is not None else self.image_url,
            updated_at=_now(),
        )

    def activate(self) -> Product:
        if self.is_active:
            return self
        return replace(self, is_active=True, updated_at=_now())

    def deactivate(self) -> Product:
        if not self.is_active:
            return self
        return replace(self, is_active=False, updated_at=_now())
