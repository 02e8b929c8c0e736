"""Commands and queries: the request shapes accepted by the handlers.

Each carries raw caller input (strings from a form or CLI, plain ints)
and knows how to check it before any repository is touched.
``validate()`` returns every problem found, not just the first.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import (
    Email,
    OrderId,
    PaymentMethod,
    PostalCode,
    Price,
    ProductCategory,
    ProductId,
    Quantity,
    Stock,
    UserId,
)


def _check(errors: list[str], build: Callable[[], object]) -> None:
    try:
        build()
    except ValidationError as exc:
        errors.append(str(exc))


def _check_id(errors: list[str], label: str, raw: str | int | None, parse) -> None:
    if raw is None or str(raw).strip() == "":
        errors.append(f"{label} is required")
        return
    _check(errors, lambda: parse(raw))


# ── Cart ─────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class AddToCartCommand:
    user_id: str | int
    product_id: str | int
    quantity: int

    def validate(self) -> list[str]:
        errors: list[str] = []
        _check_id(errors, "User ID", self.user_id, UserId.parse)
        _check_id(errors, "Product ID", self.product_id, ProductId.parse)
        _check(errors, lambda: Quantity(self.quantity))
        return errors


@dataclass(frozen=True)
class UpdateCartItemCommand:
    user_id: str | int
    product_id: str | int
    quantity: int

    def validate(self) -> list[str]:
        errors: list[str] = []
        _check_id(errors, "User ID", self.user_id, UserId.parse)
        _check_id(errors, "Product ID", self.product_id, ProductId.parse)
        _check(errors, lambda: Quantity(self.quantity))
        return errors


@dataclass(frozen=True)
class RemoveFromCartCommand:
    user_id: str | int
    product_id: str | int

    def validate(self) -> list[str]:
        errors: list[str] = []
        _check_id(errors, "User ID", self.user_id, UserId.parse)
        _check_id(errors, "Product ID", self.product_id, ProductId.parse)
        return errors


@dataclass(frozen=True)
class CartQuery:
    """Identifies a user's cart: used to show it and to clear it."""

    user_id: str | int

    def validate(self) -> list[str]:
        errors: list[str] = []
        _check_id(errors, "User ID", self.user_id, UserId.parse)
        return errors


# ── Orders ───────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class CreateOrderCommand:
    user_id: str | int
    postal_code: str
    prefecture: str
    city: str
    address_line1: str
    address_line2: str | None = None
    contact_email: str | None = None
    contact_phone: str | None = None
    payment_method: str = PaymentMethod.CASH_ON_DELIVERY.value
    notes: str | None = None

    def validate(self) -> list[str]:
        errors: list[str] = []
        _check_id(errors, "User ID", self.user_id, UserId.parse)

        if not self.postal_code:
            errors.append("Postal code is required")
        else:
            _check(errors, lambda: PostalCode(self.postal_code))
        for label, value in (
            ("Prefecture", self.prefecture),
            ("City", self.city),
            ("Address line 1", self.address_line1),
        ):
            if not value or not value.strip():
                errors.append(f"{label} is required")

        if self.contact_email:
            _check(errors, lambda: Email(self.contact_email))
        if self.contact_phone and len(self.contact_phone) > 20:
            errors.append("Contact phone must be 20 characters or less")
        _check(errors, lambda: PaymentMethod.parse(self.payment_method))
        return errors


@dataclass(frozen=True)
class GetOrderQuery:
    user_id: str | int
    order_id: str | int

    def validate(self) -> list[str]:
        errors: list[str] = []
        _check_id(errors, "User ID", self.user_id, UserId.parse)
        _check_id(errors, "Order ID", self.order_id, OrderId.parse)
        return errors


@dataclass(frozen=True)
class ListOrdersQuery:
    user_id: str | int
    status: str | None = None
    page: int = 1
    per_page: int = 20

    def validate(self) -> list[str]:
        errors: list[str] = []
        _check_id(errors, "User ID", self.user_id, UserId.parse)
        if self.page < 1:
            errors.append("Page must be 1 or greater")
        if not 1 <= self.per_page <= 100:
            errors.append("Items per page must be between 1 and 100")
        return errors


# ── Catalog ──────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class AddProductCommand:
    name: str
    price: int
    stock: int
    category: str
    description: str | None = None
    image_url: str | None = None

    def validate(self) -> list[str]:
        errors: list[str] = []
        if not self.name or not self.name.strip():
            errors.append("Product name is required")
        _check(errors, lambda: Price(self.price))
        _check(errors, lambda: Stock(self.stock))
        _check(errors, lambda: ProductCategory(self.category))
        return errors


@dataclass(frozen=True)
class UpdateStockCommand:
    product_id: str | int
    stock: int

    def validate(self) -> list[str]:
        errors: list[str] = []
        _check_id(errors, "Product ID", self.product_id, ProductId.parse)
        _check(errors, lambda: Stock(self.stock))
        return errors


@dataclass(frozen=True)
class UpdatePriceCommand:
    product_id: str | int
    price: int

    def validate(self) -> list[str]:
        errors: list[str] = []
        _check_id(errors, "Product ID", self.product_id, ProductId.parse)
        _check(errors, lambda: Price(self.price))
        return errors


@dataclass(frozen=True)
class SetProductActiveCommand:
    product_id: str | int
    active: bool

    def validate(self) -> list[str]:
        errors: list[str] = []
        _check_id(errors, "Product ID", self.product_id, ProductId.parse)
        return errors


@dataclass(frozen=True)
class ListProductsQuery:
    category: str | None = None
    include_inactive: bool = False
    in_stock_only: bool = False
    name_contains: str | None = None
    sort_by: str = "created_at"
    descending: bool = True
    page: int = 1
    per_page: int = 20

    def validate(self) -> list[str]:
        errors: list[str] = []
        if self.category:
            _check(errors, lambda: ProductCategory(self.category))
        if self.page < 1:
            errors.append("Page must be 1 or greater")
        if not 1 <= self.per_page <= 100:
            errors.append("Items per page must be between 1 and 100")
        return errors


# ── Users ────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class RegisterUserCommand:
    email: str
    first_name: str
    last_name: str
    is_admin: bool = False

    def validate(self) -> list[str]:
        errors: list[str] = []
        _check(errors, lambda: Email(self.email))
        if not self.first_name or not self.first_name.strip():
            errors.append("First name is required")
        if not self.last_name or not self.last_name.strip():
            errors.append("Last name is required")
        return errors


@dataclass(frozen=True)
class ChangeAdminCommand:
    """Promote or demote ``target_id``, performed by ``actor_id``."""

    actor_id: str | int
    target_id: str | int

    def validate(self) -> list[str]:
        errors: list[str] = []
        _check_id(errors, "Acting user ID", self.actor_id, UserId.parse)
        _check_id(errors, "Target user ID", self.target_id, UserId.parse)
        return errors
