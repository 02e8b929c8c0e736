"""Builders for valid domain objects used across the test suite."""

from __future__ import annotations

from storefront.domain.model.cart import Cart, CartItem
from storefront.domain.model.product import Product
from storefront.domain.model.user import User
from storefront.domain.model.value_objects import (
    Email,
    Price,
    ProductCategory,
    ProductId,
    Quantity,
    Stock,
    UserId,
)


def make_product(
    product_id: int = 1,
    name: str = "Widget",
    price: int = 1000,
    stock: int = 10,
    category: str = "electronics",
    is_active: bool = True,
) -> Product:
    return Product(
        id=ProductId(product_id),
        name=name,
        price=Price(price),
        stock=Stock(stock),
        category=ProductCategory(category),
        is_active=is_active,
    )


def make_cart(user_id: int = 1, lines: dict[int, int] | None = None, version: int = 0) -> Cart:
    """Cart with ``{product_id: quantity}`` lines."""
    return Cart(
        user_id=UserId(user_id),
        items=tuple(
            CartItem(ProductId(pid), Quantity(qty)) for pid, qty in (lines or {}).items()
        ),
        version=version,
    )


def make_user(user_id: int = 1, is_admin: bool = False, email: str | None = None) -> User:
    return User(
        id=UserId(user_id),
        email=Email(email or f"user{user_id}@example.com"),
        first_name="Taro",
        last_name=f"Yamada{user_id}",
        is_admin=is_admin,
    )
