"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.config import Settings, get_settings
from storefront.infrastructure.persistence.json_cart_repository import (
    JsonCartRepository,
)
from storefront.infrastructure.persistence.json_order_repository import (
    JsonOrderRepository,
)
from storefront.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)
from storefront.infrastructure.persistence.json_user_repository import (
    JsonUserRepository,
)


@dataclass(frozen=True)
class Repositories:
    products: JsonProductRepository
    carts: JsonCartRepository
    orders: JsonOrderRepository
    users: JsonUserRepository


def build_repositories(settings: Settings | None = None) -> Repositories:
    data_dir = (settings or get_settings()).data_dir
    return Repositories(
        products=JsonProductRepository(data_dir / "products.json"),
        carts=JsonCartRepository(data_dir / "carts.json"),
        orders=JsonOrderRepository(data_dir / "orders.json"),
        users=JsonUserRepository(data_dir / "users.json"),
    )
