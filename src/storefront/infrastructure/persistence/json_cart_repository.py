"""JSON-file-backed implementation of CartRepository.

One record per user.  ``version`` is stored alongside the items and
bumped by every write; ``save`` refuses a cart whose version is stale.
"""

from __future__ import annotations

import asyncio
from datetime import datetime
from pathlib import Path

from storefront.domain.exceptions import ConcurrencyConflictError
from storefront.domain.model.cart import Cart, CartItem
from storefront.domain.model.value_objects import ProductId, Quantity, UserId
from storefront.domain.repository.cart_repository import CartRepository
from storefront.infrastructure.persistence.json_store import JsonFileStore


class JsonCartRepository(CartRepository):

    def __init__(self, file_path: Path) -> None:
        self._store = JsonFileStore(file_path)
        self._lock = asyncio.Lock()

    async def find_by_user_id(self, user_id: UserId) -> Cart | None:
        for raw in self._store.load():
            if raw["user_id"] == user_id.value:
                return self._to_domain(raw)
        return None

    async def create_for_user(self, user_id: UserId) -> Cart:
        async with self._lock:
            carts = self._store.load()
            for raw in carts:
                if raw["user_id"] == user_id.value:
                    return self._to_domain(raw)
            cart = Cart.create(user_id)
            carts.append(self._to_raw(cart))
            self._store.persist(carts)
            return cart

    async def save(self, cart: Cart) -> Cart:
        async with self._lock:
            carts = self._store.load()
            for i, raw in enumerate(carts):
                if raw["user_id"] != cart.user_id.value:
                    continue
                if raw["version"] != cart.version:
                    raise ConcurrencyConflictError(
                        f"Cart of user {cart.user_id} changed "
                        f"(expected version {cart.version}, found {raw['version']})"
                    )
                saved = cart.with_version(cart.version + 1)
                carts[i] = self._to_raw(saved)
                self._store.persist(carts)
                return saved

            if cart.version != 0:
                raise ConcurrencyConflictError(f"Cart of user {cart.user_id} no longer exists")
            saved = cart.with_version(1)
            carts.append(self._to_raw(saved))
            self._store.persist(carts)
            return saved

    async def clear(self, user_id: UserId, expected_version: int) -> None:
        async with self._lock:
            carts = self._store.load()
            for i, raw in enumerate(carts):
                if raw["user_id"] != user_id.value:
                    continue
                if raw["version"] != expected_version:
                    raise ConcurrencyConflictError(
                        f"Cart of user {user_id} changed "
                        f"(expected version {expected_version}, found {raw['version']})"
                    )
                cleared = self._to_domain(raw).clear()
                carts[i] = self._to_raw(cleared.with_version(cleared.version + 1))
                self._store.persist(carts)
                return
            if expected_version != 0:
                raise ConcurrencyConflictError(f"Cart of user {user_id} no longer exists")

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(cart: Cart) -> dict:
        return {
            "user_id": cart.user_id.value,
            "version": cart.version,
            "items": [
                {
                    "product_id": item.product_id.value,
                    "quantity": item.quantity.value,
                    "added_at": item.added_at.isoformat(),
                }
                for item in cart.items
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Cart:
        return Cart(
            user_id=UserId(raw["user_id"]),
            items=tuple(
                CartItem(
                    product_id=ProductId(i["product_id"]),
                    quantity=Quantity(i["quantity"]),
                    added_at=datetime.fromisoformat(i["added_at"]),
                )
                for i in raw["items"]
            ),
            version=raw["version"],
        )
