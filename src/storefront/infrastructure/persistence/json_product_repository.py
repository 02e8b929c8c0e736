"""JSON-file-backed implementation of ProductRepository.

Every write holds the repository lock across read, check and write.  Stock
changes therefore can't oversell the last unit, and price or status changes
re-read the record so they never write back a stale stock level.
"""

from __future__ import annotations

import asyncio
from datetime import datetime
from pathlib import Path
from typing import Callable

from storefront.domain.exceptions import ConcurrencyConflictError, EntityNotFoundError
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import (
    Price,
    ProductCategory,
    ProductId,
    Stock,
)
from storefront.domain.repository.criteria import ProductSearchCriteria, SortDirection
from storefront.domain.repository.product_repository import ProductRepository
from storefront.infrastructure.persistence.json_store import JsonFileStore, next_numeric_id

_SORT_KEYS = {
    "name": lambda p: p.name.lower(),
    "price": lambda p: p.price.value,
    "stock": lambda p: p.stock.value,
    "created_at": lambda p: p.created_at,
}


class JsonProductRepository(ProductRepository):

    def __init__(self, file_path: Path) -> None:
        self._store = JsonFileStore(file_path)
        self._lock = asyncio.Lock()

    # --- Lookups --------------------------------------------------------------

    async def find_by_id(self, product_id: ProductId) -> Product | None:
        for raw in self._store.load():
            if raw["id"] == product_id.value:
                return self._to_domain(raw)
        return None

    async def find_by_ids(self, product_ids: list[ProductId]) -> list[Product]:
        by_id = {raw["id"]: raw for raw in self._store.load()}
        return [
            self._to_domain(by_id[pid.value]) for pid in product_ids if pid.value in by_id
        ]

    async def find_by_criteria(self, criteria: ProductSearchCriteria) -> list[Product]:
        filters = criteria.filters
        products = [self._to_domain(raw) for raw in self._store.load()]

        if filters.category is not None:
            products = [p for p in products if p.category == filters.category]
        if filters.active_only:
            products = [p for p in products if p.is_active]
        if filters.in_stock_only:
            products = [p for p in products if p.stock.value > 0]
        if filters.min_price is not None:
            products = [p for p in products if p.price.value >= filters.min_price]
        if filters.max_price is not None:
            products = [p for p in products if p.price.value <= filters.max_price]
        if filters.name_contains:
            needle = filters.name_contains.lower()
            products = [p for p in products if needle in p.name.lower()]

        products.sort(
            key=_SORT_KEYS[criteria.sort.sort_by],
            reverse=criteria.sort.direction is SortDirection.DESC,
        )
        page = criteria.pagination
        return products[page.offset : page.offset + page.per_page]

    async def exists_by_id(self, product_id: ProductId) -> bool:
        return any(raw["id"] == product_id.value for raw in self._store.load())

    # --- Counts ---------------------------------------------------------------

    async def count(self) -> int:
        return len(self._store.load())

    async def count_active(self) -> int:
        return sum(1 for raw in self._store.load() if raw["is_active"])

    async def count_in_stock(self) -> int:
        return sum(1 for raw in self._store.load() if raw["stock"] > 0)

    async def count_by_category(self, category: ProductCategory) -> int:
        return sum(1 for raw in self._store.load() if raw["category"] == category.value)

    # --- Writes ---------------------------------------------------------------

    async def next_id(self) -> ProductId:
        return ProductId(next_numeric_id(self._store.load()))

    async def save(self, product: Product) -> Product:
        async with self._lock:
            products = self._store.load()
            if product.id.is_new:
                product = product.with_id(ProductId(next_numeric_id(products)))
            elif any(raw["id"] == product.id.value for raw in products):
                raise ConcurrencyConflictError(f"Product {product.id} already exists")
            products.append(self._to_raw(product))
            self._store.persist(products)
            return product

    async def update(self, product: Product) -> Product:
        async with self._lock:
            products = self._store.load()
            for i, raw in enumerate(products):
                if raw["id"] == product.id.value:
                    products[i] = self._to_raw(product)
                    self._store.persist(products)
                    return product
            raise EntityNotFoundError(f"Product not found: {product.id}")

    async def decrement_stock_if_sufficient(
        self, product_id: ProductId, quantity: int
    ) -> bool:
        async with self._lock:
            products = self._store.load()
            for i, raw in enumerate(products):
                if raw["id"] != product_id.value:
                    continue
                if not raw["is_active"] or raw["stock"] < quantity:
                    return False
                product = self._to_domain(raw)
                products[i] = self._to_raw(
                    product.with_stock(product.stock.decrease(quantity))
                )
                self._store.persist(products)
                return True
            return False

    async def increase_stock(self, product_id: ProductId, quantity: int) -> None:
        await self._modify(product_id, lambda p: p.increase_stock(quantity))

    async def update_price(self, product_id: ProductId, price: Price) -> Product:
        return await self._modify(product_id, lambda p: p.update_price(price))

    async def set_active(self, product_id: ProductId, active: bool) -> Product:
        return await self._modify(
            product_id, lambda p: p.activate() if active else p.deactivate()
        )

    async def set_stock(self, product_id: ProductId, stock: Stock) -> Product:
        return await self._modify(product_id, lambda p: p.with_stock(stock))

    async def _modify(
        self, product_id: ProductId, change: Callable[[Product], Product]
    ) -> Product:
        """Apply ``change`` to the freshly read record and write it back, under the lock."""
        async with self._lock:
            products = self._store.load()
            for i, raw in enumerate(products):
                if raw["id"] == product_id.value:
                    changed = change(self._to_domain(raw))
                    products[i] = self._to_raw(changed)
                    self._store.persist(products)
                    return changed
            raise EntityNotFoundError(f"Product not found: {product_id}")

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(product: Product) -> dict:
        return {
            "id": product.id.value,
            "name": product.name,
            "description": product.description,
            "price": product.price.value,
            "stock": product.stock.value,
            "category": product.category.value,
            "is_active": product.is_active,
            "image_url": product.image_url,
            "created_at": product.created_at.isoformat(),
            "updated_at": product.updated_at.isoformat(),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Product:
        return Product(
            id=ProductId(raw["id"]),
            name=raw["name"],
            description=raw.get("description"),
            price=Price(raw["price"]),
            stock=Stock(raw["stock"]),
            category=ProductCategory(raw["category"]),
            is_active=raw.get("is_active", True),
            image_url=raw.get("image_url"),
            created_at=datetime.fromisoformat(raw["created_at"]),
            updated_at=datetime.fromisoformat(raw["updated_at"]),
        )
