"""Application services: catalog maintenance use cases.

Price changes, stock corrections and (de)activation.  None of these
touch existing orders: they captured a price snapshot at creation time.

Each change is a field-targeted repository write that re-reads the stored
product, so a checkout's stock decrement landing in between is kept.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

import structlog

from storefront.application.boundary import run_use_case
from storefront.application.commands import (
    SetProductActiveCommand,
    UpdatePriceCommand,
    UpdateStockCommand,
)
from storefront.application.dto import UseCaseResult, to_product_dto
from storefront.application.get_cart import PRODUCT_NOT_FOUND
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Price, ProductId
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.service.product_service import ProductDomainService

logger = structlog.get_logger(__name__)

ProductCommand = UpdatePriceCommand | UpdateStockCommand | SetProductActiveCommand


class _ProductHandler(ABC):
    """Load-check-write skeleton shared by the catalog handlers."""

    operation = "update_product"
    failure_message = "Failed to update product"

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo
        self._product_service = ProductDomainService()

    async def handle(self, command: ProductCommand) -> UseCaseResult:
        errors = command.validate()
        if errors:
            return UseCaseResult.invalid(errors)
        return await run_use_case(
            self.operation, lambda: self._run(command), self.failure_message
        )

    async def _run(self, command: ProductCommand) -> UseCaseResult:
        product = await self._product_repo.find_by_id(
            ProductId.parse(command.product_id)
        )
        if product is None:
            return UseCaseResult.fail(PRODUCT_NOT_FOUND)

        saved = await self._apply(product, command)
        return self._done(product, saved)

    @abstractmethod
    async def _apply(self, product: Product, command: ProductCommand) -> Product:
        """Check the change against ``product`` and write it; return the stored result."""

    @abstractmethod
    def _done(self, before: Product, after: Product) -> UseCaseResult:
        """Log the change and build the result."""


class UpdatePriceHandler(_ProductHandler):

    operation = "update_price"
    failure_message = "Failed to update price"

    async def _apply(self, product: Product, command: UpdatePriceCommand) -> Product:
        return await self._product_repo.update_price(product.id, Price(command.price))

    def _done(self, before: Product, after: Product) -> UseCaseResult:
        logger.info(
            "product_price_changed",
            product_id=after.id.value,
            old_price=before.price.value,
            new_price=after.price.value,
        )
        return UseCaseResult.ok("Price updated", data=to_product_dto(after))


class UpdateStockHandler(_ProductHandler):
    """Set the absolute stock level of an active product."""

    operation = "update_stock"
    failure_message = "Failed to update stock"

    async def _apply(self, product: Product, command: UpdateStockCommand) -> Product:
        stock = self._product_service.validate_stock_update(product, command.stock)
        return await self._product_repo.set_stock(product.id, stock)

    def _done(self, before: Product, after: Product) -> UseCaseResult:
        logger.info(
            "product_stock_set",
            product_id=after.id.value,
            old_stock=before.stock.value,
            new_stock=after.stock.value,
        )
        return UseCaseResult.ok("Stock updated", data=to_product_dto(after))


class SetProductActiveHandler(_ProductHandler):

    operation = "set_product_active"
    failure_message = "Failed to change product status"

    async def _apply(self, product: Product, command: SetProductActiveCommand) -> Product:
        return await self._product_repo.set_active(product.id, command.active)

    def _done(self, before: Product, after: Product) -> UseCaseResult:
        state = "activated" if after.is_active else "deactivated"
        logger.info("product_" + state, product_id=after.id.value)
        return UseCaseResult.ok(f"Product {state}", data=to_product_dto(after))
