"""Application service: Add Product use case."""

from __future__ import annotations

import structlog

from storefront.application.boundary import run_use_case
from storefront.application.commands import AddProductCommand
from storefront.application.dto import UseCaseResult, to_product_dto
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import (
    Price,
    ProductCategory,
    ProductId,
    Stock,
)
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.service.product_service import ProductDomainService

logger = structlog.get_logger(__name__)


class AddProductHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo
        self._product_service = ProductDomainService()

    async def handle(self, command: AddProductCommand) -> UseCaseResult:
        """Add a new, active product to the catalog."""
        errors = command.validate()
        if errors:
            return UseCaseResult.invalid(errors)
        return await run_use_case(
            "add_product", lambda: self._add(command), "Failed to add product"
        )

    async def _add(self, command: AddProductCommand) -> UseCaseResult:
        product = Product(
            id=ProductId.new(),
            name=command.name.strip(),
            price=Price(command.price),
            stock=Stock(command.stock),
            category=ProductCategory(command.category),
            description=command.description,
            image_url=command.image_url,
        )
        self._product_service.validate_product_creation(product)

        saved = await self._product_repo.save(product)
        logger.info(
            "product_added",
            product_id=saved.id.value,
            name=saved.name,
            price=saved.price.value,
            stock=saved.stock.value,
        )
        return UseCaseResult.ok("Product added", data=to_product_dto(saved))
