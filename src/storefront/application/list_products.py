"""Application service: List Products use case (query)."""

from __future__ import annotations

from dataclasses import dataclass

from storefront.application.boundary import run_use_case
from storefront.application.commands import ListProductsQuery
from storefront.application.dto import ProductDTO, UseCaseResult, to_product_dto
from storefront.domain.model.value_objects import ProductCategory
from storefront.domain.repository.criteria import (
    Pagination,
    ProductFilters,
    ProductSearchCriteria,
    ProductSort,
    SortDirection,
)
from storefront.domain.repository.product_repository import ProductRepository


@dataclass(frozen=True)
class ProductPage:
    products: list[ProductDTO]
    page: int
    per_page: int


class ListProductsHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    async def handle(self, query: ListProductsQuery) -> UseCaseResult:
        errors = query.validate()
        if errors:
            return UseCaseResult.invalid(errors)
        return await run_use_case(
            "list_products", lambda: self._list(query), "Failed to list products"
        )

    async def _list(self, query: ListProductsQuery) -> UseCaseResult:
        criteria = ProductSearchCriteria(
            filters=ProductFilters(
                category=ProductCategory(query.category) if query.category else None,
                active_only=not query.include_inactive,
                in_stock_only=query.in_stock_only,
                name_contains=query.name_contains or None,
            ),
            sort=ProductSort(
                sort_by=query.sort_by,
                direction=SortDirection.DESC if query.descending else SortDirection.ASC,
            ),
            pagination=Pagination(page=query.page, per_page=query.per_page),
        )
        products = await self._product_repo.find_by_criteria(criteria)
        page = ProductPage(
            products=[to_product_dto(p) for p in products],
            page=query.page,
            per_page=query.per_page,
        )
        return UseCaseResult.ok(f"{len(products)} product(s)", data=page)
