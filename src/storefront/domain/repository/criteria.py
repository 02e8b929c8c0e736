"""Query objects passed to repository search methods."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.order import OrderStatus
from storefront.domain.model.value_objects import ProductCategory

MAX_PER_PAGE = 100


class SortDirection(Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class Pagination:
    page: int = 1
    per_page: int = 20

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValidationError("Page must be 1 or greater")
        if not 1 <= self.per_page <= MAX_PER_PAGE:
            raise ValidationError(f"Items per page must be between 1 and {MAX_PER_PAGE}")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page


@dataclass(frozen=True)
class ProductSort:
    sort_by: str = "created_at"
    direction: SortDirection = SortDirection.DESC

    FIELDS = ("name", "price", "stock", "created_at")

    def __post_init__(self) -> None:
        if self.sort_by not in self.FIELDS:
            raise ValidationError(
                f"Cannot sort products by '{self.sort_by}'. "
                f"Valid fields are: {', '.join(self.FIELDS)}"
            )


@dataclass(frozen=True)
class ProductFilters:
    category: ProductCategory | None = None
    active_only: bool = True
    in_stock_only: bool = False
    min_price: int | None = None
    max_price: int | None = None
    name_contains: str | None = None


@dataclass(frozen=True)
class ProductSearchCriteria:
    filters: ProductFilters = field(default_factory=ProductFilters)
    sort: ProductSort = field(default_factory=ProductSort)
    pagination: Pagination = field(default_factory=Pagination)


@dataclass(frozen=True)
class OrderFilters:
    status: OrderStatus | None = None


@dataclass(frozen=True)
class OrderSearchCriteria:
    filters: OrderFilters = field(default_factory=OrderFilters)
    pagination: Pagination = field(default_factory=Pagination)
