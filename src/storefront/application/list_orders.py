"""Application service: List Orders use case (query)."""

from __future__ import annotations

from dataclasses import dataclass

from storefront.application.boundary import run_use_case
from storefront.application.commands import ListOrdersQuery
from storefront.application.dto import OrderDTO, UseCaseResult, to_order_dto
from storefront.domain.exceptions import ValidationError
from storefront.domain.model.order import OrderStatus
from storefront.domain.model.value_objects import UserId
from storefront.domain.repository.criteria import (
    OrderFilters,
    OrderSearchCriteria,
    Pagination,
)
from storefront.domain.repository.order_repository import OrderRepository


@dataclass(frozen=True)
class OrderPage:
    orders: list[OrderDTO]
    total: int
    page: int
    per_page: int


class ListOrdersHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    async def handle(self, query: ListOrdersQuery) -> UseCaseResult:
        errors = query.validate()
        if errors:
            return UseCaseResult.invalid(errors)
        return await run_use_case(
            "list_orders", lambda: self._list(query), "Failed to list orders"
        )

    async def _list(self, query: ListOrdersQuery) -> UseCaseResult:
        user_id = UserId.parse(query.user_id)
        criteria = OrderSearchCriteria(
            filters=OrderFilters(status=_parse_status(query.status)),
            pagination=Pagination(page=query.page, per_page=query.per_page),
        )
        orders = await self._order_repo.find_by_user_id(user_id, criteria)
        total = await self._order_repo.count_by_user_id(user_id)
        page = OrderPage(
            orders=[to_order_dto(o) for o in orders],
            total=total,
            page=query.page,
            per_page=query.per_page,
        )
        return UseCaseResult.ok(f"{len(orders)} order(s)", data=page)


def _parse_status(raw: str | None) -> OrderStatus | None:
    if not raw:
        return None
    try:
        return OrderStatus(raw.strip().lower())
    except ValueError as exc:
        valid = ", ".join(s.value for s in OrderStatus)
        raise ValidationError(
            f"Invalid order status: {raw}. Valid statuses are: {valid}"
        ) from exc
