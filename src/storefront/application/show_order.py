"""Application service: Show Order use case (query).

Users may only see their own orders; someone else's order is reported
exactly like a missing one.
"""

from __future__ import annotations

import structlog

from storefront.application.boundary import run_use_case
from storefront.application.commands import GetOrderQuery
from storefront.application.dto import UseCaseResult, to_order_dto
from storefront.domain.model.value_objects import OrderId, UserId
from storefront.domain.repository.order_repository import OrderRepository

logger = structlog.get_logger(__name__)

ORDER_NOT_FOUND = "Order not found"


class ShowOrderHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    async def handle(self, query: GetOrderQuery) -> UseCaseResult:
        errors = query.validate()
        if errors:
            return UseCaseResult.invalid(errors)
        return await run_use_case(
            "show_order", lambda: self._show(query), "Failed to load order"
        )

    async def _show(self, query: GetOrderQuery) -> UseCaseResult:
        user_id = UserId.parse(query.user_id)
        order_id = OrderId.parse(query.order_id)

        order = await self._order_repo.find_by_id(order_id)
        if order is None:
            return UseCaseResult.fail(ORDER_NOT_FOUND)
        if not order.belongs_to(user_id):
            logger.warning(
                "order_access_denied", order_id=order_id.value, user_id=user_id.value
            )
            return UseCaseResult.fail(ORDER_NOT_FOUND)
        return UseCaseResult.ok("Order loaded", data=to_order_dto(order))
