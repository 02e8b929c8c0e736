"""Application service: Clear Cart use case."""

from __future__ import annotations

import structlog

from storefront.application.boundary import run_use_case
from storefront.application.commands import CartQuery
from storefront.application.dto import UseCaseResult
from storefront.application.get_cart import CART_MODIFIED_CONCURRENTLY
from storefront.domain.exceptions import ConcurrencyConflictError
from storefront.domain.model.value_objects import UserId
from storefront.domain.repository.cart_repository import CartRepository

logger = structlog.get_logger(__name__)


class ClearCartHandler:

    def __init__(self, cart_repo: CartRepository) -> None:
        self._cart_repo = cart_repo

    async def handle(self, command: CartQuery) -> UseCaseResult:
        errors = command.validate()
        if errors:
            return UseCaseResult.invalid(errors)
        return await run_use_case(
            "clear_cart", lambda: self._clear(command), "Failed to clear cart"
        )

    async def _clear(self, command: CartQuery) -> UseCaseResult:
        user_id = UserId.parse(command.user_id)
        cart = await self._cart_repo.find_by_user_id(user_id)
        if cart is None or cart.is_empty:
            return UseCaseResult.ok("Cart is already empty")

        try:
            await self._cart_repo.clear(user_id, cart.version)
        except ConcurrencyConflictError:
            logger.warning("cart_write_conflict", user_id=user_id.value, version=cart.version)
            return UseCaseResult.fail(CART_MODIFIED_CONCURRENTLY)

        logger.info("cart_cleared", user_id=user_id.value, lines=cart.line_count)
        return UseCaseResult.ok("Cart cleared")
