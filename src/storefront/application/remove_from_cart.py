"""Application service: Remove From Cart use case.

Removing the last line leaves an empty cart behind; the cart itself is
never deleted.
"""

from __future__ import annotations

import structlog

from storefront.application.boundary import run_use_case
from storefront.application.commands import RemoveFromCartCommand
from storefront.application.dto import UseCaseResult
from storefront.application.get_cart import CART_MODIFIED_CONCURRENTLY, render_cart
from storefront.domain.exceptions import ConcurrencyConflictError
from storefront.domain.model.cart import PRODUCT_NOT_IN_CART
from storefront.domain.model.value_objects import ProductId, UserId
from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.service.cart_service import CartDomainService

logger = structlog.get_logger(__name__)


class RemoveFromCartHandler:

    def __init__(
        self,
        cart_repo: CartRepository,
        product_repo: ProductRepository,
    ) -> None:
        self._cart_repo = cart_repo
        self._product_repo = product_repo
        self._cart_service = CartDomainService()

    async def handle(self, command: RemoveFromCartCommand) -> UseCaseResult:
        errors = command.validate()
        if errors:
            return UseCaseResult.invalid(errors)
        return await run_use_case(
            "remove_from_cart",
            lambda: self._remove(command),
            "Failed to remove product from cart",
        )

    async def _remove(self, command: RemoveFromCartCommand) -> UseCaseResult:
        user_id = UserId.parse(command.user_id)
        product_id = ProductId.parse(command.product_id)

        cart = await self._cart_repo.find_by_user_id(user_id)
        if cart is None:
            return UseCaseResult.fail(PRODUCT_NOT_IN_CART)

        updated = self._cart_service.remove_product_from_cart(cart, product_id)
        try:
            saved = await self._cart_repo.save(updated)
        except ConcurrencyConflictError:
            logger.warning(
                "cart_write_conflict", user_id=user_id.value, version=cart.version
            )
            return UseCaseResult.fail(CART_MODIFIED_CONCURRENTLY)

        logger.info(
            "cart_item_removed", user_id=user_id.value, product_id=product_id.value
        )
        view = await render_cart(saved, self._product_repo, self._cart_service)
        return UseCaseResult.ok("Product removed from cart", data=view)
