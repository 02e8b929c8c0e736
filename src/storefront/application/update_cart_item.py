"""Application service: Update Cart Item use case."""

from __future__ import annotations

import structlog

from storefront.application.boundary import run_use_case
from storefront.application.commands import UpdateCartItemCommand
from storefront.application.dto import UseCaseResult
from storefront.application.get_cart import (
    CART_MODIFIED_CONCURRENTLY,
    PRODUCT_NOT_FOUND,
    render_cart,
)
from storefront.domain.exceptions import ConcurrencyConflictError
from storefront.domain.model.cart import PRODUCT_NOT_IN_CART
from storefront.domain.model.value_objects import ProductId, Quantity, UserId
from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.service.cart_service import CartDomainService

logger = structlog.get_logger(__name__)


class UpdateCartItemHandler:

    def __init__(
        self,
        cart_repo: CartRepository,
        product_repo: ProductRepository,
    ) -> None:
        self._cart_repo = cart_repo
        self._product_repo = product_repo
        self._cart_service = CartDomainService()

    async def handle(self, command: UpdateCartItemCommand) -> UseCaseResult:
        errors = command.validate()
        if errors:
            return UseCaseResult.invalid(errors)
        return await run_use_case(
            "update_cart_item",
            lambda: self._update(command),
            "Failed to update cart item",
        )

    async def _update(self, command: UpdateCartItemCommand) -> UseCaseResult:
        user_id = UserId.parse(command.user_id)
        product_id = ProductId.parse(command.product_id)
        quantity = Quantity(command.quantity)

        cart = await self._cart_repo.find_by_user_id(user_id)
        if cart is None or not cart.has_product(product_id):
            return UseCaseResult.fail(PRODUCT_NOT_IN_CART)

        product = await self._product_repo.find_by_id(product_id)
        if product is None:
            return UseCaseResult.fail(PRODUCT_NOT_FOUND)

        updated = self._cart_service.update_cart_item(cart, product, quantity)
        try:
            saved = await self._cart_repo.save(updated)
        except ConcurrencyConflictError:
            logger.warning(
                "cart_write_conflict", user_id=user_id.value, version=cart.version
            )
            return UseCaseResult.fail(CART_MODIFIED_CONCURRENTLY)

        logger.info(
            "cart_item_updated",
            user_id=user_id.value,
            product_id=product_id.value,
            quantity=quantity.value,
        )
        view = await render_cart(saved, self._product_repo, self._cart_service)
        return UseCaseResult.ok("Cart item updated", data=view)
