"""Application service: Get Cart use case (query).

Shows the cart against the catalog as it is *now*: prices are current,
and lines that could no longer be checked out are flagged.
"""

from __future__ import annotations

import structlog

from storefront.application.boundary import run_use_case
from storefront.application.commands import CartQuery
from storefront.application.dto import CartDTO, UseCaseResult, to_cart_dto
from storefront.domain.model.cart import Cart
from storefront.domain.model.value_objects import UserId
from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.service.cart_service import CartDomainService

logger = structlog.get_logger(__name__)

PRODUCT_NOT_FOUND = "Product not found"
CART_MODIFIED_CONCURRENTLY = "Cart was modified concurrently, please retry"


async def render_cart(
    cart: Cart, product_repo: ProductRepository, cart_service: CartDomainService
) -> CartDTO:
    products = await product_repo.find_by_ids(cart.product_ids)
    problems = {
        line.item.product_id.value: line.reason
        for line in cart_service.find_unavailable_items(cart, products)
    }
    return to_cart_dto(cart, products, problems)  # type: ignore[arg-type]


class GetCartHandler:

    def __init__(
        self,
        cart_repo: CartRepository,
        product_repo: ProductRepository,
    ) -> None:
        self._cart_repo = cart_repo
        self._product_repo = product_repo
        self._cart_service = CartDomainService()

    async def handle(self, query: CartQuery) -> UseCaseResult:
        errors = query.validate()
        if errors:
            return UseCaseResult.invalid(errors)
        return await run_use_case(
            "get_cart", lambda: self._show(query), "Failed to load cart"
        )

    async def _show(self, query: CartQuery) -> UseCaseResult:
        user_id = UserId.parse(query.user_id)
        # A user who never added anything sees an empty cart; nothing is stored.
        cart = await self._cart_repo.find_by_user_id(user_id) or Cart.create(user_id)
        view = await render_cart(cart, self._product_repo, self._cart_service)
        if view.has_unavailable_items:
            logger.info(
                "cart_has_unavailable_items",
                user_id=user_id.value,
                lines=[line.product_id for line in view.items if not line.is_available],
            )
        return UseCaseResult.ok("Cart loaded", data=view)
