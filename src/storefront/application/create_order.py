"""Application service: Create Order use case (checkout).

Orchestrates the cart-to-order transition.  This is the only place that
coordinates all three aggregates (Cart, Product, Order), so it is also
where partial failure is handled:

1. Validate the command.
2. Load the cart; nothing to buy means no order.
3. Re-load every product (never trust what the cart saw earlier) and
   re-check availability and stock.
4. Snapshot the current name and price of each line.
5. Build and validate the Order.
6. Reserve stock line by line with an atomic conditional decrement.
   Losing any race releases what was already taken.
7. Persist the order.  On failure, release the reserved stock.
8. Clear the cart, conditional on the version read in step 2.  If that
   fails, or another write changed the cart meanwhile, the order is
   cancelled, its stock released, and the result flagged critical.
"""

from __future__ import annotations

from typing import Iterable

import structlog

from storefront.application.boundary import run_use_case
from storefront.application.commands import CreateOrderCommand
from storefront.application.dto import UseCaseResult, to_order_dto
from storefront.domain.model.order import (
    ContactInfo,
    Order,
    OrderItem,
    OrderStatus,
    ShippingAddress,
)
from storefront.domain.model.value_objects import (
    Email,
    PaymentMethod,
    PostalCode,
    UserId,
)
from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.service.cart_service import INSUFFICIENT_STOCK
from storefront.domain.service.order_service import CART_IS_EMPTY, OrderDomainService

logger = structlog.get_logger(__name__)

ORDER_CREATION_FAILED = "Failed to create order"
CHECKOUT_ROLLED_BACK = (
    "Order could not be completed and has been cancelled; please try again"
)


class CreateOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        cart_repo: CartRepository,
        product_repo: ProductRepository,
    ) -> None:
        self._order_repo = order_repo
        self._cart_repo = cart_repo
        self._product_repo = product_repo
        self._order_service = OrderDomainService()

    async def handle(self, command: CreateOrderCommand) -> UseCaseResult:
        errors = command.validate()
        if errors:
            return UseCaseResult.invalid(errors)
        return await run_use_case(
            "create_order", lambda: self._checkout(command), ORDER_CREATION_FAILED
        )

    async def _checkout(self, command: CreateOrderCommand) -> UseCaseResult:
        user_id = UserId.parse(command.user_id)

        cart = await self._cart_repo.find_by_user_id(user_id)
        if cart is None or cart.is_empty:
            return UseCaseResult.fail(CART_IS_EMPTY)

        products = await self._product_repo.find_by_ids(cart.product_ids)
        self._order_service.validate_checkout(cart, products)

        order = Order.create(
            user_id=user_id,
            items=self._order_service.build_order_items(cart, products),
            shipping_address=self._shipping_address(command),
            payment_method=PaymentMethod.parse(command.payment_method),
            contact=self._contact(command),
            notes=command.notes,
        )
        self._order_service.validate_order(order)

        if not await self._reserve_stock(order):
            return UseCaseResult.fail(INSUFFICIENT_STOCK)

        try:
            saved = await self._order_repo.create(order)
        except Exception:
            logger.exception("order_persist_failed", user_id=user_id.value)
            await self._release_stock(order.items)
            return UseCaseResult.fail(ORDER_CREATION_FAILED)

        try:
            await self._cart_repo.clear(user_id, cart.version)
        except Exception:
            logger.critical(
                "cart_clear_failed_after_order",
                order_id=saved.id.value,
                user_id=user_id.value,
                exc_info=True,
            )
            await self._compensate(saved)
            return UseCaseResult.fail(CHECKOUT_ROLLED_BACK, critical=True)

        logger.info(
            "order_created",
            order_id=saved.id.value,
            user_id=user_id.value,
            lines=len(saved.items),
            total=saved.total_amount.value,
        )
        return UseCaseResult.ok("Order created", data=to_order_dto(saved))

    # --- Stock reservation ----------------------------------------------------

    async def _reserve_stock(self, order: Order) -> bool:
        """Take stock for every line, or for none of them."""
        reserved: list[OrderItem] = []
        try:
            for item in order.items:
                taken = await self._product_repo.decrement_stock_if_sufficient(
                    item.product_id, item.quantity.value
                )
                if not taken:
                    logger.info(
                        "stock_reservation_lost",
                        user_id=order.user_id.value,
                        product_id=item.product_id.value,
                        quantity=item.quantity.value,
                    )
                    await self._release_stock(reserved)
                    return False
                reserved.append(item)
        except Exception:
            await self._release_stock(reserved)
            raise
        return True

    async def _release_stock(self, items: Iterable[OrderItem]) -> bool:
        """Give back stock for ``items``.  Returns False if any line failed."""
        released = True
        for item in items:
            try:
                await self._product_repo.increase_stock(
                    item.product_id, item.quantity.value
                )
            except Exception:
                released = False
                logger.critical(
                    "stock_release_failed",
                    product_id=item.product_id.value,
                    quantity=item.quantity.value,
                    exc_info=True,
                )
        return released

    # --- Compensation ---------------------------------------------------------

    async def _compensate(self, order: Order) -> None:
        cancelled = True
        try:
            await self._order_repo.update_status(order.id, OrderStatus.CANCELLED)
        except Exception:
            cancelled = False
            logger.critical(
                "order_cancel_failed", order_id=order.id.value, exc_info=True
            )
        released = await self._release_stock(order.items)

        if cancelled and released:
            logger.warning(
                "order_compensated",
                order_id=order.id.value,
                user_id=order.user_id.value,
            )
        else:
            logger.critical(
                "manual reconciliation required",
                order_id=order.id.value,
                user_id=order.user_id.value,
                order_cancelled=cancelled,
                stock_released=released,
            )

    # --- Mapping --------------------------------------------------------------

    @staticmethod
    def _shipping_address(command: CreateOrderCommand) -> ShippingAddress:
        return ShippingAddress(
            postal_code=PostalCode(command.postal_code),
            prefecture=command.prefecture.strip(),
            city=command.city.strip(),
            address_line1=command.address_line1.strip(),
            address_line2=command.address_line2.strip() if command.address_line2 else None,
        )

    @staticmethod
    def _contact(command: CreateOrderCommand) -> ContactInfo:
        return ContactInfo(
            email=Email(command.contact_email) if command.contact_email else None,
            phone=command.contact_phone or None,
        )
