"""Integration tests for the CreateOrder (checkout) use case.

Uses in-memory fake repositories, no file I/O.
"""

import pytest
from structlog.testing import capture_logs

from storefront.application.add_to_cart import AddToCartHandler
from storefront.application.commands import AddToCartCommand, CreateOrderCommand
from storefront.application.create_order import CreateOrderHandler
from storefront.domain.model.order import OrderStatus
from storefront.domain.model.value_objects import OrderId, Price, Stock
from tests.factories import make_cart, make_product
from tests.fakes import FakeCartRepository, FakeOrderRepository, FakeProductRepository


def _setup(products=None, lines=None):
    """Build handler with fake repos; user 1's cart holds ``lines``."""
    if products is None:
        products = [
            make_product(1, "Kettle", price=1000, stock=10),
            make_product(2, "Mug", price=2500, stock=5),
        ]
    product_repo = FakeProductRepository(products)
    cart_repo = FakeCartRepository([make_cart(1, lines if lines is not None else {1: 2, 2: 1})])
    order_repo = FakeOrderRepository()
    handler = CreateOrderHandler(order_repo, cart_repo, product_repo)
    return handler, order_repo, cart_repo, product_repo


def _command(user_id=1, **overrides) -> CreateOrderCommand:
    fields = dict(
        user_id=user_id,
        postal_code="150-0001",
        prefecture="Tokyo",
        city="Shibuya",
        address_line1="1-2-3 Jingumae",
    )
    fields.update(overrides)
    return CreateOrderCommand(**fields)


class _InterleavingOrderRepository(FakeOrderRepository):
    """Runs ``during_create`` while the checkout is storing its order."""

    def __init__(self, during_create) -> None:
        super().__init__()
        self._during_create = during_create

    async def create(self, order):
        await self._during_create()
        return await super().create(order)


# ── Happy path ───────────────────────────────────────────────────────────────


class TestCheckoutHappyPath:

    @pytest.mark.asyncio
    async def test_creates_pending_order(self):
        handler, order_repo, _, _ = _setup()
        result = await handler.handle(_command())

        assert result.success
        assert result.data.id == 1
        assert result.data.status == "pending"
        assert result.data.total_amount == 4500
        assert order_repo.all()[0].status == OrderStatus.PENDING

    @pytest.mark.asyncio
    async def test_decrements_stock(self):
        handler, _, _, product_repo = _setup()
        await handler.handle(_command())
        assert product_repo.get(1).stock == Stock(8)
        assert product_repo.get(2).stock == Stock(4)

    @pytest.mark.asyncio
    async def test_clears_cart(self):
        handler, _, cart_repo, _ = _setup()
        await handler.handle(_command())
        assert cart_repo.get(1).is_empty

    @pytest.mark.asyncio
    async def test_keeps_contact_and_notes(self):
        handler, order_repo, _, _ = _setup()
        await handler.handle(
            _command(contact_email="Hanako@Example.com", notes=" leave at door ")
        )
        order = order_repo.all()[0]
        assert order.contact.email.value == "hanako@example.com"
        assert order.notes == "leave at door"


# ── Price snapshot ───────────────────────────────────────────────────────────


class TestPriceSnapshot:

    @pytest.mark.asyncio
    async def test_total_survives_later_price_change(self):
        handler, order_repo, _, product_repo = _setup()
        result = await handler.handle(_command())

        kettle = await product_repo.find_by_id(product_repo.get(1).id)
        await product_repo.update(kettle.update_price(Price(9999)))

        saved = await order_repo.find_by_id(OrderId(result.data.id))
        assert saved.total_amount == Price(4500)
        assert saved.total_amount == saved.recalculate_total()

    @pytest.mark.asyncio
    async def test_uses_price_current_at_checkout(self):
        handler, order_repo, _, product_repo = _setup(lines={1: 1})
        kettle = product_repo.get(1)
        await product_repo.update(kettle.update_price(Price(1200)))

        await handler.handle(_command())
        item = order_repo.all()[0].items[0]
        assert item.price_at_purchase == Price(1200)
        assert item.product_name_at_purchase == "Kettle"


# ── Rejections leave no trace ────────────────────────────────────────────────


class TestCheckoutRejected:

    @pytest.mark.asyncio
    async def test_empty_cart(self):
        handler, order_repo, _, _ = _setup(lines={})
        result = await handler.handle(_command())
        assert not result.success
        assert result.message == "Cart is empty"
        assert order_repo.all() == []

    @pytest.mark.asyncio
    async def test_user_without_cart(self):
        handler, order_repo, _, _ = _setup()
        result = await handler.handle(_command(user_id=2))
        assert result.message == "Cart is empty"
        assert order_repo.all() == []

    @pytest.mark.asyncio
    async def test_insufficient_stock_changes_nothing(self):
        handler, order_repo, cart_repo, product_repo = _setup(
            products=[make_product(1, "Kettle", stock=3)], lines={1: 5}
        )
        result = await handler.handle(_command())

        assert not result.success
        assert "Insufficient stock for product: Kettle" in result.message
        assert order_repo.all() == []
        assert cart_repo.get(1).total_items == 5
        assert product_repo.get(1).stock == Stock(3)

    @pytest.mark.asyncio
    async def test_deactivated_product(self):
        handler, order_repo, _, _ = _setup(
            products=[make_product(1, "Kettle", is_active=False)], lines={1: 1}
        )
        result = await handler.handle(_command())
        assert "Product is not available: Kettle" in result.message
        assert order_repo.all() == []

    @pytest.mark.asyncio
    async def test_below_minimum_amount(self):
        handler, order_repo, _, _ = _setup(products=[make_product(1, price=50)], lines={1: 1})
        result = await handler.handle(_command())
        assert "Minimum order amount" in result.message
        assert order_repo.all() == []

    @pytest.mark.asyncio
    async def test_invalid_address_reports_every_error(self):
        handler, order_repo, _, _ = _setup()
        result = await handler.handle(
            _command(postal_code="1500001", city="", payment_method="bitcoin")
        )
        assert not result.success
        assert "Postal code must be in format NNN-NNNN" in result.errors
        assert "City is required" in result.errors
        assert "Valid payment method is required" in result.errors
        assert order_repo.all() == []


# ── Stock race and partial failure ───────────────────────────────────────────


class TestStockReservation:

    @pytest.mark.asyncio
    async def test_lost_race_restores_earlier_lines(self):
        handler, order_repo, cart_repo, product_repo = _setup()
        product_repo.lose_race_for = {2}

        result = await handler.handle(_command())

        assert not result.success
        assert result.message == "Insufficient stock"
        assert product_repo.get(1).stock == Stock(10)
        assert order_repo.all() == []
        assert cart_repo.get(1).total_items == 3

    @pytest.mark.asyncio
    async def test_order_persist_failure_restores_stock(self):
        handler, order_repo, cart_repo, product_repo = _setup()
        order_repo.fail_on_create = True

        result = await handler.handle(_command())

        assert not result.success
        assert result.message == "Failed to create order"
        assert not result.critical
        assert product_repo.get(1).stock == Stock(10)
        assert product_repo.get(2).stock == Stock(5)
        assert cart_repo.get(1).total_items == 3


class TestCartClearFailure:

    @pytest.mark.asyncio
    async def test_compensates_and_flags_critical(self):
        handler, order_repo, cart_repo, product_repo = _setup()
        cart_repo.fail_on_clear = True

        with capture_logs() as logs:
            result = await handler.handle(_command())

        assert not result.success
        assert result.critical
        assert order_repo.all()[0].status == OrderStatus.CANCELLED
        assert product_repo.get(1).stock == Stock(10)
        assert product_repo.get(2).stock == Stock(5)
        assert any(
            e["event"] == "cart_clear_failed_after_order" and e["log_level"] == "critical"
            for e in logs
        )

    @pytest.mark.asyncio
    async def test_failed_compensation_asks_for_reconciliation(self):
        handler, order_repo, cart_repo, product_repo = _setup()
        cart_repo.fail_on_clear = True
        product_repo.fail_on_increase = True

        with capture_logs() as logs:
            result = await handler.handle(_command())

        assert result.critical
        assert order_repo.all()[0].status == OrderStatus.CANCELLED
        critical = [e["event"] for e in logs if e["log_level"] == "critical"]
        assert "manual reconciliation required" in critical

    @pytest.mark.asyncio
    async def test_line_added_during_checkout_is_kept(self):
        _, _, cart_repo, product_repo = _setup(lines={1: 2})
        add_handler = AddToCartHandler(cart_repo, product_repo)
        added = []

        async def add_mug():
            added.append(
                await add_handler.handle(AddToCartCommand(user_id=1, product_id=2, quantity=1))
            )

        order_repo = _InterleavingOrderRepository(add_mug)
        handler = CreateOrderHandler(order_repo, cart_repo, product_repo)

        result = await handler.handle(_command())

        assert added[0].success
        assert not result.success
        assert result.critical
        assert order_repo.all()[0].status == OrderStatus.CANCELLED
        assert product_repo.get(1).stock == Stock(10)
        lines = {i.product_id.value: i.quantity.value for i in cart_repo.get(1).items}
        assert lines == {1: 2, 2: 1}
