"""Integration tests for the update / remove / show / clear cart use cases."""

import pytest

from storefront.application.clear_cart import ClearCartHandler
from storefront.application.commands import (
    CartQuery,
    RemoveFromCartCommand,
    UpdateCartItemCommand,
)
from storefront.application.get_cart import GetCartHandler
from storefront.application.remove_from_cart import RemoveFromCartHandler
from storefront.application.update_cart_item import UpdateCartItemHandler
from storefront.domain.model.value_objects import Price, ProductId, Quantity
from tests.factories import make_cart, make_product
from tests.fakes import FakeCartRepository, FakeProductRepository


def _repos(lines=None, products=None):
    product_repo = FakeProductRepository(
        products
        or [
            make_product(1, "Kettle", price=1000, stock=10),
            make_product(2, "Mug", price=500, stock=3),
        ]
    )
    cart_repo = FakeCartRepository([make_cart(1, lines if lines is not None else {1: 2, 2: 1})])
    return cart_repo, product_repo


class TestUpdateCartItem:

    @pytest.mark.asyncio
    async def test_sets_quantity(self):
        cart_repo, product_repo = _repos()
        handler = UpdateCartItemHandler(cart_repo, product_repo)
        result = await handler.handle(UpdateCartItemCommand(user_id=1, product_id=1, quantity=7))

        assert result.success
        assert cart_repo.get(1).total_items == 8

    @pytest.mark.asyncio
    async def test_above_stock_rejected(self):
        cart_repo, product_repo = _repos()
        handler = UpdateCartItemHandler(cart_repo, product_repo)
        result = await handler.handle(UpdateCartItemCommand(user_id=1, product_id=2, quantity=4))

        assert result.message == "Insufficient stock"
        assert cart_repo.get(1).total_items == 3

    @pytest.mark.asyncio
    async def test_product_not_in_cart(self):
        cart_repo, product_repo = _repos(lines={1: 1})
        handler = UpdateCartItemHandler(cart_repo, product_repo)
        result = await handler.handle(UpdateCartItemCommand(user_id=1, product_id=2, quantity=1))
        assert result.message == "Product not found in cart"


class TestRemoveFromCart:

    @pytest.mark.asyncio
    async def test_removes_line(self):
        cart_repo, product_repo = _repos()
        handler = RemoveFromCartHandler(cart_repo, product_repo)
        result = await handler.handle(RemoveFromCartCommand(user_id=1, product_id=2))

        assert result.success
        assert [i.product_id for i in result.data.items] == [1]

    @pytest.mark.asyncio
    async def test_removing_last_line_keeps_empty_cart(self):
        cart_repo, product_repo = _repos(lines={1: 1})
        handler = RemoveFromCartHandler(cart_repo, product_repo)
        await handler.handle(RemoveFromCartCommand(user_id=1, product_id=1))

        assert cart_repo.get(1) is not None
        assert cart_repo.get(1).is_empty

    @pytest.mark.asyncio
    async def test_user_without_cart(self):
        cart_repo, product_repo = _repos()
        handler = RemoveFromCartHandler(cart_repo, product_repo)
        result = await handler.handle(RemoveFromCartCommand(user_id=5, product_id=1))
        assert result.message == "Product not found in cart"


class TestGetCart:

    @pytest.mark.asyncio
    async def test_prices_against_current_catalog(self):
        cart_repo, product_repo = _repos()
        await product_repo.update(product_repo.get(1).update_price(Price(1100)))

        result = await GetCartHandler(cart_repo, product_repo).handle(CartQuery(user_id=1))

        assert result.data.total_amount == "¥2,700"
        assert not result.data.has_unavailable_items

    @pytest.mark.asyncio
    async def test_flags_unavailable_lines(self):
        cart_repo, product_repo = _repos(lines={1: 1, 2: 3})
        await product_repo.update(product_repo.get(1).deactivate())
        await product_repo.update(product_repo.get(2).with_stock(product_repo.get(2).stock.decrease(2)))

        result = await GetCartHandler(cart_repo, product_repo).handle(CartQuery(user_id=1))

        lines = {line.product_id: line for line in result.data.items}
        assert result.data.has_unavailable_items
        assert lines[1].problem == "Product is not available"
        assert lines[2].problem == "Insufficient stock"

    @pytest.mark.asyncio
    async def test_user_without_cart_sees_empty_cart(self):
        cart_repo, product_repo = _repos()
        result = await GetCartHandler(cart_repo, product_repo).handle(CartQuery(user_id=9))

        assert result.success
        assert result.data.is_empty
        assert cart_repo.get(9) is None


class TestClearCart:

    @pytest.mark.asyncio
    async def test_empties_cart(self):
        cart_repo, _ = _repos()
        result = await ClearCartHandler(cart_repo).handle(CartQuery(user_id=1))

        assert result.message == "Cart cleared"
        assert cart_repo.get(1).is_empty

    @pytest.mark.asyncio
    async def test_already_empty(self):
        cart_repo, _ = _repos(lines={})
        result = await ClearCartHandler(cart_repo).handle(CartQuery(user_id=1))
        assert result.message == "Cart is already empty"
        assert cart_repo.clear_calls == 0

    @pytest.mark.asyncio
    async def test_storage_failure_reported_generically(self):
        cart_repo, _ = _repos()
        cart_repo.fail_on_clear = True
        result = await ClearCartHandler(cart_repo).handle(CartQuery(user_id=1))

        assert not result.success
        assert result.message == "Failed to clear cart"

    @pytest.mark.asyncio
    async def test_line_added_meanwhile_is_not_wiped(self):
        cart_repo, _ = _repos()
        read = cart_repo.find_by_user_id

        async def read_then_add_elsewhere(user_id):
            cart = await read(user_id)
            await cart_repo.save(cart.add_item(ProductId(2), Quantity(1)))
            return cart

        cart_repo.find_by_user_id = read_then_add_elsewhere
        result = await ClearCartHandler(cart_repo).handle(CartQuery(user_id=1))

        assert result.message == "Cart was modified concurrently, please retry"
        assert cart_repo.get(1).total_items == 4
