"""CLI commands for the Cart aggregate."""

from __future__ import annotations

import click

from storefront.application.add_to_cart import AddToCartHandler
from storefront.application.clear_cart import ClearCartHandler
from storefront.application.commands import (
    AddToCartCommand,
    CartQuery,
    RemoveFromCartCommand,
    UpdateCartItemCommand,
)
from storefront.application.dto import CartDTO
from storefront.application.get_cart import GetCartHandler
from storefront.application.remove_from_cart import RemoveFromCartHandler
from storefront.application.update_cart_item import UpdateCartItemHandler
from storefront.infrastructure.bootstrap import Repositories
from storefront.infrastructure.cli.common import execute

user_option = click.option("--user", "user_id", required=True, help="Acting user ID.")


def _display_cart(dto: CartDTO) -> None:
    """Shared formatting for displaying a cart."""
    if dto.is_empty:
        click.echo("Cart is empty.")
        return

    click.echo(f"  {'ID':<5} {'Product':<24} {'Qty':>4} {'Price':>12} {'Subtotal':>12}")
    click.echo(f"  {'-'*61}")
    for line in dto.items:
        name = line.product_name or "(removed product)"
        click.echo(
            f"  {line.product_id:<5} {name:<24} {line.quantity:>4} "
            f"{line.unit_price or '-':>12} {line.subtotal or '-':>12}"
        )
        if line.problem:
            click.echo(f"        ! {line.problem}")
    click.echo(f"  {'-'*61}")
    click.echo(f"  {'Items':<24} {dto.total_items:>10} {'Total':>12} {dto.total_amount:>12}")
    if dto.has_unavailable_items:
        click.echo("Some items can no longer be ordered as they are.")


@click.command("add")
@user_option
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--qty", "quantity", default=1, show_default=True, type=int)
@click.pass_obj
def cart_add(repos: Repositories, user_id: str, product_id: str, quantity: int) -> None:
    """Add a product to the cart (merges with an existing line)."""
    handler = AddToCartHandler(cart_repo=repos.carts, product_repo=repos.products)
    result = execute(
        handler.handle(
            AddToCartCommand(user_id=user_id, product_id=product_id, quantity=quantity)
        )
    )
    click.echo(result.message)
    _display_cart(result.data)


@click.command("update")
@user_option
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--qty", "quantity", required=True, type=int, help="New quantity.")
@click.pass_obj
def cart_update(repos: Repositories, user_id: str, product_id: str, quantity: int) -> None:
    """Set the quantity of a cart line."""
    handler = UpdateCartItemHandler(cart_repo=repos.carts, product_repo=repos.products)
    result = execute(
        handler.handle(
            UpdateCartItemCommand(user_id=user_id, product_id=product_id, quantity=quantity)
        )
    )
    click.echo(result.message)
    _display_cart(result.data)


@click.command("remove")
@user_option
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.pass_obj
def cart_remove(repos: Repositories, user_id: str, product_id: str) -> None:
    """Remove a product from the cart."""
    handler = RemoveFromCartHandler(cart_repo=repos.carts, product_repo=repos.products)
    result = execute(
        handler.handle(RemoveFromCartCommand(user_id=user_id, product_id=product_id))
    )
    click.echo(result.message)
    _display_cart(result.data)


@click.command("show")
@user_option
@click.pass_obj
def cart_show(repos: Repositories, user_id: str) -> None:
    """Show the cart priced against the current catalog."""
    handler = GetCartHandler(cart_repo=repos.carts, product_repo=repos.products)
    result = execute(handler.handle(CartQuery(user_id=user_id)))
    _display_cart(result.data)


@click.command("clear")
@user_option
@click.pass_obj
def cart_clear(repos: Repositories, user_id: str) -> None:
    """Empty the cart."""
    handler = ClearCartHandler(cart_repo=repos.carts)
    result = execute(handler.handle(CartQuery(user_id=user_id)))
    click.echo(result.message)
