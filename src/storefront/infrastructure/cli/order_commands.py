"""CLI commands for the Order aggregate."""

from __future__ import annotations

import click

from storefront.application.commands import (
    CreateOrderCommand,
    GetOrderQuery,
    ListOrdersQuery,
)
from storefront.application.create_order import CreateOrderHandler
from storefront.application.dto import OrderDTO
from storefront.application.list_orders import ListOrdersHandler
from storefront.application.show_order import ShowOrderHandler
from storefront.domain.model.order import OrderStatus
from storefront.domain.model.value_objects import PaymentMethod
from storefront.infrastructure.bootstrap import Repositories
from storefront.infrastructure.cli.common import execute


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order #{dto.id}  (status={dto.status})")
    click.echo(f"Created:  {dto.created_at}")
    click.echo(f"Ship to:  {dto.shipping_address}")
    click.echo(f"Payment:  {dto.payment_method}")
    click.echo()
    click.echo(f"  {'Product':<24} {'Qty':>5} {'Price':>12} {'Total':>12}")
    click.echo(f"  {'-'*56}")
    for item in dto.items:
        click.echo(
            f"  {item.product_name:<24} {item.quantity:>5} {item.unit_price:>12} {item.line_total:>12}"
        )
    click.echo(f"  {'-'*56}")
    click.echo(f"  {'Order Total':<30} {dto.total:>25}")
    if dto.notes:
        click.echo(f"Notes: {dto.notes}")


@click.command("checkout")
@click.option("--user", "user_id", required=True, help="Acting user ID.")
@click.option("--postal-code", required=True, help="Postal code (NNN-NNNN).")
@click.option("--prefecture", required=True)
@click.option("--city", required=True)
@click.option("--address1", "address_line1", required=True, help="Street address.")
@click.option("--address2", "address_line2", default=None, help="Building, room.")
@click.option("--email", "contact_email", default=None, help="Contact email.")
@click.option("--phone", "contact_phone", default=None, help="Contact phone.")
@click.option(
    "--payment",
    "payment_method",
    default=PaymentMethod.CASH_ON_DELIVERY.value,
    show_default=True,
    type=click.Choice([m.value for m in PaymentMethod]),
)
@click.option("--notes", default=None)
@click.pass_obj
def order_checkout(repos: Repositories, **fields) -> None:
    """Turn the user's cart into an order."""
    handler = CreateOrderHandler(
        order_repo=repos.orders,
        cart_repo=repos.carts,
        product_repo=repos.products,
    )
    result = execute(handler.handle(CreateOrderCommand(**fields)))
    click.echo(f"Order #{result.data.id} created  (status={result.data.status})")
    click.echo()
    _display_order(result.data)


@click.command("show")
@click.option("--user", "user_id", required=True, help="Acting user ID.")
@click.option("--id", "order_id", required=True, help="Order ID to display.")
@click.pass_obj
def order_show(repos: Repositories, user_id: str, order_id: str) -> None:
    """Show details of one of the user's orders."""
    handler = ShowOrderHandler(order_repo=repos.orders)
    result = execute(handler.handle(GetOrderQuery(user_id=user_id, order_id=order_id)))
    _display_order(result.data)


@click.command("list")
@click.option("--user", "user_id", required=True, help="Acting user ID.")
@click.option(
    "--status", default=None, type=click.Choice([s.value for s in OrderStatus])
)
@click.option("--page", default=1, show_default=True, type=int)
@click.option("--per-page", default=20, show_default=True, type=int)
@click.pass_obj
def order_list(
    repos: Repositories, user_id: str, status: str | None, page: int, per_page: int
) -> None:
    """List the user's orders, newest first."""
    handler = ListOrdersHandler(order_repo=repos.orders)
    result = execute(
        handler.handle(
            ListOrdersQuery(user_id=user_id, status=status, page=page, per_page=per_page)
        )
    )
    listing = result.data

    if not listing.orders:
        click.echo("No orders found.")
        return

    click.echo(f"{'ID':<6} {'Created':<22} {'Status':<10} {'Items':>6} {'Total':>14}")
    click.echo("-" * 62)
    for o in listing.orders:
        items = sum(i.quantity for i in o.items)
        click.echo(f"{o.id:<6} {o.created_at:<22} {o.status:<10} {items:>6} {o.total:>14}")
    click.echo(f"Page {listing.page} ({listing.total} order(s) in total)")
