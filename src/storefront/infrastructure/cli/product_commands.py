"""CLI commands for the Product aggregate."""

from __future__ import annotations

import click

from storefront.application.add_product import AddProductHandler
from storefront.application.commands import (
    AddProductCommand,
    ListProductsQuery,
    SetProductActiveCommand,
    UpdatePriceCommand,
    UpdateStockCommand,
)
from storefront.application.list_products import ListProductsHandler
from storefront.application.update_product import (
    SetProductActiveHandler,
    UpdatePriceHandler,
    UpdateStockHandler,
)
from storefront.domain.model.value_objects import ProductCategory
from storefront.infrastructure.bootstrap import Repositories
from storefront.infrastructure.cli.common import execute


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, type=int, help="Price in yen (e.g. 1500).")
@click.option("--stock", default=0, show_default=True, type=int, help="Units on hand.")
@click.option(
    "--category",
    required=True,
    type=click.Choice(ProductCategory.VALID, case_sensitive=False),
    help="Catalog category.",
)
@click.option("--description", default=None, help="Optional description.")
@click.pass_obj
def product_add(
    repos: Repositories,
    name: str,
    price: int,
    stock: int,
    category: str,
    description: str | None,
) -> None:
    """Add a new product to the catalog."""
    handler = AddProductHandler(product_repo=repos.products)
    result = execute(
        handler.handle(
            AddProductCommand(
                name=name,
                price=price,
                stock=stock,
                category=category,
                description=description,
            )
        )
    )
    dto = result.data
    click.echo(f"Product #{dto.id} '{dto.name}' added at {dto.price} (stock {dto.stock})")


@click.command("list")
@click.option("--category", default=None, help="Only this category.")
@click.option("--all", "include_inactive", is_flag=True, help="Include inactive products.")
@click.option("--in-stock", "in_stock_only", is_flag=True, help="Only products in stock.")
@click.option("--search", "name_contains", default=None, help="Name contains this text.")
@click.option(
    "--sort",
    "sort_by",
    default="created_at",
    show_default=True,
    type=click.Choice(["name", "price", "stock", "created_at"]),
)
@click.option("--asc", is_flag=True, help="Ascending order.")
@click.option("--page", default=1, show_default=True, type=int)
@click.option("--per-page", default=20, show_default=True, type=int)
@click.pass_obj
def product_list(
    repos: Repositories,
    category: str | None,
    include_inactive: bool,
    in_stock_only: bool,
    name_contains: str | None,
    sort_by: str,
    asc: bool,
    page: int,
    per_page: int,
) -> None:
    """List products in the catalog."""
    handler = ListProductsHandler(product_repo=repos.products)
    result = execute(
        handler.handle(
            ListProductsQuery(
                category=category,
                include_inactive=include_inactive,
                in_stock_only=in_stock_only,
                name_contains=name_contains,
                sort_by=sort_by,
                descending=not asc,
                page=page,
                per_page=per_page,
            )
        )
    )
    products = result.data.products

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'Name':<24} {'Category':<12} {'Price':>12} {'Stock':>7}  Status")
    click.echo("-" * 72)
    for p in products:
        status = "active" if p.is_active else "inactive"
        click.echo(
            f"{p.id:<6} {p.name:<24} {p.category:<12} {p.price:>12} {p.stock:>7}  {status}"
        )


@click.command("stock")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--set", "stock", required=True, type=int, help="New absolute stock level.")
@click.pass_obj
def product_stock(repos: Repositories, product_id: str, stock: int) -> None:
    """Set a product's stock level."""
    handler = UpdateStockHandler(product_repo=repos.products)
    result = execute(handler.handle(UpdateStockCommand(product_id=product_id, stock=stock)))
    click.echo(f"Product #{result.data.id} stock set to {result.data.stock}")


@click.command("price")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--set", "price", required=True, type=int, help="New price in yen.")
@click.pass_obj
def product_price(repos: Repositories, product_id: str, price: int) -> None:
    """Change a product's price.  Existing orders keep their price."""
    handler = UpdatePriceHandler(product_repo=repos.products)
    result = execute(handler.handle(UpdatePriceCommand(product_id=product_id, price=price)))
    click.echo(f"Product #{result.data.id} price updated to {result.data.price}")


def _set_active(repos: Repositories, product_id: str, active: bool) -> None:
    handler = SetProductActiveHandler(product_repo=repos.products)
    result = execute(
        handler.handle(SetProductActiveCommand(product_id=product_id, active=active))
    )
    click.echo(f"{result.message}: #{result.data.id} '{result.data.name}'")


@click.command("activate")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.pass_obj
def product_activate(repos: Repositories, product_id: str) -> None:
    """Put a product back on sale."""
    _set_active(repos, product_id, True)


@click.command("deactivate")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.pass_obj
def product_deactivate(repos: Repositories, product_id: str) -> None:
    """Take a product off sale."""
    _set_active(repos, product_id, False)
