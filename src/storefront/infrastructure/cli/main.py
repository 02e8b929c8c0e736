import click

from storefront.config import get_settings
from storefront.infrastructure.bootstrap import build_repositories
from storefront.infrastructure.cli.cart_commands import (
    cart_add,
    cart_clear,
    cart_remove,
    cart_show,
    cart_update,
)
from storefront.infrastructure.cli.order_commands import (
    order_checkout,
    order_list,
    order_show,
)
from storefront.infrastructure.cli.product_commands import (
    product_activate,
    product_add,
    product_deactivate,
    product_list,
    product_price,
    product_stock,
)
from storefront.infrastructure.cli.user_commands import (
    user_add,
    user_demote,
    user_promote,
)
from storefront.utils.logging import configure_logging


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Storefront: catalog, carts and orders"""
    settings = get_settings()
    configure_logging(settings.log_level, json_logs=settings.json_logs or settings.is_production)
    ctx.obj = build_repositories(settings)


@cli.group()
def product() -> None:
    """Manage the product catalog."""


@cli.group()
def cart() -> None:
    """Manage a user's cart."""


@cli.group()
def order() -> None:
    """Check out and review orders."""


@cli.group()
def user() -> None:
    """Manage users and administrators."""


# Register subcommands
product.add_command(product_activate)
product.add_command(product_add)
product.add_command(product_deactivate)
product.add_command(product_list)
product.add_command(product_price)
product.add_command(product_stock)
cart.add_command(cart_add)
cart.add_command(cart_clear)
cart.add_command(cart_remove)
cart.add_command(cart_show)
cart.add_command(cart_update)
order.add_command(order_checkout)
order.add_command(order_list)
order.add_command(order_show)
user.add_command(user_add)
user.add_command(user_demote)
user.add_command(user_promote)
