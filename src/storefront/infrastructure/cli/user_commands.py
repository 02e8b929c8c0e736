"""CLI commands for the User aggregate."""

from __future__ import annotations

import click

from storefront.application.commands import ChangeAdminCommand, RegisterUserCommand
from storefront.application.manage_admins import DemoteAdminHandler, PromoteAdminHandler
from storefront.application.register_user import RegisterUserHandler
from storefront.infrastructure.bootstrap import Repositories
from storefront.infrastructure.cli.common import execute


@click.command("add")
@click.option("--email", required=True)
@click.option("--first-name", required=True)
@click.option("--last-name", required=True)
@click.option("--admin", "is_admin", is_flag=True, help="Register as administrator.")
@click.pass_obj
def user_add(
    repos: Repositories, email: str, first_name: str, last_name: str, is_admin: bool
) -> None:
    """Register a user."""
    handler = RegisterUserHandler(user_repo=repos.users)
    result = execute(
        handler.handle(
            RegisterUserCommand(
                email=email, first_name=first_name, last_name=last_name, is_admin=is_admin
            )
        )
    )
    dto = result.data
    role = "administrator" if dto.is_admin else "customer"
    click.echo(f"User #{dto.id} {dto.full_name} <{dto.email}> registered as {role}")


@click.command("promote")
@click.option("--actor", "actor_id", required=True, help="Administrator performing the change.")
@click.option("--id", "target_id", required=True, help="User to promote.")
@click.pass_obj
def user_promote(repos: Repositories, actor_id: str, target_id: str) -> None:
    """Grant administrator rights."""
    handler = PromoteAdminHandler(user_repo=repos.users)
    result = execute(handler.handle(ChangeAdminCommand(actor_id=actor_id, target_id=target_id)))
    click.echo(f"User #{result.data.id} is now an administrator")


@click.command("demote")
@click.option("--actor", "actor_id", required=True, help="Administrator performing the change.")
@click.option("--id", "target_id", required=True, help="Administrator to demote.")
@click.pass_obj
def user_demote(repos: Repositories, actor_id: str, target_id: str) -> None:
    """Revoke administrator rights.  The last administrator can't be demoted."""
    handler = DemoteAdminHandler(user_repo=repos.users)
    result = execute(handler.handle(ChangeAdminCommand(actor_id=actor_id, target_id=target_id)))
    click.echo(f"User #{result.data.id} is no longer an administrator")
