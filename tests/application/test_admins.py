"""Integration tests for user registration and the last-admin invariant."""

import asyncio

import pytest

from storefront.application.commands import ChangeAdminCommand, RegisterUserCommand
from storefront.application.manage_admins import DemoteAdminHandler, PromoteAdminHandler
from storefront.application.register_user import RegisterUserHandler
from tests.factories import make_user
from tests.fakes import FakeUserRepository


class TestRegisterUser:

    @pytest.mark.asyncio
    async def test_registers(self):
        repo = FakeUserRepository()
        result = await RegisterUserHandler(repo).handle(
            RegisterUserCommand(email="Hanako@Example.com", first_name="Hanako", last_name="Sato")
        )
        assert result.success
        assert result.data.email == "hanako@example.com"
        assert result.data.full_name == "Hanako Sato"

    @pytest.mark.asyncio
    async def test_duplicate_email_rejected(self):
        repo = FakeUserRepository([make_user(1, email="taken@example.com")])
        result = await RegisterUserHandler(repo).handle(
            RegisterUserCommand(email="TAKEN@example.com", first_name="A", last_name="B")
        )
        assert result.message == "Email address is already registered"

    @pytest.mark.asyncio
    async def test_concurrent_registrations_with_same_email(self):
        repo = FakeUserRepository()
        handler = RegisterUserHandler(repo)
        cmd = RegisterUserCommand(email="race@example.com", first_name="A", last_name="B")

        results = await asyncio.gather(handler.handle(cmd), handler.handle(cmd))

        assert sum(r.success for r in results) == 1
        assert {r.message for r in results if not r.success} == {"Email address is already registered"}


class TestDemoteAdmin:

    @pytest.mark.asyncio
    async def test_demotes_when_another_admin_remains(self):
        repo = FakeUserRepository([make_user(1, is_admin=True), make_user(2, is_admin=True)])
        result = await DemoteAdminHandler(repo).handle(ChangeAdminCommand(actor_id=1, target_id=2))

        assert result.success
        assert not repo.get(2).is_admin
        assert await repo.count_admins() == 1

    @pytest.mark.asyncio
    async def test_cannot_demote_self(self):
        repo = FakeUserRepository([make_user(1, is_admin=True), make_user(2, is_admin=True)])
        result = await DemoteAdminHandler(repo).handle(ChangeAdminCommand(actor_id=1, target_id=1))
        assert result.message == "Cannot demote yourself"
        assert repo.get(1).is_admin

    @pytest.mark.asyncio
    async def test_mutual_demotion_leaves_one_admin(self):
        repo = FakeUserRepository([make_user(1, is_admin=True), make_user(2, is_admin=True)])
        handler = DemoteAdminHandler(repo)

        results = await asyncio.gather(
            handler.handle(ChangeAdminCommand(actor_id=1, target_id=2)),
            handler.handle(ChangeAdminCommand(actor_id=2, target_id=1)),
        )

        assert sum(r.success for r in results) == 1
        assert await repo.count_admins() == 1

    @pytest.mark.asyncio
    async def test_storage_refusal_keeps_admin(self):
        repo = FakeUserRepository([make_user(1, is_admin=True), make_user(2, is_admin=True)])

        async def refuse(user_id):
            return False

        repo.demote_if_not_last_admin = refuse
        result = await DemoteAdminHandler(repo).handle(ChangeAdminCommand(actor_id=1, target_id=2))

        assert result.message == "Cannot demote the last administrator"
        assert repo.get(2).is_admin

    @pytest.mark.asyncio
    async def test_unknown_user(self):
        repo = FakeUserRepository([make_user(1, is_admin=True)])
        result = await DemoteAdminHandler(repo).handle(ChangeAdminCommand(actor_id=1, target_id=7))
        assert result.message == "User not found"


class TestPromoteAdmin:

    @pytest.mark.asyncio
    async def test_promotes(self):
        repo = FakeUserRepository([make_user(1, is_admin=True), make_user(2)])
        result = await PromoteAdminHandler(repo).handle(ChangeAdminCommand(actor_id=1, target_id=2))

        assert result.success
        assert repo.get(2).is_admin

    @pytest.mark.asyncio
    async def test_customer_cannot_promote(self):
        repo = FakeUserRepository([make_user(1), make_user(2)])
        result = await PromoteAdminHandler(repo).handle(ChangeAdminCommand(actor_id=1, target_id=2))
        assert "Only administrators" in result.message
        assert not repo.get(2).is_admin
