"""Application service: Register User use case."""

from __future__ import annotations

import structlog

from storefront.application.boundary import run_use_case
from storefront.application.commands import RegisterUserCommand
from storefront.application.dto import UseCaseResult, to_user_dto
from storefront.domain.exceptions import ConcurrencyConflictError
from storefront.domain.model.user import User
from storefront.domain.model.value_objects import Email
from storefront.domain.repository.user_repository import UserRepository

logger = structlog.get_logger(__name__)

EMAIL_TAKEN = "Email address is already registered"


class RegisterUserHandler:

    def __init__(self, user_repo: UserRepository) -> None:
        self._user_repo = user_repo

    async def handle(self, command: RegisterUserCommand) -> UseCaseResult:
        errors = command.validate()
        if errors:
            return UseCaseResult.invalid(errors)
        return await run_use_case(
            "register_user", lambda: self._register(command), "Failed to register user"
        )

    async def _register(self, command: RegisterUserCommand) -> UseCaseResult:
        email = Email(command.email)
        # Fast path only; the storage constraint in create() is authoritative.
        if await self._user_repo.exists_by_email(email):
            return UseCaseResult.fail(EMAIL_TAKEN)

        user = User.create(
            email, command.first_name, command.last_name, is_admin=command.is_admin
        )
        try:
            saved = await self._user_repo.create(user)
        except ConcurrencyConflictError:
            logger.info("user_email_conflict", email_domain=email.domain)
            return UseCaseResult.fail(EMAIL_TAKEN)

        logger.info("user_registered", user_id=saved.id.value, is_admin=saved.is_admin)
        return UseCaseResult.ok("User registered", data=to_user_dto(saved))
