"""Application services: Promote Admin / Demote Admin use cases.

The store never runs without an administrator.  Demotion is checked by
the UserDomainService first, then applied with the repository's atomic
``demote_if_not_last_admin``: if another demotion got in between, the
write refuses and the last admin stays.
"""

from __future__ import annotations

import structlog

from storefront.application.boundary import run_use_case
from storefront.application.commands import ChangeAdminCommand
from storefront.application.dto import UseCaseResult, to_user_dto
from storefront.domain.model.user import User
from storefront.domain.model.value_objects import UserId
from storefront.domain.repository.user_repository import UserRepository
from storefront.domain.service.user_service import LAST_ADMIN, UserDomainService

logger = structlog.get_logger(__name__)

USER_NOT_FOUND = "User not found"


async def _load_pair(
    user_repo: UserRepository, command: ChangeAdminCommand
) -> tuple[User | None, User | None]:
    actor = await user_repo.find_by_id(UserId.parse(command.actor_id))
    target = await user_repo.find_by_id(UserId.parse(command.target_id))
    return actor, target


class PromoteAdminHandler:

    def __init__(self, user_repo: UserRepository) -> None:
        self._user_repo = user_repo
        self._user_service = UserDomainService(user_repo)

    async def handle(self, command: ChangeAdminCommand) -> UseCaseResult:
        errors = command.validate()
        if errors:
            return UseCaseResult.invalid(errors)
        return await run_use_case(
            "promote_admin", lambda: self._promote(command), "Failed to promote user"
        )

    async def _promote(self, command: ChangeAdminCommand) -> UseCaseResult:
        actor, target = await _load_pair(self._user_repo, command)
        if actor is None or target is None:
            return UseCaseResult.fail(USER_NOT_FOUND)

        await self._user_service.validate_admin_promotion(actor, target)
        saved = await self._user_repo.save(target.promote())
        logger.info(
            "admin_promoted", user_id=saved.id.value, actor_id=actor.id.value
        )
        return UseCaseResult.ok("User promoted to administrator", data=to_user_dto(saved))


class DemoteAdminHandler:

    def __init__(self, user_repo: UserRepository) -> None:
        self._user_repo = user_repo
        self._user_service = UserDomainService(user_repo)

    async def handle(self, command: ChangeAdminCommand) -> UseCaseResult:
        errors = command.validate()
        if errors:
            return UseCaseResult.invalid(errors)
        return await run_use_case(
            "demote_admin", lambda: self._demote(command), "Failed to demote user"
        )

    async def _demote(self, command: ChangeAdminCommand) -> UseCaseResult:
        actor, target = await _load_pair(self._user_repo, command)
        if actor is None or target is None:
            return UseCaseResult.fail(USER_NOT_FOUND)

        await self._user_service.validate_admin_demotion(actor, target)
        if not await self._user_repo.demote_if_not_last_admin(target.id):
            logger.warning("admin_demotion_refused", user_id=target.id.value)
            return UseCaseResult.fail(LAST_ADMIN)

        logger.info("admin_demoted", user_id=target.id.value, actor_id=actor.id.value)
        return UseCaseResult.ok(
            "Administrator demoted", data=to_user_dto(target.demote())
        )
