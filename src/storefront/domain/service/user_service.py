"""Domain service: administrator rules.

The store must always keep at least one administrator.  The checks here
are read-then-decide; the final demotion goes through the repository's
atomic ``demote_if_not_last_admin`` so two concurrent demotions can't
both pass.
"""

from __future__ import annotations

from storefront.domain.exceptions import BusinessRuleViolation
from storefront.domain.model.user import User
from storefront.domain.repository.user_repository import UserRepository

MAX_ADMINS = 10
LAST_ADMIN = "Cannot demote the last administrator"


class UserDomainService:

    def __init__(self, user_repo: UserRepository) -> None:
        self._user_repo = user_repo

    async def can_demote_from_admin(self, user: User) -> bool:
        return user.is_admin and await self._user_repo.count_admins() > 1

    async def validate_admin_demotion(self, actor: User, target: User) -> None:
        if not actor.is_admin:
            raise BusinessRuleViolation("Only administrators can demote admin users")
        if actor.id == target.id:
            raise BusinessRuleViolation("Cannot demote yourself")
        if not target.is_admin:
            raise BusinessRuleViolation("User is not an administrator")
        if not await self.can_demote_from_admin(target):
            raise BusinessRuleViolation(LAST_ADMIN)

    async def validate_admin_promotion(self, actor: User, target: User) -> None:
        if not actor.is_admin:
            raise BusinessRuleViolation("Only administrators can promote users to admin")
        if actor.id == target.id:
            raise BusinessRuleViolation("Cannot promote yourself")
        if target.is_admin:
            raise BusinessRuleViolation("User is already an administrator")
        if await self._user_repo.count_admins() >= MAX_ADMINS:
            raise BusinessRuleViolation(
                f"Maximum number of administrators reached ({MAX_ADMINS})"
            )
