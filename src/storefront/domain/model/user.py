"""User aggregate.

Only the parts of a user the core cares about: identity, contact email
and the administrator flag guarded by the last-admin rule.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import Email, UserId

MAX_NAME_LENGTH = 50


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class User:

    id: UserId
    email: Email
    first_name: str
    last_name: str
    is_admin: bool = False
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)

    @staticmethod
    def create(
        email: Email, first_name: str, last_name: str, is_admin: bool = False
    ) -> User:
        for label, value in (("First name", first_name), ("Last name", last_name)):
            if not value or not value.strip():
                raise ValidationError(f"{label} is required")
            if len(value) > MAX_NAME_LENGTH:
                raise ValidationError(
                    f"{label} must be {MAX_NAME_LENGTH} characters or less"
                )
        return User(
            id=UserId.new(),
            email=email,
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            is_admin=is_admin,
        )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def with_id(self, user_id: UserId) -> User:
        return replace(self, id=user_id)

    def promote(self) -> User:
        return replace(self, is_admin=True, updated_at=_now())

    def demote(self) -> User:
        return replace(self, is_admin=False, updated_at=_now())
