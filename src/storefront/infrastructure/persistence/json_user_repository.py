"""JSON-file-backed implementation of UserRepository."""

from __future__ import annotations

import asyncio
from datetime import datetime
from pathlib import Path

from storefront.domain.exceptions import ConcurrencyConflictError, EntityNotFoundError
from storefront.domain.model.user import User
from storefront.domain.model.value_objects import Email, UserId
from storefront.domain.repository.user_repository import UserRepository
from storefront.infrastructure.persistence.json_store import JsonFileStore, next_numeric_id

EMAIL_TAKEN = "Email address is already registered"


class JsonUserRepository(UserRepository):

    def __init__(self, file_path: Path) -> None:
        self._store = JsonFileStore(file_path)
        self._lock = asyncio.Lock()

    async def find_by_id(self, user_id: UserId) -> User | None:
        for raw in self._store.load():
            if raw["id"] == user_id.value:
                return self._to_domain(raw)
        return None

    async def exists_by_email(self, email: Email) -> bool:
        return any(raw["email"] == email.value for raw in self._store.load())

    async def create(self, user: User) -> User:
        async with self._lock:
            users = self._store.load()
            if any(raw["email"] == user.email.value for raw in users):
                raise ConcurrencyConflictError(EMAIL_TAKEN)
            saved = user.with_id(UserId(next_numeric_id(users)))
            users.append(self._to_raw(saved))
            self._store.persist(users)
            return saved

    async def save(self, user: User) -> User:
        async with self._lock:
            users = self._store.load()
            if any(
                raw["email"] == user.email.value and raw["id"] != user.id.value
                for raw in users
            ):
                raise ConcurrencyConflictError(EMAIL_TAKEN)
            for i, raw in enumerate(users):
                if raw["id"] == user.id.value:
                    users[i] = self._to_raw(user)
                    self._store.persist(users)
                    return user
            raise EntityNotFoundError(f"User not found: {user.id}")

    async def count_admins(self) -> int:
        return sum(1 for raw in self._store.load() if raw["is_admin"])

    async def demote_if_not_last_admin(self, user_id: UserId) -> bool:
        async with self._lock:
            users = self._store.load()
            for i, raw in enumerate(users):
                if raw["id"] != user_id.value:
                    continue
                if not raw["is_admin"]:
                    return True
                if sum(1 for r in users if r["is_admin"]) <= 1:
                    return False
                users[i] = self._to_raw(self._to_domain(raw).demote())
                self._store.persist(users)
                return True
            raise EntityNotFoundError(f"User not found: {user_id}")

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(user: User) -> dict:
        return {
            "id": user.id.value,
            "email": user.email.value,
            "first_name": user.first_name,
            "last_name": user.last_name,
            "is_admin": user.is_admin,
            "created_at": user.created_at.isoformat(),
            "updated_at": user.updated_at.isoformat(),
        }

    @staticmethod
    def _to_domain(raw: dict) -> User:
        return User(
            id=UserId(raw["id"]),
            email=Email(raw["email"]),
            first_name=raw["first_name"],
            last_name=raw["last_name"],
            is_admin=raw.get("is_admin", False),
            created_at=datetime.fromisoformat(raw["created_at"]),
            updated_at=datetime.fromisoformat(raw["updated_at"]),
        )
