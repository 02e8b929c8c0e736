"""Abstract repository for User aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.user import User
from storefront.domain.model.value_objects import Email, UserId


class UserRepository(ABC):

    @abstractmethod
    async def find_by_id(self, user_id: UserId) -> User | None:
        """Return a user by ID, or None if not found."""

    @abstractmethod
    async def exists_by_email(self, email: Email) -> bool:
        """True if a user already registered ``email``."""

    @abstractmethod
    async def create(self, user: User) -> User:
        """Insert a new user.

        Email uniqueness is a storage constraint: a duplicate raises
        ConcurrencyConflictError even if an earlier existence check passed.
        """

    @abstractmethod
    async def save(self, user: User) -> User:
        """Replace a stored user."""

    @abstractmethod
    async def count_admins(self) -> int:
        """Number of users with the administrator flag."""

    @abstractmethod
    async def demote_if_not_last_admin(self, user_id: UserId) -> bool:
        """Atomically clear the admin flag unless this would leave zero admins.

        Returns False (and changes nothing) when the user is the last admin.
        """
