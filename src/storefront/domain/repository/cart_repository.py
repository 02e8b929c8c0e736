"""Abstract repository for Cart aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.cart import Cart
from storefront.domain.model.value_objects import UserId


class CartRepository(ABC):

    @abstractmethod
    async def find_by_user_id(self, user_id: UserId) -> Cart | None:
        """Return the user's cart, or None if they never added anything."""

    @abstractmethod
    async def create_for_user(self, user_id: UserId) -> Cart:
        """Create and store an empty cart.  Returns the existing one if present."""

    @abstractmethod
    async def save(self, cart: Cart) -> Cart:
        """Conditionally persist ``cart``.

        The write only succeeds if the stored version still equals
        ``cart.version``; otherwise ConcurrencyConflictError is raised.
        Returns the cart with its version bumped.
        """

    @abstractmethod
    async def clear(self, user_id: UserId, expected_version: int) -> None:
        """Remove every item from the user's cart in one conditional write.

        Like ``save``, the write only happens if the stored version still
        equals ``expected_version``; otherwise ConcurrencyConflictError is
        raised and the cart is left as it is.  Bumps the version.
        """
