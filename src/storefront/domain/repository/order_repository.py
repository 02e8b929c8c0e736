"""Abstract repository for Order aggregate.

Orders are append-only: ``create`` inserts, and ``update_status`` is the
only permitted change afterwards.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.order import Order, OrderStatus
from storefront.domain.model.value_objects import OrderId, UserId
from storefront.domain.repository.criteria import OrderSearchCriteria


class OrderRepository(ABC):

    @abstractmethod
    async def create(self, order: Order) -> Order:
        """Persist a new order and return it with its assigned ID."""

    @abstractmethod
    async def find_by_id(self, order_id: OrderId) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    async def find_by_user_id(
        self, user_id: UserId, criteria: OrderSearchCriteria | None = None
    ) -> list[Order]:
        """Return one page of the user's orders, newest first."""

    @abstractmethod
    async def update_status(self, order_id: OrderId, status: OrderStatus) -> Order:
        """Move an order to ``status``.  Raises EntityNotFoundError if absent."""

    @abstractmethod
    async def count(self) -> int:
        """Total number of orders."""

    @abstractmethod
    async def count_by_user_id(self, user_id: UserId) -> int:
        """Number of orders placed by ``user_id``."""

    @abstractmethod
    async def count_by_status(self, status: OrderStatus) -> int:
        """Number of orders currently in ``status``."""
