"""JSON-file-backed implementation of OrderRepository."""

from __future__ import annotations

import asyncio
from datetime import datetime
from pathlib import Path

from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.model.order import (
    ContactInfo,
    Order,
    OrderItem,
    OrderStatus,
    ShippingAddress,
)
from storefront.domain.model.value_objects import (
    Email,
    OrderId,
    PaymentMethod,
    PostalCode,
    Price,
    ProductId,
    Quantity,
    UserId,
)
from storefront.domain.repository.criteria import OrderSearchCriteria
from storefront.domain.repository.order_repository import OrderRepository
from storefront.infrastructure.persistence.json_store import JsonFileStore, next_numeric_id


class JsonOrderRepository(OrderRepository):

    def __init__(self, file_path: Path) -> None:
        self._store = JsonFileStore(file_path)
        self._lock = asyncio.Lock()

    # --- OrderRepository interface --------------------------------------------

    async def create(self, order: Order) -> Order:
        async with self._lock:
            orders = self._store.load()
            saved = order.with_id(OrderId(next_numeric_id(orders)))
            orders.append(self._to_raw(saved))
            self._store.persist(orders)
            return saved

    async def find_by_id(self, order_id: OrderId) -> Order | None:
        for raw in self._store.load():
            if raw["id"] == order_id.value:
                return self._to_domain(raw)
        return None

    async def find_by_user_id(
        self, user_id: UserId, criteria: OrderSearchCriteria | None = None
    ) -> list[Order]:
        criteria = criteria or OrderSearchCriteria()
        status = criteria.filters.status
        orders = [
            self._to_domain(raw)
            for raw in self._store.load()
            if raw["user_id"] == user_id.value
            and (status is None or raw["status"] == status.value)
        ]
        orders.sort(key=lambda o: (o.created_at, o.id.value), reverse=True)
        page = criteria.pagination
        return orders[page.offset : page.offset + page.per_page]

    async def update_status(self, order_id: OrderId, status: OrderStatus) -> Order:
        async with self._lock:
            orders = self._store.load()
            for i, raw in enumerate(orders):
                if raw["id"] == order_id.value:
                    updated = self._to_domain(raw).with_status(status)
                    orders[i] = self._to_raw(updated)
                    self._store.persist(orders)
                    return updated
            raise EntityNotFoundError(f"Order not found: {order_id}")

    async def count(self) -> int:
        return len(self._store.load())

    async def count_by_user_id(self, user_id: UserId) -> int:
        return sum(1 for raw in self._store.load() if raw["user_id"] == user_id.value)

    async def count_by_status(self, status: OrderStatus) -> int:
        return sum(1 for raw in self._store.load() if raw["status"] == status.value)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: Order) -> dict:
        address = order.shipping_address
        return {
            "id": order.id.value,
            "user_id": order.user_id.value,
            "status": order.status.value,
            "payment_method": order.payment_method.value,
            "total_amount": order.total_amount.value,
            "shipping_address": {
                "postal_code": address.postal_code.value,
                "prefecture": address.prefecture,
                "city": address.city,
                "address_line1": address.address_line1,
                "address_line2": address.address_line2,
            },
            "contact": {
                "email": order.contact.email.value if order.contact.email else None,
                "phone": order.contact.phone,
            },
            "notes": order.notes,
            "created_at": order.created_at.isoformat(),
            "updated_at": order.updated_at.isoformat(),
            "items": [
                {
                    "product_id": item.product_id.value,
                    "product_name": item.product_name_at_purchase,
                    "price": item.price_at_purchase.value,
                    "quantity": item.quantity.value,
                }
                for item in order.items
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        address = raw["shipping_address"]
        contact = raw.get("contact") or {}
        return Order(
            id=OrderId(raw["id"]),
            user_id=UserId(raw["user_id"]),
            items=tuple(
                OrderItem(
                    product_id=ProductId(i["product_id"]),
                    product_name_at_purchase=i["product_name"],
                    price_at_purchase=Price(i["price"]),
                    quantity=Quantity(i["quantity"]),
                )
                for i in raw["items"]
            ),
            shipping_address=ShippingAddress(
                postal_code=PostalCode(address["postal_code"]),
                prefecture=address["prefecture"],
                city=address["city"],
                address_line1=address["address_line1"],
                address_line2=address.get("address_line2"),
            ),
            payment_method=PaymentMethod(raw["payment_method"]),
            # stored total is authoritative; it is never recomputed on load
            total_amount=Price(raw["total_amount"]),
            contact=ContactInfo(
                email=Email(contact["email"]) if contact.get("email") else None,
                phone=contact.get("phone"),
            ),
            notes=raw.get("notes"),
            status=OrderStatus(raw["status"]),
            created_at=datetime.fromisoformat(raw["created_at"]),
            updated_at=datetime.fromisoformat(raw["updated_at"]),
        )
