"""Order aggregate: an immutable purchase snapshot.

An Order is created once, from a cart, and its line items never change
afterwards: names and prices are copied from the catalog at the moment of
checkout.  The status field is the only thing that may move.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum

from storefront.domain.exceptions import BusinessRuleViolation, ValidationError
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


class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

    def allowed_transitions(self) -> tuple[OrderStatus, ...]:
        return _TRANSITIONS[self]

    def can_transition_to(self, target: OrderStatus) -> bool:
        return target in _TRANSITIONS[self]

    @property
    def is_completed(self) -> bool:
        return self in (OrderStatus.DELIVERED, OrderStatus.CANCELLED)


_TRANSITIONS: dict[OrderStatus, tuple[OrderStatus, ...]] = {
    OrderStatus.PENDING: (OrderStatus.CONFIRMED, OrderStatus.CANCELLED),
    OrderStatus.CONFIRMED: (OrderStatus.SHIPPED, OrderStatus.CANCELLED),
    OrderStatus.SHIPPED: (OrderStatus.DELIVERED,),
    OrderStatus.DELIVERED: (),
    OrderStatus.CANCELLED: (),
}


@dataclass(frozen=True)
class OrderItem:
    """Captures the name and price of a product at checkout time."""

    product_id: ProductId
    product_name_at_purchase: str
    price_at_purchase: Price  # locked at order-creation time
    quantity: Quantity

    @property
    def subtotal(self) -> Price:
        return self.price_at_purchase * self.quantity.value


@dataclass(frozen=True)
class ShippingAddress:
    postal_code: PostalCode
    prefecture: str
    city: str
    address_line1: str
    address_line2: str | None = None

    def __post_init__(self) -> None:
        for label, value in (
            ("Prefecture", self.prefecture),
            ("City", self.city),
            ("Address line 1", self.address_line1),
        ):
            if not value or not value.strip():
                raise ValidationError(f"{label} is required")

    def __str__(self) -> str:
        parts = [str(self.postal_code), self.prefecture, self.city, self.address_line1]
        if self.address_line2:
            parts.append(self.address_line2)
        return " ".join(parts)


@dataclass(frozen=True)
class ContactInfo:
    email: Email | None = None
    phone: str | None = None

    def __post_init__(self) -> None:
        if self.phone is not None and len(self.phone) > 20:
            raise ValidationError("Contact phone must be 20 characters or less")


MAX_NOTES_LENGTH = 1000


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Order:
    """Aggregate root for purchase orders.

    Use ``Order.create()`` for new orders: it computes the total from the
    snapshot items.  The constructor is intentionally simple so the
    repository can reconstitute persisted orders without recomputing.
    """

    id: OrderId
    user_id: UserId
    items: tuple[OrderItem, ...]
    shipping_address: ShippingAddress
    payment_method: PaymentMethod
    total_amount: Price
    contact: ContactInfo = field(default_factory=ContactInfo)
    notes: str | None = None
    status: OrderStatus = OrderStatus.PENDING
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        user_id: UserId,
        items: list[OrderItem],
        shipping_address: ShippingAddress,
        payment_method: PaymentMethod,
        contact: ContactInfo | None = None,
        notes: str | None = None,
    ) -> Order:
        if notes is not None and len(notes) > MAX_NOTES_LENGTH:
            raise ValidationError(f"Notes must be {MAX_NOTES_LENGTH} characters or less")

        total = Price.zero()
        for item in items:
            total = total + item.subtotal

        return Order(
            id=OrderId.new(),
            user_id=user_id,
            items=tuple(items),
            shipping_address=shipping_address,
            payment_method=payment_method,
            total_amount=total,
            contact=contact or ContactInfo(),
            notes=notes.strip() if notes else None,
        )

    # --- Computed properties --------------------------------------------------

    @property
    def total_quantity(self) -> int:
        return sum(item.quantity.value for item in self.items)

    def recalculate_total(self) -> Price:
        total = Price.zero()
        for item in self.items:
            total = total + item.subtotal
        return total

    def belongs_to(self, user_id: UserId) -> bool:
        return self.user_id == user_id

    # --- State transitions ----------------------------------------------------

    def with_id(self, order_id: OrderId) -> Order:
        return replace(self, id=order_id)

    def with_status(self, status: OrderStatus) -> Order:
        if not self.status.can_transition_to(status):
            allowed = ", ".join(s.value for s in self.status.allowed_transitions()) or "none"
            raise BusinessRuleViolation(
                f"Cannot transition from {self.status.value} to {status.value}. "
                f"Valid transitions: {allowed}"
            )
        return replace(self, status=status, updated_at=_now())

    def cancel(self) -> Order:
        return self.with_status(OrderStatus.CANCELLED)
