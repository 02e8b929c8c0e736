"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.  Every handler answers
with a UseCaseResult; the DTO, when there is one, rides in ``data``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from storefront.domain.model.cart import Cart
from storefront.domain.model.order import Order
from storefront.domain.model.product import Product
from storefront.domain.model.user import User

_TIMESTAMP = "%Y-%m-%d %H:%M UTC"


@dataclass(frozen=True)
class UseCaseResult:
    """Outcome of a use case.

    ``critical`` is only set when the store may be left inconsistent and
    an operator has to look at it.
    """

    success: bool
    message: str
    data: Any = None
    errors: tuple[str, ...] = ()
    critical: bool = False

    @classmethod
    def ok(cls, message: str, data: Any = None) -> UseCaseResult:
        return cls(success=True, message=message, data=data)

    @classmethod
    def fail(cls, message: str, critical: bool = False) -> UseCaseResult:
        return cls(success=False, message=message, critical=critical)

    @classmethod
    def invalid(
        cls, errors: list[str], message: str = "Validation failed"
    ) -> UseCaseResult:
        return cls(success=False, message=message, errors=tuple(errors))


# ── Catalog ──────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ProductDTO:
    id: int
    name: str
    price: str  # formatted, e.g. "¥1,000"
    price_amount: int
    stock: int
    category: str
    is_active: bool
    is_available: bool
    description: str | None = None


def to_product_dto(product: Product) -> ProductDTO:
    return ProductDTO(
        id=product.id.value,  # type: ignore[arg-type]
        name=product.name,
        price=str(product.price),
        price_amount=product.price.value,
        stock=product.stock.value,
        category=str(product.category),
        is_active=product.is_active,
        is_available=product.is_available_for_sale(),
        description=product.description,
    )


# ── Cart ─────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class CartLineDTO:
    product_id: int
    quantity: int
    product_name: str | None
    unit_price: str | None
    subtotal: str | None
    is_available: bool
    problem: str | None = None


@dataclass(frozen=True)
class CartDTO:
    user_id: int
    items: list[CartLineDTO]
    total_items: int
    total_amount: str
    is_empty: bool
    has_unavailable_items: bool


def to_cart_dto(
    cart: Cart, products: list[Product], problems: dict[int, str] | None = None
) -> CartDTO:
    """Render a cart against the current catalog.

    Lines whose product vanished keep their quantity but carry no price,
    and don't count towards the total.
    """
    problems = problems or {}
    by_id = {p.id.value: p for p in products}
    lines: list[CartLineDTO] = []
    total = 0
    for item in cart.items:
        key = item.product_id.value
        product = by_id.get(key)
        problem = problems.get(key)  # type: ignore[arg-type]
        if product is None:
            lines.append(
                CartLineDTO(
                    product_id=key,  # type: ignore[arg-type]
                    quantity=item.quantity.value,
                    product_name=None,
                    unit_price=None,
                    subtotal=None,
                    is_available=False,
                    problem=problem,
                )
            )
            continue
        subtotal = product.price * item.quantity.value
        total += subtotal.value
        lines.append(
            CartLineDTO(
                product_id=key,  # type: ignore[arg-type]
                quantity=item.quantity.value,
                product_name=product.name,
                unit_price=str(product.price),
                subtotal=str(subtotal),
                is_available=problem is None,
                problem=problem,
            )
        )
    return CartDTO(
        user_id=cart.user_id.value,  # type: ignore[arg-type]
        items=lines,
        total_items=cart.total_items,
        total_amount=f"¥{total:,}",
        is_empty=cart.is_empty,
        has_unavailable_items=bool(problems),
    )


# ── Orders ───────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class OrderLineItemDTO:
    product_id: int
    product_name: str
    quantity: int
    unit_price: str
    line_total: str


@dataclass(frozen=True)
class OrderDTO:
    id: int
    user_id: int
    status: str
    items: list[OrderLineItemDTO]
    total: str
    total_amount: int
    shipping_address: str
    payment_method: str
    created_at: str
    notes: str | None = None


def to_order_dto(order: Order) -> OrderDTO:
    return OrderDTO(
        id=order.id.value,  # type: ignore[arg-type]
        user_id=order.user_id.value,  # type: ignore[arg-type]
        status=order.status.value,
        items=[
            OrderLineItemDTO(
                product_id=item.product_id.value,  # type: ignore[arg-type]
                product_name=item.product_name_at_purchase,
                quantity=item.quantity.value,
                unit_price=str(item.price_at_purchase),
                line_total=str(item.subtotal),
            )
            for item in order.items
        ],
        total=str(order.total_amount),
        total_amount=order.total_amount.value,
        shipping_address=str(order.shipping_address),
        payment_method=order.payment_method.value,
        created_at=order.created_at.strftime(_TIMESTAMP),
        notes=order.notes,
    )


# ── Users ────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class UserDTO:
    id: int
    email: str
    full_name: str
    is_admin: bool


def to_user_dto(user: User) -> UserDTO:
    return UserDTO(
        id=user.id.value,  # type: ignore[arg-type]
        email=str(user.email),
        full_name=user.full_name,
        is_admin=user.is_admin,
    )
