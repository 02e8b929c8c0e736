"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import ClassVar, TypeVar

from storefront.domain.exceptions import ValidationError

_IdT = TypeVar("_IdT", bound="_Identifier")


# ---------------------------------------------------------------------------
# Identifiers
# ---------------------------------------------------------------------------


@dataclass(frozen=True, eq=False)
class _Identifier:
    """Opaque positive-integer identifier.

    ``value`` is ``None`` for a freshly minted id that has not been
    persisted yet.  An unsaved id is never equal to any other id, so two
    new aggregates can't be mistaken for one another.
    """

    value: int | None = None

    label: ClassVar[str] = "Id"

    def __post_init__(self) -> None:
        if self.value is None:
            return
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValidationError(f"{self.label} must be an integer")
        if self.value <= 0:
            raise ValidationError(f"{self.label} must be a positive integer")

    @classmethod
    def new(cls: type[_IdT]) -> _IdT:
        return cls()

    @classmethod
    def parse(cls: type[_IdT], raw: str | int) -> _IdT:
        """Build an id from user input such as a CLI argument."""
        try:
            value = int(str(raw).strip())
        except ValueError as exc:
            raise ValidationError(f"Invalid {cls.label} format") from exc
        return cls(value)

    @property
    def is_new(self) -> bool:
        return self.value is None

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        if self.value is None or other.value is None:  # type: ignore[attr-defined]
            return False
        return self.value == other.value  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.value if self.value is not None else id(self)))

    def __str__(self) -> str:
        return "new" if self.value is None else str(self.value)


@dataclass(frozen=True, eq=False)
class ProductId(_Identifier):
    label: ClassVar[str] = "ProductId"


@dataclass(frozen=True, eq=False)
class UserId(_Identifier):
    label: ClassVar[str] = "UserId"


@dataclass(frozen=True, eq=False)
class OrderId(_Identifier):
    label: ClassVar[str] = "OrderId"


# ---------------------------------------------------------------------------
# Money and counts
# ---------------------------------------------------------------------------

MAX_PRICE = 10_000_000


def _check_int(value: object, message: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(message)


def _as_factor(factor: float | int | str | Decimal) -> Decimal:
    """Coerce a rate/factor to Decimal without float artefacts."""
    try:
        return Decimal(str(factor))
    except (InvalidOperation, ValueError) as exc:
        raise ValidationError(f"Invalid factor: {factor!r}") from exc


@dataclass(frozen=True, order=True)
class Price:
    """Amount in the smallest currency unit (yen).

    Arithmetic never produces a negative price: subtraction below zero is
    an error and discount factors are clamped to ``[0, 1]``.
    """

    value: int

    def __post_init__(self) -> None:
        _check_int(self.value, "Price must be an integer")
        if self.value < 0:
            raise ValidationError("Price must be zero or greater")
        if self.value > MAX_PRICE:
            raise ValidationError(
                f"Price exceeds maximum allowed value ({MAX_PRICE:,})"
            )

    @staticmethod
    def create(value: int) -> Price:
        return Price(value)

    @staticmethod
    def zero() -> Price:
        return Price(0)

    # --- Arithmetic helpers ---------------------------------------------------

    def __add__(self, other: Price) -> Price:
        return Price(self.value + other.value)

    def __sub__(self, other: Price) -> Price:
        result = self.value - other.value
        if result < 0:
            raise ValidationError("Price subtraction would result in a negative amount")
        return Price(result)

    def __mul__(self, factor: int) -> Price:
        if isinstance(factor, bool) or not isinstance(factor, int):
            raise TypeError(f"Can only multiply Price by int, got {type(factor).__name__}")
        if factor < 0:
            raise ValidationError("Multiplier must be non-negative")
        return Price(self.value * factor)

    def apply_discount(self, factor: float | int | str | Decimal) -> Price:
        """Price after removing ``factor`` (clamped to [0, 1]), floored."""
        rate = min(max(_as_factor(factor), Decimal(0)), Decimal(1))
        return Price(math.floor(Decimal(self.value) * (Decimal(1) - rate)))

    def with_tax(self, rate: float | int | str | Decimal) -> Price:
        tax = _as_factor(rate)
        if tax < 0 or tax > 1:
            raise ValidationError("Tax rate must be between 0 and 1")
        return Price(math.floor(Decimal(self.value) * (Decimal(1) + tax)))

    # --- Display --------------------------------------------------------------

    def __str__(self) -> str:
        return f"¥{self.value:,}"


MAX_QUANTITY = 99


@dataclass(frozen=True, order=True)
class Quantity:
    """Number of units on a cart or order line, in ``[1, 99]``."""

    value: int

    def __post_init__(self) -> None:
        _check_int(self.value, "Quantity must be a positive integer")
        if self.value <= 0:
            raise ValidationError("Quantity must be a positive integer")
        if self.value > MAX_QUANTITY:
            raise ValidationError(f"Quantity must not exceed {MAX_QUANTITY}")

    def __add__(self, other: Quantity) -> Quantity:
        return Quantity(self.value + other.value)

    def __sub__(self, other: Quantity) -> Quantity:
        result = self.value - other.value
        if result <= 0:
            raise ValidationError("Resulting quantity must be positive")
        return Quantity(result)

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True, order=True)
class Stock:
    """Units on hand for a product.  Zero means out of stock."""

    value: int

    def __post_init__(self) -> None:
        _check_int(self.value, "Stock must be an integer")
        if self.value < 0:
            raise ValidationError("Stock must be zero or greater")

    def has_at_least(self, units: int) -> bool:
        return self.value >= units

    def decrease(self, units: int) -> Stock:
        if units > self.value:
            raise ValidationError(
                f"Insufficient stock (need {units}, have {self.value})"
            )
        return Stock(self.value - units)

    def increase(self, units: int) -> Stock:
        return Stock(self.value + units)

    def __str__(self) -> str:
        return str(self.value)


# ---------------------------------------------------------------------------
# Formatted strings
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProductCategory:
    value: str

    VALID: ClassVar[tuple[str, ...]] = (
        "electronics",
        "fashion",
        "books",
        "home",
        "sports",
        "food",
    )

    def __post_init__(self) -> None:
        if not isinstance(self.value, str) or not self.value.strip():
            raise ValidationError("Category must be a non-empty string")
        normalized = self.value.strip().lower()
        if normalized not in self.VALID:
            raise ValidationError(
                f"Invalid category: {self.value}. "
                f"Valid categories are: {', '.join(self.VALID)}"
            )
        object.__setattr__(self, "value", normalized)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Email:
    value: str

    _PATTERN: ClassVar[re.Pattern[str]] = re.compile(
        r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
    )

    def __post_init__(self) -> None:
        if not isinstance(self.value, str) or not self.value.strip():
            raise ValidationError("Email must be a non-empty string")
        normalized = self.value.strip().lower()
        if not self._PATTERN.match(normalized):
            raise ValidationError("Invalid email format")
        if len(normalized) > 254:
            raise ValidationError("Email address is too long (max 254 characters)")
        object.__setattr__(self, "value", normalized)

    @property
    def domain(self) -> str:
        return self.value.split("@", 1)[1]

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class PostalCode:
    value: str

    _PATTERN: ClassVar[re.Pattern[str]] = re.compile(r"^[0-9]{3}-[0-9]{4}$")

    def __post_init__(self) -> None:
        if not isinstance(self.value, str) or not self._PATTERN.match(self.value.strip()):
            raise ValidationError("Postal code must be in format NNN-NNNN")
        object.__setattr__(self, "value", self.value.strip())

    def __str__(self) -> str:
        return self.value


class PaymentMethod(Enum):
    CASH_ON_DELIVERY = "cash_on_delivery"
    CREDIT_CARD = "credit_card"
    BANK_TRANSFER = "bank_transfer"

    @classmethod
    def parse(cls, raw: str) -> PaymentMethod:
        try:
            return cls(raw.strip().lower())
        except (ValueError, AttributeError) as exc:
            raise ValidationError("Valid payment method is required") from exc
