"""Domain value objects - pure Python immutable types."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from ..exceptions import DomainValidationError


PRICE_QUANTUM = Decimal("0.01")
MAX_NAME_LENGTH = 100


class OrderStatus(str, Enum):
    """Lifecycle status of an order."""

    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


@dataclass(frozen=True)
class ExecutionID:
    """Unique identifier for unit-of-work tracing."""

    value: UUID

    @classmethod
    def generate(cls) -> "ExecutionID":
        """Generate a new random ExecutionID."""
        return cls(value=uuid4())

    def __str__(self) -> str:
        return str(self.value)


def utcnow() -> datetime:
    """Current time as naive UTC (the store keeps TIMESTAMP without zone)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    """Normalize an aware datetime to naive UTC; naive values pass through."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def next_timestamp(previous: Optional[datetime], now: Optional[datetime] = None) -> datetime:
    """Return a timestamp strictly later than ``previous``."""
    current = to_naive_utc(now) if now is not None else utcnow()
    if previous is not None and current <= previous:
        return previous + timedelta(microseconds=1)
    return current


def require_name(value: str, field_name: str) -> str:
    """Validate a required, non-blank name of bounded length."""
    if not isinstance(value, str) or not value.strip():
        raise DomainValidationError(f"{field_name} must not be blank")
    if len(value) > MAX_NAME_LENGTH:
        raise DomainValidationError(
            f"{field_name} must be at most {MAX_NAME_LENGTH} characters"
        )
    return value


def require_quantity(value: int) -> int:
    """Quantity must be a positive integer."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise DomainValidationError(f"quantity must be an integer, got: {value!r}")
    if value <= 0:
        raise DomainValidationError(f"quantity must be greater than 0, got: {value}")
    return value


def require_price(value) -> Decimal:
    """
    Unit price must be a non-negative amount with at most 2 decimals.

    CRITICAL: floats are converted through ``str`` so 29.99 stays 29.99.
    """
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise DomainValidationError(f"unit_price is not a number: {value!r}") from None

    if not amount.is_finite():
        raise DomainValidationError(f"unit_price must be finite, got: {value}")
    if amount < 0:
        raise DomainValidationError(f"unit_price must not be negative, got: {amount}")
    if amount != amount.quantize(PRICE_QUANTUM):
        raise DomainValidationError(
            f"unit_price allows at most 2 decimal places, got: {amount}"
        )
    return amount.quantize(PRICE_QUANTUM)
