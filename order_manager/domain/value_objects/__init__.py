"""Domain value objects."""

from .value_objects import (
    ExecutionID,
    OrderStatus,
    next_timestamp,
    require_name,
    require_price,
    require_quantity,
    to_naive_utc,
    utcnow,
)

__all__ = [
    "ExecutionID",
    "OrderStatus",
    "next_timestamp",
    "require_name",
    "require_price",
    "require_quantity",
    "to_naive_utc",
    "utcnow",
]
