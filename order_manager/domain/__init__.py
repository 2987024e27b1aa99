"""Domain layer - pure domain models and interfaces."""

from .entities import Order, OrderItem
from .exceptions import (
    DomainValidationError,
    DuplicateOrderItemError,
    NotFoundError,
    OrderItemNotFoundError,
    OrderManagerError,
    OrderNotFoundError,
    StoreError,
)
from .repositories import OrderRepository
from .value_objects import ExecutionID, OrderStatus

__all__ = [
    "DomainValidationError",
    "DuplicateOrderItemError",
    "ExecutionID",
    "NotFoundError",
    "Order",
    "OrderItem",
    "OrderItemNotFoundError",
    "OrderManagerError",
    "OrderNotFoundError",
    "OrderRepository",
    "OrderStatus",
    "StoreError",
]
