"""Typed domain errors.

The API layer maps each family to one HTTP status:
- NotFoundError -> 404
- DomainValidationError -> 400
- StoreError -> 500
"""


class OrderManagerError(Exception):
    """Base class for all order manager errors."""


class NotFoundError(OrderManagerError):
    """Referenced entity does not exist."""


class OrderNotFoundError(NotFoundError):
    """No order with the given id."""

    def __init__(self, order_id: int) -> None:
        self.order_id = order_id
        super().__init__(f"Order not found with id: {order_id}")


class OrderItemNotFoundError(NotFoundError):
    """No item with the given id (or it belongs to another order)."""

    def __init__(self, item_id: int, order_id: int = None) -> None:
        self.item_id = item_id
        self.order_id = order_id
        if order_id is None:
            message = f"OrderItem not found with id: {item_id}"
        else:
            message = f"OrderItem not found with id: {item_id} in order {order_id}"
        super().__init__(message)


class DomainValidationError(OrderManagerError, ValueError):
    """Input violates an aggregate rule."""


class DuplicateOrderItemError(DomainValidationError):
    """Item id already present in the order's collection."""

    def __init__(self, item_id: int, order_id: int = None) -> None:
        self.item_id = item_id
        self.order_id = order_id
        super().__init__(f"OrderItem {item_id} is already part of order {order_id}")


class StoreError(OrderManagerError):
    """Transaction or connectivity failure in the backing store."""
