"""Application DTOs."""

from .order_dto import (
    CreateOrderRequest,
    OrderDTO,
    OrderItemDetailDTO,
    OrderItemDTO,
    OrderItemRequest,
    UpdateOrderItemRequest,
    UpdateOrderRequest,
)

__all__ = [
    "CreateOrderRequest",
    "OrderDTO",
    "OrderItemDetailDTO",
    "OrderItemDTO",
    "OrderItemRequest",
    "UpdateOrderItemRequest",
    "UpdateOrderRequest",
]
