"""Application DTOs for Order operations.

JSON uses camelCase (``customerName``, ``unitPrice``); snake_case field names
are accepted on input as well.
"""

from datetime import datetime
from decimal import Decimal
from typing import Annotated, List, Optional

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

from order_manager.domain.value_objects import OrderStatus


# Prices go out as JSON numbers, the same type clients send
JsonPrice = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class CamelModel(BaseModel):
    """Base DTO with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# REQUESTS
# =============================================================================

class OrderItemRequest(CamelModel):
    """Draft of a new order item. Ids are assigned by the store, never sent."""

    product_name: str = Field(..., min_length=1, max_length=100, description="Product name")
    quantity: int = Field(..., gt=0, description="Quantity ordered")
    unit_price: Decimal = Field(
        ..., ge=0, max_digits=10, decimal_places=2, description="Unit price"
    )

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="forbid", frozen=True
    )


class UpdateOrderItemRequest(CamelModel):
    """Item fields to overwrite; omitted fields keep their value."""

    product_name: Optional[str] = Field(None, min_length=1, max_length=100, description="Product name")
    quantity: Optional[int] = Field(None, gt=0, description="Quantity ordered")
    unit_price: Optional[Decimal] = Field(
        None, ge=0, max_digits=10, decimal_places=2, description="Unit price"
    )


class CreateOrderRequest(CamelModel):
    """Request DTO for creating an order."""

    customer_name: str = Field(..., min_length=1, max_length=100, description="Customer name")
    order_date: Optional[datetime] = Field(None, description="Order date, defaults to now")
    status: Optional[OrderStatus] = Field(None, description="Order status, defaults to PENDING")
    items: List[OrderItemRequest] = Field(default_factory=list, description="Initial order items")

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class UpdateOrderRequest(CamelModel):
    """Header fields to overwrite; items are managed through their own endpoints."""

    customer_name: Optional[str] = Field(None, min_length=1, max_length=100, description="Customer name")
    order_date: Optional[datetime] = Field(None, description="Order date")
    status: Optional[OrderStatus] = Field(None, description="Order status")


# =============================================================================
# RESPONSES
# =============================================================================

class OrderItemDTO(CamelModel):
    """Item as nested in an order; no back-reference to the order."""

    id: int = Field(..., description="Item id")
    product_name: str = Field(..., description="Product name")
    quantity: int = Field(..., description="Quantity ordered")
    unit_price: JsonPrice = Field(..., description="Unit price")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")


class OrderItemDetailDTO(OrderItemDTO):
    """Item looked up on its own, carrying the id of its order."""

    order_id: int = Field(..., description="Owning order id")


class OrderDTO(CamelModel):
    """Response DTO for order details."""

    id: int = Field(..., description="Order id")
    customer_name: str = Field(..., description="Customer name")
    order_date: datetime = Field(..., description="Order date")
    status: OrderStatus = Field(..., description="Order status")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")
    items: List[OrderItemDTO] = Field(default_factory=list, description="Order items")
