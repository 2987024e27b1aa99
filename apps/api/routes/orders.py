"""
Orders management endpoints.

Provides CRUD operations for orders and the items they own. Domain errors
propagate to the exception handlers registered in ``apps.api.main``.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from order_manager.application.dtos.order_dto import (
    CreateOrderRequest,
    OrderDTO,
    OrderItemRequest,
    UpdateOrderItemRequest,
    UpdateOrderRequest,
)
from order_manager.application.services.order_service import OrderApplicationService
from order_manager.domain.value_objects import OrderStatus

from apps.api.deps import get_order_service


logger = logging.getLogger(__name__)
router = APIRouter(prefix="/orders", tags=["Orders"])


# =============================================================================
# ORDERS
# =============================================================================

@router.get(
    "",
    response_model=List[OrderDTO],
    summary="Get all orders",
    description="Retrieve all orders with their items",
)
async def list_orders(
    order_status: Optional[OrderStatus] = Query(
        default=None, alias="status", description="Only orders in this status"
    ),
    service: OrderApplicationService = Depends(get_order_service),
) -> List[OrderDTO]:
    return await service.list_orders(status=order_status)


@router.get(
    "/{order_id}",
    response_model=OrderDTO,
    summary="Get order by ID",
    description="Retrieve a specific order with its items",
    responses={404: {"description": "Order not found"}},
)
async def get_order(
    order_id: int,
    service: OrderApplicationService = Depends(get_order_service),
) -> OrderDTO:
    return await service.get_order(order_id)


@router.post(
    "",
    response_model=OrderDTO,
    status_code=status.HTTP_201_CREATED,
    summary="Create order",
    description="Create a new order with items",
    responses={400: {"description": "Invalid request data"}},
)
async def create_order(
    request: CreateOrderRequest,
    service: OrderApplicationService = Depends(get_order_service),
) -> OrderDTO:
    """Create a new order.

    **Body:**
    - `customerName`: required, non-blank
    - `orderDate`: optional, defaults to now
    - `status`: optional, defaults to PENDING
    - `items`: optional list of `{productName, quantity, unitPrice}`
    """
    return await service.create_order(request)


@router.put(
    "/{order_id}",
    response_model=OrderDTO,
    summary="Update order",
    description="Update customer name, order date and status of an order",
    responses={400: {"description": "Invalid request data"}, 404: {"description": "Order not found"}},
)
async def update_order(
    order_id: int,
    request: UpdateOrderRequest,
    service: OrderApplicationService = Depends(get_order_service),
) -> OrderDTO:
    return await service.update_order(order_id, request)


@router.delete(
    "/{order_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete order",
    description="Delete an order and all its items",
    responses={404: {"description": "Order not found"}},
)
async def delete_order(
    order_id: int,
    service: OrderApplicationService = Depends(get_order_service),
) -> Response:
    await service.delete_order(order_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# ITEMS OF AN ORDER
# =============================================================================

@router.post(
    "/{order_id}/items",
    response_model=OrderDTO,
    status_code=status.HTTP_201_CREATED,
    summary="Add item to order",
    description="Add a new item to an existing order",
    responses={400: {"description": "Invalid request data"}, 404: {"description": "Order not found"}},
)
async def add_item_to_order(
    order_id: int,
    request: OrderItemRequest,
    service: OrderApplicationService = Depends(get_order_service),
) -> OrderDTO:
    return await service.add_item_to_order(order_id, request)


@router.put(
    "/{order_id}/items/{item_id}",
    response_model=OrderDTO,
    summary="Update order item",
    description="Update an item in an order",
    responses={400: {"description": "Invalid request data"}, 404: {"description": "Order or item not found"}},
)
async def update_order_item(
    order_id: int,
    item_id: int,
    request: UpdateOrderItemRequest,
    service: OrderApplicationService = Depends(get_order_service),
) -> OrderDTO:
    return await service.update_order_item(order_id, item_id, request)


@router.delete(
    "/{order_id}/items/{item_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove item from order",
    description="Remove an item from an order; the item is deleted",
    responses={404: {"description": "Order or item not found"}},
)
async def remove_item_from_order(
    order_id: int,
    item_id: int,
    service: OrderApplicationService = Depends(get_order_service),
) -> Response:
    await service.remove_item_from_order(order_id, item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
