"""Read-only item lookups across all orders."""
from typing import List

from fastapi import APIRouter, Depends, Query

from order_manager.application.dtos.order_dto import OrderItemDetailDTO
from order_manager.application.services.order_service import OrderApplicationService

from apps.api.deps import get_order_service


router = APIRouter(prefix="/order-items", tags=["Order Items"])


@router.get(
    "",
    response_model=List[OrderItemDetailDTO],
    summary="Search items by product name",
    description="Case-insensitive substring match on the product name",
)
async def search_order_items(
    product_name: str = Query(..., alias="productName", min_length=1, max_length=100),
    service: OrderApplicationService = Depends(get_order_service),
) -> List[OrderItemDetailDTO]:
    return await service.search_order_items(product_name)


@router.get(
    "/{item_id}",
    response_model=OrderItemDetailDTO,
    summary="Get order item by ID",
    responses={404: {"description": "Item not found"}},
)
async def get_order_item(
    item_id: int,
    service: OrderApplicationService = Depends(get_order_service),
) -> OrderItemDetailDTO:
    return await service.get_order_item(item_id)
