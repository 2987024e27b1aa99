"""Application service for Order operations."""

import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import async_sessionmaker

from order_manager.application.dtos.order_dto import (
    CreateOrderRequest,
    OrderDTO,
    OrderItemDetailDTO,
    OrderItemDTO,
    OrderItemRequest,
    UpdateOrderItemRequest,
    UpdateOrderRequest,
)
from order_manager.data.uow import UnitOfWork, create_uow
from order_manager.domain.entities.order import Order, OrderItem
from order_manager.domain.exceptions import OrderItemNotFoundError, OrderNotFoundError
from order_manager.domain.value_objects import OrderStatus, utcnow
from order_manager.infrastructure.logging import log_execution


logger = logging.getLogger(__name__)


class OrderApplicationService:
    """
    Application service for orchestrating order operations.

    Responsibilities:
    - Coordinate domain + persistence
    - Draw the transaction boundary: one UnitOfWork per use case
    - Set timestamps explicitly on create and on every mutation
    - Transform between DTOs and domain entities

    Raises NotFoundError / DomainValidationError / StoreError subclasses;
    mapping them to HTTP statuses is the API layer's job.
    """

    def __init__(self, session_factory: async_sessionmaker) -> None:
        """Initialize order application service.

        Args:
            session_factory: SQLAlchemy async session factory
        """
        self._session_factory = session_factory

    # =========================================================================
    # QUERIES
    # =========================================================================

    @log_execution(logger)
    async def list_orders(self, status: Optional[OrderStatus] = None) -> List[OrderDTO]:
        """List all orders with their items.

        Args:
            status: Only return orders in this status

        Returns:
            List of OrderDTO instances
        """
        uow = create_uow(self._session_factory)
        async with uow:
            orders = await uow.orders.find_all_with_items(status=status)
            return [self._order_to_dto(order) for order in orders]

    @log_execution(logger)
    async def get_order(self, order_id: int) -> OrderDTO:
        """Get order by ID.

        Raises:
            OrderNotFoundError: If no order has that id
        """
        uow = create_uow(self._session_factory)
        async with uow:
            order = await self._load(uow, order_id)
            return self._order_to_dto(order)

    @log_execution(logger)
    async def get_order_item(self, item_id: int) -> OrderItemDetailDTO:
        """Look up one item anywhere in the store.

        Raises:
            OrderItemNotFoundError: If no item has that id
        """
        uow = create_uow(self._session_factory)
        async with uow:
            item = await uow.orders.find_item_by_id(item_id)
            if item is None:
                raise OrderItemNotFoundError(item_id)
            return self._item_to_detail_dto(item)

    @log_execution(logger)
    async def search_order_items(self, product_name: str) -> List[OrderItemDetailDTO]:
        """Items whose product name contains ``product_name``, ignoring case."""
        uow = create_uow(self._session_factory)
        async with uow:
            items = await uow.orders.search_items_by_product_name(product_name)
            return [self._item_to_detail_dto(item) for item in items]

    # =========================================================================
    # ORDER COMMANDS
    # =========================================================================

    @log_execution(logger)
    async def create_order(self, request: CreateOrderRequest) -> OrderDTO:
        """Create a new order together with its initial items.

        Order and items are written in one transaction: either all rows
        exist afterwards or none do.

        Args:
            request: CreateOrderRequest DTO

        Returns:
            OrderDTO with assigned ids and timestamps

        Raises:
            DomainValidationError: If the order or any item is invalid
        """
        now = utcnow()

        # 1. Build the aggregate (validates everything before any I/O)
        order = Order.new(
            customer_name=request.customer_name,
            order_date=request.order_date,
            status=request.status,
            now=now,
        )
        for item_request in request.items:
            order.add_item(self._new_item(item_request, now))

        uow = create_uow(self._session_factory)
        async with uow:
            # 2. Persist order + items
            await uow.orders.save(order)

            # 3. Atomic commit
            await uow.commit()

            logger.info(
                f"[{uow.execution_id}] Created order {order.id} with {len(order.items)} item(s)"
            )
            return self._order_to_dto(order)

    @log_execution(logger)
    async def update_order(self, order_id: int, request: UpdateOrderRequest) -> OrderDTO:
        """Overwrite header fields present in ``request``; never touches items.

        Raises:
            OrderNotFoundError: If no order has that id
            DomainValidationError: If a field is invalid
        """
        uow = create_uow(self._session_factory)
        async with uow:
            order = await self._load(uow, order_id)

            order.update_details(
                customer_name=request.customer_name,
                order_date=request.order_date,
                status=request.status,
            )
            order.touch()

            await uow.orders.save(order)
            await uow.commit()
            return self._order_to_dto(order)

    @log_execution(logger)
    async def delete_order(self, order_id: int) -> None:
        """Delete an order and all of its items.

        Deleting a missing order is an error, not a no-op.

        Raises:
            OrderNotFoundError: If no order has that id
        """
        uow = create_uow(self._session_factory)
        async with uow:
            order = await self._load(uow, order_id)
            await uow.orders.delete(order)
            await uow.commit()
            logger.info(
                f"[{uow.execution_id}] Deleted order {order_id} and {len(order.items)} item(s)"
            )

    # =========================================================================
    # ITEM COMMANDS
    # =========================================================================

    @log_execution(logger)
    async def add_item_to_order(self, order_id: int, request: OrderItemRequest) -> OrderDTO:
        """Add a new item to an existing order.

        Raises:
            OrderNotFoundError: If no order has that id
            DomainValidationError: If the item is invalid
        """
        uow = create_uow(self._session_factory)
        async with uow:
            order = await self._load(uow, order_id)

            now = utcnow()
            order.add_item(self._new_item(request, now))
            order.touch(now)

            await uow.orders.save(order)
            await uow.commit()
            return self._order_to_dto(order)

    @log_execution(logger)
    async def update_order_item(
        self, order_id: int, item_id: int, request: UpdateOrderItemRequest
    ) -> OrderDTO:
        """Overwrite fields of one item of an order.

        Raises:
            OrderNotFoundError: If no order has that id
            OrderItemNotFoundError: If the item is missing or in another order
            DomainValidationError: If a field is invalid
        """
        uow = create_uow(self._session_factory)
        async with uow:
            order = await self._load(uow, order_id)

            now = utcnow()
            order.update_item(
                item_id,
                product_name=request.product_name,
                quantity=request.quantity,
                unit_price=request.unit_price,
                now=now,
            )
            order.touch(now)

            await uow.orders.save(order)
            await uow.commit()
            return self._order_to_dto(order)

    @log_execution(logger)
    async def remove_item_from_order(self, order_id: int, item_id: int) -> OrderDTO:
        """Remove an item from its order and delete its row.

        Raises:
            OrderNotFoundError: If no order has that id
            OrderItemNotFoundError: If the item is missing or in another order
        """
        uow = create_uow(self._session_factory)
        async with uow:
            order = await self._load(uow, order_id)

            order.remove_item(item_id)
            order.touch()

            await uow.orders.save(order)
            await uow.commit()
            return self._order_to_dto(order)

    # =========================================================================
    # HELPERS
    # =========================================================================

    @staticmethod
    async def _load(uow: UnitOfWork, order_id: int) -> Order:
        order = await uow.orders.find_by_id_with_items(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        return order

    @staticmethod
    def _new_item(request: OrderItemRequest, now) -> OrderItem:
        return OrderItem.new(
            product_name=request.product_name,
            quantity=request.quantity,
            unit_price=request.unit_price,
            now=now,
        )

    def _order_to_dto(self, order: Order) -> OrderDTO:
        """Transform Order domain entity to OrderDTO.

        Args:
            order: Order domain entity

        Returns:
            OrderDTO instance
        """
        return OrderDTO(
            id=order.id,
            customer_name=order.customer_name,
            order_date=order.order_date,
            status=order.status,
            created_at=order.created_at,
            updated_at=order.updated_at,
            items=[self._item_to_dto(item) for item in order.items],
        )

    @staticmethod
    def _item_to_dto(item: OrderItem) -> OrderItemDTO:
        return OrderItemDTO(
            id=item.id,
            product_name=item.product_name,
            quantity=item.quantity,
            unit_price=item.unit_price,
            created_at=item.created_at,
            updated_at=item.updated_at,
        )

    @staticmethod
    def _item_to_detail_dto(item: OrderItem) -> OrderItemDetailDTO:
        return OrderItemDetailDTO(
            id=item.id,
            order_id=item.order_id,
            product_name=item.product_name,
            quantity=item.quantity,
            unit_price=item.unit_price,
            created_at=item.created_at,
            updated_at=item.updated_at,
        )
