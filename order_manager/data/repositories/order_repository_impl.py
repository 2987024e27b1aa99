"""SQLAlchemy implementation of OrderRepository."""

import logging
from typing import Dict, List, Optional, Tuple

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from order_manager.domain.entities.order import Order, OrderItem
from order_manager.domain.exceptions import (
    DomainValidationError,
    OrderItemNotFoundError,
    OrderNotFoundError,
)
from order_manager.domain.repositories.order_repository import OrderRepository
from order_manager.domain.value_objects import OrderStatus

from ..mappers import OrderItemMapper, OrderMapper
from ..models.order_model import OrderItemModel, OrderModel


logger = logging.getLogger(__name__)


class SqlAlchemyOrderRepository(OrderRepository):
    """Concrete implementation of OrderRepository using SQLAlchemy."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with SQLAlchemy session.

        Args:
            session: SQLAlchemy async session
        """
        self._session = session

    # =========================================================================
    # QUERIES
    # =========================================================================

    async def find_all_with_items(self, status: Optional[OrderStatus] = None) -> List[Order]:
        """Load every order with its items using one LEFT OUTER JOIN.

        Args:
            status: Only return orders in this status

        Returns:
            List of Order aggregates ordered by id
        """
        stmt = (
            select(OrderModel)
            .options(joinedload(OrderModel.items))
            .order_by(OrderModel.id)
            .execution_options(populate_existing=True)
        )
        if status is not None:
            stmt = stmt.where(OrderModel.status == OrderStatus(status).value)

        result = await self._session.execute(stmt)
        models = result.unique().scalars().all()

        return [OrderMapper.to_domain(model) for model in models]

    async def find_by_id_with_items(self, order_id: int) -> Optional[Order]:
        """Load one order with its items using one LEFT OUTER JOIN.

        Args:
            order_id: Order identifier

        Returns:
            Order if found, None otherwise
        """
        result = await self._session.execute(
            select(OrderModel)
            .options(joinedload(OrderModel.items))
            .where(OrderModel.id == order_id)
            .execution_options(populate_existing=True)
        )
        model = result.unique().scalar_one_or_none()

        if not model:
            return None

        return OrderMapper.to_domain(model)

    async def find_item_by_id(self, item_id: int) -> Optional[OrderItem]:
        result = await self._session.execute(
            select(OrderItemModel).where(OrderItemModel.id == item_id)
        )
        model = result.scalar_one_or_none()
        return OrderItemMapper.to_domain(model) if model else None

    async def search_items_by_product_name(self, fragment: str) -> List[OrderItem]:
        result = await self._session.execute(
            select(OrderItemModel)
            .where(OrderItemModel.product_name.icontains(fragment, autoescape=True))
            .order_by(OrderItemModel.id)
        )
        return [OrderItemMapper.to_domain(model) for model in result.scalars().all()]

    # =========================================================================
    # COMMANDS
    # =========================================================================

    async def save(self, order: Order) -> Order:
        """Persist the aggregate: header row plus a diff of the item rows.

        Args:
            order: Order domain aggregate

        Returns:
            The same aggregate with ids assigned

        Raises:
            OrderNotFoundError: If the order has an id but no row
            OrderItemNotFoundError: If an item has an id but no row in this order
        """
        if order.id is None:
            await self._insert(order)
        else:
            await self._update(order)

        order.mark_saved()
        return order

    async def delete(self, order: Order) -> None:
        """Delete item rows, then the order row.

        Args:
            order: Persisted Order aggregate
        """
        await self._session.execute(
            delete(OrderItemModel).where(OrderItemModel.order_id == order.id)
        )
        await self._session.execute(delete(OrderModel).where(OrderModel.id == order.id))
        await self._session.flush()

    # =========================================================================
    # INTERNALS
    # =========================================================================

    async def _insert(self, order: Order) -> None:
        for item in order.items:
            if item.id is not None:
                raise DomainValidationError(
                    f"A new order cannot adopt existing OrderItem {item.id}"
                )

        order_model = OrderMapper.to_persistence(order)
        self._session.add(order_model)
        await self._session.flush()  # Assigns orders.id

        order.assign_id(order_model.id)
        await self._insert_items(order, list(order.items))

    async def _update(self, order: Order) -> None:
        order_model = await self._session.get(OrderModel, order.id)
        if order_model is None:
            raise OrderNotFoundError(order.id)
        OrderMapper.update_persistence(order, order_model)

        result = await self._session.execute(
            select(OrderItemModel).where(OrderItemModel.order_id == order.id)
        )
        stored: Dict[int, OrderItemModel] = {row.id: row for row in result.scalars().all()}

        new_items: List[OrderItem] = []
        for item in order.items:
            if item.id is None:
                new_items.append(item)
                continue
            row = stored.pop(item.id, None)
            if row is None:
                raise OrderItemNotFoundError(item.id, order.id)
            OrderItemMapper.update_persistence(item, row)

        # Whatever is left is no longer in the collection: orphan removal
        for row in stored.values():
            await self._session.delete(row)
        if stored:
            logger.debug(f"Order {order.id}: deleted orphaned items {sorted(stored)}")

        await self._insert_items(order, new_items)

    async def _insert_items(self, order: Order, items: List[OrderItem]) -> None:
        pairs: List[Tuple[OrderItem, OrderItemModel]] = []
        for item in items:
            row = OrderItemMapper.to_persistence(item, order.id)
            self._session.add(row)
            pairs.append((item, row))

        await self._session.flush()  # Assigns order_items.id

        for item, row in pairs:
            item.id = row.id
            item.order_id = order.id
