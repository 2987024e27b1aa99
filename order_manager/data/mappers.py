"""Translation between the Order aggregate and its two tables."""

from decimal import Decimal

from order_manager.domain.entities.order import Order, OrderItem
from order_manager.domain.value_objects import OrderStatus

from .models.order_model import OrderItemModel, OrderModel


class OrderItemMapper:
    """OrderItem <-> ``order_items`` row."""

    @staticmethod
    def to_domain(row: OrderItemModel) -> OrderItem:
        return OrderItem(
            id=row.id,
            order_id=row.order_id,
            product_name=row.product_name,
            quantity=row.quantity,
            unit_price=Decimal(str(row.unit_price)),
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    @staticmethod
    def to_persistence(item: OrderItem, order_id: int) -> OrderItemModel:
        """Row for an item that has no id yet, owned by ``order_id``."""
        return OrderItemModel(
            order_id=order_id,
            product_name=item.product_name,
            quantity=item.quantity,
            unit_price=item.unit_price,
            created_at=item.created_at,
            updated_at=item.updated_at,
        )

    @staticmethod
    def update_persistence(item: OrderItem, row: OrderItemModel) -> OrderItemModel:
        """Copy the mutable fields; ``order_id`` and ``created_at`` never change."""
        row.product_name = item.product_name
        row.quantity = item.quantity
        row.unit_price = item.unit_price
        row.updated_at = item.updated_at
        return row


class OrderMapper:
    """Order header <-> ``orders`` row.

    Item rows are handled by the repository, which needs the order id
    before it can write them.
    """

    @staticmethod
    def to_domain(row: OrderModel) -> Order:
        """Rebuild the aggregate; ``row.items`` must already be loaded."""
        return Order.restore(
            id=row.id,
            customer_name=row.customer_name,
            order_date=row.order_date,
            status=OrderStatus(row.status),
            created_at=row.created_at,
            updated_at=row.updated_at,
            items=[OrderItemMapper.to_domain(item_row) for item_row in row.items],
        )

    @staticmethod
    def to_persistence(order: Order) -> OrderModel:
        return OrderModel(
            customer_name=order.customer_name,
            order_date=order.order_date,
            status=order.status.value,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )

    @staticmethod
    def update_persistence(order: Order, row: OrderModel) -> OrderModel:
        row.customer_name = order.customer_name
        row.order_date = order.order_date
        row.status = order.status.value
        row.updated_at = order.updated_at
        return row
