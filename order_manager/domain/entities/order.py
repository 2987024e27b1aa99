"""
Order aggregate root.

CRITICAL: This file must contain ZERO imports from:
- sqlalchemy
- pydantic
- fastapi

The Order owns its items. An OrderItem carries only the plain ``order_id`` of
its owner, never a reference to the Order object, and the collection can only
be changed through the methods below so the back-link never drifts.
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Iterable, List, Optional, Tuple

from ..exceptions import (
    DomainValidationError,
    DuplicateOrderItemError,
    OrderItemNotFoundError,
)
from ..value_objects import (
    OrderStatus,
    next_timestamp,
    require_name,
    require_price,
    require_quantity,
    to_naive_utc,
)


@dataclass
class OrderItem:
    """Individual line item within an order."""
    product_name: str
    quantity: int
    unit_price: Decimal
    id: Optional[int] = None
    order_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        require_name(self.product_name, "product_name")
        require_quantity(self.quantity)
        self.unit_price = require_price(self.unit_price)

    @classmethod
    def new(
        cls,
        product_name: str,
        quantity: int,
        unit_price,
        now: Optional[datetime] = None,
    ) -> "OrderItem":
        """Build a validated, not yet persisted item with both timestamps set."""
        stamp = next_timestamp(None, now)
        return cls(
            product_name=product_name,
            quantity=quantity,
            unit_price=unit_price,
            created_at=stamp,
            updated_at=stamp,
        )

    def touch(self, now: Optional[datetime] = None) -> None:
        self.updated_at = next_timestamp(self.updated_at, now)


@dataclass
class Order:
    """
    Order aggregate root.

    ``items`` is exposed as a tuple; use ``add_item``/``remove_item`` to change
    membership. Items removed since the last save are remembered in
    ``removed_item_ids`` so the repository can delete their rows.
    """
    customer_name: str
    order_date: Optional[datetime] = None
    status: OrderStatus = OrderStatus.PENDING
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    _items: List[OrderItem] = field(default_factory=list, init=False, repr=False)
    _removed_item_ids: List[int] = field(default_factory=list, init=False, repr=False)

    def __post_init__(self):
        require_name(self.customer_name, "customer_name")
        self.status = self._coerce_status(self.status)
        if self.order_date is not None:
            self.order_date = to_naive_utc(self.order_date)

    # =========================================================================
    # FACTORIES
    # =========================================================================

    @classmethod
    def new(
        cls,
        customer_name: str,
        order_date: Optional[datetime] = None,
        status: Optional[OrderStatus] = None,
        now: Optional[datetime] = None,
    ) -> "Order":
        """
        Build an unpersisted order.

        ``order_date`` defaults to the creation time and ``status`` to PENDING.
        """
        stamp = next_timestamp(None, now)
        return cls(
            customer_name=customer_name,
            order_date=order_date if order_date is not None else stamp,
            status=status if status is not None else OrderStatus.PENDING,
            created_at=stamp,
            updated_at=stamp,
        )

    @classmethod
    def restore(
        cls,
        id: int,
        customer_name: str,
        order_date: datetime,
        status: OrderStatus,
        created_at: datetime,
        updated_at: datetime,
        items: Iterable[OrderItem] = (),
    ) -> "Order":
        """
        Rebuild a persisted order and its items.

        Raises:
            DomainValidationError: If an item points at another order
        """
        order = cls(
            customer_name=customer_name,
            order_date=order_date,
            status=status,
            id=id,
            created_at=created_at,
            updated_at=updated_at,
        )
        for item in items:
            if item.order_id != id:
                raise DomainValidationError(
                    f"OrderItem {item.id} belongs to order {item.order_id}, not {id}"
                )
            order.add_item(item)
        return order

    # =========================================================================
    # COLLECTION
    # =========================================================================

    @property
    def items(self) -> Tuple[OrderItem, ...]:
        return tuple(self._items)

    @property
    def removed_item_ids(self) -> Tuple[int, ...]:
        return tuple(self._removed_item_ids)

    def add_item(self, item: OrderItem) -> OrderItem:
        """
        Append ``item`` and link it to this order in the same step.

        An item whose id is already in the collection is rejected rather
        than replaced.

        Raises:
            DuplicateOrderItemError: If the item id is already present
        """
        if item.id is not None and any(existing.id == item.id for existing in self._items):
            raise DuplicateOrderItemError(item.id, self.id)

        item.order_id = self.id
        self._items.append(item)
        return item

    def find_item(self, item_id: int) -> OrderItem:
        """
        Raises:
            OrderItemNotFoundError: If no item of this order has that id
        """
        for item in self._items:
            if item.id is not None and item.id == item_id:
                return item
        raise OrderItemNotFoundError(item_id, self.id)

    def remove_item(self, item_id: int) -> OrderItem:
        """
        Detach an item and schedule its row for deletion (orphan removal).

        Raises:
            OrderItemNotFoundError: If no item of this order has that id
        """
        item = self.find_item(item_id)
        self._items.remove(item)
        self._removed_item_ids.append(item_id)
        return item

    def update_item(
        self,
        item_id: int,
        product_name: Optional[str] = None,
        quantity: Optional[int] = None,
        unit_price: Optional[Decimal] = None,
        now: Optional[datetime] = None,
    ) -> OrderItem:
        """Overwrite the given fields of one item and touch it."""
        item = self.find_item(item_id)

        # Validate everything before assigning anything
        new_name = require_name(product_name, "product_name") if product_name is not None else item.product_name
        new_quantity = require_quantity(quantity) if quantity is not None else item.quantity
        new_price = require_price(unit_price) if unit_price is not None else item.unit_price

        item.product_name = new_name
        item.quantity = new_quantity
        item.unit_price = new_price
        item.touch(now)
        return item

    # =========================================================================
    # HEADER
    # =========================================================================

    def update_details(
        self,
        customer_name: Optional[str] = None,
        order_date: Optional[datetime] = None,
        status: Optional[OrderStatus] = None,
    ) -> None:
        """Overwrite header fields; items are never touched here."""
        if customer_name is not None:
            require_name(customer_name, "customer_name")
        new_status = self._coerce_status(status) if status is not None else self.status

        if customer_name is not None:
            self.customer_name = customer_name
        if order_date is not None:
            self.order_date = to_naive_utc(order_date)
        self.status = new_status

    def touch(self, now: Optional[datetime] = None) -> None:
        self.updated_at = next_timestamp(self.updated_at, now)

    # =========================================================================
    # PERSISTENCE HOOKS (called by the repository only)
    # =========================================================================

    def assign_id(self, order_id: int) -> None:
        """Record the store-assigned id and propagate it to every item."""
        if self.id is not None and self.id != order_id:
            raise DomainValidationError(
                f"Order id is immutable (is {self.id}, got {order_id})"
            )
        self.id = order_id
        for item in self._items:
            item.order_id = order_id

    def mark_saved(self) -> None:
        """Forget removals once their rows are gone."""
        self._removed_item_ids.clear()

    @staticmethod
    def _coerce_status(value) -> OrderStatus:
        try:
            return OrderStatus(value)
        except ValueError:
            raise DomainValidationError(f"Unknown order status: {value!r}") from None
