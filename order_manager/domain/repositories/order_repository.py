"""Repository interfaces for Order aggregate."""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..entities.order import Order, OrderItem
from ..value_objects import OrderStatus


class OrderRepository(ABC):
    """Abstract repository for Order aggregate persistence."""

    @abstractmethod
    async def find_all_with_items(self, status: Optional[OrderStatus] = None) -> List[Order]:
        """Load every order with its items in a single round trip.

        Args:
            status: Only return orders in this status

        Returns:
            List of fully populated Order aggregates
        """
        pass

    @abstractmethod
    async def find_by_id_with_items(self, order_id: int) -> Optional[Order]:
        """Load one order with its items in a single round trip.

        Args:
            order_id: Order identifier

        Returns:
            Order if found, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, order: Order) -> Order:
        """Upsert the order and the current state of its item collection.

        Inserts new items, updates existing ones and deletes rows of items
        no longer in the collection. Assigns ids on the passed aggregate.

        Args:
            order: Order aggregate to persist

        Returns:
            The same Order, with ids assigned
        """
        pass

    @abstractmethod
    async def delete(self, order: Order) -> None:
        """Delete the order and all of its items.

        Args:
            order: Persisted Order aggregate
        """
        pass

    @abstractmethod
    async def find_item_by_id(self, item_id: int) -> Optional[OrderItem]:
        """Look up a single item anywhere in the store."""
        pass

    @abstractmethod
    async def search_items_by_product_name(self, fragment: str) -> List[OrderItem]:
        """Items whose product name contains ``fragment`` (case-insensitive)."""
        pass
