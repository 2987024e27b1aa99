"""Repository implementations."""

from .order_repository_impl import SqlAlchemyOrderRepository

__all__ = ["SqlAlchemyOrderRepository"]
