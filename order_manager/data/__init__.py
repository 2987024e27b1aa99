"""Data layer - infrastructure persistence and mapping."""

from .mappers import OrderItemMapper, OrderMapper
from .models import Base, OrderItemModel, OrderModel
from .repositories import SqlAlchemyOrderRepository
from .uow import UnitOfWork, create_uow

__all__ = [
    "Base",
    "create_uow",
    "OrderItemMapper",
    "OrderItemModel",
    "OrderMapper",
    "OrderModel",
    "SqlAlchemyOrderRepository",
    "UnitOfWork",
]
