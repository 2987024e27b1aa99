"""FastAPI dependencies for dependency injection."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from order_manager.application.services.order_service import OrderApplicationService
from order_manager.infrastructure.database import config as database


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get SQLAlchemy session factory.

    Returns:
        async_sessionmaker instance
    """
    return database.get_session_factory()


def get_order_service(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> OrderApplicationService:
    """Get OrderApplicationService instance.

    Returns:
        OrderApplicationService instance
    """
    return OrderApplicationService(session_factory)
