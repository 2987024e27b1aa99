"""Unit of Work: one session, one transaction, one ExecutionID per use case."""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from order_manager.domain.exceptions import StoreError
from order_manager.domain.value_objects import ExecutionID

from .repositories.order_repository_impl import SqlAlchemyOrderRepository


logger = logging.getLogger(__name__)


class UnitOfWork:
    """
    Transaction scope for the order aggregate.

    Usage:
        async with create_uow(session_factory) as uow:
            order = await uow.orders.find_by_id_with_items(1)
            ...
            await uow.commit()

    Nothing is written unless ``commit()`` is called. Leaving the block with
    an exception (cancellation included) rolls the session back, and driver
    failures surface as ``StoreError``.
    """

    def __init__(self, session_factory: async_sessionmaker) -> None:
        self._session_factory = session_factory
        self._session: Optional[AsyncSession] = None
        self._execution_id: Optional[ExecutionID] = None
        self._orders: Optional[SqlAlchemyOrderRepository] = None

    async def __aenter__(self) -> "UnitOfWork":
        self._session = self._session_factory()
        self._execution_id = ExecutionID.generate()
        logger.debug(f"[{self._execution_id}] Unit of work opened")
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        session, self._session, self._orders = self._session, None, None
        try:
            if exc_type is not None:
                await session.rollback()
        finally:
            await session.close()

        if isinstance(exc_val, SQLAlchemyError):
            logger.error(f"[{self._execution_id}] Store failure, rolled back: {exc_val}")
            raise StoreError(str(exc_val)) from exc_val

    def _active_session(self) -> AsyncSession:
        if self._session is None:
            raise RuntimeError("UnitOfWork is not active; use it as 'async with'.")
        return self._session

    @property
    def execution_id(self) -> ExecutionID:
        """Trace id shared by every log line of this use case."""
        if self._execution_id is None:
            raise RuntimeError("UnitOfWork is not active; use it as 'async with'.")
        return self._execution_id

    @property
    def orders(self) -> SqlAlchemyOrderRepository:
        """Order repository bound to this unit's session, created on first use."""
        if self._orders is None:
            self._orders = SqlAlchemyOrderRepository(self._active_session())
        return self._orders

    async def commit(self) -> None:
        await self._active_session().commit()

    async def rollback(self) -> None:
        await self._active_session().rollback()


def create_uow(session_factory: async_sessionmaker) -> UnitOfWork:
    """Create a new, not yet entered, Unit of Work."""
    return UnitOfWork(session_factory)
