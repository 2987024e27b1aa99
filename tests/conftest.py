"""Shared fixtures: an in-memory database per test."""

from typing import AsyncGenerator, List

import pytest
import pytest_asyncio
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession

from order_manager.application.services.order_service import OrderApplicationService
from order_manager.data.models.base import Base
from order_manager.infrastructure.database.config import (
    DatabaseSettings,
    create_engine,
    create_session_factory,
)


# Use in-memory SQLite for testing
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def test_engine():
    """Create test database engine with a fresh schema."""
    engine = create_engine(DatabaseSettings(database_url=TEST_DATABASE_URL))

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def test_session_factory(test_engine):
    """Create test session factory."""
    yield create_session_factory(test_engine)


@pytest_asyncio.fixture
async def test_session(test_session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def order_service(test_session_factory) -> OrderApplicationService:
    return OrderApplicationService(session_factory=test_session_factory)


@pytest.fixture
def executed_statements(test_engine) -> List[str]:
    """Every SQL statement sent to the database while the test runs."""
    statements: List[str] = []

    def before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        statements.append(statement)

    event.listen(test_engine.sync_engine, "before_cursor_execute", before_cursor_execute)
    yield statements
    event.remove(test_engine.sync_engine, "before_cursor_execute", before_cursor_execute)
