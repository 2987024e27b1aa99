"""Pytest configuration and fixtures for integration tests."""

from typing import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from apps.api.deps import get_session_factory
from apps.api.main import app


@pytest_asyncio.fixture
async def client(test_session_factory) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client for the API, bound to the in-memory test database."""
    # Override dependency
    app.dependency_overrides[get_session_factory] = lambda: test_session_factory

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    # Cleanup
    app.dependency_overrides.clear()
