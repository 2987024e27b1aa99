"""
Test settings loading from environment variables.

Both settings sections read prefixed variables (``DB_*`` and ``APP_*``) and
fall back to defaults that run the service on a local SQLite file.
"""
from __future__ import annotations

import pytest
from sqlalchemy.pool import StaticPool

from order_manager.infrastructure.database.config import (
    DatabaseSettings,
    create_engine,
    get_database_settings,
)
from order_manager.settings import AppSettings, get_app_settings


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """No .env file and no cached settings leak into these tests."""
    monkeypatch.chdir(tmp_path)
    for name in ("DB_DATABASE_URL", "DB_ECHO_SQL", "DB_CREATE_TABLES", "APP_LOG_LEVEL", "APP_TITLE"):
        monkeypatch.delenv(name, raising=False)
    get_database_settings.cache_clear()
    get_app_settings.cache_clear()
    yield
    get_database_settings.cache_clear()
    get_app_settings.cache_clear()


def test_database_defaults():
    settings = DatabaseSettings()

    assert settings.database_url == "sqlite+aiosqlite:///./order_manager.db"
    assert settings.echo_sql is False
    assert settings.create_tables is True


def test_database_settings_from_env(monkeypatch):
    monkeypatch.setenv("DB_DATABASE_URL", "postgresql+asyncpg://user:secret@db:5432/orders")
    monkeypatch.setenv("DB_ECHO_SQL", "true")
    monkeypatch.setenv("DB_CREATE_TABLES", "false")

    settings = get_database_settings()

    assert settings.database_url == "postgresql+asyncpg://user:secret@db:5432/orders"
    assert settings.echo_sql is True
    assert settings.create_tables is False


def test_settings_read_dotenv_file(tmp_path):
    (tmp_path / ".env").write_text(
        "DB_DATABASE_URL=sqlite+aiosqlite:///./from_dotenv.db\nAPP_LOG_LEVEL=DEBUG\n",
        encoding="utf-8",
    )

    assert DatabaseSettings().database_url == "sqlite+aiosqlite:///./from_dotenv.db"
    assert AppSettings().log_level == "DEBUG"


def test_app_settings_from_env(monkeypatch):
    monkeypatch.setenv("APP_TITLE", "Orders")
    monkeypatch.setenv("APP_LOG_LEVEL", "WARNING")

    settings = get_app_settings()

    assert settings.title == "Orders"
    assert settings.log_level == "WARNING"
    assert settings.version == "1.0.0"


@pytest.mark.asyncio
async def test_in_memory_sqlite_shares_one_connection():
    engine = create_engine(DatabaseSettings(database_url="sqlite+aiosqlite:///:memory:"))
    try:
        assert isinstance(engine.pool, StaticPool)
    finally:
        await engine.dispose()


@pytest.mark.asyncio
async def test_file_sqlite_uses_regular_pool(tmp_path):
    engine = create_engine(
        DatabaseSettings(database_url=f"sqlite+aiosqlite:///{tmp_path / 'orders.db'}")
    )
    try:
        assert not isinstance(engine.pool, StaticPool)
    finally:
        await engine.dispose()
