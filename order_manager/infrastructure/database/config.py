"""
Database configuration.

Manages database connection settings, engine creation and schema setup.
"""
import logging
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool


logger = logging.getLogger(__name__)


class DatabaseSettings(BaseSettings):
    """
    Connection settings, read from ``DB_*`` environment variables or .env.
    """

    # Database URL (use postgresql+asyncpg://... in production)
    database_url: str = "sqlite+aiosqlite:///./order_manager.db"

    # Connection pool settings (ignored for SQLite)
    pool_size: int = 10
    max_overflow: int = 20
    pool_timeout: int = 30
    pool_recycle: int = 3600  # 1 hour

    # Echo SQL (for debugging)
    echo_sql: bool = False

    # Run CREATE TABLE IF NOT EXISTS on startup
    create_tables: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="DB_",
        extra="ignore",  # Ignore extra fields from .env
    )


@lru_cache()
def get_database_settings() -> DatabaseSettings:
    """Return cached database settings."""
    return DatabaseSettings()


# =============================================================================
# ENGINE CREATION
# =============================================================================

def _is_sqlite(url: str) -> bool:
    return make_url(url).get_backend_name() == "sqlite"


def enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """SQLite ignores FOREIGN KEY / ON DELETE CASCADE unless asked per connection."""

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def create_engine(settings: Optional[DatabaseSettings] = None) -> AsyncEngine:
    """
    Create async SQLAlchemy engine.

    Args:
        settings: Database settings, defaults to the cached global ones

    Returns:
        Configured async engine
    """
    settings = settings or get_database_settings()
    url = make_url(settings.database_url)
    logger.info(f"Creating database engine: {url.render_as_string(hide_password=True)}")

    if _is_sqlite(settings.database_url):
        options = {}
        if url.database in (None, "", ":memory:"):
            # One shared connection, otherwise every connection sees its own empty database
            options["poolclass"] = StaticPool
        engine = create_async_engine(
            settings.database_url,
            echo=settings.echo_sql,
            connect_args={"check_same_thread": False},  # Required for SQLite
            **options,
        )
        enable_sqlite_foreign_keys(engine)
        return engine

    return create_async_engine(
        settings.database_url,
        echo=settings.echo_sql,
        pool_size=settings.pool_size,
        max_overflow=settings.max_overflow,
        pool_timeout=settings.pool_timeout,
        pool_recycle=settings.pool_recycle,
        pool_pre_ping=True,  # Test connections before using
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to ``engine``; objects stay usable after commit."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


# Lazily created on first use, reset by close_database()
_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


def get_engine() -> AsyncEngine:
    """Process-wide engine, built from the cached settings on first call."""
    global _engine

    if _engine is None:
        _engine = create_engine()

    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Process-wide session factory bound to ``get_engine()``."""
    global _session_factory

    if _session_factory is None:
        _session_factory = create_session_factory(get_engine())

    return _session_factory


# =============================================================================
# DATABASE INITIALIZATION
# =============================================================================

async def init_database(engine: Optional[AsyncEngine] = None) -> None:
    """Create missing tables (CREATE TABLE IF NOT EXISTS semantics)."""
    from order_manager.data.models import Base

    logger.info("Initializing database...")

    engine = engine or get_engine()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info("Database initialized")


async def close_database() -> None:
    """Close database connections."""
    global _engine, _session_factory

    if _engine is not None:
        logger.info("Closing database connections...")
        await _engine.dispose()
        _engine = None
        _session_factory = None
        logger.info("Database connections closed")
