"""
Health check endpoints.

Used for monitoring and load balancer health checks.
"""
import logging
import platform

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from apps.api.deps import get_session_factory
from order_manager import __version__
from order_manager.domain.value_objects import utcnow


logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/health")
async def health_check():
    """
    Health check endpoint.

    Returns process liveness; does not touch the database.
    """
    return {
        "status": "healthy",
        "timestamp": utcnow().isoformat(),
        "service": "order-manager",
        "version": __version__,
        "python_version": platform.python_version(),
    }


@router.get("/health/ready")
async def readiness_check(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
):
    """
    Readiness check endpoint.

    Returns 503 when the database cannot answer a trivial query.
    """
    try:
        async with session_factory() as session:
            await session.execute(text("SELECT 1"))
        database = "ok"
    except SQLAlchemyError as e:
        logger.warning(f"Readiness check failed: {e}")
        database = "unavailable"

    body = {
        "status": "ready" if database == "ok" else "not_ready",
        "timestamp": utcnow().isoformat(),
        "checks": {"api": "ok", "database": database},
    }
    return JSONResponse(status_code=200 if database == "ok" else 503, content=body)
