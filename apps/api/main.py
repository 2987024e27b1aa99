"""
Order Manager - Main FastAPI Application.

REST layer over the order application service. Routers only translate HTTP
to use-case calls; this module maps every domain error kind to its status.
"""
import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from apps.api.routes import health, order_items, orders
from order_manager.domain.exceptions import DomainValidationError, NotFoundError, StoreError
from order_manager.infrastructure.database.config import (
    close_database,
    get_database_settings,
    init_database,
)
from order_manager.infrastructure.logging import configure_logging
from order_manager.settings import get_app_settings


settings = get_app_settings()

# Setup logging
configure_logging(settings.log_level)
logger = logging.getLogger(__name__)


# =============================================================================
# LIFESPAN
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables on startup (when enabled) and dispose the engine on shutdown."""
    logger.info(f"{settings.title} starting up...")
    if get_database_settings().create_tables:
        await init_database()
    logger.info("Swagger UI available at: /docs")
    yield
    await close_database()
    logger.info(f"{settings.title} shutting down...")


# =============================================================================
# CREATE FASTAPI APP
# =============================================================================

app = FastAPI(
    title=settings.title,
    description=settings.description,
    version=settings.version,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)


# =============================================================================
# REQUEST LOGGING MIDDLEWARE
# =============================================================================

@app.middleware("http")
async def log_requests(request: Request, call_next):
    """One line per request: method, path, status and elapsed milliseconds."""
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info(
        f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f}ms)"
    )
    return response


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================

def _error(status_code: int, detail) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": detail})


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    """Unknown order or item -> 404."""
    return _error(status.HTTP_404_NOT_FOUND, str(exc))


@app.exception_handler(DomainValidationError)
async def domain_validation_handler(request: Request, exc: DomainValidationError) -> JSONResponse:
    """Aggregate rule violated -> 400."""
    return _error(status.HTTP_400_BAD_REQUEST, str(exc))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed body, path or query -> 400 (instead of FastAPI's 422)."""
    return _error(status.HTTP_400_BAD_REQUEST, jsonable_encoder(exc.errors()))


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    """Transaction or connectivity failure -> 500, details stay in the log."""
    logger.error(f"Store failure on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


# =============================================================================
# INCLUDE ROUTERS
# =============================================================================

app.include_router(health.router, tags=["Health"])
app.include_router(orders.router)
app.include_router(order_items.router)


@app.get("/", tags=["Root"])
async def root():
    """API root endpoint."""
    return {
        "message": settings.title,
        "version": settings.version,
        "docs": "/docs",
        "health": "/health",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
