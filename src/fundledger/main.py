"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from fundledger.config.settings import get_settings
from fundledger.config.logging_config import setup_logging
from fundledger.repositories.sqlalchemy.database import init_db
from fundledger.api.routers import (
    users_router,
    funds_router,
    orders_router,
    positions_router,
    settlement_router,
    profit_router,
)
from fundledger.core.exceptions import AppError, NotFoundError
from fundledger.jobs import (
    init_scheduler,
    register_settlement_job,
    start_scheduler,
    shutdown_scheduler,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    setup_logging()
    init_db()
    scheduler_started = False
    if get_settings().scheduler_enabled:
        init_scheduler()
        register_settlement_job()
        start_scheduler()
        scheduler_started = True
    yield
    # Shutdown
    if scheduler_started:
        shutdown_scheduler(wait=False)


settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    description="Multi-user fund ledger with NAV settlement and profit replay",
    version=settings.app_version,
    lifespan=lifespan,
)

app.include_router(users_router)
app.include_router(funds_router)
app.include_router(orders_router)
app.include_router(positions_router)
app.include_router(settlement_router)
app.include_router(profit_router)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Global handler for application errors."""
    status_code = 404 if isinstance(exc, NotFoundError) else 400
    return JSONResponse(
        status_code=status_code,
        content={"error": exc.code, "message": exc.message},
    )


@app.get("/health")
def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/")
def root() -> dict[str, str]:
    """Root endpoint with API info."""
    return {
        "app": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
    }
