"""
FastAPI application for parstock.

Startup brings the schema up to date before the pool opens; a failed
migration aborts startup instead of serving against a half-migrated
database. Shutdown releases the remote client and the pool in reverse order.
"""

from collections.abc import AsyncIterator
from contextlib import AsyncExitStack, asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from parstock import __version__
from parstock.api.middleware import ErrorHandlerMiddleware, LoggingMiddleware
from parstock.api.middleware.error_handler import setup_exception_handlers
from parstock.api.routes import (
    catalog_router,
    gate_router,
    health_router,
    reconcile_router,
    suggestions_router,
    variance_router,
)
from parstock.config import configure_logging, get_logger, get_settings
from parstock.core.exceptions import ConfigurationError
from parstock.infrastructure.remote import close_reconciliation_client
from parstock.infrastructure.storage.sqlite import close_pool, get_pool
from parstock.infrastructure.storage.sqlite.migrations.migrator import run_migrations

logger = get_logger(__name__)

ROUTERS = (
    health_router,
    reconcile_router,
    gate_router,
    suggestions_router,
    variance_router,
    catalog_router,
)


async def _prepare_database() -> None:
    failed = [r for r in await run_migrations() if not r.success]
    if failed:
        raise ConfigurationError(
            f"Migration {failed[0].version} failed: {failed[0].error}",
            code="MIGRATION_FAILED",
            details={"version": failed[0].version},
        )
    await get_pool()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    logger.info(
        "application_starting",
        db_path=str(settings.storage.db_path),
        recon_mode=settings.recon.mode,
        recon_url=settings.recon.remote_url if settings.recon.mode == "remote" else None,
    )

    async with AsyncExitStack() as stack:
        stack.push_async_callback(close_pool)
        stack.push_async_callback(close_reconciliation_client)
        await _prepare_database()

        logger.info("application_started", host=settings.api.host, port=settings.api.port)
        yield
        logger.info("application_stopping")

    logger.info("application_stopped")


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings)

    app = FastAPI(
        title="Parstock API",
        description="Invoice gating, par-based suggested orders and stock variance",
        version=__version__,
        docs_url="/docs" if settings.api.debug else None,
        redoc_url="/redoc" if settings.api.debug else None,
        lifespan=lifespan,
    )

    # Last added runs first: errors are caught outside the request log
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(ErrorHandlerMiddleware)
    if settings.api.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.api.cors_origins,
            allow_methods=["GET", "POST", "PUT"],
            allow_headers=["*"],
            expose_headers=["X-Request-ID", "X-Response-Time"],
        )

    setup_exception_handlers(app)
    for router in ROUTERS:
        app.include_router(router)

    @app.get("/health", include_in_schema=False)
    async def liveness() -> dict[str, str]:
        return {"status": "healthy", "version": __version__}

    return app


app = create_app()
