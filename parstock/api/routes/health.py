"""
Health check endpoint.

Reports "degraded" instead of failing so health checks can tell a missing or
half-migrated database apart from a dead process.
"""

import time

from fastapi import APIRouter

from parstock import __version__
from parstock.application.dto.responses import HealthResponse
from parstock.config import get_logger, get_settings

logger = get_logger(__name__)

router = APIRouter(prefix="/api/health", tags=["health"])

_start_time = time.time()


async def _check_database() -> tuple[str, list[str]]:
    """Database state and the migration versions not yet applied."""
    from parstock.infrastructure.storage.sqlite import get_pool
    from parstock.infrastructure.storage.sqlite.migrations.migrator import get_migration_status

    try:
        pool = await get_pool()
        await pool.ping()
        status = await get_migration_status(pool.db_path)
    except Exception as e:
        logger.warning("health_db_check_failed", error=str(e))
        return f"error: {e}", []
    return "ok", status.pending


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    database, pending = await _check_database()
    return HealthResponse(
        status="healthy" if database == "ok" and not pending else "degraded",
        version=__version__,
        uptime_seconds=round(time.time() - _start_time, 3),
        database=database,
        pending_migrations=pending,
        recon_mode=get_settings().recon.mode,
    )
