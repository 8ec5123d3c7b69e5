"""API tests for health endpoints."""

from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest
from httpx import AsyncClient

import parstock.infrastructure.storage.sqlite.connection as conn_module
from parstock import __version__
from parstock.config.settings import Settings, StorageSettings
from parstock.infrastructure.storage.sqlite.connection import close_pool
from parstock.infrastructure.storage.sqlite.migrations.migrator import run_migrations


@pytest.fixture
def storage_settings(tmp_path: Path) -> Settings:
    storage = StorageSettings(data_dir=tmp_path, db_name="health.db", pool_size=1)
    return Settings(_env_file=None, storage=storage)


async def _get_health(client: AsyncClient, storage_settings):
    conn_module._pool = None
    with patch.object(conn_module, "get_settings", return_value=storage_settings):
        try:
            return await client.get("/api/health")
        finally:
            await close_pool()


class TestHealth:
    async def test_root_health(self, client: AsyncClient):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "version": __version__}

    async def test_healthy_on_migrated_database(self, client: AsyncClient, storage_settings):
        await run_migrations(storage_settings.storage.db_path, create_backup_before=False)

        response = await _get_health(client, storage_settings)

        data = response.json()
        assert response.status_code == 200
        assert data["status"] == "healthy"
        assert data["database"] == "ok"
        assert data["pending_migrations"] == []
        assert data["recon_mode"] == "local"
        assert data["uptime_seconds"] >= 0

    async def test_degraded_with_pending_migrations(self, client: AsyncClient, storage_settings):
        response = await _get_health(client, storage_settings)

        data = response.json()
        assert data["status"] == "degraded"
        assert data["database"] == "ok"
        assert "001" in data["pending_migrations"]

    async def test_degraded_when_database_unreachable(self, client: AsyncClient):
        failing = AsyncMock(side_effect=RuntimeError("unable to open database file"))
        with patch("parstock.infrastructure.storage.sqlite.get_pool", failing):
            response = await client.get("/api/health")

        data = response.json()
        assert response.status_code == 200
        assert data["status"] == "degraded"
        assert data["database"].startswith("error:")

    async def test_request_id_is_echoed(self, client: AsyncClient):
        response = await client.get("/health", headers={"X-Request-ID": "abc123"})

        assert response.headers["X-Request-ID"] == "abc123"
        assert response.headers["X-Response-Time"].endswith("ms")

    async def test_unknown_route_uses_error_body(self, client: AsyncClient):
        response = await client.get("/api/nothing-here")

        assert response.status_code == 404
        data = response.json()
        assert data["error_code"] == "NOT_FOUND"
        assert data["path"] == "/api/nothing-here"
