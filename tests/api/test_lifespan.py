"""Tests for application startup and shutdown."""

from unittest.mock import AsyncMock, patch

import pytest

from parstock.api.main import app, lifespan
from parstock.core.exceptions import ConfigurationError
from parstock.infrastructure.storage.sqlite.migrations.migrator import MigrationResult


class TestLifespan:
    async def test_failed_migration_aborts_startup(self):
        failed = [MigrationResult("001", "initial", False, 3, "near 'TABL': syntax error")]
        close_pool = AsyncMock()

        with (
            patch("parstock.api.main.run_migrations", AsyncMock(return_value=failed)),
            patch("parstock.api.main.get_pool", AsyncMock()) as get_pool,
            patch("parstock.api.main.close_pool", close_pool),
            patch("parstock.api.main.close_reconciliation_client", AsyncMock()),
            pytest.raises(ConfigurationError, match="Migration 001 failed"),
        ):
            async with lifespan(app):
                pass

        get_pool.assert_not_awaited()
        close_pool.assert_awaited_once()

    async def test_startup_and_shutdown(self):
        ok = [MigrationResult("001", "initial", True, 3)]
        close_pool = AsyncMock()
        close_client = AsyncMock()

        with (
            patch("parstock.api.main.run_migrations", AsyncMock(return_value=ok)),
            patch("parstock.api.main.get_pool", AsyncMock()) as get_pool,
            patch("parstock.api.main.close_pool", close_pool),
            patch("parstock.api.main.close_reconciliation_client", close_client),
        ):
            async with lifespan(app):
                get_pool.assert_awaited_once()
                close_pool.assert_not_awaited()

        close_pool.assert_awaited_once()
        close_client.assert_awaited_once()
