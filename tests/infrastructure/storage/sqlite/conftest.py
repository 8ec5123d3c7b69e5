"""Fixtures for the SQLite stores: a throwaway database file per test."""

from collections.abc import AsyncGenerator
from pathlib import Path
from unittest.mock import patch

import pytest

import parstock.infrastructure.storage.sqlite.connection as conn_module
from parstock.config.settings import Settings, StorageSettings
from parstock.infrastructure.storage.sqlite.connection import close_pool
from parstock.infrastructure.storage.sqlite.migrations.migrator import run_migrations


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    return tmp_path / "parstock-test.db"


@pytest.fixture
def pool_settings(temp_db_path: Path) -> Settings:
    """Settings whose storage section points at the throwaway file."""
    storage = StorageSettings(
        data_dir=temp_db_path.parent,
        db_name=temp_db_path.name,
        pool_size=2,
        busy_timeout=5000,
    )
    return Settings(_env_file=None, storage=storage)


@pytest.fixture
async def migrated_db(temp_db_path: Path) -> Path:
    results = await run_migrations(temp_db_path, create_backup_before=False)
    assert all(r.success for r in results)
    return temp_db_path


@pytest.fixture
async def pooled_db(migrated_db: Path, pool_settings: Settings) -> AsyncGenerator[Path, None]:
    """Point the global pool at the migrated database for the test's duration."""
    conn_module._pool = None
    with patch.object(conn_module, "get_settings", return_value=pool_settings):
        try:
            yield migrated_db
        finally:
            await close_pool()
