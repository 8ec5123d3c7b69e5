"""Unit tests for SQLite connection pool."""

from pathlib import Path
from unittest.mock import patch

import pytest

import parstock.infrastructure.storage.sqlite.connection as conn_module
from parstock.core.exceptions import DatabaseError
from parstock.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)


class TestConnectionPoolInit:
    """Tests for ConnectionPool construction."""

    def test_defaults(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path)
        assert pool.db_path == temp_db_path
        assert pool.pool_size == 5
        assert pool.busy_timeout == 30000
        assert pool.ready is False
        assert pool._all == []


class TestConnectionPoolLifecycle:
    """initialize / acquire / close."""

    async def test_initialize_creates_directory(self, tmp_path: Path):
        db_path = tmp_path / "nested" / "dir" / "test.db"
        pool = ConnectionPool(db_path, pool_size=1)

        await pool.initialize()
        assert db_path.parent.exists()
        await pool.close()

    async def test_initialize_opens_pool_size_connections(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=3)
        await pool.initialize()

        assert len(pool._all) == 3
        assert pool._idle.qsize() == 3
        await pool.close()

    async def test_initialize_twice_is_noop(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=2)
        await pool.initialize()
        await pool.initialize()

        assert len(pool._all) == 2
        await pool.close()

    async def test_acquire_returns_connection(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=1)

        async with pool.acquire() as conn:
            assert pool._idle.qsize() == 0
            cursor = await conn.execute("PRAGMA foreign_keys")
            row = await cursor.fetchone()
            assert row[0] == 1

        assert pool._idle.qsize() == 1
        await pool.close()

    async def test_close_resets_state(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=2)
        await pool.initialize()
        await pool.close()

        assert pool.ready is False
        assert pool._all == []


class TestTransaction:
    """BEGIN IMMEDIATE / COMMIT / ROLLBACK."""

    async def test_commit_on_success(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=1)
        async with pool.acquire() as conn:
            await conn.execute("CREATE TABLE t (x INTEGER)")

        async with pool.transaction() as conn:
            await conn.execute("INSERT INTO t VALUES (1)")
            await conn.execute("INSERT INTO t VALUES (2)")

        async with pool.acquire() as conn:
            cursor = await conn.execute("SELECT COUNT(*) FROM t")
            assert (await cursor.fetchone())[0] == 2
        await pool.close()

    async def test_rollback_on_error(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=1)
        async with pool.acquire() as conn:
            await conn.execute("CREATE TABLE t (x INTEGER)")

        with pytest.raises(RuntimeError):
            async with pool.transaction() as conn:
                await conn.execute("INSERT INTO t VALUES (1)")
                raise RuntimeError("boom")

        async with pool.acquire() as conn:
            cursor = await conn.execute("SELECT COUNT(*) FROM t")
            assert (await cursor.fetchone())[0] == 0
        await pool.close()

    async def test_sqlite_error_becomes_database_error(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=1)
        async with pool.acquire() as conn:
            await conn.execute("CREATE TABLE t (x INTEGER PRIMARY KEY)")

        with pytest.raises(DatabaseError) as exc_info:
            async with pool.transaction() as conn:
                await conn.execute("INSERT INTO t VALUES (1)")
                await conn.execute("INSERT INTO t VALUES (1)")

        assert exc_info.value.code == "DATABASE_ERROR"
        assert exc_info.value.details["operation"] == "transaction"
        async with pool.acquire() as conn:
            cursor = await conn.execute("SELECT COUNT(*) FROM t")
            assert (await cursor.fetchone())[0] == 0
        await pool.close()

    async def test_ping(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=1)
        await pool.ping()
        assert pool.ready is True
        await pool.close()


class TestGlobalPool:
    """Module-level pool helpers."""

    async def test_get_pool_is_singleton(self, pool_settings):
        conn_module._pool = None
        with patch.object(conn_module, "get_settings", return_value=pool_settings):
            try:
                first = await get_pool()
                second = await get_pool()
                assert first is second
                assert first.pool_size == 2
            finally:
                await close_pool()

        assert conn_module._pool is None

    async def test_connection_helpers(self, pool_settings):
        conn_module._pool = None
        with patch.object(conn_module, "get_settings", return_value=pool_settings):
            try:
                async with get_connection() as conn:
                    await conn.execute("CREATE TABLE t (x INTEGER)")
                async with get_transaction() as conn:
                    await conn.execute("INSERT INTO t VALUES (7)")
                async with get_connection() as conn:
                    cursor = await conn.execute("SELECT x FROM t")
                    row = await cursor.fetchone()
                    assert row["x"] == 7
            finally:
                await close_pool()

    async def test_close_pool_without_pool(self):
        conn_module._pool = None
        await close_pool()
        assert conn_module._pool is None
