"""SQLite implementation of the supplier scope lock (optimistic versioning)."""

import json
from datetime import datetime

import aiosqlite

from parstock.config import get_logger
from parstock.core.entities.scope_lock import ScopeLock, ScopeMode
from parstock.core.interfaces.scope_lock_store import IScopeLockStore
from parstock.infrastructure.storage.sqlite.connection import get_connection

logger = get_logger(__name__)


class SQLiteScopeLockStore(IScopeLockStore):
    """
    One row per (venue, supplier). Every successful write bumps version,
    and a write only lands if the version it read is still current.
    """

    async def get_lock(self, venue_id: str, supplier_id: str) -> ScopeLock | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM scope_locks WHERE venue_id = ? AND supplier_id = ?",
                (venue_id, supplier_id),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_lock(row)

    async def compare_and_swap(self, lock: ScopeLock, expected_version: int | None) -> bool:
        now = datetime.utcnow()
        depts = json.dumps(lock.depts)
        async with get_connection() as conn:
            if expected_version is None:
                cursor = await conn.execute(
                    """
                    INSERT OR IGNORE INTO scope_locks (
                        venue_id, supplier_id, mode, depts_json, version, updated_by, updated_at
                    ) VALUES (?, ?, ?, ?, 1, ?, ?)
                    """,
                    (
                        lock.venue_id,
                        lock.supplier_id,
                        lock.mode.value,
                        depts,
                        lock.updated_by,
                        now.isoformat(),
                    ),
                )
            else:
                cursor = await conn.execute(
                    """
                    UPDATE scope_locks
                    SET mode = ?, depts_json = ?, version = version + 1,
                        updated_by = ?, updated_at = ?
                    WHERE venue_id = ? AND supplier_id = ? AND version = ?
                    """,
                    (
                        lock.mode.value,
                        depts,
                        lock.updated_by,
                        now.isoformat(),
                        lock.venue_id,
                        lock.supplier_id,
                        expected_version,
                    ),
                )

        swapped = cursor.rowcount == 1
        if swapped:
            lock.version = (expected_version or 0) + 1
            lock.updated_at = now
        else:
            logger.info(
                "scope_lock_cas_conflict",
                venue_id=lock.venue_id,
                supplier_id=lock.supplier_id,
                expected_version=expected_version,
            )
        return swapped

    async def release(self, venue_id: str, supplier_id: str) -> None:
        async with get_connection() as conn:
            await conn.execute(
                "DELETE FROM scope_locks WHERE venue_id = ? AND supplier_id = ?",
                (venue_id, supplier_id),
            )
        logger.info("scope_lock_released", venue_id=venue_id, supplier_id=supplier_id)

    @staticmethod
    def _row_to_lock(row: aiosqlite.Row) -> ScopeLock:
        return ScopeLock(
            venue_id=row["venue_id"],
            supplier_id=row["supplier_id"],
            mode=ScopeMode(row["mode"]),
            depts=json.loads(row["depts_json"]),
            version=row["version"],
            updated_by=row["updated_by"],
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )
