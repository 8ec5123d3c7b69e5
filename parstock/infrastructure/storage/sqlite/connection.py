"""
aiosqlite connection pool for the parstock database.

Pooled connections run in autocommit mode, so a single INSERT/UPDATE is its
own transaction. Writes that must land together (an order header with its
lines) go through transaction(), which holds BEGIN IMMEDIATE for the whole
block and reports SQLite failures as DatabaseError.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite

from parstock.config import get_logger, get_settings
from parstock.core.exceptions import DatabaseError

logger = get_logger(__name__)

# Applied to every pooled connection; busy_timeout is added per pool
_PRAGMAS = (
    "journal_mode=WAL",
    "synchronous=NORMAL",
    "foreign_keys=ON",
)


class ConnectionPool:
    """Fixed number of connections to one database file, handed out in turn."""

    def __init__(
        self,
        db_path: Path,
        pool_size: int = 5,
        busy_timeout: int = 30000,
    ):
        self.db_path = Path(db_path)
        self.pool_size = pool_size
        self.busy_timeout = busy_timeout

        self._idle: asyncio.Queue[aiosqlite.Connection] = asyncio.Queue(maxsize=pool_size)
        self._all: list[aiosqlite.Connection] = []
        self._ready = False
        self._lock = asyncio.Lock()

    @property
    def ready(self) -> bool:
        return self._ready

    async def initialize(self) -> None:
        async with self._lock:
            if self._ready:
                return

            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            while len(self._all) < self.pool_size:
                conn = await self._open()
                self._all.append(conn)
                self._idle.put_nowait(conn)

            self._ready = True
            logger.info(
                "connection_pool_initialized",
                db_path=str(self.db_path),
                pool_size=self.pool_size,
            )

    async def _open(self) -> aiosqlite.Connection:
        conn = await aiosqlite.connect(self.db_path, isolation_level=None)
        for pragma in (*_PRAGMAS, f"busy_timeout={self.busy_timeout}"):
            await conn.execute(f"PRAGMA {pragma}")
        conn.row_factory = aiosqlite.Row
        return conn

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[aiosqlite.Connection]:
        """Borrow an autocommit connection until the block exits."""
        if not self._ready:
            await self.initialize()

        conn = await self._idle.get()
        try:
            yield conn
        finally:
            self._idle.put_nowait(conn)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        Borrow a connection inside BEGIN IMMEDIATE.

        Commits when the block completes. Any exception rolls back; SQLite
        errors are re-raised as DatabaseError, anything else unchanged.
        """
        async with self.acquire() as conn:
            await conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn
            except BaseException as e:
                await conn.execute("ROLLBACK")
                if isinstance(e, aiosqlite.Error):
                    logger.warning("transaction_rolled_back", error=str(e))
                    raise DatabaseError("transaction", str(e)) from e
                raise
            await conn.execute("COMMIT")

    async def ping(self) -> None:
        """Round-trip one trivial query; raises if the database is unusable."""
        async with self.acquire() as conn:
            cursor = await conn.execute("SELECT 1")
            await cursor.fetchone()

    async def close(self) -> None:
        async with self._lock:
            while self._all:
                await self._all.pop().close()
            self._idle = asyncio.Queue(maxsize=self.pool_size)
            self._ready = False
            logger.info("connection_pool_closed", db_path=str(self.db_path))


# Process-wide pool, built from StorageSettings on first use
_pool: ConnectionPool | None = None


async def get_pool() -> ConnectionPool:
    global _pool
    if _pool is None:
        storage = get_settings().storage
        _pool = ConnectionPool(
            db_path=storage.db_path,
            pool_size=storage.pool_size,
            busy_timeout=storage.busy_timeout,
        )
        await _pool.initialize()
    return _pool


async def close_pool() -> None:
    global _pool
    if _pool is not None:
        await _pool.close()
        _pool = None


@asynccontextmanager
async def get_connection() -> AsyncIterator[aiosqlite.Connection]:
    """Autocommit connection from the global pool, for reads and single writes."""
    pool = await get_pool()
    async with pool.acquire() as conn:
        yield conn


@asynccontextmanager
async def get_transaction() -> AsyncIterator[aiosqlite.Connection]:
    """Transactional connection from the global pool."""
    pool = await get_pool()
    async with pool.transaction() as conn:
        yield conn
