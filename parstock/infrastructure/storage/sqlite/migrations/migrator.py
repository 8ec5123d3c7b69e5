"""
Versioned schema migrations for the parstock database.

Migrations are vNNN_name.sql files in this package, applied in version
order. schema_migrations records each applied version with a checksum of
its SQL; an applied file whose checksum no longer matches is reported as
drifted and never re-run.
"""

import hashlib
import re
import time
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

import aiosqlite

from parstock.config import get_logger, get_settings

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent

_FILENAME = re.compile(r"v(\d+)_(\w+)\.sql")

REQUIRED_TABLES = (
    "suppliers",
    "products",
    "departments",
    "areas",
    "area_items",
    "orders",
    "order_lines",
    "reconciliations",
    "scope_locks",
    "schema_migrations",
)


@dataclass(frozen=True)
class Migration:
    version: str
    name: str
    path: Path
    checksum: str

    @classmethod
    def load(cls, path: Path) -> "Migration":
        match = _FILENAME.fullmatch(path.name)
        if not match:
            raise ValueError(f"Invalid migration filename: {path.name}")
        sql = path.read_text(encoding="utf-8")
        return cls(
            version=match.group(1),
            name=match.group(2),
            path=path,
            checksum=hashlib.sha256(sql.encode()).hexdigest()[:16],
        )


@dataclass
class MigrationResult:
    version: str
    name: str
    success: bool
    execution_time_ms: int
    error: str | None = None


@dataclass
class MigrationStatus:
    exists: bool
    applied: list[str] = field(default_factory=list)
    pending: list[str] = field(default_factory=list)
    drifted: list[str] = field(default_factory=list)
    missing_tables: list[str] = field(default_factory=list)

    @property
    def is_current(self) -> bool:
        return self.exists and not self.pending and not self.missing_tables


def discover_migrations(directory: Path = MIGRATIONS_DIR) -> list[Migration]:
    migrations = []
    for path in directory.glob("v*.sql"):
        try:
            migrations.append(Migration.load(path))
        except ValueError as e:
            logger.warning("skipping_invalid_migration", path=str(path), error=str(e))
    return sorted(migrations, key=lambda m: int(m.version))


async def _applied_checksums(conn: aiosqlite.Connection) -> dict[str, str]:
    try:
        cursor = await conn.execute("SELECT version, checksum FROM schema_migrations")
    except aiosqlite.OperationalError:
        # Fresh database, table not created yet
        return {}
    return {row[0]: row[1] for row in await cursor.fetchall()}


async def _apply(conn: aiosqlite.Connection, migration: Migration) -> MigrationResult:
    logger.info("applying_migration", version=migration.version, name=migration.name)
    start = time.perf_counter()

    def elapsed() -> int:
        return int((time.perf_counter() - start) * 1000)

    try:
        await conn.executescript(migration.path.read_text(encoding="utf-8"))
        await conn.execute(
            "INSERT INTO schema_migrations (version, name, checksum, execution_time_ms) "
            "VALUES (?, ?, ?, ?)",
            (migration.version, migration.name, migration.checksum, elapsed()),
        )
        await conn.commit()
    except aiosqlite.Error as e:
        await conn.rollback()
        logger.error("migration_failed", version=migration.version, error=str(e))
        return MigrationResult(migration.version, migration.name, False, elapsed(), str(e))

    logger.info("migration_applied", version=migration.version, execution_time_ms=elapsed())
    return MigrationResult(migration.version, migration.name, True, elapsed())


async def _copy_database(source: Path, target: Path) -> None:
    """Online copy through SQLite's backup API, WAL contents included."""
    async with aiosqlite.connect(source) as src, aiosqlite.connect(target) as dst:
        await src.backup(dst)


async def backup_database(db_path: Path) -> Path:
    backup_path = db_path.with_name(f"{db_path.stem}.backup_{datetime.now():%Y%m%d_%H%M%S}.db")
    await _copy_database(db_path, backup_path)
    logger.info("database_backup_created", backup_path=str(backup_path))
    return backup_path


async def run_migrations(
    db_path: Path | None = None,
    create_backup_before: bool = True,
) -> list[MigrationResult]:
    """
    Apply pending migrations in order, stopping at the first failure.

    With create_backup_before, an existing database is copied first. The copy
    is restored if a migration fails and deleted once every migration ran.
    """
    db_path = db_path or get_settings().storage.db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)

    backup_path = None
    if create_backup_before and db_path.exists():
        backup_path = await backup_database(db_path)

    results: list[MigrationResult] = []
    async with aiosqlite.connect(db_path) as conn:
        await conn.execute("PRAGMA journal_mode=WAL")
        await conn.execute("PRAGMA foreign_keys=ON")

        applied = await _applied_checksums(conn)
        for migration in discover_migrations():
            if migration.version in applied:
                continue
            result = await _apply(conn, migration)
            results.append(result)
            if not result.success:
                break

    if backup_path is not None:
        if all(r.success for r in results):
            backup_path.unlink()
        else:
            await _copy_database(backup_path, db_path)
            logger.warning("database_restored_from_backup", backup_path=str(backup_path))

    logger.info(
        "migrations_complete",
        db_path=str(db_path),
        applied=[r.version for r in results if r.success],
    )
    return results


async def get_migration_status(db_path: Path | None = None) -> MigrationStatus:
    db_path = db_path or get_settings().storage.db_path
    migrations = discover_migrations()

    if not db_path.exists():
        return MigrationStatus(
            exists=False,
            pending=[m.version for m in migrations],
            missing_tables=list(REQUIRED_TABLES),
        )

    async with aiosqlite.connect(db_path) as conn:
        applied = await _applied_checksums(conn)
        cursor = await conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
        tables = {row[0] for row in await cursor.fetchall()}

    return MigrationStatus(
        exists=True,
        applied=sorted(applied, key=int),
        pending=[m.version for m in migrations if m.version not in applied],
        drifted=[
            m.version
            for m in migrations
            if m.version in applied and applied[m.version] != m.checksum
        ],
        missing_tables=[t for t in REQUIRED_TABLES if t not in tables],
    )
