"""SQLite storage implementations."""

from parstock.infrastructure.storage.sqlite.catalog_store import SQLiteCatalogStore
from parstock.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)
from parstock.infrastructure.storage.sqlite.count_store import SQLiteCountStore
from parstock.infrastructure.storage.sqlite.order_store import SQLiteOrderStore
from parstock.infrastructure.storage.sqlite.reconciliation_store import (
    SQLiteReconciliationStore,
)
from parstock.infrastructure.storage.sqlite.scope_lock_store import SQLiteScopeLockStore

# Singleton instances
_catalog_store: SQLiteCatalogStore | None = None
_count_store: SQLiteCountStore | None = None
_order_store: SQLiteOrderStore | None = None
_reconciliation_store: SQLiteReconciliationStore | None = None
_scope_lock_store: SQLiteScopeLockStore | None = None


async def get_catalog_store() -> SQLiteCatalogStore:
    """Get singleton catalog store instance."""
    global _catalog_store
    if _catalog_store is None:
        _catalog_store = SQLiteCatalogStore()
    return _catalog_store


async def get_count_store() -> SQLiteCountStore:
    """Get singleton count store instance."""
    global _count_store
    if _count_store is None:
        _count_store = SQLiteCountStore()
    return _count_store


async def get_order_store() -> SQLiteOrderStore:
    """Get singleton order store instance."""
    global _order_store
    if _order_store is None:
        _order_store = SQLiteOrderStore()
    return _order_store


async def get_reconciliation_store() -> SQLiteReconciliationStore:
    """Get singleton reconciliation store instance."""
    global _reconciliation_store
    if _reconciliation_store is None:
        _reconciliation_store = SQLiteReconciliationStore()
    return _reconciliation_store


async def get_scope_lock_store() -> SQLiteScopeLockStore:
    """Get singleton scope lock store instance."""
    global _scope_lock_store
    if _scope_lock_store is None:
        _scope_lock_store = SQLiteScopeLockStore()
    return _scope_lock_store


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    # Stores
    "SQLiteCatalogStore",
    "SQLiteCountStore",
    "SQLiteOrderStore",
    "SQLiteReconciliationStore",
    "SQLiteScopeLockStore",
    # Singletons
    "get_catalog_store",
    "get_count_store",
    "get_order_store",
    "get_reconciliation_store",
    "get_scope_lock_store",
]
