"""Core interfaces (ports) for dependency injection."""

from parstock.core.interfaces.catalog_store import ICatalogStore
from parstock.core.interfaces.count_store import ICountStore
from parstock.core.interfaces.order_store import IOrderStore
from parstock.core.interfaces.reconciliation_service import (
    IReconciliationService,
    RemoteReconciliation,
)
from parstock.core.interfaces.reconciliation_store import IReconciliationStore
from parstock.core.interfaces.scope_lock_store import IScopeLockStore

__all__ = [
    "ICatalogStore",
    "ICountStore",
    "IOrderStore",
    "IReconciliationService",
    "IReconciliationStore",
    "IScopeLockStore",
    "RemoteReconciliation",
]
