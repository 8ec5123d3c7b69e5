"""Abstract interface for reconciliation snapshot storage."""

from abc import ABC, abstractmethod

from parstock.core.entities.reconciliation import ReconciliationRecord


class IReconciliationStore(ABC):
    """Append-only store of reconciliation records."""

    @abstractmethod
    async def save_record(self, record: ReconciliationRecord) -> ReconciliationRecord:
        """Persist a new record and return it with its id."""
        pass

    @abstractmethod
    async def get_record(self, record_id: str) -> ReconciliationRecord | None:
        pass

    @abstractmethod
    async def list_for_order(self, venue_id: str, order_id: str) -> list[ReconciliationRecord]:
        """Records for one order, newest first."""
        pass
