"""Abstract interface for supplier scope lock storage."""

from abc import ABC, abstractmethod

from parstock.core.entities.scope_lock import ScopeLock


class IScopeLockStore(ABC):
    """Optimistic-concurrency store for one lock document per supplier."""

    @abstractmethod
    async def get_lock(self, venue_id: str, supplier_id: str) -> ScopeLock | None:
        pass

    @abstractmethod
    async def compare_and_swap(self, lock: ScopeLock, expected_version: int | None) -> bool:
        """
        Write lock only if the stored version still equals expected_version.

        expected_version None means the lock must not exist yet. Returns False
        when another writer got there first.
        """
        pass

    @abstractmethod
    async def release(self, venue_id: str, supplier_id: str) -> None:
        pass
