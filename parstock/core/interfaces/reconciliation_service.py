"""Abstract interface for the remote reconciliation service."""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from parstock.core.entities.invoice import InvoiceLine, InvoiceMeta
from parstock.core.entities.reconciliation import QualityBreakdown, ReconciliationSummary


@dataclass
class RemoteReconciliation:
    """What the remote service returns for one invoice."""

    reconciliation_id: str | None
    summary: ReconciliationSummary
    quality: QualityBreakdown | None = None


class IReconciliationService(ABC):
    """Delegated scoring: the remote side reconciles and persists."""

    @abstractmethod
    async def reconcile(
        self,
        venue_id: str,
        order_id: str,
        invoice: InvoiceMeta,
        lines: list[InvoiceLine],
        order_po: str | None = None,
    ) -> RemoteReconciliation:
        """Raises RemoteReconciliationError on any failure. No retries."""
        pass

    async def close(self) -> None:
        """Release network resources."""
        return None
