"""Remote service clients."""

from parstock.infrastructure.remote.reconciliation_client import HttpReconciliationClient

_reconciliation_client: HttpReconciliationClient | None = None


def get_reconciliation_client() -> HttpReconciliationClient:
    """Get singleton remote reconciliation client."""
    global _reconciliation_client
    if _reconciliation_client is None:
        _reconciliation_client = HttpReconciliationClient()
    return _reconciliation_client


async def close_reconciliation_client() -> None:
    global _reconciliation_client
    if _reconciliation_client is not None:
        await _reconciliation_client.close()
        _reconciliation_client = None


__all__ = [
    "HttpReconciliationClient",
    "get_reconciliation_client",
    "close_reconciliation_client",
]
