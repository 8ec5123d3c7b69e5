"""
HTTP client for the remote reconciliation service.

Failures are raised as RemoteReconciliationError and never retried here;
the caller decides whether the user should try again.
"""

import httpx
from pydantic import ValidationError as PydanticValidationError

from parstock.config import current_request_id, get_logger, get_settings
from parstock.core.entities.invoice import InvoiceLine, InvoiceMeta
from parstock.core.exceptions import RemoteReconciliationError
from parstock.core.interfaces.reconciliation_service import (
    IReconciliationService,
    RemoteReconciliation,
)
from parstock.infrastructure.remote.schemas import (
    ReconcileInvoiceRequest,
    ReconcileInvoiceResponse,
    WireInvoiceLine,
    WireInvoiceMeta,
)

logger = get_logger(__name__)

RECONCILE_PATH = "/api/reconcile-invoice"


class HttpReconciliationClient(IReconciliationService):
    """Posts parsed invoices to {base_url}/api/reconcile-invoice."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.recon.remote_url).rstrip("/")
        self.timeout = timeout or settings.recon.timeout
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=transport,
        )

    async def reconcile(
        self,
        venue_id: str,
        order_id: str,
        invoice: InvoiceMeta,
        lines: list[InvoiceLine],
        order_po: str | None = None,
    ) -> RemoteReconciliation:
        payload = ReconcileInvoiceRequest(
            venue_id=venue_id,
            order_id=order_id,
            invoice=WireInvoiceMeta.from_meta(invoice),
            lines=[WireInvoiceLine(**line.model_dump()) for line in lines],
            order_po=order_po,
        )

        logger.info(
            "remote_reconcile_started",
            url=self.base_url + RECONCILE_PATH,
            order_id=order_id,
            lines=len(lines),
        )

        headers = {}
        request_id = current_request_id()
        if request_id:
            headers["X-Request-ID"] = request_id

        try:
            response = await self._client.post(
                RECONCILE_PATH,
                json=payload.model_dump(mode="json", by_alias=True),
                headers=headers,
            )
        except httpx.HTTPError as e:
            logger.error("remote_reconcile_transport_error", order_id=order_id, error=str(e))
            raise RemoteReconciliationError(f"{e.__class__.__name__}: {e}") from e

        if response.status_code >= 400:
            raise RemoteReconciliationError(
                f"HTTP {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )

        try:
            body = ReconcileInvoiceResponse.model_validate(response.json())
        except (ValueError, PydanticValidationError) as e:
            raise RemoteReconciliationError(
                f"invalid response body: {e}", status_code=response.status_code
            ) from e

        if not body.ok or body.summary is None:
            raise RemoteReconciliationError(
                body.error or "service reported failure",
                status_code=response.status_code,
            )

        logger.info(
            "remote_reconcile_completed",
            order_id=order_id,
            reconciliation_id=body.reconciliation_id,
            po_match=body.summary.po_match,
        )

        return RemoteReconciliation(
            reconciliation_id=body.reconciliation_id,
            summary=body.summary.to_summary(),
            quality=body.quality.to_breakdown() if body.quality else None,
        )

    async def close(self) -> None:
        await self._client.aclose()
