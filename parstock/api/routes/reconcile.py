"""
Reconcile-invoice endpoint.

Serves the same camelCase contract the remote reconciliation client speaks,
so one parstock instance can act as the reconciliation service of another.
Failures are reported in-band as {ok: false, error} with a matching status.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from parstock.api.dependencies import get_local_gate_invoice_use_case
from parstock.api.middleware.error_handler import status_for_exception
from parstock.application.dto.requests import GateInvoiceRequest
from parstock.application.use_cases.gate_invoice import GateInvoiceUseCase
from parstock.config import get_logger
from parstock.core.exceptions import ParstockError
from parstock.infrastructure.remote.schemas import (
    ReconcileInvoiceRequest,
    ReconcileInvoiceResponse,
    WireQuality,
    WireSummary,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["reconciliation"])


@router.post("/reconcile-invoice", response_model=ReconcileInvoiceResponse)
async def reconcile_invoice(
    body: ReconcileInvoiceRequest,
    use_case: GateInvoiceUseCase = Depends(get_local_gate_invoice_use_case),
) -> ReconcileInvoiceResponse | JSONResponse:
    request = GateInvoiceRequest(
        venue_id=body.venue_id,
        order_id=body.order_id,
        lines=[line.to_line() for line in body.lines],
        parser_confidence=body.parser_confidence,
        invoice=body.invoice.to_meta(),
    )

    try:
        outcome = await use_case.execute(request)
    except ParstockError as e:
        logger.warning("reconcile_invoice_failed", order_id=body.order_id, error=e.message)
        failure = ReconcileInvoiceResponse(ok=False, error=e.message)
        return JSONResponse(
            status_code=status_for_exception(e),
            content=failure.model_dump(mode="json", by_alias=True),
        )

    quality = outcome.result.quality
    return ReconcileInvoiceResponse(
        ok=True,
        reconciliation_id=outcome.reconciliation_id,
        summary=WireSummary.from_summary(outcome.summary),
        quality=WireQuality(**quality.model_dump()) if quality is not None else None,
    )
