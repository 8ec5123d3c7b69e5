"""Invoice gate endpoint."""

from fastapi import APIRouter, Depends

from parstock.api.dependencies import get_gate_invoice_use_case
from parstock.application.dto.requests import GateInvoiceRequest
from parstock.application.dto.responses import ErrorResponse, GateInvoiceResponse
from parstock.application.use_cases.gate_invoice import GateInvoiceUseCase

router = APIRouter(prefix="/api/venues/{venue_id}/orders", tags=["gate"])


@router.post(
    "/{order_id}/gate",
    response_model=GateInvoiceResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
)
async def gate_invoice(
    venue_id: str,
    order_id: str,
    request: GateInvoiceRequest,
    use_case: GateInvoiceUseCase = Depends(get_gate_invoice_use_case),
) -> GateInvoiceResponse:
    """
    Score a parsed invoice against a submitted order.

    The decision field tells the caller whether to auto-post, ask for
    confirmation, fall back to manual entry or resolve a PO mismatch first.
    """
    request = request.model_copy(update={"venue_id": venue_id, "order_id": order_id})
    result = await use_case.execute(request)
    return use_case.to_response(result)
