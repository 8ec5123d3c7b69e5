"""Variance report endpoint."""

from fastapi import APIRouter, Depends, Query

from parstock.api.dependencies import get_variance_report_use_case
from parstock.application.dto.requests import VarianceReportRequest
from parstock.application.dto.responses import ErrorResponse, VarianceReportResponse
from parstock.application.use_cases.variance_report import VarianceReportUseCase

router = APIRouter(prefix="/api/venues/{venue_id}/variance", tags=["variance"])


@router.get(
    "",
    response_model=VarianceReportResponse,
    responses={400: {"model": ErrorResponse}},
)
async def get_variance(
    venue_id: str,
    department_id: str | None = Query(default=None),
    include_uncounted: bool | None = Query(default=None),
    band_pct: float | None = Query(default=None, ge=0),
    with_bands: bool = Query(default=False),
    use_case: VarianceReportUseCase = Depends(get_variance_report_use_case),
) -> VarianceReportResponse:
    """Shortage and excess against par, largest value impact first."""
    report = await use_case.execute(
        VarianceReportRequest(
            venue_id=venue_id,
            department_id=department_id,
            include_uncounted=include_uncounted,
            band_pct=band_pct,
            with_bands=with_bands,
        )
    )
    return use_case.to_response(report)
