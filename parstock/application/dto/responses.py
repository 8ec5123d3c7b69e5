"""Response DTOs for API endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field

from parstock.core.entities.reconciliation import GateResult, ReconciliationSummary
from parstock.core.entities.scope_lock import ScopeLockStatus
from parstock.core.entities.suggestions import SuggestedLine
from parstock.core.entities.variance import VarianceBandSummary, VarianceRow, VarianceTotals


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. ORDER_NOT_FOUND)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    - request_id: the X-Request-ID of the failing request
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    path: str | None = Field(default=None, description="Request path")
    request_id: str | None = Field(default=None, description="Request correlation ID")
    timestamp: datetime = Field(default_factory=datetime.now)


class HealthResponse(BaseModel):
    status: str
    version: str
    uptime_seconds: float | None = None
    database: str | None = None
    pending_migrations: list[str] = Field(default_factory=list)
    recon_mode: str | None = None


class GateInvoiceResponse(BaseModel):
    order_id: str
    result: GateResult
    summary: ReconciliationSummary
    reconciliation_id: str | None = Field(
        default=None, description="Persisted snapshot ID, null if the audit write failed"
    )
    audit_write_error: str | None = Field(
        default=None, description="Why the snapshot could not be written"
    )
    mode: str = Field(default="local", description="local or remote scoring")


class SupplierBucketResponse(BaseModel):
    supplier_key: str
    supplier_name: str | None = None
    lines: list[SuggestedLine] = Field(default_factory=list)
    total: float = 0.0
    needs_review: bool = False


class SuggestedOrdersResponse(BaseModel):
    venue_id: str
    buckets: list[SupplierBucketResponse]
    line_count: int


class DraftOutcomeResponse(BaseModel):
    supplier_key: str
    status: str = Field(..., description="created, duplicate, empty, failed or a lock status")
    order_id: str | None = None
    lock_status: ScopeLockStatus | None = None
    lines_count: int = 0
    error: str | None = None


class CreateDraftsResponse(BaseModel):
    venue_id: str
    outcomes: list[DraftOutcomeResponse]
    created: int
    skipped: int
    failed: int


class VarianceReportResponse(BaseModel):
    venue_id: str
    department_id: str | None = None
    rows: list[VarianceRow]
    shortages: list[VarianceRow]
    excess: list[VarianceRow]
    totals: VarianceTotals
    bands: VarianceBandSummary | None = None


class ProductResponse(BaseModel):
    id: str
    venue_id: str
    name: str
    supplier_id: str | None = None
    pack_size: float | None = None
    unit_cost: float | None = None
    par_level: float | None = None
    updated_at: datetime


class AreaItemResponse(BaseModel):
    id: str
    area_id: str
    product_id: str | None = None
    name: str
    last_count: float | None = None
    counted_at: datetime | None = None
