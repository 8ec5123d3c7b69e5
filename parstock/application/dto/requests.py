"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation.
These are the ONLY contracts between API and use cases.
"""

from pydantic import BaseModel, Field

from parstock.core.entities.invoice import InvoiceLine, InvoiceMeta
from parstock.core.entities.scope_lock import ScopeMode


class GateInvoiceRequest(BaseModel):
    """Parsed invoice to score against a submitted order.

    Everything except the ids comes from the external invoice parser.
    """

    venue_id: str = Field(default="", description="Venue the order belongs to")
    order_id: str = Field(default="", description="Submitted order the invoice claims to fill")
    lines: list[InvoiceLine] = Field(
        default_factory=list,
        description="Parsed invoice lines",
    )
    parser_confidence: float | None = Field(
        default=None,
        description="Raw parser confidence; 0.5 is assumed when absent",
        examples=[0.9],
    )
    invoice: InvoiceMeta = Field(
        default_factory=InvoiceMeta,
        description="Source, storage path and PO number printed on the invoice",
    )
    warnings: list[str] = Field(default_factory=list, description="Parser warnings")


class BuildSuggestedOrdersRequest(BaseModel):
    """Request a fresh replenishment plan."""

    venue_id: str = Field(default="", description="Venue ID")
    department_id: str | None = Field(
        default=None,
        description="Only count items of this department (whole venue when omitted)",
    )
    round_to_pack: bool | None = Field(
        default=None,
        description="Round deficits up to whole packs (settings default when omitted)",
    )
    default_par_if_missing: float | None = Field(
        default=None,
        gt=0,
        description="Quantity to suggest when a product has no par and no pack size",
        examples=[6],
    )


class CreateDraftsRequest(BuildSuggestedOrdersRequest):
    """Turn the current suggestions into draft orders, one per supplier."""

    mode: ScopeMode = Field(
        default=ScopeMode.ALL,
        description="ALL for a venue-wide draft, DEPT for a department draft",
    )
    dept_id: str | None = Field(default=None, description="Department ID when mode is DEPT")
    role: str | None = Field(
        default=None,
        description="Caller role; venue-wide drafts need manager, owner or admin",
        examples=["manager", "staff"],
    )
    user_id: str | None = Field(default=None, description="Caller user ID")
    supplier_keys: list[str] | None = Field(
        default=None,
        description="Only draft these supplier buckets (all non-empty buckets if None)",
    )


class VarianceReportRequest(BaseModel):
    venue_id: str = Field(default="", description="Venue ID")
    department_id: str | None = Field(default=None, description="Restrict to one department")
    include_uncounted: bool | None = Field(
        default=None,
        description="Report products with a par but no counted location as zero on hand (settings default when omitted)",
    )
    band_pct: float | None = Field(
        default=None,
        ge=0,
        description="Percentage band separating material from minor variances",
        examples=[1.5],
    )
    with_bands: bool = Field(default=False, description="Include the band summary")


class AssignSupplierRequest(BaseModel):
    venue_id: str = Field(default="", description="Venue ID")
    product_id: str = Field(default="", description="Product ID")
    supplier_id: str = Field(default="", description="Supplier ID")


class SetParLevelRequest(BaseModel):
    venue_id: str = Field(default="", description="Venue ID")
    product_id: str = Field(default="", description="Product ID")
    par_level: float | None = Field(
        default=None,
        ge=0,
        description="Target on-hand; null clears the par level",
    )


class LinkOrphanItemRequest(BaseModel):
    venue_id: str = Field(default="", description="Venue ID")
    item_id: str = Field(default="", description="Area item ID")
    product_id: str = Field(default="", description="Catalog product to link")


class RecordCountRequest(BaseModel):
    venue_id: str = Field(default="", description="Venue ID")
    item_id: str = Field(default="", description="Area item ID")
    count: float = Field(..., ge=0, description="Counted quantity, overwrites the last count")
