"""Data Transfer Objects for API layer.

These are the ONLY contracts between API handlers and use cases.
"""

from parstock.application.dto.requests import (
    AssignSupplierRequest,
    BuildSuggestedOrdersRequest,
    CreateDraftsRequest,
    GateInvoiceRequest,
    LinkOrphanItemRequest,
    RecordCountRequest,
    SetParLevelRequest,
    VarianceReportRequest,
)
from parstock.application.dto.responses import (
    AreaItemResponse,
    CreateDraftsResponse,
    DraftOutcomeResponse,
    ErrorResponse,
    GateInvoiceResponse,
    HealthResponse,
    ProductResponse,
    SuggestedOrdersResponse,
    SupplierBucketResponse,
    VarianceReportResponse,
)

__all__ = [
    # Requests
    "AssignSupplierRequest",
    "BuildSuggestedOrdersRequest",
    "CreateDraftsRequest",
    "GateInvoiceRequest",
    "LinkOrphanItemRequest",
    "RecordCountRequest",
    "SetParLevelRequest",
    "VarianceReportRequest",
    # Responses
    "AreaItemResponse",
    "CreateDraftsResponse",
    "DraftOutcomeResponse",
    "ErrorResponse",
    "GateInvoiceResponse",
    "HealthResponse",
    "ProductResponse",
    "SuggestedOrdersResponse",
    "SupplierBucketResponse",
    "VarianceReportResponse",
]
