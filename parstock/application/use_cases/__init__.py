"""Application use cases."""

from parstock.application.use_cases.build_suggested_orders import BuildSuggestedOrdersUseCase
from parstock.application.use_cases.catalog_maintenance import (
    AssignSupplierUseCase,
    LinkOrphanItemUseCase,
    SetParLevelUseCase,
)
from parstock.application.use_cases.create_drafts import (
    CreateDraftsFromSuggestionsUseCase,
    CreateDraftsResult,
    DraftOutcome,
)
from parstock.application.use_cases.gate_invoice import GateInvoiceResult, GateInvoiceUseCase
from parstock.application.use_cases.record_count import RecordCountUseCase
from parstock.application.use_cases.variance_report import (
    VarianceReportResult,
    VarianceReportUseCase,
)
from parstock.application.use_cases.venue_snapshot import VenueSnapshot, load_venue_snapshot

__all__ = [
    "AssignSupplierUseCase",
    "BuildSuggestedOrdersUseCase",
    "CreateDraftsFromSuggestionsUseCase",
    "CreateDraftsResult",
    "DraftOutcome",
    "GateInvoiceResult",
    "GateInvoiceUseCase",
    "LinkOrphanItemUseCase",
    "RecordCountUseCase",
    "SetParLevelUseCase",
    "VarianceReportResult",
    "VarianceReportUseCase",
    "VenueSnapshot",
    "load_venue_snapshot",
]
