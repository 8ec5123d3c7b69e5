"""
Dependency injection container for FastAPI.

Provides use case and store instances to route handlers. Tests swap these
out through app.dependency_overrides.
"""

from functools import lru_cache

from parstock.application.use_cases import (
    AssignSupplierUseCase,
    BuildSuggestedOrdersUseCase,
    CreateDraftsFromSuggestionsUseCase,
    GateInvoiceUseCase,
    LinkOrphanItemUseCase,
    RecordCountUseCase,
    SetParLevelUseCase,
    VarianceReportUseCase,
)
from parstock.config import Settings, get_settings


@lru_cache
def get_app_settings() -> Settings:
    """Get cached application settings."""
    return get_settings()


# Invoice gate
def get_gate_invoice_use_case() -> GateInvoiceUseCase:
    """Gate use case in the configured mode (local or remote)."""
    return GateInvoiceUseCase()


def get_local_gate_invoice_use_case() -> GateInvoiceUseCase:
    """Gate use case that always scores in-process.

    Serves the reconcile-invoice endpoint, which must never forward to
    another remote.
    """
    return GateInvoiceUseCase(mode="local")


# Suggested orders
def get_build_suggested_orders_use_case() -> BuildSuggestedOrdersUseCase:
    return BuildSuggestedOrdersUseCase()


def get_create_drafts_use_case() -> CreateDraftsFromSuggestionsUseCase:
    return CreateDraftsFromSuggestionsUseCase()


# Variance
def get_variance_report_use_case() -> VarianceReportUseCase:
    return VarianceReportUseCase()


# Catalog and count maintenance
def get_assign_supplier_use_case() -> AssignSupplierUseCase:
    return AssignSupplierUseCase()


def get_set_par_level_use_case() -> SetParLevelUseCase:
    return SetParLevelUseCase()


def get_link_orphan_item_use_case() -> LinkOrphanItemUseCase:
    return LinkOrphanItemUseCase()


def get_record_count_use_case() -> RecordCountUseCase:
    return RecordCountUseCase()
