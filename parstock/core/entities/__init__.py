"""Core domain entities."""

from parstock.core.entities.catalog import (
    UNASSIGNED_SUPPLIER_ID,
    UNASSIGNED_SUPPLIER_NAME,
    Product,
    Supplier,
)
from parstock.core.entities.counts import Area, AreaItem, Department
from parstock.core.entities.invoice import InvoiceLine, InvoiceMeta, ParsedInvoice
from parstock.core.entities.orders import Order, OrderLine, OrderSource, OrderStatus
from parstock.core.entities.reconciliation import (
    Anomaly,
    AnomalyType,
    ConfidenceTier,
    GateDecision,
    GateResult,
    LineDelta,
    QualityBreakdown,
    ReconciliationCounts,
    ReconciliationRecord,
    ReconciliationSummary,
    ReconciliationTotals,
)
from parstock.core.entities.scope_lock import (
    ScopeLock,
    ScopeLockOutcome,
    ScopeLockStatus,
    ScopeMode,
)
from parstock.core.entities.suggestions import (
    SuggestedLine,
    SuggestedOrderPlan,
    SuggestionReason,
    SupplierBucket,
)
from parstock.core.entities.variance import (
    VarianceBandSummary,
    VarianceResult,
    VarianceRow,
    VarianceTotals,
)

__all__ = [
    # Catalog
    "Product",
    "Supplier",
    "UNASSIGNED_SUPPLIER_ID",
    "UNASSIGNED_SUPPLIER_NAME",
    # Counts
    "Department",
    "Area",
    "AreaItem",
    # Invoice
    "InvoiceLine",
    "InvoiceMeta",
    "ParsedInvoice",
    # Orders
    "Order",
    "OrderLine",
    "OrderSource",
    "OrderStatus",
    # Reconciliation
    "Anomaly",
    "AnomalyType",
    "ConfidenceTier",
    "GateDecision",
    "GateResult",
    "LineDelta",
    "QualityBreakdown",
    "ReconciliationCounts",
    "ReconciliationRecord",
    "ReconciliationSummary",
    "ReconciliationTotals",
    # Scope lock
    "ScopeLock",
    "ScopeLockOutcome",
    "ScopeLockStatus",
    "ScopeMode",
    # Suggestions
    "SuggestedLine",
    "SuggestedOrderPlan",
    "SuggestionReason",
    "SupplierBucket",
    # Variance
    "VarianceBandSummary",
    "VarianceResult",
    "VarianceRow",
    "VarianceTotals",
]
