"""Invoice reconciliation entities."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from parstock.core.entities.invoice import InvoiceMeta


class ConfidenceTier(str, Enum):
    """Coarse classification of final confidence."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class GateDecision(str, Enum):
    """What the caller should do with a gated invoice."""

    AUTO_POST = "auto_post"
    CONFIRM = "confirm"
    MANUAL_ENTRY = "manual_entry"
    RESOLVE_PO_MISMATCH = "resolve_po_mismatch"


class QualityBreakdown(BaseModel):
    """Components of the line-match quality score."""

    overlap_ratio: float
    avg_price_diff: float
    miss_ratio: float
    score: float
    matched_count: int = 0
    order_line_count: int = 0
    invoice_line_count: int = 0


class GateResult(BaseModel):
    """Output of the quality gate for one parsed invoice."""

    final_confidence: float
    tier: ConfidenceTier
    po_mismatch: bool = False
    quality: QualityBreakdown | None = None  # None when the PO gate fired
    decision: GateDecision
    parser_confidence: float | None = None


class AnomalyType(str, Enum):
    """Suspicious invoice lines flagged during reconciliation."""

    NEGATIVE_QTY = "NEGATIVE_QTY"
    NEGATIVE_PRICE = "NEGATIVE_PRICE"
    ZERO_PRICE = "ZERO_PRICE"
    DUPLICATE = "DUPLICATE"


class Anomaly(BaseModel):
    type: AnomalyType
    name: str
    detail: str | None = None


class ReconciliationCounts(BaseModel):
    matched: int = 0
    unknown: int = 0
    price_changes: int = 0
    qty_diffs: int = 0
    missing_on_invoice: int = 0


class ReconciliationTotals(BaseModel):
    ordered: float = 0.0
    invoiced: float = 0.0
    delta: float = 0.0


class LineDelta(BaseModel):
    """Matched order/invoice pair with its quantity and price deltas."""

    name: str
    product_id: str | None = None
    ordered_qty: float = 0.0
    invoiced_qty: float = 0.0
    ordered_unit_cost: float | None = None
    invoiced_unit_price: float | None = None
    qty_delta: float = 0.0
    price_delta: float | None = None


class ReconciliationSummary(BaseModel):
    """Line-level comparison of an invoice against its order."""

    po_match: bool = True
    counts: ReconciliationCounts = Field(default_factory=ReconciliationCounts)
    totals: ReconciliationTotals = Field(default_factory=ReconciliationTotals)
    deltas: list[LineDelta] = Field(default_factory=list)
    anomalies: list[Anomaly] = Field(default_factory=list)


class ReconciliationRecord(BaseModel):
    """Persisted reconciliation snapshot. Append-only once written."""

    id: str | None = None
    venue_id: str
    order_id: str
    invoice: InvoiceMeta = Field(default_factory=InvoiceMeta)
    summary: ReconciliationSummary = Field(default_factory=ReconciliationSummary)
    confidence: float = 0.0
    tier: ConfidenceTier = ConfidenceTier.LOW
    meta: dict[str, Any] = Field(default_factory=dict)  # order_po, parsed_po, po_mismatch
    warnings: list[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.utcnow)
