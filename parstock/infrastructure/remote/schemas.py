"""
Wire format of the reconcile-invoice endpoint.

camelCase on the wire, snake_case in Python. Both the HTTP client and the
API route that serves the endpoint use these models.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from parstock.core.entities.invoice import InvoiceLine, InvoiceMeta
from parstock.core.entities.reconciliation import (
    QualityBreakdown,
    ReconciliationCounts,
    ReconciliationSummary,
    ReconciliationTotals,
)


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class WireInvoiceMeta(WireModel):
    source: str | None = None
    storage_path: str | None = None
    po_number: str | None = None

    @classmethod
    def from_meta(cls, meta: InvoiceMeta) -> "WireInvoiceMeta":
        return cls(source=meta.source, storage_path=meta.storage_path, po_number=meta.po_number)

    def to_meta(self) -> InvoiceMeta:
        return InvoiceMeta(
            source=self.source, storage_path=self.storage_path, po_number=self.po_number
        )


class WireInvoiceLine(WireModel):
    name: str
    code: str | None = None
    qty: float = 0.0
    unit_price: float | None = None

    def to_line(self) -> InvoiceLine:
        return InvoiceLine(name=self.name, code=self.code, qty=self.qty, unit_price=self.unit_price)


class ReconcileInvoiceRequest(WireModel):
    venue_id: str
    order_id: str
    invoice: WireInvoiceMeta = Field(default_factory=WireInvoiceMeta)
    lines: list[WireInvoiceLine] = Field(default_factory=list)
    order_po: str | None = None
    parser_confidence: float | None = None


class WireCounts(WireModel):
    matched: int = 0
    unknown: int = 0
    price_changes: int = 0
    qty_diffs: int = 0
    missing_on_invoice: int = 0


class WireTotals(WireModel):
    ordered: float = 0.0
    invoiced: float = 0.0
    delta: float = 0.0


class WireSummary(WireModel):
    po_match: bool = True
    counts: WireCounts = Field(default_factory=WireCounts)
    totals: WireTotals = Field(default_factory=WireTotals)

    @classmethod
    def from_summary(cls, summary: ReconciliationSummary) -> "WireSummary":
        return cls(
            po_match=summary.po_match,
            counts=WireCounts(**summary.counts.model_dump()),
            totals=WireTotals(**summary.totals.model_dump()),
        )

    def to_summary(self) -> ReconciliationSummary:
        return ReconciliationSummary(
            po_match=self.po_match,
            counts=ReconciliationCounts(**self.counts.model_dump()),
            totals=ReconciliationTotals(**self.totals.model_dump()),
        )


class WireQuality(WireModel):
    overlap_ratio: float
    avg_price_diff: float
    miss_ratio: float
    score: float
    matched_count: int = 0
    order_line_count: int = 0
    invoice_line_count: int = 0

    def to_breakdown(self) -> QualityBreakdown:
        return QualityBreakdown(**self.model_dump())


class ReconcileInvoiceResponse(WireModel):
    ok: bool
    reconciliation_id: str | None = None
    summary: WireSummary | None = None
    quality: WireQuality | None = None
    error: str | None = None
