"""Parsed invoice entities handed over by the external invoice parser."""

from pydantic import BaseModel, Field


class InvoiceLine(BaseModel):
    """One parsed invoice line."""

    name: str
    code: str | None = None
    qty: float = 0.0
    unit_price: float | None = None


class InvoiceMeta(BaseModel):
    """Where the invoice came from and the PO number printed on it."""

    source: str | None = None  # "csv", "pdf", "photo", ...
    storage_path: str | None = None
    po_number: str | None = None


class ParsedInvoice(BaseModel):
    """Parser output: lines, raw confidence and header metadata."""

    lines: list[InvoiceLine] = Field(default_factory=list)
    confidence: float | None = None
    invoice: InvoiceMeta = Field(default_factory=InvoiceMeta)
    warnings: list[str] = Field(default_factory=list)
