"""Suggested order entities. Recomputed on every build, never authoritative."""

from enum import Enum

from pydantic import BaseModel, Field


class SuggestionReason(str, Enum):
    BELOW_PAR = "below_par"
    NO_PAR_ZERO_STOCK = "no_par_zero_stock"
    NO_SUPPLIER = "no_supplier"


class SuggestedLine(BaseModel):
    """One product (or orphan item) to reorder."""

    product_id: str  # area item id for orphans
    name: str
    qty: float
    unit_cost: float | None = None
    pack_size: float | None = None
    supplier_key: str
    needs_par: bool = False
    needs_supplier: bool = False
    reason: SuggestionReason = SuggestionReason.BELOW_PAR
    on_hand: float = 0.0
    par_level: float | None = None
    is_orphan: bool = False

    @property
    def line_total(self) -> float:
        return self.qty * (self.unit_cost or 0.0)


class SupplierBucket(BaseModel):
    """Suggested lines for one supplier."""

    supplier_key: str
    supplier_name: str | None = None
    lines: list[SuggestedLine] = Field(default_factory=list)

    @property
    def total(self) -> float:
        return round(sum(line.line_total for line in self.lines), 2)

    @property
    def needs_review(self) -> bool:
        return any(line.needs_par or line.needs_supplier for line in self.lines)


class SuggestedOrderPlan(BaseModel):
    """Replenishment plan keyed by canonical supplier key."""

    venue_id: str | None = None
    buckets: dict[str, SupplierBucket] = Field(default_factory=dict)

    @property
    def line_count(self) -> int:
        return sum(len(b.lines) for b in self.buckets.values())

    def non_empty(self) -> list[SupplierBucket]:
        return [b for b in self.buckets.values() if b.lines]

    def lines_by_supplier(self) -> dict[str, list[SuggestedLine]]:
        """Flat supplier key to lines mapping, empty buckets included."""
        return {key: list(bucket.lines) for key, bucket in self.buckets.items()}
