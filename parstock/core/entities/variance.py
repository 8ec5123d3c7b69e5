"""Variance report entities."""

from pydantic import BaseModel, Field


class VarianceRow(BaseModel):
    """Par vs on-hand for one product, valued at unit cost."""

    product_id: str
    name: str
    par: float
    on_hand: float
    variance: float  # on_hand - par
    unit_cost: float | None = None
    value_impact: float = 0.0
    supplier_id: str | None = None


class VarianceTotals(BaseModel):
    shortage_value: float = 0.0  # <= 0
    excess_value: float = 0.0  # >= 0
    shortage_count: int = 0
    excess_count: int = 0


class VarianceResult(BaseModel):
    rows: list[VarianceRow] = Field(default_factory=list)
    shortages: list[VarianceRow] = Field(default_factory=list)
    excess: list[VarianceRow] = Field(default_factory=list)
    totals: VarianceTotals = Field(default_factory=VarianceTotals)
    department_id: str | None = None


class VarianceBandSummary(BaseModel):
    """Splits variance rows into material and minor by percentage band."""

    band_pct: float
    material: list[VarianceRow] = Field(default_factory=list)
    minor: list[VarianceRow] = Field(default_factory=list)
    message: str = ""
