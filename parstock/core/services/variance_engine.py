"""
Variance engine.

variance = on_hand - par, valued at unit cost. Negative rows are shortages,
positive rows are excess, zero rows are neither. Products without a par level
are not applicable and never appear. A product with a par but no counted
location is zero on hand, a full shortage, in venue-wide reports; a
department report only covers products with an item in that department.
"""

from collections.abc import Iterable, Sequence

from parstock.config import get_logger
from parstock.core.entities.catalog import Product
from parstock.core.entities.counts import AreaItem
from parstock.core.entities.variance import (
    VarianceBandSummary,
    VarianceResult,
    VarianceRow,
    VarianceTotals,
)

logger = get_logger(__name__)

DEFAULT_BAND_PCT = 1.5


def _money(value: float) -> float:
    return round(value, 2)


def _impact_order(row: VarianceRow) -> tuple[float, str]:
    return (-abs(row.value_impact), row.name)


class VarianceEngine:
    """Computes shortage/excess reports from par levels and last counts."""

    def __init__(self, include_uncounted: bool = True):
        # When False, products with no area item are skipped instead of being
        # reported as zero on hand.
        self.include_uncounted = include_uncounted

    @staticmethod
    def sum_on_hand(
        items: Iterable[AreaItem],
        department_id: str | None = None,
    ) -> tuple[dict[str, float], dict[str, float]]:
        """Per-product on-hand and first per-item cost override."""
        on_hand: dict[str, float] = {}
        cost_override: dict[str, float] = {}
        for item in items:
            if item.is_orphan:
                continue
            if department_id and item.department_id != department_id:
                continue
            pid = item.product_id  # type: ignore[assignment]
            on_hand[pid] = on_hand.get(pid, 0.0) + (item.last_count or 0.0)
            if item.unit_cost is not None and pid not in cost_override:
                cost_override[pid] = item.unit_cost
        return on_hand, cost_override

    def compute(
        self,
        products: Sequence[Product],
        items: Iterable[AreaItem],
        department_id: str | None = None,
    ) -> VarianceResult:
        on_hand, cost_override = self.sum_on_hand(items, department_id)

        rows: list[VarianceRow] = []
        for product in products:
            if product.par_level is None:
                continue
            if product.id not in on_hand and (department_id or not self.include_uncounted):
                continue

            current = on_hand.get(product.id, 0.0)
            cost = (
                product.unit_cost
                if product.unit_cost is not None
                else cost_override.get(product.id)
            )
            variance = current - product.par_level
            rows.append(
                VarianceRow(
                    product_id=product.id,
                    name=product.name,
                    par=product.par_level,
                    on_hand=current,
                    variance=variance,
                    unit_cost=cost,
                    value_impact=_money(variance * cost) if cost is not None else 0.0,
                    supplier_id=product.supplier_id,
                )
            )

        shortages = sorted((r for r in rows if r.variance < 0), key=_impact_order)
        excess = sorted((r for r in rows if r.variance > 0), key=_impact_order)

        totals = VarianceTotals(
            shortage_value=_money(sum(r.value_impact for r in shortages)),
            excess_value=_money(sum(r.value_impact for r in excess)),
            shortage_count=len(shortages),
            excess_count=len(excess),
        )

        logger.info(
            "variance_computed",
            department_id=department_id,
            rows=len(rows),
            shortages=totals.shortage_count,
            excess=totals.excess_count,
            shortage_value=totals.shortage_value,
            excess_value=totals.excess_value,
        )

        return VarianceResult(
            rows=rows,
            shortages=shortages,
            excess=excess,
            totals=totals,
            department_id=department_id,
        )


def variance_pct(row: VarianceRow) -> float:
    """Variance as a percentage of par (or on-hand when par is zero)."""
    base = row.par or row.on_hand
    return row.variance / max(1.0, base) * 100


def summarize_bands(
    result: VarianceResult,
    band_pct: float = DEFAULT_BAND_PCT,
) -> VarianceBandSummary:
    """Split non-zero variance rows into material (outside the band) and minor."""
    material: list[VarianceRow] = []
    minor: list[VarianceRow] = []
    for row in result.shortages + result.excess:
        if abs(variance_pct(row)) >= band_pct:
            material.append(row)
        else:
            minor.append(row)

    material.sort(key=_impact_order)
    minor.sort(key=_impact_order)

    if not material and not minor:
        message = "All products are at par."
    elif not material:
        message = f"All variances are within ±{band_pct:g}%."
    else:
        message = (
            f"{len(material)} product(s) outside ±{band_pct:g}%, "
            f"shortage {result.totals.shortage_value:.2f}, "
            f"excess {result.totals.excess_value:.2f}."
        )

    return VarianceBandSummary(
        band_pct=band_pct,
        material=material,
        minor=minor,
        message=message,
    )
