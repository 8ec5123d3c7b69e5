"""
Line-level invoice reconciliation.

Compares a parsed invoice against the submitted order using the same
name matcher as the quality gate, and reports counts, totals, per-line
deltas and suspicious lines.
"""

from collections.abc import Sequence

from parstock.config import get_logger
from parstock.core.entities.invoice import InvoiceLine
from parstock.core.entities.orders import OrderLine
from parstock.core.entities.reconciliation import (
    Anomaly,
    AnomalyType,
    LineDelta,
    ReconciliationCounts,
    ReconciliationSummary,
    ReconciliationTotals,
)
from parstock.core.services.quality_gate import (
    MatchResult,
    is_po_mismatch,
    match_lines,
    normalize_name,
)

logger = get_logger(__name__)

DEFAULT_PRICE_TOLERANCE = 0.01
DEFAULT_QTY_TOLERANCE = 0.0


def _money(value: float) -> float:
    return round(value, 2)


class ReconciliationEngine:
    """
    Builds a ReconciliationSummary for one invoice/order pair.

    Tolerances are absolute: a matched pair whose unit prices differ by more
    than price_tolerance counts as a price change, and likewise for qty.
    """

    def __init__(
        self,
        price_tolerance: float = DEFAULT_PRICE_TOLERANCE,
        qty_tolerance: float = DEFAULT_QTY_TOLERANCE,
    ):
        self.price_tolerance = price_tolerance
        self.qty_tolerance = qty_tolerance

    def reconcile(
        self,
        order_lines: Sequence[OrderLine],
        invoice_lines: Sequence[InvoiceLine],
        order_po: str | None = None,
        invoice_po: str | None = None,
        matches: MatchResult | None = None,
    ) -> ReconciliationSummary:
        matches = matches or match_lines(order_lines, invoice_lines)

        counts = ReconciliationCounts(
            matched=len(matches.pairs),
            unknown=len(matches.unmatched_invoice),
            missing_on_invoice=len(matches.unmatched_order),
        )
        deltas: list[LineDelta] = []

        for pair in matches.pairs:
            order_line, inv = pair.order_line, pair.invoice_line
            qty_delta = inv.qty - order_line.qty
            price_delta = None
            if order_line.unit_cost is not None and inv.unit_price is not None:
                price_delta = inv.unit_price - order_line.unit_cost
                if abs(price_delta) > self.price_tolerance:
                    counts.price_changes += 1
            if abs(qty_delta) > self.qty_tolerance:
                counts.qty_diffs += 1

            deltas.append(
                LineDelta(
                    name=order_line.name,
                    product_id=order_line.product_id,
                    ordered_qty=order_line.qty,
                    invoiced_qty=inv.qty,
                    ordered_unit_cost=order_line.unit_cost,
                    invoiced_unit_price=inv.unit_price,
                    qty_delta=qty_delta,
                    price_delta=price_delta,
                )
            )

        ordered = sum(line.qty * (line.unit_cost or 0.0) for line in order_lines)
        invoiced = sum(line.qty * (line.unit_price or 0.0) for line in invoice_lines)
        totals = ReconciliationTotals(
            ordered=_money(ordered),
            invoiced=_money(invoiced),
            delta=_money(invoiced - ordered),
        )

        summary = ReconciliationSummary(
            po_match=not is_po_mismatch(order_po, invoice_po),
            counts=counts,
            totals=totals,
            deltas=deltas,
            anomalies=self.find_anomalies(invoice_lines),
        )

        logger.debug(
            "invoice_reconciled",
            matched=counts.matched,
            unknown=counts.unknown,
            missing=counts.missing_on_invoice,
            delta=totals.delta,
        )
        return summary

    @staticmethod
    def find_anomalies(invoice_lines: Sequence[InvoiceLine]) -> list[Anomaly]:
        """Flag negative quantities, bad prices and repeated names."""
        anomalies: list[Anomaly] = []
        seen: set[str] = set()

        for line in invoice_lines:
            if line.qty < 0:
                anomalies.append(
                    Anomaly(type=AnomalyType.NEGATIVE_QTY, name=line.name, detail=str(line.qty))
                )
            if line.unit_price is not None:
                if line.unit_price < 0:
                    anomalies.append(
                        Anomaly(
                            type=AnomalyType.NEGATIVE_PRICE,
                            name=line.name,
                            detail=str(line.unit_price),
                        )
                    )
                elif line.unit_price == 0:
                    anomalies.append(Anomaly(type=AnomalyType.ZERO_PRICE, name=line.name))

            key = normalize_name(line.name)
            if key in seen:
                anomalies.append(Anomaly(type=AnomalyType.DUPLICATE, name=line.name))
            elif key:
                seen.add(key)

        return anomalies
