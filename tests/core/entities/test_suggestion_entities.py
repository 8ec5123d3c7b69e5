"""Tests for suggested order entities."""

from parstock.core.entities import (
    SuggestedLine,
    SuggestedOrderPlan,
    SuggestionReason,
    SupplierBucket,
)


def _line(pid: str, qty: float, cost: float | None = 1.0, **kwargs) -> SuggestedLine:
    return SuggestedLine(product_id=pid, name=pid, qty=qty, unit_cost=cost, supplier_key="sup", **kwargs)


class TestSupplierBucket:
    def test_total_rounds_to_cents(self):
        bucket = SupplierBucket(supplier_key="sup", lines=[_line("a", 3, 0.333), _line("b", 1, 0.1)])
        assert bucket.total == 1.1

    def test_missing_cost_counts_as_zero(self):
        bucket = SupplierBucket(supplier_key="sup", lines=[_line("a", 5, None)])
        assert bucket.total == 0.0

    def test_needs_review(self):
        clean = SupplierBucket(supplier_key="sup", lines=[_line("a", 1)])
        flagged = SupplierBucket(
            supplier_key="sup",
            lines=[_line("a", 1), _line("b", 6, needs_par=True, reason=SuggestionReason.NO_PAR_ZERO_STOCK)],
        )
        assert clean.needs_review is False
        assert flagged.needs_review is True


class TestSuggestedOrderPlan:
    def test_line_count_and_non_empty(self):
        plan = SuggestedOrderPlan(
            buckets={
                "unassigned": SupplierBucket(supplier_key="unassigned"),
                "sup": SupplierBucket(supplier_key="sup", lines=[_line("a", 1), _line("b", 2)]),
            }
        )
        assert plan.line_count == 2
        assert [b.supplier_key for b in plan.non_empty()] == ["sup"]

    def test_lines_by_supplier(self):
        plan = SuggestedOrderPlan(
            buckets={
                "unassigned": SupplierBucket(supplier_key="unassigned"),
                "sup": SupplierBucket(supplier_key="sup", lines=[_line("a", 1)]),
            }
        )
        mapping = plan.lines_by_supplier()
        assert mapping["unassigned"] == []
        assert [line.product_id for line in mapping["sup"]] == ["a"]
