"""Unit tests for VarianceEngine and band summaries."""

import pytest

from parstock.core.entities import AreaItem, Product
from parstock.core.services.variance_engine import VarianceEngine, summarize_bands, variance_pct


def _product(pid: str, par: float | None, cost: float | None = 1.0, name: str | None = None) -> Product:
    return Product(id=pid, venue_id="v", name=name or pid, par_level=par, unit_cost=cost)


def _item(pid: str | None, count: float | None, dept: str = "d-bar") -> AreaItem:
    return AreaItem(id=f"i-{pid}-{dept}", area_id="a", product_id=pid, name="x", last_count=count, department_id=dept)


class TestVarianceEngine:
    def test_shortage_row(self):
        result = VarianceEngine().compute([_product("p", 20, 2.50)], [_item("p", 15)])

        (row,) = result.rows
        assert row.variance == -5
        assert row.value_impact == -12.50
        assert result.shortages == [row]
        assert result.excess == []
        assert result.totals.shortage_value == -12.50
        assert result.totals.shortage_count == 1

    def test_excess_and_at_par(self):
        result = VarianceEngine().compute(
            [_product("over", 10, 3.0), _product("even", 5)],
            [_item("over", 12), _item("even", 5)],
        )
        assert [r.product_id for r in result.excess] == ["over"]
        assert result.totals.excess_value == 6.0
        assert result.shortages == []
        assert len(result.rows) == 2

    def test_products_without_par_are_skipped(self):
        result = VarianceEngine().compute([_product("p", None)], [_item("p", 3)])
        assert result.rows == []

    def test_missing_cost_has_zero_impact(self):
        result = VarianceEngine().compute([_product("p", 10, None)], [_item("p", 4)])
        assert result.shortages[0].value_impact == 0.0

    def test_sorted_by_impact_then_name(self):
        products = [
            _product("small", 10, 1.0, name="Small"),
            _product("big", 10, 5.0, name="Big"),
            _product("tie-b", 10, 1.0, name="Banana"),
            _product("tie-a", 10, 1.0, name="Apple"),
        ]
        items = [_item("small", 9), _item("big", 5), _item("tie-b", 7), _item("tie-a", 7)]
        result = VarianceEngine().compute(products, items)
        assert [r.name for r in result.shortages] == ["Big", "Apple", "Banana", "Small"]

    def test_uncounted_product_with_par_is_full_shortage(self):
        result = VarianceEngine().compute([_product("p", 20, 2.50)], [])

        (row,) = result.shortages
        assert row.on_hand == 0
        assert row.variance == -20
        assert row.value_impact == -50.0
        assert result.totals.shortage_value == -50.0

    def test_uncounted_can_be_skipped(self):
        assert VarianceEngine(include_uncounted=False).compute([_product("p", 10)], []).rows == []

    def test_department_report_leaves_out_other_departments(self):
        items = [_item("bar-only", 4, dept="d-bar")]
        products = [_product("bar-only", 10), _product("kitchen-only", 10)]

        kitchen = VarianceEngine().compute(products, items, department_id="d-kitchen")
        assert kitchen.rows == []

        whole = VarianceEngine().compute(products, items)
        assert {r.product_id for r in whole.shortages} == {"bar-only", "kitchen-only"}

    def test_department_filter(self):
        items = [_item("p", 4, dept="d-bar"), _item("p", 6, dept="d-kitchen")]
        bar = VarianceEngine().compute([_product("p", 10)], items, department_id="d-bar")
        assert bar.department_id == "d-bar"
        assert bar.rows[0].on_hand == 4

        whole = VarianceEngine().compute([_product("p", 10)], items)
        assert whole.rows[0].variance == 0

    def test_orphans_ignored(self):
        result = VarianceEngine().compute([_product("p", 10)], [_item(None, 50), _item("p", 10)])
        assert result.rows[0].on_hand == 10


class TestBands:
    def test_variance_pct_uses_par(self):
        result = VarianceEngine().compute([_product("p", 200)], [_item("p", 198)])
        assert variance_pct(result.rows[0]) == pytest.approx(-1.0)

    def test_material_and_minor(self):
        result = VarianceEngine().compute(
            [_product("minor", 200), _product("material", 10)],
            [_item("minor", 198), _item("material", 5)],
        )
        bands = summarize_bands(result, band_pct=1.5)
        assert [r.product_id for r in bands.material] == ["material"]
        assert [r.product_id for r in bands.minor] == ["minor"]
        assert "1 product(s) outside ±1.5%" in bands.message

    def test_all_at_par_message(self):
        result = VarianceEngine().compute([_product("p", 10)], [_item("p", 10)])
        assert summarize_bands(result).message == "All products are at par."

    def test_all_within_band_message(self):
        result = VarianceEngine().compute([_product("p", 200)], [_item("p", 199)])
        bands = summarize_bands(result, band_pct=2)
        assert bands.material == []
        assert bands.message == "All variances are within ±2%."
