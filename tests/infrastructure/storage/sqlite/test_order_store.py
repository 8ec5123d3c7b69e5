"""Tests for SQLite order store."""

import pytest

from parstock.core.entities.orders import Order, OrderLine, OrderSource, OrderStatus
from parstock.core.exceptions import DatabaseError
from parstock.infrastructure.storage.sqlite.order_store import SQLiteOrderStore


@pytest.fixture
def store(pooled_db) -> SQLiteOrderStore:
    return SQLiteOrderStore()


def _draft(**overrides) -> Order:
    fields = {
        "venue_id": "venue-1",
        "supplier_id": "sup-bev",
        "source": OrderSource.SUGGESTIONS,
        "suggestion_key": "venue-1:sup-bev:abc",
        "created_by": "tester",
    }
    fields.update(overrides)
    return Order(**fields)


class TestCreateOrder:
    """Header and lines land together."""

    async def test_create_assigns_ids_and_totals(self, store):
        lines = [
            OrderLine(product_id="p-cola", name="Cola", qty=24, unit_cost=1.0, pack_size=24),
            OrderLine(name="Mystery syrup", qty=1, needs_par=True),
        ]

        order = await store.create_order(_draft(), lines)

        assert order.id
        assert order.lines_count == 2
        assert order.total == 24.0
        assert all(line.order_id == order.id for line in lines)

        stored = await store.get_order("venue-1", order.id)
        assert stored is not None
        assert stored.status == OrderStatus.DRAFT
        assert stored.source == OrderSource.SUGGESTIONS
        assert stored.total == 24.0

    async def test_lines_keep_position(self, store):
        lines = [OrderLine(name=name, qty=1) for name in ["Zest", "Apple", "Mint"]]
        order = await store.create_order(_draft(), lines)

        stored = await store.list_order_lines(order.id)
        assert [line.name for line in stored] == ["Zest", "Apple", "Mint"]
        assert stored[0].needs_par is False

    async def test_failed_line_rolls_back_header(self, store):
        lines = [OrderLine(id="dup", name="A", qty=1), OrderLine(id="dup", name="B", qty=1)]

        with pytest.raises(DatabaseError, match="UNIQUE"):
            await store.create_order(_draft(id="ord-x"), lines)

        assert await store.get_order("venue-1", "ord-x") is None
        assert await store.list_order_lines("ord-x") == []


class TestQueries:
    """Lookups used by draft creation and gating."""

    async def test_find_draft_by_suggestion_key(self, store):
        created = await store.create_order(_draft(), [])

        found = await store.find_draft_by_suggestion_key("venue-1", "venue-1:sup-bev:abc")
        assert found is not None
        assert found.id == created.id
        assert await store.find_draft_by_suggestion_key("venue-1", "other") is None

    async def test_submitted_orders_are_not_drafts(self, store):
        await store.create_order(_draft(status=OrderStatus.SUBMITTED), [])
        assert await store.find_draft_by_suggestion_key("venue-1", "venue-1:sup-bev:abc") is None

    async def test_list_orders_filters_status(self, store):
        await store.create_order(_draft(), [])
        await store.create_order(_draft(status=OrderStatus.SUBMITTED, po_number="PO-9"), [])
        await store.create_order(_draft(venue_id="venue-2"), [])

        assert len(await store.list_orders("venue-1")) == 2
        submitted = await store.list_orders("venue-1", status=OrderStatus.SUBMITTED)
        assert [o.po_number for o in submitted] == ["PO-9"]

    async def test_get_order_is_venue_scoped(self, store):
        order = await store.create_order(_draft(), [])
        assert await store.get_order("venue-2", order.id) is None
