"""Tests for CreateDraftsFromSuggestionsUseCase."""

from unittest.mock import AsyncMock

import pytest

from parstock.application.dto.requests import CreateDraftsRequest
from parstock.application.use_cases.create_drafts import CreateDraftsFromSuggestionsUseCase
from parstock.core.entities import (
    UNASSIGNED_SUPPLIER_ID,
    Order,
    OrderSource,
    ScopeLock,
    ScopeLockStatus,
    ScopeMode,
)
from parstock.core.exceptions import ValidationError


@pytest.fixture
def mock_order_store():
    store = AsyncMock()
    store.find_draft_by_suggestion_key.return_value = None

    async def create(order, lines):
        return order.model_copy(update={"id": f"ord-{order.supplier_id}", "lines_count": len(lines)})

    store.create_order.side_effect = create
    return store


@pytest.fixture
def mock_scope_lock_store():
    store = AsyncMock()
    store.get_lock.return_value = None
    store.compare_and_swap.return_value = True
    return store


@pytest.fixture
def use_case(mock_catalog_store, mock_count_store, mock_order_store, mock_scope_lock_store):
    return CreateDraftsFromSuggestionsUseCase(
        catalog_store=mock_catalog_store,
        count_store=mock_count_store,
        order_store=mock_order_store,
        scope_lock_store=mock_scope_lock_store,
        lock_retries=2,
    )


def _request(**kwargs) -> CreateDraftsRequest:
    defaults = {"venue_id": "venue-1", "role": "manager", "user_id": "u-1"}
    defaults.update(kwargs)
    return CreateDraftsRequest(**defaults)


class TestCreateDrafts:
    async def test_one_draft_per_non_empty_bucket(self, use_case, mock_order_store):
        result = await use_case.execute(_request())

        assert {o.supplier_key for o in result.created} == {"sup-bev", UNASSIGNED_SUPPLIER_ID}
        assert mock_order_store.create_order.await_count == 2

        orders = {call.args[0].supplier_id: call.args for call in mock_order_store.create_order.call_args_list}
        bev_order, bev_lines = orders["sup-bev"]
        assert bev_order.source == OrderSource.SUGGESTIONS
        assert bev_order.suggestion_key == "sup-bev|p-cola:48"
        assert bev_order.needs_supplier_review is False
        assert bev_lines[0].qty == 48

        unassigned_order, unassigned_lines = orders[UNASSIGNED_SUPPLIER_ID]
        assert unassigned_order.needs_supplier_review is True
        orphan = next(line for line in unassigned_lines if line.name == "Mystery syrup")
        assert orphan.product_id is None

    async def test_existing_draft_is_reused(self, use_case, mock_order_store):
        existing = Order(id="ord-old", venue_id="venue-1", supplier_id="sup-bev")
        mock_order_store.find_draft_by_suggestion_key.side_effect = (
            lambda venue_id, key: existing if key.startswith("sup-bev|") else None
        )

        result = await use_case.execute(_request())

        statuses = {o.supplier_key: o.status for o in result.outcomes}
        assert statuses["sup-bev"] == "duplicate"
        assert statuses[UNASSIGNED_SUPPLIER_ID] == "created"
        assert mock_order_store.create_order.await_count == 1

    async def test_staff_cannot_draft_venue_wide(self, use_case, mock_order_store):
        result = await use_case.execute(_request(role="staff"))

        assert {o.status for o in result.outcomes} == {ScopeLockStatus.NEEDS_MANAGER.value}
        mock_order_store.create_order.assert_not_called()

    async def test_dept_draft_blocked_by_venue_wide_lock(self, use_case, mock_scope_lock_store):
        mock_scope_lock_store.get_lock.return_value = ScopeLock(
            venue_id="venue-1", supplier_id="sup-bev", mode=ScopeMode.ALL, version=1
        )
        result = await use_case.execute(
            _request(mode=ScopeMode.DEPT, dept_id="d-bar", supplier_keys=["sup-bev"], role="staff")
        )
        (outcome,) = result.outcomes
        assert outcome.status == "already_all_scope"
        assert outcome.lock.status == ScopeLockStatus.ALREADY_ALL_SCOPE

    async def test_dept_draft_holds_only_that_department(
        self, use_case, mock_count_store, mock_order_store
    ):
        walk = mock_count_store.list_items.side_effect
        mock_count_store.list_items.side_effect = lambda area_id: [
            item.model_copy(update={"last_count": 5}) if item.product_id == "p-flour" else item
            for item in walk(area_id)
        ]

        result = await use_case.execute(_request(mode=ScopeMode.DEPT, dept_id="d-bar", role="staff"))

        assert {o.supplier_key for o in result.created} == {"sup-bev", UNASSIGNED_SUPPLIER_ID}
        drafted = [call.args[0] for call in mock_order_store.create_order.call_args_list]
        assert all(order.dept_scope == "d-bar" for order in drafted)
        product_ids = {
            line.product_id for call in mock_order_store.create_order.call_args_list for line in call.args[1]
        }
        assert "p-flour" not in product_ids

    async def test_venue_wide_draft_repeats_over_existing_all_lock(
        self, use_case, mock_scope_lock_store, mock_order_store
    ):
        mock_scope_lock_store.get_lock.return_value = ScopeLock(
            venue_id="venue-1", supplier_id="sup-bev", mode=ScopeMode.ALL, version=3
        )

        result = await use_case.execute(_request(supplier_keys=["sup-bev"]))

        (outcome,) = result.outcomes
        assert outcome.status == "created"
        lock, expected = mock_scope_lock_store.compare_and_swap.await_args.args
        assert lock.mode == ScopeMode.ALL
        assert expected == 3

    async def test_dept_mode_requires_dept_id(self, use_case):
        with pytest.raises(ValidationError):
            await use_case.execute(_request(mode=ScopeMode.DEPT))

    async def test_lock_contention_exhausts_retries(self, use_case, mock_scope_lock_store, mock_order_store):
        mock_scope_lock_store.compare_and_swap.return_value = False

        result = await use_case.execute(_request(supplier_keys=["sup-bev"]))

        (outcome,) = result.outcomes
        assert outcome.status == "failed"
        assert mock_scope_lock_store.compare_and_swap.await_count == 2
        mock_order_store.create_order.assert_not_called()

    async def test_zero_lock_retries_is_not_replaced_by_settings(
        self, mock_catalog_store, mock_count_store, mock_order_store, mock_scope_lock_store
    ):
        use_case = CreateDraftsFromSuggestionsUseCase(
            catalog_store=mock_catalog_store,
            count_store=mock_count_store,
            order_store=mock_order_store,
            scope_lock_store=mock_scope_lock_store,
            lock_retries=0,
        )
        assert use_case.lock_retries == 0

        result = await use_case.execute(_request(supplier_keys=["sup-bev"]))

        assert [o.status for o in result.outcomes] == ["failed"]
        mock_scope_lock_store.compare_and_swap.assert_not_called()

    async def test_create_failure_releases_fresh_lock_and_continues(
        self, use_case, mock_order_store, mock_scope_lock_store
    ):
        async def create(order, lines):
            if order.supplier_id == "sup-bev":
                raise RuntimeError("database is locked")
            return order.model_copy(update={"id": "ord-ok"})

        mock_order_store.create_order.side_effect = create

        result = await use_case.execute(_request())

        statuses = {o.supplier_key: o.status for o in result.outcomes}
        assert statuses == {"sup-bev": "failed", UNASSIGNED_SUPPLIER_ID: "created"}
        mock_scope_lock_store.release.assert_awaited_once_with("venue-1", "sup-bev")

    async def test_supplier_filter_accepts_aliases(self, use_case):
        result = await use_case.execute(_request(supplier_keys=["__no_supplier__"]))
        assert [o.supplier_key for o in result.outcomes] == [UNASSIGNED_SUPPLIER_ID]

    async def test_to_response_counts(self, use_case, mock_order_store):
        mock_order_store.find_draft_by_suggestion_key.side_effect = (
            lambda venue_id, key: Order(id="old", venue_id="venue-1", supplier_id="sup-bev")
            if key.startswith("sup-bev|")
            else None
        )
        response = use_case.to_response(await use_case.execute(_request()))
        assert response.created == 1
        assert response.skipped == 1
        assert response.failed == 0
