"""API tests for invoice gating and the reconcile-invoice endpoint."""

from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient

from parstock.api.dependencies import get_gate_invoice_use_case, get_local_gate_invoice_use_case
from parstock.api.main import app
from parstock.application.use_cases.gate_invoice import GateInvoiceUseCase
from parstock.core.exceptions import RemoteReconciliationError


@pytest.fixture
def mock_order_store(submitted_order, cola_order_lines):
    store = AsyncMock()
    store.get_order.return_value = submitted_order
    store.list_order_lines.return_value = cola_order_lines
    return store


@pytest.fixture
def mock_reconciliation_store():
    store = AsyncMock()

    async def save(record):
        return record.model_copy(update={"id": "rec-1"})

    store.save_record.side_effect = save
    return store


@pytest.fixture
def local_use_case(mock_order_store, mock_reconciliation_store):
    return GateInvoiceUseCase(
        order_store=mock_order_store,
        reconciliation_store=mock_reconciliation_store,
        mode="local",
    )


def _gate_body(po: str = "PO-1") -> dict:
    return {
        "lines": [{"name": "Cola 330ml", "qty": 24, "unit_price": 1.0}],
        "parser_confidence": 0.9,
        "invoice": {"source": "pdf", "po_number": po},
    }


class TestGateEndpoint:
    async def test_gate_scores_invoice(self, client: AsyncClient, local_use_case):
        app.dependency_overrides[get_gate_invoice_use_case] = lambda: local_use_case

        response = await client.post("/api/venues/venue-1/orders/ord-1/gate", json=_gate_body())

        assert response.status_code == 200
        data = response.json()
        assert data["order_id"] == "ord-1"
        assert data["mode"] == "local"
        assert data["reconciliation_id"] == "rec-1"
        assert data["result"]["decision"] == "confirm"
        assert data["result"]["tier"] == "medium"
        assert data["summary"]["counts"]["matched"] == 1

    async def test_path_ids_win_over_body(self, client: AsyncClient, local_use_case, mock_order_store):
        app.dependency_overrides[get_gate_invoice_use_case] = lambda: local_use_case
        body = {**_gate_body(), "venue_id": "venue-x", "order_id": "ord-x"}

        await client.post("/api/venues/venue-1/orders/ord-1/gate", json=body)

        mock_order_store.get_order.assert_awaited_once_with("venue-1", "ord-1")

    async def test_po_mismatch_is_ok_response(self, client: AsyncClient, local_use_case):
        app.dependency_overrides[get_gate_invoice_use_case] = lambda: local_use_case

        response = await client.post(
            "/api/venues/venue-1/orders/ord-1/gate", json=_gate_body(po="PO-999")
        )

        assert response.status_code == 200
        result = response.json()["result"]
        assert result["po_mismatch"] is True
        assert result["final_confidence"] == 0
        assert result["decision"] == "resolve_po_mismatch"

    async def test_unknown_order_is_404(self, client: AsyncClient, local_use_case, mock_order_store):
        mock_order_store.get_order.return_value = None
        app.dependency_overrides[get_gate_invoice_use_case] = lambda: local_use_case

        response = await client.post("/api/venues/venue-1/orders/ord-9/gate", json=_gate_body())

        assert response.status_code == 404
        data = response.json()
        assert data["error_code"] == "ORDER_NOT_FOUND"
        assert data["hint"]

    async def test_error_body_carries_request_id(
        self, client: AsyncClient, local_use_case, mock_order_store
    ):
        mock_order_store.get_order.return_value = None
        app.dependency_overrides[get_gate_invoice_use_case] = lambda: local_use_case

        response = await client.post(
            "/api/venues/venue-1/orders/ord-9/gate",
            json=_gate_body(),
            headers={"X-Request-ID": "req-gate-1"},
        )

        assert response.json()["request_id"] == "req-gate-1"
        assert response.headers["X-Request-ID"] == "req-gate-1"

    async def test_remote_failure_is_502(
        self, client: AsyncClient, mock_order_store, mock_reconciliation_store
    ):
        remote = AsyncMock()
        remote.reconcile.side_effect = RemoteReconciliationError("HTTP 503: down", status_code=503)
        use_case = GateInvoiceUseCase(
            order_store=mock_order_store,
            reconciliation_store=mock_reconciliation_store,
            remote_service=remote,
            mode="remote",
        )
        app.dependency_overrides[get_gate_invoice_use_case] = lambda: use_case

        response = await client.post("/api/venues/venue-1/orders/ord-1/gate", json=_gate_body())

        assert response.status_code == 502
        assert response.json()["error_code"] == "REMOTE_RECONCILIATION_FAILED"

    async def test_malformed_body_is_422(self, client: AsyncClient, local_use_case):
        app.dependency_overrides[get_gate_invoice_use_case] = lambda: local_use_case

        response = await client.post(
            "/api/venues/venue-1/orders/ord-1/gate", json={"lines": [{"qty": 1}]}
        )

        assert response.status_code == 422
        assert response.json()["error_code"] == "VALIDATION_ERROR"


class TestReconcileInvoiceEndpoint:
    async def test_camel_case_contract(self, client: AsyncClient, local_use_case):
        app.dependency_overrides[get_local_gate_invoice_use_case] = lambda: local_use_case

        response = await client.post(
            "/api/reconcile-invoice",
            json={
                "venueId": "venue-1",
                "orderId": "ord-1",
                "invoice": {"source": "csv", "poNumber": "PO-1"},
                "lines": [{"name": "Cola 330ml", "qty": 24, "unitPrice": 1.1}],
                "orderPo": "PO-1",
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["ok"] is True
        assert data["reconciliationId"] == "rec-1"
        assert data["summary"]["poMatch"] is True
        assert data["summary"]["counts"]["priceChanges"] == 1
        assert data["quality"]["matchedCount"] == 1

    async def test_failure_reported_in_band(self, client: AsyncClient, local_use_case, mock_order_store):
        mock_order_store.get_order.return_value = None
        app.dependency_overrides[get_local_gate_invoice_use_case] = lambda: local_use_case

        response = await client.post(
            "/api/reconcile-invoice", json={"venueId": "venue-1", "orderId": "ord-9"}
        )

        assert response.status_code == 404
        data = response.json()
        assert data["ok"] is False
        assert "ord-9" in data["error"]
