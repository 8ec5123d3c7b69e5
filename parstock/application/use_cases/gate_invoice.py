"""Gate Invoice Use Case: score a parsed invoice against its submitted order."""

from dataclasses import dataclass

from parstock.application.dto.requests import GateInvoiceRequest
from parstock.application.dto.responses import GateInvoiceResponse
from parstock.application.use_cases.venue_snapshot import require
from parstock.config import get_logger, get_settings
from parstock.core.entities.orders import Order
from parstock.core.entities.reconciliation import (
    GateResult,
    ReconciliationRecord,
    ReconciliationSummary,
)
from parstock.core.exceptions import OrderNotFoundError
from parstock.core.interfaces.order_store import IOrderStore
from parstock.core.interfaces.reconciliation_service import IReconciliationService
from parstock.core.interfaces.reconciliation_store import IReconciliationStore
from parstock.core.services.quality_gate import (
    apply_quality_gate,
    gate_with_quality,
    match_lines,
)
from parstock.core.services.reconciliation_engine import ReconciliationEngine

logger = get_logger(__name__)


@dataclass
class GateInvoiceResult:
    """Gate outcome plus the audit side channel.

    audit_write_error is set when the reconciliation snapshot could not be
    persisted; the gate result itself is still valid.
    """

    order: Order
    result: GateResult
    summary: ReconciliationSummary
    reconciliation_id: str | None = None
    audit_write_error: str | None = None
    mode: str = "local"


class GateInvoiceUseCase:
    """
    Score a parsed invoice and decide how the caller should handle it.

    In local mode the quality gate and reconciliation run in-process and the
    snapshot is written here. In remote mode both are delegated to the
    reconciliation service; the PO rule is re-applied on this side.
    """

    def __init__(
        self,
        order_store: IOrderStore | None = None,
        reconciliation_store: IReconciliationStore | None = None,
        remote_service: IReconciliationService | None = None,
        engine: ReconciliationEngine | None = None,
        mode: str | None = None,
    ):
        self._order_store = order_store
        self._reconciliation_store = reconciliation_store
        self._remote_service = remote_service
        self._engine = engine
        self.mode = mode or get_settings().recon.mode

    async def _get_order_store(self) -> IOrderStore:
        if self._order_store is None:
            from parstock.infrastructure.storage.sqlite import get_order_store

            self._order_store = await get_order_store()
        return self._order_store

    async def _get_reconciliation_store(self) -> IReconciliationStore:
        if self._reconciliation_store is None:
            from parstock.infrastructure.storage.sqlite import get_reconciliation_store

            self._reconciliation_store = await get_reconciliation_store()
        return self._reconciliation_store

    def _get_remote_service(self) -> IReconciliationService:
        if self._remote_service is None:
            from parstock.infrastructure.remote import get_reconciliation_client

            self._remote_service = get_reconciliation_client()
        return self._remote_service

    def _get_engine(self) -> ReconciliationEngine:
        if self._engine is None:
            from parstock.application.services import get_reconciliation_engine

            self._engine = get_reconciliation_engine()
        return self._engine

    async def execute(self, request: GateInvoiceRequest) -> GateInvoiceResult:
        venue_id = require("venue_id", request.venue_id)
        order_id = require("order_id", request.order_id)

        order_store = await self._get_order_store()
        order = await order_store.get_order(venue_id, order_id)
        if order is None:
            raise OrderNotFoundError(order_id)

        logger.info(
            "gate_invoice_started",
            venue_id=venue_id,
            order_id=order_id,
            lines=len(request.lines),
            mode=self.mode,
        )

        if self.mode == "remote":
            outcome = await self._gate_remote(order, request)
        else:
            outcome = await self._gate_local(order, request)

        logger.info(
            "gate_invoice_complete",
            order_id=order_id,
            final_confidence=round(outcome.result.final_confidence, 4),
            tier=outcome.result.tier.value,
            po_mismatch=outcome.result.po_mismatch,
            decision=outcome.result.decision.value,
            reconciliation_id=outcome.reconciliation_id,
        )
        return outcome

    async def _gate_local(self, order: Order, request: GateInvoiceRequest) -> GateInvoiceResult:
        order_lines = await (await self._get_order_store()).list_order_lines(order.id)  # type: ignore[arg-type]
        invoice_po = request.invoice.po_number

        gate = apply_quality_gate(
            order.po_number,
            invoice_po,
            request.parser_confidence,
            order_lines,
            request.lines,
            default_parser_confidence=get_settings().recon.parser_confidence_default,
        )
        summary = self._get_engine().reconcile(
            order_lines,
            request.lines,
            order_po=order.po_number,
            invoice_po=invoice_po,
            matches=match_lines(order_lines, request.lines),
        )

        outcome = GateInvoiceResult(order=order, result=gate, summary=summary, mode="local")
        await self._record(outcome, request)
        return outcome

    async def _gate_remote(self, order: Order, request: GateInvoiceRequest) -> GateInvoiceResult:
        remote = await self._get_remote_service().reconcile(
            venue_id=order.venue_id,
            order_id=order.id,  # type: ignore[arg-type]
            invoice=request.invoice,
            lines=request.lines,
            order_po=order.po_number,
        )
        gate = gate_with_quality(
            order.po_number,
            request.invoice.po_number,
            request.parser_confidence,
            remote.quality,
            default_parser_confidence=get_settings().recon.parser_confidence_default,
        )
        summary = remote.summary
        if gate.po_mismatch:
            summary.po_match = False

        return GateInvoiceResult(
            order=order,
            result=gate,
            summary=summary,
            reconciliation_id=remote.reconciliation_id,
            mode="remote",
        )

    async def _record(self, outcome: GateInvoiceResult, request: GateInvoiceRequest) -> None:
        """Persist the snapshot. Never fails the gate; errors land in the result."""
        gate = outcome.result
        record = ReconciliationRecord(
            venue_id=outcome.order.venue_id,
            order_id=outcome.order.id,  # type: ignore[arg-type]
            invoice=request.invoice,
            summary=outcome.summary,
            confidence=gate.final_confidence,
            tier=gate.tier,
            meta={
                "order_po": outcome.order.po_number,
                "parsed_po": request.invoice.po_number,
                "po_mismatch": gate.po_mismatch,
                "decision": gate.decision.value,
                "parser_confidence": request.parser_confidence,
            },
            warnings=request.warnings,
        )
        try:
            store = await self._get_reconciliation_store()
            saved = await store.save_record(record)
            outcome.reconciliation_id = saved.id
        except Exception as e:
            outcome.audit_write_error = str(e) or e.__class__.__name__
            logger.warning(
                "reconciliation_write_failed",
                order_id=outcome.order.id,
                error=outcome.audit_write_error,
            )

    def to_response(self, result: GateInvoiceResult) -> GateInvoiceResponse:
        return GateInvoiceResponse(
            order_id=result.order.id,  # type: ignore[arg-type]
            result=result.result,
            summary=result.summary,
            reconciliation_id=result.reconciliation_id,
            audit_write_error=result.audit_write_error,
            mode=result.mode,
        )
