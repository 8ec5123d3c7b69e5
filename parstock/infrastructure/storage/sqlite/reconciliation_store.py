"""SQLite implementation of reconciliation snapshot storage."""

import json
import uuid
from datetime import datetime

import aiosqlite

from parstock.config import get_logger
from parstock.core.entities.invoice import InvoiceMeta
from parstock.core.entities.reconciliation import (
    ConfidenceTier,
    ReconciliationRecord,
    ReconciliationSummary,
)
from parstock.core.interfaces.reconciliation_store import IReconciliationStore
from parstock.infrastructure.storage.sqlite.connection import get_connection

logger = get_logger(__name__)


class SQLiteReconciliationStore(IReconciliationStore):
    """Records are inserted once and never updated."""

    async def save_record(self, record: ReconciliationRecord) -> ReconciliationRecord:
        record.id = record.id or uuid.uuid4().hex
        async with get_connection() as conn:
            await conn.execute(
                """
                INSERT INTO reconciliations (
                    id, venue_id, order_id, invoice_json, summary_json,
                    confidence, tier, meta_json, warnings_json, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    record.id,
                    record.venue_id,
                    record.order_id,
                    record.invoice.model_dump_json(),
                    record.summary.model_dump_json(),
                    record.confidence,
                    record.tier.value,
                    json.dumps(record.meta),
                    json.dumps(record.warnings),
                    record.created_at.isoformat(),
                ),
            )
        logger.info(
            "reconciliation_saved",
            reconciliation_id=record.id,
            order_id=record.order_id,
            confidence=record.confidence,
        )
        return record

    async def get_record(self, record_id: str) -> ReconciliationRecord | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM reconciliations WHERE id = ?", (record_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_record(row)

    async def list_for_order(self, venue_id: str, order_id: str) -> list[ReconciliationRecord]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM reconciliations
                WHERE venue_id = ? AND order_id = ?
                ORDER BY created_at DESC, id
                """,
                (venue_id, order_id),
            )
            return [self._row_to_record(row) for row in await cursor.fetchall()]

    @staticmethod
    def _row_to_record(row: aiosqlite.Row) -> ReconciliationRecord:
        return ReconciliationRecord(
            id=row["id"],
            venue_id=row["venue_id"],
            order_id=row["order_id"],
            invoice=InvoiceMeta.model_validate_json(row["invoice_json"]),
            summary=ReconciliationSummary.model_validate_json(row["summary_json"]),
            confidence=row["confidence"],
            tier=ConfidenceTier(row["tier"]),
            meta=json.loads(row["meta_json"]),
            warnings=json.loads(row["warnings_json"]),
            created_at=datetime.fromisoformat(row["created_at"]),
        )
