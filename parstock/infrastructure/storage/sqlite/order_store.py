"""SQLite implementation of purchase order storage."""

import uuid
from datetime import datetime

import aiosqlite

from parstock.config import get_logger
from parstock.core.entities.orders import Order, OrderLine, OrderSource, OrderStatus
from parstock.core.interfaces.order_store import IOrderStore
from parstock.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


class SQLiteOrderStore(IOrderStore):
    """SQLite implementation of order storage."""

    async def get_order(self, venue_id: str, order_id: str) -> Order | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM orders WHERE venue_id = ? AND id = ?",
                (venue_id, order_id),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_order(row)

    async def list_orders(
        self, venue_id: str, status: OrderStatus | None = None, limit: int = 100
    ) -> list[Order]:
        query = "SELECT * FROM orders WHERE venue_id = ?"
        params: list[object] = [venue_id]
        if status is not None:
            query += " AND status = ?"
            params.append(status.value)
        query += " ORDER BY created_at DESC, id LIMIT ?"
        params.append(limit)

        async with get_connection() as conn:
            cursor = await conn.execute(query, params)
            return [self._row_to_order(row) for row in await cursor.fetchall()]

    async def list_order_lines(self, order_id: str) -> list[OrderLine]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM order_lines WHERE order_id = ? ORDER BY position, id",
                (order_id,),
            )
            return [self._row_to_line(row) for row in await cursor.fetchall()]

    async def create_order(self, order: Order, lines: list[OrderLine]) -> Order:
        """Insert header and lines in one transaction."""
        now = datetime.utcnow()
        order.id = order.id or uuid.uuid4().hex
        order.created_at = now
        order.updated_at = now
        order.lines_count = len(lines)
        order.total = round(sum(line.qty * (line.unit_cost or 0.0) for line in lines), 2)

        async with get_transaction() as conn:
            await conn.execute(
                """
                INSERT INTO orders (
                    id, venue_id, supplier_id, po_number, status, source,
                    suggestion_key, needs_supplier_review, dept_scope,
                    lines_count, total, created_by, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    order.id,
                    order.venue_id,
                    order.supplier_id,
                    order.po_number,
                    order.status.value,
                    order.source.value,
                    order.suggestion_key,
                    int(order.needs_supplier_review),
                    order.dept_scope,
                    order.lines_count,
                    order.total,
                    order.created_by,
                    order.created_at.isoformat(),
                    order.updated_at.isoformat(),
                ),
            )
            for position, line in enumerate(lines):
                line.id = line.id or uuid.uuid4().hex
                line.order_id = order.id
                await conn.execute(
                    """
                    INSERT INTO order_lines (
                        id, order_id, product_id, name, qty, unit_cost,
                        pack_size, needs_par, needs_supplier, reason, position
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        line.id,
                        line.order_id,
                        line.product_id,
                        line.name,
                        line.qty,
                        line.unit_cost,
                        line.pack_size,
                        int(line.needs_par),
                        int(line.needs_supplier),
                        line.reason,
                        position,
                    ),
                )

        logger.info(
            "order_created",
            order_id=order.id,
            venue_id=order.venue_id,
            supplier_id=order.supplier_id,
            lines=order.lines_count,
            source=order.source.value,
        )
        return order

    async def find_draft_by_suggestion_key(
        self, venue_id: str, suggestion_key: str
    ) -> Order | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM orders
                WHERE venue_id = ? AND suggestion_key = ? AND status = 'draft'
                ORDER BY created_at DESC LIMIT 1
                """,
                (venue_id, suggestion_key),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_order(row)

    @staticmethod
    def _row_to_order(row: aiosqlite.Row) -> Order:
        return Order(
            id=row["id"],
            venue_id=row["venue_id"],
            supplier_id=row["supplier_id"],
            po_number=row["po_number"],
            status=OrderStatus(row["status"]),
            source=OrderSource(row["source"]),
            suggestion_key=row["suggestion_key"],
            needs_supplier_review=bool(row["needs_supplier_review"]),
            dept_scope=row["dept_scope"],
            lines_count=row["lines_count"],
            total=row["total"],
            created_by=row["created_by"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    @staticmethod
    def _row_to_line(row: aiosqlite.Row) -> OrderLine:
        return OrderLine(
            id=row["id"],
            order_id=row["order_id"],
            product_id=row["product_id"],
            name=row["name"],
            qty=row["qty"],
            unit_cost=row["unit_cost"],
            pack_size=row["pack_size"],
            needs_par=bool(row["needs_par"]),
            needs_supplier=bool(row["needs_supplier"]),
            reason=row["reason"],
        )
