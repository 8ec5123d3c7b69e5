"""SQLite implementation of the department/area/item counting tree."""

from datetime import datetime

import aiosqlite

from parstock.config import get_logger
from parstock.core.entities.counts import Area, AreaItem, Department
from parstock.core.interfaces.count_store import ICountStore
from parstock.infrastructure.storage.sqlite.connection import get_connection

logger = get_logger(__name__)

_ITEM_UPDATABLE = frozenset(
    {"product_id", "name", "last_count", "pack_size", "unit_cost", "supplier_id", "counted_at"}
)

_ITEM_SELECT = """
    SELECT i.*, a.department_id AS department_id
    FROM area_items i
    JOIN areas a ON a.id = i.area_id
"""

# Areas that belong to one venue, through their department
_VENUE_AREAS = """
    SELECT a.id FROM areas a
    JOIN departments d ON d.id = a.department_id
    WHERE d.venue_id = ?
"""


class SQLiteCountStore(ICountStore):
    """SQLite implementation of counting-location storage."""

    async def list_departments(self, venue_id: str) -> list[Department]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM departments WHERE venue_id = ? ORDER BY name, id",
                (venue_id,),
            )
            return [
                Department(id=row["id"], venue_id=row["venue_id"], name=row["name"])
                for row in await cursor.fetchall()
            ]

    async def list_areas(self, department_id: str) -> list[Area]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM areas WHERE department_id = ? ORDER BY name, id",
                (department_id,),
            )
            return [
                Area(id=row["id"], department_id=row["department_id"], name=row["name"])
                for row in await cursor.fetchall()
            ]

    async def list_items(self, area_id: str) -> list[AreaItem]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                _ITEM_SELECT + " WHERE i.area_id = ? ORDER BY i.name, i.id",
                (area_id,),
            )
            return [self._row_to_item(row) for row in await cursor.fetchall()]

    async def get_item(self, venue_id: str, item_id: str) -> AreaItem | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                _ITEM_SELECT + f" WHERE i.id = ? AND i.area_id IN ({_VENUE_AREAS})",
                (item_id, venue_id),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_item(row)

    async def save_department(self, department: Department) -> Department:
        async with get_connection() as conn:
            await conn.execute(
                "INSERT OR REPLACE INTO departments (id, venue_id, name) VALUES (?, ?, ?)",
                (department.id, department.venue_id, department.name),
            )
        return department

    async def save_area(self, area: Area) -> Area:
        async with get_connection() as conn:
            await conn.execute(
                "INSERT OR REPLACE INTO areas (id, department_id, name) VALUES (?, ?, ?)",
                (area.id, area.department_id, area.name),
            )
        return area

    async def save_item(self, item: AreaItem) -> AreaItem:
        async with get_connection() as conn:
            await conn.execute(
                """
                INSERT OR REPLACE INTO area_items (
                    id, area_id, product_id, name, last_count,
                    pack_size, unit_cost, supplier_id, counted_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    item.id,
                    item.area_id,
                    item.product_id,
                    item.name,
                    item.last_count,
                    item.pack_size,
                    item.unit_cost,
                    item.supplier_id,
                    item.counted_at.isoformat() if item.counted_at else None,
                ),
            )
        return item

    async def update_item_fields(
        self, venue_id: str, item_id: str, **fields: object
    ) -> AreaItem | None:
        unknown = set(fields) - _ITEM_UPDATABLE
        if unknown:
            raise ValueError(f"Cannot update item fields: {sorted(unknown)}")

        values = [
            v.isoformat() if isinstance(v, datetime) else v for v in fields.values()
        ]
        assignments = ", ".join(f"{name} = ?" for name in fields)
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"UPDATE area_items SET {assignments} "
                f"WHERE id = ? AND area_id IN ({_VENUE_AREAS})",
                [*values, item_id, venue_id],
            )
            if cursor.rowcount == 0:
                return None
        logger.info("area_item_updated", venue_id=venue_id, item_id=item_id, fields=sorted(fields))
        return await self.get_item(venue_id, item_id)

    @staticmethod
    def _row_to_item(row: aiosqlite.Row) -> AreaItem:
        return AreaItem(
            id=row["id"],
            area_id=row["area_id"],
            product_id=row["product_id"],
            name=row["name"],
            last_count=row["last_count"],
            pack_size=row["pack_size"],
            unit_cost=row["unit_cost"],
            supplier_id=row["supplier_id"],
            counted_at=datetime.fromisoformat(row["counted_at"]) if row["counted_at"] else None,
            department_id=row["department_id"],
        )
