"""SQLite implementation of product and supplier storage."""

from datetime import datetime

import aiosqlite

from parstock.config import get_logger
from parstock.core.entities.catalog import (
    UNASSIGNED_SUPPLIER_ID,
    UNASSIGNED_SUPPLIER_NAME,
    Product,
    Supplier,
)
from parstock.core.exceptions import SupplierNotFoundError
from parstock.core.interfaces.catalog_store import ICatalogStore
from parstock.infrastructure.storage.sqlite.connection import get_connection

logger = get_logger(__name__)

# Columns callers may change through update_product_fields
_PRODUCT_UPDATABLE = frozenset({"name", "supplier_id", "pack_size", "unit_cost", "par_level"})


class SQLiteCatalogStore(ICatalogStore):
    """SQLite implementation of catalog storage."""

    async def list_products(self, venue_id: str) -> list[Product]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM products WHERE venue_id = ? ORDER BY name COLLATE NOCASE, id",
                (venue_id,),
            )
            rows = await cursor.fetchall()
            return [self._row_to_product(row) for row in rows]

    async def get_product(self, venue_id: str, product_id: str) -> Product | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM products WHERE venue_id = ? AND id = ?",
                (venue_id, product_id),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_product(row)

    async def save_product(self, product: Product) -> Product:
        product.updated_at = datetime.utcnow()
        async with get_connection() as conn:
            await conn.execute(
                """
                INSERT OR REPLACE INTO products (
                    venue_id, id, name, supplier_id, pack_size,
                    unit_cost, par_level, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    product.venue_id,
                    product.id,
                    product.name,
                    product.supplier_id,
                    product.pack_size,
                    product.unit_cost,
                    product.par_level,
                    product.created_at.isoformat(),
                    product.updated_at.isoformat(),
                ),
            )
        logger.debug("product_saved", venue_id=product.venue_id, product_id=product.id)
        return product

    async def update_product_fields(
        self, venue_id: str, product_id: str, **fields: object
    ) -> Product | None:
        unknown = set(fields) - _PRODUCT_UPDATABLE
        if unknown:
            raise ValueError(f"Cannot update product fields: {sorted(unknown)}")

        assignments = ", ".join(f"{name} = ?" for name in fields)
        params = [*fields.values(), datetime.utcnow().isoformat(), venue_id, product_id]
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"UPDATE products SET {assignments}, updated_at = ? "
                "WHERE venue_id = ? AND id = ?",
                params,
            )
            if cursor.rowcount == 0:
                return None
        logger.info(
            "product_updated",
            venue_id=venue_id,
            product_id=product_id,
            fields=sorted(fields),
        )
        return await self.get_product(venue_id, product_id)

    async def list_suppliers(self, venue_id: str) -> list[Supplier]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM suppliers WHERE venue_id = ? ORDER BY name COLLATE NOCASE, id",
                (venue_id,),
            )
            rows = await cursor.fetchall()
            return [self._row_to_supplier(row) for row in rows]

    async def get_supplier(self, venue_id: str, supplier_id: str) -> Supplier | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM suppliers WHERE venue_id = ? AND id = ?",
                (venue_id, supplier_id),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_supplier(row)

    async def save_supplier(self, supplier: Supplier) -> Supplier:
        async with get_connection() as conn:
            await conn.execute(
                """
                INSERT OR REPLACE INTO suppliers (venue_id, id, name, created_at)
                VALUES (?, ?, ?, ?)
                """,
                (
                    supplier.venue_id,
                    supplier.id,
                    supplier.name,
                    supplier.created_at.isoformat(),
                ),
            )
        return supplier

    async def ensure_unassigned_supplier(self, venue_id: str) -> Supplier:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "INSERT OR IGNORE INTO suppliers (venue_id, id, name) VALUES (?, ?, ?)",
                (venue_id, UNASSIGNED_SUPPLIER_ID, UNASSIGNED_SUPPLIER_NAME),
            )
            if cursor.rowcount:
                logger.info("unassigned_supplier_created", venue_id=venue_id)
        supplier = await self.get_supplier(venue_id, UNASSIGNED_SUPPLIER_ID)
        if supplier is None:
            raise SupplierNotFoundError(UNASSIGNED_SUPPLIER_ID)
        return supplier

    @staticmethod
    def _row_to_product(row: aiosqlite.Row) -> Product:
        return Product(
            id=row["id"],
            venue_id=row["venue_id"],
            name=row["name"],
            supplier_id=row["supplier_id"],
            pack_size=row["pack_size"],
            unit_cost=row["unit_cost"],
            par_level=row["par_level"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    @staticmethod
    def _row_to_supplier(row: aiosqlite.Row) -> Supplier:
        return Supplier(
            id=row["id"],
            venue_id=row["venue_id"],
            name=row["name"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )
