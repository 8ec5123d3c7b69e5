"""Catalog maintenance use cases: supplier and par assignment, orphan linking.

These are the writes that clear needs_supplier / needs_par flags on the
next suggestion build.
"""

from parstock.application.dto.requests import (
    AssignSupplierRequest,
    LinkOrphanItemRequest,
    SetParLevelRequest,
)
from parstock.application.dto.responses import AreaItemResponse, ProductResponse
from parstock.application.use_cases.venue_snapshot import require
from parstock.config import get_logger
from parstock.core.entities.catalog import UNASSIGNED_SUPPLIER_ID, Product
from parstock.core.entities.counts import AreaItem
from parstock.core.exceptions import (
    ItemNotFoundError,
    ProductNotFoundError,
    SupplierNotFoundError,
)
from parstock.core.interfaces.catalog_store import ICatalogStore
from parstock.core.interfaces.count_store import ICountStore
from parstock.core.services.suggested_orders import resolve_supplier_key

logger = get_logger(__name__)


async def _default_catalog_store() -> ICatalogStore:
    from parstock.infrastructure.storage.sqlite import get_catalog_store

    return await get_catalog_store()


async def _default_count_store() -> ICountStore:
    from parstock.infrastructure.storage.sqlite import get_count_store

    return await get_count_store()


def product_to_response(product: Product) -> ProductResponse:
    return ProductResponse(
        id=product.id,
        venue_id=product.venue_id,
        name=product.name,
        supplier_id=product.supplier_id,
        pack_size=product.pack_size,
        unit_cost=product.unit_cost,
        par_level=product.par_level,
        updated_at=product.updated_at,
    )


def item_to_response(item: AreaItem) -> AreaItemResponse:
    return AreaItemResponse(
        id=item.id,
        area_id=item.area_id,
        product_id=item.product_id,
        name=item.name,
        last_count=item.last_count,
        counted_at=item.counted_at,
    )


class AssignSupplierUseCase:
    """Point a product at a supplier. Unassigned spellings clear the link."""

    def __init__(self, catalog_store: ICatalogStore | None = None):
        self._catalog_store = catalog_store

    async def execute(self, request: AssignSupplierRequest) -> Product:
        venue_id = require("venue_id", request.venue_id)
        product_id = require("product_id", request.product_id)
        supplier_key = resolve_supplier_key(require("supplier_id", request.supplier_id))

        store = self._catalog_store or await _default_catalog_store()

        if supplier_key != UNASSIGNED_SUPPLIER_ID:
            if await store.get_supplier(venue_id, supplier_key) is None:
                raise SupplierNotFoundError(supplier_key)

        supplier_id = None if supplier_key == UNASSIGNED_SUPPLIER_ID else supplier_key
        product = await store.update_product_fields(venue_id, product_id, supplier_id=supplier_id)
        if product is None:
            raise ProductNotFoundError(product_id)

        logger.info("supplier_assigned", product_id=product_id, supplier_id=supplier_key)
        return product


class SetParLevelUseCase:
    def __init__(self, catalog_store: ICatalogStore | None = None):
        self._catalog_store = catalog_store

    async def execute(self, request: SetParLevelRequest) -> Product:
        venue_id = require("venue_id", request.venue_id)
        product_id = require("product_id", request.product_id)

        store = self._catalog_store or await _default_catalog_store()
        product = await store.update_product_fields(
            venue_id, product_id, par_level=request.par_level
        )
        if product is None:
            raise ProductNotFoundError(product_id)

        logger.info("par_level_set", product_id=product_id, par_level=request.par_level)
        return product


class LinkOrphanItemUseCase:
    """Link a free-text counted item to a catalog product."""

    def __init__(
        self,
        count_store: ICountStore | None = None,
        catalog_store: ICatalogStore | None = None,
    ):
        self._count_store = count_store
        self._catalog_store = catalog_store

    async def execute(self, request: LinkOrphanItemRequest) -> AreaItem:
        venue_id = require("venue_id", request.venue_id)
        item_id = require("item_id", request.item_id)
        product_id = require("product_id", request.product_id)

        catalog_store = self._catalog_store or await _default_catalog_store()
        count_store = self._count_store or await _default_count_store()

        if await catalog_store.get_product(venue_id, product_id) is None:
            raise ProductNotFoundError(product_id)

        item = await count_store.update_item_fields(venue_id, item_id, product_id=product_id)
        if item is None:
            raise ItemNotFoundError(item_id)

        logger.info("orphan_item_linked", item_id=item_id, product_id=product_id)
        return item
