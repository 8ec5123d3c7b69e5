"""Build Suggested Orders Use Case."""

from parstock.application.dto.requests import BuildSuggestedOrdersRequest
from parstock.application.dto.responses import SuggestedOrdersResponse, SupplierBucketResponse
from parstock.application.use_cases.venue_snapshot import load_venue_snapshot, require
from parstock.core.entities.suggestions import SuggestedOrderPlan
from parstock.core.interfaces.catalog_store import ICatalogStore
from parstock.core.interfaces.count_store import ICountStore


class BuildSuggestedOrdersUseCase:
    """Read the venue and compute a fresh per-supplier replenishment plan."""

    def __init__(
        self,
        catalog_store: ICatalogStore | None = None,
        count_store: ICountStore | None = None,
    ):
        self._catalog_store = catalog_store
        self._count_store = count_store

    async def _get_catalog_store(self) -> ICatalogStore:
        if self._catalog_store is None:
            from parstock.infrastructure.storage.sqlite import get_catalog_store

            self._catalog_store = await get_catalog_store()
        return self._catalog_store

    async def _get_count_store(self) -> ICountStore:
        if self._count_store is None:
            from parstock.infrastructure.storage.sqlite import get_count_store

            self._count_store = await get_count_store()
        return self._count_store

    async def execute(self, request: BuildSuggestedOrdersRequest) -> SuggestedOrderPlan:
        from parstock.application.services import get_suggested_order_builder

        venue_id = require("venue_id", request.venue_id)
        catalog_store = await self._get_catalog_store()

        await catalog_store.ensure_unassigned_supplier(venue_id)
        snapshot = await load_venue_snapshot(
            catalog_store, await self._get_count_store(), venue_id
        )

        items = snapshot.items
        department_id = (request.department_id or "").strip() or None
        if department_id is not None:
            items = [item for item in items if item.department_id == department_id]

        builder = get_suggested_order_builder(
            round_to_pack=request.round_to_pack,
            default_par_if_missing=request.default_par_if_missing,
        )
        return builder.build(
            snapshot.products,
            snapshot.suppliers,
            items,
            venue_id=venue_id,
        )

    def to_response(self, plan: SuggestedOrderPlan) -> SuggestedOrdersResponse:
        return SuggestedOrdersResponse(
            venue_id=plan.venue_id or "",
            buckets=[
                SupplierBucketResponse(
                    supplier_key=bucket.supplier_key,
                    supplier_name=bucket.supplier_name,
                    lines=bucket.lines,
                    total=bucket.total,
                    needs_review=bucket.needs_review,
                )
                for bucket in plan.buckets.values()
            ],
            line_count=plan.line_count,
        )
