"""Variance Report Use Case."""

from dataclasses import dataclass

from parstock.application.dto.requests import VarianceReportRequest
from parstock.application.dto.responses import VarianceReportResponse
from parstock.application.use_cases.venue_snapshot import load_venue_snapshot, require
from parstock.config import get_settings
from parstock.core.entities.variance import VarianceBandSummary, VarianceResult
from parstock.core.interfaces.catalog_store import ICatalogStore
from parstock.core.interfaces.count_store import ICountStore
from parstock.core.services.variance_engine import summarize_bands


@dataclass
class VarianceReportResult:
    venue_id: str
    result: VarianceResult
    bands: VarianceBandSummary | None = None


class VarianceReportUseCase:
    """Shortage/excess report for a venue, optionally one department."""

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

    async def execute(self, request: VarianceReportRequest) -> VarianceReportResult:
        from parstock.application.services import get_variance_engine

        venue_id = require("venue_id", request.venue_id)
        snapshot = await load_venue_snapshot(
            await self._get_catalog_store(),
            await self._get_count_store(),
            venue_id,
            include_suppliers=False,
        )

        engine = get_variance_engine(request.include_uncounted)
        result = engine.compute(
            snapshot.products,
            snapshot.items,
            department_id=request.department_id,
        )

        bands = None
        if request.with_bands:
            band_pct = (
                request.band_pct
                if request.band_pct is not None
                else get_settings().variance.band_pct
            )
            bands = summarize_bands(result, band_pct=band_pct)

        return VarianceReportResult(venue_id=venue_id, result=result, bands=bands)

    def to_response(self, report: VarianceReportResult) -> VarianceReportResponse:
        result = report.result
        return VarianceReportResponse(
            venue_id=report.venue_id,
            department_id=result.department_id,
            rows=result.rows,
            shortages=result.shortages,
            excess=result.excess,
            totals=result.totals,
            bands=report.bands,
        )
