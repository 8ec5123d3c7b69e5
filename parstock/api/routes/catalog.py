"""Catalog and count maintenance endpoints."""

from fastapi import APIRouter, Depends

from parstock.api.dependencies import (
    get_assign_supplier_use_case,
    get_link_orphan_item_use_case,
    get_record_count_use_case,
    get_set_par_level_use_case,
)
from parstock.application.dto.requests import (
    AssignSupplierRequest,
    LinkOrphanItemRequest,
    RecordCountRequest,
    SetParLevelRequest,
)
from parstock.application.dto.responses import AreaItemResponse, ErrorResponse, ProductResponse
from parstock.application.use_cases.catalog_maintenance import (
    AssignSupplierUseCase,
    LinkOrphanItemUseCase,
    SetParLevelUseCase,
    item_to_response,
    product_to_response,
)
from parstock.application.use_cases.record_count import RecordCountUseCase

router = APIRouter(prefix="/api/venues/{venue_id}", tags=["catalog"])

_NOT_FOUND = {400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}}


@router.put("/products/{product_id}/supplier", response_model=ProductResponse, responses=_NOT_FOUND)
async def assign_supplier(
    venue_id: str,
    product_id: str,
    request: AssignSupplierRequest,
    use_case: AssignSupplierUseCase = Depends(get_assign_supplier_use_case),
) -> ProductResponse:
    """Assign a supplier; "unassigned" (or an alias) clears it."""
    request = request.model_copy(update={"venue_id": venue_id, "product_id": product_id})
    return product_to_response(await use_case.execute(request))


@router.put("/products/{product_id}/par", response_model=ProductResponse, responses=_NOT_FOUND)
async def set_par_level(
    venue_id: str,
    product_id: str,
    request: SetParLevelRequest,
    use_case: SetParLevelUseCase = Depends(get_set_par_level_use_case),
) -> ProductResponse:
    request = request.model_copy(update={"venue_id": venue_id, "product_id": product_id})
    return product_to_response(await use_case.execute(request))


@router.put("/items/{item_id}/count", response_model=AreaItemResponse, responses=_NOT_FOUND)
async def record_count(
    venue_id: str,
    item_id: str,
    request: RecordCountRequest,
    use_case: RecordCountUseCase = Depends(get_record_count_use_case),
) -> AreaItemResponse:
    request = request.model_copy(update={"venue_id": venue_id, "item_id": item_id})
    return item_to_response(await use_case.execute(request))


@router.put("/items/{item_id}/product", response_model=AreaItemResponse, responses=_NOT_FOUND)
async def link_orphan_item(
    venue_id: str,
    item_id: str,
    request: LinkOrphanItemRequest,
    use_case: LinkOrphanItemUseCase = Depends(get_link_orphan_item_use_case),
) -> AreaItemResponse:
    """Link a free-text counted item to a catalog product."""
    request = request.model_copy(update={"venue_id": venue_id, "item_id": item_id})
    return item_to_response(await use_case.execute(request))
