"""Suggested order endpoints."""

from fastapi import APIRouter, Depends, Query, status

from parstock.api.dependencies import (
    get_build_suggested_orders_use_case,
    get_create_drafts_use_case,
)
from parstock.application.dto.requests import BuildSuggestedOrdersRequest, CreateDraftsRequest
from parstock.application.dto.responses import (
    CreateDraftsResponse,
    ErrorResponse,
    SuggestedOrdersResponse,
)
from parstock.application.use_cases.build_suggested_orders import BuildSuggestedOrdersUseCase
from parstock.application.use_cases.create_drafts import CreateDraftsFromSuggestionsUseCase

router = APIRouter(prefix="/api/venues/{venue_id}/suggested-orders", tags=["suggestions"])


@router.get(
    "",
    response_model=SuggestedOrdersResponse,
    responses={400: {"model": ErrorResponse}},
)
async def get_suggested_orders(
    venue_id: str,
    department_id: str | None = Query(default=None),
    round_to_pack: bool | None = Query(default=None),
    default_par_if_missing: float | None = Query(default=None, gt=0),
    use_case: BuildSuggestedOrdersUseCase = Depends(get_build_suggested_orders_use_case),
) -> SuggestedOrdersResponse:
    """Current replenishment plan, one bucket per supplier plus unassigned."""
    plan = await use_case.execute(
        BuildSuggestedOrdersRequest(
            venue_id=venue_id,
            department_id=department_id,
            round_to_pack=round_to_pack,
            default_par_if_missing=default_par_if_missing,
        )
    )
    return use_case.to_response(plan)


@router.post(
    "/drafts",
    response_model=CreateDraftsResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def create_drafts(
    venue_id: str,
    request: CreateDraftsRequest,
    use_case: CreateDraftsFromSuggestionsUseCase = Depends(get_create_drafts_use_case),
) -> CreateDraftsResponse:
    """
    Turn non-empty buckets into draft orders.

    Per-supplier outcomes are reported individually; a lock conflict or
    failure on one supplier does not undo drafts created for others.
    """
    request = request.model_copy(update={"venue_id": venue_id})
    result = await use_case.execute(request)
    return use_case.to_response(result)
