"""Create Drafts From Suggestions Use Case.

Each supplier bucket becomes one draft order (header plus lines committed
together). Suppliers are processed one after another and independently: a
failure for one supplier leaves drafts already created for others in place,
so the whole call is safe to repeat. Repeats are idempotent because every
draft carries the fingerprint of the suggestion set it was built from.
"""

from dataclasses import dataclass, field

from parstock.application.dto.requests import BuildSuggestedOrdersRequest, CreateDraftsRequest
from parstock.application.dto.responses import CreateDraftsResponse, DraftOutcomeResponse
from parstock.application.use_cases.build_suggested_orders import BuildSuggestedOrdersUseCase
from parstock.application.use_cases.venue_snapshot import require
from parstock.config import get_logger, get_settings
from parstock.core.entities.catalog import UNASSIGNED_SUPPLIER_ID
from parstock.core.entities.orders import Order, OrderLine, OrderSource, OrderStatus
from parstock.core.entities.scope_lock import ScopeLockOutcome, ScopeMode
from parstock.core.entities.suggestions import SupplierBucket
from parstock.core.interfaces.catalog_store import ICatalogStore
from parstock.core.interfaces.count_store import ICountStore
from parstock.core.interfaces.order_store import IOrderStore
from parstock.core.interfaces.scope_lock_store import IScopeLockStore
from parstock.core.services.scope_lock import decide_scope_lock
from parstock.core.services.suggested_orders import (
    compute_suggestion_key,
    resolve_supplier_key,
)

logger = get_logger(__name__)

STATUS_CREATED = "created"
STATUS_DUPLICATE = "duplicate"
STATUS_FAILED = "failed"


@dataclass
class DraftOutcome:
    supplier_key: str
    status: str
    order: Order | None = None
    lock: ScopeLockOutcome | None = None
    error: str | None = None


@dataclass
class CreateDraftsResult:
    venue_id: str
    outcomes: list[DraftOutcome] = field(default_factory=list)

    @property
    def created(self) -> list[DraftOutcome]:
        return [o for o in self.outcomes if o.status == STATUS_CREATED]

    @property
    def failed(self) -> list[DraftOutcome]:
        return [o for o in self.outcomes if o.status == STATUS_FAILED]


class CreateDraftsFromSuggestionsUseCase:
    """Create one draft order per non-empty supplier bucket."""

    def __init__(
        self,
        catalog_store: ICatalogStore | None = None,
        count_store: ICountStore | None = None,
        order_store: IOrderStore | None = None,
        scope_lock_store: IScopeLockStore | None = None,
        lock_retries: int | None = None,
    ):
        self._catalog_store = catalog_store
        self._count_store = count_store
        self._order_store = order_store
        self._scope_lock_store = scope_lock_store
        self.lock_retries = (
            get_settings().suggest.lock_retries if lock_retries is None else lock_retries
        )

    async def _get_order_store(self) -> IOrderStore:
        if self._order_store is None:
            from parstock.infrastructure.storage.sqlite import get_order_store

            self._order_store = await get_order_store()
        return self._order_store

    async def _get_scope_lock_store(self) -> IScopeLockStore:
        if self._scope_lock_store is None:
            from parstock.infrastructure.storage.sqlite import get_scope_lock_store

            self._scope_lock_store = await get_scope_lock_store()
        return self._scope_lock_store

    async def execute(self, request: CreateDraftsRequest) -> CreateDraftsResult:
        venue_id = require("venue_id", request.venue_id)
        dept_id = None
        if request.mode == ScopeMode.DEPT:
            dept_id = require("dept_id", request.dept_id)

        plan = await BuildSuggestedOrdersUseCase(
            catalog_store=self._catalog_store,
            count_store=self._count_store,
        ).execute(
            BuildSuggestedOrdersRequest(
                venue_id=venue_id,
                department_id=dept_id,
                round_to_pack=request.round_to_pack,
                default_par_if_missing=request.default_par_if_missing,
            )
        )

        wanted = None
        if request.supplier_keys is not None:
            wanted = {resolve_supplier_key(key) for key in request.supplier_keys}

        result = CreateDraftsResult(venue_id=venue_id)
        for bucket in plan.non_empty():
            if wanted is not None and bucket.supplier_key not in wanted:
                continue
            outcome = await self._draft_bucket(venue_id, bucket, request, dept_id)
            result.outcomes.append(outcome)

        logger.info(
            "drafts_from_suggestions_complete",
            venue_id=venue_id,
            mode=request.mode.value,
            created=len(result.created),
            failed=len(result.failed),
            total=len(result.outcomes),
        )
        return result

    async def _draft_bucket(
        self,
        venue_id: str,
        bucket: SupplierBucket,
        request: CreateDraftsRequest,
        dept_id: str | None,
    ) -> DraftOutcome:
        supplier_key = bucket.supplier_key
        suggestion_key = compute_suggestion_key(supplier_key, bucket.lines)
        order_store = await self._get_order_store()

        existing = await order_store.find_draft_by_suggestion_key(venue_id, suggestion_key)
        if existing is not None:
            logger.info(
                "draft_already_exists",
                supplier_key=supplier_key,
                order_id=existing.id,
            )
            return DraftOutcome(supplier_key=supplier_key, status=STATUS_DUPLICATE, order=existing)

        lock, fresh = await self._acquire_lock(venue_id, supplier_key, request, dept_id)
        if lock is None:
            return DraftOutcome(
                supplier_key=supplier_key,
                status=STATUS_FAILED,
                error="scope lock contention, retry later",
            )
        if not lock.acquired:
            return DraftOutcome(supplier_key=supplier_key, status=lock.status.value, lock=lock)

        order = Order(
            venue_id=venue_id,
            supplier_id=supplier_key,
            status=OrderStatus.DRAFT,
            source=OrderSource.SUGGESTIONS,
            suggestion_key=suggestion_key,
            needs_supplier_review=bucket.needs_review or supplier_key == UNASSIGNED_SUPPLIER_ID,
            dept_scope=dept_id,
            created_by=request.user_id,
        )
        lines = [
            OrderLine(
                product_id=None if line.is_orphan else line.product_id,
                name=line.name,
                qty=line.qty,
                unit_cost=line.unit_cost,
                pack_size=line.pack_size,
                needs_par=line.needs_par,
                needs_supplier=line.needs_supplier,
                reason=line.reason.value,
            )
            for line in bucket.lines
        ]

        try:
            created = await order_store.create_order(order, lines)
        except Exception as e:
            logger.error("draft_create_failed", supplier_key=supplier_key, error=str(e))
            if fresh:
                await self._release_lock(venue_id, supplier_key)
            return DraftOutcome(
                supplier_key=supplier_key, status=STATUS_FAILED, lock=lock, error=str(e)
            )

        return DraftOutcome(supplier_key=supplier_key, status=STATUS_CREATED, order=created, lock=lock)

    async def _acquire_lock(
        self,
        venue_id: str,
        supplier_key: str,
        request: CreateDraftsRequest,
        dept_id: str | None,
    ) -> tuple[ScopeLockOutcome | None, bool]:
        """
        Read-decide-CAS until the write lands or a conflict is decided.

        Returns (outcome, fresh) where fresh means this call created the lock.
        Outcome is None when every attempt lost a race.
        """
        store = await self._get_scope_lock_store()
        for attempt in range(1, self.lock_retries + 1):
            current = await store.get_lock(venue_id, supplier_key)
            decision = decide_scope_lock(
                current,
                venue_id=venue_id,
                supplier_id=supplier_key,
                mode=request.mode,
                dept_id=dept_id,
                role=request.role,
                user_id=request.user_id,
            )
            if not decision.acquired:
                logger.info(
                    "scope_lock_blocked",
                    supplier_key=supplier_key,
                    status=decision.status.value,
                )
                return decision, False

            expected = current.version if current is not None else None
            if await store.compare_and_swap(decision.lock, expected):  # type: ignore[arg-type]
                return decision, current is None

            logger.info("scope_lock_retry", supplier_key=supplier_key, attempt=attempt)

        logger.warning("scope_lock_exhausted", supplier_key=supplier_key)
        return None, False

    async def _release_lock(self, venue_id: str, supplier_key: str) -> None:
        try:
            store = await self._get_scope_lock_store()
            await store.release(venue_id, supplier_key)
        except Exception as e:
            logger.warning("scope_lock_release_failed", supplier_key=supplier_key, error=str(e))

    def to_response(self, result: CreateDraftsResult) -> CreateDraftsResponse:
        outcomes = [
            DraftOutcomeResponse(
                supplier_key=o.supplier_key,
                status=o.status,
                order_id=o.order.id if o.order else None,
                lock_status=o.lock.status if o.lock else None,
                lines_count=o.order.lines_count if o.order else 0,
                error=o.error,
            )
            for o in result.outcomes
        ]
        created = len(result.created)
        failed = len(result.failed)
        return CreateDraftsResponse(
            venue_id=result.venue_id,
            outcomes=outcomes,
            created=created,
            skipped=len(outcomes) - created - failed,
            failed=failed,
        )
