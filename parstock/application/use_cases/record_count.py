"""Record Count Use Case: overwrite an item's last counted quantity."""

from datetime import datetime

from parstock.application.dto.requests import RecordCountRequest
from parstock.application.use_cases.venue_snapshot import require
from parstock.config import get_logger
from parstock.core.entities.counts import AreaItem
from parstock.core.exceptions import ItemNotFoundError
from parstock.core.interfaces.count_store import ICountStore

logger = get_logger(__name__)


class RecordCountUseCase:
    """On-hand is a snapshot, so a new count replaces the old one outright."""

    def __init__(self, count_store: ICountStore | None = None):
        self._count_store = count_store

    async def _get_count_store(self) -> ICountStore:
        if self._count_store is None:
            from parstock.infrastructure.storage.sqlite import get_count_store

            self._count_store = await get_count_store()
        return self._count_store

    async def execute(self, request: RecordCountRequest) -> AreaItem:
        venue_id = require("venue_id", request.venue_id)
        item_id = require("item_id", request.item_id)

        store = await self._get_count_store()
        item = await store.update_item_fields(
            venue_id,
            item_id,
            last_count=request.count,
            counted_at=datetime.utcnow(),
        )
        if item is None:
            raise ItemNotFoundError(item_id)

        logger.info("count_recorded", venue_id=venue_id, item_id=item_id, count=request.count)
        return item
