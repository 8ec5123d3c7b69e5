"""Sequential read of everything the batch engines need for one venue."""

from dataclasses import dataclass, field

from parstock.config import get_logger
from parstock.core.entities.catalog import Product, Supplier
from parstock.core.entities.counts import AreaItem
from parstock.core.exceptions import ValidationError
from parstock.core.interfaces.catalog_store import ICatalogStore
from parstock.core.interfaces.count_store import ICountStore

logger = get_logger(__name__)


@dataclass
class VenueSnapshot:
    venue_id: str
    products: list[Product] = field(default_factory=list)
    suppliers: list[Supplier] = field(default_factory=list)
    items: list[AreaItem] = field(default_factory=list)


def require(field_name: str, value: str | None) -> str:
    """Raise ValidationError for a missing or blank id."""
    if value is None or not str(value).strip():
        raise ValidationError(field_name, "is required", value)
    return str(value).strip()


async def load_venue_snapshot(
    catalog_store: ICatalogStore,
    count_store: ICountStore,
    venue_id: str,
    include_suppliers: bool = True,
) -> VenueSnapshot:
    """
    Read catalog and counts with one awaited call at a time.

    Departments, then the areas of each department, then the items of each
    area. No isolation across the walk: counts written meanwhile by another
    session may or may not be seen.
    """
    snapshot = VenueSnapshot(venue_id=venue_id)
    snapshot.products = await catalog_store.list_products(venue_id)
    if include_suppliers:
        snapshot.suppliers = await catalog_store.list_suppliers(venue_id)

    departments = await count_store.list_departments(venue_id)
    for department in departments:
        areas = await count_store.list_areas(department.id)
        for area in areas:
            items = await count_store.list_items(area.id)
            for item in items:
                if item.department_id is None:
                    item.department_id = department.id
                snapshot.items.append(item)

    logger.debug(
        "venue_snapshot_loaded",
        venue_id=venue_id,
        products=len(snapshot.products),
        suppliers=len(snapshot.suppliers),
        departments=len(departments),
        items=len(snapshot.items),
    )
    return snapshot
