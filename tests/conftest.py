"""Pytest configuration and shared fixtures."""

from collections import defaultdict
from collections.abc import Iterator
from unittest.mock import AsyncMock

import pytest

from parstock.application.services import reset_services
from parstock.config import reset_settings
from parstock.core.entities import (
    Area,
    AreaItem,
    Department,
    Order,
    OrderLine,
    OrderStatus,
    Product,
    Supplier,
)


@pytest.fixture(autouse=True)
def fresh_singletons() -> Iterator[None]:
    """Settings and engine singletons must not leak between tests."""
    reset_settings()
    reset_services()
    yield
    reset_settings()
    reset_services()


@pytest.fixture
def venue_id() -> str:
    return "venue-1"


@pytest.fixture
def suppliers(venue_id: str) -> list[Supplier]:
    return [
        Supplier(id="sup-bev", venue_id=venue_id, name="Beverage Co"),
        Supplier(id="sup-dry", venue_id=venue_id, name="Dry Goods Ltd"),
    ]


@pytest.fixture
def products(venue_id: str) -> list[Product]:
    return [
        Product(
            id="p-cola",
            venue_id=venue_id,
            name="Cola 330ml",
            supplier_id="sup-bev",
            pack_size=24,
            unit_cost=1.0,
            par_level=48,
        ),
        Product(
            id="p-lime",
            venue_id=venue_id,
            name="Limes",
            supplier_id=None,
            pack_size=None,
            unit_cost=0.3,
            par_level=None,
        ),
        Product(
            id="p-flour",
            venue_id=venue_id,
            name="Flour 1kg",
            supplier_id="sup-dry",
            pack_size=10,
            unit_cost=2.5,
            par_level=20,
        ),
    ]


@pytest.fixture
def area_items() -> list[AreaItem]:
    return [
        AreaItem(id="i-1", area_id="a-bar", product_id="p-cola", name="Cola", last_count=10, department_id="d-bar"),
        AreaItem(id="i-2", area_id="a-cellar", product_id="p-cola", name="Cola", last_count=6, department_id="d-bar"),
        AreaItem(id="i-3", area_id="a-bar", product_id="p-lime", name="Limes", last_count=0, department_id="d-bar"),
        AreaItem(id="i-4", area_id="a-store", product_id="p-flour", name="Flour", last_count=25, department_id="d-kitchen"),
        AreaItem(id="i-5", area_id="a-bar", product_id=None, name="Mystery syrup", last_count=0, department_id="d-bar"),
    ]


@pytest.fixture
def submitted_order(venue_id: str) -> Order:
    return Order(
        id="ord-1",
        venue_id=venue_id,
        supplier_id="sup-bev",
        po_number="PO-1",
        status=OrderStatus.SUBMITTED,
        lines_count=1,
        total=24.0,
    )


@pytest.fixture
def cola_order_lines() -> list[OrderLine]:
    return [OrderLine(order_id="ord-1", product_id="p-cola", name="Cola 330ml", qty=24, unit_cost=1.0)]


@pytest.fixture
def mock_catalog_store(products, suppliers):
    store = AsyncMock()
    store.list_products.return_value = products
    store.list_suppliers.return_value = suppliers
    return store


@pytest.fixture
def mock_count_store(venue_id, area_items):
    areas_by_dept: dict[str, list[Area]] = defaultdict(list)
    items_by_area = defaultdict(list)
    for item in area_items:
        area = Area(id=item.area_id, department_id=item.department_id, name=item.area_id)
        if area not in areas_by_dept[item.department_id]:
            areas_by_dept[item.department_id].append(area)
        items_by_area[item.area_id].append(item.model_copy(update={"department_id": None}))

    store = AsyncMock()
    store.list_departments.return_value = [
        Department(id=dept_id, venue_id=venue_id, name=dept_id) for dept_id in areas_by_dept
    ]
    store.list_areas.side_effect = lambda dept_id: areas_by_dept[dept_id]
    store.list_items.side_effect = lambda area_id: items_by_area[area_id]
    return store
