"""Counting locations: departments, areas and the items counted in them."""

from datetime import datetime

from pydantic import BaseModel, Field


class Department(BaseModel):
    """Top-level grouping of counting areas (bar, kitchen, ...)."""

    id: str
    venue_id: str
    name: str


class Area(BaseModel):
    """A physical counting location inside a department."""

    id: str
    department_id: str
    name: str


class AreaItem(BaseModel):
    """
    Last counted quantity of one product in one area.

    An item with no product_id is an orphan: free text that was counted but
    never linked to the catalog. The pack/cost/supplier fields override the
    product's values for this location only.
    """

    id: str
    area_id: str
    product_id: str | None = None
    name: str
    last_count: float | None = None
    pack_size: float | None = None
    unit_cost: float | None = None
    supplier_id: str | None = None
    counted_at: datetime | None = None
    department_id: str | None = None  # filled in by readers that walk the tree

    @property
    def is_orphan(self) -> bool:
        return not self.product_id
