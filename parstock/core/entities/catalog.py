"""Catalog entities: products and suppliers."""

from datetime import datetime

from pydantic import BaseModel, Field

# Sentinel supplier every venue carries; products without a supplier land here
UNASSIGNED_SUPPLIER_ID = "unassigned"
UNASSIGNED_SUPPLIER_NAME = "Unassigned"


class Supplier(BaseModel):
    """A supplier that can receive purchase orders."""

    id: str
    venue_id: str
    name: str
    created_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def is_unassigned(self) -> bool:
        return self.id == UNASSIGNED_SUPPLIER_ID


class Product(BaseModel):
    """Catalog product with the reorder attributes the engines read."""

    id: str
    venue_id: str
    name: str
    supplier_id: str | None = None
    pack_size: float | None = None  # units per reorder pack
    unit_cost: float | None = None
    par_level: float | None = None  # target on-hand
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def has_par(self) -> bool:
        return self.par_level is not None and self.par_level > 0
