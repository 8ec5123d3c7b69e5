"""Purchase order entities."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class OrderStatus(str, Enum):
    """Order lifecycle."""

    DRAFT = "draft"
    SUBMITTED = "submitted"
    RECEIVED = "received"


class OrderSource(str, Enum):
    """Where the order came from."""

    MANUAL = "manual"
    SUGGESTIONS = "suggestions"


class OrderLine(BaseModel):
    """A single ordered product (or free-text line)."""

    id: str | None = None
    order_id: str | None = None
    product_id: str | None = None
    name: str
    qty: float = 0.0
    unit_cost: float | None = None
    pack_size: float | None = None
    needs_par: bool = False
    needs_supplier: bool = False
    reason: str | None = None


class Order(BaseModel):
    """Purchase order header."""

    id: str | None = None
    venue_id: str
    supplier_id: str
    po_number: str | None = None
    status: OrderStatus = OrderStatus.DRAFT
    source: OrderSource = OrderSource.MANUAL
    suggestion_key: str | None = None
    needs_supplier_review: bool = False
    dept_scope: str | None = None  # None means venue-wide
    lines_count: int = 0
    total: float = 0.0
    created_by: str | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
