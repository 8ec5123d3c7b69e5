"""Supplier scope lock entities."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class ScopeMode(str, Enum):
    """Venue-wide (ALL) or per-department (DEPT) draft ordering."""

    ALL = "ALL"
    DEPT = "DEPT"


class ScopeLockStatus(str, Enum):
    """Outcome of a scope lock request. Conflicts are values, not errors."""

    ACQUIRED = "acquired"
    ALREADY_ALL_SCOPE = "already_all_scope"
    ALREADY_DEPT_SCOPE = "already_dept_scope"
    NEEDS_MANAGER = "needs_manager"


class ScopeLock(BaseModel):
    """Lock document for one supplier in one venue."""

    venue_id: str
    supplier_id: str
    mode: ScopeMode
    depts: list[str] = Field(default_factory=list)
    version: int = 0
    updated_by: str | None = None
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class ScopeLockOutcome(BaseModel):
    status: ScopeLockStatus
    lock: ScopeLock | None = None

    @property
    def acquired(self) -> bool:
        return self.status == ScopeLockStatus.ACQUIRED
