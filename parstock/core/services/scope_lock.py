"""
Supplier scope lock decisions.

A supplier is ordered either venue-wide (ALL) or per department (DEPT),
never both at once. Venue-wide drafts may repeat; department drafts may be
added for any number of departments. decide_scope_lock() is the pure
read-modify-write step; stores apply it under compare-and-swap.
"""

from datetime import datetime

from parstock.core.entities.scope_lock import (
    ScopeLock,
    ScopeLockOutcome,
    ScopeLockStatus,
    ScopeMode,
)

# Roles allowed to draft venue-wide orders
MANAGER_ROLES = frozenset({"manager", "owner", "admin"})


def can_order_venue_wide(role: str | None) -> bool:
    return (role or "").strip().lower() in MANAGER_ROLES


def decide_scope_lock(
    current: ScopeLock | None,
    venue_id: str,
    supplier_id: str,
    mode: ScopeMode,
    dept_id: str | None = None,
    role: str | None = None,
    user_id: str | None = None,
) -> ScopeLockOutcome:
    """
    Decide what the lock document should become.

    Returns ACQUIRED with the new lock state (version not yet bumped), or a
    conflict status with the current lock left untouched.
    """
    if mode == ScopeMode.ALL and not can_order_venue_wide(role):
        return ScopeLockOutcome(status=ScopeLockStatus.NEEDS_MANAGER, lock=current)

    depts = [dept_id] if mode == ScopeMode.DEPT and dept_id else []

    if current is None:
        return ScopeLockOutcome(
            status=ScopeLockStatus.ACQUIRED,
            lock=ScopeLock(
                venue_id=venue_id,
                supplier_id=supplier_id,
                mode=mode,
                depts=depts,
                version=0,
                updated_by=user_id,
            ),
        )

    if mode == ScopeMode.ALL:
        if current.mode == ScopeMode.DEPT and current.depts:
            return ScopeLockOutcome(status=ScopeLockStatus.ALREADY_DEPT_SCOPE, lock=current)
        # ALL over ALL (or over an empty DEPT lock) takes the lock venue-wide
        return ScopeLockOutcome(
            status=ScopeLockStatus.ACQUIRED,
            lock=current.model_copy(
                update={
                    "mode": ScopeMode.ALL,
                    "depts": [],
                    "updated_by": user_id,
                    "updated_at": datetime.utcnow(),
                }
            ),
        )

    if current.mode == ScopeMode.ALL:
        return ScopeLockOutcome(status=ScopeLockStatus.ALREADY_ALL_SCOPE, lock=current)

    merged = list(current.depts)
    for dept in depts:
        if dept not in merged:
            merged.append(dept)

    return ScopeLockOutcome(
        status=ScopeLockStatus.ACQUIRED,
        lock=current.model_copy(
            update={
                "depts": merged,
                "updated_by": user_id,
                "updated_at": datetime.utcnow(),
            }
        ),
    )
