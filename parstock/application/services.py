"""
Service factory functions for dependency injection.

Wires settings into the core engines and picks the reconciliation backend.
Use cases import from here.
"""

from parstock.config import get_settings
from parstock.core.interfaces import IReconciliationService
from parstock.core.services import ReconciliationEngine, SuggestedOrderBuilder, VarianceEngine

# Singleton service instances
_reconciliation_engine: ReconciliationEngine | None = None
_variance_engine: VarianceEngine | None = None


def get_reconciliation_engine() -> ReconciliationEngine:
    """Get or create the line-level reconciliation engine."""
    global _reconciliation_engine
    if _reconciliation_engine is None:
        recon = get_settings().recon
        _reconciliation_engine = ReconciliationEngine(
            price_tolerance=recon.price_tolerance,
            qty_tolerance=recon.qty_tolerance,
        )
    return _reconciliation_engine


def get_suggested_order_builder(
    round_to_pack: bool | None = None,
    default_par_if_missing: float | None = None,
) -> SuggestedOrderBuilder:
    """
    Build a SuggestedOrderBuilder.

    Not cached: per-request overrides take precedence over settings.
    """
    suggest = get_settings().suggest
    return SuggestedOrderBuilder(
        round_to_pack=suggest.round_to_pack if round_to_pack is None else round_to_pack,
        default_par_if_missing=(
            suggest.default_par_if_missing
            if default_par_if_missing is None
            else default_par_if_missing
        ),
    )


def get_variance_engine(include_uncounted: bool | None = None) -> VarianceEngine:
    """Get the variance engine; an explicit flag bypasses the singleton."""
    global _variance_engine
    if include_uncounted is not None:
        return VarianceEngine(include_uncounted=include_uncounted)
    if _variance_engine is None:
        _variance_engine = VarianceEngine(
            include_uncounted=get_settings().variance.include_uncounted
        )
    return _variance_engine


def get_remote_reconciliation_service() -> IReconciliationService | None:
    """The remote service when RECON_MODE=remote, otherwise None."""
    if get_settings().recon.mode != "remote":
        return None
    from parstock.infrastructure.remote import get_reconciliation_client

    return get_reconciliation_client()


def reset_services() -> None:
    """
    Reset all singleton service instances.

    Useful for testing or when configuration changes.
    """
    global _reconciliation_engine
    global _variance_engine

    _reconciliation_engine = None
    _variance_engine = None


__all__ = [
    "get_reconciliation_engine",
    "get_suggested_order_builder",
    "get_variance_engine",
    "get_remote_reconciliation_service",
    "reset_services",
]
