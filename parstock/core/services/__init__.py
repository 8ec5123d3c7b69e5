"""
Core business logic services.

Layer-pure services that depend only on:
- parstock/core/entities/*
- parstock/core/interfaces/*
- parstock/core/exceptions.py

NO infrastructure imports.
"""

from parstock.core.services.quality_gate import (
    LineMatch,
    MatchResult,
    apply_quality_gate,
    compute_quality_score,
    decide,
    gate_with_quality,
    is_po_mismatch,
    match_lines,
    names_similar,
    normalize_name,
    tier_for_confidence,
)
from parstock.core.services.reconciliation_engine import ReconciliationEngine
from parstock.core.services.scope_lock import can_order_venue_wide, decide_scope_lock
from parstock.core.services.suggested_orders import (
    SuggestedOrderBuilder,
    aggregate_on_hand,
    build_suggested_orders,
    compute_suggestion_key,
    get_or_create_bucket,
    resolve_supplier_key,
    round_up_to_pack,
)
from parstock.core.services.variance_engine import VarianceEngine, summarize_bands, variance_pct

__all__ = [
    # Quality gate
    "LineMatch",
    "MatchResult",
    "apply_quality_gate",
    "compute_quality_score",
    "decide",
    "gate_with_quality",
    "is_po_mismatch",
    "match_lines",
    "names_similar",
    "normalize_name",
    "tier_for_confidence",
    # Reconciliation
    "ReconciliationEngine",
    # Scope lock
    "can_order_venue_wide",
    "decide_scope_lock",
    # Suggested orders
    "SuggestedOrderBuilder",
    "aggregate_on_hand",
    "build_suggested_orders",
    "compute_suggestion_key",
    "get_or_create_bucket",
    "resolve_supplier_key",
    "round_up_to_pack",
    # Variance
    "VarianceEngine",
    "summarize_bands",
    "variance_pct",
]
