"""
Invoice quality gate.

Scores how well a parsed invoice lines up with the order it claims to fill
and turns that into a final confidence and a caller decision:

- the quality score is a ceiling on the parser's own confidence, never a
  credit toward it
- a purchase-order number mismatch forces the final confidence to 0,
  whatever the lines say

Pure functions, no I/O.
"""

import math
import re
from collections.abc import Sequence
from dataclasses import dataclass, field

from parstock.core.entities.invoice import InvoiceLine
from parstock.core.entities.orders import OrderLine
from parstock.core.entities.reconciliation import (
    ConfidenceTier,
    GateDecision,
    GateResult,
    QualityBreakdown,
)

# Score weights
OVERLAP_WEIGHT = 0.65
PRICE_WEIGHT = 0.25
MISS_WEIGHT = 0.10

SCORE_FLOOR = 0.15
SCORE_CEILING = 0.98

HIGH_TIER_THRESHOLD = 0.95
MEDIUM_TIER_THRESHOLD = 0.80

DEFAULT_PARSER_CONFIDENCE = 0.5

# Shorter name must be at least this long for substring matching
MIN_CONTAINMENT_LENGTH = 4

_STRIP_RE = re.compile(r"[^a-z0-9\s]")
_SPACE_RE = re.compile(r"\s+")


@dataclass
class LineMatch:
    """An invoice line paired with the order line it matched."""

    order_line: OrderLine
    invoice_line: InvoiceLine
    exact: bool = True


@dataclass
class MatchResult:
    pairs: list[LineMatch] = field(default_factory=list)
    unmatched_invoice: list[InvoiceLine] = field(default_factory=list)
    unmatched_order: list[OrderLine] = field(default_factory=list)


def normalize_name(name: str | None) -> str:
    """Lowercase, drop everything but [a-z0-9] and whitespace, collapse spaces."""
    if not name:
        return ""
    result = _STRIP_RE.sub("", name.lower())
    return _SPACE_RE.sub(" ", result).strip()


def names_similar(a: str, b: str) -> bool:
    """
    Compare two already-normalized names.

    Equal names match. Otherwise one must contain the other, and the shorter
    one must be at least MIN_CONTAINMENT_LENGTH characters so that tokens
    like "ml" do not match everything.
    """
    if not a or not b:
        return False
    if a == b:
        return True
    shorter, longer = (a, b) if len(a) <= len(b) else (b, a)
    if len(shorter) < MIN_CONTAINMENT_LENGTH:
        return False
    return shorter in longer


def match_lines(
    order_lines: Sequence[OrderLine],
    invoice_lines: Sequence[InvoiceLine],
) -> MatchResult:
    """
    Pair each invoice line with an order line.

    Exact normalized-name lookup first, then a linear containment scan where
    the first qualifying order line in input order wins. This is a best-effort
    heuristic, not an optimal assignment: an order line may be matched by more
    than one invoice line.
    """
    index: dict[str, OrderLine] = {}
    normalized_order: list[tuple[str, OrderLine]] = []
    for line in order_lines:
        key = normalize_name(line.name)
        normalized_order.append((key, line))
        if key and key not in index:
            index[key] = line

    result = MatchResult()
    used: set[int] = set()

    for inv in invoice_lines:
        key = normalize_name(inv.name)
        hit = index.get(key) if key else None
        exact = hit is not None
        if hit is None:
            for order_key, candidate in normalized_order:
                if names_similar(key, order_key):
                    hit = candidate
                    break
        if hit is None:
            result.unmatched_invoice.append(inv)
            continue
        used.add(id(hit))
        result.pairs.append(LineMatch(order_line=hit, invoice_line=inv, exact=exact))

    result.unmatched_order = [line for line in order_lines if id(line) not in used]
    return result


def _positive(value: float | None) -> bool:
    return value is not None and math.isfinite(value) and value > 0


def price_diff(order_price: float, invoice_price: float) -> float:
    """Relative price difference capped at 1."""
    return min(1.0, abs(order_price - invoice_price) / max(order_price, invoice_price))


def clamp_score(score: float) -> float:
    return max(SCORE_FLOOR, min(SCORE_CEILING, score))


def compute_quality_score(
    order_lines: Sequence[OrderLine],
    invoice_lines: Sequence[InvoiceLine],
    matches: MatchResult | None = None,
) -> QualityBreakdown:
    """Compute the clamped line-match quality score and its components."""
    matches = matches or match_lines(order_lines, invoice_lines)

    order_count = len(order_lines)
    invoice_count = len(invoice_lines)
    matched = len(matches.pairs)

    overlap_ratio = matched / max(1, max(order_count, invoice_count))

    diffs = [
        price_diff(pair.order_line.unit_cost, pair.invoice_line.unit_price)  # type: ignore[arg-type]
        for pair in matches.pairs
        if _positive(pair.order_line.unit_cost) and _positive(pair.invoice_line.unit_price)
    ]
    avg_price_diff = sum(diffs) / len(diffs) if diffs else 0.0

    miss_ratio = len(matches.unmatched_invoice) / invoice_count if invoice_count else 0.0

    raw = (
        OVERLAP_WEIGHT * overlap_ratio
        + PRICE_WEIGHT * (1 - min(1.0, avg_price_diff))
        + MISS_WEIGHT * (1 - miss_ratio)
    )

    return QualityBreakdown(
        overlap_ratio=overlap_ratio,
        avg_price_diff=avg_price_diff,
        miss_ratio=miss_ratio,
        score=clamp_score(raw),
        matched_count=matched,
        order_line_count=order_count,
        invoice_line_count=invoice_count,
    )


def _clean_po(po: str | None) -> str:
    return po.strip() if po else ""


def is_po_mismatch(order_po: str | None, invoice_po: str | None) -> bool:
    """True only when both PO numbers are present and differ."""
    a, b = _clean_po(order_po), _clean_po(invoice_po)
    return bool(a) and bool(b) and a != b


def tier_for_confidence(confidence: float | None) -> ConfidenceTier:
    """Map a confidence to its tier. Missing or non-finite values are low."""
    if confidence is None or not math.isfinite(confidence):
        return ConfidenceTier.LOW
    if confidence >= HIGH_TIER_THRESHOLD:
        return ConfidenceTier.HIGH
    if confidence >= MEDIUM_TIER_THRESHOLD:
        return ConfidenceTier.MEDIUM
    return ConfidenceTier.LOW


def decide(tier: ConfidenceTier, po_mismatch: bool = False) -> GateDecision:
    """Caller decision for a tier. A PO mismatch always needs manual resolution."""
    if po_mismatch:
        return GateDecision.RESOLVE_PO_MISMATCH
    if tier == ConfidenceTier.HIGH:
        return GateDecision.AUTO_POST
    if tier == ConfidenceTier.MEDIUM:
        return GateDecision.CONFIRM
    return GateDecision.MANUAL_ENTRY


def gate_with_quality(
    order_po: str | None,
    invoice_po: str | None,
    parser_confidence: float | None,
    quality: QualityBreakdown | None,
    default_parser_confidence: float = DEFAULT_PARSER_CONFIDENCE,
) -> GateResult:
    """
    Combine an already computed quality breakdown with the PO gate.

    Used directly when the score came from the remote reconciliation service.
    A missing breakdown is treated as the score floor.
    """
    if is_po_mismatch(order_po, invoice_po):
        return GateResult(
            final_confidence=0.0,
            tier=ConfidenceTier.LOW,
            po_mismatch=True,
            quality=None,
            decision=GateDecision.RESOLVE_PO_MISMATCH,
            parser_confidence=parser_confidence,
        )

    if parser_confidence is not None and math.isfinite(parser_confidence):
        base = parser_confidence
    else:
        base = default_parser_confidence

    score = quality.score if quality is not None else SCORE_FLOOR
    final = min(base, score)
    tier = tier_for_confidence(final)

    return GateResult(
        final_confidence=final,
        tier=tier,
        po_mismatch=False,
        quality=quality,
        decision=decide(tier),
        parser_confidence=parser_confidence,
    )


def apply_quality_gate(
    order_po: str | None,
    invoice_po: str | None,
    parser_confidence: float | None,
    order_lines: Sequence[OrderLine],
    invoice_lines: Sequence[InvoiceLine],
    default_parser_confidence: float = DEFAULT_PARSER_CONFIDENCE,
) -> GateResult:
    """Score an invoice locally and apply the PO gate."""
    if is_po_mismatch(order_po, invoice_po):
        return gate_with_quality(order_po, invoice_po, parser_confidence, None)

    quality = compute_quality_score(order_lines, invoice_lines)
    return gate_with_quality(
        order_po,
        invoice_po,
        parser_confidence,
        quality,
        default_parser_confidence=default_parser_confidence,
    )
