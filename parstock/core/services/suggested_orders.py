"""
Suggested order builder.

Turns current on-hand (sum of last counts across every area) and par levels
into a per-supplier replenishment plan. Rules:

1. par > 0: order the deficit, rounded up to whole packs when asked.
   Nothing is suggested at or above par.
2. no usable par and nothing on hand: order one pack (or the default par
   when the pack size is unknown) and flag the line needs_par.
3. no supplier: flag needs_supplier, reason no_supplier, bucket "unassigned".
4. orphan items (no product link) with nothing on hand follow rule 2,
   keyed by the item id.

Only products counted in at least one area are considered. Every known
supplier gets a bucket, even when empty.
"""

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from parstock.config import get_logger
from parstock.core.entities.catalog import (
    UNASSIGNED_SUPPLIER_ID,
    UNASSIGNED_SUPPLIER_NAME,
    Product,
    Supplier,
)
from parstock.core.entities.counts import AreaItem
from parstock.core.entities.suggestions import (
    SuggestedLine,
    SuggestedOrderPlan,
    SuggestionReason,
    SupplierBucket,
)

logger = get_logger(__name__)

DEFAULT_PAR_IF_MISSING = 6

# Spellings of "no supplier" seen in stored data
UNASSIGNED_ALIASES = frozenset(
    {"unassigned", "__no_supplier__", "no_supplier", "none", "null", "undefined", ""}
)


def resolve_supplier_key(raw: str | None) -> str:
    """Canonical bucket key for a supplier reference."""
    if raw is None:
        return UNASSIGNED_SUPPLIER_ID
    key = str(raw).strip()
    if key.lower() in UNASSIGNED_ALIASES:
        return UNASSIGNED_SUPPLIER_ID
    return key


def get_or_create_bucket(buckets: dict[str, SupplierBucket], key: str | None) -> SupplierBucket:
    """Return the bucket for key, creating an empty one on first use."""
    canonical = resolve_supplier_key(key)
    bucket = buckets.get(canonical)
    if bucket is None:
        name = UNASSIGNED_SUPPLIER_NAME if canonical == UNASSIGNED_SUPPLIER_ID else None
        bucket = SupplierBucket(supplier_key=canonical, supplier_name=name)
        buckets[canonical] = bucket
    return bucket


def round_up_to_pack(qty: float, pack_size: float | None) -> float:
    """Round up to the next multiple of pack_size. Never rounds down."""
    if not pack_size or pack_size <= 0:
        return qty
    return math.ceil(qty / pack_size) * pack_size


def _format_qty(qty: float) -> str:
    return str(int(qty)) if float(qty).is_integer() else repr(float(qty))


def compute_suggestion_key(supplier_key: str, lines: Iterable[SuggestedLine]) -> str:
    """
    Deterministic fingerprint of a supplier's suggestion set.

    Two builds that suggest the same products and quantities for the same
    supplier produce the same key, which makes draft creation idempotent.
    """
    parts = sorted(f"{line.product_id}:{_format_qty(line.qty)}" for line in lines)
    return f"{resolve_supplier_key(supplier_key)}|{','.join(parts)}"


@dataclass
class OnHandAggregate:
    """Summed last counts per product, plus per-product first overrides."""

    on_hand: dict[str, float] = field(default_factory=dict)
    cost_override: dict[str, float] = field(default_factory=dict)
    pack_override: dict[str, float] = field(default_factory=dict)
    supplier_override: dict[str, str] = field(default_factory=dict)
    orphans: list[AreaItem] = field(default_factory=list)


def aggregate_on_hand(items: Iterable[AreaItem]) -> OnHandAggregate:
    """Sum last counts per product across every area. Orphans are kept apart."""
    agg = OnHandAggregate()
    for item in items:
        if item.is_orphan:
            agg.orphans.append(item)
            continue
        pid = item.product_id  # type: ignore[assignment]
        agg.on_hand[pid] = agg.on_hand.get(pid, 0.0) + (item.last_count or 0.0)
        if item.unit_cost is not None and pid not in agg.cost_override:
            agg.cost_override[pid] = item.unit_cost
        if item.pack_size and pid not in agg.pack_override:
            agg.pack_override[pid] = item.pack_size
        if item.supplier_id and pid not in agg.supplier_override:
            agg.supplier_override[pid] = item.supplier_id
    return agg


class SuggestedOrderBuilder:
    """Builds a SuggestedOrderPlan from catalog and count snapshots."""

    def __init__(
        self,
        round_to_pack: bool = True,
        default_par_if_missing: float = DEFAULT_PAR_IF_MISSING,
    ):
        self.round_to_pack = round_to_pack
        self.default_par_if_missing = default_par_if_missing

    def _one_pack(self, pack_size: float | None) -> float:
        return pack_size if pack_size and pack_size > 0 else self.default_par_if_missing

    def _product_line(
        self,
        product: Product,
        on_hand: float,
        agg: OnHandAggregate,
    ) -> SuggestedLine | None:
        pack_size = product.pack_size or agg.pack_override.get(product.id)
        unit_cost = (
            product.unit_cost
            if product.unit_cost is not None
            else agg.cost_override.get(product.id)
        )
        supplier_key = resolve_supplier_key(
            product.supplier_id or agg.supplier_override.get(product.id)
        )

        needs_par = False
        if product.has_par:
            deficit = product.par_level - on_hand  # type: ignore[operator]
            if deficit <= 0:
                return None
            qty = round_up_to_pack(deficit, pack_size) if self.round_to_pack else deficit
            reason = SuggestionReason.BELOW_PAR
        elif on_hand <= 0:
            qty = self._one_pack(pack_size)
            needs_par = True
            reason = SuggestionReason.NO_PAR_ZERO_STOCK
        else:
            return None

        needs_supplier = supplier_key == UNASSIGNED_SUPPLIER_ID
        if needs_supplier:
            reason = SuggestionReason.NO_SUPPLIER

        return SuggestedLine(
            product_id=product.id,
            name=product.name,
            qty=qty,
            unit_cost=unit_cost,
            pack_size=pack_size,
            supplier_key=supplier_key,
            needs_par=needs_par,
            needs_supplier=needs_supplier,
            reason=reason,
            on_hand=on_hand,
            par_level=product.par_level,
        )

    def _orphan_line(self, item: AreaItem) -> SuggestedLine | None:
        on_hand = item.last_count or 0.0
        if on_hand > 0:
            return None
        supplier_key = resolve_supplier_key(item.supplier_id)
        needs_supplier = supplier_key == UNASSIGNED_SUPPLIER_ID
        return SuggestedLine(
            product_id=item.id,
            name=item.name,
            qty=self._one_pack(item.pack_size),
            unit_cost=item.unit_cost,
            pack_size=item.pack_size,
            supplier_key=supplier_key,
            needs_par=True,
            needs_supplier=needs_supplier,
            reason=(
                SuggestionReason.NO_SUPPLIER
                if needs_supplier
                else SuggestionReason.NO_PAR_ZERO_STOCK
            ),
            on_hand=on_hand,
            is_orphan=True,
        )

    def build(
        self,
        products: Sequence[Product],
        suppliers: Sequence[Supplier],
        items: Iterable[AreaItem],
        venue_id: str | None = None,
    ) -> SuggestedOrderPlan:
        """Compute the plan. Pure: same inputs, same plan."""
        buckets: dict[str, SupplierBucket] = {}

        # Every supplier is enumerable downstream, unassigned included
        get_or_create_bucket(buckets, UNASSIGNED_SUPPLIER_ID)
        for supplier in suppliers:
            bucket = get_or_create_bucket(buckets, supplier.id)
            bucket.supplier_name = supplier.name

        agg = aggregate_on_hand(items)

        for product in products:
            if product.id not in agg.on_hand:
                continue
            line = self._product_line(product, agg.on_hand[product.id], agg)
            if line is not None:
                get_or_create_bucket(buckets, line.supplier_key).lines.append(line)

        for item in agg.orphans:
            line = self._orphan_line(item)
            if line is not None:
                get_or_create_bucket(buckets, line.supplier_key).lines.append(line)

        plan = SuggestedOrderPlan(venue_id=venue_id, buckets=buckets)
        logger.info(
            "suggested_orders_built",
            venue_id=venue_id,
            suppliers=len(buckets),
            lines=plan.line_count,
            orphans=len(agg.orphans),
        )
        return plan


def build_suggested_orders(
    products: Sequence[Product],
    suppliers: Sequence[Supplier],
    items: Iterable[AreaItem],
    round_to_pack: bool = True,
    default_par_if_missing: float = DEFAULT_PAR_IF_MISSING,
    venue_id: str | None = None,
) -> SuggestedOrderPlan:
    """Functional entry point over SuggestedOrderBuilder."""
    builder = SuggestedOrderBuilder(
        round_to_pack=round_to_pack,
        default_par_if_missing=default_par_if_missing,
    )
    return builder.build(products, suppliers, items, venue_id=venue_id)
