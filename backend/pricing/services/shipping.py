from __future__ import annotations

import logging
from decimal import Decimal
from typing import Callable, List, Optional, Sequence, Tuple, TypeVar

from ..dataclasses import ShippingSettings, VolumeRateTier, WeightRateTier
from .utils import ZERO, d

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _tier_cost(value: Decimal, tiers: Sequence[T], bounds: Callable[[T], Tuple[Decimal, Decimal]]) -> Optional[Decimal]:
    """
    First tier (in declaration order) whose [min, max] contains value.
    Above the last tier's max, the last tier applies. Gaps and values below
    every tier return None so the next rule family can try.
    """
    for tier in tiers:
        lo, hi = bounds(tier)
        if lo <= value <= hi:
            return d(tier.cost)

    last = tiers[-1]
    if value > bounds(last)[1]:
        return d(last.cost)
    return None


def resolve_shipping_cost(
    subtotal,
    total_weight_grams,
    total_volume_cm3,
    settings: ShippingSettings,
) -> Decimal:
    subtotal = d(subtotal)
    if subtotal >= d(settings.free_shipping_above):
        return ZERO

    if settings.weight_rates:
        cost = _tier_cost(d(total_weight_grams), settings.weight_rates, lambda t: (d(t.min_weight), d(t.max_weight)))
        if cost is not None:
            return cost

    if total_volume_cm3 is not None and settings.volume_rates:
        cost = _tier_cost(d(total_volume_cm3), settings.volume_rates, lambda t: (d(t.min_volume), d(t.max_volume)))
        if cost is not None:
            return cost

    return d(settings.shipping_cost)


def validate_tiers(tiers: Sequence[T]) -> List[str]:
    """
    Admin-side sanity check for a tier list. The resolver never calls this:
    declaration order is what it evaluates, gaps and all.
    """
    warnings: List[str] = []
    prev_hi = None
    for idx, tier in enumerate(tiers, start=1):
        if isinstance(tier, WeightRateTier):
            lo, hi = d(tier.min_weight), d(tier.max_weight)
        elif isinstance(tier, VolumeRateTier):
            lo, hi = d(tier.min_volume), d(tier.max_volume)
        else:
            raise TypeError(f"Unsupported tier type: {type(tier).__name__}")

        if lo > hi:
            warnings.append(f"Tier {idx}: min {lo} is greater than max {hi}")
        if d(tier.cost) < ZERO:
            warnings.append(f"Tier {idx}: negative cost {tier.cost}")
        if prev_hi is not None:
            if lo <= prev_hi:
                warnings.append(f"Tier {idx}: starts at {lo}, overlapping or below previous max {prev_hi}")
        prev_hi = hi if prev_hi is None else max(prev_hi, hi)

    if warnings:
        logger.info("Tier validation produced %d warning(s)", len(warnings))
    return warnings
