from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Optional

from ..dataclasses import Dimensions, LineItem, OrderMeasure
from .units import to_centimeters, to_kilograms
from .utils import ZERO, d

VOLUMETRIC_DIVISOR = Decimal(5000)
MINIMUM_BILLABLE_GRAMS = Decimal(500)


def volume_cm3(dimensions: Optional[Dimensions]) -> Decimal:
    if dimensions is None or not dimensions.has_full_box():
        return ZERO
    length = to_centimeters(dimensions.length, dimensions.unit)
    width = to_centimeters(dimensions.width, dimensions.unit)
    height = to_centimeters(dimensions.height, dimensions.unit)
    return length * width * height


def volumetric_weight_kg(dimensions: Optional[Dimensions]) -> Decimal:
    """(L x W x H in cm) / 5000, then / 1000 to stay on the kg basis used for actual weight."""
    return volume_cm3(dimensions) / VOLUMETRIC_DIVISOR / Decimal(1000)


def chargeable_weight_kg(weight, weight_unit: Optional[str] = "g", dimensions: Optional[Dimensions] = None) -> Decimal:
    """Greater of actual and volumetric weight. No per-item minimum."""
    actual_kg = ZERO
    if weight is not None and d(weight) > ZERO:
        actual_kg = to_kilograms(weight, weight_unit or "g")
    return max(actual_kg, volumetric_weight_kg(dimensions))


def item_chargeable_kg(item: LineItem) -> Decimal:
    return chargeable_weight_kg(item.weight, item.weight_unit, item.dimensions)


def order_weight_grams(items: Iterable[LineItem]) -> Decimal:
    return sum(
        (item_chargeable_kg(item) * Decimal(1000) * item.quantity for item in items),
        ZERO,
    )


def order_volume_cm3(items: Iterable[LineItem]) -> Decimal:
    return sum((volume_cm3(item.dimensions) * item.quantity for item in items), ZERO)


def aggregate_order(items: Iterable[LineItem]) -> OrderMeasure:
    """
    Total chargeable weight (grams) and volume (cm3) for an order.

    An empty order, or one whose items all weigh nothing, is billed at the
    0.5 kg minimum. The floor is applied to the order total, never per item.
    """
    items = list(items)
    weight = order_weight_grams(items)
    volume = order_volume_cm3(items)
    if not items or weight <= ZERO:
        return OrderMeasure(weight_grams=MINIMUM_BILLABLE_GRAMS, volume_cm3=volume, floor_applied=True)
    return OrderMeasure(weight_grams=weight, volume_cm3=volume)
