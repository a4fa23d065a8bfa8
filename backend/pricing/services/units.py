"""
Unit normalization for product weights and box dimensions.

Catalog data arrives tagged with whatever unit the merchant typed in. Everything
downstream works in kilograms / grams for weight and centimeters for length.
"""
from __future__ import annotations

import logging
from decimal import Decimal
from typing import Dict, Optional

from .utils import d

logger = logging.getLogger(__name__)

# Factor to kilograms
WEIGHT_TO_KG: Dict[str, Decimal] = {
    "g": Decimal("0.001"),
    "kg": Decimal("1"),
    "mg": Decimal("0.000001"),
    "oz": Decimal("0.0283495"),
    "lb": Decimal("0.453592"),
}

# Factor to centimeters
LENGTH_TO_CM: Dict[str, Decimal] = {
    "cm": Decimal("1"),
    "mm": Decimal("0.1"),
    "in": Decimal("2.54"),
    "m": Decimal("100"),
}

DEFAULT_WEIGHT_UNIT = "g"
DEFAULT_LENGTH_UNIT = "cm"


class UnitError(ValueError):
    """Raised for an unknown unit when strict conversion is requested"""
    pass


def _factor(table: Dict[str, Decimal], unit: Optional[str], default: str, strict: bool) -> Decimal:
    key = (unit or default).strip().lower() or default
    if key in table:
        return table[key]
    if strict:
        raise UnitError(f"Unknown unit '{unit}'. Allowed: {', '.join(sorted(table))}")
    # Unknown units are read as the base unit; stored tier thresholds were built on this.
    logger.warning("Unknown unit %r, assuming %s", unit, default)
    return table[default]


def to_kilograms(value, unit: Optional[str] = DEFAULT_WEIGHT_UNIT, strict: bool = False) -> Decimal:
    return d(value) * _factor(WEIGHT_TO_KG, unit, DEFAULT_WEIGHT_UNIT, strict)


def to_grams(value, unit: Optional[str] = DEFAULT_WEIGHT_UNIT, strict: bool = False) -> Decimal:
    return to_kilograms(value, unit, strict=strict) * Decimal(1000)


def to_centimeters(value, unit: Optional[str] = DEFAULT_LENGTH_UNIT, strict: bool = False) -> Decimal:
    return d(value) * _factor(LENGTH_TO_CM, unit, DEFAULT_LENGTH_UNIT, strict)
