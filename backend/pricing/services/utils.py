from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP

TWOPLACES = Decimal("0.01")
FOURPLACES = Decimal("0.0001")
ZERO = Decimal("0")
HUNDRED = Decimal("100")


def d(val) -> Decimal:
    """Coerce incoming values to Decimal safely."""
    if isinstance(val, Decimal):
        return val
    if val is None:
        return ZERO
    return Decimal(str(val))


def round2(amount) -> Decimal:
    """Round half-up to two places (12.345 -> 12.35)."""
    return d(amount).quantize(TWOPLACES, rounding=ROUND_HALF_UP)
