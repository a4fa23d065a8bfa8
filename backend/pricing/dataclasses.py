from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from .services.utils import ZERO, d


@dataclass(frozen=True)
class Dimensions:
    length: Optional[Decimal] = None
    width: Optional[Decimal] = None
    height: Optional[Decimal] = None
    breadth: Optional[Decimal] = None  # accepted from catalog data, not used for volume
    unit: str = "cm"

    @classmethod
    def from_mapping(cls, data: Optional[Dict[str, Any]]) -> Optional["Dimensions"]:
        if not data:
            return None

        def _opt(key):
            val = data.get(key)
            return None if val in (None, "") else d(val)

        return cls(
            length=_opt("length"),
            width=_opt("width"),
            height=_opt("height"),
            breadth=_opt("breadth"),
            unit=data.get("unit") or "cm",
        )

    def has_full_box(self) -> bool:
        return bool(self.length) and bool(self.width) and bool(self.height)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "length": self.length,
            "width": self.width,
            "height": self.height,
            "breadth": self.breadth,
            "unit": self.unit,
        }


@dataclass
class LineItem:
    """A cart line resolved against the catalog, priced at purchase time."""
    product_id: str
    quantity: int
    unit_price: Decimal = ZERO
    weight: Optional[Decimal] = None
    weight_unit: str = "g"
    dimensions: Optional[Dimensions] = None
    cgst: Optional[Decimal] = None
    sgst: Optional[Decimal] = None
    igst: Optional[Decimal] = None
    name: str = ""
    sku: str = ""

    @property
    def extended(self) -> Decimal:
        return self.unit_price * self.quantity

    @property
    def has_tax_override(self) -> bool:
        return self.cgst is not None or self.sgst is not None or self.igst is not None


@dataclass(frozen=True)
class OrderMeasure:
    weight_grams: Decimal
    volume_cm3: Decimal
    floor_applied: bool = False

    @property
    def weight_kg(self) -> Decimal:
        return self.weight_grams / Decimal(1000)


@dataclass(frozen=True)
class TaxRates:
    cgst: Decimal = ZERO
    sgst: Decimal = ZERO
    igst: Decimal = ZERO


@dataclass
class ItemTax:
    product_id: str
    cgst: Decimal
    sgst: Decimal
    igst: Decimal
    total: Decimal


@dataclass
class OrderTax:
    item_taxes: List[ItemTax] = field(default_factory=list)
    total_tax: Decimal = ZERO
    total_cgst: Decimal = ZERO
    total_sgst: Decimal = ZERO
    total_igst: Decimal = ZERO


@dataclass(frozen=True)
class WeightRateTier:
    min_weight: Decimal  # grams
    max_weight: Decimal
    cost: Decimal


@dataclass(frozen=True)
class VolumeRateTier:
    min_volume: Decimal  # cm3
    max_volume: Decimal
    cost: Decimal


@dataclass(frozen=True)
class ShippingSettings:
    """Store-wide pricing configuration handed to the calculators.

    Tier tuples keep their declaration order; the resolver depends on it.
    """
    gst_rate: Decimal = Decimal("18")
    shipping_cost: Decimal = Decimal("50")
    free_shipping_above: Decimal = Decimal("500")
    weight_rates: Tuple[WeightRateTier, ...] = ()
    volume_rates: Tuple[VolumeRateTier, ...] = ()
