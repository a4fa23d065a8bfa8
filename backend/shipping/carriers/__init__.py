from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional


@dataclass
class CarrierRate:
    courier_id: int
    courier_name: str
    rate: Decimal
    estimated_days: Optional[str]
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)


@dataclass
class ShipmentRef:
    external_order_id: str
    shipment_id: str
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)


@dataclass
class AwbAssignment:
    awb_code: str
    courier_name: str
    courier_id: Optional[int] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)


@dataclass
class TrackingScan:
    date: str
    status: str
    activity: str
    location: str


@dataclass
class TrackingSnapshot:
    awb_code: str
    shipment_status: str
    current_status: str
    scans: List[TrackingScan] = field(default_factory=list)
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def latest_scan(self) -> Optional[TrackingScan]:
        return self.scans[0] if self.scans else None


def load(name: Optional[str] = None):
    """
    Lazy-load a carrier client by name.
    - 'shiprocket', None -> ShiprocketClient configured from settings
    - 'mock' -> MockCarrierClient with canned responses
    """
    key = (name or "shiprocket").strip().lower()
    if key == "mock":
        from .mock import MockCarrierClient  # local import to avoid circulars
        return MockCarrierClient()
    if key != "shiprocket":
        raise ValueError(f"Unknown carrier provider '{name}'. Use shiprocket or mock")
    from .shiprocket import ShiprocketClient
    return ShiprocketClient.from_settings()
