"""Canned carrier responses for stores whose logistics account is not live yet."""
from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional

from . import AwbAssignment, CarrierRate, ShipmentRef, TrackingScan, TrackingSnapshot

logger = logging.getLogger(__name__)

MOCK_RATES = [
    (1, "Delhivery (Mock)", Decimal("50"), "2-3"),
    (2, "Ecom Express (Mock)", Decimal("60"), "3-4"),
    (3, "DTDC (Mock)", Decimal("45"), "2-3"),
]


class MockCarrierClient:
    def __init__(self) -> None:
        self.cancelled: List[str] = []

    def authenticate(self) -> str:
        return "mock-token"

    def quote_rates(self, pickup_pincode: str, delivery_pincode: str, weight_kg, cod: bool = False) -> List[CarrierRate]:
        logger.info("Mock rate quote %s -> %s", pickup_pincode, delivery_pincode)
        return [
            CarrierRate(courier_id=cid, courier_name=name, rate=rate, estimated_days=etd)
            for cid, name, rate, etd in MOCK_RATES
        ]

    def create_shipment(self, order) -> ShipmentRef:
        return ShipmentRef(external_order_id=f"MOCK-{order.pk}", shipment_id=str(789000 + order.pk))

    def assign_carrier(self, shipment_id, courier_id) -> AwbAssignment:
        name = next((n for cid, n, _, _ in MOCK_RATES if cid == int(courier_id)), "Delhivery (Mock)")
        return AwbAssignment(awb_code=f"MOCK{shipment_id}", courier_name=name, courier_id=int(courier_id))

    def schedule_pickup(self, shipment_id, pickup_date: Optional[date] = None) -> Dict[str, Any]:
        return {"pickup_status": 1, "shipment_id": shipment_id}

    def track(self, awb_code: str) -> TrackingSnapshot:
        return TrackingSnapshot(
            awb_code=awb_code,
            shipment_status="IN TRANSIT",
            current_status="In Transit",
            scans=[TrackingScan(date=date.today().isoformat(), status="IN TRANSIT", activity="Shipment in transit (Mock)", location="Hub")],
        )

    def cancel_shipment(self, external_order_id) -> Dict[str, Any]:
        self.cancelled.append(str(external_order_id))
        return {"status": 200, "message": "Order cancelled (Mock)"}

    def generate_label(self, shipment_id) -> str:
        return f"https://example.invalid/labels/{shipment_id}.pdf"
