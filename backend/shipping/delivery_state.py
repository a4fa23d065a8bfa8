"""
Delivery status taxonomy and the carrier-vocabulary mapping onto it.

Two writers touch a Delivery: tracking ingestion, which only follows the
lookup tables below and never leaves a terminal state, and the admin manual
edit, which may set anything.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional

from django.db import transaction
from django.utils import timezone

from orders.models import Delivery, DeliveryStatus, OrderStatus

from .carriers import TrackingSnapshot

logger = logging.getLogger(__name__)

TERMINAL_STATUSES = frozenset({
    DeliveryStatus.DELIVERED,
    DeliveryStatus.FAILED,
    DeliveryStatus.CANCELLED,
})

CARRIER_STATUS_MAP: Dict[str, str] = {
    "NEW": DeliveryStatus.PENDING,
    "AWB ASSIGNED": DeliveryStatus.PENDING,
    "MANIFEST GENERATED": DeliveryStatus.PENDING,
    "PICKUP SCHEDULED": DeliveryStatus.PENDING,
    "PICKUP GENERATED": DeliveryStatus.PENDING,
    "PICKUP QUEUED": DeliveryStatus.PENDING,
    "OUT FOR PICKUP": DeliveryStatus.PENDING,
    "PICKED UP": DeliveryStatus.PICKED_UP,
    "SHIPPED": DeliveryStatus.IN_TRANSIT,
    "IN TRANSIT": DeliveryStatus.IN_TRANSIT,
    "REACHED AT DESTINATION HUB": DeliveryStatus.IN_TRANSIT,
    "OUT FOR DELIVERY": DeliveryStatus.OUT_FOR_DELIVERY,
    "DELIVERED": DeliveryStatus.DELIVERED,
    "FAILED": DeliveryStatus.FAILED,
    "UNDELIVERED": DeliveryStatus.FAILED,
    "LOST": DeliveryStatus.FAILED,
    "RTO INITIATED": DeliveryStatus.FAILED,
    "RTO DELIVERED": DeliveryStatus.FAILED,
    "CANCELED": DeliveryStatus.CANCELLED,
    "CANCELLED": DeliveryStatus.CANCELLED,
}

# Happy-path order; tracking never moves a delivery back along it
DELIVERY_PROGRESS = (
    DeliveryStatus.PENDING,
    DeliveryStatus.PICKED_UP,
    DeliveryStatus.IN_TRANSIT,
    DeliveryStatus.OUT_FOR_DELIVERY,
    DeliveryStatus.DELIVERED,
)

# Shiprocket numeric shipment_status ids
CARRIER_STATUS_CODES: Dict[int, str] = {
    6: DeliveryStatus.IN_TRANSIT,
    7: DeliveryStatus.DELIVERED,
    8: DeliveryStatus.CANCELLED,
    9: DeliveryStatus.FAILED,
    12: DeliveryStatus.FAILED,
    17: DeliveryStatus.OUT_FOR_DELIVERY,
    18: DeliveryStatus.IN_TRANSIT,
    19: DeliveryStatus.PENDING,
    21: DeliveryStatus.FAILED,
    42: DeliveryStatus.PICKED_UP,
}

# Order status implied by a delivery status reached through tracking
ORDER_STATUS_FOR_DELIVERY: Dict[str, str] = {
    DeliveryStatus.PICKED_UP: OrderStatus.SHIPPED,
    DeliveryStatus.IN_TRANSIT: OrderStatus.SHIPPED,
    DeliveryStatus.OUT_FOR_DELIVERY: OrderStatus.SHIPPED,
    DeliveryStatus.DELIVERED: OrderStatus.DELIVERED,
}

MANUAL_FIELDS = (
    "status",
    "carrier",
    "tracking_number",
    "location",
    "notes",
    "estimated_delivery_date",
    "actual_delivery_date",
    "carrier_awb",
)


@dataclass
class TrackingUpdate:
    previous_status: str
    status: str
    mapped: bool
    changed: bool


def _normalize(text: str) -> str:
    return " ".join(str(text).replace("_", " ").replace("-", " ").upper().split())


def map_carrier_status(value) -> Optional[str]:
    """Internal status for a carrier status label or numeric id, None if unknown."""
    if value is None or value == "":
        return None
    if isinstance(value, int) or str(value).strip().isdigit():
        return CARRIER_STATUS_CODES.get(int(value))
    return CARRIER_STATUS_MAP.get(_normalize(value))


def is_terminal(status: str) -> bool:
    return status in TERMINAL_STATUSES


def _is_regression(current: str, new: str) -> bool:
    """Failed and cancelled sit outside the sequence and are always accepted."""
    if current not in DELIVERY_PROGRESS or new not in DELIVERY_PROGRESS:
        return False
    return DELIVERY_PROGRESS.index(new) < DELIVERY_PROGRESS.index(current)


def apply_tracking(delivery: Delivery, snapshot: TrackingSnapshot, save: bool = True) -> TrackingUpdate:
    previous = delivery.status
    if is_terminal(previous):
        logger.info("Delivery %s is %s; ignoring carrier status %r", delivery.pk, previous, snapshot.shipment_status)
        return TrackingUpdate(previous_status=previous, status=previous, mapped=False, changed=False)

    new_status = map_carrier_status(snapshot.shipment_status) or map_carrier_status(snapshot.current_status)
    mapped = new_status is not None
    if not mapped:
        logger.warning(
            "Unmapped carrier status %r / %r for delivery %s",
            snapshot.shipment_status, snapshot.current_status, delivery.pk,
        )
        new_status = previous
    elif _is_regression(previous, new_status):
        logger.info(
            "Ignoring carrier status %r for delivery %s: already %s",
            snapshot.shipment_status or snapshot.current_status, delivery.pk, previous,
        )
        new_status = previous

    latest = snapshot.latest_scan
    if latest is not None and latest.location:
        delivery.location = latest.location
    if latest is not None and latest.activity:
        delivery.notes = latest.activity
    elif snapshot.current_status:
        delivery.notes = snapshot.current_status

    delivery.status = new_status
    if new_status == DeliveryStatus.DELIVERED and delivery.actual_delivery_date is None:
        delivery.actual_delivery_date = timezone.now()

    if save:
        with transaction.atomic():
            delivery.save()
            _sync_order(delivery)

    return TrackingUpdate(previous_status=previous, status=new_status, mapped=mapped, changed=new_status != previous)


def _sync_order(delivery: Delivery) -> None:
    target = ORDER_STATUS_FOR_DELIVERY.get(delivery.status)
    if target is None:
        return
    order = delivery.order
    if order.order_status in (OrderStatus.CANCELLED, OrderStatus.DELIVERED):
        return
    if order.order_status != target:
        order.advance_status(target)


def apply_manual_update(delivery: Delivery, **fields) -> Delivery:
    """Admin override: any field, any status, no transition checks."""
    unknown = set(fields) - set(MANUAL_FIELDS)
    if unknown:
        raise ValueError(f"Unsupported delivery fields: {', '.join(sorted(unknown))}")
    if "status" in fields and fields["status"] not in DeliveryStatus.values:
        raise ValueError(f"Invalid delivery status '{fields['status']}'")

    for name, value in fields.items():
        setattr(delivery, name, value)
    if fields.get("status") == DeliveryStatus.DELIVERED and delivery.actual_delivery_date is None:
        delivery.actual_delivery_date = timezone.now()
    delivery.save()
    logger.info("Delivery %s manually updated: %s", delivery.pk, ", ".join(sorted(fields)))
    return delivery
