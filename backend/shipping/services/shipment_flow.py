"""
Admin-triggered shipment actions: quote, ship (create + assign AWB),
refresh tracking, cancel.

Carrier errors are not caught here; they reach the admin view with the
provider's message intact and the operator retries by hand.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from typing import List, Optional

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from core.models import StoreSettings
from orders.errors import InvalidTransitionError, NotFoundError
from orders.models import Delivery, DeliveryStatus, Order, OrderStatus, PaymentMethod
from pricing.services.weights import MINIMUM_BILLABLE_GRAMS, aggregate_order

from ..carriers import AwbAssignment, CarrierRate, TrackingSnapshot, load
from ..delivery_state import TrackingUpdate, apply_tracking

logger = logging.getLogger(__name__)


@dataclass
class ShipResult:
    order_id: int
    awb_code: str
    courier_name: str
    shipment_id: str
    external_order_id: str


def get_carrier(client=None):
    if client is not None:
        return client
    return load(getattr(settings, "FULFILLMENT", {}).get("CARRIER_PROVIDER"))


def order_weight_kg(order: Order) -> Decimal:
    if order.total_weight:
        return Decimal(order.total_weight) / Decimal(1000)
    measure = aggregate_order([item.to_line_item() for item in order.items.all()])
    return measure.weight_kg


def quote_order_rates(order: Order, client=None, store: Optional[StoreSettings] = None) -> List[CarrierRate]:
    store = store or StoreSettings.load()
    carrier = get_carrier(client)
    return carrier.quote_rates(
        store.store_pincode,
        order.shipping_pincode,
        order_weight_kg(order),
        cod=order.payment_method == PaymentMethod.COD,
    )


def check_serviceability(delivery_pincode: str, client=None, store: Optional[StoreSettings] = None) -> List[CarrierRate]:
    """Pre-checkout check at the minimum billable weight. Raises ServiceabilityError."""
    store = store or StoreSettings.load()
    carrier = get_carrier(client)
    return carrier.quote_rates(store.store_pincode, delivery_pincode, MINIMUM_BILLABLE_GRAMS / Decimal(1000), cod=False)


def ship_order(order: Order, courier_id: int, client=None, pickup_date: Optional[date] = None) -> ShipResult:
    """
    Create the provider order if this order has none yet, then assign the
    courier. The AWB returned becomes the delivery's tracking number.
    """
    if order.order_status == OrderStatus.CANCELLED:
        raise InvalidTransitionError(f"Order {order.pk} is cancelled")
    if order.carrier_awb:
        raise InvalidTransitionError(f"Order {order.pk} already shipped with AWB {order.carrier_awb}")

    carrier = get_carrier(client)

    if not order.carrier_shipment_id:
        ref = carrier.create_shipment(order)
        order.carrier_order_id = ref.external_order_id
        order.carrier_shipment_id = ref.shipment_id
        order.save(update_fields=["carrier_order_id", "carrier_shipment_id", "updated_at"])
        logger.info("Order %s created at carrier: shipment %s", order.pk, ref.shipment_id)

    assignment: AwbAssignment = carrier.assign_carrier(order.carrier_shipment_id, courier_id)

    with transaction.atomic():
        order.carrier_awb = assignment.awb_code
        order.carrier_courier = assignment.courier_name
        order.save(update_fields=["carrier_awb", "carrier_courier", "updated_at"])
        order.advance_status(OrderStatus.SHIPPED)
        _record_assignment(order, assignment)

    if pickup_date is not None:
        carrier.schedule_pickup(order.carrier_shipment_id, pickup_date)

    logger.info("Order %s shipped via %s, AWB %s", order.pk, assignment.courier_name, assignment.awb_code)
    return ShipResult(
        order_id=order.pk,
        awb_code=assignment.awb_code,
        courier_name=assignment.courier_name,
        shipment_id=order.carrier_shipment_id,
        external_order_id=order.carrier_order_id or "",
    )


def _record_assignment(order: Order, assignment: AwbAssignment) -> Delivery:
    delivery = Delivery.objects.filter(order=order).first()
    if delivery is None:
        days = int(getattr(settings, "FULFILLMENT", {}).get("ESTIMATED_DELIVERY_DAYS", 5))
        delivery = Delivery(
            order=order,
            estimated_delivery_date=timezone.now() + timedelta(days=days),
            location="Processing",
        )
    delivery.tracking_number = assignment.awb_code
    delivery.carrier = assignment.courier_name
    delivery.carrier_awb = assignment.awb_code
    delivery.carrier_order_id = order.carrier_order_id
    delivery.carrier_courier_id = str(assignment.courier_id) if assignment.courier_id else None
    delivery.status = DeliveryStatus.PICKED_UP
    delivery.notes = f"Shipped via {assignment.courier_name}"
    delivery.save()
    return delivery


def schedule_pickup(order: Order, pickup_date: date, client=None) -> dict:
    if not order.carrier_shipment_id:
        raise NotFoundError(f"Order {order.pk} has not been created at the carrier yet")
    return get_carrier(client).schedule_pickup(order.carrier_shipment_id, pickup_date)


def refresh_tracking(awb_code: str, client=None) -> tuple[TrackingSnapshot, Optional[TrackingUpdate]]:
    """Fetch carrier tracking and fold it into the matching delivery, if any."""
    snapshot = get_carrier(client).track(awb_code)
    delivery = (
        Delivery.objects.select_related("order")
        .filter(carrier_awb=awb_code)
        .first()
        or Delivery.objects.select_related("order").filter(tracking_number=awb_code).first()
    )
    if delivery is None:
        logger.info("No delivery on record for AWB %s", awb_code)
        return snapshot, None
    return snapshot, apply_tracking(delivery, snapshot)


def refresh_order_tracking(order: Order, client=None) -> tuple[TrackingSnapshot, Optional[TrackingUpdate]]:
    if not order.carrier_awb:
        raise NotFoundError(f"Order {order.pk} has no carrier AWB yet")
    return refresh_tracking(order.carrier_awb, client=client)


def cancel_order_shipment(order: Order, client=None) -> dict:
    if order.order_status == OrderStatus.DELIVERED:
        raise InvalidTransitionError(f"Order {order.pk} is delivered and cannot be cancelled")

    response = {}
    if order.carrier_order_id:
        response = get_carrier(client).cancel_shipment(order.carrier_order_id)

    with transaction.atomic():
        order.advance_status(OrderStatus.CANCELLED)
        Delivery.objects.filter(order=order).update(
            status=DeliveryStatus.CANCELLED,
            notes="Shipment cancelled",
            updated_at=timezone.now(),
        )
    logger.info("Order %s shipment cancelled", order.pk)
    return response
