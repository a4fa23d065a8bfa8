from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from orders.models import Delivery, DeliveryStatus, Order, OrderStatus
from shipping.carriers import TrackingScan, TrackingSnapshot
from shipping.delivery_state import apply_manual_update, apply_tracking, is_terminal, map_carrier_status

pytestmark = pytest.mark.django_db


def _mk_order(status=OrderStatus.CONFIRMED):
    return Order.objects.create(
        guest_email="g@example.com",
        shipping_name="Guest",
        shipping_email="g@example.com",
        shipping_phone="9999999999",
        shipping_address="1 Main Street",
        shipping_city="Pune",
        shipping_state="Maharashtra",
        shipping_pincode="411001",
        payment_method="cod",
        order_status=status,
        subtotal=Decimal("100"),
        total_amount=Decimal("186"),
        total_weight=Decimal("500"),
    )


def _mk_delivery(status=DeliveryStatus.PENDING, order=None):
    return Delivery.objects.create(
        order=order or _mk_order(),
        tracking_number="TRK-1-ABCDEFGHI",
        status=status,
        estimated_delivery_date=timezone.now() + timedelta(days=5),
        location="Processing",
    )


def _snapshot(status, current="", scans=None):
    return TrackingSnapshot(awb_code="AWB1", shipment_status=status, current_status=current, scans=scans or [])


class TestMapping:
    @pytest.mark.parametrize("label,expected", [
        ("DELIVERED", DeliveryStatus.DELIVERED),
        ("Out For Delivery", DeliveryStatus.OUT_FOR_DELIVERY),
        ("out_for_delivery", DeliveryStatus.OUT_FOR_DELIVERY),
        ("in-transit", DeliveryStatus.IN_TRANSIT),
        ("Picked Up", DeliveryStatus.PICKED_UP),
        ("RTO Initiated", DeliveryStatus.FAILED),
        ("Canceled", DeliveryStatus.CANCELLED),
        ("7", DeliveryStatus.DELIVERED),
        (17, DeliveryStatus.OUT_FOR_DELIVERY),
    ])
    def test_known_statuses(self, label, expected):
        assert map_carrier_status(label) == expected

    def test_unknown_status(self):
        assert map_carrier_status("HELD AT CUSTOMS") is None
        assert map_carrier_status("") is None
        assert map_carrier_status(999) is None

    def test_terminal(self):
        assert is_terminal(DeliveryStatus.DELIVERED)
        assert is_terminal(DeliveryStatus.CANCELLED)
        assert not is_terminal(DeliveryStatus.OUT_FOR_DELIVERY)


class TestApplyTracking:
    def test_in_transit_updates_location_and_order(self):
        delivery = _mk_delivery()
        scans = [TrackingScan(date="2024-05-02", status="IT", activity="Arrived at hub", location="Delhi Hub")]
        update = apply_tracking(delivery, _snapshot("IN TRANSIT", scans=scans))

        delivery.refresh_from_db()
        assert update.changed
        assert delivery.status == DeliveryStatus.IN_TRANSIT
        assert delivery.location == "Delhi Hub"
        assert delivery.notes == "Arrived at hub"
        assert Order.objects.get(pk=delivery.order_id).order_status == OrderStatus.SHIPPED

    def test_delivered_sets_actual_date(self):
        delivery = _mk_delivery(DeliveryStatus.OUT_FOR_DELIVERY)
        apply_tracking(delivery, _snapshot("DELIVERED", current="Delivered"))
        delivery.refresh_from_db()
        assert delivery.status == DeliveryStatus.DELIVERED
        assert delivery.actual_delivery_date is not None
        assert delivery.notes == "Delivered"
        assert Order.objects.get(pk=delivery.order_id).order_status == OrderStatus.DELIVERED

    def test_terminal_delivery_is_not_touched(self):
        delivery = _mk_delivery(DeliveryStatus.DELIVERED)
        update = apply_tracking(delivery, _snapshot("IN TRANSIT"))
        delivery.refresh_from_db()
        assert not update.changed
        assert delivery.status == DeliveryStatus.DELIVERED

    def test_unmapped_status_keeps_current(self):
        delivery = _mk_delivery(DeliveryStatus.PICKED_UP)
        update = apply_tracking(delivery, _snapshot("HELD AT CUSTOMS", current="Held"))
        delivery.refresh_from_db()
        assert not update.mapped
        assert delivery.status == DeliveryStatus.PICKED_UP
        assert delivery.notes == "Held"

    def test_current_status_used_when_shipment_status_blank(self):
        delivery = _mk_delivery()
        apply_tracking(delivery, _snapshot("", current="Out for Delivery"))
        delivery.refresh_from_db()
        assert delivery.status == DeliveryStatus.OUT_FOR_DELIVERY

    @pytest.mark.parametrize("current", [DeliveryStatus.PICKED_UP, DeliveryStatus.OUT_FOR_DELIVERY])
    def test_stale_pre_pickup_scan_does_not_move_backwards(self, current):
        delivery = _mk_delivery(current)
        update = apply_tracking(delivery, _snapshot("PICKUP SCHEDULED"))
        delivery.refresh_from_db()
        assert update.mapped
        assert not update.changed
        assert delivery.status == current

    def test_numeric_pre_pickup_code_does_not_move_backwards(self):
        delivery = _mk_delivery(DeliveryStatus.IN_TRANSIT)
        apply_tracking(delivery, _snapshot("19"))
        delivery.refresh_from_db()
        assert delivery.status == DeliveryStatus.IN_TRANSIT

    @pytest.mark.parametrize("label,expected", [
        ("RTO Initiated", DeliveryStatus.FAILED),
        ("Cancelled", DeliveryStatus.CANCELLED),
    ])
    def test_failure_statuses_accepted_from_late_stage(self, label, expected):
        delivery = _mk_delivery(DeliveryStatus.OUT_FOR_DELIVERY)
        apply_tracking(delivery, _snapshot(label))
        delivery.refresh_from_db()
        assert delivery.status == expected

    def test_cancelled_order_is_not_revived(self):
        delivery = _mk_delivery(order=_mk_order(OrderStatus.CANCELLED))
        apply_tracking(delivery, _snapshot("IN TRANSIT"))
        assert Order.objects.get(pk=delivery.order_id).order_status == OrderStatus.CANCELLED


class TestManualUpdate:
    def test_any_status_from_any_status(self):
        delivery = _mk_delivery(DeliveryStatus.DELIVERED)
        apply_manual_update(delivery, status=DeliveryStatus.PENDING, location="Warehouse")
        delivery.refresh_from_db()
        assert delivery.status == DeliveryStatus.PENDING
        assert delivery.location == "Warehouse"

    def test_manual_delivered_stamps_date(self):
        delivery = _mk_delivery()
        apply_manual_update(delivery, status=DeliveryStatus.DELIVERED)
        assert delivery.actual_delivery_date is not None

    def test_rejects_unknown_field(self):
        with pytest.raises(ValueError):
            apply_manual_update(_mk_delivery(), order_id=3)

    def test_rejects_unknown_status(self):
        with pytest.raises(ValueError):
            apply_manual_update(_mk_delivery(), status="lost_in_space")
