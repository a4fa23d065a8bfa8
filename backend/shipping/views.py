"""
Staff-only shipment endpoints. Provider failures come back as 502 (400 for
unserviceable pincodes) with the provider's own message, so the operator can
fix the input or retry by hand.
"""
from __future__ import annotations

import logging

from django.shortcuts import get_object_or_404

from rest_framework import status, views
from rest_framework.permissions import IsAdminUser
from rest_framework.response import Response

from orders.errors import InvalidTransitionError, NotFoundError
from orders.models import Delivery, Order
from orders.serializers import DeliverySerializer

from .carriers.errors import CarrierAuthError, CarrierError, ServiceabilityError
from .delivery_state import apply_manual_update
from .serializers import (
    CarrierRateSerializer,
    ManualDeliveryUpdateSerializer,
    ServiceabilityRequestSerializer,
    ShipRequestSerializer,
    TrackingSnapshotSerializer,
)
from .services import shipment_flow

logger = logging.getLogger(__name__)


def _carrier_error_response(exc: CarrierError) -> Response:
    if isinstance(exc, ServiceabilityError):
        code = status.HTTP_400_BAD_REQUEST
    else:
        code = status.HTTP_502_BAD_GATEWAY
    body = {"detail": exc.message, "provider_status": exc.status_code}
    if isinstance(exc, CarrierAuthError):
        body["auth"] = False
    return Response(body, status=code)


class ShippingAdminView(views.APIView):
    permission_classes = [IsAdminUser]

    def handle_exception(self, exc):
        if isinstance(exc, CarrierError):
            logger.warning("Carrier call failed in %s: %s", self.__class__.__name__, exc)
            return _carrier_error_response(exc)
        if isinstance(exc, InvalidTransitionError):
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)
        if isinstance(exc, NotFoundError):
            return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)
        return super().handle_exception(exc)


class OrderRatesView(ShippingAdminView):
    def get(self, request, id):
        order = get_object_or_404(Order, pk=id)
        rates = shipment_flow.quote_order_rates(order)
        return Response({"order_id": order.pk, "rates": CarrierRateSerializer(rates, many=True).data})


class ServiceabilityView(ShippingAdminView):
    def get(self, request):
        ser = ServiceabilityRequestSerializer(data=request.query_params)
        ser.is_valid(raise_exception=True)
        rates = shipment_flow.check_serviceability(ser.validated_data["pincode"])
        return Response({
            "serviceable": True,
            "pincode": ser.validated_data["pincode"],
            "rates": CarrierRateSerializer(rates, many=True).data,
        })


class ShipOrderView(ShippingAdminView):
    def post(self, request, id):
        order = get_object_or_404(Order, pk=id)
        ser = ShipRequestSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        result = shipment_flow.ship_order(
            order,
            ser.validated_data["courier_id"],
            pickup_date=ser.validated_data.get("pickup_date"),
        )
        return Response({
            "order_id": result.order_id,
            "awb": result.awb_code,
            "courier": result.courier_name,
            "shipment_id": result.shipment_id,
        })


class TrackOrderView(ShippingAdminView):
    def post(self, request, id):
        order = get_object_or_404(Order, pk=id)
        snapshot, update = shipment_flow.refresh_order_tracking(order)
        body = {"tracking": TrackingSnapshotSerializer(snapshot).data}
        if update is not None:
            body["delivery_status"] = update.status
            body["changed"] = update.changed
        return Response(body)


class TrackAwbView(ShippingAdminView):
    def get(self, request, awb):
        snapshot, update = shipment_flow.refresh_tracking(awb)
        body = {"tracking": TrackingSnapshotSerializer(snapshot).data}
        if update is not None:
            body["delivery_status"] = update.status
        return Response(body)


class CancelShipmentView(ShippingAdminView):
    def post(self, request, id):
        order = get_object_or_404(Order, pk=id)
        shipment_flow.cancel_order_shipment(order)
        order.refresh_from_db()
        return Response({"order_id": order.pk, "order_status": order.order_status})


class DeliveryUpdateView(ShippingAdminView):
    def patch(self, request, id):
        delivery = get_object_or_404(Delivery, pk=id)
        ser = ManualDeliveryUpdateSerializer(data=request.data, partial=True)
        ser.is_valid(raise_exception=True)
        delivery = apply_manual_update(delivery, **ser.validated_data)
        return Response(DeliverySerializer(delivery).data)
