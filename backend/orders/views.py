from __future__ import annotations

import logging

from django.shortcuts import get_object_or_404

from rest_framework import status, views
from rest_framework.permissions import IsAdminUser, IsAuthenticated
from rest_framework.response import Response

from .errors import InsufficientStockError, InvalidTransitionError, NotFoundError, ValidationError
from .models import Delivery, Order
from .serializers import DeliverySerializer, InvoiceSerializer, OrderSerializer
from .services.ledger import confirm_payment, create_order, get_invoice

logger = logging.getLogger(__name__)


def _error_response(exc: Exception) -> Response:
    if isinstance(exc, ValidationError):
        return Response({"detail": str(exc), "errors": exc.errors}, status=status.HTTP_400_BAD_REQUEST)
    if isinstance(exc, NotFoundError):
        return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)
    if isinstance(exc, InsufficientStockError):
        return Response(
            {
                "detail": str(exc),
                "product": exc.product_name,
                "requested": exc.requested,
                "available": exc.available,
            },
            status=status.HTTP_409_CONFLICT,
        )
    if isinstance(exc, InvalidTransitionError):
        return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)
    raise exc


class CheckoutView(views.APIView):
    def post(self, request):
        payload = request.data
        if not isinstance(payload, dict):
            return _error_response(ValidationError(
                "Invalid checkout details",
                errors={"non_field_errors": ["Expected a JSON object"]},
            ))
        try:
            receipt = create_order(
                payload.get("items") or [],
                payload.get("shipping") or {},
                payload.get("payment_method") or payload.get("paymentMethod"),
                user=request.user,
            )
        except (ValidationError, NotFoundError, InsufficientStockError) as exc:
            logger.info("Checkout rejected: %s", exc)
            return _error_response(exc)
        return Response(receipt.as_dict(), status=status.HTTP_201_CREATED)

    def get(self, request):
        if not request.user.is_authenticated or not request.user.email:
            return Response({"detail": "Unauthorized"}, status=status.HTTP_401_UNAUTHORIZED)
        orders = Order.objects.filter(user_email=request.user.email).prefetch_related("items")
        return Response({"orders": OrderSerializer(orders, many=True).data})


class OrderDetailView(views.APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, id):
        order = get_object_or_404(Order.objects.prefetch_related("items"), pk=id)
        user = request.user
        if not user.is_staff and order.user_email != user.email:
            return Response({"detail": "Not allowed"}, status=status.HTTP_403_FORBIDDEN)
        return Response(OrderSerializer(order).data)


class OrderDeliveryView(views.APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, id):
        delivery = get_object_or_404(Delivery.objects.select_related("order"), order_id=id)
        user = request.user
        if not user.is_staff and delivery.order.user_email != user.email:
            return Response({"detail": "Not allowed"}, status=status.HTTP_403_FORBIDDEN)
        return Response(DeliverySerializer(delivery).data)


class InvoiceView(views.APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, order_id):
        try:
            invoice = get_invoice(order_id)
        except NotFoundError as exc:
            return _error_response(exc)
        user = request.user
        if not user.is_staff and invoice.user_email != user.email:
            return Response({"detail": "Not allowed"}, status=status.HTTP_403_FORBIDDEN)
        return Response(InvoiceSerializer(invoice).data)


class PaymentConfirmView(views.APIView):
    """Called once the gateway signature has been verified upstream."""
    permission_classes = [IsAdminUser]

    def post(self, request, id):
        try:
            invoice = confirm_payment(id)
        except (NotFoundError, InsufficientStockError, InvalidTransitionError) as exc:
            return _error_response(exc)
        return Response(InvoiceSerializer(invoice).data, status=status.HTTP_200_OK)
