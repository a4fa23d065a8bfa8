from django.urls import path

from .views import (
    CancelShipmentView,
    DeliveryUpdateView,
    OrderRatesView,
    ServiceabilityView,
    ShipOrderView,
    TrackAwbView,
    TrackOrderView,
)

urlpatterns = [
    path("serviceability", ServiceabilityView.as_view(), name="shipping-serviceability"),
    path("orders/<int:id>/rates", OrderRatesView.as_view(), name="shipping-order-rates"),
    path("orders/<int:id>/ship", ShipOrderView.as_view(), name="shipping-order-ship"),
    path("orders/<int:id>/track", TrackOrderView.as_view(), name="shipping-order-track"),
    path("orders/<int:id>/cancel", CancelShipmentView.as_view(), name="shipping-order-cancel"),
    path("track/<str:awb>", TrackAwbView.as_view(), name="shipping-track-awb"),
    path("deliveries/<int:id>", DeliveryUpdateView.as_view(), name="shipping-delivery-update"),
]
