from __future__ import annotations

from rest_framework import views
from rest_framework.response import Response

from .models import StoreSettings


class StoreSettingsView(views.APIView):
    """Public pricing settings so the cart can preview shipping and GST."""

    def get(self, request):
        store = StoreSettings.load()
        return Response({
            "storeName": store.store_name,
            "gstRate": store.gst_rate,
            "shippingCost": store.shipping_cost,
            "freeShippingAbove": store.free_shipping_above,
            "weightRates": [
                {"minWeight": r.min_weight, "maxWeight": r.max_weight, "cost": r.cost}
                for r in store.weight_rates.all()
            ],
            "volumeRates": [
                {"minVolume": r.min_volume, "maxVolume": r.max_volume, "cost": r.cost}
                for r in store.volume_rates.all()
            ],
        })
