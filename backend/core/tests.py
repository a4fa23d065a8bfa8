from __future__ import annotations

from decimal import Decimal
from io import StringIO

import pytest
from django.core.management import call_command
from rest_framework.test import APIClient

from core.models import Product, StoreSettings, VolumeRate, WeightRate
from pricing.dataclasses import WeightRateTier

pytestmark = pytest.mark.django_db


def test_store_settings_is_a_single_row():
    first = StoreSettings.load()
    second = StoreSettings.load()
    assert first.pk == second.pk == 1
    assert StoreSettings.objects.count() == 1
    assert first.gst_rate == Decimal("18")


def test_tiers_keep_declaration_order():
    store = StoreSettings.load()
    WeightRate.objects.create(settings=store, position=1, min_weight=1000, max_weight=2000, cost=Decimal("80"))
    WeightRate.objects.create(settings=store, position=0, min_weight=0, max_weight=1000, cost=Decimal("40"))
    VolumeRate.objects.create(settings=store, position=0, min_volume=0, max_volume=5000, cost=Decimal("30"))

    shipping = store.to_shipping_settings()
    assert shipping.weight_rates[0] == WeightRateTier(min_weight=Decimal("0"), max_weight=Decimal("1000"), cost=Decimal("40"))
    assert [t.cost for t in shipping.weight_rates] == [Decimal("40"), Decimal("80")]
    assert len(shipping.volume_rates) == 1


def test_product_selling_price_and_dimensions():
    p = Product.objects.create(name="Jar", slug="jar", price=Decimal("120"), discount_price=Decimal("99"),
                               length=Decimal("10"), width=Decimal("10"), height=Decimal("5"), dimension_unit="cm")
    assert p.selling_price == Decimal("99")
    assert p.dimensions.has_full_box()

    bare = Product.objects.create(name="Card", slug="card", price=Decimal("20"))
    assert bare.selling_price == Decimal("20")
    assert bare.dimensions is None


def test_settings_endpoint_is_public():
    store = StoreSettings.load()
    WeightRate.objects.create(settings=store, position=0, min_weight=0, max_weight=1000, cost=Decimal("40"))
    r = APIClient().get("/api/settings")
    assert r.status_code == 200
    body = r.json()
    assert Decimal(str(body["gstRate"])) == Decimal("18")
    assert len(body["weightRates"]) == 1


def test_bootstrap_dev_is_idempotent():
    call_command("bootstrap_dev", stdout=StringIO())
    out = StringIO()
    call_command("bootstrap_dev", stdout=out)
    assert "already exists" in out.getvalue()
    assert StoreSettings.load().weight_rates.count() == 3
