"""
Unit tests for the tiered shipping cost resolver.
"""

from decimal import Decimal

from ..dataclasses import ShippingSettings, VolumeRateTier, WeightRateTier
from ..services.shipping import resolve_shipping_cost, validate_tiers

WEIGHT_TIERS = (
    WeightRateTier(Decimal("0"), Decimal("500"), Decimal("40")),
    WeightRateTier(Decimal("501"), Decimal("1000"), Decimal("60")),
)
VOLUME_TIERS = (
    VolumeRateTier(Decimal("0"), Decimal("1000"), Decimal("30")),
    VolumeRateTier(Decimal("1001"), Decimal("5000"), Decimal("70")),
)


def _settings(**overrides):
    base = dict(
        gst_rate=Decimal("18"),
        shipping_cost=Decimal("50"),
        free_shipping_above=Decimal("500"),
    )
    base.update(overrides)
    return ShippingSettings(**base)


class TestResolveShippingCost:
    def test_free_shipping_threshold_is_inclusive(self):
        settings = _settings(weight_rates=WEIGHT_TIERS, volume_rates=VOLUME_TIERS)
        assert resolve_shipping_cost(Decimal("500"), Decimal("9000"), Decimal("9000"), settings) == Decimal("0")
        assert resolve_shipping_cost(Decimal("1200"), Decimal("100"), None, settings) == Decimal("0")

    def test_flat_default_without_tiers(self):
        assert resolve_shipping_cost(Decimal("100"), Decimal("100"), Decimal("0"), _settings()) == Decimal("50")

    def test_weight_tier_first_match(self):
        settings = _settings(weight_rates=WEIGHT_TIERS)
        assert resolve_shipping_cost(Decimal("100"), Decimal("500"), None, settings) == Decimal("40")
        assert resolve_shipping_cost(Decimal("100"), Decimal("750"), None, settings) == Decimal("60")

    def test_weight_overflow_uses_last_declared_tier(self):
        settings = _settings(weight_rates=WEIGHT_TIERS)
        assert resolve_shipping_cost(Decimal("100"), Decimal("1500"), None, settings) == Decimal("60")

    def test_overflow_is_last_tier_not_most_expensive(self):
        tiers = (
            WeightRateTier(Decimal("0"), Decimal("500"), Decimal("90")),
            WeightRateTier(Decimal("501"), Decimal("1000"), Decimal("20")),
        )
        settings = _settings(weight_rates=tiers)
        assert resolve_shipping_cost(Decimal("100"), Decimal("5000"), None, settings) == Decimal("20")

    def test_declaration_order_wins_over_range_order(self):
        tiers = (
            WeightRateTier(Decimal("0"), Decimal("2000"), Decimal("80")),
            WeightRateTier(Decimal("0"), Decimal("500"), Decimal("40")),
        )
        settings = _settings(weight_rates=tiers)
        assert resolve_shipping_cost(Decimal("100"), Decimal("300"), None, settings) == Decimal("80")

    def test_weight_gap_falls_through_to_volume_tiers(self):
        settings = _settings(weight_rates=WEIGHT_TIERS, volume_rates=VOLUME_TIERS)
        assert resolve_shipping_cost(Decimal("100"), Decimal("500.5"), Decimal("1200"), settings) == Decimal("70")

    def test_weight_gap_without_volume_falls_back_to_flat(self):
        settings = _settings(weight_rates=WEIGHT_TIERS, volume_rates=VOLUME_TIERS)
        assert resolve_shipping_cost(Decimal("100"), Decimal("500.5"), None, settings) == Decimal("50")

    def test_volume_tiers_when_no_weight_tiers(self):
        settings = _settings(volume_rates=VOLUME_TIERS)
        assert resolve_shipping_cost(Decimal("100"), Decimal("100"), Decimal("800"), settings) == Decimal("30")
        assert resolve_shipping_cost(Decimal("100"), Decimal("100"), Decimal("99999"), settings) == Decimal("70")

    def test_resolver_is_pure(self):
        settings = _settings(weight_rates=WEIGHT_TIERS, volume_rates=VOLUME_TIERS)
        first = resolve_shipping_cost(Decimal("120"), Decimal("800"), Decimal("900"), settings)
        second = resolve_shipping_cost(Decimal("120"), Decimal("800"), Decimal("900"), settings)
        assert first == second == Decimal("60")


class TestValidateTiers:
    def test_clean_ladder_has_no_warnings(self):
        assert validate_tiers(WEIGHT_TIERS) == []

    def test_overlap_and_inversion_are_reported(self):
        tiers = (
            WeightRateTier(Decimal("0"), Decimal("500"), Decimal("40")),
            WeightRateTier(Decimal("400"), Decimal("300"), Decimal("60")),
        )
        warnings = validate_tiers(tiers)
        assert any("greater than max" in w for w in warnings)
        assert any("overlapping" in w for w in warnings)
