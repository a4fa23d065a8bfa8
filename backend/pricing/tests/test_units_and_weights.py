"""
Unit tests for unit normalization, volumetric weight and order aggregation.
"""

from decimal import Decimal

import pytest

from ..dataclasses import Dimensions, LineItem
from ..services.units import UnitError, to_centimeters, to_grams, to_kilograms
from ..services.weights import (
    MINIMUM_BILLABLE_GRAMS,
    aggregate_order,
    chargeable_weight_kg,
    order_volume_cm3,
    order_weight_grams,
    volume_cm3,
    volumetric_weight_kg,
)


class TestUnitNormalizer:
    @pytest.mark.parametrize(
        "value,unit,expected_kg",
        [
            (200, "g", Decimal("0.2")),
            (2, "kg", Decimal("2")),
            (500000, "mg", Decimal("0.5")),
            (1, "lb", Decimal("0.453592")),
            (10, "oz", Decimal("0.283495")),
        ],
    )
    def test_weight_units(self, value, unit, expected_kg):
        assert to_kilograms(value, unit) == expected_kg

    def test_grams_from_kilograms(self):
        assert to_grams(Decimal("1.5"), "kg") == Decimal("1500")

    def test_unit_is_case_insensitive(self):
        assert to_kilograms(3, " KG ") == Decimal("3")

    def test_unknown_weight_unit_is_read_as_grams(self):
        assert to_kilograms(250, "stone") == Decimal("0.25")
        assert to_grams(250, "stone") == Decimal("250")

    def test_missing_weight_unit_is_read_as_grams(self):
        assert to_kilograms(250, None) == Decimal("0.25")

    @pytest.mark.parametrize(
        "value,unit,expected_cm",
        [
            (10, "cm", Decimal("10")),
            (100, "mm", Decimal("10")),
            (2, "in", Decimal("5.08")),
            (Decimal("0.5"), "m", Decimal("50")),
        ],
    )
    def test_length_units(self, value, unit, expected_cm):
        assert to_centimeters(value, unit) == expected_cm

    def test_unknown_length_unit_is_read_as_centimeters(self):
        assert to_centimeters(12, "furlong") == Decimal("12")

    def test_strict_mode_rejects_unknown_units(self):
        with pytest.raises(UnitError, match="Unknown unit"):
            to_kilograms(1, "stone", strict=True)
        with pytest.raises(UnitError):
            to_centimeters(1, "ft", strict=True)


class TestVolumetricWeight:
    def test_no_dimensions_uses_actual_weight_only(self):
        assert chargeable_weight_kg(Decimal("350"), "g", None) == Decimal("0.35")

    def test_partial_box_has_no_volume(self):
        dims = Dimensions(length=Decimal("30"), width=Decimal("20"))
        assert volume_cm3(dims) == Decimal("0")
        assert volumetric_weight_kg(dims) == Decimal("0")

    def test_breadth_is_not_used_for_volume(self):
        dims = Dimensions(length=Decimal("30"), breadth=Decimal("20"), height=Decimal("10"))
        assert volume_cm3(dims) == Decimal("0")

    def test_actual_weight_wins_for_small_box(self):
        dims = Dimensions(length=Decimal("30"), width=Decimal("20"), height=Decimal("10"))
        # 6000 cm3 / 5000 / 1000 = 0.0012 kg
        assert volumetric_weight_kg(dims) == Decimal("0.0012")
        assert chargeable_weight_kg(Decimal("200"), "g", dims) == Decimal("0.2")

    def test_volumetric_weight_wins_for_bulky_box(self):
        dims = Dimensions(length=Decimal("100"), width=Decimal("100"), height=Decimal("100"))
        # 1,000,000 cm3 / 5000 / 1000 = 0.2 kg against 0.1 kg actual
        assert chargeable_weight_kg(Decimal("100"), "g", dims) == Decimal("0.2")

    def test_dimensions_in_other_units_are_converted(self):
        dims = Dimensions(length=Decimal("1"), width=Decimal("1"), height=Decimal("1"), unit="m")
        assert volume_cm3(dims) == Decimal("1000000")

    def test_missing_actual_weight_counts_as_zero(self):
        assert chargeable_weight_kg(None, "g", None) == Decimal("0")
        assert chargeable_weight_kg(Decimal("-5"), "g", None) == Decimal("0")

    def test_dimensions_from_mapping(self):
        dims = Dimensions.from_mapping({"length": "10", "width": 5, "height": "", "unit": "in"})
        assert dims.length == Decimal("10")
        assert dims.height is None
        assert dims.unit == "in"
        assert not dims.has_full_box()
        assert Dimensions.from_mapping(None) is None


class TestOrderAggregation:
    def _item(self, qty, weight=None, unit="g", dims=None):
        return LineItem(product_id="p", quantity=qty, unit_price=Decimal("10"), weight=weight, weight_unit=unit, dimensions=dims)

    def test_weight_scales_with_quantity(self):
        items = [self._item(3, Decimal("250")), self._item(1, Decimal("1"), "kg")]
        assert order_weight_grams(items) == Decimal("1750")

    def test_volume_counts_only_full_boxes(self):
        box = Dimensions(length=Decimal("10"), width=Decimal("10"), height=Decimal("10"))
        items = [self._item(2, Decimal("100"), dims=box), self._item(5, Decimal("100"))]
        assert order_volume_cm3(items) == Decimal("2000")
        measure = aggregate_order(items)
        assert measure.weight_grams == Decimal("700")
        assert measure.volume_cm3 == Decimal("2000")
        assert measure.floor_applied is False

    def test_empty_order_gets_minimum_weight(self):
        measure = aggregate_order([])
        assert measure.weight_grams == MINIMUM_BILLABLE_GRAMS
        assert measure.weight_kg == Decimal("0.5")
        assert measure.floor_applied is True

    def test_weightless_items_get_order_level_floor(self):
        measure = aggregate_order([self._item(4), self._item(2)])
        assert measure.weight_grams == Decimal("500")
        assert measure.floor_applied is True

    def test_floor_is_not_applied_per_item(self):
        measure = aggregate_order([self._item(1, Decimal("100")), self._item(1)])
        assert measure.weight_grams == Decimal("100")
        assert measure.floor_applied is False
