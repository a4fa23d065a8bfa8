"""
Unit tests for GST rate resolution and two-stage rounding.
"""

from decimal import Decimal

from ..dataclasses import LineItem, TaxRates
from ..services.tax import (
    apply_jurisdiction,
    calculate_item_tax,
    calculate_order_tax,
    resolve_rates,
)


def _item(pid="p1", price="100", qty=1, **rates):
    return LineItem(product_id=pid, quantity=qty, unit_price=Decimal(price), **rates)


class TestResolveRates:
    def test_global_rate_fallback_returns_all_three(self):
        rates = resolve_rates(_item(), Decimal("18"))
        assert rates == TaxRates(cgst=Decimal("9"), sgst=Decimal("9"), igst=Decimal("18"))

    def test_product_override_is_used_verbatim(self):
        rates = resolve_rates(_item(cgst=Decimal("6"), sgst=Decimal("6")), Decimal("18"))
        assert rates == TaxRates(cgst=Decimal("6"), sgst=Decimal("6"), igst=Decimal("0"))

    def test_zero_override_still_counts_as_override(self):
        rates = resolve_rates(_item(igst=Decimal("0")), Decimal("18"))
        assert rates == TaxRates(cgst=Decimal("0"), sgst=Decimal("0"), igst=Decimal("0"))

    def test_jurisdiction_split(self):
        rates = TaxRates(cgst=Decimal("9"), sgst=Decimal("9"), igst=Decimal("18"))
        assert apply_jurisdiction(rates, None) == rates
        assert apply_jurisdiction(rates, True) == TaxRates(Decimal("9"), Decimal("9"), Decimal("0"))
        assert apply_jurisdiction(rates, False) == TaxRates(Decimal("0"), Decimal("0"), Decimal("18"))


class TestItemTax:
    def test_global_rate_books_cgst_sgst_and_igst(self):
        """100 x 2 at 18% books 18 + 18 + 36 under the legacy convention."""
        rates = resolve_rates(_item(qty=2), Decimal("18"))
        tax = calculate_item_tax(Decimal("100"), 2, rates)
        assert tax.cgst == Decimal("18.00")
        assert tax.sgst == Decimal("18.00")
        assert tax.igst == Decimal("36.00")
        assert tax.total == Decimal("72.00")

    def test_fields_round_half_up(self):
        tax = calculate_item_tax(Decimal("10.05"), 1, TaxRates(cgst=Decimal("5"), sgst=Decimal("0"), igst=Decimal("0")))
        # 0.5025 -> 0.50
        assert tax.cgst == Decimal("0.50")
        tax = calculate_item_tax(Decimal("0.9"), 1, TaxRates(cgst=Decimal("2.5"), sgst=Decimal("2.5"), igst=Decimal("0")))
        # 0.0225 -> 0.02 each, total from unrounded 0.045 -> 0.05
        assert tax.cgst == Decimal("0.02")
        assert tax.sgst == Decimal("0.02")
        assert tax.total == Decimal("0.05")


class TestOrderTax:
    def test_totals_are_sums_of_rounded_item_values(self):
        items = [
            _item("a", price="0.9", cgst=Decimal("2.5"), sgst=Decimal("2.5")),
            _item("b", price="0.9", cgst=Decimal("2.5"), sgst=Decimal("2.5")),
        ]
        result = calculate_order_tax(items, Decimal("18"))
        assert [t.product_id for t in result.item_taxes] == ["a", "b"]
        assert result.total_cgst == Decimal("0.04")
        assert result.total_sgst == Decimal("0.04")
        assert result.total_igst == Decimal("0.00")
        assert result.total_tax == Decimal("0.10")

    def test_mixed_override_and_fallback(self):
        items = [
            _item("a", price="100", qty=1),
            _item("b", price="50", qty=2, igst=Decimal("12")),
        ]
        result = calculate_order_tax(items, Decimal("18"))
        assert result.total_cgst == Decimal("9.00")
        assert result.total_sgst == Decimal("9.00")
        assert result.total_igst == Decimal("30.00")
        assert result.total_tax == Decimal("48.00")

    def test_intra_state_split_drops_igst(self):
        result = calculate_order_tax([_item(qty=2)], Decimal("18"), intra_state=True)
        assert result.total_tax == Decimal("36.00")
        assert result.total_igst == Decimal("0.00")

    def test_inter_state_split_keeps_only_igst(self):
        result = calculate_order_tax([_item(qty=2)], Decimal("18"), intra_state=False)
        assert result.total_tax == Decimal("36.00")
        assert result.total_cgst == Decimal("0.00")

    def test_repeat_calls_are_identical(self):
        items = [_item(qty=3, price="33.33")]
        assert calculate_order_tax(items, Decimal("18")) == calculate_order_tax(items, Decimal("18"))

    def test_empty_order(self):
        result = calculate_order_tax([], Decimal("18"))
        assert result.item_taxes == []
        assert result.total_tax == Decimal("0.00")
