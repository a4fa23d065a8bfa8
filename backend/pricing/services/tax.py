"""
GST resolution and aggregation.

Rates are percentages. A product either carries its own CGST/SGST/IGST
override or inherits the store-wide GST rate, split 50/50 into CGST/SGST with
the full rate as IGST. Callers receive all three and, unless jurisdiction
splitting is switched on, book all three.
"""
from __future__ import annotations

from typing import Iterable, Optional

from ..dataclasses import ItemTax, LineItem, OrderTax, TaxRates
from .utils import HUNDRED, ZERO, d, round2


def resolve_rates(item: LineItem, global_rate) -> TaxRates:
    if item.has_tax_override:
        return TaxRates(cgst=d(item.cgst), sgst=d(item.sgst), igst=d(item.igst))

    rate = d(global_rate)
    half = rate / 2
    return TaxRates(cgst=half, sgst=half, igst=rate)


def apply_jurisdiction(rates: TaxRates, intra_state: Optional[bool]) -> TaxRates:
    """Keep only the pair that applies to the sale. None leaves the rates untouched."""
    if intra_state is None:
        return rates
    if intra_state:
        return TaxRates(cgst=rates.cgst, sgst=rates.sgst, igst=ZERO)
    return TaxRates(cgst=ZERO, sgst=ZERO, igst=rates.igst)


def calculate_item_tax(unit_price, quantity: int, rates: TaxRates, product_id: str = "") -> ItemTax:
    extended = d(unit_price) * quantity
    cgst = extended * rates.cgst / HUNDRED
    sgst = extended * rates.sgst / HUNDRED
    igst = extended * rates.igst / HUNDRED
    return ItemTax(
        product_id=product_id,
        cgst=round2(cgst),
        sgst=round2(sgst),
        igst=round2(igst),
        total=round2(cgst + sgst + igst),
    )


def calculate_order_tax(items: Iterable[LineItem], global_rate, intra_state: Optional[bool] = None) -> OrderTax:
    """
    Per-item taxes are rounded first, then summed, then the sums rounded again.
    Existing invoices were produced this way; keep both rounding stages.
    """
    result = OrderTax()
    total = cgst = sgst = igst = ZERO

    for item in items:
        rates = apply_jurisdiction(resolve_rates(item, global_rate), intra_state)
        item_tax = calculate_item_tax(item.unit_price, item.quantity, rates, product_id=item.product_id)
        result.item_taxes.append(item_tax)
        total += item_tax.total
        cgst += item_tax.cgst
        sgst += item_tax.sgst
        igst += item_tax.igst

    result.total_tax = round2(total)
    result.total_cgst = round2(cgst)
    result.total_sgst = round2(sgst)
    result.total_igst = round2(igst)
    return result
