"""
Order ledger: turns a validated cart into a persisted order.

Everything that writes happens inside a single transaction. For cash-on-delivery
orders the stock decrement is a conditional update per line (decrement only
where enough stock remains), so two concurrent checkouts cannot both take the
last unit; a line that loses the race aborts the whole order.
"""
from __future__ import annotations

import logging
import secrets
import string
import time
from dataclasses import dataclass
from datetime import timedelta
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from django.conf import settings as django_settings
from django.db import transaction
from django.db.models import F
from django.utils import timezone

from core.models import Product, StoreSettings
from pricing.dataclasses import LineItem
from pricing.services.shipping import resolve_shipping_cost
from pricing.services.tax import calculate_order_tax
from pricing.services.utils import ZERO, round2
from pricing.services.weights import aggregate_order

from ..errors import InsufficientStockError, NotFoundError, ValidationError
from ..models import (
    Delivery,
    DeliveryStatus,
    Invoice,
    InvoiceItem,
    Order,
    OrderItem,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
)
from ..serializers import CheckoutSerializer

logger = logging.getLogger(__name__)

TRACKING_ALPHABET = string.ascii_uppercase + string.digits


@dataclass
class OrderReceipt:
    order_id: int
    total_amount: Decimal
    shipping_cost: Decimal
    tax: Decimal
    subtotal: Decimal

    def as_dict(self) -> Dict[str, object]:
        return {
            "orderId": self.order_id,
            "totalAmount": self.total_amount,
            "shippingCost": self.shipping_cost,
            "tax": self.tax,
            "subtotal": self.subtotal,
        }


def _fulfillment_setting(key: str, default=None):
    return getattr(django_settings, "FULFILLMENT", {}).get(key, default)


def validate_checkout(cart_items, shipping_details, payment_method) -> dict:
    ser = CheckoutSerializer(data={
        "items": cart_items,
        "shipping": shipping_details,
        "payment_method": payment_method,
    })
    if not ser.is_valid():
        raise ValidationError("Invalid checkout details", errors=ser.errors)
    return ser.validated_data


def _find_product(ref: str) -> Product:
    ref = str(ref).strip()
    qs = Product.objects.filter(status="active")
    product = None
    if ref.isdigit():
        product = qs.filter(pk=int(ref)).first()
    if product is None:
        product = qs.filter(slug=ref).first()
    if product is None:
        raise NotFoundError(f"Product {ref} not found")
    return product


def _resolve_lines(cart_lines: Iterable[dict]) -> List[Tuple[Product, LineItem]]:
    resolved: List[Tuple[Product, LineItem]] = []
    requested: Dict[int, int] = {}

    for line in cart_lines:
        product = _find_product(line["product_id"])
        qty = int(line["quantity"])
        requested[product.pk] = requested.get(product.pk, 0) + qty
        if product.stock < requested[product.pk]:
            raise InsufficientStockError(product.name, requested[product.pk], product.stock)

        dims = product.dimensions
        resolved.append((
            product,
            LineItem(
                product_id=str(product.pk),
                quantity=qty,
                unit_price=product.selling_price,
                weight=product.weight,
                weight_unit=product.weight_unit or "g",
                dimensions=dims,
                cgst=product.cgst,
                sgst=product.sgst,
                igst=product.igst,
                name=product.name,
                sku=product.sku,
            ),
        ))
    return resolved


def _intra_state(store: StoreSettings, shipping_state: str) -> Optional[bool]:
    """None keeps the legacy booking of all three GST components."""
    if not _fulfillment_setting("GST_SPLIT_BY_JURISDICTION", False):
        return None
    if not store.store_state:
        return None
    return store.store_state.strip().lower() == (shipping_state or "").strip().lower()


def _decrement_stock(lines: Iterable[Tuple[Optional[int], str, int]]) -> None:
    for product_id, name, qty in lines:
        if product_id is None:
            continue
        updated = (
            Product.objects
            .filter(pk=product_id, stock__gte=qty)
            .update(stock=F("stock") - qty)
        )
        if not updated:
            available = Product.objects.filter(pk=product_id).values_list("stock", flat=True).first() or 0
            raise InsufficientStockError(name, qty, available)


def generate_invoice_number() -> str:
    for _ in range(5):
        number = f"INV-{timezone.now():%Y%m%d}-{secrets.token_hex(3).upper()}"
        if not Invoice.objects.filter(invoice_number=number).exists():
            return number
    raise RuntimeError("Could not allocate a unique invoice number")


def generate_tracking_number() -> str:
    suffix = "".join(secrets.choice(TRACKING_ALPHABET) for _ in range(9))
    return f"TRK-{int(time.time() * 1000)}-{suffix}"


def _issue_invoice(order: Order, items: List[OrderItem], store: StoreSettings) -> Invoice:
    """Copy of the order as priced at checkout; nothing is recalculated here."""
    invoice = Invoice.objects.create(
        order=order,
        invoice_number=generate_invoice_number(),
        user_email=order.owner_email,
        subtotal=order.subtotal,
        shipping_cost=order.shipping_cost,
        tax=order.tax,
        cgst=order.cgst,
        sgst=order.sgst,
        igst=order.igst,
        tax_rate=order.tax_rate,
        total_amount=order.total_amount,
        shipping_details=order.shipping_details,
        payment_method=order.payment_method,
        payment_status=order.payment_status,
        store_details={
            "name": store.store_name,
            "state": store.store_state,
            "pincode": store.store_pincode,
        },
    )
    InvoiceItem.objects.bulk_create([
        InvoiceItem(
            invoice=invoice,
            product_id_ref=str(item.product_id or ""),
            name=item.name,
            sku=item.sku,
            quantity=item.quantity,
            price_at_purchase=item.price_at_purchase,
            total=round2(item.price_at_purchase * item.quantity),
            cgst=item.cgst_amount,
            sgst=item.sgst_amount,
            igst=item.igst_amount,
            tax_amount=item.tax_amount,
        )
        for item in items
    ])
    return invoice


def _open_delivery(order: Order) -> Delivery:
    days = int(_fulfillment_setting("ESTIMATED_DELIVERY_DAYS", 5))
    return Delivery.objects.create(
        order=order,
        tracking_number=generate_tracking_number(),
        carrier="Standard Delivery",
        status=DeliveryStatus.PENDING,
        estimated_delivery_date=timezone.now() + timedelta(days=days),
        location="Processing",
        notes="Order confirmed and ready for pickup",
    )


def create_order(cart_items, shipping_details, payment_method, user=None, store: Optional[StoreSettings] = None) -> OrderReceipt:
    """
    Validate, price and persist an order.

    Raises ValidationError, NotFoundError or InsufficientStockError before
    anything is written; a stock race on a COD line rolls the whole order back.
    """
    data = validate_checkout(cart_items, shipping_details, payment_method)
    shipping = data["shipping"]
    method = data["payment_method"]
    store = store or StoreSettings.load()
    pricing = store.to_shipping_settings()

    with transaction.atomic():
        resolved = _resolve_lines(data["items"])
        line_items = [li for _, li in resolved]

        subtotal = sum((li.extended for li in line_items), ZERO)
        measure = aggregate_order(line_items)
        shipping_cost = resolve_shipping_cost(subtotal, measure.weight_grams, measure.volume_cm3, pricing)
        order_tax = calculate_order_tax(line_items, pricing.gst_rate, _intra_state(store, shipping["state"]))
        total_amount = subtotal + shipping_cost + order_tax.total_tax

        is_cod = method == PaymentMethod.COD
        authenticated = user is not None and getattr(user, "is_authenticated", False)
        order = Order.objects.create(
            user=user if authenticated else None,
            user_email=(user.email or None) if authenticated else None,
            guest_email=None if authenticated and user.email else shipping["email"],
            shipping_name=shipping["name"],
            shipping_email=shipping["email"],
            shipping_phone=shipping["phone"],
            shipping_address=shipping["address"],
            shipping_city=shipping["city"],
            shipping_state=shipping["state"],
            shipping_pincode=shipping["pincode"],
            payment_method=method,
            payment_status=PaymentStatus.PENDING,
            order_status=OrderStatus.CONFIRMED if is_cod else OrderStatus.PENDING,
            subtotal=subtotal,
            shipping_cost=shipping_cost,
            tax=order_tax.total_tax,
            cgst=order_tax.total_cgst,
            sgst=order_tax.total_sgst,
            igst=order_tax.total_igst,
            tax_rate=pricing.gst_rate,
            total_amount=total_amount,
            total_weight=measure.weight_grams,
            total_volume=measure.volume_cm3,
        )
        items = OrderItem.objects.bulk_create([
            OrderItem(
                order=order,
                product=product,
                name=li.name,
                sku=li.sku,
                price_at_purchase=li.unit_price,
                quantity=li.quantity,
                weight=li.weight,
                weight_unit=li.weight_unit,
                dimensions=_dimensions_snapshot(li),
                cgst=li.cgst,
                sgst=li.sgst,
                igst=li.igst,
                cgst_amount=item_tax.cgst,
                sgst_amount=item_tax.sgst,
                igst_amount=item_tax.igst,
                tax_amount=item_tax.total,
            )
            for (product, li), item_tax in zip(resolved, order_tax.item_taxes)
        ])

        if is_cod:
            _decrement_stock((p.pk, p.name, li.quantity) for p, li in resolved)
            invoice = _issue_invoice(order, items, store)
            delivery = _open_delivery(order)
            logger.info(
                "COD order %s confirmed: invoice %s, tracking %s",
                order.pk, invoice.invoice_number, delivery.tracking_number,
            )
        else:
            logger.info("Order %s created awaiting %s payment", order.pk, method)

    return OrderReceipt(
        order_id=order.pk,
        total_amount=total_amount,
        shipping_cost=shipping_cost,
        tax=order_tax.total_tax,
        subtotal=subtotal,
    )


def _dimensions_snapshot(li: LineItem) -> Optional[dict]:
    if li.dimensions is None:
        return None
    return {k: (str(v) if isinstance(v, Decimal) else v) for k, v in li.dimensions.as_dict().items()}


def confirm_payment(order_id, store: Optional[StoreSettings] = None) -> Invoice:
    """
    Gateway verification hook: mark paid, take stock, issue invoice and delivery.
    Calling it again for the same order returns the existing invoice.
    """
    store = store or StoreSettings.load()
    with transaction.atomic():
        order = Order.objects.select_for_update().filter(pk=order_id).first()
        if order is None:
            raise NotFoundError(f"Order {order_id} not found")

        existing = Invoice.objects.filter(order=order).first()
        if existing is not None:
            return existing

        order.payment_status = PaymentStatus.PAID
        order.advance_status(OrderStatus.CONFIRMED, save=False)
        order.save(update_fields=["payment_status", "order_status", "updated_at"])

        items = list(order.items.select_related("product"))
        _decrement_stock((i.product_id, i.name, i.quantity) for i in items)

        invoice = _issue_invoice(order, items, store)
        if not Delivery.objects.filter(order=order).exists():
            _open_delivery(order)
        logger.info("Payment confirmed for order %s, invoice %s", order.pk, invoice.invoice_number)
        return invoice


def get_invoice(order_id) -> Invoice:
    invoice = Invoice.objects.filter(order_id=order_id).prefetch_related("items").first()
    if invoice is None:
        raise NotFoundError(f"Invoice for order {order_id} not found")
    return invoice
