from __future__ import annotations

import re

from rest_framework import serializers

from .models import Delivery, Invoice, InvoiceItem, Order, OrderItem, PaymentMethod

PINCODE_RE = re.compile(r"^\d{5,6}$")


# ---------- CHECKOUT (write) ----------
class ShippingDetailsSerializer(serializers.Serializer):
    name = serializers.CharField(min_length=2, max_length=255)
    email = serializers.EmailField()
    phone = serializers.CharField(min_length=10, max_length=20)
    address = serializers.CharField(min_length=5)
    city = serializers.CharField(min_length=2, max_length=128)
    state = serializers.CharField(min_length=2, max_length=128)
    pincode = serializers.CharField()

    def validate_pincode(self, value: str) -> str:
        value = (value or "").strip()
        if not PINCODE_RE.match(value):
            raise serializers.ValidationError("Valid 5-6 digit pincode required")
        return value.zfill(6)


class CartLineSerializer(serializers.Serializer):
    product_id = serializers.CharField()
    quantity = serializers.IntegerField(min_value=1)


class CheckoutSerializer(serializers.Serializer):
    items = CartLineSerializer(many=True, allow_empty=False)
    shipping = ShippingDetailsSerializer()
    payment_method = serializers.ChoiceField(choices=PaymentMethod.values)


# ---------- READ ----------
class OrderItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderItem
        exclude = ("order",)


class OrderSerializer(serializers.ModelSerializer):
    items = OrderItemSerializer(many=True, read_only=True)
    shipping_details = serializers.DictField(read_only=True)

    class Meta:
        model = Order
        exclude = ("user",)


class InvoiceItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = InvoiceItem
        exclude = ("invoice",)


class InvoiceSerializer(serializers.ModelSerializer):
    items = InvoiceItemSerializer(many=True, read_only=True)

    class Meta:
        model = Invoice
        fields = "__all__"


class DeliverySerializer(serializers.ModelSerializer):
    class Meta:
        model = Delivery
        fields = "__all__"
        read_only_fields = ("order", "created_at", "updated_at")
