from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models

from pricing.dataclasses import Dimensions, LineItem

from .errors import InvalidTransitionError


class PaymentMethod(models.TextChoices):
    RAZORPAY = 'razorpay', 'Razorpay'
    COD = 'cod', 'Cash on delivery'
    UPI = 'upi', 'UPI'


class PaymentStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    PAID = 'paid', 'Paid'
    FAILED = 'failed', 'Failed'


class OrderStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    CONFIRMED = 'confirmed', 'Confirmed'
    SHIPPED = 'shipped', 'Shipped'
    DELIVERED = 'delivered', 'Delivered'
    CANCELLED = 'cancelled', 'Cancelled'


class DeliveryStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    PICKED_UP = 'picked_up', 'Picked up'
    IN_TRANSIT = 'in_transit', 'In transit'
    OUT_FOR_DELIVERY = 'out_for_delivery', 'Out for delivery'
    DELIVERED = 'delivered', 'Delivered'
    FAILED = 'failed', 'Failed'
    CANCELLED = 'cancelled', 'Cancelled'


ORDER_STATUS_SEQUENCE = [
    OrderStatus.PENDING,
    OrderStatus.CONFIRMED,
    OrderStatus.SHIPPED,
    OrderStatus.DELIVERED,
]


class Order(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL, related_name='orders')
    # Exactly one of user_email / guest_email is set
    user_email = models.EmailField(blank=True, null=True)
    guest_email = models.EmailField(blank=True, null=True)

    shipping_name = models.CharField(max_length=255)
    shipping_email = models.EmailField()
    shipping_phone = models.CharField(max_length=20)
    shipping_address = models.TextField()
    shipping_city = models.CharField(max_length=128)
    shipping_state = models.CharField(max_length=128)
    shipping_pincode = models.CharField(max_length=6)

    payment_method = models.CharField(max_length=16, choices=PaymentMethod.choices, default=PaymentMethod.RAZORPAY)
    payment_status = models.CharField(max_length=16, choices=PaymentStatus.choices, default=PaymentStatus.PENDING)
    order_status = models.CharField(max_length=16, choices=OrderStatus.choices, default=OrderStatus.PENDING)

    subtotal = models.DecimalField(max_digits=12, decimal_places=2)
    shipping_cost = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    tax = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    cgst = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    sgst = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    igst = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    tax_rate = models.DecimalField(max_digits=5, decimal_places=2, default=0, help_text="store GST rate at checkout")
    discount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    total_amount = models.DecimalField(max_digits=12, decimal_places=2)
    total_weight = models.DecimalField(max_digits=12, decimal_places=3, help_text="grams")
    total_volume = models.DecimalField(max_digits=16, decimal_places=3, default=0, help_text="cm3")

    carrier_order_id = models.CharField(max_length=64, blank=True, null=True)
    carrier_shipment_id = models.CharField(max_length=64, blank=True, null=True)
    carrier_awb = models.CharField(max_length=64, blank=True, null=True)
    carrier_courier = models.CharField(max_length=128, blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=['user_email', '-created_at'], name='orders_user_email_idx'),
            models.Index(fields=['guest_email'], name='orders_guest_email_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"Order {self.pk}"

    @property
    def owner_email(self):
        return self.user_email or self.guest_email

    @property
    def shipping_details(self) -> dict:
        return {
            'name': self.shipping_name,
            'email': self.shipping_email,
            'phone': self.shipping_phone,
            'address': self.shipping_address,
            'city': self.shipping_city,
            'state': self.shipping_state,
            'pincode': self.shipping_pincode,
        }

    def advance_status(self, new_status: str, save: bool = True) -> None:
        """
        Move forward along pending -> confirmed -> shipped -> delivered.
        Cancellation is allowed from any state except delivered.
        """
        current = self.order_status
        if new_status == current:
            return
        if new_status == OrderStatus.CANCELLED:
            if current == OrderStatus.DELIVERED:
                raise InvalidTransitionError("A delivered order cannot be cancelled")
        elif current == OrderStatus.CANCELLED:
            raise InvalidTransitionError(f"Order {self.pk} is cancelled")
        elif ORDER_STATUS_SEQUENCE.index(new_status) < ORDER_STATUS_SEQUENCE.index(current):
            raise InvalidTransitionError(f"Order {self.pk} cannot move from {current} back to {new_status}")

        self.order_status = new_status
        if save:
            self.save(update_fields=['order_status', 'updated_at'])


class OrderItem(models.Model):
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='items')
    product = models.ForeignKey('core.Product', null=True, blank=True, on_delete=models.SET_NULL, related_name='+')
    name = models.CharField(max_length=255)
    sku = models.CharField(max_length=64, blank=True, default='')
    price_at_purchase = models.DecimalField(max_digits=12, decimal_places=2)
    quantity = models.PositiveIntegerField()
    weight = models.DecimalField(max_digits=12, decimal_places=3, blank=True, null=True)
    weight_unit = models.CharField(max_length=4, default='g')
    dimensions = models.JSONField(blank=True, null=True)
    cgst = models.DecimalField(max_digits=5, decimal_places=2, blank=True, null=True)
    sgst = models.DecimalField(max_digits=5, decimal_places=2, blank=True, null=True)
    igst = models.DecimalField(max_digits=5, decimal_places=2, blank=True, null=True)
    # Tax booked at checkout; invoices copy these
    cgst_amount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    sgst_amount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    igst_amount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    tax_amount = models.DecimalField(max_digits=12, decimal_places=2, default=0)

    class Meta:
        ordering = ['id']

    def __str__(self):
        return f"{self.quantity} x {self.name}"

    def to_line_item(self) -> LineItem:
        return LineItem(
            product_id=str(self.product_id or ''),
            quantity=self.quantity,
            unit_price=self.price_at_purchase,
            weight=self.weight,
            weight_unit=self.weight_unit,
            dimensions=Dimensions.from_mapping(self.dimensions),
            cgst=self.cgst,
            sgst=self.sgst,
            igst=self.igst,
            name=self.name,
            sku=self.sku,
        )


class Invoice(models.Model):
    order = models.OneToOneField(Order, on_delete=models.PROTECT, related_name='invoice')
    invoice_number = models.CharField(max_length=32, unique=True)
    user_email = models.EmailField(blank=True, null=True)
    subtotal = models.DecimalField(max_digits=12, decimal_places=2)
    shipping_cost = models.DecimalField(max_digits=10, decimal_places=2)
    tax = models.DecimalField(max_digits=12, decimal_places=2)
    cgst = models.DecimalField(max_digits=12, decimal_places=2)
    sgst = models.DecimalField(max_digits=12, decimal_places=2)
    igst = models.DecimalField(max_digits=12, decimal_places=2)
    tax_rate = models.DecimalField(max_digits=5, decimal_places=2)
    total_amount = models.DecimalField(max_digits=12, decimal_places=2)
    shipping_details = models.JSONField(default=dict)
    payment_method = models.CharField(max_length=16)
    payment_status = models.CharField(max_length=16)
    store_details = models.JSONField(default=dict)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.invoice_number

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("Invoices are immutable once created.")
        return super().save(*args, **kwargs)


class InvoiceItem(models.Model):
    invoice = models.ForeignKey(Invoice, on_delete=models.CASCADE, related_name='items')
    product_id_ref = models.CharField(max_length=64, blank=True, default='')
    name = models.CharField(max_length=255)
    sku = models.CharField(max_length=64, blank=True, default='')
    quantity = models.PositiveIntegerField()
    price_at_purchase = models.DecimalField(max_digits=12, decimal_places=2)
    total = models.DecimalField(max_digits=12, decimal_places=2)
    cgst = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    sgst = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    igst = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    tax_amount = models.DecimalField(max_digits=12, decimal_places=2, default=0)

    class Meta:
        ordering = ['id']

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("Invoice lines are immutable once created.")
        return super().save(*args, **kwargs)


class Delivery(models.Model):
    order = models.OneToOneField(Order, on_delete=models.CASCADE, related_name='delivery')
    # Locally generated placeholder until the carrier assigns an AWB
    tracking_number = models.CharField(max_length=64, unique=True)
    carrier = models.CharField(max_length=128, default='Standard Delivery')
    status = models.CharField(max_length=20, choices=DeliveryStatus.choices, default=DeliveryStatus.PENDING)
    estimated_delivery_date = models.DateTimeField()
    actual_delivery_date = models.DateTimeField(blank=True, null=True)
    location = models.CharField(max_length=255, blank=True, default='')
    notes = models.TextField(blank=True, default='')
    carrier_awb = models.CharField(max_length=64, blank=True, null=True)
    carrier_order_id = models.CharField(max_length=64, blank=True, null=True)
    carrier_courier_id = models.CharField(max_length=32, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = 'deliveries'

    def __str__(self):
        return f"{self.tracking_number} ({self.status})"
