from django.contrib import admin

from .models import Delivery, Invoice, InvoiceItem, Order, OrderItem


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    readonly_fields = ("product", "name", "sku", "price_at_purchase", "quantity", "weight", "weight_unit", "cgst", "sgst", "igst", "tax_amount")


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ("id", "owner_email", "payment_method", "payment_status", "order_status", "total_amount", "carrier_awb", "created_at")
    list_filter = ("payment_method", "payment_status", "order_status")
    search_fields = ("user_email", "guest_email", "shipping_name", "carrier_awb")
    inlines = [OrderItemInline]


class InvoiceItemInline(admin.TabularInline):
    model = InvoiceItem
    extra = 0
    can_delete = False

    def has_change_permission(self, request, obj=None):
        return False


@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
    list_display = ("id", "invoice_number", "order", "tax", "total_amount", "payment_method", "created_at")
    search_fields = ("invoice_number",)
    inlines = [InvoiceItemInline]

    def has_change_permission(self, request, obj=None):
        return False


@admin.register(Delivery)
class DeliveryAdmin(admin.ModelAdmin):
    list_display = ("id", "order", "tracking_number", "carrier", "status", "estimated_delivery_date", "carrier_awb")
    list_filter = ("status", "carrier")
    search_fields = ("tracking_number", "carrier_awb")
