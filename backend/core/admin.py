from django.contrib import admin, messages

from pricing.services.shipping import validate_tiers

from .models import Product, StoreSettings, VolumeRate, WeightRate


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "sku", "price", "discount_price", "stock", "status", "weight", "weight_unit")
    list_filter = ("status", "weight_unit")
    search_fields = ("name", "sku", "slug")
    prepopulated_fields = {"slug": ("name",)}


class WeightRateInline(admin.TabularInline):
    model = WeightRate
    extra = 0


class VolumeRateInline(admin.TabularInline):
    model = VolumeRate
    extra = 0


@admin.register(StoreSettings)
class StoreSettingsAdmin(admin.ModelAdmin):
    list_display = ("id", "store_name", "gst_rate", "shipping_cost", "free_shipping_above", "store_pincode")
    inlines = [WeightRateInline, VolumeRateInline]
    actions = ["validate_rate_tiers"]

    def has_add_permission(self, request):
        return not StoreSettings.objects.exists()

    def validate_rate_tiers(self, request, queryset):
        any_warn = False
        for obj in queryset:
            shipping = obj.to_shipping_settings()
            for label, tiers in (("Weight", shipping.weight_rates), ("Volume", shipping.volume_rates)):
                for warning in validate_tiers(tiers):
                    any_warn = True
                    messages.warning(request, f"{label} tiers: {warning}")
        if not any_warn:
            messages.info(request, "Rate tiers are ordered and non-overlapping.")
