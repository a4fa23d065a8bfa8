from decimal import Decimal

from django.db import models

from pricing.dataclasses import Dimensions, ShippingSettings, VolumeRateTier, WeightRateTier


class Product(models.Model):
    STATUS_CHOICES = [('active', 'Active'), ('draft', 'Draft'), ('archived', 'Archived')]
    WEIGHT_UNIT_CHOICES = [('g', 'Grams'), ('kg', 'Kilograms'), ('mg', 'Milligrams'), ('oz', 'Ounces'), ('lb', 'Pounds')]
    LENGTH_UNIT_CHOICES = [('cm', 'Centimeters'), ('mm', 'Millimeters'), ('in', 'Inches'), ('m', 'Meters')]

    name = models.CharField(max_length=255)
    slug = models.SlugField(max_length=255, unique=True)
    sku = models.CharField(max_length=64, blank=True, default='')
    price = models.DecimalField(max_digits=12, decimal_places=2)
    discount_price = models.DecimalField(max_digits=12, decimal_places=2, blank=True, null=True)
    stock = models.PositiveIntegerField(default=0)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default='active')

    weight = models.DecimalField(max_digits=12, decimal_places=3, blank=True, null=True)
    weight_unit = models.CharField(max_length=4, choices=WEIGHT_UNIT_CHOICES, default='g')
    length = models.DecimalField(max_digits=10, decimal_places=2, blank=True, null=True)
    width = models.DecimalField(max_digits=10, decimal_places=2, blank=True, null=True)
    height = models.DecimalField(max_digits=10, decimal_places=2, blank=True, null=True)
    breadth = models.DecimalField(max_digits=10, decimal_places=2, blank=True, null=True)
    dimension_unit = models.CharField(max_length=4, choices=LENGTH_UNIT_CHOICES, default='cm')

    # Product-level GST override (percent). Any one set means all three are taken as given.
    cgst = models.DecimalField(max_digits=5, decimal_places=2, blank=True, null=True)
    sgst = models.DecimalField(max_digits=5, decimal_places=2, blank=True, null=True)
    igst = models.DecimalField(max_digits=5, decimal_places=2, blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=['status', 'slug'], name='core_product_status_slug_idx'),
        ]

    def __str__(self):
        return self.name

    @property
    def selling_price(self) -> Decimal:
        return self.discount_price if self.discount_price is not None else self.price

    @property
    def dimensions(self):
        if not any((self.length, self.width, self.height, self.breadth)):
            return None
        return Dimensions(
            length=self.length,
            width=self.width,
            height=self.height,
            breadth=self.breadth,
            unit=self.dimension_unit or 'cm',
        )


class StoreSettings(models.Model):
    """Store-wide configuration, one row. Edited from the admin."""
    store_name = models.CharField(max_length=255, default='Storefront')
    store_state = models.CharField(max_length=64, blank=True, default='')
    store_pincode = models.CharField(max_length=6, default='121006')
    gst_rate = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal('18'))
    shipping_cost = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('50'))
    free_shipping_above = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('500'))
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = 'store settings'

    def __str__(self):
        return f"{self.store_name} settings"

    @classmethod
    def load(cls) -> 'StoreSettings':
        obj, _ = cls.objects.get_or_create(pk=1)
        return obj

    def to_shipping_settings(self) -> ShippingSettings:
        return ShippingSettings(
            gst_rate=self.gst_rate,
            shipping_cost=self.shipping_cost,
            free_shipping_above=self.free_shipping_above,
            weight_rates=tuple(
                WeightRateTier(min_weight=r.min_weight, max_weight=r.max_weight, cost=r.cost)
                for r in self.weight_rates.all()
            ),
            volume_rates=tuple(
                VolumeRateTier(min_volume=r.min_volume, max_volume=r.max_volume, cost=r.cost)
                for r in self.volume_rates.all()
            ),
        )


class WeightRate(models.Model):
    settings = models.ForeignKey(StoreSettings, on_delete=models.CASCADE, related_name='weight_rates')
    position = models.PositiveIntegerField(default=0)
    min_weight = models.DecimalField(max_digits=12, decimal_places=2, help_text="grams")
    max_weight = models.DecimalField(max_digits=12, decimal_places=2, help_text="grams")
    cost = models.DecimalField(max_digits=10, decimal_places=2)

    class Meta:
        # Declaration order is what the shipping resolver scans
        ordering = ['position', 'id']

    def __str__(self):
        return f"{self.min_weight}-{self.max_weight} g: {self.cost}"


class VolumeRate(models.Model):
    settings = models.ForeignKey(StoreSettings, on_delete=models.CASCADE, related_name='volume_rates')
    position = models.PositiveIntegerField(default=0)
    min_volume = models.DecimalField(max_digits=14, decimal_places=2, help_text="cm3")
    max_volume = models.DecimalField(max_digits=14, decimal_places=2, help_text="cm3")
    cost = models.DecimalField(max_digits=10, decimal_places=2)

    class Meta:
        ordering = ['position', 'id']

    def __str__(self):
        return f"{self.min_volume}-{self.max_volume} cm3: {self.cost}"
