from decimal import Decimal

from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Product',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('slug', models.SlugField(max_length=255, unique=True)),
                ('sku', models.CharField(blank=True, default='', max_length=64)),
                ('price', models.DecimalField(decimal_places=2, max_digits=12)),
                ('discount_price', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ('stock', models.PositiveIntegerField(default=0)),
                ('status', models.CharField(choices=[('active', 'Active'), ('draft', 'Draft'), ('archived', 'Archived')], default='active', max_length=16)),
                ('weight', models.DecimalField(blank=True, decimal_places=3, max_digits=12, null=True)),
                ('weight_unit', models.CharField(choices=[('g', 'Grams'), ('kg', 'Kilograms'), ('mg', 'Milligrams'), ('oz', 'Ounces'), ('lb', 'Pounds')], default='g', max_length=4)),
                ('length', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ('width', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ('height', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ('breadth', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ('dimension_unit', models.CharField(choices=[('cm', 'Centimeters'), ('mm', 'Millimeters'), ('in', 'Inches'), ('m', 'Meters')], default='cm', max_length=4)),
                ('cgst', models.DecimalField(blank=True, decimal_places=2, max_digits=5, null=True)),
                ('sgst', models.DecimalField(blank=True, decimal_places=2, max_digits=5, null=True)),
                ('igst', models.DecimalField(blank=True, decimal_places=2, max_digits=5, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'indexes': [models.Index(fields=['status', 'slug'], name='core_product_status_slug_idx')],
            },
        ),
        migrations.CreateModel(
            name='StoreSettings',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('store_name', models.CharField(default='Storefront', max_length=255)),
                ('store_state', models.CharField(blank=True, default='', max_length=64)),
                ('store_pincode', models.CharField(default='121006', max_length=6)),
                ('gst_rate', models.DecimalField(decimal_places=2, default=Decimal('18'), max_digits=5)),
                ('shipping_cost', models.DecimalField(decimal_places=2, default=Decimal('50'), max_digits=10)),
                ('free_shipping_above', models.DecimalField(decimal_places=2, default=Decimal('500'), max_digits=12)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name_plural': 'store settings',
            },
        ),
        migrations.CreateModel(
            name='WeightRate',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('position', models.PositiveIntegerField(default=0)),
                ('min_weight', models.DecimalField(decimal_places=2, help_text='grams', max_digits=12)),
                ('max_weight', models.DecimalField(decimal_places=2, help_text='grams', max_digits=12)),
                ('cost', models.DecimalField(decimal_places=2, max_digits=10)),
                ('settings', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='weight_rates', to='core.storesettings')),
            ],
            options={
                'ordering': ['position', 'id'],
            },
        ),
        migrations.CreateModel(
            name='VolumeRate',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('position', models.PositiveIntegerField(default=0)),
                ('min_volume', models.DecimalField(decimal_places=2, help_text='cm3', max_digits=14)),
                ('max_volume', models.DecimalField(decimal_places=2, help_text='cm3', max_digits=14)),
                ('cost', models.DecimalField(decimal_places=2, max_digits=10)),
                ('settings', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='volume_rates', to='core.storesettings')),
            ],
            options={
                'ordering': ['position', 'id'],
            },
        ),
    ]
