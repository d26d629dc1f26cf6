from decimal import Decimal

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('products', '0001_initial'),
        ('sellers', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Order',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('customer_name', models.CharField(max_length=200)),
                ('customer_contact', models.CharField(help_text='Email and phone as entered at checkout', max_length=500)),
                ('message', models.TextField(blank=True, default='', help_text='Itemized order description')),
                ('status', models.CharField(choices=[('placed', 'Placed'), ('confirmed', 'Confirmed'), ('preparing', 'Preparing'), ('shipped', 'Shipped'), ('in_transit', 'In Transit'), ('delivered', 'Delivered'), ('cancelled', 'Cancelled')], default='placed', max_length=20)),
                ('status_history', models.JSONField(default=list, help_text='[{status, at, note}]')),
                ('coupon_code', models.CharField(blank=True, default='', max_length=50)),
                ('subtotal', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('discount_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('shipping_cost', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('total_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('shipping_method_id', models.CharField(blank=True, default='', max_length=100)),
                ('shipping_method_name', models.CharField(blank=True, default='', max_length=200)),
                ('shipping_address', models.JSONField(default=dict, help_text='Address snapshot at checkout')),
                ('billing_address', models.JSONField(blank=True, null=True)),
                ('estimated_delivery', models.DateTimeField(blank=True, null=True)),
                ('payment_method', models.CharField(blank=True, default='', max_length=20)),
                ('tracking_token', models.CharField(editable=False, max_length=40, unique=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('customer', models.ForeignKey(blank=True, help_text='Empty for guest checkout', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='orders', to=settings.AUTH_USER_MODEL)),
                ('seller', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='orders', to='sellers.seller')),
            ],
            options={
                'db_table': 'orders',
                'ordering': ['-created_at', '-id'],
                'indexes': [
                    models.Index(fields=['seller', 'status'], name='orders_seller__0c477d_idx'),
                    models.Index(fields=['customer'], name='orders_custome_6c3a7f_idx'),
                    models.Index(fields=['created_at'], name='orders_created_77e2b9_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='OrderItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(help_text='Product name at checkout', max_length=200)),
                ('variant_id', models.CharField(blank=True, default='', max_length=100)),
                ('variant_name', models.CharField(blank=True, default='', max_length=200)),
                ('quantity', models.PositiveIntegerField(help_text='Quantity ordered')),
                ('unit_price', models.DecimalField(decimal_places=2, help_text='Unit price', max_digits=12)),
                ('line_total', models.DecimalField(decimal_places=2, help_text='Line total (quantity * unit_price)', max_digits=12)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='orders.order')),
                ('product', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='order_items', to='products.product')),
            ],
            options={
                'db_table': 'order_items',
                'indexes': [
                    models.Index(fields=['order'], name='order_items_order_i_26ad88_idx'),
                    models.Index(fields=['product'], name='order_items_product_a53db1_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Coupon',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('code', models.CharField(max_length=50, unique=True)),
                ('type', models.CharField(choices=[('percentage', 'Percentage'), ('fixed', 'Fixed Amount')], default='percentage', max_length=20)),
                ('value', models.DecimalField(decimal_places=2, help_text='Percent (0-100) or flat amount', max_digits=12)),
                ('min_order_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('max_uses', models.IntegerField(default=-1, help_text='-1 means unlimited')),
                ('used_count', models.IntegerField(default=0)),
                ('valid_from', models.DateTimeField(blank=True, null=True)),
                ('valid_until', models.DateTimeField(blank=True, null=True)),
                ('active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('seller', models.ForeignKey(blank=True, help_text='Store that issued the coupon, empty for marketplace-wide coupons', null=True, on_delete=django.db.models.deletion.CASCADE, related_name='coupons', to='sellers.seller')),
            ],
            options={
                'db_table': 'coupons',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['active'], name='coupons_active_4f1b8f_idx')],
            },
        ),
    ]
