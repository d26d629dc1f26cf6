from decimal import Decimal

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('orders', '0001_initial'),
        ('sellers', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Payment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('method', models.CharField(choices=[('mpesa', 'M-Pesa'), ('bank_transfer', 'Bank Transfer'), ('cash_on_delivery', 'Cash on Delivery')], max_length=20)),
                ('provider', models.CharField(blank=True, choices=[('vodacom', 'Vodacom'), ('movitel', 'Movitel')], default='', help_text='Mobile money carrier', max_length=20)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('processing', 'Processing'), ('completed', 'Completed'), ('failed', 'Failed'), ('cancelled', 'Cancelled')], default='pending', max_length=20)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=12)),
                ('fees', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('net_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('currency', models.CharField(default='MZN', max_length=3)),
                ('payer_phone', models.CharField(blank=True, default='', max_length=20)),
                ('payer_name', models.CharField(blank=True, default='', max_length=200)),
                ('payer_email', models.EmailField(blank=True, default='', max_length=254)),
                ('external_id', models.CharField(blank=True, default='', help_text='Gateway transaction ID', max_length=200)),
                ('external_reference', models.CharField(blank=True, default='', help_text='Reference we sent to the gateway', max_length=200)),
                ('confirmation_code', models.CharField(blank=True, default='', help_text='Gateway confirmation code', max_length=200)),
                ('metadata', models.JSONField(blank=True, default=dict)),
                ('processed_at', models.DateTimeField(blank=True, null=True)),
                ('completed_at', models.DateTimeField(blank=True, null=True)),
                ('failed_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('customer', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='payments', to=settings.AUTH_USER_MODEL)),
                ('order', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='payments', to='orders.order')),
                ('seller', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='payments', to='sellers.seller')),
            ],
            options={
                'db_table': 'payments',
                'ordering': ['-created_at', '-id'],
                'indexes': [
                    models.Index(fields=['seller', 'created_at'], name='payments_seller__0a4cc5_idx'),
                    models.Index(fields=['order'], name='payments_order_i_b32b33_idx'),
                    models.Index(fields=['status'], name='payments_status_d621e5_idx'),
                    models.Index(fields=['external_id'], name='payments_externa_f1691b_idx'),
                    models.Index(fields=['external_reference'], name='payments_externa_f1d2dd_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='PaymentStatusHistory',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('status', models.CharField(max_length=20)),
                ('previous_status', models.CharField(blank=True, default='', max_length=20)),
                ('reason', models.TextField(blank=True, default='')),
                ('created_by', models.CharField(default='system', help_text='system, webhook or a user id', max_length=50)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('payment', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='status_history', to='payments.payment')),
            ],
            options={
                'verbose_name_plural': 'Payment status history',
                'db_table': 'payment_status_history',
                'ordering': ['created_at', 'id'],
                'indexes': [models.Index(fields=['payment', 'created_at'], name='payment_sta_payment_e8d6e5_idx')],
            },
        ),
        migrations.CreateModel(
            name='PaymentInstructions',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('method', models.CharField(choices=[('mpesa', 'M-Pesa'), ('bank_transfer', 'Bank Transfer'), ('cash_on_delivery', 'Cash on Delivery')], max_length=20)),
                ('bank_name', models.CharField(blank=True, default='', max_length=200)),
                ('account_number', models.CharField(blank=True, default='', max_length=100)),
                ('account_name', models.CharField(blank=True, default='', max_length=200)),
                ('swift_code', models.CharField(blank=True, default='', max_length=20)),
                ('iban', models.CharField(blank=True, default='', max_length=50)),
                ('mobile_number', models.CharField(blank=True, default='', max_length=20)),
                ('network_provider', models.CharField(blank=True, default='', max_length=50)),
                ('instructions_en', models.TextField(blank=True, default='')),
                ('instructions_pt', models.TextField(blank=True, default='')),
                ('active', models.BooleanField(default=True)),
                ('sort_order', models.IntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('seller', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='payment_instructions', to='sellers.seller')),
            ],
            options={
                'verbose_name_plural': 'Payment instructions',
                'db_table': 'payment_instructions',
                'ordering': ['sort_order', 'id'],
                'indexes': [models.Index(fields=['seller', 'method', 'active'], name='payment_ins_seller__9ec664_idx')],
            },
        ),
        migrations.CreateModel(
            name='PaymentCallback',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('provider', models.CharField(blank=True, default='', help_text='Provider named in the webhook URL', max_length=20)),
                ('request_method', models.CharField(help_text='HTTP method (GET/POST)', max_length=10)),
                ('request_path', models.CharField(help_text='Request path', max_length=200)),
                ('request_headers', models.JSONField(default=dict, help_text='Request headers')),
                ('request_body', models.TextField(blank=True, default='', help_text='Raw request body')),
                ('request_ip', models.GenericIPAddressField(blank=True, help_text='Client IP address', null=True)),
                ('processed', models.BooleanField(default=False, help_text='Whether the webhook matched and updated a payment')),
                ('processing_error', models.TextField(blank=True, help_text='Error message if processing failed')),
                ('response_status', models.IntegerField(default=200, help_text='HTTP response status code')),
                ('response_body', models.TextField(blank=True, default='', help_text='Response body sent back')),
                ('received_at', models.DateTimeField(auto_now_add=True)),
                ('payment', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='callbacks', to='payments.payment')),
            ],
            options={
                'db_table': 'payment_callbacks',
                'ordering': ['-received_at'],
                'indexes': [
                    models.Index(fields=['provider'], name='payment_cal_provide_407af0_idx'),
                    models.Index(fields=['received_at'], name='payment_cal_receive_61714e_idx'),
                    models.Index(fields=['processed'], name='payment_cal_process_7169e2_idx'),
                ],
            },
        ),
    ]
