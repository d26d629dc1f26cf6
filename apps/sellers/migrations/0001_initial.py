import apps.sellers.models.seller
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Seller',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('slug', models.SlugField(help_text='Storefront URL slug', max_length=100, unique=True)),
                ('name', models.CharField(help_text='Store name', max_length=200)),
                ('owner_name', models.CharField(blank=True, default='', help_text='Store owner display name', max_length=200)),
                ('email', models.EmailField(blank=True, default='', help_text='Address for order notifications', max_length=254)),
                ('currency', models.CharField(default=apps.sellers.models.seller.default_seller_currency, help_text='Settlement currency code', max_length=3)),
                ('email_notifications', models.BooleanField(default=True, help_text='Send new order emails to the seller')),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('user', models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='seller_profile', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'sellers',
                'ordering': ['name'],
                'indexes': [models.Index(fields=['is_active'], name='sellers_is_acti_3d83e6_idx')],
            },
        ),
    ]
