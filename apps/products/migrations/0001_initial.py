import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('sellers', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Product',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=200)),
                ('price', models.DecimalField(decimal_places=2, max_digits=12)),
                ('status', models.CharField(choices=[('active', 'Active'), ('draft', 'Draft'), ('archived', 'Archived')], default='active', max_length=20)),
                ('track_inventory', models.BooleanField(default=False)),
                ('stock_quantity', models.IntegerField(blank=True, help_text='Units in stock, NULL when untracked', null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('seller', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='products', to='sellers.seller')),
            ],
            options={
                'db_table': 'products',
                'indexes': [
                    models.Index(fields=['seller', 'status'], name='products_seller__87e71e_idx'),
                    models.Index(fields=['created_at'], name='products_created_e1ba5f_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('stock_quantity__isnull', True), ('stock_quantity__gte', 0), _connector='OR'), name='product_stock_non_negative'),
                ],
            },
        ),
    ]
