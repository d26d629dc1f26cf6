from django.contrib import admin
from .models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ['name', 'seller', 'price', 'status', 'track_inventory', 'stock_quantity', 'created_at']
    list_filter = ['status', 'track_inventory', 'seller']
    search_fields = ['name', 'seller__name']
    list_editable = ['stock_quantity']

    fieldsets = (
        ('Basic Information', {
            'fields': ('seller', 'name', 'price', 'status')
        }),
        ('Inventory', {
            'fields': ('track_inventory', 'stock_quantity')
        }),
    )
