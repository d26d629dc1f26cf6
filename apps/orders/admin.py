from django.contrib import admin
from django.urls import reverse
from django.utils.html import format_html

from .models import Order, OrderItem, Coupon


class OrderItemInline(admin.TabularInline):
    """Inline admin for order items"""
    model = OrderItem
    extra = 0
    readonly_fields = ['line_total', 'created_at']
    fields = ['product', 'name', 'variant_name', 'quantity', 'unit_price', 'line_total']


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = [
        'id', 'tracking_token', 'seller_link', 'customer_name', 'status',
        'payment_method', 'total_amount', 'created_at'
    ]
    list_filter = ['status', 'payment_method', 'created_at']
    search_fields = ['tracking_token', 'customer_name', 'customer_contact', 'seller__name']
    ordering = ['-created_at']
    readonly_fields = ['tracking_token', 'status_history', 'created_at', 'updated_at']
    inlines = [OrderItemInline]

    fieldsets = (
        ('Basic Information', {
            'fields': ('tracking_token', 'seller', 'customer', 'status', 'status_history')
        }),
        ('Customer', {
            'fields': ('customer_name', 'customer_contact', 'message')
        }),
        ('Pricing', {
            'fields': ('coupon_code', 'subtotal', 'discount_amount', 'shipping_cost', 'total_amount')
        }),
        ('Shipping & Payment', {
            'fields': (
                'shipping_method_id', 'shipping_method_name', 'shipping_address',
                'billing_address', 'estimated_delivery', 'payment_method'
            ),
            'classes': ('collapse',)
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def seller_link(self, obj):
        url = reverse('admin:sellers_seller_change', args=[obj.seller_id])
        return format_html('<a href="{}">{}</a>', url, obj.seller.name)
    seller_link.short_description = 'Store'


@admin.register(Coupon)
class CouponAdmin(admin.ModelAdmin):
    list_display = ['code', 'seller', 'type', 'value', 'min_order_amount', 'used_count', 'max_uses', 'active', 'valid_until']
    list_filter = ['type', 'active']
    search_fields = ['code', 'seller__name']
    readonly_fields = ['used_count', 'created_at', 'updated_at']

    fieldsets = (
        ('Coupon', {
            'fields': ('code', 'seller', 'type', 'value', 'active')
        }),
        ('Limits', {
            'fields': ('min_order_amount', 'max_uses', 'used_count', 'valid_from', 'valid_until')
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )
