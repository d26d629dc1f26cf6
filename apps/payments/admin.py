from django.contrib import admin
from .models import Payment, PaymentStatusHistory, PaymentInstructions, PaymentCallback


class PaymentStatusHistoryInline(admin.TabularInline):
    model = PaymentStatusHistory
    extra = 0
    can_delete = False
    fields = ['created_at', 'previous_status', 'status', 'reason', 'created_by']
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = [
        'id', 'order', 'seller', 'method', 'provider',
        'amount', 'currency', 'status', 'created_at', 'completed_at'
    ]
    list_filter = ['status', 'method', 'provider', 'created_at']
    search_fields = ['id', 'external_id', 'external_reference', 'confirmation_code', 'payer_phone', 'seller__name']
    readonly_fields = [
        'net_amount', 'external_id', 'external_reference', 'processed_at',
        'completed_at', 'failed_at', 'created_at', 'updated_at'
    ]
    raw_id_fields = ['order', 'seller', 'customer']
    ordering = ['-created_at']
    inlines = [PaymentStatusHistoryInline]

    fieldsets = (
        ('Basic Information', {
            'fields': ('order', 'seller', 'customer', 'method', 'provider', 'status')
        }),
        ('Amounts', {
            'fields': ('amount', 'fees', 'net_amount', 'currency')
        }),
        ('Payer', {
            'fields': ('payer_name', 'payer_phone', 'payer_email')
        }),
        ('Gateway', {
            'fields': ('external_id', 'external_reference', 'confirmation_code', 'metadata'),
            'classes': ('collapse',)
        }),
        ('Timestamps', {
            'fields': ('processed_at', 'completed_at', 'failed_at', 'created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def get_readonly_fields(self, request, obj=None):
        # Status changes go through PaymentService so history stays complete
        if obj:
            return self.readonly_fields + ['order', 'seller', 'method', 'amount', 'status']
        return self.readonly_fields


@admin.register(PaymentInstructions)
class PaymentInstructionsAdmin(admin.ModelAdmin):
    list_display = ['seller', 'method', 'bank_name', 'mobile_number', 'active', 'sort_order']
    list_filter = ['method', 'active']
    search_fields = ['seller__name', 'bank_name', 'account_name', 'mobile_number']
    ordering = ['seller', 'sort_order']


@admin.register(PaymentCallback)
class PaymentCallbackAdmin(admin.ModelAdmin):
    list_display = ['id', 'provider', 'payment', 'processed', 'response_status', 'received_at']
    list_filter = ['provider', 'processed', 'received_at']
    search_fields = ['request_body', 'processing_error']
    readonly_fields = [
        'provider', 'request_method', 'request_path', 'request_headers', 'request_body',
        'request_ip', 'processed', 'processing_error', 'payment', 'response_status',
        'response_body', 'received_at'
    ]
    ordering = ['-received_at']

    fieldsets = (
        ('Request Information', {
            'fields': ('provider', 'request_method', 'request_path', 'request_ip', 'request_headers', 'request_body')
        }),
        ('Processing Information', {
            'fields': ('processed', 'processing_error', 'payment')
        }),
        ('Response Information', {
            'fields': ('response_status', 'response_body', 'received_at')
        }),
    )

    def has_add_permission(self, request):
        return False
