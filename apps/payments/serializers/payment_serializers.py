"""
Payment serializers for list, detail, initiate, confirm and revenue operations.
"""
from rest_framework import serializers

from ..models import Payment, PaymentStatusHistory


class PaymentStatusHistorySerializer(serializers.ModelSerializer):
    previousStatus = serializers.CharField(source='previous_status', read_only=True)
    createdBy = serializers.CharField(source='created_by', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = PaymentStatusHistory
        fields = ['id', 'status', 'previousStatus', 'reason', 'createdBy', 'createdAt']


class PaymentListSerializer(serializers.ModelSerializer):
    """
    Serializer for payment list view - minimal fields for the seller dashboard.
    Used for: GET /api/payments/seller/
    """
    orderId = serializers.IntegerField(source='order_id', read_only=True)
    netAmount = serializers.DecimalField(source='net_amount', max_digits=12, decimal_places=2, read_only=True)
    payerName = serializers.CharField(source='payer_name', read_only=True)
    confirmationCode = serializers.CharField(source='confirmation_code', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    completedAt = serializers.DateTimeField(source='completed_at', read_only=True)

    class Meta:
        model = Payment
        fields = [
            'id', 'orderId', 'method', 'provider', 'status', 'amount', 'fees', 'netAmount',
            'currency', 'payerName', 'confirmationCode', 'createdAt', 'completedAt'
        ]


class PaymentDetailSerializer(PaymentListSerializer):
    """
    Serializer for payment detail view - complete fields including status history.
    Used for: GET /api/payments/{id}/
    """
    sellerId = serializers.IntegerField(source='seller_id', read_only=True)
    payerPhone = serializers.CharField(source='payer_phone', read_only=True)
    payerEmail = serializers.CharField(source='payer_email', read_only=True)
    externalId = serializers.CharField(source='external_id', read_only=True)
    externalReference = serializers.CharField(source='external_reference', read_only=True)
    processedAt = serializers.DateTimeField(source='processed_at', read_only=True)
    failedAt = serializers.DateTimeField(source='failed_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)
    statusHistory = PaymentStatusHistorySerializer(source='status_history', many=True, read_only=True)

    class Meta(PaymentListSerializer.Meta):
        fields = PaymentListSerializer.Meta.fields + [
            'sellerId', 'payerPhone', 'payerEmail', 'externalId', 'externalReference',
            'metadata', 'processedAt', 'failedAt', 'updatedAt', 'statusHistory'
        ]


class PaymentInitiateSerializer(serializers.Serializer):
    """
    Serializer for starting a payment on an existing order.
    Used for: POST /api/payments/initiate/
    """
    orderId = serializers.IntegerField(help_text="Order to pay for")
    paymentMethod = serializers.ChoiceField(choices=Payment.METHOD_CHOICES)
    customerPhone = serializers.CharField(max_length=20, required=False, allow_blank=True)
    provider = serializers.ChoiceField(choices=Payment.PROVIDER_CHOICES, required=False)

    def validate(self, attrs):
        if attrs['paymentMethod'] == Payment.METHOD_MPESA and not attrs.get('customerPhone'):
            raise serializers.ValidationError({'customerPhone': 'Phone number is required for M-Pesa payments'})
        return attrs


class PaymentConfirmSerializer(serializers.Serializer):
    """
    Serializer for a seller confirming a payment received outside the gateway.
    Used for: POST /api/payments/confirm/
    """
    paymentId = serializers.IntegerField()
    externalTransactionId = serializers.CharField(max_length=200, required=False, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True)


class RevenueSummarySerializer(serializers.Serializer):
    totalRevenue = serializers.DecimalField(source='total_revenue', max_digits=14, decimal_places=2)
    confirmedRevenue = serializers.DecimalField(source='confirmed_revenue', max_digits=14, decimal_places=2)
    totalFees = serializers.DecimalField(source='total_fees', max_digits=14, decimal_places=2)
    netRevenue = serializers.DecimalField(source='net_revenue', max_digits=14, decimal_places=2)
    totalPayments = serializers.IntegerField(source='total_payments')
    completedPayments = serializers.IntegerField(source='completed_payments')
    pendingPayments = serializers.IntegerField(source='pending_payments')
