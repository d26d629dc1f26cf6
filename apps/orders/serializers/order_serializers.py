"""
Order serializers for the public tracking view.
"""
from rest_framework import serializers

from apps.payments.services import PaymentService
from ..models import Order, OrderItem


class OrderItemSerializer(serializers.ModelSerializer):
    variantName = serializers.CharField(source='variant_name', read_only=True)
    unitPrice = serializers.DecimalField(source='unit_price', max_digits=12, decimal_places=2, read_only=True)
    lineTotal = serializers.DecimalField(source='line_total', max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = OrderItem
        fields = ['id', 'name', 'variantName', 'quantity', 'unitPrice', 'lineTotal']


class OrderTrackingSerializer(serializers.ModelSerializer):
    """
    What a buyer holding the tracking token may see.
    Used for: GET /api/orders/track/{token}/
    """
    trackingToken = serializers.CharField(source='tracking_token', read_only=True)
    storeName = serializers.CharField(source='seller.name', read_only=True)
    statusHistory = serializers.JSONField(source='status_history', read_only=True)
    couponCode = serializers.CharField(source='coupon_code', read_only=True)
    discountAmount = serializers.DecimalField(source='discount_amount', max_digits=12, decimal_places=2, read_only=True)
    shippingCost = serializers.DecimalField(source='shipping_cost', max_digits=12, decimal_places=2, read_only=True)
    totalAmount = serializers.DecimalField(source='total_amount', max_digits=12, decimal_places=2, read_only=True)
    shippingMethodName = serializers.CharField(source='shipping_method_name', read_only=True)
    estimatedDelivery = serializers.DateTimeField(source='estimated_delivery', read_only=True)
    paymentMethod = serializers.CharField(source='payment_method', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    items = OrderItemSerializer(many=True, read_only=True)
    payment = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            'id', 'trackingToken', 'storeName', 'status', 'statusHistory', 'couponCode', 'subtotal',
            'discountAmount', 'shippingCost', 'totalAmount', 'shippingMethodName', 'estimatedDelivery',
            'paymentMethod', 'createdAt', 'items', 'payment'
        ]

    def get_payment(self, obj):
        payment = PaymentService.get_payment_by_order_id(obj.id)
        if payment is None:
            return None
        return {
            'id': payment.id,
            'method': payment.method,
            'status': payment.status,
            'amount': str(payment.amount),
            'currency': payment.currency,
        }
