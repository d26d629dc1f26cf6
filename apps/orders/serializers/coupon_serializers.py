"""
Coupon preview serializers.
"""
from decimal import Decimal

from rest_framework import serializers


class CouponValidateSerializer(serializers.Serializer):
    """
    Serializer for checking a coupon before checkout.
    Used for: POST /api/coupons/validate/
    """
    code = serializers.CharField(max_length=50)
    sellerId = serializers.IntegerField(required=False, allow_null=True, help_text="Store the cart belongs to")
    orderTotal = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, default=Decimal('0.00'))
