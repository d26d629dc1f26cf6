"""
Order serializers module.

All serializers are exported from this module to maintain backward compatibility.
"""
from .checkout_serializers import (
    CheckoutAddressSerializer,
    CheckoutItemSerializer,
    CheckoutSerializer,
    ShippingMethodSerializer,
)
from .coupon_serializers import CouponValidateSerializer
from .order_serializers import OrderItemSerializer, OrderTrackingSerializer

__all__ = [
    'CheckoutAddressSerializer',
    'CheckoutItemSerializer',
    'CheckoutSerializer',
    'ShippingMethodSerializer',
    'CouponValidateSerializer',
    'OrderItemSerializer',
    'OrderTrackingSerializer',
]
