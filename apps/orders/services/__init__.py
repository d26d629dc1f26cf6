"""
Order services module.

All services are exported from this module to maintain backward compatibility.
"""
from .checkout_service import CheckoutResult, CheckoutService, SideEffectResult, apportion_discount
from .coupon_service import CouponDiscount, CouponService
from .notification_service import NotificationService
from .order_payment_service import OrderPaymentService

__all__ = [
    'CheckoutResult',
    'CheckoutService',
    'SideEffectResult',
    'apportion_discount',
    'CouponDiscount',
    'CouponService',
    'NotificationService',
    'OrderPaymentService',
]
