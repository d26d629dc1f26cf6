"""
Order views module.

All views are exported from this module to maintain backward compatibility.
"""
from .checkout_views import CheckoutView
from .coupon_views import validate_coupon
from .tracking_views import track_order

__all__ = [
    'CheckoutView',
    'track_order',
    'validate_coupon',
]
