"""
Order models module.

All models are exported from this module to maintain backward compatibility.
"""
from .order import Order, generate_tracking_token
from .order_item import OrderItem
from .coupon import Coupon

__all__ = [
    'Order',
    'OrderItem',
    'Coupon',
    'generate_tracking_token',
]
