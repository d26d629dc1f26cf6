"""
Payment views module.

All views are exported from this module to maintain backward compatibility.
"""
from .payment_views import initiate_payment, confirm_payment, payment_detail
from .seller_views import revenue_summary, seller_payments, payment_instructions
from .webhook_views import payment_webhook

__all__ = [
    'initiate_payment',
    'confirm_payment',
    'payment_detail',
    'revenue_summary',
    'seller_payments',
    'payment_instructions',
    'payment_webhook',
]
