"""
Payment models module.

All models are exported from this module to maintain backward compatibility.
"""
from .payment import Payment
from .payment_status_history import PaymentStatusHistory
from .payment_instructions import PaymentInstructions
from .payment_callback import PaymentCallback

__all__ = [
    'Payment',
    'PaymentStatusHistory',
    'PaymentInstructions',
    'PaymentCallback',
]
