"""
Payment serializers module.

All serializers are exported from this module to maintain backward compatibility.
"""
from .payment_serializers import (
    PaymentStatusHistorySerializer,
    PaymentListSerializer,
    PaymentDetailSerializer,
    PaymentInitiateSerializer,
    PaymentConfirmSerializer,
    RevenueSummarySerializer,
)
from .instructions_serializers import PaymentInstructionsSerializer

__all__ = [
    'PaymentStatusHistorySerializer',
    'PaymentListSerializer',
    'PaymentDetailSerializer',
    'PaymentInitiateSerializer',
    'PaymentConfirmSerializer',
    'RevenueSummarySerializer',
    'PaymentInstructionsSerializer',
]
