"""
Payment services module.

All services are exported from this module to maintain backward compatibility.
"""
from .mpesa_config import GatewayMode, MpesaConfig, ProviderCredentials
from .mpesa_gateway import GatewayResult, MpesaGateway, format_phone_number
from .payment_service import (
    BankTransferPayment,
    CashOnDeliveryPayment,
    MobileMoneyPayment,
    PaymentRequest,
    PaymentResponse,
    PaymentService,
    WebhookResult,
    build_payment_request,
    get_payment_service,
)
from .settlement import settlement_amount, settlement_currency

__all__ = [
    'GatewayMode',
    'MpesaConfig',
    'ProviderCredentials',
    'GatewayResult',
    'MpesaGateway',
    'format_phone_number',
    'BankTransferPayment',
    'CashOnDeliveryPayment',
    'MobileMoneyPayment',
    'PaymentRequest',
    'PaymentResponse',
    'PaymentService',
    'WebhookResult',
    'build_payment_request',
    'get_payment_service',
    'settlement_amount',
    'settlement_currency',
]
