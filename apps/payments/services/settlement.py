"""
Conversion from checkout prices to the currency payments are settled in.
"""
from decimal import Decimal

from django.conf import settings

from apps.common.utils import quantize_money


def settlement_currency() -> str:
    return settings.PAYMENT_SETTLEMENT_CURRENCY


def settlement_amount(amount) -> Decimal:
    """Order total in checkout currency -> amount to charge, rounded to cents"""
    return quantize_money(Decimal(amount) * Decimal(settings.PAYMENT_EXCHANGE_RATE))
