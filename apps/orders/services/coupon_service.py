"""
Coupon validation and discount calculation.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional
import logging

from django.db.models import Q
from django.utils import timezone

from apps.common.exceptions import CheckoutValidationError
from apps.common.utils import quantize_money
from ..models import Coupon

logger = logging.getLogger(__name__)


@dataclass
class CouponDiscount:
    coupon: Coupon
    amount: Decimal

    @property
    def code(self) -> str:
        return self.coupon.code


class CouponService:
    """Service class for coupon business logic"""

    @staticmethod
    def find_active(code: str, seller_id=None) -> Optional[Coupon]:
        """Active coupon by code; with a seller, only that store's or marketplace-wide coupons"""
        if not code:
            return None
        queryset = Coupon.objects.filter(code__iexact=code.strip(), active=True)
        if seller_id is not None:
            queryset = queryset.filter(Q(seller__isnull=True) | Q(seller_id=seller_id))
        return queryset.first()

    @staticmethod
    def calculate_discount(coupon: Coupon, subtotal: Decimal) -> Decimal:
        """Discount for a subtotal, never more than the subtotal itself"""
        if coupon.type == Coupon.TYPE_PERCENTAGE:
            discount = subtotal * coupon.value / Decimal('100')
        else:
            discount = coupon.value
        return quantize_money(max(Decimal('0'), min(discount, subtotal)))

    @staticmethod
    def validate(coupon: Coupon, subtotal: Decimal, now=None):
        """Raise CheckoutValidationError for the first rule the coupon breaks"""
        now = now or timezone.now()
        if coupon.valid_from and now < coupon.valid_from:
            raise CheckoutValidationError('Coupon is not yet valid')
        if coupon.valid_until and now > coupon.valid_until:
            raise CheckoutValidationError('Coupon has expired')
        if coupon.min_order_amount and subtotal < coupon.min_order_amount:
            raise CheckoutValidationError(
                f"Minimum order amount of {quantize_money(coupon.min_order_amount)} required"
            )
        if coupon.is_exhausted:
            raise CheckoutValidationError('Coupon usage limit reached')

    @classmethod
    def evaluate(cls, code: str, subtotal: Decimal, now=None, seller_id=None) -> Optional[CouponDiscount]:
        """
        Resolve a coupon code against a cart subtotal.

        Unknown or inactive codes give None so checkout proceeds without a discount.
        """
        coupon = cls.find_active(code, seller_id=seller_id)
        if coupon is None:
            if code:
                logger.info(f"Coupon code {code!r} not found or inactive, ignoring")
            return None

        cls.validate(coupon, subtotal, now=now)
        return CouponDiscount(coupon=coupon, amount=cls.calculate_discount(coupon, subtotal))
