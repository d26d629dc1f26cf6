"""
Property-based tests for coupon rules and discount apportionment
"""
from datetime import timedelta
from decimal import Decimal, ROUND_HALF_UP

from django.utils import timezone
from hypothesis import given, strategies as st, settings
from hypothesis.extra.django import TestCase

from apps.common.exceptions import CheckoutValidationError
from apps.orders.models import Coupon
from apps.orders.services import CouponService, apportion_discount
from tests.factories import CouponFactory

money = st.decimals(min_value=Decimal('0.01'), max_value=Decimal('99999.99'), places=2)


class TestCouponDiscountProperties(TestCase):
    """Discount amounts for percentage and fixed coupons"""

    @given(subtotal=money, percent=st.decimals(min_value=Decimal('0'), max_value=Decimal('150'), places=2))
    @settings(max_examples=100, deadline=5000)
    def test_percentage_discount_is_clamped_share_of_subtotal(self, subtotal, percent):
        coupon = Coupon(code='PCT', type=Coupon.TYPE_PERCENTAGE, value=percent)

        discount = CouponService.calculate_discount(coupon, subtotal)

        expected = min(subtotal * percent / Decimal('100'), subtotal).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)
        self.assertEqual(discount, expected)
        self.assertLessEqual(discount, subtotal)

    @given(subtotal=money, value=money)
    @settings(max_examples=100, deadline=5000)
    def test_fixed_discount_never_exceeds_subtotal(self, subtotal, value):
        coupon = Coupon(code='FIX', type=Coupon.TYPE_FIXED, value=value)

        discount = CouponService.calculate_discount(coupon, subtotal)

        self.assertEqual(discount, min(value, subtotal))


class TestCouponValidation(TestCase):
    """Rejection rules, checked in a fixed order"""

    def test_unknown_code_gives_no_discount(self):
        self.assertIsNone(CouponService.evaluate('NOPE', Decimal('100.00')))

    def test_inactive_code_gives_no_discount(self):
        CouponFactory(code='OFF', active=False)
        self.assertIsNone(CouponService.evaluate('OFF', Decimal('100.00')))

    def test_code_lookup_is_case_insensitive(self):
        CouponFactory(code='SAVE10', value=Decimal('10'))

        result = CouponService.evaluate('save10', Decimal('150.00'))

        self.assertEqual(result.amount, Decimal('15.00'))
        self.assertEqual(result.code, 'SAVE10')

    def test_not_yet_valid(self):
        CouponFactory(code='SOON', valid_from=timezone.now() + timedelta(days=1))
        with self.assertRaisesMessage(CheckoutValidationError, 'Coupon is not yet valid'):
            CouponService.evaluate('SOON', Decimal('100.00'))

    def test_expired(self):
        CouponFactory(code='OLD', valid_until=timezone.now() - timedelta(days=1))
        with self.assertRaisesMessage(CheckoutValidationError, 'Coupon has expired'):
            CouponService.evaluate('OLD', Decimal('100.00'))

    def test_minimum_order_amount(self):
        CouponFactory(code='BIG', min_order_amount=Decimal('200'))
        with self.assertRaisesMessage(CheckoutValidationError, 'Minimum order amount of 200.00 required'):
            CouponService.evaluate('BIG', Decimal('199.99'))

    def test_expired_is_reported_before_minimum_amount(self):
        CouponFactory(code='BOTH', min_order_amount=Decimal('200'),
                      valid_until=timezone.now() - timedelta(days=1))
        with self.assertRaisesMessage(CheckoutValidationError, 'Coupon has expired'):
            CouponService.evaluate('BOTH', Decimal('10.00'))

    @given(max_uses=st.integers(min_value=1, max_value=50))
    @settings(max_examples=25, deadline=5000)
    def test_capped_coupon_rejected_only_when_used_up(self, max_uses):
        Coupon.objects.filter(code='CAP').delete()
        coupon = CouponFactory(code='CAP', max_uses=max_uses, used_count=max_uses - 1)
        self.assertIsNotNone(CouponService.evaluate('CAP', Decimal('100.00')))

        Coupon.objects.filter(pk=coupon.pk).update(used_count=max_uses)
        with self.assertRaisesMessage(CheckoutValidationError, 'Coupon usage limit reached'):
            CouponService.evaluate('CAP', Decimal('100.00'))

    def test_unlimited_coupon_never_used_up(self):
        CouponFactory(code='FOREVER', max_uses=-1, used_count=10_000)
        self.assertIsNotNone(CouponService.evaluate('FOREVER', Decimal('100.00')))


class TestCouponUsageCounter(TestCase):

    def test_record_use_stops_at_cap(self):
        coupon = CouponFactory(max_uses=1)

        self.assertTrue(Coupon.record_use(coupon.id))
        self.assertFalse(Coupon.record_use(coupon.id))

        coupon.refresh_from_db()
        self.assertEqual(coupon.used_count, 1)

    def test_record_use_unlimited(self):
        coupon = CouponFactory(max_uses=-1)
        for _ in range(3):
            self.assertTrue(Coupon.record_use(coupon.id))
        coupon.refresh_from_db()
        self.assertEqual(coupon.used_count, 3)


class TestDiscountApportionment(TestCase):

    def test_save10_scenario(self):
        self.assertEqual(
            apportion_discount(Decimal('15.00'), [Decimal('100.00'), Decimal('50.00')]),
            [Decimal('10.00'), Decimal('5.00')],
        )

    def test_no_discount(self):
        self.assertEqual(apportion_discount(Decimal('0'), [Decimal('5.00'), Decimal('7.00')]),
                         [Decimal('0.00'), Decimal('0.00')])

    def test_indivisible_cent_goes_to_largest_fraction(self):
        shares = apportion_discount(Decimal('0.10'), [Decimal('1.00')] * 3)
        self.assertEqual(shares, [Decimal('0.04'), Decimal('0.03'), Decimal('0.03')])

    @given(
        subtotals=st.lists(money, min_size=1, max_size=6),
        fraction=st.decimals(min_value=Decimal('0'), max_value=Decimal('1'), places=4),
    )
    @settings(max_examples=200, deadline=5000)
    def test_shares_sum_exactly_and_stay_within_subtotals(self, subtotals, fraction):
        total = sum(subtotals)
        discount = (total * fraction).quantize(Decimal('0.01'))

        shares = apportion_discount(discount, subtotals)

        self.assertEqual(sum(shares), discount)
        for share, subtotal in zip(shares, subtotals):
            self.assertGreaterEqual(share, Decimal('0'))
            self.assertLessEqual(share, subtotal)
