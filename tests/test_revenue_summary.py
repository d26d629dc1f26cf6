"""
Property-based tests for seller revenue aggregation
"""
from datetime import timedelta
from decimal import Decimal

from django.utils import timezone
from hypothesis import given, strategies as st, settings
from hypothesis.extra.django import TestCase

from apps.payments.models import Payment
from apps.payments.services import PaymentService
from tests.factories import OrderFactory, PaymentFactory, SellerFactory

payment_rows = st.lists(
    st.tuples(
        st.sampled_from([choice for choice, _ in Payment.STATUS_CHOICES]),
        st.decimals(min_value=Decimal('0.01'), max_value=Decimal('9999.99'), places=2),
        st.decimals(min_value=Decimal('0.00'), max_value=Decimal('0.50'), places=2),
    ),
    max_size=8,
)


class TestRevenueSummaryProperties(TestCase):

    @given(rows=payment_rows)
    @settings(max_examples=40, deadline=5000)
    def test_totals_match_payments(self, rows):
        order = OrderFactory()
        for status, amount, fee_rate in rows:
            PaymentFactory(order=order, status=status, amount=amount,
                           fees=(amount * fee_rate).quantize(Decimal('0.01')))
        PaymentFactory(amount=Decimal('999.00'), status=Payment.STATUS_COMPLETED)

        summary = PaymentService.get_revenue_summary(order.seller_id)

        completed = [(a, (a * r).quantize(Decimal('0.01'))) for s, a, r in rows if s == Payment.STATUS_COMPLETED]
        self.assertEqual(summary['total_revenue'], sum((a for _, a, _ in rows), Decimal('0.00')))
        self.assertEqual(summary['confirmed_revenue'], sum((a for a, _ in completed), Decimal('0.00')))
        self.assertEqual(summary['total_fees'], sum((f for _, f in completed), Decimal('0.00')))
        self.assertEqual(summary['net_revenue'], summary['confirmed_revenue'] - summary['total_fees'])
        self.assertEqual(summary['total_payments'], len(rows))
        self.assertEqual(summary['completed_payments'], len(completed))
        self.assertEqual(summary['pending_payments'],
                         len([s for s, _, _ in rows if s in (Payment.STATUS_PENDING, Payment.STATUS_PROCESSING)]))


class TestRevenueDateRange(TestCase):

    def test_only_payments_inside_range_count(self):
        seller = SellerFactory()
        old = PaymentFactory(order=OrderFactory(seller=seller), amount=Decimal('100.00'))
        PaymentFactory(order=OrderFactory(seller=seller), amount=Decimal('40.00'))
        Payment.objects.filter(pk=old.pk).update(created_at=timezone.now() - timedelta(days=30))

        summary = PaymentService.get_revenue_summary(seller.id, start_date=timezone.now() - timedelta(days=1))

        self.assertEqual(summary['total_revenue'], Decimal('40.00'))
        self.assertEqual(summary['total_payments'], 1)

    def test_no_payments(self):
        summary = PaymentService.get_revenue_summary(SellerFactory().id)

        self.assertEqual(summary['total_revenue'], Decimal('0.00'))
        self.assertEqual(summary['total_payments'], 0)
