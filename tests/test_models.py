"""
Model invariant tests
"""
from decimal import Decimal
from io import StringIO

from django.core.management import CommandError, call_command
from django.db import IntegrityError
from django.test import TestCase, override_settings

from apps.orders.models import Order, generate_tracking_token
from apps.payments.models import Payment, PaymentStatusHistory
from apps.products.models import Product
from tests.factories import OrderFactory, PaymentFactory, ProductFactory


class PaymentModelTest(TestCase):

    def test_net_amount_follows_fees(self):
        payment = PaymentFactory(amount=Decimal('100.00'), fees=Decimal('3.50'))
        self.assertEqual(payment.net_amount, Decimal('96.50'))

    def test_external_identifiers_are_write_once(self):
        payment = PaymentFactory()
        payment = Payment.objects.get(pk=payment.pk)
        payment.external_id = 'TXN-1'
        payment.external_reference = 'MYSHOP_1_1'
        payment.save()

        payment = Payment.objects.get(pk=payment.pk)
        payment.external_id = 'TXN-2'
        with self.assertRaises(ValueError):
            payment.save()

    def test_allowed_transitions(self):
        payment = Payment(status=Payment.STATUS_PROCESSING)
        self.assertTrue(payment.can_transition_to(Payment.STATUS_COMPLETED))
        self.assertTrue(payment.can_transition_to(Payment.STATUS_PROCESSING))
        self.assertFalse(payment.can_transition_to(Payment.STATUS_PENDING))

        payment.status = Payment.STATUS_FAILED
        self.assertTrue(payment.can_transition_to(Payment.STATUS_FAILED))
        self.assertFalse(payment.can_transition_to(Payment.STATUS_COMPLETED))


class PaymentStatusHistoryModelTest(TestCase):

    def setUp(self):
        self.row = PaymentStatusHistory.objects.create(
            payment=PaymentFactory(), status='pending', reason='Payment created',
        )

    def test_rows_cannot_be_edited(self):
        self.row.reason = 'rewritten'
        with self.assertRaises(ValueError):
            self.row.save()

    def test_rows_cannot_be_deleted(self):
        with self.assertRaises(ValueError):
            self.row.delete()


class OrderModelTest(TestCase):

    def test_tracking_token_format(self):
        token = generate_tracking_token()
        self.assertRegex(token, r'^TK\d{13}[0-9A-Z]{8}$')

    def test_tracking_token_is_immutable(self):
        order = Order.objects.get(pk=OrderFactory().pk)
        order.tracking_token = 'TK0000'
        with self.assertRaises(ValueError):
            order.save()

    def test_add_status_appends(self):
        order = OrderFactory()
        order.add_status(Order.STATUS_CONFIRMED, 'Payment completed')
        order.save()

        order.refresh_from_db()
        self.assertEqual([entry['status'] for entry in order.status_history], ['placed', 'confirmed'])


class ProductStockTest(TestCase):

    def test_reserve_stock_never_goes_negative(self):
        product = ProductFactory(track_inventory=True, stock_quantity=2)

        self.assertTrue(Product.reserve_stock(product.id, 2))
        self.assertFalse(Product.reserve_stock(product.id, 1))

        product.refresh_from_db()
        self.assertEqual(product.stock_quantity, 0)

    def test_negative_stock_rejected_by_database(self):
        with self.assertRaises(IntegrityError):
            ProductFactory(track_inventory=True, stock_quantity=-1)

    def test_untracked_products_always_have_stock(self):
        self.assertTrue(ProductFactory(stock_quantity=None).has_stock_for(10_000))


class CheckMpesaConfigCommandTest(TestCase):

    def test_reports_sandbox_providers(self):
        out = StringIO()
        call_command('check_mpesa_config', stdout=out)

        self.assertIn('vodacom (default): sandbox - no credentials', out.getvalue())
        self.assertIn('movitel: sandbox', out.getvalue())

    def test_require_live_fails_in_sandbox(self):
        with self.assertRaises(CommandError):
            call_command('check_mpesa_config', '--require-live', stdout=StringIO())

    @override_settings(MPESA_ENVIRONMENT='live', MPESA_PROVIDERS={
        'vodacom': {'API_KEY': 'k', 'PUBLIC_KEY': 'p', 'SERVICE_PROVIDER_CODE': '171717', 'BASE_URL': 'https://x'},
    })
    def test_require_live_passes_with_keys(self):
        out = StringIO()
        call_command('check_mpesa_config', '--require-live', stdout=out)
        self.assertIn('vodacom (default): live - credentials set', out.getvalue())
