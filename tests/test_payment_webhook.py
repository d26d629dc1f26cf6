"""
Gateway webhook tests
"""
from decimal import Decimal

from django.test import TestCase, override_settings
from rest_framework.test import APIClient

from apps.orders.models import Order
from apps.payments.models import Payment, PaymentCallback
from apps.payments.services import MobileMoneyPayment, MpesaConfig, PaymentService
from tests.factories import OrderFactory, PaymentFactory

WEBHOOK_URL = '/api/payments/webhook/'


class ProcessWebhookTest(TestCase):

    def setUp(self):
        self.service = PaymentService(config=MpesaConfig.from_settings())
        response = self.service.create_payment(MobileMoneyPayment(
            order=OrderFactory(), amount=Decimal('640.00'), payer_phone='841234567',
        ))
        self.payment = Payment.objects.get(pk=response.id)

    def payload(self, code='INS-0', **extra):
        data = {
            'input_TransactionReference': self.payment.external_reference,
            'output_ResponseCode': code,
            'output_ResponseDesc': 'Request processed successfully',
            'output_TransactionID': 'MPZ123',
        }
        data.update(extra)
        return data

    def test_success_code_completes_payment(self):
        result = self.service.process_webhook(self.payload(), 'vodacom')

        self.assertTrue(result.success)
        self.assertEqual(result.status, Payment.STATUS_COMPLETED)
        self.payment.refresh_from_db()
        self.assertEqual(self.payment.status, Payment.STATUS_COMPLETED)
        self.assertEqual(self.payment.confirmation_code, 'MPZ123')
        self.assertEqual(self.payment.metadata['webhookData']['output_TransactionID'], 'MPZ123')
        self.assertIn('transactionRef', self.payment.metadata)

        last = self.payment.status_history.order_by('-id').first()
        self.assertEqual(last.created_by, 'webhook')
        self.assertEqual(last.reason, 'Webhook received: Request processed successfully')
        self.assertEqual(Order.objects.get(pk=self.payment.order_id).status, Order.STATUS_CONFIRMED)

    def test_other_codes_fail_payment(self):
        result = self.service.process_webhook(self.payload(code='INS-2006', output_ResponseDesc=''))

        self.assertEqual(result.status, Payment.STATUS_FAILED)
        self.payment.refresh_from_db()
        self.assertIsNotNone(self.payment.failed_at)
        self.assertEqual(self.payment.status_history.order_by('-id').first().reason,
                         'Webhook received: Payment processed')

    def test_matches_on_conversation_id_fallback(self):
        payload = self.payload()
        del payload['input_TransactionReference']
        payload['input_ThirdPartyConversationID'] = self.payment.external_id

        result = self.service.process_webhook(payload)

        self.assertEqual(result.payment_id, self.payment.id)

    def test_unknown_payment(self):
        result = self.service.process_webhook({'input_TransactionReference': 'NOPE', 'output_ResponseCode': 'INS-0'})

        self.assertEqual(result.as_dict(), {'success': False, 'error': 'Payment not found'})

    def test_redelivered_webhook_keeps_completion_time(self):
        first = self.service.process_webhook(self.payload(), 'vodacom')
        self.payment.refresh_from_db()
        completed_at = self.payment.completed_at

        second = self.service.process_webhook(self.payload(), 'vodacom')

        self.assertTrue(first.success)
        self.assertTrue(second.success)
        self.payment.refresh_from_db()
        self.assertEqual(self.payment.status, Payment.STATUS_COMPLETED)
        self.assertEqual(self.payment.completed_at, completed_at)
        self.assertEqual(self.payment.status_history.filter(created_by='webhook').count(), 2)

    def test_webhook_after_failure_is_a_soft_error(self):
        self.service.process_webhook(self.payload(code='INS-6'))

        result = self.service.process_webhook(self.payload())

        self.assertFalse(result.success)
        self.payment.refresh_from_db()
        self.assertEqual(self.payment.status, Payment.STATUS_FAILED)


class WebhookEndpointTest(TestCase):

    def setUp(self):
        self.client = APIClient()

    def test_unknown_payment_still_answers_200(self):
        response = self.client.post(WEBHOOK_URL + '?provider=vodacom',
                                    {'input_TransactionReference': 'NOPE'}, format='json')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {'success': False, 'error': 'Payment not found'})
        callback = PaymentCallback.objects.get()
        self.assertEqual(callback.provider, 'vodacom')
        self.assertFalse(callback.processed)
        self.assertEqual(callback.processing_error, 'Payment not found')

    def test_completes_payment_and_logs_callback(self):
        payment = PaymentFactory(
            method=Payment.METHOD_MPESA, status=Payment.STATUS_PROCESSING,
            external_reference='MYSHOP_1_1700000000000', external_id='MOCK_TXN_1',
        )

        response = self.client.post(WEBHOOK_URL, {
            'input_TransactionReference': 'MYSHOP_1_1700000000000',
            'output_ResponseCode': 'INS-0',
        }, format='json')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {'success': True, 'paymentId': payment.id, 'status': 'completed'})
        callback = PaymentCallback.objects.get()
        self.assertTrue(callback.processed)
        self.assertEqual(callback.payment_id, payment.id)

    def test_legacy_body_ignored_by_default(self):
        payment = PaymentFactory()

        response = self.client.post(WEBHOOK_URL, {'orderId': payment.order_id, 'status': 'paid'}, format='json')

        self.assertEqual(response.json()['success'], False)
        payment.refresh_from_db()
        self.assertEqual(payment.status, Payment.STATUS_PENDING)

    @override_settings(PAYMENT_LEGACY_WEBHOOK_ENABLED=True)
    def test_legacy_body_when_enabled(self):
        payment = PaymentFactory()

        response = self.client.post(WEBHOOK_URL, {'orderId': payment.order_id, 'status': 'paid'}, format='json')

        self.assertEqual(response.json(), {'success': True, 'paymentId': payment.id, 'status': 'completed'})
        self.assertEqual(payment.status_history.get().reason, 'Legacy webhook: paid')
