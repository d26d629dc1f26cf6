"""
Checkout orchestration tests
"""
from decimal import Decimal
from unittest import mock

from django.core import mail
from django.test import TestCase

from apps.common.exceptions import CheckoutError, CheckoutValidationError
from apps.orders.models import Coupon, Order, OrderItem
from apps.orders.services import CheckoutService, NotificationService
from apps.payments.models import Payment, PaymentStatusHistory
from apps.products.models import Product
from tests.factories import (
    CouponFactory,
    PaymentInstructionsFactory,
    ProductFactory,
    SellerFactory,
    UserFactory,
    cart_item,
    checkout_data,
)


class CheckoutValidationTest(TestCase):
    """Requests rejected before anything is written"""

    def setUp(self):
        self.service = CheckoutService()
        self.product = ProductFactory(price=Decimal('20.00'))

    def assertRejected(self, data, message):
        with self.assertRaisesMessage(CheckoutValidationError, message):
            self.service.checkout(data)
        self.assertEqual(Order.objects.count(), 0)

    def test_empty_cart(self):
        self.assertRejected(checkout_data([]), 'Cart is empty')

    def test_empty_cart_reported_before_missing_address(self):
        data = checkout_data([])
        data['shipping_address'] = None
        self.assertRejected(data, 'Cart is empty')

    def test_missing_shipping_address(self):
        data = checkout_data([cart_item(self.product)])
        data['shipping_address'] = None
        self.assertRejected(data, 'Shipping address is required')

    def test_missing_payment_method(self):
        self.assertRejected(checkout_data([cart_item(self.product)], payment_method=''), 'Payment method is required')

    def test_unknown_payment_method(self):
        self.assertRejected(checkout_data([cart_item(self.product)], payment_method='paypal'), 'Invalid payment method')

    def test_mpesa_requires_phone(self):
        self.assertRejected(
            checkout_data([cart_item(self.product)], payment_method='mpesa'),
            'Phone number is required for M-Pesa payments',
        )

    def test_missing_product_is_a_referential_error(self):
        data = checkout_data([{'id': 999999, 'store_id': str(self.product.seller_id), 'quantity': 1}])
        with self.assertRaisesMessage(CheckoutError, 'Product 999999 not found'):
            self.service.checkout(data)
        self.assertEqual(Order.objects.count(), 0)

    def test_store_must_own_the_product(self):
        other_store = SellerFactory()
        self.assertRejected(
            checkout_data([cart_item(self.product, store_id=str(other_store.id))]),
            f"{self.product.name} is not sold by store {other_store.id}",
        )
        self.assertFalse(other_store.orders.exists())

    def test_draft_product_cannot_be_ordered(self):
        draft = ProductFactory(status='draft')
        self.assertRejected(checkout_data([cart_item(draft)]), f"{draft.name} is no longer available")

    def test_inactive_store_cannot_take_orders(self):
        closed = ProductFactory(seller=SellerFactory(name='Loja Fechada', is_active=False))
        self.assertRejected(
            checkout_data([cart_item(self.product), cart_item(closed)]),
            'Store Loja Fechada is not accepting orders',
        )

    def test_insufficient_stock_creates_no_orders(self):
        product = ProductFactory(track_inventory=True, stock_quantity=3)
        other = ProductFactory()

        self.assertRejected(
            checkout_data([cart_item(other), cart_item(product, quantity=5)]),
            f"Insufficient stock for {product.name}",
        )
        product.refresh_from_db()
        self.assertEqual(product.stock_quantity, 3)

    def test_stock_counts_repeated_lines_together(self):
        product = ProductFactory(track_inventory=True, stock_quantity=3)
        self.assertRejected(
            checkout_data([cart_item(product, quantity=2), cart_item(product, quantity=2, variant_name='Red')]),
            f"Insufficient stock for {product.name}",
        )

    def test_invalid_coupon_rejects_checkout(self):
        CouponFactory(code='BIG', min_order_amount=Decimal('500'))
        self.assertRejected(
            checkout_data([cart_item(self.product)], coupon_code='BIG'),
            'Minimum order amount of 500.00 required',
        )


class CheckoutOrderCreationTest(TestCase):

    def setUp(self):
        self.service = CheckoutService()
        self.store_a = SellerFactory(name='Loja A')
        self.store_b = SellerFactory(name='Loja B')
        self.product_a = ProductFactory(seller=self.store_a, name='Capulana', price=Decimal('100.00'))
        self.product_b = ProductFactory(seller=self.store_b, name='Cesto', price=Decimal('50.00'))

    def test_one_order_per_store(self):
        result = self.service.checkout(checkout_data([
            cart_item(self.product_a),
            cart_item(self.product_b),
            cart_item(ProductFactory(seller=self.store_a, price=Decimal('5.00')), quantity=2),
        ]))

        self.assertEqual(len(result.orders), 2)
        self.assertEqual(Order.objects.count(), 2)
        self.assertEqual(OrderItem.objects.count(), 3)
        self.assertEqual([o.seller for o in result.orders], [self.store_a, self.store_b])
        self.assertEqual(len(set(result.tracking_tokens)), 2)
        self.assertEqual(result.orders[0].subtotal, Decimal('110.00'))
        self.assertEqual(result.orders[1].subtotal, Decimal('50.00'))

    def test_orders_go_to_the_product_owner(self):
        item = cart_item(self.product_a)
        del item['store_id']

        result = self.service.checkout(checkout_data([item, cart_item(self.product_b)]))

        self.assertEqual([o.seller_id for o in result.orders], [self.store_a.id, self.store_b.id])

    def test_save10_discount_is_split_by_subtotal(self):
        CouponFactory(code='SAVE10', type=Coupon.TYPE_PERCENTAGE, value=Decimal('10'))

        result = self.service.checkout(checkout_data(
            [cart_item(self.product_a), cart_item(self.product_b)], coupon_code='SAVE10',
        ))

        order_a, order_b = result.orders
        self.assertEqual(result.discount_amount, Decimal('15.00'))
        self.assertEqual(order_a.discount_amount, Decimal('10.00'))
        self.assertEqual(order_b.discount_amount, Decimal('5.00'))
        self.assertEqual(order_a.total_amount, Decimal('90.00'))
        self.assertEqual(order_b.total_amount, Decimal('45.00'))
        self.assertEqual(order_a.coupon_code, 'SAVE10')

    def test_coupon_usage_counted_once_per_checkout(self):
        coupon = CouponFactory(code='SAVE10', max_uses=5)

        result = self.service.checkout(checkout_data(
            [cart_item(self.product_a), cart_item(self.product_b)], coupon_code='SAVE10',
        ))

        coupon.refresh_from_db()
        self.assertEqual(coupon.used_count, 1)
        usage = [e for e in result.side_effects if e.name == 'coupon_usage']
        self.assertEqual(len(usage), 1)
        self.assertTrue(usage[0].ok)

    def test_unknown_coupon_is_ignored(self):
        result = self.service.checkout(checkout_data([cart_item(self.product_a)], coupon_code='MISSING'))

        self.assertEqual(result.orders[0].discount_amount, Decimal('0.00'))
        self.assertEqual(result.orders[0].coupon_code, '')

    def test_catalog_price_is_charged(self):
        item = cart_item(self.product_a)
        item['price'] = Decimal('1.00')

        result = self.service.checkout(checkout_data([item]))

        self.assertEqual(result.orders[0].subtotal, Decimal('100.00'))
        self.assertEqual(result.orders[0].items.get().unit_price, Decimal('100.00'))

    def test_tracked_stock_is_decremented(self):
        tracked = ProductFactory(seller=self.store_a, track_inventory=True, stock_quantity=3)

        self.service.checkout(checkout_data([cart_item(tracked, quantity=2), cart_item(self.product_a)]))

        tracked.refresh_from_db()
        self.assertEqual(tracked.stock_quantity, 1)
        self.product_a.refresh_from_db()
        self.assertIsNone(self.product_a.stock_quantity)

    def test_lost_stock_race_rolls_back_everything(self):
        tracked = ProductFactory(seller=self.store_b, track_inventory=True, stock_quantity=3)

        with mock.patch.object(Product, 'reserve_stock', return_value=False):
            with self.assertRaisesMessage(CheckoutValidationError, f"Insufficient stock for {tracked.name}"):
                self.service.checkout(checkout_data([cart_item(self.product_a), cart_item(tracked)]))

        self.assertEqual(Order.objects.count(), 0)
        self.assertEqual(OrderItem.objects.count(), 0)

    def test_order_snapshot_fields(self):
        user = UserFactory()
        data = checkout_data(
            [cart_item(self.product_a, quantity=2, variant_name='Azul')],
            payment_method='cash_on_delivery',
            notes='Leave at the gate',
            shipping_method={'id': 'std', 'name': 'Standard', 'type': 'delivery', 'cost': Decimal('4.50'), 'estimated_days': 3},
        )

        order = self.service.checkout(data, customer=user).orders[0]

        self.assertEqual(order.customer, user)
        self.assertEqual(order.status, Order.STATUS_PLACED)
        self.assertEqual(order.status_history[0]['status'], 'placed')
        self.assertEqual(order.status_history[0]['note'], 'Order placed via checkout')
        self.assertTrue(order.tracking_token.startswith('TK'))
        self.assertEqual(order.shipping_cost, Decimal('4.50'))
        self.assertEqual(order.total_amount, Decimal('204.50'))
        self.assertEqual(order.shipping_method_name, 'Standard')
        self.assertIsNotNone(order.estimated_delivery)
        self.assertIn('Email: buyer@example.com', order.customer_contact)
        self.assertIn('Notes: Leave at the gate', order.message)
        self.assertIn('Shipping: Standard ($4.50)', order.message)
        self.assertIn('- Capulana (Azul) × 2 = $200.00', order.message)

    def test_guest_checkout_drops_customer(self):
        user = UserFactory()
        result = self.service.checkout(
            checkout_data([cart_item(self.product_a)], guest_checkout=True), customer=user,
        )
        self.assertIsNone(result.orders[0].customer)

    def test_as_dict_shape(self):
        result = self.service.checkout(checkout_data([cart_item(self.product_a), cart_item(self.product_b)]))

        body = result.as_dict()

        self.assertTrue(body['success'])
        self.assertEqual(body['trackingTokens'], [o['trackingToken'] for o in body['orders']])
        self.assertEqual(body['orders'][0]['status'], 'placed')
        self.assertEqual(body['payments'], [])


class CheckoutSideEffectsTest(TestCase):

    def setUp(self):
        self.service = CheckoutService()
        self.store = SellerFactory(name='Loja A', email='loja-a@example.com')
        self.quiet_store = SellerFactory(email_notifications=False)
        self.product = ProductFactory(seller=self.store, price=Decimal('100.00'))
        self.quiet_product = ProductFactory(seller=self.quiet_store, price=Decimal('10.00'))

    def test_buyer_and_opted_in_sellers_are_emailed(self):
        result = self.service.checkout(checkout_data([cart_item(self.product), cart_item(self.quiet_product)]))

        recipients = [message.to for message in mail.outbox]
        self.assertEqual(recipients, [['buyer@example.com'], ['loja-a@example.com']])
        self.assertIn(result.tracking_tokens[0], mail.outbox[0].subject)
        self.assertIn(result.tracking_tokens[1], mail.outbox[0].body)
        self.assertIn('Cash on Delivery', mail.outbox[0].body)

    def test_email_failure_does_not_fail_checkout(self):
        with mock.patch.object(NotificationService, 'send_order_confirmation', side_effect=OSError('smtp down')):
            result = self.service.checkout(checkout_data([cart_item(self.product)]))

        self.assertEqual(len(result.orders), 1)
        failed = result.failed_side_effects
        self.assertEqual([e.name for e in failed], ['buyer_confirmation_email'])
        self.assertEqual(failed[0].error, 'smtp down')

    def test_cash_on_delivery_creates_no_payments(self):
        result = self.service.checkout(checkout_data([cart_item(self.product)], payment_method='cash_on_delivery'))

        self.assertEqual(result.payments, [])
        self.assertEqual(Payment.objects.count(), 0)

    def test_bank_transfer_payment_per_order_in_settlement_currency(self):
        PaymentInstructionsFactory(seller=self.store)

        result = self.service.checkout(checkout_data(
            [cart_item(self.product), cart_item(self.quiet_product)], payment_method='bank_transfer',
        ))

        self.assertEqual(len(result.payments), 2)
        first = result.payments[0]
        self.assertEqual(first['orderId'], result.orders[0].id)
        self.assertEqual(first['payment']['status'], 'pending')
        self.assertEqual(first['payment']['amount'], '6400.00')
        self.assertEqual(first['payment']['currency'], 'MZN')
        self.assertIn('Bank Transfer Instructions:', first['payment']['instructions'])
        self.assertEqual(result.payments[1]['payment']['instructions'],
                         'Please contact the seller for bank transfer details.')
        self.assertEqual(PaymentStatusHistory.objects.count(), 2)

    def test_mpesa_sandbox_payment(self):
        result = self.service.checkout(checkout_data(
            [cart_item(self.product)], payment_method='mpesa', customer_phone='841234567',
        ))

        payment = result.payments[0]['payment']
        self.assertEqual(payment['status'], 'processing')
        self.assertTrue(payment['externalId'].startswith('MOCK_'))
        stored = Payment.objects.get(pk=payment['id'])
        self.assertEqual(stored.provider, 'vodacom')
        self.assertEqual(stored.payer_phone, '841234567')

    def test_zero_total_orders_get_no_payment(self):
        CouponFactory(code='FREE', type=Coupon.TYPE_PERCENTAGE, value=Decimal('100'))

        result = self.service.checkout(checkout_data(
            [cart_item(self.product)], payment_method='bank_transfer', coupon_code='FREE',
        ))

        self.assertEqual(result.orders[0].total_amount, Decimal('0.00'))
        self.assertEqual(result.payments, [])

    def test_payment_failure_is_reported_per_order(self):
        payment_service = mock.Mock()
        payment_service.create_payment.side_effect = RuntimeError('gateway down')
        service = CheckoutService(payment_service=payment_service)

        result = service.checkout(checkout_data([cart_item(self.product)], payment_method='bank_transfer'))

        self.assertEqual(Order.objects.count(), 1)
        self.assertEqual(result.payments, [{'orderId': result.orders[0].id, 'error': 'Payment setup failed'}])
        self.assertIn('payment', [e.name for e in result.failed_side_effects])
