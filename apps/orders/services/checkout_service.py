"""
Checkout orchestration: one cart in, one order per seller out.
"""
from dataclasses import dataclass, field
from datetime import timedelta
from decimal import Decimal
from typing import Dict, List, Optional
import logging

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from apps.common.exceptions import CheckoutError, CheckoutValidationError
from apps.common.utils import quantize_money
from apps.payments.services import (
    PaymentService,
    build_payment_request,
    get_payment_service,
    settlement_amount,
    settlement_currency,
)
from apps.products.models import Product
from apps.sellers.models import Seller
from ..models import Coupon, Order, OrderItem, generate_tracking_token
from .coupon_service import CouponService
from .notification_service import NotificationService

logger = logging.getLogger(__name__)

PAYMENT_METHODS = ('mpesa', 'bank_transfer', 'cash_on_delivery')
CASH_ON_DELIVERY = 'cash_on_delivery'
TRACKING_TOKEN_ATTEMPTS = 5


def apportion_discount(discount: Decimal, subtotals: List[Decimal]) -> List[Decimal]:
    """
    Split a discount across groups in proportion to their subtotals.

    Works in whole cents: each group gets the floor of its exact share and the
    leftover cents go to the largest fractional parts (earlier group on ties),
    so shares sum to the discount exactly and no share exceeds its subtotal.
    """
    discount_cents = int(quantize_money(discount) * 100)
    subtotal_cents = [int(quantize_money(s) * 100) for s in subtotals]
    total_cents = sum(subtotal_cents)
    if discount_cents <= 0 or total_cents <= 0:
        return [Decimal('0.00') for _ in subtotals]

    shares = []
    remainders = []
    for index, cents in enumerate(subtotal_cents):
        share, remainder = divmod(discount_cents * cents, total_cents)
        shares.append(share)
        remainders.append((-remainder, index))

    leftover = discount_cents - sum(shares)
    for _, index in sorted(remainders)[:leftover]:
        shares[index] += 1

    return [Decimal(share) / 100 for share in shares]


@dataclass
class SideEffectResult:
    """Outcome of one non-fatal post-checkout step"""
    name: str
    ok: bool
    error: str = ''
    order_id: Optional[int] = None


@dataclass
class StoreGroup:
    seller: Seller
    lines: List[Dict] = field(default_factory=list)
    subtotal: Decimal = Decimal('0.00')
    discount: Decimal = Decimal('0.00')


@dataclass
class CheckoutResult:
    orders: List[Order]
    payments: List[Dict] = field(default_factory=list)
    side_effects: List[SideEffectResult] = field(default_factory=list)
    discount_amount: Decimal = Decimal('0.00')

    @property
    def tracking_tokens(self) -> List[str]:
        return [order.tracking_token for order in self.orders]

    @property
    def failed_side_effects(self) -> List[SideEffectResult]:
        return [effect for effect in self.side_effects if not effect.ok]

    def as_dict(self) -> Dict:
        return {
            'success': True,
            'orders': [
                {'id': order.id, 'trackingToken': order.tracking_token, 'status': order.status}
                for order in self.orders
            ],
            'trackingTokens': self.tracking_tokens,
            'payments': self.payments,
        }


class CheckoutService:
    """Service class for multi-seller checkout"""

    def __init__(self, payment_service: Optional[PaymentService] = None):
        self._payment_service = payment_service

    @property
    def payment_service(self) -> PaymentService:
        if self._payment_service is None:
            self._payment_service = get_payment_service()
        return self._payment_service

    def checkout(self, data: Dict, customer=None) -> CheckoutResult:
        """
        Validate the cart, create one order per seller and run the side effects.

        Raises CheckoutValidationError for client mistakes and CheckoutError when a
        referenced product or store does not exist. Nothing is written in either case.
        """
        items = data.get('items') or []
        shipping_address = data.get('shipping_address') or {}
        payment_method = data.get('payment_method') or ''
        customer_phone = data.get('customer_phone') or ''
        if data.get('guest_checkout'):
            customer = None

        self.validate_request(items, shipping_address, payment_method, customer_phone)

        products = self._load_products(items)
        lines = self._build_lines(items, products)
        subtotal = sum((line['line_total'] for line in lines), Decimal('0.00'))

        coupon_discount = CouponService.evaluate(data.get('coupon_code') or '', subtotal)
        discount = coupon_discount.amount if coupon_discount else Decimal('0.00')
        coupon = coupon_discount.coupon if coupon_discount else None

        groups = self._group_by_store(lines)
        for group, share in zip(groups, apportion_discount(discount, [g.subtotal for g in groups])):
            group.discount = share

        created = self._create_orders(groups, data, customer, coupon)
        result = CheckoutResult(orders=[order for order, _, _ in created], discount_amount=discount)
        logger.info(f"Checkout created {len(created)} order(s): {', '.join(result.tracking_tokens)}")

        if coupon is not None:
            result.side_effects.append(self._record_coupon_use(coupon))
        result.side_effects.append(self._send_buyer_confirmation(created, data, discount, coupon))
        result.side_effects.extend(self._send_seller_notifications(created, shipping_address))
        if payment_method != CASH_ON_DELIVERY:
            result.payments = self._create_payments(created, data, result.side_effects)

        return result

    @staticmethod
    def validate_request(items, shipping_address, payment_method, customer_phone):
        if not items:
            raise CheckoutValidationError('Cart is empty')
        if not shipping_address:
            raise CheckoutValidationError('Shipping address is required')
        if not payment_method:
            raise CheckoutValidationError('Payment method is required')
        if payment_method not in PAYMENT_METHODS:
            raise CheckoutValidationError('Invalid payment method')
        if payment_method == 'mpesa' and not customer_phone:
            raise CheckoutValidationError('Phone number is required for M-Pesa payments')

    @staticmethod
    def _load_products(items) -> Dict[int, Product]:
        ids = {int(item['id']) for item in items}
        products = Product.objects.in_bulk(ids)
        for item in items:
            product = products.get(int(item['id']))
            if product is None:
                raise CheckoutError(f"Product {item['id']} not found")
            if not product.is_available:
                raise CheckoutValidationError(f"{product.name} is no longer available")
        return products

    @staticmethod
    def _build_lines(items, products) -> List[Dict]:
        lines = []
        requested = {}
        for item in items:
            product = products[int(item['id'])]
            store_id = item.get('store_id')
            if store_id and str(store_id) != str(product.seller_id):
                raise CheckoutValidationError(f"{product.name} is not sold by store {store_id}")

            quantity = int(item['quantity'])
            requested[product.id] = requested.get(product.id, 0) + quantity
            if not product.has_stock_for(requested[product.id]):
                raise CheckoutValidationError(f"Insufficient stock for {product.name}")

            lines.append({
                'product': product,
                'name': item.get('name') or product.name,
                'variant_id': item.get('variant_id') or '',
                'variant_name': item.get('variant_name') or '',
                'quantity': quantity,
                'unit_price': product.price,
                'line_total': quantize_money(product.price * quantity),
            })
        return lines

    @staticmethod
    def _group_by_store(lines) -> List[StoreGroup]:
        """Group lines by the seller that owns each product, in cart order"""
        by_store: Dict[int, List[Dict]] = {}
        for line in lines:
            by_store.setdefault(line['product'].seller_id, []).append(line)

        sellers = Seller.objects.in_bulk(list(by_store))
        groups = []
        for store_id, store_lines in by_store.items():
            seller = sellers.get(store_id)
            if seller is None:
                raise CheckoutError(f"Store {store_id} not found")
            if not seller.is_active:
                raise CheckoutValidationError(f"Store {seller.name} is not accepting orders")
            groups.append(StoreGroup(
                seller=seller,
                lines=store_lines,
                subtotal=sum((line['line_total'] for line in store_lines), Decimal('0.00')),
            ))
        return groups

    @staticmethod
    def _unused_tracking_token() -> str:
        for _ in range(TRACKING_TOKEN_ATTEMPTS):
            token = generate_tracking_token()
            if not Order.objects.filter(tracking_token=token).exists():
                return token
        raise CheckoutError('Could not allocate a tracking token')

    @transaction.atomic
    def _create_orders(self, groups: List[StoreGroup], data: Dict, customer, coupon: Optional[Coupon]):
        shipping_address = data['shipping_address']
        billing_address = data.get('billing_address') or None
        shipping_method = data.get('shipping_method') or None
        shipping_cost = quantize_money((shipping_method or {}).get('cost') or 0)
        estimated_delivery = None
        if shipping_method and shipping_method.get('estimated_days') is not None:
            estimated_delivery = timezone.now() + timedelta(days=int(shipping_method['estimated_days']))

        created = []
        for group in groups:
            order = Order(
                seller=group.seller,
                customer=customer,
                customer_name=shipping_address.get('name', ''),
                customer_contact=format_customer_contact(shipping_address),
                message=format_order_message(group.lines, data),
                coupon_code=coupon.code if coupon else '',
                subtotal=group.subtotal,
                discount_amount=group.discount,
                shipping_cost=shipping_cost,
                total_amount=group.subtotal - group.discount + shipping_cost,
                shipping_method_id=str((shipping_method or {}).get('id') or ''),
                shipping_method_name=(shipping_method or {}).get('name') or '',
                shipping_address=dict(shipping_address),
                billing_address=dict(billing_address) if billing_address else None,
                estimated_delivery=estimated_delivery,
                payment_method=data['payment_method'],
                tracking_token=self._unused_tracking_token(),
            )
            order.add_status(Order.STATUS_PLACED, 'Order placed via checkout')
            order.save()

            items = []
            for line in group.lines:
                product = line['product']
                items.append(OrderItem.objects.create(
                    order=order,
                    product=product,
                    name=line['name'],
                    variant_id=line['variant_id'],
                    variant_name=line['variant_name'],
                    quantity=line['quantity'],
                    unit_price=line['unit_price'],
                    line_total=line['line_total'],
                ))
                if product.is_tracked and not Product.reserve_stock(product.id, line['quantity']):
                    # Stock moved under us since validation; abort the whole checkout
                    raise CheckoutValidationError(f"Insufficient stock for {product.name}")

            created.append((order, group.seller, items))
        return created

    @staticmethod
    def _record_coupon_use(coupon: Coupon) -> SideEffectResult:
        try:
            if Coupon.record_use(coupon.id):
                return SideEffectResult(name='coupon_usage', ok=True)
            logger.warning(f"Coupon {coupon.code} hit its usage limit before this checkout was counted")
            return SideEffectResult(name='coupon_usage', ok=False, error='Coupon usage limit reached')
        except Exception as e:
            logger.error(f"Failed to record usage of coupon {coupon.code}: {e}", exc_info=True)
            return SideEffectResult(name='coupon_usage', ok=False, error=str(e))

    @staticmethod
    def _send_buyer_confirmation(created, data, discount, coupon) -> SideEffectResult:
        try:
            NotificationService.send_order_confirmation(
                shipping_address=data['shipping_address'],
                orders=created,
                shipping_method=data.get('shipping_method') or None,
                payment_method=data['payment_method'],
                discount_amount=discount,
                coupon_code=coupon.code if coupon else '',
            )
            return SideEffectResult(name='buyer_confirmation_email', ok=True)
        except Exception as e:
            logger.error(f"Failed to send confirmation email: {e}", exc_info=True)
            return SideEffectResult(name='buyer_confirmation_email', ok=False, error=str(e))

    @staticmethod
    def _send_seller_notifications(created, shipping_address) -> List[SideEffectResult]:
        results = []
        for order, seller, items in created:
            if not seller.wants_order_emails:
                continue
            try:
                NotificationService.send_seller_notification(
                    seller=seller, order=order, items=items, customer=shipping_address,
                )
                results.append(SideEffectResult(name='seller_notification_email', ok=True, order_id=order.id))
            except Exception as e:
                logger.error(f"Failed to send notification email to seller {seller.email}: {e}", exc_info=True)
                results.append(SideEffectResult(
                    name='seller_notification_email', ok=False, error=str(e), order_id=order.id,
                ))
        return results

    def _create_payments(self, created, data, side_effects: List[SideEffectResult]) -> List[Dict]:
        shipping_address = data['shipping_address']
        payment_method = data['payment_method']
        provider = data.get('provider') or settings.MPESA_DEFAULT_PROVIDER
        payments = []

        for order, _, _ in created:
            amount = settlement_amount(order.total_amount)
            if amount <= 0:
                continue
            try:
                request = build_payment_request(
                    payment_method,
                    provider=provider,
                    order=order,
                    amount=amount,
                    currency=settlement_currency(),
                    customer=order.customer,
                    payer_name=shipping_address.get('name', ''),
                    payer_email=shipping_address.get('email', ''),
                    payer_phone=data.get('customer_phone') or shipping_address.get('phone', ''),
                    metadata={
                        'provider': provider if payment_method == 'mpesa' else None,
                        'checkoutTimestamp': timezone.now().isoformat(),
                    },
                )
                response = self.payment_service.create_payment(request)
            except Exception as e:
                logger.error(f"Payment creation failed for order {order.id}: {e}", exc_info=True)
                side_effects.append(SideEffectResult(name='payment', ok=False, error=str(e), order_id=order.id))
                payments.append({'orderId': order.id, 'error': 'Payment setup failed'})
                continue

            side_effects.append(SideEffectResult(name='payment', ok=True, order_id=order.id))
            entry = {'orderId': order.id, 'payment': response.as_dict()}
            if response.metadata:
                entry['metadata'] = response.metadata
            payments.append(entry)

        return payments


def format_address(address: Dict) -> str:
    return f"{address.get('address', '')}, {address.get('city', '')}, {address.get('country', '')}"


def format_customer_contact(shipping_address: Dict) -> str:
    return (
        f"Email: {shipping_address.get('email', '')}\n"
        f"Phone: {shipping_address.get('phone', '')}\n"
        f"Address: {format_address(shipping_address)}"
    )


def format_order_message(lines: List[Dict], data: Dict) -> str:
    """Human-readable order description stored on each seller's order"""
    parts = []
    if data.get('notes'):
        parts.append(f"Notes: {data['notes']}")
    parts.append(f"Payment method: {data['payment_method']}")

    shipping_method = data.get('shipping_method')
    if shipping_method:
        parts.append(f"Shipping: {shipping_method.get('name', '')} (${quantize_money(shipping_method.get('cost') or 0)})")

    billing_address = data.get('billing_address')
    if billing_address and billing_address != data.get('shipping_address'):
        parts.append(f"Billing address: {format_address(billing_address)}")

    item_lines = []
    for line in lines:
        variant = f" ({line['variant_name']})" if line['variant_name'] else ''
        item_lines.append(f"- {line['name']}{variant} × {line['quantity']} = ${line['line_total']}")
    parts.append('Items ordered:\n' + '\n'.join(item_lines))

    return '\n\n'.join(parts)
