"""
Order emails for buyers and sellers.
"""
from decimal import Decimal
from typing import Dict, List, Optional
import logging

from django.conf import settings
from django.core.mail import send_mail
from django.template.loader import render_to_string

from apps.common.utils import quantize_money

logger = logging.getLogger(__name__)

PAYMENT_METHOD_NAMES = {
    'bank_transfer': 'Bank Transfer',
    'cash_on_delivery': 'Cash on Delivery',
    'mpesa': 'M-Pesa Mobile Money',
}


def payment_method_name(method: str) -> str:
    return PAYMENT_METHOD_NAMES.get(method, method)


class NotificationService:
    """Builds and sends checkout emails; errors propagate to the caller"""

    @staticmethod
    def send_order_confirmation(*, shipping_address: Dict, orders: List, shipping_method: Optional[Dict],
                                payment_method: str, discount_amount: Decimal, coupon_code: str = '') -> int:
        """
        One email to the buyer covering every seller-order of the checkout.

        `orders` holds (order, seller, items) triples in creation order.
        """
        subtotal = sum((order.subtotal for order, _, _ in orders), Decimal('0'))
        shipping_cost = Decimal(str((shipping_method or {}).get('cost') or 0))
        tracking_tokens = [order.tracking_token for order, _, _ in orders]

        context = {
            'customer_name': shipping_address.get('name', ''),
            'orders': [
                {
                    'seller_name': seller.name,
                    'items': items,
                    'tracking_token': order.tracking_token,
                }
                for order, seller, items in orders
            ],
            'subtotal': quantize_money(subtotal),
            'shipping_method': shipping_method,
            'shipping_cost': quantize_money(shipping_cost),
            'discount_amount': quantize_money(discount_amount) if discount_amount else None,
            'coupon_code': coupon_code,
            'total': quantize_money(subtotal - discount_amount + shipping_cost),
            'shipping_address': shipping_address,
            'payment_method': payment_method,
            'payment_method_name': payment_method_name(payment_method),
            'marketplace_name': settings.MARKETPLACE_NAME,
        }
        body = render_to_string('orders/emails/buyer_confirmation.txt', context)
        subject = f"Order Confirmation - {', '.join(tracking_tokens)}"
        sent = send_mail(subject, body, settings.DEFAULT_FROM_EMAIL, [shipping_address['email']])
        logger.info(f"Order confirmation sent to {shipping_address['email']} for {len(orders)} order(s)")
        return sent

    @staticmethod
    def send_seller_notification(*, seller, order, items: List, customer: Dict) -> int:
        """New-order email to one seller"""
        context = {
            'seller_name': seller.name or seller.owner_name,
            'order': order,
            'items': items,
            'customer': customer,
            'payment_method_name': payment_method_name(order.payment_method),
            'marketplace_name': settings.MARKETPLACE_NAME,
        }
        body = render_to_string('orders/emails/seller_new_order.txt', context)
        subject = f"New order #{order.id} - {order.tracking_token}"
        sent = send_mail(subject, body, settings.DEFAULT_FROM_EMAIL, [seller.email])
        logger.info(f"New order notification sent to seller {seller.id} for order {order.id}")
        return sent
