"""
Order payment processing service.
"""
from typing import Optional
import logging

from django.db import transaction

from ..models import Order

logger = logging.getLogger(__name__)


class OrderPaymentService:
    """Service for reacting to payment outcomes on orders"""

    @staticmethod
    @transaction.atomic
    def process_payment_success(order_id: int) -> Optional[Order]:
        """
        Confirm a placed order once its payment completes.

        Orders past `placed` are left alone; returns the order when it changed.
        """
        order = Order.objects.select_for_update().filter(pk=order_id).first()
        if order is None:
            logger.warning(f"Payment completed for unknown order {order_id}")
            return None
        if order.status != Order.STATUS_PLACED:
            return None

        order.add_status(Order.STATUS_CONFIRMED, 'Payment completed')
        order.save(update_fields=['status', 'status_history', 'updated_at'])
        logger.info(f"Order {order.id} confirmed after payment")
        return order
