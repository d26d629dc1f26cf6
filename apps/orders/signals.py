import logging

from django.dispatch import receiver

from apps.payments.models import Payment
from apps.payments.signals import payment_status_changed
from .services import OrderPaymentService

logger = logging.getLogger(__name__)


@receiver(payment_status_changed, sender=Payment)
def confirm_order_on_payment(sender, payment, previous_status, status, **kwargs):
    """Move the paid order to confirmed; never breaks the payment update"""
    if status != Payment.STATUS_COMPLETED or previous_status == status:
        return
    try:
        OrderPaymentService.process_payment_success(payment.order_id)
    except Exception as e:
        logger.error(f"Failed to confirm order {payment.order_id} after payment {payment.id}: {e}", exc_info=True)
