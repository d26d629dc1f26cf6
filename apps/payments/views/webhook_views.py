"""
M-Pesa gateway webhook views.
"""
from django.conf import settings
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
import json
import logging

from apps.common.exceptions import MarketplaceError
from ..models import Payment, PaymentCallback
from ..services import WebhookResult, get_payment_service

logger = logging.getLogger(__name__)

LEGACY_STATUS_MAP = {
    'paid': Payment.STATUS_COMPLETED,
    'failed': Payment.STATUS_FAILED,
    'manual': Payment.STATUS_COMPLETED,
    'pending': Payment.STATUS_PENDING,
}


def _process_legacy_webhook(service, body) -> WebhookResult:
    """Older integrations post {orderId, status} instead of the gateway payload"""
    payment = service.get_payment_by_order_id(body.get('orderId'))
    if payment is None:
        return WebhookResult(success=False, error='Payment not found')

    legacy_status = str(body.get('status'))
    try:
        payment = service.update_payment_status(
            payment.id,
            LEGACY_STATUS_MAP.get(legacy_status, Payment.STATUS_PENDING),
            f"Legacy webhook: {legacy_status}",
            metadata={'legacyWebhook': body},
            created_by='webhook',
        )
    except MarketplaceError as e:
        return WebhookResult(success=False, payment_id=payment.id, error=e.message)
    return WebhookResult(success=True, payment_id=payment.id, status=payment.status)


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def payment_webhook(request):
    """
    Gateway payment notification endpoint.
    Always answers 200: gateways retry anything else.
    """
    provider = request.query_params.get('provider', '')
    callback_log = None
    try:
        # Log callback for debugging
        request_body_str = request.body.decode('utf-8', errors='replace') if request.body else ''
        callback_log = PaymentCallback.objects.create(
            provider=provider,
            request_method=request.method,
            request_path=request.path,
            request_headers=dict(request.headers),
            request_body=request_body_str,
            request_ip=request.META.get('REMOTE_ADDR') or None,
        )

        body = request.data if isinstance(request.data, dict) else {}
        service = get_payment_service()

        is_legacy = 'orderId' in body and 'status' in body and 'input_TransactionReference' not in body
        if is_legacy and settings.PAYMENT_LEGACY_WEBHOOK_ENABLED:
            result = _process_legacy_webhook(service, body)
        else:
            result = service.process_webhook(body, provider)

        response_data = result.as_dict()
        callback_log.processed = result.success
        callback_log.processing_error = result.error or ''
        callback_log.payment_id = result.payment_id
        callback_log.response_body = json.dumps(response_data)
        callback_log.save()

        return Response(response_data, status=200)

    except Exception as e:
        logger.error(f"Payment webhook error: {e}", exc_info=True)
        response_data = {'success': False, 'error': 'Webhook processing failed'}

        if callback_log is not None:
            callback_log.processed = False
            callback_log.processing_error = str(e)
            callback_log.response_body = json.dumps(response_data)
            callback_log.save()

        return Response(response_data, status=200)
