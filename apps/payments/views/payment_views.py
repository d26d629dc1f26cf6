"""
Payment views: initiate, manual confirmation and detail.
"""
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
import logging

from apps.common.exceptions import MarketplaceError
from apps.common.utils import success_response, error_response
from apps.orders.models import Order
from apps.sellers.permissions import IsSeller, get_request_seller
from ..models import Payment
from ..serializers import PaymentConfirmSerializer, PaymentDetailSerializer, PaymentInitiateSerializer
from ..services import build_payment_request, get_payment_service, settlement_amount, settlement_currency

logger = logging.getLogger(__name__)


def _can_pay_for(request, order, tracking_token):
    if request.user.is_authenticated and order.customer_id == request.user.id:
        return True
    return bool(tracking_token) and tracking_token == order.tracking_token


@api_view(['POST'])
@permission_classes([AllowAny])
def initiate_payment(request):
    """Start a new payment attempt for an existing order"""
    serializer = PaymentInitiateSerializer(data=request.data)
    if not serializer.is_valid():
        return error_response("Invalid payment data", serializer.errors)

    data = serializer.validated_data
    try:
        order = Order.objects.select_related('seller').get(pk=data['orderId'])
    except Order.DoesNotExist:
        return error_response("Order not found", status_code=status.HTTP_404_NOT_FOUND)

    if not _can_pay_for(request, order, request.data.get('trackingToken', '')):
        return error_response("Order not found", status_code=status.HTTP_404_NOT_FOUND)

    service = get_payment_service()
    existing_payment = service.get_payment_by_order_id(order.id)
    if existing_payment and existing_payment.status in (Payment.STATUS_COMPLETED, Payment.STATUS_PROCESSING):
        return error_response("Payment already exists for this order", status_code=status.HTTP_409_CONFLICT)

    amount = settlement_amount(order.total_amount)
    if amount <= 0:
        return error_response("Order total must be greater than zero")

    shipping = order.shipping_address or {}
    payment_request = build_payment_request(
        data['paymentMethod'],
        provider=data.get('provider', ''),
        order=order,
        amount=amount,
        currency=settlement_currency(),
        customer=order.customer,
        payer_name=shipping.get('name', order.customer_name),
        payer_email=shipping.get('email', ''),
        payer_phone=data.get('customerPhone', ''),
        metadata={
            'userAgent': request.META.get('HTTP_USER_AGENT', ''),
            'source': 'initiate',
        },
    )

    try:
        result = service.create_payment(payment_request)
    except MarketplaceError as e:
        logger.error(f"Payment initiation failed for order {order.id}: {e.message}")
        return error_response(e.message, status_code=e.status_code)

    return success_response({
        'paymentId': result.id,
        'status': result.status,
        'externalId': result.external_id,
        'confirmationCode': result.confirmation_code,
        'instructions': result.instructions,
        'metadata': result.metadata,
    }, "Payment initiated")


@api_view(['GET', 'POST'])
@permission_classes([IsSeller])
def confirm_payment(request):
    """
    GET: look up a payment by paymentId or orderId before confirming.
    POST: seller marks a pending payment as completed (cash or bank transfer received).
    """
    seller = get_request_seller(request)
    service = get_payment_service()

    if request.method == 'GET':
        payment_id = request.query_params.get('paymentId')
        order_id = request.query_params.get('orderId')
        if not payment_id and not order_id:
            return error_response("paymentId or orderId is required")

        try:
            payment = service.get_payment(int(payment_id)) if payment_id else service.get_payment_by_order_id(int(order_id))
        except ValueError:
            return error_response("paymentId and orderId must be integers")

        if payment is None or payment.seller_id != seller.id:
            return error_response("Payment not found", status_code=status.HTTP_404_NOT_FOUND)
        return success_response(PaymentDetailSerializer(payment).data)

    serializer = PaymentConfirmSerializer(data=request.data)
    if not serializer.is_valid():
        return error_response("Invalid confirmation data", serializer.errors)

    data = serializer.validated_data
    payment = service.get_payment(data['paymentId'])
    if payment is None or payment.seller_id != seller.id:
        return error_response("Payment not found", status_code=status.HTTP_404_NOT_FOUND)

    if payment.status == Payment.STATUS_COMPLETED:
        return error_response("Payment is already confirmed")
    if payment.status != Payment.STATUS_PENDING:
        return error_response("Payment cannot be confirmed in its current state")

    payment = service.update_payment_status(
        payment.id,
        Payment.STATUS_COMPLETED,
        data.get('notes') or 'Manually confirmed by seller',
        metadata={
            'confirmedBy': request.user.id,
            'externalTransactionId': data.get('externalTransactionId', ''),
            'confirmMethod': 'manual',
        },
        created_by=request.user.id,
    )
    return success_response(PaymentDetailSerializer(payment).data, "Payment confirmed")


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def payment_detail(request, payment_id):
    """Payment with its status history, visible to the owning seller, the buyer and staff"""
    payment = get_payment_service().get_payment(payment_id)
    if payment is None:
        return error_response("Payment not found", status_code=status.HTTP_404_NOT_FOUND)

    seller = get_request_seller(request)
    allowed = (
        request.user.is_staff
        or (seller is not None and payment.seller_id == seller.id)
        or payment.customer_id == request.user.id
    )
    if not allowed:
        return error_response("Payment not found", status_code=status.HTTP_404_NOT_FOUND)

    return success_response(PaymentDetailSerializer(payment).data)
