"""
Payment service: creation, method dispatch, status transitions, webhooks and revenue.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import ClassVar, Dict, List, Optional
import logging

from django.db import transaction
from django.db.models import Count, Q, Sum
from django.utils import timezone

from apps.common.exceptions import (
    InvalidPaymentTransition,
    PaymentConfigurationError,
    PaymentGatewayError,
    PaymentNotFound,
)
from ..models import Payment, PaymentInstructions, PaymentStatusHistory
from ..signals import payment_status_changed
from .mpesa_config import MpesaConfig
from .mpesa_gateway import MpesaGateway, SUCCESS_RESPONSE_CODE, current_millis, format_phone_number

logger = logging.getLogger(__name__)

MPESA_DIAL_INSTRUCTIONS = (
    "Please complete the payment by dialing *150*00# and following the prompts. Transaction ID: {transaction_id}"
)
BANK_TRANSFER_FALLBACK = 'Please contact the seller for bank transfer details.'


@dataclass(kw_only=True)
class PaymentRequest:
    """Fields shared by every payment method"""
    method: ClassVar[str] = ''

    order: object
    amount: Decimal
    currency: str = 'MZN'
    customer: Optional[object] = None
    payer_name: str = ''
    payer_email: str = ''
    payer_phone: str = ''
    metadata: Dict = field(default_factory=dict)

    @property
    def seller(self):
        return self.order.seller


@dataclass(kw_only=True)
class MobileMoneyPayment(PaymentRequest):
    method: ClassVar[str] = Payment.METHOD_MPESA

    provider: str = ''

    def __post_init__(self):
        if not self.payer_phone:
            raise ValueError('Phone number is required for M-Pesa payments')


@dataclass(kw_only=True)
class BankTransferPayment(PaymentRequest):
    method: ClassVar[str] = Payment.METHOD_BANK_TRANSFER


@dataclass(kw_only=True)
class CashOnDeliveryPayment(PaymentRequest):
    method: ClassVar[str] = Payment.METHOD_CASH_ON_DELIVERY


PAYMENT_REQUEST_TYPES = {
    request_type.method: request_type
    for request_type in (MobileMoneyPayment, BankTransferPayment, CashOnDeliveryPayment)
}


def build_payment_request(method: str, *, provider: str = '', **fields) -> PaymentRequest:
    """Pick the request variant for a payment method name"""
    try:
        request_type = PAYMENT_REQUEST_TYPES[method]
    except KeyError:
        raise ValueError(f"Unsupported payment method: {method}")
    if request_type is MobileMoneyPayment:
        fields['provider'] = provider
    return request_type(**fields)


@dataclass
class PaymentResponse:
    id: int
    method: str
    status: str
    amount: Decimal
    currency: str
    external_id: str = ''
    confirmation_code: str = ''
    instructions: str = ''
    metadata: Dict = field(default_factory=dict)

    def as_dict(self) -> Dict:
        return {
            'id': self.id,
            'method': self.method,
            'status': self.status,
            'amount': str(self.amount),
            'currency': self.currency,
            'externalId': self.external_id,
            'confirmationCode': self.confirmation_code,
            'instructions': self.instructions,
        }


@dataclass
class WebhookResult:
    success: bool
    payment_id: Optional[int] = None
    status: Optional[str] = None
    error: Optional[str] = None

    def as_dict(self) -> Dict:
        data = {'success': self.success}
        if self.payment_id is not None:
            data['paymentId'] = self.payment_id
        if self.status:
            data['status'] = self.status
        if self.error:
            data['error'] = self.error
        return data


class PaymentService:
    """Service class for payment operations"""

    def __init__(self, config: Optional[MpesaConfig] = None, gateway: Optional[MpesaGateway] = None):
        self.config = config or MpesaConfig.from_settings()
        self.gateway = gateway or MpesaGateway(timeout=self.config.timeout)
        self._handlers = {
            MobileMoneyPayment: self._process_mpesa,
            BankTransferPayment: self._process_bank_transfer,
            CashOnDeliveryPayment: self._process_cash_on_delivery,
        }

    def create_payment(self, request: PaymentRequest) -> PaymentResponse:
        """Persist a pending payment, then hand it to the method's processor"""
        handler = self._handlers.get(type(request))
        if handler is None:
            raise ValueError(f"Unsupported payment request: {type(request).__name__}")

        payment = self._create_pending_payment(request)
        logger.info(f"Payment {payment.id} created for order {payment.order_id} ({payment.method}, {payment.amount} {payment.currency})")
        return handler(payment, request)

    @transaction.atomic
    def _create_pending_payment(self, request: PaymentRequest) -> Payment:
        provider = ''
        if isinstance(request, MobileMoneyPayment):
            provider = request.provider or self.config.default_provider

        payment = Payment.objects.create(
            order=request.order,
            seller=request.seller,
            customer=request.customer,
            method=request.method,
            provider=provider,
            status=Payment.STATUS_PENDING,
            amount=request.amount,
            fees=Decimal('0.00'),
            currency=request.currency,
            payer_phone=request.payer_phone,
            payer_name=request.payer_name,
            payer_email=request.payer_email,
            metadata=dict(request.metadata),
        )
        PaymentStatusHistory.objects.create(
            payment=payment,
            status=Payment.STATUS_PENDING,
            previous_status='',
            reason='Payment created',
            created_by='system',
        )
        return payment

    def _process_mpesa(self, payment: Payment, request: MobileMoneyPayment) -> PaymentResponse:
        payment = self.update_payment_status(payment.id, Payment.STATUS_PROCESSING, 'Initiating M-Pesa payment')

        try:
            credentials = self.config.for_provider(payment.provider)
            credentials.ensure_usable()

            millis = current_millis()
            reference = f"{self.config.reference_prefix}_{payment.id}_{millis}"
            conversation_id = f"TXN_{payment.id}_{millis}"

            result = self.gateway.c2b_payment(
                credentials,
                amount=payment.amount,
                phone=format_phone_number(request.payer_phone),
                transaction_reference=reference,
                conversation_id=conversation_id,
                description=f"Order {payment.order_id} payment",
            )
        except PaymentConfigurationError as e:
            self.update_payment_status(payment.id, Payment.STATUS_FAILED, f"Error: {e.message}")
            raise
        except Exception as e:
            logger.error(f"M-Pesa dispatch for payment {payment.id} crashed: {e}", exc_info=True)
            self.update_payment_status(payment.id, Payment.STATUS_FAILED, f"Error: {e}")
            raise

        if not result.success:
            self.update_payment_status(payment.id, Payment.STATUS_FAILED, f"M-Pesa error: {result.error}")
            raise PaymentGatewayError(f"M-Pesa payment failed: {result.error}")

        gateway_response = result.as_metadata()
        payment.external_id = result.transaction_id
        payment.external_reference = reference
        payment.metadata = {
            **payment.metadata,
            'transactionRef': reference,
            'conversationId': conversation_id,
            'gatewayResponse': gateway_response,
        }
        payment.save(update_fields=['external_id', 'external_reference', 'metadata', 'updated_at'])

        return PaymentResponse(
            id=payment.id,
            method=payment.method,
            status=payment.status,
            amount=payment.amount,
            currency=payment.currency,
            external_id=payment.external_id,
            instructions=MPESA_DIAL_INSTRUCTIONS.format(transaction_id=result.transaction_id),
            metadata={'transactionRef': reference, 'mpesaResponse': gateway_response},
        )

    def _process_bank_transfer(self, payment: Payment, request: BankTransferPayment) -> PaymentResponse:
        instructions = PaymentInstructions.objects.filter(
            seller_id=payment.seller_id,
            method=Payment.METHOD_BANK_TRANSFER,
            active=True,
        ).order_by('sort_order', 'id').first()

        metadata = {}
        if instructions is None:
            text = BANK_TRANSFER_FALLBACK
        else:
            text = self.format_bank_transfer_instructions(instructions, payment)
            metadata['bankTransferInstructionsId'] = instructions.id

        return PaymentResponse(
            id=payment.id,
            method=payment.method,
            status=payment.status,
            amount=payment.amount,
            currency=payment.currency,
            instructions=text,
            metadata=metadata,
        )

    def _process_cash_on_delivery(self, payment: Payment, request: CashOnDeliveryPayment) -> PaymentResponse:
        return PaymentResponse(
            id=payment.id,
            method=payment.method,
            status=payment.status,
            amount=payment.amount,
            currency=payment.currency,
            instructions=f"Payment will be collected on delivery. Amount: {payment.amount} {payment.currency}",
            metadata={'deliveryRequired': True},
        )

    @staticmethod
    def format_bank_transfer_instructions(instructions: PaymentInstructions, payment: Payment) -> str:
        lines = [
            'Bank Transfer Instructions:',
            f"Bank: {instructions.bank_name}",
            f"Account Number: {instructions.account_number}",
            f"Account Name: {instructions.account_name}",
        ]
        if instructions.swift_code:
            lines.append(f"SWIFT Code: {instructions.swift_code}")
        if instructions.iban:
            lines.append(f"IBAN: {instructions.iban}")
        lines.append('')
        lines.append(f"Reference: Order #{payment.order_id}")
        lines.append(f"Amount: {payment.amount} {payment.currency}")
        if instructions.instructions_en:
            lines.append('')
            lines.append(instructions.instructions_en)
        return '\n'.join(lines).strip()

    def update_payment_status(self, payment_id: int, status: str, reason: str = '',
                              metadata: Optional[Dict] = None, created_by: str = 'system',
                              confirmation_code: Optional[str] = None) -> Payment:
        """
        Move a payment to a new status and append one history row.

        Re-stating the current status is allowed and still recorded.
        Raises PaymentNotFound and InvalidPaymentTransition.
        """
        with transaction.atomic():
            try:
                payment = Payment.objects.select_for_update().get(pk=payment_id)
            except Payment.DoesNotExist:
                raise PaymentNotFound(f"Payment {payment_id} not found")

            previous_status = payment.status
            if not payment.can_transition_to(status):
                raise InvalidPaymentTransition(
                    f"Payment {payment_id} cannot move from {previous_status} to {status}"
                )

            now = timezone.now()
            changed = previous_status != status
            payment.status = status
            # Re-stating a status keeps the timestamps of the first transition
            if status == Payment.STATUS_PROCESSING:
                if changed or payment.processed_at is None:
                    payment.processed_at = now
            elif status == Payment.STATUS_COMPLETED:
                if changed or payment.completed_at is None:
                    payment.completed_at = now
                if payment.processed_at is None:
                    payment.processed_at = now
            elif status == Payment.STATUS_FAILED:
                if changed or payment.failed_at is None:
                    payment.failed_at = now

            if metadata:
                payment.metadata = {**payment.metadata, **metadata}
            if confirmation_code is not None:
                payment.confirmation_code = confirmation_code

            payment.save()

            PaymentStatusHistory.objects.create(
                payment=payment,
                status=status,
                previous_status=previous_status,
                reason=reason or '',
                created_by=str(created_by),
            )

        if previous_status != status:
            logger.info(f"Payment {payment_id}: {previous_status} -> {status} ({reason})")

        payment_status_changed.send(
            sender=Payment,
            payment=payment,
            previous_status=previous_status,
            status=status,
            created_by=str(created_by),
        )
        return payment

    def process_webhook(self, payload: Dict, provider: str = '') -> WebhookResult:
        """
        Apply a gateway callback. Never raises: gateways retry on errors,
        so every problem comes back as an unsuccessful result.
        """
        try:
            payment = self._find_webhook_payment(payload)
            if payment is None:
                logger.warning(f"Payment not found for {provider or 'unknown'} webhook: {payload}")
                return WebhookResult(success=False, error='Payment not found')

            status = Payment.STATUS_COMPLETED if payload.get('output_ResponseCode') == SUCCESS_RESPONSE_CODE else Payment.STATUS_FAILED
            description = payload.get('output_ResponseDesc') or 'Payment processed'

            payment = self.update_payment_status(
                payment.id,
                status,
                f"Webhook received: {description}",
                metadata={'webhookData': payload},
                created_by='webhook',
                confirmation_code=payload.get('output_TransactionID') or '',
            )
            return WebhookResult(success=True, payment_id=payment.id, status=payment.status)

        except InvalidPaymentTransition as e:
            logger.warning(f"Ignoring {provider or 'unknown'} webhook: {e.message}")
            return WebhookResult(success=False, error=e.message)
        except Exception as e:
            logger.error(f"Webhook processing error: {e}", exc_info=True)
            return WebhookResult(success=False, error=str(e) or 'Webhook processing failed')

    @staticmethod
    def _find_webhook_payment(payload: Dict) -> Optional[Payment]:
        payment = None
        reference = payload.get('input_TransactionReference')
        if reference:
            payment = Payment.objects.filter(external_reference=reference).first()

        conversation_id = payload.get('input_ThirdPartyConversationID')
        if payment is None and conversation_id:
            payment = Payment.objects.filter(external_id=conversation_id).first()
        return payment

    @staticmethod
    def get_payment(payment_id: int) -> Optional[Payment]:
        return Payment.objects.select_related('order', 'seller').filter(pk=payment_id).first()

    @staticmethod
    def get_payment_by_order_id(order_id: int) -> Optional[Payment]:
        """Latest payment attempt for an order"""
        return Payment.objects.filter(order_id=order_id).order_by('-id').first()

    @staticmethod
    def get_status_history(payment_id: int) -> List[PaymentStatusHistory]:
        return list(PaymentStatusHistory.objects.filter(payment_id=payment_id).order_by('created_at', 'id'))

    @staticmethod
    def get_seller_payments(seller_id: int, limit: int = 50, offset: int = 0) -> List[Payment]:
        queryset = Payment.objects.filter(seller_id=seller_id).order_by('-created_at', '-id')
        return list(queryset[offset:offset + limit])

    @staticmethod
    def get_revenue_summary(seller_id: int, start_date=None, end_date=None) -> Dict:
        """Aggregate a seller's payments, optionally within [start_date, end_date]"""
        queryset = Payment.objects.filter(seller_id=seller_id)
        if start_date:
            queryset = queryset.filter(created_at__gte=start_date)
        if end_date:
            queryset = queryset.filter(created_at__lte=end_date)

        completed = Q(status=Payment.STATUS_COMPLETED)
        totals = queryset.aggregate(
            total_revenue=Sum('amount'),
            confirmed_revenue=Sum('amount', filter=completed),
            total_fees=Sum('fees', filter=completed),
            net_revenue=Sum('net_amount', filter=completed),
            total_payments=Count('id'),
            completed_payments=Count('id', filter=completed),
            pending_payments=Count('id', filter=Q(status__in=Payment.OPEN_STATUSES)),
        )

        zero = Decimal('0.00')
        return {
            'total_revenue': totals['total_revenue'] or zero,
            'confirmed_revenue': totals['confirmed_revenue'] or zero,
            'total_fees': totals['total_fees'] or zero,
            'net_revenue': totals['net_revenue'] or zero,
            'total_payments': totals['total_payments'],
            'completed_payments': totals['completed_payments'],
            'pending_payments': totals['pending_payments'],
        }


def get_payment_service() -> PaymentService:
    """PaymentService wired with the gateway configuration from settings"""
    return PaymentService(config=MpesaConfig.from_settings())
