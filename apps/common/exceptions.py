"""
Domain exceptions and the project-wide DRF exception handler
"""
from rest_framework.views import exception_handler
from rest_framework.response import Response
from rest_framework import status
import logging

logger = logging.getLogger(__name__)


class MarketplaceError(Exception):
    """Base class for errors raised by marketplace services"""
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = 'Request could not be processed'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class CheckoutValidationError(MarketplaceError):
    """Client-actionable checkout problem (bad input, stock, coupon)"""
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = 'Invalid checkout request'


class CheckoutError(MarketplaceError):
    """Referenced product or store vanished between cart build and submit"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = 'Failed to process checkout'


class PaymentNotFound(MarketplaceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = 'Payment not found'


class PaymentConfigurationError(MarketplaceError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = 'Payment provider configuration missing'


class PaymentGatewayError(MarketplaceError):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_message = 'Payment gateway error'


class InvalidPaymentTransition(MarketplaceError):
    status_code = status.HTTP_409_CONFLICT
    default_message = 'Invalid payment status transition'


ERROR_MESSAGES = {
    status.HTTP_400_BAD_REQUEST: 'Validation error',
    status.HTTP_401_UNAUTHORIZED: 'Authentication required',
    status.HTTP_403_FORBIDDEN: 'Permission denied',
    status.HTTP_404_NOT_FOUND: 'Resource not found',
    status.HTTP_405_METHOD_NOT_ALLOWED: 'Method not allowed',
}


def custom_exception_handler(exc, context):
    """
    Render MarketplaceError and DRF errors in the {code, msg, errors} envelope
    """
    if isinstance(exc, MarketplaceError):
        if exc.status_code >= 500:
            logger.error(f"Service error: {exc.message}", exc_info=True)
        else:
            logger.warning(f"Service error: {exc.message}")
        return Response(
            {'code': exc.status_code, 'msg': exc.message},
            status=exc.status_code
        )

    response = exception_handler(exc, context)
    if response is None:
        return None

    code = response.status_code
    if code >= 500:
        logger.error(f"API exception: {exc}", exc_info=True)
    else:
        logger.warning(f"API exception ({code}): {exc}")

    errors = response.data
    request = context.get('request')
    if code >= 500 and not getattr(getattr(request, 'user', None), 'is_staff', False):
        errors = {'detail': 'Internal server error'}

    response.data = {
        'code': code,
        'msg': ERROR_MESSAGES.get(code, 'Internal server error' if code >= 500 else 'An error occurred'),
        'errors': errors,
    }
    return response
