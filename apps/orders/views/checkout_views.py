"""
Checkout endpoint used by the storefront.
"""
import logging

from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.common.exceptions import CheckoutError, CheckoutValidationError
from ..serializers import CheckoutSerializer
from ..services import CheckoutService

logger = logging.getLogger(__name__)


class CheckoutView(APIView):
    """
    Turn a multi-seller cart into one order per seller.

    Answers with the bare checkout JSON rather than the {code, msg, data}
    envelope because the storefront reads `success`, `orders` and `error` directly.
    """
    permission_classes = [AllowAny]
    checkout_service_class = CheckoutService

    def post(self, request):
        serializer = CheckoutSerializer(data=request.data)
        if not serializer.is_valid():
            logger.info(f"Checkout payload rejected: {serializer.errors}")
            return Response({'error': 'Invalid checkout data', 'details': serializer.errors},
                            status=status.HTTP_400_BAD_REQUEST)

        customer = request.user if request.user.is_authenticated else None
        try:
            result = self.checkout_service_class().checkout(serializer.to_checkout_data(), customer=customer)
        except CheckoutValidationError as e:
            return Response({'error': e.message}, status=status.HTTP_400_BAD_REQUEST)
        except CheckoutError as e:
            logger.error(f"Checkout error: {e.message}")
            return Response({'error': e.message}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        except Exception as e:
            logger.error(f"Checkout error: {e}", exc_info=True)
            return Response({'error': 'Failed to process order'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        for effect in result.failed_side_effects:
            logger.warning(f"Checkout side effect {effect.name} failed (order {effect.order_id}): {effect.error}")
        return Response(result.as_dict(), status=status.HTTP_200_OK)
