"""
Public order tracking by token.
"""
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny

from apps.common.utils import success_response, error_response
from ..models import Order
from ..serializers import OrderTrackingSerializer


@api_view(['GET'])
@permission_classes([AllowAny])
def track_order(request, token):
    """Order status, items and latest payment for whoever holds the tracking token"""
    order = Order.objects.select_related('seller').prefetch_related('items').filter(tracking_token=token).first()
    if order is None:
        return error_response("Order not found", status_code=status.HTTP_404_NOT_FOUND)
    return success_response(OrderTrackingSerializer(order).data)
