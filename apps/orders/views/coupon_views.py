"""
Coupon preview for the storefront cart.
"""
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from apps.common.exceptions import CheckoutValidationError
from ..serializers import CouponValidateSerializer
from ..services import CouponService


@api_view(['POST'])
@permission_classes([AllowAny])
def validate_coupon(request):
    """
    Tell the buyer what a coupon is worth for a cart total.
    Rejected coupons answer 200 with {valid: false, error}; only a malformed request is a 400.
    """
    serializer = CouponValidateSerializer(data=request.data)
    if not serializer.is_valid():
        return Response({'valid': False, 'error': 'Invalid coupon request', 'details': serializer.errors},
                        status=status.HTTP_400_BAD_REQUEST)

    data = serializer.validated_data
    try:
        result = CouponService.evaluate(data['code'], data['orderTotal'], seller_id=data.get('sellerId'))
    except CheckoutValidationError as e:
        return Response({'valid': False, 'error': e.message})

    if result is None:
        return Response({'valid': False, 'error': 'Invalid coupon code'})

    coupon = result.coupon
    return Response({
        'valid': True,
        'coupon': {
            'id': coupon.id,
            'code': coupon.code,
            'type': coupon.type,
            'value': str(coupon.value),
        },
        'discount': str(result.amount),
    })
