"""
Seller dashboard views: revenue, payment list and payment instructions.
"""
from datetime import datetime, time

from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes

from apps.common.utils import success_response, error_response
from apps.sellers.permissions import IsSeller, get_request_seller
from ..models import PaymentInstructions
from ..serializers import PaymentInstructionsSerializer, PaymentListSerializer, RevenueSummarySerializer
from ..services import PaymentService

MAX_PAGE_SIZE = 200


def _parse_bound(value, end_of_day=False):
    """Accept an ISO date or datetime; bare dates cover the whole day"""
    if not value:
        return None
    day = parse_date(value)
    if day is not None:
        parsed = datetime.combine(day, time.max if end_of_day else time.min)
    else:
        parsed = parse_datetime(value)
        if parsed is None:
            raise ValueError(f"Invalid date: {value}")
    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed)
    return parsed


@api_view(['GET'])
@permission_classes([IsSeller])
def revenue_summary(request):
    """Revenue totals for the current seller, optionally limited to dateFrom..dateTo"""
    seller = get_request_seller(request)
    try:
        start_date = _parse_bound(request.query_params.get('dateFrom'))
        end_date = _parse_bound(request.query_params.get('dateTo'), end_of_day=True)
    except ValueError as e:
        return error_response(str(e))

    summary = PaymentService.get_revenue_summary(seller.id, start_date, end_date)
    data = RevenueSummarySerializer(summary).data
    data['currency'] = seller.currency
    return success_response(data)


@api_view(['GET'])
@permission_classes([IsSeller])
def seller_payments(request):
    seller = get_request_seller(request)
    try:
        limit = min(int(request.query_params.get('limit', 50)), MAX_PAGE_SIZE)
        offset = max(int(request.query_params.get('offset', 0)), 0)
    except ValueError:
        return error_response("limit and offset must be integers")
    if limit < 1:
        return error_response("limit must be at least 1")

    payments = PaymentService.get_seller_payments(seller.id, limit=limit, offset=offset)
    return success_response({
        'list': PaymentListSerializer(payments, many=True).data,
        'limit': limit,
        'offset': offset,
    })


@api_view(['GET', 'POST'])
@permission_classes([IsSeller])
def payment_instructions(request):
    """List or add the payout instructions buyers see at checkout"""
    seller = get_request_seller(request)

    if request.method == 'GET':
        queryset = PaymentInstructions.objects.filter(seller=seller)
        method = request.query_params.get('method')
        if method:
            queryset = queryset.filter(method=method)
        if request.query_params.get('active') == 'true':
            queryset = queryset.filter(active=True)
        return success_response(PaymentInstructionsSerializer(queryset.order_by('sort_order', 'id'), many=True).data)

    serializer = PaymentInstructionsSerializer(data=request.data)
    if not serializer.is_valid():
        return error_response("Invalid payment instructions", serializer.errors)
    instructions = serializer.save(seller=seller)
    return success_response(
        PaymentInstructionsSerializer(instructions).data,
        "Payment instructions saved",
        status_code=status.HTTP_201_CREATED,
    )
