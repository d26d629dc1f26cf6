"""
Common utility functions for API responses
"""
from decimal import Decimal, ROUND_HALF_UP

from rest_framework.response import Response
from rest_framework import status

CENT = Decimal('0.01')


def success_response(data=None, message="Success", status_code=status.HTTP_200_OK):
    """
    Standard success response format
    """
    response_data = {
        "code": 200,
        "msg": message,
        "data": data
    }
    return Response(response_data, status=status_code)


def error_response(message="Error", errors=None, status_code=status.HTTP_400_BAD_REQUEST):
    """
    Standard error response format
    """
    response_data = {
        "code": status_code,
        "msg": message
    }
    if errors:
        response_data["errors"] = errors
    return Response(response_data, status=status_code)


def quantize_money(value) -> Decimal:
    """Round a monetary value to cents, half up"""
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)
