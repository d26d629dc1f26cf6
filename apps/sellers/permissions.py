from rest_framework.permissions import BasePermission


class IsSeller(BasePermission):
    """Authenticated account that manages a storefront"""
    message = 'Seller account required'

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and getattr(user, 'seller_profile', None) is not None)


def get_request_seller(request):
    return getattr(request.user, 'seller_profile', None)
