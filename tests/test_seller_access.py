"""
Seller account resolution and the seller-only permission
"""
from decimal import Decimal

import pytest

from apps.payments.models import Payment
from apps.payments.services import BankTransferPayment
from apps.sellers.permissions import IsSeller
from tests.factories import OrderFactory, UserFactory


class _Request:
    def __init__(self, user):
        self.user = user


@pytest.mark.django_db
def test_user_seller_property(seller_user):
    assert seller_user.seller is not None
    assert seller_user.seller.user == seller_user
    assert UserFactory().seller is None


@pytest.mark.django_db
def test_is_seller_permission(seller_user):
    permission = IsSeller()
    assert permission.has_permission(_Request(seller_user), None)
    assert not permission.has_permission(_Request(UserFactory()), None)


@pytest.mark.django_db
def test_seller_sees_only_own_payments(api_client, seller_user, seller, sandbox_payment_service):
    own = sandbox_payment_service.create_payment(BankTransferPayment(
        order=OrderFactory(seller=seller_user.seller), amount=Decimal('64.00'),
    ))
    sandbox_payment_service.create_payment(BankTransferPayment(
        order=OrderFactory(seller=seller), amount=Decimal('32.00'),
    ))
    api_client.force_authenticate(seller_user)

    response = api_client.get('/api/payments/seller/')

    assert response.status_code == 200
    assert [row['id'] for row in response.json()['data']['list']] == [own.id]
    assert Payment.objects.count() == 2


@pytest.mark.django_db
def test_anonymous_revenue_request_is_rejected(api_client):
    response = api_client.get('/api/payments/revenue/')

    assert response.status_code == 401
    assert response.json()['msg'] == 'Authentication required'
