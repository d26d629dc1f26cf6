"""
Test configuration for the marketplace server.
"""
import os

import pytest


def pytest_configure():
    """Configure Django settings for testing."""
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'marketplace_server.test_settings')


@pytest.fixture
def seller():
    from tests.factories import SellerFactory
    return SellerFactory()


@pytest.fixture
def seller_user():
    """A user that manages a store"""
    from tests.factories import SellerFactory, UserFactory
    user = UserFactory()
    SellerFactory(user=user)
    return user


@pytest.fixture
def api_client():
    from rest_framework.test import APIClient
    return APIClient()


@pytest.fixture
def sandbox_payment_service():
    """PaymentService with every provider in sandbox mode"""
    from apps.payments.services import MpesaConfig, PaymentService
    return PaymentService(config=MpesaConfig.from_settings())
