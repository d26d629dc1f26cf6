"""
Seller model for storefronts.
"""
from django.conf import settings
from django.db import models


def default_seller_currency():
    return settings.DEFAULT_SELLER_CURRENCY


class Seller(models.Model):
    """
    A storefront on the marketplace.
    Every order belongs to exactly one seller.
    """

    slug = models.SlugField(max_length=100, unique=True, help_text="Storefront URL slug")
    name = models.CharField(max_length=200, help_text="Store name")
    owner_name = models.CharField(max_length=200, blank=True, default='', help_text="Store owner display name")
    email = models.EmailField(blank=True, default='', help_text="Address for order notifications")
    currency = models.CharField(max_length=3, default=default_seller_currency, help_text="Settlement currency code")
    email_notifications = models.BooleanField(default=True, help_text="Send new order emails to the seller")

    # Account that manages this storefront
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='seller_profile',
    )

    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'sellers'
        ordering = ['name']
        indexes = [
            models.Index(fields=['is_active']),
        ]

    def __str__(self):
        return f"{self.name} ({self.slug})"

    @property
    def wants_order_emails(self):
        return self.email_notifications and bool(self.email)
