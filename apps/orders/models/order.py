from decimal import Decimal
import secrets
import string
import time

from django.conf import settings
from django.db import models
from django.utils import timezone

TRACKING_TOKEN_ALPHABET = string.digits + string.ascii_uppercase


def generate_tracking_token() -> str:
    """TK + millisecond timestamp + 8 random base-36 characters"""
    suffix = ''.join(secrets.choice(TRACKING_TOKEN_ALPHABET) for _ in range(8))
    return f"TK{int(time.time() * 1000)}{suffix}"


class Order(models.Model):
    """One seller's share of a checkout"""

    STATUS_PLACED = 'placed'
    STATUS_CONFIRMED = 'confirmed'

    STATUS_CHOICES = [
        ('placed', 'Placed'),
        ('confirmed', 'Confirmed'),
        ('preparing', 'Preparing'),
        ('shipped', 'Shipped'),
        ('in_transit', 'In Transit'),
        ('delivered', 'Delivered'),
        ('cancelled', 'Cancelled'),
    ]

    seller = models.ForeignKey('sellers.Seller', on_delete=models.PROTECT, related_name='orders')
    customer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='orders',
        help_text="Empty for guest checkout",
    )
    customer_name = models.CharField(max_length=200)
    customer_contact = models.CharField(max_length=500, help_text="Email and phone as entered at checkout")
    message = models.TextField(blank=True, default='', help_text="Itemized order description")

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PLACED)
    status_history = models.JSONField(default=list, help_text="[{status, at, note}]")

    # Pricing
    coupon_code = models.CharField(max_length=50, blank=True, default='')
    subtotal = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    discount_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    shipping_cost = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    total_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))

    # Shipping
    shipping_method_id = models.CharField(max_length=100, blank=True, default='')
    shipping_method_name = models.CharField(max_length=200, blank=True, default='')
    shipping_address = models.JSONField(default=dict, help_text="Address snapshot at checkout")
    billing_address = models.JSONField(null=True, blank=True)
    estimated_delivery = models.DateTimeField(null=True, blank=True)

    payment_method = models.CharField(max_length=20, blank=True, default='')
    tracking_token = models.CharField(max_length=40, unique=True, editable=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'orders'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['seller', 'status']),
            models.Index(fields=['customer']),
            models.Index(fields=['created_at']),
        ]

    def __str__(self):
        return f"Order {self.id} - {self.seller_id} - {self.status}"

    @classmethod
    def from_db(cls, db, field_names, values):
        instance = super().from_db(db, field_names, values)
        instance._stored_tracking_token = instance.__dict__.get('tracking_token')
        return instance

    def save(self, *args, **kwargs):
        stored = getattr(self, '_stored_tracking_token', None)
        if stored and self.tracking_token != stored:
            raise ValueError(f"Order {self.pk}: tracking token cannot change")
        if not self.tracking_token:
            self.tracking_token = generate_tracking_token()
        super().save(*args, **kwargs)
        self._stored_tracking_token = self.tracking_token

    def add_status(self, status, note=''):
        """Set status and append to status_history; caller saves"""
        self.status = status
        self.status_history = list(self.status_history or []) + [{
            'status': status,
            'at': timezone.now().isoformat(),
            'note': note,
        }]
