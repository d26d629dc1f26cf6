from decimal import Decimal

from django.db import models
from django.db.models import F, Q


class Coupon(models.Model):
    """Discount code redeemable at checkout"""

    TYPE_PERCENTAGE = 'percentage'
    TYPE_FIXED = 'fixed'

    TYPE_CHOICES = [
        (TYPE_PERCENTAGE, 'Percentage'),
        (TYPE_FIXED, 'Fixed Amount'),
    ]

    UNLIMITED = -1

    seller = models.ForeignKey(
        'sellers.Seller',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='coupons',
        help_text="Store that issued the coupon, empty for marketplace-wide coupons",
    )
    code = models.CharField(max_length=50, unique=True)
    type = models.CharField(max_length=20, choices=TYPE_CHOICES, default=TYPE_PERCENTAGE)
    value = models.DecimalField(max_digits=12, decimal_places=2, help_text="Percent (0-100) or flat amount")
    min_order_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    max_uses = models.IntegerField(default=UNLIMITED, help_text="-1 means unlimited")
    used_count = models.IntegerField(default=0)
    valid_from = models.DateTimeField(null=True, blank=True)
    valid_until = models.DateTimeField(null=True, blank=True)
    active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'coupons'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['active']),
        ]

    def __str__(self):
        return f"{self.code} ({self.type} {self.value})"

    @property
    def is_capped(self):
        return self.max_uses != self.UNLIMITED

    @property
    def is_exhausted(self):
        return self.is_capped and self.used_count >= self.max_uses

    @classmethod
    def record_use(cls, coupon_id):
        """
        Atomically bump used_count, never past max_uses.
        Returns False when the cap was reached first.
        """
        updated = cls.objects.filter(pk=coupon_id).filter(
            Q(max_uses=cls.UNLIMITED) | Q(used_count__lt=F('max_uses'))
        ).update(used_count=F('used_count') + 1)
        return updated == 1
