from decimal import Decimal

from django.conf import settings
from django.db import models


class Payment(models.Model):
    """One payment attempt for one seller order"""

    METHOD_MPESA = 'mpesa'
    METHOD_BANK_TRANSFER = 'bank_transfer'
    METHOD_CASH_ON_DELIVERY = 'cash_on_delivery'

    METHOD_CHOICES = [
        (METHOD_MPESA, 'M-Pesa'),
        (METHOD_BANK_TRANSFER, 'Bank Transfer'),
        (METHOD_CASH_ON_DELIVERY, 'Cash on Delivery'),
    ]

    PROVIDER_CHOICES = [
        ('vodacom', 'Vodacom'),
        ('movitel', 'Movitel'),
    ]

    STATUS_PENDING = 'pending'
    STATUS_PROCESSING = 'processing'
    STATUS_COMPLETED = 'completed'
    STATUS_FAILED = 'failed'
    STATUS_CANCELLED = 'cancelled'

    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_PROCESSING, 'Processing'),
        (STATUS_COMPLETED, 'Completed'),
        (STATUS_FAILED, 'Failed'),
        (STATUS_CANCELLED, 'Cancelled'),
    ]

    TERMINAL_STATUSES = (STATUS_COMPLETED, STATUS_FAILED, STATUS_CANCELLED)
    OPEN_STATUSES = (STATUS_PENDING, STATUS_PROCESSING)

    # Moves allowed besides re-stating the current status
    ALLOWED_TRANSITIONS = {
        STATUS_PENDING: (STATUS_PROCESSING, STATUS_COMPLETED, STATUS_FAILED, STATUS_CANCELLED),
        STATUS_PROCESSING: (STATUS_COMPLETED, STATUS_FAILED, STATUS_CANCELLED),
    }

    # Gateway identifiers are written once and never rewritten
    WRITE_ONCE_FIELDS = ('external_id', 'external_reference')

    order = models.ForeignKey('orders.Order', on_delete=models.PROTECT, related_name='payments')
    seller = models.ForeignKey('sellers.Seller', on_delete=models.PROTECT, related_name='payments')
    customer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='payments',
    )

    method = models.CharField(max_length=20, choices=METHOD_CHOICES)
    provider = models.CharField(max_length=20, choices=PROVIDER_CHOICES, blank=True, default='', help_text="Mobile money carrier")
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)

    amount = models.DecimalField(max_digits=12, decimal_places=2)
    fees = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    net_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    currency = models.CharField(max_length=3, default='MZN')

    # Payer snapshot
    payer_phone = models.CharField(max_length=20, blank=True, default='')
    payer_name = models.CharField(max_length=200, blank=True, default='')
    payer_email = models.EmailField(blank=True, default='')

    # Gateway identifiers
    external_id = models.CharField(max_length=200, blank=True, default='', help_text="Gateway transaction ID")
    external_reference = models.CharField(max_length=200, blank=True, default='', help_text="Reference we sent to the gateway")
    confirmation_code = models.CharField(max_length=200, blank=True, default='', help_text="Gateway confirmation code")

    metadata = models.JSONField(default=dict, blank=True)

    processed_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    failed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'payments'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['seller', 'created_at']),
            models.Index(fields=['order']),
            models.Index(fields=['status']),
            models.Index(fields=['external_id']),
            models.Index(fields=['external_reference']),
        ]

    def __str__(self):
        return f"Payment {self.id} - {self.method} - {self.status}"

    @classmethod
    def from_db(cls, db, field_names, values):
        instance = super().from_db(db, field_names, values)
        instance._remember_write_once_fields()
        return instance

    def _remember_write_once_fields(self):
        self._stored_identifiers = {
            field: self.__dict__.get(field) for field in self.WRITE_ONCE_FIELDS
        }

    def save(self, *args, **kwargs):
        stored = getattr(self, '_stored_identifiers', {})
        for field in self.WRITE_ONCE_FIELDS:
            previous = stored.get(field)
            if previous and getattr(self, field) != previous:
                raise ValueError(f"Payment {self.pk}: {field} is already set and cannot change")

        self.net_amount = self.amount - self.fees
        super().save(*args, **kwargs)
        self._remember_write_once_fields()

    @property
    def is_terminal(self):
        return self.status in self.TERMINAL_STATUSES

    def can_transition_to(self, status):
        if status == self.status:
            return True
        return status in self.ALLOWED_TRANSITIONS.get(self.status, ())
