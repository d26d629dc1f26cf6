from django.db import models


class PaymentInstructions(models.Model):
    """Payout details a seller shows buyers for a given payment method"""

    METHOD_CHOICES = [
        ('mpesa', 'M-Pesa'),
        ('bank_transfer', 'Bank Transfer'),
        ('cash_on_delivery', 'Cash on Delivery'),
    ]

    seller = models.ForeignKey('sellers.Seller', on_delete=models.CASCADE, related_name='payment_instructions')
    method = models.CharField(max_length=20, choices=METHOD_CHOICES)

    # Bank transfer details
    bank_name = models.CharField(max_length=200, blank=True, default='')
    account_number = models.CharField(max_length=100, blank=True, default='')
    account_name = models.CharField(max_length=200, blank=True, default='')
    swift_code = models.CharField(max_length=20, blank=True, default='')
    iban = models.CharField(max_length=50, blank=True, default='')

    # Mobile money details
    mobile_number = models.CharField(max_length=20, blank=True, default='')
    network_provider = models.CharField(max_length=50, blank=True, default='')

    instructions_en = models.TextField(blank=True, default='')
    instructions_pt = models.TextField(blank=True, default='')

    active = models.BooleanField(default=True)
    sort_order = models.IntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'payment_instructions'
        ordering = ['sort_order', 'id']
        verbose_name_plural = 'Payment instructions'
        indexes = [
            models.Index(fields=['seller', 'method', 'active']),
        ]

    def __str__(self):
        return f"{self.seller_id} - {self.get_method_display()}"
