from django.db import models


class PaymentStatusHistory(models.Model):
    """Append-only record of every payment status change"""

    payment = models.ForeignKey('Payment', on_delete=models.CASCADE, related_name='status_history')
    status = models.CharField(max_length=20)
    previous_status = models.CharField(max_length=20, blank=True, default='')
    reason = models.TextField(blank=True, default='')
    created_by = models.CharField(max_length=50, default='system', help_text="system, webhook or a user id")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'payment_status_history'
        ordering = ['created_at', 'id']
        verbose_name_plural = 'Payment status history'
        indexes = [
            models.Index(fields=['payment', 'created_at']),
        ]

    def __str__(self):
        return f"Payment {self.payment_id}: {self.previous_status or '-'} -> {self.status}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValueError("Payment status history rows are append-only")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValueError("Payment status history rows are append-only")
