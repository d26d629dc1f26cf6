from django.db import models


class PaymentCallback(models.Model):
    """Raw gateway webhook requests for debugging and audit"""

    provider = models.CharField(max_length=20, blank=True, default='', help_text="Provider named in the webhook URL")

    # Request information
    request_method = models.CharField(max_length=10, help_text="HTTP method (GET/POST)")
    request_path = models.CharField(max_length=200, help_text="Request path")
    request_headers = models.JSONField(default=dict, help_text="Request headers")
    request_body = models.TextField(blank=True, default='', help_text="Raw request body")
    request_ip = models.GenericIPAddressField(null=True, blank=True, help_text="Client IP address")

    # Processing information
    processed = models.BooleanField(default=False, help_text="Whether the webhook matched and updated a payment")
    processing_error = models.TextField(blank=True, help_text="Error message if processing failed")
    payment = models.ForeignKey('Payment', on_delete=models.SET_NULL, null=True, blank=True, related_name='callbacks')

    # Response information
    response_status = models.IntegerField(default=200, help_text="HTTP response status code")
    response_body = models.TextField(blank=True, default='', help_text="Response body sent back")

    received_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'payment_callbacks'
        ordering = ['-received_at']
        indexes = [
            models.Index(fields=['provider']),
            models.Index(fields=['received_at']),
            models.Index(fields=['processed']),
        ]

    def __str__(self):
        return f"Callback {self.provider or 'unknown'} - {self.received_at}"
