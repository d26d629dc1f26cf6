"""
Payment signals.
"""
from django.dispatch import Signal

# Sent after a payment status update is persisted.
# kwargs: payment, previous_status, status, created_by
payment_status_changed = Signal()
