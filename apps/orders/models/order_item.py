from django.db import models


class OrderItem(models.Model):
    """Order line items - snapshot of what was bought and at which price"""

    order = models.ForeignKey('Order', on_delete=models.CASCADE, related_name='items')
    product = models.ForeignKey('products.Product', on_delete=models.SET_NULL, null=True, related_name='order_items')
    name = models.CharField(max_length=200, help_text="Product name at checkout")
    variant_id = models.CharField(max_length=100, blank=True, default='')
    variant_name = models.CharField(max_length=200, blank=True, default='')
    quantity = models.PositiveIntegerField(help_text="Quantity ordered")
    unit_price = models.DecimalField(max_digits=12, decimal_places=2, help_text="Unit price")
    line_total = models.DecimalField(max_digits=12, decimal_places=2, help_text="Line total (quantity * unit_price)")

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'order_items'
        indexes = [
            models.Index(fields=['order']),
            models.Index(fields=['product']),
        ]

    def __str__(self):
        return f"OrderItem {self.name} x {self.quantity}"

    def save(self, *args, **kwargs):
        # Calculate line total if not set
        if not self.line_total:
            self.line_total = self.quantity * self.unit_price
        super().save(*args, **kwargs)
