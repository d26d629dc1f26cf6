from django.db import models
from django.db.models import F


class Product(models.Model):
    """Catalog item sold by a single seller"""

    STATUS_ACTIVE = 'active'

    STATUS_CHOICES = [
        (STATUS_ACTIVE, 'Active'),
        ('draft', 'Draft'),
        ('archived', 'Archived'),
    ]

    seller = models.ForeignKey('sellers.Seller', on_delete=models.CASCADE, related_name='products')
    name = models.CharField(max_length=200)
    price = models.DecimalField(max_digits=12, decimal_places=2)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_ACTIVE)

    # Inventory: stock_quantity is only enforced when track_inventory is set
    track_inventory = models.BooleanField(default=False)
    stock_quantity = models.IntegerField(null=True, blank=True, help_text="Units in stock, NULL when untracked")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'products'
        indexes = [
            models.Index(fields=['seller', 'status']),
            models.Index(fields=['created_at']),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(stock_quantity__isnull=True) | models.Q(stock_quantity__gte=0),
                name='product_stock_non_negative',
            ),
        ]

    def __str__(self):
        return f"{self.name} (id: {self.id})"

    @property
    def is_available(self):
        """Draft and archived products cannot be ordered"""
        return self.status == self.STATUS_ACTIVE

    @property
    def is_tracked(self):
        return self.track_inventory and self.stock_quantity is not None

    def has_stock_for(self, quantity):
        """Untracked products never run out"""
        if not self.is_tracked:
            return True
        return self.stock_quantity >= quantity

    @classmethod
    def reserve_stock(cls, product_id, quantity):
        """
        Atomically decrement tracked stock.
        Returns False when the row no longer holds enough units.
        """
        updated = cls.objects.filter(
            pk=product_id,
            track_inventory=True,
            stock_quantity__gte=quantity,
        ).update(stock_quantity=F('stock_quantity') - quantity)
        return updated == 1
