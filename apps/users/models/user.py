from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """Marketplace account: a buyer, or the owner of a seller storefront"""
    phone = models.CharField(max_length=20, unique=True, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'users'
        verbose_name = 'User'
        verbose_name_plural = 'Users'

    def __str__(self):
        return self.username or self.phone or f"User {self.id}"

    @property
    def seller(self):
        """Storefront managed by this account, or None"""
        return getattr(self, 'seller_profile', None)
