from django.contrib import admin
from .models import Seller


@admin.register(Seller)
class SellerAdmin(admin.ModelAdmin):
    list_display = ['name', 'slug', 'owner_name', 'email', 'currency', 'email_notifications', 'is_active']
    list_filter = ['is_active', 'email_notifications', 'currency']
    search_fields = ['name', 'slug', 'owner_name', 'email']
    prepopulated_fields = {'slug': ('name',)}
    raw_id_fields = ['user']
