"""
Checkout request serializers.

Field names follow the storefront's camelCase payload; `to_checkout_data`
hands the checkout service its snake_case form. Empty carts and missing
addresses pass through so the service can answer with its own messages.
"""
from rest_framework import serializers


class CheckoutAddressSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200)
    email = serializers.EmailField()
    phone = serializers.CharField(max_length=30, required=False, allow_blank=True, default='')
    address = serializers.CharField(max_length=300, required=False, allow_blank=True, default='')
    city = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    country = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')


class CheckoutItemSerializer(serializers.Serializer):
    id = serializers.IntegerField(help_text="Product id")
    storeId = serializers.CharField(max_length=50, required=False, allow_blank=True)
    name = serializers.CharField(max_length=200, required=False, allow_blank=True)
    price = serializers.DecimalField(max_digits=12, decimal_places=2, required=False,
                                     help_text="Display price; the catalog price is charged")
    quantity = serializers.IntegerField(min_value=1)
    variantId = serializers.CharField(max_length=100, required=False, allow_blank=True)
    variantName = serializers.CharField(max_length=200, required=False, allow_blank=True)


class ShippingMethodSerializer(serializers.Serializer):
    id = serializers.CharField(max_length=100)
    name = serializers.CharField(max_length=200)
    type = serializers.CharField(max_length=50, required=False, allow_blank=True, default='')
    cost = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, default=0)
    estimatedDays = serializers.IntegerField(min_value=0, required=False, allow_null=True)


class CheckoutSerializer(serializers.Serializer):
    """
    Serializer for the checkout payload.
    Used for: POST /api/checkout/
    """
    items = CheckoutItemSerializer(many=True, required=False, default=list)
    shippingAddress = CheckoutAddressSerializer(required=False, allow_null=True)
    billingAddress = CheckoutAddressSerializer(required=False, allow_null=True)
    shippingMethod = ShippingMethodSerializer(required=False, allow_null=True)
    paymentMethod = serializers.CharField(max_length=30, required=False, allow_blank=True, default='')
    customerPhone = serializers.CharField(max_length=30, required=False, allow_blank=True, default='')
    provider = serializers.CharField(max_length=20, required=False, allow_blank=True, default='')
    notes = serializers.CharField(required=False, allow_blank=True, default='')
    couponCode = serializers.CharField(max_length=50, required=False, allow_blank=True, default='')
    guestCheckout = serializers.BooleanField(required=False, default=False)

    def to_checkout_data(self):
        data = self.validated_data
        shipping_method = data.get('shippingMethod')
        return {
            'items': [
                {
                    'id': item['id'],
                    'store_id': item.get('storeId') or None,
                    'name': item.get('name', ''),
                    'price': item.get('price'),
                    'quantity': item['quantity'],
                    'variant_id': item.get('variantId', ''),
                    'variant_name': item.get('variantName', ''),
                }
                for item in data.get('items') or []
            ],
            'shipping_address': dict(data['shippingAddress']) if data.get('shippingAddress') else None,
            'billing_address': dict(data['billingAddress']) if data.get('billingAddress') else None,
            'shipping_method': {
                'id': shipping_method['id'],
                'name': shipping_method['name'],
                'type': shipping_method.get('type', ''),
                'cost': shipping_method.get('cost') or 0,
                'estimated_days': shipping_method.get('estimatedDays'),
            } if shipping_method else None,
            'payment_method': data.get('paymentMethod', ''),
            'customer_phone': data.get('customerPhone', ''),
            'provider': data.get('provider', ''),
            'notes': data.get('notes', ''),
            'coupon_code': data.get('couponCode', ''),
            'guest_checkout': data.get('guestCheckout', False),
        }
