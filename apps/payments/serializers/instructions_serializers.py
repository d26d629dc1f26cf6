"""
Payment instructions serializers.
"""
from rest_framework import serializers

from ..models import PaymentInstructions


class PaymentInstructionsSerializer(serializers.ModelSerializer):
    bankName = serializers.CharField(source='bank_name', max_length=200, required=False, allow_blank=True)
    accountNumber = serializers.CharField(source='account_number', max_length=100, required=False, allow_blank=True)
    accountName = serializers.CharField(source='account_name', max_length=200, required=False, allow_blank=True)
    swiftCode = serializers.CharField(source='swift_code', max_length=20, required=False, allow_blank=True)
    mobileNumber = serializers.CharField(source='mobile_number', max_length=20, required=False, allow_blank=True)
    networkProvider = serializers.CharField(source='network_provider', max_length=50, required=False, allow_blank=True)
    instructionsEn = serializers.CharField(source='instructions_en', required=False, allow_blank=True)
    instructionsPt = serializers.CharField(source='instructions_pt', required=False, allow_blank=True)
    sortOrder = serializers.IntegerField(source='sort_order', required=False)

    class Meta:
        model = PaymentInstructions
        fields = [
            'id', 'method', 'bankName', 'accountNumber', 'accountName', 'swiftCode', 'iban',
            'mobileNumber', 'networkProvider', 'instructionsEn', 'instructionsPt', 'active', 'sortOrder'
        ]
        read_only_fields = ['id']

    def validate(self, attrs):
        method = attrs.get('method', getattr(self.instance, 'method', None))
        if method == 'bank_transfer':
            missing = [
                name for name, source in (('bankName', 'bank_name'), ('accountNumber', 'account_number'), ('accountName', 'account_name'))
                if not attrs.get(source, getattr(self.instance, source, ''))
            ]
            if missing:
                raise serializers.ValidationError({name: 'Required for bank transfer instructions' for name in missing})
        elif method == 'mpesa':
            if not attrs.get('mobile_number', getattr(self.instance, 'mobile_number', '')):
                raise serializers.ValidationError({'mobileNumber': 'Required for M-Pesa instructions'})
        return attrs
