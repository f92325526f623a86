from rest_framework import serializers
from bizdesk.parties.models import Customer
from .models import Category, Transaction, DaybookEntry, LedgerEntry, TYPE_CHOICES, ICON_BY_TYPE


class CategorySerializer(serializers.ModelSerializer):
    icon = serializers.CharField(max_length=20, required=False, allow_blank=True)

    class Meta:
        model = Category
        fields = ['id', 'name', 'icon', 'type', 'created_at']
        read_only_fields = ['created_at']
        # Duplicates are reported as "Category already exists" by the view
        validators = []

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Category name is required")
        return value

    def validate(self, attrs):
        if not attrs.get('icon'):
            attrs['icon'] = ICON_BY_TYPE[attrs.get('type', 'income')]
        return attrs


class TransactionSerializer(serializers.ModelSerializer):
    class Meta:
        model = Transaction
        fields = ['id', 'amount', 'description', 'date', 'type', 'category', 'category_icon', 'created_at']
        read_only_fields = fields


class TransactionCreateSerializer(serializers.Serializer):
    """Shape of a create request; amount, date and category checks happen in the service"""
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    description = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
    date = serializers.CharField()
    category = serializers.CharField(max_length=100)
    type = serializers.ChoiceField(choices=TYPE_CHOICES)


class DaybookEntrySerializer(serializers.ModelSerializer):
    customer = serializers.PrimaryKeyRelatedField(queryset=Customer.objects.all(), required=False, allow_null=True)
    customer_name = serializers.CharField(source='customer.name', read_only=True)
    reference = serializers.CharField(max_length=100)
    attachments = serializers.ListField(child=serializers.CharField(), required=False)

    class Meta:
        model = DaybookEntry
        fields = [
            'id', 'date', 'entry_type', 'amount', 'description', 'reference', 'category',
            'payment_method', 'status', 'attachments', 'notes', 'customer', 'customer_name',
            'purchase', 'stock_entry', 'installment', 'sale', 'created_at', 'updated_at'
        ]
        read_only_fields = ['purchase', 'stock_entry', 'installment', 'sale', 'created_at', 'updated_at']

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        request = self.context.get('request')
        if request is not None:
            self.fields['customer'].queryset = Customer.objects.filter(owner=request.user)

    def validate_amount(self, value):
        if value <= 0:
            raise serializers.ValidationError("Amount must be greater than 0")
        return value

    def validate_description(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Description is required")
        return value

    def validate_reference(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Reference is required")
        return value


class LedgerEntrySerializer(serializers.ModelSerializer):
    customer = serializers.PrimaryKeyRelatedField(queryset=Customer.objects.all(), required=False, allow_null=True)
    customer_name = serializers.CharField(source='customer.name', read_only=True)
    tags = serializers.ListField(child=serializers.CharField(), required=False)

    class Meta:
        model = LedgerEntry
        fields = [
            'id', 'ledger_type', 'custom_type', 'title', 'description', 'amount', 'transaction_type',
            'date', 'reference', 'category', 'payment_method', 'tags', 'customer', 'customer_name',
            'created_at', 'updated_at'
        ]
        read_only_fields = ['created_at', 'updated_at']

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        request = self.context.get('request')
        if request is not None:
            self.fields['customer'].queryset = Customer.objects.filter(owner=request.user)

    def validate_amount(self, value):
        if value <= 0:
            raise serializers.ValidationError("Amount must be greater than 0")
        return value

    def validate(self, attrs):
        if attrs.get('ledger_type') == 'CUSTOM' and not attrs.get('custom_type', '').strip():
            raise serializers.ValidationError({'custom_type': "Custom ledgers need a custom type"})
        return attrs
