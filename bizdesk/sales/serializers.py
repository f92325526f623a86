from rest_framework import serializers
from django.utils import timezone
from bizdesk.inventory.models import InventoryItem
from bizdesk.parties.models import Customer
from .models import Sale, Installment


class InstallmentSerializer(serializers.ModelSerializer):
    sale_reference = serializers.CharField(source='sale.reference', read_only=True)
    customer_id = serializers.IntegerField(source='sale.customer_id', read_only=True)
    customer_name = serializers.CharField(source='sale.customer.name', read_only=True)
    item_name = serializers.CharField(source='sale.item.name', read_only=True)
    paid_by_username = serializers.CharField(source='paid_by.username', read_only=True)
    is_overdue = serializers.SerializerMethodField()

    class Meta:
        model = Installment
        fields = [
            'id', 'sale', 'sale_reference', 'customer_id', 'customer_name', 'item_name', 'amount',
            'due_date', 'status', 'is_overdue', 'payment_mode', 'paid_at', 'paid_by', 'paid_by_username',
            'notes', 'created_at'
        ]
        read_only_fields = ['sale', 'status', 'payment_mode', 'paid_at', 'paid_by', 'created_at']

    def get_is_overdue(self, obj):
        return obj.status != 'PAID' and obj.due_date < timezone.localdate()

    def validate_amount(self, value):
        if value <= 0:
            raise serializers.ValidationError("Amount must be greater than 0")
        return value


class InstallmentPaymentSerializer(serializers.Serializer):
    payment_mode = serializers.ChoiceField(choices=Installment.PAYMENT_MODE_CHOICES)


class SaleAmountValidationMixin:
    def validate_total_amount(self, value):
        if value <= 0:
            raise serializers.ValidationError("Total amount must be greater than 0")
        return value

    def validate_advance_amount(self, value):
        if value < 0:
            raise serializers.ValidationError("Advance amount cannot be negative")
        return value

    def validate_duration(self, value):
        if value < 1:
            raise serializers.ValidationError("Duration must be at least one month")
        return value


class SaleSerializer(SaleAmountValidationMixin, serializers.ModelSerializer):
    customer = serializers.PrimaryKeyRelatedField(queryset=Customer.objects.all())
    item = serializers.PrimaryKeyRelatedField(queryset=InventoryItem.objects.all())
    customer_name = serializers.CharField(source='customer.name', read_only=True)
    item_name = serializers.CharField(source='item.name', read_only=True)
    remaining_amount = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    installments = InstallmentSerializer(many=True, read_only=True)

    class Meta:
        model = Sale
        fields = [
            'id', 'customer', 'customer_name', 'item', 'item_name', 'reference', 'total_amount',
            'advance_amount', 'remaining_amount', 'payment_mode', 'duration', 'status',
            'installments', 'created_at', 'updated_at'
        ]
        read_only_fields = ['status', 'created_at', 'updated_at']

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        request = self.context.get('request')
        if request is not None:
            self.fields['customer'].queryset = Customer.objects.filter(owner=request.user)
            self.fields['item'].queryset = InventoryItem.objects.filter(owner=request.user)

    def validate(self, attrs):
        if attrs.get('advance_amount', 0) > attrs.get('total_amount', 0):
            raise serializers.ValidationError({'advance_amount': "Advance amount cannot exceed the total amount"})
        return attrs


class SaleUpdateSerializer(SaleAmountValidationMixin, serializers.ModelSerializer):
    """Fields that may change on an unpaid sale"""

    class Meta:
        model = Sale
        fields = ['reference', 'total_amount', 'advance_amount', 'payment_mode', 'duration']

