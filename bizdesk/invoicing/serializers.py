from rest_framework import serializers
from decimal import Decimal
from django.db import transaction
from bizdesk.parties.models import Customer
from .models import Invoice, InvoiceItem


class InvoiceItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = InvoiceItem
        fields = ['id', 'description', 'quantity', 'rate', 'amount']
        read_only_fields = ['amount']

    def validate_quantity(self, value):
        if value <= 0:
            raise serializers.ValidationError("Quantity must be greater than 0")
        return value

    def validate_rate(self, value):
        if value < 0:
            raise serializers.ValidationError("Rate cannot be negative")
        return value


class InvoiceSerializer(serializers.ModelSerializer):
    customer = serializers.PrimaryKeyRelatedField(queryset=Customer.objects.all(), required=False, allow_null=True)
    customer_name = serializers.CharField(source='customer.name', read_only=True)
    items = InvoiceItemSerializer(many=True)

    class Meta:
        model = Invoice
        fields = [
            'id', 'customer', 'customer_name', 'invoice_number', 'issue_date', 'due_date',
            'tax_rate', 'discount', 'subtotal', 'tax_amount', 'total', 'status', 'notes',
            'items', 'created_at', 'updated_at'
        ]
        read_only_fields = ['subtotal', 'tax_amount', 'total', 'created_at', 'updated_at']

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        request = self.context.get('request')
        if request is not None:
            self.fields['customer'].queryset = Customer.objects.filter(owner=request.user)

    def validate_invoice_number(self, value):
        value = value.strip()
        request = self.context.get('request')
        if request is not None:
            duplicates = Invoice.objects.filter(owner=request.user, invoice_number=value)
            if self.instance is not None:
                duplicates = duplicates.exclude(pk=self.instance.pk)
            if duplicates.exists():
                raise serializers.ValidationError("Invoice number already exists")
        return value

    def validate_items(self, value):
        if not value:
            raise serializers.ValidationError("At least one item is required")
        return value

    def validate_tax_rate(self, value):
        if value < 0 or value > 100:
            raise serializers.ValidationError("Tax rate must be between 0 and 100")
        return value

    def validate_discount(self, value):
        if value < 0:
            raise serializers.ValidationError("Discount cannot be negative")
        return value

    def validate(self, attrs):
        issue_date = attrs.get('issue_date', getattr(self.instance, 'issue_date', None))
        due_date = attrs.get('due_date', getattr(self.instance, 'due_date', None))
        if issue_date and due_date and due_date < issue_date:
            raise serializers.ValidationError({'due_date': "Due date cannot be before the issue date"})

        discount = attrs.get('discount', getattr(self.instance, 'discount', Decimal('0.00')))
        if 'items' in attrs:
            subtotal = sum(
                ((item.get('quantity', Decimal('1.00')) * item['rate']).quantize(Decimal('0.01')) for item in attrs['items']),
                Decimal('0.00')
            )
        elif self.instance is not None:
            subtotal = sum((item.amount for item in self.instance.items.all()), Decimal('0.00'))
        else:
            subtotal = Decimal('0.00')
        if discount > subtotal:
            raise serializers.ValidationError({'discount': "Discount cannot exceed the subtotal"})
        return attrs

    def _write_items(self, invoice, items_data):
        invoice.items.all().delete()
        for item_data in items_data:
            InvoiceItem.objects.create(invoice=invoice, **item_data)
        invoice.recalculate_totals()
        invoice.save()

    def create(self, validated_data):
        items_data = validated_data.pop('items')
        validated_data['status'] = 'draft'
        with transaction.atomic():
            invoice = Invoice.objects.create(**validated_data)
            self._write_items(invoice, items_data)
        return invoice

    def update(self, instance, validated_data):
        items_data = validated_data.pop('items', None)
        with transaction.atomic():
            for field, value in validated_data.items():
                setattr(instance, field, value)
            if items_data is not None:
                self._write_items(instance, items_data)
            else:
                instance.recalculate_totals()
                instance.save()
        return instance
