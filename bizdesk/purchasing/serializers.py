from rest_framework import serializers
from bizdesk.parties.models import Supplier
from .models import Purchase, PurchaseItem


class PurchaseItemSerializer(serializers.ModelSerializer):
    inventory_item_name = serializers.CharField(source='inventory_item.name', read_only=True)
    line_total = serializers.SerializerMethodField()

    class Meta:
        model = PurchaseItem
        fields = ['id', 'inventory_item', 'inventory_item_name', 'quantity', 'unit_price', 'total_price', 'line_total', 'created_at']
        read_only_fields = fields

    def get_line_total(self, obj):
        return obj.get_line_total()


class PurchaseSerializer(serializers.ModelSerializer):
    supplier = serializers.PrimaryKeyRelatedField(queryset=Supplier.objects.all(), required=False, allow_null=True)
    supplier_name = serializers.CharField(source='supplier.name', read_only=True)
    items = PurchaseItemSerializer(many=True, read_only=True)
    daybook_entry_id = serializers.SerializerMethodField()
    total_amount = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)

    class Meta:
        model = Purchase
        fields = [
            'id', 'date', 'product_name', 'quantity', 'unit_price', 'total_amount', 'description',
            'category', 'supplier', 'supplier_name', 'payment_method', 'status', 'notes',
            'items', 'daybook_entry_id', 'created_at', 'updated_at'
        ]
        read_only_fields = ['created_at', 'updated_at']

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        request = self.context.get('request')
        if request is not None:
            self.fields['supplier'].queryset = Supplier.objects.filter(owner=request.user)

    def get_daybook_entry_id(self, obj):
        entry = getattr(obj, 'daybook_entry', None)
        return entry.pk if entry else None

    def validate_product_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Product name is required")
        return value

    def validate_quantity(self, value):
        if value <= 0:
            raise serializers.ValidationError("Quantity must be greater than 0")
        return value

    def validate_unit_price(self, value):
        if value <= 0:
            raise serializers.ValidationError("Unit price must be greater than 0")
        return value

    def validate_total_amount(self, value):
        if value is not None and value <= 0:
            raise serializers.ValidationError("Total amount must be greater than 0")
        return value
