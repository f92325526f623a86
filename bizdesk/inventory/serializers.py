from rest_framework import serializers
from .models import InventoryItem, StockEntry


class InventoryItemSerializer(serializers.ModelSerializer):
    purchase_items_count = serializers.SerializerMethodField()
    sales_count = serializers.SerializerMethodField()

    class Meta:
        model = InventoryItem
        fields = [
            'id', 'name', 'description', 'quantity', 'unit', 'price', 'cost_price', 'selling_price',
            'category', 'supplier', 'location', 'min_stock', 'max_stock', 'status',
            'purchase_items_count', 'sales_count', 'created_at', 'updated_at'
        ]
        read_only_fields = ['status', 'created_at', 'updated_at']

    def get_purchase_items_count(self, obj):
        count = getattr(obj, 'purchase_items_count', None)
        return count if count is not None else obj.purchase_items.count()

    def get_sales_count(self, obj):
        count = getattr(obj, 'sales_count', None)
        return count if count is not None else obj.sales.count()

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Product name is required")
        request = self.context.get('request')
        if request is not None:
            conflicts = InventoryItem.objects.filter(owner=request.user, name=value)
            if self.instance is not None:
                conflicts = conflicts.exclude(pk=self.instance.pk)
            if conflicts.exists():
                raise serializers.ValidationError("An inventory item with this name already exists")
        return value

    def validate_quantity(self, value):
        if value < 0:
            raise serializers.ValidationError("Quantity cannot be negative")
        return value

    def validate_price(self, value):
        if value <= 0:
            raise serializers.ValidationError("Price must be greater than 0")
        return value

    def validate(self, attrs):
        for field in ('cost_price', 'selling_price'):
            value = attrs.get(field)
            if value is not None and value <= 0:
                raise serializers.ValidationError({field: f"{field.replace('_', ' ').capitalize()} must be greater than 0"})
        min_stock = attrs.get('min_stock', getattr(self.instance, 'min_stock', 0))
        max_stock = attrs.get('max_stock', getattr(self.instance, 'max_stock', None))
        if max_stock is not None and min_stock is not None and max_stock < min_stock:
            raise serializers.ValidationError({'max_stock': "Max stock cannot be below min stock"})
        return attrs


class StockEntrySerializer(serializers.ModelSerializer):
    daybook_entry_id = serializers.SerializerMethodField()

    class Meta:
        model = StockEntry
        fields = ['id', 'date', 'product_name', 'amount', 'quantity', 'description', 'daybook_entry_id', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']

    def get_daybook_entry_id(self, obj):
        entry = getattr(obj, 'daybook_entry', None)
        return entry.pk if entry else None

    def validate_product_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Product name is required")
        return value

    def validate_amount(self, value):
        if value <= 0:
            raise serializers.ValidationError("Amount must be greater than 0")
        return value

    def validate_quantity(self, value):
        if value <= 0:
            raise serializers.ValidationError("Quantity must be greater than 0")
        return value
