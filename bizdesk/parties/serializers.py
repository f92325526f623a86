from rest_framework import serializers
from .models import Customer, Supplier, Reference


class CustomerSerializer(serializers.ModelSerializer):
    class Meta:
        model = Customer
        fields = [
            'id', 'name', 'email', 'phone', 'address', 'notes', 'customer_type', 'status',
            'guarantor_name', 'guarantor_phone', 'guarantor_address', 'created_at', 'updated_at'
        ]
        read_only_fields = ['created_at', 'updated_at']

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Name is required")
        return value


class SupplierSerializer(serializers.ModelSerializer):
    class Meta:
        model = Supplier
        fields = ['id', 'name', 'phone', 'email', 'address', 'contact_person', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']


class ReferenceSerializer(serializers.ModelSerializer):
    class Meta:
        model = Reference
        fields = ['id', 'name', 'reference_type', 'created_at']
        read_only_fields = ['created_at']

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Name is required")
        request = self.context.get('request')
        if request and Reference.objects.filter(owner=request.user, name__iexact=value).exists():
            raise serializers.ValidationError("Reference already exists")
        return value
