from rest_framework import serializers
from .models import StaffMember


class StaffMemberSerializer(serializers.ModelSerializer):
    documents = serializers.ListField(child=serializers.CharField(), required=False)

    class Meta:
        model = StaffMember
        fields = [
            'id', 'name', 'email', 'phone', 'address', 'position', 'department', 'salary',
            'joining_date', 'status', 'documents', 'notes', 'created_at', 'updated_at'
        ]
        read_only_fields = ['created_at', 'updated_at']

    def validate_salary(self, value):
        if value < 0:
            raise serializers.ValidationError("Salary cannot be negative")
        return value
