from django.conf import settings
from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers

from .models import User, UserSettings, AuditLog


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ['id', 'username', 'email', 'first_name', 'last_name', 'phone', 'is_active', 'is_staff', 'created_at', 'updated_at']
        read_only_fields = ['is_active', 'is_staff', 'created_at', 'updated_at']


class UserCreateSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True, validators=[validate_password])
    password_confirm = serializers.CharField(write_only=True)

    class Meta:
        model = User
        fields = ['username', 'email', 'password', 'password_confirm', 'first_name', 'last_name', 'phone']

    def validate(self, attrs):
        if attrs['password'] != attrs['password_confirm']:
            raise serializers.ValidationError({"password": "Passwords don't match"})
        return attrs

    def create(self, validated_data):
        validated_data.pop('password_confirm')
        password = validated_data.pop('password')
        user = User.objects.create(**validated_data, is_active=True)
        user.set_password(password)
        user.save()
        return user


class UserSettingsSerializer(serializers.ModelSerializer):
    currency_name = serializers.SerializerMethodField()
    currency_symbol = serializers.SerializerMethodField()
    rate = serializers.SerializerMethodField()

    class Meta:
        model = UserSettings
        fields = ['id', 'currency', 'currency_name', 'currency_symbol', 'rate', 'updated_at']
        read_only_fields = ['currency', 'updated_at']

    def get_currency_name(self, obj):
        return settings.DEFAULT_CURRENCY['name']

    def get_currency_symbol(self, obj):
        return settings.DEFAULT_CURRENCY['symbol']

    def get_rate(self, obj):
        return settings.DEFAULT_CURRENCY['rate']


class AuditLogSerializer(serializers.ModelSerializer):
    user = UserSerializer(read_only=True)

    class Meta:
        model = AuditLog
        fields = ['id', 'user', 'action', 'model_name', 'object_id', 'object_name',
                  'object_reference', 'changes', 'ip_address', 'created_at']
