from django.conf import settings
from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """Extended user model with additional fields"""
    phone = models.CharField(max_length=20, blank=True, null=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    @property
    def display_name(self):
        return self.first_name or self.username or 'User'

    class Meta:
        db_table = 'users'


class UserSettings(models.Model):
    """Per-user preferences (currently only the display currency)"""
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='user_settings')
    currency = models.CharField(max_length=10, default='USD')
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.user.username} - {self.currency}"

    @classmethod
    def default_currency_code(cls):
        return settings.DEFAULT_CURRENCY['code']

    class Meta:
        db_table = 'user_settings'
        verbose_name_plural = 'user settings'


class AuditLog(models.Model):
    """Audit log for critical operations"""
    ACTION_CHOICES = [
        ('create', 'Create'),
        ('update', 'Update'),
        ('delete', 'Delete'),
        ('transaction_create', 'Transaction Created'),
        ('transaction_delete', 'Transaction Deleted'),
        ('purchase_create', 'Purchase Created'),
        ('purchase_update', 'Purchase Updated'),
        ('purchase_delete', 'Purchase Deleted'),
        ('sale_create', 'Sale Created'),
        ('sale_update', 'Sale Updated'),
        ('sale_delete', 'Sale Deleted'),
        ('installment_pay', 'Installment Paid'),
        ('stock_create', 'Stock Entry Created'),
        ('invoice_create', 'Invoice Created'),
    ]

    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, related_name='audit_logs')
    action = models.CharField(max_length=50, choices=ACTION_CHOICES)
    model_name = models.CharField(max_length=100)
    object_id = models.CharField(max_length=100)
    object_name = models.CharField(max_length=255, blank=True, null=True, help_text="Human-readable name of the object (e.g., product name, invoice number)")
    object_reference = models.CharField(max_length=255, blank=True, null=True, help_text="Reference identifier (e.g., sale reference, invoice number)")
    changes = models.JSONField(default=dict, blank=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'audit_logs'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['-created_at'], name='audit_created_idx'),
            models.Index(fields=['action'], name='audit_action_idx'),
            models.Index(fields=['model_name'], name='audit_model_idx'),
            models.Index(fields=['object_reference'], name='audit_objref_idx'),
        ]
