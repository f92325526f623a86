from django.db import models
from bizdesk.core.models import User


class Customer(models.Model):
    """Customers, optionally with a guarantor for installment sales"""
    TYPE_CHOICES = [
        ('individual', 'Individual'),
        ('company', 'Company'),
    ]
    STATUS_CHOICES = [
        ('active', 'Active'),
        ('inactive', 'Inactive'),
    ]

    owner = models.ForeignKey(User, on_delete=models.CASCADE, related_name='customers')
    name = models.CharField(max_length=200)
    email = models.EmailField(blank=True)
    phone = models.CharField(max_length=20, blank=True)
    address = models.TextField(blank=True)
    notes = models.TextField(blank=True)
    customer_type = models.CharField(max_length=20, choices=TYPE_CHOICES, default='individual')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='active')
    guarantor_name = models.CharField(max_length=200, blank=True)
    guarantor_phone = models.CharField(max_length=20, blank=True)
    guarantor_address = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'customers'
        ordering = ['name']
        indexes = [
            models.Index(fields=['owner', 'name'], name='customer_owner_name_idx'),
        ]


class Supplier(models.Model):
    """Suppliers"""
    owner = models.ForeignKey(User, on_delete=models.CASCADE, related_name='suppliers')
    name = models.CharField(max_length=200)
    phone = models.CharField(max_length=20, blank=True)
    email = models.EmailField(blank=True)
    address = models.TextField(blank=True)
    contact_person = models.CharField(max_length=200, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'suppliers'
        ordering = ['name']


class Reference(models.Model):
    """Named references (banks, ledgers, customers) offered when recording entries"""
    TYPE_CHOICES = [
        ('ledger', 'Ledger'),
        ('bank', 'Bank'),
        ('customer', 'Customer'),
    ]

    owner = models.ForeignKey(User, on_delete=models.CASCADE, related_name='references')
    name = models.CharField(max_length=200)
    reference_type = models.CharField(max_length=20, choices=TYPE_CHOICES, default='ledger')
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'references'
        ordering = ['name']
        unique_together = [['owner', 'name']]
