from django.db import models
from decimal import Decimal
from bizdesk.core.models import User


class Sale(models.Model):
    """Installment sale of one inventory item to a customer"""
    PAYMENT_MODE_CHOICES = [
        ('CASH', 'Cash'),
        ('BANK', 'Bank'),
    ]
    STATUS_CHOICES = [
        ('active', 'Active'),
        ('completed', 'Completed'),
    ]

    owner = models.ForeignKey(User, on_delete=models.CASCADE, related_name='sales')
    customer = models.ForeignKey('parties.Customer', on_delete=models.PROTECT, related_name='sales')
    item = models.ForeignKey('inventory.InventoryItem', on_delete=models.PROTECT, related_name='sales')
    reference = models.CharField(max_length=100, blank=True)
    total_amount = models.DecimalField(max_digits=12, decimal_places=2)
    advance_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    payment_mode = models.CharField(max_length=10, choices=PAYMENT_MODE_CHOICES, default='CASH')
    duration = models.PositiveIntegerField(help_text="Number of monthly installments")
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='active')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.reference or f"Sale-{self.id}"

    @property
    def remaining_amount(self):
        return self.total_amount - self.advance_amount

    class Meta:
        db_table = 'sales'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['owner', 'status'], name='sale_owner_status_idx'),
            models.Index(fields=['owner', 'created_at'], name='sale_owner_created_idx'),
        ]


class Installment(models.Model):
    """One scheduled monthly payment of a sale"""
    STATUS_CHOICES = [
        ('PENDING', 'Pending'),
        ('PAID', 'Paid'),
        ('OVERDUE', 'Overdue'),
    ]
    PAYMENT_MODE_CHOICES = Sale.PAYMENT_MODE_CHOICES

    sale = models.ForeignKey(Sale, on_delete=models.CASCADE, related_name='installments')
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    due_date = models.DateField()
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='PENDING')
    payment_mode = models.CharField(max_length=10, choices=PAYMENT_MODE_CHOICES, null=True, blank=True)
    paid_at = models.DateTimeField(null=True, blank=True)
    paid_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='collected_installments')
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.sale} - {self.due_date} - {self.amount}"

    @property
    def is_paid(self):
        return self.status == 'PAID'

    class Meta:
        db_table = 'installments'
        ordering = ['due_date', 'id']
        indexes = [
            models.Index(fields=['status', 'due_date'], name='installment_status_due_idx'),
        ]
