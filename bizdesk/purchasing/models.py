from django.db import models
from decimal import Decimal
from bizdesk.core.models import User


class Purchase(models.Model):
    """Stock purchase of a single product"""
    PAYMENT_METHOD_CHOICES = [
        ('CASH', 'Cash'),
        ('BANK', 'Bank'),
        ('MOBILE', 'Mobile'),
    ]
    STATUS_CHOICES = [
        ('PENDING', 'Pending'),
        ('COMPLETED', 'Completed'),
        ('CANCELLED', 'Cancelled'),
    ]

    owner = models.ForeignKey(User, on_delete=models.CASCADE, related_name='purchases')
    date = models.DateField()
    product_name = models.CharField(max_length=200)
    quantity = models.PositiveIntegerField()
    unit_price = models.DecimalField(max_digits=12, decimal_places=2)
    total_amount = models.DecimalField(max_digits=12, decimal_places=2)
    description = models.TextField(blank=True)
    category = models.CharField(max_length=100, blank=True)
    supplier = models.ForeignKey('parties.Supplier', on_delete=models.SET_NULL, null=True, blank=True, related_name='purchases')
    payment_method = models.CharField(max_length=10, choices=PAYMENT_METHOD_CHOICES, default='CASH')
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='COMPLETED')
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Purchase-{self.id}: {self.product_name}"

    @property
    def reference(self):
        return f"Purchase #{self.pk}"

    class Meta:
        db_table = 'purchases'
        ordering = ['-date', '-created_at']
        indexes = [
            models.Index(fields=['owner', 'date'], name='purchase_owner_date_idx'),
        ]


class PurchaseItem(models.Model):
    """Link between a purchase and the inventory item it stocked"""
    purchase = models.ForeignKey(Purchase, on_delete=models.CASCADE, related_name='items')
    inventory_item = models.ForeignKey('inventory.InventoryItem', on_delete=models.PROTECT, related_name='purchase_items')
    quantity = models.PositiveIntegerField()
    unit_price = models.DecimalField(max_digits=12, decimal_places=2)
    total_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.purchase} - {self.inventory_item.name} x {self.quantity}"

    def get_line_total(self):
        return self.quantity * self.unit_price

    class Meta:
        db_table = 'purchase_items'
        ordering = ['-created_at']
