from django.db import models
from decimal import Decimal
from bizdesk.core.models import User


class InventoryItem(models.Model):
    """Stock-keeping item; name is unique per owner"""
    STATUS_CHOICES = [
        ('in_stock', 'In Stock'),
        ('low_stock', 'Low Stock'),
        ('out_of_stock', 'Out of Stock'),
    ]

    owner = models.ForeignKey(User, on_delete=models.CASCADE, related_name='inventory_items')
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    quantity = models.IntegerField(default=0)
    unit = models.CharField(max_length=50, default='pcs')
    price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    cost_price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    selling_price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    category = models.CharField(max_length=100, default='General')
    supplier = models.CharField(max_length=200, blank=True)
    location = models.CharField(max_length=200, blank=True)
    min_stock = models.IntegerField(default=0)
    max_stock = models.IntegerField(null=True, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='in_stock')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    def compute_status(self):
        if self.quantity <= 0:
            return 'out_of_stock'
        if self.quantity <= self.min_stock:
            return 'low_stock'
        return 'in_stock'

    def save(self, *args, **kwargs):
        # Status always follows quantity
        self.status = self.compute_status()
        update_fields = kwargs.get('update_fields')
        if update_fields is not None and 'quantity' in update_fields and 'status' not in update_fields:
            kwargs['update_fields'] = list(update_fields) + ['status']
        super().save(*args, **kwargs)

    @property
    def unit_value(self):
        return self.cost_price or self.price

    class Meta:
        db_table = 'inventory_items'
        ordering = ['name']
        unique_together = [['owner', 'name']]
        indexes = [
            models.Index(fields=['owner', 'category'], name='inv_owner_category_idx'),
            models.Index(fields=['owner', 'status'], name='inv_owner_status_idx'),
        ]


class StockEntry(models.Model):
    """A manual stock purchase; mirrored by one expense daybook entry"""
    owner = models.ForeignKey(User, on_delete=models.CASCADE, related_name='stock_entries')
    date = models.DateField()
    product_name = models.CharField(max_length=200)
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    quantity = models.PositiveIntegerField()
    description = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.product_name} x{self.quantity} ({self.date})"

    @property
    def daybook_reference(self):
        return f"STOCK-{self.pk}"

    class Meta:
        db_table = 'stock_entries'
        ordering = ['-date', '-created_at']
        verbose_name_plural = 'stock entries'
