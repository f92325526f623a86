from django.db import models
from decimal import Decimal
from bizdesk.core.models import User

TYPE_CHOICES = [
    ('income', 'Income'),
    ('expense', 'Expense'),
]

ICON_BY_TYPE = {
    'income': '💰',
    'expense': '💸',
}


class Category(models.Model):
    """Income or expense category; unique per (owner, name, type)"""
    owner = models.ForeignKey(User, on_delete=models.CASCADE, related_name='categories')
    name = models.CharField(max_length=100)
    icon = models.CharField(max_length=20, blank=True)
    type = models.CharField(max_length=10, choices=TYPE_CHOICES, default='income')
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.icon} {self.name} ({self.type})".strip()

    class Meta:
        db_table = 'categories'
        ordering = ['name']
        verbose_name_plural = 'categories'
        constraints = [
            models.UniqueConstraint(fields=['owner', 'name', 'type'], name='unique_category_per_owner_type'),
        ]


class Transaction(models.Model):
    """A categorised income or expense; category name and icon are copied onto the row"""
    owner = models.ForeignKey(User, on_delete=models.CASCADE, related_name='transactions')
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    description = models.CharField(max_length=255, blank=True)
    date = models.DateField()
    type = models.CharField(max_length=10, choices=TYPE_CHOICES, default='income')
    category = models.CharField(max_length=100)
    category_icon = models.CharField(max_length=20, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.type} {self.amount} - {self.category} ({self.date})"

    class Meta:
        db_table = 'transactions'
        ordering = ['-date', '-created_at']
        indexes = [
            models.Index(fields=['owner', 'date'], name='txn_owner_date_idx'),
            models.Index(fields=['owner', 'type', 'category'], name='txn_owner_type_cat_idx'),
        ]


class MonthHistory(models.Model):
    """Running income/expense totals per owner per day"""
    owner = models.ForeignKey(User, on_delete=models.CASCADE, related_name='month_history')
    day = models.PositiveSmallIntegerField()
    month = models.PositiveSmallIntegerField()
    year = models.PositiveSmallIntegerField()
    income = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    expense = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))

    def __str__(self):
        return f"{self.year}-{self.month:02d}-{self.day:02d}"

    class Meta:
        db_table = 'month_history'
        ordering = ['year', 'month', 'day']
        verbose_name_plural = 'month history'
        constraints = [
            models.UniqueConstraint(fields=['owner', 'day', 'month', 'year'], name='unique_month_history_day'),
        ]


class YearHistory(models.Model):
    """Running income/expense totals per owner per month"""
    owner = models.ForeignKey(User, on_delete=models.CASCADE, related_name='year_history')
    month = models.PositiveSmallIntegerField()
    year = models.PositiveSmallIntegerField()
    income = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    expense = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))

    def __str__(self):
        return f"{self.year}-{self.month:02d}"

    class Meta:
        db_table = 'year_history'
        ordering = ['year', 'month']
        verbose_name_plural = 'year history'
        constraints = [
            models.UniqueConstraint(fields=['owner', 'month', 'year'], name='unique_year_history_month'),
        ]


class DaybookEntry(models.Model):
    """Cash journal entry; may be linked to the record that produced it"""
    PAYMENT_METHOD_CHOICES = [
        ('cash', 'Cash'),
        ('bank', 'Bank'),
        ('mobile', 'Mobile'),
    ]
    STATUS_CHOICES = [
        ('completed', 'Completed'),
        ('pending', 'Pending'),
        ('cancelled', 'Cancelled'),
    ]

    owner = models.ForeignKey(User, on_delete=models.CASCADE, related_name='daybook_entries')
    date = models.DateField()
    entry_type = models.CharField(max_length=10, choices=TYPE_CHOICES)
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    description = models.CharField(max_length=255)
    reference = models.CharField(max_length=100, blank=True)
    category = models.CharField(max_length=100, blank=True)
    payment_method = models.CharField(max_length=10, choices=PAYMENT_METHOD_CHOICES, default='cash')
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='completed')
    attachments = models.JSONField(default=list, blank=True)
    notes = models.TextField(blank=True)
    customer = models.ForeignKey('parties.Customer', on_delete=models.SET_NULL, null=True, blank=True, related_name='daybook_entries')
    purchase = models.OneToOneField('purchasing.Purchase', on_delete=models.CASCADE, null=True, blank=True, related_name='daybook_entry')
    stock_entry = models.OneToOneField('inventory.StockEntry', on_delete=models.CASCADE, null=True, blank=True, related_name='daybook_entry')
    installment = models.ForeignKey('sales.Installment', on_delete=models.SET_NULL, null=True, blank=True, related_name='daybook_entries')
    sale = models.ForeignKey('sales.Sale', on_delete=models.SET_NULL, null=True, blank=True, related_name='daybook_entries')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.date} {self.entry_type} {self.amount} - {self.description}"

    class Meta:
        db_table = 'daybook_entries'
        ordering = ['-date', '-created_at']
        verbose_name_plural = 'daybook entries'
        indexes = [
            models.Index(fields=['owner', 'date'], name='daybook_owner_date_idx'),
            models.Index(fields=['owner', 'entry_type', 'status'], name='daybook_owner_type_idx'),
        ]


class LedgerEntry(models.Model):
    """Credit/debit entry in one of the user's ledgers"""
    LEDGER_TYPE_CHOICES = [
        ('BANK', 'Bank'),
        ('EXPENSE', 'Expense'),
        ('SALARY', 'Salary'),
        ('PURCHASE', 'Purchase'),
        ('SALE', 'Sale'),
        ('CUSTOMER', 'Customer'),
        ('CUSTOM', 'Custom'),
    ]
    TRANSACTION_TYPE_CHOICES = [
        ('DEBIT', 'Debit'),
        ('CREDIT', 'Credit'),
    ]
    PAYMENT_METHOD_CHOICES = [
        ('CASH', 'Cash'),
        ('BANK', 'Bank'),
        ('MOBILE', 'Mobile'),
    ]

    owner = models.ForeignKey(User, on_delete=models.CASCADE, related_name='ledger_entries')
    ledger_type = models.CharField(max_length=20, choices=LEDGER_TYPE_CHOICES)
    custom_type = models.CharField(max_length=100, blank=True)
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    transaction_type = models.CharField(max_length=10, choices=TRANSACTION_TYPE_CHOICES)
    date = models.DateField()
    reference = models.CharField(max_length=100, blank=True)
    category = models.CharField(max_length=100, blank=True)
    payment_method = models.CharField(max_length=10, choices=PAYMENT_METHOD_CHOICES, null=True, blank=True)
    tags = models.JSONField(default=list, blank=True)
    customer = models.ForeignKey('parties.Customer', on_delete=models.SET_NULL, null=True, blank=True, related_name='ledger_entries')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.ledger_type} {self.transaction_type} {self.amount} - {self.title}"

    @property
    def signed_amount(self):
        return self.amount if self.transaction_type == 'CREDIT' else -self.amount

    class Meta:
        db_table = 'ledger_entries'
        ordering = ['-date', '-created_at']
        verbose_name_plural = 'ledger entries'
        indexes = [
            models.Index(fields=['owner', 'ledger_type'], name='ledger_owner_type_idx'),
            models.Index(fields=['owner', 'date'], name='ledger_owner_date_idx'),
        ]
