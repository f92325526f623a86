from django.contrib import admin
from .models import Category, Transaction, MonthHistory, YearHistory, DaybookEntry, LedgerEntry


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'icon', 'type', 'owner', 'created_at']
    list_filter = ['type']
    search_fields = ['name']
    ordering = ['name']


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    list_display = ['id', 'date', 'type', 'category', 'amount', 'description', 'owner']
    list_filter = ['type', 'date']
    search_fields = ['category', 'description']
    readonly_fields = ['created_at', 'updated_at']
    ordering = ['-date']
    date_hierarchy = 'date'


@admin.register(MonthHistory)
class MonthHistoryAdmin(admin.ModelAdmin):
    list_display = ['owner', 'year', 'month', 'day', 'income', 'expense']
    list_filter = ['year', 'month']
    ordering = ['-year', '-month', '-day']


@admin.register(YearHistory)
class YearHistoryAdmin(admin.ModelAdmin):
    list_display = ['owner', 'year', 'month', 'income', 'expense']
    list_filter = ['year']
    ordering = ['-year', '-month']


@admin.register(DaybookEntry)
class DaybookEntryAdmin(admin.ModelAdmin):
    list_display = ['id', 'date', 'entry_type', 'amount', 'description', 'reference', 'payment_method', 'status', 'owner']
    list_filter = ['entry_type', 'status', 'payment_method', 'date']
    search_fields = ['description', 'reference', 'category']
    readonly_fields = ['created_at', 'updated_at']
    ordering = ['-date']
    date_hierarchy = 'date'


@admin.register(LedgerEntry)
class LedgerEntryAdmin(admin.ModelAdmin):
    list_display = ['id', 'date', 'ledger_type', 'title', 'transaction_type', 'amount', 'owner']
    list_filter = ['ledger_type', 'transaction_type', 'date']
    search_fields = ['title', 'description', 'reference']
    readonly_fields = ['created_at', 'updated_at']
    ordering = ['-date']
    date_hierarchy = 'date'
