from django.contrib import admin
from .models import InventoryItem, StockEntry


@admin.register(InventoryItem)
class InventoryItemAdmin(admin.ModelAdmin):
    list_display = ['name', 'category', 'quantity', 'unit', 'price', 'cost_price', 'status', 'owner', 'updated_at']
    list_filter = ['status', 'category']
    search_fields = ['name', 'description', 'supplier']
    readonly_fields = ['status', 'created_at', 'updated_at']
    ordering = ['name']


@admin.register(StockEntry)
class StockEntryAdmin(admin.ModelAdmin):
    list_display = ['id', 'date', 'product_name', 'quantity', 'amount', 'owner', 'created_at']
    list_filter = ['date']
    search_fields = ['product_name', 'description']
    ordering = ['-date']
    date_hierarchy = 'date'
