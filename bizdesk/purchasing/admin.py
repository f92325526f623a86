from django.contrib import admin
from .models import Purchase, PurchaseItem


class PurchaseItemInline(admin.TabularInline):
    model = PurchaseItem
    extra = 0
    readonly_fields = ['inventory_item', 'quantity', 'unit_price', 'total_price', 'created_at']


@admin.register(Purchase)
class PurchaseAdmin(admin.ModelAdmin):
    list_display = ['id', 'date', 'product_name', 'quantity', 'unit_price', 'total_amount', 'supplier', 'payment_method', 'status', 'owner']
    list_filter = ['status', 'payment_method', 'date']
    search_fields = ['product_name', 'description', 'supplier__name']
    readonly_fields = ['created_at', 'updated_at']
    inlines = [PurchaseItemInline]
    ordering = ['-date']
    date_hierarchy = 'date'
