from django.contrib import admin
from .models import Sale, Installment


class InstallmentInline(admin.TabularInline):
    model = Installment
    extra = 0
    readonly_fields = ['paid_at', 'paid_by', 'created_at']


@admin.register(Sale)
class SaleAdmin(admin.ModelAdmin):
    list_display = ['reference', 'customer', 'item', 'total_amount', 'advance_amount', 'duration', 'status', 'owner', 'created_at']
    list_filter = ['status', 'payment_mode', 'created_at']
    search_fields = ['reference', 'customer__name', 'item__name']
    readonly_fields = ['created_at', 'updated_at']
    inlines = [InstallmentInline]
    ordering = ['-created_at']


@admin.register(Installment)
class InstallmentAdmin(admin.ModelAdmin):
    list_display = ['id', 'sale', 'amount', 'due_date', 'status', 'payment_mode', 'paid_at']
    list_filter = ['status', 'payment_mode', 'due_date']
    search_fields = ['sale__reference', 'sale__customer__name']
    ordering = ['due_date']
    date_hierarchy = 'due_date'
