from django.contrib import admin
from .models import Customer, Supplier, Reference


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ['name', 'phone', 'email', 'customer_type', 'status', 'owner', 'created_at']
    list_filter = ['customer_type', 'status', 'created_at']
    search_fields = ['name', 'phone', 'email', 'guarantor_name']
    ordering = ['name']


@admin.register(Supplier)
class SupplierAdmin(admin.ModelAdmin):
    list_display = ['name', 'contact_person', 'phone', 'email', 'owner', 'created_at']
    list_filter = ['created_at']
    search_fields = ['name', 'contact_person', 'email']
    ordering = ['name']


@admin.register(Reference)
class ReferenceAdmin(admin.ModelAdmin):
    list_display = ['name', 'reference_type', 'owner', 'created_at']
    list_filter = ['reference_type']
    search_fields = ['name']
    ordering = ['name']
