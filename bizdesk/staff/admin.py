from django.contrib import admin
from .models import StaffMember


@admin.register(StaffMember)
class StaffMemberAdmin(admin.ModelAdmin):
    list_display = ['name', 'position', 'department', 'salary', 'joining_date', 'status', 'owner']
    list_filter = ['status', 'department']
    search_fields = ['name', 'email', 'phone', 'position']
    ordering = ['name']
