"""
URL configuration for the bizdesk backend.

Every app mounts its routes under /api/v1/.
"""
from django.contrib import admin
from django.urls import path, include

admin.site.site_header = "Bizdesk Admin Panel"
admin.site.site_title = "Bizdesk Admin Portal"
admin.site.index_title = "Welcome to the Bizdesk Admin Portal"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/v1/', include('bizdesk.core.urls')),
    path('api/v1/', include('bizdesk.parties.urls')),
    path('api/v1/', include('bizdesk.inventory.urls')),
    path('api/v1/', include('bizdesk.purchasing.urls')),
    path('api/v1/', include('bizdesk.sales.urls')),
    path('api/v1/', include('bizdesk.invoicing.urls')),
    path('api/v1/', include('bizdesk.staff.urls')),
    path('api/v1/', include('bizdesk.books.urls')),
    path('api/v1/', include('bizdesk.reports.urls')),
]
