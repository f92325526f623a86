from django.urls import path
from .views import invoice_list_create, invoice_detail, invoice_stats

urlpatterns = [
    path('invoices/', invoice_list_create, name='invoice-list-create'),
    path('invoices/stats/', invoice_stats, name='invoice-stats'),
    path('invoices/<int:pk>/', invoice_detail, name='invoice-detail'),
]
