from django.urls import path
from .views import (
    inventory_list_create, inventory_detail, inventory_stats,
    inventory_categories, inventory_category_overview,
    stock_list_create, stock_detail,
)

urlpatterns = [
    # Inventory endpoints
    path('inventory/', inventory_list_create, name='inventory-list-create'),
    path('inventory/stats/', inventory_stats, name='inventory-stats'),
    path('inventory/categories/', inventory_categories, name='inventory-categories'),
    path('inventory/category-overview/', inventory_category_overview, name='inventory-category-overview'),
    path('inventory/<int:pk>/', inventory_detail, name='inventory-detail'),

    # Stock entry endpoints
    path('stock/', stock_list_create, name='stock-list-create'),
    path('stock/<int:pk>/', stock_detail, name='stock-detail'),
]
