from django.urls import path
from .views import (
    transaction_list_create, transaction_detail,
    category_list_create, category_detail,
    history_periods, history_data,
    stats_balance, stats_categories,
    daybook_list_create, daybook_detail, daybook_overdue, daybook_summary,
    ledger_list_create, ledger_detail, ledger_stats,
)

urlpatterns = [
    # Transaction endpoints
    path('transactions/', transaction_list_create, name='transaction-list-create'),
    path('transactions/<int:pk>/', transaction_detail, name='transaction-detail'),

    # Category endpoints
    path('categories/', category_list_create, name='category-list-create'),
    path('categories/<int:pk>/', category_detail, name='category-detail'),

    # History endpoints
    path('history-periods/', history_periods, name='history-periods'),
    path('history-data/', history_data, name='history-data'),

    # Stats endpoints
    path('stats/balance/', stats_balance, name='stats-balance'),
    path('stats/categories/', stats_categories, name='stats-categories'),

    # Daybook endpoints
    path('daybook/', daybook_list_create, name='daybook-list-create'),
    path('daybook/overdue/', daybook_overdue, name='daybook-overdue'),
    path('daybook/summary/', daybook_summary, name='daybook-summary'),
    path('daybook/<int:pk>/', daybook_detail, name='daybook-detail'),

    # Ledger endpoints
    path('ledgers/', ledger_list_create, name='ledger-list-create'),
    path('ledgers/stats/', ledger_stats, name='ledger-stats'),
    path('ledgers/<int:pk>/', ledger_detail, name='ledger-detail'),
]
