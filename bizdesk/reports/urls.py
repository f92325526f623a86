from django.urls import path
from . import views

urlpatterns = [
    path('dashboard/overview/', views.dashboard_overview, name='dashboard-overview'),
    path('dashboard/stats/', views.dashboard_stats, name='dashboard-stats'),
    path('dashboard/chart-data/', views.dashboard_chart_data, name='dashboard-chart-data'),
    path('dashboard/daily-stats/', views.dashboard_daily_stats, name='dashboard-daily-stats'),
    path('dashboard/categories/', views.dashboard_categories, name='dashboard-categories'),
]
