from django.urls import path
from .views import staff_list_create, staff_detail

urlpatterns = [
    path('staff/', staff_list_create, name='staff-list-create'),
    path('staff/<int:pk>/', staff_detail, name='staff-detail'),
]
