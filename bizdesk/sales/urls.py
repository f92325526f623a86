from django.urls import path
from .views import (
    sale_list_create, sale_detail,
    installment_list, installment_detail, installment_pay, installments_due,
    customer_statement,
)

urlpatterns = [
    # Sale endpoints
    path('sales/', sale_list_create, name='sale-list-create'),
    path('sales/<int:pk>/', sale_detail, name='sale-detail'),

    # Installment endpoints
    path('installments/', installment_list, name='installment-list'),
    path('installments/due/', installments_due, name='installments-due'),
    path('installments/<int:pk>/', installment_detail, name='installment-detail'),
    path('installments/<int:pk>/pay/', installment_pay, name='installment-pay'),

    # Customer statement
    path('customers/<int:pk>/invoice/', customer_statement, name='customer-statement'),
]
