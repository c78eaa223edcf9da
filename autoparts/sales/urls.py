from django.urls import path
from .views import (
    sales_invoice_list_create, sales_invoice_detail, sales_invoice_cancel, sales_invoice_status,
    credit_list_create, credit_detail, credit_cancel, credit_status,
    warranty_list_create, warranty_detail, warranty_status,
    sales_history,
)

urlpatterns = [
    # Sales invoice endpoints
    path('sales-invoices/', sales_invoice_list_create, name='sales-invoice-list-create'),
    path('sales-invoices/<int:pk>/', sales_invoice_detail, name='sales-invoice-detail'),
    path('sales-invoices/<int:pk>/cancel/', sales_invoice_cancel, name='sales-invoice-cancel'),
    path('sales-invoices/<int:pk>/status/', sales_invoice_status, name='sales-invoice-status'),

    # Credit endpoints
    path('credits/', credit_list_create, name='credit-list-create'),
    path('credits/<int:pk>/', credit_detail, name='credit-detail'),
    path('credits/<int:pk>/cancel/', credit_cancel, name='credit-cancel'),
    path('credits/<int:pk>/status/', credit_status, name='credit-status'),

    # Warranty endpoints
    path('warranties/', warranty_list_create, name='warranty-list-create'),
    path('warranties/<int:pk>/', warranty_detail, name='warranty-detail'),
    path('warranties/<int:pk>/status/', warranty_status, name='warranty-status'),

    # Sales history lookup
    path('sales-history/<str:sku>/', sales_history, name='sales-history'),
]
