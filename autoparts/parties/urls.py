from django.urls import path
from .views import (
    customer_list_create, customer_detail, customer_force_delete,
    supplier_list_create, supplier_detail, supplier_force_delete,
)

urlpatterns = [
    # Customer endpoints
    path('customers/', customer_list_create, name='customer-list-create'),
    path('customers/<int:pk>/', customer_detail, name='customer-detail'),
    path('customers/<int:pk>/force-delete/', customer_force_delete, name='customer-force-delete'),

    # Supplier endpoints
    path('suppliers/', supplier_list_create, name='supplier-list-create'),
    path('suppliers/<int:pk>/', supplier_detail, name='supplier-detail'),
    path('suppliers/<int:pk>/force-delete/', supplier_force_delete, name='supplier-force-delete'),
]
