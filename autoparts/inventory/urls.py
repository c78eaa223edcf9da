from django.urls import path
from .views import ledger_list, part_ledger, alert_list, alert_resolve

urlpatterns = [
    path('inventory/ledger/', ledger_list, name='inventory-ledger-list'),
    path('parts/<int:pk>/ledger/', part_ledger, name='part-ledger'),
    path('inventory/alerts/', alert_list, name='low-stock-alert-list'),
    path('inventory/alerts/<int:pk>/resolve/', alert_resolve, name='low-stock-alert-resolve'),
]
