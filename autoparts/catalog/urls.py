from django.urls import path
from .views import (
    line_code_list_create, line_code_detail, line_codes_by_sku,
    part_category_list_create,
    part_list_create, part_detail, part_force_delete, part_archive, part_restore,
    parts_archived, parts_low_stock, part_by_sku,
    parts_bulk_archive, parts_bulk_restore, parts_bulk_force_delete,
    part_adjust_stock, part_history,
)

urlpatterns = [
    # Line code endpoints
    path('line-codes/', line_code_list_create, name='line-code-list-create'),
    path('line-codes/<int:pk>/', line_code_detail, name='line-code-detail'),
    path('line-codes/by-sku/<str:sku>/', line_codes_by_sku, name='line-codes-by-sku'),

    # Category endpoints
    path('part-categories/', part_category_list_create, name='part-category-list-create'),

    # Part endpoints
    path('parts/', part_list_create, name='part-list-create'),
    path('parts/archived/', parts_archived, name='parts-archived'),
    path('parts/low-stock/', parts_low_stock, name='parts-low-stock'),
    path('parts/by-sku/<str:sku>/', part_by_sku, name='part-by-sku'),
    path('parts/bulk-archive/', parts_bulk_archive, name='parts-bulk-archive'),
    path('parts/bulk-restore/', parts_bulk_restore, name='parts-bulk-restore'),
    path('parts/bulk-force-delete/', parts_bulk_force_delete, name='parts-bulk-force-delete'),
    path('parts/<int:pk>/', part_detail, name='part-detail'),
    path('parts/<int:pk>/force-delete/', part_force_delete, name='part-force-delete'),
    path('parts/<int:pk>/archive/', part_archive, name='part-archive'),
    path('parts/<int:pk>/restore/', part_restore, name='part-restore'),
    path('parts/<int:pk>/adjust-stock/', part_adjust_stock, name='part-adjust-stock'),
    path('parts/<int:pk>/history/', part_history, name='part-history'),
]
