"""
URL configuration for the autoparts project.

Every app's API lives under /api/v1/.
"""
from django.contrib import admin
from django.urls import path, include

admin.site.site_header = "Auto Parts Inventory Admin"
admin.site.site_title = "Auto Parts Inventory Admin Portal"
admin.site.index_title = "Inventory & Order Management"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/v1/', include('autoparts.core.urls')),
    path('api/v1/', include('autoparts.catalog.urls')),
    path('api/v1/', include('autoparts.inventory.urls')),
    path('api/v1/', include('autoparts.parties.urls')),
    path('api/v1/', include('autoparts.purchasing.urls')),
    path('api/v1/', include('autoparts.sales.urls')),
]
