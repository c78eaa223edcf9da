from django.contrib import admin
from .models import InventoryLedgerEntry, LowStockAlert


@admin.register(InventoryLedgerEntry)
class InventoryLedgerEntryAdmin(admin.ModelAdmin):
    list_display = ['created_at', 'part', 'transaction_type', 'quantity', 'balance_after', 'reference_type', 'reference_id', 'operated_by']
    list_filter = ['transaction_type', 'reference_type', 'created_at']
    search_fields = ['part__sku', 'part__name', 'notes']
    ordering = ['-created_at', '-id']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(LowStockAlert)
class LowStockAlertAdmin(admin.ModelAdmin):
    list_display = ['part', 'current_stock', 'min_threshold', 'is_resolved', 'created_at', 'resolved_at']
    list_filter = ['is_resolved', 'created_at']
    search_fields = ['part__sku', 'part__name']
    ordering = ['-created_at']
    readonly_fields = ['part', 'current_stock', 'min_threshold', 'created_at']
