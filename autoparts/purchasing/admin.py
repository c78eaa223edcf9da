from django.contrib import admin
from .models import PurchaseOrder, PurchaseOrderItem


class PurchaseOrderItemInline(admin.TabularInline):
    model = PurchaseOrderItem
    extra = 0
    fields = ['part', 'quantity', 'unit_price', 'subtotal']
    readonly_fields = ['part', 'quantity', 'unit_price', 'subtotal']
    can_delete = False


@admin.register(PurchaseOrder)
class PurchaseOrderAdmin(admin.ModelAdmin):
    list_display = ['order_number', 'supplier', 'order_date', 'type', 'status', 'total_amount', 'created_by', 'created_at']
    list_filter = ['status', 'type', 'supplier', 'order_date']
    search_fields = ['order_number', 'notes']
    ordering = ['-order_date', '-id']
    inlines = [PurchaseOrderItemInline]
    # Status changes must go through PurchaseOrderService so stock is received
    readonly_fields = ['status', 'total_amount', 'received_at', 'created_at', 'updated_at']
