from django.contrib import admin
from .models import SalesInvoice, SalesInvoiceItem, Credit, CreditItem, Warranty, WarrantyItem


class DocumentItemInline(admin.TabularInline):
    extra = 0
    fields = ['part', 'quantity', 'unit_price', 'subtotal']
    readonly_fields = ['part', 'quantity', 'unit_price', 'subtotal']
    can_delete = False


class SalesInvoiceItemInline(DocumentItemInline):
    model = SalesInvoiceItem


class CreditItemInline(DocumentItemInline):
    model = CreditItem


class WarrantyItemInline(DocumentItemInline):
    model = WarrantyItem


@admin.register(SalesInvoice)
class SalesInvoiceAdmin(admin.ModelAdmin):
    list_display = ['invoice_number', 'customer', 'invoice_date', 'status', 'total_amount', 'created_by']
    list_filter = ['status', 'invoice_date']
    search_fields = ['invoice_number', 'customer__name', 'customer_number']
    ordering = ['-invoice_date', '-id']
    inlines = [SalesInvoiceItemInline]
    readonly_fields = ['status', 'total_amount', 'created_at', 'updated_at']


@admin.register(Credit)
class CreditAdmin(admin.ModelAdmin):
    list_display = ['credit_number', 'customer', 'original_invoice_number', 'credit_date', 'status', 'total_amount']
    list_filter = ['status', 'credit_date']
    search_fields = ['credit_number', 'original_invoice_number', 'customer__name']
    ordering = ['-credit_date', '-id']
    inlines = [CreditItemInline]
    readonly_fields = ['status', 'total_amount', 'created_at', 'updated_at']


@admin.register(Warranty)
class WarrantyAdmin(admin.ModelAdmin):
    list_display = ['warranty_number', 'customer', 'original_invoice_number', 'warranty_date', 'status', 'total_amount']
    list_filter = ['status', 'warranty_date']
    search_fields = ['warranty_number', 'original_invoice_number', 'customer__name']
    ordering = ['-warranty_date', '-id']
    inlines = [WarrantyItemInline]
    readonly_fields = ['status', 'total_amount', 'created_at', 'updated_at']
