from django.contrib import admin
from .models import LineCode, PartCategory, Part


@admin.register(LineCode)
class LineCodeAdmin(admin.ModelAdmin):
    list_display = ['code', 'description', 'created_at']
    search_fields = ['code', 'description']
    ordering = ['code']


@admin.register(PartCategory)
class PartCategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'description', 'created_at']
    search_fields = ['name']


@admin.register(Part)
class PartAdmin(admin.ModelAdmin):
    list_display = ['sku', 'name', 'line_code', 'supplier', 'unit_price', 'stock_quantity', 'min_stock_threshold', 'is_archived']
    list_filter = ['is_archived', 'line_code', 'category', 'supplier']
    search_fields = ['sku', 'name', 'mfg_part_number', 'manufacturer']
    ordering = ['sku']
    # Stock changes go through adjust_stock so the ledger stays in step
    readonly_fields = ['stock_quantity', 'archived_at', 'created_at', 'updated_at']
