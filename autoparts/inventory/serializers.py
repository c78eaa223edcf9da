from rest_framework import serializers
from .models import InventoryLedgerEntry, LowStockAlert


class InventoryLedgerEntrySerializer(serializers.ModelSerializer):
    part_sku = serializers.CharField(source='part.sku', read_only=True)
    part_name = serializers.CharField(source='part.name', read_only=True)
    operated_by_name = serializers.SerializerMethodField()

    class Meta:
        model = InventoryLedgerEntry
        fields = ['id', 'part', 'part_sku', 'part_name', 'transaction_type', 'quantity', 'balance_after',
                  'reference_type', 'reference_id', 'notes', 'operated_by', 'operated_by_name', 'created_at']
        read_only_fields = fields

    def get_operated_by_name(self, obj):
        return obj.operated_by.get_display_name() if obj.operated_by else None


class LowStockAlertSerializer(serializers.ModelSerializer):
    part_sku = serializers.CharField(source='part.sku', read_only=True)
    part_name = serializers.CharField(source='part.name', read_only=True)

    class Meta:
        model = LowStockAlert
        fields = ['id', 'part', 'part_sku', 'part_name', 'current_stock', 'min_threshold',
                  'is_resolved', 'created_at', 'resolved_at']
        read_only_fields = fields


class DocumentItemSerializer(serializers.ModelSerializer):
    """Document line with the part's SKU, name and line code for display"""
    part_sku = serializers.CharField(source='part.sku', read_only=True)
    part_name = serializers.CharField(source='part.name', read_only=True)
    line_code = serializers.SerializerMethodField()

    class Meta:
        fields = ['id', 'part', 'part_sku', 'part_name', 'line_code', 'quantity', 'unit_price', 'subtotal']
        read_only_fields = fields

    def get_line_code(self, obj):
        return obj.part.line_code.code if obj.part.line_code else None


class DocumentSerializer(serializers.ModelSerializer):
    created_by_name = serializers.SerializerMethodField()

    def get_created_by_name(self, obj):
        return obj.created_by.get_display_name() if obj.created_by else None
