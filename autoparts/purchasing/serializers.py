from rest_framework import serializers
from autoparts.inventory.serializers import DocumentItemSerializer, DocumentSerializer
from .models import PurchaseOrder, PurchaseOrderItem


class PurchaseOrderItemSerializer(DocumentItemSerializer):
    class Meta(DocumentItemSerializer.Meta):
        model = PurchaseOrderItem


class PurchaseOrderSerializer(DocumentSerializer):
    supplier_name = serializers.CharField(source='supplier.name', read_only=True)
    items = PurchaseOrderItemSerializer(many=True, read_only=True)

    class Meta:
        model = PurchaseOrder
        fields = ['id', 'order_number', 'supplier', 'supplier_name', 'order_date', 'type', 'total_amount',
                  'status', 'received_at', 'notes', 'created_by', 'created_by_name', 'created_at',
                  'updated_at', 'items']
        read_only_fields = fields


class PurchaseOrderListSerializer(DocumentSerializer):
    supplier_name = serializers.CharField(source='supplier.name', read_only=True)
    item_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = PurchaseOrder
        fields = ['id', 'order_number', 'supplier', 'supplier_name', 'order_date', 'type', 'total_amount',
                  'status', 'item_count', 'created_by_name', 'created_at']
        read_only_fields = fields
