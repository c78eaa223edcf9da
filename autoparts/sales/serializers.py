from rest_framework import serializers
from autoparts.inventory.serializers import DocumentItemSerializer, DocumentSerializer
from .models import SalesInvoice, SalesInvoiceItem, Credit, CreditItem, Warranty, WarrantyItem


class SalesInvoiceItemSerializer(DocumentItemSerializer):
    class Meta(DocumentItemSerializer.Meta):
        model = SalesInvoiceItem


class CreditItemSerializer(DocumentItemSerializer):
    class Meta(DocumentItemSerializer.Meta):
        model = CreditItem


class WarrantyItemSerializer(DocumentItemSerializer):
    class Meta(DocumentItemSerializer.Meta):
        model = WarrantyItem


class SalesInvoiceSerializer(DocumentSerializer):
    customer_name = serializers.CharField(source='customer.name', read_only=True)
    items = SalesInvoiceItemSerializer(many=True, read_only=True)

    class Meta:
        model = SalesInvoice
        fields = ['id', 'invoice_number', 'customer', 'customer_name', 'customer_number', 'invoice_date',
                  'total_amount', 'status', 'notes', 'created_by', 'created_by_name', 'created_at',
                  'updated_at', 'items']
        read_only_fields = fields


class CreditSerializer(DocumentSerializer):
    customer_name = serializers.CharField(source='customer.name', read_only=True)
    items = CreditItemSerializer(many=True, read_only=True)

    class Meta:
        model = Credit
        fields = ['id', 'credit_number', 'customer', 'customer_name', 'customer_number',
                  'original_invoice_number', 'credit_date', 'reason', 'total_amount', 'status', 'notes',
                  'created_by', 'created_by_name', 'created_at', 'updated_at', 'items']
        read_only_fields = fields


class WarrantySerializer(DocumentSerializer):
    customer_name = serializers.CharField(source='customer.name', read_only=True)
    items = WarrantyItemSerializer(many=True, read_only=True)

    class Meta:
        model = Warranty
        fields = ['id', 'warranty_number', 'customer', 'customer_name', 'customer_number',
                  'original_invoice_number', 'warranty_date', 'claim_reason', 'total_amount', 'status',
                  'notes', 'created_by', 'created_by_name', 'created_at', 'updated_at', 'items']
        read_only_fields = fields


class StatusUpdateSerializer(serializers.Serializer):
    status = serializers.CharField()


class SalesHistorySerializer(serializers.Serializer):
    invoice_id = serializers.IntegerField()
    invoice_number = serializers.CharField()
    invoice_date = serializers.DateTimeField()
    quantity = serializers.IntegerField()
    unit_price = serializers.DecimalField(max_digits=15, decimal_places=2)
    customer_name = serializers.CharField()
