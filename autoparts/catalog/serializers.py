from rest_framework import serializers
from .models import LineCode, PartCategory, Part


class LineCodeSerializer(serializers.ModelSerializer):
    part_count = serializers.SerializerMethodField()

    class Meta:
        model = LineCode
        fields = ['id', 'code', 'description', 'part_count', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']

    def get_part_count(self, obj):
        if hasattr(obj, 'num_parts'):
            return obj.num_parts
        return obj.parts.count()

    def validate_code(self, value):
        return value.strip().upper()


class PartCategorySerializer(serializers.ModelSerializer):
    class Meta:
        model = PartCategory
        fields = ['id', 'name', 'description', 'created_at']
        read_only_fields = ['created_at']


class PartSerializer(serializers.ModelSerializer):
    line_code_code = serializers.SerializerMethodField()
    category_name = serializers.SerializerMethodField()
    supplier_name = serializers.SerializerMethodField()
    is_low_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = Part
        fields = [
            'id', 'sku', 'name', 'line_code', 'line_code_code', 'category', 'category_name',
            'supplier', 'supplier_name', 'description', 'unit_price', 'cost', 'list_price', 'retail',
            'stock_quantity', 'min_stock_threshold', 'is_low_stock', 'order_qty', 'order_multiple',
            'stocking_unit', 'purchase_unit', 'unit', 'manufacturer', 'mfg_part_number', 'weight',
            'image_url', 'is_archived', 'archived_at', 'created_at', 'updated_at',
        ]
        # Stock only moves through the stock mutator
        read_only_fields = ['stock_quantity', 'is_archived', 'archived_at', 'created_at', 'updated_at']

    def get_line_code_code(self, obj):
        return obj.line_code.code if obj.line_code else None

    def get_category_name(self, obj):
        return obj.category.name if obj.category else None

    def get_supplier_name(self, obj):
        return obj.supplier.name if obj.supplier else None

    def validate_sku(self, value):
        return value.strip()

    def validate_min_stock_threshold(self, value):
        if value < 0:
            raise serializers.ValidationError('Minimum stock threshold cannot be negative')
        return value


class StockAdjustmentInputSerializer(serializers.Serializer):
    """Manual adjustment: either a signed delta or an absolute new quantity"""
    quantity = serializers.IntegerField(required=False)
    new_quantity = serializers.IntegerField(required=False, min_value=0)
    notes = serializers.CharField(required=False, allow_blank=True, default='')

    def validate(self, attrs):
        has_delta = attrs.get('quantity') is not None
        has_absolute = attrs.get('new_quantity') is not None
        if has_delta == has_absolute:
            raise serializers.ValidationError('Provide exactly one of quantity or new_quantity')
        if has_delta and attrs['quantity'] == 0:
            raise serializers.ValidationError({'quantity': 'Quantity change must not be zero'})
        return attrs


class PartHistorySerializer(serializers.Serializer):
    type = serializers.CharField()
    record_id = serializers.IntegerField()
    number = serializers.CharField(allow_null=True)
    date = serializers.DateTimeField()
    quantity = serializers.IntegerField()
    unit_price = serializers.DecimalField(max_digits=15, decimal_places=2, allow_null=True)
    party_name = serializers.CharField(allow_null=True)
    status = serializers.CharField(allow_null=True)
    notes = serializers.CharField(allow_null=True, allow_blank=True)
