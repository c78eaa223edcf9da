import django_filters
from django.db.models import F, Q
from .models import Part


class PartFilter(django_filters.FilterSet):
    """Filters for the part list endpoint"""
    search = django_filters.CharFilter(method='filter_search')
    line_code = django_filters.NumberFilter(field_name='line_code_id')
    line_code_code = django_filters.CharFilter(field_name='line_code__code', lookup_expr='iexact')
    category = django_filters.NumberFilter(field_name='category_id')
    supplier = django_filters.NumberFilter(field_name='supplier_id')
    low_stock = django_filters.BooleanFilter(method='filter_low_stock')
    archived = django_filters.BooleanFilter(field_name='is_archived')

    class Meta:
        model = Part
        fields = ['search', 'line_code', 'line_code_code', 'category', 'supplier', 'low_stock', 'archived']

    def filter_search(self, queryset, name, value):
        """Match SKU, name, manufacturer part number, description or line code"""
        value = (value or '').strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(sku__icontains=value) |
            Q(name__icontains=value) |
            Q(mfg_part_number__icontains=value) |
            Q(description__icontains=value) |
            Q(line_code__code__iexact=value)
        )

    def filter_low_stock(self, queryset, name, value):
        if value is None:
            return queryset
        if value:
            return queryset.filter(stock_quantity__lt=F('min_stock_threshold'))
        return queryset.filter(stock_quantity__gte=F('min_stock_threshold'))
