from django.conf import settings
from django.db import models
from decimal import Decimal
from autoparts.parties.models import Supplier


def default_min_stock_threshold():
    return settings.AUTOPARTS_DEFAULT_MIN_STOCK_THRESHOLD


class LineCode(models.Model):
    """Short code identifying a parts product line / brand family"""
    code = models.CharField(max_length=50, unique=True)
    description = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.code

    class Meta:
        db_table = 'line_codes'
        ordering = ['code']


class PartCategory(models.Model):
    """Part category"""
    name = models.CharField(max_length=100)
    description = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'part_categories'
        ordering = ['name']
        verbose_name_plural = 'Part categories'


class Part(models.Model):
    """Stocked part. stock_quantity is changed only through the stock mutator."""
    sku = models.CharField(max_length=100, unique=True)
    name = models.CharField(max_length=255)
    line_code = models.ForeignKey(LineCode, on_delete=models.PROTECT, null=True, blank=True, related_name='parts')
    category = models.ForeignKey(PartCategory, on_delete=models.SET_NULL, null=True, blank=True, related_name='parts')
    supplier = models.ForeignKey(Supplier, on_delete=models.SET_NULL, null=True, blank=True, related_name='parts')
    description = models.TextField(blank=True)

    unit_price = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal('0.00'))
    cost = models.DecimalField(max_digits=15, decimal_places=2, null=True, blank=True)
    list_price = models.DecimalField(max_digits=15, decimal_places=2, null=True, blank=True)
    retail = models.DecimalField(max_digits=15, decimal_places=2, null=True, blank=True)

    stock_quantity = models.IntegerField(default=0)
    min_stock_threshold = models.IntegerField(default=default_min_stock_threshold)
    order_qty = models.IntegerField(null=True, blank=True)
    order_multiple = models.IntegerField(default=1)
    stocking_unit = models.CharField(max_length=20, default='EA')
    purchase_unit = models.CharField(max_length=20, default='EA')
    unit = models.CharField(max_length=20, default='EA')

    manufacturer = models.CharField(max_length=255, blank=True)
    mfg_part_number = models.CharField(max_length=100, blank=True)
    weight = models.DecimalField(max_digits=10, decimal_places=3, null=True, blank=True)
    image_url = models.URLField(max_length=500, blank=True)

    is_archived = models.BooleanField(default=False)
    archived_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.sku} - {self.name}"

    @property
    def is_low_stock(self):
        return self.stock_quantity < self.min_stock_threshold

    class Meta:
        db_table = 'parts'
        ordering = ['sku']
        indexes = [
            models.Index(fields=['is_archived'], name='idx_part_archived'),
            models.Index(fields=['supplier'], name='idx_part_supplier'),
            models.Index(fields=['line_code'], name='idx_part_line_code'),
        ]
        constraints = [
            models.CheckConstraint(condition=models.Q(stock_quantity__gte=0), name='part_stock_quantity_non_negative'),
        ]
