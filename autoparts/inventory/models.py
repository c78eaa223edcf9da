from django.db import models
from decimal import Decimal
from autoparts.catalog.models import Part
from autoparts.core.models import User


class DocumentKind(models.TextChoices):
    PURCHASE_ORDER = 'purchase_order', 'Purchase Order'
    SALES_INVOICE = 'sales_invoice', 'Sales Invoice'
    CREDIT = 'credit', 'Credit'
    WARRANTY = 'warranty', 'Warranty'


class LedgerReferenceType(models.TextChoices):
    """What a ledger entry's reference_id points at"""
    PURCHASE_ORDER = 'purchase_order', 'Purchase Order'
    SALES_INVOICE = 'sales_invoice', 'Sales Invoice'
    CREDIT = 'credit', 'Credit'
    WARRANTY = 'warranty', 'Warranty'
    MANUAL = 'manual', 'Manual Adjustment'
    INITIAL = 'initial', 'Initial Stock'


class LedgerTransactionType(models.TextChoices):
    IN = 'in', 'In'
    OUT = 'out', 'Out'
    ADJUSTMENT = 'adjustment', 'Adjustment'
    SALE = 'sale', 'Sale'
    PURCHASE = 'purchase', 'Purchase'
    CREDIT = 'credit', 'Credit'
    WARRANTY = 'warranty', 'Warranty'


class Document(models.Model):
    """Fields shared by purchase orders, sales invoices, credits and warranties"""
    total_amount = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal('0.00'))
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def get_subtotal(self):
        """Calculate subtotal from all items"""
        return sum((item.subtotal for item in self.items.all()), Decimal('0.00'))

    class Meta:
        abstract = True


class DocumentItem(models.Model):
    """Line item shape shared by every document kind"""
    part = models.ForeignKey(Part, on_delete=models.PROTECT, related_name='%(class)ss')
    quantity = models.PositiveIntegerField()
    unit_price = models.DecimalField(max_digits=15, decimal_places=2)
    subtotal = models.DecimalField(max_digits=15, decimal_places=2)

    def get_line_total(self):
        """Calculate line total"""
        return self.quantity * self.unit_price

    def save(self, *args, **kwargs):
        self.subtotal = self.get_line_total()
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.part_id} x {self.quantity}"

    class Meta:
        abstract = True
        ordering = ['id']


class InventoryLedgerEntry(models.Model):
    """Immutable record of one stock-affecting event"""
    part = models.ForeignKey(Part, on_delete=models.PROTECT, related_name='ledger_entries')
    transaction_type = models.CharField(max_length=20, choices=LedgerTransactionType.choices)
    quantity = models.IntegerField(help_text='Signed stock delta')
    balance_after = models.IntegerField()
    reference_type = models.CharField(max_length=20, choices=LedgerReferenceType.choices)
    reference_id = models.BigIntegerField(null=True, blank=True)
    notes = models.TextField(blank=True)
    operated_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='ledger_entries')
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.part_id} {self.quantity:+d} -> {self.balance_after}"

    class Meta:
        db_table = 'inventory_ledger'
        ordering = ['-created_at', '-id']
        verbose_name_plural = 'Inventory ledger entries'
        indexes = [
            models.Index(fields=['part', 'id'], name='idx_ledger_part'),
            models.Index(fields=['reference_type', 'reference_id'], name='idx_ledger_reference'),
        ]


class LowStockAlert(models.Model):
    """Flags a part whose balance fell below its minimum threshold"""
    part = models.ForeignKey(Part, on_delete=models.CASCADE, related_name='low_stock_alerts')
    current_stock = models.IntegerField()
    min_threshold = models.IntegerField()
    is_resolved = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    resolved_at = models.DateTimeField(null=True, blank=True)

    def __str__(self):
        return f"Low stock: {self.part_id} ({self.current_stock}/{self.min_threshold})"

    class Meta:
        db_table = 'low_stock_alerts'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['part', 'is_resolved'], name='idx_alert_part_resolved'),
        ]
