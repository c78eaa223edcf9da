from django.db import models
from autoparts.core.models import User
from autoparts.inventory.models import Document, DocumentItem
from autoparts.parties.models import Supplier


class PurchaseOrder(Document):
    """Purchase order to a supplier; stock moves in when it is received"""
    TYPE_CHOICES = [
        ('purchase', 'Purchase'),
        ('return', 'Return'),
    ]

    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('received', 'Received'),
        ('cancelled', 'Cancelled'),
    ]

    order_number = models.CharField(max_length=100, unique=True)
    supplier = models.ForeignKey(Supplier, on_delete=models.PROTECT, related_name='purchase_orders')
    order_date = models.DateTimeField()
    type = models.CharField(max_length=20, choices=TYPE_CHOICES, default='purchase')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending')
    received_at = models.DateTimeField(null=True, blank=True)
    created_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='purchase_orders')

    def __str__(self):
        return self.order_number

    class Meta:
        db_table = 'purchase_orders'
        ordering = ['-order_date', '-id']
        indexes = [
            models.Index(fields=['status'], name='idx_po_status'),
            models.Index(fields=['supplier', 'status'], name='idx_po_supplier_status'),
        ]


class PurchaseOrderItem(DocumentItem):
    """Purchase order line items"""
    purchase_order = models.ForeignKey(PurchaseOrder, on_delete=models.CASCADE, related_name='items')

    class Meta(DocumentItem.Meta):
        db_table = 'purchase_order_items'
