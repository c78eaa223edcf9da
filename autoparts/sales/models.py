from django.db import models
from autoparts.core.models import User
from autoparts.inventory.models import Document, DocumentItem
from autoparts.parties.models import Customer


class SalesInvoice(Document):
    """Sales invoice. Stock is taken out when the invoice is created."""
    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('completed', 'Completed'),
        ('cancelled', 'Cancelled'),
    ]

    invoice_number = models.CharField(max_length=100, unique=True)
    customer = models.ForeignKey(Customer, on_delete=models.PROTECT, related_name='sales_invoices')
    customer_number = models.CharField(max_length=100, blank=True)
    invoice_date = models.DateTimeField()
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending')
    created_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='sales_invoices')

    def __str__(self):
        return self.invoice_number

    class Meta:
        db_table = 'sales_invoices'
        ordering = ['-invoice_date', '-id']
        indexes = [
            models.Index(fields=['status'], name='idx_invoice_status'),
            models.Index(fields=['customer', '-invoice_date'], name='idx_invoice_customer_date'),
        ]


class SalesInvoiceItem(DocumentItem):
    """Sales invoice line items"""
    invoice = models.ForeignKey(SalesInvoice, on_delete=models.CASCADE, related_name='items')

    class Meta(DocumentItem.Meta):
        db_table = 'sales_invoice_items'


class Credit(Document):
    """Customer return. Returned parts go back into stock."""
    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('completed', 'Completed'),
        ('cancelled', 'Cancelled'),
    ]

    credit_number = models.CharField(max_length=100, unique=True)
    customer = models.ForeignKey(Customer, on_delete=models.PROTECT, related_name='credits')
    customer_number = models.CharField(max_length=100, blank=True)
    original_invoice_number = models.CharField(max_length=100, blank=True, null=True)
    credit_date = models.DateTimeField()
    reason = models.TextField(blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending')
    created_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='credits')

    def __str__(self):
        return self.credit_number

    class Meta:
        db_table = 'credits'
        ordering = ['-credit_date', '-id']


class CreditItem(DocumentItem):
    """Credit line items"""
    credit = models.ForeignKey(Credit, on_delete=models.CASCADE, related_name='items')

    class Meta(DocumentItem.Meta):
        db_table = 'credit_items'


class Warranty(Document):
    """Warranty claim. Replacement parts leave stock when the claim is created."""
    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('approved', 'Approved'),
        ('rejected', 'Rejected'),
        ('completed', 'Completed'),
    ]

    warranty_number = models.CharField(max_length=100, unique=True)
    customer = models.ForeignKey(Customer, on_delete=models.PROTECT, related_name='warranties')
    customer_number = models.CharField(max_length=100, blank=True)
    original_invoice_number = models.CharField(max_length=100, blank=True, null=True)
    warranty_date = models.DateTimeField()
    claim_reason = models.TextField(blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending')
    created_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='warranties')

    def __str__(self):
        return self.warranty_number

    class Meta:
        db_table = 'warranties'
        ordering = ['-warranty_date', '-id']
        verbose_name_plural = 'Warranties'


class WarrantyItem(DocumentItem):
    """Warranty line items"""
    warranty = models.ForeignKey(Warranty, on_delete=models.CASCADE, related_name='items')

    class Meta(DocumentItem.Meta):
        db_table = 'warranty_items'
