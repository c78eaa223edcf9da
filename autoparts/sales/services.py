"""Sales invoice, credit and warranty lifecycles, plus sales-history lookups"""
from autoparts.inventory.documents import DocumentLifecycle
from autoparts.inventory.models import DocumentKind, LedgerTransactionType
from autoparts.parties.models import Customer
from .models import Credit, CreditItem, SalesInvoice, SalesInvoiceItem, Warranty, WarrantyItem


class SalesInvoiceService(DocumentLifecycle):
    kind = DocumentKind.SALES_INVOICE
    label = 'Sales invoice'
    model = SalesInvoice
    item_model = SalesInvoiceItem
    item_fk = 'invoice'
    number_field = 'invoice_number'
    number_prefix = 'SI'
    date_field = 'invoice_date'
    party_field = 'customer'
    party_model = Customer
    extra_fields = ('customer_number',)

    stock_direction = -1
    transaction_type = LedgerTransactionType.SALE
    # any move between statuses; stock is only moved at creation
    transitions = {
        'pending': ('completed', 'cancelled'),
        'completed': ('pending', 'cancelled'),
        'cancelled': ('pending', 'completed'),
    }


class CreditService(DocumentLifecycle):
    """Customer returns put parts back into stock"""
    kind = DocumentKind.CREDIT
    label = 'Credit'
    model = Credit
    item_model = CreditItem
    item_fk = 'credit'
    number_field = 'credit_number'
    number_prefix = 'CR'
    date_field = 'credit_date'
    party_field = 'customer'
    party_model = Customer
    extra_fields = ('customer_number', 'original_invoice_number', 'reason')

    stock_direction = +1
    transaction_type = LedgerTransactionType.CREDIT
    allow_archived_parts = True
    # any move between statuses; stock is only moved at creation
    transitions = {
        'pending': ('completed', 'cancelled'),
        'completed': ('pending', 'cancelled'),
        'cancelled': ('pending', 'completed'),
    }


class WarrantyService(DocumentLifecycle):
    """Warranty replacements ship parts out of stock when the claim is created"""
    kind = DocumentKind.WARRANTY
    label = 'Warranty'
    model = Warranty
    item_model = WarrantyItem
    item_fk = 'warranty'
    number_field = 'warranty_number'
    number_prefix = 'WR'
    date_field = 'warranty_date'
    party_field = 'customer'
    party_model = Customer
    extra_fields = ('customer_number', 'original_invoice_number', 'claim_reason')

    stock_direction = -1
    transaction_type = LedgerTransactionType.WARRANTY
    # rejected and completed are terminal
    transitions = {
        'pending': ('approved', 'rejected'),
        'approved': ('completed',),
    }


def sales_history_by_part_sku(sku):
    """Past sales-invoice lines for a SKU, newest invoice first; empty for an unknown SKU"""
    items = (
        SalesInvoiceItem.objects
        .filter(part__sku=sku)
        .select_related('invoice', 'invoice__customer')
        .order_by('-invoice__invoice_date', '-id')
    )
    return [
        {
            'invoice_id': item.invoice_id,
            'invoice_number': item.invoice.invoice_number,
            'invoice_date': item.invoice.invoice_date,
            'quantity': item.quantity,
            'unit_price': item.unit_price,
            'customer_name': item.invoice.customer.name,
        }
        for item in items
    ]
