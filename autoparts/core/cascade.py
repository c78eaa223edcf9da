"""
Delete and force-delete for parts, customers, suppliers and line codes.

A plain delete refuses with ReferentialConflictError while dependent rows
exist and changes nothing. A force delete removes (or, for a supplier's
parts, detaches) every dependent row and then the target, all in one
transaction.
"""
import logging

from django.db import transaction

from autoparts.catalog.models import LineCode, Part
from autoparts.inventory.models import InventoryLedgerEntry, LowStockAlert
from autoparts.parties.models import Customer, Supplier
from autoparts.purchasing.models import PurchaseOrder, PurchaseOrderItem
from autoparts.sales.models import (
    Credit, CreditItem, SalesInvoice, SalesInvoiceItem, Warranty, WarrantyItem,
)
from .exceptions import NotFoundError, ReferentialConflictError

logger = logging.getLogger(__name__)


def _get(model, pk, label):
    try:
        return model.objects.select_for_update().get(pk=pk)
    except (model.DoesNotExist, ValueError, TypeError):
        raise NotFoundError(f'{label} with ID {pk} not found')


def _nonzero(counts):
    return {name: count for name, count in counts.items() if count}


def part_dependents(part):
    return _nonzero({
        'purchase_order_items': PurchaseOrderItem.objects.filter(part=part).count(),
        'sales_invoice_items': SalesInvoiceItem.objects.filter(part=part).count(),
        'credit_items': CreditItem.objects.filter(part=part).count(),
        'warranty_items': WarrantyItem.objects.filter(part=part).count(),
        'ledger_entries': InventoryLedgerEntry.objects.filter(part=part).count(),
    })


def customer_dependents(customer):
    return _nonzero({
        'sales_invoices': SalesInvoice.objects.filter(customer=customer).count(),
        'credits': Credit.objects.filter(customer=customer).count(),
        'warranties': Warranty.objects.filter(customer=customer).count(),
    })


def supplier_dependents(supplier):
    return _nonzero({
        'purchase_orders': PurchaseOrder.objects.filter(supplier=supplier).count(),
        'parts': Part.objects.filter(supplier=supplier).count(),
    })


def delete_part(part_id):
    with transaction.atomic():
        part = _get(Part, part_id, 'Part')
        dependents = part_dependents(part)
        if dependents:
            raise ReferentialConflictError(
                f'Cannot delete part {part.sku}: it is referenced by other records',
                dependents=dependents,
            )
        part.delete()


def force_delete_part(part_id):
    """Remove the part and every row that references it. Document totals are left as they were."""
    with transaction.atomic():
        part = _get(Part, part_id, 'Part')
        sku = part.sku
        deleted = {
            'low_stock_alerts': LowStockAlert.objects.filter(part=part).delete()[0],
            'ledger_entries': InventoryLedgerEntry.objects.filter(part=part).delete()[0],
            'credit_items': CreditItem.objects.filter(part=part).delete()[0],
            'warranty_items': WarrantyItem.objects.filter(part=part).delete()[0],
            'purchase_order_items': PurchaseOrderItem.objects.filter(part=part).delete()[0],
            'sales_invoice_items': SalesInvoiceItem.objects.filter(part=part).delete()[0],
        }
        part.delete()
    logger.info(f"Force deleted part {sku}: {deleted}")
    return deleted


def delete_customer(customer_id):
    with transaction.atomic():
        customer = _get(Customer, customer_id, 'Customer')
        dependents = customer_dependents(customer)
        if dependents:
            raise ReferentialConflictError(
                f'Cannot delete customer {customer.name}: it has related documents',
                dependents=dependents,
            )
        customer.delete()


def force_delete_customer(customer_id):
    """Remove the customer's invoices, credits and warranties (items cascade), then the customer"""
    with transaction.atomic():
        customer = _get(Customer, customer_id, 'Customer')
        name = customer.name
        deleted = {
            'sales_invoices': SalesInvoice.objects.filter(customer=customer).delete()[1].get('sales.SalesInvoice', 0),
            'credits': Credit.objects.filter(customer=customer).delete()[1].get('sales.Credit', 0),
            'warranties': Warranty.objects.filter(customer=customer).delete()[1].get('sales.Warranty', 0),
        }
        customer.delete()
    logger.info(f"Force deleted customer {name}: {deleted}")
    return deleted


def delete_supplier(supplier_id):
    with transaction.atomic():
        supplier = _get(Supplier, supplier_id, 'Supplier')
        dependents = supplier_dependents(supplier)
        if dependents:
            raise ReferentialConflictError(
                f'Cannot delete supplier {supplier.name}: it has related records',
                dependents=dependents,
            )
        supplier.delete()


def force_delete_supplier(supplier_id):
    """Remove the supplier's purchase orders and detach its parts; parts themselves are kept"""
    with transaction.atomic():
        supplier = _get(Supplier, supplier_id, 'Supplier')
        name = supplier.name
        deleted = {
            'purchase_orders': PurchaseOrder.objects.filter(supplier=supplier).delete()[1].get('purchasing.PurchaseOrder', 0),
            'parts_detached': Part.objects.filter(supplier=supplier).update(supplier=None),
        }
        supplier.delete()
    logger.info(f"Force deleted supplier {name}: {deleted}")
    return deleted


def delete_line_code(line_code_id):
    with transaction.atomic():
        line_code = _get(LineCode, line_code_id, 'Line code')
        part_count = Part.objects.filter(line_code=line_code).count()
        if part_count:
            raise ReferentialConflictError(
                f'Cannot delete line code {line_code.code}: {part_count} part(s) use it',
                dependents={'parts': part_count},
            )
        line_code.delete()
