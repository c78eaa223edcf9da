"""Part creation, archiving and history"""
import logging

from django.db import transaction
from django.utils import timezone

from autoparts.core.exceptions import InvalidStateError, NotFoundError, ValidationError
from autoparts.core.utils import parse_quantity
from autoparts.inventory.models import LedgerReferenceType, LedgerTransactionType
from autoparts.inventory.services import adjust_stock
from .models import Part

logger = logging.getLogger(__name__)


def get_part(part_id):
    try:
        return Part.objects.get(pk=part_id)
    except (Part.DoesNotExist, ValueError, TypeError):
        raise NotFoundError(f'Part with ID {part_id} not found')


def create_part(data, initial_stock=0, user=None):
    """
    Create a part. Starting stock goes through the stock mutator so the
    ledger opens with an ``initial`` entry.
    """
    data = dict(data)
    data.pop('stock_quantity', None)
    initial_stock = parse_quantity(initial_stock or 0, field='stock_quantity', allow_zero=True)
    sku = (data.get('sku') or '').strip()
    if not sku:
        raise ValidationError('sku is required')
    if not data.get('name'):
        raise ValidationError('name is required')
    data['sku'] = sku

    with transaction.atomic():
        if Part.objects.filter(sku=sku).exists():
            raise ValidationError(f'Part with SKU {sku} already exists')
        part = Part.objects.create(**data)
        if initial_stock > 0:
            adjust_stock(
                part.pk,
                initial_stock,
                transaction_type=LedgerTransactionType.PURCHASE,
                reference_type=LedgerReferenceType.INITIAL,
                notes='Initial stock',
                operated_by=user,
            )
            part.refresh_from_db()
    logger.info(f"Created part {part.sku} with stock {part.stock_quantity}")
    return part


def archive_part(part_id):
    with transaction.atomic():
        part = get_part(part_id)
        if part.is_archived:
            raise InvalidStateError(f'Part {part.sku} is already archived')
        part.is_archived = True
        part.archived_at = timezone.now()
        part.save(update_fields=['is_archived', 'archived_at', 'updated_at'])
    return part


def restore_part(part_id):
    with transaction.atomic():
        part = get_part(part_id)
        if not part.is_archived:
            raise InvalidStateError(f'Part {part.sku} is not archived')
        part.is_archived = False
        part.archived_at = None
        part.save(update_fields=['is_archived', 'archived_at', 'updated_at'])
    return part


def archived_parts():
    return Part.objects.filter(is_archived=True).select_related('line_code', 'category', 'supplier').order_by('-archived_at')


def _bulk(part_ids, operation, result_key):
    """Run an operation per part; failures are counted, not raised"""
    if not isinstance(part_ids, (list, tuple)) or not part_ids:
        raise ValidationError('ids must be a non-empty list')
    succeeded = 0
    failed = 0
    for part_id in part_ids:
        try:
            operation(part_id)
            succeeded += 1
        except (NotFoundError, InvalidStateError) as e:
            logger.warning(f"Bulk {result_key} skipped part {part_id}: {e.message}")
            failed += 1
    return {result_key: succeeded, 'failed': failed, 'total': len(part_ids)}


def bulk_archive_parts(part_ids):
    return _bulk(part_ids, archive_part, 'archived')


def bulk_restore_parts(part_ids):
    return _bulk(part_ids, restore_part, 'restored')


def bulk_force_delete_parts(part_ids):
    from autoparts.core.cascade import force_delete_part
    return _bulk(part_ids, force_delete_part, 'deleted')


def line_codes_by_sku(sku):
    """Line codes carrying a SKU"""
    parts = Part.objects.filter(sku=sku, line_code__isnull=False).select_related('line_code')
    return [
        {
            'id': part.pk,
            'line_code_id': part.line_code_id,
            'line_code': part.line_code.code,
            'sku': part.sku,
            'name': part.name,
            'unit_price': part.unit_price,
        }
        for part in parts
    ]


def part_history(part_id):
    """
    Every operation that touched a part, newest first.

    Combines sales, purchases, credits, warranties and manual/initial
    ledger adjustments into rows of the same shape.
    """
    from autoparts.inventory.models import InventoryLedgerEntry
    from autoparts.purchasing.models import PurchaseOrderItem
    from autoparts.sales.models import CreditItem, SalesInvoiceItem, WarrantyItem

    part = get_part(part_id)
    history = []

    for item in SalesInvoiceItem.objects.filter(part=part).select_related('invoice__customer'):
        history.append({
            'type': 'sale',
            'record_id': item.invoice_id,
            'number': item.invoice.invoice_number,
            'date': item.invoice.invoice_date,
            'quantity': item.quantity,
            'unit_price': item.unit_price,
            'party_name': item.invoice.customer.name,
            'status': item.invoice.status,
            'notes': item.invoice.notes,
        })
    for item in PurchaseOrderItem.objects.filter(part=part).select_related('purchase_order__supplier'):
        history.append({
            'type': 'purchase',
            'record_id': item.purchase_order_id,
            'number': item.purchase_order.order_number,
            'date': item.purchase_order.order_date,
            'quantity': item.quantity,
            'unit_price': item.unit_price,
            'party_name': item.purchase_order.supplier.name,
            'status': item.purchase_order.status,
            'notes': item.purchase_order.notes,
        })
    for item in CreditItem.objects.filter(part=part).select_related('credit__customer'):
        history.append({
            'type': 'credit',
            'record_id': item.credit_id,
            'number': item.credit.credit_number,
            'date': item.credit.credit_date,
            'quantity': item.quantity,
            'unit_price': item.unit_price,
            'party_name': item.credit.customer.name,
            'status': item.credit.status,
            'notes': item.credit.reason,
        })
    for item in WarrantyItem.objects.filter(part=part).select_related('warranty__customer'):
        history.append({
            'type': 'warranty',
            'record_id': item.warranty_id,
            'number': item.warranty.warranty_number,
            'date': item.warranty.warranty_date,
            'quantity': item.quantity,
            'unit_price': item.unit_price,
            'party_name': item.warranty.customer.name,
            'status': item.warranty.status,
            'notes': item.warranty.claim_reason,
        })
    adjustments = InventoryLedgerEntry.objects.filter(
        part=part,
        reference_type__in=[LedgerReferenceType.MANUAL, LedgerReferenceType.INITIAL],
    ).select_related('operated_by')
    for entry in adjustments:
        history.append({
            'type': 'adjustment',
            'record_id': entry.pk,
            'number': None,
            'date': entry.created_at,
            'quantity': entry.quantity,
            'unit_price': None,
            'party_name': entry.operated_by.get_display_name() if entry.operated_by else None,
            'status': None,
            'notes': entry.notes,
        })

    history.sort(key=lambda row: row['date'], reverse=True)
    return history
