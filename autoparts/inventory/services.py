"""
Part stock mutator and ledger writer.

``adjust_stock`` is the only code path that changes ``Part.stock_quantity``.
Each call locks the part row, writes the new balance, appends exactly one
ledger entry whose ``balance_after`` matches the stored balance and runs the
low-stock check, all in one transaction. Callers already inside
``transaction.atomic()`` share their transaction, so a failure anywhere in a
multi-item document rolls back every mutation made for it.
"""
import logging

from django.db import transaction

from autoparts.catalog.models import Part
from autoparts.core.exceptions import InsufficientStockError, NotFoundError, ValidationError
from autoparts.core.utils import parse_quantity
from .alerts import check_low_stock
from .models import InventoryLedgerEntry, LedgerReferenceType, LedgerTransactionType

logger = logging.getLogger(__name__)


def record_ledger_entry(part, quantity, balance_after, transaction_type, reference_type,
                        reference_id=None, notes='', operated_by=None):
    """Append one immutable ledger entry"""
    if reference_type not in LedgerReferenceType.values:
        raise ValidationError(f'Unknown ledger reference type "{reference_type}"')
    if transaction_type not in LedgerTransactionType.values:
        raise ValidationError(f'Unknown ledger transaction type "{transaction_type}"')
    return InventoryLedgerEntry.objects.create(
        part=part,
        transaction_type=transaction_type,
        quantity=quantity,
        balance_after=balance_after,
        reference_type=reference_type,
        reference_id=reference_id,
        notes=notes or '',
        operated_by=operated_by if operated_by is not None and operated_by.is_authenticated else None,
    )


def lock_part(part_id):
    try:
        return Part.objects.select_for_update().get(pk=part_id)
    except (Part.DoesNotExist, ValueError, TypeError):
        raise NotFoundError(f'Part with ID {part_id} not found')


def adjust_stock(part_id, quantity_change, *, transaction_type=LedgerTransactionType.ADJUSTMENT,
                 reference_type=LedgerReferenceType.MANUAL, reference_id=None, notes='', operated_by=None):
    """
    Apply a signed stock delta to a part.

    Returns the new balance. Raises NotFoundError for an unknown part and
    InsufficientStockError when the balance would go negative; in both cases
    nothing is written.
    """
    quantity_change = parse_quantity(quantity_change, field='quantity', allow_negative=True)

    with transaction.atomic():
        part = lock_part(part_id)
        new_balance = part.stock_quantity + quantity_change
        if new_balance < 0:
            logger.warning(
                f"Refused stock change for part {part.sku}: "
                f"current={part.stock_quantity}, change={quantity_change}"
            )
            raise InsufficientStockError(
                f'Insufficient stock for part {part.sku}. '
                f'Current: {part.stock_quantity}, Requested: {abs(quantity_change)}'
            )

        part.stock_quantity = new_balance
        part.save(update_fields=['stock_quantity', 'updated_at'])

        record_ledger_entry(
            part=part,
            quantity=quantity_change,
            balance_after=new_balance,
            transaction_type=transaction_type,
            reference_type=reference_type,
            reference_id=reference_id,
            notes=notes,
            operated_by=operated_by,
        )
        check_low_stock(part)

    logger.info(
        f"Stock {transaction_type} for part {part.sku}: {quantity_change:+d} -> {new_balance} "
        f"({reference_type}#{reference_id})"
    )
    return new_balance


def set_stock_level(part_id, new_quantity, *, notes='', operated_by=None):
    """Manual adjustment to an absolute balance; records the difference as a delta"""
    new_quantity = parse_quantity(new_quantity, field='new_quantity', allow_zero=True)
    with transaction.atomic():
        part = lock_part(part_id)
        delta = new_quantity - part.stock_quantity
        if delta == 0:
            raise ValidationError(f'Stock for part {part.sku} is already {new_quantity}')
        return adjust_stock(
            part.pk,
            delta,
            transaction_type=LedgerTransactionType.ADJUSTMENT,
            reference_type=LedgerReferenceType.MANUAL,
            notes=notes,
            operated_by=operated_by,
        )


def ledger_for_part(part_id):
    return InventoryLedgerEntry.objects.filter(part_id=part_id).select_related('operated_by').order_by('id')


def replay_ledger(part):
    """
    Replay a part's ledger in creation order.

    Returns a list of problems; an empty list means every running sum
    matched its ``balance_after`` and the final balance matches the part.
    """
    problems = []
    running = 0
    last_balance = 0
    for entry in ledger_for_part(part.pk):
        running += entry.quantity
        if running != entry.balance_after:
            problems.append(
                f'entry #{entry.pk}: running sum {running} != balance_after {entry.balance_after}'
            )
        last_balance = entry.balance_after
    if last_balance != part.stock_quantity:
        problems.append(f'last balance {last_balance} != stock_quantity {part.stock_quantity}')
    return problems
