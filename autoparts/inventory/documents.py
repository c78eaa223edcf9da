"""
Generic document lifecycle shared by purchase orders, sales invoices,
credits and warranties.

A concrete lifecycle names its header and item models, the field holding
the document number, the counterparty (supplier or customer), the stock
direction applied at creation and its status transition table. Creation,
status changes and deletes each run in a single transaction.
"""
import logging
from collections import OrderedDict
from decimal import Decimal

from django.db import transaction
from django.utils import timezone
from django.utils.crypto import get_random_string

from autoparts.catalog.models import Part
from autoparts.core.exceptions import (
    InsufficientStockError, InvalidStateError, NotFoundError, ValidationError,
)
from autoparts.core.utils import MAX_AMOUNT, parse_amount, parse_datetime_value, parse_quantity
from .services import adjust_stock

logger = logging.getLogger(__name__)


class DocumentLifecycle:
    kind = None
    label = None
    model = None
    item_model = None
    item_fk = None
    number_field = None
    number_prefix = None
    date_field = None
    party_field = None
    party_model = None
    extra_fields = ()

    # +1 adds stock at creation, -1 removes it, 0 leaves stock alone
    stock_direction = 0
    transaction_type = None
    created_status = 'completed'
    allow_archived_parts = False

    # status -> statuses reachable from it
    transitions = {}

    @classmethod
    def queryset(cls):
        return cls.model.objects.select_related(cls.party_field, 'created_by')

    @classmethod
    def get(cls, document_id, lock=False):
        queryset = cls.model.objects.select_for_update() if lock else cls.queryset()
        try:
            return queryset.get(pk=document_id)
        except (cls.model.DoesNotExist, ValueError, TypeError):
            raise NotFoundError(f'{cls.label} with ID {document_id} not found')

    @classmethod
    def get_detail(cls, document_id):
        """Header with counterparty, creator and items (with part and line code) loaded"""
        queryset = cls.queryset().prefetch_related('items__part__line_code')
        try:
            return queryset.get(pk=document_id)
        except (cls.model.DoesNotExist, ValueError, TypeError):
            raise NotFoundError(f'{cls.label} with ID {document_id} not found')

    @classmethod
    def generate_number(cls):
        while True:
            number = f"{cls.number_prefix}-{timezone.now():%Y%m%d%H%M%S}-{get_random_string(4, '0123456789')}"
            if not cls.model.objects.filter(**{cls.number_field: number}).exists():
                return number

    @classmethod
    def clean_items(cls, items):
        """Validate raw item dicts into (part_id, quantity, unit_price, subtotal) lines"""
        if not items:
            raise ValidationError(f'{cls.label} must have at least one item')
        if not isinstance(items, (list, tuple)):
            raise ValidationError('items must be a list')

        lines = []
        for index, item in enumerate(items, start=1):
            if not isinstance(item, dict):
                raise ValidationError(f'Item {index} is malformed')
            part_id = item.get('part_id', item.get('part'))
            if part_id in (None, ''):
                raise ValidationError(f'Item {index}: part is required')
            try:
                part_id = int(part_id)
            except (TypeError, ValueError):
                raise ValidationError(f'Item {index}: part must be an ID, got "{part_id}"')
            quantity = parse_quantity(item.get('quantity'), field=f'Item {index} quantity')
            unit_price = parse_amount(item.get('unit_price'), field=f'Item {index} unit_price')
            subtotal = (quantity * unit_price).quantize(Decimal('0.01'))
            if subtotal > MAX_AMOUNT:
                raise ValidationError(f'Item {index}: line total must not exceed {MAX_AMOUNT}')
            lines.append({
                'part_id': part_id,
                'quantity': quantity,
                'unit_price': unit_price,
                'subtotal': subtotal,
            })
        if sum(line['subtotal'] for line in lines) > MAX_AMOUNT:
            raise ValidationError(f'{cls.label} total must not exceed {MAX_AMOUNT}')
        return lines

    @classmethod
    def lock_parts(cls, part_ids):
        """Lock every referenced part in id order"""
        parts = OrderedDict(
            (part.pk, part)
            for part in Part.objects.select_for_update().filter(pk__in=set(part_ids)).order_by('pk')
        )
        missing = sorted(set(part_ids) - set(parts))
        if missing:
            raise NotFoundError(f'Part with ID {missing[0]} not found')
        if not cls.allow_archived_parts:
            archived = [part.sku for part in parts.values() if part.is_archived]
            if archived:
                raise ValidationError(f'Part {archived[0]} is archived')
        return parts

    @classmethod
    def check_availability(cls, parts, lines):
        """Refuse the whole document if any part cannot cover its summed quantity"""
        needed = {}
        for line in lines:
            needed[line['part_id']] = needed.get(line['part_id'], 0) + line['quantity']
        for part_id, quantity in needed.items():
            part = parts[part_id]
            if part.stock_quantity < quantity:
                raise InsufficientStockError(
                    f'Insufficient stock for part {part.sku}. '
                    f'Current: {part.stock_quantity}, Requested: {quantity}'
                )

    @classmethod
    def get_party(cls, party_id):
        if party_id in (None, ''):
            raise ValidationError(f'{cls.party_field} is required')
        try:
            return cls.party_model.objects.get(pk=party_id)
        except (cls.party_model.DoesNotExist, ValueError, TypeError):
            raise NotFoundError(f'{cls.party_model._meta.verbose_name.title()} with ID {party_id} not found')

    @classmethod
    def apply_stock(cls, document, direction, user=None):
        number = getattr(document, cls.number_field)
        for item in document.items.all():
            adjust_stock(
                item.part_id,
                direction * item.quantity,
                transaction_type=cls.transaction_type,
                reference_type=cls.kind,
                reference_id=document.pk,
                notes=f'{cls.label} {number}',
                operated_by=user,
            )

    @classmethod
    def create(cls, header, items, user=None):
        """
        Create a document with its items.

        Documents with an immediate stock effect move stock for every item
        and are stored with ``created_status``; the others start pending.
        """
        header = dict(header or {})
        lines = cls.clean_items(items)
        party_id = header.get(cls.party_field, header.get(f'{cls.party_field}_id'))
        number = header.get(cls.number_field) or None

        with transaction.atomic():
            party = cls.get_party(party_id)
            parts = cls.lock_parts([line['part_id'] for line in lines])
            if cls.stock_direction < 0:
                cls.check_availability(parts, lines)

            if number and cls.model.objects.filter(**{cls.number_field: number}).exists():
                raise ValidationError(f'{cls.label} number {number} already exists')

            document = cls.model(
                **{
                    cls.number_field: number or cls.generate_number(),
                    cls.party_field: party,
                    cls.date_field: parse_datetime_value(header.get(cls.date_field), field=cls.date_field),
                },
                total_amount=sum((line['subtotal'] for line in lines), Decimal('0.00')),
                notes=header.get('notes') or '',
                status='pending',
                created_by=user if user is not None and user.is_authenticated else None,
            )
            for field in cls.extra_fields:
                if header.get(field) is not None:
                    choices = dict(cls.model._meta.get_field(field).choices or ())
                    if choices and header[field] not in choices:
                        raise ValidationError(
                            f'Invalid {field} "{header[field]}". Valid values: {", ".join(choices)}'
                        )
                    setattr(document, field, header[field])
            document.save()

            cls.item_model.objects.bulk_create([
                cls.item_model(
                    **{cls.item_fk: document},
                    part=parts[line['part_id']],
                    quantity=line['quantity'],
                    unit_price=line['unit_price'],
                    subtotal=line['subtotal'],
                )
                for line in lines
            ])

            if cls.stock_direction:
                cls.apply_stock(document, cls.stock_direction, user)
                document.status = cls.created_status
                document.save(update_fields=['status', 'updated_at'])

        logger.info(
            f"Created {cls.label} {getattr(document, cls.number_field)} "
            f"with {len(lines)} item(s), total {document.total_amount}"
        )
        return document

    @classmethod
    def on_transition(cls, document, old_status, new_status, user=None):
        """Hook for side effects of a status change"""

    @classmethod
    def transition(cls, document_id, new_status, user=None):
        valid_statuses = dict(cls.model.STATUS_CHOICES)
        if new_status not in valid_statuses:
            raise ValidationError(
                f'Invalid status "{new_status}". Valid statuses: {", ".join(valid_statuses)}'
            )
        with transaction.atomic():
            document = cls.get(document_id, lock=True)
            old_status = document.status
            if new_status not in cls.transitions.get(old_status, ()):
                raise InvalidStateError(
                    f'Cannot change {cls.label} {getattr(document, cls.number_field)} '
                    f'from {old_status} to {new_status}'
                )
            cls.on_transition(document, old_status, new_status, user)
            document.status = new_status
            document.save()

        logger.info(f"{cls.label} {getattr(document, cls.number_field)}: {old_status} -> {new_status}")
        return document

    @classmethod
    def update_status(cls, document_id, new_status, user=None):
        return cls.transition(document_id, new_status, user)

    @classmethod
    def cancel(cls, document_id, user=None):
        """Mark the document cancelled. Stock already moved stays moved."""
        return cls.transition(document_id, 'cancelled', user)

    @classmethod
    def delete(cls, document_id):
        """Delete the document and its items. Ledger history is kept."""
        with transaction.atomic():
            document = cls.get(document_id, lock=True)
            number = getattr(document, cls.number_field)
            item_count = document.items.count()
            document.delete()
        logger.info(f"Deleted {cls.label} {number} ({item_count} item(s))")
        return {'id': document_id, 'number': number, 'items_deleted': item_count}
