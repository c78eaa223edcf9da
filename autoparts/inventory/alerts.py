"""
Low-stock alert management.

An alert is raised whenever a stock change leaves a part below its
minimum threshold. At most one unresolved alert exists per part: a later
crossing refreshes the open alert instead of adding another row.
Alerts are resolved manually; replenishing stock does not resolve them.
"""
import logging

from django.db import transaction
from django.utils import timezone

from autoparts.catalog.models import Part
from autoparts.core.exceptions import InvalidStateError, NotFoundError
from .models import LowStockAlert

logger = logging.getLogger(__name__)


def check_low_stock(part):
    """Create or refresh the part's open alert if it is below threshold. Returns the alert or None."""
    if part.stock_quantity >= part.min_stock_threshold:
        return None

    alert = (
        LowStockAlert.objects.select_for_update()
        .filter(part=part, is_resolved=False)
        .order_by('-created_at', '-id')
        .first()
    )
    if alert:
        alert.current_stock = part.stock_quantity
        alert.min_threshold = part.min_stock_threshold
        alert.save(update_fields=['current_stock', 'min_threshold'])
        return alert

    alert = LowStockAlert.objects.create(
        part=part,
        current_stock=part.stock_quantity,
        min_threshold=part.min_stock_threshold,
    )
    logger.info(
        f"Low stock alert raised for part {part.sku}: "
        f"{part.stock_quantity} < {part.min_stock_threshold}"
    )
    return alert


def resolve_low_stock_alert(alert_id):
    with transaction.atomic():
        try:
            alert = LowStockAlert.objects.select_for_update().get(pk=alert_id)
        except LowStockAlert.DoesNotExist:
            raise NotFoundError(f'Low stock alert with ID {alert_id} not found')
        if alert.is_resolved:
            raise InvalidStateError(f'Low stock alert {alert_id} is already resolved')
        alert.is_resolved = True
        alert.resolved_at = timezone.now()
        alert.save(update_fields=['is_resolved', 'resolved_at'])
    return alert


def unresolved_alerts():
    return LowStockAlert.objects.filter(is_resolved=False).select_related('part').order_by('-created_at', '-id')


def low_stock_parts():
    """Active parts whose stock is below their minimum threshold"""
    from django.db.models import F
    return Part.objects.filter(
        is_archived=False,
        stock_quantity__lt=F('min_stock_threshold'),
    ).select_related('line_code', 'supplier').order_by('stock_quantity', 'sku')
