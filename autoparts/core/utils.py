"""Utility functions for audit logging, input parsing and pagination"""
import logging
from datetime import datetime, time
from decimal import Decimal, InvalidOperation

from django.conf import settings
from django.core.paginator import Paginator
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime
from rest_framework.response import Response

from .exceptions import ValidationError
from .models import AuditLog

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal('0.01')
# Largest value a 32-bit integer column holds
MAX_QUANTITY = 2147483647
# decimal(15,2) leaves 13 digits before the point
MAX_AMOUNT = Decimal('9999999999999.99')


def get_client_ip(request):
    """Extract client IP address from request"""
    if not request or not hasattr(request, 'META'):
        return None
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        ip = x_forwarded_for.split(',')[0].strip()
    else:
        ip = request.META.get('REMOTE_ADDR')
    return ip or None


def create_audit_log(request=None, action=None, entity_type=None, entity_id=None,
                     entity_name=None, changes=None, user=None):
    """
    Create an audit log entry

    Args:
        request: Django request object (for user, IP and user agent) - optional if user is provided
        action: create, update or delete
        entity_type: Name of the entity being acted upon (Part, SalesInvoice, ...)
        entity_id: Primary key of the entity
        entity_name: Human-readable name (e.g., part SKU, invoice number)
        changes: Dictionary of changes made
        user: Optional user override (defaults to request.user if request provided)
    """
    if not action or not entity_type or entity_id is None:
        logger.warning(
            "Audit log creation skipped: missing required fields "
            f"(action={action}, entity_type={entity_type}, entity_id={entity_id})"
        )
        return None

    audit_user = user
    if audit_user is None and request is not None and hasattr(request, 'user'):
        audit_user = request.user
    if audit_user is not None and not audit_user.is_authenticated:
        audit_user = None

    try:
        return AuditLog.objects.create(
            user=audit_user,
            user_name=audit_user.get_display_name() if audit_user else None,
            action=action,
            entity_type=entity_type,
            entity_id=int(entity_id),
            entity_name=entity_name,
            changes=changes or {},
            ip_address=get_client_ip(request),
            user_agent=request.META.get('HTTP_USER_AGENT') if request is not None and hasattr(request, 'META') else None,
        )
    except Exception as e:
        # Audit logging must never fail the main operation
        logger.error(f"Failed to create audit log: {str(e)}")
        return None


def parse_quantity(value, field='quantity', allow_negative=False, allow_zero=False):
    """Parse an integer quantity from user input"""
    if value is None or value == '':
        raise ValidationError(f'{field} is required')
    if isinstance(value, bool):
        raise ValidationError(f'{field} must be a whole number')
    try:
        decimal_value = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValidationError(f'{field} must be a whole number, got "{value}"')
    if not decimal_value.is_finite():
        raise ValidationError(f'{field} must be a whole number, got "{value}"')
    if decimal_value != decimal_value.to_integral_value():
        raise ValidationError(f'{field} must be a whole number, got "{value}"')
    quantity = int(decimal_value)
    if abs(quantity) > MAX_QUANTITY:
        raise ValidationError(f'{field} must not exceed {MAX_QUANTITY}')
    if quantity < 0 and not allow_negative:
        raise ValidationError(f'{field} must be greater than 0')
    if quantity == 0 and not allow_zero:
        raise ValidationError(f'{field} must not be zero' if allow_negative else f'{field} must be greater than 0')
    return quantity


def parse_amount(value, field='unit_price'):
    """Parse a non-negative monetary amount, rounded to cents"""
    if value is None or value == '':
        raise ValidationError(f'{field} is required')
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValidationError(f'{field} must be a valid amount, got "{value}"')
    if not amount.is_finite():
        raise ValidationError(f'{field} must be a valid amount, got "{value}"')
    if amount < 0:
        raise ValidationError(f'{field} must not be negative')
    try:
        amount = amount.quantize(TWO_PLACES)
    except InvalidOperation:
        raise ValidationError(f'{field} must not exceed {MAX_AMOUNT}')
    if amount > MAX_AMOUNT:
        raise ValidationError(f'{field} must not exceed {MAX_AMOUNT}')
    return amount


def parse_datetime_value(value, field='date'):
    """Accept a datetime, an ISO datetime string or an ISO date string; defaults to now"""
    if value in (None, ''):
        return timezone.now()
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = parse_datetime(str(value))
        if parsed is None:
            day = parse_date(str(value))
            if day is None:
                raise ValidationError(f'{field} must be an ISO date, got "{value}"')
            parsed = datetime.combine(day, time.min)
    if settings.USE_TZ and timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed)
    return parsed


def paginated_response(request, queryset, serializer_class, context=None):
    """Paginate a queryset with the page/limit query params used by every list endpoint"""
    try:
        page = int(request.query_params.get('page', 1))
        limit = int(request.query_params.get('limit', settings.AUTOPARTS_PAGE_SIZE))
    except ValueError:
        page, limit = 1, settings.AUTOPARTS_PAGE_SIZE
    limit = max(1, min(limit, 500))

    paginator = Paginator(queryset, limit)
    page_obj = paginator.get_page(page)

    serializer = serializer_class(page_obj, many=True, context=context or {'request': request})
    return Response({
        'results': serializer.data,
        'count': paginator.count,
        'next': page_obj.next_page_number() if page_obj.has_next() else None,
        'previous': page_obj.previous_page_number() if page_obj.has_previous() else None,
        'page': page_obj.number,
        'page_size': limit,
        'total_pages': paginator.num_pages,
    })
