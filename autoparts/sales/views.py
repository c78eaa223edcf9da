from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from autoparts.core.exceptions import InventoryError, error_response
from autoparts.core.utils import create_audit_log, paginated_response
from .serializers import (
    SalesInvoiceSerializer, CreditSerializer, WarrantySerializer,
    StatusUpdateSerializer, SalesHistorySerializer,
)
from .services import SalesInvoiceService, CreditService, WarrantyService, sales_history_by_part_sku


def _list_documents(request, service, serializer_class):
    """Filtered, paginated document list shared by invoices, credits and warranties"""
    queryset = service.queryset().prefetch_related('items__part__line_code')

    customer = request.query_params.get('customer', None)
    status_filter = request.query_params.get('status', None)
    date_from = request.query_params.get('date_from', None)
    date_to = request.query_params.get('date_to', None)
    search = request.query_params.get('search', None)

    if customer:
        queryset = queryset.filter(customer_id=customer)
    if status_filter:
        queryset = queryset.filter(status=status_filter)
    if date_from:
        queryset = queryset.filter(**{f'{service.date_field}__date__gte': date_from})
    if date_to:
        queryset = queryset.filter(**{f'{service.date_field}__date__lte': date_to})
    if search:
        queryset = queryset.filter(**{f'{service.number_field}__icontains': search})

    queryset = queryset.order_by(f'-{service.date_field}', '-id')
    return paginated_response(request, queryset, serializer_class)


def _create_document(request, service, serializer_class):
    data = request.data.copy()
    items_data = data.pop('items', [])
    try:
        document = service.create(data, items_data, user=request.user)
    except InventoryError as e:
        return error_response(e)

    number = getattr(document, service.number_field)
    create_audit_log(
        request=request,
        action='create',
        entity_type=service.model.__name__,
        entity_id=document.id,
        entity_name=number,
        changes={'total_amount': str(document.total_amount), 'items': len(items_data)},
    )
    return Response(serializer_class(service.get_detail(document.id)).data, status=status.HTTP_201_CREATED)


def _document_detail(request, pk, service, serializer_class):
    try:
        if request.method == 'GET':
            return Response(serializer_class(service.get_detail(pk)).data)
        result = service.delete(pk)
    except InventoryError as e:
        return error_response(e)

    create_audit_log(
        request=request,
        action='delete',
        entity_type=service.model.__name__,
        entity_id=pk,
        entity_name=result['number'],
        changes=result,
    )
    return Response(status=status.HTTP_204_NO_CONTENT)


def _change_status(request, pk, service, serializer_class, new_status=None):
    if new_status is None:
        serializer = StatusUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        new_status = serializer.validated_data['status']
    try:
        document = service.update_status(pk, new_status, user=request.user)
    except InventoryError as e:
        return error_response(e)

    create_audit_log(
        request=request,
        action='update',
        entity_type=service.model.__name__,
        entity_id=document.id,
        entity_name=getattr(document, service.number_field),
        changes={'status': new_status},
    )
    return Response(serializer_class(service.get_detail(pk)).data)


# Sales invoice views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def sales_invoice_list_create(request):
    """List sales invoices or create one (stock is deducted immediately)"""
    if request.method == 'GET':
        return _list_documents(request, SalesInvoiceService, SalesInvoiceSerializer)
    return _create_document(request, SalesInvoiceService, SalesInvoiceSerializer)


@api_view(['GET', 'DELETE'])
@permission_classes([IsAuthenticated])
def sales_invoice_detail(request, pk):
    return _document_detail(request, pk, SalesInvoiceService, SalesInvoiceSerializer)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def sales_invoice_cancel(request, pk):
    return _change_status(request, pk, SalesInvoiceService, SalesInvoiceSerializer, new_status='cancelled')


@api_view(['POST', 'PATCH'])
@permission_classes([IsAuthenticated])
def sales_invoice_status(request, pk):
    return _change_status(request, pk, SalesInvoiceService, SalesInvoiceSerializer)


# Credit views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def credit_list_create(request):
    """List credits or create one (returned parts go back into stock)"""
    if request.method == 'GET':
        return _list_documents(request, CreditService, CreditSerializer)
    return _create_document(request, CreditService, CreditSerializer)


@api_view(['GET', 'DELETE'])
@permission_classes([IsAuthenticated])
def credit_detail(request, pk):
    return _document_detail(request, pk, CreditService, CreditSerializer)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def credit_cancel(request, pk):
    return _change_status(request, pk, CreditService, CreditSerializer, new_status='cancelled')


@api_view(['POST', 'PATCH'])
@permission_classes([IsAuthenticated])
def credit_status(request, pk):
    return _change_status(request, pk, CreditService, CreditSerializer)


# Warranty views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def warranty_list_create(request):
    """List warranties or create one (replacement parts leave stock)"""
    if request.method == 'GET':
        return _list_documents(request, WarrantyService, WarrantySerializer)
    return _create_document(request, WarrantyService, WarrantySerializer)


@api_view(['GET', 'DELETE'])
@permission_classes([IsAuthenticated])
def warranty_detail(request, pk):
    return _document_detail(request, pk, WarrantyService, WarrantySerializer)


@api_view(['POST', 'PATCH'])
@permission_classes([IsAuthenticated])
def warranty_status(request, pk):
    return _change_status(request, pk, WarrantyService, WarrantySerializer)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def sales_history(request, sku):
    """Past sales of a part, used to pre-fill credits and warranties"""
    serializer = SalesHistorySerializer(sales_history_by_part_sku(sku), many=True)
    return Response(serializer.data)
