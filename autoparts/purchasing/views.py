from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db.models import Count
from autoparts.core.exceptions import InventoryError, error_response
from autoparts.core.utils import create_audit_log, paginated_response
from .serializers import PurchaseOrderSerializer, PurchaseOrderListSerializer
from .services import PurchaseOrderService


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def purchase_order_list_create(request):
    """List all purchase orders or create a new purchase order"""
    if request.method == 'GET':
        queryset = PurchaseOrderService.queryset().annotate(item_count=Count('items'))

        supplier = request.query_params.get('supplier', None)
        status_filter = request.query_params.get('status', None)
        type_filter = request.query_params.get('type', None)
        date_from = request.query_params.get('date_from', None)
        date_to = request.query_params.get('date_to', None)
        search = request.query_params.get('search', None)

        if supplier:
            queryset = queryset.filter(supplier_id=supplier)
        if status_filter:
            queryset = queryset.filter(status=status_filter)
        if type_filter:
            queryset = queryset.filter(type=type_filter)
        if date_from:
            queryset = queryset.filter(order_date__date__gte=date_from)
        if date_to:
            queryset = queryset.filter(order_date__date__lte=date_to)
        if search:
            queryset = queryset.filter(order_number__icontains=search)

        queryset = queryset.order_by('-order_date', '-id')
        return paginated_response(request, queryset, PurchaseOrderListSerializer)
    else:  # POST
        data = request.data.copy()
        items_data = data.pop('items', [])
        try:
            order = PurchaseOrderService.create(data, items_data, user=request.user)
        except InventoryError as e:
            return error_response(e)

        create_audit_log(
            request=request,
            action='create',
            entity_type='PurchaseOrder',
            entity_id=order.id,
            entity_name=order.order_number,
            changes={'total_amount': str(order.total_amount), 'items': len(items_data)},
        )
        order = PurchaseOrderService.get_detail(order.id)
        return Response(PurchaseOrderSerializer(order).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'DELETE'])
@permission_classes([IsAuthenticated])
def purchase_order_detail(request, pk):
    """Retrieve or delete a purchase order"""
    try:
        if request.method == 'GET':
            order = PurchaseOrderService.get_detail(pk)
            return Response(PurchaseOrderSerializer(order).data)
        result = PurchaseOrderService.delete(pk)
    except InventoryError as e:
        return error_response(e)

    create_audit_log(
        request=request,
        action='delete',
        entity_type='PurchaseOrder',
        entity_id=pk,
        entity_name=result['number'],
        changes=result,
    )
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def purchase_order_receive(request, pk):
    """Receive a pending purchase order - adds every item to stock"""
    try:
        order = PurchaseOrderService.receive(pk, user=request.user)
    except InventoryError as e:
        return error_response(e)

    create_audit_log(
        request=request,
        action='update',
        entity_type='PurchaseOrder',
        entity_id=order.id,
        entity_name=order.order_number,
        changes={'status': 'received'},
    )
    return Response(PurchaseOrderSerializer(PurchaseOrderService.get_detail(pk)).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def purchase_order_cancel(request, pk):
    """Cancel a pending purchase order"""
    try:
        order = PurchaseOrderService.cancel(pk, user=request.user)
    except InventoryError as e:
        return error_response(e)

    create_audit_log(
        request=request,
        action='update',
        entity_type='PurchaseOrder',
        entity_id=order.id,
        entity_name=order.order_number,
        changes={'status': 'cancelled'},
    )
    return Response(PurchaseOrderSerializer(PurchaseOrderService.get_detail(pk)).data)
