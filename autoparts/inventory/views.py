from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404
from autoparts.catalog.models import Part
from autoparts.core.exceptions import InventoryError, error_response
from autoparts.core.utils import paginated_response
from .alerts import resolve_low_stock_alert, unresolved_alerts
from .models import InventoryLedgerEntry, LowStockAlert
from .serializers import InventoryLedgerEntrySerializer, LowStockAlertSerializer
from .services import ledger_for_part


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def ledger_list(request):
    """List inventory ledger entries, newest first"""
    queryset = InventoryLedgerEntry.objects.select_related('part', 'operated_by')

    part = request.query_params.get('part', None)
    reference_type = request.query_params.get('reference_type', None)
    reference_id = request.query_params.get('reference_id', None)
    transaction_type = request.query_params.get('transaction_type', None)
    date_from = request.query_params.get('date_from', None)
    date_to = request.query_params.get('date_to', None)

    if part:
        queryset = queryset.filter(part_id=part)
    if reference_type:
        queryset = queryset.filter(reference_type=reference_type)
    if reference_id:
        queryset = queryset.filter(reference_id=reference_id)
    if transaction_type:
        queryset = queryset.filter(transaction_type=transaction_type)
    if date_from:
        queryset = queryset.filter(created_at__date__gte=date_from)
    if date_to:
        queryset = queryset.filter(created_at__date__lte=date_to)

    queryset = queryset.order_by('-created_at', '-id')
    return paginated_response(request, queryset, InventoryLedgerEntrySerializer)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def part_ledger(request, pk):
    """Ledger entries for one part in the order they were written"""
    get_object_or_404(Part, pk=pk)
    serializer = InventoryLedgerEntrySerializer(ledger_for_part(pk).select_related('part'), many=True)
    return Response(serializer.data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def alert_list(request):
    """Unresolved low stock alerts (pass ?all=true to include resolved ones)"""
    if request.query_params.get('all', '').lower() in ('1', 'true', 'yes'):
        queryset = LowStockAlert.objects.select_related('part').order_by('-created_at', '-id')
    else:
        queryset = unresolved_alerts()
    serializer = LowStockAlertSerializer(queryset, many=True)
    return Response(serializer.data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def alert_resolve(request, pk):
    try:
        alert = resolve_low_stock_alert(pk)
    except InventoryError as e:
        return error_response(e)
    return Response(LowStockAlertSerializer(alert).data, status=status.HTTP_200_OK)
