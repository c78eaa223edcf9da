from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db.models import Count
from django.shortcuts import get_object_or_404
from autoparts.core.cascade import delete_line_code, delete_part, force_delete_part
from autoparts.core.exceptions import InventoryError, error_response
from autoparts.core.utils import create_audit_log, paginated_response
from autoparts.inventory.alerts import low_stock_parts
from autoparts.inventory.services import adjust_stock, set_stock_level
from .filters import PartFilter
from .models import LineCode, PartCategory, Part
from .serializers import (
    LineCodeSerializer, PartCategorySerializer, PartSerializer,
    StockAdjustmentInputSerializer, PartHistorySerializer,
)
from . import services


# Line code views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def line_code_list_create(request):
    """List all line codes or create a new line code"""
    if request.method == 'GET':
        queryset = LineCode.objects.annotate(num_parts=Count('parts')).order_by('code')
        search = request.query_params.get('search', None)
        if search:
            queryset = queryset.filter(code__icontains=search)
        serializer = LineCodeSerializer(queryset, many=True)
        return Response(serializer.data)
    else:  # POST
        serializer = LineCodeSerializer(data=request.data)
        if serializer.is_valid():
            line_code = serializer.save()
            create_audit_log(
                request=request,
                action='create',
                entity_type='LineCode',
                entity_id=line_code.id,
                entity_name=line_code.code,
            )
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def line_code_detail(request, pk):
    """Retrieve, update or delete a line code"""
    line_code = get_object_or_404(LineCode, pk=pk)

    if request.method == 'GET':
        serializer = LineCodeSerializer(line_code)
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = LineCodeSerializer(line_code, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            create_audit_log(
                request=request,
                action='update',
                entity_type='LineCode',
                entity_id=line_code.id,
                entity_name=line_code.code,
                changes=request.data,
            )
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        code = line_code.code
        try:
            delete_line_code(pk)
        except InventoryError as e:
            return error_response(e)
        create_audit_log(request=request, action='delete', entity_type='LineCode', entity_id=pk, entity_name=code)
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def line_codes_by_sku(request, sku):
    """Line codes that carry a SKU"""
    return Response(services.line_codes_by_sku(sku))


# Part category views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def part_category_list_create(request):
    """List all part categories or create a new one"""
    if request.method == 'GET':
        serializer = PartCategorySerializer(PartCategory.objects.all(), many=True)
        return Response(serializer.data)
    else:  # POST
        serializer = PartCategorySerializer(data=request.data)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


# Part views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def part_list_create(request):
    """List parts or create a new part"""
    if request.method == 'GET':
        queryset = Part.objects.select_related('line_code', 'category', 'supplier')
        # Archived parts are hidden unless explicitly requested
        if 'archived' not in request.query_params:
            queryset = queryset.filter(is_archived=False)
        queryset = PartFilter(request.query_params, queryset=queryset).qs.order_by('sku')
        return paginated_response(request, queryset, PartSerializer)
    else:  # POST
        serializer = PartSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        try:
            part = services.create_part(
                serializer.validated_data,
                initial_stock=request.data.get('stock_quantity', 0),
                user=request.user,
            )
        except InventoryError as e:
            return error_response(e)
        create_audit_log(
            request=request,
            action='create',
            entity_type='Part',
            entity_id=part.id,
            entity_name=part.sku,
            changes={'stock_quantity': part.stock_quantity},
        )
        return Response(PartSerializer(part).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def part_detail(request, pk):
    """Retrieve, update or delete a part"""
    part = get_object_or_404(Part.objects.select_related('line_code', 'category', 'supplier'), pk=pk)

    if request.method == 'GET':
        serializer = PartSerializer(part)
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = PartSerializer(part, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            create_audit_log(
                request=request,
                action='update',
                entity_type='Part',
                entity_id=part.id,
                entity_name=part.sku,
                changes={key: str(value) for key, value in request.data.items()},
            )
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        sku = part.sku
        try:
            delete_part(pk)
        except InventoryError as e:
            return error_response(e)
        create_audit_log(request=request, action='delete', entity_type='Part', entity_id=pk, entity_name=sku)
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def part_force_delete(request, pk):
    """Delete a part together with every record that references it"""
    part = get_object_or_404(Part, pk=pk)
    sku = part.sku
    try:
        deleted = force_delete_part(pk)
    except InventoryError as e:
        return error_response(e)
    create_audit_log(
        request=request,
        action='delete',
        entity_type='Part',
        entity_id=pk,
        entity_name=sku,
        changes={'force': True, 'deleted': deleted},
    )
    return Response({'success': True, 'deleted': deleted})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def part_archive(request, pk):
    try:
        part = services.archive_part(pk)
    except InventoryError as e:
        return error_response(e)
    create_audit_log(request=request, action='update', entity_type='Part', entity_id=pk,
                     entity_name=part.sku, changes={'is_archived': True})
    return Response(PartSerializer(part).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def part_restore(request, pk):
    try:
        part = services.restore_part(pk)
    except InventoryError as e:
        return error_response(e)
    create_audit_log(request=request, action='update', entity_type='Part', entity_id=pk,
                     entity_name=part.sku, changes={'is_archived': False})
    return Response(PartSerializer(part).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def parts_archived(request):
    """List archived parts"""
    return paginated_response(request, services.archived_parts(), PartSerializer)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def parts_low_stock(request):
    """Active parts below their minimum stock threshold"""
    serializer = PartSerializer(low_stock_parts(), many=True)
    return Response(serializer.data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def part_by_sku(request, sku):
    part = get_object_or_404(Part.objects.select_related('line_code', 'category', 'supplier'), sku=sku)
    return Response(PartSerializer(part).data)


def _bulk_ids(request):
    ids = request.data.get('ids')
    if not isinstance(ids, list):
        return None
    return ids


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def parts_bulk_archive(request):
    ids = _bulk_ids(request)
    try:
        result = services.bulk_archive_parts(ids)
    except InventoryError as e:
        return error_response(e)
    return Response(result)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def parts_bulk_restore(request):
    ids = _bulk_ids(request)
    try:
        result = services.bulk_restore_parts(ids)
    except InventoryError as e:
        return error_response(e)
    return Response(result)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def parts_bulk_force_delete(request):
    ids = _bulk_ids(request)
    try:
        result = services.bulk_force_delete_parts(ids)
    except InventoryError as e:
        return error_response(e)
    return Response(result)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def part_adjust_stock(request, pk):
    """Manual stock adjustment by delta (quantity) or to an absolute value (new_quantity)"""
    part = get_object_or_404(Part, pk=pk)
    serializer = StockAdjustmentInputSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data
    old_quantity = part.stock_quantity
    try:
        if data.get('new_quantity') is not None:
            new_balance = set_stock_level(pk, data['new_quantity'], notes=data['notes'], operated_by=request.user)
        else:
            new_balance = adjust_stock(pk, data['quantity'], notes=data['notes'], operated_by=request.user)
    except InventoryError as e:
        return error_response(e)

    create_audit_log(
        request=request,
        action='update',
        entity_type='Part',
        entity_id=pk,
        entity_name=part.sku,
        changes={'stock_quantity': {'old': old_quantity, 'new': new_balance}, 'notes': data['notes']},
    )
    part.refresh_from_db()
    return Response(PartSerializer(part).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def part_history(request, pk):
    """Sales, purchases, credits, warranties and adjustments for a part, newest first"""
    try:
        history = services.part_history(pk)
    except InventoryError as e:
        return error_response(e)
    return Response(PartHistorySerializer(history, many=True).data)
