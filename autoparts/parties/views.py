from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db.models import Q
from django.shortcuts import get_object_or_404
from autoparts.core.cascade import delete_customer, delete_supplier, force_delete_customer, force_delete_supplier
from autoparts.core.exceptions import InventoryError, error_response
from autoparts.core.utils import create_audit_log, paginated_response
from .models import Customer, Supplier
from .serializers import CustomerSerializer, SupplierSerializer


def _search(queryset, request):
    search = request.query_params.get('search', None)
    if search:
        queryset = queryset.filter(
            Q(name__icontains=search) |
            Q(contact_person__icontains=search) |
            Q(phone__icontains=search) |
            Q(email__icontains=search)
        )
    return queryset


# Customer views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def customer_list_create(request):
    """List all customers or create a new customer"""
    if request.method == 'GET':
        queryset = _search(Customer.objects.all(), request).order_by('name')
        return paginated_response(request, queryset, CustomerSerializer)
    else:  # POST
        serializer = CustomerSerializer(data=request.data)
        if serializer.is_valid():
            customer = serializer.save()
            create_audit_log(request=request, action='create', entity_type='Customer',
                             entity_id=customer.id, entity_name=customer.name)
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def customer_detail(request, pk):
    """Retrieve, update or delete a customer"""
    customer = get_object_or_404(Customer, pk=pk)

    if request.method == 'GET':
        serializer = CustomerSerializer(customer)
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = CustomerSerializer(customer, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            create_audit_log(request=request, action='update', entity_type='Customer',
                             entity_id=customer.id, entity_name=customer.name,
                             changes={key: str(value) for key, value in request.data.items()})
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        name = customer.name
        try:
            delete_customer(pk)
        except InventoryError as e:
            return error_response(e)
        create_audit_log(request=request, action='delete', entity_type='Customer', entity_id=pk, entity_name=name)
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def customer_force_delete(request, pk):
    """Delete a customer with all of its invoices, credits and warranties"""
    customer = get_object_or_404(Customer, pk=pk)
    name = customer.name
    try:
        deleted = force_delete_customer(pk)
    except InventoryError as e:
        return error_response(e)
    create_audit_log(request=request, action='delete', entity_type='Customer', entity_id=pk,
                     entity_name=name, changes={'force': True, 'deleted': deleted})
    return Response({'success': True, 'deleted': deleted})


# Supplier views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def supplier_list_create(request):
    """List all suppliers or create a new supplier"""
    if request.method == 'GET':
        queryset = _search(Supplier.objects.all(), request).order_by('name')
        return paginated_response(request, queryset, SupplierSerializer)
    else:  # POST
        serializer = SupplierSerializer(data=request.data)
        if serializer.is_valid():
            supplier = serializer.save()
            create_audit_log(request=request, action='create', entity_type='Supplier',
                             entity_id=supplier.id, entity_name=supplier.name)
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def supplier_detail(request, pk):
    """Retrieve, update or delete a supplier"""
    supplier = get_object_or_404(Supplier, pk=pk)

    if request.method == 'GET':
        serializer = SupplierSerializer(supplier)
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = SupplierSerializer(supplier, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            create_audit_log(request=request, action='update', entity_type='Supplier',
                             entity_id=supplier.id, entity_name=supplier.name,
                             changes={key: str(value) for key, value in request.data.items()})
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        name = supplier.name
        try:
            delete_supplier(pk)
        except InventoryError as e:
            return error_response(e)
        create_audit_log(request=request, action='delete', entity_type='Supplier', entity_id=pk, entity_name=name)
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def supplier_force_delete(request, pk):
    """Delete a supplier and its purchase orders; its parts are kept without a supplier"""
    supplier = get_object_or_404(Supplier, pk=pk)
    name = supplier.name
    try:
        deleted = force_delete_supplier(pk)
    except InventoryError as e:
        return error_response(e)
    create_audit_log(request=request, action='delete', entity_type='Supplier', entity_id=pk,
                     entity_name=name, changes={'force': True, 'deleted': deleted})
    return Response({'success': True, 'deleted': deleted})
