from rest_framework import serializers
from .models import Customer, Supplier


class SupplierSerializer(serializers.ModelSerializer):
    class Meta:
        model = Supplier
        fields = ['id', 'name', 'contact_person', 'phone', 'email', 'address', 'accounts_payable', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']


class CustomerSerializer(serializers.ModelSerializer):
    class Meta:
        model = Customer
        fields = ['id', 'name', 'contact_person', 'phone', 'email', 'address', 'accounts_receivable', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']
