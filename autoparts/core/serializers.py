from rest_framework import serializers
from .models import User, AuditLog


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ['id', 'username', 'email', 'name', 'first_name', 'last_name', 'phone', 'role',
                  'is_active', 'is_staff', 'created_at', 'updated_at']
        read_only_fields = ['role', 'is_staff', 'created_at', 'updated_at']


class AuditLogSerializer(serializers.ModelSerializer):
    class Meta:
        model = AuditLog
        fields = ['id', 'user', 'user_name', 'action', 'entity_type', 'entity_id', 'entity_name',
                  'changes', 'ip_address', 'user_agent', 'created_at']
