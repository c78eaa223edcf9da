from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from .models import User, AuditLog


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ['username', 'name', 'email', 'role', 'is_active', 'is_staff', 'created_at']
    list_filter = ['role', 'is_active', 'is_staff']
    fieldsets = BaseUserAdmin.fieldsets + (
        ('Profile', {'fields': ('name', 'phone', 'role')}),
    )


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ['created_at', 'user_name', 'action', 'entity_type', 'entity_id', 'entity_name', 'ip_address']
    list_filter = ['action', 'entity_type', 'created_at']
    search_fields = ['entity_name', 'user_name', 'entity_type']
    ordering = ['-created_at']
    readonly_fields = ['user', 'user_name', 'action', 'entity_type', 'entity_id', 'entity_name',
                       'changes', 'ip_address', 'user_agent', 'created_at']
