from django.contrib import admin
from .models import Customer, Supplier


@admin.register(Supplier)
class SupplierAdmin(admin.ModelAdmin):
    list_display = ['name', 'contact_person', 'phone', 'email', 'accounts_payable', 'created_at']
    search_fields = ['name', 'contact_person', 'phone', 'email']
    ordering = ['name']


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ['name', 'contact_person', 'phone', 'email', 'accounts_receivable', 'created_at']
    search_fields = ['name', 'contact_person', 'phone', 'email']
    ordering = ['name']
