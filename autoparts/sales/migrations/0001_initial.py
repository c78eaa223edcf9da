# Generated manually for SalesInvoice, Credit, Warranty and their item models

import django.db.models.deletion
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('catalog', '0001_initial'),
        ('parties', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='SalesInvoice',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('total_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=15)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('invoice_number', models.CharField(max_length=100, unique=True)),
                ('customer_number', models.CharField(blank=True, max_length=100)),
                ('invoice_date', models.DateTimeField()),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('completed', 'Completed'), ('cancelled', 'Cancelled')], default='pending', max_length=20)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='sales_invoices', to=settings.AUTH_USER_MODEL)),
                ('customer', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='sales_invoices', to='parties.customer')),
            ],
            options={
                'db_table': 'sales_invoices',
                'ordering': ['-invoice_date', '-id'],
                'indexes': [
                    models.Index(fields=['status'], name='idx_invoice_status'),
                    models.Index(fields=['customer', '-invoice_date'], name='idx_invoice_customer_date'),
                ],
            },
        ),
        migrations.CreateModel(
            name='SalesInvoiceItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('quantity', models.PositiveIntegerField()),
                ('unit_price', models.DecimalField(decimal_places=2, max_digits=15)),
                ('subtotal', models.DecimalField(decimal_places=2, max_digits=15)),
                ('invoice', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='sales.salesinvoice')),
                ('part', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='salesinvoiceitems', to='catalog.part')),
            ],
            options={
                'db_table': 'sales_invoice_items',
                'ordering': ['id'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='Credit',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('total_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=15)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('credit_number', models.CharField(max_length=100, unique=True)),
                ('customer_number', models.CharField(blank=True, max_length=100)),
                ('original_invoice_number', models.CharField(blank=True, max_length=100, null=True)),
                ('credit_date', models.DateTimeField()),
                ('reason', models.TextField(blank=True)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('completed', 'Completed'), ('cancelled', 'Cancelled')], default='pending', max_length=20)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='credits', to=settings.AUTH_USER_MODEL)),
                ('customer', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='credits', to='parties.customer')),
            ],
            options={
                'db_table': 'credits',
                'ordering': ['-credit_date', '-id'],
            },
        ),
        migrations.CreateModel(
            name='CreditItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('quantity', models.PositiveIntegerField()),
                ('unit_price', models.DecimalField(decimal_places=2, max_digits=15)),
                ('subtotal', models.DecimalField(decimal_places=2, max_digits=15)),
                ('credit', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='sales.credit')),
                ('part', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='credititems', to='catalog.part')),
            ],
            options={
                'db_table': 'credit_items',
                'ordering': ['id'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='Warranty',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('total_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=15)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('warranty_number', models.CharField(max_length=100, unique=True)),
                ('customer_number', models.CharField(blank=True, max_length=100)),
                ('original_invoice_number', models.CharField(blank=True, max_length=100, null=True)),
                ('warranty_date', models.DateTimeField()),
                ('claim_reason', models.TextField(blank=True)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('approved', 'Approved'), ('rejected', 'Rejected'), ('completed', 'Completed')], default='pending', max_length=20)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='warranties', to=settings.AUTH_USER_MODEL)),
                ('customer', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='warranties', to='parties.customer')),
            ],
            options={
                'db_table': 'warranties',
                'ordering': ['-warranty_date', '-id'],
                'verbose_name_plural': 'Warranties',
            },
        ),
        migrations.CreateModel(
            name='WarrantyItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('quantity', models.PositiveIntegerField()),
                ('unit_price', models.DecimalField(decimal_places=2, max_digits=15)),
                ('subtotal', models.DecimalField(decimal_places=2, max_digits=15)),
                ('part', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='warrantyitems', to='catalog.part')),
                ('warranty', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='sales.warranty')),
            ],
            options={
                'db_table': 'warranty_items',
                'ordering': ['id'],
                'abstract': False,
            },
        ),
    ]
