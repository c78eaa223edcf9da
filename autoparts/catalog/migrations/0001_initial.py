# Generated manually for LineCode, PartCategory and Part models

import autoparts.catalog.models
import django.db.models.deletion
from decimal import Decimal
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('parties', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='LineCode',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('code', models.CharField(max_length=50, unique=True)),
                ('description', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'line_codes',
                'ordering': ['code'],
            },
        ),
        migrations.CreateModel(
            name='PartCategory',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100)),
                ('description', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'db_table': 'part_categories',
                'ordering': ['name'],
                'verbose_name_plural': 'Part categories',
            },
        ),
        migrations.CreateModel(
            name='Part',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('sku', models.CharField(max_length=100, unique=True)),
                ('name', models.CharField(max_length=255)),
                ('description', models.TextField(blank=True)),
                ('unit_price', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=15)),
                ('cost', models.DecimalField(blank=True, decimal_places=2, max_digits=15, null=True)),
                ('list_price', models.DecimalField(blank=True, decimal_places=2, max_digits=15, null=True)),
                ('retail', models.DecimalField(blank=True, decimal_places=2, max_digits=15, null=True)),
                ('stock_quantity', models.IntegerField(default=0)),
                ('min_stock_threshold', models.IntegerField(default=autoparts.catalog.models.default_min_stock_threshold)),
                ('order_qty', models.IntegerField(blank=True, null=True)),
                ('order_multiple', models.IntegerField(default=1)),
                ('stocking_unit', models.CharField(default='EA', max_length=20)),
                ('purchase_unit', models.CharField(default='EA', max_length=20)),
                ('unit', models.CharField(default='EA', max_length=20)),
                ('manufacturer', models.CharField(blank=True, max_length=255)),
                ('mfg_part_number', models.CharField(blank=True, max_length=100)),
                ('weight', models.DecimalField(blank=True, decimal_places=3, max_digits=10, null=True)),
                ('image_url', models.URLField(blank=True, max_length=500)),
                ('is_archived', models.BooleanField(default=False)),
                ('archived_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('category', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='parts', to='catalog.partcategory')),
                ('line_code', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='parts', to='catalog.linecode')),
                ('supplier', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='parts', to='parties.supplier')),
            ],
            options={
                'db_table': 'parts',
                'ordering': ['sku'],
                'indexes': [
                    models.Index(fields=['is_archived'], name='idx_part_archived'),
                    models.Index(fields=['supplier'], name='idx_part_supplier'),
                    models.Index(fields=['line_code'], name='idx_part_line_code'),
                ],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(stock_quantity__gte=0), name='part_stock_quantity_non_negative'),
                ],
            },
        ),
    ]
