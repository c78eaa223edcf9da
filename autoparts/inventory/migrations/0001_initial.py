# Generated manually for InventoryLedgerEntry and LowStockAlert models

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('catalog', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='InventoryLedgerEntry',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('transaction_type', models.CharField(choices=[('in', 'In'), ('out', 'Out'), ('adjustment', 'Adjustment'), ('sale', 'Sale'), ('purchase', 'Purchase'), ('credit', 'Credit'), ('warranty', 'Warranty')], max_length=20)),
                ('quantity', models.IntegerField(help_text='Signed stock delta')),
                ('balance_after', models.IntegerField()),
                ('reference_type', models.CharField(choices=[('purchase_order', 'Purchase Order'), ('sales_invoice', 'Sales Invoice'), ('credit', 'Credit'), ('warranty', 'Warranty'), ('manual', 'Manual Adjustment'), ('initial', 'Initial Stock')], max_length=20)),
                ('reference_id', models.BigIntegerField(blank=True, null=True)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('operated_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='ledger_entries', to=settings.AUTH_USER_MODEL)),
                ('part', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='ledger_entries', to='catalog.part')),
            ],
            options={
                'db_table': 'inventory_ledger',
                'ordering': ['-created_at', '-id'],
                'verbose_name_plural': 'Inventory ledger entries',
                'indexes': [
                    models.Index(fields=['part', 'id'], name='idx_ledger_part'),
                    models.Index(fields=['reference_type', 'reference_id'], name='idx_ledger_reference'),
                ],
            },
        ),
        migrations.CreateModel(
            name='LowStockAlert',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('current_stock', models.IntegerField()),
                ('min_threshold', models.IntegerField()),
                ('is_resolved', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('resolved_at', models.DateTimeField(blank=True, null=True)),
                ('part', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='low_stock_alerts', to='catalog.part')),
            ],
            options={
                'db_table': 'low_stock_alerts',
                'ordering': ['-created_at', '-id'],
                'indexes': [
                    models.Index(fields=['part', 'is_resolved'], name='idx_alert_part_resolved'),
                ],
            },
        ),
    ]
