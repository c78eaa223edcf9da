"""
Django management command to wipe transactional and catalog data while
keeping users and audit history
"""
from django.core.management.base import BaseCommand
from django.db import transaction
from autoparts.catalog.models import LineCode, Part, PartCategory
from autoparts.inventory.models import InventoryLedgerEntry, LowStockAlert
from autoparts.parties.models import Customer, Supplier
from autoparts.purchasing.models import PurchaseOrder, PurchaseOrderItem
from autoparts.sales.models import (
    Credit, CreditItem, SalesInvoice, SalesInvoiceItem, Warranty, WarrantyItem,
)

# Children before parents
DELETE_ORDER = [
    ('low stock alerts', LowStockAlert),
    ('ledger entries', InventoryLedgerEntry),
    ('warranty items', WarrantyItem),
    ('warranties', Warranty),
    ('credit items', CreditItem),
    ('credits', Credit),
    ('sales invoice items', SalesInvoiceItem),
    ('sales invoices', SalesInvoice),
    ('purchase order items', PurchaseOrderItem),
    ('purchase orders', PurchaseOrder),
    ('parts', Part),
    ('part categories', PartCategory),
    ('line codes', LineCode),
    ('customers', Customer),
    ('suppliers', Supplier),
]


class Command(BaseCommand):
    help = 'Delete all parts, parties, documents and ledger data (users and audit logs are kept)'

    def add_arguments(self, parser):
        parser.add_argument(
            '--confirm',
            action='store_true',
            help='Actually delete the data',
        )

    def handle(self, *args, **options):
        if not options.get('confirm'):
            self.stdout.write(self.style.WARNING('This deletes all inventory data. Re-run with --confirm to proceed.'))
            return

        with transaction.atomic():
            for label, model in DELETE_ORDER:
                count, _ = model.objects.all().delete()
                self.stdout.write(f"Deleted {count} {label}")

        self.stdout.write(self.style.SUCCESS('All inventory data cleared'))
