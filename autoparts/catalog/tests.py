"""
Test suite for the catalog: line codes, parts, archiving, manual stock
adjustments and part history
"""
from decimal import Decimal
from django.test import TestCase
from rest_framework import status
from autoparts.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from autoparts.core.exceptions import InvalidStateError, ValidationError
from autoparts.catalog import services
from autoparts.catalog.models import LineCode, Part
from autoparts.inventory.models import InventoryLedgerEntry, LedgerReferenceType, LowStockAlert


class PartModelTests(TestCase):

    def test_part_str(self):
        part = TestDataFactory.create_part(sku='BP-100', name='Brake Pad')
        self.assertEqual(str(part), 'BP-100 - Brake Pad')

    def test_is_low_stock(self):
        part = TestDataFactory.create_part(stock=3, min_stock_threshold=5)
        self.assertTrue(part.is_low_stock)
        part = TestDataFactory.create_part(stock=5, min_stock_threshold=5)
        self.assertFalse(part.is_low_stock)

    def test_default_threshold_comes_from_settings(self):
        with self.settings(AUTOPARTS_DEFAULT_MIN_STOCK_THRESHOLD=7):
            part = Part.objects.create(sku='DEF-1', name='Default')
        self.assertEqual(part.min_stock_threshold, 7)


class CreatePartTests(TestCase):

    def test_initial_stock_opens_ledger(self):
        part = TestDataFactory.create_part(stock=12)
        self.assertEqual(part.stock_quantity, 12)
        entry = InventoryLedgerEntry.objects.get(part=part)
        self.assertEqual(entry.quantity, 12)
        self.assertEqual(entry.balance_after, 12)
        self.assertEqual(entry.reference_type, LedgerReferenceType.INITIAL)

    def test_zero_stock_writes_nothing(self):
        part = TestDataFactory.create_part(stock=0)
        self.assertFalse(InventoryLedgerEntry.objects.filter(part=part).exists())
        self.assertFalse(LowStockAlert.objects.filter(part=part).exists())

    def test_duplicate_sku(self):
        TestDataFactory.create_part(sku='DUP-1')
        with self.assertRaises(ValidationError):
            TestDataFactory.create_part(sku='DUP-1')

    def test_negative_initial_stock(self):
        with self.assertRaises(ValidationError):
            TestDataFactory.create_part(stock=-4)
        self.assertEqual(Part.objects.count(), 0)


class ArchiveTests(TestCase):

    def setUp(self):
        self.part = TestDataFactory.create_part(stock=5)

    def test_archive_and_restore(self):
        part = services.archive_part(self.part.id)
        self.assertTrue(part.is_archived)
        self.assertIsNotNone(part.archived_at)
        with self.assertRaises(InvalidStateError):
            services.archive_part(self.part.id)

        part = services.restore_part(self.part.id)
        self.assertFalse(part.is_archived)
        self.assertIsNone(part.archived_at)
        with self.assertRaises(InvalidStateError):
            services.restore_part(self.part.id)

    def test_bulk_archive_counts_failures(self):
        other = TestDataFactory.create_part()
        services.archive_part(other.id)
        result = services.bulk_archive_parts([self.part.id, other.id, 999999])
        self.assertEqual(result, {'archived': 1, 'failed': 2, 'total': 3})

    def test_bulk_requires_ids(self):
        with self.assertRaises(ValidationError):
            services.bulk_restore_parts([])

    def test_bulk_force_delete(self):
        other = TestDataFactory.create_part(stock=2)
        result = services.bulk_force_delete_parts([self.part.id, other.id])
        self.assertEqual(result['deleted'], 2)
        self.assertEqual(Part.objects.count(), 0)
        self.assertEqual(InventoryLedgerEntry.objects.count(), 0)


class LineCodeAPITests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_line_code_uppercases(self):
        response = self.client.post('/api/v1/line-codes/', {'code': ' wag ', 'description': 'Wagner'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['code'], 'WAG')

    def test_delete_unused_line_code(self):
        line_code = TestDataFactory.create_line_code()
        response = self.client.delete(f'/api/v1/line-codes/{line_code.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(LineCode.objects.filter(pk=line_code.id).exists())

    def test_delete_used_line_code_conflicts(self):
        line_code = TestDataFactory.create_line_code()
        TestDataFactory.create_part(line_code=line_code)
        response = self.client.delete(f'/api/v1/line-codes/{line_code.id}/')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertTrue(response.data['can_force_delete'])
        self.assertTrue(LineCode.objects.filter(pk=line_code.id).exists())

    def test_line_codes_by_sku(self):
        line_code = TestDataFactory.create_line_code(code='ACD')
        TestDataFactory.create_part(sku='PF-48', line_code=line_code)
        response = self.client.get('/api/v1/line-codes/by-sku/PF-48/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['line_code'], 'ACD')


class PartAPITests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_part_with_stock(self):
        data = {'sku': 'OF-1', 'name': 'Oil Filter', 'unit_price': '6.50', 'stock_quantity': 20}
        response = self.client.post('/api/v1/parts/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['stock_quantity'], 20)
        self.assertEqual(InventoryLedgerEntry.objects.filter(part_id=response.data['id']).count(), 1)

    def test_stock_quantity_cannot_be_edited_directly(self):
        part = TestDataFactory.create_part(stock=4)
        response = self.client.patch(f'/api/v1/parts/{part.id}/', {'stock_quantity': 100, 'name': 'Renamed'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        part.refresh_from_db()
        self.assertEqual(part.stock_quantity, 4)
        self.assertEqual(part.name, 'Renamed')

    def test_list_hides_archived(self):
        TestDataFactory.create_part(sku='LIVE-1')
        archived = TestDataFactory.create_part(sku='GONE-1')
        services.archive_part(archived.id)

        response = self.client.get('/api/v1/parts/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['sku'] for row in response.data['results']], ['LIVE-1'])

        response = self.client.get('/api/v1/parts/archived/')
        self.assertEqual([row['sku'] for row in response.data['results']], ['GONE-1'])

    def test_search_and_low_stock_filter(self):
        TestDataFactory.create_part(sku='ROTOR-1', name='Front rotor', stock=1, min_stock_threshold=5)
        TestDataFactory.create_part(sku='ROTOR-2', name='Rear rotor', stock=9, min_stock_threshold=5)
        response = self.client.get('/api/v1/parts/', {'search': 'rotor', 'low_stock': 'true'})
        self.assertEqual([row['sku'] for row in response.data['results']], ['ROTOR-1'])

        response = self.client.get('/api/v1/parts/low-stock/')
        self.assertEqual([row['sku'] for row in response.data], ['ROTOR-1'])

    def test_part_by_sku(self):
        TestDataFactory.create_part(sku='SPK-9')
        response = self.client.get('/api/v1/parts/by-sku/SPK-9/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        response = self.client.get('/api/v1/parts/by-sku/NOPE/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_delete_part_with_history_conflicts(self):
        part = TestDataFactory.create_part(stock=3)
        response = self.client.delete(f'/api/v1/parts/{part.id}/')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertIn('ledger_entries', response.data['dependents'])

        response = self.client.post(f'/api/v1/parts/{part.id}/force-delete/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['success'])
        self.assertFalse(Part.objects.filter(pk=part.id).exists())

    def test_archive_endpoints(self):
        part = TestDataFactory.create_part()
        response = self.client.post(f'/api/v1/parts/{part.id}/archive/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['is_archived'])
        response = self.client.post(f'/api/v1/parts/{part.id}/archive/')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

        response = self.client.post('/api/v1/parts/bulk-restore/', {'ids': [part.id]}, format='json')
        self.assertEqual(response.data, {'restored': 1, 'failed': 0, 'total': 1})


class AdjustStockAPITests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.part = TestDataFactory.create_part(stock=10, min_stock_threshold=5)

    def test_adjust_by_delta(self):
        response = self.client.post(f'/api/v1/parts/{self.part.id}/adjust-stock/', {'quantity': -3, 'notes': 'damaged'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['stock_quantity'], 7)
        entry = InventoryLedgerEntry.objects.filter(part=self.part).latest('id')
        self.assertEqual(entry.quantity, -3)
        self.assertEqual(entry.reference_type, LedgerReferenceType.MANUAL)
        self.assertEqual(entry.operated_by, self.user)

    def test_set_absolute_quantity(self):
        response = self.client.post(f'/api/v1/parts/{self.part.id}/adjust-stock/', {'new_quantity': 2}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['stock_quantity'], 2)
        entry = InventoryLedgerEntry.objects.filter(part=self.part).latest('id')
        self.assertEqual(entry.quantity, -8)
        self.assertTrue(LowStockAlert.objects.filter(part=self.part, is_resolved=False).exists())

    def test_adjust_below_zero_is_refused(self):
        response = self.client.post(f'/api/v1/parts/{self.part.id}/adjust-stock/', {'quantity': -11}, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.part.refresh_from_db()
        self.assertEqual(self.part.stock_quantity, 10)

    def test_both_modes_rejected(self):
        response = self.client.post(f'/api/v1/parts/{self.part.id}/adjust-stock/', {'quantity': 1, 'new_quantity': 3}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class PartHistoryTests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.part = TestDataFactory.create_part(stock=10)

    def test_history_combines_documents_and_adjustments(self):
        TestDataFactory.create_sales_invoice(lines=[(self.part, 2, '15.00')], invoice_date='2024-01-10')
        TestDataFactory.create_purchase_order(lines=[(self.part, 5, '8.00')], order_date='2024-01-05')
        TestDataFactory.create_credit(lines=[(self.part, 1, '15.00')], credit_date='2024-01-12')

        history = services.part_history(self.part.id)
        types = [row['type'] for row in history]
        self.assertEqual(sorted(types), ['adjustment', 'credit', 'purchase', 'sale'])
        dates = [row['date'] for row in history]
        self.assertEqual(dates, sorted(dates, reverse=True))

        response = self.client.get(f'/api/v1/parts/{self.part.id}/history/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 4)
        sale = next(row for row in response.data if row['type'] == 'sale')
        self.assertEqual(sale['unit_price'], '15.00')

    def test_history_for_missing_part(self):
        response = self.client.get('/api/v1/parts/999999/history/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_price_is_kept_on_items(self):
        invoice = TestDataFactory.create_sales_invoice(lines=[(self.part, 1, '12.345')])
        self.assertEqual(invoice.items.get().unit_price, Decimal('12.35'))
