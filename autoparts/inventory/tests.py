"""
Test suite for the inventory ledger, the stock mutator and low stock alerts
"""
from io import StringIO
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase
from rest_framework import status
from autoparts.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from autoparts.core.exceptions import InsufficientStockError, InvalidStateError, NotFoundError, ValidationError
from autoparts.catalog.models import Part
from autoparts.inventory.alerts import check_low_stock, resolve_low_stock_alert
from autoparts.inventory.models import InventoryLedgerEntry, LedgerReferenceType, LedgerTransactionType, LowStockAlert
from autoparts.inventory.services import adjust_stock, replay_ledger, set_stock_level, record_ledger_entry


class AdjustStockTests(TestCase):
    """The stock mutator keeps the part balance and the ledger in step"""

    def setUp(self):
        self.part = TestDataFactory.create_part(stock=10, min_stock_threshold=3)

    def test_adjust_writes_one_entry(self):
        new_balance = adjust_stock(self.part.id, -4, notes='shrinkage')
        self.assertEqual(new_balance, 6)
        self.part.refresh_from_db()
        self.assertEqual(self.part.stock_quantity, 6)
        entry = InventoryLedgerEntry.objects.filter(part=self.part).latest('id')
        self.assertEqual(entry.quantity, -4)
        self.assertEqual(entry.balance_after, 6)
        self.assertEqual(entry.transaction_type, LedgerTransactionType.ADJUSTMENT)
        self.assertEqual(entry.reference_type, LedgerReferenceType.MANUAL)

    def test_negative_result_is_refused_without_writes(self):
        with self.assertRaises(InsufficientStockError):
            adjust_stock(self.part.id, -11)
        self.part.refresh_from_db()
        self.assertEqual(self.part.stock_quantity, 10)
        self.assertEqual(InventoryLedgerEntry.objects.filter(part=self.part).count(), 1)

    def test_stock_can_reach_zero(self):
        self.assertEqual(adjust_stock(self.part.id, -10), 0)

    def test_zero_change_is_rejected(self):
        with self.assertRaises(ValidationError):
            adjust_stock(self.part.id, 0)

    def test_unknown_part(self):
        with self.assertRaises(NotFoundError):
            adjust_stock(999999, 1)

    def test_set_stock_level(self):
        self.assertEqual(set_stock_level(self.part.id, 25), 25)
        entry = InventoryLedgerEntry.objects.filter(part=self.part).latest('id')
        self.assertEqual(entry.quantity, 15)
        with self.assertRaises(ValidationError):
            set_stock_level(self.part.id, 25)

    def test_unknown_reference_type_is_rejected(self):
        with self.assertRaises(ValidationError):
            record_ledger_entry(self.part, 1, 11, LedgerTransactionType.IN, 'transfer')


class LedgerInvariantTests(TestCase):
    """Replaying a part's ledger reproduces every balance and the stored stock"""

    def setUp(self):
        self.customer = TestDataFactory.create_customer()
        self.supplier = TestDataFactory.create_supplier()
        self.part = TestDataFactory.create_part(stock=20)

    def test_replay_after_mixed_operations(self):
        from autoparts.purchasing.services import PurchaseOrderService

        TestDataFactory.create_sales_invoice(customer=self.customer, lines=[(self.part, 3, '9.00'), (self.part, 2, '9.00')])
        order = TestDataFactory.create_purchase_order(supplier=self.supplier, lines=[(self.part, 7, '5.00')])
        PurchaseOrderService.receive(order.id)
        TestDataFactory.create_credit(customer=self.customer, lines=[(self.part, 1, '9.00')])
        TestDataFactory.create_warranty(customer=self.customer, lines=[(self.part, 4, '9.00')])
        adjust_stock(self.part.id, -2)
        set_stock_level(self.part.id, 30)

        self.part.refresh_from_db()
        self.assertEqual(self.part.stock_quantity, 30)

        running = 0
        for entry in InventoryLedgerEntry.objects.filter(part=self.part).order_by('id'):
            running += entry.quantity
            self.assertEqual(running, entry.balance_after)
        self.assertEqual(running, self.part.stock_quantity)
        self.assertEqual(replay_ledger(self.part), [])

    def test_replay_detects_tampering(self):
        Part.objects.filter(pk=self.part.pk).update(stock_quantity=99)
        self.part.refresh_from_db()
        problems = replay_ledger(self.part)
        self.assertEqual(len(problems), 1)
        self.assertIn('stock_quantity 99', problems[0])


class LowStockAlertTests(TestCase):

    def setUp(self):
        self.part = TestDataFactory.create_part(stock=10, min_stock_threshold=5)

    def test_no_alert_at_threshold(self):
        adjust_stock(self.part.id, -5)
        self.assertFalse(LowStockAlert.objects.filter(part=self.part).exists())

    def test_crossing_threshold_raises_alert(self):
        adjust_stock(self.part.id, -6)
        alert = LowStockAlert.objects.get(part=self.part)
        self.assertEqual(alert.current_stock, 4)
        self.assertEqual(alert.min_threshold, 5)
        self.assertFalse(alert.is_resolved)

    def test_open_alert_is_refreshed_not_duplicated(self):
        adjust_stock(self.part.id, -6)
        adjust_stock(self.part.id, -2)
        alerts = LowStockAlert.objects.filter(part=self.part)
        self.assertEqual(alerts.count(), 1)
        self.assertEqual(alerts.get().current_stock, 2)

    def test_new_alert_after_resolution(self):
        adjust_stock(self.part.id, -6)
        alert = LowStockAlert.objects.get(part=self.part)
        resolve_low_stock_alert(alert.id)
        adjust_stock(self.part.id, -1)
        self.assertEqual(LowStockAlert.objects.filter(part=self.part).count(), 2)
        self.assertEqual(LowStockAlert.objects.filter(part=self.part, is_resolved=False).count(), 1)

    def test_restock_does_not_resolve(self):
        adjust_stock(self.part.id, -6)
        adjust_stock(self.part.id, 20)
        self.assertTrue(LowStockAlert.objects.filter(part=self.part, is_resolved=False).exists())

    def test_check_above_threshold_returns_none(self):
        self.assertIsNone(check_low_stock(self.part))

    def test_resolve_twice(self):
        adjust_stock(self.part.id, -6)
        alert = LowStockAlert.objects.get(part=self.part)
        resolved = resolve_low_stock_alert(alert.id)
        self.assertTrue(resolved.is_resolved)
        self.assertIsNotNone(resolved.resolved_at)
        with self.assertRaises(InvalidStateError):
            resolve_low_stock_alert(alert.id)
        with self.assertRaises(NotFoundError):
            resolve_low_stock_alert(999999)


class InventoryAPITests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.part = TestDataFactory.create_part(stock=10, min_stock_threshold=5)

    def test_part_ledger(self):
        adjust_stock(self.part.id, -3, operated_by=self.user)
        response = self.client.get(f'/api/v1/parts/{self.part.id}/ledger/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['balance_after'] for row in response.data], [10, 7])
        self.assertEqual(response.data[1]['operated_by'], self.user.id)

    def test_ledger_list_filters(self):
        other = TestDataFactory.create_part(stock=4)
        TestDataFactory.create_sales_invoice(lines=[(self.part, 1, '3.00')])
        response = self.client.get('/api/v1/inventory/ledger/', {'reference_type': 'sales_invoice'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)
        response = self.client.get('/api/v1/inventory/ledger/', {'part': other.id})
        self.assertEqual(response.data['count'], 1)

    def test_alerts_list_and_resolve(self):
        adjust_stock(self.part.id, -8)
        response = self.client.get('/api/v1/inventory/alerts/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        alert_id = response.data[0]['id']

        response = self.client.post(f'/api/v1/inventory/alerts/{alert_id}/resolve/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['is_resolved'])

        response = self.client.post(f'/api/v1/inventory/alerts/{alert_id}/resolve/')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

        self.assertEqual(self.client.get('/api/v1/inventory/alerts/').data, [])
        self.assertEqual(len(self.client.get('/api/v1/inventory/alerts/', {'all': 'true'}).data), 1)


class VerifyLedgerCommandTests(TestCase):

    def test_consistent_ledger(self):
        part = TestDataFactory.create_part(stock=6)
        adjust_stock(part.id, -1)
        out = StringIO()
        call_command('verify_ledger', stdout=out)
        self.assertIn('Ledger consistent for 1 part(s)', out.getvalue())

    def test_mismatch_fails(self):
        part = TestDataFactory.create_part(stock=6)
        Part.objects.filter(pk=part.pk).update(stock_quantity=3)
        out = StringIO()
        with self.assertRaises(CommandError):
            call_command('verify_ledger', '--part-id', str(part.id), stdout=out)
        self.assertIn(part.sku, out.getvalue())

    def test_unknown_part(self):
        with self.assertRaises(CommandError):
            call_command('verify_ledger', '--part-id', '999999', stdout=StringIO())
