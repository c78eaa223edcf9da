"""
Test suite for core: authentication, audit logging, error mapping,
cascade deletes and the dashboard
"""
from decimal import Decimal
from django.test import TestCase, RequestFactory
from rest_framework import status
from autoparts.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from autoparts.core.models import AuditLog
from autoparts.core.exceptions import (
    InsufficientStockError, NotFoundError, ReferentialConflictError, ValidationError, error_response,
)
from autoparts.core.utils import create_audit_log, parse_amount, parse_quantity, parse_datetime_value
from autoparts.core import cascade
from autoparts.catalog.models import LineCode, Part
from autoparts.inventory.models import InventoryLedgerEntry, LowStockAlert
from autoparts.parties.models import Customer, Supplier
from autoparts.purchasing.models import PurchaseOrder, PurchaseOrderItem
from autoparts.sales.models import SalesInvoice, SalesInvoiceItem, CreditItem, WarrantyItem


class AuthAPITests(TestCase):
    """Test JWT login and the current-user endpoint"""

    def setUp(self):
        self.user = TestDataFactory.create_user(username='clerk', password='testpass123')
        self.client = AuthenticatedAPIClient()

    def test_login_returns_tokens(self):
        response = self.client.post('/api/v1/auth/login/', {'username': 'clerk', 'password': 'testpass123'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)
        self.assertIn('refresh', response.data)

    def test_login_with_wrong_password(self):
        response = self.client.post('/api/v1/auth/login/', {'username': 'clerk', 'password': 'nope'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_me_requires_authentication(self):
        response = self.client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_me(self):
        self.client.authenticate_user(self.user)
        response = self.client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['username'], 'clerk')


class ErrorMappingTests(TestCase):
    """Service errors become {'error': ...} responses with the right status"""

    def test_not_found_maps_to_404(self):
        response = error_response(NotFoundError('Part with ID 9 not found'))
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data, {'error': 'Part with ID 9 not found'})

    def test_insufficient_stock_maps_to_409(self):
        response = error_response(InsufficientStockError('short'))
        self.assertEqual(response.status_code, 409)

    def test_referential_conflict_offers_force_delete(self):
        response = error_response(ReferentialConflictError('blocked', dependents={'parts': 2}))
        self.assertEqual(response.status_code, 409)
        self.assertTrue(response.data['can_force_delete'])
        self.assertEqual(response.data['dependents'], {'parts': 2})


class ParsingTests(TestCase):
    """Input parsing helpers"""

    def test_parse_quantity(self):
        self.assertEqual(parse_quantity('3'), 3)
        self.assertEqual(parse_quantity('-2', allow_negative=True), -2)
        for bad in ('0', '-1', '1.5', 'abc', '', None, 'Infinity', '-Infinity', 'NaN', '1e30'):
            with self.assertRaises(ValidationError):
                parse_quantity(bad)

    def test_parse_amount_rounds_to_cents(self):
        self.assertEqual(parse_amount('12.345'), Decimal('12.35'))
        with self.assertRaises(ValidationError):
            parse_amount('-1')
        with self.assertRaises(ValidationError):
            parse_amount('ten')
        for too_big in ('1e30', '10000000000000', 'Infinity'):
            with self.assertRaises(ValidationError):
                parse_amount(too_big)
        self.assertEqual(parse_amount('9999999999999.99'), Decimal('9999999999999.99'))

    def test_parse_datetime_value(self):
        parsed = parse_datetime_value('2024-03-01')
        self.assertEqual(parsed.date().isoformat(), '2024-03-01')
        self.assertIsNotNone(parsed.tzinfo)
        with self.assertRaises(ValidationError):
            parse_datetime_value('yesterday')


class AuditLogTests(TestCase):
    """Test audit log creation and the audit log API"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.admin = TestDataFactory.create_user(role='admin')
        self.client = AuthenticatedAPIClient()

    def test_create_audit_log_with_request(self):
        request = RequestFactory().post('/', HTTP_USER_AGENT='tests', REMOTE_ADDR='10.0.0.1')
        request.user = self.user
        log = create_audit_log(request=request, action='create', entity_type='Part', entity_id=1, entity_name='A-1')
        self.assertIsNotNone(log)
        self.assertEqual(log.user, self.user)
        self.assertEqual(log.ip_address, '10.0.0.1')
        self.assertEqual(log.user_agent, 'tests')

    def test_create_audit_log_missing_fields_is_skipped(self):
        self.assertIsNone(create_audit_log(action='create', entity_type='Part'))
        self.assertEqual(AuditLog.objects.count(), 0)

    def test_part_creation_is_audited(self):
        self.client.authenticate_user(self.user)
        response = self.client.post('/api/v1/parts/', {'sku': 'AUD-1', 'name': 'Audited'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        log = AuditLog.objects.get(entity_type='Part', entity_id=response.data['id'])
        self.assertEqual(log.action, 'create')
        self.assertEqual(log.entity_name, 'AUD-1')

    def test_non_admin_sees_only_own_logs(self):
        create_audit_log(action='create', entity_type='Part', entity_id=1, user=self.user)
        create_audit_log(action='create', entity_type='Part', entity_id=2, user=self.admin)

        self.client.authenticate_user(self.user)
        response = self.client.get('/api/v1/audit-logs/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)

        self.client.authenticate_user(self.admin)
        response = self.client.get('/api/v1/audit-logs/', {'entity_type': 'Part'})
        self.assertEqual(response.data['count'], 2)

    def test_entity_audit_trail(self):
        create_audit_log(action='create', entity_type='Customer', entity_id=7, user=self.user)
        create_audit_log(action='update', entity_type='Customer', entity_id=7, user=self.user)
        create_audit_log(action='update', entity_type='Customer', entity_id=8, user=self.user)
        self.client.authenticate_user(self.user)
        response = self.client.get('/api/v1/audit-logs/Customer/7/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 2)


class CascadeTests(TestCase):
    """Plain delete refuses while dependents exist; force delete removes them"""

    def setUp(self):
        self.supplier = TestDataFactory.create_supplier()
        self.customer = TestDataFactory.create_customer()
        self.line_code = TestDataFactory.create_line_code(code='BRK')
        self.part = TestDataFactory.create_part(stock=10, line_code=self.line_code, supplier=self.supplier)

    def test_delete_unreferenced_part(self):
        part = TestDataFactory.create_part(stock=0)
        cascade.delete_part(part.id)
        self.assertFalse(Part.objects.filter(pk=part.id).exists())

    def test_delete_referenced_part_is_refused(self):
        TestDataFactory.create_sales_invoice(customer=self.customer, lines=[(self.part, 1, '5.00')])
        with self.assertRaises(ReferentialConflictError) as ctx:
            cascade.delete_part(self.part.id)
        self.assertIn('sales_invoice_items', ctx.exception.dependents)
        self.assertTrue(Part.objects.filter(pk=self.part.id).exists())

    def test_force_delete_part(self):
        TestDataFactory.create_purchase_order(supplier=self.supplier, lines=[(self.part, 3, '4.00')])
        TestDataFactory.create_sales_invoice(customer=self.customer, lines=[(self.part, 8, '5.00')])
        TestDataFactory.create_credit(customer=self.customer, lines=[(self.part, 1, '5.00')])
        TestDataFactory.create_warranty(customer=self.customer, lines=[(self.part, 1, '5.00')])
        self.assertTrue(LowStockAlert.objects.filter(part=self.part).exists())

        deleted = cascade.force_delete_part(self.part.id)

        self.assertFalse(Part.objects.filter(pk=self.part.id).exists())
        self.assertFalse(InventoryLedgerEntry.objects.filter(part_id=self.part.id).exists())
        self.assertFalse(LowStockAlert.objects.filter(part_id=self.part.id).exists())
        self.assertFalse(PurchaseOrderItem.objects.filter(part_id=self.part.id).exists())
        self.assertFalse(SalesInvoiceItem.objects.filter(part_id=self.part.id).exists())
        self.assertFalse(CreditItem.objects.filter(part_id=self.part.id).exists())
        self.assertFalse(WarrantyItem.objects.filter(part_id=self.part.id).exists())
        self.assertEqual(deleted['sales_invoice_items'], 1)
        # Documents themselves survive
        self.assertEqual(SalesInvoice.objects.count(), 1)

    def test_force_delete_customer(self):
        TestDataFactory.create_sales_invoice(customer=self.customer, lines=[(self.part, 1, '5.00')])
        TestDataFactory.create_credit(customer=self.customer, lines=[(self.part, 1, '5.00')])
        with self.assertRaises(ReferentialConflictError):
            cascade.delete_customer(self.customer.id)

        deleted = cascade.force_delete_customer(self.customer.id)
        self.assertEqual(deleted, {'sales_invoices': 1, 'credits': 1, 'warranties': 0})
        self.assertFalse(Customer.objects.filter(pk=self.customer.id).exists())
        self.assertFalse(SalesInvoiceItem.objects.exists())
        # Ledger history stays in place
        self.assertEqual(InventoryLedgerEntry.objects.filter(part=self.part).count(), 3)

    def test_force_delete_supplier(self):
        order = TestDataFactory.create_purchase_order(supplier=self.supplier, lines=[(self.part, 3, '4.00')])
        with self.assertRaises(ReferentialConflictError):
            cascade.delete_supplier(self.supplier.id)

        deleted = cascade.force_delete_supplier(self.supplier.id)
        self.assertEqual(deleted['purchase_orders'], 1)
        self.assertEqual(deleted['parts_detached'], 1)
        self.assertFalse(Supplier.objects.filter(pk=self.supplier.id).exists())
        self.assertFalse(PurchaseOrder.objects.filter(pk=order.id).exists())
        self.part.refresh_from_db()
        self.assertIsNone(self.part.supplier)

    def test_delete_referenced_line_code_is_refused(self):
        with self.assertRaises(ReferentialConflictError) as ctx:
            cascade.delete_line_code(self.line_code.id)
        self.assertEqual(ctx.exception.dependents, {'parts': 1})
        self.assertTrue(LineCode.objects.filter(pk=self.line_code.id).exists())

    def test_delete_missing_records(self):
        with self.assertRaises(NotFoundError):
            cascade.delete_part(999999)
        with self.assertRaises(NotFoundError):
            cascade.force_delete_customer(999999)


class DashboardAPITests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_dashboard_stats(self):
        TestDataFactory.create_part(stock=20, min_stock_threshold=5)
        low = TestDataFactory.create_part(stock=2, min_stock_threshold=5)
        archived = TestDataFactory.create_part(stock=50)
        Part.objects.filter(pk=archived.pk).update(is_archived=True)
        TestDataFactory.create_customer()
        TestDataFactory.create_supplier()

        response = self.client.get('/api/v1/dashboard/stats/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_parts'], 2)
        self.assertEqual(response.data['total_customers'], 1)
        self.assertEqual(response.data['total_suppliers'], 1)
        self.assertEqual(response.data['low_stock_count'], 1)
        self.assertEqual(response.data['open_alerts'], LowStockAlert.objects.filter(part=low, is_resolved=False).count())
