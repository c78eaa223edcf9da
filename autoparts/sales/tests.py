"""
Test suite for sales invoices, credits and warranties
Tests: stock effects, totals, status workflows, history lookups and API errors
"""
from decimal import Decimal
from django.test import TestCase
from rest_framework import status
from autoparts.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from autoparts.core.exceptions import InsufficientStockError, InvalidStateError, ValidationError
from autoparts.catalog.services import archive_part
from autoparts.inventory.models import InventoryLedgerEntry, LedgerReferenceType, LedgerTransactionType
from autoparts.sales.models import SalesInvoice, Warranty
from autoparts.sales.services import (
    CreditService, SalesInvoiceService, WarrantyService, sales_history_by_part_sku,
)


class SalesInvoiceServiceTests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.customer = TestDataFactory.create_customer()
        self.part_a = TestDataFactory.create_part(sku='A', stock=10)
        self.part_b = TestDataFactory.create_part(sku='B', stock=1)

    def test_invoice_deducts_stock(self):
        invoice = TestDataFactory.create_sales_invoice(
            customer=self.customer, lines=[(self.part_a, 2, '50.00')], user=self.user,
        )
        self.assertEqual(invoice.status, 'completed')
        self.assertEqual(invoice.total_amount, Decimal('100.00'))
        self.assertTrue(invoice.invoice_number.startswith('SI-'))
        self.part_a.refresh_from_db()
        self.assertEqual(self.part_a.stock_quantity, 8)

        entry = InventoryLedgerEntry.objects.filter(part=self.part_a).latest('id')
        self.assertEqual(entry.quantity, -2)
        self.assertEqual(entry.balance_after, 8)
        self.assertEqual(entry.transaction_type, LedgerTransactionType.SALE)
        self.assertEqual(entry.reference_type, LedgerReferenceType.SALES_INVOICE)
        self.assertEqual(entry.reference_id, invoice.id)
        self.assertEqual(entry.operated_by, self.user)

    def test_insufficient_stock_rolls_back_everything(self):
        with self.assertRaises(InsufficientStockError):
            TestDataFactory.create_sales_invoice(
                customer=self.customer, lines=[(self.part_a, 3, '5.00'), (self.part_b, 2, '5.00')],
            )
        self.part_a.refresh_from_db()
        self.assertEqual(self.part_a.stock_quantity, 10)
        self.assertEqual(SalesInvoice.objects.count(), 0)
        self.assertEqual(InventoryLedgerEntry.objects.filter(reference_type='sales_invoice').count(), 0)

    def test_quantities_are_summed_per_part(self):
        with self.assertRaises(InsufficientStockError):
            TestDataFactory.create_sales_invoice(
                customer=self.customer, lines=[(self.part_a, 6, '5.00'), (self.part_a, 5, '5.00')],
            )
        self.part_a.refresh_from_db()
        self.assertEqual(self.part_a.stock_quantity, 10)

    def test_archived_part_is_rejected(self):
        archive_part(self.part_a.id)
        with self.assertRaises(ValidationError):
            TestDataFactory.create_sales_invoice(customer=self.customer, lines=[(self.part_a, 1, '5.00')])

    def test_status_workflow(self):
        invoice = TestDataFactory.create_sales_invoice(customer=self.customer, lines=[(self.part_a, 1, '5.00')])
        with self.assertRaises(ValidationError):
            SalesInvoiceService.update_status(invoice.id, 'shipped')
        with self.assertRaises(InvalidStateError):
            SalesInvoiceService.update_status(invoice.id, 'completed')

        cancelled = SalesInvoiceService.cancel(invoice.id)
        self.assertEqual(cancelled.status, 'cancelled')
        with self.assertRaises(InvalidStateError):
            SalesInvoiceService.cancel(invoice.id)

        # A cancelled invoice can be reopened, and a completed one set back to pending
        self.assertEqual(SalesInvoiceService.update_status(invoice.id, 'completed').status, 'completed')
        self.assertEqual(SalesInvoiceService.update_status(invoice.id, 'pending').status, 'pending')
        self.assertEqual(SalesInvoiceService.update_status(invoice.id, 'cancelled').status, 'cancelled')
        self.assertEqual(SalesInvoiceService.update_status(invoice.id, 'pending').status, 'pending')

        # Status changes never move stock
        self.part_a.refresh_from_db()
        self.assertEqual(self.part_a.stock_quantity, 9)
        self.assertEqual(InventoryLedgerEntry.objects.filter(reference_type='sales_invoice').count(), 1)

    def test_credit_status_workflow(self):
        credit = TestDataFactory.create_credit(customer=self.customer, lines=[(self.part_a, 1, '5.00')])
        CreditService.cancel(credit.id)
        self.assertEqual(CreditService.update_status(credit.id, 'completed').status, 'completed')
        self.assertEqual(CreditService.update_status(credit.id, 'pending').status, 'pending')
        self.part_a.refresh_from_db()
        self.assertEqual(self.part_a.stock_quantity, 11)

    def test_detail_loads_items(self):
        line_code = TestDataFactory.create_line_code(code='MOT')
        part = TestDataFactory.create_part(stock=3, line_code=line_code)
        invoice = TestDataFactory.create_sales_invoice(customer=self.customer, lines=[(part, 1, '7.00')])
        detail = SalesInvoiceService.get_detail(invoice.id)
        with self.assertNumQueries(0):
            self.assertEqual(detail.items.all()[0].part.line_code.code, 'MOT')
            self.assertEqual(detail.customer.name, self.customer.name)


class CreditAndWarrantyServiceTests(TestCase):

    def setUp(self):
        self.customer = TestDataFactory.create_customer()
        self.part = TestDataFactory.create_part(sku='A', stock=5)

    def test_credit_returns_stock(self):
        credit = TestDataFactory.create_credit(
            customer=self.customer, lines=[(self.part, 1, '20.00')], original_invoice_number='SI-1', reason='Wrong fit',
        )
        self.assertEqual(credit.status, 'completed')
        self.assertEqual(credit.reason, 'Wrong fit')
        self.part.refresh_from_db()
        self.assertEqual(self.part.stock_quantity, 6)
        entry = InventoryLedgerEntry.objects.filter(part=self.part).latest('id')
        self.assertEqual(entry.quantity, 1)
        self.assertEqual(entry.transaction_type, LedgerTransactionType.CREDIT)
        self.assertEqual(entry.reference_type, LedgerReferenceType.CREDIT)

    def test_credit_accepts_archived_part(self):
        archive_part(self.part.id)
        TestDataFactory.create_credit(customer=self.customer, lines=[(self.part, 2, '20.00')])
        self.part.refresh_from_db()
        self.assertEqual(self.part.stock_quantity, 7)

    def test_warranty_ships_replacement(self):
        warranty = TestDataFactory.create_warranty(
            customer=self.customer, lines=[(self.part, 1, '20.00')], claim_reason='Failed after a week',
        )
        self.assertEqual(warranty.status, 'completed')
        self.part.refresh_from_db()
        self.assertEqual(self.part.stock_quantity, 4)
        entry = InventoryLedgerEntry.objects.filter(part=self.part).latest('id')
        self.assertEqual(entry.quantity, -1)
        self.assertEqual(entry.transaction_type, LedgerTransactionType.WARRANTY)
        self.assertEqual(entry.reference_type, LedgerReferenceType.WARRANTY)

    def test_warranty_without_stock(self):
        with self.assertRaises(InsufficientStockError):
            TestDataFactory.create_warranty(customer=self.customer, lines=[(self.part, 6, '20.00')])


class WarrantyWorkflowTests(TestCase):
    """Claims move pending -> approved -> completed, or pending -> rejected"""

    def setUp(self):
        customer = TestDataFactory.create_customer()
        part = TestDataFactory.create_part(stock=5)
        self.warranty = TestDataFactory.create_warranty(customer=customer, lines=[(part, 1, '20.00')])
        Warranty.objects.filter(pk=self.warranty.pk).update(status='pending')

    def test_approve_then_complete(self):
        self.assertEqual(WarrantyService.update_status(self.warranty.id, 'approved').status, 'approved')
        self.assertEqual(WarrantyService.update_status(self.warranty.id, 'completed').status, 'completed')
        with self.assertRaises(InvalidStateError):
            WarrantyService.update_status(self.warranty.id, 'approved')

    def test_reject_is_terminal(self):
        WarrantyService.update_status(self.warranty.id, 'rejected')
        for target in ('pending', 'approved', 'completed'):
            with self.assertRaises(InvalidStateError):
                WarrantyService.update_status(self.warranty.id, target)

    def test_approved_cannot_be_rejected(self):
        WarrantyService.update_status(self.warranty.id, 'approved')
        with self.assertRaises(InvalidStateError):
            WarrantyService.update_status(self.warranty.id, 'rejected')

    def test_pending_cannot_skip_to_completed(self):
        with self.assertRaises(InvalidStateError):
            WarrantyService.update_status(self.warranty.id, 'completed')

    def test_cancelled_is_not_a_warranty_status(self):
        with self.assertRaises(ValidationError):
            WarrantyService.update_status(self.warranty.id, 'cancelled')


class SalesHistoryTests(TestCase):

    def test_history_by_sku(self):
        part = TestDataFactory.create_part(sku='HIST-1', stock=10)
        customer = TestDataFactory.create_customer(name='Fleet Co')
        older = TestDataFactory.create_sales_invoice(customer=customer, lines=[(part, 1, '9.00')], invoice_date='2024-01-01')
        newer = TestDataFactory.create_sales_invoice(customer=customer, lines=[(part, 2, '8.00')], invoice_date='2024-02-01')

        history = sales_history_by_part_sku('HIST-1')
        self.assertEqual([row['invoice_id'] for row in history], [newer.id, older.id])
        self.assertEqual(history[0]['customer_name'], 'Fleet Co')
        self.assertEqual(sales_history_by_part_sku('UNKNOWN'), [])


class SalesAPITests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.customer = TestDataFactory.create_customer()
        self.part = TestDataFactory.create_part(sku='A', stock=10)

    def test_create_invoice(self):
        data = {
            'customer': self.customer.id,
            'customer_number': 'C-42',
            'items': [{'part_id': self.part.id, 'quantity': 2, 'unit_price': '50.00'}],
        }
        response = self.client.post('/api/v1/sales-invoices/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['total_amount'], '100.00')
        self.assertEqual(response.data['status'], 'completed')
        self.assertEqual(response.data['customer_number'], 'C-42')
        self.assertEqual(response.data['items'][0]['subtotal'], '100.00')
        self.assertEqual(response.data['created_by_name'], self.user.get_display_name())

    def test_create_invoice_errors(self):
        base = {'customer': self.customer.id}
        response = self.client.post('/api/v1/sales-invoices/', dict(base, items=[{'part_id': self.part.id, 'quantity': 11, 'unit_price': '1'}]), format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        response = self.client.post('/api/v1/sales-invoices/', dict(base, items=[{'part_id': 999999, 'quantity': 1, 'unit_price': '1'}]), format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        response = self.client.post('/api/v1/sales-invoices/', dict(base, items=[{'part_id': self.part.id, 'quantity': 'two', 'unit_price': '1'}]), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.post('/api/v1/sales-invoices/', dict(base, items=[{'part_id': self.part.id, 'quantity': 'Infinity', 'unit_price': '1'}]), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.post('/api/v1/sales-invoices/', dict(base, items=[{'part_id': self.part.id, 'quantity': 1, 'unit_price': '1e30'}]), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.post('/api/v1/sales-invoices/', dict(base, items=[{'part_id': self.part.id, 'quantity': 2, 'unit_price': '9000000000000.00'}]), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(SalesInvoice.objects.exists())
        response = self.client.post('/api/v1/sales-invoices/', {'items': [{'part_id': self.part.id, 'quantity': 1, 'unit_price': '1'}]}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_invoice_status_endpoints(self):
        invoice = TestDataFactory.create_sales_invoice(customer=self.customer, lines=[(self.part, 1, '5.00')])
        response = self.client.patch(f'/api/v1/sales-invoices/{invoice.id}/status/', {'status': 'completed'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        response = self.client.post(f'/api/v1/sales-invoices/{invoice.id}/cancel/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'cancelled')
        response = self.client.patch(f'/api/v1/sales-invoices/{invoice.id}/status/', {'status': 'completed'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'completed')

    def test_list_invoices(self):
        TestDataFactory.create_sales_invoice(customer=self.customer, lines=[(self.part, 1, '5.00')])
        TestDataFactory.create_sales_invoice(lines=[(self.part, 1, '5.00')])
        response = self.client.get('/api/v1/sales-invoices/', {'customer': self.customer.id})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)

    def test_create_credit_and_warranty(self):
        item = [{'part_id': self.part.id, 'quantity': 1, 'unit_price': '20.00'}]
        response = self.client.post('/api/v1/credits/', {'customer': self.customer.id, 'items': item}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        response = self.client.post('/api/v1/warranties/', {'customer': self.customer.id, 'items': item}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.part.refresh_from_db()
        self.assertEqual(self.part.stock_quantity, 10)

    def test_delete_invoice_keeps_stock_and_ledger(self):
        invoice = TestDataFactory.create_sales_invoice(customer=self.customer, lines=[(self.part, 4, '5.00')])
        response = self.client.delete(f'/api/v1/sales-invoices/{invoice.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.part.refresh_from_db()
        self.assertEqual(self.part.stock_quantity, 6)
        self.assertEqual(InventoryLedgerEntry.objects.filter(reference_type='sales_invoice', reference_id=invoice.id).count(), 1)

    def test_sales_history_endpoint(self):
        TestDataFactory.create_sales_invoice(customer=self.customer, lines=[(self.part, 1, '5.00')])
        response = self.client.get('/api/v1/sales-history/A/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['unit_price'], '5.00')
