"""
Test suite for purchase orders
Tests: creation, receiving, cancellation, deletion and edge cases
"""
from decimal import Decimal
from django.test import TestCase
from rest_framework import status
from autoparts.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from autoparts.core.exceptions import InvalidStateError, NotFoundError, ValidationError
from autoparts.inventory.models import InventoryLedgerEntry, LedgerReferenceType, LedgerTransactionType
from autoparts.purchasing.models import PurchaseOrder, PurchaseOrderItem
from autoparts.purchasing.services import PurchaseOrderService


class PurchaseOrderModelTests(TestCase):

    def setUp(self):
        self.supplier = TestDataFactory.create_supplier()
        self.part = TestDataFactory.create_part()

    def test_subtotal_and_str(self):
        order = TestDataFactory.create_purchase_order(
            supplier=self.supplier,
            lines=[(self.part, 10, '1.50'), (self.part, 2, '4.00')],
            order_number='PO-TEST-1',
        )
        self.assertEqual(str(order), 'PO-TEST-1')
        self.assertEqual(order.total_amount, Decimal('23.00'))
        self.assertEqual(order.get_subtotal(), Decimal('23.00'))

    def test_item_save_computes_subtotal(self):
        order = TestDataFactory.create_purchase_order(supplier=self.supplier, lines=[(self.part, 1, '1.00')])
        item = PurchaseOrderItem.objects.create(purchase_order=order, part=self.part, quantity=3, unit_price=Decimal('2.50'))
        self.assertEqual(item.subtotal, Decimal('7.50'))


class PurchaseOrderServiceTests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.supplier = TestDataFactory.create_supplier()
        self.part = TestDataFactory.create_part(stock=2, min_stock_threshold=5)

    def test_create_does_not_move_stock(self):
        order = TestDataFactory.create_purchase_order(supplier=self.supplier, lines=[(self.part, 5, '10.00')], user=self.user)
        self.assertEqual(order.status, 'pending')
        self.assertTrue(order.order_number.startswith('PO-'))
        self.assertEqual(order.created_by, self.user)
        self.part.refresh_from_db()
        self.assertEqual(self.part.stock_quantity, 2)

    def test_receive_adds_stock_once(self):
        order = TestDataFactory.create_purchase_order(supplier=self.supplier, lines=[(self.part, 5, '10.00')])
        received = PurchaseOrderService.receive(order.id, user=self.user)

        self.assertEqual(received.status, 'received')
        self.assertIsNotNone(received.received_at)
        self.part.refresh_from_db()
        self.assertEqual(self.part.stock_quantity, 7)
        entry = InventoryLedgerEntry.objects.filter(part=self.part).latest('id')
        self.assertEqual(entry.quantity, 5)
        self.assertEqual(entry.transaction_type, LedgerTransactionType.PURCHASE)
        self.assertEqual(entry.reference_type, LedgerReferenceType.PURCHASE_ORDER)
        self.assertEqual(entry.reference_id, order.id)

        with self.assertRaises(InvalidStateError):
            PurchaseOrderService.receive(order.id)
        self.part.refresh_from_db()
        self.assertEqual(self.part.stock_quantity, 7)

    def test_cancel(self):
        order = TestDataFactory.create_purchase_order(supplier=self.supplier, lines=[(self.part, 5, '10.00')])
        cancelled = PurchaseOrderService.cancel(order.id)
        self.assertEqual(cancelled.status, 'cancelled')
        with self.assertRaises(InvalidStateError):
            PurchaseOrderService.cancel(order.id)
        with self.assertRaises(InvalidStateError):
            PurchaseOrderService.receive(order.id)

    def test_cancel_received_order_keeps_stock(self):
        order = TestDataFactory.create_purchase_order(supplier=self.supplier, lines=[(self.part, 5, '10.00')])
        PurchaseOrderService.receive(order.id)
        ledger_count = InventoryLedgerEntry.objects.filter(part=self.part).count()

        cancelled = PurchaseOrderService.cancel(order.id)

        self.assertEqual(cancelled.status, 'cancelled')
        self.assertIsNotNone(cancelled.received_at)
        self.part.refresh_from_db()
        self.assertEqual(self.part.stock_quantity, 7)
        self.assertEqual(InventoryLedgerEntry.objects.filter(part=self.part).count(), ledger_count)
        with self.assertRaises(InvalidStateError):
            PurchaseOrderService.receive(order.id)

    def test_order_type(self):
        order = TestDataFactory.create_purchase_order(supplier=self.supplier, lines=[(self.part, 1, '1.00')])
        self.assertEqual(order.type, 'purchase')
        order = TestDataFactory.create_purchase_order(supplier=self.supplier, lines=[(self.part, 1, '1.00')], type='return')
        self.assertEqual(order.type, 'return')
        with self.assertRaises(ValidationError):
            TestDataFactory.create_purchase_order(supplier=self.supplier, lines=[(self.part, 1, '1.00')], type='transfer')
        self.assertEqual(PurchaseOrder.objects.count(), 2)

    def test_create_validation(self):
        with self.assertRaises(ValidationError):
            TestDataFactory.create_purchase_order(supplier=self.supplier, lines=[])
        with self.assertRaises(ValidationError):
            TestDataFactory.create_purchase_order(supplier=self.supplier, lines=[(self.part, 0, '1.00')])
        with self.assertRaises(NotFoundError):
            PurchaseOrderService.create({'supplier': 999999}, [{'part_id': self.part.id, 'quantity': 1, 'unit_price': '1'}])
        with self.assertRaises(NotFoundError):
            PurchaseOrderService.create({'supplier': self.supplier.id}, [{'part_id': 999999, 'quantity': 1, 'unit_price': '1'}])
        self.assertEqual(PurchaseOrder.objects.count(), 0)

    def test_duplicate_order_number(self):
        TestDataFactory.create_purchase_order(supplier=self.supplier, lines=[(self.part, 1, '1.00')], order_number='PO-X')
        with self.assertRaises(ValidationError):
            TestDataFactory.create_purchase_order(supplier=self.supplier, lines=[(self.part, 1, '1.00')], order_number='PO-X')

    def test_delete_keeps_ledger(self):
        order = TestDataFactory.create_purchase_order(supplier=self.supplier, lines=[(self.part, 5, '10.00')])
        PurchaseOrderService.receive(order.id)
        result = PurchaseOrderService.delete(order.id)
        self.assertEqual(result['items_deleted'], 1)
        self.assertFalse(PurchaseOrder.objects.filter(pk=order.id).exists())
        self.assertTrue(InventoryLedgerEntry.objects.filter(reference_type='purchase_order', reference_id=order.id).exists())


class PurchaseOrderAPITests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.supplier = TestDataFactory.create_supplier()
        self.part = TestDataFactory.create_part(stock=0)

    def test_create_purchase_order(self):
        data = {
            'supplier': self.supplier.id,
            'order_date': '2024-05-01',
            'notes': 'Weekly restock',
            'items': [{'part_id': self.part.id, 'quantity': 5, 'unit_price': '10.00'}],
        }
        response = self.client.post('/api/v1/purchase-orders/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'pending')
        self.assertEqual(response.data['total_amount'], '50.00')
        self.assertEqual(response.data['supplier_name'], self.supplier.name)
        self.assertEqual(response.data['items'][0]['part_sku'], self.part.sku)

    def test_create_without_items(self):
        data = {'supplier': self.supplier.id, 'items': []}
        response = self.client.post('/api/v1/purchase-orders/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('error', response.data)

    def test_receive_twice_conflicts(self):
        order = TestDataFactory.create_purchase_order(supplier=self.supplier, lines=[(self.part, 5, '10.00')])
        response = self.client.post(f'/api/v1/purchase-orders/{order.id}/receive/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'received')

        response = self.client.post(f'/api/v1/purchase-orders/{order.id}/receive/')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.part.refresh_from_db()
        self.assertEqual(self.part.stock_quantity, 5)

    def test_list_filters_by_status(self):
        pending = TestDataFactory.create_purchase_order(supplier=self.supplier, lines=[(self.part, 1, '1.00')])
        received = TestDataFactory.create_purchase_order(supplier=self.supplier, lines=[(self.part, 1, '1.00')])
        PurchaseOrderService.receive(received.id)

        response = self.client.get('/api/v1/purchase-orders/', {'status': 'pending'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['id'] for row in response.data['results']], [pending.id])
        self.assertEqual(response.data['results'][0]['item_count'], 1)

    def test_detail_and_delete(self):
        order = TestDataFactory.create_purchase_order(supplier=self.supplier, lines=[(self.part, 1, '1.00')])
        response = self.client.get(f'/api/v1/purchase-orders/{order.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        response = self.client.delete(f'/api/v1/purchase-orders/{order.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        response = self.client.get(f'/api/v1/purchase-orders/{order.id}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_cancel_endpoint(self):
        order = TestDataFactory.create_purchase_order(supplier=self.supplier, lines=[(self.part, 1, '1.00')])
        response = self.client.post(f'/api/v1/purchase-orders/{order.id}/cancel/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'cancelled')

    def test_cancel_received_order_endpoint(self):
        order = TestDataFactory.create_purchase_order(supplier=self.supplier, lines=[(self.part, 4, '1.00')])
        self.client.post(f'/api/v1/purchase-orders/{order.id}/receive/')
        response = self.client.post(f'/api/v1/purchase-orders/{order.id}/cancel/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'cancelled')
        self.part.refresh_from_db()
        self.assertEqual(self.part.stock_quantity, 4)

    def test_list_filters_by_type(self):
        TestDataFactory.create_purchase_order(supplier=self.supplier, lines=[(self.part, 1, '1.00')])
        returned = TestDataFactory.create_purchase_order(supplier=self.supplier, lines=[(self.part, 1, '1.00')], type='return')
        response = self.client.get('/api/v1/purchase-orders/', {'type': 'return'})
        self.assertEqual([row['id'] for row in response.data['results']], [returned.id])

    def test_create_with_invalid_type(self):
        data = {
            'supplier': self.supplier.id,
            'type': 'transfer',
            'items': [{'part_id': self.part.id, 'quantity': 1, 'unit_price': '1.00'}],
        }
        response = self.client.post('/api/v1/purchase-orders/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(PurchaseOrder.objects.exists())
