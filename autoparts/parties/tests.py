"""
Test suite for customers and suppliers
"""
from django.test import TestCase
from rest_framework import status
from autoparts.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from autoparts.core.models import AuditLog
from autoparts.parties.models import Customer, Supplier
from autoparts.sales.models import SalesInvoice


class CustomerAPITests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_and_search_customers(self):
        response = self.client.post('/api/v1/customers/', {'name': 'Main Street Garage', 'phone': '5551234'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['accounts_receivable'], '0.00')
        TestDataFactory.create_customer(name='Other Shop')

        response = self.client.get('/api/v1/customers/', {'search': 'garage'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['results'][0]['name'], 'Main Street Garage')

    def test_pagination(self):
        for _ in range(3):
            TestDataFactory.create_customer()
        response = self.client.get('/api/v1/customers/', {'limit': 2, 'page': 2})
        self.assertEqual(response.data['count'], 3)
        self.assertEqual(len(response.data['results']), 1)
        self.assertEqual(response.data['total_pages'], 2)
        self.assertEqual(response.data['previous'], 1)
        self.assertIsNone(response.data['next'])

    def test_delete_customer_without_documents(self):
        customer = TestDataFactory.create_customer()
        response = self.client.delete(f'/api/v1/customers/{customer.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertTrue(AuditLog.objects.filter(entity_type='Customer', entity_id=customer.id, action='delete').exists())

    def test_delete_customer_with_documents(self):
        customer = TestDataFactory.create_customer()
        part = TestDataFactory.create_part(stock=5)
        TestDataFactory.create_sales_invoice(customer=customer, lines=[(part, 1, '10.00')])

        response = self.client.delete(f'/api/v1/customers/{customer.id}/')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['dependents'], {'sales_invoices': 1})
        self.assertTrue(response.data['can_force_delete'])

        response = self.client.post(f'/api/v1/customers/{customer.id}/force-delete/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['deleted']['sales_invoices'], 1)
        self.assertFalse(Customer.objects.filter(pk=customer.id).exists())
        self.assertFalse(SalesInvoice.objects.exists())

    def test_missing_customer(self):
        response = self.client.get('/api/v1/customers/999999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class SupplierAPITests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_update_supplier(self):
        supplier = TestDataFactory.create_supplier()
        response = self.client.patch(f'/api/v1/suppliers/{supplier.id}/', {'contact_person': 'Dana'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        supplier.refresh_from_db()
        self.assertEqual(supplier.contact_person, 'Dana')

    def test_force_delete_supplier_detaches_parts(self):
        supplier = TestDataFactory.create_supplier()
        part = TestDataFactory.create_part(supplier=supplier)
        TestDataFactory.create_purchase_order(supplier=supplier, lines=[(part, 2, '3.00')])

        response = self.client.delete(f'/api/v1/suppliers/{supplier.id}/')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

        response = self.client.post(f'/api/v1/suppliers/{supplier.id}/force-delete/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['deleted'], {'purchase_orders': 1, 'parts_detached': 1})
        self.assertFalse(Supplier.objects.filter(pk=supplier.id).exists())
        part.refresh_from_db()
        self.assertIsNone(part.supplier_id)
