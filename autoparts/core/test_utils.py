"""
Test utilities and factories for creating test data
"""
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from autoparts.catalog.models import LineCode, PartCategory
from autoparts.catalog.services import create_part
from autoparts.parties.models import Customer, Supplier
from autoparts.purchasing.services import PurchaseOrderService
from autoparts.sales.services import SalesInvoiceService, CreditService, WarrantyService
from decimal import Decimal
import random
import string

User = get_user_model()


class TestDataFactory:
    """Factory class for creating test data"""

    @staticmethod
    def random_string(length=10):
        """Generate a random string"""
        return ''.join(random.choices(string.ascii_letters + string.digits, k=length))

    @staticmethod
    def create_user(username=None, email=None, password='testpass123', role='user', is_staff=False, is_superuser=False):
        """Create a test user"""
        if not username:
            username = f'testuser_{TestDataFactory.random_string(6)}'
        if not email:
            email = f'{username}@test.com'
        return User.objects.create_user(
            username=username,
            email=email,
            password=password,
            role=role,
            is_staff=is_staff,
            is_superuser=is_superuser
        )

    @staticmethod
    def create_line_code(code=None, description=None):
        """Create a test line code"""
        if not code:
            code = f'LC{TestDataFactory.random_string(4).upper()}'
        return LineCode.objects.create(
            code=code,
            description=description or f'Test line {code}'
        )

    @staticmethod
    def create_category(name=None, description=None):
        """Create a test part category"""
        if not name:
            name = f'Category_{TestDataFactory.random_string(6)}'
        return PartCategory.objects.create(
            name=name,
            description=description or f'Test category {name}'
        )

    @staticmethod
    def create_supplier(name=None, phone=None, email=None):
        """Create a test supplier"""
        if not name:
            name = f'Supplier_{TestDataFactory.random_string(6)}'
        if not phone:
            phone = f'9{random.randint(100000000, 999999999)}'
        if not email:
            email = f'{name.lower()}@test.com'
        return Supplier.objects.create(name=name, phone=phone, email=email)

    @staticmethod
    def create_customer(name=None, phone=None, email=None):
        """Create a test customer"""
        if not name:
            name = f'Customer_{TestDataFactory.random_string(6)}'
        if not phone:
            phone = f'9{random.randint(100000000, 999999999)}'
        if not email:
            email = f'{name.lower()}@test.com'
        return Customer.objects.create(name=name, phone=phone, email=email)

    @staticmethod
    def create_part(sku=None, name=None, stock=0, unit_price=None, min_stock_threshold=5,
                    line_code=None, supplier=None, category=None, user=None):
        """Create a test part; starting stock is booked through the ledger"""
        if not sku:
            sku = f'SKU-{TestDataFactory.random_string(8).upper()}'
        if not name:
            name = f'Part_{TestDataFactory.random_string(6)}'
        data = {
            'sku': sku,
            'name': name,
            'unit_price': unit_price if unit_price is not None else Decimal('10.00'),
            'min_stock_threshold': min_stock_threshold,
            'line_code': line_code,
            'supplier': supplier,
            'category': category,
        }
        return create_part(data, initial_stock=stock, user=user)

    @staticmethod
    def items(*lines):
        """Build item dicts from (part, quantity, unit_price) tuples"""
        return [
            {'part_id': part.id, 'quantity': quantity, 'unit_price': str(unit_price)}
            for part, quantity, unit_price in lines
        ]

    @staticmethod
    def create_purchase_order(supplier=None, lines=None, user=None, **header):
        """Create a pending purchase order"""
        if not supplier:
            supplier = TestDataFactory.create_supplier()
        header['supplier'] = supplier.id
        return PurchaseOrderService.create(header, TestDataFactory.items(*lines), user=user)

    @staticmethod
    def create_sales_invoice(customer=None, lines=None, user=None, **header):
        """Create a completed sales invoice; stock is deducted"""
        if not customer:
            customer = TestDataFactory.create_customer()
        header['customer'] = customer.id
        return SalesInvoiceService.create(header, TestDataFactory.items(*lines), user=user)

    @staticmethod
    def create_credit(customer=None, lines=None, user=None, **header):
        """Create a credit; returned stock is added back"""
        if not customer:
            customer = TestDataFactory.create_customer()
        header['customer'] = customer.id
        return CreditService.create(header, TestDataFactory.items(*lines), user=user)

    @staticmethod
    def create_warranty(customer=None, lines=None, user=None, **header):
        """Create a warranty; replacement stock is deducted"""
        if not customer:
            customer = TestDataFactory.create_customer()
        header['customer'] = customer.id
        return WarrantyService.create(header, TestDataFactory.items(*lines), user=user)


class AuthenticatedAPIClient(APIClient):
    """APIClient with authentication helper"""

    def authenticate_user(self, user):
        """Authenticate the client with a user"""
        refresh = RefreshToken.for_user(user)
        self.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return self

    def logout(self):
        """Remove authentication"""
        self.credentials()
