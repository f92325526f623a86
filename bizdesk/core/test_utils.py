"""
Test utilities and factories for creating test data
"""
from django.contrib.auth import get_user_model
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from bizdesk.books.models import Category, DaybookEntry, LedgerEntry, ICON_BY_TYPE
from bizdesk.inventory.models import InventoryItem
from bizdesk.parties.models import Customer, Supplier
from bizdesk.purchasing.services import create_purchase
from bizdesk.sales.services import create_sale
from bizdesk.staff.models import StaffMember
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
    def create_user(username=None, email=None, password='testpass123', is_staff=False, is_superuser=False):
        """Create a test user"""
        if not username:
            username = f'testuser_{TestDataFactory.random_string(6)}'
        if not email:
            email = f'{username}@test.com'
        return User.objects.create_user(
            username=username,
            email=email,
            password=password,
            is_staff=is_staff,
            is_superuser=is_superuser
        )

    @staticmethod
    def create_customer(owner, name=None, phone=None, **kwargs):
        """Create a test customer"""
        if not name:
            name = f'Customer_{TestDataFactory.random_string(6)}'
        return Customer.objects.create(
            owner=owner,
            name=name,
            phone=phone or f'9{random.randint(100000000, 999999999)}',
            **kwargs
        )

    @staticmethod
    def create_supplier(owner, name=None, **kwargs):
        """Create a test supplier"""
        if not name:
            name = f'Supplier_{TestDataFactory.random_string(6)}'
        return Supplier.objects.create(owner=owner, name=name, phone='1234567890', **kwargs)

    @staticmethod
    def create_inventory_item(owner, name=None, quantity=10, price=Decimal('100.00'), **kwargs):
        """Create a test inventory item"""
        if not name:
            name = f'Item_{TestDataFactory.random_string(6)}'
        return InventoryItem.objects.create(owner=owner, name=name, quantity=quantity, price=price, **kwargs)

    @staticmethod
    def create_category(owner, name=None, type='income'):
        """Create a test income/expense category"""
        if not name:
            name = f'Category_{TestDataFactory.random_string(6)}'
        return Category.objects.create(owner=owner, name=name, type=type, icon=ICON_BY_TYPE[type])

    @staticmethod
    def create_purchase(owner, product_name=None, quantity=5, unit_price=Decimal('50.00'), **kwargs):
        """Create a test purchase through the purchasing service"""
        if not product_name:
            product_name = f'Product_{TestDataFactory.random_string(6)}'
        kwargs.setdefault('date', timezone.localdate())
        return create_purchase(owner, product_name=product_name, quantity=quantity, unit_price=unit_price, **kwargs)

    @staticmethod
    def create_sale(owner, customer=None, item=None, total_amount=Decimal('1200.00'),
                    advance_amount=Decimal('200.00'), duration=4, payment_mode='CASH'):
        """Create a test installment sale through the sales service"""
        customer = customer or TestDataFactory.create_customer(owner)
        item = item or TestDataFactory.create_inventory_item(owner)
        return create_sale(
            owner,
            customer=customer,
            item=item,
            total_amount=total_amount,
            advance_amount=advance_amount,
            payment_mode=payment_mode,
            duration=duration,
        )

    @staticmethod
    def create_daybook_entry(owner, entry_type='income', amount=Decimal('100.00'), **kwargs):
        """Create a test daybook entry"""
        kwargs.setdefault('date', timezone.localdate())
        kwargs.setdefault('description', f'Entry {TestDataFactory.random_string(4)}')
        kwargs.setdefault('reference', f'REF-{TestDataFactory.random_string(4)}')
        return DaybookEntry.objects.create(owner=owner, entry_type=entry_type, amount=amount, **kwargs)

    @staticmethod
    def create_ledger_entry(owner, ledger_type='BANK', transaction_type='CREDIT', amount=Decimal('100.00'), **kwargs):
        """Create a test ledger entry"""
        kwargs.setdefault('date', timezone.localdate())
        kwargs.setdefault('title', f'Ledger {TestDataFactory.random_string(4)}')
        return LedgerEntry.objects.create(
            owner=owner,
            ledger_type=ledger_type,
            transaction_type=transaction_type,
            amount=amount,
            **kwargs
        )

    @staticmethod
    def create_staff_member(owner, name=None, **kwargs):
        """Create a test staff member"""
        if not name:
            name = f'Staff_{TestDataFactory.random_string(6)}'
        kwargs.setdefault('position', 'Clerk')
        kwargs.setdefault('joining_date', timezone.localdate())
        return StaffMember.objects.create(owner=owner, name=name, **kwargs)


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
