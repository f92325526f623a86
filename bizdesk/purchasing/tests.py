"""
Test suite for the purchasing module
Tests: purchase creation, inventory restocking, updates and admin-only deletion
"""
from datetime import timedelta
from decimal import Decimal
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from bizdesk.core.models import AuditLog
from bizdesk.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from bizdesk.books.models import DaybookEntry
from bizdesk.inventory.models import InventoryItem
from bizdesk.purchasing.models import Purchase, PurchaseItem


class PurchaseServiceTests(TestCase):
    """Test the inventory and daybook effects of a purchase"""

    def setUp(self):
        self.user = TestDataFactory.create_user()

    def test_new_product_creates_inventory_item(self):
        purchase = TestDataFactory.create_purchase(
            self.user, product_name='LED Bulb', quantity=20, unit_price=Decimal('10.00'), category='Electrical'
        )
        self.assertEqual(purchase.total_amount, Decimal('200.00'))

        item = InventoryItem.objects.get(owner=self.user, name='LED Bulb')
        self.assertEqual(item.quantity, 20)
        self.assertEqual(item.cost_price, Decimal('10.00'))
        self.assertEqual(item.selling_price, Decimal('12.00'))
        self.assertEqual(item.category, 'Electrical')

        link = PurchaseItem.objects.get(purchase=purchase)
        self.assertEqual(link.inventory_item, item)
        self.assertEqual(link.total_price, Decimal('200.00'))

    def test_existing_product_gains_quantity(self):
        item = TestDataFactory.create_inventory_item(self.user, name='LED Bulb', quantity=3)
        TestDataFactory.create_purchase(self.user, product_name='LED Bulb', quantity=7, unit_price=Decimal('9.00'))

        item.refresh_from_db()
        self.assertEqual(item.quantity, 10)
        self.assertEqual(item.cost_price, Decimal('9.00'))
        self.assertEqual(InventoryItem.objects.filter(owner=self.user).count(), 1)

    def test_explicit_total_is_kept(self):
        purchase = TestDataFactory.create_purchase(
            self.user, quantity=2, unit_price=Decimal('10.00'), total_amount=Decimal('18.00')
        )
        self.assertEqual(purchase.total_amount, Decimal('18.00'))

    def test_daybook_entry_written(self):
        purchase = TestDataFactory.create_purchase(self.user, product_name='Cable', quantity=4, unit_price=Decimal('25.00'))
        entry = DaybookEntry.objects.get(purchase=purchase)
        self.assertEqual(entry.entry_type, 'expense')
        self.assertEqual(entry.amount, Decimal('100.00'))
        self.assertEqual(entry.description, 'Purchase: Cable')
        self.assertEqual(entry.reference, f'Purchase #{purchase.pk}')


class PurchaseAPITests(TestCase):
    """Test purchase endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.admin = TestDataFactory.create_user(is_staff=True)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.supplier = TestDataFactory.create_supplier(self.user, name='Wire House')

    def test_create_purchase(self):
        data = {
            'date': timezone.localdate().isoformat(),
            'product_name': 'Copper wire',
            'quantity': 5,
            'unit_price': '40.00',
            'supplier': self.supplier.id,
            'payment_method': 'BANK',
        }
        response = self.client.post('/api/v1/purchases/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['total_amount'], '200.00')
        self.assertEqual(response.data['supplier_name'], 'Wire House')
        self.assertEqual(len(response.data['items']), 1)
        self.assertIsNotNone(response.data['daybook_entry_id'])
        self.assertTrue(AuditLog.objects.filter(action='purchase_create', object_id=str(response.data['id'])).exists())

        item = InventoryItem.objects.get(owner=self.user, name='Copper wire')
        self.assertEqual(item.supplier, 'Wire House')

    def test_create_purchase_validation(self):
        data = {'date': timezone.localdate().isoformat(), 'product_name': ' ', 'quantity': 0, 'unit_price': '40.00'}
        response = self.client.post('/api/v1/purchases/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('product_name', response.data)
        self.assertIn('quantity', response.data)
        self.assertFalse(Purchase.objects.exists())

    def test_create_with_foreign_supplier_rejected(self):
        other_supplier = TestDataFactory.create_supplier(self.admin)
        data = {
            'date': timezone.localdate().isoformat(),
            'product_name': 'Copper wire',
            'quantity': 5,
            'unit_price': '40.00',
            'supplier': other_supplier.id,
        }
        response = self.client.post('/api/v1/purchases/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('supplier', response.data)

    def test_list_filters(self):
        TestDataFactory.create_purchase(self.user, product_name='A', supplier=self.supplier)
        TestDataFactory.create_purchase(self.user, product_name='B', date=timezone.localdate() - timedelta(days=40))

        response = self.client.get(f'/api/v1/purchases/?supplier={self.supplier.id}')
        self.assertEqual([row['product_name'] for row in response.data], ['A'])

        date_from = (timezone.localdate() - timedelta(days=7)).isoformat()
        response = self.client.get(f'/api/v1/purchases/?date_from={date_from}')
        self.assertEqual([row['product_name'] for row in response.data], ['A'])

        response = self.client.get('/api/v1/purchases/?date_from=yesterday')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_update_quantity_restocks(self):
        purchase = TestDataFactory.create_purchase(self.user, product_name='Switch', quantity=5, unit_price=Decimal('20.00'))
        response = self.client.patch(f'/api/v1/purchases/{purchase.id}/', {'quantity': 8}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_amount'], '160.00')

        item = InventoryItem.objects.get(owner=self.user, name='Switch')
        self.assertEqual(item.quantity, 8)
        self.assertEqual(DaybookEntry.objects.get(purchase=purchase).amount, Decimal('160.00'))

    def test_update_price_keeps_stock(self):
        purchase = TestDataFactory.create_purchase(self.user, product_name='Switch', quantity=5, unit_price=Decimal('20.00'))
        response = self.client.patch(f'/api/v1/purchases/{purchase.id}/', {'unit_price': '30.00'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(InventoryItem.objects.get(owner=self.user, name='Switch').quantity, 5)
        self.assertEqual(PurchaseItem.objects.get(purchase=purchase).total_price, Decimal('150.00'))

    def test_delete_requires_admin(self):
        purchase = TestDataFactory.create_purchase(self.user)
        response = self.client.delete(f'/api/v1/purchases/{purchase.id}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertTrue(Purchase.objects.filter(pk=purchase.pk).exists())

    def test_admin_delete_reverts_stock(self):
        purchase = TestDataFactory.create_purchase(self.admin, product_name='Socket', quantity=6)
        client = AuthenticatedAPIClient()
        client.authenticate_user(self.admin)

        response = client.delete(f'/api/v1/purchases/{purchase.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertEqual(InventoryItem.objects.get(owner=self.admin, name='Socket').quantity, 0)
        self.assertFalse(DaybookEntry.objects.filter(owner=self.admin).exists())
        self.assertTrue(AuditLog.objects.filter(action='purchase_delete').exists())

    def test_other_users_purchase_not_found(self):
        purchase = TestDataFactory.create_purchase(self.admin)
        response = self.client.get(f'/api/v1/purchases/{purchase.id}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
