"""
Test suite for the inventory module
Tests: items, derived stock status, metrics, stats, categories and stock entries
"""
from decimal import Decimal
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from bizdesk.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from bizdesk.books.models import DaybookEntry
from bizdesk.inventory.models import InventoryItem, StockEntry


class InventoryItemModelTests(TestCase):
    """Test status derivation"""

    def setUp(self):
        self.user = TestDataFactory.create_user()

    def test_status_follows_quantity(self):
        item = TestDataFactory.create_inventory_item(self.user, quantity=10, min_stock=3)
        self.assertEqual(item.status, 'in_stock')

        item.quantity = 3
        item.save(update_fields=['quantity'])
        item.refresh_from_db()
        self.assertEqual(item.status, 'low_stock')

        item.quantity = 0
        item.save()
        self.assertEqual(item.status, 'out_of_stock')

    def test_unit_value_prefers_cost_price(self):
        item = TestDataFactory.create_inventory_item(self.user, price=Decimal('100.00'), cost_price=Decimal('80.00'))
        self.assertEqual(item.unit_value, Decimal('80.00'))


class InventoryAPITests(TestCase):
    """Test inventory item endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_item(self):
        data = {'name': 'Ceiling Fan', 'quantity': 5, 'price': '2500.00', 'category': 'Electrical'}
        response = self.client.post('/api/v1/inventory/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'in_stock')

    def test_create_item_validation(self):
        data = {'name': 'Ceiling Fan', 'quantity': 5, 'price': '0', 'min_stock': 5, 'max_stock': 2}
        response = self.client.post('/api/v1/inventory/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('price', response.data)

    def test_create_duplicate_name(self):
        TestDataFactory.create_inventory_item(self.user, name='Ceiling Fan')
        data = {'name': 'Ceiling Fan', 'quantity': 1, 'price': '10.00'}
        response = self.client.post('/api/v1/inventory/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('name', response.data)

    def test_rename_onto_existing_name_rejected(self):
        TestDataFactory.create_inventory_item(self.user, name='Fan')
        item = TestDataFactory.create_inventory_item(self.user, name='Heater')
        response = self.client.patch(f'/api/v1/inventory/{item.id}/', {'name': 'Fan'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_same_name_for_different_users(self):
        TestDataFactory.create_inventory_item(TestDataFactory.create_user(), name='Fan')
        response = self.client.post('/api/v1/inventory/', {'name': 'Fan', 'quantity': 1, 'price': '10.00'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_list_filters(self):
        TestDataFactory.create_inventory_item(self.user, name='Fan', category='Electrical')
        TestDataFactory.create_inventory_item(self.user, name='Chair', category='Furniture', quantity=0)

        response = self.client.get('/api/v1/inventory/?category=electrical')
        self.assertEqual([row['name'] for row in response.data], ['Fan'])
        response = self.client.get('/api/v1/inventory/?status=out_of_stock')
        self.assertEqual([row['name'] for row in response.data], ['Chair'])
        response = self.client.get('/api/v1/inventory/?search=cha')
        self.assertEqual([row['name'] for row in response.data], ['Chair'])

    def test_detail_includes_metrics(self):
        purchase = TestDataFactory.create_purchase(self.user, product_name='Fan', quantity=10, unit_price=Decimal('50.00'))
        item = purchase.items.get().inventory_item

        response = self.client.get(f'/api/v1/inventory/{item.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        metrics = response.data['metrics']
        self.assertEqual(metrics['total_purchase_value'], Decimal('500.00'))
        self.assertEqual(metrics['total_quantity_purchased'], 10)
        self.assertEqual(metrics['avg_purchase_price'], Decimal('50.00'))
        self.assertEqual(metrics['current_value'], Decimal('500.00'))
        self.assertTrue(metrics['is_low_stock'])
        self.assertFalse(metrics['is_out_of_stock'])

    def test_delete_item_with_purchases_refused(self):
        purchase = TestDataFactory.create_purchase(self.user, product_name='Fan')
        item = purchase.items.get().inventory_item
        response = self.client.delete(f'/api/v1/inventory/{item.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(InventoryItem.objects.filter(pk=item.pk).exists())

    def test_delete_item(self):
        item = TestDataFactory.create_inventory_item(self.user)
        response = self.client.delete(f'/api/v1/inventory/{item.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)

    def test_stats(self):
        TestDataFactory.create_inventory_item(self.user, quantity=10, price=Decimal('5.00'))
        TestDataFactory.create_inventory_item(self.user, quantity=0, price=Decimal('7.00'))
        TestDataFactory.create_inventory_item(self.user, quantity=2, price=Decimal('1.00'), min_stock=5)

        response = self.client.get('/api/v1/inventory/stats/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_items'], 3)
        self.assertEqual(response.data['total_value'], Decimal('52.00'))
        self.assertEqual(response.data['in_stock_count'], 2)
        self.assertEqual(response.data['out_of_stock_count'], 1)
        self.assertEqual(response.data['low_stock_count'], 2)

    def test_categories(self):
        TestDataFactory.create_inventory_item(self.user, category='Electrical', quantity=4, price=Decimal('10.00'))
        TestDataFactory.create_inventory_item(self.user, category='Electrical', quantity=6, price=Decimal('20.00'))
        TestDataFactory.create_inventory_item(self.user, category='Furniture', quantity=1, price=Decimal('99.00'))

        response = self.client.get('/api/v1/inventory/categories/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        electrical = response.data['categories'][0]
        self.assertEqual(electrical['name'], 'Electrical')
        self.assertEqual(electrical['item_count'], 2)
        self.assertEqual(electrical['total_quantity'], 10)
        self.assertEqual(response.data['overview']['total_categories'], 2)

        response = self.client.get('/api/v1/inventory/category-overview/')
        self.assertEqual(response.data[0]['category'], 'Electrical')
        self.assertEqual(response.data[0]['total_value'], Decimal('160.00'))


class StockEntryAPITests(TestCase):
    """Test stock entries and their daybook entries"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.data = {
            'date': timezone.localdate().isoformat(),
            'product_name': 'Copper wire',
            'amount': '1200.00',
            'quantity': 10,
        }

    def test_create_writes_daybook_entry(self):
        response = self.client.post('/api/v1/stock/', self.data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

        entry = DaybookEntry.objects.get(stock_entry_id=response.data['id'])
        self.assertEqual(response.data['daybook_entry_id'], entry.id)
        self.assertEqual(entry.entry_type, 'expense')
        self.assertEqual(entry.amount, Decimal('1200.00'))
        self.assertEqual(entry.description, 'Stock purchase: Copper wire')
        self.assertEqual(entry.reference, f"STOCK-{response.data['id']}")

    def test_create_validation(self):
        self.data['quantity'] = 0
        response = self.client.post('/api/v1/stock/', self.data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(DaybookEntry.objects.exists())

    def test_update_rewrites_daybook_entry(self):
        stock_id = self.client.post('/api/v1/stock/', self.data, format='json').data['id']
        response = self.client.patch(
            f'/api/v1/stock/{stock_id}/', {'amount': '900.00', 'product_name': 'Aluminium wire'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        entry = DaybookEntry.objects.get(stock_entry_id=stock_id)
        self.assertEqual(entry.amount, Decimal('900.00'))
        self.assertEqual(entry.description, 'Stock purchase: Aluminium wire')

    def test_delete_removes_daybook_entry(self):
        stock_id = self.client.post('/api/v1/stock/', self.data, format='json').data['id']
        response = self.client.delete(f'/api/v1/stock/{stock_id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(StockEntry.objects.exists())
        self.assertFalse(DaybookEntry.objects.exists())
