"""
Test suite for the dashboard reports
Tests: overview, stats, chart data, daily stats, categories and cache invalidation
"""
from decimal import Decimal
from django.core.cache import cache
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from bizdesk.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from bizdesk.sales.models import Installment


class DashboardAPITests(TestCase):
    """Test dashboard endpoints"""

    def setUp(self):
        cache.clear()
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.customer = TestDataFactory.create_customer(self.user)
        self.item = TestDataFactory.create_inventory_item(self.user, quantity=5, category='Electronics')
        self.sale = TestDataFactory.create_sale(self.user, self.customer, self.item)

    def test_overview(self):
        response = self.client.get('/api/v1/dashboard/overview/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        metrics = {row['metric']: row for row in response.data['data']}
        self.assertEqual(set(metrics), {'Revenue', 'Sales', 'Customers', 'Inventory'})
        self.assertEqual(metrics['Revenue']['current'], 1200.0)
        self.assertEqual(metrics['Revenue']['growth'], 100.0)
        self.assertEqual(metrics['Revenue']['trend'], 'up')
        self.assertEqual(metrics['Customers']['current'], 1.0)
        self.assertEqual(metrics['Inventory']['current'], 4.0)
        self.assertAlmostEqual(metrics['Revenue']['target'], 1440.0)

    def test_stats(self):
        Installment.objects.filter(pk=self.sale.installments.first().pk).update(due_date=timezone.localdate())

        response = self.client.get('/api/v1/dashboard/stats/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_due_amount'], 1000.0)
        self.assertEqual(response.data['total_profit'], 1200.0)
        self.assertEqual(response.data['payment_stats']['due_today'], 1)
        self.assertEqual(response.data['payment_stats']['overdue'], 0)
        first_due = response.data['due_payments'][0]
        self.assertEqual(first_due['days_until_due'], 0)
        self.assertEqual(first_due['reference'], self.sale.reference)

    def test_chart_data(self):
        response = self.client.get('/api/v1/dashboard/chart-data/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        points = response.data['daily_data']
        self.assertEqual(len(points), 31)
        self.assertEqual(points[-1]['date'], timezone.localdate().isoformat())
        self.assertEqual(points[-1]['sales'], 1200.0)
        self.assertEqual(points[-1]['sales_count'], 1)
        self.assertEqual(points[-1]['customers'], 1)
        self.assertEqual(response.data['summary']['total_sales'], 1200.0)

    def test_daily_stats(self):
        response = self.client.get('/api/v1/dashboard/daily-stats/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['data']), 7)
        self.assertEqual(response.data['data'][-1]['orders'], 1)
        self.assertEqual(response.data['data'][0]['revenue'], 0.0)

    def test_categories(self):
        TestDataFactory.create_inventory_item(self.user, quantity=12, category='Furniture')

        response = self.client.get('/api/v1/dashboard/categories/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['type'], 'inventory')
        self.assertEqual([row['name'] for row in response.data['data']], ['Furniture', 'Electronics'])
        self.assertEqual(response.data['summary']['top_category'], 'Furniture')
        self.assertIn('timestamp', response.data)

        response = self.client.get('/api/v1/dashboard/categories/?type=sales')
        self.assertEqual(response.data['data'][0]['name'], 'Electronics')
        self.assertEqual(response.data['data'][0]['value'], 1200.0)
        self.assertEqual(response.data['data'][0]['percentage'], 100)

    def test_categories_invalid_type(self):
        response = self.client.get('/api/v1/dashboard/categories/?type=customers')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Invalid type parameter')

    def test_requires_authentication(self):
        self.client.logout()
        response = self.client.get('/api/v1/dashboard/stats/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class DashboardCacheInvalidationTests(TestCase):
    """Cached payloads are served until the underlying data changes"""

    def setUp(self):
        cache.clear()
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.sale = TestDataFactory.create_sale(self.user)

    def test_untracked_change_served_from_cache(self):
        self.assertEqual(self.client.get('/api/v1/dashboard/stats/').data['total_due_amount'], 1000.0)
        # queryset.update() sends no signals
        Installment.objects.filter(sale=self.sale).update(amount=Decimal('1.00'))
        self.assertEqual(self.client.get('/api/v1/dashboard/stats/').data['total_due_amount'], 1000.0)

    def test_new_sale_invalidates(self):
        self.assertEqual(self.client.get('/api/v1/dashboard/stats/').data['total_due_amount'], 1000.0)
        TestDataFactory.create_sale(self.user)
        self.assertEqual(self.client.get('/api/v1/dashboard/stats/').data['total_due_amount'], 2000.0)

    def test_other_users_cache_untouched(self):
        other = TestDataFactory.create_user()
        other_client = AuthenticatedAPIClient()
        other_client.authenticate_user(other)
        self.assertEqual(other_client.get('/api/v1/dashboard/stats/').data['total_due_amount'], 0.0)

        TestDataFactory.create_sale(self.user)
        self.assertEqual(other_client.get('/api/v1/dashboard/stats/').data['total_due_amount'], 0.0)
        self.assertEqual(self.client.get('/api/v1/dashboard/stats/').data['total_due_amount'], 2000.0)

    def test_paying_installment_invalidates(self):
        self.assertEqual(self.client.get('/api/v1/dashboard/stats/').data['total_due_amount'], 1000.0)
        installment = self.sale.installments.first()
        self.client.post(f'/api/v1/installments/{installment.id}/pay/', {'payment_mode': 'CASH'}, format='json')
        self.assertEqual(self.client.get('/api/v1/dashboard/stats/').data['total_due_amount'], 750.0)
