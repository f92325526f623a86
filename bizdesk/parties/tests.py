"""
Test suite for the parties module
Tests: customers, suppliers and references
"""
from django.test import TestCase
from rest_framework import status
from bizdesk.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from bizdesk.parties.models import Customer, Reference


class CustomerAPITests(TestCase):
    """Test customer endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_customer(self):
        data = {'name': 'Ravi Traders', 'phone': '9876543210', 'customer_type': 'company'}
        response = self.client.post('/api/v1/customers/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Customer.objects.get(pk=response.data['id']).owner, self.user)

    def test_create_customer_blank_name(self):
        response = self.client.post('/api/v1/customers/', {'name': '   '}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_list_customers_ordered_and_scoped(self):
        TestDataFactory.create_customer(self.user, name='Zed')
        TestDataFactory.create_customer(self.user, name='Anil')
        TestDataFactory.create_customer(TestDataFactory.create_user(), name='Someone Else')

        response = self.client.get('/api/v1/customers/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['name'] for row in response.data], ['Anil', 'Zed'])

    def test_list_customers_filters(self):
        TestDataFactory.create_customer(self.user, name='Anil', email='anil@example.com')
        TestDataFactory.create_customer(self.user, name='Beta Corp', customer_type='company', status='inactive')

        response = self.client.get('/api/v1/customers/?search=anil@')
        self.assertEqual([row['name'] for row in response.data], ['Anil'])
        response = self.client.get('/api/v1/customers/?type=company')
        self.assertEqual([row['name'] for row in response.data], ['Beta Corp'])
        response = self.client.get('/api/v1/customers/?status=active')
        self.assertEqual([row['name'] for row in response.data], ['Anil'])

    def test_update_customer(self):
        customer = TestDataFactory.create_customer(self.user)
        response = self.client.patch(f'/api/v1/customers/{customer.id}/', {'status': 'inactive'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        customer.refresh_from_db()
        self.assertEqual(customer.status, 'inactive')

    def test_delete_customer_with_sales_refused(self):
        sale = TestDataFactory.create_sale(self.user)
        response = self.client.delete(f'/api/v1/customers/{sale.customer_id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('error', response.data)

    def test_delete_customer(self):
        customer = TestDataFactory.create_customer(self.user)
        response = self.client.delete(f'/api/v1/customers/{customer.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)

    def test_other_users_customer_not_found(self):
        customer = TestDataFactory.create_customer(TestDataFactory.create_user())
        response = self.client.get(f'/api/v1/customers/{customer.id}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class SupplierAPITests(TestCase):
    """Test supplier endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_and_list_suppliers(self):
        response = self.client.post('/api/v1/suppliers/', {'name': 'Acme Wholesale'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        response = self.client.get('/api/v1/suppliers/')
        self.assertEqual([row['name'] for row in response.data], ['Acme Wholesale'])

    def test_put_supplier(self):
        supplier = TestDataFactory.create_supplier(self.user)
        response = self.client.put(
            f'/api/v1/suppliers/{supplier.id}/', {'name': 'Renamed', 'contact_person': 'Meera'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['contact_person'], 'Meera')

    def test_delete_supplier(self):
        supplier = TestDataFactory.create_supplier(self.user)
        response = self.client.delete(f'/api/v1/suppliers/{supplier.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)


class ReferenceAPITests(TestCase):
    """Test reference endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_and_list_references(self):
        self.client.post('/api/v1/references/', {'name': 'State Bank', 'reference_type': 'bank'}, format='json')
        self.client.post('/api/v1/references/', {'name': 'Cash Ledger'}, format='json')

        response = self.client.get('/api/v1/references/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['name'] for row in response.data], ['Cash Ledger', 'State Bank'])

        response = self.client.get('/api/v1/references/?type=bank')
        self.assertEqual([row['name'] for row in response.data], ['State Bank'])

    def test_duplicate_reference(self):
        Reference.objects.create(owner=self.user, name='State Bank')
        response = self.client.post('/api/v1/references/', {'name': 'state bank'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('name', response.data)
