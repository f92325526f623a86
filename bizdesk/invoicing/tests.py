"""
Test suite for the invoicing module
Tests: invoice totals, validation, updates and stats
"""
from datetime import timedelta
from decimal import Decimal
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from bizdesk.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from bizdesk.invoicing.models import Invoice, InvoiceItem


class InvoiceAPITests(TestCase):
    """Test invoice endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.customer = TestDataFactory.create_customer(self.user, name='Meera Traders')
        today = timezone.localdate()
        self.data = {
            'customer': self.customer.id,
            'invoice_number': 'INV-001',
            'issue_date': today.isoformat(),
            'due_date': (today + timedelta(days=15)).isoformat(),
            'tax_rate': '10.00',
            'discount': '5.00',
            'status': 'paid',
            'items': [
                {'description': 'Wiring work', 'quantity': '2', 'rate': '50.00'},
                {'description': 'Switch board', 'quantity': '1', 'rate': '100.00'},
            ],
        }

    def test_create_invoice_computes_totals(self):
        response = self.client.post('/api/v1/invoices/', self.data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['subtotal'], '200.00')
        self.assertEqual(response.data['tax_amount'], '20.00')
        self.assertEqual(response.data['total'], '215.00')
        self.assertEqual(response.data['status'], 'draft')
        self.assertEqual(response.data['customer_name'], 'Meera Traders')
        self.assertEqual([row['amount'] for row in response.data['items']], ['100.00', '100.00'])

    def test_create_requires_items(self):
        self.data['items'] = []
        response = self.client.post('/api/v1/invoices/', self.data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('items', response.data)

    def test_duplicate_invoice_number(self):
        self.client.post('/api/v1/invoices/', self.data, format='json')
        response = self.client.post('/api/v1/invoices/', self.data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('invoice_number', response.data)

    def test_same_number_for_different_users(self):
        self.client.post('/api/v1/invoices/', self.data, format='json')
        other = TestDataFactory.create_user()
        client = AuthenticatedAPIClient()
        client.authenticate_user(other)
        self.data['customer'] = None
        response = client.post('/api/v1/invoices/', self.data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_due_date_before_issue_date(self):
        self.data['due_date'] = (timezone.localdate() - timedelta(days=1)).isoformat()
        response = self.client.post('/api/v1/invoices/', self.data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('due_date', response.data)

    def test_invalid_tax_rate(self):
        self.data['tax_rate'] = '120.00'
        response = self.client.post('/api/v1/invoices/', self.data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('tax_rate', response.data)

    def test_patch_items_recalculates(self):
        invoice_id = self.client.post('/api/v1/invoices/', self.data, format='json').data['id']
        response = self.client.patch(
            f'/api/v1/invoices/{invoice_id}/',
            {'items': [{'description': 'Inspection', 'quantity': '1', 'rate': '300.00'}], 'status': 'sent'},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total'], '325.00')
        self.assertEqual(response.data['status'], 'sent')
        self.assertEqual(InvoiceItem.objects.filter(invoice_id=invoice_id).count(), 1)

    def test_patch_discount_recalculates(self):
        invoice_id = self.client.post('/api/v1/invoices/', self.data, format='json').data['id']
        response = self.client.patch(f'/api/v1/invoices/{invoice_id}/', {'discount': '20.00'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total'], '200.00')

    def test_discount_above_subtotal_rejected(self):
        self.data['discount'] = '250.00'
        response = self.client.post('/api/v1/invoices/', self.data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('discount', response.data)
        self.assertFalse(Invoice.objects.exists())

    def test_patch_discount_above_stored_subtotal_rejected(self):
        invoice_id = self.client.post('/api/v1/invoices/', self.data, format='json').data['id']
        response = self.client.patch(f'/api/v1/invoices/{invoice_id}/', {'discount': '200.01'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(Invoice.objects.get(pk=invoice_id).total, Decimal('215.00'))

    def test_delete_invoice(self):
        invoice_id = self.client.post('/api/v1/invoices/', self.data, format='json').data['id']
        response = self.client.delete(f'/api/v1/invoices/{invoice_id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Invoice.objects.exists())
        self.assertFalse(InvoiceItem.objects.exists())

    def test_list_filters(self):
        self.client.post('/api/v1/invoices/', self.data, format='json')
        self.data.update(invoice_number='INV-002', customer=None)
        self.client.post('/api/v1/invoices/', self.data, format='json')

        response = self.client.get('/api/v1/invoices/?search=meera')
        self.assertEqual([row['invoice_number'] for row in response.data], ['INV-001'])
        response = self.client.get(f'/api/v1/invoices/?customer={self.customer.id}')
        self.assertEqual(len(response.data), 1)
        response = self.client.get('/api/v1/invoices/?status=bogus')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_stats(self):
        first_id = self.client.post('/api/v1/invoices/', self.data, format='json').data['id']
        self.data['invoice_number'] = 'INV-002'
        self.client.post('/api/v1/invoices/', self.data, format='json')
        Invoice.objects.filter(pk=first_id).update(status='paid')

        response = self.client.get('/api/v1/invoices/stats/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_invoices'], 2)
        self.assertEqual(response.data['total_amount'], Decimal('430.00'))
        self.assertEqual(response.data['paid_count'], 1)
        self.assertEqual(response.data['paid_amount'], Decimal('215.00'))
        self.assertEqual(response.data['draft_count'], 1)
        self.assertEqual(response.data['pending_count'], 0)
