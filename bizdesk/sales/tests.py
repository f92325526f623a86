"""
Test suite for the sales module
Tests: installment sales, schedules, payments, dues and customer statements
"""
from datetime import date, timedelta
from decimal import Decimal
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from bizdesk.core.models import AuditLog
from bizdesk.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from bizdesk.books.models import DaybookEntry, LedgerEntry
from bizdesk.sales.models import Sale, Installment
from bizdesk.sales.services import (
    InsufficientStock, InstallmentLocked, SaleError,
    add_months, split_amount, create_sale, pay_installment, update_sale,
    update_installment, delete_installment,
)


class ScheduleHelperTests(TestCase):
    """Test month arithmetic and amount splitting"""

    def test_add_months_clamps_day(self):
        self.assertEqual(add_months(date(2024, 1, 31), 1), date(2024, 2, 29))
        self.assertEqual(add_months(date(2023, 11, 15), 3), date(2024, 2, 15))

    def test_split_amount_last_part_takes_remainder(self):
        self.assertEqual(
            split_amount(Decimal('1000.00'), 3),
            [Decimal('333.33'), Decimal('333.33'), Decimal('333.34')]
        )
        self.assertEqual(sum(split_amount(Decimal('100.00'), 7)), Decimal('100.00'))


class SaleServiceTests(TestCase):
    """Test create/update/pay through the service layer"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.customer = TestDataFactory.create_customer(self.user)
        self.item = TestDataFactory.create_inventory_item(self.user, quantity=2)

    def test_create_sale_builds_schedule(self):
        sale = TestDataFactory.create_sale(
            self.user, self.customer, self.item,
            total_amount=Decimal('1000.00'), advance_amount=Decimal('0.00'), duration=3
        )
        installments = list(sale.installments.order_by('due_date'))
        self.assertEqual([i.amount for i in installments], [Decimal('333.33'), Decimal('333.33'), Decimal('333.34')])
        today = timezone.localdate()
        self.assertEqual([i.due_date for i in installments], [add_months(today, n) for n in (1, 2, 3)])
        self.assertEqual(sale.reference, f'SALE-{sale.pk}')
        self.assertEqual(sale.status, 'active')
        self.assertFalse(DaybookEntry.objects.filter(sale=sale).exists())

    def test_create_sale_records_advance_and_stock(self):
        sale = TestDataFactory.create_sale(self.user, self.customer, self.item)
        self.item.refresh_from_db()
        self.assertEqual(self.item.quantity, 1)

        advance = DaybookEntry.objects.get(sale=sale)
        self.assertEqual(advance.entry_type, 'income')
        self.assertEqual(advance.amount, Decimal('200.00'))
        self.assertEqual(advance.customer, self.customer)
        self.assertEqual(sale.installments.count(), 4)
        self.assertEqual(sum(i.amount for i in sale.installments.all()), Decimal('1000.00'))

    def test_fully_paid_upfront_is_completed(self):
        sale = TestDataFactory.create_sale(
            self.user, self.customer, self.item,
            total_amount=Decimal('500.00'), advance_amount=Decimal('500.00')
        )
        self.assertEqual(sale.status, 'completed')
        self.assertFalse(sale.installments.exists())

    def test_out_of_stock_refused(self):
        item = TestDataFactory.create_inventory_item(self.user, quantity=0)
        with self.assertRaises(InsufficientStock):
            create_sale(self.user, self.customer, item, Decimal('100.00'), 2)
        self.assertFalse(Sale.objects.exists())

    def test_advance_above_total_refused(self):
        with self.assertRaises(SaleError):
            create_sale(self.user, self.customer, self.item, Decimal('100.00'), 2, advance_amount=Decimal('150.00'))

    def test_update_regenerates_schedule(self):
        sale = TestDataFactory.create_sale(self.user, self.customer, self.item)
        update_sale(sale, duration=2, advance_amount=Decimal('400.00'))
        self.assertEqual(
            list(sale.installments.values_list('amount', flat=True)),
            [Decimal('400.00'), Decimal('400.00')]
        )
        self.assertEqual(DaybookEntry.objects.get(sale=sale).amount, Decimal('400.00'))

    def test_pay_last_installment_completes_sale(self):
        sale = TestDataFactory.create_sale(self.user, self.customer, self.item, duration=2)
        for installment in sale.installments.all():
            pay_installment(installment, self.user, 'CASH')
        sale.refresh_from_db()
        self.assertEqual(sale.status, 'completed')

    def test_pay_twice_refused(self):
        sale = TestDataFactory.create_sale(self.user, self.customer, self.item)
        installment = sale.installments.first()
        pay_installment(installment, self.user, 'CASH')
        with self.assertRaises(InstallmentLocked):
            pay_installment(installment, self.user, 'CASH')

    def test_update_adds_advance_entry(self):
        """A sale created without an advance gets its income entry once an advance is set"""
        sale = TestDataFactory.create_sale(self.user, self.customer, self.item, advance_amount=Decimal('0.00'))
        self.assertFalse(DaybookEntry.objects.filter(sale=sale).exists())

        update_sale(sale, advance_amount=Decimal('300.00'))

        entry = DaybookEntry.objects.get(sale=sale, installment__isnull=True)
        self.assertEqual(entry.amount, Decimal('300.00'))
        self.assertEqual(entry.entry_type, 'income')
        self.assertEqual(entry.customer, self.customer)
        self.assertEqual(sum(i.amount for i in sale.installments.all()), Decimal('900.00'))

    def test_update_removes_advance_entry(self):
        sale = TestDataFactory.create_sale(self.user, self.customer, self.item)
        update_sale(sale, advance_amount=Decimal('0.00'))
        self.assertFalse(DaybookEntry.objects.filter(sale=sale).exists())

    def test_update_payment_mode_syncs_advance_entry(self):
        sale = TestDataFactory.create_sale(self.user, self.customer, self.item)
        update_sale(sale, payment_mode='BANK')

        entry = DaybookEntry.objects.get(sale=sale)
        self.assertEqual(entry.payment_method, 'bank')
        self.assertEqual(entry.amount, Decimal('200.00'))

    def test_delete_last_unpaid_installment_completes_sale(self):
        sale = TestDataFactory.create_sale(self.user, self.customer, self.item, duration=2)
        first, second = sale.installments.order_by('due_date')
        pay_installment(first, self.user, 'CASH')

        delete_installment(second)

        sale.refresh_from_db()
        self.assertEqual(sale.status, 'completed')

    def test_delete_installment_keeps_sale_active_while_unpaid_remain(self):
        sale = TestDataFactory.create_sale(self.user, self.customer, self.item, duration=3)
        delete_installment(sale.installments.first())
        sale.refresh_from_db()
        self.assertEqual(sale.status, 'active')

    def test_stale_installment_copy_cannot_be_edited_after_payment(self):
        sale = TestDataFactory.create_sale(self.user, self.customer, self.item)
        stale = sale.installments.first()
        pay_installment(Installment.objects.get(pk=stale.pk), self.user, 'CASH')

        with self.assertRaises(InstallmentLocked):
            update_installment(stale, notes='changed')
        with self.assertRaises(InstallmentLocked):
            delete_installment(stale)
        self.assertTrue(Installment.objects.filter(pk=stale.pk, status='PAID').exists())


class SaleAPITests(TestCase):
    """Test sale endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.customer = TestDataFactory.create_customer(self.user, name='Anil Kumar')
        self.item = TestDataFactory.create_inventory_item(self.user, name='Television', quantity=3)

    def test_create_sale(self):
        data = {
            'customer': self.customer.id,
            'item': self.item.id,
            'total_amount': '1200.00',
            'advance_amount': '200.00',
            'duration': 4,
            'payment_mode': 'CASH',
        }
        response = self.client.post('/api/v1/sales/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['customer_name'], 'Anil Kumar')
        self.assertEqual(response.data['remaining_amount'], '1000.00')
        self.assertEqual(len(response.data['installments']), 4)
        self.assertEqual(response.data['installments'][0]['amount'], '250.00')
        self.assertTrue(AuditLog.objects.filter(action='sale_create').exists())

    def test_create_sale_advance_above_total(self):
        data = {'customer': self.customer.id, 'item': self.item.id, 'total_amount': '100.00',
                'advance_amount': '200.00', 'duration': 2}
        response = self.client.post('/api/v1/sales/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('advance_amount', response.data)

    def test_create_sale_out_of_stock(self):
        item = TestDataFactory.create_inventory_item(self.user, quantity=0)
        data = {'customer': self.customer.id, 'item': item.id, 'total_amount': '100.00', 'duration': 2}
        response = self.client.post('/api/v1/sales/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('out of stock', response.data['error'])

    def test_create_sale_for_other_users_customer(self):
        other_customer = TestDataFactory.create_customer(TestDataFactory.create_user())
        data = {'customer': other_customer.id, 'item': self.item.id, 'total_amount': '100.00', 'duration': 2}
        response = self.client.post('/api/v1/sales/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('customer', response.data)

    def test_list_filters(self):
        TestDataFactory.create_sale(self.user, self.customer, self.item)
        TestDataFactory.create_sale(self.user, item=self.item)

        response = self.client.get(f'/api/v1/sales/?customer={self.customer.id}')
        self.assertEqual(len(response.data), 1)
        response = self.client.get('/api/v1/sales/?status=completed')
        self.assertEqual(len(response.data), 0)

    def test_patch_sale(self):
        sale = TestDataFactory.create_sale(self.user, self.customer, self.item)
        response = self.client.patch(f'/api/v1/sales/{sale.id}/', {'duration': 5}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['installments']), 5)

    def test_patch_and_delete_refused_after_payment(self):
        sale = TestDataFactory.create_sale(self.user, self.customer, self.item)
        pay_installment(sale.installments.first(), self.user, 'CASH')

        response = self.client.patch(f'/api/v1/sales/{sale.id}/', {'duration': 5}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('error', response.data)

        response = self.client.delete(f'/api/v1/sales/{sale.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(Sale.objects.filter(pk=sale.pk).exists())

    def test_delete_sale_restores_stock(self):
        sale = TestDataFactory.create_sale(self.user, self.customer, self.item)
        response = self.client.delete(f'/api/v1/sales/{sale.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.item.refresh_from_db()
        self.assertEqual(self.item.quantity, 3)
        self.assertFalse(DaybookEntry.objects.filter(reference=sale.reference).exists())


class InstallmentAPITests(TestCase):
    """Test installment endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.customer = TestDataFactory.create_customer(self.user, name='Anil Kumar')
        self.sale = TestDataFactory.create_sale(self.user, self.customer)
        self.installment = self.sale.installments.order_by('due_date').first()

    def test_list_filters(self):
        response = self.client.get(f'/api/v1/installments/?sale={self.sale.id}&status=pending')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 4)

        response = self.client.get(f'/api/v1/installments/?due_date={self.installment.due_date.isoformat()}')
        self.assertEqual([row['id'] for row in response.data], [self.installment.id])

    def test_pay_cash(self):
        response = self.client.post(f'/api/v1/installments/{self.installment.id}/pay/', {'payment_mode': 'CASH'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['installment']['status'], 'PAID')
        self.assertIsNone(response.data['ledger_entry_id'])

        entry = DaybookEntry.objects.get(pk=response.data['daybook_entry_id'])
        self.assertEqual(entry.amount, Decimal('250.00'))
        self.assertEqual(entry.installment_id, self.installment.id)

    def test_pay_bank_writes_ledger_credit(self):
        response = self.client.post(f'/api/v1/installments/{self.installment.id}/pay/', {'payment_mode': 'BANK'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        ledger = LedgerEntry.objects.get(pk=response.data['ledger_entry_id'])
        self.assertEqual(ledger.ledger_type, 'BANK')
        self.assertEqual(ledger.transaction_type, 'CREDIT')
        self.assertEqual(ledger.amount, Decimal('250.00'))

    def test_pay_already_paid(self):
        self.client.post(f'/api/v1/installments/{self.installment.id}/pay/', {'payment_mode': 'CASH'}, format='json')
        response = self.client.post(f'/api/v1/installments/{self.installment.id}/pay/', {'payment_mode': 'CASH'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(DaybookEntry.objects.filter(installment=self.installment).count(), 1)

    def test_pay_invalid_mode(self):
        response = self.client.post(f'/api/v1/installments/{self.installment.id}/pay/', {'payment_mode': 'CHEQUE'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_edit_paid_installment_refused(self):
        pay_installment(self.installment, self.user, 'CASH')
        response = self.client.put(f'/api/v1/installments/{self.installment.id}/', {'amount': '10.00'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.delete(f'/api/v1/installments/{self.installment.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_edit_pending_installment(self):
        response = self.client.put(f'/api/v1/installments/{self.installment.id}/', {'notes': 'Call first'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['notes'], 'Call first')

    def test_other_users_installment_not_found(self):
        other_sale = TestDataFactory.create_sale(TestDataFactory.create_user())
        response = self.client.get(f'/api/v1/installments/{other_sale.installments.first().id}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_due_groups_by_customer(self):
        Installment.objects.filter(pk=self.installment.pk).update(due_date=timezone.localdate() - timedelta(days=2))

        response = self.client.get('/api/v1/installments/due/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_due_amount'], Decimal('250.00'))
        group = response.data['customer_due_installments'][0]
        self.assertEqual(group['customer']['name'], 'Anil Kumar')
        self.assertEqual(len(group['installments']), 1)
        self.assertTrue(group['installments'][0]['is_overdue'])

    def test_customer_statement(self):
        pay_installment(self.installment, self.user, 'CASH')

        response = self.client.get(f'/api/v1/customers/{self.customer.id}/invoice/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['summary']['total_sales'], Decimal('1200.00'))
        self.assertEqual(response.data['summary']['total_paid'], Decimal('450.00'))
        self.assertEqual(response.data['summary']['total_due'], Decimal('750.00'))
        self.assertEqual(response.data['sales'][0]['remaining_amount'], Decimal('750.00'))
        self.assertEqual(len(response.data['sales'][0]['installments']), 4)
