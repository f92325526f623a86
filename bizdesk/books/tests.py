"""
Test suite for the bookkeeping module
Tests: categorised transactions with their history aggregates, categories,
history series, stats, daybook, ledgers and management commands
"""
from datetime import date, datetime, timedelta, timezone as dt_timezone
from decimal import Decimal
from io import StringIO
from unittest import mock

from django.core.management import call_command
from django.test import TestCase
from django.utils import timezone
from rest_framework import status

from bizdesk.core.models import AuditLog
from bizdesk.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from bizdesk.books.exceptions import CategoryNotFound, TransactionValidationError
from bizdesk.books.models import Category, Transaction, MonthHistory, YearHistory, DaybookEntry
from bizdesk.books import services
from bizdesk.books.services import (
    create_transaction, delete_transaction, normalize_date, rebuild_history, group_entries_by_date,
)


class CreateTransactionTests(TestCase):
    """Test the transaction write path and its aggregates"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.salary = TestDataFactory.create_category(self.user, name='Salary', type='income')
        self.food = TestDataFactory.create_category(self.user, name='Food', type='expense')
        self.day = date(2024, 3, 15)

    def test_income_updates_both_histories(self):
        """Income lands in MonthHistory and YearHistory income only"""
        txn = create_transaction(self.user, Decimal('150.00'), 'Salary', self.day, 'income', 'March pay')

        self.assertEqual(Transaction.objects.filter(owner=self.user).count(), 1)
        self.assertEqual(txn.category, 'Salary')
        self.assertEqual(txn.category_icon, self.salary.icon)

        month_row = MonthHistory.objects.get(owner=self.user, day=15, month=3, year=2024)
        self.assertEqual(month_row.income, Decimal('150.00'))
        self.assertEqual(month_row.expense, Decimal('0.00'))
        year_row = YearHistory.objects.get(owner=self.user, month=3, year=2024)
        self.assertEqual(year_row.income, Decimal('150.00'))
        self.assertEqual(year_row.expense, Decimal('0.00'))

    def test_existing_rows_are_incremented(self):
        """A second transaction in the same period adds to the stored totals"""
        create_transaction(self.user, Decimal('100.00'), 'Salary', self.day, 'income')
        create_transaction(self.user, Decimal('40.00'), 'Food', self.day, 'expense')
        create_transaction(self.user, Decimal('60.00'), 'Food', self.day + timedelta(days=1), 'expense')

        month_row = MonthHistory.objects.get(owner=self.user, day=15, month=3, year=2024)
        self.assertEqual(month_row.income, Decimal('100.00'))
        self.assertEqual(month_row.expense, Decimal('40.00'))
        year_row = YearHistory.objects.get(owner=self.user, month=3, year=2024)
        self.assertEqual(year_row.income, Decimal('100.00'))
        self.assertEqual(year_row.expense, Decimal('100.00'))
        self.assertEqual(MonthHistory.objects.filter(owner=self.user).count(), 2)
        self.assertEqual(YearHistory.objects.filter(owner=self.user).count(), 1)

    def test_bank_category_is_auto_provisioned(self):
        """Missing categories mentioning bank or ledger are created on demand"""
        txn = create_transaction(self.user, Decimal('75.00'), 'My BANK Account', self.day, 'expense')

        category = Category.objects.get(owner=self.user, name='My BANK Account', type='expense')
        self.assertEqual(category.icon, '💸')
        self.assertEqual(txn.category_icon, '💸')

    def test_ledger_category_is_auto_provisioned(self):
        create_transaction(self.user, Decimal('75.00'), 'General Ledger', self.day, 'income')
        category = Category.objects.get(owner=self.user, name='General Ledger', type='income')
        self.assertEqual(category.icon, '💰')

    def test_unknown_category_fails_without_writes(self):
        """Any other missing category is rejected and nothing is written"""
        with self.assertRaises(CategoryNotFound) as ctx:
            create_transaction(self.user, Decimal('10.00'), 'Groceries', self.day, 'expense')

        self.assertEqual(ctx.exception.message, 'Category not found')
        self.assertFalse(Transaction.objects.exists())
        self.assertFalse(MonthHistory.objects.exists())
        self.assertFalse(YearHistory.objects.exists())

    def test_category_is_matched_by_type(self):
        """An income category does not satisfy an expense transaction"""
        with self.assertRaises(CategoryNotFound):
            create_transaction(self.user, Decimal('10.00'), 'Salary', self.day, 'expense')

    def test_failed_aggregate_rolls_back_transaction(self):
        """If the aggregate upsert fails the transaction row is not kept"""
        with mock.patch('bizdesk.books.services.apply_to_history', side_effect=RuntimeError('boom')):
            with self.assertRaises(RuntimeError):
                create_transaction(self.user, Decimal('10.00'), 'Salary', self.day, 'income')

        self.assertFalse(Transaction.objects.exists())
        self.assertFalse(MonthHistory.objects.exists())

    def test_failed_year_upsert_rolls_back_month_row(self):
        """A YearHistory failure after MonthHistory was written leaves no rows behind"""
        bump = services._bump_aggregate

        def fail_on_year(model, lookup, income, expense):
            if model is YearHistory:
                raise RuntimeError('boom')
            return bump(model, lookup, income, expense)

        with mock.patch('bizdesk.books.services._bump_aggregate', side_effect=fail_on_year) as patched:
            with self.assertRaises(RuntimeError):
                create_transaction(self.user, Decimal('10.00'), 'Salary', self.day, 'income')

        self.assertEqual(patched.call_count, 2)
        self.assertFalse(Transaction.objects.exists())
        self.assertFalse(MonthHistory.objects.exists())
        self.assertFalse(YearHistory.objects.exists())

    def test_invalid_amount_is_rejected(self):
        for amount in ('0', '-5', 'abc'):
            with self.assertRaises(TransactionValidationError):
                create_transaction(self.user, amount, 'Salary', self.day, 'income')
        self.assertFalse(Transaction.objects.exists())

    def test_invalid_type_is_rejected(self):
        with self.assertRaises(TransactionValidationError):
            create_transaction(self.user, Decimal('10.00'), 'Salary', self.day, 'transfer')

    def test_aware_datetime_is_converted_to_utc(self):
        """Aware datetimes are bucketed by their UTC date"""
        local = datetime(2024, 1, 2, 1, 0, tzinfo=dt_timezone(timedelta(hours=5)))
        self.assertEqual(normalize_date(local), date(2024, 1, 1))
        self.assertEqual(normalize_date('2024-02-29'), date(2024, 2, 29))

    def test_histories_are_per_user(self):
        other = TestDataFactory.create_user()
        TestDataFactory.create_category(other, name='Salary', type='income')
        create_transaction(self.user, Decimal('10.00'), 'Salary', self.day, 'income')
        create_transaction(other, Decimal('99.00'), 'Salary', self.day, 'income')

        row = YearHistory.objects.get(owner=self.user, month=3, year=2024)
        self.assertEqual(row.income, Decimal('10.00'))

    def test_delete_reverses_aggregates(self):
        txn = create_transaction(self.user, Decimal('30.00'), 'Food', self.day, 'expense')
        create_transaction(self.user, Decimal('20.00'), 'Food', self.day, 'expense')

        delete_transaction(txn)

        self.assertEqual(Transaction.objects.filter(owner=self.user).count(), 1)
        self.assertEqual(MonthHistory.objects.get(owner=self.user, day=15, month=3, year=2024).expense, Decimal('20.00'))
        self.assertEqual(YearHistory.objects.get(owner=self.user, month=3, year=2024).expense, Decimal('20.00'))

    def test_rebuild_history_matches_incremental_totals(self):
        create_transaction(self.user, Decimal('100.00'), 'Salary', self.day, 'income')
        create_transaction(self.user, Decimal('25.00'), 'Food', date(2024, 4, 1), 'expense')
        MonthHistory.objects.filter(owner=self.user).update(income=Decimal('999.00'))

        days, months = rebuild_history(self.user)

        self.assertEqual((days, months), (2, 2))
        self.assertEqual(MonthHistory.objects.get(owner=self.user, day=15, month=3, year=2024).income, Decimal('100.00'))
        self.assertEqual(YearHistory.objects.get(owner=self.user, month=4, year=2024).expense, Decimal('25.00'))


class TransactionAPITests(TestCase):
    """Test transaction endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        TestDataFactory.create_category(self.user, name='Salary', type='income')
        TestDataFactory.create_category(self.user, name='Food', type='expense')

    def test_create_transaction(self):
        data = {
            'amount': '150.00',
            'description': 'March pay',
            'date': '2024-03-15',
            'category': 'Salary',
            'type': 'income',
        }
        response = self.client.post('/api/v1/transactions/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['category'], 'Salary')
        self.assertEqual(response.data['amount'], '150.00')
        self.assertTrue(AuditLog.objects.filter(action='transaction_create', user=self.user).exists())

    def test_create_transaction_unknown_category(self):
        data = {'amount': '10.00', 'date': '2024-03-15', 'category': 'Groceries', 'type': 'expense'}
        response = self.client.post('/api/v1/transactions/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Category not found')
        self.assertFalse(Transaction.objects.exists())

    def test_create_transaction_negative_amount(self):
        data = {'amount': '-10.00', 'date': '2024-03-15', 'category': 'Salary', 'type': 'income'}
        response = self.client.post('/api/v1/transactions/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('error', response.data)

    def test_create_transaction_missing_fields(self):
        response = self.client.post('/api/v1/transactions/', {'amount': '10.00'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('category', response.data)

    def test_list_transactions_by_type(self):
        today = timezone.localdate()
        create_transaction(self.user, Decimal('100.00'), 'Salary', today, 'income')
        create_transaction(self.user, Decimal('20.00'), 'Food', today, 'expense')

        response = self.client.get('/api/v1/transactions/?type=expense')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['category'], 'Food')

    def test_list_transactions_newest_first(self):
        create_transaction(self.user, Decimal('1.00'), 'Salary', date(2024, 1, 1), 'income')
        create_transaction(self.user, Decimal('2.00'), 'Salary', date(2024, 2, 1), 'income')

        response = self.client.get('/api/v1/transactions/?from=2024-01-01&to=2024-12-31')
        self.assertEqual([row['date'] for row in response.data], ['2024-02-01', '2024-01-01'])

    def test_list_transactions_invalid_range(self):
        response = self.client.get('/api/v1/transactions/?from=2024-05-01&to=2024-01-01')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_delete_transaction(self):
        txn = create_transaction(self.user, Decimal('100.00'), 'Salary', date(2024, 3, 15), 'income')
        response = self.client.delete(f'/api/v1/transactions/{txn.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertEqual(YearHistory.objects.get(owner=self.user, month=3, year=2024).income, Decimal('0.00'))

    def test_other_users_transaction_not_found(self):
        other = TestDataFactory.create_user()
        TestDataFactory.create_category(other, name='Salary', type='income')
        txn = create_transaction(other, Decimal('100.00'), 'Salary', date(2024, 3, 15), 'income')
        response = self.client.get(f'/api/v1/transactions/{txn.id}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_requires_authentication(self):
        self.client.logout()
        response = self.client.get('/api/v1/transactions/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class CategoryAPITests(TestCase):
    """Test category endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_category_defaults_icon(self):
        response = self.client.post('/api/v1/categories/', {'name': 'Rent', 'type': 'expense'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['icon'], '💸')

    def test_duplicate_category(self):
        TestDataFactory.create_category(self.user, name='Rent', type='expense')
        response = self.client.post('/api/v1/categories/', {'name': 'Rent', 'type': 'expense'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Category already exists')

    def test_same_name_different_type_allowed(self):
        TestDataFactory.create_category(self.user, name='Other', type='expense')
        response = self.client.post('/api/v1/categories/', {'name': 'Other', 'type': 'income'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_list_categories_by_type(self):
        TestDataFactory.create_category(self.user, name='Salary', type='income')
        TestDataFactory.create_category(self.user, name='Rent', type='expense')
        response = self.client.get('/api/v1/categories/?type=income')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['name'] for row in response.data], ['Salary'])

    def test_list_categories_invalid_type(self):
        response = self.client.get('/api/v1/categories/?type=transfer')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_delete_category(self):
        category = TestDataFactory.create_category(self.user, name='Salary', type='income')
        response = self.client.delete(f'/api/v1/categories/{category.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Category.objects.filter(pk=category.pk).exists())


class HistoryAPITests(TestCase):
    """Test history periods and series"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        TestDataFactory.create_category(self.user, name='Salary', type='income')
        TestDataFactory.create_category(self.user, name='Food', type='expense')

    def test_history_periods_default_to_current_year(self):
        response = self.client.get('/api/v1/history-periods/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, [timezone.localdate().year])

    def test_history_periods_sorted(self):
        create_transaction(self.user, Decimal('1.00'), 'Salary', date(2024, 1, 1), 'income')
        create_transaction(self.user, Decimal('1.00'), 'Salary', date(2022, 1, 1), 'income')
        create_transaction(self.user, Decimal('1.00'), 'Salary', date(2024, 6, 1), 'income')
        response = self.client.get('/api/v1/history-periods/')
        self.assertEqual(response.data, [2022, 2024])

    def test_history_data_year_is_zero_filled(self):
        create_transaction(self.user, Decimal('100.00'), 'Salary', date(2024, 3, 15), 'income')
        create_transaction(self.user, Decimal('30.00'), 'Food', date(2024, 3, 20), 'expense')

        response = self.client.get('/api/v1/history-data/?timeFrame=year&year=2024')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 12)
        march = response.data[2]
        self.assertEqual(march['month'], 3)
        self.assertEqual(march['income'], Decimal('100.00'))
        self.assertEqual(march['expense'], Decimal('30.00'))
        self.assertEqual(response.data[0]['income'], Decimal('0.00'))

    def test_history_data_month_has_one_row_per_day(self):
        create_transaction(self.user, Decimal('10.00'), 'Salary', date(2024, 2, 29), 'income')

        response = self.client.get('/api/v1/history-data/?timeFrame=month&year=2024&month=2')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 29)
        self.assertEqual(response.data[-1]['day'], 29)
        self.assertEqual(response.data[-1]['income'], Decimal('10.00'))

    def test_history_data_validation(self):
        for query in (
            'timeFrame=week&year=2024',
            'timeFrame=year&year=1999',
            'timeFrame=year&year=2041',
            'timeFrame=month&year=2024&month=13',
            'timeFrame=month&year=abc&month=1',
        ):
            response = self.client.get(f'/api/v1/history-data/?{query}')
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, query)


class StatsAPITests(TestCase):
    """Test balance and category stats"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        for name, type in (('Salary', 'income'), ('Food', 'expense'), ('Rent', 'expense')):
            TestDataFactory.create_category(self.user, name=name, type=type)
        today = timezone.localdate()
        create_transaction(self.user, Decimal('500.00'), 'Salary', today, 'income')
        create_transaction(self.user, Decimal('40.00'), 'Food', today, 'expense')
        create_transaction(self.user, Decimal('200.00'), 'Rent', today, 'expense')

    def test_balance(self):
        response = self.client.get('/api/v1/stats/balance/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['income'], Decimal('500.00'))
        self.assertEqual(response.data['expense'], Decimal('240.00'))

    def test_balance_outside_range(self):
        response = self.client.get('/api/v1/stats/balance/?from=2000-01-01&to=2000-01-31')
        self.assertEqual(response.data['income'], Decimal('0.00'))

    def test_categories_sorted_by_amount(self):
        response = self.client.get('/api/v1/stats/categories/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['category'] for row in response.data], ['Salary', 'Rent', 'Food'])


class DaybookAPITests(TestCase):
    """Test daybook endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_entry(self):
        data = {
            'date': timezone.localdate().isoformat(),
            'entry_type': 'expense',
            'amount': '45.50',
            'description': 'Office supplies',
            'reference': 'INV-100',
            'payment_method': 'cash',
        }
        response = self.client.post('/api/v1/daybook/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(DaybookEntry.objects.get(pk=response.data['id']).owner, self.user)

    def test_create_entry_requires_reference_and_positive_amount(self):
        data = {
            'date': timezone.localdate().isoformat(),
            'entry_type': 'expense',
            'amount': '0',
            'description': 'Office supplies',
        }
        response = self.client.post('/api/v1/daybook/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('amount', response.data)
        self.assertIn('reference', response.data)

    def test_list_filter_by_type(self):
        TestDataFactory.create_daybook_entry(self.user, entry_type='income')
        TestDataFactory.create_daybook_entry(self.user, entry_type='expense')
        response = self.client.get('/api/v1/daybook/?type=income')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['entry_type'], 'income')

    def test_patch_and_delete_entry(self):
        entry = TestDataFactory.create_daybook_entry(self.user)
        response = self.client.patch(f'/api/v1/daybook/{entry.id}/', {'status': 'cancelled'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'cancelled')

        response = self.client.delete(f'/api/v1/daybook/{entry.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)

    def test_overdue_lists_pending_past_expenses(self):
        today = timezone.localdate()
        old = TestDataFactory.create_daybook_entry(
            self.user, entry_type='expense', status='pending', date=today - timedelta(days=5)
        )
        older = TestDataFactory.create_daybook_entry(
            self.user, entry_type='expense', status='pending', date=today - timedelta(days=9)
        )
        TestDataFactory.create_daybook_entry(self.user, entry_type='expense', status='pending', date=today)
        TestDataFactory.create_daybook_entry(self.user, entry_type='income', status='pending', date=today - timedelta(days=5))
        TestDataFactory.create_daybook_entry(self.user, entry_type='expense', status='completed', date=today - timedelta(days=5))

        response = self.client.get('/api/v1/daybook/overdue/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['id'] for row in response.data], [older.id, old.id])

    def test_summary_groups_by_date(self):
        today = timezone.localdate()
        yesterday = today - timedelta(days=1)
        TestDataFactory.create_daybook_entry(self.user, entry_type='income', amount=Decimal('100.00'), date=today)
        TestDataFactory.create_daybook_entry(self.user, entry_type='expense', amount=Decimal('30.00'), date=today)
        TestDataFactory.create_daybook_entry(self.user, entry_type='expense', amount=Decimal('20.00'), date=yesterday)

        response = self.client.get('/api/v1/daybook/summary/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['income'], Decimal('100.00'))
        self.assertEqual(response.data['expense'], Decimal('50.00'))
        self.assertEqual(response.data['balance'], Decimal('50.00'))
        days = response.data['days']
        self.assertEqual([day['date'] for day in days], [today.isoformat(), yesterday.isoformat()])
        self.assertEqual(days[0]['expense'], Decimal('30.00'))

    def test_group_entries_by_date(self):
        entries = [
            {'id': 1, 'date': '2024-01-01', 'amount': '10.00', 'entry_type': 'income'},
            {'id': 2, 'date': '2024-01-03', 'amount': '5.00', 'entry_type': 'expense'},
            {'id': 3, 'date': '2024-01-01', 'amount': '2.50', 'entry_type': 'expense'},
        ]
        grouped = group_entries_by_date(entries)
        self.assertEqual([g['date'] for g in grouped], ['2024-01-03', '2024-01-01'])
        self.assertEqual(grouped[1]['income'], Decimal('10.00'))
        self.assertEqual(grouped[1]['expense'], Decimal('2.50'))


class LedgerAPITests(TestCase):
    """Test ledger endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_ledger_entry(self):
        data = {
            'ledger_type': 'SALARY',
            'title': 'June salary',
            'amount': '1500.00',
            'transaction_type': 'DEBIT',
            'date': timezone.localdate().isoformat(),
        }
        response = self.client.post('/api/v1/ledgers/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_custom_ledger_requires_custom_type(self):
        data = {
            'ledger_type': 'CUSTOM',
            'title': 'Misc',
            'amount': '10.00',
            'transaction_type': 'DEBIT',
            'date': timezone.localdate().isoformat(),
        }
        response = self.client.post('/api/v1/ledgers/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('custom_type', response.data)

    def test_list_filter_by_type(self):
        TestDataFactory.create_ledger_entry(self.user, ledger_type='BANK')
        TestDataFactory.create_ledger_entry(self.user, ledger_type='EXPENSE', transaction_type='DEBIT')

        response = self.client.get('/api/v1/ledgers/?type=all')
        self.assertEqual(len(response.data), 2)
        response = self.client.get('/api/v1/ledgers/?type=bank')
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['ledger_type'], 'BANK')

    def test_delete_ledger_entry(self):
        entry = TestDataFactory.create_ledger_entry(self.user)
        response = self.client.delete(f'/api/v1/ledgers/{entry.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)

    def test_stats(self):
        today = timezone.localdate()
        TestDataFactory.create_ledger_entry(self.user, ledger_type='BANK', amount=Decimal('300.00'))
        TestDataFactory.create_ledger_entry(
            self.user, ledger_type='EXPENSE', transaction_type='DEBIT', amount=Decimal('100.00')
        )
        TestDataFactory.create_ledger_entry(
            self.user, ledger_type='BANK', amount=Decimal('50.00'), date=today - timedelta(days=60)
        )

        response = self.client.get('/api/v1/ledgers/stats/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_credits'], Decimal('350.00'))
        self.assertEqual(response.data['total_debits'], Decimal('100.00'))
        self.assertEqual(response.data['total_balance'], Decimal('250.00'))
        self.assertEqual(response.data['total_transactions'], 3)
        self.assertEqual(response.data['recent_credits'], Decimal('300.00'))
        self.assertEqual(response.data['recent_transactions'], 2)
        self.assertEqual(response.data['ledger_type_stats']['BANK']['balance'], Decimal('350.00'))
        self.assertIn('last_updated', response.data)


class ManagementCommandTests(TestCase):
    """Test seed_categories and rebuild_history"""

    def setUp(self):
        self.user = TestDataFactory.create_user(username='owner')

    def test_seed_categories(self):
        call_command('seed_categories', 'owner', stdout=StringIO())
        self.assertEqual(Category.objects.filter(owner=self.user, type='income').count(), 5)
        self.assertEqual(Category.objects.filter(owner=self.user, type='expense').count(), 10)

        # Running again skips what exists
        call_command('seed_categories', 'owner', stdout=StringIO())
        self.assertEqual(Category.objects.filter(owner=self.user).count(), 15)

    def test_rebuild_history(self):
        TestDataFactory.create_category(self.user, name='Salary', type='income')
        create_transaction(self.user, Decimal('10.00'), 'Salary', date(2024, 5, 5), 'income')
        YearHistory.objects.all().delete()

        call_command('rebuild_history', username='owner', stdout=StringIO())

        self.assertEqual(YearHistory.objects.get(owner=self.user, month=5, year=2024).income, Decimal('10.00'))
