"""
Test suite for the core module
Tests: authentication, currency settings, audit logs, shared helpers and
dashboard cache invalidation
"""
from datetime import date, timedelta

from django.contrib.auth.models import Group
from django.core.cache import cache
from django.test import TestCase, RequestFactory
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient

from bizdesk.core.cache_utils import cached_dashboard, get_dashboard_version, invalidate_dashboard_cache
from bizdesk.core.models import AuditLog, UserSettings
from bizdesk.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from bizdesk.core.utils import create_audit_log, get_date_range, is_admin_user, parse_date_param


class AuthAPITests(TestCase):
    """Test registration, login and the current-user endpoint"""

    def setUp(self):
        self.client = APIClient()

    def test_register(self):
        data = {
            'username': 'newowner',
            'email': 'newowner@test.com',
            'password': 'Str0ng-passw0rd!',
            'password_confirm': 'Str0ng-passw0rd!',
        }
        response = self.client.post('/api/v1/auth/register/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertIn('access', response.data)
        self.assertIn('refresh', response.data)
        self.assertTrue(UserSettings.objects.filter(user__username='newowner').exists())

    def test_register_password_mismatch(self):
        data = {
            'username': 'newowner',
            'password': 'Str0ng-passw0rd!',
            'password_confirm': 'different-passw0rd!',
        }
        response = self.client.post('/api/v1/auth/register/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('password', response.data)

    def test_login_and_me(self):
        TestDataFactory.create_user(username='owner', password='testpass123')
        response = self.client.post('/api/v1/auth/login/', {'username': 'owner', 'password': 'testpass123'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {response.data['access']}")
        response = self.client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['username'], 'owner')
        self.assertFalse(response.data['is_admin'])

    def test_login_wrong_password(self):
        TestDataFactory.create_user(username='owner', password='testpass123')
        response = self.client.post('/api/v1/auth/login/', {'username': 'owner', 'password': 'nope'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_refresh(self):
        TestDataFactory.create_user(username='owner', password='testpass123')
        tokens = self.client.post('/api/v1/auth/login/', {'username': 'owner', 'password': 'testpass123'}, format='json').data
        response = self.client.post('/api/v1/auth/refresh/', {'refresh': tokens['refresh']}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)

    def test_update_me(self):
        user = TestDataFactory.create_user()
        client = AuthenticatedAPIClient().authenticate_user(user)
        response = client.patch('/api/v1/auth/me/', {'first_name': 'Asha'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['display_name'], 'Asha')


class CurrencySettingsAPITests(TestCase):
    """Test the currency settings endpoint"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_get_creates_default(self):
        response = self.client.get('/api/v1/settings/currency/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['currency'], 'USD')
        self.assertEqual(response.data['currency_symbol'], '$')
        self.assertEqual(UserSettings.objects.filter(user=self.user).count(), 1)

    def test_post_resets_to_default(self):
        UserSettings.objects.create(user=self.user, currency='EUR')
        response = self.client.post('/api/v1/settings/currency/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['currency'], 'USD')


class AuditLogTests(TestCase):
    """Test audit log helper and endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_audit_log_records_ip(self):
        request = RequestFactory().post('/', REMOTE_ADDR='10.0.0.5')
        request.user = self.user
        log = create_audit_log(request=request, action='create', model_name='Customer', object_id=7)
        self.assertEqual(log.ip_address, '10.0.0.5')
        self.assertEqual(log.object_id, '7')

    def test_create_audit_log_skips_incomplete_calls(self):
        self.assertIsNone(create_audit_log(user=self.user, action='create', model_name=None, object_id=1))
        self.assertFalse(AuditLog.objects.exists())

    def test_list_only_own_logs(self):
        other = TestDataFactory.create_user()
        create_audit_log(user=self.user, action='create', model_name='Customer', object_id=1)
        create_audit_log(user=other, action='create', model_name='Customer', object_id=2)

        response = self.client.get('/api/v1/audit-logs/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['object_id'] for row in response.data], ['1'])

    def test_list_filters(self):
        create_audit_log(user=self.user, action='sale_create', model_name='Sale', object_id=1)
        create_audit_log(user=self.user, action='purchase_create', model_name='Purchase', object_id=2)
        response = self.client.get('/api/v1/audit-logs/?action=sale_create')
        self.assertEqual(len(response.data), 1)
        response = self.client.get('/api/v1/audit-logs/?model=Purchase')
        self.assertEqual(len(response.data), 1)

    def test_list_bad_date(self):
        response = self.client.get('/api/v1/audit-logs/?date_from=not-a-date')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class UtilsTests(TestCase):
    """Test shared helpers"""

    def test_is_admin_user(self):
        self.assertTrue(is_admin_user(TestDataFactory.create_user(is_staff=True)))
        user = TestDataFactory.create_user()
        self.assertFalse(is_admin_user(user))
        user.groups.add(Group.objects.create(name='Admin'))
        self.assertTrue(is_admin_user(user))

    def test_parse_date_param(self):
        self.assertIsNone(parse_date_param(''))
        self.assertEqual(parse_date_param('2024-03-15'), date(2024, 3, 15))
        self.assertEqual(parse_date_param('2024-03-15T10:00:00Z'), date(2024, 3, 15))
        with self.assertRaises(ValueError):
            parse_date_param('15/03/2024')

    def test_get_date_range_defaults_to_last_30_days(self):
        date_from, date_to = get_date_range({})
        self.assertEqual(date_to, timezone.localdate())
        self.assertEqual(date_from, date_to - timedelta(days=30))

    def test_get_date_range_rejects_inverted_range(self):
        with self.assertRaises(ValueError):
            get_date_range({'from': '2024-02-01', 'to': '2024-01-01'})


class DashboardCacheTests(TestCase):
    """Test per-user dashboard cache versioning"""

    def setUp(self):
        cache.clear()
        self.user = TestDataFactory.create_user()
        self.calls = 0

        @cached_dashboard('test-payload')
        def build(user):
            self.calls += 1
            return {'calls': self.calls}

        self.build = build

    def test_cached_until_invalidated(self):
        self.assertEqual(self.build(self.user), {'calls': 1})
        self.assertEqual(self.build(self.user), {'calls': 1})

        invalidate_dashboard_cache(self.user.pk)
        self.assertEqual(self.build(self.user), {'calls': 2})

    def test_saving_owned_record_bumps_version(self):
        version = get_dashboard_version(self.user.pk)
        TestDataFactory.create_customer(self.user)
        self.assertGreater(get_dashboard_version(self.user.pk), version)

    def test_other_users_cache_untouched(self):
        other = TestDataFactory.create_user()
        version = get_dashboard_version(other.pk)
        TestDataFactory.create_customer(self.user)
        self.assertEqual(get_dashboard_version(other.pk), version)
