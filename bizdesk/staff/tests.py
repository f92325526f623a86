"""
Test suite for the staff module
"""
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from bizdesk.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from bizdesk.staff.models import StaffMember


class StaffAPITests(TestCase):
    """Test staff endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_staff_member(self):
        data = {
            'name': 'Ravi Sharma',
            'position': 'Technician',
            'department': 'Service',
            'salary': '18000.00',
            'joining_date': timezone.localdate().isoformat(),
            'documents': ['aadhaar.pdf'],
        }
        response = self.client.post('/api/v1/staff/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'active')
        self.assertEqual(response.data['documents'], ['aadhaar.pdf'])

    def test_negative_salary_rejected(self):
        data = {'name': 'Ravi', 'position': 'Technician', 'salary': '-1', 'joining_date': timezone.localdate().isoformat()}
        response = self.client.post('/api/v1/staff/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('salary', response.data)

    def test_list_filters(self):
        TestDataFactory.create_staff_member(self.user, name='Ravi', department='Service')
        TestDataFactory.create_staff_member(self.user, name='Sunita', department='Accounts', status='on_leave')
        TestDataFactory.create_staff_member(TestDataFactory.create_user(), name='Other')

        response = self.client.get('/api/v1/staff/')
        self.assertEqual([row['name'] for row in response.data], ['Ravi', 'Sunita'])
        response = self.client.get('/api/v1/staff/?department=service')
        self.assertEqual([row['name'] for row in response.data], ['Ravi'])
        response = self.client.get('/api/v1/staff/?status=on_leave')
        self.assertEqual([row['name'] for row in response.data], ['Sunita'])
        response = self.client.get('/api/v1/staff/?search=sun')
        self.assertEqual([row['name'] for row in response.data], ['Sunita'])

    def test_update_and_delete(self):
        member = TestDataFactory.create_staff_member(self.user, name='Ravi')

        response = self.client.patch(f'/api/v1/staff/{member.id}/', {'status': 'inactive'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'inactive')

        response = self.client.delete(f'/api/v1/staff/{member.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(StaffMember.objects.exists())

    def test_other_users_member_not_found(self):
        member = TestDataFactory.create_staff_member(TestDataFactory.create_user())
        response = self.client.get(f'/api/v1/staff/{member.id}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
