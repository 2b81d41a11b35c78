"""
Test suite for the core module
Tests: registration, JWT login/refresh, audit logs, audit helper, demo data command
"""
from io import StringIO
from django.core.management import call_command
from django.test import TestCase, RequestFactory
from rest_framework import status
from tenderhub.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from tenderhub.core.models import AuditLog, User
from tenderhub.core.utils import create_audit_log, field_changes, get_client_ip
from tenderhub.catalog.models import Category
from tenderhub.tenders.models import Tender, TenderItem
from tenderhub.bidding.models import Bidder, Bid
from tenderhub.insights.models import AiInsight


class AuthAPITests(TestCase):
    """Test registration, login and token refresh"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()

    def test_register(self):
        data = {
            'username': 'buyer',
            'email': 'buyer@example.com',
            'password': 'Tender#Pass2026',
            'password_confirm': 'Tender#Pass2026',
            'full_name': 'Procurement Officer',
        }
        response = self.client.post('/api/auth/register/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['user']['username'], 'buyer')
        self.assertIn('access', response.data)
        self.assertIn('refresh', response.data)
        self.assertTrue(User.objects.get(username='buyer').check_password('Tender#Pass2026'))

    def test_register_cannot_choose_role(self):
        data = {
            'username': 'sneaky',
            'email': 'sneaky@example.com',
            'password': 'Tender#Pass2026',
            'password_confirm': 'Tender#Pass2026',
            'role': 'admin',
        }
        response = self.client.post('/api/auth/register/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(User.objects.get(username='sneaky').role, 'user')

    def test_register_duplicate_email(self):
        TestDataFactory.create_user(username='first', email='taken@example.com')
        data = {
            'username': 'second',
            'email': 'Taken@example.com',
            'password': 'Tender#Pass2026',
            'password_confirm': 'Tender#Pass2026',
        }
        response = self.client.post('/api/auth/register/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('email', response.data)

    def test_register_password_mismatch(self):
        data = {
            'username': 'buyer',
            'email': 'buyer@example.com',
            'password': 'Tender#Pass2026',
            'password_confirm': 'Other#Pass2026',
        }
        response = self.client.post('/api/auth/register/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('password', response.data)

    def test_login_returns_user(self):
        TestDataFactory.create_user(username='officer')
        response = self.client.post('/api/auth/login/', {'username': 'officer', 'password': 'testpass123'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['user']['username'], 'officer')
        self.assertIn('access', response.data)

    def test_login_wrong_password(self):
        TestDataFactory.create_user(username='officer')
        response = self.client.post('/api/auth/login/', {'username': 'officer', 'password': 'nope'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_refresh(self):
        TestDataFactory.create_user(username='officer')
        login = self.client.post('/api/auth/login/', {'username': 'officer', 'password': 'testpass123'}, format='json')
        response = self.client.post('/api/auth/refresh/', {'refresh': login.data['refresh']}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)

    def test_refresh_invalid_token(self):
        response = self.client.post('/api/auth/refresh/', {'refresh': 'garbage'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_me(self):
        user = TestDataFactory.create_user(username='officer')
        self.client.authenticate_user(user)
        response = self.client.get('/api/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['id'], user.id)

    def test_me_requires_authentication(self):
        response = self.client.get('/api/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class AuditLogAPITests(TestCase):
    """Test audit log visibility"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.other = TestDataFactory.create_user()
        self.admin = TestDataFactory.create_user(role='admin')
        self.own_log = create_audit_log(action='create', model_name='Tender', object_id=1, user=self.user)
        self.other_log = create_audit_log(action='delete', model_name='Bid', object_id=2, user=self.other)
        self.client = AuthenticatedAPIClient()

    def test_user_sees_own_entries(self):
        self.client.authenticate_user(self.user)
        response = self.client.get('/api/audit-logs/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([log['id'] for log in response.data], [self.own_log.id])

    def test_admin_sees_all_and_filters(self):
        self.client.authenticate_user(self.admin)
        response = self.client.get('/api/audit-logs/')
        self.assertEqual(len(response.data), 2)
        response = self.client.get('/api/audit-logs/?action=delete')
        self.assertEqual([log['id'] for log in response.data], [self.other_log.id])
        response = self.client.get('/api/audit-logs/?model=Tender')
        self.assertEqual([log['id'] for log in response.data], [self.own_log.id])
        response = self.client.get('/api/audit-logs/?model=Bid&object_id=2')
        self.assertEqual([log['id'] for log in response.data], [self.other_log.id])
        self.assertEqual(response.data[0]['username'], self.other.username)

    def test_detail_permission(self):
        self.client.authenticate_user(self.user)
        response = self.client.get(f'/api/audit-logs/{self.other_log.id}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        response = self.client.get(f'/api/audit-logs/{self.own_log.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_requires_authentication(self):
        response = self.client.get('/api/audit-logs/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class AuditHelperTests(TestCase):
    """Test create_audit_log and get_client_ip"""

    def test_missing_fields_skipped(self):
        self.assertIsNone(create_audit_log(action='create', model_name=None, object_id=1))
        self.assertFalse(AuditLog.objects.exists())

    def test_records_request_user_and_ip(self):
        user = TestDataFactory.create_user()
        request = RequestFactory().post('/', HTTP_X_FORWARDED_FOR='10.0.0.5, 10.0.0.1')
        request.user = user
        log = create_audit_log(request=request, action='update', model_name='Tender', object_id=7,
                               changes={'title': 'New'})
        self.assertEqual(log.user, user)
        self.assertEqual(log.ip_address, '10.0.0.5')
        self.assertEqual(log.object_id, '7')

    def test_field_changes(self):
        category = TestDataFactory.create_category()
        tender = TestDataFactory.create_tender(title='Old title')
        changes = field_changes(tender, {'title': 'New title', 'status': tender.status, 'category': category})
        self.assertEqual(changes, {
            'title': {'old': 'Old title', 'new': 'New title'},
            'category': {'old': str(tender.category_id), 'new': str(category.id)},
        })

    def test_client_ip_without_request(self):
        self.assertIsNone(get_client_ip(None))


class SeedDemoDataCommandTests(TestCase):
    """Test the seed_demo_data management command"""

    def test_seed_is_idempotent(self):
        call_command('seed_demo_data', stdout=StringIO())
        call_command('seed_demo_data', stdout=StringIO())

        self.assertTrue(User.objects.filter(username='admin', role='admin').exists())
        self.assertEqual(Category.objects.count(), 7)
        self.assertEqual(Bidder.objects.count(), 3)
        self.assertEqual(Tender.objects.count(), 3)
        self.assertEqual(TenderItem.objects.count(), 7)
        self.assertEqual(Bid.objects.count(), 5)
        self.assertEqual(AiInsight.objects.count(), 3)

    def test_seeded_bid_totals(self):
        call_command('seed_demo_data', stdout=StringIO())
        for bid in Bid.objects.prefetch_related('items'):
            self.assertEqual(bid.total_amount, sum(item.total_price for item in bid.items.all()))

    def test_clear_reseeds(self):
        call_command('seed_demo_data', stdout=StringIO())
        call_command('seed_demo_data', '--clear', stdout=StringIO())
        self.assertEqual(Tender.objects.count(), 3)
        self.assertEqual(Bid.objects.count(), 5)
