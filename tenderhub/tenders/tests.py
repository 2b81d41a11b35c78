"""
Test suite for the tenders module
Tests: tender CRUD with nested items, filters, status changes, tender item endpoints
"""
from datetime import timedelta
from decimal import Decimal
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from tenderhub.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from tenderhub.core.models import AuditLog
from tenderhub.tenders.models import Tender, TenderItem


class TenderAPITests(TestCase):
    """Test Tender API endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.category = TestDataFactory.create_category(name='Plumbing Materials', code='PMA')

    def tender_payload(self, **overrides):
        start = timezone.now()
        data = {
            'title': 'Community Center Plumbing',
            'description': 'Plumbing materials',
            'category': self.category.id,
            'start_date': start.isoformat(),
            'end_date': (start + timedelta(days=30)).isoformat(),
        }
        data.update(overrides)
        return data

    def test_create_tender_with_items(self):
        data = self.tender_payload(items=[
            {'name': 'PVC Pipes', 'quantity': 50, 'unit': 'm', 'estimated_price': '5.50'},
            {'name': 'Elbow Joints', 'quantity': 20},
        ])
        response = self.client.post('/api/tenders/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'draft')
        self.assertEqual(response.data['created_by'], self.user.id)
        self.assertEqual(len(response.data['items']), 2)
        self.assertEqual(response.data['bids'], [])

        tender = Tender.objects.get(id=response.data['id'])
        self.assertEqual(tender.items.count(), 2)
        # Items without a category inherit the tender's
        self.assertTrue(all(item.category_id == self.category.id for item in tender.items.all()))

    def test_create_without_items(self):
        response = self.client.post('/api/tenders/', self.tender_payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['items'], [])

    def test_create_requires_authentication(self):
        anonymous = AuthenticatedAPIClient()
        response = anonymous.post('/api/tenders/', self.tender_payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_create_missing_required_fields(self):
        response = self.client.post('/api/tenders/', {'description': 'no title'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        for field in ('title', 'category', 'start_date', 'end_date'):
            self.assertIn(field, response.data)

    def test_end_date_before_start_date_fails(self):
        start = timezone.now()
        data = self.tender_payload(end_date=(start - timedelta(days=1)).isoformat(), start_date=start.isoformat())
        response = self.client.post('/api/tenders/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('end_date', response.data)

    def test_item_with_zero_quantity_fails(self):
        data = self.tender_payload(items=[{'name': 'Nothing', 'quantity': 0}])
        response = self.client.post('/api/tenders/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(Tender.objects.exists())

    def test_list_filters(self):
        other_category = TestDataFactory.create_category()
        TestDataFactory.create_tender(title='Pipes tender', category=self.category, status='published')
        TestDataFactory.create_tender(title='Cement tender', category=other_category, status='draft')

        response = self.client.get('/api/tenders/?status=published')
        self.assertEqual([t['title'] for t in response.data], ['Pipes tender'])
        response = self.client.get(f'/api/tenders/?category={other_category.id}')
        self.assertEqual([t['title'] for t in response.data], ['Cement tender'])
        response = self.client.get('/api/tenders/?search=cement')
        self.assertEqual([t['title'] for t in response.data], ['Cement tender'])

    def test_detail_embeds_items_and_bids(self):
        tender = TestDataFactory.create_tender(category=self.category)
        TestDataFactory.create_tender_item(tender, name='Taps')
        bidder = TestDataFactory.create_bidder(name='ABC Contractors')
        TestDataFactory.create_bid(tender, bidder=bidder)

        response = AuthenticatedAPIClient().get(f'/api/tenders/{tender.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['category_detail']['code'], 'PMA')
        self.assertEqual(response.data['items'][0]['name'], 'Taps')
        self.assertEqual(response.data['bids'][0]['bidder_detail']['name'], 'ABC Contractors')
        self.assertEqual(response.data['bid_count'], 1)

    def test_update_tender(self):
        tender = TestDataFactory.create_tender(category=self.category)
        response = self.client.patch(f'/api/tenders/{tender.id}/', {'title': 'Renamed'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['title'], 'Renamed')
        log = AuditLog.objects.get(action='update', model_name='Tender')
        self.assertEqual(log.changes['title']['new'], 'Renamed')
        self.assertNotIn('status', log.changes)

    def test_patch_end_date_before_existing_start_fails(self):
        tender = TestDataFactory.create_tender(category=self.category)
        end = (tender.start_date - timedelta(days=2)).isoformat()
        response = self.client.patch(f'/api/tenders/{tender.id}/', {'end_date': end}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_delete_tender(self):
        tender = TestDataFactory.create_tender(category=self.category)
        response = self.client.delete(f'/api/tenders/{tender.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Tender.objects.filter(id=tender.id).exists())
        self.assertTrue(AuditLog.objects.filter(action='delete', model_name='Tender').exists())

    def test_missing_tender(self):
        response = self.client.get('/api/tenders/99999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class TenderStatusTests(TestCase):
    """Test tender status changes"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.tender = TestDataFactory.create_tender(status='draft')

    def test_publish_tender(self):
        response = self.client.patch(f'/api/tenders/{self.tender.id}/status/', {'status': 'published'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'published')
        self.tender.refresh_from_db()
        self.assertEqual(self.tender.status, 'published')

        log = AuditLog.objects.get(action='status_change', model_name='Tender')
        self.assertEqual(log.changes['status'], {'old': 'draft', 'new': 'published'})
        self.assertEqual(log.user, self.user)

    def test_invalid_status(self):
        response = self.client.patch(f'/api/tenders/{self.tender.id}/status/', {'status': 'open'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Invalid status')

    def test_unknown_tender(self):
        response = self.client.patch('/api/tenders/99999/status/', {'status': 'closed'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class TenderItemAPITests(TestCase):
    """Test tender item endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.tender = TestDataFactory.create_tender()

    def test_add_items_to_tender(self):
        data = {'items': [{'name': 'Hinges', 'quantity': 40}, {'name': 'Handles', 'quantity': 20, 'estimated_price': '4.00'}]}
        response = self.client.post(f'/api/tenders/{self.tender.id}/items/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(len(response.data), 2)
        self.assertEqual(self.tender.items.count(), 2)

        response = self.client.get(f'/api/tenders/{self.tender.id}/items/')
        self.assertEqual(len(response.data), 2)

    def test_add_items_empty_list(self):
        response = self.client.post(f'/api/tenders/{self.tender.id}/items/', {'items': []}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Items array is required')

    def test_add_items_unknown_tender(self):
        response = self.client.post('/api/tenders/99999/items/', {'items': [{'quantity': 1}]}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_delete_item_scoped_to_tender(self):
        item = TestDataFactory.create_tender_item(self.tender)
        other_tender = TestDataFactory.create_tender()

        response = self.client.delete(f'/api/tenders/{other_tender.id}/items/{item.id}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertTrue(TenderItem.objects.filter(id=item.id).exists())

        response = self.client.delete(f'/api/tenders/{self.tender.id}/items/{item.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(TenderItem.objects.filter(id=item.id).exists())

    def test_tender_item_crud(self):
        data = {'tender': self.tender.id, 'name': 'Beds', 'quantity': 10, 'unit': 'pcs', 'estimated_price': '250.00'}
        response = self.client.post('/api/tender-items/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['category'], self.tender.category_id)
        item_id = response.data['id']

        response = self.client.patch(f'/api/tender-items/{item_id}/', {'quantity': 12}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['quantity'], 12)

        response = self.client.get(f'/api/tender-items/?tender={self.tender.id}')
        self.assertEqual(len(response.data), 1)
        self.assertEqual(Decimal(response.data[0]['estimated_price']), Decimal('250.00'))

        response = self.client.delete(f'/api/tender-items/{item_id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)

    def test_delete_priced_item_recalculates_bid_totals(self):
        pipes = TestDataFactory.create_tender_item(self.tender, quantity=10)
        taps = TestDataFactory.create_tender_item(self.tender, quantity=2)
        bid = TestDataFactory.create_bid(self.tender)
        TestDataFactory.create_bid_item(bid, pipes, quantity=10, unit_price=Decimal('5.00'))
        TestDataFactory.create_bid_item(bid, taps, quantity=2, unit_price=Decimal('7.00'))
        bid.refresh_from_db()
        self.assertEqual(bid.total_amount, Decimal('64.00'))

        response = self.client.delete(f'/api/tenders/{self.tender.id}/items/{taps.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        bid.refresh_from_db()
        self.assertEqual(bid.total_amount, Decimal('50.00'))

        response = self.client.delete(f'/api/tender-items/{pipes.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        bid.refresh_from_db()
        self.assertEqual(bid.total_amount, Decimal('0.00'))

    def test_cannot_move_item_to_other_tender(self):
        item = TestDataFactory.create_tender_item(self.tender)
        bid = TestDataFactory.create_bid(self.tender)
        TestDataFactory.create_bid_item(bid, item)
        other_tender = TestDataFactory.create_tender()

        response = self.client.patch(f'/api/tender-items/{item.id}/', {'tender': other_tender.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('tender', response.data)
        item.refresh_from_db()
        self.assertEqual(item.tender_id, self.tender.id)

    def test_update_item_keeping_its_tender(self):
        item = TestDataFactory.create_tender_item(self.tender, quantity=5)
        response = self.client.patch(
            f'/api/tender-items/{item.id}/', {'tender': self.tender.id, 'quantity': 8}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['quantity'], 8)
