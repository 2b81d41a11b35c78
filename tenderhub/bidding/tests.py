"""
Test suite for the bidding module
Tests: bidders, bid creation and totals, status changes and acceptance, bid item recalculation
"""
from decimal import Decimal
from django.test import TestCase
from rest_framework import status
from tenderhub.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from tenderhub.core.models import AuditLog
from tenderhub.bidding.models import Bidder, Bid, BidItem
from tenderhub.bidding.services import BidRuleError, create_bid, change_bid_status


class BidModelTests(TestCase):
    """Test Bid and BidItem model methods"""

    def setUp(self):
        self.tender = TestDataFactory.create_tender()
        self.tender_item = TestDataFactory.create_tender_item(self.tender, quantity=10)
        self.bid = TestDataFactory.create_bid(self.tender)

    def test_bid_item_total_price(self):
        item = BidItem.objects.create(bid=self.bid, tender_item=self.tender_item, quantity=4, unit_price=Decimal('2.50'))
        self.assertEqual(item.total_price, Decimal('10.00'))

    def test_bid_item_defaults_category_from_tender_item(self):
        item = BidItem.objects.create(bid=self.bid, tender_item=self.tender_item, quantity=1, unit_price=Decimal('1.00'))
        self.assertEqual(item.category_id, self.tender_item.category_id)

    def test_recalculate_total(self):
        other_item = TestDataFactory.create_tender_item(self.tender, quantity=2)
        TestDataFactory.create_bid_item(self.bid, self.tender_item, quantity=10, unit_price=Decimal('5.00'))
        TestDataFactory.create_bid_item(self.bid, other_item, quantity=2, unit_price=Decimal('7.25'))
        self.bid.refresh_from_db()
        self.assertEqual(self.bid.total_amount, Decimal('64.50'))


class BidderAPITests(TestCase):
    """Test Bidder API endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_bidder(self):
        data = {'name': 'XYZ Supplies', 'contact_person': 'Jane Doe', 'email': 'jane@xyz.com', 'phone': '+0987654321', 'rating': 5}
        response = self.client.post('/api/bidders/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertFalse(response.data['verified'])

    def test_verifying_bidder_is_audited(self):
        bidder = TestDataFactory.create_bidder(verified=False)
        response = self.client.patch(f'/api/bidders/{bidder.id}/', {'verified': True}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        log = AuditLog.objects.get(action='update', model_name='Bidder')
        self.assertEqual(log.changes['verified'], {'old': 'False', 'new': 'True'})

        self.client.patch(f'/api/bidders/{bidder.id}/', {'phone': '555'}, format='json')
        self.assertEqual(AuditLog.objects.filter(action='update', model_name='Bidder').count(), 1)

    def test_rating_out_of_range(self):
        data = {'name': 'Bad', 'contact_person': 'X', 'email': 'x@x.com', 'phone': '1', 'rating': 6}
        response = self.client.post('/api/bidders/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('rating', response.data)

    def test_invalid_email(self):
        data = {'name': 'Bad', 'contact_person': 'X', 'email': 'not-an-email', 'phone': '1'}
        response = self.client.post('/api/bidders/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_list_filters_verified(self):
        TestDataFactory.create_bidder(name='Verified', verified=True)
        TestDataFactory.create_bidder(name='Pending', verified=False)
        response = self.client.get('/api/bidders/?verified=false')
        self.assertEqual([b['name'] for b in response.data], ['Pending'])

    def test_bidder_bids(self):
        bidder = TestDataFactory.create_bidder()
        tender = TestDataFactory.create_tender()
        TestDataFactory.create_bid(tender, bidder=bidder)
        response = self.client.get(f'/api/bidders/{bidder.id}/bids/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)

    def test_delete_bidder_with_bids_fails(self):
        bidder = TestDataFactory.create_bidder()
        TestDataFactory.create_bid(TestDataFactory.create_tender(), bidder=bidder)
        response = self.client.delete(f'/api/bidders/{bidder.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(Bidder.objects.filter(id=bidder.id).exists())

    def test_delete_bidder(self):
        bidder = TestDataFactory.create_bidder()
        response = self.client.delete(f'/api/bidders/{bidder.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)


class BidCreateAPITests(TestCase):
    """Test bid creation"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.tender = TestDataFactory.create_tender(status='published')
        self.pipes = TestDataFactory.create_tender_item(self.tender, quantity=50)
        self.taps = TestDataFactory.create_tender_item(self.tender, quantity=10)
        self.bidder = TestDataFactory.create_bidder()

    def test_create_bid_computes_totals(self):
        data = {
            'tender': self.tender.id,
            'bidder': self.bidder.id,
            'notes': 'Can deliver within 2 weeks',
            'items': [
                {'tender_item': self.pipes.id, 'quantity': 50, 'unit_price': '5.00', 'delivery_time_days': 7},
                {'tender_item': self.taps.id, 'quantity': 10, 'unit_price': '8.00'},
            ],
        }
        response = self.client.post('/api/bids/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'draft')
        self.assertEqual(Decimal(response.data['total_amount']), Decimal('330.00'))
        self.assertEqual(len(response.data['items']), 2)
        self.assertEqual(Decimal(response.data['items'][0]['total_price']), Decimal('250.00'))
        self.assertIsNone(response.data['submitted_at'])

    def test_create_submitted_bid_stamps_submitted_at(self):
        data = {
            'tender': self.tender.id,
            'bidder': self.bidder.id,
            'status': 'submitted',
            'items': [{'tender_item': self.pipes.id, 'quantity': 1, 'unit_price': '1.00'}],
        }
        response = self.client.post('/api/bids/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertIsNotNone(response.data['submitted_at'])

    def test_create_bid_without_items_fails(self):
        data = {'tender': self.tender.id, 'bidder': self.bidder.id, 'items': []}
        response = self.client.post('/api/bids/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('items', response.data)

    def test_create_bid_on_unpublished_tender_fails(self):
        draft = TestDataFactory.create_tender(status='draft')
        item = TestDataFactory.create_tender_item(draft)
        data = {'tender': draft.id, 'bidder': self.bidder.id, 'items': [{'tender_item': item.id, 'quantity': 1, 'unit_price': '1.00'}]}
        response = self.client.post('/api/bids/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Cannot bid on unpublished tender')
        self.assertFalse(Bid.objects.exists())

    def test_create_bid_with_item_from_other_tender_fails(self):
        other = TestDataFactory.create_tender(status='published')
        foreign_item = TestDataFactory.create_tender_item(other)
        data = {'tender': self.tender.id, 'bidder': self.bidder.id, 'items': [{'tender_item': foreign_item.id, 'quantity': 1, 'unit_price': '1.00'}]}
        response = self.client.post('/api/bids/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('error', response.data)
        self.assertFalse(Bid.objects.exists())

    def test_create_bid_unknown_tender(self):
        data = {'tender': 99999, 'bidder': self.bidder.id, 'items': [{'tender_item': self.pipes.id, 'quantity': 1, 'unit_price': '1.00'}]}
        response = self.client.post('/api/bids/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('tender', response.data)

    def test_create_requires_authentication(self):
        anonymous = AuthenticatedAPIClient()
        response = anonymous.post('/api/bids/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_service_rejects_unpublished_tender(self):
        closed = TestDataFactory.create_tender(status='closed')
        with self.assertRaises(BidRuleError):
            create_bid(tender=closed, bidder=self.bidder, items=[])


class BidListAPITests(TestCase):
    """Test bid listing and detail"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.tender = TestDataFactory.create_tender()
        self.other_tender = TestDataFactory.create_tender()
        self.bid = TestDataFactory.create_bid(self.tender, status='submitted')
        TestDataFactory.create_bid(self.other_tender, status='draft')

    def test_filters(self):
        response = self.client.get('/api/bids/?status=submitted')
        self.assertEqual([b['id'] for b in response.data], [self.bid.id])
        response = self.client.get(f'/api/bids/?tender={self.tender.id}')
        self.assertEqual([b['id'] for b in response.data], [self.bid.id])
        response = self.client.get(f'/api/bids/?bidder={self.bid.bidder_id}')
        self.assertEqual([b['id'] for b in response.data], [self.bid.id])

    def test_tender_bids(self):
        response = self.client.get(f'/api/tenders/{self.tender.id}/bids/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([b['id'] for b in response.data], [self.bid.id])
        self.assertIn('bidder_detail', response.data[0])

    def test_tender_bids_unknown_tender(self):
        response = self.client.get('/api/tenders/99999/bids/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_update_notes_but_not_status(self):
        response = self.client.patch(f'/api/bids/{self.bid.id}/', {'notes': 'Updated', 'status': 'accepted'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.bid.refresh_from_db()
        self.assertEqual(self.bid.notes, 'Updated')
        self.assertEqual(self.bid.status, 'submitted')

    def test_cannot_move_bid_to_other_tender(self):
        response = self.client.patch(f'/api/bids/{self.bid.id}/', {'tender': self.other_tender.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_delete_bid(self):
        response = self.client.delete(f'/api/bids/{self.bid.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Bid.objects.filter(id=self.bid.id).exists())


class BidStatusTests(TestCase):
    """Test bid status changes and acceptance side effects"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.tender = TestDataFactory.create_tender(status='published')
        self.bid_a = TestDataFactory.create_bid(self.tender, status='submitted')
        self.bid_b = TestDataFactory.create_bid(self.tender, status='under_review')
        self.bid_c = TestDataFactory.create_bid(self.tender, status='draft')
        self.other_tender_bid = TestDataFactory.create_bid(TestDataFactory.create_tender(), status='submitted')

    def test_submit_stamps_submitted_at(self):
        response = self.client.patch(f'/api/bids/{self.bid_c.id}/status/', {'status': 'submitted'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.bid_c.refresh_from_db()
        self.assertEqual(self.bid_c.status, 'submitted')
        self.assertIsNotNone(self.bid_c.submitted_at)

    def test_accept_rejects_others_and_awards_tender(self):
        response = self.client.patch(f'/api/bids/{self.bid_a.id}/status/', {'status': 'accepted'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'accepted')

        for bid in (self.bid_a, self.bid_b, self.bid_c, self.other_tender_bid):
            bid.refresh_from_db()
        self.tender.refresh_from_db()
        self.assertEqual(self.bid_a.status, 'accepted')
        self.assertEqual(self.bid_b.status, 'rejected')
        self.assertEqual(self.bid_c.status, 'rejected')
        self.assertEqual(self.other_tender_bid.status, 'submitted')
        self.assertEqual(self.tender.status, 'awarded')

        accept_log = AuditLog.objects.get(action='bid_accept')
        self.assertEqual(sorted(accept_log.changes['rejected_bids']), sorted([self.bid_b.id, self.bid_c.id]))

    def test_invalid_status(self):
        response = self.client.patch(f'/api/bids/{self.bid_a.id}/status/', {'status': 'won'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Invalid status')

    def test_unknown_bid(self):
        response = self.client.patch('/api/bids/99999/status/', {'status': 'accepted'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_service_returns_fresh_bid(self):
        bid = change_bid_status(self.bid_b, 'rejected')
        self.assertEqual(bid.status, 'rejected')
        self.tender.refresh_from_db()
        self.assertEqual(self.tender.status, 'published')


class BidItemAPITests(TestCase):
    """Test bid item endpoints keep the bid total in sync"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.tender = TestDataFactory.create_tender()
        self.tender_item = TestDataFactory.create_tender_item(self.tender, quantity=10)
        self.bid = TestDataFactory.create_bid(self.tender)

    def test_add_update_delete_bid_item(self):
        data = {'bid': self.bid.id, 'tender_item': self.tender_item.id, 'quantity': 10, 'unit_price': '3.00'}
        response = self.client.post('/api/bid-items/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        item_id = response.data['id']
        self.bid.refresh_from_db()
        self.assertEqual(self.bid.total_amount, Decimal('30.00'))

        response = self.client.patch(f'/api/bid-items/{item_id}/', {'unit_price': '4.50'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.bid.refresh_from_db()
        self.assertEqual(self.bid.total_amount, Decimal('45.00'))

        response = self.client.get(f'/api/bids/{self.bid.id}/items/')
        self.assertEqual(len(response.data), 1)

        response = self.client.delete(f'/api/bid-items/{item_id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.bid.refresh_from_db()
        self.assertEqual(self.bid.total_amount, Decimal('0.00'))

    def test_repointed_item_takes_new_tender_item_category(self):
        services = TestDataFactory.create_category(cat_type='SERVICES')
        installation = TestDataFactory.create_tender_item(self.tender, quantity=1, category=services)
        item = TestDataFactory.create_bid_item(self.bid, self.tender_item, quantity=1, unit_price=Decimal('2.00'))
        self.assertEqual(item.category_id, self.tender_item.category_id)

        response = self.client.patch(f'/api/bid-items/{item.id}/', {'tender_item': installation.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        item.refresh_from_db()
        self.assertEqual(item.category_id, services.id)

    def test_repointed_item_keeps_explicit_category(self):
        other = TestDataFactory.create_tender_item(self.tender, quantity=1, category=TestDataFactory.create_category())
        chosen = TestDataFactory.create_category()
        item = TestDataFactory.create_bid_item(self.bid, self.tender_item, quantity=1, unit_price=Decimal('2.00'))

        response = self.client.patch(
            f'/api/bid-items/{item.id}/', {'tender_item': other.id, 'category': chosen.id}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        item.refresh_from_db()
        self.assertEqual(item.category_id, chosen.id)

    def test_tender_item_must_belong_to_bid_tender(self):
        other_item = TestDataFactory.create_tender_item(TestDataFactory.create_tender())
        data = {'bid': self.bid.id, 'tender_item': other_item.id, 'quantity': 1, 'unit_price': '1.00'}
        response = self.client.post('/api/bid-items/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('tender_item', response.data)
