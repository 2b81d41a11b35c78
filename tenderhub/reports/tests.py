"""
Test suite for the reports module
Tests: tender statistics, bidder analytics, cache invalidation
"""
from decimal import Decimal
from django.core.cache import cache
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient
from tenderhub.core.test_utils import TestDataFactory
from tenderhub.core.cache_signals import suspend_cache_signals
from tenderhub.core.cache_utils import make_cache_key, TENDER_STATS_PREFIX


class TenderStatsTests(TestCase):
    """Test /api/analytics/tender-stats/"""

    def setUp(self):
        cache.clear()
        self.client = APIClient()

    def test_empty_database(self):
        response = self.client.get('/api/analytics/tender-stats/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {
            'activeTenders': 0,
            'closedTenders': 0,
            'awardedTenders': 0,
            'draftTenders': 0,
            'totalValue': 0.0,
            'totalTenders': 0,
            'totalBids': 0,
            'averageBidsPerTender': 0,
        })

    def test_counts_and_totals(self):
        published = TestDataFactory.create_tender(status='published')
        TestDataFactory.create_tender(status='published')
        TestDataFactory.create_tender(status='closed')
        TestDataFactory.create_tender(status='draft')
        TestDataFactory.create_bid(published, total_amount=Decimal('1000.50'))
        TestDataFactory.create_bid(published, total_amount=Decimal('499.50'))

        data = self.client.get('/api/analytics/tender-stats/').data
        self.assertEqual(data['activeTenders'], 2)
        self.assertEqual(data['closedTenders'], 1)
        self.assertEqual(data['draftTenders'], 1)
        self.assertEqual(data['awardedTenders'], 0)
        self.assertEqual(data['totalTenders'], 4)
        self.assertEqual(data['totalBids'], 2)
        self.assertEqual(data['totalValue'], 1500.0)
        self.assertEqual(data['averageBidsPerTender'], 0.5)

    def test_average_is_rounded(self):
        tenders = [TestDataFactory.create_tender() for _ in range(3)]
        TestDataFactory.create_bid(tenders[0])
        data = self.client.get('/api/analytics/tender-stats/').data
        self.assertEqual(data['averageBidsPerTender'], 0.33)

    def test_new_bid_invalidates_cache(self):
        tender = TestDataFactory.create_tender()
        first = self.client.get('/api/analytics/tender-stats/').data
        self.assertEqual(first['totalBids'], 0)

        TestDataFactory.create_bid(tender, total_amount=Decimal('10.00'))
        second = self.client.get('/api/analytics/tender-stats/').data
        self.assertEqual(second['totalBids'], 1)
        self.assertEqual(second['totalValue'], 10.0)

    def test_cache_dropped_again_after_commit(self):
        tender = TestDataFactory.create_tender()
        with self.captureOnCommitCallbacks() as callbacks:
            TestDataFactory.create_bid(tender, total_amount=Decimal('25.00'))
        self.assertTrue(callbacks)

        # Aggregates re-cached before the commit landed
        cache.set(make_cache_key(TENDER_STATS_PREFIX), {'totalBids': 0}, 300)
        for callback in callbacks:
            callback()

        data = self.client.get('/api/analytics/tender-stats/').data
        self.assertEqual(data['totalBids'], 1)
        self.assertEqual(data['totalValue'], 25.0)

    def test_results_cached_while_signals_suspended(self):
        tender = TestDataFactory.create_tender()
        self.client.get('/api/analytics/tender-stats/')
        with suspend_cache_signals():
            TestDataFactory.create_bid(tender)
        data = self.client.get('/api/analytics/tender-stats/').data
        self.assertEqual(data['totalBids'], 0)


class BidderAnalyticsTests(TestCase):
    """Test /api/analytics/bidder-analytics/"""

    def setUp(self):
        cache.clear()
        self.client = APIClient()

    def test_top_bidders(self):
        tender = TestDataFactory.create_tender()
        busy = TestDataFactory.create_bidder(name='Busy', verified=True)
        quiet = TestDataFactory.create_bidder(name='Quiet', verified=False)
        idle = TestDataFactory.create_bidder(name='Idle', verified=True)
        TestDataFactory.create_bid(tender, bidder=busy, total_amount=Decimal('100.00'))
        TestDataFactory.create_bid(tender, bidder=busy, total_amount=Decimal('50.25'))
        TestDataFactory.create_bid(tender, bidder=quiet, total_amount=Decimal('10.00'))

        response = self.client.get('/api/analytics/bidder-analytics/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.data
        self.assertEqual(data['totalBidders'], 3)
        self.assertEqual(data['qualifiedBidders'], 2)
        self.assertEqual(data['topBidders'], [
            {'id': busy.id, 'name': 'Busy', 'bidCount': 2, 'totalAmount': 150.25},
            {'id': quiet.id, 'name': 'Quiet', 'bidCount': 1, 'totalAmount': 10.0},
            {'id': idle.id, 'name': 'Idle', 'bidCount': 0, 'totalAmount': 0.0},
        ])

    def test_top_bidders_limited_to_five(self):
        for _ in range(7):
            TestDataFactory.create_bidder()
        data = self.client.get('/api/analytics/bidder-analytics/').data
        self.assertEqual(data['totalBidders'], 7)
        self.assertEqual(len(data['topBidders']), 5)

    def test_new_bidder_invalidates_cache(self):
        self.assertEqual(self.client.get('/api/analytics/bidder-analytics/').data['totalBidders'], 0)
        TestDataFactory.create_bidder()
        self.assertEqual(self.client.get('/api/analytics/bidder-analytics/').data['totalBidders'], 1)
