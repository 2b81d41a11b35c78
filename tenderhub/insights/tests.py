"""
Test suite for the insights module
Tests: insight rules, bid scoring, generate endpoint, insight CRUD and filters
"""
from decimal import Decimal
from django.test import TestCase
from rest_framework import status
from tenderhub.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from tenderhub.core.models import AuditLog
from tenderhub.bidding.models import Bid
from tenderhub.insights.models import AiInsight
from tenderhub.insights.engine import collect_insights, score_bids, generate_insights_for_tender


class InsightEngineTests(TestCase):
    """Test the insight rules"""

    def setUp(self):
        self.tender = TestDataFactory.create_tender(title='Water Pipes')
        self.pipes = TestDataFactory.create_tender_item(
            self.tender, name='PVC Pipe', quantity=10, estimated_price=Decimal('10.00')
        )
        self.cheap_bidder = TestDataFactory.create_bidder(name='Cheap Co')
        self.pricey_bidder = TestDataFactory.create_bidder(name='Pricey Co')

    def _bid(self, bidder, unit_price, status='submitted'):
        bid = TestDataFactory.create_bid(self.tender, bidder=bidder, status=status)
        TestDataFactory.create_bid_item(bid, self.pipes, quantity=10, unit_price=Decimal(unit_price))
        bid.refresh_from_db()
        return bid

    def test_no_bids(self):
        insights = collect_insights(self.tender, [])
        self.assertEqual(len(insights), 1)
        self.assertEqual(insights[0]['title'], 'No bids received')
        self.assertEqual(insights[0]['severity'], 'warning')

    def test_single_bid_warns_about_competition(self):
        bid = self._bid(self.cheap_bidder, '10.00')
        titles = [i['title'] for i in collect_insights(self.tender, [bid])]
        self.assertIn('Limited competition', titles)
        self.assertIn('Cheap Co offers the lowest price', titles)

    def test_recommendation_and_price_alert(self):
        cheap = self._bid(self.cheap_bidder, '10.00')
        pricey = self._bid(self.pricey_bidder, '20.00')
        insights = collect_insights(self.tender, [cheap, pricey])

        recommendations = [i for i in insights if i['type'] == 'recommendation']
        self.assertEqual(len(recommendations), 1)
        self.assertEqual(recommendations[0]['bidder'], self.cheap_bidder)
        self.assertEqual(recommendations[0]['severity'], 'success')

        alerts = [i for i in insights if i['type'] == 'price_trend']
        self.assertEqual(len(alerts), 1)
        self.assertEqual(alerts[0]['bidder'], self.pricey_bidder)
        self.assertEqual(alerts[0]['severity'], 'alert')
        self.assertEqual(alerts[0]['metadata']['deviation_pct'], 100)

    def test_price_within_threshold_not_flagged(self):
        bid = self._bid(self.cheap_bidder, '13.00')
        insights = collect_insights(self.tender, [bid])
        self.assertFalse([i for i in insights if i['type'] == 'price_trend'])

    def test_rejected_bid_not_recommended(self):
        rejected = self._bid(self.cheap_bidder, '5.00', status='rejected')
        active = self._bid(self.pricey_bidder, '12.00')
        insights = collect_insights(self.tender, [rejected, active])
        recommendation = [i for i in insights if i['type'] == 'recommendation'][0]
        self.assertEqual(recommendation['bidder'], self.pricey_bidder)

    def test_score_bids(self):
        cheap = self._bid(self.cheap_bidder, '10.00')
        pricey = self._bid(self.pricey_bidder, '30.00')
        scores = score_bids([cheap, pricey])
        self.assertEqual(scores, {cheap.id: 100, pricey.id: 33})

    def test_score_ignores_unpriced_bids(self):
        empty = TestDataFactory.create_bid(self.tender, bidder=self.cheap_bidder)
        self.assertEqual(score_bids([empty]), {})

    def test_generate_replaces_only_generated_insights(self):
        manual = TestDataFactory.create_insight(tender=self.tender, title='Manual note')
        self._bid(self.cheap_bidder, '10.00')
        self._bid(self.pricey_bidder, '20.00')

        first, scores = generate_insights_for_tender(self.tender)
        second, _ = generate_insights_for_tender(self.tender)

        self.assertEqual(len(first), len(second))
        self.assertEqual(AiInsight.objects.filter(tender=self.tender, generated=True).count(), len(second))
        self.assertTrue(AiInsight.objects.filter(pk=manual.pk).exists())
        self.assertEqual(sorted(scores.values()), [50, 100])
        self.assertEqual(
            sorted(Bid.objects.filter(tender=self.tender).values_list('ai_score', flat=True)),
            [50, 100],
        )


class InsightGenerateAPITests(TestCase):
    """Test the generate endpoint"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.tender = TestDataFactory.create_tender()

    def test_generate_for_tender_without_bids(self):
        response = self.client.post(f'/api/tenders/{self.tender.id}/ai-insights/generate/')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(len(response.data['insights']), 1)
        self.assertEqual(response.data['insights'][0]['title'], 'No bids received')
        self.assertTrue(response.data['insights'][0]['generated'])
        self.assertEqual(response.data['scores'], {})
        self.assertTrue(AuditLog.objects.filter(action='insight_generate', object_id=str(self.tender.id)).exists())

    def test_generate_returns_scores(self):
        item = TestDataFactory.create_tender_item(self.tender, quantity=1)
        bid = TestDataFactory.create_bid(self.tender)
        TestDataFactory.create_bid_item(bid, item, quantity=1, unit_price=Decimal('99.00'))
        response = self.client.post(f'/api/tenders/{self.tender.id}/ai-insights/generate/')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['scores'], {str(bid.id): 100})

    def test_generate_requires_authentication(self):
        anonymous = AuthenticatedAPIClient()
        response = anonymous.post(f'/api/tenders/{self.tender.id}/ai-insights/generate/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_generate_unknown_tender(self):
        response = self.client.post('/api/tenders/99999/ai-insights/generate/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class InsightAPITests(TestCase):
    """Test insight CRUD and list filters"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.tender = TestDataFactory.create_tender()
        self.bidder = TestDataFactory.create_bidder()

    def test_create_insight(self):
        data = {
            'tender': self.tender.id,
            'type': 'price_trend',
            'title': 'Steel prices rising',
            'description': 'Steel prices are up this quarter.',
            'severity': 'warning',
            'metadata': {'source': 'analyst'},
        }
        response = self.client.post('/api/ai-insights/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertFalse(response.data['generated'])
        self.assertEqual(response.data['tender_title'], self.tender.title)
        self.assertIsNone(response.data['bidder_name'])

    def test_create_invalid_type(self):
        data = {'type': 'rumour', 'title': 'X', 'description': 'Y'}
        response = self.client.post('/api/ai-insights/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('type', response.data)

    def test_list_filters(self):
        alert = TestDataFactory.create_insight(tender=self.tender, type='price_trend', severity='alert')
        TestDataFactory.create_insight(bidder=self.bidder, type='recommendation', severity='info')

        response = self.client.get('/api/ai-insights/?type=price_trend')
        self.assertEqual([i['id'] for i in response.data], [alert.id])
        response = self.client.get('/api/ai-insights/?severity=alert')
        self.assertEqual([i['id'] for i in response.data], [alert.id])
        response = self.client.get(f'/api/ai-insights/?tender={self.tender.id}')
        self.assertEqual([i['id'] for i in response.data], [alert.id])

    def test_list_newest_first(self):
        older = TestDataFactory.create_insight(title='Older')
        newer = TestDataFactory.create_insight(title='Newer')
        response = self.client.get('/api/ai-insights/')
        self.assertEqual([i['id'] for i in response.data], [newer.id, older.id])

    def test_tender_and_bidder_insights(self):
        tender_insight = TestDataFactory.create_insight(tender=self.tender)
        bidder_insight = TestDataFactory.create_insight(bidder=self.bidder)

        response = self.client.get(f'/api/tenders/{self.tender.id}/ai-insights/')
        self.assertEqual([i['id'] for i in response.data], [tender_insight.id])
        response = self.client.get(f'/api/bidders/{self.bidder.id}/ai-insights/')
        self.assertEqual([i['id'] for i in response.data], [bidder_insight.id])

    def test_retrieve_and_delete(self):
        insight = TestDataFactory.create_insight(tender=self.tender)
        response = self.client.get(f'/api/ai-insights/{insight.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        response = self.client.delete(f'/api/ai-insights/{insight.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(AiInsight.objects.filter(pk=insight.pk).exists())

    def test_insights_removed_with_tender(self):
        TestDataFactory.create_insight(tender=self.tender)
        self.tender.delete()
        self.assertFalse(AiInsight.objects.exists())
