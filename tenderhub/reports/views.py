import logging
from decimal import Decimal
from django.db.models import Count, Sum, Q
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from tenderhub.tenders.models import Tender
from tenderhub.bidding.models import Bid, Bidder
from tenderhub.core.cache_utils import (
    cached_query, REPORTS_CACHE_TTL, TENDER_STATS_PREFIX, BIDDER_ANALYTICS_PREFIX
)

logger = logging.getLogger('tenderhub.reports')

TOP_BIDDERS_LIMIT = 5


@cached_query(cache_ttl=REPORTS_CACHE_TTL, key_prefix=TENDER_STATS_PREFIX)
def get_tender_stats():
    """Tender counts by status plus bid volume and value"""
    counts = Tender.objects.aggregate(
        total=Count('id'),
        active=Count('id', filter=Q(status='published')),
        closed=Count('id', filter=Q(status='closed')),
        awarded=Count('id', filter=Q(status='awarded')),
        draft=Count('id', filter=Q(status='draft')),
    )
    bids = Bid.objects.aggregate(total=Count('id'), value=Sum('total_amount'))

    total_tenders = counts['total'] or 0
    total_bids = bids['total'] or 0
    average = round(total_bids / total_tenders, 2) if total_tenders else 0

    return {
        'activeTenders': counts['active'] or 0,
        'closedTenders': counts['closed'] or 0,
        'awardedTenders': counts['awarded'] or 0,
        'draftTenders': counts['draft'] or 0,
        'totalValue': float(bids['value'] or Decimal('0')),
        'totalTenders': total_tenders,
        'totalBids': total_bids,
        'averageBidsPerTender': average,
    }


@cached_query(cache_ttl=REPORTS_CACHE_TTL, key_prefix=BIDDER_ANALYTICS_PREFIX)
def get_bidder_analytics():
    """Bidder totals and the most active bidders"""
    top = Bidder.objects.annotate(
        bid_count=Count('bids'),
        total_amount=Sum('bids__total_amount'),
    ).order_by('-bid_count', 'id')[:TOP_BIDDERS_LIMIT]

    return {
        'qualifiedBidders': Bidder.objects.filter(verified=True).count(),
        'totalBidders': Bidder.objects.count(),
        'topBidders': [
            {
                'id': bidder.id,
                'name': bidder.name,
                'bidCount': bidder.bid_count,
                'totalAmount': float(bidder.total_amount or Decimal('0')),
            }
            for bidder in top
        ],
    }


@api_view(['GET'])
@permission_classes([AllowAny])
def tender_stats(request):
    """Dashboard tender statistics"""
    return Response(get_tender_stats())


@api_view(['GET'])
@permission_classes([AllowAny])
def bidder_analytics(request):
    """Dashboard bidder analytics"""
    return Response(get_bidder_analytics())
