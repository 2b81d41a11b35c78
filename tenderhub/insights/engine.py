"""
Rule-based insight generation for a tender.

Each rule inspects the tender's bids and appends an insight dict; the
results replace the tender's previously generated insights. Bids are also
given an ai_score relative to the cheapest offer.
"""
import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Tuple
from django.db import transaction
from tenderhub.bidding.models import Bid
from .models import AiInsight

logger = logging.getLogger(__name__)

# A bid item priced this far above the estimate is flagged
PRICE_DEVIATION_THRESHOLD = Decimal('0.30')


def _money(value):
    return str(Decimal(value).quantize(Decimal('0.01')))


def score_bids(bids) -> Dict[int, int]:
    """Cheapest positive total scores 100, the rest in proportion to it"""
    priced = [bid for bid in bids if bid.total_amount and bid.total_amount > 0]
    if not priced:
        return {}
    lowest = min(bid.total_amount for bid in priced)
    return {
        bid.id: int((Decimal(100) * lowest / bid.total_amount).quantize(Decimal('1'), rounding=ROUND_HALF_UP))
        for bid in priced
    }


def collect_insights(tender, bids) -> List[Dict]:
    """Apply the insight rules to a tender and its bids"""
    insights: List[Dict] = []
    active_bids = [bid for bid in bids if bid.status != 'rejected']

    # Rule 1: no competition at all
    if not bids:
        insights.append({
            'type': 'warning',
            'title': 'No bids received',
            'description': f"Tender '{tender.title}' has not received any bids yet.",
            'severity': 'warning',
            'metadata': {'rule': 'no_bids'},
        })
        return insights

    # Rule 2: a single bidder
    if len(bids) == 1:
        insights.append({
            'type': 'warning',
            'title': 'Limited competition',
            'description': (
                f"Only one bid has been received for '{tender.title}'. "
                "Consider extending the deadline or inviting more bidders."
            ),
            'severity': 'warning',
            'bidder': bids[0].bidder,
            'metadata': {'rule': 'single_bid', 'bid_id': bids[0].id},
        })

    # Rule 3: recommend the lowest priced bid still in play
    priced = [bid for bid in active_bids if bid.total_amount and bid.total_amount > 0]
    if priced:
        best = min(priced, key=lambda bid: (bid.total_amount, bid.id))
        insights.append({
            'type': 'recommendation',
            'title': f"{best.bidder.name} offers the lowest price",
            'description': (
                f"{best.bidder.name} submitted the lowest bid of {_money(best.total_amount)} "
                f"out of {len(priced)} priced bid(s)."
            ),
            'severity': 'success',
            'bidder': best.bidder,
            'metadata': {
                'rule': 'lowest_bid',
                'bid_id': best.id,
                'total_amount': _money(best.total_amount),
            },
        })

    # Rule 4: line items priced well above the estimate
    for bid in active_bids:
        for item in bid.items.all():
            estimate = item.tender_item.estimated_price
            if not estimate or estimate <= 0:
                continue
            deviation = (item.unit_price - estimate) / estimate
            if deviation <= PRICE_DEVIATION_THRESHOLD:
                continue
            percent = int((deviation * 100).quantize(Decimal('1'), rounding=ROUND_HALF_UP))
            label = item.tender_item.name or item.tender_item.category.name
            insights.append({
                'type': 'price_trend',
                'title': f"{label} priced above estimate",
                'description': (
                    f"{bid.bidder.name} quoted {_money(item.unit_price)} per {item.tender_item.unit} "
                    f"for {label}, {percent}% above the estimated {_money(estimate)}."
                ),
                'severity': 'alert',
                'bidder': bid.bidder,
                'metadata': {
                    'rule': 'price_above_estimate',
                    'bid_id': bid.id,
                    'bid_item_id': item.id,
                    'tender_item_id': item.tender_item_id,
                    'unit_price': _money(item.unit_price),
                    'estimated_price': _money(estimate),
                    'deviation_pct': percent,
                },
            })

    return insights


def generate_insights_for_tender(tender) -> Tuple[List[AiInsight], Dict[int, int]]:
    """
    Regenerate insights and bid scores for ``tender``.

    Returns (created insights, {bid_id: ai_score}). Hand-written insights
    attached to the tender are left alone.
    """
    bids = list(
        tender.bids.select_related('bidder').prefetch_related('items__tender_item__category').order_by('id')
    )
    found = collect_insights(tender, bids)
    scores = score_bids([bid for bid in bids if bid.status != 'rejected'])

    with transaction.atomic():
        tender.ai_insights.filter(generated=True).delete()
        created = [
            AiInsight.objects.create(tender=tender, generated=True, **data)
            for data in found
        ]
        for bid_id, score in scores.items():
            Bid.objects.filter(pk=bid_id).update(ai_score=score)

    logger.info(f"Generated {len(created)} insights for tender {tender.id}, scored {len(scores)} bids")
    return created, scores
