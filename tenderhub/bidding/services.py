"""
Bid workflows that touch several rows at once.

Views call these so the multi-row rules (totals, acceptance side effects)
live in one place and always run inside a transaction.
"""
import logging
from decimal import Decimal
from django.db import transaction
from django.utils import timezone
from .models import Bid, BidItem
from tenderhub.core.utils import create_audit_log

logger = logging.getLogger(__name__)


class BidRuleError(Exception):
    """A business rule rejected the bid operation"""


def create_bid(tender, bidder, items, status='draft', notes='', request=None):
    """
    Create a bid and its items on a published tender.

    ``items`` are validated dicts with tender_item, quantity, unit_price and
    the optional alternative/delivery fields. Each item's total_price is
    unit_price * quantity and the bid total is their sum.
    """
    if tender.status != 'published':
        raise BidRuleError('Cannot bid on unpublished tender')

    for item_data in items:
        if item_data['tender_item'].tender_id != tender.id:
            raise BidRuleError(
                f"Tender item {item_data['tender_item'].id} does not belong to tender {tender.id}"
            )

    with transaction.atomic():
        bid = Bid.objects.create(
            tender=tender,
            bidder=bidder,
            status=status,
            notes=notes or '',
            submitted_at=timezone.now() if status == 'submitted' else None,
        )
        total = Decimal('0.00')
        for item_data in items:
            bid_item = BidItem.objects.create(bid=bid, **item_data)
            total += bid_item.total_price
        bid.total_amount = total
        bid.save(update_fields=['total_amount', 'updated_at'])

    create_audit_log(
        request=request,
        action='create',
        model_name='Bid',
        object_id=bid.id,
        object_name=str(bid),
        changes={'total_amount': str(bid.total_amount), 'items': len(items)},
    )
    logger.info(f"Bid {bid.id} created for tender {tender.id} by bidder {bidder.id}, total {bid.total_amount}")
    return bid


def change_bid_status(bid, new_status, request=None):
    """
    Move a bid to ``new_status``.

    ``submitted`` stamps submitted_at. ``accepted`` also rejects every other
    non-rejected bid of the tender and marks the tender awarded. Returns the
    updated bid.
    """
    with transaction.atomic():
        bid = Bid.objects.select_for_update().select_related('tender', 'bidder').get(pk=bid.pk)
        old_status = bid.status
        bid.status = new_status
        update_fields = ['status', 'updated_at']
        if new_status == 'submitted':
            bid.submitted_at = timezone.now()
            update_fields.append('submitted_at')
        bid.save(update_fields=update_fields)

        rejected_ids = []
        if new_status == 'accepted':
            others = Bid.objects.select_for_update().filter(tender_id=bid.tender_id).exclude(
                pk=bid.pk
            ).exclude(status='rejected')
            rejected_ids = list(others.values_list('id', flat=True))
            others.update(status='rejected', updated_at=timezone.now())

            tender = bid.tender
            tender.status = 'awarded'
            tender.save(update_fields=['status', 'updated_at'])

    create_audit_log(
        request=request,
        action='status_change',
        model_name='Bid',
        object_id=bid.id,
        object_name=str(bid),
        changes={'status': {'old': old_status, 'new': new_status}},
    )
    if new_status == 'accepted':
        create_audit_log(
            request=request,
            action='bid_accept',
            model_name='Tender',
            object_id=bid.tender_id,
            object_name=bid.tender.title,
            changes={'accepted_bid': bid.id, 'rejected_bids': rejected_ids},
        )
        logger.info(f"Bid {bid.id} accepted; tender {bid.tender_id} awarded, {len(rejected_ids)} other bids rejected")
    return bid
