"""
Cache invalidation signals
Dashboard aggregates are dropped whenever a row they are computed from changes
"""
import logging
import threading
from contextlib import contextmanager
from django.apps import apps
from django.db import transaction
from django.db.models.signals import post_save, post_delete
from .cache_utils import invalidate_reports_cache

logger = logging.getLogger(__name__)

# Models the tender stats and bidder analytics are computed from
REPORT_SOURCE_MODELS = ('tenders.Tender', 'bidding.Bidder', 'bidding.Bid', 'bidding.BidItem')

_state = threading.local()


@contextmanager
def suspend_cache_signals():
    """
    Skip invalidation inside the block, e.g. while seeding or importing.
    Call invalidate_reports_cache() once afterwards.
    """
    previous = is_suspended()
    _state.suspended = True
    try:
        yield
    finally:
        _state.suspended = previous


def is_suspended():
    return getattr(_state, 'suspended', False)


def _drop_reports_cache(sender, instance, **kwargs):
    if is_suspended():
        return
    logger.debug(f"{sender.__name__} {instance.pk} changed, dropping report cache")
    invalidate_reports_cache()
    # A read inside the open transaction window may re-cache pre-commit totals
    transaction.on_commit(invalidate_reports_cache)


def connect_report_signals():
    """Connect the report cache to saves and deletes of its source models"""
    for label in REPORT_SOURCE_MODELS:
        model = apps.get_model(label)
        post_save.connect(_drop_reports_cache, sender=model, dispatch_uid=f'reports-save-{label}')
        post_delete.connect(_drop_reports_cache, sender=model, dispatch_uid=f'reports-delete-{label}')
