"""Audit trail helpers shared by the tender, bidding, insight and inventory views"""
import logging
from .models import AuditLog

logger = logging.getLogger(__name__)


def get_client_ip(request):
    """First address of X-Forwarded-For, else REMOTE_ADDR"""
    meta = getattr(request, 'META', None)
    if not meta:
        return None
    forwarded = meta.get('HTTP_X_FORWARDED_FOR')
    if forwarded:
        return forwarded.split(',')[0].strip() or None
    return meta.get('REMOTE_ADDR') or None


def _acting_user(request, user):
    candidate = user if user is not None else getattr(request, 'user', None)
    if candidate is not None and candidate.is_authenticated:
        return candidate
    return None


def field_changes(instance, new_values):
    """
    Compare validated serializer data against the current instance.

    Returns ``{field: {'old': ..., 'new': ...}}`` for every field whose value
    differs. Related objects compare by primary key and values are stored as
    strings so the result is JSON-safe.
    """
    changes = {}
    for field, new in new_values.items():
        old = getattr(instance, field, None)
        old_value = getattr(old, 'pk', old)
        new_value = getattr(new, 'pk', new)
        if old_value != new_value:
            changes[field] = {
                'old': None if old_value is None else str(old_value),
                'new': None if new_value is None else str(new_value),
            }
    return changes


def create_audit_log(request=None, action=None, model_name=None, object_id=None,
                     changes=None, user=None, object_name=None):
    """
    Record an audit entry for a tender, bid, bidder, insight or inventory change.

    Args:
        request: request the change came from; supplies the user and client IP
        action: one of AuditLog.ACTION_CHOICES (create, status_change, bid_accept, ...)
        model_name: model the change applies to, e.g. 'Tender'
        object_id: primary key of the changed row (stored as text)
        changes: JSON-serialisable description of what changed
        user: overrides request.user, for calls made outside a request
        object_name: human-readable label such as the tender title

    Returns the AuditLog, or None when required fields are missing or the
    write fails. A failed audit write never fails the change being audited.
    """
    if not action or not model_name or object_id is None:
        logger.warning(f"Audit log skipped: missing required fields (action={action}, model_name={model_name}, object_id={object_id})")
        return None

    try:
        return AuditLog.objects.create(
            user=_acting_user(request, user),
            action=action,
            model_name=model_name,
            object_id=str(object_id),
            object_name=object_name,
            changes=changes or {},
            ip_address=get_client_ip(request),
        )
    except Exception as e:
        logger.error(f"Failed to create audit log for {model_name} {object_id}: {str(e)}")
        return None
