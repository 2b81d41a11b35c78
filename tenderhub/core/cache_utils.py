"""
Caching for the dashboard aggregates.

Results live in the default cache (Redis when REDIS_URL is set, process
memory otherwise) under ``<prefix>:<hash of call arguments>``.
"""
import hashlib
import logging
from functools import wraps
from django.conf import settings
from django.core.cache import cache

logger = logging.getLogger(__name__)

# Seconds a dashboard aggregate may be served from cache
REPORTS_CACHE_TTL = getattr(settings, 'REPORTS_CACHE_TTL', 300)

TENDER_STATS_PREFIX = "tender_stats"
BIDDER_ANALYTICS_PREFIX = "bidder_analytics"
REPORT_PREFIXES = (TENDER_STATS_PREFIX, BIDDER_ANALYTICS_PREFIX)


def make_cache_key(prefix, *args, **kwargs):
    """Stable key for a call: prefix plus an md5 of its arguments"""
    call = f"{args}:{sorted(kwargs.items())}"
    return f"{prefix}:{hashlib.md5(call.encode()).hexdigest()}"


def cached_query(cache_ttl=60, key_prefix="query"):
    """
    Cache the return value of an aggregate query function.

    Usage:
        @cached_query(cache_ttl=REPORTS_CACHE_TTL, key_prefix=TENDER_STATS_PREFIX)
        def get_tender_stats():
            ...

    ``None`` results are never cached.
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            key = make_cache_key(key_prefix, *args, **kwargs)
            result = cache.get(key)
            if result is not None:
                logger.debug(f"Cache HIT {key}")
                return result

            logger.debug(f"Cache MISS {key}")
            result = func(*args, **kwargs)
            if result is not None:
                cache.set(key, result, cache_ttl)
            return result
        return wrapper
    return decorator


def invalidate_cached_query(key_prefix, *args, **kwargs):
    """Forget the result @cached_query stored for these arguments"""
    cache.delete(make_cache_key(key_prefix, *args, **kwargs))


def invalidate_reports_cache():
    """Forget tender stats and bidder analytics; a cache outage is logged, not raised"""
    try:
        for prefix in REPORT_PREFIXES:
            invalidate_cached_query(prefix)
    except Exception as e:
        logger.warning(f"Could not invalidate reports cache: {str(e)}")
        return
    logger.debug("Invalidated reports cache")
