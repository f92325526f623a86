"""
Caching utilities for expensive dashboard queries.

Dashboard payloads are cached per user. Every key embeds a per-user version
number; bumping the version orphans all of that user's cached payloads, which
works the same on Redis and on the local-memory backend.
"""
from django.conf import settings
from django.core.cache import cache
from functools import wraps
import hashlib
import logging

logger = logging.getLogger(__name__)

DASHBOARD_CACHE_TTL = getattr(settings, 'DASHBOARD_CACHE_TTL', 300)
VERSION_KEY_TTL = 60 * 60 * 24 * 30


def make_cache_key(prefix, *args, **kwargs):
    """Generate a unique cache key from arguments"""
    key_data = f"{prefix}:{args}:{sorted(kwargs.items())}"
    # Hash it to keep key length reasonable
    key_hash = hashlib.md5(key_data.encode()).hexdigest()
    return f"{prefix}:{key_hash}"


def _version_key(user_id):
    return f"dashboard_version:{user_id}"


def get_dashboard_version(user_id):
    version = cache.get(_version_key(user_id))
    if version is None:
        version = 1
        cache.set(_version_key(user_id), version, VERSION_KEY_TTL)
    return version


def make_dashboard_key(user_id, name, **params):
    """Cache key for one dashboard payload of one user"""
    version = get_dashboard_version(user_id)
    return make_cache_key(f"dashboard:{user_id}:v{version}:{name}", **params)


def cached_dashboard(name, cache_ttl=None):
    """
    Decorator caching a dashboard computation per user.

    The wrapped function must take the user as its first argument; any keyword
    arguments become part of the cache key.

    Usage:
        @cached_dashboard('overview')
        def build_overview(user):
            return {...}
    """
    def decorator(func):
        @wraps(func)
        def wrapper(user, **kwargs):
            cache_key = make_dashboard_key(user.pk, name, **kwargs)
            cached_data = cache.get(cache_key)
            if cached_data is not None:
                logger.debug("Cache HIT for %s: %s", name, cache_key)
                return cached_data

            logger.debug("Cache MISS for %s: %s", name, cache_key)
            result = func(user, **kwargs)
            cache.set(cache_key, result, cache_ttl or DASHBOARD_CACHE_TTL)
            return result
        return wrapper
    return decorator


def invalidate_dashboard_cache(user_id):
    """Invalidate every cached dashboard payload of a user"""
    if user_id is None:
        return
    key = _version_key(user_id)
    try:
        cache.incr(key)
    except ValueError:
        # No version stored yet, nothing cached under the old one either
        cache.set(key, 2, VERSION_KEY_TTL)
    logger.debug("Invalidated dashboard cache for user %s", user_id)
