"""
Page-level cache versioning.

Each page has a version counter stored in the Django cache. Cached payloads
are keyed by that version, so bumping it invalidates everything the page
rendered before the write.
"""
import logging

from django.conf import settings
from django.core.cache import cache

logger = logging.getLogger(__name__)

PAGE_DASHBOARD = 'dashboard'
PAGE_EGG_COLLECTION = 'egg-collection'
PAGE_MORTALITY = 'mortality'
PAGE_INVENTORY = 'inventory'
PAGE_SALES = 'sales'
PAGE_TASKS = 'tasks'
PAGE_USERS = 'users'
PAGE_SETTINGS = 'settings'
PAGE_REPORTS = 'reports'

ALL_PAGES = (
    PAGE_DASHBOARD,
    PAGE_EGG_COLLECTION,
    PAGE_MORTALITY,
    PAGE_INVENTORY,
    PAGE_SALES,
    PAGE_TASKS,
    PAGE_USERS,
    PAGE_SETTINGS,
    PAGE_REPORTS,
)


def _version_key(page):
    return f"page-version:{page}"


def page_version(page):
    return cache.get_or_set(_version_key(page), 1, None)


def page_versions():
    return {page: page_version(page) for page in ALL_PAGES}


def page_cache_key(page, *parts):
    return ':'.join(['page', page, str(page_version(page))] + [str(part) for part in parts])


def invalidate(*pages):
    for page in pages:
        key = _version_key(page)
        try:
            cache.incr(key)
        except ValueError:
            # Version was evicted or never set
            cache.set(key, 2, None)
        logger.debug("[CACHE] invalidated page %s", page)


def cached_page(page, parts, builder, timeout=None, cache_when=None):
    """
    Return the cached payload for ``page``/``parts`` or build and store it.

    ``cache_when`` can veto storing a freshly built payload (e.g. a degraded
    fallback that should be recomputed on the next request).
    """
    key = page_cache_key(page, *parts)
    payload = cache.get(key)
    if payload is not None:
        return payload

    payload = builder()
    if cache_when is None or cache_when(payload):
        if timeout is None:
            timeout = settings.DASHBOARD_CACHE_TIMEOUT
        cache.set(key, payload, timeout)
    return payload
